import math
from typing import Mapping


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (12.5 -> 13)."""
    return math.floor(value + 0.5)


def distribute(category_counts: Mapping[str, int], total_count: int) -> dict[str, int]:
    """
    Convert per-category counts into whole percentages of `total_count`.

    Each share is rounded on its own, so the values need not add up to 100.
    Categories with a zero count are kept with a share of 0.
    """
    if total_count <= 0:
        return {category: 0 for category in category_counts}
    return {
        category: round_half_up(count / total_count * 100)
        for category, count in category_counts.items()
    }
