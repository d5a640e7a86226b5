"""
Stats utilities package.

Re-exports the chart, percent and distribution calculators and the composer
for convenient importing.
"""

# Calculators
from app.api.stats_utils.chart_data import bucket, month_start, month_window_start
from app.api.stats_utils.percent_change import percent_change
from app.api.stats_utils.category_distribution import distribute, round_half_up

# Read-models
from app.api.stats_utils.composer import StatsComposer

__all__ = [
    # Calculators
    "bucket",
    "month_start",
    "month_window_start",
    "percent_change",
    "distribute",
    "round_half_up",
    # Read-models
    "StatsComposer",
]
