def percent_change(current: float, previous: float) -> float:
    """
    Percent change from `previous` to `current`.

    A zero baseline cannot be divided by; growth from zero is reported as
    current * 100 (and 0 when there is nothing this period either).
    The result is not clamped and may be negative.
    """
    if previous == 0:
        return current * 100 if current > 0 else 0
    return (current - previous) / previous * 100
