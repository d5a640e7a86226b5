"""
Monthly chart series.

Buckets timestamped records into the N trailing calendar months ending at an
anchor date, producing one value per month, oldest month first.

Month arithmetic is done on (year, month) pairs converted to a linear month
index, never by subtracting durations, so day-of-month and timezone offsets
cannot shift a record into a neighbouring bucket:

    months_ago = (anchor.year * 12 + anchor.month) - (ts.year * 12 + ts.month)

A record with 0 <= months_ago < length lands in index length - 1 - months_ago,
so index 0 is the oldest month of the window and index length - 1 is the
anchor's own month. Buckets without records stay at 0.
"""

from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional


def month_index(value: date) -> int:
    return value.year * 12 + value.month


def month_start(year: int, month: int) -> datetime:
    """First instant of a calendar month; `month` may fall outside 1..12."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=timezone.utc)


def month_window_start(anchor: date, length: int) -> datetime:
    """First instant of the oldest month in a `length`-month window."""
    return month_start(anchor.year, anchor.month - (length - 1))


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def bucket(
    records: Iterable[Any],
    length: int,
    anchor: date,
    value_field: Optional[str] = None,
    timestamp_field: str = "created_at",
) -> list[float]:
    """
    Aggregate records into a `length`-month series ending at `anchor`.

    Args:
        records: mappings or objects exposing `timestamp_field`
        length: number of months in the series (e.g. 6 or 12)
        anchor: date whose month is the last bucket
        value_field: numeric field to sum; when omitted every record counts 1.
            Missing or null values contribute 0.

    Records without a usable timestamp are skipped.
    """
    series: list[float] = [0] * length
    anchor_index = month_index(anchor)

    for record in records:
        timestamp = _field(record, timestamp_field)
        if not isinstance(timestamp, date):
            continue

        months_ago = anchor_index - month_index(timestamp)
        if not 0 <= months_ago < length:
            continue

        if value_field is None:
            contribution = 1
        else:
            raw = _field(record, value_field)
            contribution = raw if isinstance(raw, (int, float)) and not isinstance(raw, bool) else 0

        series[length - 1 - months_ago] += contribution

    return series
