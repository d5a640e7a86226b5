"""
Unit tests for calendar-month chart bucketing.
"""

from datetime import date, datetime, timezone
from types import SimpleNamespace

from app.api.stats_utils.chart_data import bucket, month_start, month_window_start


def at(year, month, day=1):
    return {"created_at": datetime(year, month, day, tzinfo=timezone.utc)}


class TestBucketCounts:
    def test_twelve_months_one_record_each(self):
        anchor = date(2026, 3, 15)
        # one record on the first day of each of the last twelve months
        records = [at(2025, month) for month in range(4, 13)] + [
            at(2026, month) for month in range(1, 4)
        ]

        series = bucket(records, 12, anchor)

        assert series == [1] * 12

    def test_last_index_is_anchor_month(self):
        anchor = date(2026, 3, 31)
        series = bucket([at(2026, 3, 31)], 12, anchor)

        assert series[11] == 1
        assert sum(series) == 1

    def test_crosses_year_boundary(self):
        anchor = date(2026, 3, 1)
        records = [at(2025, 10, 31), at(2025, 12, 1), at(2026, 1, 1), at(2026, 3, 1)]

        assert bucket(records, 6, anchor) == [1, 0, 1, 1, 0, 1]

    def test_records_outside_window_are_ignored(self):
        anchor = date(2026, 3, 15)
        records = [at(2025, 9, 30), at(2026, 4, 1)]

        assert bucket(records, 6, anchor) == [0] * 6

    def test_series_length_matches_request_with_no_records(self):
        assert bucket([], 6, date(2026, 1, 1)) == [0, 0, 0, 0, 0, 0]


class TestBucketSums:
    def test_value_field_sums_per_month(self):
        anchor = date(2026, 2, 10)
        records = [
            {**at(2026, 2, 1), "total": 100.5},
            {**at(2026, 2, 28), "total": 50},
            {**at(2026, 1, 20), "total": 10},
        ]

        assert bucket(records, 3, anchor, value_field="total") == [0, 10, 150.5]

    def test_missing_or_null_values_count_as_zero(self):
        anchor = date(2026, 2, 10)
        records = [{**at(2026, 2, 1), "discount": None}, at(2026, 2, 2)]

        assert bucket(records, 2, anchor, value_field="discount") == [0, 0]


class TestMalformedRecords:
    def test_bad_timestamps_are_excluded(self):
        anchor = date(2026, 2, 10)
        records = [
            {"created_at": "2026-02-01"},
            {"created_at": None},
            {},
            at(2026, 2, 1),
        ]

        assert bucket(records, 2, anchor) == [0, 1]

    def test_accepts_objects_with_attributes(self):
        anchor = date(2026, 2, 10)
        record = SimpleNamespace(created_at=datetime(2026, 1, 5), total=20.0)

        assert bucket([record], 2, anchor, value_field="total") == [20.0, 0]


class TestMonthWindow:
    def test_month_start_normalizes_overflowing_months(self):
        assert month_start(2026, 0) == datetime(2025, 12, 1, tzinfo=timezone.utc)
        assert month_start(2026, -10) == datetime(2025, 2, 1, tzinfo=timezone.utc)
        assert month_start(2025, 13) == datetime(2026, 1, 1, tzinfo=timezone.utc)

    def test_window_start_is_first_of_oldest_month(self):
        assert month_window_start(date(2026, 3, 15), 6) == datetime(
            2025, 10, 1, tzinfo=timezone.utc
        )
        assert month_window_start(date(2026, 3, 15), 12) == datetime(
            2025, 4, 1, tzinfo=timezone.utc
        )
