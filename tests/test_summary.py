"""
Test suite for rider type summaries
File: tests/test_summary.py
"""

import pytest
import numpy as np
import pandas as pd
import sys
from pathlib import Path

# Add src to path for imports
sys.path.append(str(Path(__file__).parent.parent / "src"))

import ridership.schema as S
from ridership.data_utils import prepare_trips
from ridership.summary import (
    ride_length_stats, weekday_ride_counts, weekday_proportions,
    weekday_ride_length, build_summary,
)


class TestRideLengthStats:
    """Grouped ride length statistics."""

    @pytest.fixture(autouse=True)
    def _trips(self, make_trips):
        self.trips, _ = prepare_trips(make_trips(300))

    def test_both_rider_types_present(self):
        stats = ride_length_stats(self.trips)
        assert list(stats.index) == list(S.RIDER_TYPES)
        assert list(stats.columns) == ["rides", "mean", "median", "std", "min", "max"]

    def test_mean_matches_naive_reference(self):
        """Grouped mean equals a plain per-group average."""
        stats = ride_length_stats(self.trips)

        for rider in S.RIDER_TYPES:
            lengths = [
                length for length, kind in zip(self.trips[S.RIDE_LENGTH], self.trips[S.RIDER_TYPE])
                if kind == rider
            ]
            assert stats.loc[rider, "rides"] == len(lengths)
            assert stats.loc[rider, "mean"] == pytest.approx(sum(lengths) / len(lengths))
            assert stats.loc[rider, "median"] == pytest.approx(float(np.median(lengths)))
            assert stats.loc[rider, "std"] == pytest.approx(float(np.std(lengths, ddof=1)))

    def test_empty_group_is_nan(self):
        """No casual rides: casual stats are NaN, nothing raises."""
        members = self.trips[self.trips[S.RIDER_TYPE] == S.MEMBER]
        stats = ride_length_stats(members)

        assert stats.loc[S.CASUAL, "rides"] == 0
        assert stats.loc[S.CASUAL, ["mean", "median", "std"]].isna().all()
        assert not np.isnan(stats.loc[S.MEMBER, "mean"])

    def test_empty_table(self):
        stats = ride_length_stats(self.trips.iloc[0:0])
        assert list(stats["rides"]) == [0, 0]
        assert stats["mean"].isna().all()

    def test_single_ride_has_undefined_std(self):
        stats = ride_length_stats(self.trips.iloc[:1])
        assert stats.loc[S.MEMBER, "rides"] == 1
        assert np.isnan(stats.loc[S.MEMBER, "std"])


class TestWeekdayTables:
    """Weekday counts, proportions and mean ride length."""

    @pytest.fixture(autouse=True)
    def _trips(self, make_trips):
        # 14 days of hourly rides starting on a Monday
        self.trips, _ = prepare_trips(make_trips(14 * 24))

    def test_counts_shape(self):
        counts = weekday_ride_counts(self.trips)
        assert list(counts.index) == list(S.RIDER_TYPES)
        assert list(counts.columns) == list(S.WEEKDAYS)
        assert counts.values.sum() == len(self.trips)
        # 48 rides a weekday, split evenly between the two rider types
        assert (counts == 24).all().all()

    def test_proportions_sum_to_one(self):
        share = weekday_proportions(self.trips)
        assert share.sum(axis=1).tolist() == pytest.approx([1.0, 1.0])
        assert share.loc[S.MEMBER, "Monday"] == pytest.approx(1 / 7)

    def test_proportions_for_missing_rider_type(self):
        casual = self.trips[self.trips[S.RIDER_TYPE] == S.CASUAL]
        share = weekday_proportions(casual)

        assert share.loc[S.MEMBER].isna().all()
        assert share.loc[S.CASUAL].sum() == pytest.approx(1.0)

    def test_missing_weekday_is_zero(self):
        weekend = self.trips[self.trips[S.DAY_OF_WEEK] >= 6]
        counts = weekday_ride_counts(weekend)
        share = weekday_proportions(weekend)

        assert counts.loc[S.MEMBER, "Monday"] == 0
        assert share.loc[S.MEMBER, "Monday"] == 0
        assert share.loc[S.MEMBER, ["Saturday", "Sunday"]].sum() == pytest.approx(1.0)

    def test_weekday_ride_length_ordering(self):
        table = weekday_ride_length(self.trips)

        assert len(table) == len(S.RIDER_TYPES) * len(S.WEEKDAYS)
        assert list(table[S.RIDER_TYPE].unique()) == list(S.RIDER_TYPES)
        member_days = table.loc[table[S.RIDER_TYPE] == S.MEMBER, S.WEEKDAY].astype(str)
        assert list(member_days) == list(S.WEEKDAYS)
        assert table[S.WEEKDAY].cat.ordered

    def test_weekday_ride_length_matches_groups(self):
        table = weekday_ride_length(self.trips)
        subset = self.trips[(self.trips[S.RIDER_TYPE] == S.CASUAL) & (self.trips[S.DAY_OF_WEEK] == 3)]

        row = table[(table[S.RIDER_TYPE] == S.CASUAL) & (table[S.WEEKDAY] == "Wednesday")].iloc[0]
        assert row["rides"] == len(subset)
        assert row["mean_ride_length"] == pytest.approx(subset[S.RIDE_LENGTH].mean())

    def test_weekday_ride_length_empty_group(self):
        members = self.trips[self.trips[S.RIDER_TYPE] == S.MEMBER]
        table = weekday_ride_length(members)
        casual = table[table[S.RIDER_TYPE] == S.CASUAL]

        assert (casual["rides"] == 0).all()
        assert casual["mean_ride_length"].isna().all()

    def test_build_summary(self):
        summary = build_summary(self.trips)
        tables = summary.tables()

        assert set(tables) == {
            "ride_length_by_rider", "weekday_counts_by_rider",
            "weekday_share_by_rider", "weekday_ride_length",
        }
        assert summary.ride_length["rides"].sum() == len(self.trips)

    def test_build_summary_empty(self):
        summary = build_summary(self.trips.iloc[0:0])
        assert (summary.weekday_counts == 0).all().all()
        assert summary.weekday_share.isna().all().all()
        assert summary.weekday_length["mean_ride_length"].isna().all()
