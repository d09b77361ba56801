"""
Rider Type Summaries
====================

Read-only reductions of the cleaned trip table comparing members with
casual riders. Every rider type and every weekday is always present in
the output; a group with no rides reports NaN statistics (or a zero
count) instead of raising.
"""

from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd

from .schema import RIDER_TYPE, RIDE_LENGTH, WEEKDAY, RIDER_TYPES, WEEKDAYS

STAT_COLUMNS = ["rides", "mean", "median", "std", "min", "max"]


def _group_keys(df: pd.DataFrame, by_weekday: bool = False) -> List[pd.Series]:
    # plain labels, so unused categories never leak into the index
    keys = [df[RIDER_TYPE].astype(str)]
    if by_weekday:
        keys.append(df[WEEKDAY].astype(str))
    return keys


def ride_length_stats(df: pd.DataFrame) -> pd.DataFrame:
    """
    Mean, median and standard deviation (plus count / min / max) of
    ``ride_length`` in seconds, one row per rider type.
    """
    if df.empty:
        stats = pd.DataFrame(np.nan, index=list(RIDER_TYPES), columns=STAT_COLUMNS)
    else:
        stats = df.groupby(_group_keys(df))[RIDE_LENGTH].agg(
            rides="count", mean="mean", median="median", std="std", min="min", max="max",
        )
        stats = stats.reindex(list(RIDER_TYPES))

    stats["rides"] = stats["rides"].fillna(0).astype(int)
    stats.index.name = RIDER_TYPE
    return stats[STAT_COLUMNS]


def weekday_ride_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Number of rides per rider type (rows) and weekday (columns)."""
    if df.empty:
        counts = pd.DataFrame(0, index=list(RIDER_TYPES), columns=list(WEEKDAYS))
    else:
        counts = (
            df.groupby(_group_keys(df, by_weekday=True)).size()
            .unstack()
            .reindex(index=list(RIDER_TYPES), columns=list(WEEKDAYS))
            .fillna(0)
            .astype(int)
        )

    counts.index.name = RIDER_TYPE
    counts.columns.name = WEEKDAY
    return counts


def weekday_proportions(df: pd.DataFrame) -> pd.DataFrame:
    """
    Share of each rider type's rides that start on each weekday.
    Non-empty rows sum to 1; a rider type with no rides is all NaN.
    """
    counts = weekday_ride_counts(df)
    totals = counts.sum(axis=1).replace(0, np.nan)
    return counts.div(totals, axis=0)


def weekday_ride_length(df: pd.DataFrame) -> pd.DataFrame:
    """
    Long table of ride count and mean ride length (seconds) by rider
    type and weekday, ordered Monday..Sunday within each rider type.
    """
    index = pd.MultiIndex.from_product([list(RIDER_TYPES), list(WEEKDAYS)], names=[RIDER_TYPE, WEEKDAY])

    if df.empty:
        grouped = pd.DataFrame({"rides": 0, "mean_ride_length": np.nan}, index=index)
    else:
        grouped = df.groupby(_group_keys(df, by_weekday=True))[RIDE_LENGTH].agg(
            rides="count", mean_ride_length="mean",
        )
        grouped.index.names = [RIDER_TYPE, WEEKDAY]
        grouped = grouped.reindex(index)
        grouped["rides"] = grouped["rides"].fillna(0).astype(int)

    table = grouped.reset_index()
    table[WEEKDAY] = pd.Categorical(table[WEEKDAY], categories=list(WEEKDAYS), ordered=True)
    return table


@dataclass
class RiderSummary:
    """All summary tables for one cleaned trip table."""
    ride_length: pd.DataFrame
    weekday_counts: pd.DataFrame
    weekday_share: pd.DataFrame
    weekday_length: pd.DataFrame

    def tables(self) -> Dict[str, pd.DataFrame]:
        return {
            "ride_length_by_rider": self.ride_length,
            "weekday_counts_by_rider": self.weekday_counts,
            "weekday_share_by_rider": self.weekday_share,
            "weekday_ride_length": self.weekday_length,
        }


def build_summary(df: pd.DataFrame) -> RiderSummary:
    return RiderSummary(
        ride_length=ride_length_stats(df),
        weekday_counts=weekday_ride_counts(df),
        weekday_share=weekday_proportions(df),
        weekday_length=weekday_ride_length(df),
    )
