"""
Trip Loading & Cleaning
=======================

Turns a directory of monthly trip CSVs into one analysis-ready table:

1. Ingest every monthly file and verify they share one column schema
2. Union the rows
3. Remove rides whose ``ride_id`` repeats
4. Derive ``ride_length`` and drop non-positive / test-station rides
5. Derive ``day_of_week`` and the ordered ``wday`` label

Every step returns a new DataFrame and never adds rows back.
"""

import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, List, Mapping, Tuple, Union

import pandas as pd

from .config import DEDUP_POLICIES, DEFAULT_DEDUP_POLICY, DEFAULT_PATTERN
from .schema import (
    RIDE_ID, START_TS, END_TS, START_STATION, END_STATION,
    REQUIRED_COLUMNS, RIDE_LENGTH, DAY_OF_WEEK, WEEKDAY, SOURCE_FILE,
    WEEKDAYS, TEST_STATION_ID,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class EmptyInputError(FileNotFoundError):
    """No trip files matched in the input directory."""


class SchemaMismatchError(ValueError):
    """Monthly files disagree on their column set."""

    def __init__(self, mismatched: Dict[str, List[str]], reference: str):
        self.mismatched = mismatched
        self.reference = reference
        names = ", ".join(sorted(mismatched))
        super().__init__(f"Column schema differs from {reference}: {names}")


class MissingColumnsError(ValueError):
    """Trip table lacks columns the pipeline needs."""

    def __init__(self, missing: List[str], source: str = "trip data"):
        self.missing = missing
        super().__init__(f"Missing required columns in {source}: {missing}")


@dataclass
class CleaningStats:
    """Row counts removed at each cleaning step."""
    raw_rows: int = 0
    duplicate_rows: int = 0
    unparseable_rows: int = 0
    non_positive_rows: int = 0
    test_station_rows: int = 0
    final_rows: int = 0

    @property
    def removed_rows(self) -> int:
        return self.raw_rows - self.final_rows

    def to_dict(self) -> Dict[str, int]:
        """Convert counts to a dictionary for reporting."""
        d = asdict(self)
        d["removed_rows"] = self.removed_rows
        return d


# ────────────────────────────────────────────────────────────────────────────
# Ingest & union
# ────────────────────────────────────────────────────────────────────────────

def list_trip_files(data_dir: PathLike, pattern: str = DEFAULT_PATTERN) -> List[Path]:
    """Sorted list of monthly files in ``data_dir`` matching ``pattern``."""
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise EmptyInputError(f"Trip data directory not found: {data_dir}")

    files = sorted(p for p in data_dir.glob(pattern) if p.is_file())
    if not files:
        raise EmptyInputError(f"No files matching {pattern!r} in {data_dir}")
    return files


def load_raw_data(path: PathLike) -> pd.DataFrame:
    """
    Load one monthly CSV into a DataFrame.
    """
    df = pd.read_csv(path, low_memory=False)
    logger.info("Loaded %s with shape %s", Path(path).name, df.shape)
    return df


def check_schema(frames: Mapping[str, pd.DataFrame]) -> Dict[str, bool]:
    """
    Verify every frame has the same column set as the first one.

    Returns the per-file match result and raises ``SchemaMismatchError``
    if any file disagrees.
    """
    if not frames:
        raise EmptyInputError("No trip tables to compare")

    names = list(frames)
    reference = names[0]
    expected = set(frames[reference].columns)

    matches = {}
    mismatched = {}
    for name in names:
        columns = set(frames[name].columns)
        matches[name] = columns == expected
        logger.debug("Schema match for %s: %s", name, matches[name])
        if not matches[name]:
            mismatched[name] = sorted(columns ^ expected)

    if mismatched:
        for name, diff in mismatched.items():
            logger.error("%s differs from %s on columns %s", name, reference, diff)
        raise SchemaMismatchError(mismatched, reference)

    return matches


def check_required_columns(df: pd.DataFrame, source: str = "trip data") -> None:
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise MissingColumnsError(missing, source)


def parse_timestamps(col: pd.Series) -> pd.Series:
    """
    Parse one timestamp column to naive UTC.

    ISO 8601 is parsed row by row, so seconds with or without fractions
    and differing UTC offsets all survive. Naive values keep their wall
    clock time. Anything else becomes NaT.
    """
    if pd.api.types.is_datetime64_any_dtype(col):
        parsed = col if col.dt.tz is None else col.dt.tz_convert("UTC")
    else:
        parsed = pd.to_datetime(col, errors="coerce", format="ISO8601", utc=True)
    return parsed.dt.tz_localize(None) if parsed.dt.tz is not None else parsed


def clean_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Basic cleaning: convert the start / end timestamps.
    Unparseable values become NaT and are counted and dropped in
    ``prepare_trips``.
    """
    df = df.copy()
    for col in (START_TS, END_TS):
        if col in df.columns:
            df[col] = parse_timestamps(df[col])
    return df


def load_trip_files(data_dir: PathLike, pattern: str = DEFAULT_PATTERN) -> pd.DataFrame:
    """
    Read every monthly file, check schema and required columns, then
    concatenate into a single table with a fresh index.
    """
    data_dir = Path(data_dir)
    files = list_trip_files(data_dir, pattern)

    frames = {}
    for path in files:
        frames[str(path.relative_to(data_dir))] = load_raw_data(path)

    check_schema(frames)
    first = next(iter(frames))
    check_required_columns(frames[first], first)

    # parse each month on its own so one file's layout never decides another's
    parsed = []
    for name, frame in frames.items():
        frame = clean_columns(frame)
        frame[SOURCE_FILE] = name
        parsed.append(frame)

    df = pd.concat(parsed, ignore_index=True)
    logger.info("Combined %d files into %d rows", len(frames), len(df))
    return df


# ────────────────────────────────────────────────────────────────────────────
# Deduplication
# ────────────────────────────────────────────────────────────────────────────

def find_duplicate_ids(df: pd.DataFrame) -> pd.Series:
    """``ride_id`` values that occur more than once."""
    ids = df[RIDE_ID]
    return pd.Series(ids[ids.duplicated()].unique(), name=RIDE_ID)


def deduplicate_rides(df: pd.DataFrame, policy: str = DEFAULT_DEDUP_POLICY) -> pd.DataFrame:
    """
    Remove rides with a repeated ``ride_id``.

    ``drop_all`` removes every row of a repeated id, ``keep_first`` and
    ``keep_last`` retain one occurrence.
    """
    if policy not in DEDUP_POLICIES:
        raise ValueError(f"Unknown dedup policy {policy!r}; expected one of {DEDUP_POLICIES}")

    keep = {"drop_all": False, "keep_first": "first", "keep_last": "last"}[policy]
    repeated = df[RIDE_ID].duplicated(keep=keep)
    if repeated.any():
        logger.info("Removing %d rows with repeated %s (%s)", int(repeated.sum()), RIDE_ID, policy)
    return df.loc[~repeated].copy()


# ────────────────────────────────────────────────────────────────────────────
# Derivation & filtering
# ────────────────────────────────────────────────────────────────────────────

def add_ride_length(df: pd.DataFrame) -> pd.DataFrame:
    """``ride_length`` = ended_at - started_at, in seconds."""
    df = df.copy()
    df[RIDE_LENGTH] = (df[END_TS] - df[START_TS]).dt.total_seconds()
    return df


def drop_non_positive_rides(df: pd.DataFrame) -> pd.DataFrame:
    # NaN lengths fail the comparison too
    return df.loc[df[RIDE_LENGTH] > 0].copy()


def _matches_station(col: pd.Series, station_id) -> pd.Series:
    as_number = pd.to_numeric(col, errors="coerce") == station_id
    as_text = col.astype(str).str.strip() == str(station_id)
    return as_number | as_text


def drop_test_station_rides(df: pd.DataFrame, station_id=TEST_STATION_ID) -> pd.DataFrame:
    """Drop rides that start or end at the test / maintenance station."""
    is_test = _matches_station(df[START_STATION], station_id) | _matches_station(df[END_STATION], station_id)
    return df.loc[~is_test].copy()


def add_day_of_week(df: pd.DataFrame) -> pd.DataFrame:
    """ISO weekday of ``started_at``: Monday = 1 ... Sunday = 7."""
    df = df.copy()
    df[DAY_OF_WEEK] = df[START_TS].dt.dayofweek + 1
    return df


def add_weekday_label(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    labels = df[DAY_OF_WEEK].map(dict(enumerate(WEEKDAYS, start=1)))
    df[WEEKDAY] = pd.Categorical(labels, categories=list(WEEKDAYS), ordered=True)
    return df


def prepare_trips(
    df: pd.DataFrame,
    dedup_policy: str = DEFAULT_DEDUP_POLICY,
    test_station_id=TEST_STATION_ID,
) -> Tuple[pd.DataFrame, CleaningStats]:
    """
    Run deduplication, derivation and filtering in order.
    Returns the analysis table and the rows removed at each step.
    """
    check_required_columns(df)
    stats = CleaningStats(raw_rows=len(df))

    out = deduplicate_rides(clean_columns(df), dedup_policy)
    stats.duplicate_rows = stats.raw_rows - len(out)

    out = add_ride_length(out)
    unparseable = out[RIDE_LENGTH].isna()
    stats.unparseable_rows = int(unparseable.sum())
    if stats.unparseable_rows:
        logger.warning("Dropping %d rides with unparseable %s / %s", stats.unparseable_rows, START_TS, END_TS)

    before = len(out)
    out = drop_non_positive_rides(out)
    stats.non_positive_rows = before - len(out) - stats.unparseable_rows

    before = len(out)
    out = drop_test_station_rides(out, test_station_id)
    stats.test_station_rows = before - len(out)

    out = add_weekday_label(add_day_of_week(out)).reset_index(drop=True)
    stats.final_rows = len(out)

    logger.info(
        "Cleaned trips: %d raw -> %d kept (%d duplicate, %d unparseable, %d non-positive, %d test station)",
        stats.raw_rows, stats.final_rows, stats.duplicate_rows,
        stats.unparseable_rows, stats.non_positive_rows, stats.test_station_rows,
    )
    return out, stats
