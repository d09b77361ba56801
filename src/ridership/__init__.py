"""
Ridership package initialization.
File: src/ridership/__init__.py

Imports the pipeline stages for easy access:
from ridership import load_trip_files, prepare_trips, build_summary
"""

from .data_utils import (
    load_trip_files,
    prepare_trips,
    deduplicate_rides,
    CleaningStats,
    EmptyInputError,
    SchemaMismatchError,
    MissingColumnsError,
)

from .summary import (
    build_summary,
    RiderSummary,
)

from .config import ReportConfig, ConfigError

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    'load_trip_files',
    'prepare_trips',
    'deduplicate_rides',
    'build_summary',

    # Results
    'CleaningStats',
    'RiderSummary',
    'ReportConfig',

    # Errors
    'ConfigError',
    'EmptyInputError',
    'SchemaMismatchError',
    'MissingColumnsError',
]
