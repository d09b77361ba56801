#!/usr/bin/env python3
"""
Member vs. Casual Rider Report
==============================

Loads a directory of monthly trip CSVs, cleans them and writes summary
tables, two charts and a markdown report.

Usage (from repo root):
    ridership-report data/raw --output-dir reports
"""

import argparse
import logging
import sys
from pathlib import Path

import matplotlib

from .config import (
    ReportConfig, ConfigError, DEDUP_POLICIES, DEFAULT_DEDUP_POLICY,
    DEFAULT_OUTPUT_DIR, DEFAULT_PATTERN, DEFAULT_CLIP_QUANTILE,
)
from .data_utils import (
    load_trip_files, prepare_trips,
    EmptyInputError, SchemaMismatchError, MissingColumnsError,
)
from .data_viz import plot_ride_length_distribution, plot_weekday_ride_length
from .report import write_report, write_summary_tables
from .schema import TEST_STATION_ID
from .summary import build_summary

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Compare ride behaviour of members and casual riders')
    parser.add_argument('data_dir', type=Path,
                        help='Directory holding one trip CSV per month')
    parser.add_argument('--output-dir', type=Path, default=DEFAULT_OUTPUT_DIR,
                        help=f'Where tables, charts and report go (default: {DEFAULT_OUTPUT_DIR})')
    parser.add_argument('--pattern', default=DEFAULT_PATTERN,
                        help=f'Glob for monthly files (default: {DEFAULT_PATTERN})')
    parser.add_argument('--dedup-policy', choices=DEDUP_POLICIES, default=DEFAULT_DEDUP_POLICY,
                        help=f'How repeated ride_id rows are handled (default: {DEFAULT_DEDUP_POLICY})')
    parser.add_argument('--test-station-id', type=int, default=TEST_STATION_ID,
                        help=f'Station id of test / maintenance rides (default: {TEST_STATION_ID})')
    parser.add_argument('--clip-quantile', type=float, default=DEFAULT_CLIP_QUANTILE,
                        help=f'Upper ride length quantile shown in the distribution chart '
                             f'(default: {DEFAULT_CLIP_QUANTILE})')
    parser.add_argument('--no-charts', action='store_true',
                        help='Skip rendering the PNG charts')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')
    return parser


def run(config: ReportConfig) -> Path:
    """Run the full pipeline for ``config`` and return the report path."""
    logger.debug("Settings: %s", config.to_dict())
    trips = load_trip_files(config.data_dir, config.pattern)
    cleaned, stats = prepare_trips(trips, config.dedup_policy, config.test_station_id)
    logger.debug("Cleaning: %s", stats.to_dict())
    summary = build_summary(cleaned)

    table_paths = write_summary_tables(summary, config.output_dir)
    logger.debug("Tables: %s", table_paths)

    chart_paths = {}
    if config.charts:
        chart_paths["Ride length distribution"] = config.output_dir / "ride_length_distribution.png"
        plot_ride_length_distribution(cleaned, chart_paths["Ride length distribution"],
                                      clip_quantile=config.clip_quantile)
        chart_paths["Average ride length by weekday"] = config.output_dir / "weekday_ride_length.png"
        plot_weekday_ride_length(summary.weekday_length, chart_paths["Average ride length by weekday"])

    return write_report(summary, stats, config.output_dir, chart_paths)


def main(argv=None) -> int:
    """Build the rider report."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )
    # charts are only ever written to disk
    matplotlib.use("Agg")

    print("🚲 MEMBER VS. CASUAL RIDER REPORT")
    print("=" * 60)
    print(f"Input: {args.data_dir}")
    print(f"Output: {args.output_dir}")
    print("=" * 60)

    try:
        config = ReportConfig.from_args(args)
        report_path = run(config)
    except (ConfigError, EmptyInputError, SchemaMismatchError, MissingColumnsError) as e:
        print(f"❌ Error: {e}")
        return 1

    print(f"\n✅ Report saved: {report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
