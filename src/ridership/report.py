"""Writes summary tables and the markdown report to the output directory."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd

from .data_utils import CleaningStats
from .summary import RiderSummary

logger = logging.getLogger(__name__)

REPORT_NAME = "report.md"


def write_summary_tables(summary: RiderSummary, output_dir: Union[str, Path]) -> Dict[str, Path]:
    """Write every summary table as CSV; returns name -> path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    for name, table in summary.tables().items():
        path = output_dir / f"{name}.csv"
        # long tables carry a plain RangeIndex
        table.to_csv(path, index=not isinstance(table.index, pd.RangeIndex))
        paths[name] = path
        logger.info("Wrote %s", path)
    return paths


def _fmt(value) -> str:
    if isinstance(value, float):
        return "NaN" if pd.isna(value) else f"{value:,.2f}"
    return str(value)


def _markdown_table(df: pd.DataFrame) -> str:
    if not isinstance(df.index, pd.RangeIndex):
        df = df.reset_index()
    header = "| " + " | ".join(str(c) for c in df.columns) + " |"
    rule = "|" + "|".join("---" for _ in df.columns) + "|"
    rows = ["| " + " | ".join(_fmt(v) for v in row) + " |" for row in df.itertuples(index=False)]
    return "\n".join([header, rule] + rows)


def render_markdown(summary: RiderSummary, stats: CleaningStats,
                    chart_paths: Optional[Dict[str, Path]] = None) -> str:
    """Markdown report: cleaning counts, summary tables and chart links."""
    minutes = summary.ride_length.copy()
    stat_cols = [c for c in minutes.columns if c != "rides"]
    minutes[stat_cols] = minutes[stat_cols] / 60.0

    share = summary.weekday_share * 100

    report = f"""# Member vs. Casual Rider Report

Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}

## Data Cleaning

| step | rows |
|---|---|
| raw rows | {stats.raw_rows:,} |
| repeated ride_id removed | {stats.duplicate_rows:,} |
| unparseable timestamp removed | {stats.unparseable_rows:,} |
| non-positive ride length removed | {stats.non_positive_rows:,} |
| test station removed | {stats.test_station_rows:,} |
| **rows analysed** | **{stats.final_rows:,}** |

## Ride Length by Rider Type (minutes)

{_markdown_table(minutes)}

## Share of Rides by Weekday (%)

{_markdown_table(share)}

## Rides by Weekday

{_markdown_table(summary.weekday_counts)}
"""

    if chart_paths:
        report += "\n## Charts\n\n"
        for name, path in chart_paths.items():
            report += f"![{name}]({Path(path).name})\n\n"

    return report


def write_report(summary: RiderSummary, stats: CleaningStats, output_dir: Union[str, Path],
                 chart_paths: Optional[Dict[str, Path]] = None) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / REPORT_NAME
    with open(report_path, 'w') as f:
        f.write(render_markdown(summary, stats, chart_paths))

    logger.info("Report saved: %s", report_path)
    return report_path
