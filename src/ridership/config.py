"""Run settings for the rider report.

Defaults live as module constants; ``ReportConfig`` bundles them for one
run and is built from the command line by ``ridership.cli``.
"""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from .schema import TEST_STATION_ID

DEFAULT_OUTPUT_DIR = Path("reports")
DEFAULT_PATTERN = "*.csv"

# "drop_all" removes every row sharing a repeated ride_id, matching the
# original cleaning; the keep_* policies retain one occurrence.
DEDUP_POLICIES = ("drop_all", "keep_first", "keep_last")
DEFAULT_DEDUP_POLICY = "drop_all"

# Upper quantile of ride length shown in the distribution chart.
DEFAULT_CLIP_QUANTILE = 0.99


class ConfigError(ValueError):
    """Run settings the pipeline cannot honour."""


@dataclass
class ReportConfig:
    """Settings for a single report run."""
    data_dir: Path
    output_dir: Path = DEFAULT_OUTPUT_DIR
    pattern: str = DEFAULT_PATTERN
    dedup_policy: str = DEFAULT_DEDUP_POLICY
    test_station_id: int = TEST_STATION_ID
    clip_quantile: float = DEFAULT_CLIP_QUANTILE
    charts: bool = True

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.output_dir = Path(self.output_dir)

    def validate(self) -> "ReportConfig":
        """Raise ``ConfigError`` on settings the pipeline cannot honour."""
        if self.dedup_policy not in DEDUP_POLICIES:
            raise ConfigError(
                f"Unknown dedup policy {self.dedup_policy!r}; expected one of {DEDUP_POLICIES}"
            )
        if not 0 < self.clip_quantile <= 1:
            raise ConfigError(f"clip_quantile must be in (0, 1], got {self.clip_quantile}")
        return self

    @classmethod
    def from_args(cls, args) -> "ReportConfig":
        """Build from an ``argparse.Namespace`` produced by the CLI parser."""
        output_dir: Optional[Path] = getattr(args, "output_dir", None)
        return cls(
            data_dir=args.data_dir,
            output_dir=output_dir or DEFAULT_OUTPUT_DIR,
            pattern=args.pattern,
            dedup_policy=args.dedup_policy,
            test_station_id=args.test_station_id,
            clip_quantile=args.clip_quantile,
            charts=not args.no_charts,
        ).validate()

    def to_dict(self) -> dict:
        d = asdict(self)
        d["data_dir"] = str(self.data_dir)
        d["output_dir"] = str(self.output_dir)
        return d
