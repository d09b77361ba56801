"""Shared trip-table builders for the test suite."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pandas as pd
import pytest

# ensure src/ is importable when the package isn't installed editable
sys.path.append(str(Path(__file__).parent.parent / "src"))


def build_trips(n, prefix="R", start=datetime(2024, 1, 1, 8, 0)):
    """
    ``n`` valid trips, one hour apart from ``start`` (a Monday), lasting
    10-39 minutes, alternating member / casual.
    """
    started = [start + timedelta(hours=i) for i in range(n)]
    return pd.DataFrame({
        "ride_id": [f"{prefix}{i:04d}" for i in range(n)],
        "rideable_type": ["classic_bike"] * n,
        "started_at": started,
        "ended_at": [s + timedelta(minutes=10 + i % 30) for i, s in enumerate(started)],
        "start_station_id": [100 + i % 5 for i in range(n)],
        "end_station_id": [200 + i % 7 for i in range(n)],
        "member_casual": ["member" if i % 2 == 0 else "casual" for i in range(n)],
    })


@pytest.fixture
def make_trips():
    return build_trips


@pytest.fixture
def write_months(tmp_path):
    """Write each frame as its own monthly CSV under tmp_path/raw."""
    def _write(*frames):
        data_dir = tmp_path / "raw"
        data_dir.mkdir(exist_ok=True)
        for i, frame in enumerate(frames, start=1):
            frame.to_csv(data_dir / f"2024{i:02d}-tripdata.csv", index=False)
        return data_dir
    return _write
