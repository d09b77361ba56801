"""
Charts comparing members with casual riders.

Both plots return the matplotlib Figure; when ``path`` is given the figure
is written to disk and closed.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from .schema import RIDER_TYPE, RIDE_LENGTH, WEEKDAY, RIDER_TYPES, WEEKDAYS

logger = logging.getLogger(__name__)

plt.style.use('seaborn-v0_8-whitegrid')
sns.set_palette("husl")

RIDE_MINUTES = "ride_minutes"


def save_figure(fig: plt.Figure, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    logger.info("Saved chart to %s", path)
    return path


def _no_data(ax, message="No rides to plot"):
    ax.text(0.5, 0.5, message, ha="center", va="center", transform=ax.transAxes)
    ax.set_xticks([])
    ax.set_yticks([])


def plot_ride_length_distribution(df: pd.DataFrame, path: Optional[Union[str, Path]] = None,
                                  clip_quantile: float = 0.99) -> plt.Figure:
    """
    Distribution of ride length (minutes) for each rider type.

    Parameters:
    -----------
    df : pd.DataFrame
        Cleaned trips with ride_length and member_casual columns
    path : str or Path, optional
        Where to save the PNG
    clip_quantile : float
        Rides longer than this quantile are left out of the plot so a
        handful of multi-day rentals do not flatten the histogram
    """
    plot_df = df[[RIDER_TYPE, RIDE_LENGTH]].copy()
    plot_df[RIDE_MINUTES] = plot_df[RIDE_LENGTH] / 60.0
    if not plot_df.empty and clip_quantile < 1:
        upper = plot_df[RIDE_MINUTES].quantile(clip_quantile)
        plot_df = plot_df[plot_df[RIDE_MINUTES] <= upper]

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(15, 6))

    if plot_df.empty:
        _no_data(ax1)
        _no_data(ax2)
    else:
        # Histogram per rider type, each normalised on its own
        sns.histplot(data=plot_df, x=RIDE_MINUTES, hue=RIDER_TYPE, hue_order=list(RIDER_TYPES),
                     bins=50, stat="density", common_norm=False, element="step", ax=ax1)
        ax1.set_xlabel('Ride Length (minutes)')
        ax1.set_ylabel('Density')

        sns.boxplot(data=plot_df, x=RIDER_TYPE, y=RIDE_MINUTES, order=list(RIDER_TYPES), ax=ax2)
        ax2.set_xlabel('Rider Type')
        ax2.set_ylabel('Ride Length (minutes)')

    ax1.set_title('Ride Length Distribution by Rider Type')
    ax2.set_title('Ride Length Box Plot')

    fig.tight_layout()
    if path is not None:
        save_figure(fig, path)
    return fig


def plot_weekday_ride_length(table: pd.DataFrame, path: Optional[Union[str, Path]] = None) -> plt.Figure:
    """
    Grouped bars of mean ride length (minutes) by weekday and rider type.
    ``table`` is the output of ``summary.weekday_ride_length``.
    """
    plot_df = table.copy()
    plot_df["mean_minutes"] = plot_df["mean_ride_length"] / 60.0
    plot_df = plot_df.dropna(subset=["mean_minutes"])

    fig, ax = plt.subplots(figsize=(12, 6))

    if plot_df.empty:
        _no_data(ax)
    else:
        plot_df[WEEKDAY] = plot_df[WEEKDAY].astype(str)
        sns.barplot(data=plot_df, x=WEEKDAY, y="mean_minutes", hue=RIDER_TYPE,
                    order=list(WEEKDAYS), hue_order=list(RIDER_TYPES), errorbar=None, ax=ax)
        ax.set_xlabel('Day of Week')
        ax.set_ylabel('Average Ride Length (minutes)')
        ax.legend(title="Rider Type")

    ax.set_title('Average Ride Length by Weekday and Rider Type')

    fig.tight_layout()
    if path is not None:
        save_figure(fig, path)
    return fig
