# Response curve and seasonality helpers.
# season_period() is the one place the calendar is split into season buckets;
# the generator and the seasonal analytics both go through it.

import numpy as np
import pandas as pd

from .config import ChannelParams

# -------------------------------
# RESPONSE CURVE
# -------------------------------

# Larger => the curve approaches max_roi sooner. 3 closes ~95% of the gap at x = 1.
CURVE_STEEPNESS = 3.0


def response_roi(spend, params: ChannelParams):
    """
    ROI for a given spend level on one channel.

    effective = max(0, spend - min_threshold_spend)
    x = min(1, effective / saturation_point_spend)
    roi = max_roi - (max_roi - max_marginal_roi) * exp(-3x), floored at 0

    At or below the threshold the curve is evaluated at x = 0, i.e. ROI equals
    max_marginal_roi. Accepts a scalar or an array of spends.
    """
    spend = np.asarray(spend, dtype=float)
    effective = np.maximum(0.0, spend - params.min_threshold_spend)
    x = np.minimum(1.0, effective / params.saturation_point_spend)
    roi = params.max_roi - (params.max_roi - params.max_marginal_roi) * np.exp(-CURVE_STEEPNESS * x)
    roi = np.maximum(0.0, roi)
    return float(roi) if roi.ndim == 0 else roi


# -------------------------------
# SEASONALITY
# -------------------------------

IN_SEASON = "In-Season"
PRE_SEASON = "Pre-Season"
POST_SEASON = "Post-Season"
OFF_SEASON = "Off-Season"

SEASON_PERIODS = (OFF_SEASON, PRE_SEASON, IN_SEASON, POST_SEASON)

SEASON_MULTIPLIERS = {
    IN_SEASON: 1.3,
    PRE_SEASON: 1.1,
    POST_SEASON: 1.05,
    OFF_SEASON: 0.85,
}

# Routine month-to-month variation for brands without a season, Jan..Dec
NON_SEASONAL_MONTHLY = (1.0, 1.02, 0.98, 1.0, 1.05, 1.03, 1.02, 0.97, 0.99, 1.01, 1.0, 1.02)


def season_period(month: int) -> str:
    if 5 <= month <= 9:
        return IN_SEASON
    if 3 <= month <= 4:
        return PRE_SEASON
    if month == 10:
        return POST_SEASON
    return OFF_SEASON


def seasonal_multiplier(date, is_seasonal: bool) -> float:
    month = pd.Timestamp(date).month
    if is_seasonal:
        return SEASON_MULTIPLIERS[season_period(month)]
    return NON_SEASONAL_MONTHLY[month - 1]


def season_periods(dates) -> pd.Series:
    """Vectorised season_period over a date-like Series."""
    dates = pd.Series(pd.to_datetime(dates))
    return dates.dt.month.map(season_period)


def seasonal_multipliers(dates, seasonal_flags) -> np.ndarray:
    """Vectorised seasonal_multiplier; seasonal_flags is aligned with dates."""
    dates = pd.Series(pd.to_datetime(dates)).reset_index(drop=True)
    months = dates.dt.month
    in_season = season_periods(dates).map(SEASON_MULTIPLIERS).to_numpy(dtype=float)
    routine = np.asarray(NON_SEASONAL_MONTHLY)[months.to_numpy() - 1]
    return np.where(np.asarray(seasonal_flags, dtype=bool), in_season, routine)
