# Shared reducers for the analytics views. Every view is a groupby over the
# filtered panel followed by guarded ratios and a stable sort.

import math

import numpy as np
import pandas as pd

# Channel families used by the deep-dive views
LINEAR_TV = "Linear TV"
CTV_FAMILY = ("CTV", "OLV", "BVOD")
TV_VIDEO_CHANNELS = (LINEAR_TV,) + CTV_FAMILY
DIGITAL_CHANNELS = ("Meta", "Google", "TikTok", "Amazon")

FUNNEL_STAGES = ("Awareness", "Consideration", "Conversion")

# Fixed seed for the view-level estimates (reach, CTR, lag...) so repeated
# calls over the same input return the same table.
ESTIMATE_SEED = 7


def safe_ratio(numerator, denominator, scale: float = 1.0):
    """numerator / denominator * scale, with 0 wherever the denominator is 0."""
    num = np.asarray(numerator, dtype=float)
    den = np.asarray(denominator, dtype=float)
    out = np.zeros(np.broadcast(num, den).shape)
    np.divide(num, den, out=out, where=den != 0)
    out = out * scale
    return float(out) if out.ndim == 0 else out


def empty_frame(columns) -> pd.DataFrame:
    return pd.DataFrame(columns=list(columns))


def sum_by(records: pd.DataFrame, keys, columns=("spend", "nr")) -> pd.DataFrame:
    """
    Sum columns per group, groups in first-appearance order.
    Rows whose key is missing are dropped, so absent groups never appear.
    """
    keys = [keys] if isinstance(keys, str) else list(keys)
    columns = list(columns)
    if records.empty:
        return empty_frame(keys + columns)
    out = records.groupby(keys, sort=False)[columns].sum().reset_index()
    return out


def with_roi(frame: pd.DataFrame, spend: str = "spend", nr: str = "nr", out: str = "roi") -> pd.DataFrame:
    frame = frame.copy()
    frame[out] = safe_ratio(frame[nr], frame[spend])
    return frame


def sort_desc(frame: pd.DataFrame, column: str) -> pd.DataFrame:
    """Descending sort that keeps first-appearance order on ties."""
    return frame.sort_values(column, ascending=False, kind="mergesort").reset_index(drop=True)


def sort_asc(frame: pd.DataFrame, column: str) -> pd.DataFrame:
    return frame.sort_values(column, ascending=True, kind="mergesort").reset_index(drop=True)


def sample_series(series, max_points: int):
    """
    Downsample to at most max_points with a fixed stride of ceil(len / max_points),
    always keeping the first point. Idempotent: a sampled series is short enough
    to come back unchanged.
    """
    if max_points <= 0:
        raise ValueError("max_points must be positive")
    if len(series) <= max_points:
        return series
    step = math.ceil(len(series) / max_points)
    if isinstance(series, (pd.DataFrame, pd.Series)):
        return series.iloc[::step].reset_index(drop=True)
    return series[::step]


def as_dates(records: pd.DataFrame) -> pd.Series:
    return pd.to_datetime(records["date"])


def iso_week_key(dates) -> pd.Series:
    """ISO week label, e.g. 2024-W01."""
    iso = pd.Series(pd.to_datetime(dates)).dt.isocalendar()
    return iso["year"].astype(str) + "-W" + iso["week"].astype(int).map("{:02d}".format)


def day_key(dates) -> pd.Series:
    return pd.Series(pd.to_datetime(dates)).dt.strftime("%Y-%m-%d")


def in_channels(records: pd.DataFrame, channels) -> pd.DataFrame:
    return records[records["channel"].isin(channels)]


def portfolio_totals(records: pd.DataFrame):
    """(total spend, total nr, roi) of a record set."""
    spend = float(records["spend"].sum()) if len(records) else 0.0
    nr = float(records["nr"].sum()) if len(records) else 0.0
    return spend, nr, safe_ratio(nr, spend)
