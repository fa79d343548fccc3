# TV and CTV deep dive. Reach and frequency here are planning estimates
# (rating points, average frequency) derived from spend, not the panel's
# person-level reach.

import numpy as np
import pandas as pd

from data_gen.random_source import make_rng

from .common import (
    ESTIMATE_SEED,
    LINEAR_TV,
    TV_VIDEO_CHANNELS,
    as_dates,
    empty_frame,
    in_channels,
    iso_week_key,
    safe_ratio,
    sample_series,
    sort_asc,
    with_roi,
)

MAX_SCATTER_POINTS = 500

# Benchmark (vtr %, viewability %) used when a platform's rows carry no measurement
PLATFORM_BENCHMARKS = {
    "BVOD": (72.5, 90.0),
    "CTV": (80.0, 94.0),
    "AVOD": (57.5, 82.5),
    "SVOD": (57.5, 82.5),
}

# Cost basis for the daypart table: impressions bought per dollar
DAYPART_IMPRESSIONS_PER_DOLLAR = {"Prime": 800.0}
DEFAULT_IMPRESSIONS_PER_DOLLAR = 1200.0


def _tv_records(records: pd.DataFrame) -> pd.DataFrame:
    return in_channels(records, TV_VIDEO_CHANNELS)


def to_linear_vs_ctv_scatter(records: pd.DataFrame, max_points: int = MAX_SCATTER_POINTS) -> pd.DataFrame:
    """Per-row (reach, frequency, roi) points for Linear TV against the CTV family."""
    columns = ["reach", "frequency", "roi", "channel", "type"]
    tv = _tv_records(records)
    if tv.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    linear = (tv["channel"] == LINEAR_TV).to_numpy()
    thousands = tv["spend"].to_numpy() / 1000
    reach = np.minimum(80, thousands * np.where(linear, 12, 8) + rng.random(len(tv)) * 10)
    frequency = np.maximum(1, thousands * np.where(linear, 0.8, 1.2) + rng.random(len(tv)) * 2)
    points = pd.DataFrame({
        "reach": reach,
        "frequency": frequency,
        "roi": tv["roi"].to_numpy(),
        "channel": tv["channel"].to_numpy(),
        "type": np.where(linear, "Linear", "CTV"),
    })
    return sample_series(points, max_points)


def to_prime_vs_non_prime(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["daypart", "spend", "nr", "roi", "reach"]
    tv = _tv_records(records)
    if tv.empty:
        return empty_frame(columns)
    daypart = tv["daypart"].fillna("Unknown")
    est_reach = np.minimum(70, tv["spend"] / 1000 * np.where(daypart == "Prime", 15, 8))
    frame = tv.assign(daypart=daypart, est_reach=est_reach)
    out = frame.groupby("daypart", sort=False).agg(
        spend=("spend", "sum"), nr=("nr", "sum"), reach=("est_reach", "mean")
    ).reset_index()
    return with_roi(out)[columns]


def video_platform(records: pd.DataFrame) -> pd.Series:
    """BVOD and CTV map to themselves; OLV splits into AVOD (YouTube, unknown) and SVOD (DV360)."""
    channel = records["channel"]
    platform = pd.Series(None, index=records.index, dtype=object)
    platform[channel == "BVOD"] = "BVOD"
    platform[channel == "CTV"] = "CTV"
    olv = channel == "OLV"
    platform[olv] = np.where(records.loc[olv, "publisher"] == "DV360", "SVOD", "AVOD")
    return platform


def to_video_platform_breakdown(records: pd.DataFrame) -> pd.DataFrame:
    """
    Spend, NR and ROI for each video platform with average VTR and viewability
    as percentages. Unmeasured rows count at the platform benchmark.
    """
    columns = ["platform", "spend", "nr", "roi", "vtr", "viewability"]
    if records.empty:
        return empty_frame(columns)
    platform = video_platform(records)
    frame = records[platform.notna()].assign(platform=platform[platform.notna()])
    if frame.empty:
        return empty_frame(columns)

    bench_vtr = frame["platform"].map(lambda p: PLATFORM_BENCHMARKS[p][0])
    bench_view = frame["platform"].map(lambda p: PLATFORM_BENCHMARKS[p][1])
    frame = frame.assign(
        vtr=(frame["vtr"] * 100).fillna(bench_vtr),
        viewability=(frame["viewability"] * 100).fillna(bench_view),
    )
    out = frame.groupby("platform", sort=False).agg(
        spend=("spend", "sum"), nr=("nr", "sum"), vtr=("vtr", "mean"), viewability=("viewability", "mean")
    ).reset_index()
    return with_roi(out)[columns]


def to_reach_frequency_optimization(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["week", "reach", "frequency", "spend", "nr", "efficiency"]
    tv = _tv_records(records)
    if tv.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    thousands = tv["spend"].to_numpy() / 1000
    frame = pd.DataFrame({
        "week": iso_week_key(as_dates(tv)).to_numpy(),
        "spend": tv["spend"].to_numpy(),
        "nr": tv["nr"].to_numpy(),
        "reach": np.minimum(75, thousands * 10 + rng.random(len(tv)) * 5),
        "frequency": np.maximum(1, thousands * 0.9 + rng.random(len(tv))),
    })
    out = frame.groupby("week", sort=False).agg(
        reach=("reach", "mean"), frequency=("frequency", "mean"), spend=("spend", "sum"), nr=("nr", "sum")
    ).reset_index()
    out["efficiency"] = safe_ratio(out["nr"], out["spend"])
    return sort_asc(out[columns], "week")


def to_daypart_performance_table(records: pd.DataFrame) -> pd.DataFrame:
    """Daypart cost table; premium_ratio is each daypart's CPM over the Off-Prime CPM."""
    columns = ["daypart", "spend", "reach", "frequency", "cpm", "roi", "premium_ratio"]
    tv = _tv_records(records)
    if tv.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    daypart = tv["daypart"].fillna("Unknown")
    prime = (daypart == "Prime").to_numpy()
    thousands = tv["spend"].to_numpy() / 1000
    per_dollar = daypart.map(DAYPART_IMPRESSIONS_PER_DOLLAR).fillna(DEFAULT_IMPRESSIONS_PER_DOLLAR)
    frame = tv.assign(
        daypart=daypart,
        est_impressions=tv["spend"] * per_dollar,
        est_reach=np.minimum(70, thousands * np.where(prime, 15, 10)),
        est_frequency=np.maximum(1, thousands * 0.8 + rng.random(len(tv))),
    )
    out = frame.groupby("daypart", sort=False).agg(
        spend=("spend", "sum"),
        nr=("nr", "sum"),
        impressions=("est_impressions", "sum"),
        reach=("est_reach", "mean"),
        frequency=("est_frequency", "mean"),
    ).reset_index()
    out["cpm"] = safe_ratio(out["spend"], out["impressions"], 1000)
    out = with_roi(out)

    off_prime = out.loc[out["daypart"] == "Off-Prime", "cpm"]
    base_cpm = float(off_prime.iloc[0]) if len(off_prime) and off_prime.iloc[0] > 0 else 1.0
    out["premium_ratio"] = out["cpm"] / base_cpm
    return out[columns]
