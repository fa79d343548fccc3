# Time-bucketed views: daily/weekly spend and NR, and per-family daily splits.

import pandas as pd

from .common import (
    CTV_FAMILY,
    DIGITAL_CHANNELS,
    FUNNEL_STAGES,
    LINEAR_TV,
    as_dates,
    day_key,
    empty_frame,
    iso_week_key,
    sample_series,
    sort_asc,
    sum_by,
    with_roi,
)

MAX_DAILY_POINTS = 200
MAX_WEEKLY_POINTS = 52


def to_timeseries(records: pd.DataFrame, max_points: int = MAX_DAILY_POINTS) -> pd.DataFrame:
    """Daily spend, NR and ROI in date order, sampled down for long ranges."""
    if records.empty:
        return empty_frame(["date", "spend", "nr", "roi"])
    frame = records.assign(date=day_key(as_dates(records)))
    out = with_roi(sort_asc(sum_by(frame, "date"), "date"))
    return sample_series(out, max_points)


def to_timeseries_weekly(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["date", "spend", "nr", "roi"])
    frame = records.assign(date=iso_week_key(as_dates(records)))
    return with_roi(sort_asc(sum_by(frame, "date"), "date"))


def to_time_aggregation(records: pd.DataFrame, aggregation: str = "daily") -> pd.DataFrame:
    if aggregation == "daily":
        return to_timeseries(records)
    if aggregation == "weekly":
        return to_timeseries_weekly(records)
    raise ValueError(f"unknown aggregation {aggregation!r}")


def to_weekly_performance(records: pd.DataFrame, max_points: int = MAX_WEEKLY_POINTS) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["week", "spend", "nr", "reach", "roi"])
    frame = records.assign(week=iso_week_key(as_dates(records)))
    out = sum_by(frame, "week", ("spend", "nr", "reach"))
    out = with_roi(sort_asc(out, "week"))
    return sample_series(out, max_points)


def _daily_pivot(records: pd.DataFrame, group: pd.Series, labels: dict, metrics: dict) -> pd.DataFrame:
    """
    One row per day with a column per (label, metric). Days with no rows in
    any of the labelled groups still appear if they have records at all.
    labels maps group value -> column prefix; metrics maps record column -> suffix.
    """
    columns = ["date"] + [f"{p}{s}" for p in labels.values() for s in metrics.values()]
    if records.empty:
        return empty_frame(columns)
    days = day_key(as_dates(records))
    out = pd.DataFrame({"date": pd.unique(days)})
    tagged = records.assign(date=days, _group=group.map(labels))
    tagged = tagged[tagged["_group"].notna()]
    for prefix in labels.values():
        part = tagged[tagged["_group"] == prefix]
        sums = part.groupby("date", sort=False)[list(metrics)].sum()
        for col, suffix in metrics.items():
            out[f"{prefix}{suffix}"] = out["date"].map(sums[col]).fillna(0.0).astype(float)
    return sort_asc(out, "date")[columns]


def to_tv_vs_ctv_timeseries(records: pd.DataFrame) -> pd.DataFrame:
    family = records["channel"].map(lambda ch: "tv" if ch == LINEAR_TV else ("ctv" if ch in CTV_FAMILY else None))
    return _daily_pivot(records, family, {"tv": "tv", "ctv": "ctv"}, {"nr": "_nr", "spend": "_spend"})


def to_digital_channel_timeseries(records: pd.DataFrame) -> pd.DataFrame:
    digital = records[records["channel"].isin(DIGITAL_CHANNELS)]
    labels = {ch: ch.lower() for ch in DIGITAL_CHANNELS}
    return _daily_pivot(digital, digital["channel"], labels, {"nr": "_nr"})


def to_publisher_performance_timeseries(records: pd.DataFrame) -> pd.DataFrame:
    labels = {p: p.lower() for p in ("Meta", "Google", "TikTok", "Amazon")}
    return _daily_pivot(records, records["publisher"], labels, {"spend": "_spend", "nr": "_nr"})


def to_funnel_stage_timeseries(records: pd.DataFrame) -> pd.DataFrame:
    labels = {stage: stage.lower() for stage in FUNNEL_STAGES}
    return _daily_pivot(records, records["funnel_stage"], labels, {"spend": "_spend", "nr": "_nr"})
