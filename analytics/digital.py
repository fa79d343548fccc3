# Digital deep dive over Meta, Google, TikTok and Amazon rows.

import numpy as np
import pandas as pd

from data_gen.random_source import make_rng

from .common import (
    DIGITAL_CHANNELS,
    ESTIMATE_SEED,
    empty_frame,
    in_channels,
    safe_ratio,
    sort_desc,
    sum_by,
    with_roi,
)

# Base click-through rate per buying type; anything else uses the default
BUYING_TYPE_CTR = {"Engagement": 0.025, "Click": 0.035}
DEFAULT_CTR = 0.015

# Relative audience size per targeting type
TARGETING_REACH = {"BAU W25-54": 1.2, "CDP 1P": 0.8}

FORMAT_ENGAGEMENT = {"Video": 0.035}
DEFAULT_ENGAGEMENT = 0.02

TOP_CAMPAIGNS = 20
HIGH_ROI = 6.0
MEDIUM_ROI = 4.0


def _digital(records: pd.DataFrame) -> pd.DataFrame:
    return in_channels(records, DIGITAL_CHANNELS)


def efficiency_band(roi) -> np.ndarray:
    return np.select([roi > HIGH_ROI, roi > MEDIUM_ROI], ["High", "Medium"], "Low")


def to_vtr_viewability_scatter(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["vtr", "viewability", "roi", "channel", "spend"]
    digital = _digital(records)
    measured = digital[digital["vtr"].notna() & digital["viewability"].notna()]
    if measured.empty:
        return empty_frame(columns)
    return measured[columns].reset_index(drop=True)


def to_buying_type_analysis(records: pd.DataFrame) -> pd.DataFrame:
    """Per buying type, with CTR (%) and CPC estimated around a per-type base rate."""
    columns = ["buying_type", "spend", "nr", "roi", "avg_ctr", "avg_cpc"]
    digital = _digital(records)
    digital = digital[digital["buying_type"].notna()]
    if digital.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    base = digital["buying_type"].map(BUYING_TYPE_CTR).fillna(DEFAULT_CTR).to_numpy()
    ctr = base + (rng.random(len(digital)) - 0.5) * 0.01
    cpc = digital["spend"].to_numpy() / np.maximum(1, digital["impressions"].to_numpy() * ctr)
    out = digital.assign(ctr=ctr, cpc=cpc).groupby("buying_type", sort=False).agg(
        spend=("spend", "sum"), nr=("nr", "sum"), avg_ctr=("ctr", "mean"), avg_cpc=("cpc", "mean")
    ).reset_index()
    out["avg_ctr"] = out["avg_ctr"] * 100
    return with_roi(out)[columns]


def to_targeting_impact(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["targeting", "spend", "nr", "roi", "reach", "frequency", "cpm"]
    digital = _digital(records)
    digital = digital[digital["targeting"].notna()]
    if digital.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    thousands = digital["spend"].to_numpy() / 1000
    multiplier = digital["targeting"].map(TARGETING_REACH).fillna(1.0).to_numpy()
    frame = digital.assign(
        est_reach=np.minimum(60, thousands * 8 * multiplier),
        est_frequency=np.maximum(1, thousands * 0.6 + rng.random(len(digital))),
    )
    out = frame.groupby("targeting", sort=False).agg(
        spend=("spend", "sum"),
        nr=("nr", "sum"),
        impressions=("impressions", "sum"),
        reach=("est_reach", "mean"),
        frequency=("est_frequency", "mean"),
    ).reset_index()
    out["cpm"] = safe_ratio(out["spend"], out["impressions"], 1000)
    return with_roi(out)[columns]


def to_video_vs_static(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["format", "spend", "nr", "roi", "engagement_rate", "vtr"]
    digital = _digital(records)
    digital = digital[digital["format"].notna()]
    if digital.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    base = digital["format"].map(FORMAT_ENGAGEMENT).fillna(DEFAULT_ENGAGEMENT).to_numpy()
    engagement = base + (rng.random(len(digital)) - 0.5) * 0.01
    out = digital.assign(engagement=engagement).groupby("format", sort=False).agg(
        spend=("spend", "sum"), nr=("nr", "sum"), engagement_rate=("engagement", "mean"), vtr=("vtr", "mean")
    ).reset_index()
    out["engagement_rate"] = out["engagement_rate"] * 100
    return with_roi(out)[columns]


def to_campaign_setup_learnings(records: pd.DataFrame, top_n: int = TOP_CAMPAIGNS) -> pd.DataFrame:
    """
    Best digital campaigns by ROI. A campaign is a (campaign name, channel)
    pair; its targeting, buying type and format come from its first row.
    """
    columns = ["campaign", "channel", "targeting", "buying_type", "format", "spend", "roi", "efficiency"]
    digital = _digital(records)
    digital = digital[digital["campaign_name"].notna()]
    if digital.empty:
        return empty_frame(columns)
    frame = digital.assign(
        targeting=digital["targeting"].fillna("Unknown"),
        buying_type=digital["buying_type"].fillna("Unknown"),
        format=digital["format"].fillna("Unknown"),
    )
    out = frame.groupby(["campaign_name", "channel"], sort=False).agg(
        targeting=("targeting", "first"),
        buying_type=("buying_type", "first"),
        format=("format", "first"),
        spend=("spend", "sum"),
        nr=("nr", "sum"),
    ).reset_index().rename(columns={"campaign_name": "campaign"})
    out = with_roi(out)
    out["efficiency"] = efficiency_band(out["roi"])
    return sort_desc(out, "roi").head(top_n)[columns]


def to_funnel_stage_budget(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["stage", "spend", "nr", "roi", "share_of_budget"]
    digital = _digital(records)
    if digital.empty:
        return empty_frame(columns)
    out = with_roi(sum_by(digital.rename(columns={"funnel_stage": "stage"}), "stage"))
    out["share_of_budget"] = safe_ratio(out["spend"], out["spend"].sum(), 100)
    return out[columns]
