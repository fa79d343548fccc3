# Targeting and funnel views. BAU W25-54 is the broad baseline audience and
# CDP 1P the first-party one.

import numpy as np
import pandas as pd

from .common import FUNNEL_STAGES, empty_frame, safe_ratio, sort_desc, sum_by, with_roi

BAU_AUDIENCE = "BAU W25-54"
FIRST_PARTY_AUDIENCES = ("CDP 1P",)

# targeting -> audience segment, with a click-rate multiplier per segment
AUDIENCE_SEGMENTS = {
    "BAU W25-54": "Mass Market",
    "Strategy Segment": "Behavioral",
    "CDP 1P": "Known Customers",
}
SEGMENT_CLICK_MULTIPLIER = {"Known Customers": 1.8, "Behavioral": 1.3}

CHANNEL_CLICK_RATE = {"Meta": 0.012, "Google": 0.035}
DEFAULT_CLICK_RATE = 0.008

# Share of NR counted as conversions, by funnel stage
CONVERSION_NR_SHARE = {"Conversion": 0.15}
DEFAULT_CONVERSION_NR_SHARE = 0.05

# Per-impression conversion rate of each funnel stage
STAGE_CONVERSION_RATE = {"Awareness": 0.001, "Consideration": 0.015, "Conversion": 0.08}


def _targeted(records: pd.DataFrame) -> pd.DataFrame:
    return records[records["targeting"].notna()]


def to_targeting_vs_bau(records: pd.DataFrame) -> pd.DataFrame:
    """Targeting types with ROI lift (%) over the broad BAU audience; lift is 0 without a BAU row."""
    columns = ["targeting", "spend", "nr", "roi", "reach", "frequency", "cpm", "vs_bau_lift", "efficiency"]
    targeted = _targeted(records)
    if targeted.empty:
        return empty_frame(columns)
    out = with_roi(sum_by(targeted, "targeting", ("spend", "nr", "impressions", "reach", "frequency")))
    out["cpm"] = safe_ratio(out["spend"], out["impressions"], 1000)
    out["efficiency"] = safe_ratio(out["nr"], out["impressions"], 1000)
    bau = out.loc[out["targeting"] == BAU_AUDIENCE, "roi"]
    bau_roi = float(bau.iloc[0]) if len(bau) else 0.0
    out["vs_bau_lift"] = safe_ratio(out["roi"] - bau_roi, bau_roi, 100)
    return sort_desc(out[columns], "roi")


def to_funnel_budget_allocation(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["funnel_stage", "spend", "share_of_total", "avg_roi", "reach", "frequency"]
    staged = records[records["funnel_stage"].notna()]
    if staged.empty:
        return empty_frame(columns)
    out = staged.groupby("funnel_stage", sort=False).agg(
        spend=("spend", "sum"), nr=("nr", "sum"), reach=("reach", "mean"), frequency=("frequency", "mean")
    ).reset_index()
    out["share_of_total"] = safe_ratio(out["spend"], out["spend"].sum(), 100)
    out = with_roi(out, out="avg_roi")
    return sort_desc(out[columns], "spend")


def to_reach_frequency_by_funnel(records: pd.DataFrame) -> pd.DataFrame:
    """
    Average reach and frequency per stage. efficiency is NR per unit of
    reach x frequency and cost is spend per unit of average reach.
    """
    columns = ["funnel_stage", "reach", "frequency", "efficiency", "cost", "roi"]
    staged = records[records["funnel_stage"].notna()]
    if staged.empty:
        return empty_frame(columns)
    out = staged.groupby("funnel_stage", sort=False).agg(
        spend=("spend", "sum"), nr=("nr", "sum"), reach=("reach", "mean"), frequency=("frequency", "mean")
    ).reset_index()
    out["efficiency"] = safe_ratio(out["nr"], out["reach"] * out["frequency"])
    out["cost"] = safe_ratio(out["spend"], out["reach"])
    out = with_roi(out)
    return sort_desc(out[columns], "efficiency")


def to_first_party_performance(records: pd.DataFrame) -> pd.DataFrame:
    """First-party audiences against the broad baseline; baseline ROI is 1 when it is absent."""
    columns = ["targeting", "is_first_party", "spend", "nr", "roi", "reach", "cpm", "conversion_rate", "incremental_lift"]
    targeted = _targeted(records)
    if targeted.empty:
        return empty_frame(columns)
    share = targeted["funnel_stage"].map(CONVERSION_NR_SHARE).fillna(DEFAULT_CONVERSION_NR_SHARE)
    frame = targeted.assign(conversions=targeted["nr"] * share)
    out = with_roi(sum_by(frame, "targeting", ("spend", "nr", "reach", "impressions", "conversions")))
    out["is_first_party"] = out["targeting"].isin(FIRST_PARTY_AUDIENCES)
    out["cpm"] = safe_ratio(out["spend"], out["impressions"], 1000)
    out["conversion_rate"] = safe_ratio(out["conversions"], out["impressions"], 100)

    broad = out[(out["targeting"] == BAU_AUDIENCE) & (out["spend"] > 0)]
    baseline_roi = float(broad["roi"].iloc[0]) if len(broad) else 1.0
    out["incremental_lift"] = safe_ratio(out["roi"] - baseline_roi, baseline_roi, 100)
    return sort_desc(out[columns], "roi")


def to_audience_segment_matrix(records: pd.DataFrame) -> pd.DataFrame:
    """Segment x channel with an estimated CTR (%) and a High/Medium/Low tier."""
    columns = ["segment", "channel", "spend", "nr", "roi", "reach", "frequency", "ctr", "performance"]
    targeted = _targeted(records)
    if targeted.empty:
        return empty_frame(columns)
    segment = targeted["targeting"].map(AUDIENCE_SEGMENTS).fillna(targeted["targeting"])
    click_rate = targeted["channel"].map(CHANNEL_CLICK_RATE).fillna(DEFAULT_CLICK_RATE)
    multiplier = segment.map(SEGMENT_CLICK_MULTIPLIER).fillna(1.0)
    frame = targeted.assign(segment=segment, clicks=targeted["impressions"] * click_rate * multiplier)
    out = with_roi(sum_by(frame, ["segment", "channel"], ("spend", "nr", "reach", "frequency", "impressions", "clicks")))
    out["ctr"] = safe_ratio(out["clicks"], out["impressions"], 100)
    out["performance"] = np.select(
        [(out["roi"] > 4.5) & (out["ctr"] > 1.5), (out["roi"] > 3.0) & (out["ctr"] > 0.8)],
        ["High", "Medium"],
        "Low",
    )
    return sort_desc(out[columns], "roi")


def to_funnel_conversion_flow(records: pd.DataFrame) -> pd.DataFrame:
    """
    Visitors flowing Awareness -> Consideration -> Conversion.

    The pool starts at the impressions of the first stage present and each
    stage keeps conversion_rate % of it for the next one. Stages with no rows
    are skipped. The final stage has no drop-off.
    """
    columns = ["stage", "visitors", "conversion_rate", "drop_off", "cost", "efficiency"]
    staged = records[records["funnel_stage"].isin(FUNNEL_STAGES)]
    if staged.empty:
        return empty_frame(columns)
    rate = staged["funnel_stage"].map(STAGE_CONVERSION_RATE)
    frame = staged.assign(conversions=staged["impressions"] * rate)
    totals = frame.groupby("funnel_stage", sort=False)[["spend", "impressions", "conversions"]].sum()

    rows = []
    pool = None
    last = len(FUNNEL_STAGES) - 1
    for position, stage in enumerate(FUNNEL_STAGES):
        if stage not in totals.index:
            continue
        spend, impressions, conversions = totals.loc[stage, ["spend", "impressions", "conversions"]]
        conversion_rate = safe_ratio(conversions, impressions, 100)
        visitors = impressions if pool is None else pool * conversion_rate / 100
        next_pool = visitors * conversion_rate / 100 if position < last else visitors
        rows.append({
            "stage": stage,
            "visitors": int(round(visitors)),
            "conversion_rate": conversion_rate,
            "drop_off": safe_ratio(visitors - next_pool, visitors, 100),
            "cost": safe_ratio(spend, visitors),
            "efficiency": safe_ratio(conversions, spend, 1000),
        })
        pool = next_pool
    return pd.DataFrame(rows, columns=columns)
