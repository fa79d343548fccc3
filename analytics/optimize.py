# Budget optimisation read-outs built on the channel contribution table.
# Rule-based reallocations, not a solver.

import numpy as np
import pandas as pd

from .common import LINEAR_TV, empty_frame, portfolio_totals, safe_ratio, sort_desc
from .contribution import to_channel_contribution

BUDGET_SCENARIOS = {"Current": 1.0, "Increase": 1.25, "Decrease": 0.8}

# scenario, TV share %, digital share %, risk level
ALLOCATION_MIXES = (
    ("Current Mix", 60, 40, "Low"),
    ("TV Focused", 70, 30, "Medium"),
    ("Digital Focused", 40, 60, "Medium"),
    ("Balanced", 50, 50, "Low"),
    ("Digital Heavy", 30, 70, "High"),
    ("TV Heavy", 80, 20, "High"),
)
RISK_DISCOUNT = {"Low": 1.0, "Medium": 0.95, "High": 0.9}

REACH_RATE = {LINEAR_TV: 12, "Meta": 15}
DEFAULT_REACH_RATE = 10
MAX_REACH = 80.0
ROI_NORMALISER = 5.0

SATURATION_RATE = {LINEAR_TV: 0.2, "Meta": 0.15}
DEFAULT_SATURATION_RATE = 0.18
SPEND_LEVELS = (0.5, 1.0, 1.5, 2.0, 3.0)


def reallocation_rule(roi: float, share: float):
    """(spend multiplier, recommendation) for a channel's ROI and share of spend (%)."""
    if roi > 6 and share < 25:
        return 1.3, "Increase allocation - high ROI, low saturation"
    if roi > 4 and share < 40:
        return 1.15, "Moderate increase - good performance"
    if roi < 2:
        return 0.6, "Significant reduction - poor performance"
    if roi < 3 or share > 60:
        return 0.8, "Reduce allocation - low ROI or oversaturated"
    return 1.0, "Maintain current allocation"


def to_media_mix_optimization(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["channel", "current_spend", "current_roi", "optimized_spend", "optimized_roi",
               "spend_change", "nr_impact", "efficiency", "recommendation"]
    contrib = to_channel_contribution(records)
    if contrib.empty:
        return empty_frame(columns)
    total = contrib["spend"].sum()
    share = safe_ratio(contrib["spend"], total, 100)
    rules = [reallocation_rule(roi, s) for roi, s in zip(contrib["roi"], share)]
    multiplier = np.array([m for m, _ in rules])

    out = pd.DataFrame({"channel": contrib["channel"], "current_spend": contrib["spend"], "current_roi": contrib["roi"]})
    out["optimized_spend"] = out["current_spend"] * multiplier
    out["optimized_roi"] = out["current_roi"] * np.where(multiplier < 1, 1.1, 0.95)
    out["spend_change"] = safe_ratio(out["optimized_spend"] - out["current_spend"], out["current_spend"], 100)
    out["nr_impact"] = out["optimized_spend"] * out["optimized_roi"] - contrib["nr"]
    out["efficiency"] = out["current_roi"] * share
    out["recommendation"] = [r for _, r in rules]
    return sort_desc(out[columns], "efficiency")


def _mix_roi_factor(share: int, heavy: float, light: float) -> float:
    if share > 60:
        return heavy
    if share < 40:
        return light
    return 1.0


def to_budget_allocation_scenarios(records: pd.DataFrame, budget_scenario: str = "Current") -> pd.DataFrame:
    """
    TV/digital splits of the (possibly resized) budget. Heavy weighting of
    either side costs ROI, light weighting gains it, and riskier mixes are
    discounted in the efficiency score.
    """
    if budget_scenario not in BUDGET_SCENARIOS:
        raise ValueError(f"budget_scenario must be one of {tuple(BUDGET_SCENARIOS)}, got {budget_scenario!r}")
    columns = ["scenario", "total_budget", "tv_spend", "digital_spend", "total_roi", "total_nr",
               "tv_share", "digital_share", "efficiency", "risk_level"]
    if records.empty:
        return empty_frame(columns)
    total_spend, _, base_roi = portfolio_totals(records)
    budget = total_spend * BUDGET_SCENARIOS[budget_scenario]

    rows = []
    for scenario, tv_share, digital_share, risk in ALLOCATION_MIXES:
        tv_spend = budget * tv_share / 100
        digital_spend = budget * digital_share / 100
        tv_roi = base_roi * _mix_roi_factor(tv_share, 0.9, 1.1)
        digital_roi = base_roi * _mix_roi_factor(digital_share, 0.95, 1.15)
        total_roi = safe_ratio(tv_spend * tv_roi + digital_spend * digital_roi, budget)
        rows.append({
            "scenario": scenario,
            "total_budget": budget,
            "tv_spend": tv_spend,
            "digital_spend": digital_spend,
            "total_roi": total_roi,
            "total_nr": budget * total_roi,
            "tv_share": tv_share,
            "digital_share": digital_share,
            "efficiency": total_roi * RISK_DISCOUNT[risk] * 100,
            "risk_level": risk,
        })
    return sort_desc(pd.DataFrame(rows, columns=columns), "efficiency")


def to_roi_vs_reach_optimization(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["channel", "current_spend", "current_roi", "current_reach", "optimized_spend",
               "optimized_roi", "optimized_reach", "efficiency", "reach_cost"]
    contrib = to_channel_contribution(records)
    if contrib.empty:
        return empty_frame(columns)
    spend, roi = contrib["spend"], contrib["roi"]
    rate = contrib["channel"].map(REACH_RATE).fillna(DEFAULT_REACH_RATE)
    reach = np.minimum(MAX_REACH, spend / 1000 * rate)
    combined = (roi / ROI_NORMALISER + np.minimum(reach / MAX_REACH, 1.0)) / 2
    optimized_spend = spend * (0.8 + combined * 0.4)

    out = pd.DataFrame({
        "channel": contrib["channel"],
        "current_spend": spend,
        "current_roi": roi,
        "current_reach": reach,
        "optimized_spend": optimized_spend,
        "optimized_roi": roi * np.where(optimized_spend > spend, 0.95, 1.05),
        "optimized_reach": reach * np.power(safe_ratio(optimized_spend, spend), 0.6),
        "efficiency": combined * 100,
        "reach_cost": safe_ratio(spend, reach),
    })
    return sort_desc(out, "efficiency")


def saturation_advice(saturation_point: float) -> str:
    if saturation_point > 90:
        return "Operating at peak efficiency"
    if saturation_point > 80:
        return "Near optimal"
    if saturation_point > 60:
        return "Room for growth"
    return "High saturation, reduce spend"


def to_channel_saturation_analysis(records: pd.DataFrame) -> pd.DataFrame:
    """
    Each channel's ROI at 0.5x to 3x its current spend under a power-law
    decay, with saturation_point the ROI retained (%) at that level.
    """
    columns = ["channel", "spend_level", "roi", "saturation_point", "recommendation"]
    contrib = to_channel_contribution(records)
    if contrib.empty:
        return empty_frame(columns)
    rows = []
    for channel, roi in zip(contrib["channel"], contrib["roi"]):
        rate = SATURATION_RATE.get(channel, DEFAULT_SATURATION_RATE)
        for level in SPEND_LEVELS:
            retained = level ** -rate
            rows.append({
                "channel": channel,
                "spend_level": level,
                "roi": roi * retained,
                "saturation_point": retained * 100,
                "recommendation": saturation_advice(retained * 100),
            })
    return pd.DataFrame(rows, columns=columns)
