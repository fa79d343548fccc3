# Flighting views: how the same budget performs under different on/off
# schedules, and a quarterly competitive read.

import numpy as np
import pandas as pd

from data_gen.random_source import make_rng

from .common import ESTIMATE_SEED, as_dates, empty_frame, portfolio_totals, safe_ratio, sort_desc

# scenario, pattern, efficiency label, recommendation, ROI multiplier, weeks active
FLIGHTING_SCENARIOS = (
    ("Always On", "Continuous", "High", "Maintain consistent presence", 1.0, 52),
    ("1 Week On / 1 Week Off", "Alternating", "Very High", "Maximize impact with concentrated bursts", 1.25, 26),
    ("2 Weeks On / 2 Weeks Off", "Burst", "High", "Build awareness then let decay naturally", 1.15, 26),
    ("4 Weeks On / 4 Weeks Off", "Campaign", "Medium", "Seasonal or product launch approach", 0.95, 32),
    ("Front-loaded", "Declining", "Medium", "Quick market penetration strategy", 0.92, 40),
    ("Back-loaded", "Crescendo", "High", "Build momentum toward key periods", 1.18, 44),
)

BUDGET_LEVELS = (
    ("25% Increase", 1.25),
    ("Current Budget", 1.0),
    ("15% Reduction", 0.85),
    ("30% Reduction", 0.7),
    ("50% Increase", 1.5),
)

ALTERNATING_LIFT = 1.25
BURST_LIFT = 1.15

# Our NR as a fraction of the category's
NR_TO_MARKET = 2.5
OTHER_COMPETITORS_SHARE = 1.5
SOV_BAND = 5.0


def to_flighting_scenarios(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["scenario", "pattern", "total_spend", "total_nr", "roi", "avg_weekly_spend",
               "weeks_active", "efficiency", "recommendation"]
    if records.empty:
        return empty_frame(columns)
    total_spend, _, base_roi = portfolio_totals(records)
    rows = []
    for i, (scenario, pattern, efficiency, recommendation, multiplier, weeks) in enumerate(FLIGHTING_SCENARIOS):
        spend = total_spend * (0.8 + i * 0.05)
        roi = base_roi * multiplier
        rows.append({
            "scenario": scenario,
            "pattern": pattern,
            "total_spend": spend,
            "total_nr": spend * roi,
            "roi": roi,
            "avg_weekly_spend": spend / weeks,
            "weeks_active": weeks,
            "efficiency": efficiency,
            "recommendation": recommendation,
        })
    return sort_desc(pd.DataFrame(rows, columns=columns), "roi")


def to_flight_pattern_timeseries(records: pd.DataFrame, origin=None) -> pd.DataFrame:
    """
    Weekly spend and NR replayed as always-on, alternating (1 on / 1 off) and
    burst (2 on / 2 off) schedules. Week 1 starts at origin, which defaults to
    the earliest record date. On-weeks carry double spend.
    """
    columns = ["week", "always_on_spend", "alternating_spend", "burst_spend",
               "always_on_nr", "alternating_nr", "burst_nr", "saturation_index"]
    if records.empty:
        return empty_frame(columns)
    dates = as_dates(records).dt.normalize()
    start = pd.Timestamp(origin).normalize() if origin is not None else dates.min()
    week = (dates - start).dt.days // 7 + 1
    weekly = records.assign(week=week.to_numpy()).groupby("week")[["spend", "nr"]].sum().reset_index()

    index = np.arange(len(weekly))
    alternating_on = index % 2 == 0
    burst_on = (index // 2) % 2 == 0
    spend, nr = weekly["spend"].to_numpy(), weekly["nr"].to_numpy()
    alternating_spend = np.where(alternating_on, spend * 2, 0.0)
    burst_spend = np.where(burst_on, spend * 2, 0.0)

    return pd.DataFrame({
        "week": weekly["week"].astype(int),
        "always_on_spend": spend,
        "alternating_spend": alternating_spend,
        "burst_spend": burst_spend,
        "always_on_nr": nr,
        "alternating_nr": np.where(alternating_spend > 0, nr * ALTERNATING_LIFT, 0.0),
        "burst_nr": np.where(burst_spend > 0, nr * BURST_LIFT, 0.0),
        "saturation_index": np.minimum(100, safe_ratio(nr, spend, 20)),
    })


def to_budget_scenarios(records: pd.DataFrame) -> pd.DataFrame:
    """
    Each budget level split two ways. The ROI-maximising plan spends 95 % of
    the budget and gains 10 % efficiency on cuts but loses 5 % on increases;
    the volume-maximising plan spends it all and loses 10 % on increases.
    """
    columns = ["budget_level", "total_budget", "roi_optimal_spend", "sales_optimal_spend",
               "roi_optimal_nr", "sales_optimal_nr", "roi_optimal_roi", "sales_optimal_roi", "efficiency"]
    if records.empty:
        return empty_frame(columns)
    total_spend, _, base_roi = portfolio_totals(records)
    rows = []
    for level, multiplier in BUDGET_LEVELS:
        budget = total_spend * multiplier
        roi_spend = budget * 0.95
        roi_nr = roi_spend * base_roi * (1.1 if multiplier < 1 else 0.95)
        sales_spend = budget
        sales_nr = sales_spend * base_roi * (0.9 if multiplier > 1 else 1.0)
        rows.append({
            "budget_level": level,
            "total_budget": budget,
            "roi_optimal_spend": roi_spend,
            "sales_optimal_spend": sales_spend,
            "roi_optimal_nr": roi_nr,
            "sales_optimal_nr": sales_nr,
            "roi_optimal_roi": safe_ratio(roi_nr, roi_spend),
            "sales_optimal_roi": safe_ratio(sales_nr, sales_spend),
            "efficiency": safe_ratio(roi_nr + sales_nr, roi_spend + sales_spend, 100),
        })
    return sort_desc(pd.DataFrame(rows, columns=columns), "efficiency")


def flight_timing_recommendations() -> pd.DataFrame:
    return pd.DataFrame([
        {"timing": "Q1 Launch", "scenario": "Front-loaded burst (4 weeks)", "expected_lift": 35,
         "confidence": "High", "best_channels": "TV + Digital",
         "reasoning": "New year motivation, less competitive noise",
         "implementation": "80% spend in first 4 weeks, maintain presence with 20%"},
        {"timing": "Pre-Season", "scenario": "2 weeks on / 1 week off", "expected_lift": 28,
         "confidence": "High", "best_channels": "Digital + Retail",
         "reasoning": "Build anticipation before peak demand period",
         "implementation": "Start 6-8 weeks before season, increase frequency"},
        {"timing": "Peak Season", "scenario": "Always on with pulse", "expected_lift": 22,
         "confidence": "Medium", "best_channels": "All channels",
         "reasoning": "Maintain share during high competition",
         "implementation": "Base level + 50% boost during key weeks"},
        {"timing": "Post-Holiday", "scenario": "1 week on / 2 weeks off", "expected_lift": 18,
         "confidence": "Medium", "best_channels": "Digital focus",
         "reasoning": "Budget-conscious period, need efficiency",
         "implementation": "Concentrated digital bursts with strategic timing"},
        {"timing": "Summer Lull", "scenario": "Minimal presence", "expected_lift": 8,
         "confidence": "Low", "best_channels": "Owned + Earned",
         "reasoning": "Low engagement period, preserve budget",
         "implementation": "10-20% of normal spend, focus on retention"},
        {"timing": "Back-to-School", "scenario": "Crescendo build", "expected_lift": 25,
         "confidence": "High", "best_channels": "TV + Social",
         "reasoning": "Routine change creates new habits",
         "implementation": "Start low, build to 3x normal spend by week 3"},
    ])


def competitive_position(sov_minus_share: float):
    if sov_minus_share > SOV_BAND:
        return "Over-spending", "Reduce spend or improve efficiency"
    if sov_minus_share < -SOV_BAND:
        return "Efficient", "Opportunity to increase investment"
    return "Balanced", "Maintain current balance"


def to_competitive_flight_analysis(records: pd.DataFrame) -> pd.DataFrame:
    """
    Share of voice against share of market per calendar quarter, with a
    synthetic main competitor spending 80-140 % of our quarterly spend.
    """
    columns = ["period", "our_spend", "competitor_spend", "market_share", "share_of_voice",
               "efficiency", "competitive_advantage", "recommendation"]
    if records.empty:
        return empty_frame(columns)
    period = ("Q" + as_dates(records).dt.quarter.astype(str)).to_numpy()
    quarterly = records.assign(period=period).groupby("period")[["spend", "nr"]].sum()

    rng = make_rng(ESTIMATE_SEED)
    rows = []
    for period, (spend, nr) in quarterly.iterrows():
        competitor = spend * (0.8 + rng.random() * 0.6)
        market_spend = spend + competitor + spend * OTHER_COMPETITORS_SHARE
        market_share = safe_ratio(nr, nr * NR_TO_MARKET, 100)
        share_of_voice = safe_ratio(spend, market_spend, 100)
        advantage, recommendation = competitive_position(share_of_voice - market_share)
        rows.append({
            "period": period,
            "our_spend": spend,
            "competitor_spend": competitor,
            "market_share": market_share,
            "share_of_voice": share_of_voice,
            "efficiency": safe_ratio(nr, spend),
            "competitive_advantage": advantage,
            "recommendation": recommendation,
        })
    return pd.DataFrame(rows, columns=columns)
