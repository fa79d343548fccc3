# Halo and synergy views. The matrix views read the generated relationship
# tables; the rest work from the panel records.

import numpy as np
import pandas as pd

from data_gen.random_source import make_rng

from .common import (
    DIGITAL_CHANNELS,
    ESTIMATE_SEED,
    TV_VIDEO_CHANNELS,
    as_dates,
    day_key,
    empty_frame,
    safe_ratio,
    sort_asc,
    sort_desc,
)

# (base, support) channel pairs reported by the cross-channel lift view
LIFT_PAIRS = (
    ("Linear TV", "Meta"),
    ("Linear TV", "Google"),
    ("CTV", "Meta"),
    ("CTV", "TikTok"),
    ("Meta", "Google"),
    ("Google", "Amazon"),
)

MAX_SYNC_LAG_DAYS = 7


def sync_recommendation(lift_percent: float) -> str:
    if lift_percent > 30:
        return "High Priority: Always activate together"
    if lift_percent > 15:
        return "Medium Priority: Coordinate when possible"
    if lift_percent > 5:
        return "Low Priority: Minor synergy benefit"
    return "No synergy: Can activate independently"


def to_channel_synergy_matrix(synergy: pd.DataFrame) -> pd.DataFrame:
    columns = ["channel_1", "channel_2", "synergy_score", "lift_percent"]
    if synergy.empty:
        return empty_frame(columns)
    out = pd.DataFrame({
        "channel_1": synergy["channel_a"].to_numpy(),
        "channel_2": synergy["channel_b"].to_numpy(),
        "synergy_score": synergy["strength"].to_numpy(),
    })
    out["lift_percent"] = (out["synergy_score"] - 1) * 100
    return sort_desc(out, "synergy_score")


def to_brand_halo(halo: pd.DataFrame, target_brand: str = "All") -> pd.DataFrame:
    """Halo strengths into target_brand ("All" keeps every pair), with an incremental NR estimate."""
    columns = ["source_brand", "target_brand", "halo_effect", "incremental_nr"]
    if target_brand not in (None, "All"):
        halo = halo[halo["target_brand"] == target_brand]
    if halo.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    strength = halo["strength"].to_numpy()
    out = pd.DataFrame({
        "source_brand": halo["source_brand"].to_numpy(),
        "target_brand": halo["target_brand"].to_numpy(),
        "halo_effect": strength,
        "incremental_nr": strength * 1000 * (rng.random(len(halo)) * 0.5 + 0.5),
    })
    return sort_desc(out, "halo_effect")


def synergy_index(tv_spend, digital_spend) -> np.ndarray:
    """
    1 + half the spend balance when both TV and digital are live on a day,
    0.5 when only one is, 0 when neither.
    """
    tv = np.asarray(tv_spend, dtype=float)
    digital = np.asarray(digital_spend, dtype=float)
    balance = safe_ratio(np.minimum(tv, digital), np.maximum(tv, digital))
    return np.select(
        [(tv > 0) & (digital > 0), (tv > 0) | (digital > 0)],
        [1 + balance * 0.5, 0.5],
        0.0,
    )


def to_temporal_synergy(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["date", "tv_spend", "digital_spend", "total_nr", "synergy_index"]
    if records.empty:
        return empty_frame(columns)
    spend = records["spend"]
    frame = pd.DataFrame({
        "date": day_key(as_dates(records)).to_numpy(),
        "tv_spend": spend.where(records["channel"].isin(TV_VIDEO_CHANNELS), 0.0).to_numpy(),
        "digital_spend": spend.where(records["channel"].isin(DIGITAL_CHANNELS), 0.0).to_numpy(),
        "total_nr": records["nr"].to_numpy(),
    })
    out = frame.groupby("date", sort=False)[["tv_spend", "digital_spend", "total_nr"]].sum().reset_index()
    out["synergy_index"] = synergy_index(out["tv_spend"], out["digital_spend"])
    return sort_asc(out, "date")


def to_portfolio_correlation(records: pd.DataFrame) -> pd.DataFrame:
    """Per brand totals with a spend-volatility proxy: variance / (mean + 1), capped at 1."""
    columns = ["brand", "spend", "nr", "roi", "correlation_strength"]
    if records.empty:
        return empty_frame(columns)
    out = records.groupby("brand", sort=False).agg(
        spend=("spend", "sum"),
        nr=("nr", "sum"),
        mean_spend=("spend", "mean"),
        var_spend=("spend", lambda s: s.var(ddof=0)),
    ).reset_index()
    out["roi"] = safe_ratio(out["nr"], out["spend"])
    out["correlation_strength"] = np.minimum(1.0, out["var_spend"] / (out["mean_spend"] + 1))
    return sort_desc(out[columns], "correlation_strength")


def to_media_sync_table(synergy: pd.DataFrame) -> pd.DataFrame:
    columns = ["channel_1", "channel_2", "optimal_lag", "lift_when_synced", "recommendation"]
    if synergy.empty:
        return empty_frame(columns)
    rng = make_rng(ESTIMATE_SEED)
    lift = (synergy["strength"].to_numpy() - 1) * 100
    out = pd.DataFrame({
        "channel_1": synergy["channel_a"].to_numpy(),
        "channel_2": synergy["channel_b"].to_numpy(),
        "optimal_lag": rng.integers(0, MAX_SYNC_LAG_DAYS, len(synergy)),
        "lift_when_synced": lift,
        "recommendation": [sync_recommendation(x) for x in lift],
    })
    return sort_desc(out, "lift_when_synced")


def _pair_strength(synergy: pd.DataFrame) -> dict:
    strengths = {}
    for a, b, s in synergy[["channel_a", "channel_b", "strength"]].itertuples(index=False):
        strengths[frozenset((a, b))] = s
    return strengths


def to_cross_channel_lift(records: pd.DataFrame, synergy: pd.DataFrame) -> pd.DataFrame:
    """
    Base-channel ROI lifted by the generated synergy with its support channel.
    The lift factor never drops below 1; pairs whose base channel has no rows
    are left out.
    """
    columns = ["base_channel", "support_channel", "base_roi", "lifted_roi", "incremental_lift"]
    if records.empty:
        return empty_frame(columns)
    strengths = _pair_strength(synergy)
    totals = records.groupby("channel", sort=False)[["spend", "nr"]].sum()

    rows = []
    for base, support in LIFT_PAIRS:
        if base not in totals.index:
            continue
        spend, nr = totals.loc[base, "spend"], totals.loc[base, "nr"]
        base_roi = nr / max(1.0, spend)
        factor = max(1.0, strengths.get(frozenset((base, support)), 1.0))
        rows.append({
            "base_channel": base,
            "support_channel": support,
            "base_roi": base_roi,
            "lifted_roi": base_roi * factor,
            "incremental_lift": (factor - 1) * 100,
        })
    if not rows:
        return empty_frame(columns)
    return sort_desc(pd.DataFrame(rows, columns=columns), "incremental_lift")


def optimal_timing_recommendations() -> pd.DataFrame:
    return pd.DataFrame([
        {"scenario": "TV + Digital Launch", "timing": "Simultaneous activation", "expected_lift": 25,
         "confidence": "High", "action": "Launch TV and Meta campaigns same day for maximum awareness"},
        {"scenario": "Seasonal Campaign", "timing": "TV 1 week before digital", "expected_lift": 18,
         "confidence": "Medium", "action": "Build awareness with TV, then amplify with targeted digital"},
        {"scenario": "Product Launch", "timing": "Digital 3 days after TV", "expected_lift": 22,
         "confidence": "High", "action": "TV for broad reach, digital for consideration conversion"},
        {"scenario": "Promotion Support", "timing": "Retail media 2 days after brand campaign", "expected_lift": 15,
         "confidence": "Medium", "action": "Brand awareness first, then drive purchase intent"},
        {"scenario": "Cross-Portfolio", "timing": "Stagger by 1 week across brands", "expected_lift": 12,
         "confidence": "Low", "action": "Avoid cannibalization, build portfolio momentum"},
    ])
