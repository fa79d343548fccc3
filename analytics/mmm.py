# Marketing-mix style read-outs over the panel. These are fixed-share
# decompositions and a closed-form saturation curve, not fitted models.

import numpy as np
import pandas as pd

from .common import (
    as_dates,
    empty_frame,
    iso_week_key,
    portfolio_totals,
    safe_ratio,
    sort_asc,
    sort_desc,
    sum_by,
    with_roi,
)

# Share of NR credited to each driver in the weekly decomposition
BASE_SHARE = 0.35
MEDIA_SHARE = 0.40
PROMO_SHARE = 0.20
NON_PROMO_SHARE = 0.15

INCREMENTAL_SHARE = 0.65

# Share of a channel's NR realised in the short term; the rest is carryover
SHORT_TERM_RATES = {
    "Linear TV": 0.3,
    "CTV": 0.35,
    "OLV": 0.45,
    "BVOD": 0.4,
    "Meta": 0.7,
    "Google": 0.8,
    "TikTok": 0.65,
    "Amazon": 0.85,
    "Promo": 0.95,
    "Owned": 0.5,
    "Earned": 0.6,
}
DEFAULT_SHORT_TERM_RATE = 0.6

ATTRIBUTION_WEIGHTS = {
    "first_touch": 0.2,
    "last_touch": 0.4,
    "linear": 0.25,
    "time_decay": 0.3,
    "position_based": 0.35,
}

SATURATION_STEPS = 30
SATURATION_SPAN = 3.0        # curve runs to 3x current spend
SATURATION_SCALE = 1.2       # spend at which saturation reaches 1 - 1/e, as a multiple of current
SATURATION_PENALTY = 0.4
SATURATION_EXPONENT = 1.5


def short_term_rate(channel: str) -> float:
    return SHORT_TERM_RATES.get(channel, DEFAULT_SHORT_TERM_RATE)


def to_media_contribution_decomposition(records: pd.DataFrame) -> pd.DataFrame:
    """Weekly NR split into base, media, promo and a non-negative remainder."""
    columns = ["week", "base", "media", "promo", "other", "total"]
    if records.empty:
        return empty_frame(columns)
    nr = records["nr"]
    promo = np.where(records["channel"] == "Promo", PROMO_SHARE, NON_PROMO_SHARE) * nr
    frame = pd.DataFrame({
        "week": iso_week_key(as_dates(records)).to_numpy(),
        "base": nr.to_numpy() * BASE_SHARE,
        "media": nr.to_numpy() * MEDIA_SHARE,
        "promo": np.asarray(promo),
    })
    frame["other"] = np.maximum(0.0, nr.to_numpy() - frame["base"] - frame["media"] - frame["promo"])
    frame["total"] = nr.to_numpy()
    out = frame.groupby("week", sort=False)[columns[1:]].sum().reset_index()
    return sort_asc(out, "week")


def to_short_vs_long_term(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["channel", "short_term", "long_term", "total_impact"])
    out = sum_by(records, "channel", ("nr",)).rename(columns={"nr": "total_impact"})
    rates = out["channel"].map(short_term_rate)
    out["short_term"] = out["total_impact"] * rates
    out["long_term"] = out["total_impact"] * (1 - rates)
    return sort_desc(out[["channel", "short_term", "long_term", "total_impact"]], "total_impact")


def to_saturation_curve(records: pd.DataFrame) -> pd.DataFrame:
    """
    Portfolio response projected from zero to three times current spend.

    saturation = 1 - exp(-s / (1.2 * current spend)); efficiency falls from the
    current ROI by up to 40 % as saturation^1.5 grows. Projected NR is spend
    times efficiency and marginal ROI is the step-wise slope of that curve.
    Empty when there is no spend to project from.
    """
    columns = ["spend", "nr", "roi", "saturation", "marginal_roi"]
    total_spend, _, base_efficiency = portfolio_totals(records)
    if total_spend <= 0:
        return empty_frame(columns)

    spend = np.linspace(0.0, total_spend * SATURATION_SPAN, SATURATION_STEPS + 1)
    saturation = 1 - np.exp(-spend / (total_spend * SATURATION_SCALE))
    efficiency = base_efficiency * (1 - saturation ** SATURATION_EXPONENT * SATURATION_PENALTY)
    nr = spend * efficiency

    marginal = np.empty_like(nr)
    marginal[0] = efficiency[0]
    marginal[1:] = safe_ratio(np.diff(nr), np.diff(spend))

    return pd.DataFrame({
        "spend": spend,
        "nr": nr,
        "roi": safe_ratio(nr, spend),
        "saturation": saturation * 100,
        "marginal_roi": marginal,
    })


def to_media_efficiency_frontier(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["channel", "reach", "frequency", "spend", "nr", "impressions", "roi", "cpm", "efficiency"]
    if records.empty:
        return empty_frame(columns)
    # zero frequency counts as a single exposure
    frame = records.assign(frequency=records["frequency"].where(records["frequency"] > 0, 1.0))
    out = with_roi(sum_by(frame, "channel", ("reach", "frequency", "spend", "nr", "impressions")))
    out["cpm"] = safe_ratio(out["spend"], out["impressions"], 1000)
    out["efficiency"] = safe_ratio(out["reach"] * out["frequency"], out["spend"])
    return out[columns]


def to_incremental_impact(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["week", "baseline_nr", "incremental_nr", "total_nr"]
    if records.empty:
        return empty_frame(columns)
    frame = records.assign(week=iso_week_key(as_dates(records)).to_numpy())
    out = sum_by(frame, "week", ("nr",)).rename(columns={"nr": "total_nr"})
    out["baseline_nr"] = out["total_nr"] * (1 - INCREMENTAL_SHARE)
    out["incremental_nr"] = out["total_nr"] * INCREMENTAL_SHARE
    return sort_asc(out[columns], "week")


def to_channel_attribution(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["channel"] + list(ATTRIBUTION_WEIGHTS) + ["total_nr"]
    if records.empty:
        return empty_frame(columns)
    out = sum_by(records, "channel", ("nr",)).rename(columns={"nr": "total_nr"})
    for model, weight in ATTRIBUTION_WEIGHTS.items():
        out[model] = out["total_nr"] * weight
    return sort_desc(out[columns], "total_nr")
