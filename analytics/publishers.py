# Publisher views. Rows without a publisher (TV, promo, owned, earned) are
# outside every table here.

import numpy as np
import pandas as pd

from data_gen.random_source import make_rng

from .common import ESTIMATE_SEED, as_dates, empty_frame, safe_ratio, sort_desc, sum_by, with_roi

# Reach points per thousand dollars
PUBLISHER_REACH_RATE = {"Meta": 15, "Google": 12, "TikTok": 18}
DEFAULT_REACH_RATE = 10
MAX_REACH = 80

KEY_LEARNINGS = {
    "Meta": "Video creative with broad targeting drives highest engagement",
    "Google": "Search intent targeting with responsive ads maximizes conversions",
    "TikTok": "Short-form video with engagement buying type resonates with younger audiences",
    "Amazon": "Product-focused creative with purchase intent targeting drives sales",
    "YouTube": "Longer video content with awareness campaigns builds brand equity",
    "DV360": "Programmatic buying with 1st party data delivers efficient reach",
}
DEFAULT_LEARNING = "Optimize creative and targeting for platform-specific audience behavior"

GROWTH_BAND = 5.0


def _published(records: pd.DataFrame) -> pd.DataFrame:
    return records[records["publisher"].notna()]


def to_publisher_roi_vs_scale(records: pd.DataFrame) -> pd.DataFrame:
    """Scale (spend, share of publisher spend) against return (ROI, NR per 1000 impressions)."""
    columns = ["publisher", "total_spend", "avg_roi", "efficiency", "reach", "market_share"]
    published = _published(records)
    if published.empty:
        return empty_frame(columns)
    out = with_roi(sum_by(published, "publisher", ("spend", "nr", "impressions")), out="avg_roi")
    out["efficiency"] = safe_ratio(out["nr"], out["impressions"], 1000)
    rate = out["publisher"].map(PUBLISHER_REACH_RATE).fillna(DEFAULT_REACH_RATE)
    out["reach"] = np.minimum(MAX_REACH, out["spend"] / 1000 * rate)
    out["market_share"] = safe_ratio(out["spend"], out["spend"].sum(), 100)
    out = out.rename(columns={"spend": "total_spend"})
    return sort_desc(out[columns], "total_spend")


def to_cross_country_publisher(records: pd.DataFrame) -> pd.DataFrame:
    """Publisher x market ROI and CPM; local_rank is the ROI rank within the market (1 = best)."""
    columns = ["publisher", "market", "roi", "spend", "cpm", "local_rank"]
    published = _published(records)
    if published.empty:
        return empty_frame(columns)
    out = with_roi(sum_by(published, ["publisher", "market"], ("spend", "nr", "impressions")))
    out["cpm"] = safe_ratio(out["spend"], out["impressions"], 1000)
    out["local_rank"] = out.groupby("market")["roi"].rank(method="first", ascending=False).astype(int)
    return sort_desc(out[columns], "roi")


def _best_by_roi(frame: pd.DataFrame, key: str) -> pd.Series:
    """Per publisher, the value of key with the highest ROI; ties go to the first seen."""
    sub = frame[frame[key].notna()]
    if sub.empty:
        return pd.Series(dtype=object)
    sums = with_roi(sum_by(sub, ["publisher", key]))
    best = sums.loc[sums.groupby("publisher", sort=False)["roi"].idxmax()]
    return best.set_index("publisher")[key]


def to_publisher_winning_tactics(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["publisher", "best_format", "best_targeting", "best_buying_type", "avg_roi", "success_rate", "key_learning"]
    published = _published(records)
    if published.empty:
        return empty_frame(columns)
    out = with_roi(sum_by(published, "publisher"), out="avg_roi")
    for column, key in (("best_format", "format"), ("best_targeting", "targeting"), ("best_buying_type", "buying_type")):
        out[column] = out["publisher"].map(_best_by_roi(published, key)).fillna("Unknown")
    rng = make_rng(ESTIMATE_SEED)
    out["success_rate"] = 0.6 + rng.random(len(out)) * 0.35
    out["key_learning"] = out["publisher"].map(KEY_LEARNINGS).fillna(DEFAULT_LEARNING)
    return sort_desc(out[columns], "avg_roi")


def _spend_share(records: pd.DataFrame) -> pd.Series:
    if records.empty:
        return pd.Series(dtype=float)
    spend = records.groupby("publisher", sort=False)["spend"].sum()
    return pd.Series(safe_ratio(spend, spend.sum(), 100), index=spend.index)


def to_publisher_share_growth(records: pd.DataFrame) -> pd.DataFrame:
    """
    Share of publisher spend in the second half of the year against the first.
    The split is 1 July of the earliest record's year.
    """
    columns = ["publisher", "current_share", "previous_share", "growth", "trend"]
    published = _published(records)
    if published.empty:
        return empty_frame(columns)
    dates = as_dates(published)
    split = pd.Timestamp(year=dates.min().year, month=7, day=1)
    current = _spend_share(published[(dates >= split).to_numpy()])
    previous = _spend_share(published[(dates < split).to_numpy()])

    publishers = pd.unique(pd.concat([pd.Series(current.index), pd.Series(previous.index)]))
    out = pd.DataFrame({"publisher": publishers})
    out["current_share"] = out["publisher"].map(current).fillna(0.0).astype(float)
    out["previous_share"] = out["publisher"].map(previous).fillna(0.0).astype(float)
    out["growth"] = safe_ratio(out["current_share"] - out["previous_share"], out["previous_share"], 100)
    out["trend"] = np.select([out["growth"] > GROWTH_BAND, out["growth"] < -GROWTH_BAND], ["Growing", "Declining"], "Stable")
    return sort_desc(out, "current_share")


def to_creative_format_by_publisher(records: pd.DataFrame) -> pd.DataFrame:
    columns = ["publisher", "format", "spend", "nr", "roi", "share_of_publisher"]
    published = _published(records)
    published = published[published["format"].notna()]
    if published.empty:
        return empty_frame(columns)
    out = with_roi(sum_by(published, ["publisher", "format"]))
    publisher_spend = out.groupby("publisher", sort=False)["spend"].transform("sum")
    out["share_of_publisher"] = safe_ratio(out["spend"], publisher_spend, 100)
    return sort_desc(out[columns], "roi")
