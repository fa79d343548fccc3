# Contribution views: where spend goes and what it returns, per dimension.

import pandas as pd

from .common import (
    empty_frame,
    portfolio_totals,
    safe_ratio,
    sample_series,
    sort_desc,
    sum_by,
    with_roi,
)

MAX_SCATTER_POINTS = 1000


def to_channel_contribution(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["channel", "spend", "nr", "roi"])
    return sort_desc(with_roi(sum_by(records, "channel")), "nr")


def to_brand_performance(records: pd.DataFrame) -> pd.DataFrame:
    """Per brand: spend, NR, ROI, reach and share of portfolio NR (%)."""
    if records.empty:
        return empty_frame(["brand", "spend", "nr", "reach", "roi", "nr_share"])
    out = with_roi(sum_by(records, "brand", ("spend", "nr", "reach")))
    out["nr_share"] = safe_ratio(out["nr"], out["nr"].sum(), 100)
    return sort_desc(out, "nr")


def to_market_performance(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["market", "market_group", "spend", "nr", "impressions", "roi", "cpm", "nr_per_impression"])
    out = with_roi(sum_by(records, ["market", "market_group"], ("spend", "nr", "impressions")))
    out["cpm"] = safe_ratio(out["spend"], out["impressions"], 1000)
    out["nr_per_impression"] = safe_ratio(out["nr"], out["impressions"])
    return sort_desc(out, "nr")


def to_publisher_bench(records: pd.DataFrame) -> pd.DataFrame:
    # rows without a publisher (TV, promo, owned) drop out of the groupby
    if records.empty:
        return empty_frame(["publisher", "spend", "nr", "roi"])
    return sort_desc(with_roi(sum_by(records, "publisher")), "roi")


def to_format_performance(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["format", "spend", "nr", "roi"])
    frame = records.assign(format=records["format"].fillna("Unknown"))
    return with_roi(sum_by(frame, "format"))


def to_copy_length_performance(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["length", "spend", "nr", "roi"])
    lengths = records["copy_length_sec"]
    label = lengths.astype("Int64").astype(str) + "s"
    label = label.where(lengths.notna() & (lengths.fillna(0) != 0), "N/A")
    return with_roi(sum_by(records.assign(length=label.to_numpy()), "length"))


def media_cluster(records: pd.DataFrame) -> pd.Series:
    """Promo wins over retail, retail over consumer; anything else is Other."""
    cluster = pd.Series("Other", index=records.index)
    cluster = cluster.mask(records["is_consumer_media"].astype(bool), "Consumer Media")
    cluster = cluster.mask(records["is_retail_media"].astype(bool), "Retail Media")
    cluster = cluster.mask(records["is_promo"].astype(bool), "Promo")
    return cluster


def to_consumer_vs_retail_promo(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["cluster", "spend", "nr"])
    return sort_desc(sum_by(records.assign(cluster=media_cluster(records)), "cluster"), "nr")


def to_vtr_viewability_impact(records: pd.DataFrame) -> pd.DataFrame:
    """Mean VTR and viewability over rows that carry them; NaN for channels with none."""
    if records.empty:
        return empty_frame(["channel", "vtr", "viewability", "roi"])
    out = records.groupby("channel", sort=False).agg(
        spend=("spend", "sum"),
        nr=("nr", "sum"),
        vtr=("vtr", "mean"),
        viewability=("viewability", "mean"),
    ).reset_index()
    out = with_roi(out)
    return out[["channel", "vtr", "viewability", "roi"]]


def to_roi_vs_spend(records: pd.DataFrame, max_points: int = MAX_SCATTER_POINTS) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["spend", "roi", "channel"])
    points = records[["spend", "roi", "channel"]].reset_index(drop=True)
    return sample_series(points, max_points)


def to_daypart_prime_ratio(records: pd.DataFrame) -> dict:
    """Spend on Prime and Off-Prime dayparts; rows without a daypart count for neither."""
    prime = float(records.loc[records["daypart"] == "Prime", "spend"].sum())
    off_prime = float(records.loc[records["daypart"] == "Off-Prime", "spend"].sum())
    return {"prime": prime, "off_prime": off_prime}


def kpi_summary(records: pd.DataFrame) -> dict:
    """Headline numbers for the overview page."""
    spend, nr, roi = portfolio_totals(records)
    summary = {
        "total_spend": spend,
        "total_nr": nr,
        "roi": roi,
        "avg_reach": float(records["reach"].mean()) if len(records) else 0.0,
        "channel_count": int(records["channel"].nunique()) if len(records) else 0,
        "top_channel": None,
        "top_brand": None,
        "top_market": None,
    }
    if records.empty:
        return summary
    for key, column in (("top_channel", "channel"), ("top_brand", "brand"), ("top_market", "market")):
        nr_by = records.groupby(column, sort=False)["nr"].sum()
        summary[key] = nr_by.idxmax()
    return summary
