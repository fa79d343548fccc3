import pytest

from analytics import (
    kpi_summary,
    to_brand_performance,
    to_channel_contribution,
    to_consumer_vs_retail_promo,
    to_copy_length_performance,
    to_daypart_prime_ratio,
    to_format_performance,
    to_market_performance,
    to_publisher_bench,
    to_roi_vs_spend,
    to_vtr_viewability_impact,
)


def test_ten_meta_rows_collapse_to_one(make_records):
    rows = make_records([{"channel": "Meta", "spend": 100.0, "nr": 500.0}] * 10)
    out = to_channel_contribution(rows)
    assert out.to_dict("records") == [{"channel": "Meta", "spend": 1000.0, "nr": 5000.0, "roi": 5.0}]


def test_zero_spend_group_has_zero_roi(make_records):
    rows = make_records([{"channel": "Owned", "spend": 0.0, "nr": 50.0}])
    assert to_channel_contribution(rows)["roi"].iloc[0] == 0.0


def test_channel_contribution_reconciles_and_sorts(records):
    out = to_channel_contribution(records)
    assert out["spend"].sum() == pytest.approx(records["spend"].sum())
    assert out["nr"].sum() == pytest.approx(records["nr"].sum())
    assert out["nr"].is_monotonic_decreasing
    assert set(out["channel"]) == set(records["channel"])


def test_brand_and_market_performance(records):
    brands = to_brand_performance(records)
    assert brands["nr_share"].sum() == pytest.approx(100.0)
    markets = to_market_performance(records)
    assert (markets["cpm"] > 0).all()
    assert markets["spend"].sum() == pytest.approx(records["spend"].sum())


def test_publisher_bench_skips_rows_without_publisher(records):
    out = to_publisher_bench(records)
    assert set(out["publisher"]) == set(records["publisher"].dropna())
    assert out["roi"].is_monotonic_decreasing


def test_format_and_copy_length(make_records):
    rows = make_records([
        {"format": "Video", "copy_length_sec": 15, "spend": 10.0, "nr": 30.0},
        {"format": "Static", "copy_length_sec": None, "spend": 10.0, "nr": 10.0},
        {"format": "Video", "copy_length_sec": 15, "spend": 10.0, "nr": 10.0},
    ])
    fmt = to_format_performance(rows)
    assert list(fmt["format"]) == ["Video", "Static"]
    assert list(fmt["roi"]) == [2.0, 1.0]
    lengths = to_copy_length_performance(rows)
    assert list(lengths["length"]) == ["15s", "N/A"]


def test_media_clusters(make_records):
    rows = make_records([
        {"channel": "Promo", "is_promo": True, "is_consumer_media": False, "spend": 1.0, "nr": 9.0},
        {"channel": "Amazon", "is_retail_media": True, "is_consumer_media": False, "spend": 1.0, "nr": 5.0},
        {"channel": "Meta", "spend": 1.0, "nr": 1.0},
    ])
    out = to_consumer_vs_retail_promo(rows)
    assert list(out["cluster"]) == ["Promo", "Retail Media", "Consumer Media"]


def test_vtr_viewability_impact_leaves_unmeasured_channels_missing(records):
    out = to_vtr_viewability_impact(records).set_index("channel")
    assert out.loc["Linear TV", ["vtr", "viewability"]].isna().all()
    assert 0 < out.loc["Meta", "vtr"] < 1


def test_roi_vs_spend_is_capped(records):
    out = to_roi_vs_spend(records)
    assert len(out) <= 1000
    assert list(out.columns) == ["spend", "roi", "channel"]


def test_daypart_ratio(make_records):
    rows = make_records([
        {"daypart": "Prime", "spend": 3.0},
        {"daypart": "Off-Prime", "spend": 2.0},
        {"daypart": None, "spend": 7.0},
    ])
    assert to_daypart_prime_ratio(rows) == {"prime": 3.0, "off_prime": 2.0}


def test_kpi_summary(records, empty_records):
    kpis = kpi_summary(records)
    assert kpis["total_spend"] == pytest.approx(records["spend"].sum())
    assert kpis["channel_count"] == 11
    assert kpis["top_channel"] == to_channel_contribution(records)["channel"].iloc[0]
    empty = kpi_summary(empty_records)
    assert empty["roi"] == 0.0
    assert empty["top_brand"] is None
