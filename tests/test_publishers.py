import pytest

from analytics import (
    to_creative_format_by_publisher,
    to_cross_country_publisher,
    to_publisher_roi_vs_scale,
    to_publisher_share_growth,
    to_publisher_winning_tactics,
)


def test_roi_vs_scale(records):
    out = to_publisher_roi_vs_scale(records)
    assert set(out["publisher"]) == {"DV360", "Meta", "Google", "YouTube", "TikTok", "Amazon"}
    assert out["market_share"].sum() == pytest.approx(100.0)
    assert out["total_spend"].is_monotonic_decreasing
    assert (out["reach"] <= 80).all()


def test_local_rank_within_market(records):
    out = to_cross_country_publisher(records)
    for _, group in out.groupby("market"):
        ranked = group.sort_values("local_rank")
        assert list(ranked["local_rank"]) == list(range(1, len(group) + 1))
        assert ranked["roi"].is_monotonic_decreasing


def test_winning_tactics_pick_best_roi(make_records):
    rows = make_records([
        {"publisher": "Meta", "format": "Video", "targeting": "CDP 1P", "buying_type": "Click", "spend": 10.0, "nr": 80.0},
        {"publisher": "Meta", "format": "Static", "targeting": "BAU W25-54", "buying_type": "Lead", "spend": 10.0, "nr": 20.0},
        {"publisher": "Google", "format": "Static", "spend": 10.0, "nr": 10.0},
    ])
    out = to_publisher_winning_tactics(rows).set_index("publisher")
    meta = out.loc["Meta"]
    assert (meta["best_format"], meta["best_targeting"], meta["best_buying_type"]) == ("Video", "CDP 1P", "Click")
    assert meta["avg_roi"] == 5.0
    assert out.loc["Google", "best_buying_type"] == "Unknown"
    assert out.loc["Google", "key_learning"].startswith("Search intent")
    assert 0.6 <= meta["success_rate"] <= 0.95


def test_share_growth_splits_the_year(make_records):
    rows = make_records([
        {"date": "2024-02-01", "publisher": "Meta", "spend": 50.0},
        {"date": "2024-02-01", "publisher": "Google", "spend": 50.0},
        {"date": "2024-08-01", "publisher": "Meta", "spend": 75.0},
        {"date": "2024-08-01", "publisher": "Google", "spend": 25.0},
        {"date": "2024-08-01", "publisher": "TikTok", "spend": 0.0},
    ])
    out = to_publisher_share_growth(rows).set_index("publisher")
    assert out.loc["Meta", "growth"] == pytest.approx(50.0)
    assert out.loc["Meta", "trend"] == "Growing"
    assert out.loc["Google", "trend"] == "Declining"
    # no first-half share, so no growth figure
    assert out.loc["TikTok", "growth"] == 0.0


def test_creative_format_shares(records):
    out = to_creative_format_by_publisher(records)
    shares = out.groupby("publisher")["share_of_publisher"].sum()
    assert shares.round(6).eq(100.0).all()
