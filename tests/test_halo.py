import pandas as pd
import pytest

from analytics import (
    optimal_timing_recommendations,
    to_brand_halo,
    to_channel_synergy_matrix,
    to_cross_channel_lift,
    to_media_sync_table,
    to_portfolio_correlation,
    to_temporal_synergy,
)
from analytics.halo import LIFT_PAIRS, synergy_index


def test_synergy_matrix(dataset):
    out = to_channel_synergy_matrix(dataset.channel_synergy)
    assert len(out) == len(dataset.channel_synergy)
    assert out["synergy_score"].is_monotonic_decreasing
    assert (out["lift_percent"] == (out["synergy_score"] - 1) * 100).all()


def test_brand_halo_filters_on_target(dataset):
    out = to_brand_halo(dataset.halo, "Brand B")
    assert len(out) == 5
    assert (out["target_brand"] == "Brand B").all()
    assert out["halo_effect"].is_monotonic_decreasing
    assert len(to_brand_halo(dataset.halo)) == 30


def test_synergy_index_rules():
    idx = synergy_index([10, 10, 0, 0], [10, 0, 5, 0])
    assert list(idx) == [1.5, 0.5, 0.5, 0.0]


def test_temporal_synergy(records):
    out = to_temporal_synergy(records)
    assert len(out) == 366
    assert out["total_nr"].sum() == pytest.approx(records["nr"].sum())
    assert out["synergy_index"].between(1.0, 1.5).all()


def test_portfolio_correlation(records):
    out = to_portfolio_correlation(records)
    assert set(out["brand"]) == set(records["brand"])
    assert out["correlation_strength"].between(0, 1).all()
    assert out["correlation_strength"].is_monotonic_decreasing


def test_media_sync_table(dataset):
    out = to_media_sync_table(dataset.channel_synergy)
    assert out["optimal_lag"].between(0, 6).all()
    assert out["lift_when_synced"].is_monotonic_decreasing
    top = out.iloc[0]
    if top["lift_when_synced"] > 30:
        assert top["recommendation"].startswith("High Priority")


def test_cross_channel_lift_reads_the_synergy_matrix(make_records):
    rows = make_records([
        {"channel": "Linear TV", "spend": 100.0, "nr": 400.0},
        {"channel": "Meta", "spend": 100.0, "nr": 300.0},
    ])
    synergy = pd.DataFrame({
        "channel_a": ["Linear TV", "Linear TV"],
        "channel_b": ["Meta", "Google"],
        "strength": [1.2, 0.9],
    })
    out = to_cross_channel_lift(rows, synergy).set_index(["base_channel", "support_channel"])
    # CTV and Google are absent as bases
    assert set(out.index.get_level_values(0)) == {"Linear TV", "Meta"}
    tv_meta = out.loc[("Linear TV", "Meta")]
    assert tv_meta["base_roi"] == 4.0
    assert tv_meta["lifted_roi"] == pytest.approx(4.8)
    assert tv_meta["incremental_lift"] == pytest.approx(20.0)
    # factors below 1 are floored
    assert out.loc[("Linear TV", "Google"), "lifted_roi"] == 4.0


def test_cross_channel_lift_on_real_data(records, dataset):
    out = to_cross_channel_lift(records, dataset.channel_synergy)
    assert len(out) == len(LIFT_PAIRS)
    assert (out["lifted_roi"] >= out["base_roi"]).all()
    assert out["incremental_lift"].is_monotonic_decreasing


def test_timing_recommendations_table():
    out = optimal_timing_recommendations()
    assert len(out) == 5
    assert {"scenario", "timing", "expected_lift", "confidence", "action"} == set(out.columns)
