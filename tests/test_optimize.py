import pytest

from analytics import (
    to_budget_allocation_scenarios,
    to_channel_contribution,
    to_channel_saturation_analysis,
    to_media_mix_optimization,
    to_roi_vs_reach_optimization,
)
from analytics.optimize import reallocation_rule


@pytest.mark.parametrize("roi, share, multiplier", [
    (7.0, 10.0, 1.3),
    (5.0, 30.0, 1.15),
    (5.0, 50.0, 1.0),
    (1.5, 50.0, 0.6),
    (2.5, 10.0, 0.8),
    (3.5, 70.0, 0.8),
    (3.5, 50.0, 1.0),
])
def test_reallocation_rule(roi, share, multiplier):
    assert reallocation_rule(roi, share)[0] == multiplier


def test_media_mix_optimization(make_records):
    rows = make_records([
        {"channel": "Meta", "spend": 10.0, "nr": 100.0},
        {"channel": "Linear TV", "spend": 90.0, "nr": 90.0},
    ])
    out = to_media_mix_optimization(rows).set_index("channel")
    assert out.loc["Meta", "spend_change"] == pytest.approx(30.0)
    assert out.loc["Linear TV", "spend_change"] == pytest.approx(-40.0)
    assert out.loc["Linear TV", "optimized_roi"] == pytest.approx(1.1)
    assert out.loc["Linear TV", "recommendation"].startswith("Significant reduction")


def test_budget_allocation_rejects_unknown_scenario(records):
    with pytest.raises(ValueError):
        to_budget_allocation_scenarios(records, "Double")


def test_budget_allocation_increase(records):
    out = to_budget_allocation_scenarios(records, "Increase")
    assert len(out) == 6
    assert out["total_budget"].eq(out["total_budget"].iloc[0]).all()
    assert out["total_budget"].iloc[0] == pytest.approx(records["spend"].sum() * 1.25)
    assert (out["tv_spend"] + out["digital_spend"]).to_numpy() == pytest.approx(out["total_budget"].to_numpy())
    assert out["efficiency"].is_monotonic_decreasing


def test_roi_vs_reach(records):
    out = to_roi_vs_reach_optimization(records)
    assert out["efficiency"].is_monotonic_decreasing
    assert (out["current_reach"] <= 80).all()
    assert len(out) == records["channel"].nunique()


def test_saturation_levels(records):
    out = to_channel_saturation_analysis(records)
    contrib = to_channel_contribution(records).set_index("channel")
    assert out.groupby("channel").size().eq(5).all()
    at_current = out[out["spend_level"] == 1.0].set_index("channel")
    assert at_current["saturation_point"].eq(100.0).all()
    assert (at_current["recommendation"] == "Operating at peak efficiency").all()
    assert at_current["roi"].to_numpy() == pytest.approx(contrib.loc[at_current.index, "roi"].to_numpy())
    tv = out[out["channel"] == "Linear TV"].set_index("spend_level")
    assert tv.loc[2.0, "saturation_point"] == pytest.approx(2.0 ** -0.2 * 100)
