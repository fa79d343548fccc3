import pytest

from analytics import (
    to_audience_segment_matrix,
    to_first_party_performance,
    to_funnel_budget_allocation,
    to_funnel_conversion_flow,
    to_reach_frequency_by_funnel,
    to_targeting_vs_bau,
)


def test_targeting_vs_bau_lift(make_records):
    rows = make_records([
        {"targeting": "BAU W25-54", "spend": 100.0, "nr": 200.0, "impressions": 1000},
        {"targeting": "CDP 1P", "spend": 100.0, "nr": 300.0, "impressions": 1000},
    ])
    out = to_targeting_vs_bau(rows).set_index("targeting")
    assert out.loc["BAU W25-54", "vs_bau_lift"] == 0.0
    assert out.loc["CDP 1P", "vs_bau_lift"] == pytest.approx(50.0)
    assert out.loc["CDP 1P", "efficiency"] == pytest.approx(300.0)


def test_targeting_vs_bau_without_baseline(make_records):
    rows = make_records([{"targeting": "CDP 1P", "spend": 10.0, "nr": 30.0}])
    assert to_targeting_vs_bau(rows)["vs_bau_lift"].iloc[0] == 0.0


def test_funnel_budget_allocation(records):
    out = to_funnel_budget_allocation(records)
    assert set(out["funnel_stage"]) == {"Awareness", "Consideration", "Conversion"}
    assert out["share_of_total"].sum() == pytest.approx(100.0)
    assert out["spend"].is_monotonic_decreasing


def test_reach_frequency_by_funnel(records):
    out = to_reach_frequency_by_funnel(records)
    assert out["efficiency"].is_monotonic_decreasing
    assert (out["cost"] > 0).all()


def test_first_party_flag_and_lift(records):
    out = to_first_party_performance(records).set_index("targeting")
    assert bool(out.loc["CDP 1P", "is_first_party"])
    assert not out.loc["BAU W25-54", "is_first_party"]
    assert out.loc["BAU W25-54", "incremental_lift"] == pytest.approx(0.0)


def test_first_party_baseline_defaults_to_one(make_records):
    rows = make_records([{"targeting": "CDP 1P", "spend": 10.0, "nr": 30.0}])
    assert to_first_party_performance(rows)["incremental_lift"].iloc[0] == pytest.approx(200.0)


def test_audience_segment_matrix(make_records):
    rows = make_records([
        {"targeting": "CDP 1P", "channel": "Google", "impressions": 1000, "spend": 10.0, "nr": 50.0},
        {"targeting": "BAU W25-54", "channel": "Meta", "impressions": 1000, "spend": 10.0, "nr": 50.0},
    ])
    out = to_audience_segment_matrix(rows).set_index("segment")
    assert out.loc["Known Customers", "ctr"] == pytest.approx(0.035 * 1.8 * 100)
    assert out.loc["Known Customers", "performance"] == "High"
    assert out.loc["Mass Market", "ctr"] == pytest.approx(1.2)
    assert out.loc["Mass Market", "performance"] == "Medium"


def test_funnel_flow_pool(make_records):
    rows = make_records([
        {"funnel_stage": "Awareness", "impressions": 1000000, "spend": 100.0},
        {"funnel_stage": "Consideration", "impressions": 50000, "spend": 100.0},
        {"funnel_stage": "Conversion", "impressions": 10000, "spend": 100.0},
    ])
    out = to_funnel_conversion_flow(rows)
    assert list(out["stage"]) == ["Awareness", "Consideration", "Conversion"]
    assert out["visitors"].iloc[0] == 1000000
    # awareness keeps 0.1 %, consideration 1.5 % of that pool
    assert out["visitors"].iloc[1] == 15
    assert out["drop_off"].iloc[-1] == 0.0


def test_funnel_flow_skips_missing_stages(make_records):
    rows = make_records([{"funnel_stage": "Consideration", "impressions": 2000, "spend": 10.0}])
    out = to_funnel_conversion_flow(rows)
    assert list(out["stage"]) == ["Consideration"]
    assert out["visitors"].iloc[0] == 2000
    assert out["conversion_rate"].iloc[0] == pytest.approx(1.5)
