import pytest

from analytics import (
    to_buying_type_analysis,
    to_campaign_setup_learnings,
    to_funnel_stage_budget,
    to_targeting_impact,
    to_video_vs_static,
    to_vtr_viewability_scatter,
)

DIGITAL = ["Meta", "Google", "TikTok", "Amazon"]


def test_scatter_needs_both_measurements(records):
    out = to_vtr_viewability_scatter(records)
    assert out[["vtr", "viewability"]].notna().all().all()
    # Google and Amazon carry no completion rate
    assert set(out["channel"]) == {"Meta", "TikTok"}


def test_buying_types_come_from_meta_only(records):
    out = to_buying_type_analysis(records)
    assert set(out["buying_type"]) == {"Awareness", "Engagement", "Click", "Lead"}
    meta_spend = records.loc[records["channel"] == "Meta", "spend"].sum()
    assert out["spend"].sum() == pytest.approx(meta_spend)
    click = out.set_index("buying_type").loc["Click", "avg_ctr"]
    assert 3.0 <= click <= 4.0


def test_targeting_impact(records):
    out = to_targeting_impact(records).set_index("targeting")
    assert set(out.index) == {"BAU W25-54", "Strategy Segment", "CDP 1P"}
    assert (out["reach"] <= 60).all()
    assert (out["cpm"] > 0).all()


def test_video_vs_static(records):
    out = to_video_vs_static(records).set_index("format")
    assert out.loc["Video", "engagement_rate"] > out.loc["Static", "engagement_rate"]


def test_campaign_learnings_top_20_with_bands(records):
    out = to_campaign_setup_learnings(records)
    assert len(out) == 20
    assert out["roi"].is_monotonic_decreasing
    assert out["channel"].isin(DIGITAL).all()
    for roi, band in zip(out["roi"], out["efficiency"]):
        assert band == ("High" if roi > 6 else "Medium" if roi > 4 else "Low")


def test_funnel_stage_budget_shares(records):
    out = to_funnel_stage_budget(records)
    assert out["share_of_budget"].sum() == pytest.approx(100.0)
    assert "Awareness" not in set(out["stage"])
