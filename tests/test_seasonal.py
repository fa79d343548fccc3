import pytest

from analytics import (
    build_seasonal_what_if,
    to_channel_split_season,
    to_day_of_week_performance,
    to_hour_bucket_performance,
    to_season_buckets,
)
from data_gen.curves import SEASON_PERIODS


def test_season_buckets_cover_the_year(records):
    out = to_season_buckets(records)
    assert set(out["period"]) == set(SEASON_PERIODS)
    assert out["spend"].sum() == pytest.approx(records["spend"].sum())


def test_channel_split_partitions_spend(records):
    in_season, out_season = to_channel_split_season(records)
    assert in_season["spend"].sum() + out_season["spend"].sum() == pytest.approx(records["spend"].sum())
    assert in_season["nr"].is_monotonic_decreasing


def test_day_of_week_order_and_in_season_filter(records):
    everything = to_day_of_week_performance(records)
    assert list(everything["day"]) == list(range(7))
    summer = to_day_of_week_performance(records, in_season_only=True)
    assert summer["spend"].sum() < everything["spend"].sum()


def test_hour_buckets_include_unknown_for_untimed_channels(records):
    out = to_hour_bucket_performance(records)
    assert {"Morning", "Day", "Evening", "Night", "Unknown"} == set(out["bucket"])


def test_what_if_grid(make_records):
    rows = make_records([
        {"date": "2024-03-01", "spend": 100.0, "nr": 300.0},
        {"date": "2024-03-01", "spend": 100.0, "nr": 300.0},
        {"date": "2024-03-02", "spend": 200.0, "nr": 600.0},
        {"date": "2024-07-01", "spend": 999.0, "nr": 0.0},
    ])
    out = build_seasonal_what_if(rows)
    assert len(out) == 6
    # 400 spend over 2 pre-season days at ROI 3
    first = out.iloc[0]
    assert (first["lead_weeks"], first["weight_increase"]) == (2, 0.15)
    assert first["est_delta_nr"] == pytest.approx(200 * 7 * 2 * 0.15 * 3)


def test_what_if_without_pre_season_is_empty(make_records):
    rows = make_records([{"date": "2024-07-01", "spend": 10.0, "nr": 10.0}])
    assert build_seasonal_what_if(rows).empty
