import numpy as np
import pandas as pd
import pytest

from analytics.common import iso_week_key, safe_ratio, sample_series, sort_desc, sum_by


def test_safe_ratio_guards_zero_denominator():
    assert safe_ratio(10, 0) == 0.0
    assert safe_ratio(10, 4) == 2.5
    assert safe_ratio(1, 4, 100) == 25.0
    out = safe_ratio(np.array([1.0, 2.0, 3.0]), np.array([2.0, 0.0, 3.0]))
    np.testing.assert_array_equal(out, [0.5, 0.0, 1.0])


def test_sample_series_stride():
    data = list(range(10))
    assert sample_series(data, 3) == [0, 4, 8]
    assert sample_series(data, 10) == data
    assert sample_series(data, 5) == [0, 2, 4, 6, 8]


def test_sample_series_is_idempotent():
    frame = pd.DataFrame({"x": range(1000)})
    once = sample_series(frame, 200)
    twice = sample_series(once, 200)
    assert len(once) <= 200
    pd.testing.assert_frame_equal(once, twice)
    assert once["x"].iloc[0] == 0


def test_sample_series_rejects_non_positive():
    with pytest.raises(ValueError):
        sample_series([1, 2, 3], 0)


def test_iso_week_key_uses_iso_year():
    keys = iso_week_key(pd.Series(pd.to_datetime(["2024-01-01", "2024-12-30", "2021-01-03"])))
    assert list(keys) == ["2024-W01", "2025-W01", "2020-W53"]


def test_sum_by_keeps_first_appearance_order():
    frame = pd.DataFrame({"k": ["b", "a", "b", "c"], "spend": [1.0, 2.0, 3.0, 4.0], "nr": [1.0, 1.0, 1.0, 1.0]})
    out = sum_by(frame, "k")
    assert list(out["k"]) == ["b", "a", "c"]
    assert list(out["spend"]) == [4.0, 2.0, 4.0]


def test_sort_desc_is_stable_on_ties():
    frame = pd.DataFrame({"k": ["x", "y", "z"], "v": [1, 2, 1]})
    assert list(sort_desc(frame, "v")["k"]) == ["y", "x", "z"]
