import logging
import math
from dataclasses import replace

import pytest

from data_gen import ChannelParams, ConfigurationError, PanelConfig, generate_panel_data


def test_default_config_is_valid():
    PanelConfig().validate()


def test_configuration_error_is_a_value_error():
    assert issubclass(ConfigurationError, ValueError)


@pytest.mark.parametrize("kwargs", [
    {"min_threshold_spend": -1},
    {"max_roi": math.nan},
    {"max_marginal_roi": math.inf},
    {"saturation_point_spend": 0},
    {"half_life_days": -3},
])
def test_channel_params_reject_bad_knobs(kwargs):
    values = {"min_threshold_spend": 100, "max_marginal_roi": 3.0, "max_roi": 2.0, "saturation_point_spend": 1000}
    values.update(kwargs)
    with pytest.raises(ConfigurationError):
        ChannelParams("Meta", **values)


def test_missing_channel_params_fails_before_generation():
    cfg = PanelConfig()
    del cfg.channel_params["TikTok"]
    with pytest.raises(ConfigurationError, match="TikTok"):
        generate_panel_data(cfg)


def test_missing_capabilities():
    cfg = PanelConfig()
    del cfg.capabilities["Owned"]
    with pytest.raises(ConfigurationError, match="Owned"):
        cfg.validate()


def test_weights_must_sum_to_one():
    cfg = PanelConfig()
    cfg.channel_weights["Meta"] += 0.1
    with pytest.raises(ConfigurationError, match="sum"):
        cfg.validate()


def test_brand_without_baseline():
    cfg = PanelConfig(brands=("Brand A", "Brand Z"))
    with pytest.raises(ConfigurationError, match="Brand Z"):
        cfg.validate()


def test_market_without_group():
    with pytest.raises(ConfigurationError):
        PanelConfig(markets=("US", "Mars")).validate()


def test_params_keyed_under_wrong_channel():
    cfg = PanelConfig()
    cfg.channel_params["CTV"] = cfg.channel_params["OLV"]
    with pytest.raises(ConfigurationError):
        cfg.validate()


def test_falling_curve_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="data_gen.config"):
        ChannelParams("Meta", 0, 10.0, 1.0, 100)
    assert "falls as spend grows" in caplog.text


def test_rising_curve_is_quiet(caplog):
    with caplog.at_level(logging.WARNING, logger="data_gen.config"):
        ChannelParams("Meta", 0, 1.0, 2.0, 100)
    assert caplog.records == []


def test_strict_curves_rejects_falling_curves():
    # the default rows all start above their asymptote
    PanelConfig().validate()
    with pytest.raises(ConfigurationError, match="Linear TV"):
        PanelConfig(strict_curves=True).validate()


def test_strict_curves_accepts_rising_curves():
    cfg = PanelConfig(strict_curves=True)
    cfg.channel_params = {ch: replace(p, max_marginal_roi=p.max_roi) for ch, p in cfg.channel_params.items()}
    cfg.validate()
