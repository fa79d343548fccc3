# Generator configuration: brands, markets, channels and the per-channel knobs
# that drive the synthetic panel. Everything that shapes the data lives here so
# a change to the simulation is a change to one dataclass.

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when the generator configuration cannot produce a valid panel."""


# -------------------------------
# DIMENSIONS
# -------------------------------

ALL = "All"

ALL_BRANDS = ("Brand A", "Brand B", "Brand C", "Brand D", "Brand E", "Brand F")

ALL_MARKETS = ("US", "Canada", "UK", "Germany", "France", "UAE", "India", "Brazil")

MARKET_GROUPS = {
    "US": "NAC",
    "Canada": "NAC",
    "UK": "EU",
    "Germany": "EU",
    "France": "EU",
    "UAE": "MEA",
    "India": "APAC",
    "Brazil": "LATAM",
}

ALL_CHANNELS = (
    "Linear TV",
    "CTV",
    "OLV",
    "BVOD",
    "Meta",
    "Google",
    "TikTok",
    "Amazon",
    "Promo",
    "Owned",
    "Earned",
)


# -------------------------------
# CHANNEL PARAMETERS
# -------------------------------

@dataclass(frozen=True)
class ChannelParams:
    """
    Response-curve knobs for one channel.

    min_threshold_spend: spend below this floor earns no modeled lift
    max_marginal_roi: ROI at the threshold (x = 0 on the curve)
    max_roi: asymptote the curve approaches as spend saturates
    saturation_point_spend: effective spend at which ~95% of the gap is closed
    half_life_days: adstock half-life, informational only
    """
    channel: str
    min_threshold_spend: float
    max_marginal_roi: float
    max_roi: float
    saturation_point_spend: float
    half_life_days: Optional[float] = None

    def __post_init__(self):
        knobs = {
            "min_threshold_spend": self.min_threshold_spend,
            "max_marginal_roi": self.max_marginal_roi,
            "max_roi": self.max_roi,
            "saturation_point_spend": self.saturation_point_spend,
        }
        if self.half_life_days is not None:
            knobs["half_life_days"] = self.half_life_days
        for name, value in knobs.items():
            if value is None or not math.isfinite(value) or value < 0:
                raise ConfigurationError(
                    f"{self.channel}: {name} must be a finite non-negative number, got {value!r}"
                )
        if self.saturation_point_spend <= 0:
            raise ConfigurationError(f"{self.channel}: saturation_point_spend must be positive")
        if self.max_marginal_roi > self.max_roi:
            logger.warning(
                f"{self.channel}: max_marginal_roi {self.max_marginal_roi} exceeds max_roi {self.max_roi}, "
                "modeled ROI falls as spend grows"
            )

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "half_life_days": self.half_life_days,
            "min_threshold_spend": self.min_threshold_spend,
            "max_marginal_roi": self.max_marginal_roi,
            "max_roi": self.max_roi,
            "saturation_point_spend": self.saturation_point_spend,
        }


def _default_channel_params() -> dict:
    rows = [
        ChannelParams("Linear TV", 2000, 6.0, 4.0, 80000, half_life_days=10),
        ChannelParams("CTV", 1500, 5.0, 3.5, 60000, half_life_days=9),
        ChannelParams("OLV", 1000, 4.0, 3.0, 45000, half_life_days=7),
        ChannelParams("BVOD", 1200, 4.5, 3.2, 50000, half_life_days=8),
        ChannelParams("Meta", 600, 5.5, 4.0, 35000, half_life_days=6),
        ChannelParams("Google", 700, 4.8, 3.5, 32000, half_life_days=5),
        ChannelParams("TikTok", 500, 5.2, 3.6, 28000, half_life_days=5),
        ChannelParams("Amazon", 800, 6.0, 4.2, 40000, half_life_days=4),
        ChannelParams("Promo", 1000, 7.0, 5.0, 90000, half_life_days=2),
        ChannelParams("Owned", 0, 3.0, 2.0, 5000, half_life_days=10),
        ChannelParams("Earned", 0, 2.0, 1.5, 2000, half_life_days=14),
    ]
    return {p.channel: p for p in rows}


# -------------------------------
# CHANNEL CAPABILITIES
# -------------------------------

@dataclass(frozen=True)
class ChannelCapabilities:
    """Which optional attributes a channel carries in the panel."""
    tv_like: bool = False           # GRPs, daypart, awareness funnel stage
    viewability: bool = False
    video_completion: bool = False
    format_mix: bool = False        # Video/Static split, otherwise always Video
    hour_bucket: bool = False
    buying_type: bool = False
    publishers: tuple = ()
    media_type: str = "consumer"    # consumer | retail | promo


MEDIA_TYPES = ("consumer", "retail", "promo")


def _default_capabilities() -> dict:
    return {
        "Linear TV": ChannelCapabilities(tv_like=True),
        "CTV": ChannelCapabilities(tv_like=True, viewability=True, video_completion=True,
                                   format_mix=True, hour_bucket=True),
        "OLV": ChannelCapabilities(viewability=True, video_completion=True, format_mix=True,
                                   hour_bucket=True, publishers=("DV360",)),
        "BVOD": ChannelCapabilities(tv_like=True, viewability=True, video_completion=True,
                                    format_mix=True, hour_bucket=True),
        "Meta": ChannelCapabilities(viewability=True, video_completion=True, format_mix=True,
                                    hour_bucket=True, buying_type=True, publishers=("Meta",)),
        "Google": ChannelCapabilities(viewability=True, format_mix=True, hour_bucket=True,
                                      publishers=("Google", "YouTube")),
        "TikTok": ChannelCapabilities(viewability=True, video_completion=True, format_mix=True,
                                      hour_bucket=True, publishers=("TikTok",)),
        "Amazon": ChannelCapabilities(viewability=True, publishers=("Amazon",), media_type="retail"),
        "Promo": ChannelCapabilities(media_type="promo"),
        "Owned": ChannelCapabilities(),
        "Earned": ChannelCapabilities(),
    }


# -------------------------------
# PANEL CONFIGURATION
# -------------------------------

@dataclass
class PanelConfig:
    seed: int = 2024

    # Inclusive daily window
    start_date: str = "2024-01-01"
    end_date: str = "2024-12-31"

    brands: tuple = ALL_BRANDS
    markets: tuple = ALL_MARKETS
    channels: tuple = ALL_CHANNELS
    market_groups: dict = field(default_factory=lambda: dict(MARKET_GROUPS))

    seasonal_brands: tuple = ("Brand C", "Brand E")

    # Daily net revenue baseline per brand, before seasonality
    base_nr: dict = field(default_factory=lambda: {
        "Brand A": 300000,
        "Brand B": 220000,
        "Brand C": 180000,
        "Brand D": 250000,
        "Brand E": 160000,
        "Brand F": 140000,
    })

    # Media budget is this share of the seasonal NR baseline, jittered per brand-day
    media_budget_share: float = 0.08
    budget_jitter: float = 0.25
    channel_jitter: float = 0.30
    nr_jitter: float = 0.05

    # Share of the brand-day budget going to each channel; must sum to 1
    channel_weights: dict = field(default_factory=lambda: {
        "Linear TV": 0.18,
        "CTV": 0.10,
        "OLV": 0.09,
        "BVOD": 0.06,
        "Meta": 0.17,
        "Google": 0.16,
        "TikTok": 0.08,
        "Amazon": 0.07,
        "Promo": 0.06,
        "Owned": 0.02,
        "Earned": 0.01,
    })

    channel_params: dict = field(default_factory=_default_channel_params)
    capabilities: dict = field(default_factory=_default_capabilities)

    # Delivery multipliers: (base, relative jitter)
    impressions_per_dollar: tuple = (30.0, 0.3)
    reach_per_impression: tuple = (0.3, 0.2)
    viewability_rate: tuple = (0.6, 0.15)
    video_completion_rate: tuple = (0.35, 0.2)
    grps_per_day: tuple = (80.0, 0.4)

    copy_lengths: tuple = (6, 10, 15, 30)

    # Reject channels whose curve falls with spend (max_marginal_roi > max_roi)
    strict_curves: bool = False

    def validate(self) -> None:
        """Fail fast on anything that would make a channel or brand silently disappear."""
        if not self.channels:
            raise ConfigurationError("at least one channel is required")
        if not self.brands:
            raise ConfigurationError("at least one brand is required")
        if not self.markets:
            raise ConfigurationError("at least one market is required")

        for ch in self.channels:
            params = self.channel_params.get(ch)
            if params is None:
                raise ConfigurationError(f"channel {ch!r} has no ChannelParams row")
            if params.channel != ch:
                raise ConfigurationError(f"ChannelParams keyed {ch!r} describes {params.channel!r}")
            if ch not in self.channel_weights:
                raise ConfigurationError(f"channel {ch!r} has no budget weight")
            caps = self.capabilities.get(ch)
            if caps is None:
                raise ConfigurationError(f"channel {ch!r} has no capability descriptor")
            if caps.media_type not in MEDIA_TYPES:
                raise ConfigurationError(f"channel {ch!r} has unknown media type {caps.media_type!r}")
            if self.strict_curves and params.max_marginal_roi > params.max_roi:
                raise ConfigurationError(
                    f"channel {ch!r}: max_marginal_roi {params.max_marginal_roi} exceeds max_roi {params.max_roi}"
                )

        total_weight = sum(self.channel_weights[ch] for ch in self.channels)
        if abs(total_weight - 1.0) > 1e-6:
            raise ConfigurationError(f"channel weights sum to {total_weight:.6f}, expected 1")

        for brand in self.brands:
            if brand not in self.base_nr:
                raise ConfigurationError(f"brand {brand!r} has no NR baseline")
        for market in self.markets:
            if market not in self.market_groups:
                raise ConfigurationError(f"market {market!r} has no market group")
