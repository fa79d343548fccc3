from .config import (
    ALL,
    ALL_BRANDS,
    ALL_CHANNELS,
    ALL_MARKETS,
    ChannelCapabilities,
    ChannelParams,
    ConfigurationError,
    PanelConfig,
)
from .curves import response_roi, season_period, seasonal_multiplier
from .data_gen import generate_panel_data
from .dataset import ApiDataResponse, DatasetCache, generate_dataset, get_dataset, invalidate_dataset
from .random_source import make_rng, normalize_seed, rand_around
from .relationships import build_channel_synergy, build_halo_matrix
