# The served dataset: panel records plus the relationship matrices and
# configuration tables, memoised once per process.

import json
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

import pandas as pd

from .config import PanelConfig
from .data_gen import generate_panel_data
from .relationships import build_channel_synergy, build_halo_matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiDataResponse:
    records: pd.DataFrame
    channels: tuple
    halo: pd.DataFrame
    channel_synergy: pd.DataFrame
    seasonal_brands: tuple
    markets: tuple

    def to_payload(self) -> dict:
        """Plain JSON-ready structure: dates as YYYY-MM-DD, missing values as None."""
        records = self.records.copy()
        records["date"] = pd.to_datetime(records["date"]).dt.strftime("%Y-%m-%d")
        return {
            "records": json.loads(records.to_json(orient="records")),
            "channels": [p.to_dict() for p in self.channels],
            "halo": json.loads(self.halo.to_json(orient="records")),
            "channel_synergy": json.loads(self.channel_synergy.to_json(orient="records")),
            "seasonal_brands": list(self.seasonal_brands),
            "markets": list(self.markets),
        }


def generate_dataset(cfg: Optional[PanelConfig] = None) -> ApiDataResponse:
    cfg = cfg or PanelConfig()
    records = generate_panel_data(cfg)
    return ApiDataResponse(
        records=records,
        channels=tuple(cfg.channel_params[ch] for ch in cfg.channels),
        halo=build_halo_matrix(cfg),
        channel_synergy=build_channel_synergy(cfg),
        seasonal_brands=tuple(cfg.seasonal_brands),
        markets=tuple(cfg.markets),
    )


class DatasetCache:
    """
    Generate-once, read-many holder for an ApiDataResponse.

    The first get() runs the factory; concurrent first callers wait on the
    lock and then share the same object. invalidate() forces the next get()
    to regenerate.

    Every caller receives the same DataFrames, so readers must treat them as
    read-only and copy before writing. The analytics views never write to
    their input.
    """

    def __init__(self, factory: Callable[[], ApiDataResponse] = generate_dataset):
        self._factory = factory
        self._value: Optional[ApiDataResponse] = None
        self._lock = threading.Lock()
        self.generation_count = 0

    @property
    def is_loaded(self) -> bool:
        return self._value is not None

    def get(self) -> ApiDataResponse:
        value = self._value
        if value is not None:
            return value
        with self._lock:
            if self._value is None:
                logger.info("Dataset cache empty, generating")
                self._value = self._factory()
                self.generation_count += 1
            else:
                logger.debug("Dataset generated by a concurrent caller")
            return self._value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None


_cache = DatasetCache()


def get_dataset() -> ApiDataResponse:
    return _cache.get()


def invalidate_dataset() -> None:
    _cache.invalidate()
