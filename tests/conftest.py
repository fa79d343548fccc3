import numpy as np
import pandas as pd
import pytest

from data_gen import PanelConfig, generate_dataset
from data_gen.data_gen import RECORD_COLUMNS

RECORD_DEFAULTS = {
    "date": "2024-01-01",
    "brand": "Brand A",
    "market": "US",
    "market_group": "NAC",
    "channel": "Meta",
    "spend": 0.0,
    "impressions": 0,
    "grps": np.nan,
    "reach": 0,
    "frequency": 0.0,
    "viewability": np.nan,
    "vtr": np.nan,
    "nr": 0.0,
    "roi": 0.0,
    "modeled_roi": 0.0,
    "format": "Video",
    "daypart": None,
    "hour_bucket": None,
    "day_of_week": 1,
    "funnel_stage": "Consideration",
    "buying_type": None,
    "targeting": "BAU W25-54",
    "publisher": None,
    "campaign_name": "Brand A US Video Meta Campaign",
    "copy_name": "Video-0s",
    "copy_length_sec": None,
    "is_retail_media": False,
    "is_consumer_media": True,
    "is_promo": False,
}


@pytest.fixture(scope="session")
def dataset():
    return generate_dataset(PanelConfig(seed=2024))


@pytest.fixture(scope="session")
def records(dataset):
    return dataset.records


@pytest.fixture
def empty_records(records):
    return records.iloc[0:0]


@pytest.fixture
def make_records():
    """Build a panel-shaped frame from a few hand-written rows."""
    def _make(rows):
        frame = pd.DataFrame([{**RECORD_DEFAULTS, **row} for row in rows], columns=RECORD_COLUMNS)
        frame["date"] = pd.to_datetime(frame["date"])
        frame["copy_length_sec"] = pd.array(list(frame["copy_length_sec"]), dtype="Int64")
        return frame
    return _make
