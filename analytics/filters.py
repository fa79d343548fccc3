# Filter engine: narrows the panel to the caller's selection. Views never
# filter on their own; they receive the slice produced here.

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import pandas as pd

from data_gen.config import ALL

AGGREGATIONS = ("daily", "weekly")


def _is_wildcard(value) -> bool:
    return value is None or (isinstance(value, str) and value == ALL)


def filter_records(
    records: pd.DataFrame,
    brand: Optional[str] = ALL,
    market: Optional[str] = ALL,
    start=None,
    end=None,
    channels: Union[Sequence[str], str, None] = ALL,
) -> pd.DataFrame:
    """
    Rows matching every active selector: start <= date <= end (inclusive,
    None is open-ended), brand, market and channel membership. "All" or None
    disables a selector. Row order is preserved.
    """
    mask = pd.Series(True, index=records.index)

    if start is not None or end is not None:
        dates = pd.to_datetime(records["date"])
        if start is not None:
            mask &= dates >= pd.Timestamp(start)
        if end is not None:
            mask &= dates <= pd.Timestamp(end)
    if not _is_wildcard(brand):
        mask &= records["brand"] == brand
    if not _is_wildcard(market):
        mask &= records["market"] == market
    if not _is_wildcard(channels):
        if isinstance(channels, str):
            channels = [channels]
        mask &= records["channel"].isin(list(channels))

    return records.loc[mask]


@dataclass(frozen=True)
class Selection:
    """The dashboard's filter state."""
    brand: str = ALL
    market: str = ALL
    start: Optional[str] = None
    end: Optional[str] = None
    channels: Union[tuple, str] = ALL
    aggregation: str = "daily"

    def __post_init__(self):
        if self.aggregation not in AGGREGATIONS:
            raise ValueError(f"aggregation must be one of {AGGREGATIONS}, got {self.aggregation!r}")
        if self.start is not None and self.end is not None and pd.Timestamp(self.start) > pd.Timestamp(self.end):
            raise ValueError(f"start {self.start} is after end {self.end}")

    def apply(self, records: pd.DataFrame) -> pd.DataFrame:
        return filter_records(records, self.brand, self.market, self.start, self.end, self.channels)
