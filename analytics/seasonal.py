# Seasonal slicing. Season buckets come from data_gen.curves.season_periods so
# the analysis uses the same month boundaries as the generator.

import pandas as pd

from data_gen.curves import IN_SEASON, PRE_SEASON, season_periods

from .common import as_dates, empty_frame, safe_ratio, sort_asc, sort_desc, sum_by, with_roi

# (lead weeks, weight increase) combinations for the pre-season what-if
WHAT_IF_LEAD_WEEKS = (2, 4)
WHAT_IF_WEIGHT_INCREASES = (0.15, 0.2, 0.4)


def _with_period(records: pd.DataFrame) -> pd.DataFrame:
    return records.assign(period=season_periods(as_dates(records)).to_numpy())


def to_season_buckets(records: pd.DataFrame) -> pd.DataFrame:
    if records.empty:
        return empty_frame(["period", "spend", "nr", "roi"])
    return with_roi(sum_by(_with_period(records), "period"))


def to_channel_split_season(records: pd.DataFrame):
    """(in_season, out_of_season) channel tables, each sorted by NR descending."""
    columns = ["channel", "spend", "nr", "roi"]
    if records.empty:
        return empty_frame(columns), empty_frame(columns)
    frame = _with_period(records)
    in_season = frame["period"] == IN_SEASON

    def _table(part):
        if part.empty:
            return empty_frame(columns)
        return sort_desc(with_roi(sum_by(part, "channel")), "nr")

    return _table(frame[in_season]), _table(frame[~in_season])


def _in_season_slice(records: pd.DataFrame, in_season_only: bool) -> pd.DataFrame:
    if not in_season_only or records.empty:
        return records
    return records[season_periods(as_dates(records)).to_numpy() == IN_SEASON]


def to_day_of_week_performance(records: pd.DataFrame, in_season_only: bool = False) -> pd.DataFrame:
    """Spend, NR and ROI per weekday (0 = Sunday), in weekday order."""
    records = _in_season_slice(records, in_season_only)
    if records.empty:
        return empty_frame(["day", "spend", "nr", "roi"])
    out = sum_by(records.rename(columns={"day_of_week": "day"}), "day")
    return sort_asc(with_roi(out), "day")


def to_hour_bucket_performance(records: pd.DataFrame, in_season_only: bool = False) -> pd.DataFrame:
    records = _in_season_slice(records, in_season_only)
    if records.empty:
        return empty_frame(["bucket", "spend", "nr", "roi"])
    frame = records.assign(bucket=records["hour_bucket"].fillna("Unknown"))
    return with_roi(sum_by(frame, "bucket"))


def build_seasonal_what_if(records: pd.DataFrame) -> pd.DataFrame:
    """
    Estimated extra NR from starting the in-season push earlier and heavier.

    For each lead time and weight increase, the pre-season average daily spend
    is scaled by 7 * lead_weeks * increase and multiplied by pre-season ROI.
    Empty when the selection has no pre-season days.
    """
    columns = ["lead_weeks", "weight_increase", "est_delta_nr"]
    if records.empty:
        return empty_frame(columns)
    dates = as_dates(records)
    pre = (season_periods(dates) == PRE_SEASON).to_numpy()
    if not pre.any():
        return empty_frame(columns)

    pre_spend = float(records.loc[pre, "spend"].sum())
    pre_nr = float(records.loc[pre, "nr"].sum())
    pre_days = dates[pre].dt.normalize().nunique()
    avg_daily_spend = safe_ratio(pre_spend, pre_days)
    avg_roi = safe_ratio(pre_nr, max(1.0, pre_spend))

    rows = [
        {
            "lead_weeks": lead,
            "weight_increase": increase,
            "est_delta_nr": avg_daily_spend * 7 * lead * increase * avg_roi,
        }
        for lead in WHAT_IF_LEAD_WEEKS
        for increase in WHAT_IF_WEIGHT_INCREASES
    ]
    return pd.DataFrame(rows, columns=columns)
