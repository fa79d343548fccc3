# Synthetic daily advertising panel: one row per (day, brand, channel).
#
# 1) builds the day x brand x channel grid from PanelConfig
# 2) draws a seasonal media budget per brand-day and splits it across channels
# 3) prices every row on its channel's response curve
# 4) fills delivery metrics and categorical attributes from the channel's
#    capability descriptor
# Generation is a pure function of the config (and so of its seed).

import logging

import numpy as np
import pandas as pd

from .config import PanelConfig
from .curves import response_roi, seasonal_multipliers
from .random_source import make_rng, rand_around

logger = logging.getLogger(__name__)

RECORD_COLUMNS = [
    "date",
    "brand",
    "market",
    "market_group",
    "channel",
    "spend",
    "impressions",
    "grps",
    "reach",
    "frequency",
    "viewability",
    "vtr",
    "nr",
    "roi",
    "modeled_roi",
    "format",
    "daypart",
    "hour_bucket",
    "day_of_week",
    "funnel_stage",
    "buying_type",
    "targeting",
    "publisher",
    "campaign_name",
    "copy_name",
    "copy_length_sec",
    "is_retail_media",
    "is_consumer_media",
    "is_promo",
]


# -------------------------------
# HELPERS: GRID + CAPABILITY MASKS
# -------------------------------

def build_grid(cfg: PanelConfig) -> pd.DataFrame:
    """Day x brand x channel, ordered day, then brand, then channel."""
    days = pd.date_range(cfg.start_date, cfg.end_date, freq="D")
    grid = pd.MultiIndex.from_product(
        [days, list(cfg.brands), list(cfg.channels)],
        names=["date", "brand", "channel"],
    ).to_frame(index=False)
    return grid


def capability_mask(cfg: PanelConfig, channels: pd.Series, attr: str) -> np.ndarray:
    flags = {ch: bool(getattr(caps, attr)) for ch, caps in cfg.capabilities.items()}
    return channels.map(flags).to_numpy(dtype=bool)


def pick(rng: np.random.Generator, options, size: int) -> np.ndarray:
    return np.asarray(options, dtype=object)[rng.integers(0, len(options), size=size)]


# -------------------------------
# PANEL-LEVEL DATA
# -------------------------------

def generate_panel_data(cfg: PanelConfig) -> pd.DataFrame:
    cfg.validate()
    rng = make_rng(cfg.seed)

    grid = build_grid(cfg)
    n = len(grid)
    if n == 0:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    n_channels = len(cfg.channels)
    channel = grid["channel"]

    # -----------------------
    # Brand-day media budget
    # -----------------------
    brand_days = grid.iloc[::n_channels][["date", "brand"]].reset_index(drop=True)
    seasonal = brand_days["brand"].isin(cfg.seasonal_brands).to_numpy()
    season_mult = seasonal_multipliers(brand_days["date"], seasonal)
    baseline_nr = brand_days["brand"].map(cfg.base_nr).to_numpy(dtype=float) * season_mult
    brand_budget = rand_around(baseline_nr * cfg.media_budget_share, cfg.budget_jitter, rng)

    # -----------------------
    # Channel split + market assignment
    # -----------------------
    market = pick(rng, cfg.markets, n)
    weight = channel.map(cfg.channel_weights).to_numpy(dtype=float)
    spend = rand_around(np.repeat(brand_budget, n_channels) * weight, cfg.channel_jitter, rng)

    # -----------------------
    # Response curve, evaluated per channel on that channel's params
    # -----------------------
    modeled_roi = np.zeros(n)
    for ch in cfg.channels:
        mask = (channel == ch).to_numpy()
        modeled_roi[mask] = response_roi(spend[mask], cfg.channel_params[ch])

    # -----------------------
    # Delivery
    # -----------------------
    impressions = np.rint(spend * rand_around(np.full(n, cfg.impressions_per_dollar[0]),
                                              cfg.impressions_per_dollar[1], rng)).astype(np.int64)
    reach = np.rint(impressions * rand_around(np.full(n, cfg.reach_per_impression[0]),
                                              cfg.reach_per_impression[1], rng)).astype(np.int64)
    frequency = np.zeros(n)
    has_reach = reach > 0
    frequency[has_reach] = np.round(impressions[has_reach] / reach[has_reach], 2)

    tv_like = capability_mask(cfg, channel, "tv_like")
    viewable = capability_mask(cfg, channel, "viewability")
    video = capability_mask(cfg, channel, "video_completion")
    format_mix = capability_mask(cfg, channel, "format_mix")
    hourly = capability_mask(cfg, channel, "hour_bucket")
    buys = capability_mask(cfg, channel, "buying_type")

    viewability = np.where(viewable, np.round(rand_around(np.full(n, cfg.viewability_rate[0]),
                                                          cfg.viewability_rate[1], rng), 2), np.nan)
    vtr = np.where(video, np.round(rand_around(np.full(n, cfg.video_completion_rate[0]),
                                               cfg.video_completion_rate[1], rng), 2), np.nan)
    grps = np.where(tv_like, np.round(rand_around(np.full(n, cfg.grps_per_day[0]),
                                                  cfg.grps_per_day[1], rng), 2), np.nan)

    # -----------------------
    # Creative and buying attributes
    # -----------------------
    ad_format = np.where(format_mix & (rng.random(n) <= 0.35), "Static", "Video").astype(object)
    daypart = np.where(tv_like, np.where(rng.random(n) > 0.6, "Prime", "Off-Prime"), None)

    r = rng.random(n)
    hour_bucket = np.where(
        hourly,
        np.select([r < 0.25, r < 0.6, r < 0.9], ["Morning", "Day", "Evening"], "Night"),
        None,
    )

    funnel_stage = np.where(
        tv_like, "Awareness", np.where(rng.random(n) > 0.5, "Consideration", "Conversion")
    ).astype(object)

    b1, b2, b3 = rng.random(n), rng.random(n), rng.random(n)
    buying_type = np.where(
        buys,
        np.select([b1 < 0.25, b2 < 0.5, b3 < 0.8], ["Awareness", "Engagement", "Click"], "Lead"),
        None,
    )

    t1, t2 = rng.random(n), rng.random(n)
    targeting = np.select([t1 < 0.5, t2 < 0.8], ["BAU W25-54", "Strategy Segment"], "CDP 1P").astype(object)

    publisher = np.full(n, None, dtype=object)
    for ch in cfg.channels:
        options = cfg.capabilities[ch].publishers
        if not options:
            continue
        mask = (channel == ch).to_numpy()
        publisher[mask] = pick(rng, options, int(mask.sum()))

    is_video = ad_format == "Video"
    copy_length = pd.array(
        np.where(is_video, pick(rng, cfg.copy_lengths, n), None), dtype="Int64"
    )

    media_type = channel.map({ch: caps.media_type for ch, caps in cfg.capabilities.items()})

    # -----------------------
    # Revenue
    # -----------------------
    nr = np.round(spend * modeled_roi * rand_around(np.ones(n), cfg.nr_jitter, rng), 2)
    spend = np.round(spend, 2)
    roi = np.zeros(n)
    has_spend = spend > 0
    roi[has_spend] = np.round(nr[has_spend] / spend[has_spend], 4)

    df = pd.DataFrame({
        "date": grid["date"],
        "brand": grid["brand"],
        "market": market,
        "market_group": pd.Series(market).map(cfg.market_groups),
        "channel": channel,
        "spend": spend,
        "impressions": impressions,
        "grps": grps,
        "reach": reach,
        "frequency": frequency,
        "viewability": viewability,
        "vtr": vtr,
        "nr": nr,
        "roi": roi,
        "modeled_roi": np.round(modeled_roi, 4),
        "format": ad_format,
        "daypart": daypart,
        "hour_bucket": hour_bucket,
        # 0 = Sunday .. 6 = Saturday
        "day_of_week": ((grid["date"].dt.dayofweek + 1) % 7).astype(np.int64),
        "funnel_stage": funnel_stage,
        "buying_type": buying_type,
        "targeting": targeting,
        "publisher": publisher,
        "copy_length_sec": copy_length,
        "is_retail_media": (media_type == "retail").to_numpy(),
        "is_promo": (media_type == "promo").to_numpy(),
        "is_consumer_media": (media_type == "consumer").to_numpy(),
    })

    df["campaign_name"] = (
        df["brand"] + " " + df["market"] + " " + df["format"] + " " + df["channel"] + " Campaign"
    )
    df["copy_name"] = df["format"] + "-" + df["copy_length_sec"].fillna(0).astype(int).astype(str) + "s"

    logger.info(f"Generated {len(df)} panel rows (seed={cfg.seed}, {cfg.start_date}..{cfg.end_date})")
    return df[RECORD_COLUMNS]


# -------------------------------
# MAIN
# -------------------------------

def main():
    from .dataset import get_dataset

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    data = get_dataset()
    df = data.records

    total_spend = df["spend"].sum()
    total_nr = df["nr"].sum()

    print("Data generation complete.")
    print("Rows:", len(df))
    print(f"Total spend: {total_spend:,.2f}")
    print(f"Total NR: {total_nr:,.2f}")
    print(f"Portfolio ROI: {total_nr / total_spend if total_spend else 0:.2f}")
    print(f"Halo pairs: {len(data.halo)}, synergy pairs: {len(data.channel_synergy)}")


if __name__ == "__main__":
    main()
