# Brand halo and channel synergy matrices. Both are static tables built once
# from their own seeded stream, independent of any filtering.

import logging
from itertools import combinations, permutations

import pandas as pd

from .config import PanelConfig
from .random_source import make_rng

logger = logging.getLogger(__name__)

# Brands that lift each other more strongly (shared category)
RELATED_BRANDS = ("Brand A", "Brand B", "Brand C")

RELATED_HALO_RANGE = (0.05, 0.2)
UNRELATED_HALO_RANGE = (-0.05, 0.12)

# Per-channel contribution to the synergy base lift
TV_SYNERGY = 0.16
OTHER_SYNERGY = 0.08
SYNERGY_SPREAD = (-0.2, 0.15)


def build_halo_matrix(cfg: PanelConfig) -> pd.DataFrame:
    """
    Every ordered (source, target) pair of distinct brands with a signed
    strength. Asymmetric: A -> B is drawn independently of B -> A.
    """
    rng = make_rng(cfg.seed + 1)
    rows = []
    for source, target in permutations(cfg.brands, 2):
        related = source in RELATED_BRANDS and target in RELATED_BRANDS
        lo, hi = RELATED_HALO_RANGE if related else UNRELATED_HALO_RANGE
        strength = lo + rng.random() * (hi - lo)
        rows.append({"source_brand": source, "target_brand": target, "strength": round(strength, 3)})

    logger.debug(f"Built halo matrix with {len(rows)} pairs")
    return pd.DataFrame(rows, columns=["source_brand", "target_brand", "strength"])


def build_channel_synergy(cfg: PanelConfig) -> pd.DataFrame:
    """
    Every unordered channel pair with a multiplicative lift factor around
    1.0-1.5. Pairs involving TV-like channels start from a higher base.
    Draws may land slightly below 1; consumers treat the factor as >= 1.
    """
    rng = make_rng(cfg.seed + 2)

    def contribution(ch):
        return TV_SYNERGY if cfg.capabilities[ch].tv_like else OTHER_SYNERGY

    rows = []
    for a, b in combinations(cfg.channels, 2):
        base = 1.0 + contribution(a) + contribution(b)
        lo, hi = base + SYNERGY_SPREAD[0], base + SYNERGY_SPREAD[1]
        strength = lo + rng.random() * (hi - lo)
        rows.append({"channel_a": a, "channel_b": b, "strength": round(strength, 3)})

    logger.debug(f"Built channel synergy matrix with {len(rows)} pairs")
    return pd.DataFrame(rows, columns=["channel_a", "channel_b", "strength"])
