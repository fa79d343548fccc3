# Seeded randomness shared by the generator and the analytics estimates.

import numpy as np

# Largest prime below 2**31; seeds are folded into [1, MODULUS - 1]
MODULUS = 2147483647


def normalize_seed(seed: int) -> int:
    """
    Fold any integer seed into a valid non-zero state.
    0, negative seeds and multiples of MODULUS all land on a usable value
    instead of a degenerate one.
    """
    s = int(seed) % MODULUS
    if s <= 0:
        s += MODULUS - 1
    return s


def make_rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(normalize_seed(seed))


def rand_around(base, pct: float, rng: np.random.Generator, size=None):
    """
    Uniform jitter of +/- pct around base, floored at 0.
    base may be a scalar or an array; size defaults to the shape of base.
    """
    base = np.asarray(base, dtype=float)
    if size is None:
        size = base.shape or None
    u = rng.random(size)
    out = np.clip(base + (u - 0.5) * 2.0 * pct * base, 0.0, None)
    return float(out) if np.ndim(out) == 0 else out
