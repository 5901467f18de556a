"""
Random number generation utilities.

Terrain generation is seeded by strings so that a map can be shared by
name. Every generator is derived from the seed alone; no module keeps a
global random state.
"""

import hashlib
from typing import Optional

import numpy as np


def seed_to_int(seed: str) -> int:
    """Stable 64-bit integer for a seed string."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "little")


def make_rng(seed: Optional[str] = None) -> np.random.Generator:
    """
    Build a NumPy generator for a seed string.

    Args:
        seed: Seed string; None gives the generator for "default"

    Returns:
        numpy.random.Generator seeded deterministically from the string
    """
    return np.random.default_rng(seed_to_int(seed if seed is not None else "default"))
