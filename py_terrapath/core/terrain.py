"""
Terrain classification.

Elevation samples map onto four ordered, contiguous bands:
Water < Land < Mountain < Snow. The top band is open-ended, so
classification is total over the real line. Whether a category can be
walked on is a separate policy owned by the caller of the search.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, FrozenSet, Sequence, Tuple

import numpy as np

from .exceptions import ConfigurationError

RGB = Tuple[int, int, int]


class TerrainCategory(IntEnum):
    """Closed set of terrain categories, ordered by elevation."""

    WATER = 0
    LAND = 1
    MOUNTAIN = 2
    SNOW = 3


TERRAIN_NAMES = {
    TerrainCategory.WATER: "Water",
    TerrainCategory.LAND: "Land",
    TerrainCategory.MOUNTAIN: "Mountain",
    TerrainCategory.SNOW: "Snow",
}


@dataclass(frozen=True)
class TerrainBand:
    """Elevation band for one category plus its colour ramp."""

    category: TerrainCategory
    min_height: float
    max_height: float
    min_colour: RGB
    max_colour: RGB
    lerp_adjustment: float = 0.0


@dataclass(frozen=True)
class TraversabilityPolicy:
    """Which terrain categories a search may step onto."""

    snow_traversable: bool = False
    extra_blocked: FrozenSet[TerrainCategory] = field(default_factory=frozenset)

    @property
    def blocked(self) -> FrozenSet[TerrainCategory]:
        blocked = {TerrainCategory.WATER} | set(self.extra_blocked)
        if not self.snow_traversable:
            blocked.add(TerrainCategory.SNOW)
        return frozenset(blocked)

    def is_traversable(self, category: int) -> bool:
        return TerrainCategory(category) not in self.blocked

    def mask(self, categories: np.ndarray) -> np.ndarray:
        """Boolean array, True where the category may be entered."""
        return ~np.isin(categories, [int(c) for c in self.blocked])


class TerrainClassifier:
    """Classifies elevation samples with a strict less-than chain."""

    def __init__(self, bands: Sequence[TerrainBand]):
        """
        Initialize classifier.

        Args:
            bands: One band per category, in ascending elevation order.
                The last band is open-ended above its lower bound.
        """
        bands = tuple(bands)
        if [b.category for b in bands] != list(TerrainCategory):
            raise ConfigurationError(
                "bands must cover Water, Land, Mountain, Snow in that order"
            )
        for b in bands:
            if not b.min_height < b.max_height:
                raise ConfigurationError(
                    f"{TERRAIN_NAMES[b.category]} band needs min_height < max_height, "
                    f"got {b.min_height} and {b.max_height}"
                )
        upper = [b.max_height for b in bands[:-1]]
        if any(lo >= hi for lo, hi in zip(upper, upper[1:])):
            raise ConfigurationError(f"band boundaries must increase: {upper}")

        self.bands = bands
        self._by_category: Dict[TerrainCategory, TerrainBand] = {
            b.category: b for b in bands
        }
        # Explicit upper bounds; anything at or above the last goes to Snow
        self._thresholds = np.asarray(upper, dtype=np.float64)

    def band(self, category: int) -> TerrainBand:
        return self._by_category[TerrainCategory(category)]

    def classify(self, sample: float) -> TerrainCategory:
        """Return the lowest category whose upper bound exceeds the sample."""
        for band in self.bands[:-1]:
            if sample < band.max_height:
                return band.category
        return self.bands[-1].category

    def classify_array(self, samples: np.ndarray) -> np.ndarray:
        """Vectorized classify; returns an int8 array of category values."""
        return np.searchsorted(self._thresholds, samples, side="right").astype(np.int8)


# Boundaries are noise-sample units; Snow is open-ended above 0.75 and only
# uses 0.8 as the top of its colour ramp
DEFAULT_BANDS = (
    TerrainBand(TerrainCategory.WATER, 0.2, 0.4, (30, 176, 251), (40, 255, 255)),
    TerrainBand(TerrainCategory.LAND, 0.4, 0.6, (118, 239, 124), (2, 166, 155)),
    TerrainBand(TerrainCategory.MOUNTAIN, 0.6, 0.75, (100, 100, 100), (200, 200, 200)),
    TerrainBand(TerrainCategory.SNOW, 0.75, 0.8, (255, 250, 250), (255, 255, 255)),
)


def default_classifier() -> TerrainClassifier:
    return TerrainClassifier(DEFAULT_BANDS)
