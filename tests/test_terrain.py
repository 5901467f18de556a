"""Tests for terrain classification and traversability."""

import pytest
import numpy as np

from py_terrapath.core.exceptions import ConfigurationError
from py_terrapath.core.terrain import (
    DEFAULT_BANDS,
    TerrainBand,
    TerrainCategory,
    TerrainClassifier,
    TraversabilityPolicy,
    default_classifier,
)


class TestTerrainClassifier:
    """Test elevation band classification."""

    @pytest.fixture
    def classifier(self):
        return default_classifier()

    @pytest.mark.parametrize("sample, expected", [
        (-5.0, TerrainCategory.WATER),
        (0.0, TerrainCategory.WATER),
        (0.3999, TerrainCategory.WATER),
        (0.4, TerrainCategory.LAND),
        (0.59, TerrainCategory.LAND),
        (0.6, TerrainCategory.MOUNTAIN),
        (0.7499, TerrainCategory.MOUNTAIN),
        (0.75, TerrainCategory.SNOW),
        (0.8, TerrainCategory.SNOW),
        (42.0, TerrainCategory.SNOW),
    ])
    def test_classify_bands(self, classifier, sample, expected):
        """Lowest band whose upper bound exceeds the sample wins."""
        assert classifier.classify(sample) == expected

    def test_classify_array_matches_scalar(self, classifier):
        """Vectorized classification agrees with the scalar chain."""
        samples = np.linspace(-0.5, 1.5, 201).reshape(3, 67)
        categories = classifier.classify_array(samples)

        assert categories.shape == samples.shape
        for value, category in zip(samples.ravel(), categories.ravel()):
            assert classifier.classify(value) == category

    def test_band_lookup(self, classifier):
        band = classifier.band(TerrainCategory.MOUNTAIN)
        assert band.min_height == 0.6
        assert band.max_height == 0.75

    def test_bands_must_be_in_category_order(self):
        """Bands out of order are rejected."""
        reordered = (DEFAULT_BANDS[1], DEFAULT_BANDS[0]) + DEFAULT_BANDS[2:]
        with pytest.raises(ConfigurationError):
            TerrainClassifier(reordered)

    def test_boundaries_must_increase(self):
        """Overlapping band boundaries are rejected."""
        bands = (
            TerrainBand(TerrainCategory.WATER, 0.0, 0.5, (0, 0, 0), (0, 0, 0)),
            TerrainBand(TerrainCategory.LAND, 0.5, 0.4, (0, 0, 0), (0, 0, 0)),
            TerrainBand(TerrainCategory.MOUNTAIN, 0.4, 0.9, (0, 0, 0), (0, 0, 0)),
            TerrainBand(TerrainCategory.SNOW, 0.9, 1.0, (0, 0, 0), (0, 0, 0)),
        )
        with pytest.raises(ConfigurationError):
            TerrainClassifier(bands)

    @pytest.mark.parametrize("snow_range", [(0.9, 0.9), (0.9, 0.8)])
    def test_band_range_must_be_non_empty(self, snow_range):
        """A zero-width band would have no colour ramp to blend across."""
        bands = DEFAULT_BANDS[:3] + (
            TerrainBand(TerrainCategory.SNOW, snow_range[0], snow_range[1],
                        (255, 250, 250), (255, 255, 255)),
        )
        with pytest.raises(ConfigurationError):
            TerrainClassifier(bands)


class TestTraversabilityPolicy:
    """Test which categories a search may enter."""

    def test_default_blocks_water_and_snow(self):
        policy = TraversabilityPolicy()

        assert not policy.is_traversable(TerrainCategory.WATER)
        assert policy.is_traversable(TerrainCategory.LAND)
        assert policy.is_traversable(TerrainCategory.MOUNTAIN)
        assert not policy.is_traversable(TerrainCategory.SNOW)

    def test_snow_can_be_enabled(self):
        policy = TraversabilityPolicy(snow_traversable=True)

        assert policy.is_traversable(TerrainCategory.SNOW)
        assert not policy.is_traversable(TerrainCategory.WATER)

    def test_water_is_always_blocked(self):
        policy = TraversabilityPolicy(snow_traversable=True, extra_blocked=frozenset())
        assert TerrainCategory.WATER in policy.blocked

    def test_extra_blocked_categories(self):
        policy = TraversabilityPolicy(extra_blocked=frozenset({TerrainCategory.MOUNTAIN}))
        assert not policy.is_traversable(TerrainCategory.MOUNTAIN)

    def test_mask(self):
        categories = np.array([[0, 1], [2, 3]], dtype=np.int8)

        mask = TraversabilityPolicy().mask(categories)
        assert mask.tolist() == [[False, True], [True, False]]

        mask = TraversabilityPolicy(snow_traversable=True).mask(categories)
        assert mask.tolist() == [[False, True], [True, True]]
