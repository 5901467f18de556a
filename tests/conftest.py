"""Shared fixtures for terrapath tests."""

import pytest

from py_terrapath.core.terrain import TerrainBand, TerrainCategory, TerrainClassifier


@pytest.fixture
def all_land_classifier():
    """Classifier whose Land band swallows every sample in [0, 1]."""
    return TerrainClassifier((
        TerrainBand(TerrainCategory.WATER, -2.0, -1.0, (0, 0, 255), (0, 0, 255)),
        TerrainBand(TerrainCategory.LAND, -1.0, 2.0, (0, 255, 0), (0, 128, 0)),
        TerrainBand(TerrainCategory.MOUNTAIN, 2.0, 3.0, (128, 128, 128), (200, 200, 200)),
        TerrainBand(TerrainCategory.SNOW, 3.0, 4.0, (255, 255, 255), (255, 255, 255)),
    ))
