"""
Colour mapping for terrain grids.

Each band blends linearly between its two colours according to where the
sample sits inside the band. Samples outside a band's declared range
saturate to the nearest end of the ramp.
"""

from typing import Iterable, Optional, Tuple, Union

import numpy as np

from .terrain import RGB, TerrainCategory, TerrainClassifier

PATH_COLOUR: RGB = (255, 0, 0)
EXPLORED_COLOUR: RGB = (255, 200, 0)


def normalise(value: Union[float, np.ndarray], lo: float, hi: float) -> Union[float, np.ndarray]:
    """Map ``value`` from [lo, hi] onto [0, 1], saturating outside the range."""
    return np.clip((value - lo) / (hi - lo), 0.0, 1.0)


def terrain_colours(samples: np.ndarray, classifier: TerrainClassifier) -> np.ndarray:
    """
    Colour every sample by its terrain band.

    Args:
        samples: (height, width) array of noise samples
        classifier: Classifier whose bands carry the colour ramps

    Returns:
        (height, width, 3) uint8 RGB image
    """
    samples = np.asarray(samples, dtype=np.float64)
    categories = classifier.classify_array(samples)
    image = np.zeros(samples.shape + (3,), dtype=np.float64)

    for category in TerrainCategory:
        mask = categories == category
        if not mask.any():
            continue
        band = classifier.band(category)
        t = normalise(samples[mask], band.min_height, band.max_height)
        t = np.clip(t + band.lerp_adjustment, 0.0, 1.0)[:, np.newaxis]
        lo = np.asarray(band.min_colour, dtype=np.float64)
        hi = np.asarray(band.max_colour, dtype=np.float64)
        image[mask] = lo + (hi - lo) * t

    return np.rint(image).astype(np.uint8)


def overlay_path(image: np.ndarray, path: Iterable[Tuple[int, int]],
                 colour: RGB = PATH_COLOUR,
                 explored: Optional[Iterable[Tuple[int, int]]] = None,
                 explored_colour: RGB = EXPLORED_COLOUR) -> np.ndarray:
    """Return a copy of ``image`` with explored cells and the path painted on."""
    out = image.copy()
    if explored is not None:
        for x, y in explored:
            out[y, x] = explored_colour
    for x, y in path:
        out[y, x] = colour
    return out
