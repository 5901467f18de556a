"""
Height-field generation for the terrain grid.

Produces a 2D array of noise samples in [0, 1] using fractal value noise:
several octaves of a seeded random lattice, each smoothed with cosine
interpolation, doubled in frequency and scaled down in amplitude. An
optional radial mask pulls the map edges down to form an island.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from ..utils.random import make_rng
from .exceptions import ConfigurationError

logger = structlog.get_logger()

# Lattice period in lattice cells; coordinates wrap beyond it
LATTICE_SIZE = 256


@dataclass
class HeightfieldConfig:
    """Configuration for height-field generation."""

    width: int
    height: int
    zoom: float = 120.0  # Grid cells per noise unit
    octaves: int = 8
    falloff: float = 0.5  # Amplitude multiplier per octave
    x_offset: float = 0.0
    y_offset: float = 0.0
    island_power: float = 0.0  # 0 disables the edge mask

    def validate(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(f"invalid grid size {self.width}x{self.height}")
        if self.zoom <= 0:
            raise ConfigurationError(f"zoom must be positive, got {self.zoom}")
        if self.octaves < 1:
            raise ConfigurationError(f"octaves must be >= 1, got {self.octaves}")
        if not 0 < self.falloff <= 1:
            raise ConfigurationError(f"falloff must be in (0, 1], got {self.falloff}")
        if self.island_power < 0:
            raise ConfigurationError(f"island_power must be >= 0, got {self.island_power}")


class HeightfieldGenerator:
    """
    Generates noise height fields.

    The random lattice is drawn once from the seed, so two generators
    with the same seed produce the same field for the same config.
    """

    def __init__(self, config: HeightfieldConfig, seed: Optional[str] = None):
        """
        Initialize the height-field generator.

        Args:
            config: Height-field configuration
            seed: Seed string for the noise lattice
        """
        config.validate()
        self.config = config
        self.seed = seed if seed is not None else "default"
        self.lattice = make_rng(self.seed).random((LATTICE_SIZE, LATTICE_SIZE))

    def _sample_octave(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Value noise at the given (broadcastable) noise-space coordinates."""
        x0 = np.floor(xs)
        y0 = np.floor(ys)
        fx = xs - x0
        fy = ys - y0
        # Cosine easing keeps the first derivative continuous across cells
        sx = 0.5 * (1 - np.cos(fx * np.pi))
        sy = 0.5 * (1 - np.cos(fy * np.pi))

        xi = x0.astype(np.int64) % LATTICE_SIZE
        yi = y0.astype(np.int64) % LATTICE_SIZE
        xj = (xi + 1) % LATTICE_SIZE
        yj = (yi + 1) % LATTICE_SIZE

        lat = self.lattice
        top = lat[yi, xi] * (1 - sx) + lat[yi, xj] * sx
        bottom = lat[yj, xi] * (1 - sx) + lat[yj, xj] * sx
        return top * (1 - sy) + bottom * sy

    def generate(self) -> np.ndarray:
        """
        Build the height field.

        Returns:
            (height, width) float64 array with values in [0, 1]
        """
        cfg = self.config
        xs = np.arange(cfg.width, dtype=np.float64)[np.newaxis, :] / cfg.zoom + cfg.x_offset
        ys = np.arange(cfg.height, dtype=np.float64)[:, np.newaxis] / cfg.zoom + cfg.y_offset

        total = np.zeros((cfg.height, cfg.width), dtype=np.float64)
        amplitude = 1.0
        norm = 0.0
        frequency = 1.0
        for octave in range(cfg.octaves):
            # Shift each octave so they do not share lattice corners
            shift = octave * 17.0
            total += amplitude * self._sample_octave(xs * frequency + shift,
                                                     ys * frequency + shift)
            norm += amplitude
            amplitude *= cfg.falloff
            frequency *= 2.0

        heights = total / norm
        if cfg.island_power > 0:
            heights = self.apply_island_mask(heights, cfg.island_power)
        heights = np.clip(heights, 0.0, 1.0)

        logger.info(
            "Height field generated",
            width=cfg.width,
            height=cfg.height,
            seed=self.seed,
            min=float(heights.min()),
            max=float(heights.max()),
        )
        return heights

    @staticmethod
    def apply_island_mask(heights: np.ndarray, power: float) -> np.ndarray:
        """
        Fade the field towards the edges.

        Args:
            heights: (height, width) array of samples
            power: Mask strength; 1 applies the full mask, larger values
                blend it more weakly with the unmasked field

        Returns:
            New masked array
        """
        rows, cols = heights.shape
        nx = np.linspace(-1.0, 1.0, cols)[np.newaxis, :] if cols > 1 else np.zeros((1, 1))
        ny = np.linspace(-1.0, 1.0, rows)[:, np.newaxis] if rows > 1 else np.zeros((1, 1))
        # 1 at the centre, 0 on the border
        distance = (1 - nx ** 2) * (1 - ny ** 2)

        factor = max(power, 1.0)
        masked = heights * distance
        return (heights * (factor - 1) + masked) / factor
