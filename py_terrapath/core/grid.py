"""
Cell grid for terrain pathfinding.

A Grid owns the per-cell data of one terrain generation: the raw noise
sample, the scaled elevation and the terrain category, stored as 2D NumPy
arrays indexed ``[row, column]``. Cell data is read-only once the grid is
built; terrain regeneration replaces the whole Grid.

Portal links are kept as a sparse edge list (position -> destinations)
rather than as a field on each cell. At most one portal pair exists at a
time and linking a new pair replaces the old one.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np
import structlog

from .exceptions import ConfigurationError, InvariantViolation, OutOfBoundsError
from .terrain import TerrainCategory, TerrainClassifier

logger = structlog.get_logger()


class Position(NamedTuple):
    """Integer (column, row) grid coordinate."""

    x: int
    y: int


class Connectivity(IntEnum):
    """Grid adjacency mode."""

    FOUR = 4
    EIGHT = 8


# Orthogonal moves first, then diagonals; order is stable for reproducibility
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))


@dataclass(frozen=True)
class Cell:
    """Snapshot of one grid position."""

    position: Position
    sample: float
    elevation: float
    category: TerrainCategory
    portal_link: Optional[Position] = None


class Grid:
    """Fixed-size 2D terrain grid with an optional portal pair."""

    def __init__(self, elevations: np.ndarray, categories: np.ndarray,
                 samples: Optional[np.ndarray] = None):
        """
        Initialize grid.

        Args:
            elevations: (height, width) array of scaled elevations
            categories: (height, width) array of TerrainCategory values
            samples: Optional (height, width) array of the unscaled noise
                samples; defaults to the elevations
        """
        elevations = np.array(elevations, dtype=np.float64)
        categories = np.array(categories, dtype=np.int8)

        if elevations.ndim != 2 or elevations.size == 0:
            raise ConfigurationError(
                f"grid must be a non-empty 2D array, got shape {elevations.shape}"
            )
        if categories.shape != elevations.shape:
            raise ConfigurationError(
                f"category shape {categories.shape} does not match "
                f"elevation shape {elevations.shape}"
            )
        valid = [int(c) for c in TerrainCategory]
        if not np.isin(categories, valid).all():
            raise ConfigurationError("categories contain unknown terrain values")

        if samples is None:
            samples = elevations.copy()
        else:
            samples = np.array(samples, dtype=np.float64)
            if samples.shape != elevations.shape:
                raise ConfigurationError(
                    f"sample shape {samples.shape} does not match "
                    f"elevation shape {elevations.shape}"
                )

        for arr in (elevations, categories, samples):
            arr.setflags(write=False)

        self.elevations = elevations
        self.categories = categories
        self.samples = samples
        self.height, self.width = elevations.shape
        self._portals: Dict[Position, Tuple[Position, ...]] = {}

    @classmethod
    def from_samples(cls, samples: np.ndarray, classifier: TerrainClassifier,
                     height_scale: float = 1.0) -> "Grid":
        """Classify noise samples and scale them into elevations."""
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 2 or samples.size == 0:
            raise ConfigurationError(
                f"grid must be a non-empty 2D array, got shape {samples.shape}"
            )
        categories = classifier.classify_array(samples)
        return cls(samples * height_scale, categories, samples=samples)

    @classmethod
    def uniform(cls, width: int, height: int,
                category: TerrainCategory = TerrainCategory.LAND,
                elevation: float = 0.0) -> "Grid":
        """Grid with one category and a flat elevation everywhere."""
        if width < 1 or height < 1:
            raise ConfigurationError(f"invalid grid size {width}x{height}")
        return cls(
            np.full((height, width), elevation, dtype=np.float64),
            np.full((height, width), int(category), dtype=np.int8),
        )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.width and 0 <= y < self.height

    def check_bounds(self, position: Tuple[int, int]) -> Position:
        if not self.in_bounds(position):
            raise OutOfBoundsError(position, self.size)
        return Position(int(position[0]), int(position[1]))

    def cell_at(self, position: Tuple[int, int]) -> Cell:
        """Return the cell at ``position``; raises OutOfBoundsError."""
        pos = self.check_bounds(position)
        return Cell(
            position=pos,
            sample=float(self.samples[pos.y, pos.x]),
            elevation=float(self.elevations[pos.y, pos.x]),
            category=TerrainCategory(int(self.categories[pos.y, pos.x])),
            portal_link=self.portal_partner(pos),
        )

    def elevation_at(self, position: Tuple[int, int]) -> float:
        x, y = position
        return float(self.elevations[y, x])

    def category_at(self, position: Tuple[int, int]) -> TerrainCategory:
        x, y = position
        return TerrainCategory(int(self.categories[y, x]))

    def neighbors(self, position: Tuple[int, int],
                  connectivity: Connectivity = Connectivity.EIGHT) -> List[Position]:
        """
        In-bounds adjacent positions under the given connectivity.

        Args:
            position: Centre position (not included in the result)
            connectivity: 4 (orthogonal) or 8 (orthogonal + diagonal)

        Returns:
            Positions in a fixed order: orthogonal steps, then diagonals
        """
        try:
            connectivity = Connectivity(connectivity)
        except ValueError:
            raise ConfigurationError(
                f"connectivity must be 4 or 8, got {connectivity!r}"
            ) from None

        steps = ORTHOGONAL_STEPS
        if connectivity == Connectivity.EIGHT:
            steps = ORTHOGONAL_STEPS + DIAGONAL_STEPS

        x, y = position
        result = []
        for dx, dy in steps:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append(Position(nx, ny))
        return result

    def link_portals(self, a: Tuple[int, int], b: Tuple[int, int]) -> None:
        """Link two cells with a bidirectional portal, replacing any old pair."""
        pos_a = self.check_bounds(a)
        pos_b = self.check_bounds(b)
        if pos_a == pos_b:
            raise ConfigurationError(f"portal endpoints must differ, got {pos_a} twice")

        self._portals = {pos_a: (pos_b,), pos_b: (pos_a,)}
        logger.info("Portal pair linked", a=tuple(pos_a), b=tuple(pos_b))

    def portal_partner(self, position: Tuple[int, int]) -> Optional[Position]:
        destinations = self._portals.get(Position(*position))
        return destinations[0] if destinations else None

    def portal_edges(self) -> Dict[Position, Tuple[Position, ...]]:
        """
        Copy of the portal edge list after checking its symmetry.

        Raises:
            InvariantViolation: if a link has no matching back-link
        """
        edges = dict(self._portals)
        for source, destinations in edges.items():
            for dest in destinations:
                if source not in edges.get(dest, ()):
                    raise InvariantViolation(
                        f"portal {tuple(source)} -> {tuple(dest)} has no back-link"
                    )
        return edges

    def portal_pairs(self) -> List[Tuple[Position, Position]]:
        """Each linked pair once, ordered by position."""
        pairs = set()
        for source, destinations in self._portals.items():
            for dest in destinations:
                pairs.add(tuple(sorted((source, dest))))
        return sorted(pairs)

    def category_counts(self) -> Dict[TerrainCategory, int]:
        counts = np.bincount(self.categories.ravel(), minlength=len(TerrainCategory))
        return {c: int(counts[c]) for c in TerrainCategory}

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, portals={len(self.portal_pairs())})"
