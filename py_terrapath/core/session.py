"""
Interactive terrain session.

Keeps the state an interactive front end works with: the current grid,
the generation parameters, the selected start/end points and the search
parameters. Every parameter change goes through an explicit method;
changing a generation parameter builds a brand-new Grid, which drops
the portal pair along with the old grid.
"""

import dataclasses
from typing import Callable, Optional, Tuple

import numpy as np
import structlog

from .colouring import overlay_path, terrain_colours
from .grid import Grid, Position
from .heightfield import HeightfieldConfig, HeightfieldGenerator
from .pathfinding import PathfindingEngine, PathResult, SearchParams
from .terrain import TerrainClassifier, TraversabilityPolicy, default_classifier

logger = structlog.get_logger()

_HEIGHTFIELD_FIELDS = {f.name for f in dataclasses.fields(HeightfieldConfig)}


class TerrainSession:
    """Owns one grid at a time plus the user's selections on it."""

    def __init__(
        self,
        config: HeightfieldConfig,
        seed: str = "default",
        height_scale: float = 1000.0,
        classifier: Optional[TerrainClassifier] = None,
        params: Optional[SearchParams] = None,
    ):
        """
        Initialize session and generate the first grid.

        Args:
            config: Height-field configuration
            seed: Noise seed
            height_scale: Multiplier from noise sample to elevation
            classifier: Terrain classifier; defaults to the standard bands
            params: Search parameters
        """
        self.config = config
        self.seed = seed
        self.height_scale = height_scale
        self.classifier = classifier or default_classifier()
        self.params = params or SearchParams()

        self.grid: Optional[Grid] = None
        self.start: Optional[Position] = None
        self.end: Optional[Position] = None
        self.last_result: Optional[PathResult] = None

        self.regenerate()

    def regenerate(self, seed: Optional[str] = None, height_scale: Optional[float] = None,
                   **config_changes) -> Grid:
        """
        Replace the grid with a freshly generated one.

        Args:
            seed: New noise seed, if changing
            height_scale: New elevation multiplier, if changing
            **config_changes: HeightfieldConfig fields to change

        Returns:
            The new grid
        """
        unknown = set(config_changes) - _HEIGHTFIELD_FIELDS
        if unknown:
            raise TypeError(f"unknown height-field parameters: {sorted(unknown)}")

        config = dataclasses.replace(self.config, **config_changes)
        samples = HeightfieldGenerator(config, seed if seed is not None else self.seed).generate()

        self.config = config
        if seed is not None:
            self.seed = seed
        if height_scale is not None:
            self.height_scale = height_scale

        self.grid = Grid.from_samples(samples, self.classifier, self.height_scale)
        self.last_result = None

        # Selections survive a regeneration only while they still fit
        if self.start is not None and not self.grid.in_bounds(self.start):
            self.start = None
        if self.end is not None and not self.grid.in_bounds(self.end):
            self.end = None

        logger.info(
            "Terrain regenerated",
            width=config.width,
            height=config.height,
            seed=self.seed,
            height_scale=self.height_scale,
        )
        return self.grid

    def select_point(self, position: Tuple[int, int]) -> None:
        """Click cycle: set the end if only a start exists, else start over."""
        pos = self.grid.check_bounds(position)
        if self.start is not None and self.end is None:
            self.end = pos
        else:
            self.start = pos
            self.end = None
        self.last_result = None

    def place_portal(self, a: Tuple[int, int], b: Tuple[int, int]) -> None:
        self.grid.link_portals(a, b)
        self.last_result = None

    def update_params(self, snow_traversable: Optional[bool] = None, **changes) -> SearchParams:
        """Replace the search parameters with a modified copy."""
        if snow_traversable is not None:
            changes["policy"] = TraversabilityPolicy(snow_traversable=snow_traversable)
        self.params = dataclasses.replace(self.params, **changes)
        self.last_result = None
        return self.params

    def current_path(self, cancel: Optional[Callable[[], bool]] = None) -> Optional[PathResult]:
        """Search between the selected points; None until both are set."""
        if self.start is None or self.end is None:
            return None
        engine = PathfindingEngine(self.grid, self.params)
        self.last_result = engine.find_path(self.start, self.end, cancel=cancel)
        return self.last_result

    def search(self, start: Tuple[int, int], end: Tuple[int, int],
               cancel: Optional[Callable[[], bool]] = None, **changes) -> PathResult:
        """
        Search between two points with adjusted parameters.

        The session's points and parameters change only when the search
        runs; a rejected request leaves them as they were.

        Args:
            start: Start position
            end: Goal position
            cancel: Optional cancellation callback
            **changes: SearchParams fields to change

        Returns:
            The search result, also stored as ``last_result``
        """
        params = dataclasses.replace(self.params, **changes)
        start = self.grid.check_bounds(start)
        end = self.grid.check_bounds(end)
        result = PathfindingEngine(self.grid, params).find_path(start, end, cancel=cancel)

        self.params = params
        self.start = start
        self.end = end
        self.last_result = result
        return result

    def render(self, show_explored: bool = False) -> np.ndarray:
        """RGB image of the terrain with the last path drawn on top."""
        image = terrain_colours(self.grid.samples, self.classifier)
        result = self.last_result
        if result is None:
            return image
        explored = result.explored if show_explored else None
        return overlay_path(image, result.path, explored=explored)
