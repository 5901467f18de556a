"""
Core terrain and pathfinding functionality.
"""

from .exceptions import (
    TerrapathError,
    ConfigurationError,
    OutOfBoundsError,
    UntraversableEndpointError,
    InvariantViolation,
    SearchCancelled,
)
from .terrain import (
    TerrainCategory,
    TerrainBand,
    TerrainClassifier,
    TraversabilityPolicy,
    DEFAULT_BANDS,
    default_classifier,
)
from .grid import Cell, Connectivity, Grid, Position
from .heightfield import HeightfieldConfig, HeightfieldGenerator
from .pathfinding import (
    PathfindingEngine,
    PathResult,
    SearchParams,
    SearchStatus,
    find_path,
    grid_distance,
    heuristic,
    movement_cost,
    path_cost,
)
from .reconstruct import reconstruct_path
from .session import TerrainSession

__all__ = ['TerrapathError', 'ConfigurationError', 'OutOfBoundsError',
           'UntraversableEndpointError', 'InvariantViolation', 'SearchCancelled',
           'TerrainCategory', 'TerrainBand', 'TerrainClassifier', 'TraversabilityPolicy',
           'DEFAULT_BANDS', 'default_classifier',
           'Cell', 'Connectivity', 'Grid', 'Position',
           'HeightfieldConfig', 'HeightfieldGenerator',
           'PathfindingEngine', 'PathResult', 'SearchParams', 'SearchStatus',
           'find_path', 'grid_distance', 'heuristic', 'movement_cost', 'path_cost',
           'reconstruct_path', 'TerrainSession']
