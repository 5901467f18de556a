"""
Error taxonomy for terrain pathfinding.

A search that exhausts its open set is a normal outcome and is reported
through PathResult, never through an exception.
"""

from typing import Optional, Tuple


class TerrapathError(Exception):
    """Base class for all terrapath errors."""


class ConfigurationError(TerrapathError, ValueError):
    """Invalid grid, parameter or endpoint supplied by the caller."""


class OutOfBoundsError(ConfigurationError, IndexError):
    """Position lies outside the grid."""

    def __init__(self, position: Tuple[int, int], size: Tuple[int, int]):
        self.position = tuple(position)
        self.size = size
        super().__init__(
            f"{self.position} out of bounds for {size[0]}x{size[1]} grid"
        )


class UntraversableEndpointError(ConfigurationError):
    """Start or end cell is blocked under the active traversability policy."""

    def __init__(self, role: str, position: Tuple[int, int], category: Optional[str] = None):
        self.role = role
        self.position = tuple(position)
        self.category = category
        detail = f" ({category})" if category else ""
        super().__init__(f"{role} cell {self.position}{detail} is not traversable")


class InvariantViolation(TerrapathError, AssertionError):
    """Internal state is corrupted; indicates a programming defect."""


class SearchCancelled(TerrapathError):
    """The cancel callback asked an in-flight search to stop."""
