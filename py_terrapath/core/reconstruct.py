"""Path reconstruction from an A* parent map."""

from typing import Dict, List, Optional

from .exceptions import InvariantViolation
from .grid import Position


def reconstruct_path(parents: Dict[Position, Optional[Position]], goal: Position) -> List[Position]:
    """
    Walk parent links from the goal back to the start.

    Args:
        parents: Parent of every discovered position; the start maps to None
        goal: Terminal position of a successful search

    Returns:
        Positions ordered start -> goal, both inclusive

    Raises:
        InvariantViolation: if the chain revisits a position or breaks off
            before reaching a node whose parent is None
    """
    path = []
    seen = set()
    current: Optional[Position] = goal

    while current is not None:
        if current in seen:
            raise InvariantViolation(f"cycle in parent chain at {tuple(current)}")
        if current not in parents:
            raise InvariantViolation(f"parent chain broken at {tuple(current)}")
        seen.add(current)
        path.append(current)
        current = parents[current]

    path.reverse()
    return path
