"""
py-terrapath: procedural terrain grids with elevation-aware A* pathfinding.
"""

__version__ = "0.1.0"
