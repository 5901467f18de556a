"""HTTP API for terrain generation and pathfinding."""
