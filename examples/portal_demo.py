#!/usr/bin/env python3
"""
Demo script comparing a walked route with a portal shortcut.
"""

import numpy as np
from py_terrapath.core import (
    HeightfieldConfig,
    SearchParams,
    TerrainCategory,
    TerrainSession,
)


def main():
    """Generate terrain, then search with and without a portal."""
    print("Py-Terrapath Portal Demo")
    print("=" * 40)

    config = HeightfieldConfig(width=120, height=80, zoom=40.0, island_power=1.5)
    session = TerrainSession(config, seed="demo123", height_scale=50.0,
                             params=SearchParams(heuristic_scaling=1.0))
    grid = session.grid

    counts = grid.category_counts()
    for category in TerrainCategory:
        pct = counts[category] / (grid.width * grid.height) * 100
        print(f"  {category.name.title():<9} {counts[category]:>6} cells ({pct:.1f}%)")

    # Pick the two land cells furthest apart along the diagonal
    land = np.argwhere(grid.categories == TerrainCategory.LAND)
    if len(land) < 2:
        print("\nNot enough land for a route; try another seed.")
        return
    order = np.argsort(land.sum(axis=1))
    (sy, sx), (ey, ex) = land[order[0]], land[order[-1]]

    session.select_point((int(sx), int(sy)))
    session.select_point((int(ex), int(ey)))

    walked = session.current_path()
    print(f"\nWalking from {session.start} to {session.end}:")
    if walked:
        print(f"  {len(walked.path)} cells, cost {walked.cost:.2f}, "
              f"{len(walked.explored)} explored")
    else:
        print(f"  Path not possible ({len(walked.explored)} explored)")

    session.place_portal(session.start, session.end)
    jumped = session.current_path()
    print("\nWith a portal between them:")
    print(f"  {len(jumped.path)} cells, cost {jumped.cost:.2f}, "
          f"{len(jumped.explored)} explored")


if __name__ == "__main__":
    main()
