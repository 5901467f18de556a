"""Command line entry point: generate terrain, search a path, save an image."""

import argparse
import sys
from typing import List, Optional

import structlog

from .config import get_settings
from .core.exceptions import ConfigurationError
from .core.grid import Connectivity
from .core.heightfield import HeightfieldConfig
from .core.pathfinding import SearchParams
from .core.session import TerrainSession
from .core.terrain import TraversabilityPolicy
from .utils.logging import configure_logging

logger = structlog.get_logger()

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="py-terrapath",
        description="Generate a terrain grid and find the cheapest route across it",
    )
    parser.add_argument("--width", type=int, default=settings.default_grid_width)
    parser.add_argument("--height", type=int, default=settings.default_grid_height)
    parser.add_argument("--seed", default="default", help="Noise seed")
    parser.add_argument("--zoom", type=float, default=settings.default_zoom)
    parser.add_argument("--octaves", type=int, default=settings.default_octaves)
    parser.add_argument("--height-scale", type=float, default=settings.default_height_scale)
    parser.add_argument("--island-power", type=float, default=0.0)
    parser.add_argument("--start", type=int, nargs=2, metavar=("X", "Y"), required=True)
    parser.add_argument("--end", type=int, nargs=2, metavar=("X", "Y"), required=True)
    parser.add_argument("--portal", type=int, nargs=4, metavar=("X1", "Y1", "X2", "Y2"),
                        help="Link two cells with a portal")
    parser.add_argument("--connectivity", type=int, choices=(4, 8),
                        default=settings.default_connectivity)
    parser.add_argument("--heuristic-scaling", type=float,
                        default=settings.default_heuristic_scaling,
                        help="Portal-detour bias; values above 1 may lose optimality")
    parser.add_argument("--teleport-cost", type=float, default=settings.default_teleport_cost)
    parser.add_argument("--snow-traversable", action="store_true",
                        default=settings.snow_traversable)
    parser.add_argument("--output", help="Save the terrain and path as a PNG")
    parser.add_argument("--show-explored", action="store_true",
                        help="Also paint the cells the search expanded")
    parser.add_argument("--log-level", default=settings.log_level)
    return parser


def save_image(session: TerrainSession, filename: str, show_explored: bool = False) -> None:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    plt.imsave(filename, session.render(show_explored=show_explored))
    print(f"Map saved as: {filename}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run one generate-and-search cycle; returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, "plain")

    try:
        params = SearchParams(
            connectivity=Connectivity(args.connectivity),
            heuristic_scaling=args.heuristic_scaling,
            teleport_cost=args.teleport_cost,
            policy=TraversabilityPolicy(snow_traversable=args.snow_traversable),
        )
        session = TerrainSession(
            HeightfieldConfig(
                width=args.width,
                height=args.height,
                zoom=args.zoom,
                octaves=args.octaves,
                island_power=args.island_power,
            ),
            seed=args.seed,
            height_scale=args.height_scale,
            params=params,
        )
        if args.portal:
            x1, y1, x2, y2 = args.portal
            session.place_portal((x1, y1), (x2, y2))
        session.select_point(tuple(args.start))
        session.select_point(tuple(args.end))
        result = session.current_path()
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logger.info("Search complete", found=result.found, length=len(result.path),
                explored=len(result.explored))
    if result.found:
        print(f"Path found: {len(result.path)} cells, cost {result.cost:.3f}, "
              f"{len(result.explored)} cells explored")
    else:
        print(f"Path not possible ({len(result.explored)} cells explored)")

    if args.output:
        save_image(session, args.output, show_explored=args.show_explored)

    return EXIT_FOUND if result.found else EXIT_NOT_FOUND


if __name__ == "__main__":
    sys.exit(main())
