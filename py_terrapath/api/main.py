"""FastAPI application for terrain generation and pathfinding."""

from typing import Dict, List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .. import __version__
from ..config import get_settings
from ..core.exceptions import ConfigurationError
from ..core.grid import Connectivity, Grid
from ..core.heightfield import HeightfieldConfig
from ..core.pathfinding import SearchParams
from ..core.session import TerrainSession
from ..core.terrain import TERRAIN_NAMES, TraversabilityPolicy
from ..utils.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Terrapath API",
    description="Procedural terrain grids with elevation-aware A* pathfinding",
    version=__version__,
)

# One interactive session per process
_state: Dict[str, Optional[TerrainSession]] = {"session": None}


# Request/Response models
class TerrainRequest(BaseModel):
    """Request to (re)generate the terrain grid."""

    width: int = Field(settings.default_grid_width, ge=1, le=settings.max_grid_size,
                       description="Grid width in cells")
    height: int = Field(settings.default_grid_height, ge=1, le=settings.max_grid_size,
                        description="Grid height in cells")
    seed: str = Field("default", description="Noise seed")
    zoom: float = Field(settings.default_zoom, gt=0, description="Grid cells per noise unit")
    octaves: int = Field(settings.default_octaves, ge=1, le=16, description="Noise octaves")
    falloff: float = Field(settings.default_falloff, gt=0, le=1,
                           description="Amplitude falloff per octave")
    height_scale: float = Field(settings.default_height_scale, ge=0,
                                description="Sample to elevation multiplier")
    island_power: float = Field(0.0, ge=0, description="Edge mask strength, 0 disables")
    snow_traversable: bool = Field(settings.snow_traversable,
                                   description="Whether searches may cross snow")


class TerrainSummary(BaseModel):
    """Summary of the current grid."""

    width: int
    height: int
    seed: str
    height_scale: float
    category_counts: Dict[str, int]
    portals: List[Tuple[Tuple[int, int], Tuple[int, int]]]


class CellInfo(BaseModel):
    x: int
    y: int
    sample: float
    elevation: float
    category: str
    traversable: bool
    portal_link: Optional[Tuple[int, int]] = None


class PortalRequest(BaseModel):
    """Request to link a portal pair."""

    a: Tuple[int, int]
    b: Tuple[int, int]


class PathRequest(BaseModel):
    """Request to search for a path on the current grid."""

    start: Tuple[int, int]
    end: Tuple[int, int]
    connectivity: int = Field(settings.default_connectivity, description="4 or 8")
    terrain_weight: float = Field(1.0, ge=0, description="Multiplier on elevation change")
    heuristic_scaling: float = Field(settings.default_heuristic_scaling, gt=0,
                                     description="Portal-detour heuristic bias")
    teleport_cost: float = Field(settings.default_teleport_cost, gt=0,
                                 description="Cost of a portal jump")


class PathResponse(BaseModel):
    found: bool
    path: List[Tuple[int, int]]
    cost: Optional[float] = None
    explored: int


def _require_session() -> TerrainSession:
    session = _state["session"]
    if session is None:
        raise HTTPException(status_code=404, detail="No terrain generated")
    return session


def _summary(session: TerrainSession) -> TerrainSummary:
    grid: Grid = session.grid
    return TerrainSummary(
        width=grid.width,
        height=grid.height,
        seed=session.seed,
        height_scale=session.height_scale,
        category_counts={TERRAIN_NAMES[c]: n for c, n in grid.category_counts().items()},
        portals=[(tuple(a), tuple(b)) for a, b in grid.portal_pairs()],
    )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Terrapath API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "grid": _state["session"] is not None}


@app.post("/terrain", response_model=TerrainSummary)
async def generate_terrain(request: TerrainRequest):
    """Generate a new terrain grid, discarding the previous one and its portals."""
    logger.info("Terrain generation requested", request=request.model_dump())

    config = HeightfieldConfig(
        width=request.width,
        height=request.height,
        zoom=request.zoom,
        octaves=request.octaves,
        falloff=request.falloff,
        island_power=request.island_power,
    )
    params = SearchParams(
        connectivity=Connectivity(settings.default_connectivity),
        teleport_cost=settings.default_teleport_cost,
        heuristic_scaling=settings.default_heuristic_scaling,
        policy=TraversabilityPolicy(snow_traversable=request.snow_traversable),
    )
    try:
        session = TerrainSession(config, seed=request.seed,
                                 height_scale=request.height_scale, params=params)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _state["session"] = session
    return _summary(session)


@app.get("/terrain", response_model=TerrainSummary)
async def get_terrain():
    """Summary of the current grid."""
    return _summary(_require_session())


@app.get("/terrain/cells/{x}/{y}", response_model=CellInfo)
async def get_cell(x: int, y: int):
    """Look up one cell of the current grid."""
    session = _require_session()
    try:
        cell = session.grid.cell_at((x, y))
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CellInfo(
        x=cell.position.x,
        y=cell.position.y,
        sample=cell.sample,
        elevation=cell.elevation,
        category=TERRAIN_NAMES[cell.category],
        traversable=session.params.policy.is_traversable(cell.category),
        portal_link=tuple(cell.portal_link) if cell.portal_link else None,
    )


@app.post("/portal", response_model=TerrainSummary)
async def place_portal(request: PortalRequest):
    """Link a portal pair, replacing the previous one."""
    session = _require_session()
    try:
        session.place_portal(request.a, request.b)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _summary(session)


@app.post("/path", response_model=PathResponse)
async def find_path(request: PathRequest):
    """
    Search for the cheapest path on the current grid.

    An unreachable goal is a normal result (found=false), not an error.
    """
    session = _require_session()
    try:
        result = session.search(
            request.start,
            request.end,
            connectivity=request.connectivity,
            terrain_weight=request.terrain_weight,
            heuristic_scaling=request.heuristic_scaling,
            teleport_cost=request.teleport_cost,
        )
    except ConfigurationError as e:
        logger.warning("Path request rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return PathResponse(
        found=result.found,
        path=[tuple(p) for p in result.path],
        cost=result.cost if result.found else None,
        explored=len(result.explored),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
