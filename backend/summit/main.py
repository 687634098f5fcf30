from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import uuid
from datetime import datetime, timezone
from typing import Dict
import logging
import os

from summit.models.climb import ClimbRequest, ClimbResult, ClimbStatus, GridPoint
from summit.services.climb_service import HillClimbService
from summit.services.search_config import BREADTH_FIRST, STRATEGIES, SearchConfig
from summit.services.surface import HeightmapFormatError, parse_heightmap

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Summit API",
    description="API for finding the fewest steps up (and down) a heightmap",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],  # Frontend dev servers
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory storage for finished climbs
climbs_storage: Dict[str, ClimbResult] = {}


def resolve_default_strategy(environ=None) -> str:
    """Strategy named by SUMMIT_SEARCH_STRATEGY, or breadth_first when unset or unknown"""
    if environ is None:
        environ = os.environ
    strategy = environ.get('SUMMIT_SEARCH_STRATEGY', BREADTH_FIRST)
    if strategy not in STRATEGIES:
        logger.warning(
            f"Ignoring SUMMIT_SEARCH_STRATEGY={strategy!r}, expected one of "
            f"{', '.join(STRATEGIES)}; using {BREADTH_FIRST}"
        )
        return BREADTH_FIRST
    return strategy


default_strategy = resolve_default_strategy()
logger.info(f"Default search strategy: {default_strategy}")

climb_service = HillClimbService(SearchConfig(strategy=default_strategy))


def get_service(strategy: str = None) -> HillClimbService:
    """Service for the requested strategy, falling back to the shared default"""
    if strategy is None or strategy == climb_service.search_config.strategy:
        return climb_service
    return HillClimbService(SearchConfig(strategy=strategy))


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "summit-api"}


@app.post("/api/climbs/calculate", response_model=ClimbResult)
async def calculate_climb(request: ClimbRequest):
    """Find the fewest steps for a heightmap"""
    try:
        surface, start = parse_heightmap(request.heightmap)
    except HeightmapFormatError as e:
        raise HTTPException(status_code=422, detail=str(e))

    service = get_service(request.strategy)
    path, stats = await service.find_route_on(surface, start, request.direction)

    climb_id = str(uuid.uuid4())
    if path:
        result = ClimbResult(
            climbId=climb_id,
            status=ClimbStatus.COMPLETED,
            direction=request.direction,
            steps=stats["steps"],
            path=[GridPoint(x=p.x, y=p.y) for p in path],
            stats=stats,
            createdAt=datetime.now(timezone.utc).isoformat()
        )
    else:
        result = ClimbResult(
            climbId=climb_id,
            status=ClimbStatus.FAILED,
            direction=request.direction,
            stats=stats,
            message=stats.get("error", "No route found"),
            createdAt=datetime.now(timezone.utc).isoformat()
        )

    climbs_storage[climb_id] = result
    logger.info(f"Climb {climb_id} {result.status.value}: steps={result.steps}")
    return result


@app.get("/api/climbs/{climb_id}", response_model=ClimbResult)
async def get_climb(climb_id: str):
    """Get a calculated climb"""
    if climb_id not in climbs_storage:
        raise HTTPException(status_code=404, detail="Climb not found")
    return climbs_storage[climb_id]


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=9001)
