from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from enum import Enum

from summit.services.move_rules import TraversalMode
from summit.services.search_config import STRATEGIES


class GridPoint(BaseModel):
    x: int = Field(..., ge=0, description="Column, 0-indexed")
    y: int = Field(..., ge=0, description="Row, 0-indexed")


class ClimbRequest(BaseModel):
    heightmap: str = Field(..., min_length=1, description="Newline separated rows of a-z, one S and one E")
    direction: TraversalMode = Field(
        TraversalMode.ASCEND,
        description="ascend: S to E; descend: E to the nearest 'a' cell"
    )
    strategy: Optional[str] = Field(None, description="Search strategy: breadth_first or branch_and_bound")

    model_config = {
        "json_schema_extra": {
            "example": {
                "heightmap": "Sabqponm\nabcryxxl\naccszExk\nacctuvwj\nabdefghi",
                "direction": "ascend"
            }
        }
    }

    @field_validator('strategy')
    @classmethod
    def validate_strategy(cls, v):
        if v is not None and v not in STRATEGIES:
            raise ValueError(f"strategy must be one of: {', '.join(STRATEGIES)}")
        return v


class ClimbStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class ClimbResult(BaseModel):
    climbId: str
    status: ClimbStatus
    direction: TraversalMode
    steps: Optional[int] = None
    path: List[GridPoint] = []
    stats: dict
    message: Optional[str] = None
    createdAt: str
