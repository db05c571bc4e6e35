from typing import Any, Dict, List

from pydantic import BaseModel, Field


class SlugResolution(BaseModel):
    primary: Dict[str, Any]
    conflicts: List[Dict[str, Any]] = Field(default_factory=list)


class SlugConflict(BaseModel):
    """All items that shared *slug*, and which of them keeps it."""

    slug: str
    items: List[Dict[str, Any]]
    resolution: SlugResolution


class SlugResolutionStats(BaseModel):
    total: int
    resolved: int
    conflicts: int


class SlugResolutionResult(BaseModel):
    resolved: Dict[str, Dict[str, Any]]
    conflicts: List[SlugConflict] = Field(default_factory=list)
    stats: SlugResolutionStats
