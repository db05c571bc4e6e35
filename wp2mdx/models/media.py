from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MediaReference(BaseModel):
    """A WordPress media item resolved to its local asset path."""

    id: str
    original_url: str
    local_path: str
    media_type: Optional[str] = None
    alt_text: Optional[str] = None
    caption: Optional[str] = None
    error: Optional[str] = None


class MediaResolutionError(BaseModel):
    media_id: str
    error: str


class MediaResolutionStats(BaseModel):
    total: int = 0
    resolved: int = 0
    failed: int = 0


class MediaResolutionResult(BaseModel):
    resolved: Dict[str, MediaReference] = Field(default_factory=dict)
    errors: List[MediaResolutionError] = Field(default_factory=list)
    stats: MediaResolutionStats = Field(default_factory=MediaResolutionStats)
