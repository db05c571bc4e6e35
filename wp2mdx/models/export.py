from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, HttpUrl

from wp2mdx.models.options import ExportOptions
from wp2mdx.models.results import BatchValidationResult
from wp2mdx.models.slug import SlugResolutionStats


class ExportRequest(BaseModel):
    url: HttpUrl
    options: ExportOptions = Field(default_factory=ExportOptions)


class ExportDocument(BaseModel):
    """One migrated item: its final front-matter record and rendered MDX file."""

    slug: str
    type: str
    path: str
    record: Dict[str, Any]
    mdx: str
    source_id: Optional[int] = None


class ExportError(BaseModel):
    source: str
    error: str


class ExportResult(BaseModel):
    site_url: str
    documents: List[ExportDocument] = Field(default_factory=list)
    validation: Optional[BatchValidationResult] = None
    slug_resolution: SlugResolutionStats
    errors: List[ExportError] = Field(default_factory=list)
