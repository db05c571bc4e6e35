from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from wp2mdx.models.content import ContentKind
from wp2mdx.models.options import (
    ConversionOptions,
    ExportReportOptions,
    FieldMappingOptions,
    SanitizationOptions,
    ValidationRunnerOptions,
)


class SanitizeRequest(BaseModel):
    html: str
    options: SanitizationOptions = Field(default_factory=SanitizationOptions)


class ConvertRequest(BaseModel):
    html: str
    options: ConversionOptions = Field(default_factory=ConversionOptions)


class MediaResolveRequest(BaseModel):
    media_ids: List[str] = Field(..., max_length=1000)
    media_data: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Raw `/wp/v2/media` items keyed by their ID.",
    )


class FieldMapRequest(BaseModel):
    meta: Dict[str, Any] = Field(default_factory=dict)
    content_type: ContentKind
    options: FieldMappingOptions = Field(default_factory=FieldMappingOptions)


class ValidateRequest(BaseModel):
    content: Dict[str, Any]
    options: ValidationRunnerOptions = Field(default_factory=ValidationRunnerOptions)


class BatchValidateRequest(BaseModel):
    contents: List[Dict[str, Any]] = Field(..., max_length=1000)
    options: ValidationRunnerOptions = Field(default_factory=ValidationRunnerOptions)
    report: Optional[ExportReportOptions] = None
    """Report settings used when a ``text`` or ``markdown`` report is requested."""


class SlugResolveRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(..., max_length=1000)
