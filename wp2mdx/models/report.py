from typing import Dict, List, Literal

from pydantic import BaseModel, Field

from wp2mdx.models.options import ExportReportOptions


class ContentTypeStats(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: int = 0
    warnings: int = 0


class ReportSummary(BaseModel):
    total: int
    successful: int
    failed: int
    success_rate: float
    total_errors: int
    total_warnings: int
    processing_time: float
    content_types: Dict[str, ContentTypeStats] = Field(default_factory=dict)


class ExportItem(BaseModel):
    title: str
    slug: str
    type: str
    status: Literal["success", "failed"]
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    processing_time: float = 0.0
    checks_performed: List[str] = Field(default_factory=list)


class MessageGroup(BaseModel):
    """Messages sharing the same prefix (text before the first colon)."""

    type: str
    message: str
    count: int
    items: List[str] = Field(default_factory=list)


class ReportDetails(BaseModel):
    successful: List[ExportItem] = Field(default_factory=list)
    failed: List[ExportItem] = Field(default_factory=list)
    errors: List[MessageGroup] = Field(default_factory=list)
    warnings: List[MessageGroup] = Field(default_factory=list)


class ReportMetadata(BaseModel):
    generated_at: str
    version: str
    options: ExportReportOptions


class ExportReport(BaseModel):
    summary: ReportSummary
    details: ReportDetails
    metadata: ReportMetadata
