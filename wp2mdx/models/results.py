from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CheckResult(BaseModel):
    """Outcome of a single validation stage."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class SanitizationResult(BaseModel):
    content: str
    removed_classes: List[str] = Field(default_factory=list)
    fixed_links: List[str] = Field(default_factory=list)
    removed_elements: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class SanitizationSummary(BaseModel):
    total: int
    processed: int
    total_warnings: int
    total_errors: int
    total_removed_classes: int
    total_fixed_links: int
    total_removed_elements: int


class SanitizationBatchResult(BaseModel):
    results: List[SanitizationResult]
    summary: SanitizationSummary


class ConversionResult(BaseModel):
    content: str
    media_references: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class SEOFallbacks(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    canonical: Optional[str] = None


class SEOValidationResult(CheckResult):
    fallbacks: SEOFallbacks = Field(default_factory=SEOFallbacks)


class FieldLengths(BaseModel):
    title: int = 0
    seo_title: int = 0
    seo_description: int = 0
    content: int = 0


class ContentValidationResult(CheckResult):
    seo_fallbacks: SEOFallbacks = Field(default_factory=SEOFallbacks)
    field_lengths: FieldLengths = Field(default_factory=FieldLengths)


class ContentBatchSummary(BaseModel):
    total: int
    valid: int
    invalid: int
    total_errors: int
    total_warnings: int


class ContentBatchResult(BaseModel):
    valid: bool
    results: List[ContentValidationResult]
    summary: ContentBatchSummary


class SchemaDefaultsSummary(BaseModel):
    total: int
    processed: int
    errors: int
    warnings: int


class SchemaDefaultsBatchResult(BaseModel):
    processed: List[Dict[str, Any]]
    summary: SchemaDefaultsSummary


class ValidationMetadata(BaseModel):
    content_type: Optional[str] = None
    slug: Optional[str] = None
    title: Optional[str] = None
    validation_time: float = 0.0  # milliseconds
    checks_performed: List[str] = Field(default_factory=list)


class ValidationResult(CheckResult):
    """Runner output for one content record."""

    metadata: ValidationMetadata = Field(default_factory=ValidationMetadata)


class BatchValidationSummary(BaseModel):
    total: int
    valid: int
    invalid: int
    total_errors: int
    total_warnings: int
    validation_time: float
    checks_performed: List[str] = Field(default_factory=list)


class BatchValidationResult(BaseModel):
    valid: bool
    results: List[ValidationResult]
    summary: BatchValidationSummary
