"""Option models threaded through the transformation and validation services."""

import os
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

# Public site the migrated content is served from
DEFAULT_SITE_URL = os.getenv("WP2MDX_SITE_URL", "https://polything.co.uk").rstrip("/")

DEFAULT_AUTHOR = "Polything Team"


class SanitizationOptions(BaseModel):
    remove_wordpress_classes: bool = True
    strip_shortcodes: bool = False
    fix_broken_links: bool = True
    remove_empty_elements: bool = True
    normalize_whitespace: bool = True
    preserve_embeds: bool = True
    preserve_images: bool = True
    base_url: str = DEFAULT_SITE_URL


class ConversionOptions(BaseModel):
    preserve_embeds: bool = True
    preserve_images: bool = True
    remove_wordpress_classes: bool = True
    convert_to_mdx: bool = True
    number_ordered_lists: bool = Field(
        default=False,
        description="Emit `1.`, `2.` … for <ol> items instead of the default `-` bullet.",
    )
    preserve_tags: Optional[List[str]] = Field(
        default=None,
        description="Tags kept by the final cleanup. Defaults to media tags (plus embeds when preserved).",
    )


class FieldMappingOptions(BaseModel):
    include_theme_meta: bool = False
    seo_defaults: Dict[str, str] = Field(default_factory=dict)
    default_author: str = "Polything Ltd"


class SchemaDefaultsOptions(BaseModel):
    enforce_schema_types: bool = True
    enforce_required_fields: bool = True
    apply_content_type_defaults: bool = True
    author: str = DEFAULT_AUTHOR


class SEOValidationOptions(BaseModel):
    enforce_fallbacks: bool = True
    strict_length_validation: bool = True
    max_title_length: int = 60
    min_title_length: int = 30
    max_description_length: int = 160
    min_description_length: int = 120
    site_url: str = DEFAULT_SITE_URL


class ContentValidationOptions(BaseModel):
    enforce_seo_fallbacks: bool = True
    strict_length_validation: bool = True
    allow_empty_content: bool = False
    validate_slug_conflicts: bool = True
    validate_mdx_syntax: bool = True
    site_url: str = DEFAULT_SITE_URL


class ValidationRunnerOptions(BaseModel):
    content_validation: ContentValidationOptions = Field(default_factory=ContentValidationOptions)
    sanitization: SanitizationOptions = Field(default_factory=SanitizationOptions)

    validate_schema: bool = True
    validate_front_matter: bool = True
    validate_mdx: bool = True
    validate_slugs: bool = Field(
        default=True,
        description="Batch-only: check slug formats and collisions across the whole batch.",
    )
    validate_schema_types: bool = True
    sanitize_html: bool = False

    include_warnings: bool = True
    include_metadata: bool = True
    stop_on_first_error: bool = False


class ExportReportOptions(BaseModel):
    include_details: bool = True
    include_timing: bool = True
    include_warnings: bool = True
    include_metadata: bool = True
    format: Literal["text", "json", "markdown"] = "text"
    group_by_type: bool = True
    group_by_status: bool = True


class ExportOptions(BaseModel):
    """Settings for a full site export, from REST fetch to validated MDX."""

    content_types: List[Literal["post", "page", "project"]] = Field(
        default_factory=lambda: ["post", "page", "project"],
    )
    max_items: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of items fetched per content type (1–1000).",
    )
    concurrency: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of REST resources fetched at once (1–10).",
    )
    site_url: str = DEFAULT_SITE_URL
    include_theme_meta: bool = False
    resolve_media: bool = True

    conversion: ConversionOptions = Field(default_factory=ConversionOptions)
    field_mapping: FieldMappingOptions = Field(default_factory=FieldMappingOptions)
    schema_defaults: SchemaDefaultsOptions = Field(default_factory=SchemaDefaultsOptions)
    validation: ValidationRunnerOptions = Field(default_factory=ValidationRunnerOptions)
