"""Validation runner: orchestrates every check over one record or a whole batch."""

import logging
import time
from typing import Any, Dict, List, Optional, Union

from wp2mdx.models.options import ValidationRunnerOptions
from wp2mdx.models.results import (
    BatchValidationResult,
    BatchValidationSummary,
    ValidationMetadata,
    ValidationResult,
)
from wp2mdx.services.content_validator import validate_content
from wp2mdx.services.front_matter import validate_front_matter
from wp2mdx.services.mdx import validate_mdx_content
from wp2mdx.services.sanitizer import sanitize_html
from wp2mdx.services.schema_defaults import validate_schema_type_consistency
from wp2mdx.services.schema_validator import validate_content_schema
from wp2mdx.services.slugs import check_slugs_per_item

logger = logging.getLogger(__name__)

SANITIZATION_CHECK = "HTML sanitization"
SCHEMA_CHECK = "Schema validation"
FRONT_MATTER_CHECK = "Front-matter validation"
SCHEMA_TYPE_CHECK = "Schema type validation"
MDX_CHECK = "MDX validation"
CONTENT_CHECK = "Comprehensive content validation"
SLUG_CHECK = "Slug conflict validation"


class _StopValidation(Exception):
    """Raised internally once a stage reports errors under ``stop_on_first_error``."""


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def run_content_validation(
    content: Dict[str, Any], options: Optional[ValidationRunnerOptions] = None
) -> ValidationResult:
    """Run the enabled checks on one record and collect their findings.

    Stages run in a fixed order.  With ``stop_on_first_error`` the first
    stage that reports an error ends the run.  Unexpected failures are
    reported as a ``Validation error`` rather than raised.
    """
    opts = options or ValidationRunnerOptions()
    start = time.perf_counter()
    errors: List[str] = []
    warnings: List[str] = []
    checks: List[str] = []

    def record(name: str, result: Any) -> None:
        checks.append(name)
        errors.extend(result.errors)
        warnings.extend(result.warnings)
        if result.errors and opts.stop_on_first_error:
            raise _StopValidation

    body = content.get("content") if isinstance(content, dict) else None

    try:
        if opts.sanitize_html and body:
            record(SANITIZATION_CHECK, sanitize_html(body, opts.sanitization))
        if opts.validate_schema:
            record(SCHEMA_CHECK, validate_content_schema(content))
        if opts.validate_front_matter:
            record(FRONT_MATTER_CHECK, validate_front_matter(content))
        if opts.validate_schema_types:
            record(SCHEMA_TYPE_CHECK, validate_schema_type_consistency(content))
        if opts.validate_mdx and body:
            record(MDX_CHECK, validate_mdx_content(body))
        record(CONTENT_CHECK, validate_content(content, opts.content_validation))
    except _StopValidation:
        pass
    except Exception as exc:
        logger.exception("Validation of %r failed", _field(content, "slug"))
        errors.append(f"Validation error: {exc}")

    metadata = ValidationMetadata(
        content_type=_field(content, "type"),
        slug=_field(content, "slug"),
        title=_field(content, "title"),
    )
    if opts.include_metadata:
        metadata.validation_time = _elapsed_ms(start)
        metadata.checks_performed = checks

    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings if opts.include_warnings else [],
        metadata=metadata,
    )


def _field(content: Any, key: str) -> Optional[str]:
    if not isinstance(content, dict):
        return None
    value = content.get(key)
    return None if value is None else str(value)


def run_batch_validation(
    contents: List[Dict[str, Any]], options: Optional[ValidationRunnerOptions] = None
) -> BatchValidationResult:
    """Validate every record independently, then apply batch-wide slug checks.

    One record failing never stops the rest.  Slug findings go only to the
    records they name, so a bad slug never invalidates its neighbours.
    """
    opts = options or ValidationRunnerOptions()
    start = time.perf_counter()
    results = [run_content_validation(content, opts) for content in contents]

    if opts.validate_slugs:
        for result, slug_check in zip(results, check_slugs_per_item(contents)):
            result.errors.extend(slug_check.errors)
            if opts.include_warnings:
                result.warnings.extend(slug_check.warnings)
            result.metadata.checks_performed.append(SLUG_CHECK)
            result.valid = not result.errors

    checks: List[str] = []
    for result in results:
        for check in result.metadata.checks_performed:
            if check not in checks:
                checks.append(check)

    valid = sum(1 for r in results if r.valid)
    summary = BatchValidationSummary(
        total=len(contents),
        valid=valid,
        invalid=len(results) - valid,
        total_errors=sum(len(r.errors) for r in results),
        total_warnings=sum(len(r.warnings) for r in results),
        validation_time=_elapsed_ms(start),
        checks_performed=checks,
    )
    logger.info(
        "Batch validation finished: %d/%d valid, %d errors, %d warnings",
        summary.valid,
        summary.total,
        summary.total_errors,
        summary.total_warnings,
    )
    return BatchValidationResult(valid=summary.invalid == 0, results=results, summary=summary)


def _format_ms(value: float) -> str:
    return f"{value:.0f}ms"


def generate_validation_report(result: Union[ValidationResult, BatchValidationResult]) -> str:
    if isinstance(result, BatchValidationResult):
        summary = result.summary
        lines = [
            "=== BATCH VALIDATION REPORT ===",
            f"Total Items: {summary.total}",
            f"Valid: {summary.valid}",
            f"Invalid: {summary.invalid}",
            f"Total Errors: {summary.total_errors}",
            f"Total Warnings: {summary.total_warnings}",
            f"Validation Time: {_format_ms(summary.validation_time)}",
            f"Checks Performed: {', '.join(summary.checks_performed)}",
            "",
            "=== DETAILED RESULTS ===",
        ]
        for index, item in enumerate(result.results, start=1):
            meta = item.metadata
            lines.append(f"\n{index}. {meta.title} ({meta.content_type})")
            lines.append(f"   Slug: {meta.slug}")
            lines.append(f"   Valid: {'Yes' if item.valid else 'No'}")
            lines.append(f"   Validation Time: {_format_ms(meta.validation_time)}")
            if item.errors:
                lines.append(f"   Errors ({len(item.errors)}):")
                lines.extend(f"     - {error}" for error in item.errors)
            if item.warnings:
                lines.append(f"   Warnings ({len(item.warnings)}):")
                lines.extend(f"     - {warning}" for warning in item.warnings)
        return "\n".join(lines)

    meta = result.metadata
    lines = [
        "=== VALIDATION REPORT ===",
        f"Title: {meta.title}",
        f"Type: {meta.content_type}",
        f"Slug: {meta.slug}",
        f"Valid: {'Yes' if result.valid else 'No'}",
        f"Validation Time: {_format_ms(meta.validation_time)}",
        f"Checks Performed: {', '.join(meta.checks_performed)}",
        "",
    ]
    if result.errors:
        lines.append(f"Errors ({len(result.errors)}):")
        lines.extend(f"  - {error}" for error in result.errors)
        lines.append("")
    if result.warnings:
        lines.append(f"Warnings ({len(result.warnings)}):")
        lines.extend(f"  - {warning}" for warning in result.warnings)
    return "\n".join(lines)
