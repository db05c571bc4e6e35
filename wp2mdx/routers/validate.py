"""Validation endpoints for single records and whole batches."""

import logging
from typing import Literal

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from wp2mdx.models.options import ExportReportOptions
from wp2mdx.models.request import BatchValidateRequest, ValidateRequest
from wp2mdx.models.results import BatchValidationResult, ValidationResult
from wp2mdx.services.reporter import generate_export_report, render_export_report
from wp2mdx.services.runner import run_batch_validation, run_content_validation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/validate", tags=["Validation"])


@router.post("", response_model=ValidationResult, summary="Validate one content record")
async def validate(body: ValidateRequest) -> ValidationResult:
    return run_content_validation(body.content, body.options)


@router.post(
    "/batch",
    response_model=BatchValidationResult,
    summary="Validate a batch of content records",
    description=(
        "Validates every record, then checks slugs across the batch.  Pass "
        "`?format=text` or `?format=markdown` to receive a human-readable "
        "export report instead of JSON."
    ),
)
async def validate_batch(
    body: BatchValidateRequest,
    format: Literal["json", "text", "markdown"] = Query(
        default="json", description="Output format: 'json', 'text' or 'markdown'."
    ),
) -> BatchValidationResult | PlainTextResponse:
    result = run_batch_validation(body.contents, body.options)
    if format == "json":
        return result

    report_options = (body.report or ExportReportOptions()).model_copy(update={"format": format})
    report = generate_export_report(result.results, report_options)
    media_type = "text/markdown" if format == "markdown" else "text/plain"
    return PlainTextResponse(render_export_report(report), media_type=media_type)
