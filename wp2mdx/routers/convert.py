"""HTML clean-up and HTML → MDX conversion endpoints."""

import logging

from fastapi import APIRouter

from wp2mdx.models.request import ConvertRequest, SanitizeRequest
from wp2mdx.models.results import ConversionResult, SanitizationResult
from wp2mdx.services.mdx import convert_html_to_mdx
from wp2mdx.services.sanitizer import sanitize_html

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Conversion"])


@router.post(
    "/sanitize",
    response_model=SanitizationResult,
    summary="Clean WordPress HTML",
    description=(
        "Strips block comments, WordPress classes and data attributes, fixes "
        "relative and malformed links and removes empty elements.  Problems "
        "are reported in `warnings` and `errors`; the endpoint itself never fails "
        "on odd markup."
    ),
)
async def sanitize(body: SanitizeRequest) -> SanitizationResult:
    result = sanitize_html(body.html, body.options)
    logger.info(
        "Sanitized HTML",
        extra={"removed_classes": len(result.removed_classes), "fixed_links": len(result.fixed_links)},
    )
    return result


@router.post(
    "/convert",
    response_model=ConversionResult,
    summary="Convert WordPress HTML to MDX",
)
async def convert(body: ConvertRequest) -> ConversionResult:
    """Convert rendered post HTML into Markdown, rewriting upload URLs to `/images/` paths."""
    return convert_html_to_mdx(body.html, body.options)
