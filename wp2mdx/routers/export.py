"""Full site export: WordPress REST API → validated MDX documents."""

import io
import json
import logging
import zipfile
from urllib.parse import urlparse

import httpx
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from wp2mdx.models.export import ExportRequest, ExportResult
from wp2mdx.services.exporter import export_site
from wp2mdx.services.reporter import format_report_as_text, generate_export_report

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(tags=["Export"])


@router.post(
    "/export",
    response_model=ExportResult,
    summary="Export a WordPress site as MDX",
    description=(
        "Fetches posts, pages and projects from the site's REST API, converts "
        "them to MDX with front-matter, resolves media IDs, fills schema "
        "defaults, resolves slug collisions and validates the result.\n\n"
        "Pass `?format=zip` to download a compressed archive containing one "
        "MDX file per item, a JSON index and a text validation report."
    ),
)
@limiter.limit("3/minute")
async def export(
    request: Request,
    body: ExportRequest,
    format: str = Query(default="json", description="Output format: 'json' or 'zip'."),
) -> ExportResult | StreamingResponse:
    url = str(body.url)
    logger.info("Export request received", extra={"url": url, "max_items": body.options.max_items})

    try:
        result = await export_site(url, body.options)
    except ValueError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except httpx.HTTPError as exc:
        logger.error("Error exporting site %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    if format == "zip":
        return _build_zip_response(result)
    return result


def _build_zip_response(result: ExportResult) -> StreamingResponse:
    """Return a :class:`StreamingResponse` containing a ZIP archive.

    The archive holds:
    - ``index.json`` – one entry per document plus the fetch errors.
    - ``report.txt`` – the validation report.
    - ``content/<type>s/<slug>.mdx`` – one MDX file per document.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        index = {
            "site_url": result.site_url,
            "documents_found": len(result.documents),
            "documents": [
                {"slug": d.slug, "type": d.type, "path": d.path, "source_id": d.source_id}
                for d in result.documents
            ],
            "slug_conflicts": result.slug_resolution.conflicts,
            "errors": [e.model_dump() for e in result.errors],
        }
        zf.writestr("index.json", json.dumps(index, ensure_ascii=False, indent=2))

        if result.validation is not None:
            report = generate_export_report(result.validation.results)
            zf.writestr("report.txt", format_report_as_text(report))

        for document in result.documents:
            zf.writestr(document.path, document.mdx)

    buffer.seek(0)
    domain = urlparse(result.site_url).netloc.replace(".", "-")
    filename = f"{domain}-mdx.zip"
    return StreamingResponse(
        buffer,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
