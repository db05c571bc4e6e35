"""Site export pipeline: REST fetch → transform → media → schema → slugs → validation."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from wp2mdx.models.export import ExportDocument, ExportError, ExportResult
from wp2mdx.models.options import ExportOptions
from wp2mdx.services.front_matter import generate_mdx_document
from wp2mdx.services.media import (
    extract_media_ids_from_content,
    resolve_media_ids,
    update_content_with_resolved_media,
)
from wp2mdx.services.runner import run_batch_validation
from wp2mdx.services.schema_defaults import enforce_schema_defaults_batch
from wp2mdx.services.slugs import get_canonical_path, resolve_slug_conflicts
from wp2mdx.services.wordpress import (
    REST_RESOURCES,
    fetch_media,
    fetch_wp_resource,
    transform_wordpress_item,
    validate_site_url,
)

logger = logging.getLogger(__name__)

CONTENT_DIRS = {"post": "posts", "page": "pages", "project": "projects"}

# Record keys that exist only for the pipeline and never reach front-matter
_INTERNAL_KEYS = ("content", "id")


async def _fetch_all(
    base_url: str, opts: ExportOptions
) -> Tuple[List[Tuple[str, List[dict]]], List[ExportError]]:
    """Fetch every requested content type, at most ``opts.concurrency`` at a time."""
    semaphore = asyncio.Semaphore(opts.concurrency)

    async def _fetch(content_type: str) -> List[dict]:
        async with semaphore:
            return await fetch_wp_resource(base_url, REST_RESOURCES[content_type], opts.max_items)

    content_types = list(dict.fromkeys(opts.content_types))
    outcomes = await asyncio.gather(
        *(_fetch(content_type) for content_type in content_types), return_exceptions=True
    )

    fetched: List[Tuple[str, List[dict]]] = []
    errors: List[ExportError] = []
    failures: List[httpx.HTTPError] = []
    for content_type, outcome in zip(content_types, outcomes):
        if isinstance(outcome, httpx.HTTPError):
            logger.warning("Could not fetch %s from %s: %s", content_type, base_url, outcome)
            errors.append(ExportError(source=content_type, error=str(outcome)))
            failures.append(outcome)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            fetched.append((content_type, outcome))

    if failures and not fetched:
        raise failures[0]
    return fetched, errors


def _to_record(item: dict, content_type: str, opts: ExportOptions) -> Dict[str, Any]:
    transformed = transform_wordpress_item(item, content_type, opts)
    return {**transformed.front_matter, "content": transformed.content, "id": transformed.source_id}


async def _resolve_media(
    base_url: str, records: List[Dict[str, Any]], errors: List[ExportError]
) -> List[Dict[str, Any]]:
    media_ids: List[str] = []
    for record in records:
        for media_id in extract_media_ids_from_content(record):
            if media_id not in media_ids:
                media_ids.append(media_id)
    if not media_ids:
        return records

    try:
        media_data = await fetch_media(base_url, media_ids)
    except httpx.HTTPError as exc:
        logger.warning("Could not fetch media from %s: %s", base_url, exc)
        errors.append(ExportError(source="media", error=str(exc)))
        return records

    resolution = resolve_media_ids(media_ids, media_data)
    for failure in resolution.errors:
        errors.append(ExportError(source=f"media:{failure.media_id}", error=failure.error))
    return [update_content_with_resolved_media(record, resolution.resolved) for record in records]


def _retarget_canonical(record: Dict[str, Any], original_slug: str, site_url: str) -> None:
    """Point a renamed record's generated canonical URL at its new slug."""
    seo = record.get("seo")
    if not isinstance(seo, dict):
        return
    old = f"{site_url.rstrip('/')}{get_canonical_path({**record, 'slug': original_slug})}"
    if seo.get("canonical") == old:
        seo["canonical"] = f"{site_url.rstrip('/')}{get_canonical_path(record)}"


def build_document(record: Dict[str, Any], include_theme_meta: bool = False) -> ExportDocument:
    front_matter = {key: value for key, value in record.items() if key not in _INTERNAL_KEYS}
    content_type = record.get("type") or "page"
    slug = record.get("slug") or ""
    return ExportDocument(
        slug=slug,
        type=content_type,
        path=f"content/{CONTENT_DIRS.get(content_type, content_type)}/{slug}.mdx",
        record=record,
        mdx=generate_mdx_document(front_matter, record.get("content"), include_theme_meta),
        source_id=record.get("id"),
    )


async def export_site(base_url: str, options: Optional[ExportOptions] = None) -> ExportResult:
    """Export every requested content type of a WordPress site as validated MDX.

    A content type the site does not serve is reported in ``errors`` and the
    rest of the export carries on; only when nothing at all could be fetched
    is the HTTP error raised.

    Raises:
        ValueError: if *base_url* fails validation.
        httpx.HTTPError: if no content type could be fetched.
    """
    opts = options or ExportOptions()
    validate_site_url(base_url)
    logger.info(
        "Export started",
        extra={"url": base_url, "content_types": opts.content_types, "max_items": opts.max_items},
    )

    fetched, errors = await _fetch_all(base_url, opts)
    records = [_to_record(item, content_type, opts) for content_type, items in fetched for item in items]

    if opts.resolve_media:
        records = await _resolve_media(base_url, records, errors)

    slug_resolution = resolve_slug_conflicts(records)
    original_slugs = {(r.get("id"), r.get("type")): r.get("slug") for r in records}
    records = []
    for slug, record in slug_resolution.resolved.items():
        original = original_slugs.get((record.get("id"), record.get("type")))
        if original and original != slug:
            _retarget_canonical(record, original, opts.site_url)
        records.append(record)

    records = enforce_schema_defaults_batch(records, opts.schema_defaults).processed
    validation = run_batch_validation(records, opts.validation)

    documents = [build_document(record, opts.include_theme_meta) for record in records]
    logger.info(
        "Export finished: %d documents, %d slug conflicts, %d errors",
        len(documents),
        slug_resolution.stats.conflicts,
        len(errors),
    )
    return ExportResult(
        site_url=base_url,
        documents=documents,
        validation=validation,
        slug_resolution=slug_resolution.stats,
        errors=errors,
    )
