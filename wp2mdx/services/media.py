"""Resolution of WordPress media IDs and upload URLs to local ``/images/`` paths."""

import copy
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from wp2mdx.models.media import (
    MediaReference,
    MediaResolutionError,
    MediaResolutionResult,
    MediaResolutionStats,
)

logger = logging.getLogger(__name__)

_UPLOADS_PATH_RE = re.compile(r"/wp-content/uploads/(.+)", re.DOTALL)
_MEDIA_ID_RE = re.compile(r"^\d+$")

NOT_FOUND = "Media not found in media data"

ProgressCallback = Callable[[int, int], None]


def convert_to_local_path(media_url: Optional[str]) -> str:
    """Map ``.../wp-content/uploads/<rest>`` to ``/images/<rest>``.

    URLs outside the uploads directory are returned unchanged; empty input
    gives an empty string.
    """
    if not media_url:
        return ""
    match = _UPLOADS_PATH_RE.search(media_url)
    if match:
        return f"/images/{match.group(1)}"
    return media_url


def is_valid_media_id(value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    if not _MEDIA_ID_RE.match(value):
        return False
    return int(value) > 0


def _build_reference(media_id: str, media: Dict[str, Any]) -> MediaReference:
    source_url = media.get("source_url") or ""
    caption = media.get("caption")
    if isinstance(caption, dict):
        caption = caption.get("rendered")
    return MediaReference(
        id=media_id,
        original_url=source_url,
        local_path=convert_to_local_path(source_url),
        media_type=media.get("media_type"),
        alt_text=media.get("alt_text"),
        caption=caption,
    )


def resolve_single_media_id(media_id: str, media_data: Dict[str, Dict[str, Any]]) -> Optional[MediaReference]:
    if not media_id or media_id not in media_data:
        return None
    return _build_reference(media_id, media_data[media_id])


def resolve_media_ids(media_ids: Iterable[str], media_data: Dict[str, Dict[str, Any]]) -> MediaResolutionResult:
    """Look every ID up in *media_data* (raw ``/wp/v2/media`` items keyed by ID)."""
    ids = list(media_ids)
    resolved: Dict[str, MediaReference] = {}
    errors: List[MediaResolutionError] = []

    for media_id in ids:
        media = media_data.get(media_id)
        if not media:
            errors.append(MediaResolutionError(media_id=media_id, error=NOT_FOUND))
            continue
        try:
            resolved[media_id] = _build_reference(media_id, media)
        except (AttributeError, TypeError, ValueError) as exc:
            errors.append(MediaResolutionError(media_id=media_id, error=f"Failed to resolve media: {exc}"))

    if errors:
        logger.info("Resolved %d/%d media IDs", len(resolved), len(ids))

    return MediaResolutionResult(
        resolved=resolved,
        errors=errors,
        stats=MediaResolutionStats(total=len(ids), resolved=len(resolved), failed=len(errors)),
    )


async def batch_resolve_media_ids(
    media_ids: List[str],
    media_data: Dict[str, Dict[str, Any]],
    on_progress: Optional[ProgressCallback] = None,
) -> MediaResolutionResult:
    """Resolve IDs one at a time, reporting ``(current, total)`` after each.

    The loop is deliberately sequential: callers rely on the callback firing
    in input order.
    """
    total = len(media_ids)
    resolved: Dict[str, MediaReference] = {}
    errors: List[MediaResolutionError] = []

    for index, media_id in enumerate(media_ids):
        result = resolve_media_ids([media_id], media_data)
        resolved.update(result.resolved)
        errors.extend(result.errors)
        if on_progress is not None:
            on_progress(index + 1, total)

    return MediaResolutionResult(
        resolved=resolved,
        errors=errors,
        stats=MediaResolutionStats(total=total, resolved=len(resolved), failed=len(errors)),
    )


def _media_fields(content: Dict[str, Any]):
    """Yield ``(container, key)`` for every field that may hold a media ID."""
    for section in ("hero", "links"):
        block = content.get(section)
        if isinstance(block, dict):
            yield block, "image"
            yield block, "video"
    seo = content.get("seo")
    if isinstance(seo, dict) and isinstance(seo.get("schema"), dict):
        yield seo["schema"], "image"


def extract_media_ids_from_content(content: Dict[str, Any]) -> List[str]:
    """Return the unique media IDs referenced by hero, links and SEO image fields."""
    ids: List[str] = []
    for block, key in _media_fields(content):
        value = block.get(key)
        if is_valid_media_id(value) and value not in ids:
            ids.append(value)
    return ids


def update_content_with_resolved_media(
    content: Dict[str, Any], resolved_media: Dict[str, MediaReference]
) -> Dict[str, Any]:
    """Return a deep copy of *content* with resolved media IDs swapped for local paths.

    Unresolved IDs are left in place.
    """
    updated = copy.deepcopy(content)
    for block, key in _media_fields(updated):
        value = block.get(key)
        if isinstance(value, str) and value in resolved_media:
            block[key] = resolved_media[value].local_path
    return updated


def generate_media_resolution_report(result: MediaResolutionResult) -> str:
    stats = result.stats
    # Half-up, not banker's rounding
    rate = int(stats.resolved * 100 / stats.total + 0.5) if stats.total > 0 else 0

    lines = [
        "Media Resolution Report:",
        f"Total media IDs: {stats.total}",
        f"Successfully resolved: {stats.resolved}",
        f"Failed: {stats.failed}",
        f"Success rate: {rate}%",
        "",
    ]
    if result.errors:
        lines.append("Errors:")
        lines.extend(f"- Media ID {err.media_id}: {err.error}" for err in result.errors)
    return "\n".join(lines) + "\n"
