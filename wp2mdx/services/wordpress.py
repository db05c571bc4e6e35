"""WordPress REST API adapter: fetching posts, pages, projects and media."""

import ipaddress
import logging
import re
import socket
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from wp2mdx.models.content import TransformedContent
from wp2mdx.models.options import ExportOptions
from wp2mdx.services.field_mapper import map_themerain_fields
from wp2mdx.services.mdx import convert_html_to_mdx
from wp2mdx.services.sanitizer import strip_shortcodes
from wp2mdx.services.slugs import generate_slug_from_title, get_canonical_path

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}

_WP_API_TIMEOUT = 15
_WP_PAGE_SIZE = 100
_EXCERPT_LIMIT = 160

# Content type -> REST route under /wp-json/wp/v2/
REST_RESOURCES = {
    "post": "posts",
    "page": "pages",
    "project": "project",
}

_ITEM_FIELDS = (
    "id,slug,type,link,title,content,excerpt,date,date_gmt,modified,modified_gmt,"
    "categories,tags,featured_media,meta"
)
_MEDIA_FIELDS = "id,source_url,alt_text,caption,media_type"

_NAIVE_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def validate_site_url(url: str) -> None:
    """Raise ValueError if *url* is not a public http(s) address."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    hostname = parsed.hostname
    if not hostname:
        raise ValueError("URL must have a valid hostname.")

    if _is_private_address(hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


def _api_url(base_url: str, route: str) -> str:
    return urljoin(base_url.rstrip("/") + "/", f"wp-json/wp/v2/{route}")


async def is_wordpress(base_url: str) -> bool:
    """Return *True* when the site exposes the WordPress REST API namespace."""
    api_url = _api_url(base_url, "")
    try:
        validate_site_url(api_url)
        async with httpx.AsyncClient(timeout=10, follow_redirects=True) as client:
            resp = await client.get(api_url)
            return resp.status_code == 200 and "namespace" in resp.text
    except (ValueError, httpx.HTTPError):
        return False


async def fetch_wp_resource(base_url: str, resource: str, max_items: int) -> List[dict]:
    """Fetch up to *max_items* items of a REST resource, following ``X-WP-TotalPages``.

    Raises:
        ValueError: if the site URL fails validation.
        httpx.HTTPError: on network errors or a non-2xx response.
    """
    results: List[dict] = []
    page = 1
    api_url = _api_url(base_url, resource)

    validate_site_url(api_url)
    async with httpx.AsyncClient(timeout=_WP_API_TIMEOUT, follow_redirects=True) as client:
        while len(results) < max_items:
            resp = await client.get(
                api_url,
                params={"per_page": _WP_PAGE_SIZE, "page": page, "_fields": _ITEM_FIELDS},
            )
            # 400 indicates that the requested page number is beyond the total
            # pages available (WordPress REST API convention).
            if resp.status_code == 400:
                break
            resp.raise_for_status()
            items = resp.json()
            if not items:
                break
            results.extend(items)
            total_pages = int(resp.headers.get("X-WP-TotalPages", 1))
            if page >= total_pages:
                break
            page += 1

    logger.info("Fetched %d %s from %s", min(len(results), max_items), resource, base_url)
    return results[:max_items]


async def fetch_media(base_url: str, media_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """Fetch media items by ID, keyed by the ID as a string.

    IDs unknown to the site are simply absent from the result.
    """
    ids = list(dict.fromkeys(str(media_id) for media_id in media_ids))
    media: Dict[str, Dict[str, Any]] = {}
    if not ids:
        return media

    api_url = _api_url(base_url, "media")
    validate_site_url(api_url)
    async with httpx.AsyncClient(timeout=_WP_API_TIMEOUT, follow_redirects=True) as client:
        for start in range(0, len(ids), _WP_PAGE_SIZE):
            chunk = ids[start:start + _WP_PAGE_SIZE]
            resp = await client.get(
                api_url,
                params={
                    "include": ",".join(chunk),
                    "per_page": _WP_PAGE_SIZE,
                    "_fields": _MEDIA_FIELDS,
                },
            )
            resp.raise_for_status()
            for item in resp.json():
                media[str(item.get("id"))] = item

    missing = len(ids) - len(media)
    if missing:
        logger.warning("%d of %d media items not returned by %s", missing, len(ids), base_url)
    return media


def _plain_text(html: Optional[str]) -> str:
    if not html:
        return ""
    return BeautifulSoup(html, "lxml").get_text(" ", strip=True)


def clean_excerpt(html: Optional[str]) -> str:
    text = re.sub(r"\s+", " ", _plain_text(html)).strip()
    return text[:_EXCERPT_LIMIT].rstrip()


def to_iso_timestamp(value: Optional[str]) -> str:
    """Turn a WordPress GMT timestamp (``2024-01-15T10:30:00``) into ``2024-01-15T10:30:00.000Z``."""
    if not value:
        return ""
    if _NAIVE_TIMESTAMP_RE.match(value):
        return f"{value}.000Z"
    return value


def _rendered(item: Dict[str, Any], key: str) -> str:
    value = item.get(key)
    if isinstance(value, dict):
        return value.get("rendered") or ""
    return value or ""


def transform_wordpress_item(
    item: Dict[str, Any], content_type: str, options: Optional[ExportOptions] = None
) -> TransformedContent:
    """Convert one REST item into front-matter plus an MDX body.

    Theme meta supplies ``hero``/``links``/``seo``; blank SEO values then
    fall back to the item title, its excerpt and the canonical site URL.
    """
    opts = options or ExportOptions()

    title = _plain_text(_rendered(item, "title"))
    date = to_iso_timestamp(item.get("date_gmt") or item.get("date"))
    front_matter: Dict[str, Any] = {
        "title": title,
        "slug": item.get("slug") or generate_slug_from_title(title),
        "type": content_type,
        "date": date,
        "updated": to_iso_timestamp(item.get("modified_gmt") or item.get("modified")) or date,
        "categories": list(item.get("categories") or []),
        "tags": list(item.get("tags") or []),
    }
    if content_type == "post":
        front_matter["featured"] = bool(item.get("featured_media"))

    mapping = opts.field_mapping.model_copy(update={"include_theme_meta": opts.include_theme_meta})
    front_matter.update(map_themerain_fields(item.get("meta"), content_type, mapping))

    seo = front_matter["seo"]
    if not seo.get("title"):
        seo["title"] = title
    if not seo.get("description"):
        seo["description"] = clean_excerpt(_rendered(item, "excerpt"))
    if not seo.get("canonical"):
        seo["canonical"] = f"{opts.site_url.rstrip('/')}{get_canonical_path(front_matter)}"

    conversion = convert_html_to_mdx(strip_shortcodes(_rendered(item, "content")), opts.conversion)
    for error in conversion.errors:
        logger.warning("Conversion of %s %r failed: %s", content_type, front_matter["slug"], error)

    return TransformedContent(
        front_matter=front_matter,
        content=conversion.content,
        media_references=conversion.media_references,
        source_id=item.get("id"),
    )
