"""Structural validation of content records against the front-matter schema.

Validation never modifies its input.  Filling in a missing ``seo.schema.type``
is a separate, explicit step: :func:`normalize_schema_type`.
"""

import copy
import re
from datetime import datetime
from typing import Any, Dict, List
from urllib.parse import urlparse

from wp2mdx.models.content import HERO_FIELDS, LINK_FIELDS, SCHEMA_TYPES
from wp2mdx.models.results import CheckResult
from wp2mdx.services.field_mapper import get_default_schema_type

_SLUG_CHARS_RE = re.compile(r"^[a-z0-9-]+$")
_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
# The exact shape produced by JavaScript's Date.toISOString()
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")
_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

# Schemes that are meaningless without a host
_HOST_SCHEMES = ("http", "https", "ftp", "ws", "wss")

REQUIRED_FIELDS = ("title", "slug", "date", "updated")


def is_valid_iso_date(value: Any) -> bool:
    """True only for canonical UTC timestamps such as ``2024-01-15T10:30:00.000Z``."""
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%fZ")
    except ValueError:
        return False
    return True


def is_valid_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_COLOR_RE.match(value))


def is_valid_media_path(value: Any) -> bool:
    return isinstance(value, str) and (value.startswith("/images/") or value.startswith("http"))


def is_valid_url(value: Any) -> bool:
    """Absolute URL check: a scheme is required, and web schemes need a host."""
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    if not parsed.scheme or not _URL_SCHEME_RE.match(parsed.scheme):
        return False
    if parsed.scheme.lower() in _HOST_SCHEMES:
        return bool(parsed.netloc) and not any(ch.isspace() for ch in parsed.netloc)
    return True


def is_valid_breadcrumb_url(value: Any) -> bool:
    """Breadcrumbs may point at site paths such as ``/blog`` as well as absolute URLs."""
    if isinstance(value, str) and value.startswith("/") and not value.startswith("//"):
        return not any(ch.isspace() for ch in value)
    return is_valid_url(value)


def _is_blank(value: Any) -> bool:
    return not value or str(value).strip() == ""


def _validate_base(content: Dict[str, Any], errors: List[str], warnings: List[str]) -> None:
    for field in REQUIRED_FIELDS:
        if _is_blank(content.get(field)):
            errors.append(f"Missing or empty required field: {field}")

    slug = content.get("slug")
    if slug and not _SLUG_CHARS_RE.match(str(slug)):
        errors.append(
            f"Invalid slug format: {slug}. Must contain only lowercase letters, numbers, and hyphens."
        )

    date = content.get("date")
    if date and not is_valid_iso_date(date):
        errors.append(f"Invalid date format: {date}. Must be ISO 8601 format.")

    updated = content.get("updated")
    if updated and not is_valid_iso_date(updated):
        errors.append(f"Invalid updated date format: {updated}. Must be ISO 8601 format.")

    if not isinstance(content.get("categories"), (list, tuple)):
        errors.append("Categories must be an array")
    if not isinstance(content.get("tags"), (list, tuple)):
        errors.append("Tags must be an array")

    hero = content.get("hero")
    if not isinstance(hero, dict):
        errors.append("Missing hero section")
    else:
        _validate_hero(hero, errors, warnings)


def _validate_hero(hero: Dict[str, Any], errors: List[str], warnings: List[str]) -> None:
    errors.extend(f"Missing hero field: {field}" for field in HERO_FIELDS if field not in hero)

    for field in ("text_color", "background_color"):
        value = hero.get(field)
        if value and not is_valid_color(value):
            warnings.append(f"Invalid {field} format: {value}. Expected hex color.")

    for field in ("image", "video"):
        value = hero.get(field)
        if value and not is_valid_media_path(value):
            warnings.append(f"Invalid {field} path format: {value}. Expected /images/* path.")


def _validate_links(links: Dict[str, Any], errors: List[str], warnings: List[str]) -> None:
    errors.extend(f"Missing links field: {field}" for field in LINK_FIELDS if field not in links)

    url = links.get("url")
    if url and not is_valid_url(url):
        warnings.append(f"Invalid URL format: {url}")

    for field in ("image", "video"):
        value = links.get(field)
        if value and not is_valid_media_path(value):
            warnings.append(f"Invalid links {field} path format: {value}. Expected /images/* path.")


def _validate_schema_block(
    schema: Dict[str, Any], content_type: str, errors: List[str], warnings: List[str]
) -> None:
    schema_type = schema.get("type")
    if schema_type and schema_type not in SCHEMA_TYPES:
        errors.append(f"Invalid schema type: {schema_type}. Must be one of: {', '.join(SCHEMA_TYPES)}")
    if not schema_type:
        warnings.append(
            f"Schema type not specified, using default: {get_default_schema_type(content_type)}"
        )

    for field in ("publishDate", "modifiedDate"):
        value = schema.get(field)
        if value and not is_valid_iso_date(value):
            errors.append(f"Invalid {field} format: {value}. Must be ISO 8601 format.")

    breadcrumbs = schema.get("breadcrumbs")
    if breadcrumbs and not isinstance(breadcrumbs, list):
        errors.append("Breadcrumbs must be an array")
    elif breadcrumbs:
        for index, crumb in enumerate(breadcrumbs, start=1):
            crumb = crumb if isinstance(crumb, dict) else {}
            if not crumb.get("name") or not crumb.get("url"):
                errors.append(f"Breadcrumb {index} missing name or url")
            if crumb.get("url") and not is_valid_breadcrumb_url(crumb["url"]):
                warnings.append(f"Invalid breadcrumb URL: {crumb['url']}")


def _validate_seo(seo: Any, content_type: str, errors: List[str], warnings: List[str]) -> None:
    if not isinstance(seo, dict):
        warnings.append("Missing SEO section")
        return

    title = seo.get("title")
    if title and len(title) > 60:
        warnings.append(f"SEO title too long: {len(title)} characters. Recommended max: 60.")

    description = seo.get("description")
    if description:
        if len(description) < 120:
            warnings.append(
                f"SEO description too short: {len(description)} characters. Recommended min: 120."
            )
        if len(description) > 160:
            warnings.append(
                f"SEO description too long: {len(description)} characters. Recommended max: 160."
            )

    canonical = seo.get("canonical")
    if canonical and not is_valid_url(canonical):
        warnings.append(f"Invalid canonical URL format: {canonical}")

    if isinstance(seo.get("schema"), dict):
        _validate_schema_block(seo["schema"], content_type, errors, warnings)


def validate_content_schema(content: Any) -> CheckResult:
    """Check a content record's required fields, formats and type-specific sections."""
    if not isinstance(content, dict):
        return CheckResult(valid=False, errors=["Content must be an object"])

    errors: List[str] = []
    warnings: List[str] = []
    content_type = content.get("type")

    _validate_base(content, errors, warnings)

    if content_type == "project":
        links = content.get("links")
        if not isinstance(links, dict):
            errors.append("Missing links section for project content")
        else:
            _validate_links(links, errors, warnings)
    elif content_type == "post":
        if not isinstance(content.get("featured"), bool):
            errors.append("Featured field must be a boolean for post content")

    _validate_seo(content.get("seo"), content_type, errors, warnings)

    return CheckResult(valid=not errors, errors=errors, warnings=warnings)


def normalize_schema_type(content: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of *content* whose ``seo.schema.type`` is filled with the type default.

    Missing ``seo`` / ``seo.schema`` sections are created.  An existing type,
    valid or not, is kept.
    """
    normalized = copy.deepcopy(content)
    seo = normalized.get("seo")
    if not isinstance(seo, dict):
        seo = normalized["seo"] = {}
    schema = seo.get("schema")
    if not isinstance(schema, dict):
        schema = seo["schema"] = {}
    if not schema.get("type"):
        schema["type"] = get_default_schema_type(normalized.get("type"))
    return normalized
