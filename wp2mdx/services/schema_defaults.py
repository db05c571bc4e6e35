"""Fill in SEO schema defaults (type, dates, author, breadcrumbs) by content type.

Every pass is additive: a value that is already present and non-empty is
never replaced.  The input record is not modified.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from wp2mdx.models.content import Breadcrumb
from wp2mdx.models.options import SchemaDefaultsOptions
from wp2mdx.models.results import CheckResult, SchemaDefaultsBatchResult, SchemaDefaultsSummary
from wp2mdx.services.field_mapper import get_default_schema_type

logger = logging.getLogger(__name__)

AUTHORED_TYPES = ("post", "project")


def generate_breadcrumbs(content: Dict[str, Any]) -> List[Dict[str, str]]:
    title = content.get("title") or ""
    slug = content.get("slug") or ""
    content_type = content.get("type")

    crumbs = [Breadcrumb(name="Home", url="/")]
    if content_type == "project":
        crumbs.append(Breadcrumb(name="Projects", url="/projects"))
        crumbs.append(Breadcrumb(name=title, url=f"/projects/{slug}"))
    elif content_type == "post":
        crumbs.append(Breadcrumb(name="Blog", url="/blog"))
        crumbs.append(Breadcrumb(name=title, url=f"/blog/{slug}"))
    else:
        crumbs.append(Breadcrumb(name=title, url=f"/{slug}"))
    return [crumb.model_dump() for crumb in crumbs]


def _schema_section(content: Dict[str, Any]) -> Dict[str, Any]:
    seo = content.get("seo")
    if not isinstance(seo, dict):
        seo = content["seo"] = {}
    schema = seo.get("schema")
    if not isinstance(schema, dict):
        schema = seo["schema"] = {}
    return schema


def _set_default(target: Dict[str, Any], key: str, value: Any) -> None:
    if not target.get(key) and value:
        target[key] = value


def _apply_content_type_defaults(content: Dict[str, Any], author: str) -> None:
    content_type = content.get("type")
    if content_type not in ("post", "page", "project"):
        return

    schema = _schema_section(content)
    _set_default(schema, "type", get_default_schema_type(content_type))
    _set_default(schema, "publishDate", content.get("date"))
    _set_default(schema, "modifiedDate", content.get("updated"))
    if content_type in AUTHORED_TYPES:
        _set_default(schema, "author", author)
    _set_default(schema, "breadcrumbs", generate_breadcrumbs(content))


def _enforce_schema_type(content: Dict[str, Any]) -> None:
    schema = _schema_section(content)
    if content.get("type") in ("post", "page", "project"):
        _set_default(schema, "type", get_default_schema_type(content["type"]))


def _enforce_required_fields(content: Dict[str, Any], author: str) -> None:
    schema = _schema_section(content)
    _set_default(schema, "publishDate", content.get("date"))
    _set_default(schema, "modifiedDate", content.get("updated"))
    if content.get("type") in AUTHORED_TYPES:
        _set_default(schema, "author", author)


def enforce_schema_defaults(
    content: Dict[str, Any], options: Optional[SchemaDefaultsOptions] = None
) -> Dict[str, Any]:
    """Return a copy of *content* with ``seo.schema`` defaults applied."""
    opts = options or SchemaDefaultsOptions()
    result = copy.deepcopy(content)

    if opts.apply_content_type_defaults:
        _apply_content_type_defaults(result, opts.author)
    if opts.enforce_schema_types:
        _enforce_schema_type(result)
    if opts.enforce_required_fields:
        _enforce_required_fields(result, opts.author)

    return result


def validate_schema_type_consistency(content: Dict[str, Any]) -> CheckResult:
    content_type = content.get("type")
    expected = get_default_schema_type(content_type)
    schema = (content.get("seo") or {}).get("schema") or {}
    actual = schema.get("type")

    if not actual:
        return CheckResult(
            valid=True,
            warnings=[f"No schema type specified for {content_type}, will use default: {expected}"],
        )

    warnings = []
    if actual != expected:
        warnings.append(f"Schema type '{actual}' for {content_type} doesn't match expected '{expected}'")
    return CheckResult(valid=True, warnings=warnings)


def enforce_schema_defaults_batch(
    contents: List[Dict[str, Any]], options: Optional[SchemaDefaultsOptions] = None
) -> SchemaDefaultsBatchResult:
    processed: List[Dict[str, Any]] = []
    errors = 0
    warnings = 0

    for content in contents:
        try:
            processed.append(enforce_schema_defaults(content, options))
        except (AttributeError, TypeError) as exc:
            errors += 1
            slug = content.get("slug") if isinstance(content, dict) else None
            logger.error("Error applying schema defaults to %s: %s", slug, exc)

    for item in processed:
        consistency = validate_schema_type_consistency(item)
        errors += len(consistency.errors)
        warnings += len(consistency.warnings)

    return SchemaDefaultsBatchResult(
        processed=processed,
        summary=SchemaDefaultsSummary(
            total=len(contents),
            processed=len(processed),
            errors=errors,
            warnings=warnings,
        ),
    )
