"""SEO fallback generation and validation of explicit ``seo`` metadata."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from wp2mdx.models.content import SCHEMA_TYPES
from wp2mdx.models.options import SEOValidationOptions
from wp2mdx.models.results import SEOFallbacks, SEOValidationResult
from wp2mdx.services.schema_validator import is_valid_breadcrumb_url, is_valid_media_path, is_valid_url
from wp2mdx.services.slugs import get_canonical_path


def is_parseable_date(value: Any) -> bool:
    """Lenient ISO-8601 check: anything :func:`datetime.fromisoformat` accepts, ``Z`` included."""
    if not isinstance(value, str) or not value:
        return False
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _section(content: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = content.get(key)
    return value if isinstance(value, dict) else {}


def generate_title_fallback(content: Dict[str, Any]) -> Optional[str]:
    return _section(content, "seo").get("title") or _section(content, "hero").get("title") or content.get("title") or None


def generate_description_fallback(content: Dict[str, Any]) -> Optional[str]:
    return _section(content, "seo").get("description") or _section(content, "hero").get("subtitle") or None


def generate_canonical_fallback(content: Dict[str, Any], site_url: str) -> str:
    return _section(content, "seo").get("canonical") or f"{site_url.rstrip('/')}{get_canonical_path(content)}"


def _check_length(
    label: str, value: str, minimum: int, maximum: int, warnings: List[str]
) -> None:
    if len(value) > maximum:
        warnings.append(f"{label} too long: {len(value)} characters. Recommended max: {maximum}.")
    if len(value) < minimum:
        warnings.append(f"{label} too short: {len(value)} characters. Recommended min: {minimum}.")


def _validate_schema_fields(schema: Dict[str, Any], errors: List[str], warnings: List[str]) -> None:
    schema_type = schema.get("type")
    if schema_type and schema_type not in SCHEMA_TYPES:
        errors.append(f"Invalid schema type: {schema_type}. Must be one of: {', '.join(SCHEMA_TYPES)}")

    for field in ("publishDate", "modifiedDate"):
        value = schema.get(field)
        if value and not is_parseable_date(value):
            errors.append(f"Invalid {field} format: {value}. Must be ISO 8601 format.")

    image = schema.get("image")
    if image and not is_valid_media_path(image):
        warnings.append(f"Invalid schema image path: {image}. Expected /images/* path or full URL.")

    breadcrumbs = schema.get("breadcrumbs")
    if not breadcrumbs:
        return
    if not isinstance(breadcrumbs, list):
        errors.append("Breadcrumbs must be an array")
        return
    for index, crumb in enumerate(breadcrumbs, start=1):
        crumb = crumb if isinstance(crumb, dict) else {}
        if not crumb.get("name") or not crumb.get("url"):
            errors.append(f"Breadcrumb {index} missing name or url")
        if crumb.get("url") and not is_valid_breadcrumb_url(crumb["url"]):
            warnings.append(f"Invalid breadcrumb URL: {crumb['url']}")


def _validate_custom_fields(
    seo: Dict[str, Any], opts: SEOValidationOptions, errors: List[str], warnings: List[str]
) -> None:
    if seo.get("title"):
        _check_length("Custom SEO title", seo["title"], opts.min_title_length, opts.max_title_length, warnings)
    if seo.get("description"):
        _check_length(
            "Custom SEO description",
            seo["description"],
            opts.min_description_length,
            opts.max_description_length,
            warnings,
        )

    canonical = seo.get("canonical")
    if canonical and not is_valid_url(canonical):
        errors.append(f"Invalid canonical URL format: {canonical}")

    if isinstance(seo.get("schema"), dict):
        _validate_schema_fields(seo["schema"], errors, warnings)


def validate_and_generate_seo_fallbacks(
    content: Dict[str, Any], options: Optional[SEOValidationOptions] = None
) -> SEOValidationResult:
    """Work out the effective SEO title, description and canonical URL.

    Missing values fall back to hero and base fields; the canonical URL is
    built from ``site_url`` and the content type's path.  Length problems are
    warnings; malformed explicit ``seo`` metadata is an error.
    """
    opts = options or SEOValidationOptions()
    errors: List[str] = []
    warnings: List[str] = []

    fallbacks = SEOFallbacks(
        title=generate_title_fallback(content),
        description=generate_description_fallback(content),
        canonical=generate_canonical_fallback(content, opts.site_url),
    )

    if not fallbacks.title:
        errors.append("No title available for SEO fallback")
    if not fallbacks.description and opts.enforce_fallbacks:
        warnings.append("No description available for SEO fallback")

    if opts.strict_length_validation:
        if fallbacks.title:
            _check_length("SEO title", fallbacks.title, opts.min_title_length, opts.max_title_length, warnings)
        if fallbacks.description:
            _check_length(
                "SEO description",
                fallbacks.description,
                opts.min_description_length,
                opts.max_description_length,
                warnings,
            )

    seo = content.get("seo")
    if isinstance(seo, dict) and seo:
        _validate_custom_fields(seo, opts, errors, warnings)

    return SEOValidationResult(valid=not errors, errors=errors, warnings=warnings, fallbacks=fallbacks)
