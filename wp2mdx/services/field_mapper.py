"""Mapping of the theme's ``themerain_*`` post meta onto the hero/links/seo schema."""

from typing import Any, Dict, Optional

from wp2mdx.models.content import CONTENT_KINDS, HERO_FIELDS, LINK_FIELDS, HeroFields, ProjectLinks
from wp2mdx.models.options import FieldMappingOptions
from wp2mdx.models.results import CheckResult

# Target field -> meta keys tried in order; the first truthy value wins
HERO_SOURCES = {
    "title": ("themerain_hero_title", "themerain_page_title"),
    "subtitle": ("themerain_hero_subtitle", "themerain_page_subtitle"),
    "image": ("themerain_hero_image",),
    "video": ("themerain_hero_video",),
    "text_color": ("themerain_hero_text_color", "themerain_page_text_color"),
    "background_color": ("themerain_hero_bg_color", "themerain_page_bg_color"),
}

LINK_SOURCES = {
    "url": ("themerain_project_link_url",),
    "image": ("themerain_project_link_image",),
    "video": ("themerain_project_link_video",),
}

SEO_SOURCES = {
    "title": "themerain_seo_title",
    "description": "themerain_seo_description",
    "canonical": "themerain_seo_canonical",
}

SCHEMA_SOURCES = {
    "image": "themerain_seo_image",
    "author": "themerain_seo_author",
    "publishDate": "themerain_seo_publish_date",
    "modifiedDate": "themerain_seo_modified_date",
    "breadcrumbs": "themerain_seo_breadcrumbs",
}

_DEFAULT_SCHEMA_TYPES = {
    "project": "CreativeWork",
    "post": "BlogPosting",
    "page": "WebPage",
}


def get_default_schema_type(content_type: Optional[str]) -> str:
    return _DEFAULT_SCHEMA_TYPES.get(content_type or "", "WebPage")


def _first(meta: Dict[str, Any], keys) -> Any:
    for key in keys:
        value = meta.get(key)
        if value:
            return str(value)
    return ""


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def generate_seo_schema(
    meta: Dict[str, Any],
    content_type: Optional[str],
    seo_defaults: Optional[Dict[str, str]] = None,
    default_author: str = "Polything Ltd",
) -> Dict[str, Any]:
    """Build the ``seo`` block, dropping any field that ends up empty."""
    defaults = seo_defaults or {}

    seo: Dict[str, Any] = {
        field: meta.get(key) or defaults.get(field) or "" for field, key in SEO_SOURCES.items()
    }

    schema: Dict[str, Any] = {"type": get_default_schema_type(content_type)}
    for field, key in SCHEMA_SOURCES.items():
        schema[field] = meta.get(key) or ""
    schema["author"] = schema["author"] or defaults.get("author") or default_author
    schema["breadcrumbs"] = schema["breadcrumbs"] or []

    seo = {k: v for k, v in seo.items() if not _is_blank(v)}
    schema = {k: v for k, v in schema.items() if not _is_blank(v)}
    if schema:
        seo["schema"] = schema
    return seo


def map_themerain_fields(
    meta: Optional[Dict[str, Any]],
    content_type: Optional[str],
    options: Optional[FieldMappingOptions] = None,
) -> Dict[str, Any]:
    """Translate raw theme meta into the front-matter ``hero``/``links``/``seo`` sections.

    Only ``project`` content carries ``links``; for posts and pages the key
    is absent rather than empty.  Missing or non-dict *meta* yields the same
    shape with every field set to ``""``.
    """
    opts = options or FieldMappingOptions()
    source = meta if isinstance(meta, dict) else {}
    known = content_type in CONTENT_KINDS

    hero = HeroFields(**{field: _first(source, keys) if known else "" for field, keys in HERO_SOURCES.items()})
    result: Dict[str, Any] = {"hero": hero.model_dump()}

    if content_type == "project":
        links = ProjectLinks(**{field: _first(source, keys) for field, keys in LINK_SOURCES.items()})
        result["links"] = links.model_dump()

    result["seo"] = generate_seo_schema(source, content_type, opts.seo_defaults, opts.default_author)

    if opts.include_theme_meta:
        result["theme_meta"] = dict(source)

    return result


def validate_mapped_schema(schema: Dict[str, Any], content_type: Optional[str]) -> CheckResult:
    errors = []

    hero = schema.get("hero")
    if not hero:
        return CheckResult(valid=False, errors=["Missing hero section"])

    errors.extend(f"Missing hero.{field}" for field in HERO_FIELDS if field not in hero)

    if content_type == "project":
        links = schema.get("links")
        if not links:
            errors.append("Missing links section for project")
        else:
            errors.extend(f"Missing links.{field}" for field in LINK_FIELDS if field not in links)

    return CheckResult(valid=not errors, errors=errors)


def get_field_mapping_docs() -> Dict[str, Any]:
    """Describe which meta keys feed each output field (debugging aid)."""
    return {
        "hero": {field: list(keys) for field, keys in HERO_SOURCES.items()},
        "links": {field: list(keys) for field, keys in LINK_SOURCES.items()},
        "seo": {
            **{field: [key] for field, key in SEO_SOURCES.items()},
            "schema": {
                "type": ["Default based on content type"],
                **{field: [key] for field, key in SCHEMA_SOURCES.items()},
            },
        },
        "notes": {
            "Project fields": "Include both hero and links sections",
            "Post fields": "Include only hero section",
            "Page fields": "Include only hero section",
            "Fallback logic": "Uses page_* fields as fallback for hero_* fields",
            "SEO defaults": "Schema type defaults based on content type",
        },
    }
