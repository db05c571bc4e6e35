"""Single-record content validation: schema, front-matter, SEO fallbacks, lengths, body."""

import copy
import re
from typing import Any, Dict, List, Optional

from wp2mdx.models.options import DEFAULT_SITE_URL, ContentValidationOptions
from wp2mdx.models.results import (
    CheckResult,
    ContentBatchResult,
    ContentBatchSummary,
    ContentValidationResult,
    FieldLengths,
    SEOFallbacks,
)
from wp2mdx.services.front_matter import validate_front_matter
from wp2mdx.services.mdx import validate_mdx_content
from wp2mdx.services.schema_validator import validate_content_schema
from wp2mdx.services.slugs import check_slugs_per_item, get_canonical_path

MAX_SEO_TITLE = 60
MIN_SEO_DESCRIPTION = 120
MAX_SEO_DESCRIPTION = 160

_TAG_RE = re.compile(r"<[^>]*>")
_SENTENCE_END_RE = re.compile(r"[.!?]")


def _is_blank(value: Any) -> bool:
    return not value or not str(value).strip()


def extract_description_from_content(text: Optional[str]) -> Optional[str]:
    """Derive a meta description from the body: first sentence, else the first 150 chars."""
    if not text:
        return None

    plain = re.sub(r"\n+", " ", _TAG_RE.sub("", text)).strip()

    first_sentence = _SENTENCE_END_RE.split(plain, maxsplit=1)[0]
    if 50 <= len(first_sentence) <= 160:
        return first_sentence.strip()

    if len(plain) >= 50:
        return plain[:150].strip() + ("..." if len(plain) > 150 else "")

    return None


def _canonical_url(content: Dict[str, Any], site_url: str) -> str:
    return f"{site_url.rstrip('/')}{get_canonical_path(content)}"


def _seo_fallbacks(content: Dict[str, Any], site_url: str, warnings: List[str]) -> SEOFallbacks:
    seo = content.get("seo") if isinstance(content.get("seo"), dict) else {}
    title = content.get("title")
    fallbacks = SEOFallbacks()

    if _is_blank(seo.get("title")):
        fallbacks.title = title
        warnings.append("SEO title is missing, using content title as fallback")
    else:
        fallbacks.title = seo["title"]

    if _is_blank(seo.get("description")):
        extracted = extract_description_from_content(content.get("content"))
        if extracted:
            fallbacks.description = extracted
            warnings.append("SEO description is missing, extracted from content")
        else:
            fallbacks.description = f"Learn more about {title}"
            warnings.append("SEO description is missing, using generic fallback")
    else:
        fallbacks.description = seo["description"]

    if _is_blank(seo.get("canonical")):
        fallbacks.canonical = _canonical_url(content, site_url)
        warnings.append("SEO canonical URL is missing, using generated fallback")
    else:
        fallbacks.canonical = seo["canonical"]

    if fallbacks.title and len(fallbacks.title) > MAX_SEO_TITLE:
        warnings.append(
            f"SEO title ({len(fallbacks.title)} chars) exceeds recommended {MAX_SEO_TITLE} characters"
        )
    description = fallbacks.description
    if description and len(description) > MAX_SEO_DESCRIPTION:
        warnings.append(
            f"SEO description ({len(description)} chars) exceeds recommended {MAX_SEO_DESCRIPTION} characters"
        )
    if description and len(description) < MIN_SEO_DESCRIPTION:
        warnings.append(
            f"SEO description ({len(description)} chars) is shorter than recommended "
            f"{MIN_SEO_DESCRIPTION} characters"
        )

    return fallbacks


def validate_field_lengths(content: Dict[str, Any]) -> CheckResult:
    warnings: List[str] = []

    title = content.get("title")
    if title and len(title) > 60:
        warnings.append(f"Title ({len(title)} chars) is longer than recommended 60 characters")

    body = content.get("content")
    if body:
        word_count = len(body.split())
        if word_count < 100:
            warnings.append(f"Content is short ({word_count} words), consider adding more detail")
        elif word_count > 3000:
            warnings.append(
                f"Content is very long ({word_count} words), consider breaking into multiple posts"
            )

    hero = content.get("hero")
    if isinstance(hero, dict):
        hero_title = hero.get("title")
        if hero_title and len(hero_title) > 80:
            warnings.append(
                f"Hero title ({len(hero_title)} chars) is longer than recommended 80 characters"
            )
        subtitle = hero.get("subtitle")
        if subtitle and len(subtitle) > 200:
            warnings.append(
                f"Hero subtitle ({len(subtitle)} chars) is longer than recommended 200 characters"
            )

    links = content.get("links")
    if content.get("type") == "project" and isinstance(links, dict):
        for key, value in links.items():
            if isinstance(value, str) and len(value) > 200:
                warnings.append(f"Project link {key} URL is very long ({len(value)} chars)")

    return CheckResult(valid=True, warnings=warnings)


def calculate_field_lengths(content: Dict[str, Any]) -> FieldLengths:
    seo = content.get("seo") if isinstance(content.get("seo"), dict) else {}
    return FieldLengths(
        title=len(content.get("title") or ""),
        seo_title=len(seo.get("title") or ""),
        seo_description=len(seo.get("description") or ""),
        content=len(content.get("content") or ""),
    )


def validate_content(
    content: Dict[str, Any], options: Optional[ContentValidationOptions] = None
) -> ContentValidationResult:
    """Run every per-record check in a fixed order, accumulating all findings.

    No stage short-circuits a later one.  Slug collisions need the whole
    batch and are handled by :func:`validate_content_batch`.
    """
    opts = options or ContentValidationOptions()
    errors: List[str] = []
    warnings: List[str] = []

    if not isinstance(content, dict):
        return ContentValidationResult(valid=False, errors=["Content must be an object"])

    for check in (validate_content_schema(content), validate_front_matter(content)):
        errors.extend(check.errors)
        warnings.extend(check.warnings)

    fallbacks = SEOFallbacks()
    if opts.enforce_seo_fallbacks:
        fallbacks = _seo_fallbacks(content, opts.site_url, warnings)

    if opts.strict_length_validation:
        warnings.extend(validate_field_lengths(content).warnings)

    body = content.get("content")
    if body and opts.validate_mdx_syntax:
        mdx = validate_mdx_content(body)
        errors.extend(mdx.errors)
        warnings.extend(mdx.warnings)

    if not opts.allow_empty_content and _is_blank(body):
        errors.append("Content body is empty")

    return ContentValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        seo_fallbacks=fallbacks,
        field_lengths=calculate_field_lengths(content),
    )


def validate_content_batch(
    contents: List[Dict[str, Any]], options: Optional[ContentValidationOptions] = None
) -> ContentBatchResult:
    """Validate each record, then add slug findings to the records they concern."""
    opts = options or ContentValidationOptions()
    results = [validate_content(content, opts) for content in contents]

    if opts.validate_slug_conflicts and contents:
        for result, slug_check in zip(results, check_slugs_per_item(contents)):
            result.errors.extend(slug_check.errors)
            result.warnings.extend(slug_check.warnings)
            result.valid = not result.errors

    valid = sum(1 for r in results if r.valid)
    return ContentBatchResult(
        valid=valid == len(results),
        results=results,
        summary=ContentBatchSummary(
            total=len(contents),
            valid=valid,
            invalid=len(results) - valid,
            total_errors=sum(len(r.errors) for r in results),
            total_warnings=sum(len(r.warnings) for r in results),
        ),
    )


def apply_seo_fallbacks(content: Dict[str, Any], site_url: Optional[str] = None) -> Dict[str, Any]:
    """Return a copy of *content* with blank SEO title, description and canonical filled in."""
    result = copy.deepcopy(content)
    seo = result.get("seo")
    if not isinstance(seo, dict):
        seo = result["seo"] = {}

    if _is_blank(seo.get("title")):
        seo["title"] = result.get("title")
    if _is_blank(seo.get("description")):
        seo["description"] = (
            extract_description_from_content(result.get("content"))
            or f"Learn more about {result.get('title')}"
        )
    if _is_blank(seo.get("canonical")):
        seo["canonical"] = _canonical_url(result, site_url or DEFAULT_SITE_URL)
    return result
