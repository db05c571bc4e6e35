"""Slug normalisation and cross-type collision handling.

Pages, projects and posts share one URL namespace in the migrated site.  When
several items want the same slug the highest-precedence type keeps it
(page > project > post, first-seen wins among equals) and the others are
renamed ``<slug>-<type>``, ``<slug>-<type>-2``, ...
"""

import logging
import re
import unicodedata
from typing import Any, Dict, Iterable, List, Optional, Set

from wp2mdx.models.results import CheckResult
from wp2mdx.models.slug import SlugConflict, SlugResolution, SlugResolutionResult, SlugResolutionStats

logger = logging.getLogger(__name__)

PRECEDENCE = {"page": 3, "project": 2, "post": 1}

_VALID_SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def is_valid_slug(slug: Any) -> bool:
    return isinstance(slug, str) and bool(_VALID_SLUG_RE.match(slug))


def normalize_slug(slug: Any) -> str:
    if not slug or not isinstance(slug, str):
        return ""
    value = slug.lower().strip()
    value = re.sub(r"[^a-z0-9\s-]", "", value)
    value = re.sub(r"\s+", "-", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-")


def generate_slug_from_title(title: Any) -> str:
    """Slugify a title, transliterating accented characters to ASCII first."""
    if not title or not isinstance(title, str):
        return ""
    ascii_title = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    return normalize_slug(ascii_title)


def get_canonical_path(item: Dict[str, Any]) -> str:
    slug = item.get("slug") or ""
    content_type = item.get("type")
    if content_type == "project":
        return f"/work/{slug}"
    if content_type == "post":
        return f"/blog/{slug}"
    return f"/{slug}"


def get_content_type_from_path(path: str) -> Optional[str]:
    if path.startswith("/work/"):
        return "project"
    if path.startswith("/blog/"):
        return "post"
    if path.startswith("/"):
        return "page"
    return None


def _group_by_slug(items: Iterable[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for item in items:
        groups.setdefault(item.get("slug") or "", []).append(item)
    return groups


def _rank(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort by precedence, highest first; the index keeps equal types in input order."""
    decorated = [(-PRECEDENCE.get(item.get("type"), 0), index, item) for index, item in enumerate(items)]
    decorated.sort(key=lambda entry: (entry[0], entry[1]))
    return [item for _, _, item in decorated]


def _unique_slug(item: Dict[str, Any], taken: Set[str]) -> str:
    base = f"{item.get('slug')}-{item.get('type') or 'item'}"
    candidate = base
    counter = 1
    while candidate in taken:
        counter += 1
        candidate = f"{base}-{counter}"
    return candidate


def resolve_slug_conflicts(items: List[Dict[str, Any]]) -> SlugResolutionResult:
    """Give every item a unique slug, keyed by that slug in ``resolved``."""
    groups = _group_by_slug(items)
    # Renamed items must not land on a slug another group still owns
    taken: Set[str] = set(groups)
    resolved: Dict[str, Dict[str, Any]] = {}
    conflicts: List[SlugConflict] = []

    for slug, group in groups.items():
        if len(group) == 1:
            resolved[slug] = group[0]
            continue

        ranked = _rank(group)
        primary, losers = ranked[0], ranked[1:]
        conflicts.append(
            SlugConflict(
                slug=slug,
                items=group,
                resolution=SlugResolution(primary=primary, conflicts=losers),
            )
        )
        resolved[slug] = primary

        for loser in losers:
            new_slug = _unique_slug(loser, taken)
            taken.add(new_slug)
            resolved[new_slug] = {**loser, "slug": new_slug}
            logger.info("Slug %r reassigned to %s %r", slug, loser.get("type"), new_slug)

    return SlugResolutionResult(
        resolved=resolved,
        conflicts=conflicts,
        stats=SlugResolutionStats(total=len(items), resolved=len(resolved), conflicts=len(conflicts)),
    )


def check_slugs_per_item(items: List[Any]) -> List[CheckResult]:
    """Slug findings for each item, in input order.

    A malformed slug is an error on its own item only; a shared slug is a
    warning on every item in the group.  Non-dict items get an empty result.
    """
    results = [CheckResult(valid=True) for _ in items]
    groups: Dict[str, List[int]] = {}

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        if not is_valid_slug(item.get("slug")):
            results[index].errors.append(
                f'Invalid slug format for {item.get("type")} "{item.get("title")}": "{item.get("slug")}"'
            )
        groups.setdefault(item.get("slug") or "", []).append(index)

    for slug, indexes in groups.items():
        if len(indexes) > 1:
            types = ", ".join(str(items[index].get("type")) for index in indexes)
            for index in indexes:
                results[index].warnings.append(f'Slug conflict for "{slug}": {types}')

    for result in results:
        result.valid = not result.errors
    return results


def validate_slugs(items: List[Dict[str, Any]]) -> CheckResult:
    """Report malformed slugs (errors) and shared slugs (warnings) across a batch."""
    errors: List[str] = []
    warnings: List[str] = []

    for item in items:
        if not is_valid_slug(item.get("slug")):
            errors.append(
                f'Invalid slug format for {item.get("type")} "{item.get("title")}": "{item.get("slug")}"'
            )

    for slug, group in _group_by_slug(items).items():
        if len(group) > 1:
            types = ", ".join(str(item.get("type")) for item in group)
            warnings.append(f'Slug conflict for "{slug}": {types}')

    return CheckResult(valid=not errors, errors=errors, warnings=warnings)


def _renamed_slug(result: SlugResolutionResult, item: Dict[str, Any]) -> Optional[str]:
    for slug, candidate in result.resolved.items():
        same = candidate.get("id") == item.get("id") and candidate.get("type") == item.get("type")
        if same and slug != item.get("slug"):
            return slug
    return None


def generate_slug_resolution_report(result: SlugResolutionResult) -> str:
    stats = result.stats
    lines = [
        "Slug Resolution Report:",
        f"Total items: {stats.total}",
        f"Resolved slugs: {stats.resolved}",
        f"Conflicts found: {stats.conflicts}",
        "",
    ]

    if result.conflicts:
        lines.append("Conflicts resolved:")
        for conflict in result.conflicts:
            primary = conflict.resolution.primary
            lines.append("")
            lines.append(f'Slug: "{conflict.slug}"')
            lines.append(f'Primary (keeps slug): {primary.get("type")} - "{primary.get("title")}"')
            if conflict.resolution.conflicts:
                lines.append("Modified slugs:")
                for item in conflict.resolution.conflicts:
                    lines.append(
                        f'  - {item.get("type")} "{item.get("title")}": '
                        f'"{item.get("slug")}" → "{_renamed_slug(result, item)}"'
                    )

    return "\n".join(lines) + "\n"
