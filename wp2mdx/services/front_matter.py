"""YAML front-matter: writing, structural validation and syntax linting."""

import copy
import json
import re
from typing import Any, Dict, List, Optional, Tuple

import yaml

from wp2mdx.models.content import CONTENT_KINDS
from wp2mdx.models.results import CheckResult

BASIC_FIELDS = ("title", "slug", "type", "date", "updated", "categories", "tags", "featured")
SECTIONS = ("hero", "links", "seo", "theme_meta")

_SLUG_CHARS_RE = re.compile(r"^[a-z0-9-]+$")
_SIMPLE_VALUE_RE = re.compile(r"^[a-zA-Z0-9\-_]+$")
_KEY_RE = re.compile(r"^(\s*)([^:]+):")


def _escape_yaml(value: str) -> str:
    """Escape characters that would break inline double-quoted YAML strings."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape_yaml(value)}"'
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        # JSON is valid YAML flow syntax
        return json.dumps(value)
    return f'"{_escape_yaml(str(value))}"'


def _nested_lines(data: Dict[str, Any], indent: int) -> List[str]:
    pad = " " * indent
    lines: List[str] = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            lines.append(f"{pad}{key}:")
            for item in value:
                if isinstance(item, dict):
                    lines.append(f"{pad}  -")
                    lines.extend(_nested_lines(item, indent + 4))
                else:
                    lines.append(f"{pad}  - {_format_value(item)}")
        elif isinstance(value, dict):
            lines.append(f"{pad}{key}:")
            lines.extend(_nested_lines(value, indent + 2))
        else:
            lines.append(f"{pad}{key}: {_format_value(value)}")
    return lines


def make_frontmatter(front_matter: Dict[str, Any], include_theme_meta: bool = False) -> str:
    """Return a ``---`` delimited YAML block for an MDX file.

    Basic fields come first in a fixed order, then any extra scalar fields,
    then the nested ``hero``, ``links`` and ``seo`` sections.
    ``theme_meta`` is only written when *include_theme_meta* is set.
    """
    lines = ["---"]

    for field in BASIC_FIELDS:
        if field in front_matter and front_matter[field] is not None:
            lines.append(f"{field}: {_format_value(front_matter[field])}")

    for key, value in front_matter.items():
        if key in BASIC_FIELDS or key in SECTIONS or value is None:
            continue
        lines.append(f"{key}: {_format_value(value)}")

    for section in ("hero", "links", "seo"):
        if front_matter.get(section):
            lines.append(f"{section}:")
            lines.extend(_nested_lines(front_matter[section], 2))

    if include_theme_meta and front_matter.get("theme_meta"):
        lines.append("theme_meta:")
        lines.extend(_nested_lines(front_matter["theme_meta"], 2))

    lines.append("---")
    return "\n".join(lines)


def generate_mdx_document(
    front_matter: Dict[str, Any], body: Optional[str], include_theme_meta: bool = False
) -> str:
    return f"{make_frontmatter(front_matter, include_theme_meta)}\n\n{body or ''}"


def validate_front_matter(front_matter: Dict[str, Any]) -> CheckResult:
    errors: List[str] = []
    warnings: List[str] = []

    if not front_matter.get("title"):
        errors.append("Title is required")
    if not front_matter.get("slug"):
        errors.append("Slug is required")
    if not front_matter.get("type"):
        errors.append("Type is required")

    slug = front_matter.get("slug")
    if slug and not _SLUG_CHARS_RE.match(str(slug)):
        errors.append("Slug must contain only lowercase letters, numbers, and hyphens")

    content_type = front_matter.get("type")
    if content_type and content_type not in CONTENT_KINDS:
        errors.append(f"Type must be one of: {', '.join(CONTENT_KINDS)}")

    seo = front_matter.get("seo")
    if isinstance(seo, dict):
        title = seo.get("title")
        description = seo.get("description")
        if title and len(title) > 60:
            warnings.append("SEO title is longer than recommended 60 characters")
        if description and len(description) > 160:
            warnings.append("SEO description is longer than recommended 160 characters")
        if description and len(description) < 120:
            warnings.append("SEO description is shorter than recommended 120 characters")

    return CheckResult(valid=not errors, errors=errors, warnings=warnings)


def apply_seo_defaults(front_matter: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return a copy of *front_matter* with blank ``seo`` keys taken from *defaults*."""
    if not defaults:
        return front_matter

    result = copy.deepcopy(front_matter)
    seo = result.get("seo")
    if not isinstance(seo, dict):
        seo = result["seo"] = {}
    for key, value in defaults.items():
        if seo.get(key) in (None, ""):
            seo[key] = value
    return result


def _front_matter_body(text: str) -> str:
    lines = text.split("\n")
    if lines and lines[0].strip() == "---":
        lines = lines[1:]
    if "---" in (line.strip() for line in lines):
        end = [line.strip() for line in lines].index("---")
        lines = lines[:end]
    return "\n".join(lines)


def validate_yaml_syntax(text: Optional[str]) -> CheckResult:
    """Lint a front-matter block.

    Missing delimiters and anything PyYAML cannot parse are errors; odd
    indentation, unquoted values with spaces or colons, and repeated keys in
    the same mapping are warnings.
    """
    if not text or not isinstance(text, str):
        return CheckResult(valid=False, errors=["YAML content is empty or invalid"])

    errors: List[str] = []
    warnings: List[str] = []

    if not text.startswith("---"):
        errors.append("YAML front-matter must start with ---")
    if "\n---\n" not in text and not text.endswith("\n---"):
        errors.append("YAML front-matter must end with ---")

    try:
        yaml.safe_load(_front_matter_body(text))
    except yaml.YAMLError as exc:
        errors.append(f"YAML parsing error: {exc}")

    # (indent, key) pairs of the open mappings above the current line
    stack: List[Tuple[int, str]] = []
    seen = set()

    for number, line in enumerate(text.split("\n"), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped == "---":
            continue

        indent = len(line) - len(line.lstrip())
        if indent % 2:
            warnings.append(f"Line {number}: YAML should use 2-space indentation")

        if ":" in line and '"' not in line and "'" not in line:
            key, _, value = line.partition(":")
            value = value.strip()
            if value and not _SIMPLE_VALUE_RE.match(value) and not value.startswith(("[", "{")):
                if " " in value or ":" in value or "#" in value:
                    warnings.append(f'Line {number}: Consider quoting value for key "{key.strip()}"')

        if stripped.startswith("-"):
            while stack and stack[-1][0] >= indent:
                stack.pop()
            # Each list item opens a fresh mapping
            stack.append((indent, f"-{number}"))
            remainder = stripped[1:].lstrip()
            if not remainder or remainder.startswith(('"', "'")):
                continue
            indent += len(stripped) - len(remainder)
            line = " " * indent + remainder

        match = _KEY_RE.match(line)
        if not match:
            continue
        key = match.group(2).strip()
        while stack and stack[-1][0] >= indent:
            stack.pop()
        scope = tuple(entry[1] for entry in stack)
        if (scope, key) in seen:
            warnings.append(f'Line {number}: Potential duplicate key "{key}"')
        seen.add((scope, key))
        stack.append((indent, key))

    return CheckResult(valid=not errors, errors=errors, warnings=warnings)
