"""WordPress HTML to MDX conversion.

The conversion is a sequence of textual rewrites rather than a tree walk.
Order matters:

1. strip WordPress artifacts (shared with :mod:`wp2mdx.services.sanitizer`)
2. extract media references and rewrite upload URLs to ``/images/``
3. normalise iframes / embeds
4. drop empty markup and turn ``<br>`` into newlines
5. map tags to Markdown, with embeds swapped out for placeholders so the
   tag rules cannot touch their internals
6. strip leftover tags, decode entities, tidy blank lines
"""

import itertools
import logging
import re
from typing import Dict, List, Optional, Tuple

from wp2mdx.models.options import ConversionOptions
from wp2mdx.models.results import CheckResult, ConversionResult
from wp2mdx.services.media import convert_to_local_path
from wp2mdx.services.sanitizer import decode_entities, remove_wordpress_artifacts

logger = logging.getLogger(__name__)

_UPLOADS_MARKER = "/wp-content/uploads/"

_IMG_RE = re.compile(r'<img\b[^>]*?\ssrc="([^"]+)"[^>]*>', re.IGNORECASE)
_ALT_RE = re.compile(r'\balt="([^"]*)"', re.IGNORECASE)
_VIDEO_SRC_RE = re.compile(r'(<video\b[^>]*?\ssrc=")([^"]+)(")', re.IGNORECASE)
_SOURCE_SRC_RE = re.compile(r'(<source\b[^>]*?\ssrc=")([^"]+)(")', re.IGNORECASE)

_IFRAME_RE = re.compile(r'<iframe\b[^>]*?\ssrc="([^"]+)"[^>]*>\s*</iframe>', re.IGNORECASE)
_EMBED_RE = re.compile(r"<embed\b[^>]*>", re.IGNORECASE)
_CLASS_ATTR_RE = re.compile(r'\s*class="[^"]*"')

_IFRAME_BLOCK_RE = re.compile(r"<iframe\b[^>]*>.*?</iframe>", re.IGNORECASE | re.DOTALL)
_EMBED_TAG_RE = re.compile(r"<embed\b[^>]*/?>", re.IGNORECASE)

_PRE_BLOCK_RE = re.compile(r"<pre\b[^>]*>.*?</pre>", re.IGNORECASE | re.DOTALL)

_OL_BLOCK_RE = re.compile(r"<ol\b[^>]*>(.*?)</ol>", re.IGNORECASE | re.DOTALL)
_LI_OPEN_RE = re.compile(r"<li\b[^>]*>", re.IGNORECASE)

# (pattern, replacement) pairs applied in order by _to_markdown
_INLINE_RULES = (
    # Lists: wrappers vanish, every item becomes a bullet
    (re.compile(r"</?(?:ul|ol)\b[^>]*>", re.IGNORECASE), "\n"),
    (_LI_OPEN_RE, "- "),
    (re.compile(r"</li>", re.IGNORECASE), "\n"),
    # Blockquotes before paragraphs so the wrapped form still matches
    (
        re.compile(
            r"<blockquote\b[^>]*>\s*<p(?:\s[^>]*)?>(.*?)</p>\s*</blockquote>",
            re.IGNORECASE | re.DOTALL,
        ),
        lambda m: f"\n> {m.group(1).strip()}\n",
    ),
    (
        re.compile(r"<blockquote\b[^>]*>(.*?)</blockquote>", re.IGNORECASE | re.DOTALL),
        lambda m: f"\n> {m.group(1).strip()}\n",
    ),
    (re.compile(r"<pre\b[^>]*>\s*<code\b[^>]*>", re.IGNORECASE), "\n```\n"),
    (re.compile(r"\s*</code>\s*</pre>", re.IGNORECASE), "\n```\n"),
    (re.compile(r"</?code\b[^>]*>", re.IGNORECASE), "`"),
    (re.compile(r"</?(?:strong|b)(?:\s[^>]*)?>", re.IGNORECASE), "**"),
    (re.compile(r"</?(?:em|i)(?:\s[^>]*)?>", re.IGNORECASE), "*"),
    (re.compile(r'<a\s[^>]*?href="([^"]+)"[^>]*>([^<]+)</a>', re.IGNORECASE), r"[\2](\1)"),
    (re.compile(r"<p(?:\s[^>]*)?>", re.IGNORECASE), "\n\n"),
    (re.compile(r"</p>", re.IGNORECASE), "\n"),
    (re.compile(r"</?div\b[^>]*>", re.IGNORECASE), "\n"),
)

_BLOCK_MARKER_INDENT_RE = re.compile(r"^[ \t]+(?=[-#>] |\d+\. )", re.MULTILINE)
_TRAILING_SPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")

_DEFAULT_KEEP_TAGS = ("img", "video", "source")
_EMBED_TAGS = ("iframe", "embed")


def _strip_artifacts(html: str) -> str:
    """Remove WordPress artifacts and collapse whitespace outside ``<pre>`` blocks."""
    content, _ = remove_wordpress_artifacts(html)

    blocks: List[str] = []

    def _hold(match: re.Match) -> str:
        blocks.append(match.group(0))
        return f"__PRE_{len(blocks) - 1}__"

    content = _PRE_BLOCK_RE.sub(_hold, content)
    content = re.sub(r"\s+", " ", content)
    content = re.sub(r"\s+>", ">", content)
    for index, block in enumerate(blocks):
        content = content.replace(f"__PRE_{index}__", block)
    return content.strip()


def _local_if_upload(url: str) -> str:
    return convert_to_local_path(url) if _UPLOADS_MARKER in url else url


def extract_media(html: str) -> Tuple[str, List[str]]:
    """Record every image / video / source URL and rewrite upload URLs.

    ``<img>`` tags become Markdown images; video and source tags keep their
    markup with the ``src`` rewritten.  References are listed images first,
    then videos, then sources.
    """
    references: List[str] = []

    def _image(match: re.Match) -> str:
        src = match.group(1)
        references.append(src)
        alt_match = _ALT_RE.search(match.group(0))
        alt = alt_match.group(1) if alt_match else ""
        return f"![{alt}]({_local_if_upload(src)})"

    def _src(match: re.Match) -> str:
        src = match.group(2)
        references.append(src)
        return f"{match.group(1)}{_local_if_upload(src)}{match.group(3)}"

    content = _IMG_RE.sub(_image, html)
    content = _VIDEO_SRC_RE.sub(_src, content)
    content = _SOURCE_SRC_RE.sub(_src, content)
    return content, references


def _process_embeds(html: str) -> str:
    content = _IFRAME_RE.sub(lambda m: f'<iframe src="{m.group(1)}" allowfullscreen></iframe>', html)
    return _EMBED_RE.sub(lambda m: _CLASS_ATTR_RE.sub("", m.group(0)), content)


def _clean_structure(html: str) -> str:
    content = re.sub(r"<p>\s*</p>", "", html)
    content = re.sub(r"<p><br\s*/?></p>", "", content)
    content = re.sub(r"<div>\s*</div>", "", content)
    content = re.sub(r"<span>\s*</span>", "", content)
    content = re.sub(r"<br\s*/?>", "\n", content, flags=re.IGNORECASE)
    content = _EXTRA_BLANK_LINES_RE.sub("\n\n", content)
    content = _TRAILING_SPACE_RE.sub("", content)
    return content.strip()


def _number_ordered_lists(html: str) -> str:
    def _number(match: re.Match) -> str:
        counter = itertools.count(1)
        items = _LI_OPEN_RE.sub(lambda _: f"{next(counter)}. ", match.group(1))
        return f"\n{items}\n"

    return _OL_BLOCK_RE.sub(_number, html)


def _to_markdown(html: str, preserve_embeds: bool, number_ordered_lists: bool) -> str:
    placeholders: Dict[str, str] = {}

    def _protect(match: re.Match) -> str:
        key = f"__EMBED_{len(placeholders)}__"
        placeholders[key] = match.group(0)
        return key

    content = html
    if preserve_embeds:
        content = _IFRAME_BLOCK_RE.sub(_protect, content)
        content = _EMBED_TAG_RE.sub(_protect, content)

    for level in range(1, 7):
        hashes = "#" * level
        content = re.sub(
            rf"<h{level}\b[^>]*>(.*?)</h{level}>",
            lambda m, hashes=hashes: f"\n{hashes} {m.group(1).strip()}\n",
            content,
            flags=re.IGNORECASE | re.DOTALL,
        )

    if number_ordered_lists:
        content = _number_ordered_lists(content)

    for pattern, replacement in _INLINE_RULES:
        content = pattern.sub(replacement, content)

    for key, original in placeholders.items():
        content = content.replace(key, original)
    return content


def _final_cleanup(content: str, convert_to_mdx: bool, keep_tags: List[str]) -> str:
    if convert_to_mdx:
        keep = "|".join(re.escape(tag) for tag in keep_tags)
        content = re.sub(rf"<(?!/?(?:{keep})\b)[^>]*>", "", content)
    content = decode_entities(content)
    content = _EXTRA_BLANK_LINES_RE.sub("\n\n", content)
    content = _TRAILING_SPACE_RE.sub("", content)
    if convert_to_mdx:
        content = _BLOCK_MARKER_INDENT_RE.sub("", content)
    return content.strip()


def convert_html_to_mdx(html: Optional[str], options: Optional[ConversionOptions] = None) -> ConversionResult:
    """Convert rendered WordPress HTML into Markdown suitable for MDX."""
    opts = options or ConversionOptions()

    if html is None or not isinstance(html, str):
        return ConversionResult(content="", errors=["Invalid HTML content provided"])

    result = ConversionResult(content="")
    content = html
    keep_tags = list(opts.preserve_tags) if opts.preserve_tags is not None else list(_DEFAULT_KEEP_TAGS)
    if opts.preserve_tags is None and opts.preserve_embeds:
        keep_tags.extend(_EMBED_TAGS)

    try:
        if opts.remove_wordpress_classes:
            content = _strip_artifacts(content)

        if opts.preserve_images:
            content, references = extract_media(content)
            result.media_references.extend(references)

        if opts.preserve_embeds:
            content = _process_embeds(content)

        content = _clean_structure(content)

        if opts.convert_to_mdx:
            content = _to_markdown(content, opts.preserve_embeds, opts.number_ordered_lists)

        content = _final_cleanup(content, opts.convert_to_mdx, keep_tags)
    except Exception as exc:
        logger.warning("HTML to MDX conversion failed: %s", exc)
        result.errors.append(f"Conversion error: {exc}")

    result.content = content
    return result


def validate_mdx_content(content: Optional[str]) -> CheckResult:
    """Check an MDX body for unbalanced code spans and emphasis markers."""
    errors: List[str] = []
    warnings: List[str] = []

    if not content or not isinstance(content, str):
        return CheckResult(valid=False, errors=["Content is empty or invalid"])

    if content.count("```") % 2 != 0:
        errors.append("Unclosed code block detected")

    if content.count("`") % 2 != 0:
        errors.append("Unclosed inline code detected")

    # Bold and italic cannot be told apart from literal asterisks, so only warn
    if content.count("**") % 2 != 0:
        warnings.append("Unclosed bold formatting detected")

    if content.count("*") % 2 != 0:
        warnings.append("Unclosed italic formatting detected")

    if re.search(r"\n{4,}", content):
        warnings.append("Excessive line breaks detected")

    return CheckResult(valid=not errors, errors=errors, warnings=warnings)
