"""Textual clean-up of WordPress HTML: artifacts, broken links, empty markup."""

import logging
import re
from typing import Callable, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Comment
from bs4.formatter import HTMLFormatter

from wp2mdx.models.options import SanitizationOptions
from wp2mdx.models.results import (
    SanitizationBatchResult,
    SanitizationResult,
    SanitizationSummary,
)

logger = logging.getLogger(__name__)

# Matches WordPress shortcode tags such as [et_pb_section ...] or [/et_pb_section]
_SHORTCODE_RE = re.compile(r"\[/?[a-z_\-]+(?:\s[^\]]*?)?\]", re.IGNORECASE)

# Gutenberg block delimiters: <!-- wp:paragraph {...} --> and <!-- /wp:paragraph -->
_BLOCK_COMMENT_RE = re.compile(r"<!--\s*/?wp:.*?-->", re.DOTALL)

# Class tokens left behind by the block editor and classic themes
_WP_CLASS_TOKENS = (
    "wp-",
    "has-",
    "align",
    "size-",
    "gutenberg",
    "block-editor",
    "attachment",
    "post-",
    "page-",
    "category-",
    "tag-",
)

_CLASS_ATTR_RE = re.compile(r'\s*class="([^"]*)"')
_DATA_ATTR_RE = re.compile(r'\s*data-[\w:.-]+="[^"]*"')
_WP_ID_ATTR_RE = re.compile(r'\s*id="[^"]*(?:wp-|block-)[^"]*"')
_WP_STYLE_ATTR_RE = re.compile(r'\s*style="[^"]*(?:wp-|gutenberg)[^"]*"')
_EMPTY_CLASS_RE = re.compile(r'\s*class="\s*"')

# Root-relative only; protocol-relative "//host/..." links and local
# /images/ paths (already mapped from uploads) are left alone
_RELATIVE_HREF_RE = re.compile(r'href="/(?!/|images/)([^"]*)"')
_UPLOADS_HREF_RE = re.compile(r'href="https?://[^/"]*/wp-content/uploads/([^"]*)"')
_ADMIN_HREF_RE = re.compile(r'href="https?://[^/"]*/wp-admin[^"]*"')
_LOGIN_HREF_RE = re.compile(r'href="https?://[^/"]*/wp-login[^"]*"')
_MAILTO_HREF_RE = re.compile(r'href="mailto:([^"]*)"')
_TEL_HREF_RE = re.compile(r'href="tel:([^"]*)"')

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^[+]?[1-9]\d{0,15}$")
_PHONE_PUNCTUATION_RE = re.compile(r"[\s\-()]")

# Elements considered empty when only whitespace sits between the tags
_EMPTY_RECORDED_RE = re.compile(r"<(p|div|span)(?:\s[^>]*)?>\s*</\1>")
_EMPTY_SILENT_RE = (
    re.compile(r"<p(?:\s[^>]*)?>\s*<br\s*/?>\s*</p>"),
    re.compile(r"<(h[1-6])(?:\s[^>]*)?>\s*</\1>"),
    re.compile(r"<(ul|ol)(?:\s[^>]*)?>\s*</\1>"),
)

_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&nbsp;", " "),
    # Last: "&amp;lt;" must decode to the text "&lt;"
    ("&amp;", "&"),
)

# A real opening tag; escaped markup such as "&lt;b&gt;" never matches
_TAG_RE = re.compile(r"<[a-zA-Z][^<>]*>")

# Attributes stripped from every element that survives the cleanup
_JUNK_ATTRS = re.compile(r"^(style|on\w+|data-[\w:.-]+)$", re.IGNORECASE)
_BLANKABLE_ATTRS = ("class", "id", "title")


def _escape_angle_brackets(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;").replace("\xa0", " ")


# Text goes back out decoded, except that "<" and ">" stay escaped
_OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=_escape_angle_brackets,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)


def strip_shortcodes(html: str) -> str:
    """Remove WordPress shortcode tags (e.g. ``[et_pb_section ...]``) from ``html``.

    Some page builders (Divi, WPBakery, …) leave shortcode markup in
    ``content.rendered`` when the REST API bypasses the builder's rendering
    pipeline.
    """
    return _SHORTCODE_RE.sub("", html)


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def is_valid_phone_number(phone: str) -> bool:
    return bool(_PHONE_RE.match(_PHONE_PUNCTUATION_RE.sub("", phone)))


def decode_entities(text: str) -> str:
    """Decode the handful of entities WordPress emits in rendered content."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def is_wordpress_class(value: str) -> bool:
    return any(token in value for token in _WP_CLASS_TOKENS)


def _in_tags(pattern: re.Pattern, repl: Union[str, Callable[[re.Match], str]], html: str) -> str:
    """Apply an attribute rewrite inside opening tags only, never to body text."""
    return _TAG_RE.sub(lambda tag: pattern.sub(repl, tag.group(0)), html)


def remove_wordpress_artifacts(html: str) -> Tuple[str, List[str]]:
    """Strip block comments and WordPress-only attributes from *html*.

    Returns the cleaned markup and the list of removed ``class="..."``
    attributes.
    """
    removed: List[str] = []

    content = _BLOCK_COMMENT_RE.sub("", html)

    def _drop_class(match: re.Match) -> str:
        if is_wordpress_class(match.group(1)):
            removed.append(match.group(0).strip())
            return ""
        return match.group(0)

    content = _in_tags(_CLASS_ATTR_RE, _drop_class, content)
    content = _in_tags(_DATA_ATTR_RE, "", content)
    content = _in_tags(_WP_ID_ATTR_RE, "", content)
    content = _in_tags(_WP_STYLE_ATTR_RE, "", content)
    content = _in_tags(_EMPTY_CLASS_RE, "", content)
    return content, removed


def fix_broken_links(html: str, base_url: str) -> Tuple[str, List[str], List[str]]:
    """Repair links in the fixed order: relative, uploads, admin/login, mailto, tel.

    Each rule runs on the output of the previous one, so a root-relative
    upload link is first absolutised and then mapped to ``/images/``.
    """
    fixed: List[str] = []
    warnings: List[str] = []
    base = base_url.rstrip("/")

    def _absolutise(match: re.Match) -> str:
        full_url = f"{base}/{match.group(1)}"
        fixed.append(full_url)
        return f'href="{full_url}"'

    def _uploads(match: re.Match) -> str:
        local = f"/images/{match.group(1)}"
        fixed.append(local)
        return f'href="{local}"'

    def _neutralise(message: str):
        def _replace(match: re.Match) -> str:
            warnings.append(message)
            return 'href="#"'

        return _replace

    def _mailto(match: re.Match) -> str:
        email = match.group(1)
        if is_valid_email(email):
            return match.group(0)
        warnings.append(f"Fixed invalid email link: {email}")
        return 'href="#"'

    def _tel(match: re.Match) -> str:
        phone = match.group(1)
        if is_valid_phone_number(phone):
            return match.group(0)
        warnings.append(f"Fixed invalid phone link: {phone}")
        return 'href="#"'

    content = _in_tags(_RELATIVE_HREF_RE, _absolutise, html)
    content = _in_tags(_UPLOADS_HREF_RE, _uploads, content)
    content = _in_tags(_ADMIN_HREF_RE, _neutralise("Removed WordPress admin link"), content)
    content = _in_tags(_LOGIN_HREF_RE, _neutralise("Removed WordPress login link"), content)
    content = _in_tags(_MAILTO_HREF_RE, _mailto, content)
    content = _in_tags(_TEL_HREF_RE, _tel, content)

    if fixed:
        warnings.append(f"Fixed {len(fixed)} broken or relative links")
    return content, fixed, warnings


def remove_empty_elements(html: str) -> Tuple[str, List[str]]:
    """Remove elements whose open and close tags enclose only whitespace.

    Works on the text, not a parsed tree: nested empties are only removed
    when the inner one disappears in an earlier pattern.
    """
    removed = [m.group(0) for m in _EMPTY_RECORDED_RE.finditer(html)]
    content = _EMPTY_RECORDED_RE.sub("", html)
    for pattern in _EMPTY_SILENT_RE:
        content = pattern.sub("", content)
    return content, removed


def normalize_whitespace(html: str) -> str:
    content = html.replace("\r\n", "\n").replace("\r", "\n")
    content = re.sub(r"[ \t]+", " ", content)
    content = re.sub(r"\n{3,}", "\n\n", content)
    content = re.sub(r"\s+>", ">", content)
    return content.strip()


def _is_blank_attr(value) -> bool:
    if isinstance(value, list):
        value = " ".join(value)
    return not str(value).strip()


def _final_cleanup(html: str) -> str:
    """Drop comment nodes and style/event/data attributes from real elements.

    The parser decodes entities in text; on output only ``<`` and ``>`` are
    escaped again, so escaped markup in the body stays visible text.
    """
    soup = BeautifulSoup(html, "html.parser")

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        junk = [attr for attr in tag.attrs if _JUNK_ATTRS.match(attr)]
        junk.extend(
            attr for attr in _BLANKABLE_ATTRS if attr in tag.attrs and _is_blank_attr(tag[attr])
        )
        for attr in junk:
            del tag[attr]

    return soup.decode(formatter=_OUTPUT_FORMATTER).strip()


def sanitize_html(html: Optional[str], options: Optional[SanitizationOptions] = None) -> SanitizationResult:
    """Clean WordPress HTML, reporting everything that was changed.

    Each step can be switched off through *options*.  The function never
    raises: unexpected failures are recorded in ``errors`` and the partially
    processed content is returned.
    """
    opts = options or SanitizationOptions()
    result = SanitizationResult(content="")

    if not html or not isinstance(html, str):
        result.warnings.append("Invalid HTML content provided")
        return result

    content = html
    try:
        if opts.strip_shortcodes:
            content = strip_shortcodes(content)

        if opts.remove_wordpress_classes:
            content, removed = remove_wordpress_artifacts(content)
            result.removed_classes.extend(removed)
            if removed:
                result.warnings.append(
                    f"Removed {len(removed)} WordPress-specific classes and attributes"
                )

        if opts.fix_broken_links:
            content, fixed, link_warnings = fix_broken_links(content, opts.base_url)
            result.fixed_links.extend(fixed)
            result.warnings.extend(link_warnings)

        if opts.remove_empty_elements:
            content, removed_elements = remove_empty_elements(content)
            result.removed_elements.extend(removed_elements)

        if opts.normalize_whitespace:
            content = normalize_whitespace(content)

        content = _final_cleanup(content)
    except Exception as exc:
        logger.warning("HTML sanitization failed: %s", exc)
        result.errors.append(f"Sanitization error: {exc}")

    result.content = content
    return result


def sanitize_html_batch(
    htmls: List[str], options: Optional[SanitizationOptions] = None
) -> SanitizationBatchResult:
    results = [sanitize_html(html, options) for html in htmls]
    summary = SanitizationSummary(
        total=len(htmls),
        processed=len(results),
        total_warnings=sum(len(r.warnings) for r in results),
        total_errors=sum(len(r.errors) for r in results),
        total_removed_classes=sum(len(r.removed_classes) for r in results),
        total_fixed_links=sum(len(r.fixed_links) for r in results),
        total_removed_elements=sum(len(r.removed_elements) for r in results),
    )
    return SanitizationBatchResult(results=results, summary=summary)
