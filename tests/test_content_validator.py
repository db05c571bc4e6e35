"""Tests for per-record content validation and SEO fallbacks."""

from wp2mdx.models.options import ContentValidationOptions
from wp2mdx.services.content_validator import (
    apply_seo_fallbacks,
    calculate_field_lengths,
    extract_description_from_content,
    validate_content,
    validate_content_batch,
    validate_field_lengths,
)

_DATE = "2024-01-15T10:30:00.000Z"
_OPTS = ContentValidationOptions(site_url="https://example.com")


def _page(**overrides) -> dict:
    content = {
        "title": "About us",
        "slug": "about",
        "type": "page",
        "date": _DATE,
        "updated": _DATE,
        "categories": [],
        "tags": [],
        "hero": {
            "title": "About us",
            "subtitle": "",
            "image": "",
            "video": "",
            "text_color": "",
            "background_color": "",
        },
        "seo": {
            "title": "About us",
            "description": "d" * 130,
            "canonical": "https://example.com/about",
        },
        "content": "We are a small studio.",
    }
    content.update(overrides)
    return content


class TestValidateContent:
    def test_valid_page(self):
        result = validate_content(_page(), _OPTS)
        assert result.valid
        assert result.errors == []
        assert result.seo_fallbacks.canonical == "https://example.com/about"

    def test_not_a_dict(self):
        result = validate_content("nope", _OPTS)
        assert not result.valid
        assert result.errors == ["Content must be an object"]

    def test_short_description_warning(self):
        content = _page()
        content["seo"]["description"] = "Short description"
        result = validate_content(content, _OPTS)
        assert result.valid
        assert "SEO description (17 chars) is shorter than recommended 120 characters" in result.warnings

    def test_missing_seo_values_fall_back(self):
        body = "This sentence is comfortably longer than fifty characters in total. Another one follows."
        content = _page(seo={}, content=body)
        result = validate_content(content, _OPTS)
        assert result.seo_fallbacks.title == "About us"
        assert result.seo_fallbacks.description == (
            "This sentence is comfortably longer than fifty characters in total"
        )
        assert result.seo_fallbacks.canonical == "https://example.com/about"
        assert "SEO title is missing, using content title as fallback" in result.warnings
        assert "SEO description is missing, extracted from content" in result.warnings
        assert "SEO canonical URL is missing, using generated fallback" in result.warnings

    def test_generic_description_fallback(self):
        result = validate_content(_page(seo={}, content="Tiny."), _OPTS)
        assert result.seo_fallbacks.description == "Learn more about About us"
        assert "SEO description is missing, using generic fallback" in result.warnings

    def test_project_canonical_uses_work_path(self):
        links = {"url": "", "image": "", "video": ""}
        result = validate_content(_page(type="project", slug="case", links=links, seo={}), _OPTS)
        assert result.seo_fallbacks.canonical == "https://example.com/work/case"

    def test_empty_body_is_an_error(self):
        result = validate_content(_page(content=""), _OPTS)
        assert not result.valid
        assert "Content body is empty" in result.errors

    def test_allowing_empty_content_only_removes_errors(self):
        content = _page(content="   ", slug="Bad Slug")
        strict = validate_content(content, _OPTS)
        lenient = validate_content(content, _OPTS.model_copy(update={"allow_empty_content": True}))
        assert set(lenient.errors) <= set(strict.errors)
        assert "Content body is empty" not in lenient.errors

    def test_mdx_errors_reported(self):
        result = validate_content(_page(content="```\nunclosed"), _OPTS)
        assert "Unclosed code block detected" in result.errors

    def test_field_lengths(self):
        lengths = validate_content(_page(), _OPTS).field_lengths
        assert lengths.title == len("About us")
        assert lengths.seo_description == 130
        assert lengths.content == len("We are a small studio.")


class TestFieldLengths:
    def test_short_content(self):
        warnings = validate_field_lengths({"content": "one two three"}).warnings
        assert warnings == ["Content is short (3 words), consider adding more detail"]

    def test_long_title_and_hero(self):
        content = {"title": "t" * 61, "hero": {"title": "h" * 81, "subtitle": "s" * 201}}
        warnings = validate_field_lengths(content).warnings
        assert "Title (61 chars) is longer than recommended 60 characters" in warnings
        assert "Hero title (81 chars) is longer than recommended 80 characters" in warnings
        assert "Hero subtitle (201 chars) is longer than recommended 200 characters" in warnings

    def test_long_project_link(self):
        content = {"type": "project", "links": {"url": "https://x.test/" + "a" * 200}}
        warnings = validate_field_lengths(content).warnings
        assert warnings == ["Project link url URL is very long (215 chars)"]

    def test_calculate_handles_missing_fields(self):
        lengths = calculate_field_lengths({})
        assert (lengths.title, lengths.seo_title, lengths.seo_description, lengths.content) == (0, 0, 0, 0)


class TestExtractDescription:
    def test_first_sentence(self):
        text = "<p>" + "a" * 60 + ". Rest of it.</p>"
        assert extract_description_from_content(text) == "a" * 60

    def test_truncated_when_no_good_sentence(self):
        text = "word " * 60
        description = extract_description_from_content(text)
        assert description.endswith("...")
        assert len(description) <= 153

    def test_too_short(self):
        assert extract_description_from_content("Too short.") is None
        assert extract_description_from_content("") is None


class TestBatch:
    def test_slug_conflicts_added_to_each_conflicting_result(self):
        batch = validate_content_batch([_page(), _page(type="post", featured=False)], _OPTS)
        for result in batch.results:
            assert 'Slug conflict for "about": page, post' in result.warnings
        assert batch.summary.total == 2

    def test_invalid_slug_only_fails_its_own_record(self):
        batch = validate_content_batch([_page(), _page(slug="bad--slug", title="Bad")], _OPTS)
        good, bad = batch.results
        assert good.valid
        assert good.errors == []
        assert 'Invalid slug format for page "Bad": "bad--slug"' in bad.errors
        assert not bad.valid
        assert not batch.valid
        assert batch.summary.invalid == 1

    def test_unconflicted_record_gets_no_slug_warning(self):
        batch = validate_content_batch([_page(), _page(slug="team")], _OPTS)
        assert all("Slug conflict" not in " ".join(result.warnings) for result in batch.results)


class TestApplySeoFallbacks:
    def test_fills_blank_values(self):
        result = apply_seo_fallbacks(_page(seo={"title": ""}, content="Tiny."), "https://example.com")
        assert result["seo"] == {
            "title": "About us",
            "description": "Learn more about About us",
            "canonical": "https://example.com/about",
        }

    def test_keeps_existing_values(self):
        content = _page()
        assert apply_seo_fallbacks(content, "https://example.com")["seo"] == content["seo"]
