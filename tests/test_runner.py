"""Tests for the validation runner."""

from wp2mdx.models.options import ContentValidationOptions, ValidationRunnerOptions
from wp2mdx.services.runner import (
    CONTENT_CHECK,
    FRONT_MATTER_CHECK,
    MDX_CHECK,
    SANITIZATION_CHECK,
    SCHEMA_CHECK,
    SCHEMA_TYPE_CHECK,
    SLUG_CHECK,
    generate_validation_report,
    run_batch_validation,
    run_content_validation,
)

_DATE = "2024-01-15T10:30:00.000Z"
_OPTS = ValidationRunnerOptions(content_validation=ContentValidationOptions(site_url="https://example.com"))


def _post(slug: str = "hello-world", **overrides) -> dict:
    content = {
        "title": "Hello world",
        "slug": slug,
        "type": "post",
        "date": _DATE,
        "updated": _DATE,
        "categories": [],
        "tags": [],
        "featured": False,
        "hero": {
            "title": "",
            "subtitle": "",
            "image": "",
            "video": "",
            "text_color": "",
            "background_color": "",
        },
        "seo": {"schema": {"type": "BlogPosting"}},
        "content": "Hello **world**.",
    }
    content.update(overrides)
    return content


class TestRunContentValidation:
    def test_valid_post(self):
        result = run_content_validation(_post(), _OPTS)
        assert result.valid
        assert result.metadata.slug == "hello-world"
        assert result.metadata.content_type == "post"
        assert result.metadata.title == "Hello world"
        assert result.metadata.checks_performed == [
            SCHEMA_CHECK,
            FRONT_MATTER_CHECK,
            SCHEMA_TYPE_CHECK,
            MDX_CHECK,
            CONTENT_CHECK,
        ]
        assert result.metadata.validation_time >= 0

    def test_sanitization_stage_when_enabled(self):
        opts = _OPTS.model_copy(update={"sanitize_html": True})
        result = run_content_validation(_post(), opts)
        assert result.metadata.checks_performed[0] == SANITIZATION_CHECK

    def test_errors_collected_from_all_stages(self):
        result = run_content_validation({"slug": "x", "type": "post"}, _OPTS)
        assert not result.valid
        assert "Missing or empty required field: title" in result.errors
        assert "Title is required" in result.errors
        assert CONTENT_CHECK in result.metadata.checks_performed

    def test_stop_on_first_error(self):
        opts = _OPTS.model_copy(update={"stop_on_first_error": True})
        result = run_content_validation({"slug": "x", "type": "post"}, opts)
        assert not result.valid
        assert result.metadata.checks_performed == [SCHEMA_CHECK]

    def test_warnings_can_be_dropped(self):
        opts = _OPTS.model_copy(update={"include_warnings": False})
        assert run_content_validation(_post(), opts).warnings == []

    def test_metadata_can_be_dropped(self):
        opts = _OPTS.model_copy(update={"include_metadata": False})
        result = run_content_validation(_post(), opts)
        assert result.metadata.checks_performed == []
        assert result.metadata.slug == "hello-world"

    def test_non_dict_content_does_not_raise(self):
        result = run_content_validation("not a record", _OPTS)
        assert not result.valid
        assert "Content must be an object" in result.errors


class TestRunBatchValidation:
    def test_slug_conflicts_reported(self):
        batch = run_batch_validation([_post("shared"), _post("shared", type="page")], _OPTS)
        assert batch.summary.total == 2
        for result in batch.results:
            assert 'Slug conflict for "shared": post, page' in result.warnings
            assert result.metadata.checks_performed[-1] == SLUG_CHECK
        assert SLUG_CHECK in batch.summary.checks_performed

    def test_one_bad_record_does_not_stop_the_rest(self):
        batch = run_batch_validation([{"slug": "x"}, _post()], _OPTS)
        assert len(batch.results) == 2
        assert batch.summary.total == 2
        assert not batch.valid

    def test_invalid_slug_only_fails_its_own_record(self):
        batch = run_batch_validation([_post("good"), _post("bad--slug", title="Bad")], _OPTS)
        good, bad = batch.results
        assert good.valid
        assert good.errors == []
        assert not bad.valid
        assert 'Invalid slug format for post "Bad": "bad--slug"' in bad.errors
        assert batch.summary.valid == 1
        assert batch.summary.invalid == 1

    def test_slug_check_can_be_disabled(self):
        opts = _OPTS.model_copy(update={"validate_slugs": False})
        batch = run_batch_validation([_post("shared"), _post("shared", type="page")], opts)
        assert SLUG_CHECK not in batch.summary.checks_performed


class TestValidationReport:
    def test_single_report(self):
        report = generate_validation_report(run_content_validation(_post(), _OPTS))
        assert report.startswith("=== VALIDATION REPORT ===")
        assert "Slug: hello-world" in report
        assert "Valid: Yes" in report

    def test_batch_report(self):
        batch = run_batch_validation([_post(), _post("other", title="")], _OPTS)
        report = generate_validation_report(batch)
        assert report.startswith("=== BATCH VALIDATION REPORT ===")
        assert "Total Items: 2" in report
        assert "Invalid: 1" in report
        assert "Missing or empty required field: title" in report
