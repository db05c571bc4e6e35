"""Tests for slug normalisation and cross-type conflict resolution."""

import itertools

import pytest

from wp2mdx.services.slugs import (
    PRECEDENCE,
    generate_slug_from_title,
    generate_slug_resolution_report,
    get_canonical_path,
    get_content_type_from_path,
    is_valid_slug,
    normalize_slug,
    resolve_slug_conflicts,
    check_slugs_per_item,
    validate_slugs,
)


def _item(item_id: int, slug: str, content_type: str) -> dict:
    return {"id": item_id, "slug": slug, "type": content_type, "title": f"{content_type} {item_id}"}


class TestSlugFormat:
    @pytest.mark.parametrize("slug", ["abc", "abc-123", "a1-b2-c3"])
    def test_valid(self, slug):
        assert is_valid_slug(slug)

    @pytest.mark.parametrize("slug", ["", "-a", "a-", "a--b", "Abc", "a b", None])
    def test_invalid(self, slug):
        assert not is_valid_slug(slug)

    def test_normalize(self):
        assert normalize_slug("  Hello World!  ") == "hello-world"
        assert normalize_slug("a -- b") == "a-b"
        assert normalize_slug(None) == ""

    def test_title_with_accents(self):
        assert generate_slug_from_title("Café Déjà Vu") == "cafe-deja-vu"


class TestPaths:
    @pytest.mark.parametrize(
        "content_type, path",
        [("project", "/work/x"), ("post", "/blog/x"), ("page", "/x"), (None, "/x")],
    )
    def test_canonical_path(self, content_type, path):
        assert get_canonical_path({"slug": "x", "type": content_type}) == path

    @pytest.mark.parametrize(
        "path, content_type",
        [("/work/x", "project"), ("/blog/x", "post"), ("/x", "page"), ("x", None)],
    )
    def test_type_from_path(self, path, content_type):
        assert get_content_type_from_path(path) == content_type


class TestResolveSlugConflicts:
    def test_page_beats_post(self):
        result = resolve_slug_conflicts([_item(1, "a", "page"), _item(2, "a", "post")])
        assert set(result.resolved) == {"a", "a-post"}
        assert result.resolved["a"]["type"] == "page"
        assert result.resolved["a-post"]["id"] == 2
        assert result.stats.conflicts == 1
        assert result.stats.total == 2
        assert result.stats.resolved == 2

    def test_no_conflicts(self):
        result = resolve_slug_conflicts([_item(1, "a", "post"), _item(2, "b", "post")])
        assert set(result.resolved) == {"a", "b"}
        assert result.conflicts == []

    @pytest.mark.parametrize("order", list(itertools.permutations(["post", "project", "page"])))
    def test_precedence_independent_of_order(self, order):
        items = [_item(index, "shared", content_type) for index, content_type in enumerate(order)]
        result = resolve_slug_conflicts(items)
        assert result.resolved["shared"]["type"] == "page"
        assert set(result.resolved) == {"shared", "shared-project", "shared-post"}

    def test_first_seen_wins_among_equals(self):
        result = resolve_slug_conflicts([_item(1, "x", "post"), _item(2, "x", "post"), _item(3, "x", "post")])
        assert result.resolved["x"]["id"] == 1
        assert result.resolved["x-post"]["id"] == 2
        assert result.resolved["x-post-2"]["id"] == 3

    def test_renamed_slug_avoids_existing_slug(self):
        items = [_item(1, "a", "post"), _item(2, "a", "page"), _item(3, "a-post", "post")]
        result = resolve_slug_conflicts(items)
        assert result.resolved["a"]["id"] == 2
        assert result.resolved["a-post"]["id"] == 3
        assert result.resolved["a-post-2"]["id"] == 1
        assert len(result.resolved) == 3

    def test_untyped_item_gets_neutral_suffix(self):
        result = resolve_slug_conflicts([_item(1, "a", "page"), {"id": 2, "slug": "a"}])
        assert result.resolved["a"]["id"] == 1
        assert result.resolved["a-item"]["id"] == 2
        assert not any("None" in slug for slug in result.resolved)

    def test_input_not_modified(self):
        items = [_item(1, "a", "page"), _item(2, "a", "post")]
        resolve_slug_conflicts(items)
        assert items[1]["slug"] == "a"

    def test_precedence_order(self):
        assert PRECEDENCE["page"] > PRECEDENCE["project"] > PRECEDENCE["post"]


class TestValidateSlugs:
    def test_invalid_format_is_an_error(self):
        result = validate_slugs([{"slug": "Bad Slug", "type": "post", "title": "T"}])
        assert not result.valid
        assert result.errors == ['Invalid slug format for post "T": "Bad Slug"']

    def test_conflict_is_a_warning(self):
        result = validate_slugs([_item(1, "a", "page"), _item(2, "a", "post")])
        assert result.valid
        assert result.warnings == ['Slug conflict for "a": page, post']


class TestCheckSlugsPerItem:
    def test_bad_slug_reported_on_its_own_item(self):
        good = _item(1, "good", "page")
        bad = {"id": 2, "slug": "bad--slug", "type": "page", "title": "Bad"}
        good_check, bad_check = check_slugs_per_item([good, bad])
        assert good_check.valid
        assert good_check.errors == []
        assert not bad_check.valid
        assert bad_check.errors == ['Invalid slug format for page "Bad": "bad--slug"']

    def test_conflict_warns_only_the_sharing_items(self):
        checks = check_slugs_per_item([_item(1, "a", "page"), _item(2, "a", "post"), _item(3, "b", "post")])
        assert checks[0].warnings == ['Slug conflict for "a": page, post']
        assert checks[1].warnings == ['Slug conflict for "a": page, post']
        assert checks[2].warnings == []
        assert all(check.valid for check in checks)

    def test_non_dict_items_get_empty_results(self):
        checks = check_slugs_per_item(["oops", _item(1, "a", "page")])
        assert checks[0].valid
        assert checks[0].errors == [] and checks[0].warnings == []


def test_resolution_report():
    result = resolve_slug_conflicts([_item(1, "a", "page"), _item(2, "a", "post")])
    report = generate_slug_resolution_report(result)
    assert "Conflicts found: 1" in report
    assert 'Primary (keeps slug): page - "page 1"' in report
    assert '  - post "post 2": "a" → "a-post"' in report
