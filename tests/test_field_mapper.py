"""Tests for the themerain meta → front-matter field mapping."""

import pytest

from wp2mdx.models.options import FieldMappingOptions
from wp2mdx.services.field_mapper import (
    get_default_schema_type,
    get_field_mapping_docs,
    map_themerain_fields,
    validate_mapped_schema,
)

_HERO_KEYS = {"title", "subtitle", "image", "video", "text_color", "background_color"}


class TestMapThemerainFields:
    def test_post_has_hero_but_no_links(self):
        result = map_themerain_fields({"themerain_hero_title": "Hello"}, "post")
        assert "links" not in result
        assert result["hero"]["title"] == "Hello"
        assert set(result["hero"]) == _HERO_KEYS

    def test_project_has_links(self):
        meta = {
            "themerain_project_link_url": "https://client.example.com",
            "themerain_project_link_image": "88",
        }
        result = map_themerain_fields(meta, "project")
        assert result["links"] == {"url": "https://client.example.com", "image": "88", "video": ""}

    def test_page_fields_used_as_fallback(self):
        meta = {
            "themerain_page_title": "Page title",
            "themerain_page_subtitle": "Page subtitle",
            "themerain_page_bg_color": "#000000",
        }
        hero = map_themerain_fields(meta, "page")["hero"]
        assert hero["title"] == "Page title"
        assert hero["subtitle"] == "Page subtitle"
        assert hero["background_color"] == "#000000"

    def test_hero_fields_win_over_page_fields(self):
        meta = {"themerain_hero_title": "Hero", "themerain_page_title": "Page"}
        assert map_themerain_fields(meta, "page")["hero"]["title"] == "Hero"

    def test_numeric_meta_values_become_strings(self):
        hero = map_themerain_fields({"themerain_hero_image": 42}, "post")["hero"]
        assert hero["image"] == "42"

    @pytest.mark.parametrize("meta", [None, {}, "not a dict"])
    def test_missing_meta_gives_empty_hero(self, meta):
        result = map_themerain_fields(meta, "post")
        assert result["hero"] == {key: "" for key in _HERO_KEYS}

    def test_unknown_type_gives_empty_hero(self):
        result = map_themerain_fields({"themerain_hero_title": "Hello"}, "event")
        assert result["hero"]["title"] == ""
        assert result["seo"]["schema"]["type"] == "WebPage"

    def test_theme_meta_only_when_requested(self):
        meta = {"themerain_hero_title": "Hello", "other": 1}
        assert "theme_meta" not in map_themerain_fields(meta, "post")

        opts = FieldMappingOptions(include_theme_meta=True)
        assert map_themerain_fields(meta, "post", opts)["theme_meta"] == meta


class TestSeoMapping:
    def test_empty_values_dropped(self):
        seo = map_themerain_fields({}, "post")["seo"]
        assert seo == {"schema": {"type": "BlogPosting", "author": "Polything Ltd", "breadcrumbs": []}}

    def test_seo_meta_and_defaults(self):
        meta = {
            "themerain_seo_title": "Custom title",
            "themerain_seo_publish_date": "2024-01-15T10:30:00.000Z",
        }
        opts = FieldMappingOptions(seo_defaults={"description": "Default description", "author": "Jane"})
        seo = map_themerain_fields(meta, "project", opts)["seo"]
        assert seo["title"] == "Custom title"
        assert seo["description"] == "Default description"
        assert "canonical" not in seo
        assert seo["schema"]["type"] == "CreativeWork"
        assert seo["schema"]["author"] == "Jane"
        assert seo["schema"]["publishDate"] == "2024-01-15T10:30:00.000Z"

    @pytest.mark.parametrize(
        "content_type, expected",
        [("project", "CreativeWork"), ("post", "BlogPosting"), ("page", "WebPage"), (None, "WebPage")],
    )
    def test_default_schema_types(self, content_type, expected):
        assert get_default_schema_type(content_type) == expected


class TestValidateMappedSchema:
    def test_mapped_project_is_valid(self):
        mapped = map_themerain_fields({}, "project")
        assert validate_mapped_schema(mapped, "project").valid

    def test_project_without_links(self):
        result = validate_mapped_schema({"hero": map_themerain_fields({}, "post")["hero"]}, "project")
        assert result.errors == ["Missing links section for project"]

    def test_missing_hero(self):
        assert validate_mapped_schema({}, "post").errors == ["Missing hero section"]

    def test_missing_hero_field(self):
        result = validate_mapped_schema({"hero": {"title": "x"}}, "post")
        assert "Missing hero.subtitle" in result.errors


def test_mapping_docs_list_sources():
    docs = get_field_mapping_docs()
    assert docs["hero"]["title"] == ["themerain_hero_title", "themerain_page_title"]
    assert docs["links"]["url"] == ["themerain_project_link_url"]
