"""Tests for the WordPress HTML sanitizer."""

from wp2mdx.models.options import SanitizationOptions
from wp2mdx.services.sanitizer import (
    decode_entities,
    fix_broken_links,
    is_valid_email,
    is_valid_phone_number,
    remove_empty_elements,
    sanitize_html,
    sanitize_html_batch,
    strip_shortcodes,
)

_OPTS = SanitizationOptions(base_url="https://example.com")



class TestStripShortcodes:
    def test_strips_divi_section_tags(self):
        html = "[et_pb_section fb_built='1'][/et_pb_section]"
        assert strip_shortcodes(html) == ""

    def test_strips_divi_row_and_column(self):
        content = "[et_pb_row][et_pb_column type='4_4']Hello[/et_pb_column][/et_pb_row]"
        result = strip_shortcodes(content)
        assert "et_pb" not in result
        assert "Hello" in result

    def test_strips_self_closing_shortcode(self):
        result = strip_shortcodes("Before [gallery ids='1,2,3'] After")
        assert "[gallery" not in result
        assert "Before" in result
        assert "After" in result

    def test_strips_closing_shortcode(self):
        result = strip_shortcodes("[/et_pb_section]")
        assert result == ""

    def test_no_shortcodes_unchanged(self):
        html = "<p>Regular HTML content without shortcodes.</p>"
        assert strip_shortcodes(html) == html

    def test_mixed_html_and_shortcodes(self):
        html = "<p>Text</p>[et_pb_section]<p>More text</p>[/et_pb_section]"
        result = strip_shortcodes(html)
        assert "[et_pb_section]" not in result
        assert "[/et_pb_section]" not in result
        assert "<p>Text</p>" in result
        assert "<p>More text</p>" in result

    def test_strips_wpbakery_shortcodes(self):
        html = "[vc_row][vc_column width='1/1']<p>Content</p>[/vc_column][/vc_row]"
        result = strip_shortcodes(html)
        assert "vc_row" not in result
        assert "<p>Content</p>" in result

    def test_empty_string(self):
        assert strip_shortcodes("") == ""

    def test_uppercase_shortcode(self):
        result = strip_shortcodes("[ET_PB_SECTION]content[/ET_PB_SECTION]")
        assert "ET_PB_SECTION" not in result


class TestWordPressArtifacts:
    def test_removes_wordpress_classes(self):
        result = sanitize_html('<p class="wp-block-paragraph">Hello</p>', _OPTS)
        assert result.content == "<p>Hello</p>"
        assert result.removed_classes == ['class="wp-block-paragraph"']
        assert "Removed 1 WordPress-specific classes and attributes" in result.warnings

    def test_keeps_custom_classes(self):
        result = sanitize_html('<p class="lead">Hello</p>', _OPTS)
        assert 'class="lead"' in result.content
        assert result.removed_classes == []

    def test_removes_block_comments(self):
        result = sanitize_html("<!-- wp:paragraph --><p>Text</p><!-- /wp:paragraph -->", _OPTS)
        assert result.content == "<p>Text</p>"

    def test_removes_data_attributes(self):
        result = sanitize_html('<div data-id="5" data-type="block"><p>Text</p></div>', _OPTS)
        assert "data-" not in result.content

    def test_shortcodes_kept_unless_requested(self):
        html = "[et_pb_section]<p>Body</p>[/et_pb_section]"
        assert "[et_pb_section]" in sanitize_html(html, _OPTS).content

        opts = _OPTS.model_copy(update={"strip_shortcodes": True})
        assert sanitize_html(html, opts).content == "<p>Body</p>"


class TestFixBrokenLinks:
    def test_relative_link_made_absolute(self):
        result = sanitize_html('<a href="/about">About</a>', _OPTS)
        assert 'href="https://example.com/about"' in result.content
        assert result.fixed_links == ["https://example.com/about"]
        assert "Fixed 1 broken or relative links" in result.warnings

    def test_protocol_relative_link_untouched(self):
        content, fixed, _ = fix_broken_links('<a href="//cdn.example.com/x.js">x</a>', "https://example.com")
        assert content == '<a href="//cdn.example.com/x.js">x</a>'
        assert fixed == []

    def test_upload_link_mapped_to_images(self):
        html = '<a href="https://old.example.com/wp-content/uploads/2023/01/file.pdf">PDF</a>'
        result = sanitize_html(html, _OPTS)
        assert 'href="/images/2023/01/file.pdf"' in result.content

    def test_admin_and_login_links_neutralised(self):
        html = (
            '<a href="https://example.com/wp-admin/post.php">Edit</a>'
            '<a href="https://example.com/wp-login.php">Login</a>'
        )
        result = sanitize_html(html, _OPTS)
        assert "wp-admin" not in result.content
        assert "wp-login" not in result.content
        assert "Removed WordPress admin link" in result.warnings
        assert "Removed WordPress login link" in result.warnings

    def test_invalid_mailto_replaced(self):
        result = sanitize_html('<a href="mailto:not-an-email">Mail</a>', _OPTS)
        assert 'href="#"' in result.content
        assert "Fixed invalid email link: not-an-email" in result.warnings

    def test_valid_mailto_kept(self):
        result = sanitize_html('<a href="mailto:hello@example.com">Mail</a>', _OPTS)
        assert 'href="mailto:hello@example.com"' in result.content

    def test_invalid_tel_replaced(self):
        result = sanitize_html('<a href="tel:abc">Call</a>', _OPTS)
        assert 'href="#"' in result.content
        assert "Fixed invalid phone link: abc" in result.warnings


class TestEmptyElements:
    def test_empty_elements_removed_and_recorded(self):
        content, removed = remove_empty_elements("<p>Keep</p><p>  </p><div></div>")
        assert content == "<p>Keep</p>"
        assert removed == ["<p>  </p>", "<div></div>"]

    def test_empty_headings_removed_silently(self):
        content, removed = remove_empty_elements("<h2> </h2><p>Text</p>")
        assert content == "<p>Text</p>"
        assert removed == []


class TestSanitizeHtml:
    def test_empty_input_warns(self):
        result = sanitize_html("", _OPTS)
        assert result.content == ""
        assert result.warnings == ["Invalid HTML content provided"]

    def test_none_input_warns(self):
        assert sanitize_html(None).warnings == ["Invalid HTML content provided"]

    def test_entities_decoded(self):
        result = sanitize_html("<p>Fish &amp; Chips&nbsp;&quot;to go&quot;</p>", _OPTS)
        assert result.content == '<p>Fish & Chips "to go"</p>'

    def test_escaped_angle_brackets_stay_escaped(self):
        result = sanitize_html("<p>I &lt;3 chips</p>", _OPTS)
        assert result.content == "<p>I &lt;3 chips</p>"

    def test_escaped_code_sample_kept_as_text(self):
        html = '<p>Write &lt;!-- note --&gt; or &lt;b style="x"&gt; in HTML</p>'
        assert sanitize_html(html, _OPTS).content == html

    def test_escaped_script_not_turned_into_markup(self):
        html = "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>"
        result = sanitize_html(html, _OPTS)
        assert "<script>" not in result.content
        assert result.content == html

    def test_attribute_like_text_kept(self):
        html = '<p>CSS: set style="color:red" or data-x="1" on the element</p>'
        assert sanitize_html(html, _OPTS).content == html

    def test_real_comments_removed(self):
        assert sanitize_html("<p>Text<!-- tracking --></p>", _OPTS).content == "<p>Text</p>"

    def test_double_encoded_entity_decodes_once(self):
        assert decode_entities("&amp;lt;") == "&lt;"

    def test_event_handlers_and_inline_styles_removed(self):
        result = sanitize_html('<p style="color: red" onclick="go()">Text</p>', _OPTS)
        assert result.content == "<p>Text</p>"

    def test_sanitizing_twice_changes_nothing(self):
        html = (
            '<div class="wp-block-group"><p class="has-text-color">Hello '
            '<a href="/about">About</a></p><p></p></div>'
        )
        once = sanitize_html(html, _OPTS).content
        assert sanitize_html(once, _OPTS).content == once

    def test_mapped_upload_link_survives_second_pass(self):
        html = '<a href="https://old.example.com/wp-content/uploads/2024/a.pdf">A</a>'
        once = sanitize_html(html, _OPTS).content
        assert once == '<a href="/images/2024/a.pdf">A</a>'
        assert sanitize_html(once, _OPTS).content == once

    def test_disabled_steps_leave_markup(self):
        opts = SanitizationOptions(
            remove_wordpress_classes=False,
            fix_broken_links=False,
            remove_empty_elements=False,
        )
        result = sanitize_html('<p class="wp-block-paragraph"><a href="/x">x</a></p><p></p>', opts)
        assert 'class="wp-block-paragraph"' in result.content
        assert 'href="/x"' in result.content
        assert "<p></p>" in result.content


class TestSanitizeBatch:
    def test_summary_totals(self):
        batch = sanitize_html_batch(
            ['<p class="wp-block-paragraph">A</p>', '<a href="/b">B</a>', ""], _OPTS
        )
        assert batch.summary.total == 3
        assert batch.summary.processed == 3
        assert batch.summary.total_removed_classes == 1
        assert batch.summary.total_fixed_links == 1
        assert len(batch.results) == 3


class TestContactValidators:
    def test_email(self):
        assert is_valid_email("hello@example.com")
        assert not is_valid_email("hello@example")
        assert not is_valid_email("hello world@example.com")

    def test_phone(self):
        assert is_valid_phone_number("+44 20 7946 0958")
        assert is_valid_phone_number("(020) 7946-0958") is False
        assert not is_valid_phone_number("abc")
