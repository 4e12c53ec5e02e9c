"""
Layout Migrator — Rich Text Normalization Tests

Quill class-based formatting → inline styles, plain-text projection, alignment.
"""

from layout_migrator.rich_text import (
    dominant_text_align,
    html_to_plain_text,
    merge_styles,
    normalize_rich_text,
    split_declarations,
)


class TestNormalizeRichText:
    """Tests for normalize_rich_text."""

    def test_align_class_to_style(self):
        """ql-align-center becomes text-align: center."""
        html = normalize_rich_text('<p class="ql-align-center">Hi</p>')
        assert html == '<p style="text-align: center">Hi</p>'

    def test_font_class_resolved_through_map(self):
        """ql-font-X becomes font-family with the mapped code; existing styles are kept."""
        html = normalize_rich_text(
            '<p class="ql-font-NouvelR_Bold ql-align-right" style="color: red">x</p>',
            {"NouvelR_Bold": "nouvelr-bold"},
        )
        assert html == '<p style="color: red; font-family: nouvelr-bold; text-align: right">x</p>'

    def test_class_wins_over_existing_property(self):
        """The class-derived declaration replaces an inline one for the same property."""
        html = normalize_rich_text('<p class="ql-align-justify" style="text-align: left">x</p>')
        assert html == '<p style="text-align: justify">x</p>'

    def test_editor_scaffolding_removed(self):
        """pr-wildcard class and contenteditable are stripped; empty class attrs dropped."""
        html = normalize_rich_text('<p><span class="pr-wildcard" contenteditable="false">{{ name }}</span></p>')
        assert html == "<p><span>{{ name }}</span></p>"

    def test_other_classes_kept(self):
        """Unrelated classes survive, ahead of the style attribute."""
        html = normalize_rich_text('<p class="lead ql-align-center">x</p>')
        assert html == '<p class="lead" style="text-align: center">x</p>'

    def test_void_tags_stay_html(self):
        """<br> is not rewritten as <br/>."""
        assert normalize_rich_text("<p>a<br>b</p>") == "<p>a<br>b</p>"

    def test_empty(self):
        """Empty input gives empty output."""
        assert normalize_rich_text("") == ""


class TestMergeStyles:
    """Tests for merge_styles."""

    def test_new_value_wins(self):
        """Later declarations override per property, order of first appearance kept."""
        assert merge_styles("color: red; text-align: left", "text-align: center") == "color: red; text-align: center"

    def test_semicolon_inside_url_kept(self):
        """A data URI's ";" does not end the declaration."""
        existing = "background-image: url(data:image/png;base64,AAAA)"
        assert merge_styles(existing, "text-align: center") == (
            "background-image: url(data:image/png;base64,AAAA); text-align: center"
        )

    def test_semicolon_inside_quotes_kept(self):
        """Quoted values may contain ";"."""
        assert merge_styles("font-family: 'A;B', serif", "color: red") == "font-family: 'A;B', serif; color: red"

    def test_normalize_keeps_data_uri_style(self):
        """An alignment class on a tag with a data URI background keeps the full URI."""
        html = normalize_rich_text(
            '<p class="ql-align-center" style="background-image: url(data:image/png;base64,AAAA)">x</p>'
        )
        assert html == (
            '<p style="background-image: url(data:image/png;base64,AAAA); text-align: center">x</p>'
        )

    def test_split_declarations(self):
        """Top-level semicolons split; trailing empties are dropped by the caller."""
        assert split_declarations("a: 1; b: url(x;y);") == ["a: 1", " b: url(x;y)", ""]


class TestHtmlToPlainText:
    """Tests for html_to_plain_text."""

    def test_paragraphs_and_breaks(self):
        """Paragraph boundaries and <br> become newlines."""
        assert html_to_plain_text("<p>Line one</p><p>Line two<br>three</p>") == "Line one\nLine two\nthree"

    def test_entities_decoded(self):
        """Entities decode and non-breaking spaces become spaces."""
        assert html_to_plain_text("<p>Tom &amp; Jerry&nbsp;!</p>") == "Tom & Jerry !"

    def test_trimmed(self):
        """Surrounding whitespace is removed."""
        assert html_to_plain_text("  <p> hi </p>  ") == "hi"


class TestDominantTextAlign:
    """Tests for dominant_text_align."""

    def test_priority(self):
        """justify beats center beats right."""
        html = '<p style="text-align: center">a</p><p style="text-align: justify">b</p>'
        assert dominant_text_align(html) == "justify"
        assert dominant_text_align('<p style="text-align: right">a</p><p style="text-align:center">b</p>') == "center"

    def test_default_left(self):
        """No declaration means left."""
        assert dominant_text_align("<p>a</p>") == "left"
