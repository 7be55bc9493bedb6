"""Unit tests for Markdown rendering and the page template."""

import pytest

from prouter.render import MarkdownRenderer, is_relative_link
from prouter.ui.listing import ListingEntry, render_listing_html
from prouter.ui.page import PageTemplate


class TestMarkdownRenderer:
    def test_heading_gets_automatic_id(self):
        html = MarkdownRenderer().render(b"# About\nHello")

        assert '<h1 id="about">About</h1>' in html
        assert "Hello" in html

    def test_tables_and_fenced_code(self):
        source = "| a | b |\n|---|---|\n| 1 | 2 |\n\n```\ncode\n```\n"

        html = MarkdownRenderer().render(source)

        assert "<table>" in html
        assert "<td>1</td>" in html
        assert "<code>code" in html

    def test_external_links_open_in_new_context(self):
        html = MarkdownRenderer().render("[site](https://example.com)")

        assert 'href="https://example.com"' in html
        assert 'target="_blank"' in html
        assert 'rel="noopener noreferrer"' in html

    @pytest.mark.parametrize("href", ["/docs", "#intro", "./sibling", "../parent"])
    def test_relative_links_stay_in_place(self, href):
        html = MarkdownRenderer().render(f"[link]({href})")

        assert "target=" not in html

    def test_list_directly_below_paragraph(self):
        html = MarkdownRenderer().render(b"# About\nIntro\n- a\n- b\n")

        assert "<p>Intro</p>" in html
        assert "<li>a</li>" in html
        assert "<li>b</li>" in html

    def test_list_continuation_lines_stay_in_item(self):
        html = MarkdownRenderer().render("- a\n  more\n- b\n")

        assert html.count("<ul>") == 1
        assert "<p>" not in html

    def test_list_marker_inside_fenced_code_is_untouched(self):
        html = MarkdownRenderer().render("```\nline\n- not a list\n```\n")

        assert "<li>" not in html
        assert "line\n- not a list" in html

    def test_strikethrough_and_bare_urls(self):
        html = MarkdownRenderer().render(b"~~gone~~ see https://example.com")

        assert "<del>gone</del>" in html
        assert 'href="https://example.com"' in html
        assert 'target="_blank"' in html

    def test_single_tilde_is_literal(self):
        assert "<sub>" not in MarkdownRenderer().render("H~2~O")

    def test_smart_punctuation(self):
        html = MarkdownRenderer().render('He said "hi" -- twice...')

        assert "&ldquo;hi&rdquo;" in html
        assert "&ndash;" in html
        assert "&hellip;" in html

    def test_invalid_utf8_degrades_instead_of_failing(self):
        html = MarkdownRenderer().render(b"# Caf\xe9")

        assert "<h1" in html
        assert "�" in html

    def test_renders_are_independent(self):
        renderer = MarkdownRenderer()
        renderer.render("# Same")

        assert renderer.render("# Same") == '<h1 id="same">Same</h1>'


@pytest.mark.parametrize(
    ("href", "relative"),
    [("#top", True), ("/a", True), ("//cdn.example.com/x", False), ("./a", True), ("page.html", False)],
)
def test_is_relative_link(href, relative):
    assert is_relative_link(href) is relative


class TestPageTemplate:
    def test_escapes_title_but_not_content(self):
        html = PageTemplate().render("<about>", "<h1>About</h1>")

        assert "<title>&lt;about&gt;</title>" in html
        assert "<h1>About</h1>" in html

    def test_includes_dark_stylesheet(self):
        html = PageTemplate().render("about", "")

        assert html.startswith("<!DOCTYPE html>")
        assert "background-color: #0d1117;" in html


def test_listing_escapes_and_quotes_names():
    html = render_listing_html("/", [ListingEntry("<b>.txt", False), ListingEntry("docs", True)])

    assert 'href="%3Cb%3E.txt"' in html
    assert "&lt;b&gt;.txt" in html
    assert html.index('href="docs/"') < html.index("%3Cb%3E.txt")
