"""Unit tests for markup.py description markup"""

import pytest

from editor import styled_text_html
from markup import (
    MarkupError,
    apply_format,
    check_description,
    convert_to_html,
    render_description,
    sanitize_html,
    validate_description,
)


@pytest.mark.parametrize("text, expected", [
    ("[bold]Hi[/bold]", '<span class="font-bold">Hi</span>'),
    ("[underline]u[/underline]", '<span class="underline">u</span>'),
    ("[size=md]m[/size]", '<span class="text-base">m</span>'),
    ("[color=green]ok[/color]", '<span class="text-green-500">ok</span>'),
    (
        "[center][bold]x[/bold][/center]",
        '<div class="text-center"><span class="font-bold">x</span></div>',
    ),
])
def test_convert_paired_tags(text, expected):
    assert convert_to_html(text) == expected


def test_convert_link():
    html = convert_to_html('[link href="https://example.com/dl"]Get it[/link]')
    assert html == (
        '<a href="https://example.com/dl" class="text-blue-400 hover:underline" '
        'target="_blank" rel="noopener noreferrer">Get it</a>'
    )


def test_convert_bar_and_paragraphs():
    html = convert_to_html("first\n\nsecond[bar/]")
    assert html == 'first<br/><br/>second<hr class="border-t border-gray-600 my-2"/>'


def test_convert_drops_unknown_tags():
    assert convert_to_html("[foo]x[/foo] [size=xl]big[/size]") == "x big"


def test_convert_does_not_span_lines():
    """Tags wrapping a line break are not converted, only stripped"""
    assert convert_to_html("[bold]a\nb[/bold]") == "a\nb"


@pytest.mark.parametrize("text", [
    "plain text",
    "[center][bold]x[/bold][/center]",
    "[size=lg]x[/size] and [color=red]y[/color]",
    '[link href="https://a.io/x"]x[/link][bar/]',
])
def test_validate_accepts_balanced_markup(text):
    assert validate_description(text)


@pytest.mark.parametrize("text", [
    "[bold]x",
    "[bold]x[/center]",
    "[center][bold]x[/center][/bold]",
    "[foo]x[/foo]",
    "[center/]",
    "[/bold]",
    "[bar]",
])
def test_validate_rejects_malformed_markup(text):
    assert not validate_description(text)


def test_check_description_reports_tag():
    with pytest.raises(MarkupError, match=r"Unclosed tag \[bold\]"):
        check_description("[bold]never closed")
    with pytest.raises(MarkupError, match="expected"):
        check_description("[bold]x[/size]")


def test_apply_format_wraps_selection():
    result = apply_format("say hi", 4, 6, "bold")
    assert result.text == "say [bold]hi[/bold]"
    assert result.selection is None


def test_apply_format_empty_selection_places_caret_inside():
    result = apply_format("ab", 1, 1, "bold")
    assert result.text == "a[bold][/bold]b"
    assert result.selection == (7, 7)

    result = apply_format("", 0, 0, "size=sm")
    assert result.text == "[size=sm][/size]"
    assert result.selection == (9, 9)


def test_apply_format_link_placeholder_is_selected():
    url = "https://x.io"
    result = apply_format("", 0, 0, "link", url)
    assert result.text == '[link href="https://x.io"]Click here[/link]'
    start, end = result.selection
    assert result.text[start:end] == "Click here"


def test_apply_format_link_requires_valid_url():
    with pytest.raises(MarkupError):
        apply_format("x", 0, 1, "link")
    with pytest.raises(MarkupError, match="http"):
        apply_format("x", 0, 1, "link", "ftp://files.example.com")


def test_apply_format_bar_and_paragraph():
    result = apply_format("ab", 1, 1, "bar")
    assert result.text == "a[bar/]b"
    assert result.selection == (7, 7)

    result = apply_format("ab", 1, 1, "paragraph")
    assert result.text == "a\n\nb"


def test_apply_format_unknown():
    with pytest.raises(MarkupError):
        apply_format("x", 0, 1, "italic")


def test_render_description_rejects_malformed():
    with pytest.raises(MarkupError):
        render_description("[bold]x")


def test_render_description_strips_script_links():
    html = render_description('safe [link href="javascript:alert(1)"]bad[/link]')
    assert "javascript" not in html
    assert "bad" in html


def test_render_description_keeps_http_links():
    html = render_description('[link href="https://example.com"]site[/link]')
    assert 'href="https://example.com"' in html
    assert 'target="_blank"' in html


def test_sanitize_html_strips_scripts():
    html = sanitize_html("<script>alert(1)</script><b>ok</b>")
    assert "<script" not in html
    assert "<b>ok</b>" in html


def test_sanitize_html_only_allows_youtube_iframes():
    good = sanitize_html('<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>')
    bad = sanitize_html('<iframe src="https://evil.example/embed"></iframe>')
    assert 'src="https://www.youtube.com/embed/dQw4w9WgXcQ"' in good
    assert "evil.example" not in bad


def test_sanitize_html_empty():
    assert sanitize_html("") == ""


def test_sanitize_keeps_styled_text_snippet():
    snippet = styled_text_html("Hi", "#ef4444", 5)
    cleaned = sanitize_html(snippet)
    assert "color: rgb(239, 68, 68)" in cleaned
    assert "font-size: 24px" in cleaned
