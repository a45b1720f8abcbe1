"""
Description markup for tool listings.

Admins write descriptions in a small bracket markup ([bold]..[/bold],
[link href="..."]..[/link], [bar/] and friends). This module validates it,
converts it to the HTML the public site renders, and provides the toolbar
helper used by the dashboard to wrap a selection in tags.
"""

import re
import logging
from typing import List, NamedTuple, Optional, Tuple

import bleach
from bleach.css_sanitizer import CSSSanitizer

PAIRED_TAGS = ("center", "underline", "bold", "size", "color", "link")
SELF_CLOSING_TAGS = ("bar",)

# Order matters: each pattern is applied once over the whole text.
_TAG_PAIRS = [
    (re.compile(r'\[center\](.*?)\[/center\]'), r'<div class="text-center">\1</div>'),
    (re.compile(r'\[underline\](.*?)\[/underline\]'), r'<span class="underline">\1</span>'),
    (re.compile(r'\[bold\](.*?)\[/bold\]'), r'<span class="font-bold">\1</span>'),
    (re.compile(r'\[size=sm\](.*?)\[/size\]'), r'<span class="text-sm">\1</span>'),
    (re.compile(r'\[size=md\](.*?)\[/size\]'), r'<span class="text-base">\1</span>'),
    (re.compile(r'\[size=lg\](.*?)\[/size\]'), r'<span class="text-lg">\1</span>'),
    (re.compile(r'\[color=red\](.*?)\[/color\]'), r'<span class="text-red-500">\1</span>'),
    (re.compile(r'\[color=green\](.*?)\[/color\]'), r'<span class="text-green-500">\1</span>'),
    (re.compile(r'\[color=blue\](.*?)\[/color\]'), r'<span class="text-blue-500">\1</span>'),
    (
        re.compile(r'\[link href="([^"]+)"\](.*?)\[/link\]'),
        r'<a href="\1" class="text-blue-400 hover:underline" target="_blank" rel="noopener noreferrer">\2</a>',
    ),
]
_SELF_CLOSING = [(re.compile(r'\[bar/\]'), '<hr class="border-t border-gray-600 my-2"/>')]
_LEFTOVER_TAG = re.compile(r'\[/?[a-zA-Z0-9= "]*\]')

_TOKEN = re.compile(r'\[/?[a-zA-Z]+(?:=[^\]]+)?(?: [^\]]+)?/?\]')
_SELF_CLOSE_TOKEN = re.compile(r'^\[([a-zA-Z]+)/\]$')
_OPEN_TOKEN = re.compile(r'^\[([a-zA-Z]+)(?:=[^\]]+)?(?: [^\]]+)?\]$')
_CLOSE_TOKEN = re.compile(r'^\[/([a-zA-Z]+)\]$')

_LINK_URL = re.compile(r'^https?://[^\s/$.?#].[^\s]*$')

LINK_PLACEHOLDER = "Click here"
FORMATS = (
    "center", "underline", "bold",
    "size=sm", "size=md", "size=lg",
    "color=red", "color=green", "color=blue",
    "paragraph", "link", "bar",
)

# Whitelist shared by converted markup and rich-editor output.
ALLOWED_TAGS = [
    'p', 'br', 'hr', 'strong', 'b', 'em', 'i', 'u', 's', 'a', 'ul', 'ol', 'li',
    'blockquote', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'img', 'span', 'div',
    'font', 'iframe',
]
ALLOWED_CSS_PROPERTIES = [
    'color', 'background-color', 'font-size', 'font-weight', 'text-align',
    'text-decoration', 'white-space',
]
YOUTUBE_EMBED_PREFIX = "https://www.youtube.com/embed/"


class MarkupError(ValueError):
    """Raised when description markup is malformed."""


class FormatResult(NamedTuple):
    text: str
    selection: Optional[Tuple[int, int]]


def convert_to_html(text: str) -> str:
    """Convert description markup to HTML. Unknown tags are dropped."""
    result = text
    for pattern, replacement in _TAG_PAIRS:
        result = pattern.sub(replacement, result)
    for pattern, replacement in _SELF_CLOSING:
        result = pattern.sub(replacement, result)
    result = result.replace("\n\n", "<br/><br/>")
    return _LEFTOVER_TAG.sub("", result)


def check_description(text: str) -> None:
    """
    Raise MarkupError unless every tag in `text` is known and properly nested.

    Self-closing tags must be written as [name/]; paired tags may carry a
    value ([size=sm]) or attributes ([link href="..."]) on the opening side.
    """
    stack: List[str] = []
    for tag in _TOKEN.findall(text):
        self_close = _SELF_CLOSE_TOKEN.match(tag)
        if self_close:
            if self_close.group(1) not in SELF_CLOSING_TAGS:
                raise MarkupError(f"Unknown self-closing tag {tag}")
            continue

        opening = _OPEN_TOKEN.match(tag)
        if opening:
            if opening.group(1) not in PAIRED_TAGS:
                raise MarkupError(f"Unknown tag {tag}")
            stack.append(opening.group(1))
            continue

        closing = _CLOSE_TOKEN.match(tag)
        if closing:
            name = closing.group(1)
            if name not in PAIRED_TAGS:
                raise MarkupError(f"Unknown closing tag {tag}")
            last_open = stack.pop() if stack else None
            if last_open != name:
                expected = f"[/{last_open}]" if last_open else "no closing tag"
                raise MarkupError(f"Mismatched {tag}, expected {expected}")

    if stack:
        raise MarkupError(f"Unclosed tag [{stack[-1]}]")


def validate_description(text: str) -> bool:
    try:
        check_description(text)
    except MarkupError:
        return False
    return True


def is_valid_link_url(url: str) -> bool:
    return bool(url) and bool(_LINK_URL.match(url))


def apply_format(text: str, start: int, end: int, fmt: str, link_url: Optional[str] = None) -> FormatResult:
    """
    Apply a toolbar format to the selection text[start:end].

    Returns the new text and the selection the editor should restore, or None
    when the current selection can stay as it is.
    """
    if fmt not in FORMATS:
        raise MarkupError(f"Unsupported format: {fmt}")

    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    before, selected, after = text[:start], text[start:end], text[end:]

    if fmt == "paragraph":
        return FormatResult(f"{before}\n\n{after}", None)

    if fmt == "link":
        if not link_url:
            raise MarkupError("Please enter a valid URL for the link.")
        if not is_valid_link_url(link_url):
            raise MarkupError("Please enter a valid URL starting with http:// or https://")
        opening = f'[link href="{link_url}"]'
        if selected:
            return FormatResult(f"{before}{opening}{selected}[/link]{after}", None)
        caret = start + len(opening)
        return FormatResult(
            f"{before}{opening}{LINK_PLACEHOLDER}[/link]{after}",
            (caret, caret + len(LINK_PLACEHOLDER)),
        )

    if fmt == "bar":
        caret = start + len("[bar/]")
        return FormatResult(f"{before}[bar/]{after}", (caret, caret))

    closing = fmt.split("=")[0]
    wrapped = f"{before}[{fmt}]{selected}[/{closing}]{after}"
    if selected:
        return FormatResult(wrapped, None)
    caret = start + len(fmt) + 2
    return FormatResult(wrapped, (caret, caret))


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    if name in ('class', 'style'):
        return True
    if tag == 'a':
        return name in ('href', 'title', 'target', 'rel')
    if tag == 'img':
        return name in ('src', 'alt', 'width', 'height', 'loading')
    if tag == 'font':
        return name in ('color', 'size')
    if tag == 'iframe':
        if name == 'src':
            return value.startswith(YOUTUBE_EMBED_PREFIX)
        return name in ('frameborder', 'allowfullscreen')
    return False


def sanitize_html(html_content: str) -> str:
    """Strip everything the public site should not render."""
    if not html_content:
        return ""
    css_sanitizer = CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES)
    return bleach.clean(
        html_content,
        tags=ALLOWED_TAGS,
        attributes=_allow_attribute,
        protocols=list(bleach.ALLOWED_PROTOCOLS),
        css_sanitizer=css_sanitizer,
        strip=True,
    )


def render_description(text: str) -> str:
    """Validate, convert and sanitize a description ready for storage."""
    check_description(text)
    html = sanitize_html(convert_to_html(text))
    logging.info(f"Rendered description: {len(text)} chars markup -> {len(html)} chars HTML")
    return html
