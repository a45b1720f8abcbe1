"""
Snippets and palette for the rich-text description editor.

The editor stores raw HTML; everything inserted here is run through
markup.sanitize_html before it is saved.
"""

import re
from html import escape

from youtube import embed_url

COLORS = ['#ffffff', '#ef4444', '#10b981', '#3b82f6', '#f59e0b', '#a855f7', '#ec4899', '#64748b']
DEFAULT_TEXT_COLOR = '#d1d5db'

# execCommand fontSize (1-7) -> rendered px
FONT_SIZES = {1: 10, 2: 13, 3: 16, 4: 18, 5: 24, 6: 32, 7: 48}

_HEX = re.compile(r'^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$', re.IGNORECASE)


def hex_to_rgb(hex_color: str) -> str:
    match = _HEX.match(hex_color or '')
    if not match:
        return ''
    r, g, b = (int(part, 16) for part in match.groups())
    return f"rgb({r}, {g}, {b})"


def image_html(url: str) -> str:
    src = escape(url, quote=True)
    return (
        f'<img src="{src}" class="w-full h-auto rounded-lg my-4 border border-[#333] shadow-lg" '
        f'loading="lazy" /><br/>'
    )


def video_html(url: str) -> str:
    """Responsive iframe for a YouTube link; ValueError if it is not one."""
    src = embed_url(url)
    return (
        '<div class="relative w-full aspect-video my-4 rounded-lg overflow-hidden border border-[#333] shadow-lg">'
        f'<iframe src="{src}" class="absolute top-0 left-0 w-full h-full" frameborder="0" allowfullscreen></iframe>'
        '</div><br/>'
    )


def styled_text_html(text: str, color: str = DEFAULT_TEXT_COLOR, size: int = 3) -> str:
    """Inline span matching what the editor's colour and size menus produce."""
    if size not in FONT_SIZES:
        raise ValueError(f"Font size must be 1-7, got {size}")
    rgb = hex_to_rgb(color)
    if not rgb:
        raise ValueError(f"Invalid colour: {color}")
    return f'<span style="color: {rgb}; font-size: {FONT_SIZES[size]}px">{escape(text)}</span>'
