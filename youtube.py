"""YouTube link validation and embedding."""

import re
from typing import Dict, List, Optional

_WATCH_URL = re.compile(r'^(https?://)?(www\.)?(youtube\.com|youtu\.be)/(watch\?v=|embed/|v/|.+\?v=)?([^&=%?]{11})')
_VIDEO_ID = re.compile(r'(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^"&?/\s]{11})')

EMBED_BASE = "https://www.youtube.com/embed/"


def is_valid_youtube_url(url: str) -> bool:
    return bool(url) and bool(_WATCH_URL.match(url.strip()))


def extract_video_id(url: str) -> Optional[str]:
    if not url:
        return None
    match = _VIDEO_ID.search(url.strip())
    return match.group(1) if match else None


def embed_url(url: str) -> str:
    video_id = extract_video_id(url)
    if not video_id:
        raise ValueError(f"Invalid YouTube URL: {url}")
    return f"{EMBED_BASE}{video_id}"


def background_numbers(video_count: int) -> List[Dict[str, int]]:
    """
    Entries stored alongside a new video: one per slot 0..video_count, each
    carrying the collection size after the insert.
    """
    content_length = video_count + 1
    return [{'index': i, 'value': content_length} for i in range(content_length)]
