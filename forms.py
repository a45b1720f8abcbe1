"""Validation helpers for the download-file upload."""

import os
from typing import Tuple

ALLOWED_DOWNLOAD_EXTENSIONS = {'.zip', '.exe'}


def validate_download_file(filename: str) -> Tuple[bool, str]:
    """Only archives and installers may be offered as downloads."""
    if not filename:
        return False, "No download file selected."
    ext = os.path.splitext(filename.lower())[1]
    if ext not in ALLOWED_DOWNLOAD_EXTENSIONS:
        return False, "Only .zip or .exe files are allowed!"
    return True, ""


def format_size_mb(num_bytes: int) -> str:
    return f"{num_bytes / (1024 * 1024):.2f} MB"
