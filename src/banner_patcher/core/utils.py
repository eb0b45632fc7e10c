"""Shared utility functions for the patcher"""

import re
import textwrap
from pathlib import Path
from typing import Iterable, Optional


_INVALID_FILE_NAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def format_size(bytes_size: int) -> str:
    """Format file size in human-readable format"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"
        bytes_size /= 1024.0
    return f"{bytes_size:.2f} TB"


def join_readable(items: Optional[Iterable[str]]) -> Optional[str]:
    """
    Join names for a human-readable sentence.

    Examples:
        ["A"] -> "A"
        ["A", "B", "C"] -> "A, B and C"
    """
    if items is None:
        return None
    items = list(items)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


def word_wrap(text: str, width: int) -> str:
    """Wrap text to lines of at most width characters, keeping existing line breaks"""
    return "\n".join(
        textwrap.fill(line, width=width, break_long_words=False) if line else line
        for line in text.splitlines()
    )


def ensure_file_name_valid(name: str) -> str:
    """Replace characters that can't appear in a file name"""
    return _INVALID_FILE_NAME_CHARS.sub("-", name).strip()


def ensure_unique(path: Path) -> Path:
    """
    Get a path that doesn't exist yet.

    "patch.zip" becomes "patch-1.zip", "patch-2.zip", ... while taken.
    """
    path = Path(path)
    if not path.exists():
        return path

    index = 1
    while True:
        candidate = path.with_name(f"{path.stem}-{index}{path.suffix}")
        if not candidate.exists():
            return candidate
        index += 1
