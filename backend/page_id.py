"""Extract Notion page identifiers from share/page URLs."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlparse


# A bare run of 32+ hex characters, or a canonical 8-4-4-4-12 UUID.
_PAGE_ID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
    r"|[0-9a-fA-F]{32,}"
)
PAGE_ID_LENGTH = 32


def format_page_id(page_id: str) -> str:
    """Return ``page_id`` in the hyphenated 8-4-4-4-12 grouping."""
    bare = page_id.replace("-", "").lower()
    return f"{bare[:8]}-{bare[8:12]}-{bare[12:16]}-{bare[16:20]}-{bare[20:]}"


def extract_page_id(url: str, hyphenated: bool = False) -> Optional[str]:
    """Return the page id embedded in ``url`` or ``None``.

    The last qualifying run in the URL path wins, so a trailing id overrides
    anything that appears earlier in a slug.
    """
    if not url:
        return None
    try:
        parsed = urlparse(str(url).strip())
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None

    matches = _PAGE_ID_PATTERN.findall(parsed.path or "")
    if not matches:
        return None

    candidate = matches[-1].replace("-", "")[:PAGE_ID_LENGTH].lower()
    if len(candidate) != PAGE_ID_LENGTH:
        return None
    return format_page_id(candidate) if hyphenated else candidate


__all__ = ["extract_page_id", "format_page_id", "PAGE_ID_LENGTH"]
