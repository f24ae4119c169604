"""Helpers for naming generated newsletter files."""
from __future__ import annotations

import os
import re
from datetime import date
from typing import Optional


def sanitize_filename(name: str, default: str = 'file') -> str:
    """Return a safe base filename without extension."""
    if not name:
        return default
    name = os.path.basename(name)
    name_without_ext = os.path.splitext(name)[0]
    safe_name = re.sub(r"[^\w\s\.\-\(\),]", '', name_without_ext)
    safe_name = re.sub(r"\s{2,}", ' ', safe_name).strip()
    safe_name = safe_name.rstrip('. ')
    return safe_name if safe_name else default


def newsletter_filename(issue_date: Optional[date] = None, ext: str = 'pdf', prefix: str = 'newsletter') -> str:
    """Return ``<prefix>-YYYY-MM-DD.<ext>`` for the given (or today's) date."""
    issue_date = issue_date or date.today()
    base = sanitize_filename(f"{prefix}-{issue_date.isoformat()}", default='newsletter')
    return f"{base}.{ext.lstrip('.')}"


def unique_filename(directory: str, filename: str) -> str:
    """Ensure filename is unique within directory by appending (1), (2), ... if needed."""
    base, ext = os.path.splitext(filename)
    candidate = f"{base}{ext}"
    i = 1
    while os.path.exists(os.path.join(directory, candidate)):
        candidate = f"{base} ({i}){ext}"
        i += 1
    return candidate


__all__ = [
    'sanitize_filename',
    'newsletter_filename',
    'unique_filename',
]
