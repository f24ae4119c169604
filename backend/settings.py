"""Environment-backed settings for the Notion client and the print search."""

from __future__ import annotations

import logging
import os
from typing import Optional

from errors import MissingCredentialError


logger = logging.getLogger(__name__)

DEFAULT_NOTION_API_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_NOTION_TIMEOUT = 30.0
DEFAULT_PAGE_CEILING = 3
DEFAULT_PAGEDJS_SCRIPT_URL = "https://unpkg.com/pagedjs/dist/paged.polyfill.js"


def resolve_notion_token(explicit: Optional[str] = None) -> str:
    """Return the request-supplied token, else ``NOTION_TOKEN``."""
    token = (explicit or "").strip() or (os.environ.get("NOTION_TOKEN") or "").strip()
    if not token:
        raise MissingCredentialError("Missing Notion token in settings")
    return token


def notion_api_url() -> str:
    return (os.environ.get("NOTION_API_URL") or DEFAULT_NOTION_API_URL).rstrip("/")


def notion_version() -> str:
    return os.environ.get("NOTION_VERSION") or DEFAULT_NOTION_VERSION


def notion_timeout() -> float:
    raw = os.environ.get("NOTION_TIMEOUT")
    if not raw:
        return DEFAULT_NOTION_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid NOTION_TIMEOUT '%s'; using %s", raw, DEFAULT_NOTION_TIMEOUT)
        return DEFAULT_NOTION_TIMEOUT


def page_ceiling() -> int:
    raw = os.environ.get("PRINT_PAGE_CEILING")
    if not raw:
        return DEFAULT_PAGE_CEILING
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning("Invalid PRINT_PAGE_CEILING '%s'; using %s", raw, DEFAULT_PAGE_CEILING)
        return DEFAULT_PAGE_CEILING
    return value


def pagedjs_script_url() -> str:
    return os.environ.get("PAGEDJS_SCRIPT_URL") or DEFAULT_PAGEDJS_SCRIPT_URL


def default_page_id() -> Optional[str]:
    return (os.environ.get("NOTION_PAGE_ID") or "").strip() or None


__all__ = [
    "resolve_notion_token",
    "notion_api_url",
    "notion_version",
    "notion_timeout",
    "page_ceiling",
    "pagedjs_script_url",
    "default_page_id",
]
