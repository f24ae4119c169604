"""Exception types surfaced by the newsletter conversion pipeline."""

from __future__ import annotations

from typing import Optional


class NewsletterError(Exception):
    """Base class for failures that reach the caller as a message string."""


class InputResolutionError(NewsletterError):
    """Raised when the supplied URL does not yield a Notion page id."""


class MissingCredentialError(NewsletterError):
    """Raised when no Notion integration token is configured."""


class UpstreamFetchError(NewsletterError):
    """Raised when the Notion API fails while listing block children."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RenderTimeoutError(NewsletterError):
    """Raised when the headless renderer does not settle in time."""


__all__ = [
    "NewsletterError",
    "InputResolutionError",
    "MissingCredentialError",
    "UpstreamFetchError",
    "RenderTimeoutError",
]
