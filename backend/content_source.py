"""Minimal Notion API client for listing a page's child blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from errors import UpstreamFetchError
import settings


@dataclass
class ChildrenPage:
    """One cursor page of ``GET /blocks/{id}/children``."""

    results: List[Dict[str, Any]] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None


class NotionBlockSource:
    """Fetch block children sequentially, following ``next_cursor``."""

    PAGE_SIZE = 100

    def __init__(
        self,
        token: str,
        logger,
        session: Optional[requests.Session] = None,
        api_url: Optional[str] = None,
        notion_version: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._token = token
        self._logger = logger
        self._session = session or requests.Session()
        self._api_url = (api_url or settings.notion_api_url()).rstrip("/")
        self._notion_version = notion_version or settings.notion_version()
        self._timeout = timeout if timeout is not None else settings.notion_timeout()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Notion-Version": self._notion_version,
            "Accept": "application/json",
        }

    def fetch_children(self, block_id: str, cursor: Optional[str] = None) -> ChildrenPage:
        url = f"{self._api_url}/blocks/{block_id}/children"
        params: Dict[str, Any] = {"page_size": self.PAGE_SIZE}
        if cursor:
            params["start_cursor"] = cursor

        try:
            response = self._session.get(url, headers=self._headers(), params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            self._logger.error("Notion request for %s failed: %s", block_id, exc)
            raise UpstreamFetchError(f"Failed to reach Notion: {exc}") from exc

        if response.status_code >= 400:
            message = self._error_message(response)
            self._logger.error(
                "Notion returned %s for block %s: %s", response.status_code, block_id, message
            )
            raise UpstreamFetchError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamFetchError("Notion returned a non-JSON response") from exc
        if not isinstance(payload, dict):
            raise UpstreamFetchError("Notion returned an unexpected response body")

        results = payload.get("results") or []
        has_more = bool(payload.get("has_more"))
        next_cursor = payload.get("next_cursor") if has_more else None
        return ChildrenPage(results=list(results), has_more=has_more, next_cursor=next_cursor)

    def fetch_all_blocks(self, block_id: str) -> List[Dict[str, Any]]:
        """Return every child block of ``block_id`` in API order."""
        blocks: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        page_count = 0
        while True:
            page = self.fetch_children(block_id, cursor)
            page_count += 1
            blocks.extend(page.results)
            if not page.has_more or not page.next_cursor:
                break
            cursor = page.next_cursor
        self._logger.info(
            "Fetched %s blocks for %s across %s request(s)", len(blocks), block_id, page_count
        )
        return blocks

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = {}
        message = data.get("message") if isinstance(data, dict) else None
        return message or f"Notion API request failed with status {response.status_code}"


__all__ = ["ChildrenPage", "NotionBlockSource"]
