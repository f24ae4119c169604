"""Typed view over the raw block objects returned by the Notion API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from rich_text import StyledRun, parse_rich_text


logger = logging.getLogger(__name__)

PARAGRAPH = "paragraph"
HEADING = "heading"
BULLETED_LIST_ITEM = "bulleted_list_item"
NUMBERED_LIST_ITEM = "numbered_list_item"
IMAGE = "image"
DIVIDER = "divider"
QUOTE = "quote"
CODE = "code"
CALLOUT = "callout"

LIST_KINDS = (BULLETED_LIST_ITEM, NUMBERED_LIST_ITEM)

IMAGE_SOURCE_EXTERNAL = "external"
IMAGE_SOURCE_FILE = "file"

_HEADING_LEVELS = {"heading_1": 1, "heading_2": 2, "heading_3": 3}
_TEXT_KINDS = (PARAGRAPH, BULLETED_LIST_ITEM, NUMBERED_LIST_ITEM, QUOTE, CODE, CALLOUT)


@dataclass(frozen=True)
class Block:
    """One structural unit of page content.

    ``kind`` selects which of the optional fields are meaningful: ``level``
    for headings, ``image_source``/``image_url`` for images and ``icon`` for
    callouts. Every text-bearing kind keeps its styled runs in ``runs``.
    """

    kind: str
    runs: Tuple[StyledRun, ...] = field(default_factory=tuple)
    level: Optional[int] = None
    image_source: Optional[str] = None
    image_url: str = ""
    icon: Optional[str] = None
    block_id: Optional[str] = None

    @property
    def is_list_item(self) -> bool:
        return self.kind in LIST_KINDS

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.runs)


def _payload(raw: Dict[str, Any], block_type: str) -> Dict[str, Any]:
    payload = raw.get(block_type)
    return payload if isinstance(payload, dict) else {}


def _image_location(payload: Dict[str, Any]) -> Tuple[str, str]:
    """Return ``(source_kind, url)`` for an image payload."""
    if payload.get("type") == IMAGE_SOURCE_EXTERNAL:
        external = payload.get("external")
        url = external.get("url") if isinstance(external, dict) else None
        return IMAGE_SOURCE_EXTERNAL, str(url or "")
    hosted = payload.get("file")
    url = hosted.get("url") if isinstance(hosted, dict) else None
    return IMAGE_SOURCE_FILE, str(url or "")


def _callout_icon(payload: Dict[str, Any]) -> Optional[str]:
    icon = payload.get("icon")
    if isinstance(icon, dict) and icon.get("emoji"):
        return str(icon["emoji"])
    return None


def parse_block(raw: Any) -> Optional[Block]:
    """Convert one raw Notion block into a :class:`Block`.

    Returns ``None`` for untyped, unsupported or malformed blocks so callers
    can drop them without aborting the whole document.
    """
    if not isinstance(raw, dict):
        return None
    block_type = raw.get("type")
    if not isinstance(block_type, str) or not block_type:
        return None

    block_id = raw.get("id")
    payload = _payload(raw, block_type)

    try:
        if block_type in _HEADING_LEVELS:
            return Block(
                kind=HEADING,
                runs=parse_rich_text(payload.get("rich_text")),
                level=_HEADING_LEVELS[block_type],
                block_id=block_id,
            )
        if block_type in _TEXT_KINDS:
            return Block(
                kind=block_type,
                runs=parse_rich_text(payload.get("rich_text")),
                icon=_callout_icon(payload) if block_type == CALLOUT else None,
                block_id=block_id,
            )
        if block_type == IMAGE:
            source, url = _image_location(payload)
            return Block(kind=IMAGE, image_source=source, image_url=url, block_id=block_id)
        if block_type == DIVIDER:
            return Block(kind=DIVIDER, block_id=block_id)
    except (AttributeError, TypeError, ValueError) as exc:
        logger.warning("Skipping malformed %s block %s: %s", block_type, block_id, exc)
        return None

    logger.debug("Skipping unsupported block type '%s' (%s)", block_type, block_id)
    return None


def parse_blocks(raw_blocks: Iterable[Any]) -> List[Block]:
    """Parse raw blocks in order, omitting anything that cannot be rendered."""
    parsed: List[Block] = []
    for raw in raw_blocks or ():
        block = parse_block(raw)
        if block is not None:
            parsed.append(block)
    return parsed


__all__ = [
    "Block",
    "parse_block",
    "parse_blocks",
    "PARAGRAPH",
    "HEADING",
    "BULLETED_LIST_ITEM",
    "NUMBERED_LIST_ITEM",
    "IMAGE",
    "DIVIDER",
    "QUOTE",
    "CODE",
    "CALLOUT",
    "LIST_KINDS",
    "IMAGE_SOURCE_EXTERNAL",
    "IMAGE_SOURCE_FILE",
]
