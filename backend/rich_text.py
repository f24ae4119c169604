"""Inline rendering of Notion rich-text runs."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple

from markup_styles import StyleSheet, open_tag


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyledRun:
    """A span of plain text with its emphasis flags and optional link."""

    text: str = ""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    href: Optional[str] = None


# Applied innermost first.
_EMPHASIS_WRAPPERS = (
    ("bold", "strong", "strong"),
    ("italic", "em", "em"),
    ("underline", "u", "u"),
    ("strikethrough", "s", "s"),
)


def parse_styled_run(raw: Mapping[str, Any]) -> StyledRun:
    annotations = raw.get("annotations") or {}
    text = raw.get("plain_text")
    if text is None:
        # Some payloads only carry the nested text object.
        text = (raw.get("text") or {}).get("content", "")
    href = raw.get("href") or None
    return StyledRun(
        text=str(text or ""),
        bold=bool(annotations.get("bold")),
        italic=bool(annotations.get("italic")),
        underline=bool(annotations.get("underline")),
        strikethrough=bool(annotations.get("strikethrough")),
        code=bool(annotations.get("code")),
        href=str(href) if href else None,
    )


def parse_rich_text(raw_runs: Any) -> Tuple[StyledRun, ...]:
    """Return the runs of a ``rich_text`` array.

    Entries that are not objects, or whose fields have the wrong shape, are
    skipped one by one; the remaining runs are kept.
    """
    if not isinstance(raw_runs, (list, tuple)):
        return ()
    runs = []
    for raw in raw_runs:
        if not isinstance(raw, Mapping):
            continue
        try:
            runs.append(parse_styled_run(raw))
        except (AttributeError, TypeError) as exc:
            logger.warning("Skipping malformed rich text run: %s", exc)
    return tuple(runs)


def escape_text(text: str, *, quote: bool = True) -> str:
    return html.escape(text or "", quote=quote)


def render_run(run: StyledRun, styles: StyleSheet, *, escape_quotes: bool = True) -> str:
    """Render one run as an inline HTML fragment.

    Inline code takes exclusive precedence over the other emphasis flags.
    The link wrapper, when present, always goes on the outside.
    """
    fragment = escape_text(run.text, quote=escape_quotes)
    if not fragment:
        return ""

    if run.code:
        fragment = f"{open_tag('code', styles, 'code_inline')}{fragment}</code>"
    else:
        for flag, tag, style_key in _EMPHASIS_WRAPPERS:
            if getattr(run, flag):
                fragment = f"{open_tag(tag, styles, style_key)}{fragment}</{tag}>"

    if run.href:
        fragment = f"{open_tag('a', styles, 'a', {'href': run.href})}{fragment}</a>"
    return fragment


def render_runs(runs: Iterable[StyledRun], styles: StyleSheet, *, escape_quotes: bool = True) -> str:
    return "".join(render_run(run, styles, escape_quotes=escape_quotes) for run in runs)


def plain_text(runs: Iterable[StyledRun]) -> str:
    return "".join(run.text for run in runs)


__all__ = [
    "StyledRun",
    "parse_styled_run",
    "parse_rich_text",
    "escape_text",
    "render_run",
    "render_runs",
    "plain_text",
]
