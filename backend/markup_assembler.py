"""Assemble parsed Notion blocks into a single HTML document fragment.

Two layouts share the per-block rendering rules:

``LayoutMode.FLAT``
    Email output. Blocks are emitted in order; the only grouping is that
    adjacent list items of the same kind share one ``<ul>``/``<ol>``.

``LayoutMode.PRINT_GROUPED``
    Print output for the Paged.js shell. Headings open sections that absorb
    the content that follows them, and a heading immediately followed by an
    image becomes a side-by-side text/image section.

The grouping pass is built from span scanners that take ``(blocks, start)``
and return ``(end, fragment)`` so no caller ever mutates a shared cursor.
Nothing in here raises for odd input; unknown blocks simply render to ``""``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from blocks import (
    BULLETED_LIST_ITEM,
    CALLOUT,
    CODE,
    DIVIDER,
    HEADING,
    IMAGE,
    PARAGRAPH,
    QUOTE,
    Block,
)
from markup_styles import EMAIL_STYLES, PRINT_STYLES, StyleSheet, open_tag
from rich_text import escape_text, plain_text, render_runs


DEFAULT_CALLOUT_ICON = "\U0001F4A1"


class LayoutMode(enum.Enum):
    FLAT = "flat"
    PRINT_GROUPED = "print"


@dataclass(frozen=True)
class _RenderContext:
    styles: StyleSheet
    escape_quotes: bool
    plain_headings: bool
    wrapper_keys: Tuple[str, ...]


def _context_for(mode: LayoutMode, styles: Optional[StyleSheet]) -> _RenderContext:
    if mode is LayoutMode.PRINT_GROUPED:
        return _RenderContext(
            styles=PRINT_STYLES if styles is None else styles,
            escape_quotes=False,
            plain_headings=True,
            wrapper_keys=("container",),
        )
    return _RenderContext(
        styles=EMAIL_STYLES if styles is None else styles,
        escape_quotes=True,
        plain_headings=False,
        wrapper_keys=("container", "prose"),
    )


# Single-block rendering ---------------------------------------------------


def _inline(block: Block, ctx: _RenderContext) -> str:
    return render_runs(block.runs, ctx.styles, escape_quotes=ctx.escape_quotes)


def _heading(block: Block, ctx: _RenderContext) -> str:
    level = block.level if block.level in (1, 2, 3) else 3
    tag = f"h{level}"
    if ctx.plain_headings:
        text = escape_text(plain_text(block.runs), quote=ctx.escape_quotes)
    else:
        text = _inline(block, ctx)
    return f"{open_tag(tag, ctx.styles, tag)}{text}</{tag}>"


def _image_tag(block: Block, ctx: _RenderContext) -> str:
    return open_tag("img", ctx.styles, "img", {"src": block.image_url or "", "alt": ""}, self_closing=True)


def _paragraph(block: Block, ctx: _RenderContext) -> str:
    text = _inline(block, ctx)
    if not text:
        return ""
    return f"{open_tag('p', ctx.styles, 'p')}{text}</p>"


def _render_block(block: Block, ctx: _RenderContext) -> str:
    """Render a non-list block; unknown kinds yield an empty string."""
    styles = ctx.styles
    kind = block.kind

    if kind == PARAGRAPH:
        return _paragraph(block, ctx)
    if kind == HEADING:
        return _heading(block, ctx)
    if kind == IMAGE:
        return f"{open_tag('figure', styles, 'figure')}{_image_tag(block, ctx)}</figure>"
    if kind == DIVIDER:
        return open_tag("hr", styles, "hr", self_closing=True)
    if kind == QUOTE:
        return f"{open_tag('blockquote', styles, 'blockquote')}{_inline(block, ctx)}</blockquote>"
    if kind == CODE:
        code = escape_text(plain_text(block.runs), quote=ctx.escape_quotes)
        return (
            f"{open_tag('pre', styles, 'pre')}{open_tag('code', styles, 'code_block')}"
            f"{code}</code></pre>"
        )
    if kind == CALLOUT:
        icon = escape_text(block.icon or DEFAULT_CALLOUT_ICON, quote=ctx.escape_quotes)
        return (
            f"{open_tag('div', styles, 'callout')}"
            f"{open_tag('span', styles, 'callout_icon')}{icon}</span>"
            f"{open_tag('div', styles, 'callout_body')}{_inline(block, ctx)}</div>"
            "</div>"
        )
    return ""


def _render_flow(blocks: Iterable[Block], ctx: _RenderContext) -> str:
    """Render blocks in order, grouping runs of same-kind list items."""
    parts: List[str] = []
    open_list: Optional[str] = None

    for block in blocks:
        if block.is_list_item:
            list_tag = "ul" if block.kind == BULLETED_LIST_ITEM else "ol"
            if open_list != list_tag:
                if open_list:
                    parts.append(f"</{open_list}>")
                parts.append(open_tag(list_tag, ctx.styles, list_tag))
                open_list = list_tag
            parts.append(f"{open_tag('li', ctx.styles, 'li')}{_inline(block, ctx)}</li>")
            continue

        if open_list:
            parts.append(f"</{open_list}>")
            open_list = None
        parts.append(_render_block(block, ctx))

    if open_list:
        parts.append(f"</{open_list}>")
    return "".join(parts)


# Print grouping -----------------------------------------------------------


def _span_end(blocks: Sequence[Block], start: int, stop_kinds: Tuple[str, ...]) -> int:
    end = start
    while end < len(blocks) and blocks[end].kind not in stop_kinds:
        end += 1
    return end


def _section(inner: str, ctx: _RenderContext, key: str = "section") -> str:
    if not inner:
        return ""
    return f"{open_tag('div', ctx.styles, key)}{inner}</div>"


def _image_section(block: Block, ctx: _RenderContext) -> str:
    return _section(_image_tag(block, ctx), ctx, "image_section")


def _scan_side_by_side(blocks: Sequence[Block], start: int, ctx: _RenderContext) -> Tuple[int, str]:
    """Heading at ``start`` paired with the image right after it.

    The text column takes the heading plus whatever follows the image up to
    the next heading or image.
    """
    heading, image = blocks[start], blocks[start + 1]
    end = _span_end(blocks, start + 2, (HEADING, IMAGE))
    text_column = _heading(heading, ctx) + _render_flow(blocks[start + 2:end], ctx)
    fragment = (
        f"{open_tag('div', ctx.styles, 'section_with_image')}"
        f"{open_tag('div', ctx.styles, 'text_column')}{text_column}</div>"
        f"{open_tag('div', ctx.styles, 'image_column')}{_image_tag(image, ctx)}</div>"
        "</div>"
    )
    return end, fragment


def _scan_stacked(blocks: Sequence[Block], start: int, ctx: _RenderContext) -> Tuple[int, str]:
    """Heading at ``start`` absorbing everything up to the next heading.

    Images inside the span split the section and are emitted as standalone
    image sections between the halves.
    """
    end = _span_end(blocks, start + 1, (HEADING,))
    parts: List[str] = []
    lead = _heading(blocks[start], ctx)
    pending: List[Block] = []

    for block in blocks[start + 1:end]:
        if block.kind == IMAGE:
            parts.append(_section(lead + _render_flow(pending, ctx), ctx))
            parts.append(_image_section(block, ctx))
            lead, pending = "", []
            continue
        pending.append(block)

    parts.append(_section(lead + _render_flow(pending, ctx), ctx))
    return end, "".join(parts)


def _scan_loose(blocks: Sequence[Block], start: int, ctx: _RenderContext) -> Tuple[int, str]:
    """Content that sits outside any heading section."""
    block = blocks[start]
    if block.kind == PARAGRAPH:
        return start + 1, _section(_paragraph(block, ctx), ctx)
    if block.kind == IMAGE:
        return start + 1, _image_section(block, ctx)
    end = _span_end(blocks, start, (HEADING, PARAGRAPH, IMAGE))
    return end, _render_flow(blocks[start:end], ctx)


def _assemble_print(blocks: Sequence[Block], ctx: _RenderContext) -> str:
    parts: List[str] = []
    index = 0
    while index < len(blocks):
        block = blocks[index]
        if block.kind == HEADING:
            followed_by_image = index + 1 < len(blocks) and blocks[index + 1].kind == IMAGE
            scanner = _scan_side_by_side if followed_by_image else _scan_stacked
            index, fragment = scanner(blocks, index, ctx)
        else:
            index, fragment = _scan_loose(blocks, index, ctx)
        parts.append(fragment)
    return "".join(parts)


# Public API ---------------------------------------------------------------


def assemble_markup(
    blocks: Iterable[Block],
    mode: LayoutMode = LayoutMode.FLAT,
    styles: Optional[StyleSheet] = None,
) -> str:
    """Render ``blocks`` into one markup document wrapped in its outer container."""
    ctx = _context_for(mode, styles)
    ordered = list(blocks or ())
    if mode is LayoutMode.PRINT_GROUPED:
        body = _assemble_print(ordered, ctx)
    else:
        body = _render_flow(ordered, ctx)

    opening = "".join(open_tag("div", ctx.styles, key) for key in ctx.wrapper_keys)
    closing = "</div>" * len(ctx.wrapper_keys)
    return f"{opening}{body}{closing}"


def assemble_email_html(blocks: Iterable[Block], styles: Optional[StyleSheet] = None) -> str:
    return assemble_markup(blocks, LayoutMode.FLAT, styles)


def assemble_print_markup(blocks: Iterable[Block], styles: Optional[StyleSheet] = None) -> str:
    return assemble_markup(blocks, LayoutMode.PRINT_GROUPED, styles)


__all__ = [
    "LayoutMode",
    "DEFAULT_CALLOUT_ICON",
    "assemble_markup",
    "assemble_email_html",
    "assemble_print_markup",
]
