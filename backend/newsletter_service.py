"""Orchestrates Notion URL -> blocks -> email HTML or paginated PDF."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from blocks import Block, parse_blocks
from content_source import NotionBlockSource
from errors import InputResolutionError
from markup_assembler import assemble_email_html, assemble_print_markup
from markup_styles import resolve_email_theme
from page_id import extract_page_id, format_page_id
from pagination_search import PaginationResult, PaginationSearchController
from pdf_settings import resolve_pdf_layout_settings
from playwright_renderer import PlaywrightRenderer
from settings import resolve_notion_token


@dataclass
class PrintArtifact:
    pdf_bytes: bytes
    pagination: PaginationResult
    page_id: str


class NewsletterService:
    """Encapsulates both conversion paths behind injected I/O collaborators."""

    def __init__(
        self,
        logger,
        source_factory: Optional[Callable[..., Any]] = None,
        renderer_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.logger = logger
        self.source_factory = source_factory or NotionBlockSource
        self.renderer_factory = renderer_factory or PlaywrightRenderer

    # Public API -----------------------------------------------------
    def resolve_page_id(self, url: Optional[str] = None, page_id: Optional[str] = None) -> str:
        """Return the hyphenated page id for ``url`` (or a bare ``page_id``)."""
        if page_id:
            bare = page_id.replace("-", "").strip().lower()
            if len(bare) == 32 and all(c in "0123456789abcdef" for c in bare):
                return format_page_id(bare)
            raise InputResolutionError("Invalid Notion page ID")

        url = (url or "").strip()
        if not url:
            raise InputResolutionError("Missing url")
        resolved = extract_page_id(url, hyphenated=True)
        if not resolved:
            raise InputResolutionError("Could not parse Notion page ID from URL")
        return resolved

    def fetch_blocks(self, page_id: str, token: Optional[str] = None) -> List[Block]:
        source = self.source_factory(resolve_notion_token(token), self.logger)
        raw_blocks = source.fetch_all_blocks(page_id)
        blocks = parse_blocks(raw_blocks)
        skipped = len(raw_blocks) - len(blocks)
        if skipped:
            self.logger.info("Skipped %s unsupported or malformed block(s)", skipped)
        return blocks

    def render_email(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        theme: Optional[str] = None,
        page_id: Optional[str] = None,
    ) -> Dict[str, str]:
        resolved = self.resolve_page_id(url, page_id)
        self.logger.info("Rendering email HTML for page %s", resolved)
        blocks = self.fetch_blocks(resolved, token)
        return {"html": assemble_email_html(blocks, resolve_email_theme(theme))}

    def render_print(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        page_id: Optional[str] = None,
    ) -> PrintArtifact:
        resolved = self.resolve_page_id(url, page_id)
        self.logger.info("Rendering print newsletter for page %s", resolved)
        blocks = self.fetch_blocks(resolved, token)
        markup = assemble_print_markup(blocks)

        page_format, margins = resolve_pdf_layout_settings()
        with self.renderer_factory(self.logger) as renderer:
            controller = PaginationSearchController(
                renderer,
                self.logger,
                page_format=page_format,
                margins=margins,
            )
            pdf_bytes, result = controller.render_pdf(markup)
        return PrintArtifact(pdf_bytes=pdf_bytes, pagination=result, page_id=resolved)


def pagination_headers(result: PaginationResult) -> Dict[str, str]:
    """Response headers describing which scale candidate was used."""
    candidate = result.candidate
    return {
        "X-Newsletter-Font-Size": f"{candidate.font_size:g}pt",
        "X-Newsletter-Spacing-Scale": f"{candidate.spacing_scale:g}",
        "X-Newsletter-Page-Count": "" if result.page_count is None else str(result.page_count),
        "X-Newsletter-Fallback": "true" if result.used_fallback else "false",
    }


__all__ = ["NewsletterService", "PrintArtifact", "pagination_headers"]
