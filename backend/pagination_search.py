"""Fit print markup under a page ceiling by trying progressively smaller scales.

The controller owns one renderer for its whole run and drives it strictly
sequentially: each candidate is loaded, paginated and measured before the
next one starts. The first candidate that fits wins; when none does, a fixed
aggressive fallback is rendered and accepted as-is.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from pypdf import PdfReader

from errors import RenderTimeoutError
from print_template import DEFAULT_PRINT_THEME, PrintTheme, build_print_document
import settings


@dataclass(frozen=True)
class ScaleCandidate:
    font_size: float
    line_height: float
    spacing_scale: float
    image_scale: float
    content_scale: float = 1.0


DEFAULT_SCALE_CANDIDATES: Tuple[ScaleCandidate, ...] = (
    ScaleCandidate(11, 1.5, 1.0, 1.0),
    ScaleCandidate(10.5, 1.45, 0.95, 0.95),
    ScaleCandidate(10, 1.4, 0.9, 0.9),
    ScaleCandidate(9.5, 1.35, 0.85, 0.85),
    ScaleCandidate(9, 1.3, 0.8, 0.8),
    ScaleCandidate(8.5, 1.25, 0.75, 0.75),
    ScaleCandidate(8, 1.2, 0.7, 0.7),
    ScaleCandidate(7.5, 1.15, 0.65, 0.65),
    ScaleCandidate(7, 1.1, 0.6, 0.6),
)

FALLBACK_SCALE_CANDIDATE = ScaleCandidate(7, 1.1, 0.5, 0.5, content_scale=0.8)

DEFAULT_PAGINATION_TIMEOUT_MS = 10000


class PageRenderer(Protocol):
    def set_content(self, document: str) -> None: ...
    def wait_for_pagination(self, timeout_ms: int) -> None: ...
    def measure_page_count(self) -> int: ...
    def export_pdf(self, page_format: str, margins: Dict[str, str]) -> bytes: ...


@dataclass
class AttemptRecord:
    candidate: ScaleCandidate
    page_count: Optional[int]
    timed_out: bool = False


@dataclass
class PaginationResult:
    document: str
    candidate: ScaleCandidate
    page_count: Optional[int]
    used_fallback: bool
    attempts: List[AttemptRecord] = field(default_factory=list)


class PaginationSearchController:
    """Search scale candidates for the first rendering within ``page_ceiling`` pages."""

    def __init__(
        self,
        renderer: PageRenderer,
        logger=None,
        page_ceiling: Optional[int] = None,
        candidates: Sequence[ScaleCandidate] = DEFAULT_SCALE_CANDIDATES,
        fallback: ScaleCandidate = FALLBACK_SCALE_CANDIDATE,
        pagination_timeout_ms: int = DEFAULT_PAGINATION_TIMEOUT_MS,
        page_format: str = "A4",
        margins: Optional[Dict[str, str]] = None,
        theme: PrintTheme = DEFAULT_PRINT_THEME,
    ) -> None:
        self.renderer = renderer
        self.logger = logger or logging.getLogger(__name__)
        self.page_ceiling = page_ceiling if page_ceiling is not None else settings.page_ceiling()
        self.candidates = tuple(candidates)
        self.fallback = fallback
        self.pagination_timeout_ms = pagination_timeout_ms
        self.page_format = page_format
        self.margins = dict(margins or {})
        self.theme = theme

    def build_document(self, markup: str, candidate: ScaleCandidate) -> str:
        return build_print_document(
            markup,
            candidate,
            page_format=self.page_format,
            margins=self.margins or None,
            page_ceiling=self.page_ceiling,
            theme=self.theme,
        )

    def _render(self, document: str) -> int:
        self.renderer.set_content(document)
        self.renderer.wait_for_pagination(self.pagination_timeout_ms)
        return self.renderer.measure_page_count()

    def search(self, markup: str) -> PaginationResult:
        """Leave the winning rendering loaded in the renderer and describe it."""
        logger = self.logger
        attempts: List[AttemptRecord] = []
        logger.info("Auto-scaling content to fit %s pages...", self.page_ceiling)

        for candidate in self.candidates:
            document = self.build_document(markup, candidate)
            try:
                page_count = self._render(document)
            except RenderTimeoutError as exc:
                logger.warning(
                    "Font: %spt, Spacing: %sx timed out (%s); trying next candidate",
                    candidate.font_size,
                    candidate.spacing_scale,
                    exc,
                )
                attempts.append(AttemptRecord(candidate, None, timed_out=True))
                continue

            attempts.append(AttemptRecord(candidate, page_count))
            logger.info(
                "Font: %spt, Spacing: %sx -> %s pages",
                candidate.font_size,
                candidate.spacing_scale,
                page_count,
            )
            if page_count <= self.page_ceiling:
                logger.info(
                    "Found scaling that fits: %spt font, %sx spacing",
                    candidate.font_size,
                    candidate.spacing_scale,
                )
                return PaginationResult(document, candidate, page_count, False, attempts)

        logger.warning("Content too long, applying aggressive scaling...")
        document = self.build_document(markup, self.fallback)
        # A timeout here has nowhere left to fall back to.
        page_count = self._render(document)
        attempts.append(AttemptRecord(self.fallback, page_count))
        if page_count > self.page_ceiling:
            logger.warning(
                "Fallback scaling still renders %s pages (ceiling %s); accepting it",
                page_count,
                self.page_ceiling,
            )
        return PaginationResult(document, self.fallback, page_count, True, attempts)

    def render_pdf(self, markup: str) -> Tuple[bytes, PaginationResult]:
        """Search, then export the loaded rendering to PDF bytes."""
        result = self.search(markup)
        pdf_bytes = self.renderer.export_pdf(self.page_format, self.margins)
        exported_pages = count_pdf_pages(pdf_bytes)
        self.logger.info(
            "Newsletter PDF exported: %s bytes, %s page(s), %spt font, %sx spacing",
            len(pdf_bytes),
            exported_pages,
            result.candidate.font_size,
            result.candidate.spacing_scale,
        )
        return pdf_bytes, result


def count_pdf_pages(pdf_bytes: bytes) -> Optional[int]:
    if not pdf_bytes:
        return 0
    try:
        return len(PdfReader(io.BytesIO(pdf_bytes)).pages)
    except Exception as exc:
        logging.getLogger(__name__).warning("Could not count pages in exported PDF: %s", exc)
        return None


__all__ = [
    "ScaleCandidate",
    "DEFAULT_SCALE_CANDIDATES",
    "FALLBACK_SCALE_CANDIDATE",
    "PageRenderer",
    "AttemptRecord",
    "PaginationResult",
    "PaginationSearchController",
    "count_pdf_pages",
]
