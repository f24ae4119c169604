"""Tests for the scale-candidate search that keeps print output under the page ceiling."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_PATH = PROJECT_ROOT / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from pypdf import PdfWriter  # noqa: E402

from errors import RenderTimeoutError  # noqa: E402
from pagination_search import (  # noqa: E402
    DEFAULT_SCALE_CANDIDATES,
    FALLBACK_SCALE_CANDIDATE,
    PaginationSearchController,
    ScaleCandidate,
    count_pdf_pages,
)
from print_template import body_style, build_print_document  # noqa: E402


LOGGER = logging.getLogger("test_pagination_search")
MARKUP = '<div class="newsletter-content"><p>Hello</p></div>'


def _blank_pdf(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=595, height=842)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class FakeRenderer:
    """Records every document it is given and reports scripted page counts.

    ``outcomes`` holds one entry per render: an ``int`` page count or the
    string ``"timeout"``. The last entry repeats once the list runs out.
    """

    def __init__(self, outcomes, pdf_bytes=b""):
        self.outcomes = list(outcomes)
        self.documents = []
        self.pdf_bytes = pdf_bytes
        self.exported = []
        self._current = None

    def set_content(self, document):
        self.documents.append(document)
        index = min(len(self.documents), len(self.outcomes)) - 1
        self._current = self.outcomes[index]

    def wait_for_pagination(self, timeout_ms):
        if self._current == "timeout":
            raise RenderTimeoutError(f"Pagination did not finish within {timeout_ms}ms")

    def measure_page_count(self):
        return self._current

    def export_pdf(self, page_format, margins):
        self.exported.append((page_format, dict(margins), self.documents[-1]))
        return self.pdf_bytes


def _controller(renderer, **kwargs):
    kwargs.setdefault("page_ceiling", 3)
    return PaginationSearchController(renderer, LOGGER, **kwargs)


def test_first_candidate_that_fits_is_used_without_further_renders() -> None:
    renderer = FakeRenderer([2])

    result = _controller(renderer).search(MARKUP)

    assert len(renderer.documents) == 1
    assert result.candidate == DEFAULT_SCALE_CANDIDATES[0]
    assert result.page_count == 2
    assert result.used_fallback is False
    assert "--base-font-size: 11pt;" in result.document
    assert MARKUP in result.document


def test_search_stops_at_first_fitting_candidate() -> None:
    renderer = FakeRenderer([5, 4, 3, 1])

    result = _controller(renderer).search(MARKUP)

    assert len(renderer.documents) == 3
    assert result.candidate == DEFAULT_SCALE_CANDIDATES[2]
    assert [attempt.page_count for attempt in result.attempts] == [5, 4, 3]


def test_page_count_equal_to_ceiling_fits() -> None:
    renderer = FakeRenderer([3])

    result = _controller(renderer).search(MARKUP)

    assert result.candidate == DEFAULT_SCALE_CANDIDATES[0]
    assert result.used_fallback is False


def test_fallback_is_rendered_when_nothing_fits() -> None:
    renderer = FakeRenderer([99])

    result = _controller(renderer).search(MARKUP)

    assert len(renderer.documents) == len(DEFAULT_SCALE_CANDIDATES) + 1
    assert result.used_fallback is True
    assert result.candidate == FALLBACK_SCALE_CANDIDATE
    assert result.page_count == 99
    assert "--content-scale: 0.8;" in renderer.documents[-1]
    assert all("--content-scale: 0.8;" not in doc for doc in renderer.documents[:-1])


def test_candidates_are_tried_in_order() -> None:
    renderer = FakeRenderer([99])

    _controller(renderer).search(MARKUP)

    for document, candidate in zip(renderer.documents, DEFAULT_SCALE_CANDIDATES):
        assert body_style(candidate) in document


def test_timed_out_candidate_is_skipped() -> None:
    renderer = FakeRenderer(["timeout", 2])

    result = _controller(renderer).search(MARKUP)

    assert result.candidate == DEFAULT_SCALE_CANDIDATES[1]
    assert result.attempts[0].timed_out is True
    assert result.attempts[0].page_count is None
    assert result.attempts[1].page_count == 2


def test_timeout_on_fallback_propagates() -> None:
    candidates = (ScaleCandidate(11, 1.5, 1.0, 1.0),)
    renderer = FakeRenderer([10, "timeout"])

    with pytest.raises(RenderTimeoutError):
        _controller(renderer, candidates=candidates).search(MARKUP)


def test_custom_ceiling_is_honoured() -> None:
    renderer = FakeRenderer([2, 1])

    result = _controller(renderer, page_ceiling=1).search(MARKUP)

    assert result.candidate == DEFAULT_SCALE_CANDIDATES[1]


def test_ceiling_defaults_to_environment(monkeypatch) -> None:
    monkeypatch.setenv("PRINT_PAGE_CEILING", "2")

    controller = PaginationSearchController(FakeRenderer([1]), LOGGER)

    assert controller.page_ceiling == 2


def test_render_pdf_exports_winning_document() -> None:
    pdf = _blank_pdf(2)
    renderer = FakeRenderer([4, 2], pdf_bytes=pdf)
    margins = {"top": "0.6in", "right": "0.75in", "bottom": "0.6in", "left": "0.75in"}

    pdf_bytes, result = _controller(renderer, page_format="Letter", margins=margins).render_pdf(MARKUP)

    assert pdf_bytes == pdf
    assert count_pdf_pages(pdf_bytes) == 2
    assert renderer.exported == [("Letter", margins, result.document)]
    assert "size: Letter;" in result.document
    assert "margin: 0.6in 0.75in 0.6in 0.75in;" in result.document


def test_count_pdf_pages_handles_empty_and_garbage() -> None:
    assert count_pdf_pages(b"") == 0
    assert count_pdf_pages(b"not a pdf") is None


def test_print_document_substitutes_every_placeholder() -> None:
    document = build_print_document(MARKUP, FALLBACK_SCALE_CANDIDATE, script_url="https://cdn/paged.js")

    assert '<script src="https://cdn/paged.js"></script>' in document
    assert "size: A4;" in document
    assert 'counter(page) " of 3"' in document
    assert "__" not in document.replace(MARKUP, "")


def test_markup_containing_placeholder_text_is_left_alone() -> None:
    markup = "<p>__PAGE_SIZE__</p>"

    document = build_print_document(markup, DEFAULT_SCALE_CANDIDATES[0])

    assert markup in document


def test_page_count_handler_is_registered_without_global_binding() -> None:
    document = build_print_document(MARKUP, DEFAULT_SCALE_CANDIDATES[0])

    assert "Paged.registerHandlers(class extends Paged.Handler {" in document
    assert "class PageCountHandler" not in document
    assert "window.renderedPageCount = pages.length;" in document
