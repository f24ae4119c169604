"""Page size and margins for the print shell's ``@page`` rule and the PDF export.

The same format string feeds both CSS ``@page { size: ... }`` (what Paged.js
paginates against) and Playwright's ``page.pdf(format=...)``. Only keywords
both of them understand are accepted; anything else falls back to A4.
"""

import logging
import os
import re
from typing import Dict, Optional, Tuple


logger = logging.getLogger(__name__)

DEFAULT_PDF_PAGE_FORMAT = "A4"
PDF_PAGE_FORMAT_ENV_KEYS = (
    "PDF_PAGE_FORMAT",
    "PDF_PAGE_SIZE",
    "PAGE_FORMAT",
    "PAGE_SIZE",
)
# Sizes that are both CSS page-size keywords and Playwright paper formats.
SUPPORTED_PAGE_FORMATS = ("A3", "A4", "A5", "Letter", "Legal", "Ledger")
PDF_PAGE_FORMAT_ALIASES = {name.upper(): name for name in SUPPORTED_PAGE_FORMATS}
PDF_PAGE_FORMAT_ALIASES.update({"US-LETTER": "Letter", "US-LEGAL": "Legal"})

MARGIN_SIDES = ("top", "right", "bottom", "left")
_METRIC_MARGINS = {"top": "15mm", "right": "20mm", "bottom": "15mm", "left": "20mm"}
_IMPERIAL_MARGINS = {"top": "0.6in", "right": "0.75in", "bottom": "0.6in", "left": "0.75in"}
# Tight vertical, wider horizontal.
PDF_DEFAULT_MARGINS: Dict[str, Dict[str, str]] = {
    "A3": _METRIC_MARGINS,
    "A4": _METRIC_MARGINS,
    "A5": _METRIC_MARGINS,
    "Letter": _IMPERIAL_MARGINS,
    "Legal": _IMPERIAL_MARGINS,
    "Ledger": _IMPERIAL_MARGINS,
}
_MARGIN_PATTERN = re.compile(r"\d+(?:\.\d+)?(?:in|cm|mm|px|pt)?")


def resolve_page_format(raw_value: Optional[str], source: str = "PDF_PAGE_FORMAT") -> str:
    """Map a user-supplied size name onto a supported format, or the default."""
    if not raw_value or not raw_value.strip():
        return DEFAULT_PDF_PAGE_FORMAT
    key = re.sub(r"[^A-Z0-9]+", "-", raw_value.upper()).strip("-")
    resolved = PDF_PAGE_FORMAT_ALIASES.get(key)
    if resolved:
        return resolved
    logger.warning(
        "Unsupported page format '%s' from %s (expected one of %s); using %s.",
        raw_value,
        source,
        ", ".join(SUPPORTED_PAGE_FORMATS),
        DEFAULT_PDF_PAGE_FORMAT,
    )
    return DEFAULT_PDF_PAGE_FORMAT


def normalize_margin(value: Optional[str], fallback: str, side: str) -> str:
    """Return a CSS length for ``value``; bare numbers are millimetres."""
    candidate = (value or "").strip().lower()
    if not candidate:
        return fallback
    if not _MARGIN_PATTERN.fullmatch(candidate):
        logger.warning("Invalid margin value '%s' for %s side. Falling back to %s.", value, side, fallback)
        return fallback
    if candidate[-1].isdigit():
        logger.debug("Normalized numeric margin for %s side: %s -> %smm", side, candidate, candidate)
        return f"{candidate}mm"
    return candidate


def resolve_pdf_layout_settings() -> Tuple[str, Dict[str, str]]:
    """Return ``(page_format, margins)`` for the print shell's ``@page`` rule."""
    page_format = DEFAULT_PDF_PAGE_FORMAT
    for key in PDF_PAGE_FORMAT_ENV_KEYS:
        value = os.environ.get(key)
        if value:
            page_format = resolve_page_format(value, key)
            break

    margins = dict(PDF_DEFAULT_MARGINS[page_format])

    general_margin = os.environ.get("PDF_MARGIN")
    if general_margin:
        shared = normalize_margin(general_margin, margins["top"], "all")
        margins = {side: shared for side in MARGIN_SIDES}

    for side in MARGIN_SIDES:
        override = os.environ.get(f"PDF_MARGIN_{side.upper()}")
        if override:
            margins[side] = normalize_margin(override, margins[side], side)

    logger.info("Using PDF page format '%s' with margins %s", page_format, margins)
    return page_format, margins


__all__ = [
    "DEFAULT_PDF_PAGE_FORMAT",
    "SUPPORTED_PAGE_FORMATS",
    "resolve_page_format",
    "normalize_margin",
    "resolve_pdf_layout_settings",
]
