"""Paged.js shell used to paginate newsletter markup in the headless browser."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Dict, Optional

import settings


@dataclass(frozen=True)
class PrintTheme:
    heading_font: str = "Arial, sans-serif"
    body_font: str = "Calibri, sans-serif"
    primary_color: str = "#333333"
    accent_color: str = "#0066cc"


DEFAULT_PRINT_THEME = PrintTheme()

# Placeholders are substituted with str.replace; __CONTENT__ goes last so
# nothing inside the newsletter body is ever treated as a placeholder.
PRINT_SHELL_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <script src="__PAGEDJS_URL__"></script>
    <style>
        @page {
            size: __PAGE_SIZE__;
            margin: __PAGE_MARGIN__;

            @bottom-center {
                content: counter(page) " of __PAGE_CEILING__";
                font-family: __BODY_FONT__;
                font-size: 9pt;
                color: #666;
            }
        }

        body {
            font-family: __BODY_FONT__;
            font-size: var(--base-font-size, 11pt);
            line-height: var(--line-height, 1.4);
            color: __PRIMARY_COLOR__;
            margin: 0;
            padding: 0;
            transform: scale(var(--content-scale, 1));
            transform-origin: top left;
        }

        h1, h2, h3 {
            font-family: __HEADING_FONT__;
            color: __ACCENT_COLOR__;
            margin-top: calc(0.8em * var(--spacing-scale, 1));
            margin-bottom: calc(0.4em * var(--spacing-scale, 1));
            break-after: avoid;
        }

        h1 {
            font-size: calc(var(--base-font-size, 11pt) * 2.2);
            margin-bottom: calc(0.5em * var(--spacing-scale, 1));
        }

        h2 { font-size: calc(var(--base-font-size, 11pt) * 1.6); }
        h3 { font-size: calc(var(--base-font-size, 11pt) * 1.3); }

        p { margin: calc(0.6em * var(--spacing-scale, 1)) 0; }

        .content-section {
            margin-bottom: calc(1em * var(--spacing-scale, 1));
            break-inside: avoid;
        }

        .content-section.with-image {
            display: flex;
            gap: calc(15px * var(--spacing-scale, 1));
            align-items: flex-start;
        }

        .content-section.with-image .text-content { flex: 1.2; }

        .content-section.with-image .image-container {
            flex: 0.8;
            max-width: 40%;
        }

        .content-section.with-image img {
            width: 100%;
            height: auto;
            max-height: calc(200px * var(--image-scale, 1));
            object-fit: contain;
        }

        .content-section.image-only {
            text-align: center;
            margin: calc(1em * var(--spacing-scale, 1)) 0;
        }

        .content-section.image-only img {
            max-width: calc(70% * var(--image-scale, 1));
            max-height: calc(250px * var(--image-scale, 1));
            height: auto;
        }

        ul, ol {
            margin: calc(0.5em * var(--spacing-scale, 1)) 0;
            padding-left: 1.5em;
        }

        li { margin: calc(0.3em * var(--spacing-scale, 1)) 0; }

        a {
            color: __ACCENT_COLOR__;
            text-decoration: none;
        }

        hr {
            margin: calc(1.5em * var(--spacing-scale, 1)) 0;
            border: none;
            border-top: 1px solid #e0e0e0;
        }

        blockquote {
            margin: calc(0.8em * var(--spacing-scale, 1)) 0;
            padding: 0 1em;
            border-left: 3px solid #cbd5e1;
            font-style: italic;
        }

        pre {
            background: #f8fafc;
            padding: calc(8px * var(--spacing-scale, 1));
            font-size: 0.9em;
            white-space: pre-wrap;
            break-inside: avoid;
        }

        .callout {
            display: flex;
            gap: 8px;
            background: #f8fafc;
            border: 1px solid #e5e7eb;
            padding: calc(8px * var(--spacing-scale, 1));
            margin: calc(0.8em * var(--spacing-scale, 1)) 0;
            break-inside: avoid;
        }
    </style>
</head>
<body style="__BODY_STYLE__">
    <div class="content-wrapper">
        __CONTENT__
    </div>

    <script>
        // No top-level class binding: this script may run twice in one window.
        Paged.registerHandlers(class extends Paged.Handler {
            constructor(chunker, polisher, caller) {
                super(chunker, polisher, caller);
            }

            afterRendered(pages) {
                console.log(`Rendered ${pages.length} pages with current scaling`);
                window.renderedPageCount = pages.length;
            }
        });
    </script>
</body>
</html>
"""


def _format_number(value: float) -> str:
    return f"{float(value):g}"


def body_style(candidate) -> str:
    """CSS custom properties for one scale candidate."""
    declarations = [
        f"--base-font-size: {_format_number(candidate.font_size)}pt;",
        f"--line-height: {_format_number(candidate.line_height)};",
        f"--spacing-scale: {_format_number(candidate.spacing_scale)};",
        f"--image-scale: {_format_number(candidate.image_scale)};",
    ]
    if candidate.content_scale != 1:
        declarations.append(f"--content-scale: {_format_number(candidate.content_scale)};")
    return " ".join(declarations)


def _page_margin(margins: Dict[str, str]) -> str:
    return " ".join(margins.get(side, "0") for side in ("top", "right", "bottom", "left"))


def build_print_document(
    markup: str,
    candidate,
    page_format: str = "A4",
    margins: Optional[Dict[str, str]] = None,
    page_ceiling: int = settings.DEFAULT_PAGE_CEILING,
    theme: PrintTheme = DEFAULT_PRINT_THEME,
    script_url: Optional[str] = None,
) -> str:
    """Wrap assembled print markup in the Paged.js shell for ``candidate``."""
    margins = margins or {"top": "15mm", "right": "20mm", "bottom": "15mm", "left": "20mm"}
    replacements = (
        ("__PAGEDJS_URL__", html.escape(script_url or settings.pagedjs_script_url(), quote=True)),
        ("__PAGE_SIZE__", page_format),
        ("__PAGE_MARGIN__", _page_margin(margins)),
        ("__PAGE_CEILING__", str(page_ceiling)),
        ("__HEADING_FONT__", theme.heading_font),
        ("__BODY_FONT__", theme.body_font),
        ("__PRIMARY_COLOR__", theme.primary_color),
        ("__ACCENT_COLOR__", theme.accent_color),
        ("__BODY_STYLE__", body_style(candidate)),
    )
    document = PRINT_SHELL_TEMPLATE
    for placeholder, value in replacements:
        document = document.replace(placeholder, value)
    return document.replace("__CONTENT__", markup)


__all__ = [
    "PrintTheme",
    "DEFAULT_PRINT_THEME",
    "PRINT_SHELL_TEMPLATE",
    "body_style",
    "build_print_document",
]
