"""Style sheets injected into the markup assembler.

A style sheet maps a semantic key (``"p"``, ``"callout_icon"``,
``"section_with_image"`` ...) to the attributes the element should carry.
Email sheets use inline ``style`` attributes because mail clients drop
``<style>`` blocks; the print sheet uses class names that the Paged.js shell
styles from its own stylesheet.
"""

from __future__ import annotations

import html
from typing import Dict, Mapping, Optional


StyleSheet = Mapping[str, Mapping[str, str]]

_MONOSPACE = (
    'ui-monospace,SFMono-Regular,Menlo,Monaco,Consolas,"Liberation Mono",'
    '"Courier New",monospace'
)

# Default email theme used by the web preview.
EMAIL_STYLES: Dict[str, Dict[str, str]] = {
    "container": {"style": "margin:0 auto;max-width:720px;padding:0;"},
    "prose": {"class": "email-prose", "style": "line-height:1.65;font-size:16px;color:inherit;"},
    "p": {"style": "margin:.9em 0;"},
    "h1": {"style": "font-size:28px;line-height:1.25;margin:1.6em 0 .6em;color:inherit;"},
    "h2": {"style": "font-size:22px;line-height:1.3;margin:1.4em 0 .5em;color:inherit;"},
    "h3": {"style": "font-size:18px;line-height:1.3;margin:1.2em 0 .4em;color:inherit;"},
    "ul": {"style": "margin:.8em 0;padding-left:1.4em;"},
    "ol": {"style": "margin:.8em 0;padding-left:1.4em;"},
    "li": {"style": "margin:.3em 0;"},
    "hr": {"style": "border:none;border-top:1px solid #e5e7eb;margin:1.6em 0;"},
    "figure": {"style": "margin:1.2em 0;"},
    "img": {"style": "width:100%;height:auto;border-radius:10px;"},
    "blockquote": {
        "style": "margin:1em 0;padding:.6em .9em;border-left:4px solid #94a3b8;color:#0f172a;font-style:italic;"
    },
    "pre": {
        "style": "background:#f8fafc;border:1px solid #e2e8f0;padding:12px;border-radius:8px;overflow:auto;"
    },
    "code_block": {"style": f"font-family:{_MONOSPACE};font-size:.95em;color:#0f172a;"},
    "callout": {
        "style": (
            "display:flex;gap:10px;align-items:flex-start;background:#f8fafc;border:1px solid #e5e7eb;"
            "border-radius:10px;padding:12px;margin:1em 0;color:#0f172a;"
        )
    },
    "callout_icon": {"style": "flex:0 0 auto;"},
    "code_inline": {
        "style": (
            "background:#f1f5f9;border:1px solid #e2e8f0;padding:.15em .35em;border-radius:6px;"
            f"font-family:{_MONOSPACE};font-size:.95em;color:#0f172a;"
        )
    },
    "a": {"target": "_blank", "style": "color:#2563eb;text-decoration:none;"},
}

# Card theme used by the desktop client: white card, darker headings.
EMAIL_STYLES_CARD: Dict[str, Dict[str, str]] = {
    "container": {"style": "padding:4px;"},
    "prose": {"class": "email-prose", "style": "max-width:700px; margin:0 auto; background:#ffffff;"},
    "h1": {"style": "font-size:28px; line-height:1.2; margin:0 0 16px; font-weight:700; color:#111827;"},
    "h2": {
        "style": (
            "font-size:22px; line-height:1.3; margin:24px 0 12px; font-weight:700; color:#111827; "
            "border-top:1px solid #f1f5f9; padding-top:16px;"
        )
    },
    "h3": {"style": "font-size:18px; line-height:1.4; margin:20px 0 8px; font-weight:700; color:#111827;"},
    "p": {"style": "margin:0 0 14px; color:#374151; line-height:1.7; font-size:16px;"},
    "ul": {"style": "margin:0 0 16px 1.25rem; padding:0; color:#374151; line-height:1.7; font-size:16px;"},
    "ol": {"style": "margin:0 0 16px 1.25rem; padding:0; color:#374151; line-height:1.7; font-size:16px;"},
    "li": {"style": "margin:0 0 8px;"},
    "figure": {"style": "margin:16px 0; text-align:center;"},
    "img": {"style": "max-width:100%; height:auto; border-radius:8px; border:1px solid #e5e7eb;"},
    "hr": {"style": "border:none; border-top:1px solid #e5e7eb; margin:24px 0;"},
    "blockquote": {
        "style": "border-left:4px solid #e5e7eb; margin:16px 0; padding:8px 16px; color:#6b7280; font-style:italic;"
    },
    "pre": {
        "style": (
            "background:#0b1021; color:#e5e7eb; padding:12px 14px; border-radius:8px; font-size:14px; "
            "overflow:auto; border:1px solid #1f2937;"
        )
    },
    "code_block": {"style": f"font-family:{_MONOSPACE};"},
    "callout": {
        "style": (
            "display:flex; gap:12px; background:#f0f9ff; border:1px solid #e0f2fe; padding:12px; "
            "border-radius:8px; color:#0c4a6e; margin:14px 0;"
        )
    },
    "callout_icon": {"style": "font-size:18px; line-height:1;"},
    "strong": {"style": "font-weight:600;"},
    "em": {"style": "font-style:italic;"},
    "u": {"style": "text-decoration:underline;"},
    "s": {"style": "text-decoration:line-through;"},
    "code_inline": {
        "style": (
            f"font-family:{_MONOSPACE}; padding:1px 4px; border-radius:4px; background:#f1f1f1; "
            "border:1px solid #e3e3e3; font-size:0.9em;"
        )
    },
    "a": {"target": "_blank", "rel": "noopener noreferrer"},
}

# Print layout: presentation lives in the Paged.js shell stylesheet.
PRINT_STYLES: Dict[str, Dict[str, str]] = {
    "container": {"class": "newsletter-content"},
    "section": {"class": "content-section"},
    "section_with_image": {"class": "content-section with-image"},
    "text_column": {"class": "text-content"},
    "image_column": {"class": "image-container"},
    "image_section": {"class": "content-section image-only"},
    "callout": {"class": "callout"},
    "callout_icon": {"class": "callout-icon"},
}

EMAIL_THEMES: Dict[str, Dict[str, Dict[str, str]]] = {
    "default": EMAIL_STYLES,
    "card": EMAIL_STYLES_CARD,
}


def render_attributes(attributes: Optional[Mapping[str, str]]) -> str:
    """Return ``' key="value"'`` pairs in mapping order, attribute-escaped."""
    if not attributes:
        return ""
    parts = []
    for name, value in attributes.items():
        if value is None:
            continue
        parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


def open_tag(
    tag: str,
    styles: StyleSheet,
    key: str,
    extra: Optional[Mapping[str, str]] = None,
    *,
    self_closing: bool = False,
) -> str:
    """Build an opening tag for ``tag`` carrying the attributes styled under ``key``.

    ``extra`` attributes (``href``, ``src`` ...) come first so the output stays
    stable regardless of which sheet is injected.
    """
    attributes: Dict[str, str] = dict(extra or {})
    for name, value in (styles.get(key) or {}).items():
        attributes.setdefault(name, value)
    closing = " />" if self_closing else ">"
    return f"<{tag}{render_attributes(attributes)}{closing}"


def resolve_email_theme(name: Optional[str]) -> Dict[str, Dict[str, str]]:
    return EMAIL_THEMES.get((name or "default").strip().lower(), EMAIL_STYLES)


__all__ = [
    "StyleSheet",
    "EMAIL_STYLES",
    "EMAIL_STYLES_CARD",
    "PRINT_STYLES",
    "EMAIL_THEMES",
    "render_attributes",
    "open_tag",
    "resolve_email_theme",
]
