"""Tests for grouping parsed blocks into email and print markup."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_PATH = PROJECT_ROOT / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from bs4 import BeautifulSoup  # noqa: E402

from blocks import parse_blocks  # noqa: E402
from markup_assembler import (  # noqa: E402
    DEFAULT_CALLOUT_ICON,
    LayoutMode,
    assemble_email_html,
    assemble_markup,
    assemble_print_markup,
)
from markup_styles import EMAIL_STYLES, EMAIL_STYLES_CARD  # noqa: E402


def _run(text, href=None, **annotations):
    return {"type": "text", "plain_text": text, "annotations": annotations, "href": href}


def _text_block(block_type, *runs, **extra):
    payload = {"rich_text": list(runs)}
    payload.update(extra)
    return {"object": "block", "type": block_type, block_type: payload}


def _image(url, source="external"):
    if source == "external":
        return {"type": "image", "image": {"type": "external", "external": {"url": url}}}
    return {"type": "image", "image": {"type": "file", "file": {"url": url}}}


def _blocks(*raw):
    return parse_blocks(raw)


def test_empty_document_is_bare_container() -> None:
    """An empty block list still yields the outer container and nothing inside it."""

    html = assemble_email_html([])
    soup = BeautifulSoup(html, "html.parser")
    outer = soup.find("div")

    assert outer is not None
    prose = outer.find("div", class_="email-prose")
    assert prose is not None
    assert list(prose.children) == []
    assert assemble_markup([], styles={}) == "<div><div></div></div>"


def test_list_wrappers_follow_same_kind_runs() -> None:
    """[bullet, bullet, number, bullet] opens three list wrappers, not one or four."""

    blocks = _blocks(
        _text_block("bulleted_list_item", _run("a")),
        _text_block("bulleted_list_item", _run("b")),
        _text_block("numbered_list_item", _run("c")),
        _text_block("bulleted_list_item", _run("d")),
    )

    html = assemble_markup(blocks, styles={})

    assert html == (
        "<div><div><ul><li>a</li><li>b</li></ul><ol><li>c</li></ol><ul><li>d</li></ul></div></div>"
    )
    soup = BeautifulSoup(html, "html.parser")
    assert len(soup.find_all(["ul", "ol"])) == 3
    assert len(soup.find_all("li")) == 4


def test_non_list_block_closes_open_list() -> None:
    blocks = _blocks(
        _text_block("numbered_list_item", _run("one")),
        _text_block("paragraph", _run("break")),
        _text_block("numbered_list_item", _run("two")),
    )

    html = assemble_markup(blocks, styles={})

    assert html == "<div><div><ol><li>one</li></ol><p>break</p><ol><li>two</li></ol></div></div>"


def test_email_block_kinds() -> None:
    blocks = _blocks(
        _text_block("heading_1", _run("Title", bold=True)),
        _text_block("heading_3", _run("Small")),
        _text_block("paragraph"),
        _text_block("quote", _run("Said")),
        _image("https://img.example/a.png"),
        _image(None, source="file"),
        {"type": "divider", "divider": {}},
        _text_block("code", _run("if a < b:", bold=True), _run(" pass"), language="python"),
        _text_block("callout", _run("Note"), icon={"type": "emoji", "emoji": "⚠️"}),
        _text_block("callout", _run("Tip")),
    )

    html = assemble_markup(blocks, styles={})

    assert html == (
        "<div><div>"
        "<h1><strong>Title</strong></h1>"
        "<h3>Small</h3>"
        "<blockquote>Said</blockquote>"
        '<figure><img src="https://img.example/a.png" alt="" /></figure>'
        '<figure><img src="" alt="" /></figure>'
        "<hr />"
        "<pre><code>if a &lt; b: pass</code></pre>"
        "<div><span>⚠️</span><div>Note</div></div>"
        f"<div><span>{DEFAULT_CALLOUT_ICON}</span><div>Tip</div></div>"
        "</div></div>"
    )


def test_unknown_and_malformed_blocks_are_skipped() -> None:
    raw = [
        {"type": "toggle", "toggle": {"rich_text": [_run("hidden")]}},
        {},
        {"type": None},
        "junk",
        {"type": "paragraph", "paragraph": "not-a-dict"},
        _text_block("paragraph", _run("kept")),
    ]

    html = assemble_markup(parse_blocks(raw), styles={})

    assert html == "<div><div><p>kept</p></div></div>"


def test_email_styles_are_inlined() -> None:
    blocks = _blocks(_text_block("paragraph", _run("Hi")))

    html = assemble_email_html(blocks)

    assert html.startswith('<div style="margin:0 auto;max-width:720px;padding:0;">')
    assert '<p style="margin:.9em 0;">Hi</p>' in html


def test_card_theme_changes_presentation_only() -> None:
    blocks = _blocks(
        _text_block("heading_2", _run("Intro")),
        _text_block("paragraph", _run("Body", italic=True)),
    )

    default_soup = BeautifulSoup(assemble_email_html(blocks, EMAIL_STYLES), "html.parser")
    card_soup = BeautifulSoup(assemble_email_html(blocks, EMAIL_STYLES_CARD), "html.parser")

    assert [tag.name for tag in default_soup.find_all(True)] == [tag.name for tag in card_soup.find_all(True)]
    assert "border-top" in card_soup.find("h2")["style"]
    assert card_soup.find("em")["style"] == "font-style:italic;"


def test_assembly_is_idempotent() -> None:
    blocks = _blocks(
        _text_block("heading_2", _run("H")),
        _image("https://img/1.png"),
        _text_block("paragraph", _run("P", href="https://x")),
        _text_block("bulleted_list_item", _run("i")),
    )

    for mode in (LayoutMode.FLAT, LayoutMode.PRINT_GROUPED):
        assert assemble_markup(blocks, mode) == assemble_markup(blocks, mode)


# Print grouping -------------------------------------------------------------


def test_heading_followed_by_image_is_side_by_side() -> None:
    blocks = _blocks(
        _text_block("heading_2", _run("Intro")),
        _image("https://img/1.png"),
        _text_block("paragraph", _run("Body")),
        _text_block("paragraph", _run("More")),
        _image("https://img/2.png"),
    )

    html = assemble_print_markup(blocks)

    assert html == (
        '<div class="newsletter-content">'
        '<div class="content-section with-image">'
        '<div class="text-content"><h2>Intro</h2><p>Body</p><p>More</p></div>'
        '<div class="image-container"><img src="https://img/1.png" alt="" /></div>'
        "</div>"
        '<div class="content-section image-only"><img src="https://img/2.png" alt="" /></div>'
        "</div>"
    )


def test_stacked_heading_absorbs_until_next_heading_and_splits_on_images() -> None:
    blocks = _blocks(
        _text_block("heading_1", _run("Title")),
        _text_block("paragraph", _run("A")),
        _image("u"),
        _text_block("paragraph", _run("B")),
        _text_block("heading_2", _run("Next")),
    )

    html = assemble_print_markup(blocks)

    assert html == (
        '<div class="newsletter-content">'
        '<div class="content-section"><h1>Title</h1><p>A</p></div>'
        '<div class="content-section image-only"><img src="u" alt="" /></div>'
        '<div class="content-section"><p>B</p></div>'
        '<div class="content-section"><h2>Next</h2></div>'
        "</div>"
    )


def test_blank_paragraph_prevents_side_by_side_pairing() -> None:
    blocks = _blocks(
        _text_block("heading_2", _run("H")),
        _text_block("paragraph"),
        _image("u"),
    )

    html = assemble_print_markup(blocks)

    assert "with-image" not in html
    assert html == (
        '<div class="newsletter-content">'
        '<div class="content-section"><h2>H</h2></div>'
        '<div class="content-section image-only"><img src="u" alt="" /></div>'
        "</div>"
    )


def test_print_loose_content_and_lists() -> None:
    blocks = _blocks(
        _text_block("paragraph", _run("Lead & intro")),
        _text_block("bulleted_list_item", _run("x")),
        _text_block("bulleted_list_item", _run("y")),
        {"type": "divider", "divider": {}},
        _text_block("heading_3", _run("Tips")),
        _text_block("numbered_list_item", _run("first")),
        _text_block("numbered_list_item", _run("second")),
    )

    html = assemble_print_markup(blocks)

    assert html == (
        '<div class="newsletter-content">'
        '<div class="content-section"><p>Lead &amp; intro</p></div>'
        "<ul><li>x</li><li>y</li></ul>"
        "<hr />"
        '<div class="content-section"><h3>Tips</h3><ol><li>first</li><li>second</li></ol></div>'
        "</div>"
    )


def test_print_headings_use_plain_text_and_minimal_escaping() -> None:
    blocks = _blocks(_text_block("heading_2", _run("Q&A "), _run('"live"', bold=True)))

    html = assemble_print_markup(blocks)

    assert '<h2>Q&amp;A "live"</h2>' in html
    assert "<strong>" not in html


def test_paragraph_survives_one_malformed_run() -> None:
    raw = {
        "type": "paragraph",
        "paragraph": {
            "rich_text": [
                _run("Hello "),
                {"plain_text": "oops", "annotations": ["italic"]},
                _run("world", bold=True),
            ]
        },
    }

    html = assemble_markup(parse_blocks([raw]), styles={})

    assert html == "<div><div><p>Hello <strong>world</strong></p></div></div>"
