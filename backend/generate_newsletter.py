"""Command line entry point: render a Notion page to a newsletter file.

Examples::

    python generate_newsletter.py --url https://www.notion.so/Issue-12-<id>
    NOTION_PAGE_ID=<id> python generate_newsletter.py --output-dir ./newsletters
    python generate_newsletter.py --url <page url> --email --theme card
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from errors import NewsletterError
from filename_utils import newsletter_filename, unique_filename
from logging_utils import configure_logging
from newsletter_service import NewsletterService
import settings


logger = logging.getLogger("generate_newsletter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a Notion page as a newsletter PDF or email HTML.")
    parser.add_argument("--url", help="Notion page URL (defaults to NOTION_PAGE_ID)")
    parser.add_argument("--output-dir", default="./newsletters", help="Directory for the generated file")
    parser.add_argument("--email", action="store_true", help="Write email HTML instead of a PDF")
    parser.add_argument("--theme", default=None, help="Email theme: default or card")
    parser.add_argument("--token", default=None, help="Notion token (defaults to NOTION_TOKEN)")
    return parser


def run(argv: Optional[List[str]] = None, service: Optional[NewsletterService] = None) -> str:
    """Generate one newsletter file and return its path."""
    args = build_parser().parse_args(argv)
    service = service or NewsletterService(logger)

    page_id = None if args.url else settings.default_page_id()
    if not args.url and not page_id:
        raise NewsletterError("Provide --url or set NOTION_PAGE_ID")

    os.makedirs(args.output_dir, exist_ok=True)

    if args.email:
        result = service.render_email(args.url, token=args.token, theme=args.theme, page_id=page_id)
        filename = unique_filename(args.output_dir, newsletter_filename(ext="html"))
        output_path = os.path.join(args.output_dir, filename)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(result["html"])
    else:
        artifact = service.render_print(args.url, token=args.token, page_id=page_id)
        filename = unique_filename(args.output_dir, newsletter_filename(ext="pdf"))
        output_path = os.path.join(args.output_dir, filename)
        with open(output_path, "wb") as f:
            f.write(artifact.pdf_bytes)
        candidate = artifact.pagination.candidate
        logger.info(
            "Scaling used: %spt font, %sx spacing%s",
            candidate.font_size,
            candidate.spacing_scale,
            " (fallback)" if artifact.pagination.used_fallback else "",
        )

    logger.info("Newsletter generated: %s", output_path)
    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    try:
        run(argv)
    except NewsletterError as e:
        logger.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
