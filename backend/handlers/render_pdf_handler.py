"""Request handler for /api/render-pdf (paginated newsletter) events."""

from __future__ import annotations

import base64
import hashlib
from typing import Any, Callable, Dict

from errors import NewsletterError
from filename_utils import newsletter_filename
from newsletter_service import pagination_headers
from request_parser import RequestParser

from .responses import error_response, json_response


class RenderPdfHandler:
    def __init__(self, logger, service) -> None:
        self._logger = logger
        self._service = service

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        self._logger.info("=== HANDLE_RENDER_PDF STARTED ===")
        payload = RequestParser(event).json()
        url = str(payload.get("url") or "").strip()
        if not url:
            return json_response(400, {"error": "Missing url"})

        try:
            artifact = self._service.render_print(url, token=payload.get("token"))
        except NewsletterError as exc:
            self._logger.warning("PDF render failed: %s", exc)
            return error_response(exc)
        except Exception as exc:
            self._logger.error("Error in handle_render_pdf: %s", exc)
            return json_response(500, {"error": str(exc) or "Render failed"})

        pdf_bytes = artifact.pdf_bytes
        filename = newsletter_filename()
        headers = {
            "Content-Type": "application/pdf",
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
            "X-Content-SHA256": hashlib.sha256(pdf_bytes).hexdigest(),
        }
        headers.update(pagination_headers(artifact.pagination))
        return {
            "statusCode": 200,
            "headers": headers,
            "body": base64.b64encode(pdf_bytes).decode("utf-8"),
            "isBase64Encoded": True,
        }


def create_render_pdf_handler(logger, service) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    handler = RenderPdfHandler(logger=logger, service=service)
    return handler.handle
