"""Request handler for /api/render (email HTML) events."""

from __future__ import annotations

from typing import Any, Callable, Dict

from errors import NewsletterError
from request_parser import RequestParser

from .responses import error_response, json_response


class RenderHandler:
    """Turns a ``{"url": ...}`` body into ``{"html": ...}``."""

    def __init__(self, logger, service) -> None:
        self._logger = logger
        self._service = service

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        self._logger.info("=== HANDLE_RENDER STARTED ===")
        payload = RequestParser(event).json()
        url = str(payload.get("url") or "").strip()
        if not url:
            return json_response(400, {"error": "Missing url"})

        try:
            result = self._service.render_email(
                url,
                token=payload.get("token"),
                theme=payload.get("theme"),
            )
        except NewsletterError as exc:
            self._logger.warning("Render failed: %s", exc)
            return error_response(exc)
        except Exception as exc:
            self._logger.error("Error in handle_render: %s", exc)
            return json_response(500, {"error": str(exc) or "Render failed"})

        self._logger.info("Rendered %s characters of email HTML", len(result["html"]))
        return json_response(200, result)


def create_render_handler(logger, service) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    handler = RenderHandler(logger=logger, service=service)
    return handler.handle
