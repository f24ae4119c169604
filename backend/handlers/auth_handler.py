"""Shared-password gate and the lightweight auth check endpoint."""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from request_parser import RequestParser

from .responses import json_response


def is_request_authorized(
    headers: Dict[str, Any],
    query_params: Optional[Dict[str, Any]] = None,
    body: Optional[Dict[str, Any]] = None,
) -> bool:
    """True when ``APP_PASSWORD`` is unset or the request supplies it."""
    app_password = os.environ.get("APP_PASSWORD")
    if not app_password:
        return True
    provided = (
        headers.get("x-app-password")
        or (query_params or {}).get("auth")
        or (body or {}).get("password")
    )
    return provided == app_password


class AuthCheckHandler:
    def __init__(self, logger) -> None:
        self._logger = logger

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        if not os.environ.get("APP_PASSWORD"):
            return json_response(200, {"ok": True, "auth": "not-required"})

        parser = RequestParser(event)
        query_params = event.get("queryStringParameters", {}) or {}
        if is_request_authorized(parser.headers, query_params, parser.json()):
            return json_response(200, {"ok": True})
        self._logger.info("Auth check rejected")
        return json_response(401, {"ok": False})


def create_auth_check_handler(logger):
    handler = AuthCheckHandler(logger=logger)
    return handler.handle
