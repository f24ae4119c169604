"""Shared API Gateway response builders and error-to-status mapping."""

from __future__ import annotations

import json
from typing import Any, Dict

from errors import (
    InputResolutionError,
    MissingCredentialError,
    RenderTimeoutError,
    UpstreamFetchError,
)


_ERROR_STATUS = (
    (InputResolutionError, 400),
    (MissingCredentialError, 400),
    (UpstreamFetchError, 502),
    (RenderTimeoutError, 504),
)


def status_for_error(exc: Exception) -> int:
    for error_type, status in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


def json_response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload),
    }


def error_response(exc: Exception) -> Dict[str, Any]:
    return json_response(status_for_error(exc), {"error": str(exc) or "Render failed"})


__all__ = ["status_for_error", "json_response", "error_response"]
