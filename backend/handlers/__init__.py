"""Factories for Lambda request handlers."""

from .auth_handler import create_auth_check_handler, is_request_authorized
from .render_handler import create_render_handler
from .render_pdf_handler import create_render_pdf_handler

__all__ = [
    "create_auth_check_handler",
    "create_render_handler",
    "create_render_pdf_handler",
    "is_request_authorized",
]
