import json
import logging
from typing import Any, Dict

from handlers import (
    create_auth_check_handler,
    create_render_handler,
    create_render_pdf_handler,
)
from logging_utils import configure_logging
from newsletter_service import NewsletterService
from playwright_environment import (
    cleanup_browser_processes as cleanup_playwright_artifacts,
    verify_playwright_installation as verify_playwright_env,
)
from router import LambdaRouter


configure_logging()
logger = logging.getLogger(__name__)

newsletter_service = NewsletterService(logger)

# =====================
# Request handlers
# =====================

handle_render = create_render_handler(logger=logger, service=newsletter_service)
handle_render_pdf = create_render_pdf_handler(logger=logger, service=newsletter_service)
handle_auth_check = create_auth_check_handler(logger=logger)


def handle_health(event: Dict[str, Any]) -> Dict[str, Any]:
    """Handle health check."""
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'status': 'healthy', 'service': 'notion-newsletter'})
    }


def cleanup_browser_processes() -> None:
    cleanup_playwright_artifacts(logger)


def verify_playwright_installation() -> bool:
    return verify_playwright_env(logger)


router = LambdaRouter(verify_playwright_installation)
HANDLERS = {
    ("POST", "/api/render"): handle_render,
    ("POST", "/api/render-pdf"): handle_render_pdf,
    ("GET", "/api/health"): handle_health,
    ("GET", "/api/auth/check"): handle_auth_check,
    ("POST", "/api/auth/check"): handle_auth_check,
}


def lambda_handler(event, context):
    """Main Lambda entry point."""
    try:
        return router.handle(event, HANDLERS)
    finally:
        cleanup_browser_processes()
        logger.info("Lambda handler completed")
