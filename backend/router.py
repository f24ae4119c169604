import json
import logging
from typing import Any, Callable, Dict, Tuple

import psutil

from handlers import is_request_authorized
from request_parser import RequestParser


Handler = Callable[[Dict[str, Any]], Dict[str, Any]]

# Reachable without the shared app password.
PUBLIC_ROUTES = {("GET", "/api/health"), ("GET", "/api/auth/check"), ("POST", "/api/auth/check")}


class LambdaRouter:
    """Simple router for API Gateway events."""

    def __init__(self, verify_browser: Callable[[], bool]):
        self.verify_browser = verify_browser
        self.logger = logging.getLogger(__name__)
        self.cors_headers = {
            'Access-Control-Allow-Origin': '*',
            'Access-Control-Allow-Headers': 'Content-Type, X-App-Password, Authorization',
            'Access-Control-Allow-Methods': 'OPTIONS, POST, GET',
            'Access-Control-Expose-Headers': 'Content-Disposition, X-Newsletter-Font-Size, X-Newsletter-Page-Count',
        }

    def _log_memory(self) -> None:
        memory_info = psutil.virtual_memory()
        self.logger.info(f"Available memory: {memory_info.available / 1024 / 1024:.1f} MB")

    def handle(self, event: Dict[str, Any], handlers: Dict[Tuple[str, str], Handler]) -> Dict[str, Any]:
        try:
            self._log_memory()

            path = event.get('path', '') or ''
            method = event.get('httpMethod', '') or ''

            if method == 'OPTIONS':
                return {'statusCode': 200, 'headers': self.cors_headers, 'body': ''}

            self.logger.info(f"Processing request: {method} {path}")

            if (method, path) not in PUBLIC_ROUTES:
                parser = RequestParser(event)
                if not is_request_authorized(parser.headers, parser.query):
                    return self._with_cors({
                        'statusCode': 401,
                        'headers': {'Content-Type': 'application/json'},
                        'body': json.dumps({'error': 'Unauthorized'})
                    })

            if path == '/api/render-pdf' and method == 'POST':
                if not self.verify_browser():
                    self.logger.error("Playwright browser verification failed - PDF rendering will likely fail")

            func = handlers.get((method, path))
            if func:
                response = func(event)
            else:
                response = {
                    'statusCode': 404,
                    'headers': {'Content-Type': 'application/json'},
                    'body': json.dumps({'error': 'Not found'})
                }
            return self._with_cors(response)

        except Exception as e:
            self.logger.error(f"Lambda handler error: {str(e)}")
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json', **self.cors_headers},
                'body': json.dumps({'error': f'Internal server error: {str(e)}'})
            }

    def _with_cors(self, response: Dict[str, Any]) -> Dict[str, Any]:
        if 'headers' not in response:
            response['headers'] = {}
        response['headers'].update(self.cors_headers)
        return response
