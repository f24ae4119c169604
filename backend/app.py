import io
import logging
import os

from flask import Flask, jsonify, request, send_file
from flask_cors import CORS

from errors import NewsletterError
from filename_utils import newsletter_filename
from handlers import is_request_authorized
from handlers.responses import status_for_error
from logging_utils import configure_logging
from newsletter_service import NewsletterService, pagination_headers


app = Flask(__name__)
# Allow custom auth header and expose the download/scaling headers
CORS(
    app,
    resources={r"/*": {"origins": "*"}},
    supports_credentials=False,
    expose_headers=["Content-Disposition", "X-Newsletter-Font-Size", "X-Newsletter-Page-Count"],
    allow_headers=["Content-Type", "X-App-Password"]
)

configure_logging()
logger = logging.getLogger(__name__)

if os.environ.get('APP_PASSWORD'):
    logger.info("Password protection: ENABLED (APP_PASSWORD is set)")
else:
    logger.info("Password protection: DISABLED (APP_PASSWORD not set)")

newsletter_service = NewsletterService(logger)


def _request_payload() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _error(exc: Exception):
    return jsonify({'error': str(exc) or 'Render failed'}), status_for_error(exc)


@app.before_request
def require_password():
    path = request.path or ''
    if path.startswith('/health') or path.startswith('/api/health') or path.endswith('/auth/check'):
        return None
    if request.method == 'OPTIONS':
        return None
    headers = {k.lower(): v for k, v in request.headers.items()}
    if not is_request_authorized(headers, request.args.to_dict()):
        return jsonify({'error': 'Unauthorized'}), 401
    return None


@app.route('/auth/check', methods=['POST'])
@app.route('/api/auth/check', methods=['POST'])
def auth_check():
    """Optional endpoint for clients to validate password"""
    if not os.environ.get('APP_PASSWORD'):
        return jsonify({'ok': True, 'auth': 'not-required'})
    headers = {k.lower(): v for k, v in request.headers.items()}
    if is_request_authorized(headers, request.args.to_dict(), _request_payload()):
        return jsonify({'ok': True})
    return jsonify({'ok': False}), 401


@app.route('/health', methods=['GET'])
@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({'status': 'healthy', 'service': 'notion-newsletter'})


@app.route('/api/render', methods=['POST'])
def render_email():
    """Render a Notion page as paste-ready email HTML."""
    payload = _request_payload()
    url = str(payload.get('url') or '').strip()
    if not url:
        return jsonify({'error': 'Missing url'}), 400
    try:
        result = newsletter_service.render_email(url, token=payload.get('token'), theme=payload.get('theme'))
    except NewsletterError as e:
        logger.warning(f"Render failed for {url}: {e}")
        return _error(e)
    except Exception as e:
        logger.error(f"Render error: {e}")
        return jsonify({'error': str(e) or 'Render failed'}), 500
    return jsonify(result)


@app.route('/api/render-pdf', methods=['POST'])
def render_pdf():
    """Render a Notion page as a page-limited PDF newsletter."""
    payload = _request_payload()
    url = str(payload.get('url') or '').strip()
    if not url:
        return jsonify({'error': 'Missing url'}), 400
    try:
        artifact = newsletter_service.render_print(url, token=payload.get('token'))
    except NewsletterError as e:
        logger.warning(f"PDF render failed for {url}: {e}")
        return _error(e)
    except Exception as e:
        logger.error(f"PDF render error: {e}")
        return jsonify({'error': str(e) or 'Render failed'}), 500

    response = send_file(
        io.BytesIO(artifact.pdf_bytes),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=newsletter_filename(),
    )
    response.headers.update(pagination_headers(artifact.pagination))
    return response


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 3000))
    app.run(host='0.0.0.0', port=port, debug=False)
