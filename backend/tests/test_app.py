"""Tests for the Flask development server routes."""

from __future__ import annotations

import pytest

import app as app_module
from errors import InputResolutionError, UpstreamFetchError
from newsletter_fakes import PAGE_URL
from newsletter_service import PrintArtifact
from pagination_search import FALLBACK_SCALE_CANDIDATE, PaginationResult


class StubService:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def render_email(self, url, token=None, theme=None):
        self.calls.append(("email", url, token, theme))
        if self.error:
            raise self.error
        return {"html": "<div>newsletter</div>"}

    def render_print(self, url, token=None):
        self.calls.append(("print", url, token))
        if self.error:
            raise self.error
        result = PaginationResult("<html>", FALLBACK_SCALE_CANDIDATE, 4, True)
        return PrintArtifact(pdf_bytes=b"%PDF-1.7 app", pagination=result, page_id="p")


@pytest.fixture
def client():
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as test_client:
        yield test_client


@pytest.fixture
def service(monkeypatch):
    stub = StubService()
    monkeypatch.setattr(app_module, "newsletter_service", stub)
    return stub


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "healthy", "service": "notion-newsletter"}


def test_render_returns_html(client, service) -> None:
    response = client.post("/api/render", json={"url": PAGE_URL, "theme": "card"})

    assert response.status_code == 200
    assert response.get_json() == {"html": "<div>newsletter</div>"}
    assert service.calls == [("email", PAGE_URL, None, "card")]


def test_render_without_url_is_rejected(client, service) -> None:
    response = client.post("/api/render", json={})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Missing url"}
    assert service.calls == []


def test_render_maps_errors_to_status(client, monkeypatch) -> None:
    monkeypatch.setattr(
        app_module,
        "newsletter_service",
        StubService(error=InputResolutionError("Could not parse Notion page ID from URL")),
    )

    response = client.post("/api/render", json={"url": "https://example.com"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Could not parse Notion page ID from URL"}


def test_render_pdf_streams_attachment(client, service) -> None:
    response = client.post("/api/render-pdf", json={"url": PAGE_URL})

    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.data == b"%PDF-1.7 app"
    assert "newsletter-" in response.headers["Content-Disposition"]
    assert response.headers["X-Newsletter-Fallback"] == "true"
    assert response.headers["X-Newsletter-Font-Size"] == "7pt"


def test_render_pdf_upstream_failure_is_502(client, monkeypatch) -> None:
    monkeypatch.setattr(app_module, "newsletter_service", StubService(error=UpstreamFetchError("Unauthorized", 401)))

    response = client.post("/api/render-pdf", json={"url": PAGE_URL})

    assert response.status_code == 502
    assert response.get_json() == {"error": "Unauthorized"}


def test_password_gate(client, service, monkeypatch) -> None:
    monkeypatch.setenv("APP_PASSWORD", "hunter2")

    denied = client.post("/api/render", json={"url": PAGE_URL})
    allowed = client.post("/api/render", json={"url": PAGE_URL}, headers={"X-App-Password": "hunter2"})
    health = client.get("/api/health")
    check = client.post("/api/auth/check", json={"password": "hunter2"})

    assert denied.status_code == 401
    assert allowed.status_code == 200
    assert health.status_code == 200
    assert check.get_json() == {"ok": True}
