"""Shared fixtures for the backend tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_PATH = PROJECT_ROOT / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from newsletter_fakes import FakeRenderer, FakeSource  # noqa: E402


@pytest.fixture
def fake_sources():
    FakeSource.instances = []
    yield FakeSource.instances
    FakeSource.instances = []


@pytest.fixture
def renderers():
    created = []

    def factory(logger):
        renderer = FakeRenderer(logger)
        created.append(renderer)
        return renderer

    factory.created = created
    return factory


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    for key in (
        "NOTION_TOKEN",
        "NOTION_PAGE_ID",
        "NOTION_API_URL",
        "APP_PASSWORD",
        "PRINT_PAGE_CEILING",
        "PDF_PAGE_FORMAT",
        "PDF_PAGE_SIZE",
        "PAGE_FORMAT",
        "PAGE_SIZE",
        "PDF_MARGIN",
        "PDF_MARGIN_TOP",
        "PDF_MARGIN_RIGHT",
        "PDF_MARGIN_BOTTOM",
        "PDF_MARGIN_LEFT",
    ):
        monkeypatch.delenv(key, raising=False)
