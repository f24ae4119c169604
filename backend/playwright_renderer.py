"""Headless Chromium renderer driven through Playwright's sync API."""

from __future__ import annotations

import time
from typing import Dict, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from errors import RenderTimeoutError


CHROME_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--single-process",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-plugins",
    "--disable-renderer-backgrounding",
    "--disable-backgrounding-occluded-windows",
    "--disable-background-timer-throttling",
    "--font-render-hinting=none",
]

_PAGINATION_DONE = "() => typeof window.renderedPageCount === 'number'"
_PAGE_COUNT = (
    "() => window.renderedPageCount || document.querySelectorAll('.pagedjs_page').length"
)


class PlaywrightRenderer:
    """Headless Chromium driven for one pagination search.

    Use as a context manager; the browser is launched on entry and torn down
    on exit so a single search owns it for its whole lifetime. Every
    ``set_content`` call opens a new page and closes the previous one, so
    no window state from an earlier attempt leaks into the next.

    An already-launched ``browser`` may be passed in; it is then left open
    on exit.
    """

    def __init__(
        self,
        logger,
        content_timeout_ms: int = 30000,
        launch_timeout_ms: int = 30000,
        viewport: Optional[Dict[str, int]] = None,
        browser=None,
    ) -> None:
        self.logger = logger
        self.content_timeout_ms = content_timeout_ms
        self.launch_timeout_ms = launch_timeout_ms
        self.viewport = viewport or {"width": 1200, "height": 800}
        self._playwright = None
        self._browser = browser
        self._owns_browser = browser is None
        self._page = None
        self.pages_opened = 0

    def __enter__(self) -> "PlaywrightRenderer":
        if self._browser is not None:
            return self
        start_time = time.time()
        self._playwright = sync_playwright().start()
        try:
            self.logger.info(f"Launching browser with {len(CHROME_ARGS)} chrome flags")
            self._browser = self._playwright.chromium.launch(
                headless=True,
                args=CHROME_ARGS,
                timeout=self.launch_timeout_ms,
                chromium_sandbox=False,
            )
        except Exception:
            self.close()
            raise
        self.logger.info(f"Browser launched successfully in {time.time() - start_time:.2f}s")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _close_page(self) -> None:
        if self._page is None:
            return
        try:
            self._page.close()
        except PlaywrightError as e:
            self.logger.warning(f"Page close failed: {e}")
        self._page = None

    def close(self) -> None:
        self._close_page()
        if self._browser is not None and self._owns_browser:
            try:
                self._browser.close()
            except PlaywrightError as e:
                self.logger.warning(f"Browser close failed: {e}")
        self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    @property
    def page(self):
        if self._page is None:
            raise RuntimeError("No document loaded; call set_content first")
        return self._page

    def _fresh_page(self):
        if self._browser is None:
            raise RuntimeError("PlaywrightRenderer used outside of its context manager")
        self._close_page()
        page = self._browser.new_page()
        page.set_viewport_size(self.viewport)
        self._page = page
        self.pages_opened += 1
        return page

    def set_content(self, document: str) -> None:
        content_start = time.time()
        page = self._fresh_page()
        self.logger.info(f"Setting page content ({len(document)} characters)")
        try:
            page.set_content(document, wait_until="networkidle", timeout=self.content_timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise RenderTimeoutError(f"Page content did not settle within {self.content_timeout_ms}ms") from exc
        self.logger.info(f"Content loaded in {time.time() - content_start:.2f}s")

    def wait_for_pagination(self, timeout_ms: int) -> None:
        try:
            self.page.wait_for_function(_PAGINATION_DONE, timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise RenderTimeoutError(f"Pagination did not finish within {timeout_ms}ms") from exc

    def measure_page_count(self) -> int:
        return int(self.page.evaluate(_PAGE_COUNT) or 0)

    def export_pdf(self, page_format: str, margins: Dict[str, str]) -> bytes:
        # The @page rule in the shell already carries size and margins.
        pdf_start = time.time()
        pdf_bytes = self.page.pdf(
            format=page_format,
            print_background=True,
            prefer_css_page_size=True,
            display_header_footer=False,
            margin={"top": "0", "right": "0", "bottom": "0", "left": "0"},
        )
        self.logger.info(f"PDF generation completed in {time.time() - pdf_start:.2f}s")
        return pdf_bytes


__all__ = ["PlaywrightRenderer", "CHROME_ARGS"]
