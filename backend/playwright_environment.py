"""Checks and cleanup for the headless Chromium used by the print path."""
from __future__ import annotations

import glob
import os
import shutil
from typing import Protocol

import psutil
from playwright.sync_api import sync_playwright


class LoggerLike(Protocol):
    def info(self, msg: str, *args, **kwargs) -> None: ...
    def warning(self, msg: str, *args, **kwargs) -> None: ...
    def error(self, msg: str, *args, **kwargs) -> None: ...


_BROWSER_MARKERS = ("chrome", "chromium", "headless_shell")
_TEMP_PATTERNS = ("/tmp/.playwright", "/tmp/playwright-*")


def _is_browser_process(info: dict) -> bool:
    name = (info.get("name") or "").lower()
    cmdline = " ".join(info.get("cmdline") or []).lower()
    return any(marker in name or marker in cmdline for marker in _BROWSER_MARKERS)


def cleanup_browser_processes(logger: LoggerLike) -> int:
    """Terminate Chromium processes left behind by this process; return how many."""
    terminated = 0
    try:
        children = psutil.Process().children(recursive=True)
    except psutil.Error as e:
        logger.warning(f"Failed to list child processes: {e}")
        children = []

    for proc in children:
        try:
            info = proc.as_dict(attrs=["pid", "name", "cmdline"])
            if not _is_browser_process(info):
                continue
            logger.info("Terminating browser process: %s (PID: %s)", info.get("name"), proc.pid)
            proc.terminate()
            proc.wait(timeout=3)
            terminated += 1
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.TimeoutExpired):
            continue

    for pattern in _TEMP_PATTERNS:
        for path in glob.glob(pattern):
            if os.path.isdir(path):
                shutil.rmtree(path, ignore_errors=True)
            elif os.path.isfile(path):
                try:
                    os.unlink(path)
                except OSError as e:
                    logger.warning(f"Failed to clean temp file {path}: {e}")
    return terminated


def verify_playwright_installation(logger: LoggerLike) -> bool:
    """Verify that the Chromium build Playwright expects is installed."""
    try:
        with sync_playwright() as p:
            browser_path = p.chromium.executable_path
            if os.path.exists(browser_path):
                logger.info(f"Playwright browser verification: PASSED ({browser_path})")
                return True
            logger.error(f"Playwright browser executable not found at: {browser_path}")
            return False
    except Exception as e:
        logger.error(f"Playwright browser verification failed: {e}")
        return False


__all__ = ["cleanup_browser_processes", "verify_playwright_installation"]
