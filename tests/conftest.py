"""Shared pytest setup and fixtures.

- registers the e2e marker
- clears action inputs from the environment
- fakes the playwright browser so unit tests never launch chromium
"""

import io
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image
from rich.console import Console

from screenshot_action.console import console
from screenshot_action.report import RunReporter

ACTION_ENV = (
    "SCREENSHOTS",
    "INPUT_SCREENSHOTS",
    "INPUT_WIDTH",
    "INPUT_HEIGHT",
    "INPUT_PORT",
    "INPUT_HOST",
    "INPUT_TIMEOUT",
    "INPUT_WAIT_UNTIL",
    "INPUT_SERVER_READY_TIMEOUT",
    "INPUT_WEBP_OPTIONS",
    "INPUT_PNG_OPTIONS",
    "INPUT_JPEG_OPTIONS",
    "INPUT_URL",
    "INPUT_OUTPUT",
    "GITHUB_WORKSPACE",
    "GITHUB_OUTPUT",
)


def pytest_configure(config):
    config.addinivalue_line("markers", "e2e: runs a real browser, enabled with E2E=1")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the runner's own GITHUB_* and INPUT_* variables out of the tests."""
    for name in ACTION_ENV:
        monkeypatch.delenv(name, raising=False)
    quiet = console.quiet
    yield
    console.quiet = quiet


@pytest.fixture
def log():
    return io.StringIO()


@pytest.fixture
def reporter(tmp_path, log):
    return RunReporter(
        github_output=tmp_path / "github_output",
        console=Console(file=log, width=300),
    )


@pytest.fixture
def png_bytes():
    """A small rgba png, like the ones chromium returns."""
    buffer = io.BytesIO()
    Image.new("RGBA", (16, 12), (200, 30, 30, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def browser(monkeypatch, png_bytes):
    """Patch playwright with one fake browser and page, shared by every launch."""
    calls = []

    page = MagicMock()
    page.goto = AsyncMock(return_value=SimpleNamespace(status=200))
    page.wait_for_timeout = AsyncMock()
    page.screenshot = AsyncMock(return_value=png_bytes)

    chromium_browser = MagicMock()
    chromium_browser.new_page = AsyncMock(return_value=page)
    chromium_browser.close = AsyncMock(
        side_effect=lambda: calls.append("browser.close")
    )

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=chromium_browser)
    playwright.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)
    monkeypatch.setattr(
        "screenshot_action.capture.async_playwright", lambda: starter
    )

    return SimpleNamespace(
        page=page,
        browser=chromium_browser,
        playwright=playwright,
        calls=calls,
    )
