from pathlib import Path
from typing import Callable, Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from screenshot_action.config import Config
from screenshot_action.encode import Encoder
from screenshot_action.errors import NavigationError
from screenshot_action.models import CaptureTarget
from screenshot_action.report import RunReporter

# ms to let late rendering content settle after load
SETTLE_DELAY = 500


class CaptureDriver:
    """One browser and one page, used for every target in order."""

    def __init__(self, config: Config, encoder: Encoder, reporter: RunReporter):
        self.config = config
        self.viewport = config.viewport
        self.encoder = encoder
        self.reporter = reporter
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "CaptureDriver":
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def launch(self) -> None:
        self.reporter.event(
            "browser.launch",
            width=self.viewport.width,
            height=self.viewport.page_height,
            full_page=self.viewport.full_page,
        )
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                args=["--no-sandbox"]
            )
            self._page = await self._browser.new_page(
                viewport=self.viewport.as_playwright()
            )
        except BaseException:
            await self.close()
            raise

    async def close(self) -> None:
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        self._page = None
        try:
            if browser is not None:
                await browser.close()
                self.reporter.event("browser.close")
        finally:
            if playwright is not None:
                await playwright.stop()

    async def capture(self, url: str) -> bytes:
        """Navigate to ``url`` and return the raw png screenshot."""
        page = self._page
        if page is None:
            raise NavigationError("browser is not running")

        self.reporter.event("navigate", url=url)
        try:
            response = await page.goto(
                url,
                wait_until=self.config.wait_until,
                timeout=self.config.navigation_timeout,
            )
        except PlaywrightTimeoutError as e:
            raise NavigationError(
                f"Timed out after {self.config.navigation_timeout}ms loading {url}"
            ) from e
        except PlaywrightError as e:
            raise NavigationError(f"Failed to load {url}: {e.message}") from e
        if response is not None and response.status >= 400:
            raise NavigationError(f"Failed to load {url}: HTTP {response.status}")

        await page.wait_for_timeout(SETTLE_DELAY)

        try:
            buffer = await page.screenshot(full_page=self.viewport.full_page)
        except PlaywrightError as e:
            raise NavigationError(f"Failed to capture {url}: {e.message}") from e
        self.reporter.event("capture", url=url, bytes=len(buffer))
        return buffer

    def destination_for(self, target: CaptureTarget) -> Path:
        return self.config.workspace_root / target.destination

    async def run(
        self,
        targets: list[CaptureTarget],
        resolve: Callable[[CaptureTarget], str],
    ) -> list[Path]:
        """Capture and write every target, stopping at the first failure."""
        for target in targets:
            buffer = await self.capture(resolve(target))
            path = await self.encoder.write(buffer, self.destination_for(target))
            self.reporter.add(path)
        return self.reporter.paths
