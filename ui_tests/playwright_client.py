"""
Direct Playwright client used by the UI tests.

Launches the browser in-process and hands out pages from one default
context, so cookies (and with them the viewer session) survive
navigation within a test.

Usage:
    async with PlaywrightClient() as client:
        await client.page.goto("http://127.0.0.1:8080/")
"""

import os
from typing import Optional
from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright


class PlaywrightClient:
    """Owns the Playwright driver, one browser and its default context."""

    def __init__(
        self,
        browser_type: str = "chromium",
        headless: Optional[bool] = None,
        timeout: int = 10000,
    ):
        """
        Args:
            browser_type: Browser to use (chromium, firefox, webkit)
            headless: Run in headless mode (None = read PLAYWRIGHT_HEADLESS)
            timeout: Default timeout in milliseconds
        """
        self.browser_type = browser_type
        if headless is not None:
            self.headless = headless
        else:
            self.headless = os.getenv('PLAYWRIGHT_HEADLESS', 'true').lower() == 'true'
        self.timeout = timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def connect(self):
        """Launch the browser and open the default context and page."""
        self._playwright = await async_playwright().start()

        try:
            launcher = getattr(self._playwright, self.browser_type)
            self._browser = await launcher.launch(headless=self.headless)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

        self._context = await self._browser.new_context()
        self._context.set_default_timeout(self.timeout)
        self._page = await self._context.new_page()

    async def close(self):
        """Close page, context, browser and driver."""
        if self._page:
            await self._page.close()
            self._page = None

        if self._context:
            await self._context.close()
            self._context = None

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @property
    def browser(self) -> Browser:
        if not self._browser:
            raise RuntimeError("Client not connected")
        return self._browser

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Client not connected or page not created")
        return self._page

