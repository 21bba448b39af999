"""Thin wrapper around direct Playwright for ergonomic assertions."""
from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict

import anyio
from playwright.async_api import Page, TimeoutError as PlaywrightTimeout

from ui_tests.config import settings
from ui_tests.playwright_client import PlaywrightClient


@dataclass
class ToolError(Exception):
    """Raised when a browser operation fails."""

    name: str
    payload: Dict[str, Any]
    message: str

    def __str__(self) -> str:  # pragma: no cover - human readable helper
        return f"{self.name} failed ({self.message}) with payload={self.payload}"


class Browser:
    """Convenience wrapper over a Playwright page, speaking in viewer terms."""

    def __init__(self, page: Page) -> None:
        self._page = page
        self.current_url: str | None = None
        self.last_status: int | None = None

    @property
    def page(self) -> Page:
        return self._page

    async def reset(self) -> None:
        await self._page.goto("about:blank")
        self.current_url = self._page.url

    async def goto(self, url: str) -> Dict[str, Any]:
        """Navigate and record the final response status."""
        try:
            response = await self._page.goto(url, wait_until="domcontentloaded")
        except PlaywrightTimeout as exc:
            raise ToolError(name="goto", payload={"url": url}, message=str(exc))
        self.current_url = self._page.url
        self.last_status = response.status if response else None
        return {"url": self.current_url, "status": self.last_status}

    async def fill(self, selector: str, value: str) -> None:
        try:
            await self._page.fill(selector, value)
        except Exception as exc:
            raise ToolError(name="fill", payload={"selector": selector, "value": value}, message=str(exc))

    def button(self, label: str):
        return self._page.get_by_role("button", name=label, exact=True)

    async def press(self, label: str) -> None:
        """Click a button by its visible label and wait for the next page."""
        try:
            async with self._page.expect_navigation(wait_until="domcontentloaded"):
                await self.button(label).click()
        except Exception as exc:
            raise ToolError(name="press", payload={"label": label}, message=str(exc))
        self.current_url = self._page.url

    async def is_enabled(self, label: str) -> bool:
        return await self.button(label).is_enabled()

    async def has_button(self, label: str) -> bool:
        return await self.button(label).count() > 0

    async def submit_code(self, code: str) -> None:
        """Type a code into the gate and press Open."""
        await self.fill("#code", code)
        await self.press("Open")

    async def text(self, selector: str) -> str:
        try:
            text = await self._page.text_content(selector, timeout=5000)
            return text or ""
        except Exception as exc:
            raise ToolError(name="text", payload={"selector": selector}, message=str(exc))

    async def heading(self) -> str:
        return (await self.text("h1")).strip()

    async def body(self) -> str:
        return await self._page.inner_text("body")

    async def wait_for_text(self, selector: str, expected: str, timeout: float = 3.0, interval: float = 0.2) -> str:
        """Poll for text content until it contains the expected substring."""
        deadline = anyio.current_time() + timeout
        content = ""

        while anyio.current_time() <= deadline:
            try:
                content = await self.text(selector)
            except ToolError:
                content = ""
            if expected in content:
                return content
            await anyio.sleep(interval)

        raise AssertionError(f"Timed out waiting for '{expected}' in selector '{selector}' (last: '{content}')")


@asynccontextmanager
async def browser_session() -> AsyncIterator[Browser]:
    """Yield a Browser on a fresh Playwright client (its own cookie jar)."""
    client = PlaywrightClient(
        browser_type=settings.browser_type,
        headless=settings.playwright_headless,
        timeout=settings.timeout_ms,
    )
    await client.connect()
    try:
        browser = Browser(client.page)
        await browser.reset()
        yield browser
    finally:
        await client.close()
