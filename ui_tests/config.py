"""Shared configuration for UI regression tests.

The viewer under test is started by the ui_tests fixtures on a free local
port and registered here with use_base_url(); browser settings come from
the environment.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional
from urllib.parse import urljoin


class UiTestConfig:
    """Browser and target settings for the Playwright suite."""

    def __init__(self) -> None:
        headless_str = os.getenv("PLAYWRIGHT_HEADLESS", "true")
        self.playwright_headless: bool = headless_str.lower() in {"true", "1"}
        self.browser_type: str = os.getenv("PLAYWRIGHT_BROWSER", "chromium")
        self.timeout_ms: int = int(os.getenv("PLAYWRIGHT_TIMEOUT_MS", "10000"))
        self._base_url: Optional[str] = None

    @property
    def base_url(self) -> str:
        if not self._base_url:
            raise RuntimeError("No viewer base URL configured; use the viewer_server fixture")
        return self._base_url

    @contextmanager
    def use_base_url(self, base_url: str) -> Iterator[None]:
        """Target a viewer instance for the duration of the block."""
        previous = self._base_url
        self._base_url = base_url
        try:
            yield
        finally:
            self._base_url = previous

    def url(self, path: str = "") -> str:
        return urljoin(self.base_url.rstrip('/') + '/', path.lstrip('/'))


settings = UiTestConfig()
