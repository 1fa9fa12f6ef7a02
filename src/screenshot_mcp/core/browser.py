#!/usr/bin/env python3
"""
Browser Session for Screenshot Module

This module owns the single headless Chromium process shared by every capture.
The browser is launched lazily on first use and reused until close(). Each
capture gets its own browser context and page, created with the requested
viewport and closed when the capture ends, so pages are never shared between
requests.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Third-party package documentation:
- Playwright for Python: https://playwright.dev/python/docs/api/class-browser

Sample input:
- session = BrowserSession(headless=True)
- async with session.new_page(ViewportConfig.from_preset("mobile")) as page: ...

Expected output:
- A Playwright Page emulating a 375x667 touch device, closed on exit
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from loguru import logger
from playwright.async_api import Browser, Page, Playwright, async_playwright

from screenshot_mcp.core.constants import BROWSER_ARGS
from screenshot_mcp.core.models import ViewportConfig


class BrowserSession:
    """
    Lazily started Playwright Chromium handle.

    Args:
        headless: Launch Chromium without a window
        launch_args: Extra command line flags for Chromium
    """

    def __init__(self, headless: bool = True, launch_args: Optional[List[str]] = None):
        self.headless = headless
        self.launch_args = list(BROWSER_ARGS if launch_args is None else launch_args)
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def start(self) -> None:
        """Launch the browser unless it is already running. Safe to call concurrently."""
        async with self._lock:
            if self._browser is not None:
                return

            logger.info(f"Launching Chromium (headless={self.headless})")
            playwright = await async_playwright().start()
            try:
                self._browser = await playwright.chromium.launch(
                    headless=self.headless,
                    args=self.launch_args,
                )
            except Exception:
                await playwright.stop()
                raise
            self._playwright = playwright
            logger.info("Browser session started")

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver. Safe to call when not started."""
        async with self._lock:
            browser, playwright = self._browser, self._playwright
            self._browser = None
            self._playwright = None

            if browser is not None:
                await browser.close()
            if playwright is not None:
                await playwright.stop()
                logger.info("Browser session closed")

    @asynccontextmanager
    async def new_page(self, viewport: ViewportConfig) -> AsyncIterator[Page]:
        """
        Open a request-scoped page configured with the given viewport.

        The viewport, scale factor and mobile/touch emulation are applied
        first; the user agent, when present, is applied on top of them.

        Args:
            viewport: Resolved and validated viewport

        Yields:
            Page: Fresh page, closed together with its context on exit
        """
        if self._browser is None:
            raise RuntimeError("Browser session is not started")

        context_options = {
            "viewport": {"width": viewport.width, "height": viewport.height},
            "device_scale_factor": viewport.device_scale_factor,
            "is_mobile": viewport.is_mobile,
            "has_touch": viewport.has_touch,
        }
        if viewport.user_agent:
            context_options["user_agent"] = viewport.user_agent

        context = await self._browser.new_context(**context_options)
        try:
            page = await context.new_page()
            yield page
        finally:
            await context.close()
