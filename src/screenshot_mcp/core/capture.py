#!/usr/bin/env python3
"""
Screenshot Capture Module

This module provides the capture orchestrator: a ScreenshotCapture instance
owns the shared browser session and the admission gate, and turns a capture
request into a normalized PNG plus metadata.

Full-page captures pass the admission gate and wrap every failure after
admission in CaptureFailedError. Element captures skip the gate and let typed
errors through unchanged.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- await capture.capture_screenshot({"url": "https://example.com",
                                    "viewport": {"preset": "mobile"}})
- await capture.capture_element("https://example.com", "h1")

Expected output:
- CaptureResult(success=True, data="<base64 png>",
                metadata={"url": "https://example.com", "timestamp": "...",
                          "viewport": {...}, "title": "Example Domain",
                          "image_width": 750, "image_height": 1334})
"""

import asyncio
import base64
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from loguru import logger

from screenshot_mcp.core.admission import AdmissionGate
from screenshot_mcp.core.browser import BrowserSession
from screenshot_mcp.core.config import CaptureSettings, load_settings
from screenshot_mcp.core.constants import CAPTURE_SETTINGS
from screenshot_mcp.core.errors import (
    CaptureFailedError,
    ElementNotFoundError,
    InvalidSelectorError,
    RateLimitExceededError,
    ScreenshotError,
)
from screenshot_mcp.core.image_processing import normalize_image_size
from screenshot_mcp.core.models import (
    CaptureRequest,
    CaptureResult,
    ViewportConfig,
    ViewportOptions,
)
from screenshot_mcp.core.utils import sanitize_selector, validate_url, validate_viewport
from screenshot_mcp.core.waits import Clock, Sleep, monotonic_ms, navigate, wait_for_condition

HEALTH_CHECK_URL = "data:text/html,<title>health</title>"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _resolve_viewport(viewport: Union[ViewportOptions, Mapping[str, Any], None]) -> ViewportConfig:
    if isinstance(viewport, Mapping):
        viewport = ViewportOptions.model_validate(viewport)
    config = ViewportConfig.from_options(viewport)
    validate_viewport(config)
    return config


class ScreenshotCapture:
    """
    Capture orchestrator bound to one browser session.

    Args:
        settings: Runtime settings; read from the environment when omitted
        session: Browser session to use; a new one is created when omitted
        sleep: Coroutine used for delays (seconds)
        clock: Millisecond clock used by the wait protocol
    """

    def __init__(
        self,
        settings: Optional[CaptureSettings] = None,
        session: Optional[BrowserSession] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = monotonic_ms,
    ):
        self.settings = settings or load_settings()
        self.session = session or BrowserSession(headless=self.settings.headless)
        self.admission = AdmissionGate(self.settings.max_concurrent)
        self.sleep = sleep
        self.clock = clock

    @property
    def active_count(self) -> int:
        return self.admission.active

    async def initialize(self) -> None:
        await self.session.start()

    async def shutdown(self) -> None:
        await self.session.close()

    async def health_check(self) -> Dict[str, Any]:
        """
        Opens and closes a page on a local data URL. Never raises.

        Returns:
            Dict[str, Any]: status ("healthy" or "unhealthy") plus capacity figures
        """
        status: Dict[str, Any] = {
            "active_captures": self.active_count,
            "max_concurrent": self.settings.max_concurrent,
        }
        try:
            await self.initialize()
            async with self.session.new_page(ViewportConfig()) as page:
                await page.goto(HEALTH_CHECK_URL)
            status.update({"status": "healthy", "browser_running": self.session.is_running})
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            status.update({"status": "unhealthy", "browser_running": self.session.is_running, "error": str(e)})
        return status

    def _apply_timeouts(self, page: Any) -> None:
        page.set_default_timeout(self.settings.timeout_ms)
        page.set_default_navigation_timeout(self.settings.timeout_ms)

    async def _settle(self, standard_delay: bool, delay: Optional[int] = None) -> None:
        if standard_delay:
            await self.sleep(CAPTURE_SETTINGS["STANDARD_DELAY"] / 1000)
        if delay and delay > 0:
            await self.sleep(delay / 1000)

    async def capture_screenshot(
        self,
        request: Union[CaptureRequest, Mapping[str, Any], str],
        **options: Any,
    ) -> CaptureResult:
        """
        Captures a full-page screenshot.

        Args:
            request: CaptureRequest, its dict form (camelCase or snake_case keys),
                or a bare URL combined with keyword options
            **options: Request fields when ``request`` is a URL

        Returns:
            CaptureResult: Base64 PNG and metadata

        Raises:
            RateLimitExceededError: If max_concurrent captures are already in flight
            CaptureFailedError: For any failure after admission
        """
        if isinstance(request, str):
            request = CaptureRequest.model_validate({"url": request, **options})
        elif not isinstance(request, CaptureRequest):
            request = CaptureRequest.model_validate(request)

        if not self.admission.try_acquire():
            raise RateLimitExceededError(
                f"Maximum concurrent screenshots ({self.settings.max_concurrent}) exceeded. "
                "Please try again later.",
                {"max_concurrent": self.settings.max_concurrent},
            )

        logger.info(f"Screenshot requested for {request.url} ({self.active_count} in flight)")
        try:
            try:
                url = validate_url(request.url)
                viewport = _resolve_viewport(request.viewport)
                await self.initialize()

                async with self.session.new_page(viewport) as page:
                    self._apply_timeouts(page)
                    await navigate(
                        page, url, request.wait_until, self.settings.timeout_ms,
                        clock=self.clock, sleep=self.sleep,
                    )
                    if request.wait_for is not None:
                        await wait_for_condition(page, request.wait_for, clock=self.clock, sleep=self.sleep)
                    await self._settle(request.standard_delay, request.delay)

                    png = await page.screenshot(full_page=True, type="png")
                    title = await page.title()

                image_bytes, width, height = normalize_image_size(png)
            except Exception as e:
                logger.error(f"Screenshot capture failed for {request.url}: {str(e)}")
                raise CaptureFailedError(request.url, e) from e
        finally:
            self.admission.release()

        data = base64.b64encode(image_bytes).decode("utf-8")
        logger.info(f"Captured {url} as {width}x{height} PNG ({len(data)} base64 characters)")
        return CaptureResult(
            data=data,
            metadata={
                "url": url,
                "timestamp": _timestamp(),
                "viewport": viewport.to_metadata(),
                "title": title,
                "image_width": width,
                "image_height": height,
            },
        )

    async def capture_element(
        self,
        url: str,
        selector: str,
        viewport: Union[ViewportOptions, Mapping[str, Any], None] = None,
        standard_delay: bool = True,
    ) -> CaptureResult:
        """
        Captures the first element matching a CSS selector.

        Navigation always waits for networkidle2. This path is not subject to
        the admission gate.

        Args:
            url: Page to load
            selector: CSS selector of the element
            viewport: Optional viewport options or preset
            standard_delay: Whether to wait the standard settle time after navigation

        Returns:
            CaptureResult: Base64 PNG of the element and metadata

        Raises:
            InvalidUrlError, InvalidSelectorError, UnsafeSelectorError,
            InvalidViewportError, ElementNotFoundError, WaitTimeoutError:
                Propagated unchanged
            CaptureFailedError: For unexpected browser failures
        """
        logger.info(f"Element screenshot requested for {url} (selector: {selector})")

        target = validate_url(url)
        clean_selector = sanitize_selector(selector)
        if not clean_selector:
            raise InvalidSelectorError("Invalid selector provided")
        viewport_config = _resolve_viewport(viewport)

        try:
            await self.initialize()
            async with self.session.new_page(viewport_config) as page:
                self._apply_timeouts(page)
                await navigate(
                    page, target, "networkidle2", self.settings.timeout_ms,
                    clock=self.clock, sleep=self.sleep,
                )
                await self._settle(standard_delay)

                element = await page.query_selector(clean_selector)
                if element is None:
                    raise ElementNotFoundError(clean_selector)
                png = await element.screenshot(type="png")

            image_bytes, width, height = normalize_image_size(png)
        except ScreenshotError as e:
            logger.error(f"Element screenshot failed for {target}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Element screenshot failed for {target}: {str(e)}")
            raise CaptureFailedError(url, e) from e

        return CaptureResult(
            data=base64.b64encode(image_bytes).decode("utf-8"),
            metadata={
                "url": target,
                "selector": clean_selector,
                "timestamp": _timestamp(),
                "image_width": width,
                "image_height": height,
            },
        )
