#!/usr/bin/env python3
"""
Navigation and Wait Conditions for Screenshot Module

This module sequences everything that happens between "open the page" and
"take the picture": navigation with a completion event, and the optional wait
condition (selector, predicate, fixed timeout or network idle).

Network idle is an explicit poll loop: request/response listeners on the page
record the time of the latest activity and the loop checks every 100ms whether
the page has been quiet for the idle threshold, until the overall timeout.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Third-party package documentation:
- Playwright for Python: https://playwright.dev/python/docs/api/class-page

Sample input:
- await navigate(page, "https://example.com", "networkidle2", timeout_ms=30000)
- await wait_for_condition(page, WaitCondition(type="networkidle", value="1500"))

Expected output:
- None once the page is loaded and quiet; WaitTimeoutError otherwise
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional

from loguru import logger
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from screenshot_mcp.core.constants import CAPTURE_SETTINGS
from screenshot_mcp.core.errors import (
    InvalidSelectorError,
    InvalidWaitConditionError,
    WaitTimeoutError,
)
from screenshot_mcp.core.models import WaitCondition
from screenshot_mcp.core.utils import sanitize_selector

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class NetworkActivityMonitor:
    """
    Tracks network activity on a page through its event listeners.

    ``last_activity`` is the clock reading of the most recent request or
    response (or of attach() if there was none); ``inflight`` counts requests
    that have started but not yet finished or failed.
    """

    def __init__(self, page: Page, clock: Clock = monotonic_ms):
        self.page = page
        self.clock = clock
        self.last_activity = clock()
        self.last_inflight_change = self.last_activity
        self.inflight = 0
        # Bound once so remove_listener receives the same callables
        self._on_request = self._handle_request
        self._on_response = self._handle_response
        self._on_request_done = self._handle_request_done

    def _handle_request(self, _request: Any) -> None:
        self.last_activity = self.clock()
        self.inflight += 1
        self.last_inflight_change = self.last_activity

    def _handle_response(self, _response: Any) -> None:
        self.last_activity = self.clock()

    def _handle_request_done(self, _request: Any) -> None:
        self.inflight = max(0, self.inflight - 1)
        self.last_inflight_change = self.clock()

    def attach(self) -> "NetworkActivityMonitor":
        self.page.on("request", self._on_request)
        self.page.on("response", self._on_response)
        self.page.on("requestfinished", self._on_request_done)
        self.page.on("requestfailed", self._on_request_done)
        return self

    def detach(self) -> None:
        self.page.remove_listener("request", self._on_request)
        self.page.remove_listener("response", self._on_response)
        self.page.remove_listener("requestfinished", self._on_request_done)
        self.page.remove_listener("requestfailed", self._on_request_done)

    def idle_for(self) -> float:
        return self.clock() - self.last_activity


async def wait_for_network_idle(
    page: Page,
    idle_ms: int,
    timeout_ms: int,
    clock: Clock = monotonic_ms,
    sleep: Sleep = asyncio.sleep,
    poll_interval_ms: int = CAPTURE_SETTINGS["IDLE_POLL_INTERVAL"],
) -> None:
    """
    Waits until no request or response has been seen for ``idle_ms``.

    Args:
        page: Page to observe
        idle_ms: Required quiet period in milliseconds
        timeout_ms: Overall bound for the wait
        clock: Millisecond clock
        sleep: Coroutine used between polls (seconds)
        poll_interval_ms: Poll cadence

    Raises:
        WaitTimeoutError: If the page never stays quiet long enough
    """
    monitor = NetworkActivityMonitor(page, clock).attach()
    try:
        start = clock()
        while clock() - start < timeout_ms:
            if monitor.idle_for() >= idle_ms:
                logger.debug(f"Network idle for {idle_ms}ms after {clock() - start:.0f}ms")
                return
            await sleep(poll_interval_ms / 1000)
    finally:
        monitor.detach()

    raise WaitTimeoutError(
        f"Network did not become idle for {idle_ms}ms within {timeout_ms}ms",
        {"idle_ms": idle_ms, "timeout_ms": timeout_ms},
    )


async def _wait_for_quiet_connections(
    monitor: NetworkActivityMonitor,
    max_inflight: int,
    timeout_ms: float,
    clock: Clock,
    sleep: Sleep,
    quiet_ms: int = CAPTURE_SETTINGS["NETWORK_QUIET_WINDOW"],
    poll_interval_ms: int = CAPTURE_SETTINGS["IDLE_POLL_INTERVAL"],
) -> None:
    start = clock()
    while clock() - start < timeout_ms:
        if monitor.inflight <= max_inflight and clock() - monitor.last_inflight_change >= quiet_ms:
            return
        await sleep(poll_interval_ms / 1000)

    raise WaitTimeoutError(
        f"Navigation timeout of {int(timeout_ms)}ms exceeded waiting for at most "
        f"{max_inflight} network connections",
        {"inflight": monitor.inflight},
    )


async def navigate(
    page: Page,
    url: str,
    wait_until: str,
    timeout_ms: int,
    clock: Clock = monotonic_ms,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """
    Navigates to ``url`` and waits for the requested completion event.

    ``load`` and ``domcontentloaded`` map directly onto Playwright;
    ``networkidle0`` is Playwright's ``networkidle``; ``networkidle2`` waits
    for the load event and then for at most two open connections during the
    quiet window. All of it is bounded by ``timeout_ms``.

    Raises:
        InvalidWaitConditionError: If wait_until is not a known event
        WaitTimeoutError: If networkidle2 is not reached in time
    """
    logger.info(f"Navigating to {url} (wait_until={wait_until}, timeout={timeout_ms}ms)")

    if wait_until in ("load", "domcontentloaded"):
        await page.goto(url, wait_until=wait_until, timeout=timeout_ms)
    elif wait_until == "networkidle0":
        await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    elif wait_until == "networkidle2":
        monitor = NetworkActivityMonitor(page, clock).attach()
        try:
            start = clock()
            await page.goto(url, wait_until="load", timeout=timeout_ms)
            remaining = max(0.0, timeout_ms - (clock() - start))
            await _wait_for_quiet_connections(monitor, 2, remaining, clock, sleep)
        finally:
            monitor.detach()
    else:
        raise InvalidWaitConditionError(f"Unknown navigation completion event: {wait_until}")


async def wait_for_condition(
    page: Page,
    wait_for: WaitCondition,
    clock: Clock = monotonic_ms,
    sleep: Sleep = asyncio.sleep,
) -> None:
    """
    Runs one wait condition against a loaded page.

    Args:
        page: Page to wait on
        wait_for: The condition; its ``timeout`` bounds selector, function and networkidle waits
        clock: Millisecond clock
        sleep: Coroutine used for fixed delays and polling (seconds)

    Raises:
        InvalidSelectorError: Selector wait without a usable selector
        UnsafeSelectorError: Selector wait with a dangerous selector
        InvalidWaitConditionError: Unknown type or unusable value
        WaitTimeoutError: The condition was not met in time
    """
    wait_type = wait_for.type
    timeout_ms = wait_for.timeout
    logger.info(f"Waiting for {wait_type} condition (value={wait_for.value!r}, timeout={timeout_ms}ms)")

    if wait_type == "selector":
        selector = sanitize_selector(wait_for.value)
        if not selector:
            raise InvalidSelectorError("Invalid selector provided")
        try:
            await page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"Timed out after {timeout_ms}ms waiting for selector {selector}",
                {"selector": selector},
            ) from e

    elif wait_type == "function":
        if not wait_for.value:
            raise InvalidWaitConditionError("Function wait condition requires a value")
        try:
            await page.wait_for_function(wait_for.value, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"Timed out after {timeout_ms}ms waiting for function to return true"
            ) from e

    elif wait_type == "timeout":
        delay_ms = _parse_int(wait_for.value)
        if delay_ms is None:
            raise InvalidWaitConditionError(
                f"Timeout wait condition requires an integer value in milliseconds, got {wait_for.value!r}"
            )
        await sleep(max(0, delay_ms) / 1000)

    elif wait_type == "networkidle":
        idle_ms = _parse_int(wait_for.value) or wait_for.idle_time or CAPTURE_SETTINGS["IDLE_TIME"]
        await wait_for_network_idle(page, idle_ms, timeout_ms, clock=clock, sleep=sleep)

    else:
        raise InvalidWaitConditionError(f"Unknown wait condition type: {wait_type}")
