"""
In-memory stand-ins for the browser session, used by the unit tests.

FakeClock drives both the millisecond clock and the sleep coroutine, and can
fire page events at scheduled times so network activity is deterministic.
"""

import asyncio
import io
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional, Tuple

from PIL import Image
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


def make_png(size: Tuple[int, int] = (10, 10), mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeClock:
    """Millisecond clock advanced only by sleep()."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []
        self._events: List[Tuple[float, Callable[[], None]]] = []

    def __call__(self) -> float:
        return self.now

    def schedule(self, at_ms: float, callback: Callable[[], None]) -> None:
        self._events.append((at_ms, callback))
        self._events.sort(key=lambda event: event[0])

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        target = self.now + round(seconds * 1000, 6)
        while self._events and self._events[0][0] <= target:
            at_ms, callback = self._events.pop(0)
            self.now = max(self.now, at_ms)
            callback()
        self.now = target


class FakeElement:
    def __init__(self, png: bytes):
        self.png = png

    async def screenshot(self, **kwargs: Any) -> bytes:
        return self.png


class FakePage:
    """Records calls made by the capture code and replays configured outcomes."""

    def __init__(
        self,
        png: Optional[bytes] = None,
        title: str = "Example Domain",
        elements: Optional[Dict[str, FakeElement]] = None,
        missing_selectors: Tuple[str, ...] = (),
        requests_on_goto: int = 0,
        screenshot_error: Optional[Exception] = None,
        goto_gate: Optional[asyncio.Event] = None,
    ):
        self.png = png or make_png()
        self._title = title
        self.elements = elements or {}
        self.missing_selectors = missing_selectors
        self.requests_on_goto = requests_on_goto
        self.screenshot_error = screenshot_error
        self.goto_gate = goto_gate

        self.handlers: Dict[str, List[Callable[[Any], None]]] = {}
        self.goto_calls: List[Dict[str, Any]] = []
        self.selector_waits: List[Tuple[str, int]] = []
        self.function_waits: List[Tuple[str, int]] = []
        self.default_timeout: Optional[int] = None
        self.default_navigation_timeout: Optional[int] = None
        self.screenshot_calls: List[Dict[str, Any]] = []
        self.closed = False

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable[[Any], None]) -> None:
        self.handlers[event].remove(handler)
        if not self.handlers[event]:
            del self.handlers[event]

    def emit(self, event: str, payload: Any = None) -> None:
        for handler in list(self.handlers.get(event, [])):
            handler(payload)

    def set_default_timeout(self, timeout: int) -> None:
        self.default_timeout = timeout

    def set_default_navigation_timeout(self, timeout: int) -> None:
        self.default_navigation_timeout = timeout

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[int] = None) -> None:
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        for _ in range(self.requests_on_goto):
            self.emit("request")
        if self.goto_gate is not None:
            await self.goto_gate.wait()

    async def wait_for_selector(self, selector: str, timeout: Optional[int] = None) -> None:
        self.selector_waits.append((selector, timeout))
        if selector in self.missing_selectors:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def wait_for_function(self, expression: str, timeout: Optional[int] = None) -> None:
        self.function_waits.append((expression, timeout))
        if expression == "false":
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def screenshot(self, **kwargs: Any) -> bytes:
        self.screenshot_calls.append(kwargs)
        if self.screenshot_error is not None:
            raise self.screenshot_error
        return self.png

    async def title(self) -> str:
        return self._title

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        return self.elements.get(selector)


class FakeSession:
    """BrowserSession replacement handing out FakePage instances."""

    def __init__(self, page_factory: Optional[Callable[[], FakePage]] = None):
        self.page_factory = page_factory or FakePage
        self.started = 0
        self.closed = 0
        self.running = False
        self.pages: List[FakePage] = []
        self.viewports: List[Any] = []

    @property
    def is_running(self) -> bool:
        return self.running

    async def start(self) -> None:
        self.started += 1
        self.running = True

    async def close(self) -> None:
        self.closed += 1
        self.running = False

    @asynccontextmanager
    async def new_page(self, viewport: Any):
        page = self.page_factory()
        self.pages.append(page)
        self.viewports.append(viewport)
        try:
            yield page
        finally:
            page.closed = True
