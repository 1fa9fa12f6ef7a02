#!/usr/bin/env python3
"""
Unit tests for core/waits.py
"""

import os
import sys
import unittest

# Add src directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from screenshot_mcp.core.errors import (
    ErrorCode,
    InvalidSelectorError,
    InvalidWaitConditionError,
    UnsafeSelectorError,
    WaitTimeoutError,
)
from screenshot_mcp.core.models import WaitCondition
from screenshot_mcp.core.waits import navigate, wait_for_condition, wait_for_network_idle
from screenshot_mcp.tests.fakes import FakeClock, FakePage


def schedule_requests(clock, page, every_ms, until_ms):
    for at_ms in range(every_ms, until_ms + 1, every_ms):
        clock.schedule(at_ms, lambda: page.emit("request"))


class TestNetworkIdle(unittest.IsolatedAsyncioTestCase):
    """Network idle poll loop driven by a fake clock"""

    async def test_times_out_when_threshold_exceeds_activity_period(self):
        clock, page = FakeClock(), FakePage()
        schedule_requests(clock, page, 2000, 10000)

        with self.assertRaises(WaitTimeoutError) as cm:
            await wait_for_network_idle(page, 2500, 3000, clock=clock, sleep=clock.sleep)

        self.assertEqual(cm.exception.code, ErrorCode.TIMEOUT)
        self.assertGreaterEqual(clock.now, 3000)
        self.assertLess(clock.now, 3200)

    async def test_short_threshold_is_met_between_requests(self):
        clock, page = FakeClock(), FakePage()
        schedule_requests(clock, page, 2000, 10000)

        await wait_for_network_idle(page, 500, 3000, clock=clock, sleep=clock.sleep)

        self.assertEqual(clock.now, 500)

    async def test_activity_restarts_the_idle_window(self):
        clock, page = FakeClock(), FakePage()
        clock.schedule(300, lambda: page.emit("response"))

        await wait_for_network_idle(page, 500, 5000, clock=clock, sleep=clock.sleep)

        self.assertEqual(clock.now, 800)

    async def test_listeners_are_removed(self):
        clock, page = FakeClock(), FakePage()
        await wait_for_network_idle(page, 200, 1000, clock=clock, sleep=clock.sleep)
        self.assertEqual(page.handlers, {})

        schedule_requests(clock, page, 100, 3000)
        with self.assertRaises(WaitTimeoutError):
            await wait_for_network_idle(page, 500, 1000, clock=clock, sleep=clock.sleep)
        self.assertEqual(page.handlers, {})


class TestWaitForCondition(unittest.IsolatedAsyncioTestCase):
    """Dispatch on wait condition type"""

    def setUp(self):
        self.clock = FakeClock()
        self.page = FakePage(missing_selectors=("#never",))

    async def wait(self, **condition):
        await wait_for_condition(self.page, WaitCondition(**condition), clock=self.clock, sleep=self.clock.sleep)

    async def test_selector_wait_uses_condition_timeout(self):
        await self.wait(type="selector", value="  #app  ", timeout=4000)
        self.assertEqual(self.page.selector_waits, [("#app", 4000)])

    async def test_selector_timeout_becomes_wait_timeout(self):
        with self.assertRaises(WaitTimeoutError):
            await self.wait(type="selector", value="#never")

    async def test_missing_selector_is_invalid(self):
        with self.assertRaises(InvalidSelectorError) as cm:
            await self.wait(type="selector")
        self.assertEqual(cm.exception.message, "Invalid selector provided")

    async def test_dangerous_selector_is_rejected_before_the_page(self):
        with self.assertRaises(UnsafeSelectorError):
            await self.wait(type="selector", value="img[onerror=alert(1)]")
        self.assertEqual(self.page.selector_waits, [])

    async def test_function_wait(self):
        await self.wait(type="function", value="window.ready === true", timeout=2000)
        self.assertEqual(self.page.function_waits, [("window.ready === true", 2000)])

        with self.assertRaises(WaitTimeoutError):
            await self.wait(type="function", value="false")

    async def test_function_wait_requires_value(self):
        with self.assertRaises(InvalidWaitConditionError):
            await self.wait(type="function")

    async def test_timeout_wait_sleeps_for_value(self):
        await self.wait(type="timeout", value=1500)
        self.assertEqual(self.clock.sleeps, [1.5])
        self.assertEqual(self.clock.now, 1500)

    async def test_timeout_wait_rejects_non_integer(self):
        with self.assertRaises(InvalidWaitConditionError):
            await self.wait(type="timeout", value="soon")

    async def test_networkidle_prefers_value_over_idle_time(self):
        await self.wait(type="networkidle", value="300", idleTime=900)
        self.assertEqual(self.clock.now, 300)

    async def test_networkidle_falls_back_to_idle_time(self):
        await self.wait(type="networkidle", idleTime=900)
        self.assertEqual(self.clock.now, 900)

    async def test_networkidle_default_threshold(self):
        await self.wait(type="networkidle")
        self.assertEqual(self.clock.now, 2000)

    async def test_unknown_type(self):
        with self.assertRaises(InvalidWaitConditionError) as cm:
            await self.wait(type="animation")
        self.assertEqual(cm.exception.message, "Unknown wait condition type: animation")


class TestNavigate(unittest.IsolatedAsyncioTestCase):
    """Navigation completion events"""

    async def test_direct_events(self):
        for event, expected in [("load", "load"), ("domcontentloaded", "domcontentloaded"), ("networkidle0", "networkidle")]:
            page, clock = FakePage(), FakeClock()
            await navigate(page, "https://example.com", event, 30000, clock=clock, sleep=clock.sleep)
            self.assertEqual(page.goto_calls[0]["wait_until"], expected)
            self.assertEqual(page.goto_calls[0]["timeout"], 30000)

    async def test_networkidle2_waits_for_quiet_window(self):
        page, clock = FakePage(requests_on_goto=2), FakeClock()

        await navigate(page, "https://example.com", "networkidle2", 30000, clock=clock, sleep=clock.sleep)

        self.assertEqual(page.goto_calls[0]["wait_until"], "load")
        self.assertEqual(clock.now, 500)
        self.assertEqual(page.handlers, {})

    async def test_networkidle2_tolerates_finished_requests(self):
        page, clock = FakePage(requests_on_goto=4), FakeClock()
        clock.schedule(200, lambda: page.emit("requestfinished"))
        clock.schedule(300, lambda: page.emit("requestfailed"))

        await navigate(page, "https://example.com", "networkidle2", 30000, clock=clock, sleep=clock.sleep)

        self.assertEqual(clock.now, 800)

    async def test_networkidle2_times_out_with_busy_connections(self):
        page, clock = FakePage(requests_on_goto=3), FakeClock()

        with self.assertRaises(WaitTimeoutError):
            await navigate(page, "https://example.com", "networkidle2", 1000, clock=clock, sleep=clock.sleep)
        self.assertEqual(page.handlers, {})

    async def test_unknown_event(self):
        page, clock = FakePage(), FakeClock()
        with self.assertRaises(InvalidWaitConditionError):
            await navigate(page, "https://example.com", "idle", 1000, clock=clock, sleep=clock.sleep)


if __name__ == "__main__":
    unittest.main()
