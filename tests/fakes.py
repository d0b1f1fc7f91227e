"""
Test doubles for the parts of the Playwright async API the checker uses.
"""

import asyncio
from typing import Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class FakeLocator:
    """Locator with a fixed match count and canned child locators."""

    def __init__(
        self,
        count: int = 0,
        children: Optional[Dict[str, "FakeLocator"]] = None,
        texts: Optional[List[str]] = None,
        on_click: Optional[Callable[[], None]] = None,
        wait_error: Optional[Exception] = None,
        scroll_error: Optional[Exception] = None,
        count_error: Optional[Exception] = None,
    ):
        self._count = count
        self.children = children or {}
        self.texts = texts or []
        self.on_click = on_click
        self.wait_error = wait_error
        self.scroll_error = scroll_error
        self.count_error = count_error
        self.clicks = 0
        self.scrolled = 0

    @property
    def first(self):
        return self

    async def count(self) -> int:
        if self.count_error:
            raise self.count_error
        return self._count

    async def wait_for(self, state: str = "visible", timeout: float = 30000):
        if self.wait_error:
            raise self.wait_error
        if not self._count:
            await asyncio.sleep(timeout / 1000)
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded.")

    async def scroll_into_view_if_needed(self):
        if self.scroll_error:
            raise self.scroll_error
        self.scrolled += 1

    async def click(self):
        self.clicks += 1
        if self.on_click:
            self.on_click()

    def locator(self, selector: str) -> "FakeLocator":
        return self.children.get(selector, FakeLocator(0))

    def get_by_text(self, pattern) -> "FakeLocator":
        return FakeLocator(sum(1 for text in self.texts if pattern.search(text)))


class DelayedLocator:
    """Locator whose count turns positive after `after` queries."""

    def __init__(self, after: int, error_until: int = 0):
        self.after = after
        self.error_until = error_until
        self.queries = 0

    @property
    def first(self):
        return self

    async def count(self) -> int:
        self.queries += 1
        if self.queries <= self.error_until:
            raise PlaywrightError("Frame was detached")
        return 1 if self.queries > self.after else 0


class FakeFrame:
    def __init__(self, url: str, selectors: Optional[Dict[str, object]] = None):
        self.url = url
        self.selectors = selectors or {}

    def locator(self, selector: str):
        return self.selectors.get(selector, FakeLocator(0))


class FakeContext:
    """Browser context that may emit a popup page after the credit click."""

    def __init__(self, popup: Optional["FakePage"] = None):
        self.popup = popup
        self.clicked = asyncio.Event()
        self.listening = False

    async def wait_for_event(self, event: str, timeout: float = 30000):
        self.listening = True
        if self.popup is None:
            await asyncio.sleep(timeout / 1000)
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded while waiting for event \"{event}\"")
        await asyncio.wait_for(self.clicked.wait(), timeout / 1000)
        return self.popup


class FakePage:
    """Page with a main frame, optional child frames and a selector table."""

    def __init__(
        self,
        selectors: Optional[Dict[str, object]] = None,
        child_frames: Optional[List[FakeFrame]] = None,
        buttons: Optional[Dict[str, FakeLocator]] = None,
        context: Optional[FakeContext] = None,
        url: str = "https://example.test/schedule",
    ):
        self.url = url
        self.selectors = selectors or {}
        self.main_frame = FakeFrame(url)
        self.child_frames = child_frames or []
        self.buttons = buttons or {}
        self.context = context or FakeContext()
        self.load_states: List[str] = []

    @property
    def frames(self):
        return [self.main_frame] + self.child_frames

    def locator(self, selector: str):
        return self.selectors.get(selector, FakeLocator(0))

    def get_by_role(self, role: str, name=None) -> FakeLocator:
        for label, button in self.buttons.items():
            if name.search(label):
                return button
        return FakeLocator(0)

    async def wait_for_timeout(self, timeout: float):
        await asyncio.sleep(0)

    async def wait_for_event(self, event: str, predicate=None, timeout: float = 30000):
        await asyncio.sleep(timeout / 1000)
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded while waiting for event \"{event}\"")

    async def wait_for_load_state(self, state: str = "load"):
        self.load_states.append(state)


class FakeNotifier:
    def __init__(self, error: Optional[Exception] = None):
        self.sent = []
        self.error = error

    async def send(self, message: str, title: str = "Class Availability"):
        if self.error:
            raise self.error
        self.sent.append((message, title))
