"""
Frame Locator - Find an element in the page or any of its frames
Polls until the element shows up, tolerating frames that attach late
or get torn down while being queried
"""

import asyncio
import logging
import time
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from ..errors import NotFoundError

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 250


async def locate(
    page: Page,
    selector: str,
    timeout_ms: int = 20000,
    poll_interval_ms: int = POLL_INTERVAL_MS
) -> Locator:
    """
    Wait for a selector to match in the page or in one of its child frames

    Every tick queries the page first, then each attached child frame in
    the order Playwright reports them. Query errors only mean "no match
    this tick"; the last one is chained to the final NotFoundError.

    Args:
        page: Root page (or popup promoted to root)
        selector: Playwright selector, e.g. "text=Level 1"
        timeout_ms: Overall deadline
        poll_interval_ms: Sleep between ticks

    Returns:
        Locator with at least one match

    Raises:
        NotFoundError: Nothing matched before the deadline
    """
    deadline = time.monotonic() + timeout_ms / 1000
    last_error: Optional[BaseException] = None
    ticks = 0

    while True:
        ticks += 1
        try:
            direct = page.locator(selector)
            if await direct.count():
                logger.debug(f"Found {selector!r} in page after {ticks} tick(s)")
                return direct
        except PlaywrightError as e:
            last_error = e

        main_frame = page.main_frame
        for frame in page.frames:
            if frame is main_frame:
                continue
            try:
                loc = frame.locator(selector)
                if await loc.count():
                    logger.debug(f"Found {selector!r} in frame {frame.url} after {ticks} tick(s)")
                    return loc
            except PlaywrightError as e:
                last_error = e

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        await asyncio.sleep(min(poll_interval_ms / 1000, remaining))

    logger.warning(f"Gave up on {selector!r} after {timeout_ms} ms ({ticks} ticks)")
    raise NotFoundError(selector, timeout_ms, last_error) from last_error
