"""
Status Extractor - Reads the availability of the configured class
Handles the optional credit step, the day filter and the scoped
"Full" check on the class card
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import Locator, Page

from ..errors import DetectionFailure, NotFoundError, TargetNotFoundError
from ..utils.config import CheckerConfig
from ..utils.race import first_settled
from ..utils.status import normalize_status
from .frame_locator import locate

logger = logging.getLogger(__name__)

CONTAINER_XPATH = "xpath=ancestor::*[self::li or self::div][1]"
FULL_TEXT = re.compile(r"full", re.IGNORECASE)
META_SEPARATOR = " • "


@dataclass(frozen=True)
class StatusRecord:
    """Result of one detection cycle"""
    status: str
    raw_status: str
    summary: str


def build_summary(class_name: str, instructor: str = '', location: str = '') -> str:
    """Class name, plus instructor/location in parentheses when given"""
    meta = [piece for piece in (instructor, location) if piece]
    if not meta:
        return class_name
    return f"{class_name} ({META_SEPARATOR.join(meta)})"


class StatusExtractor:
    """Detects the status of one class on the schedule page"""

    def __init__(self, config: CheckerConfig):
        self.config = config

    async def detect_status(self, page: Page) -> StatusRecord:
        """
        Run the detection protocol against a logged-in schedule page

        Args:
            page: Page showing (or about to show) the session list

        Returns:
            StatusRecord for the configured class

        Raises:
            DetectionFailure: Session list never rendered or the card could not be read
            TargetNotFoundError: Class never appeared in the list
        """
        cfg = self.config

        page = await self._use_credit(page)
        try:
            await page.wait_for_timeout(cfg.settle_delay_ms)
        except PlaywrightError as e:
            raise DetectionFailure(f"Page closed before detection: {e}") from e

        if cfg.debug:
            logger.debug(f"Frame URLs: {[frame.url for frame in page.frames]}")

        # The session list is not always inside #session-slot-step, wait for the filter hint
        try:
            session_hint = await locate(
                page, cfg.session_anchor, cfg.detection_timeout_ms, cfg.poll_interval_ms
            )
        except NotFoundError as e:
            raise DetectionFailure(f"Session list did not render: {e}") from e

        try:
            await session_hint.first.scroll_into_view_if_needed()
        except PlaywrightError as e:
            raise DetectionFailure(f"Session list went away: {e}") from e

        await self._apply_day_filter(page)

        try:
            class_title = await locate(
                page, f"text={cfg.class_name}", cfg.detection_timeout_ms, cfg.poll_interval_ms
            )
        except NotFoundError as e:
            raise TargetNotFoundError(f"Class {cfg.class_name!r} not found on schedule") from e

        try:
            await class_title.first.scroll_into_view_if_needed()
            is_full = await self._is_full(class_title.first)
        except PlaywrightError as e:
            raise DetectionFailure(f"Could not inspect class card for {cfg.class_name!r}: {e}") from e
        raw_status = "Full" if is_full else "Available"

        return StatusRecord(
            status=normalize_status(raw_status),
            raw_status=raw_status,
            summary=build_summary(cfg.class_name, cfg.instructor, cfg.location)
        )

    # ==================== OPTIONAL STEPS ====================

    async def _find_credit_button(self, page: Page) -> Optional[Locator]:
        """Credit button if it becomes visible in time, else None"""
        button = page.locator(self.config.credit_selector).first
        try:
            await button.wait_for(state="visible", timeout=self.config.credit_timeout_ms)
        except PlaywrightTimeoutError:
            return None
        except PlaywrightError as e:
            logger.warning(f"Credit button lookup failed: {e}")
            return None
        return button

    async def _use_credit(self, page: Page) -> Page:
        """
        Click "use credit" if offered

        The click either navigates in place or opens a popup. Whichever
        happens first wins; a popup becomes the page for the rest of the
        cycle. If neither happens the original page is kept.

        Returns:
            Page to continue detection on
        """
        button = await self._find_credit_button(page)
        if button is None:
            logger.info("No credit button, continuing without using credit")
            return page

        timeout = self.config.popup_timeout_ms
        try:
            await button.scroll_into_view_if_needed()
            # Listeners must be armed before the click goes out
            waits = {
                'popup': asyncio.ensure_future(page.context.wait_for_event("page", timeout=timeout)),
                'navigation': asyncio.ensure_future(page.wait_for_event(
                    "framenavigated",
                    predicate=lambda frame: frame == page.main_frame,
                    timeout=timeout
                )),
            }
            race = asyncio.ensure_future(first_settled(waits))
            await asyncio.sleep(0)
            await button.click()
            outcome = await race
        except PlaywrightError as e:
            logger.warning(f"Credit step failed, continuing on current page: {e}")
            return page

        if outcome is None:
            logger.info("Credit used, no navigation or popup observed")
            return page

        kind, value = outcome
        if kind == 'popup':
            logger.info(f"Credit opened popup: {value.url}")
            try:
                await value.wait_for_load_state("domcontentloaded")
            except PlaywrightError as e:
                logger.warning(f"Popup did not finish loading: {e}")
            return value

        logger.info("Credit used, page navigated")
        try:
            await page.wait_for_load_state("domcontentloaded")
        except PlaywrightError as e:
            logger.warning(f"Page did not finish loading after credit: {e}")
        return page

    async def _apply_day_filter(self, page: Page) -> bool:
        """
        Click the day filter button if there is one

        Returns:
            True if a filter was applied
        """
        day = self.config.class_day
        if not day:
            return False

        try:
            day_button = page.get_by_role("button", name=re.compile(f"^{re.escape(day)}$", re.IGNORECASE))
            if not await day_button.count():
                logger.info(f"No '{day}' filter button, checking unfiltered list")
                return False
            await day_button.first.click()
        except PlaywrightError as e:
            logger.warning(f"Day filter '{day}' failed, checking unfiltered list: {e}")
            return False

        logger.info(f"Applied day filter: {day}")
        return True

    # ==================== CARD INSPECTION ====================

    async def _is_full(self, class_title: Locator) -> bool:
        """
        Look for a "Full" marker on the class card only

        The page lists many sessions, so the check is scoped to the
        nearest li/div around the class title.
        """
        container = class_title.locator(CONTAINER_XPATH)
        if await container.locator(self.config.full_marker_selector).count() > 0:
            return True
        return await container.get_by_text(FULL_TEXT).count() > 0
