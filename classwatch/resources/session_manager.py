"""
Session Manager - Browser session and login handling
Manages Playwright browser lifecycle, authentication and debug capture
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from ..errors import DetectionFailure
from ..utils.config import CheckerConfig

logger = logging.getLogger(__name__)

EMAIL_INPUT = "input[type='email'], input[name*='email' i], input[placeholder*='email' i]"
PASSWORD_INPUT = "input[type='password']"
LOGIN_FORM_TIMEOUT_MS = 15000


class SessionManager:
    """Manages browser session and authentication"""

    def __init__(self, config: CheckerConfig, headless: bool = True):
        self.config = config
        self.headless = headless
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.page: Optional[Page] = None

    async def start(self):
        """Initialize browser"""
        logger.info(f"Starting browser (headless={self.headless})...")
        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(headless=self.headless)
        self.page = await self.browser.new_page()
        logger.info("Browser started")

    async def stop(self):
        """Close browser and cleanup"""
        if self.browser:
            await self.browser.close()
        if self.playwright:
            await self.playwright.stop()
        self.page = None
        self.browser = None
        self.playwright = None
        logger.info("Browser stopped")

    async def login(self):
        """
        Sign in and open the schedule page

        Raises:
            DetectionFailure: If the login form never shows up or navigation fails
        """
        if not self.page:
            raise RuntimeError("Browser not started. Call start() first.")

        page = self.page
        try:
            logger.info(f"Opening {self.config.start_url}...")
            await page.goto(self.config.start_url, wait_until="domcontentloaded")

            sign_in_link = page.get_by_role("link", name=re.compile(r"sign in|login", re.IGNORECASE))
            if await sign_in_link.count():
                await sign_in_link.first.click()

            email_input = page.locator(EMAIL_INPUT).first
            password_input = page.locator(PASSWORD_INPUT).first

            await email_input.wait_for(timeout=LOGIN_FORM_TIMEOUT_MS)
            await email_input.fill(self.config.username)
            await password_input.fill(self.config.password)

            submit_button = page.get_by_role("button", name=re.compile(r"sign in|log in|login", re.IGNORECASE))
            if await submit_button.count():
                await submit_button.first.click()
            else:
                await password_input.press("Enter")

            if self.config.schedule_url:
                logger.info(f"Opening schedule {self.config.schedule_url}...")
                await page.goto(self.config.schedule_url, wait_until="domcontentloaded")

        except PlaywrightError as e:
            raise DetectionFailure(f"Login failed: {e}") from e

        logger.info("Login submitted")

    async def capture_screenshot(self, path: Union[str, Path] = 'debug.png') -> Optional[Path]:
        """
        Save a full-page screenshot for debugging

        Returns:
            Path of the screenshot, or None if it could not be taken
        """
        if not self.page:
            return None

        screenshot_path = Path(path).resolve()
        try:
            await self.page.screenshot(path=str(screenshot_path), full_page=True)
        except PlaywrightError as e:
            logger.warning(f"Failed to capture screenshot: {e}")
            return None

        logger.info(f"Saved screenshot to {screenshot_path}")
        return screenshot_path

    async def __aenter__(self):
        """Context manager entry"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        await self.stop()
