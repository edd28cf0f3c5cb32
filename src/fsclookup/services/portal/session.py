"""Browser session driver for the Food Security portal.

One PortalSession drives one lookup: launch Chromium, open the landing page,
follow the ration card search link, submit the FSC number and wait for the
results page to settle. Sessions are never reused across lookups.

State machine:
    IDLE -> LAUNCHED -> ON_LANDING_PAGE -> ON_SEARCH_FORM -> SUBMITTED
         -> RESULTS_READY | NAVIGATION_FAILED

Every state except IDLE holds browser resources that release() reclaims.

Example:
    async with PortalSession() as session:
        await session.navigate_to_search_form()
        await session.submit_query("FSC0000001234")
        await session.await_results()
        html = await session.page_content()
"""

import asyncio
import re
from enum import Enum

from loguru import logger
from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from fsclookup.config.constants import (
    BROWSER_LAUNCH_ARGS,
    RESULTS_MARKER,
    SEARCH_BUTTON_LABEL,
    SEARCH_INPUT_SELECTOR,
)
from fsclookup.config.settings import Config, get_config

from .errors import FormError, LaunchError, NavigationError


class SessionState(str, Enum):
    """Lifecycle state of a portal session."""

    IDLE = "idle"
    LAUNCHED = "launched"
    ON_LANDING_PAGE = "on_landing_page"
    ON_SEARCH_FORM = "on_search_form"
    SUBMITTED = "submitted"
    RESULTS_READY = "results_ready"
    NAVIGATION_FAILED = "navigation_failed"
    RELEASED = "released"


class PortalSession:
    """Drives one browser session through the portal's search form.

    This class handles:
    - Launching an isolated headless Chromium with a realistic user agent
    - Following the ration card search link by partial URL match
    - Filling the search form and submitting it
    - Waiting for the results page to settle
    - Tearing the browser down exactly once

    Or manually:
        session = PortalSession()
        try:
            await session.acquire()
            ...
        finally:
            await session.release()
    """

    def __init__(self, config: Config | None = None):
        """Initialize session.

        Args:
            config: Settings to use (defaults to the global configuration)
        """
        self.config = config or get_config()
        self.state = SessionState.IDLE
        self.release_count = 0
        self._playwright = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def is_live(self) -> bool:
        """Whether the session holds browser resources."""
        return self._playwright is not None or self._browser is not None

    @property
    def current_url(self) -> str | None:
        """URL of the open page, or None before launch and after release."""
        return self._page.url if self._page else None

    async def __aenter__(self) -> "PortalSession":
        """Async context manager entry - launch browser."""
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - tear browser down."""
        await self.release()

    def _require_page(self) -> Page:
        if self._page is None:
            raise NavigationError(f"No browser page (session state: {self.state.value})")
        return self._page

    def _navigation_failed(self, message: str) -> NavigationError:
        self.state = SessionState.NAVIGATION_FAILED
        logger.error(message)
        return NavigationError(message)

    async def acquire(self) -> None:
        """Launch the browser and open a page.

        Raises:
            LaunchError: If Playwright or the browser process cannot start
        """
        cfg = self.config

        try:
            logger.info("Launching headless browser...")
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=cfg.headless,
                executable_path=cfg.browser_executable_path,
                args=BROWSER_LAUNCH_ARGS,
                timeout=cfg.launch_timeout_ms,
            )
            self._context = await self._browser.new_context(user_agent=cfg.user_agent)
            self._context.set_default_navigation_timeout(cfg.navigation_timeout_ms)
            self._page = await self._context.new_page()

        except Exception as e:
            logger.error(f"Failed to launch browser: {e}")
            if cfg.browser_executable_path:
                logger.warning(f"Check BROWSER_EXECUTABLE_PATH: {cfg.browser_executable_path}")
            raise LaunchError(f"Failed to launch browser: {e}") from e

        self.state = SessionState.LAUNCHED
        logger.info("Browser launched")

    async def navigate_to_search_form(self) -> None:
        """Open the landing page and follow the ration card search link.

        The link is located by a partial match on its href, since the
        portal's markup is not versioned.

        Raises:
            NavigationError: If the landing page fails to load, the link is
                missing, or the transition does not complete in time
        """
        page = self._require_page()
        url = self.config.portal_url
        fragment = self.config.search_link_fragment

        try:
            logger.info(f"Navigating to: {url}")
            await page.goto(url, wait_until="networkidle")
        except PlaywrightError as e:
            raise self._navigation_failed(f"Portal landing page unreachable: {e}") from e

        self.state = SessionState.ON_LANDING_PAGE

        link = page.locator(f'a[href*="{fragment}"]')
        if await link.count() == 0:
            raise self._navigation_failed(f"Search form link containing '{fragment}' not found")

        try:
            async with page.expect_navigation(wait_until="networkidle"):
                await link.first.click()
        except PlaywrightError as e:
            raise self._navigation_failed(f"Search form did not load: {e}") from e

        self.state = SessionState.ON_SEARCH_FORM
        logger.info(f"On search form: {self.current_url}")

    async def submit_query(self, identifier: str) -> None:
        """Enter the FSC number and activate the Search control.

        Args:
            identifier: FSC reference number

        Raises:
            FormError: If the text input or the Search control never appears
        """
        page = self._require_page()

        try:
            await page.wait_for_selector(
                SEARCH_INPUT_SELECTOR, timeout=self.config.input_timeout_ms
            )
        except PlaywrightError as e:
            logger.error(f"Search input never appeared: {e}")
            raise FormError(f"Search input never appeared: {e}") from e

        button = page.get_by_role("button", name=SEARCH_BUTTON_LABEL, exact=True)

        try:
            await page.locator(SEARCH_INPUT_SELECTOR).first.fill(identifier)
            if await button.count() == 0:
                raise FormError(f"No '{SEARCH_BUTTON_LABEL}' control on the search form")
            await button.first.click()
        except PlaywrightError as e:
            logger.error(f"Search form submission failed: {e}")
            raise FormError(f"Search form submission failed: {e}") from e

        self.state = SessionState.SUBMITTED
        logger.info(f"Submitted search for {identifier}")

    async def await_results(self) -> None:
        """Wait for the results page to settle.

        Waits for network idle, then polls for the results marker. When the
        marker never shows (no record, or a revision without it) the fixed
        settle delay is applied before extraction.

        Raises:
            NavigationError: If the page does not reach network idle in time
        """
        page = self._require_page()
        cfg = self.config

        try:
            await page.wait_for_load_state("networkidle", timeout=cfg.navigation_timeout_ms)
        except PlaywrightError as e:
            raise self._navigation_failed(f"Results page did not settle: {e}") from e

        if await self._poll_for_marker(page):
            logger.info("Results marker present")
        else:
            logger.info(
                f"Results marker not seen, applying {cfg.settle_delay_seconds}s settle delay"
            )
            await asyncio.sleep(cfg.settle_delay_seconds)

        self.state = SessionState.RESULTS_READY

    async def _poll_for_marker(self, page: Page) -> bool:
        """Poll for the results marker a bounded number of times.

        Returns:
            True if the marker appeared, False otherwise
        """
        # Case-sensitive, matching the snapshot check in RecordExtractor
        marker = page.get_by_text(re.compile(re.escape(RESULTS_MARKER)))

        for attempt in range(1, self.config.settle_poll_attempts + 1):
            try:
                if await marker.count() > 0:
                    logger.debug(f"Results marker found on attempt {attempt}")
                    return True
            except PlaywrightError as e:
                # Page may still be navigating after the postback
                logger.debug(f"Marker check attempt {attempt} failed: {e}")
            await asyncio.sleep(self.config.settle_poll_interval_seconds)

        return False

    async def page_content(self) -> str:
        """Return the HTML snapshot of the current page.

        Raises:
            NavigationError: If the page cannot be read
        """
        page = self._require_page()
        try:
            return await page.content()
        except PlaywrightError as e:
            raise self._navigation_failed(f"Could not read results page: {e}") from e

    async def release(self) -> None:
        """Tear down the browser session.

        Safe to call more than once; only the first call tears down. Errors
        are logged, never raised, so they cannot mask the lookup outcome.
        """
        if self.state == SessionState.RELEASED:
            logger.debug("Session already released")
            return

        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None

        self._context = None
        self._page = None
        self.state = SessionState.RELEASED
        self.release_count += 1
        logger.info("Browser session released")
