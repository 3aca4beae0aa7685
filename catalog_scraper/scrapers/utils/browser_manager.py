"""Playwright browser lifecycle manager.

Owns the Playwright driver and one Chromium instance per crawl session,
and creates browser contexts configured with the session identity.
"""

import asyncio
from typing import Optional

import structlog
from playwright.async_api import async_playwright, Browser, BrowserContext, Playwright, Route

from catalog_scraper.scrapers.pacing import SessionIdentity

logger = structlog.get_logger(__name__)


DEFAULT_VIEWPORT = {"width": 1920, "height": 1080}

# Third-party analytics requests dropped when tracker blocking is on
TRACKER_MARKERS = (
    "google-analytics",
    "googletagmanager",
    "facebook.com",
    "linkedin.com/analytics",
    "doubleclick",
    "googlesyndication",
)

EXTRA_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}


async def _block_trackers(route: Route) -> None:
    if any(marker in route.request.url for marker in TRACKER_MARKERS):
        await route.abort()
    else:
        await route.continue_()


class BrowserManager:
    """Manages the Playwright browser lifecycle.

    Launches Chromium once and hands out contexts. With an identity the
    context gets that user agent and viewport, the stealth init script,
    extra headers and tracker blocking; without one it is a plain context.
    """

    def __init__(self, headless: bool = True, slow_mo: float = 0):
        self._headless = headless
        self._slow_mo = slow_mo
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        """Launch the browser. Safe to call more than once."""
        async with self._lock:
            if self._browser:
                return
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self._headless,
                slow_mo=self._slow_mo,
                args=[
                    "--disable-blink-features=AutomationControlled",
                    "--disable-dev-shm-usage",
                    "--no-sandbox",
                ],
            )
            logger.info("browser_started", headless=self._headless, slow_mo=self._slow_mo)

    async def stop(self) -> None:
        """Close the browser and the Playwright driver."""
        async with self._lock:
            if self._browser:
                await self._browser.close()
                self._browser = None
            if self._playwright:
                await self._playwright.stop()
                self._playwright = None
            logger.info("browser_stopped")

    async def new_context(
        self,
        identity: Optional[SessionIdentity] = None,
        init_scripts: tuple = (),
    ) -> BrowserContext:
        """Create a browser context, launching the browser if needed."""
        if not self._browser:
            await self.start()

        if identity is None:
            context = await self._browser.new_context(viewport=DEFAULT_VIEWPORT)
        else:
            context = await self._browser.new_context(
                user_agent=identity.user_agent,
                viewport={"width": identity.viewport[0], "height": identity.viewport[1]},
                locale="en-US",
                extra_http_headers=EXTRA_HEADERS,
            )
            await context.add_init_script(STEALTH_JS)
            await context.route("**/*", _block_trackers)

        for script in init_scripts:
            await context.add_init_script(script)

        logger.info(
            "browser_context_created",
            humanized=identity is not None,
            user_agent=identity.user_agent[:50] if identity else None,
            viewport=identity.viewport if identity else None,
        )
        return context


# Minimal stealth JS to mask automation signals
STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
window.chrome = window.chrome || {};
window.chrome.runtime = window.chrome.runtime || {};
"""
