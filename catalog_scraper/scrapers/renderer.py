"""Document renderer interface and its Playwright implementation.

The crawl core never touches the browser directly. It asks a renderer to
navigate, to let the page settle, and for a snapshot of the rendered DOM
that discovery and extraction query.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import structlog
from playwright.async_api import BrowserContext, Page, TimeoutError as PlaywrightTimeoutError

from catalog_scraper.scrapers.document import RenderedPage
from catalog_scraper.scrapers.pacing import SessionIdentity
from catalog_scraper.scrapers.utils.browser_manager import BrowserManager


logger = structlog.get_logger(__name__)

# How long the settle step waits for a presence selector before moving on
PRESENCE_WAIT_TIMEOUT = 10.0  # seconds

CURSOR_COLORS = {
    "browsing": "rgba(255, 165, 0, 0.7)",
    "reading": "rgba(0, 255, 0, 0.7)",
    "interaction": "rgba(0, 0, 255, 0.7)",
}

# Visible pointer for watching a humanized crawl in a headed browser
VISUAL_CURSOR_JS = """
(() => {
  const add = () => {
    if (document.getElementById('bot-cursor')) return;
    const cursor = document.createElement('div');
    cursor.id = 'bot-cursor';
    cursor.style.cssText = 'position: fixed; width: 20px; height: 20px;' +
      'background: rgba(255, 0, 0, 0.7); border: 2px solid #ff0000; border-radius: 50%;' +
      'pointer-events: none; z-index: 999999; transition: all 0.1s ease;';
    document.body.appendChild(cursor);
  };
  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', add);
  } else {
    add();
  }
})();
"""

MOVE_CURSOR_JS = """
([x, y, color]) => {
  const cursor = document.getElementById('bot-cursor');
  if (cursor) {
    cursor.style.left = (x - 10) + 'px';
    cursor.style.top = (y - 10) + 'px';
    cursor.style.background = color;
  }
}
"""


class BaseRenderer(ABC):
    """Abstract document renderer consumed by the crawl controller."""

    @abstractmethod
    async def navigate(self, url: str, timeout: float) -> None:
        """Load a URL.

        Args:
            url: Absolute URL
            timeout: Seconds before the attempt is abandoned

        Raises:
            Exception: Any failure to load; callers retry
        """

    @abstractmethod
    async def settle(self, presence_selector: Optional[str], settle_delay: float) -> None:
        """Wait for dynamic content after a listing page load. Never raises on a missing selector."""

    @abstractmethod
    async def snapshot(self) -> RenderedPage:
        """Capture the current rendered document."""

    async def move_pointer(self, x: int, y: int, context: str = "interaction") -> None:
        """Move the pointer. Renderers without a pointer ignore this."""

    async def scroll_by(self, distance: int) -> None:
        """Scroll the page vertically. Renderers without scrolling ignore this."""


class PlaywrightRenderer(BaseRenderer):
    """Renderer backed by a single Playwright page.

    Use as an async context manager:

        async with PlaywrightRenderer(manager, identity=pacer.identity) as renderer:
            ...
    """

    def __init__(
        self,
        browser_manager: BrowserManager,
        identity: Optional[SessionIdentity] = None,
        visual: bool = False,
        debug: bool = False,
    ):
        self._manager = browser_manager
        self._identity = identity
        self._visual = visual
        self._debug = debug
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def start(self) -> None:
        init_scripts = (VISUAL_CURSOR_JS,) if self._visual else ()
        self._context = await self._manager.new_context(self._identity, init_scripts=init_scripts)
        self._page = await self._context.new_page()

        if self._debug:
            self._page.on(
                "console",
                lambda msg: logger.debug("page_console", type=msg.type, text=msg.text),
            )
            self._page.on(
                "pageerror",
                lambda err: logger.warning("page_error", error=str(err)),
            )

    async def close(self) -> None:
        if self._context:
            await self._context.close()
            self._context = None
            self._page = None

    async def __aenter__(self) -> "PlaywrightRenderer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Renderer not started. Call start() first.")
        return self._page

    async def navigate(self, url: str, timeout: float) -> None:
        logger.info("navigating", url=url)
        await self.page.goto(url, wait_until="networkidle", timeout=timeout * 1000)

    async def settle(self, presence_selector: Optional[str], settle_delay: float) -> None:
        if presence_selector:
            try:
                await self.page.wait_for_selector(
                    presence_selector, timeout=PRESENCE_WAIT_TIMEOUT * 1000
                )
            except PlaywrightTimeoutError:
                logger.warning("presence_selector_not_found", selector=presence_selector)
        if settle_delay > 0:
            await asyncio.sleep(settle_delay)

    async def snapshot(self) -> RenderedPage:
        html = await self.page.content()
        return RenderedPage(html, self.page.url)

    async def move_pointer(self, x: int, y: int, context: str = "interaction") -> None:
        await self.page.mouse.move(x, y)
        if self._visual:
            color = CURSOR_COLORS.get(context, CURSOR_COLORS["interaction"])
            await self.page.evaluate(MOVE_CURSOR_JS, [x, y, color])

    async def scroll_by(self, distance: int) -> None:
        await self.page.mouse.wheel(0, distance)
