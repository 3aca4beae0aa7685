"""Pacing between renderer interactions.

Two schedulers share one interface:

- PlainPacer waits a short fixed delay between candidates and pages and
  does nothing else.
- HumanizedPacer draws delays from context-specific ranges, moves the
  pointer, sometimes scrolls, and picks a session identity (user agent and
  viewport) once at construction.

Pacing only affects timing and how interactions look to the site. It never
changes which records a crawl produces.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Sequence, Tuple

import structlog

from catalog_scraper.scrapers.utils.user_agents import USER_AGENTS


logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]

VIEWPORTS: Tuple[Tuple[int, int], ...] = (
    (1920, 1080),
    (1366, 768),
    (1440, 900),
    (1536, 864),
    (1280, 720),
)

# Delay ranges in seconds
CONTEXT_DELAYS: Dict[str, Tuple[float, float]] = {
    "browsing": (1.0, 3.0),
    "reading": (1.0, 3.0),
    "interaction": (1.0, 3.0),
}
BETWEEN_CANDIDATES_DELAY = (2.0, 5.0)
BETWEEN_PAGES_DELAY = (5.0, 10.0)
SCROLL_PAUSE = (0.5, 1.2)
SCROLL_DISTANCE = (200, 700)
SCROLL_PROBABILITY = 0.3
POINTER_X = (100, 1200)
POINTER_Y = (100, 800)

PLAIN_DELAY = 1.0


@dataclass(frozen=True)
class SessionIdentity:
    """Browser identity chosen once per humanized session."""

    user_agent: str
    viewport: Tuple[int, int]


class PlainPacer:
    """Fixed short delay between candidates and pages."""

    identity: Optional[SessionIdentity] = None

    def __init__(self, delay: float = PLAIN_DELAY, sleep: Sleep = asyncio.sleep):
        self.delay = delay
        self._sleep = sleep

    async def simulate(self, renderer, context: str) -> None:
        """Interaction pauses are a no-op in plain mode."""

    async def between_candidates(self) -> None:
        await self._sleep(self.delay)

    async def between_pages(self) -> None:
        await self._sleep(self.delay)


class HumanizedPacer:
    """Randomized delays plus simulated pointer and scroll activity.

    Args:
        rng: Random source, injectable for deterministic tests
        sleep: Awaitable sleep function
        user_agents: Identity strings to choose from
        viewports: Viewport sizes to choose from
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        sleep: Sleep = asyncio.sleep,
        user_agents: Sequence[str] = USER_AGENTS,
        viewports: Sequence[Tuple[int, int]] = VIEWPORTS,
    ):
        self._rng = rng or random.Random()
        self._sleep = sleep
        self.identity = SessionIdentity(
            user_agent=self._rng.choice(list(user_agents)),
            viewport=self._rng.choice(list(viewports)),
        )
        logger.info(
            "session_identity_chosen",
            user_agent=self.identity.user_agent[:50],
            viewport=f"{self.identity.viewport[0]}x{self.identity.viewport[1]}",
        )

    def _uniform(self, bounds: Tuple[float, float]) -> float:
        return self._rng.uniform(*bounds)

    async def simulate(self, renderer, context: str) -> None:
        """Pause around a renderer interaction the way a person might.

        Moves the pointer, waits a context-specific delay and, with fixed
        probability, scrolls and pauses again.
        """
        delay = self._uniform(CONTEXT_DELAYS.get(context, CONTEXT_DELAYS["interaction"]))
        x = self._rng.randint(*POINTER_X)
        y = self._rng.randint(*POINTER_Y)
        logger.debug("human_behavior", context=context, delay=round(delay, 2), x=x, y=y)

        await renderer.move_pointer(x, y, context)
        await self._sleep(delay)

        if self._rng.random() < SCROLL_PROBABILITY:
            distance = self._rng.randint(*SCROLL_DISTANCE)
            logger.debug("human_scroll", distance=distance)
            await renderer.scroll_by(distance)
            await self._sleep(self._uniform(SCROLL_PAUSE))

    async def between_candidates(self) -> None:
        await self._sleep(self._uniform(BETWEEN_CANDIDATES_DELAY))

    async def between_pages(self) -> None:
        delay = self._uniform(BETWEEN_PAGES_DELAY)
        logger.info("pausing_before_next_page", delay=round(delay, 2))
        await self._sleep(delay)


def create_pacer(humanize: bool, sleep: Sleep = asyncio.sleep):
    """Pick the pacing scheduler for a session."""
    if humanize:
        return HumanizedPacer(sleep=sleep)
    return PlainPacer(sleep=sleep)
