"""Scraper utilities for navigation retry, identities and browser lifecycle."""

from .retry import navigate_with_retry, DEFAULT_RETRY_DELAY
from .user_agents import USER_AGENTS


__all__ = [
    # Retry
    "navigate_with_retry",
    "DEFAULT_RETRY_DELAY",
    # User agents
    "USER_AGENTS",
]
