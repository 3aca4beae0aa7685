"""Exception hierarchy for the scraper."""

from typing import Optional


class ScraperError(Exception):
    """Base class for all scraper errors."""


class ProfileError(ScraperError):
    """A site profile is unknown, unreadable or malformed.

    Always fatal: raised before any navigation happens.
    """


class NavigationError(ScraperError):
    """The renderer could not load a URL after exhausting its retries."""

    def __init__(self, url: str, attempts: int, cause: Optional[BaseException] = None):
        self.url = url
        self.attempts = attempts
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Navigation to {url} failed after {attempts} attempt(s){detail}")
