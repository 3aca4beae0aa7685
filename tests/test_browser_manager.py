"""Tests for browser context request blocking."""

import pytest

from catalog_scraper.scrapers.utils.browser_manager import _block_trackers


class FakeRequest:
    def __init__(self, url: str):
        self.url = url


class FakeRoute:
    """Records whether a routed request was aborted or let through."""

    def __init__(self, url: str):
        self.request = FakeRequest(url)
        self.outcome = None

    async def abort(self):
        self.outcome = "aborted"

    async def continue_(self):
        self.outcome = "continued"


@pytest.mark.parametrize(
    "url,outcome",
    [
        ("https://www.google-analytics.com/collect?v=2", "aborted"),
        ("https://www.googletagmanager.com/gtm.js?id=GTM-1", "aborted"),
        ("https://www.facebook.com/tr?id=1", "aborted"),
        ("https://shop.example/products/widget", "continued"),
        ("https://cdn.shop.example/app.js", "continued"),
    ],
)
async def test_block_trackers(url, outcome):
    route = FakeRoute(url)

    await _block_trackers(route)

    assert route.outcome == outcome
