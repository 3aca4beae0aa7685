"""Test doubles and HTML builders shared across test modules."""

from typing import Dict, List, Optional, Tuple

from catalog_scraper.schemas.profile import SiteProfile
from catalog_scraper.scrapers.document import RenderedPage
from catalog_scraper.scrapers.renderer import BaseRenderer


BASE_URL = "https://shop.example/catalog"


class FakeRenderer(BaseRenderer):
    """In-memory renderer serving HTML fixtures by URL.

    URLs listed in `failures` raise on navigation that many times (-1 means
    always). Unknown URLs render an empty document.
    """

    def __init__(self, pages: Optional[Dict[str, str]] = None, failures: Optional[Dict[str, int]] = None):
        self.pages = dict(pages or {})
        self.failures = dict(failures or {})
        self.navigations: List[str] = []
        self.settles: List[Tuple[Optional[str], float]] = []
        self.pointer_moves: List[Tuple[int, int, str]] = []
        self.scrolls: List[int] = []
        self.current_url = ""

    async def navigate(self, url: str, timeout: float) -> None:
        self.navigations.append(url)
        remaining = self.failures.get(url, 0)
        if remaining != 0:
            if remaining > 0:
                self.failures[url] = remaining - 1
            raise RuntimeError(f"net::ERR_CONNECTION_RESET at {url}")
        self.current_url = url

    async def settle(self, presence_selector: Optional[str], settle_delay: float) -> None:
        self.settles.append((presence_selector, settle_delay))

    async def snapshot(self) -> RenderedPage:
        return RenderedPage(self.pages.get(self.current_url, "<html><body></body></html>"), self.current_url)

    async def move_pointer(self, x: int, y: int, context: str = "interaction") -> None:
        self.pointer_moves.append((x, y, context))

    async def scroll_by(self, distance: int) -> None:
        self.scrolls.append(distance)


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_profile(**overrides) -> SiteProfile:
    """Build a small test profile; keyword arguments replace top-level sections."""
    data = {
        "site_name": "Test Shop",
        "base_url": BASE_URL,
        "pagination_template": "?page={page}",
        "discovery_rules": {
            "container_selectors": [".grid"],
            "link_selectors": ["a.product-link", ".card a"],
            "title_selectors": [".name"],
        },
        "field_rules": {
            "title": {"selectors": ["h1"]},
            "description": {"selectors": [".description"]},
            "image": {"selectors": [".gallery img"]},
            "price": {"selectors": [".price"]},
            "features": {"selectors": [".highlight"], "heading_keywords": ["features"]},
        },
        "navigation_policy": {"presence_selector": ".grid", "settle_delay": 0, "max_retries": 3, "timeout": 5},
        "filter_policy": {
            "skip_url_substrings": ["/cart"],
            "required_url_substrings": ["/products/"],
            "min_description_length": 20,
            "blocked_title_keywords": ["404"],
            "blocked_description_keywords": ["coming soon"],
        },
    }
    data.update(overrides)
    return SiteProfile.model_validate(data)


def listing_html(*products: Tuple[str, str]) -> str:
    """Listing page with one `a.product-link` per (slug, name)."""
    links = "".join(
        f'<a class="product-link" href="/products/{slug}"><span class="name">{name}</span></a>'
        for slug, name in products
    )
    return f'<html><body><div class="grid">{links}</div></body></html>'


def product_html(title: str, description: str = "A sturdy widget. Built to last. Ships fast.") -> str:
    return (
        "<html><body>"
        f"<h1>{title}</h1>"
        f'<div class="description">{description}</div>'
        '<div class="price">$19.99</div>'
        "</body></html>"
    )
