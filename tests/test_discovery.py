"""Tests for product link discovery on listing pages."""

from catalog_scraper.scrapers.base import Candidate
from catalog_scraper.schemas.profile import FilterPolicy
from catalog_scraper.scrapers.discovery import discover, url_allowed
from catalog_scraper.scrapers.document import RenderedPage

from tests.helpers import BASE_URL, listing_html, make_profile


def page_for(html: str) -> RenderedPage:
    return RenderedPage(html, BASE_URL)


class TestDiscover:
    """Candidate discovery."""

    def test_resolves_urls_and_titles(self, profile):
        page = page_for(listing_html(("gps-1", "GPS One"), ("gps-2", "GPS Two")))

        candidates = discover(page, profile)

        assert candidates == [
            Candidate(url="https://shop.example/products/gps-1", title="GPS One"),
            Candidate(url="https://shop.example/products/gps-2", title="GPS Two"),
        ]

    def test_first_matching_selector_wins(self, profile):
        html = """
        <div class="grid">
          <a class="product-link" href="/products/first">First</a>
          <div class="card"><a href="/products/second">Second</a></div>
        </div>
        """
        candidates = discover(page_for(html), profile)

        assert [c.url for c in candidates] == ["https://shop.example/products/first"]

    def test_falls_through_to_next_selector(self, profile):
        html = '<div class="card"><a href="/products/second">Second</a></div>'

        candidates = discover(page_for(html), profile)

        assert [c.title for c in candidates] == ["Second"]

    def test_first_selector_preempts_even_when_filtered_out(self, profile):
        html = """
        <a class="product-link" href="/cart">Cart</a>
        <div class="card"><a href="/products/second">Second</a></div>
        """
        assert discover(page_for(html), profile) == []

    def test_dedupes_by_url_keeping_first_title(self, profile):
        html = """
        <a class="product-link" href="/products/a">Alpha</a>
        <a class="product-link" href="https://shop.example/products/a">Alpha again</a>
        <a class="product-link" href="/products/b">Beta</a>
        """
        candidates = discover(page_for(html), profile)

        assert [(c.url, c.title) for c in candidates] == [
            ("https://shop.example/products/a", "Alpha"),
            ("https://shop.example/products/b", "Beta"),
        ]

    def test_applies_url_filters(self, profile):
        html = """
        <a class="product-link" href="/products/a">A</a>
        <a class="product-link" href="/cart/products/x">In cart</a>
        <a class="product-link" href="/blog/post">Blog</a>
        """
        candidates = discover(page_for(html), profile)

        assert [c.url for c in candidates] == ["https://shop.example/products/a"]

    def test_skips_links_without_href(self, profile):
        html = '<a class="product-link">Nowhere</a><a class="product-link" href="/products/a">A</a>'

        assert len(discover(page_for(html), profile)) == 1

    def test_no_match_returns_empty(self, profile):
        assert discover(page_for("<p>Nothing to see</p>"), profile) == []


class TestTitleResolution:
    """Fallback order for candidate titles."""

    def test_element_text_when_title_selectors_miss(self, profile):
        html = '<a class="product-link" href="/products/a">  Widget\n   Pro </a>'

        assert discover(page_for(html), profile)[0].title == "Widget Pro"

    def test_title_attribute(self, profile):
        html = '<a class="product-link" href="/products/a" title="From attribute"></a>'

        assert discover(page_for(html), profile)[0].title == "From attribute"

    def test_alt_attribute(self, profile):
        html = '<a class="product-link" href="/products/a" alt="From alt"></a>'

        assert discover(page_for(html), profile)[0].title == "From alt"

    def test_positional_placeholder(self, profile):
        html = """
        <a class="product-link" href="/products/a">A</a>
        <a class="product-link" href="/products/b"><img src="/b.png"></a>
        """
        candidates = discover(page_for(html), profile)

        assert candidates[1].title == "Product 2"

    def test_title_selector_is_scoped_to_link(self):
        profile = make_profile(
            discovery_rules={"link_selectors": [".card a"], "title_selectors": [".name"]},
        )
        html = """
        <span class="name">Outside</span>
        <div class="card"><a href="/products/a"><span class="name">Inside</span></a></div>
        """
        assert discover(page_for(html), profile)[0].title == "Inside"


class TestUrlAllowed:
    """URL substring filters."""

    def test_skip_beats_required(self):
        policy = FilterPolicy(skip_url_substrings=("/cart",), required_url_substrings=("/products/",))

        assert not url_allowed("https://x.example/cart/products/1", policy)

    def test_required_any_of(self):
        policy = FilterPolicy(required_url_substrings=("/product", "/item"))

        assert url_allowed("https://x.example/item/9", policy)
        assert not url_allowed("https://x.example/blog/9", policy)

    def test_no_required_accepts_everything_not_skipped(self):
        assert url_allowed("https://x.example/anything", FilterPolicy())
