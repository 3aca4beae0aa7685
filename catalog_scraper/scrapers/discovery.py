"""Product link discovery on rendered listing pages."""

import re
from typing import List, Optional
from urllib.parse import urljoin

import structlog
from bs4 import Tag

from catalog_scraper.schemas.profile import DiscoveryRules, FilterPolicy, SiteProfile
from catalog_scraper.scrapers.base import Candidate
from catalog_scraper.scrapers.document import RenderedPage, element_text


logger = structlog.get_logger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def url_allowed(url: str, policy: FilterPolicy) -> bool:
    """Apply the skip and required URL substring filters."""
    if any(skip in url for skip in policy.skip_url_substrings):
        return False
    if policy.required_url_substrings:
        return any(req in url for req in policy.required_url_substrings)
    return True


def resolve_title(
    page: RenderedPage, element: Tag, rules: DiscoveryRules, position: int
) -> str:
    """Resolve a candidate title for a matched link element.

    Tries the title selectors inside the element, then the element's own
    text, its title and alt attributes, and finally a positional placeholder.
    """
    title = ""
    for selector in rules.title_selectors:
        title = page.query_text(selector, scope=element)
        if title:
            break

    if not title:
        title = (
            element_text(element)
            or (element.get("title") or "").strip()
            or (element.get("alt") or "").strip()
            or f"Product {position}"
        )

    return _WHITESPACE_RE.sub(" ", title).strip()


def _absolute_href(page: RenderedPage, element: Tag) -> Optional[str]:
    href = element.get("href")
    if not href or not href.strip():
        return None
    return urljoin(page.url, href.strip())


def discover(page: RenderedPage, profile: SiteProfile) -> List[Candidate]:
    """Discover product candidates on a rendered listing page.

    The first link selector with any structural match is the only strategy
    used; later selectors are never consulted or merged in. Candidates are
    deduplicated by URL, keeping the first title, in discovery order.

    Args:
        page: Rendered listing page
        profile: Site profile with discovery rules and URL filters

    Returns:
        List of candidates, empty if no selector matched anything
    """
    rules = profile.discovery_rules
    policy = profile.filter_policy

    matches: List[Tag] = []
    for selector in rules.link_selectors:
        matches = page.query_all(selector)
        if matches:
            logger.debug("link_selector_matched", selector=selector, count=len(matches))
            break

    if not matches:
        logger.info("no_link_selector_matched", url=page.url)
        return []

    candidates: List[Candidate] = []
    seen_urls: set = set()
    for position, element in enumerate(matches, start=1):
        url = _absolute_href(page, element)
        if not url or not url_allowed(url, policy):
            continue
        if url in seen_urls:
            continue
        seen_urls.add(url)
        candidates.append(
            Candidate(url=url, title=resolve_title(page, element, rules, position))
        )

    logger.info("product_links_found", url=page.url, matched=len(matches), count=len(candidates))
    return candidates
