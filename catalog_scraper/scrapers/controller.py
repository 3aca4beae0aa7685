"""Crawl controller: the page-by-page scraping loop.

State machine per listing page:

    load listing -> (no candidates? count empty : discover -> extract each)
                 -> pace -> next page

The crawl stops before an iteration when the page number exceeds
`max_pages` or two consecutive listing pages yielded nothing. Navigation
failures and extraction faults are recovered locally; only profile faults
reach the caller.
"""

from typing import List, Optional, Tuple, Union

import structlog

from catalog_scraper.exceptions import NavigationError, ProfileError
from catalog_scraper.schemas.profile import SiteProfile
from catalog_scraper.scrapers.base import Candidate, CrawlOptions, CrawlResult, ProductRecord
from catalog_scraper.scrapers.discovery import discover
from catalog_scraper.scrapers.extractor import extract
from catalog_scraper.scrapers.pacing import HumanizedPacer, PlainPacer
from catalog_scraper.scrapers.renderer import BaseRenderer
from catalog_scraper.scrapers.utils.retry import DEFAULT_RETRY_DELAY, navigate_with_retry
from catalog_scraper.scrapers.validator import rejection_reason


logger = structlog.get_logger(__name__)

MAX_EMPTY_PAGES = 2

ACCEPTED = "accepted"
REJECTED = "rejected"
FAILED = "failed"


class CrawlController:
    """Drives discovery, extraction and validation across listing pages.

    Args:
        profile: Site profile for the session (read-only)
        renderer: Document renderer to drive
        pacer: PlainPacer or HumanizedPacer
        options: Crawl parameters
        retry_delay: Seconds between navigation attempts
    """

    def __init__(
        self,
        profile: SiteProfile,
        renderer: BaseRenderer,
        pacer: Union[PlainPacer, HumanizedPacer],
        options: Optional[CrawlOptions] = None,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        self.profile = profile
        self.renderer = renderer
        self.pacer = pacer
        self.options = options or CrawlOptions()
        self.retry_delay = retry_delay
        self.logger = logger.bind(site=profile.site_name)

    def _should_continue(self, page: int, empty_streak: int) -> bool:
        return page <= self.options.max_pages and empty_streak < MAX_EMPTY_PAGES

    async def _simulate(self, context: str) -> None:
        """Pace an interaction. Renderer faults while pacing are logged and ignored."""
        try:
            await self.pacer.simulate(self.renderer, context)
        except Exception as e:
            self.logger.warning("pacing_interaction_failed", context=context, error=str(e))

    async def crawl(self, result: Optional[CrawlResult] = None) -> CrawlResult:
        """Run the crawl and return every accepted record in discovery order.

        Args:
            result: Empty result to fill in place. A caller that may abort
                the crawl passes one in so it can keep the partial records.

        Raises:
            ProfileError: If the profile has no base URL to start from
        """
        if not self.profile.base_url:
            raise ProfileError(f"Profile '{self.profile.site_name}' has no base_url to crawl")

        result = result if result is not None else CrawlResult()
        page = 1
        self.logger.info("crawl_started", max_pages=self.options.max_pages, humanize=self.options.humanize)

        while self._should_continue(page, result.empty_streak):
            self.logger.info("processing_page", page=page, max_pages=self.options.max_pages)
            await self._simulate("browsing")

            candidates = await self._discover_page(page)
            result.pages_visited += 1

            if not candidates:
                result.empty_streak += 1
                self.logger.warning("no_products_on_page", page=page, empty_streak=result.empty_streak)
            else:
                result.empty_streak = 0
                await self._process_page(page, candidates, result)

            page += 1
            if self._should_continue(page, result.empty_streak):
                await self.pacer.between_pages()

        self.logger.info(
            "crawl_complete",
            records=len(result.records),
            pages_visited=result.pages_visited,
            rejected=result.records_rejected,
            failed=result.candidates_failed,
        )
        return result

    async def _discover_page(self, page: int) -> List[Candidate]:
        """Load a listing page and discover candidates; any failure means none."""
        url = self.profile.listing_url(page)
        policy = self.profile.navigation_policy
        try:
            await navigate_with_retry(self.renderer, url, policy, delay=self.retry_delay)
            await self.renderer.settle(policy.presence_selector, policy.settle_delay)
            rendered = await self.renderer.snapshot()
            return discover(rendered, self.profile)
        except NavigationError:
            self.logger.warning("listing_unavailable", page=page, url=url)
            return []
        except Exception as e:
            self.logger.error("listing_discovery_failed", page=page, url=url, error=str(e), exc_info=True)
            return []

    async def _process_page(self, page: int, candidates: List[Candidate], result: CrawlResult) -> None:
        self.logger.info("products_found", page=page, count=len(candidates))

        for index, candidate in enumerate(candidates):
            result.candidates_seen += 1
            self.logger.info(
                "processing_candidate",
                page=page,
                position=f"{index + 1}/{len(candidates)}",
                title=candidate.title,
            )

            status, record = await self._process_candidate(candidate)
            if status == ACCEPTED:
                result.records.append(record)
            elif status == REJECTED:
                result.records_rejected += 1
            else:
                result.candidates_failed += 1

            if index < len(candidates) - 1:
                await self.pacer.between_candidates()

        self.logger.info("page_complete", page=page, processed=len(candidates), total=len(result.records))

    async def _process_candidate(self, candidate: Candidate) -> Tuple[str, Optional[ProductRecord]]:
        """Load, extract and validate one candidate. Never raises."""
        policy = self.profile.navigation_policy
        try:
            await navigate_with_retry(self.renderer, candidate.url, policy, delay=self.retry_delay)
        except NavigationError:
            self.logger.warning("candidate_skipped", url=candidate.url, reason="navigation_failed")
            return FAILED, None

        try:
            await self._simulate("reading")
            rendered = await self.renderer.snapshot()
            record = extract(rendered, candidate.url, candidate.title, self.profile)
            reason = rejection_reason(record, self.profile.filter_policy)
        except Exception as e:
            self.logger.error(
                "candidate_extraction_failed",
                url=candidate.url,
                error=str(e),
                exc_info=True,
            )
            return FAILED, None

        if reason:
            self.logger.debug("record_rejected", url=candidate.url, title=record.title, reason=reason)
            return REJECTED, None

        self.logger.info("record_accepted", url=candidate.url, title=record.title)
        return ACCEPTED, record
