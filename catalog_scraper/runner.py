"""Command-line runner for profile-driven catalog scraping.

Usage:
    # Built-in profile (default: calian-gnss)
    catalog-scraper --profile shopify-store --max-pages 3

    # Profile from a JSON file
    catalog-scraper --profile-file profiles/acme.json

    # Generic profile pointed at a site
    catalog-scraper --site-url https://mystore.example/collections/all --stealth

Every flag falls back to the matching environment variable (see
catalog_scraper.config): CONFIG_NAME, PROFILE_PATH, SITE_URL, MAX_PAGES,
BOT_MITIGATION, APP_VISUAL, APP_DEBUG, OUTPUT_DIR.

Setup (run once):
    pip install -e .
    playwright install chromium
"""

import argparse
import asyncio
import sys
from typing import List, Optional

import structlog

from catalog_scraper.config import Settings, settings
from catalog_scraper.exceptions import ProfileError
from catalog_scraper.logging_config import configure_logging
from catalog_scraper.schemas.profile import SiteProfile
from catalog_scraper.scrapers.base import CrawlOptions, CrawlResult
from catalog_scraper.scrapers.controller import CrawlController
from catalog_scraper.scrapers.pacing import create_pacer
from catalog_scraper.scrapers.profiles import get_profile_registry, resolve_profile
from catalog_scraper.scrapers.renderer import PlaywrightRenderer
from catalog_scraper.scrapers.utils.browser_manager import BrowserManager
from catalog_scraper.services.results_writer import ResultsWriter


logger = structlog.get_logger("catalog_scraper")

# Slow down headed browsers so a human can follow along
VISUAL_SLOW_MO_MS = 100


async def run_crawl(
    profile: SiteProfile,
    options: CrawlOptions,
    result: CrawlResult,
    headless: bool = True,
    retry_delay: float = 2.0,
) -> CrawlResult:
    """Launch a browser, crawl into `result` and close everything."""
    pacer = create_pacer(options.humanize)
    manager = BrowserManager(
        headless=headless and not options.visual,
        slow_mo=VISUAL_SLOW_MO_MS if options.visual else 0,
    )
    try:
        async with PlaywrightRenderer(
            manager,
            identity=pacer.identity,
            visual=options.visual,
            debug=options.debug,
        ) as renderer:
            controller = CrawlController(profile, renderer, pacer, options, retry_delay=retry_delay)
            return await controller.crawl(result)
    finally:
        await manager.stop()


async def main(args: argparse.Namespace, config: Settings = settings) -> int:
    """Resolve the profile, crawl and save results.

    Returns:
        Process exit code
    """
    try:
        profile = resolve_profile(
            config_name=args.profile,
            profile_path=args.profile_file,
            site_url=args.site_url,
        )
    except ProfileError as e:
        logger.error("profile_error", error=str(e))
        return 2

    options = CrawlOptions(
        max_pages=args.max_pages,
        humanize=args.stealth,
        visual=args.visual or args.debug,
        debug=args.debug,
    )
    logger.info(
        "scraper_starting",
        site=profile.site_name,
        max_pages=options.max_pages,
        visual=options.visual,
        stealth=options.humanize,
    )

    result = CrawlResult()
    writer = ResultsWriter(args.output_dir)
    try:
        await run_crawl(
            profile,
            options,
            result,
            headless=config.HEADLESS,
            retry_delay=config.NAVIGATION_RETRY_DELAY,
        )
    except ProfileError as e:
        logger.error("profile_error", error=str(e))
        return 2
    except asyncio.CancelledError:
        # Records accepted before the interrupt are still valid output
        if result.records:
            writer.save(result.records, profile)
            logger.warning("partial_results_saved", products=len(result.records))
        raise

    if not result.records:
        logger.warning("no_products_found", hint="Try adjusting the profile selectors for this site")
        return 0

    json_path, report_path = writer.save(result.records, profile)
    logger.info(
        "scraping_succeeded",
        products=len(result.records),
        pages=result.pages_visited,
        json_path=str(json_path),
        report_path=str(report_path),
    )
    return 0


def parse_args(argv: Optional[List[str]] = None, config: Settings = settings) -> argparse.Namespace:
    """Parse command-line arguments, defaulting to environment settings."""
    registry = get_profile_registry()
    parser = argparse.ArgumentParser(
        description="Scrape product records from paginated catalogs using a declarative site profile.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Built-in profiles: {', '.join(registry.names())}",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--profile",
        default=None,
        help=f"Built-in profile name (default: {config.CONFIG_NAME})",
    )
    source.add_argument(
        "--profile-file",
        default=None,
        help="Path to a JSON site profile",
    )
    source.add_argument(
        "--site-url",
        default=None,
        help="Crawl this URL with the generic e-commerce profile",
    )

    parser.add_argument("--max-pages", type=int, default=config.MAX_PAGES, help="Listing pages to visit")
    parser.add_argument(
        "--stealth",
        action="store_true",
        default=config.BOT_MITIGATION,
        help="Humanized pacing and a randomized session identity",
    )
    parser.add_argument(
        "--visual",
        action="store_true",
        default=config.APP_VISUAL,
        help="Show the browser window",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=config.APP_DEBUG,
        help="Verbose logging and page console output (implies --visual)",
    )
    parser.add_argument("--output-dir", default=config.OUTPUT_DIR, help="Where to write results")
    parser.add_argument(
        "--list-profiles",
        action="store_true",
        help="Print the built-in profile names and exit",
    )

    args = parser.parse_args(argv)

    # An explicit profile source on the command line replaces all three settings
    if args.profile is None and args.profile_file is None and args.site_url is None:
        args.profile = config.CONFIG_NAME
        args.profile_file = config.PROFILE_PATH
        args.site_url = config.SITE_URL
    else:
        args.profile = args.profile or ""
        args.profile_file = args.profile_file or ""
        args.site_url = args.site_url or ""

    if args.max_pages < 1:
        parser.error("--max-pages must be at least 1")
    return args


def cli(argv: Optional[List[str]] = None) -> None:
    """Console-script entry point."""
    args = parse_args(argv)
    configure_logging("DEBUG" if args.debug else settings.LOG_LEVEL)

    if args.list_profiles:
        for name in get_profile_registry().names():
            print(name)
        return

    try:
        code = asyncio.run(main(args))
    except KeyboardInterrupt:
        logger.warning("interrupted_by_user")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    cli()
