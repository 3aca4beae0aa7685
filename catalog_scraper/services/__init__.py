"""Services that consume crawl output.

Persistence lives here, outside the scraping engine, so the engine never
depends on an output format.
"""

from catalog_scraper.services.results_writer import ResultsWriter, generate_report

__all__ = [
    "ResultsWriter",
    "generate_report",
]
