"""Persist crawl output as JSON plus a plain-text report."""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

import structlog

from catalog_scraper.schemas.profile import SiteProfile
from catalog_scraper.scrapers.base import ProductRecord


logger = structlog.get_logger(__name__)

RULE = "=" * 80
SUMMARY_DESCRIPTION_CHARS = 150


def _slug(site_name: str) -> str:
    return "_".join(site_name.lower().split())


def generate_report(
    records: List[ProductRecord],
    profile: SiteProfile,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render a human-readable summary of a crawl's records."""
    generated_at = generated_at or datetime.now()
    lines = [
        RULE,
        f"{profile.site_name.upper()} - PRODUCT SCRAPING REPORT",
        RULE,
        f"Generated: {generated_at:%Y-%m-%d %H:%M:%S}",
        f"Site: {profile.site_name}",
        f"Base URL: {profile.base_url}",
        f"Total Products: {len(records)}",
        RULE,
        "",
    ]

    for i, record in enumerate(records, 1):
        lines.append(f"{i}. {record.title}")
        lines.append(f"   URL: {record.url}")
        lines.append(f"   Description: {record.description[:SUMMARY_DESCRIPTION_CHARS]}...")
        if record.price:
            lines.append(f"   Price: {record.price}")
        for name, values in record.multi_valued().items():
            lines.append(f"   {name.capitalize()}: {len(values)} items")
        for name, values in record.custom_fields.items():
            lines.append(f"   {name}: {len(values)} items")
        if record.drawing_url:
            lines.append(f"   Drawing: {record.drawing_url}")
        lines.append("")

    lines.append(RULE)
    lines.append("End of Report")
    return "\n".join(lines)


class ResultsWriter:
    """Writes `<site>_products_<ts>.json` and `<site>_report_<ts>.txt`."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def save(
        self,
        records: List[ProductRecord],
        profile: SiteProfile,
        now: Optional[datetime] = None,
    ) -> Tuple[Path, Path]:
        """Save records and a report.

        Returns:
            (json_path, report_path)
        """
        now = now or datetime.now()
        self.output_dir.mkdir(parents=True, exist_ok=True)

        stamp = now.strftime("%Y-%m-%dT%H-%M-%S")
        site = _slug(profile.site_name)

        json_path = self.output_dir / f"{site}_products_{stamp}.json"
        json_path.write_text(
            json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

        report_path = self.output_dir / f"{site}_report_{stamp}.txt"
        report_path.write_text(generate_report(records, profile, now), encoding="utf-8")

        logger.info("results_saved", json_path=str(json_path), report_path=str(report_path), count=len(records))
        return json_path, report_path
