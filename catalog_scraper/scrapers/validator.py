"""Acceptance rules for extracted product records."""

from typing import Optional

from catalog_scraper.schemas.profile import FilterPolicy
from catalog_scraper.scrapers.base import ProductRecord


def rejection_reason(record: ProductRecord, policy: FilterPolicy) -> Optional[str]:
    """Return why a record fails the filter policy, or None if it passes."""
    if len(record.description) < policy.min_description_length:
        return "description_too_short"

    title = record.title.lower()
    for keyword in policy.blocked_title_keywords:
        if keyword.lower() in title:
            return f"blocked_title_keyword:{keyword}"

    description = record.description.lower()
    for keyword in policy.blocked_description_keywords:
        if keyword.lower() in description:
            return f"blocked_description_keyword:{keyword}"

    return None


def is_acceptable(record: ProductRecord, policy: FilterPolicy) -> bool:
    """Check a record against the filter policy. Pure; any single match rejects."""
    return rejection_reason(record, policy) is None
