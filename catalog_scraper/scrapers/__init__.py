"""Profile-driven scraping engine.

This package provides:
- Core data structures (candidates, product records, crawl results)
- Link discovery and rule-based field extraction over rendered pages
- Record validation against a profile's filter policy
- The crawl controller with navigation retry and pacing
- Built-in site profiles and the profile registry
"""

from .base import (
    MULTI_VALUED_FIELDS,
    Candidate,
    CrawlOptions,
    CrawlResult,
    ProductRecord,
)
from .discovery import discover
from .extractor import extract
from .validator import is_acceptable, rejection_reason
from .profiles import (
    ProfileRegistry,
    get_profile_registry,
    load_profile,
    load_profile_file,
    profile_for_url,
    resolve_profile,
)

__all__ = [
    # Data structures
    "MULTI_VALUED_FIELDS",
    "Candidate",
    "CrawlOptions",
    "CrawlResult",
    "ProductRecord",
    # Engine
    "discover",
    "extract",
    "is_acceptable",
    "rejection_reason",
    # Profiles
    "ProfileRegistry",
    "get_profile_registry",
    "load_profile",
    "load_profile_file",
    "profile_for_url",
    "resolve_profile",
]
