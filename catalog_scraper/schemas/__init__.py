"""Pydantic schemas for site profiles.

All profile models are defined here for easy import.
"""

from catalog_scraper.schemas.profile import (
    DEFAULT_DRAWING_SELECTORS,
    PAGE_PLACEHOLDER,
    DiscoveryRules,
    FieldRules,
    FilterPolicy,
    MultiValuedRule,
    NavigationPolicy,
    SingleValuedRule,
    SiteProfile,
)

__all__ = [
    # Profile
    "SiteProfile",
    "DiscoveryRules",
    "FieldRules",
    "NavigationPolicy",
    "FilterPolicy",
    # Rules
    "SingleValuedRule",
    "MultiValuedRule",
    # Constants
    "PAGE_PLACEHOLDER",
    "DEFAULT_DRAWING_SELECTORS",
]
