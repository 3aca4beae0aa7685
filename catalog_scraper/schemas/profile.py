"""Pydantic schemas for declarative site profiles.

A site profile tells the scraper how to page through a catalog, which
links on a listing page are products, and where each product field lives
on a product page. Profiles are immutable once loaded.

Profile JSON may use snake_case keys or their camelCase aliases:

    {
      "siteName": "Example",
      "baseUrl": "https://example.com/catalog",
      "paginationTemplate": "?page={page}",
      "discoveryRules": {"linkSelectors": ["a.product"], "titleSelectors": [".name"]},
      "fieldRules": {
        "title": {"selectors": ["h1"]},
        "features": {"selectors": [".features li"], "headingKeywords": ["features"]}
      },
      "navigationPolicy": {"maxRetries": 3, "timeout": 30},
      "filterPolicy": {"minDescriptionLength": 30}
    }
"""

from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


PAGE_PLACEHOLDER = "{page}"

# Mechanical drawing and CAD links on manufacturer product pages
DEFAULT_DRAWING_SELECTORS = (
    'a[href*="drawing" i]',
    'a[href*=".dwg"]',
    ".drawing-link",
    '[class*="drawing"] a[href]',
)


class ProfileModel(BaseModel):
    """Base for all profile sections: frozen, strict keys, camelCase aliases."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SingleValuedRule(ProfileModel):
    """Ordered selectors; the first one that yields a value wins."""

    kind: Literal["single"] = "single"
    selectors: Tuple[str, ...] = ()


class MultiValuedRule(ProfileModel):
    """Selectors plus heading keywords; both match sets are merged."""

    kind: Literal["multi"] = "multi"
    selectors: Tuple[str, ...] = ()
    heading_keywords: Tuple[str, ...] = ()


class DiscoveryRules(ProfileModel):
    """Where product links live on a listing page."""

    container_selectors: Tuple[str, ...] = ()
    link_selectors: Tuple[str, ...] = Field(..., min_length=1)
    title_selectors: Tuple[str, ...] = ()


class FieldRules(ProfileModel):
    """Extraction rules for every product field."""

    title: SingleValuedRule = SingleValuedRule(selectors=("h1",))
    description: SingleValuedRule = SingleValuedRule()
    image: SingleValuedRule = SingleValuedRule()
    price: SingleValuedRule = SingleValuedRule()
    drawing: SingleValuedRule = SingleValuedRule(selectors=DEFAULT_DRAWING_SELECTORS)
    specifications: MultiValuedRule = MultiValuedRule()
    features: MultiValuedRule = MultiValuedRule()
    benefits: MultiValuedRule = MultiValuedRule()
    applications: MultiValuedRule = MultiValuedRule()
    details: MultiValuedRule = MultiValuedRule()
    resources: MultiValuedRule = MultiValuedRule()
    custom_fields: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)

    def multi_valued_rule(self, name: str) -> MultiValuedRule:
        rule = getattr(self, name)
        if not isinstance(rule, MultiValuedRule):
            raise KeyError(f"Not a multi-valued field: {name}")
        return rule


class NavigationPolicy(ProfileModel):
    """How page loads are waited for and retried. Durations are in seconds."""

    presence_selector: Optional[str] = None
    settle_delay: float = Field(2.0, ge=0)
    max_retries: int = Field(3, ge=1)
    timeout: float = Field(30.0, gt=0)


class FilterPolicy(ProfileModel):
    """URL filters for discovery and acceptance rules for records."""

    skip_url_substrings: Tuple[str, ...] = ()
    required_url_substrings: Tuple[str, ...] = ()
    min_description_length: int = Field(0, ge=0)
    blocked_title_keywords: Tuple[str, ...] = ()
    blocked_description_keywords: Tuple[str, ...] = ()


class SiteProfile(ProfileModel):
    """Declarative description of how to scrape one site."""

    site_name: str = Field(..., min_length=1)
    base_url: str = ""
    pagination_template: str = "?page=" + PAGE_PLACEHOLDER
    discovery_rules: DiscoveryRules
    field_rules: FieldRules = FieldRules()
    navigation_policy: NavigationPolicy = NavigationPolicy()
    filter_policy: FilterPolicy = FilterPolicy()

    @field_validator("pagination_template")
    @classmethod
    def check_placeholder(cls, value: str) -> str:
        if PAGE_PLACEHOLDER not in value:
            raise ValueError(f"pagination_template must contain {PAGE_PLACEHOLDER}")
        return value

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, value: str) -> str:
        value = value.strip()
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("base_url must be an absolute http(s) URL")
        return value

    def listing_url(self, page: int) -> str:
        """Build the listing URL for a 1-based page number.

        Page 1 is always the base URL verbatim. Later pages substitute the
        page number into the template, which is appended to the base URL
        unless it is itself an absolute URL.
        """
        if page < 1:
            raise ValueError("page numbers start at 1")
        if page == 1:
            return self.base_url
        suffix = self.pagination_template.replace(PAGE_PLACEHOLDER, str(page))
        if suffix.startswith(("http://", "https://")):
            return suffix
        return self.base_url + suffix
