"""Built-in site profiles and the profile registry.

Profiles are resolved once at session start, either by name from the
registry, from a JSON file, or by pointing the generic e-commerce profile
at a site URL. Every failure here is a ProfileError and aborts the session
before any navigation.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

import structlog
from pydantic import ValidationError

from catalog_scraper.exceptions import ProfileError
from catalog_scraper.schemas.profile import SiteProfile


logger = structlog.get_logger(__name__)


BUILTIN_PROFILES: Dict[str, Dict[str, Any]] = {
    "calian-gnss": {
        "site_name": "Calian GNSS",
        "base_url": "https://www.calian.com/advanced-technologies/products/gnss-products/",
        "pagination_template": "#!page={page}",
        "discovery_rules": {
            "container_selectors": [".product-grid", ".products-container", "main"],
            "link_selectors": ['a[href*="/gnss_product/"]'],
            "title_selectors": ['a[href*="/gnss_product/"]'],
        },
        "field_rules": {
            "title": {"selectors": ["h1", ".product-title", ".entry-title", '[class*="title"]']},
            "description": {
                "selectors": [
                    ".product-description", ".entry-content", ".product-details",
                    ".content", "main p", ".description",
                ],
            },
            "image": {
                "selectors": [
                    ".product-image img", ".featured-image img", ".hero-image img",
                    "main img", ".gallery img",
                ],
            },
            "price": {"selectors": [".price", ".product-price", '[class*="price"]', ".cost"]},
            "specifications": {
                "selectors": [
                    ".specifications li", ".specs li", ".product-specs li",
                    ".technical-specs li", "table tr", ".spec-item",
                    '[class*="specification"] li',
                ],
                "heading_keywords": ["specifications", "specs", "technical"],
            },
            "features": {
                "selectors": [
                    ".features li", ".product-features li", ".feature-list li",
                    '[class*="feature"] li',
                ],
                "heading_keywords": ["features", "feature"],
            },
            "benefits": {
                "selectors": [".benefits li", '[class*="benefit"] li'],
                "heading_keywords": ["benefits", "benefit"],
            },
            "applications": {
                "selectors": [".applications li", '[class*="application"] li'],
                "heading_keywords": ["applications", "application"],
            },
            "details": {
                "selectors": [".details li", ".product-details li", ".technical-details li"],
                "heading_keywords": ["details", "detail", "specifications"],
            },
            "resources": {
                "selectors": [".resources li", ".downloads li", ".documentation li"],
                "heading_keywords": ["resources", "downloads", "documentation"],
            },
        },
        "navigation_policy": {
            "presence_selector": '.product-card, .product-item, .card, [class*="product"], .grid-item',
            "settle_delay": 2.0,
            "max_retries": 3,
            "timeout": 30.0,
        },
        "filter_policy": {
            "skip_url_substrings": ["/contact", "/about", "/privacy", "/terms"],
            "required_url_substrings": ["/gnss_product/"],
            "min_description_length": 50,
            "blocked_title_keywords": ["Page not found", "404", "Error"],
            "blocked_description_keywords": ["page has either moved", "doesn't exist", "404"],
        },
    },
    "generic-ecommerce": {
        "site_name": "Generic E-commerce",
        "base_url": "",
        "pagination_template": "?page={page}",
        "discovery_rules": {
            "container_selectors": [".products", ".product-grid", ".shop-items", ".catalog"],
            "link_selectors": [".product-link", ".product-item a", ".card a", '[class*="product"] a'],
            "title_selectors": [".product-title", ".product-name", "h3", "h4"],
        },
        "field_rules": {
            "title": {"selectors": ["h1", ".product-title", ".product-name", '[class*="title"]']},
            "description": {
                "selectors": [".product-description", ".description", ".product-details", ".content p"],
            },
            "image": {
                "selectors": [
                    ".product-image img", ".main-image img", ".hero img", ".gallery img:first-child",
                ],
            },
            "price": {"selectors": [".price", ".product-price", ".current-price", '[class*="price"]']},
            "specifications": {
                "selectors": [".specs li", ".specifications li", ".attributes li", "table td"],
                "heading_keywords": ["specifications", "specs", "details", "attributes"],
            },
            "features": {
                "selectors": [".features li", ".highlights li", ".key-features li"],
                "heading_keywords": ["features", "highlights", "benefits"],
            },
            "benefits": {
                "selectors": [".benefits li", ".advantages li"],
                "heading_keywords": ["benefits", "advantages", "why choose"],
            },
            "applications": {
                "selectors": [".uses li", ".applications li", ".suitable-for li"],
                "heading_keywords": ["applications", "uses", "suitable for"],
            },
            "details": {
                "selectors": [".details p", ".description p", ".content p"],
                "heading_keywords": ["details", "description", "about"],
            },
            "resources": {
                "selectors": [".downloads a", ".resources a", ".docs a"],
                "heading_keywords": ["downloads", "resources", "documentation"],
            },
        },
        "navigation_policy": {
            "presence_selector": ".product-item, .product-card, .product",
            "settle_delay": 2.0,
            "max_retries": 3,
            "timeout": 30.0,
        },
        "filter_policy": {
            "skip_url_substrings": ["/cart", "/checkout", "/account", "/login", "/contact"],
            "required_url_substrings": ["/product", "/item", "/p/"],
            "min_description_length": 30,
            "blocked_title_keywords": ["404", "not found", "error"],
            "blocked_description_keywords": ["not found", "error", "coming soon"],
        },
    },
    "shopify-store": {
        "site_name": "Shopify Store",
        "base_url": "",
        "pagination_template": "?page={page}",
        "discovery_rules": {
            "container_selectors": [".product-grid", ".collection-grid", ".products"],
            "link_selectors": [".product-item__link", ".card__link", ".product-link"],
            "title_selectors": [".product-item__title", ".card__title", ".product-title"],
        },
        "field_rules": {
            "title": {"selectors": ["h1.product__title", ".product__title", "h1"]},
            "description": {"selectors": [".product__description", ".product-description", ".rte"]},
            "image": {"selectors": [".product__media img", ".product-image img", ".featured-image"]},
            "price": {"selectors": [".product__price", ".price", ".money"]},
            "specifications": {
                "selectors": [".product-specs li", ".metafields li", ".product-details li"],
                "heading_keywords": ["specifications", "details", "specs"],
            },
            "features": {
                "selectors": [".product-features li", ".highlights li"],
                "heading_keywords": ["features", "highlights"],
            },
            "benefits": {
                "selectors": [".benefits li", ".advantages li"],
                "heading_keywords": ["benefits", "why buy"],
            },
            "applications": {
                "selectors": [".uses li", ".applications li"],
                "heading_keywords": ["applications", "uses"],
            },
            "details": {
                "selectors": [".product-tabs p", ".description p"],
                "heading_keywords": ["details", "description"],
            },
            "resources": {
                "selectors": [".product-files a", ".downloads a"],
                "heading_keywords": ["downloads", "files"],
            },
        },
        "navigation_policy": {
            "presence_selector": ".product-item, .card",
            "settle_delay": 2.0,
            "max_retries": 3,
            "timeout": 30.0,
        },
        "filter_policy": {
            "skip_url_substrings": ["/cart", "/checkout", "/account", "/pages/"],
            "required_url_substrings": ["/products/"],
            "min_description_length": 30,
            "blocked_title_keywords": ["404", "not found"],
            "blocked_description_keywords": ["not found", "sold out"],
        },
    },
}

# Link selectors used when the generic profile is pointed at an arbitrary URL
SITE_URL_LINK_SELECTORS = (
    'a[href*="/product"]',
    'a[href*="/item"]',
    'a[href*="/p/"]',
    ".product-link",
    ".product a",
    ".item a",
)
SITE_URL_TITLE_SELECTORS = (".title", ".name", "h3", "h4", ".product-title")
SITE_URL_CONTAINER_SELECTORS = (".products", ".product-grid", ".items", "main")


def _validate(data: Dict[str, Any], source: str) -> SiteProfile:
    try:
        return SiteProfile.model_validate(data)
    except ValidationError as e:
        raise ProfileError(f"Malformed site profile ({source}): {e}") from e


class ProfileRegistry:
    """Registry of named site profiles.

    Raw profile documents are validated lazily, so a malformed entry only
    fails the session that asks for it.
    """

    def __init__(self, profiles: Optional[Dict[str, Dict[str, Any]]] = None):
        self._raw: Dict[str, Dict[str, Any]] = dict(profiles or {})
        self._cache: Dict[str, SiteProfile] = {}

    def register(self, name: str, data: Union[Dict[str, Any], SiteProfile]) -> None:
        """Register a profile document under a name, replacing any existing one."""
        if isinstance(data, SiteProfile):
            self._cache[name] = data
            self._raw[name] = data.model_dump()
        else:
            self._cache.pop(name, None)
            self._raw[name] = data
        logger.info("profile_registered", name=name)

    def names(self) -> List[str]:
        return sorted(self._raw)

    def has_profile(self, name: str) -> bool:
        return name in self._raw

    def get(self, name: str) -> SiteProfile:
        """Resolve a named profile.

        Raises:
            ProfileError: If the name is unknown or the profile is malformed
        """
        if name in self._cache:
            return self._cache[name]
        raw = self._raw.get(name)
        if raw is None:
            raise ProfileError(
                f"Profile '{name}' not found. Available: {', '.join(self.names())}"
            )
        profile = _validate(raw, f"builtin:{name}")
        self._cache[name] = profile
        return profile


_registry = ProfileRegistry(BUILTIN_PROFILES)


def get_profile_registry() -> ProfileRegistry:
    """Get the global profile registry with the built-in profiles."""
    return _registry


def load_profile(name: str) -> SiteProfile:
    """Load a built-in profile by name."""
    return _registry.get(name)


def load_profile_file(path: Union[str, Path]) -> SiteProfile:
    """Load a profile from a JSON file.

    Raises:
        ProfileError: If the file cannot be read, is not JSON, or fails validation
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProfileError(f"Cannot read profile file {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise ProfileError(f"Profile file {p} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ProfileError(f"Profile file {p} must contain a JSON object")
    profile = _validate(data, str(p))
    logger.info("profile_loaded_from_file", path=str(p), site=profile.site_name)
    return profile


def profile_for_url(site_url: str, base: str = "generic-ecommerce") -> SiteProfile:
    """Point a built-in profile at an arbitrary site URL.

    The site name becomes the URL's hostname and discovery uses a broader
    set of link selectors; every other rule comes from the base profile.
    """
    hostname = urlparse(site_url).hostname
    if not hostname:
        raise ProfileError(f"Invalid site URL: {site_url!r}")

    data = load_profile(base).model_dump()
    data.update(
        site_name=hostname,
        base_url=site_url,
        pagination_template="?page={page}",
        discovery_rules={
            "container_selectors": SITE_URL_CONTAINER_SELECTORS,
            "link_selectors": SITE_URL_LINK_SELECTORS,
            "title_selectors": SITE_URL_TITLE_SELECTORS,
        },
    )
    return _validate(data, f"url:{site_url}")


def resolve_profile(
    config_name: str = "",
    profile_path: str = "",
    site_url: str = "",
) -> SiteProfile:
    """Resolve the session profile. Precedence: site URL, file, then name."""
    if site_url:
        return profile_for_url(site_url)
    if profile_path:
        return load_profile_file(profile_path)
    if config_name:
        return load_profile(config_name)
    raise ProfileError("No site profile given: set a profile name, file or site URL")
