"""Core data structures shared by discovery, extraction and the crawl loop."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Named multi-valued fields, in the order they are extracted and persisted
MULTI_VALUED_FIELDS = (
    "specifications",
    "features",
    "benefits",
    "applications",
    "details",
    "resources",
)


@dataclass(frozen=True)
class Candidate:
    """A product link discovered on a listing page."""

    url: str  # Dedupe key within one page's result set
    title: str


@dataclass
class ProductRecord:
    """Structured product data extracted from one product page.

    Multi-valued fields are None when nothing matched; when present they
    hold no duplicates and keep first-occurrence order.
    """

    title: str
    description: str
    image_url: str
    url: str
    product_id: str
    price: Optional[str] = None
    specifications: Optional[List[str]] = None
    features: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    applications: Optional[List[str]] = None
    details: Optional[List[str]] = None
    resources: Optional[List[str]] = None
    drawing_url: Optional[str] = None
    custom_fields: Dict[str, List[str]] = field(default_factory=dict)

    def multi_valued(self) -> Dict[str, List[str]]:
        """Return the named multi-valued fields that are present."""
        out: Dict[str, List[str]] = {}
        for name in MULTI_VALUED_FIELDS:
            values = getattr(self, name)
            if values:
                out[name] = values
        return out

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dict, omitting absent fields."""
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "image_url": self.image_url,
            "url": self.url,
            "product_id": self.product_id,
        }
        if self.price:
            data["price"] = self.price
        data.update(self.multi_valued())
        if self.drawing_url:
            data["drawing_url"] = self.drawing_url
        if self.custom_fields:
            data["custom_fields"] = dict(self.custom_fields)
        return data


@dataclass(frozen=True)
class CrawlOptions:
    """Per-run crawl parameters. They never change extraction semantics."""

    max_pages: int = 5
    humanize: bool = False
    visual: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate data after initialization."""
        if self.max_pages < 1:
            raise ValueError("max_pages must be at least 1")


@dataclass
class CrawlResult:
    """Outcome of one crawl invocation.

    `records` is append-only while the crawl runs and keeps the order in
    which records were accepted.
    """

    records: List[ProductRecord] = field(default_factory=list)
    pages_visited: int = 0
    empty_streak: int = 0
    candidates_seen: int = 0
    records_rejected: int = 0
    candidates_failed: int = 0
