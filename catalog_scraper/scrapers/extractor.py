"""Rule-driven field extraction from rendered product pages.

Single-valued fields (title, description, image, price, drawing) take the
first selector that yields a value and ignore the rest. Multi-valued fields
merge two match sets: texts matched directly by the field's selectors,
followed by content found under headings that mention one of the field's
keywords. The merged list is deduplicated by first occurrence.
"""

import re
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

import structlog

from catalog_scraper.schemas.profile import SiteProfile
from catalog_scraper.scrapers.base import MULTI_VALUED_FIELDS, ProductRecord
from catalog_scraper.scrapers.document import DocumentTree, RenderedPage


logger = structlog.get_logger(__name__)

# Paragraphs under a matched heading must be longer than this to count
MIN_PARAGRAPH_LENGTH = 10
MAX_DESCRIPTION_SENTENCES = 3
IMAGE_PLACEHOLDER_MARKERS = ("logo", "placeholder")

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_PRODUCT_ID_STRIP_RE = re.compile(r"[^A-Za-z0-9_-]")


def dedupe(items: Iterable[str]) -> List[str]:
    """Remove duplicates, keeping first-occurrence order."""
    return list(dict.fromkeys(items))


def first_text(page: RenderedPage, selectors: Sequence[str]) -> str:
    """Text from the first selector that yields any non-empty text."""
    for selector in selectors:
        text = page.query_text(selector)
        if text:
            return text
    return ""


def _usable_image_url(page_url: str, src: str) -> Optional[str]:
    url = urljoin(page_url, src.strip())
    if urlparse(url).scheme not in ("http", "https"):
        return None
    low = url.lower()
    if any(marker in low for marker in IMAGE_PLACEHOLDER_MARKERS):
        return None
    return url


def first_image(page: RenderedPage, selectors: Sequence[str]) -> str:
    """Absolute URL of the first real product image.

    Logos, placeholders and unresolvable sources (data: URIs etc.) are
    skipped.
    """
    for selector in selectors:
        for element in page.query_all(selector):
            src = element.get("src") or element.get("data-src")
            if not src:
                continue
            url = _usable_image_url(page.url, src)
            if url:
                return url
    return ""


def first_link(page: RenderedPage, selectors: Sequence[str]) -> Optional[str]:
    """Absolute href of the first matching element that has one."""
    for selector in selectors:
        href = page.query_attribute(selector, "href")
        if href:
            return urljoin(page.url, href)
    return None


def normalize_description(text: str) -> str:
    """Trim a description to at most three sentences.

    Text with fewer than two sentences is returned unchanged.
    """
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]
    if len(sentences) < 2:
        return text
    result = ". ".join(sentences[:MAX_DESCRIPTION_SENTENCES])
    if not result.endswith("."):
        result += "."
    return result


def direct_matches(page: RenderedPage, selectors: Sequence[str]) -> List[str]:
    """All non-empty texts matched by each selector, in selector order."""
    results: List[str] = []
    for selector in selectors:
        results.extend(page.query_texts(selector))
    return results


def heading_matches(
    tree: DocumentTree,
    keywords: Sequence[str],
    min_paragraph_length: int = MIN_PARAGRAPH_LENGTH,
) -> List[str]:
    """Collect content that follows headings mentioning any keyword.

    For each heading whose text contains a keyword (case-insensitive), walk
    its following siblings up to the next heading. List containers
    contribute every non-empty item text; paragraphs contribute their text
    when it is longer than `min_paragraph_length`.
    """
    lowered = [k.lower() for k in keywords if k]
    if not lowered:
        return []

    results: List[str] = []
    for heading in tree.headings():
        heading_text = tree.text_of(heading).lower()
        if not any(k in heading_text for k in lowered):
            continue

        node = tree.next_sibling(heading)
        while node is not None and not tree.is_heading(node):
            if tree.is_list(node):
                for item in tree.list_items(node):
                    text = tree.text_of(item)
                    if text:
                        results.append(text)
            elif tree.is_paragraph(node):
                text = tree.text_of(node)
                if len(text) > min_paragraph_length:
                    results.append(text)
            node = tree.next_sibling(node)

    return results


def product_id_from_url(url: str) -> str:
    """Identifier from the URL's last non-empty path segment."""
    segments = [s for s in urlparse(url).path.split("/") if s]
    if not segments:
        return ""
    return _PRODUCT_ID_STRIP_RE.sub("", segments[-1])


def extract(
    page: RenderedPage, url: str, fallback_title: str, profile: SiteProfile
) -> ProductRecord:
    """Extract one product record from a rendered product page.

    Args:
        page: Rendered product page
        url: Candidate URL the page was loaded from
        fallback_title: Title found during discovery, used if no title rule matches
        profile: Site profile with field rules

    Returns:
        ProductRecord (not yet validated)
    """
    rules = profile.field_rules
    tree = page.tree()

    title = first_text(page, rules.title.selectors) or fallback_title

    description = first_text(page, rules.description.selectors)
    if description:
        description = normalize_description(description)

    multi: Dict[str, Optional[List[str]]] = {}
    for name in MULTI_VALUED_FIELDS:
        rule = rules.multi_valued_rule(name)
        values = dedupe(
            direct_matches(page, rule.selectors)
            + heading_matches(tree, rule.heading_keywords)
        )
        multi[name] = values or None

    custom_fields: Dict[str, List[str]] = {}
    for name, selectors in rules.custom_fields.items():
        values = dedupe(direct_matches(page, selectors))
        if values:
            custom_fields[name] = values

    record = ProductRecord(
        title=title,
        description=description,
        image_url=first_image(page, rules.image.selectors),
        url=url,
        product_id=product_id_from_url(url),
        price=first_text(page, rules.price.selectors) or None,
        drawing_url=first_link(page, rules.drawing.selectors),
        custom_fields=custom_fields,
        **multi,
    )

    logger.debug(
        "product_extracted",
        url=url,
        title=record.title,
        description_length=len(record.description),
        fields=sorted(record.multi_valued()),
        custom_fields=sorted(custom_fields),
    )
    return record
