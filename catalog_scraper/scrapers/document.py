"""Query surface over a rendered document.

The renderer hands the core a RenderedPage: a BeautifulSoup parse of the
live DOM plus the URL it was loaded from. Discovery and extraction only
ever talk to this class and to the DocumentTree walk interface, so they
can be exercised against plain HTML fixtures.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from bs4 import BeautifulSoup, Tag


HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
LIST_TAGS = ("ul", "ol")


def element_text(element: Tag) -> str:
    """Trimmed text content of an element (like DOM textContent)."""
    return element.get_text().strip()


class DocumentTree(ABC):
    """Minimal sibling-walk interface used by heading association.

    Nodes are opaque to the algorithm; only the adapter knows what they are.
    """

    @abstractmethod
    def headings(self) -> List[Any]:
        """All heading-level nodes in document order."""

    @abstractmethod
    def next_sibling(self, node: Any) -> Optional[Any]:
        """The next element sibling of a node, or None."""

    @abstractmethod
    def is_heading(self, node: Any) -> bool:
        pass

    @abstractmethod
    def is_list(self, node: Any) -> bool:
        pass

    @abstractmethod
    def is_paragraph(self, node: Any) -> bool:
        pass

    @abstractmethod
    def list_items(self, node: Any) -> List[Any]:
        """Item nodes of a list container, in order."""

    @abstractmethod
    def text_of(self, node: Any) -> str:
        """Trimmed text of a node."""


class SoupTree(DocumentTree):
    """DocumentTree over a BeautifulSoup document."""

    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    def headings(self) -> List[Tag]:
        return self._soup.find_all(list(HEADING_TAGS))

    def next_sibling(self, node: Tag) -> Optional[Tag]:
        return node.find_next_sibling()

    def is_heading(self, node: Tag) -> bool:
        return node.name in HEADING_TAGS

    def is_list(self, node: Tag) -> bool:
        return node.name in LIST_TAGS

    def is_paragraph(self, node: Tag) -> bool:
        return node.name == "p"

    def list_items(self, node: Tag) -> List[Tag]:
        return node.find_all("li")

    def text_of(self, node: Tag) -> str:
        return element_text(node)


class RenderedPage:
    """A rendered document and the URL it was loaded from.

    Every query accepts an optional `scope` element; without it the whole
    document is searched. Selectors are CSS, evaluated by soupsieve.
    """

    def __init__(self, html: str, url: str):
        self.url = url
        self.soup = BeautifulSoup(html or "", "html.parser")

    def query_all(self, selector: str, scope: Optional[Tag] = None) -> List[Tag]:
        """All elements matching a selector, in document order."""
        root = scope if scope is not None else self.soup
        return root.select(selector)

    def query_text(self, selector: str, scope: Optional[Tag] = None) -> str:
        """Text of the first matching element with non-empty text, or ""."""
        for element in self.query_all(selector, scope):
            text = element_text(element)
            if text:
                return text
        return ""

    def query_texts(self, selector: str, scope: Optional[Tag] = None) -> List[str]:
        """Non-empty trimmed texts of every matching element."""
        texts = []
        for element in self.query_all(selector, scope):
            text = element_text(element)
            if text:
                texts.append(text)
        return texts

    def query_attribute(
        self, selector: str, attr_name: str, scope: Optional[Tag] = None
    ) -> str:
        """Value of an attribute on the first matching element that has it, or ""."""
        for element in self.query_all(selector, scope):
            value = element.get(attr_name)
            if isinstance(value, list):
                value = " ".join(value)
            if value and value.strip():
                return value.strip()
        return ""

    def tree(self) -> SoupTree:
        return SoupTree(self.soup)
