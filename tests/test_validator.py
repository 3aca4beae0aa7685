"""Tests for record acceptance rules."""

import pytest

from catalog_scraper.schemas.profile import FilterPolicy
from catalog_scraper.scrapers.base import ProductRecord
from catalog_scraper.scrapers.validator import is_acceptable, rejection_reason


POLICY = FilterPolicy(
    min_description_length=50,
    blocked_title_keywords=("Page not found", "404", "Error"),
    blocked_description_keywords=("page has either moved", "doesn't exist"),
)

LONG_DESCRIPTION = "A dual-band GNSS antenna for precision positioning. Rugged housing. IP67 rated."


def make_record(title: str = "TW3972 Antenna", description: str = LONG_DESCRIPTION) -> ProductRecord:
    return ProductRecord(
        title=title,
        description=description,
        image_url="",
        url="https://shop.example/products/tw3972",
        product_id="tw3972",
    )


class TestRejectionReason:

    def test_accepts_good_record(self):
        assert rejection_reason(make_record(), POLICY) is None
        assert is_acceptable(make_record(), POLICY)

    def test_rejects_error_page_title(self):
        record = make_record(title="404 - Page not found")

        assert not is_acceptable(record, POLICY)
        assert rejection_reason(record, POLICY) == "blocked_title_keyword:Page not found"

    def test_title_keywords_are_case_insensitive(self):
        assert rejection_reason(make_record(title="Server ERROR"), POLICY) == "blocked_title_keyword:Error"

    def test_rejects_short_description_first(self):
        record = make_record(title="404", description="Too short.")

        assert rejection_reason(record, POLICY) == "description_too_short"

    def test_description_length_boundary(self):
        assert is_acceptable(make_record(description="x" * 50), POLICY)
        assert not is_acceptable(make_record(description="x" * 49), POLICY)

    def test_rejects_blocked_description(self):
        record = make_record(description="Sorry, the page has either moved or been removed from this site.")

        assert rejection_reason(record, POLICY) == "blocked_description_keyword:page has either moved"

    @pytest.mark.parametrize("description", ["", "anything at all"])
    def test_empty_policy_accepts_everything(self, description):
        assert is_acceptable(make_record(description=description), FilterPolicy())
