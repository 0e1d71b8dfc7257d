import pytest
from newsiq.categories import (
    CANONICAL_CATEGORIES,
    is_feed_key,
    to_canonical_category,
    to_internal_feed_key,
)


class TestToInternalFeedKey:
    def test_known(self):
        assert to_internal_feed_key("Technology") == "technology"
        assert to_internal_feed_key("All News") == "top-stories"
        assert to_internal_feed_key("World") == "world"

    def test_unknown_defaults_to_top_stories(self):
        assert to_internal_feed_key("Environment") == "top-stories"

    def test_case_sensitive(self):
        assert to_internal_feed_key("technology") == "top-stories"


class TestToCanonicalCategory:
    def test_known(self):
        assert to_canonical_category("technology") == "Technology"
        assert to_canonical_category("top-stories") == "General"
        assert to_canonical_category("mumbai") == "Mumbai"
        assert to_canonical_category("education") == "Education"

    def test_unknown_defaults_to_general(self):
        assert to_canonical_category("astrology") == "General"


class TestTotality:
    @pytest.mark.parametrize("value", ["", None, "???", "  ", "TECHNOLOGY", "x" * 500, "top-stories "])
    def test_never_empty(self, value):
        assert to_internal_feed_key(value)
        assert to_canonical_category(value)

    @pytest.mark.parametrize("value", ["", None, "garbage", "delhi", "Sports"])
    def test_reverse_always_canonical(self, value):
        assert to_canonical_category(value) in CANONICAL_CATEGORIES


class TestIsFeedKey:
    def test_feed_keys(self):
        assert is_feed_key("kolkata")
        assert is_feed_key("top-stories")

    def test_app_category_is_not_feed_key(self):
        assert not is_feed_key("Technology")
        assert not is_feed_key(None)
