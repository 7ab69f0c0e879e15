"""
Tests for Klaviyo response transformers
"""

import pytest

from klaviyo_dashboard.collectors.klaviyo_transformers import (
    classify_event,
    dig,
    event_name,
    first_truthy,
    is_placed_order,
    resource_id,
    statistics_of,
    to_float,
    to_int,
)


class TestFirstTruthy:
    """Test candidate key fallback"""

    def test_skips_zero_values(self):
        assert first_truthy({"opens": 0, "opened_count": 7}, "opens", "opened_count") == 7

    def test_first_key_wins(self):
        assert first_truthy({"opens": 3, "opened_count": 7}, "opens", "opened_count") == 3

    def test_default_when_missing(self):
        assert first_truthy({"other": 1}, "opens") == 0
        assert first_truthy(None, "opens", default=None) is None

    def test_empty_string_skipped(self):
        assert first_truthy({"sent": "", "delivered": "12"}, "sent", "delivered") == "12"


class TestDig:
    """Test nested lookup"""

    def test_nested_value(self):
        event = {"attributes": {"metric": {"name": "Placed Order"}}}
        assert dig(event, "attributes", "metric", "name") == "Placed Order"

    def test_missing_level(self):
        assert dig({"attributes": None}, "attributes", "metric") is None
        assert dig({"attributes": "text"}, "attributes", "metric") is None


class TestNumericCoercion:
    """Test to_int / to_float"""

    @pytest.mark.parametrize(
        "value,expected",
        [(12, 12), ("12", 12), ("12 opens", 12), (" 7", 7), (3.9, 3), ("abc", 0), (None, 0), ({}, 0)],
    )
    def test_to_int(self, value, expected):
        assert to_int(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [(1.5, 1.5), ("120.5", 120.5), ("99.99 USD", 99.99), (".5", 0.5), ("n/a", 0.0), (None, 0.0), (4, 4.0)],
    )
    def test_to_float(self, value, expected):
        assert to_float(value) == pytest.approx(expected)

    def test_non_finite_float(self):
        assert to_int(float("nan")) == 0
        assert to_float(float("inf")) == 0.0


class TestStatisticsOf:
    """Test statistics block lookup"""

    def test_prefers_statistics(self):
        message = {"attributes": {"opens": 1, "statistics": {"opens": 9}}}
        assert statistics_of(message) == {"opens": 9}

    def test_falls_back_to_attributes(self):
        message = {"attributes": {"opens": 1}}
        assert statistics_of(message) == {"opens": 1}

    def test_empty_statistics_kept(self):
        message = {"attributes": {"opens": 1, "statistics": {}}}
        assert statistics_of(message) == {}

    def test_no_attributes(self):
        assert statistics_of({"id": "x"}) == {}


class TestResourceId:
    """Test resource id lookup"""

    def test_top_level_id(self):
        assert resource_id({"id": "C1"}) == "C1"

    def test_attributes_id(self):
        assert resource_id({"attributes": {"id": 42}}) == "42"

    def test_missing(self):
        assert resource_id({"attributes": {}}) is None


class TestEventClassification:
    """Test event naming and classification"""

    def test_event_name_sources(self):
        assert event_name({"attributes": {"metric": {"name": "Viewed Product"}}}) == "Viewed Product"
        assert event_name({"attributes": {"event_name": "Added to Cart"}}) == "Added to Cart"
        assert event_name({"type": "event", "attributes": {}}) == "event"
        assert event_name({"type": "event", "attributes": {}}, include_type=False) == ""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Placed Order", "placed_order"),
            ("placed order", "placed_order"),
            ("Viewed Product", "viewed_product"),
            ("Added to Cart", "added_to_cart"),
            ("Active on Site", "active_on_site"),
            ("Subscribed to List", None),
            ("Ordered Product", None),
            ("", None),
        ],
    )
    def test_classify_event(self, name, expected):
        assert classify_event(name) == expected

    def test_is_placed_order(self):
        assert is_placed_order("Placed Order")
        assert not is_placed_order("Viewed Product")
