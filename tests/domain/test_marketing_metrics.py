"""
Tests for marketing metric domain models
"""

import pytest

from klaviyo_dashboard.domain import (
    CampaignMetrics,
    DashboardMetrics,
    EventMetrics,
    FlowMetrics,
    ProfileMetrics,
    RevenueMetrics,
    RevenuePoint,
    SimpleSummary,
    format_rate,
)


class TestFormatRate:
    """Test percentage formatting for CTR and conversion rates"""

    @pytest.mark.parametrize(
        "numerator,denominator,expected",
        [
            (25, 1000, "2.50%"),
            (1, 3, "33.33%"),
            (2, 3, "66.67%"),
            (10, 10, "100.00%"),
            (0, 50, "0.00%"),
        ],
    )
    def test_rate_two_decimals(self, numerator, denominator, expected):
        assert format_rate(numerator, denominator) == expected

    def test_zero_denominator(self):
        """No deliveries must not divide by zero"""
        assert format_rate(5, 0) == "0.00%"

    def test_negative_denominator(self):
        assert format_rate(5, -1) == "0.00%"


class TestCampaignMetrics:
    """Test CampaignMetrics"""

    def test_zeroed_wire_format(self):
        assert CampaignMetrics.zeroed().to_dict() == {
            "opens": 0,
            "clickThroughRate": "0.00%",
            "delivered": 0,
            "bounces": 0,
            "revenue": 0,
        }

    def test_click_through_rate_uses_delivered(self):
        metrics = CampaignMetrics(opens=300, clicks=45, delivered=1500, bounces=7, revenue=99.5)

        data = metrics.to_dict()

        assert data["clickThroughRate"] == "3.00%"
        assert data["opens"] == 300
        assert data["revenue"] == 99.5
        assert "clicks" not in data

    def test_open_rate(self):
        assert CampaignMetrics(opens=50, delivered=200).open_rate == "25.00%"


class TestFlowMetrics:
    """Test FlowMetrics"""

    def test_zeroed_wire_format(self):
        assert FlowMetrics.zeroed().to_dict() == {"flowConversionRate": "0.00%", "flowSends": 0, "flowRevenue": 0}

    def test_conversion_rate(self):
        metrics = FlowMetrics(sends=400, conversions=10, revenue=250.0)

        assert metrics.to_dict() == {"flowConversionRate": "2.50%", "flowSends": 400, "flowRevenue": 250.0}


class TestEventAndProfileMetrics:
    """Test camelCase serialisation of count categories"""

    def test_event_wire_names(self):
        metrics = EventMetrics(placed_order=3, viewed_product=10, added_to_cart=4, active_on_site=20)

        assert metrics.to_dict() == {"placedOrder": 3, "viewedProduct": 10, "addedToCart": 4, "activeOnSite": 20}

    def test_profile_defaults(self):
        assert ProfileMetrics.zeroed().to_dict() == {"totalProfiles": 0, "listMembership": 0, "listGrowth": "0%"}


class TestRevenueMetrics:
    """Test RevenueMetrics"""

    def test_zeroed(self):
        assert RevenueMetrics.zeroed().to_dict() == {
            "totalRevenue": 0,
            "revenueByEmailSource": {},
            "revenueOverTime": [],
        }

    def test_serialises_points(self):
        metrics = RevenueMetrics(
            total_revenue=150.0,
            revenue_by_source={"email": 100.0, "unknown": 50.0},
            revenue_over_time=[RevenuePoint("2024-03-01", 100.0), RevenuePoint("2024-03-02", 50.0)],
        )

        data = metrics.to_dict()

        assert data["revenueOverTime"] == [
            {"date": "2024-03-01", "revenue": 100.0},
            {"date": "2024-03-02", "revenue": 50.0},
        ]
        assert data["revenueByEmailSource"] == {"email": 100.0, "unknown": 50.0}

    def test_zeroed_instances_do_not_share_state(self):
        first = RevenueMetrics.zeroed()
        first.revenue_by_source["email"] = 1.0

        assert RevenueMetrics.zeroed().revenue_by_source == {}


class TestDashboardMetrics:
    """Test the combined structure"""

    def test_zeroed_has_every_category(self):
        data = DashboardMetrics.zeroed().to_dict()

        assert set(data) == {"campaign", "flow", "event", "profile", "revenue"}
        assert data["campaign"]["clickThroughRate"] == "0.00%"
        assert data["profile"]["listGrowth"] == "0%"


class TestSimpleSummary:
    """Test the condensed summary"""

    def test_from_categories(self):
        campaign = CampaignMetrics(opens=200, clicks=50, delivered=1000, revenue=300.0)
        flow = FlowMetrics(sends=500, conversions=25, revenue=200.0)
        profile = ProfileMetrics(total_profiles=42)

        summary = SimpleSummary.from_categories(campaign, flow, profile)

        assert summary.to_dict() == {
            "totalEmailsSent": 1500,
            "activeSubscribers": 42,
            "revenueGenerated": 500.0,
            "openRate": "20.00%",
            "clickRate": "5.00%",
            "conversionRate": "5.00%",
        }

    def test_zeroed(self):
        data = SimpleSummary.zeroed().to_dict()

        assert data["openRate"] == "0.00%"
        assert data["clickRate"] == "0.00%"
        assert data["conversionRate"] == "0.00%"
        assert data["totalEmailsSent"] == 0
