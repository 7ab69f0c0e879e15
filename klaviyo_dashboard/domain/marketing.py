"""
Marketing domain models - Klaviyo metric categories

Represents the five categories shown on the dashboard:
    - CampaignMetrics: email campaign engagement and revenue
    - FlowMetrics: automated flow sends, conversions and revenue
    - EventMetrics: storefront event counts (last 30 days)
    - ProfileMetrics: profile and list membership counts
    - RevenueMetrics: placed-order revenue by source and by day

plus the combined ``DashboardMetrics`` and the condensed ``SimpleSummary``.
"""

from dataclasses import dataclass, field
from typing import Any

from .metrics import ZERO_RATE, MetricSet, format_rate


@dataclass
class CampaignMetrics(MetricSet):
    """
    Campaign totals across every campaign message.

    Attributes:
        opens: Total opens
        clicks: Total clicks (only exposed through the click-through rate)
        delivered: Total messages delivered
        bounces: Total bounces
        revenue: Attributed revenue
    """

    opens: int = 0
    clicks: int = 0
    delivered: int = 0
    bounces: int = 0
    revenue: float = 0

    @property
    def click_through_rate(self) -> str:
        return format_rate(self.clicks, self.delivered)

    @property
    def open_rate(self) -> str:
        return format_rate(self.opens, self.delivered)

    def to_dict(self) -> dict[str, Any]:
        return {
            "opens": self.opens,
            "clickThroughRate": self.click_through_rate,
            "delivered": self.delivered,
            "bounces": self.bounces,
            "revenue": self.revenue,
        }


@dataclass
class FlowMetrics(MetricSet):
    """
    Flow totals across every flow action.

    Conversion rate is conversions / sends.
    """

    sends: int = 0
    conversions: int = 0
    revenue: float = 0

    @property
    def conversion_rate(self) -> str:
        return format_rate(self.conversions, self.sends)

    def to_dict(self) -> dict[str, Any]:
        return {
            "flowConversionRate": self.conversion_rate,
            "flowSends": self.sends,
            "flowRevenue": self.revenue,
        }


@dataclass
class EventMetrics(MetricSet):
    """Counts of storefront events by kind."""

    WIRE_NAMES = {
        "placed_order": "placedOrder",
        "viewed_product": "viewedProduct",
        "added_to_cart": "addedToCart",
        "active_on_site": "activeOnSite",
    }

    placed_order: int = 0
    viewed_product: int = 0
    added_to_cart: int = 0
    active_on_site: int = 0


@dataclass
class ProfileMetrics(MetricSet):
    """
    Profile and list membership counts.

    ``list_growth`` stays "0%": growth needs historical snapshots, which the
    service does not keep.
    """

    WIRE_NAMES = {
        "total_profiles": "totalProfiles",
        "list_membership": "listMembership",
        "list_growth": "listGrowth",
    }

    total_profiles: int = 0
    list_membership: int = 0
    list_growth: str = "0%"


@dataclass
class RevenuePoint:
    """Revenue attributed to a single calendar day (YYYY-MM-DD)."""

    date: str
    revenue: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "revenue": self.revenue}


@dataclass
class RevenueMetrics(MetricSet):
    """
    Placed-order revenue, split by source and by day.

    Attributes:
        total_revenue: Sum of all positive order values
        revenue_by_source: Source name -> revenue
        revenue_over_time: Daily points sorted by date ascending
    """

    total_revenue: float = 0
    revenue_by_source: dict[str, float] = field(default_factory=dict)
    revenue_over_time: list[RevenuePoint] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "revenueByEmailSource": dict(self.revenue_by_source),
            "revenueOverTime": [point.to_dict() for point in self.revenue_over_time],
        }


@dataclass
class DashboardMetrics:
    """All five categories for one client."""

    campaign: CampaignMetrics = field(default_factory=CampaignMetrics)
    flow: FlowMetrics = field(default_factory=FlowMetrics)
    event: EventMetrics = field(default_factory=EventMetrics)
    profile: ProfileMetrics = field(default_factory=ProfileMetrics)
    revenue: RevenueMetrics = field(default_factory=RevenueMetrics)

    @classmethod
    def zeroed(cls) -> "DashboardMetrics":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "campaign": self.campaign.to_dict(),
            "flow": self.flow.to_dict(),
            "event": self.event.to_dict(),
            "profile": self.profile.to_dict(),
            "revenue": self.revenue.to_dict(),
        }


@dataclass
class SimpleSummary(MetricSet):
    """
    Condensed headline numbers for the simple dashboard view.

    Built from campaign, flow and profile totals:
        total_emails_sent = campaign delivered + flow sends
        revenue_generated = campaign revenue + flow revenue
    """

    WIRE_NAMES = {
        "total_emails_sent": "totalEmailsSent",
        "active_subscribers": "activeSubscribers",
        "revenue_generated": "revenueGenerated",
        "open_rate": "openRate",
        "click_rate": "clickRate",
        "conversion_rate": "conversionRate",
    }

    total_emails_sent: int = 0
    active_subscribers: int = 0
    revenue_generated: float = 0
    open_rate: str = ZERO_RATE
    click_rate: str = ZERO_RATE
    conversion_rate: str = ZERO_RATE

    @classmethod
    def from_categories(
        cls, campaign: CampaignMetrics, flow: FlowMetrics, profile: ProfileMetrics
    ) -> "SimpleSummary":
        return cls(
            total_emails_sent=campaign.delivered + flow.sends,
            active_subscribers=profile.total_profiles,
            revenue_generated=campaign.revenue + flow.revenue,
            open_rate=campaign.open_rate,
            click_rate=campaign.click_through_rate,
            conversion_rate=flow.conversion_rate,
        )
