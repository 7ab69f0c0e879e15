"""
Domain Models - Type-safe data structures for clients and metrics

This package contains dataclasses representing business domain concepts:
    - client: Client
    - marketing: CampaignMetrics, FlowMetrics, EventMetrics, ProfileMetrics,
      RevenueMetrics, DashboardMetrics, SimpleSummary

Usage:
    from klaviyo_dashboard.domain import CampaignMetrics

    metrics = CampaignMetrics(opens=120, clicks=30, delivered=1000)
    print(metrics.click_through_rate)  # "3.00%"
"""

from .client import Client
from .marketing import (
    CampaignMetrics,
    DashboardMetrics,
    EventMetrics,
    FlowMetrics,
    ProfileMetrics,
    RevenueMetrics,
    RevenuePoint,
    SimpleSummary,
)
from .metrics import ZERO_RATE, MetricSet, format_rate

METRIC_CATEGORIES = ("campaign", "flow", "event", "profile", "revenue")

__all__ = [
    # Base
    "MetricSet",
    "format_rate",
    "ZERO_RATE",
    "METRIC_CATEGORIES",
    # Client
    "Client",
    # Marketing metrics
    "CampaignMetrics",
    "FlowMetrics",
    "EventMetrics",
    "ProfileMetrics",
    "RevenueMetrics",
    "RevenuePoint",
    "DashboardMetrics",
    "SimpleSummary",
]
