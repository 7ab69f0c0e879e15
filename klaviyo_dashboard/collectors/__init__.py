"""
Collectors - Klaviyo API access and metric aggregation

Usage:
    from klaviyo_dashboard.collectors import collect_metrics

    summary = await collect_metrics(api_key, "simple")
"""

from .klaviyo_client import KlaviyoClient
from .klaviyo_collector import CATEGORY_TYPES, AsyncKlaviyoCollector, collect_metrics

__all__ = ["KlaviyoClient", "AsyncKlaviyoCollector", "collect_metrics", "CATEGORY_TYPES"]
