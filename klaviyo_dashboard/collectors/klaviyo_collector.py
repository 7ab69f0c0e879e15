"""
Async Klaviyo Collector

Aggregates a client's Klaviyo account into the five dashboard categories:
campaigns, flows, events, profiles and revenue.

Optimizations:
- Per-resource sub-requests (campaign messages, flow actions, list members)
  are issued concurrently
- All categories run concurrently in collect_all()/collect_simple()
- One pooled HTTP/2 connection per dashboard request

Failure model:
- KlaviyoClient turns upstream errors into empty payloads
- A category that still raises is logged and replaced with its zeroed
  default (settle-all), so the dashboard always gets a complete structure
"""

import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from klaviyo_dashboard.async_http_client import AsyncSecureHTTPClient
from klaviyo_dashboard.collectors.klaviyo_client import KlaviyoClient
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
from klaviyo_dashboard.core import KlaviyoConfig, get_config, get_logger, track_performance
from klaviyo_dashboard.domain import (
    METRIC_CATEGORIES,
    CampaignMetrics,
    DashboardMetrics,
    EventMetrics,
    FlowMetrics,
    MetricSet,
    ProfileMetrics,
    RevenueMetrics,
    RevenuePoint,
    SimpleSummary,
)
from klaviyo_dashboard.utils.error_handling import log_and_continue, log_and_return_default, settle_results

logger = get_logger(__name__)

EVENT_WINDOW_DAYS = 30
REVENUE_WINDOW_DAYS = 365

# Candidate statistic keys, most specific first
MESSAGE_OPENS = ("opens", "opened_count", "email_opened")
MESSAGE_CLICKS = ("clicks", "clicked_count", "email_clicked")
MESSAGE_DELIVERED = ("sent", "delivered", "delivered_count")
MESSAGE_BOUNCES = ("bounces", "bounced", "bounced_count")
MESSAGE_REVENUE = ("revenue", "revenue_total")

CAMPAIGN_OPENS = ("opens", "opened_count")
CAMPAIGN_CLICKS = ("clicks", "clicked_count")
CAMPAIGN_DELIVERED = ("sent", "delivered")
CAMPAIGN_BOUNCES = ("bounces", "bounced_count")
CAMPAIGN_REVENUE = ("revenue",)

ACTION_SENDS = ("sends", "sent", "delivered", "delivered_count")
ACTION_CONVERSIONS = ("conversions", "converted", "converted_count")
ACTION_REVENUE = ("revenue", "revenue_total")

FLOW_SENDS = ("sends", "sent")
FLOW_CONVERSIONS = ("conversions", "converted")
FLOW_REVENUE = ("revenue",)

CATEGORY_TYPES: dict[str, type[MetricSet]] = {
    "campaign": CampaignMetrics,
    "flow": FlowMetrics,
    "event": EventMetrics,
    "profile": ProfileMetrics,
    "revenue": RevenueMetrics,
}


def utc_now() -> datetime:
    return datetime.now(UTC)


def klaviyo_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp in the form Klaviyo filters accept (``...Z``)."""
    return moment.astimezone(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")


def parse_event_date(raw: Any, fallback: datetime) -> str:
    """
    UTC calendar date (YYYY-MM-DD) of an event.

    Accepts ISO-8601 strings and epoch seconds; uses ``fallback`` when the
    event carries no timestamp.

    Raises:
        ValueError: If a timestamp is present but cannot be parsed
    """
    if raw in (None, ""):
        moment = fallback
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        moment = datetime.fromtimestamp(raw, UTC)
    elif isinstance(raw, str):
        moment = datetime.fromisoformat(raw.strip())
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
    else:
        raise ValueError(f"Unsupported timestamp: {raw!r}")
    return moment.astimezone(UTC).date().isoformat()


class AsyncKlaviyoCollector:
    """Async Klaviyo metrics collector with concurrent API calls"""

    def __init__(self, api_key: str, http_client: AsyncSecureHTTPClient, config: KlaviyoConfig | None = None):
        """
        Args:
            api_key: Client's Klaviyo private key
            http_client: Open AsyncSecureHTTPClient shared by every call
            config: Klaviyo settings (defaults to environment configuration)
        """
        self.client = KlaviyoClient(api_key, http_client, config)

    async def _gather_per_resource(
        self, resources: list[tuple[str, Awaitable[list[dict[str, Any]]]]], error_type: str
    ) -> list[list[dict[str, Any]] | None]:
        """
        Await sub-requests concurrently.

        A sub-request that raises is logged and yields None so the caller can
        skip that resource.
        """
        if not resources:
            return []
        labels = [label for label, _ in resources]
        results = await asyncio.gather(*(request for _, request in resources), return_exceptions=True)
        return settle_results(logger, results, [lambda: None] * len(resources), labels, error_type)

    # ==============================
    # Campaigns
    # ==============================

    async def collect_campaign_metrics(self) -> CampaignMetrics:
        """
        Sum statistics over every campaign message.

        A campaign without messages contributes its own campaign-level
        statistics instead.
        """
        with track_performance("klaviyo_campaign_metrics") as perf:
            campaigns = [(c, resource_id(c)) for c in await self.client.get_all("/campaigns")]
            campaigns = [(c, cid) for c, cid in campaigns if cid]
            perf["campaigns"] = len(campaigns)

            message_lists = await self._gather_per_resource(
                [
                    (f"campaign:{cid}", self.client.get_all(f"/campaigns/{cid}/campaign-messages"))
                    for _, cid in campaigns
                ],
                "Campaign messages",
            )

            metrics = CampaignMetrics()
            for (campaign, _), messages in zip(campaigns, message_lists):
                if messages is None:
                    continue
                if messages:
                    for message in messages:
                        self._add_campaign_stats(
                            metrics,
                            statistics_of(message),
                            MESSAGE_OPENS,
                            MESSAGE_CLICKS,
                            MESSAGE_DELIVERED,
                            MESSAGE_BOUNCES,
                            MESSAGE_REVENUE,
                        )
                else:
                    self._add_campaign_stats(
                        metrics,
                        statistics_of(campaign),
                        CAMPAIGN_OPENS,
                        CAMPAIGN_CLICKS,
                        CAMPAIGN_DELIVERED,
                        CAMPAIGN_BOUNCES,
                        CAMPAIGN_REVENUE,
                    )

        logger.info(
            "Campaign metrics collected",
            extra={"opens": metrics.opens, "clicks": metrics.clicks, "delivered": metrics.delivered},
        )
        return metrics

    @staticmethod
    def _add_campaign_stats(
        metrics: CampaignMetrics,
        stats: Mapping[str, Any],
        opens: tuple[str, ...],
        clicks: tuple[str, ...],
        delivered: tuple[str, ...],
        bounces: tuple[str, ...],
        revenue: tuple[str, ...],
    ) -> None:
        metrics.opens += to_int(first_truthy(stats, *opens))
        metrics.clicks += to_int(first_truthy(stats, *clicks))
        metrics.delivered += to_int(first_truthy(stats, *delivered))
        metrics.bounces += to_int(first_truthy(stats, *bounces))
        metrics.revenue += to_float(first_truthy(stats, *revenue))

    # ==============================
    # Flows
    # ==============================

    async def collect_flow_metrics(self) -> FlowMetrics:
        """Sum sends, conversions and revenue over every flow action."""
        with track_performance("klaviyo_flow_metrics") as perf:
            flows = [(f, resource_id(f)) for f in await self.client.get_all("/flows")]
            flows = [(f, fid) for f, fid in flows if fid]
            perf["flows"] = len(flows)

            action_lists = await self._gather_per_resource(
                [(f"flow:{fid}", self.client.get_all(f"/flows/{fid}/flow-actions")) for _, fid in flows],
                "Flow actions",
            )

            metrics = FlowMetrics()
            for (flow, _), actions in zip(flows, action_lists):
                if actions is None:
                    continue
                if actions:
                    for action in actions:
                        self._add_flow_stats(
                            metrics, statistics_of(action), ACTION_SENDS, ACTION_CONVERSIONS, ACTION_REVENUE
                        )
                else:
                    self._add_flow_stats(metrics, statistics_of(flow), FLOW_SENDS, FLOW_CONVERSIONS, FLOW_REVENUE)

        logger.info("Flow metrics collected", extra={"sends": metrics.sends, "conversions": metrics.conversions})
        return metrics

    @staticmethod
    def _add_flow_stats(
        metrics: FlowMetrics,
        stats: Mapping[str, Any],
        sends: tuple[str, ...],
        conversions: tuple[str, ...],
        revenue: tuple[str, ...],
    ) -> None:
        metrics.sends += to_int(first_truthy(stats, *sends))
        metrics.conversions += to_int(first_truthy(stats, *conversions))
        metrics.revenue += to_float(first_truthy(stats, *revenue))

    # ==============================
    # Events
    # ==============================

    async def _fetch_events_since(self, days: int) -> list[dict[str, Any]]:
        since = utc_now() - timedelta(days=days)
        return await self.client.get_all(
            "/events",
            {"filter": f"greater-than(datetime,{klaviyo_timestamp(since)})", "sort": "-datetime"},
        )

    async def collect_event_metrics(self) -> EventMetrics:
        """Count placed orders, product views, cart adds and site visits over the last 30 days."""
        with track_performance("klaviyo_event_metrics") as perf:
            events = await self._fetch_events_since(EVENT_WINDOW_DAYS)
            perf["events"] = len(events)

            metrics = EventMetrics()
            for event in events:
                kind = classify_event(event_name(event))
                if kind:
                    setattr(metrics, kind, getattr(metrics, kind) + 1)

        return metrics

    # ==============================
    # Profiles
    # ==============================

    async def collect_profile_metrics(self) -> ProfileMetrics:
        """Count profiles and total list membership."""
        with track_performance("klaviyo_profile_metrics") as perf:
            profiles, lists = await asyncio.gather(self.client.get_all("/profiles"), self.client.get_all("/lists"))
            list_ids = [lid for lid in (resource_id(item) for item in lists) if lid]
            perf["lists"] = len(list_ids)

            members = await self._gather_per_resource(
                [(f"list:{lid}", self.client.get_all(f"/lists/{lid}/relationships/profiles")) for lid in list_ids],
                "List members",
            )

        return ProfileMetrics(
            total_profiles=len(profiles),
            list_membership=sum(len(page) for page in members if page),
        )

    # ==============================
    # Revenue
    # ==============================

    async def collect_revenue_metrics(self) -> RevenueMetrics:
        """
        Placed-order revenue over the last 365 days.

        Orders without a positive value are ignored. Revenue is grouped by
        ``$source`` and by UTC calendar day.
        """
        with track_performance("klaviyo_revenue_metrics") as perf:
            events = await self._fetch_events_since(REVENUE_WINDOW_DAYS)
            perf["events"] = len(events)
            now = utc_now()

            total = 0.0
            by_source: dict[str, float] = defaultdict(float)
            by_day: dict[str, float] = defaultdict(float)

            for event in events:
                if not is_placed_order(event_name(event, include_type=False)):
                    continue

                attributes = dig(event, "attributes")
                if not isinstance(attributes, Mapping):
                    continue
                revenue = to_float(
                    dig(attributes, "properties", "value")
                    or attributes.get("value")
                    or dig(attributes, "properties", "$value")
                )
                if revenue <= 0:
                    continue

                try:
                    day = parse_event_date(attributes.get("datetime") or attributes.get("timestamp"), now)
                except (ValueError, OverflowError, OSError) as e:
                    log_and_continue(logger, e, {"event_id": event.get("id")}, "Order event date")
                    continue

                source = dig(attributes, "properties", "$source") or attributes.get("source") or "unknown"
                total += revenue
                by_source[str(source)] += revenue
                by_day[day] += revenue

        return RevenueMetrics(
            total_revenue=total,
            revenue_by_source=dict(by_source),
            revenue_over_time=[RevenuePoint(date=day, revenue=by_day[day]) for day in sorted(by_day)],
        )

    # ==============================
    # Aggregates
    # ==============================

    async def collect_category(self, category: str) -> MetricSet:
        """
        Collect one category, falling back to its zeroed default on failure.

        Raises:
            ValueError: If category is not one of METRIC_CATEGORIES
        """
        if category not in CATEGORY_TYPES:
            raise ValueError(f"Invalid metric category: {category}")

        collect = getattr(self, f"collect_{category}_metrics")
        try:
            return await collect()
        except Exception as e:
            return log_and_return_default(
                logger, e, {"category": category}, CATEGORY_TYPES[category].zeroed(), "Metric collection"
            )

    async def collect_all(self) -> DashboardMetrics:
        """Collect every category concurrently; failed categories come back zeroed."""
        with track_performance("klaviyo_all_metrics", alert_threshold_ms=15000.0):
            results = await asyncio.gather(
                *(getattr(self, f"collect_{category}_metrics")() for category in METRIC_CATEGORIES),
                return_exceptions=True,
            )
        campaign, flow, event, profile, revenue = settle_results(
            logger,
            results,
            [CATEGORY_TYPES[category].zeroed for category in METRIC_CATEGORIES],
            list(METRIC_CATEGORIES),
            "Metric collection",
        )
        return DashboardMetrics(campaign=campaign, flow=flow, event=event, profile=profile, revenue=revenue)

    async def collect_simple(self) -> SimpleSummary:
        """Headline summary built from campaign, flow and profile metrics."""
        categories = ("campaign", "flow", "profile")
        results = await asyncio.gather(
            self.collect_campaign_metrics(),
            self.collect_flow_metrics(),
            self.collect_profile_metrics(),
            return_exceptions=True,
        )
        campaign, flow, profile = settle_results(
            logger,
            results,
            [CATEGORY_TYPES[category].zeroed for category in categories],
            list(categories),
            "Metric collection",
        )
        return SimpleSummary.from_categories(campaign, flow, profile)


async def collect_metrics(api_key: str, scope: str = "all") -> DashboardMetrics | SimpleSummary | MetricSet:
    """
    Open a pooled HTTP client and collect metrics for one Klaviyo account.

    Args:
        api_key: Client's Klaviyo private key
        scope: "all", "simple" or one of METRIC_CATEGORIES

    Raises:
        ValueError: If scope is unknown
    """
    if scope not in ("all", "simple") and scope not in CATEGORY_TYPES:
        raise ValueError(f"Invalid metric category: {scope}")

    config = get_config().get_klaviyo_config()
    async with AsyncSecureHTTPClient(timeout=config.timeout) as http_client:
        collector = AsyncKlaviyoCollector(api_key, http_client, config)
        if scope == "all":
            return await collector.collect_all()
        if scope == "simple":
            return await collector.collect_simple()
        return await collector.collect_category(scope)
