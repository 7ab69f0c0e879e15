"""
Klaviyo Metrics Dashboard Generator

Renders a client's metrics as a standalone HTML page, in two views:
    - detailed: every category with a revenue chart and revenue-by-source table
    - simple: six headline numbers

Usage:
    from klaviyo_dashboard.dashboards.metrics_dashboard import render_detailed_dashboard

    html = render_detailed_dashboard("Acme", metrics, output_path=Path("acme.html"))
"""

from pathlib import Path
from typing import Any

from klaviyo_dashboard.core import get_logger
from klaviyo_dashboard.dashboards.components import metric_card, revenue_chart, revenue_source_table, summary_card
from klaviyo_dashboard.dashboards.renderer import render_dashboard
from klaviyo_dashboard.domain import DashboardMetrics, SimpleSummary

logger = get_logger(__name__)


def render_detailed_dashboard(
    client_name: str,
    metrics: DashboardMetrics,
    output_path: Path | None = None,
    simple_view_url: str | None = None,
) -> str:
    """
    Generate the detailed dashboard HTML.

    Args:
        client_name: Shown in the header
        metrics: All five categories
        output_path: Optional path to write the HTML file
        simple_view_url: Optional link to the simple view

    Returns:
        Generated HTML string
    """
    logger.info("Generating detailed dashboard", extra={"client_name": client_name})

    context = {
        "client_name": client_name,
        "sections": _build_sections(metrics),
        "simple_view_url": simple_view_url,
    }
    html = render_dashboard("dashboards/detailed.html", context)
    _write_output(html, output_path)
    return html


def render_simple_dashboard(
    client_name: str,
    summary: SimpleSummary,
    output_path: Path | None = None,
    detailed_view_url: str | None = None,
) -> str:
    """
    Generate the simple (headline) dashboard HTML.

    Args:
        client_name: Shown in the header
        summary: Condensed summary metrics
        output_path: Optional path to write the HTML file
        detailed_view_url: Optional link to the detailed view

    Returns:
        Generated HTML string
    """
    logger.info("Generating simple dashboard", extra={"client_name": client_name})

    cards = [
        summary_card("Total Emails Sent", summary.total_emails_sent, icon="✉️", value_format="number"),
        summary_card("Active Subscribers", summary.active_subscribers, icon="👥", value_format="number"),
        summary_card("Revenue Generated", summary.revenue_generated, icon="$", value_format="currency"),
        summary_card("Open Rate", summary.open_rate, icon="📈", value_format="percent"),
        summary_card("Click Rate", summary.click_rate, icon="🎯", value_format="percent"),
        summary_card("Conversion Rate", summary.conversion_rate, icon="🛒", value_format="percent"),
    ]
    context = {"client_name": client_name, "cards": cards, "detailed_view_url": detailed_view_url}
    html = render_dashboard("dashboards/simple.html", context)
    _write_output(html, output_path)
    return html


def _build_sections(metrics: DashboardMetrics) -> list[dict[str, Any]]:
    """Build one template section per metric category."""
    campaign, flow, event, profile, revenue = (
        metrics.campaign,
        metrics.flow,
        metrics.event,
        metrics.profile,
        metrics.revenue,
    )

    return [
        {
            "id": "campaign",
            "title": "Campaign Metrics",
            "cards": [
                metric_card("Opens", campaign.opens, "number"),
                metric_card("Click-through Rate", campaign.click_through_rate, "percent"),
                metric_card("Delivered", campaign.delivered, "number"),
                metric_card("Bounces", campaign.bounces, "number"),
                metric_card("Revenue", campaign.revenue, "currency"),
            ],
        },
        {
            "id": "flow",
            "title": "Flow Metrics",
            "cards": [
                metric_card("Flow Conversion Rate", flow.conversion_rate, "percent"),
                metric_card("Flow Sends", flow.sends, "number"),
                metric_card("Flow Revenue", flow.revenue, "currency"),
            ],
        },
        {
            "id": "event",
            "title": "Event Metrics",
            "cards": [
                metric_card("Placed Order", event.placed_order, "number"),
                metric_card("Viewed Product", event.viewed_product, "number"),
                metric_card("Added to Cart", event.added_to_cart, "number"),
                metric_card("Active on Site", event.active_on_site, "number"),
            ],
        },
        {
            "id": "profile",
            "title": "Profile Metrics",
            "cards": [
                metric_card("Total Profiles", profile.total_profiles, "number"),
                metric_card("List Membership", profile.list_membership, "number"),
                metric_card("List Growth", profile.list_growth, "percent"),
            ],
        },
        {
            "id": "revenue",
            "title": "Revenue Metrics",
            "cards": [metric_card("Total Revenue", revenue.total_revenue, "currency")],
            "chart": revenue_chart(revenue.revenue_over_time),
            "table": revenue_source_table(revenue.revenue_by_source),
        },
    ]


def _write_output(html: str, output_path: Path | None) -> None:
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        logger.info("Dashboard written to file", extra={"path": str(output_path)})
