"""
Dashboards - Server-side HTML rendering of client metrics

Usage:
    from klaviyo_dashboard.dashboards import render_simple_dashboard

    html = render_simple_dashboard("Acme", summary)
"""

from .metrics_dashboard import render_detailed_dashboard, render_simple_dashboard
from .renderer import format_currency, format_number, format_percent, render_dashboard

__all__ = [
    "render_detailed_dashboard",
    "render_simple_dashboard",
    "render_dashboard",
    "format_number",
    "format_currency",
    "format_percent",
]
