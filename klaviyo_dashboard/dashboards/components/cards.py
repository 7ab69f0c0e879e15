"""
Card components for dashboards

Provides metric card HTML generators using auto-escaped Jinja2 templates.
"""

from typing import Any

from klaviyo_dashboard.dashboards.renderer import format_currency, format_number, format_percent, render_template

VALUE_FORMATS = ("default", "number", "currency", "percent")


def format_value(value: Any, value_format: str = "default") -> str:
    """
    Apply a card value format.

    "number" adds thousand separators, "currency" renders dollars with two
    decimals, "percent" keeps preformatted rates and appends "%" to bare
    numbers, and "default" shows the value as given.
    """
    if value_format == "number":
        return format_number(value or 0)
    if value_format == "currency":
        return format_currency(value or 0)
    if value_format == "percent":
        return format_percent(value or 0)
    return "" if value is None else str(value)


def metric_card(title: str, value: Any, value_format: str = "default", css_class: str = "") -> str:
    """
    Generate a metric card HTML component.

    Args:
        title: Card title
        value: Raw value
        value_format: One of VALUE_FORMATS
        css_class: Optional CSS class for styling

    Returns:
        HTML string for metric card

    Example:
        html = metric_card(title="Revenue", value=1234.5, value_format="currency")
    """
    if value_format not in VALUE_FORMATS:
        raise ValueError(f"Unknown value format: {value_format}")

    return render_template(
        "components/metric_card.html",
        title=title,
        value=format_value(value, value_format),
        css_class=css_class,
    )


def summary_card(title: str, value: Any, icon: str = "", value_format: str = "default") -> str:
    """
    Generate a large headline card (simple dashboard view).

    Example:
        html = summary_card(title="Open Rate", value="21.40%", icon="📈")
    """
    return render_template(
        "components/summary_card.html",
        title=title,
        value=format_value(value, value_format),
        icon=icon,
    )
