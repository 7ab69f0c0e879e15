"""
Table components for dashboards
"""

from klaviyo_dashboard.dashboards.renderer import format_currency, render_template


def revenue_source_rows(revenue_by_source: dict[str, float]) -> list[dict[str, str]]:
    """
    Rows for the revenue-by-source table, largest amount first.

    Ties keep source-name order so output is stable.

    Example:
        >>> revenue_source_rows({"email": 10.0, "sms": 25.5})
        [{'source': 'sms', 'revenue': '$25.50'}, {'source': 'email', 'revenue': '$10.00'}]
    """
    ordered = sorted(revenue_by_source.items(), key=lambda item: (-item[1], item[0]))
    return [{"source": source, "revenue": format_currency(amount)} for source, amount in ordered]


def revenue_source_table(revenue_by_source: dict[str, float]) -> str:
    """Render the revenue-by-source list ("" when there is no revenue)."""
    if not revenue_by_source:
        return ""
    return render_template("components/revenue_sources.html", rows=revenue_source_rows(revenue_by_source))
