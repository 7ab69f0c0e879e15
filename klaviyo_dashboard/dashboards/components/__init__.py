"""
Dashboard Components - Reusable HTML building blocks
"""

from .cards import format_value, metric_card, summary_card
from .charts import revenue_chart
from .tables import revenue_source_rows, revenue_source_table

__all__ = [
    "metric_card",
    "summary_card",
    "format_value",
    "revenue_chart",
    "revenue_source_rows",
    "revenue_source_table",
]
