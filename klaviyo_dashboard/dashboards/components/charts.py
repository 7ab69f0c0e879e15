"""
Chart components for dashboards

Provides inline SVG charts, so dashboards render without client-side
charting libraries.
"""

from html import escape

from klaviyo_dashboard.dashboards.renderer import format_currency, format_date
from klaviyo_dashboard.domain import RevenuePoint

AXIS_DATE_FORMAT = "%b %d"


def revenue_chart(points: list[RevenuePoint], width: int = 720, height: int = 300, color: str = "#667eea") -> str:
    """
    Generate an SVG line chart of daily revenue.

    The y axis starts at zero and is labelled at 0, half and max; the x axis
    is labelled with the first, middle and last dates ("Mar 01").

    Args:
        points: Daily revenue points sorted by date
        width: SVG width in pixels
        height: SVG height in pixels
        color: Line color

    Returns:
        HTML string with inline SVG, or "" when there are fewer than two points
    """
    if not points or len(points) < 2:
        return ""

    pad_left, pad_right, pad_top, pad_bottom = 80, 20, 20, 50
    plot_width = width - pad_left - pad_right
    plot_height = height - pad_top - pad_bottom

    max_revenue = max(point.revenue for point in points)
    scale = max_revenue if max_revenue > 0 else 1

    coords = []
    for i, point in enumerate(points):
        x = pad_left + (i / (len(points) - 1)) * plot_width
        y = pad_top + plot_height - (max(point.revenue, 0) / scale * plot_height)
        coords.append((x, y, point))

    polyline = " ".join(f"{x:.2f},{y:.2f}" for x, y, _ in coords)
    markers = "\n".join(
        f'<circle cx="{x:.2f}" cy="{y:.2f}" r="3" fill="{escape(color)}">'
        f"<title>{escape(format_date(point.date))}: {escape(format_currency(point.revenue))}</title></circle>"
        for x, y, point in coords
    )

    y_labels = []
    for fraction in (0, 0.5, 1):
        y = pad_top + plot_height - fraction * plot_height
        y_labels.append(
            f'<line x1="{pad_left}" y1="{y:.2f}" x2="{width - pad_right}" y2="{y:.2f}" class="grid-line"/>'
            f'<text x="{pad_left - 8}" y="{y + 4:.2f}" text-anchor="end" class="axis-label">'
            f"{escape(format_currency(fraction * max_revenue))}</text>"
        )

    x_labels = []
    for index in sorted({0, (len(points) - 1) // 2, len(points) - 1}):
        x, _, point = coords[index]
        x_labels.append(
            f'<text x="{x:.2f}" y="{height - pad_bottom + 20}" text-anchor="middle" class="axis-label">'
            f"{escape(format_date(point.date, AXIS_DATE_FORMAT))}</text>"
        )

    return f"""
    <svg class="revenue-chart" width="100%" height="{height}"
         viewBox="0 0 {width} {height}" preserveAspectRatio="none"
         role="img" aria-label="Revenue over time"
         xmlns="http://www.w3.org/2000/svg">
        {''.join(y_labels)}
        <polyline points="{polyline}" fill="none" stroke="{escape(color)}" stroke-width="2"/>
        {markers}
        {''.join(x_labels)}
    </svg>
    """
