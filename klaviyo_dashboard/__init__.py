"""
Klaviyo Metrics Dashboard

Multi-tenant service that authenticates clients, stores each client's
Klaviyo private API key and aggregates campaign, flow, event, profile and
revenue metrics from the Klaviyo REST API for display.
"""

__version__ = "1.0.0"
