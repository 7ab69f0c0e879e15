"""
REST API for the Klaviyo Metrics Dashboard

Provides client login, client administration and live metrics over HTTP.
"""

from .app import create_app

__all__ = ["create_app"]
