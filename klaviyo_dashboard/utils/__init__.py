"""Shared helpers (error handling)."""
