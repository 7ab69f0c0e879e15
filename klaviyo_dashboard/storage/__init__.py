"""
Storage - SQLite schema, query wrapper and repositories

Usage:
    from klaviyo_dashboard.storage import ClientRepository, init_database

    init_database()
    client = ClientRepository().create("Acme", "ops@acme.com", "s3cret!", "pk_...")
"""

from .database import RunResult, get_connection, init_database, query, run
from .repositories import AdminRepository, ClientNotFoundError, ClientRepository, DuplicateEmailError

__all__ = [
    "init_database",
    "get_connection",
    "query",
    "run",
    "RunResult",
    "ClientRepository",
    "AdminRepository",
    "DuplicateEmailError",
    "ClientNotFoundError",
]
