"""
Client and admin repositories.

Wrap the generic query layer with the operations the API and CLI need.
Passwords are hashed here, so callers only ever handle plain input and
``Client`` objects without secrets.
"""

import sqlite3
from pathlib import Path
from typing import Any

from klaviyo_dashboard.core import get_logger
from klaviyo_dashboard.domain import Client
from klaviyo_dashboard.security import (
    hash_password,
    validate_api_key,
    validate_email,
    validate_required,
    verify_password,
)
from klaviyo_dashboard.storage.database import query, run

logger = get_logger(__name__)


class DuplicateEmailError(Exception):
    """Raised when an email is already registered."""

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class ClientNotFoundError(Exception):
    """Raised when a client id or email does not exist."""

    pass


class ClientRepository:
    """CRUD for the ``clients`` table."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = db_path

    def create(self, name: str, email: str, password: str, klaviyo_private_key: str) -> Client:
        """
        Register a client.

        Raises:
            ValidationError: If a field is missing or malformed
            DuplicateEmailError: If the email is already registered
        """
        validate_required(name=name, email=email, password=password, klaviyo_private_key=klaviyo_private_key)
        email = validate_email(email)
        api_key = validate_api_key(klaviyo_private_key)

        if self.get_by_email(email) is not None:
            raise DuplicateEmailError(email)

        try:
            result = run(
                "INSERT INTO clients (name, email, password, klaviyo_private_key) VALUES (?, ?, ?, ?)",
                (name.strip(), email, hash_password(password), api_key),
                db_path=self.db_path,
            )
        except sqlite3.IntegrityError as e:
            # Lost a race with a concurrent insert of the same email
            raise DuplicateEmailError(email) from e

        logger.info("Client created", extra={"client_id": result.id, "email": email})
        return self.get_by_id(result.id)

    def _find_one(self, sql: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
        rows = query(sql, params, db_path=self.db_path)
        return rows[0] if rows else None

    def get_by_id(self, client_id: int) -> Client:
        """
        Raises:
            ClientNotFoundError: If no client has this id
        """
        row = self._find_one("SELECT id, name, email, created_at FROM clients WHERE id = ?", (client_id,))
        if row is None:
            raise ClientNotFoundError(f"Client {client_id} not found")
        return Client.from_row(row)

    def get_by_email(self, email: str) -> Client | None:
        row = self._find_one(
            "SELECT id, name, email, created_at FROM clients WHERE email = ?", (email.strip().lower(),)
        )
        return Client.from_row(row) if row else None

    def authenticate(self, email: str, password: str) -> Client | None:
        """Return the client when the password matches, otherwise None."""
        row = self._find_one(
            "SELECT id, name, email, password, created_at FROM clients WHERE email = ?",
            ((email or "").strip().lower(),),
        )
        if row is None or not verify_password(password, row["password"]):
            return None
        return Client.from_row(row)

    def get_api_key(self, client_id: int) -> str:
        """
        Raises:
            ClientNotFoundError: If no client has this id
        """
        row = self._find_one("SELECT klaviyo_private_key FROM clients WHERE id = ?", (client_id,))
        if row is None:
            raise ClientNotFoundError(f"Client {client_id} not found")
        return str(row["klaviyo_private_key"])

    def list_clients(self) -> list[Client]:
        """All clients, newest first."""
        rows = query(
            "SELECT id, name, email, created_at FROM clients ORDER BY created_at DESC, id DESC",
            db_path=self.db_path,
        )
        return [Client.from_row(row) for row in rows]

    def delete(self, client_id: int) -> None:
        """
        Raises:
            ClientNotFoundError: If no client has this id
        """
        result = run("DELETE FROM clients WHERE id = ?", (client_id,), db_path=self.db_path)
        if result.changes == 0:
            raise ClientNotFoundError(f"Client {client_id} not found")
        logger.info("Client deleted", extra={"client_id": client_id})


class AdminRepository:
    """Accounts allowed to manage clients."""

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = db_path

    def create(self, email: str, password: str) -> int:
        """
        Register an admin and return its id.

        Raises:
            ValidationError: If a field is missing or malformed
            DuplicateEmailError: If the email is already registered
        """
        validate_required(email=email, password=password)
        email = validate_email(email)

        try:
            result = run(
                "INSERT INTO admins (email, password) VALUES (?, ?)",
                (email, hash_password(password)),
                db_path=self.db_path,
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateEmailError(email) from e

        logger.info("Admin created", extra={"admin_id": result.id, "email": email})
        return int(result.id or 0)

    def get_by_email(self, email: str) -> dict[str, Any] | None:
        """Return ``{"id", "email", "created_at"}`` or None."""
        rows = query(
            "SELECT id, email, created_at FROM admins WHERE email = ?",
            ((email or "").strip().lower(),),
            db_path=self.db_path,
        )
        return rows[0] if rows else None

    def authenticate(self, email: str, password: str) -> dict[str, Any] | None:
        """Return ``{"id", "email"}`` when the password matches, otherwise None."""
        rows = query(
            "SELECT id, email, password FROM admins WHERE email = ?",
            ((email or "").strip().lower(),),
            db_path=self.db_path,
        )
        if not rows or not verify_password(password, rows[0]["password"]):
            return None
        return {"id": int(rows[0]["id"]), "email": rows[0]["email"]}
