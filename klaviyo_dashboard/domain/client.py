"""
Client domain model - a dashboard tenant

A client owns one Klaviyo private API key. The key and the password hash
never leave the storage layer through ``to_public_dict()``.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class Client:
    """
    A dashboard tenant.

    Attributes:
        id: Database identifier
        name: Display name
        email: Unique login email
        created_at: Creation timestamp as stored by SQLite
    """

    id: int
    name: str
    email: str
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Client":
        return cls(id=int(row["id"]), name=row["name"], email=row["email"], created_at=row.get("created_at"))

    def to_public_dict(self, include_created_at: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.name, "email": self.email}
        if include_created_at:
            data["created_at"] = self.created_at
        return data
