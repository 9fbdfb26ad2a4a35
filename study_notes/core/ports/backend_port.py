"""Backend Service Port Interface.

The backend owns authentication, relational rows and blob storage. Rows are
plain dictionaries keyed by column name; filters are equality matches.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import AuthenticatedUser


class BackendPort(ABC):
    """Abstract interface for the hosted backend service."""

    @abstractmethod
    def get_user(self) -> AuthenticatedUser:
        """Resolve the user the client is authenticated as."""
        ...

    @abstractmethod
    def insert(self, table: str, rows: dict[str, Any] | list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert one or more rows and return them as stored."""
        ...

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select rows matching all equality filters."""
        ...

    @abstractmethod
    def update(
        self, table: str, values: dict[str, Any], filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Update rows matching the filters and return them."""
        ...

    @abstractmethod
    def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete rows matching the filters."""
        ...

    @abstractmethod
    def rpc(self, function: str, params: dict[str, Any]) -> Any:
        """Call a stored procedure and return its decoded result."""
        ...

    @abstractmethod
    def upload_file(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """Store a blob and return its storage path."""
        ...

    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        """Public URL for a stored blob."""
        ...

    def close(self) -> None:
        """Release network resources (no-op by default)."""
        return None
