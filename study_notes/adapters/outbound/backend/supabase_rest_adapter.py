"""Supabase backend adapter over its REST endpoints.

Talks to GoTrue (``/auth/v1``), PostgREST (``/rest/v1``) and Storage
(``/storage/v1``) with a plain ``requests`` session. Each instance is bound to
one caller's access token, so row-level security applies to every query.
"""

import logging
from typing import Any
from urllib.parse import quote

import requests

from ....core.domain import AuthenticatedUser
from ....core.domain.exceptions import (
    AuthenticationError,
    BackendError,
    BackendQueryError,
    StorageUploadError,
)
from ....core.ports import BackendPort

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


def _eq_filters(filters: dict[str, Any] | None) -> dict[str, str]:
    """PostgREST equality filters: ``{"col": "eq.value"}``."""
    params: dict[str, str] = {}
    for column, value in (filters or {}).items():
        if value is None:
            params[column] = "is.null"
        elif isinstance(value, bool):
            params[column] = f"eq.{str(value).lower()}"
        else:
            params[column] = f"eq.{value}"
    return params


class SupabaseRestAdapter(BackendPort):
    """Backend service implemented against a Supabase project."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        access_token: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: Project URL, e.g. ``https://xyz.supabase.co``.
            anon_key: Public anon key sent as ``apikey``.
            access_token: Caller's JWT. Falls back to the anon key when absent.
            timeout: Per-request timeout in seconds.
            session: Optional HTTP session (a new one is created otherwise).
        """
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": anon_key,
                "Authorization": f"Bearer {access_token or anon_key}",
            }
        )

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.url}{path}"
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BackendError(f"Failed to reach backend: {e}", cause=e, context={"path": path}) from e

    @staticmethod
    def _error_details(response: requests.Response) -> tuple[str, str]:
        """Message and error code from a PostgREST/Storage error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text[:200] or response.reason or "Unknown error", ""
        if not isinstance(body, dict):
            return str(body)[:200], ""
        message = body.get("message") or body.get("error_description") or body.get("error") or "Unknown error"
        return str(message), str(body.get("code") or body.get("statusCode") or "")

    def _rest(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._request(method, path, **kwargs)
        if not response.ok:
            message, code = self._error_details(response)
            logger.error("Backend %s %s failed (%s): %s", method, path, response.status_code, message)
            raise BackendQueryError(
                message,
                context={"code": code, "status": response.status_code, "path": path},
            )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendQueryError("Backend returned a non-JSON response", cause=e) from e

    def get_user(self) -> AuthenticatedUser:
        if not self.access_token:
            raise AuthenticationError("Unauthorized")
        response = self._request("GET", "/auth/v1/user")
        if not response.ok:
            message, _ = self._error_details(response)
            raise AuthenticationError("Unauthorized", context={"reason": message})
        data = response.json()
        if not isinstance(data, dict) or not data.get("id"):
            raise AuthenticationError("Unauthorized")
        return AuthenticatedUser(id=str(data["id"]), email=data.get("email"))

    def insert(self, table: str, rows: dict[str, Any] | list[dict[str, Any]]) -> list[dict[str, Any]]:
        data = self._rest(
            "POST",
            f"/rest/v1/{table}",
            json=rows,
            headers={"Prefer": "return=representation"},
        )
        return data or []

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
        params = {"select": columns, **_eq_filters(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
        return self._rest("GET", f"/rest/v1/{table}", params=params) or []

    def update(
        self, table: str, values: dict[str, Any], filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        data = self._rest(
            "PATCH",
            f"/rest/v1/{table}",
            params=_eq_filters(filters),
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return data or []

    def delete(self, table: str, filters: dict[str, Any]) -> None:
        self._rest("DELETE", f"/rest/v1/{table}", params=_eq_filters(filters))

    def rpc(self, function: str, params: dict[str, Any]) -> Any:
        return self._rest("POST", f"/rest/v1/rpc/{function}", json=params)

    def upload_file(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        response = self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{quote(path)}",
            data=content,
            headers={
                "Content-Type": content_type or "application/octet-stream",
                "x-upsert": "false",
            },
        )
        if not response.ok:
            message, _ = self._error_details(response)
            raise StorageUploadError(
                f"Failed to upload file to storage: {message}",
                context={"bucket": bucket, "path": path, "status": response.status_code},
            )
        return path

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{bucket}/{quote(path)}"
