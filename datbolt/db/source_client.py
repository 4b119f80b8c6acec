"""Read-only client for the Supabase PostgREST API.

Used by the migration pipeline for counting and paging through source tables.
"""

import logging

import requests

from datbolt.config import Settings
from datbolt.errors import ConnectionSetupError, SourceQueryError

logger = logging.getLogger(__name__)


class SourceClient:
    """Thin wrapper over the PostgREST table endpoints."""

    def __init__(self, rest_url: str, service_key: str, session: requests.Session | None = None):
        self.rest_url = rest_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Accept": "application/json",
        })

    @classmethod
    def from_settings(cls, settings: Settings) -> "SourceClient":
        if not settings.source_rest_url or settings.supabase_service_key is None:
            raise ConnectionSetupError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY environment variables are required"
            )
        return cls(settings.source_rest_url, settings.supabase_service_key.get_secret_value())

    def ping(self) -> None:
        """Check that the API answers and accepts our key."""
        try:
            response = self.session.get(f"{self.rest_url}/")
        except requests.RequestException as e:
            raise ConnectionSetupError(f"Source API unreachable: {e}") from e
        if response.status_code in (401, 403):
            raise ConnectionSetupError(
                f"Source API rejected credentials (HTTP {response.status_code})"
            )
        logger.info("Supabase client initialized")

    def count(self, table: str) -> int:
        """Exact row count via HEAD + ``Prefer: count=exact``."""
        response = self._request(
            "HEAD", table, params={"select": "*"}, headers={"Prefer": "count=exact"}
        )
        content_range = response.headers.get("Content-Range", "")
        _, _, total = content_range.partition("/")
        if not total or total == "*":
            raise SourceQueryError(table, f"missing row count in Content-Range '{content_range}'")
        try:
            return int(total)
        except ValueError:
            raise SourceQueryError(table, f"malformed row count in Content-Range '{content_range}'") from None

    def select(
        self,
        table: str,
        columns: str = "*",
        order_by: str | None = None,
        offset: int | None = None,
        limit: int | None = None,
        not_null: list[str] | None = None,
    ) -> list[dict]:
        params = {"select": columns}
        if order_by:
            params["order"] = f"{order_by}.asc"
        if offset is not None:
            params["offset"] = offset
        if limit is not None:
            params["limit"] = limit
        for column in not_null or []:
            params[column] = "not.is.null"

        response = self._request("GET", table, params=params)
        try:
            return response.json() or []
        except ValueError:
            raise SourceQueryError(table, f"response is not JSON (HTTP {response.status_code})") from None

    def close(self) -> None:
        self.session.close()

    def _request(self, method: str, table: str, params: dict, headers: dict | None = None):
        try:
            response = self.session.request(
                method, f"{self.rest_url}/{table}", params=params, headers=headers
            )
        except requests.RequestException as e:
            raise SourceQueryError(table, str(e)) from e

        if response.status_code >= 400:
            raise SourceQueryError(table, _error_message(response))
        return response


def _error_message(response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("message"):
        return payload["message"]
    return f"HTTP {response.status_code}"
