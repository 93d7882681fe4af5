"""
Thin client for the hosted backend's REST interface.

Rows are read and written through the backend's query-string filters
(``column=eq.value``, ``order=column.desc``, ``limit=n``), the same calls the
web app makes through its query builder.
"""

import logging
from typing import Any, Optional

import requests

from . import settings

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when the backend cannot be reached or rejects a request."""


class BackendClient:
    def __init__(self, url: str, api_key: str, timeout: int = settings.REQUEST_TIMEOUT):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order: Optional[str] = None,
        ascending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Returns the rows of `table` matching every equality filter."""
        params: dict[str, Any] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        if limit is not None:
            params["limit"] = limit

        try:
            response = self.session.get(
                f"{self.base_url}/{table}", params=params, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise BackendError(f"Failed to read '{table}': {e}") from e

        rows = response.json()
        logger.info(f"  > Fetched {len(rows)} rows from '{table}'.")
        return rows

    def insert(self, table: str, row: dict[str, Any]) -> None:
        try:
            response = self.session.post(
                f"{self.base_url}/{table}", json=row, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise BackendError(f"Failed to insert into '{table}': {e}") from e


def client_from_settings() -> Optional[BackendClient]:
    """Returns a client when BACKEND_URL and BACKEND_API_KEY are configured."""
    if not settings.BACKEND_URL or not settings.BACKEND_API_KEY:
        return None
    return BackendClient(settings.BACKEND_URL, settings.BACKEND_API_KEY)
