"""Read-only client for Caspio REST v2 table records."""

import logging
from typing import Any

import httpx

from bestagent.caspio.auth import TokenCache
from bestagent.caspio.filters import Where
from bestagent.utils.exceptions import QueryError

logger = logging.getLogger(__name__)


class CaspioClient:
    """Queries named tables of a Caspio account."""

    def __init__(
        self,
        base_url: str,
        token_cache: TokenCache,
        http_client: httpx.Client,
        page_size: int = 100,
    ):
        """Initialize the client.

        Args:
            base_url: Account root URL (https://<account>.caspio.com)
            token_cache: Source of bearer tokens
            http_client: Shared HTTP client
            page_size: Default q.pageSize
        """
        self.base_url = base_url.rstrip("/")
        self.token_cache = token_cache
        self.http_client = http_client
        self.page_size = page_size

    def records_url(self, table: str) -> str:
        return f"{self.base_url}/rest/v2/tables/{table}/records"

    def query(
        self,
        table: str,
        where: Where | None = None,
        page_size: int | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch the records of a table matching an optional where clause.

        Args:
            table: Table name
            where: Filter built with ``bestagent.caspio.filters``
            page_size: Overrides the default q.pageSize

        Returns:
            List of record dicts (empty when nothing matches)

        Raises:
            AuthError: If a token cannot be obtained
            QueryError: If the query fails
        """
        token = self.token_cache.get_token()

        params: dict[str, Any] = {"q.pageSize": page_size or self.page_size}
        if where is not None:
            params["q.where"] = str(where)

        logger.debug("Querying %s where %s", table, where)
        try:
            response = self.http_client.get(
                self.records_url(table),
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.RequestError as e:
            raise QueryError(f"Caspio query request failed: {e}") from e

        if not response.is_success:
            raise QueryError(f"Caspio query failed: {response.status_code}")

        try:
            data = response.json() if response.content else {}
        except ValueError as e:
            raise QueryError(f"Caspio query returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise QueryError("Caspio query returned an unexpected payload")
        rows = data.get("Result") or []
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise QueryError("Caspio query returned an unexpected payload")
        return rows
