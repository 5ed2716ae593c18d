"""Remote store client for a PostgREST-compatible hosted backend."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import RemoteStoreError
from .base import RemoteStore, Select

logger = logging.getLogger(__name__)


class RestStore(RemoteStore):
    """
    Talks to ``{base_url}/rest/v1`` the way the hosted backend's browser SDK does.

    Args:
        base_url: Project URL of the hosted backend
        api_key: Public (anon) API key sent as the ``apikey`` header
        access_token: Caller's JWT; row-level security is evaluated against it
        timeout: Request timeout in seconds
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Accept": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers=self._headers(),
            timeout=self.timeout,
            transport=self.transport
        )

    @staticmethod
    def query_params(query: Select) -> Dict[str, str]:
        """Translate a Select into PostgREST query parameters."""
        params = {"select": query.select_clause()}
        for column, value in query.filters.items():
            params[column] = f"eq.{value}"
        if query.order is not None:
            direction = "asc" if query.order.ascending else "desc"
            params["order"] = f"{query.order.column}.{direction}"
        return params

    @staticmethod
    def _raise_for_response(response: httpx.Response, action: str):
        if response.is_success:
            return
        message = response.text
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message", message)
        raise RemoteStoreError(f"{action} failed: {message}", status_code=response.status_code)

    @staticmethod
    def _rows(response: httpx.Response, action: str) -> List[Dict[str, Any]]:
        """Parse a 2xx body, which must be a JSON array of rows."""
        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"{action} returned a body that is not JSON: {e}")
            raise RemoteStoreError(f"{action} returned invalid JSON", status_code=response.status_code) from e
        if not isinstance(body, list):
            logger.error(f"{action} returned {type(body).__name__} instead of a list of rows")
            raise RemoteStoreError(f"{action} returned no rows", status_code=response.status_code)
        return body

    async def select(self, query: Select) -> List[Dict[str, Any]]:
        try:
            async with self._client() as client:
                response = await client.get(f"/{query.table}", params=self.query_params(query))
        except httpx.HTTPError as e:
            logger.error(f"Error selecting from {query.table}: {e}")
            raise RemoteStoreError(f"Error reading {query.table}: {e}") from e

        action = f"Select from {query.table}"
        self._raise_for_response(response, action)
        return self._rows(response, action)

    async def insert_many(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        try:
            async with self._client() as client:
                response = await client.post(
                    f"/{table}",
                    json=rows,
                    headers={"Prefer": "return=representation"}
                )
        except httpx.HTTPError as e:
            logger.error(f"Error inserting into {table}: {e}")
            raise RemoteStoreError(f"Error writing {table}: {e}") from e

        action = f"Insert into {table}"
        self._raise_for_response(response, action)
        created = self._rows(response, action)
        if len(created) != len(rows):
            raise RemoteStoreError(
                f"Insert into {table} returned {len(created)} row(s) for {len(rows)}"
            )
        logger.info(f"Inserted {len(created)} row(s) into {table}")
        return created
