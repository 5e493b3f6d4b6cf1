"""
Async HTTP client for the minirdbms API.
"""

from typing import Any, Dict, List, Optional

import httpx

API_URL = "http://localhost:8000"


class RDBMSClient:
    """Client to communicate with the RDBMS API."""

    def __init__(self, base_url: str = API_URL, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url
        self.transport = transport

    async def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """Make HTTP request to API."""
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport) as client:
            response = await client.request(method, endpoint, **kwargs)
            response.raise_for_status()
            return response.json()

    async def query(self, query: str) -> Dict[str, Any]:
        """Run a query; returns {success, rows?, rowCount?, message?, error?}."""
        return await self._request("POST", "/query", json={"query": query})

    async def query_text(self, query: str) -> str:
        """Run a query and return the console rendering."""
        result = await self._request("POST", "/query/text", json={"query": query})
        return result["output"]

    async def list_tables(self) -> List[str]:
        result = await self._request("GET", "/tables")
        return result.get("tables", [])

    async def get_table_info(self, table_name: str) -> Dict[str, Any]:
        return await self._request("GET", f"/tables/{table_name}")
