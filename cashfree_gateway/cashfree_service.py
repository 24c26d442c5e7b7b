from typing import Any, Dict
from urllib.parse import quote

import httpx

from cashfree_gateway.errors import NetworkError, UpstreamError
from cashfree_gateway.logging_config import logger
from cashfree_gateway.models import Credentials


class CashfreeClient:
    """Thin async wrapper over the Cashfree PG orders API."""

    def __init__(self, base_url: str, api_version: str, timeout: float = 15.0, transport=None):
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.transport = transport

    def _headers(self, credentials: Credentials) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-client-id": credentials.app_id,
            "x-client-secret": credentials.secret_key.get_secret_value(),
            "x-api-version": self.api_version,
        }

    async def _request(self, method: str, path: str, credentials: Credentials, payload=None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.request(method, url, headers=self._headers(credentials), json=payload)
        except httpx.RequestError as exc:
            logger.error("cashfree_unreachable", extra={"method": method, "path": path, "error_type": type(exc).__name__})
            raise NetworkError("Failed to connect to Cashfree. Please try again.") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not resp.is_success:
            logger.error(
                "cashfree_api_error",
                extra={"method": method, "path": path, "upstream_status": resp.status_code, "data": data},
            )
            raise UpstreamError(
                "Cashfree API request failed",
                upstream_status=resp.status_code,
                upstream_message=data.get("message"),
            )
        return data

    async def create_order(self, credentials: Credentials, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/pg/orders", credentials, payload)

    async def get_order(self, credentials: Credentials, order_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/pg/orders/{quote(order_id, safe='')}", credentials)
