import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from garage.core.exceptions import GatewayError
from garage.schemas.catalog import CatalogItem

logger = logging.getLogger("garage_api_client")


class GarageApiClient:
    """Widget-side client for the garage gateway (one customer per client)."""

    def __init__(self, base_url: str, customer_id: str, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._customer_id = customer_id
        self._timeout = timeout

    @property
    def customer_id(self) -> str:
        return self._customer_id

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.error("gateway transport error method=%s path=%s error=%s", method, path, exc)
            raise GatewayError(f"Gateway unreachable: {exc}") from exc

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            detail = body.get("error") if isinstance(body, dict) else None
            message = f"HTTP {resp.status_code}" + (f": {detail}" if detail else "")
            raise GatewayError(message, status_code=resp.status_code, errors=body.get("errors") if isinstance(body, dict) else None)

        if not resp.text:
            return {}
        try:
            body = resp.json()
        except ValueError as exc:
            logger.error("gateway returned non-JSON body method=%s path=%s status=%s", method, path, resp.status_code)
            raise GatewayError("Invalid gateway response", status_code=resp.status_code) from exc
        if not isinstance(body, dict):
            raise GatewayError("Invalid gateway response", status_code=resp.status_code)
        return body

    async def fetch_selection(self) -> List[str]:
        data = await self._request("GET", "/profile/selection", params={"customerId": self._customer_id})
        return [str(item) for item in data.get("items") or []]

    async def fetch_catalog(self) -> List[CatalogItem]:
        data = await self._request("GET", "/catalog/list")
        try:
            return [CatalogItem.model_validate(item) for item in data.get("items") or []]
        except ValidationError as exc:
            logger.error("gateway returned malformed catalog rows error=%s", exc)
            raise GatewayError(f"Invalid catalog item: {exc.errors()[0].get('msg')}", errors=exc.errors()) from exc

    async def save_selection(self, identifiers: List[str]) -> List[str]:
        data = await self._request(
            "POST",
            "/profile/selection",
            json={"customerId": self._customer_id, "items": list(identifiers)},
        )
        return [str(item) for item in data.get("stored") or []]
