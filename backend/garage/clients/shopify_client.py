import logging
from typing import Any, Dict, List, Optional

import httpx

from garage.core.config import Settings
from garage.core.exceptions import (
    ConfigurationError,
    ShopifyGraphQLError,
    ShopifyUserError,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger("shopify_client")


METAOBJECTS_PAGE_QUERY = """
    query GetMetaobjects($type: String!, $first: Int!, $cursor: String) {
        metaobjects(type: $type, first: $first, after: $cursor) {
            pageInfo {
                hasNextPage
                endCursor
            }
            nodes {
                id
                handle
                fields {
                    key
                    value
                }
            }
        }
    }
"""

CUSTOMER_METAFIELD_QUERY = """
    query GetCustomerMetafield($ownerId: ID!, $namespace: String!, $key: String!) {
        customer(id: $ownerId) {
            id
            metafield(namespace: $namespace, key: $key) {
                id
                namespace
                key
                value
            }
        }
    }
"""

METAFIELDS_SET_MUTATION = """
    mutation metafieldsSet($metafields: [MetafieldsSetInput!]!) {
        metafieldsSet(metafields: $metafields) {
            metafields {
                id
                namespace
                key
                value
            }
            userErrors { field message }
        }
    }
"""

METAOBJECT_DEFINITION_CREATE_MUTATION = """
    mutation CreateMetaobjectDefinition($definition: MetaobjectDefinitionCreateInput!) {
        metaobjectDefinitionCreate(definition: $definition) {
            metaobjectDefinition {
                id
                name
                type
            }
            userErrors { field message }
        }
    }
"""

METAOBJECT_BULK_CREATE_MUTATION = """
    mutation CreateMetaobjects($metaobjects: [MetaobjectCreateInput!]!) {
        metaobjectBulkCreate(metaobjects: $metaobjects) {
            metaobjects {
                id
                handle
            }
            userErrors { field message code }
        }
    }
"""


class ShopifyClient:
    """Async transport for the Shopify Admin GraphQL API."""

    def __init__(self, settings: Settings) -> None:
        raw_domain = settings.shopify_store_domain
        self._store_domain = self.normalize_store_domain(raw_domain)
        self._token = settings.shopify_admin_api_token
        self._api_version = settings.shopify_api_version
        self._timeout = settings.shopify_request_timeout
        logger.info(f"ShopifyClient initialized: domain={self._store_domain} (raw: {raw_domain}), api_version={self._api_version}")

    @staticmethod
    def normalize_store_domain(domain: Optional[str]) -> Optional[str]:
        """
        Normalize Shopify store domain to ensure it has .myshopify.com suffix.

        Handles these formats:
        - "my-store" -> "my-store.myshopify.com"
        - "my-store.myshopify.com" -> "my-store.myshopify.com" (unchanged)
        - "https://my-store.myshopify.com/" -> "my-store.myshopify.com"
        """
        if not domain:
            return domain

        domain = domain.replace("https://", "").replace("http://", "")
        domain = domain.rstrip("/")

        if not domain.endswith(".myshopify.com"):
            domain = f"{domain}.myshopify.com"

        return domain

    @staticmethod
    def to_gid(entity: str, value: str | int) -> str:
        if isinstance(value, str) and value.startswith("gid://"):
            return value
        return f"gid://shopify/{entity}/{value}"

    def _graphql_url(self) -> str:
        if not self._store_domain or not self._token:
            raise ConfigurationError("Shopify env vars missing (SHOPIFY_STORE_DOMAIN, SHOPIFY_ADMIN_API_TOKEN)")
        return f"https://{self._store_domain}/admin/api/{self._api_version}/graphql.json"

    async def call_shopify(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = self._graphql_url()
        headers = {
            "X-Shopify-Access-Token": self._token or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        logger.info("shopify request variables=%s", payload.get("variables"))

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("shopify transport error=%s", exc)
            raise TransportError(f"Shopify unreachable: {exc}") from exc

        logger.info("shopify response status=%s", resp.status_code)
        if resp.status_code >= 500:
            raise TransportError(f"Shopify responded {resp.status_code}: {resp.text}")
        if resp.status_code >= 400:
            raise UpstreamError("Shopify", f"Shopify responded {resp.status_code}: {resp.text}")

        if resp.text:
            return resp.json()
        return {}

    async def call_shopify_graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {"query": query, "variables": variables or {}}
        data = await self.call_shopify(payload)
        if data.get("errors"):
            logger.error("shopify graphql errors=%s", data.get("errors"))
            raise ShopifyGraphQLError(data["errors"])
        return data.get("data") or {}

    @staticmethod
    def _raise_user_errors(mutation: str, result: Dict[str, Any]) -> None:
        user_errors = result.get("userErrors") or []
        if user_errors:
            logger.info("shopify %s userErrors=%s", mutation, user_errors)
            raise ShopifyUserError(mutation, user_errors)

    async def fetch_metaobjects_page(
        self,
        metaobject_type: str,
        first: int,
        cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch one page of metaobjects: ``{"pageInfo": {...}, "nodes": [...]}``."""
        data = await self.call_shopify_graphql(
            METAOBJECTS_PAGE_QUERY,
            {"type": metaobject_type, "first": first, "cursor": cursor},
        )
        return data.get("metaobjects") or {"pageInfo": {"hasNextPage": False, "endCursor": None}, "nodes": []}

    async def get_customer_metafield(self, owner_id: str, namespace: str, key: str) -> Optional[Dict[str, Any]]:
        data = await self.call_shopify_graphql(
            CUSTOMER_METAFIELD_QUERY,
            {"ownerId": owner_id, "namespace": namespace, "key": key},
        )
        customer = data.get("customer") or {}
        return customer.get("metafield")

    async def set_customer_metafield(
        self,
        owner_id: str,
        namespace: str,
        key: str,
        value: str,
        metafield_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Overwrite one customer metafield. Returns the stored metafield."""
        metafield: Dict[str, Any] = {
            "ownerId": owner_id,
            "namespace": namespace,
            "key": key,
            "value": value,
        }
        if metafield_type:
            metafield["type"] = metafield_type

        data = await self.call_shopify_graphql(METAFIELDS_SET_MUTATION, {"metafields": [metafield]})
        result = data.get("metafieldsSet") or {}
        self._raise_user_errors("metafieldsSet", result)
        metafields = result.get("metafields") or []
        return metafields[0] if metafields else {}

    async def create_metaobject_definition(self, definition: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.call_shopify_graphql(METAOBJECT_DEFINITION_CREATE_MUTATION, {"definition": definition})
        result = data.get("metaobjectDefinitionCreate") or {}
        self._raise_user_errors("metaobjectDefinitionCreate", result)
        return result.get("metaobjectDefinition") or {}

    async def bulk_create_metaobjects(self, metaobjects: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        data = await self.call_shopify_graphql(METAOBJECT_BULK_CREATE_MUTATION, {"metaobjects": metaobjects})
        result = data.get("metaobjectBulkCreate") or {}
        self._raise_user_errors("metaobjectBulkCreate", result)
        return result.get("metaobjects") or []
