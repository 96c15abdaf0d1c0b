"""
Integration tests for the catalog endpoint.

Exercises GET /catalog/list through the FastAPI app with a mocked Shopify
client behind the real CatalogService.
Version: 1.0.0
"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from garage.core.exceptions import ConfigurationError, ShopifyGraphQLError, TransportError
from garage.main import create_app
from garage.services.catalog_service import CatalogService
from garage.services.profile_service import ProfileService


@pytest.fixture
def client(mock_shopify_client):
    app = create_app(
        catalog_service=CatalogService(mock_shopify_client),
        profile_service=ProfileService(mock_shopify_client),
    )
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.mark.integration
class TestListCatalog:

    def test_returns_flattened_vehicles(self, client, mock_shopify_client, sample_nodes):
        mock_shopify_client.fetch_metaobjects_page = AsyncMock(
            return_value={"pageInfo": {"hasNextPage": False, "endCursor": None}, "nodes": sample_nodes}
        )

        resp = client.get("/catalog/list")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["count"] == 3
        assert body["items"][0] == {
            "id": "1001",
            "category": "Car",
            "year": 2020,
            "make": "Ford",
            "model": "Mustang",
            "style": "GT Coupe",
            "gid": "gid://shopify/Metaobject/1001",
            "handle": "car-2020-ford-mustang-1001",
        }
        assert "style" not in body["items"][1]

    def test_empty_catalog(self, client):
        resp = client.get("/catalog/list")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "count": 0, "items": []}

    def test_graphql_error_is_400(self, client, mock_shopify_client):
        mock_shopify_client.fetch_metaobjects_page = AsyncMock(
            side_effect=ShopifyGraphQLError([{"message": "Access denied for metaobjects field"}])
        )

        resp = client.get("/catalog/list")

        assert resp.status_code == 400
        assert resp.json()["error"] == "Access denied for metaobjects field"
        assert resp.json()["errors"] == [{"message": "Access denied for metaobjects field"}]

    def test_unreachable_is_500(self, client, mock_shopify_client):
        mock_shopify_client.fetch_metaobjects_page = AsyncMock(side_effect=TransportError("Shopify unreachable: timeout"))

        resp = client.get("/catalog/list")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Shopify unreachable: timeout"}

    def test_missing_credentials_is_500(self, client, mock_shopify_client):
        mock_shopify_client.fetch_metaobjects_page = AsyncMock(
            side_effect=ConfigurationError("Shopify env vars missing (SHOPIFY_STORE_DOMAIN, SHOPIFY_ADMIN_API_TOKEN)")
        )

        resp = client.get("/catalog/list")

        assert resp.status_code == 500
        assert "SHOPIFY_STORE_DOMAIN" in resp.json()["error"]
