"""
Pytest configuration and shared fixtures for garage proxy tests.

Provides mock clients, in-memory fakes for Shopify and the gateway, and
sample vehicle data.
"""
import asyncio
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from garage.core.exceptions import GatewayError, ShopifyUserError
from garage.schemas.catalog import CatalogItem


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from garage.core.config import Settings
    return Settings(
        shopify_store_domain="test-store.myshopify.com",
        shopify_admin_api_token="shpat_test_token",
        shopify_api_version="2024-01",
        cors_allow_origins=["*"],
        garage_api_base_url="http://gateway.test",
        garage_customer_id="123456",
    )


# ---------------------------------------------------------------------------
# Clients (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_shopify_client():
    """Mocked ShopifyClient (domain calls only)."""
    client = MagicMock()
    client.fetch_metaobjects_page = AsyncMock(
        return_value={"pageInfo": {"hasNextPage": False, "endCursor": None}, "nodes": []}
    )
    client.get_customer_metafield = AsyncMock(return_value=None)
    client.set_customer_metafield = AsyncMock(return_value={})
    client.create_metaobject_definition = AsyncMock(return_value={"id": "gid://shopify/MetaobjectDefinition/1"})
    client.bulk_create_metaobjects = AsyncMock(return_value=[])
    client.to_gid = MagicMock(side_effect=lambda entity, val: f"gid://shopify/{entity}/{val}")
    return client


class FakeShopifyProfileStore:
    """In-memory stand-in for the customer metafield store."""

    def __init__(self) -> None:
        self.values: Dict[tuple, str] = {}
        self.writes: List[Dict[str, Any]] = []

    async def get_customer_metafield(self, owner_id: str, namespace: str, key: str) -> Optional[Dict[str, Any]]:
        value = self.values.get((owner_id, namespace, key))
        if value is None:
            return None
        return {"id": "gid://shopify/Metafield/1", "namespace": namespace, "key": key, "value": value}

    async def set_customer_metafield(
        self, owner_id: str, namespace: str, key: str, value: str, metafield_type: Optional[str] = None
    ) -> Dict[str, Any]:
        if not owner_id.startswith("gid://shopify/Customer/"):
            raise ShopifyUserError("metafieldsSet", [{"field": ["ownerId"], "message": "Owner does not exist"}])
        self.values[(owner_id, namespace, key)] = value
        self.writes.append({"ownerId": owner_id, "value": value, "type": metafield_type})
        return {"id": "gid://shopify/Metafield/1", "namespace": namespace, "key": key, "value": value}


@pytest.fixture
def fake_profile_store():
    return FakeShopifyProfileStore()


class FakeGarageApi:
    """In-memory stand-in for the gateway, as seen by the widget."""

    def __init__(self, selection: Optional[List[str]] = None, catalog: Optional[List[CatalogItem]] = None):
        self.selection = list(selection or [])
        self.catalog = list(catalog or [])
        self.saves: List[List[str]] = []
        self.catalog_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.fail_fetch = False
        self.fail_saves = False
        self.gate: Optional[asyncio.Event] = None
        self.save_started = asyncio.Event()

    async def fetch_selection(self) -> List[str]:
        if self.fail_fetch:
            raise GatewayError("HTTP 500: Shopify unreachable", status_code=500)
        return list(self.selection)

    async def fetch_catalog(self) -> List[CatalogItem]:
        self.catalog_calls += 1
        if self.fail_fetch:
            raise GatewayError("HTTP 400: Access denied", status_code=400)
        return list(self.catalog)

    async def save_selection(self, identifiers: List[str]) -> List[str]:
        self.saves.append(list(identifiers))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.save_started.set()
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.fail_saves:
                raise GatewayError("HTTP 500: Shopify unreachable", status_code=500)
            self.selection = list(identifiers)
            return list(identifiers)
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_garage_api(sample_catalog):
    return FakeGarageApi(catalog=sample_catalog)


# ---------------------------------------------------------------------------
# Sample test data
# ---------------------------------------------------------------------------

def make_node(vehicle_id: str, year: str, make: str, model: str, category: str = "Car", style: str = "") -> Dict[str, Any]:
    """Metaobject node as returned by the metaobjects query."""
    return {
        "id": f"gid://shopify/Metaobject/{vehicle_id}",
        "handle": f"{category.lower()}-{year}-{make.lower()}-{model.lower()}-{vehicle_id}",
        "fields": [
            {"key": "type", "value": category},
            {"key": "year", "value": year},
            {"key": "make", "value": make},
            {"key": "model", "value": model},
            {"key": "style", "value": style},
            {"key": "vehicle_id", "value": vehicle_id},
        ],
    }


@pytest.fixture
def sample_nodes():
    return [
        make_node("1001", "2020", "Ford", "Mustang", style="GT Coupe"),
        make_node("1002", "2021", "Ford", "F-150", category="Truck"),
        make_node("1003", "2019", "Honda", "Civic"),
    ]


@pytest.fixture
def sample_catalog():
    return [
        CatalogItem(id="1001", category="Car", year=2020, make="Ford", model="Mustang", style="GT Coupe"),
        CatalogItem(id="1002", category="Truck", year=2021, make="Ford", model="F-150"),
        CatalogItem(id="1003", category="Car", year=2019, make="Honda", model="Civic"),
    ]


@pytest.fixture
def vehicles_csv(tmp_path):
    """Vehicles CSV with a BOM, a quoted field and two bad rows."""
    path = tmp_path / "vehicles.csv"
    path.write_text(
        "\ufefftype,year,make,model,style,id\n"
        "Car,2020,Ford,Mustang,\"GT, Coupe\",1001\n"
        "Truck,2021,Ford,F-150,,1002\n"
        "Car,2019,Honda\n"
        "Car,,Honda,Civic,,1003\n"
        "\n"
        "Car,2018,Land Rover,Range Rover Sport,HSE,1004\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def node_factory():
    return make_node
