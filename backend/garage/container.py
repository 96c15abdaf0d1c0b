"""
Lazy DI container — singleton access to the Shopify client and services.

Import individual getters to avoid circular imports.
"""

from functools import lru_cache

from garage.clients.garage_api_client import GarageApiClient
from garage.clients.shopify_client import ShopifyClient
from garage.core.config import settings
from garage.core.exceptions import ConfigurationError
from garage.services.catalog_service import CatalogService
from garage.services.import_service import VehicleImportService
from garage.services.profile_service import ProfileService
from garage.widget.controller import GarageController


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_shopify_client():
    return ShopifyClient(settings)


# -- Services --------------------------------------------------------------

@lru_cache(maxsize=1)
def get_catalog_service():
    return CatalogService(
        get_shopify_client(),
        metaobject_type=settings.catalog_metaobject_type,
        page_size=settings.catalog_page_size,
        max_pages=settings.catalog_max_pages,
    )


@lru_cache(maxsize=1)
def get_profile_service():
    return ProfileService(
        get_shopify_client(),
        catalog_service=get_catalog_service(),
        namespace=settings.profile_metafield_namespace,
        key=settings.profile_metafield_key,
        metafield_type=settings.profile_metafield_type or None,
    )


@lru_cache(maxsize=1)
def get_import_service():
    return VehicleImportService(
        get_shopify_client(),
        metaobject_type=settings.catalog_metaobject_type,
        batch_size=settings.import_batch_size,
        batch_delay=settings.import_batch_delay_seconds,
    )


# -- Widget ----------------------------------------------------------------

def build_garage_controller(customer_id: str | None = None) -> GarageController:
    """One controller per widget session, talking to the configured gateway."""
    customer = customer_id or settings.garage_customer_id
    if not customer:
        raise ConfigurationError("GARAGE_CUSTOMER_ID (or an explicit customer id) is required")
    api = GarageApiClient(settings.garage_api_base_url, customer, timeout=settings.shopify_request_timeout)
    return GarageController(
        api,
        debounce_seconds=settings.garage_save_debounce_seconds,
        result_limit=settings.garage_result_limit,
    )
