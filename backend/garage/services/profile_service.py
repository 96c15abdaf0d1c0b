"""
Profile service — reads and overwrites the customer's saved garage.

The garage lives in one customer metafield as a JSON array of vehicle
identifiers. Every save is a full overwrite (last writer wins).
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from garage.clients.shopify_client import ShopifyClient
from garage.core.constants import profile as profile_constants
from garage.core.exceptions import ValidationError
from garage.schemas.catalog import CatalogItem
from garage.schemas.profile import FilterDefaults
from garage.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


def normalize_customer_id(customer_id: Any) -> str:
    """
    Return the canonical customer gid.

    Accepts a bare numeric id ("123456", 123456) or an already-qualified
    "gid://shopify/Customer/123456".
    """
    if customer_id is None or isinstance(customer_id, bool):
        raise ValidationError("customerId is required")

    value = str(customer_id).strip()
    if not value:
        raise ValidationError("customerId is required")

    if value.startswith(profile_constants.CUSTOMER_GID_PREFIX):
        if value[len(profile_constants.CUSTOMER_GID_PREFIX):].isdigit():
            return value
    elif value.isdigit():
        return f"{profile_constants.CUSTOMER_GID_PREFIX}{value}"

    raise ValidationError(
        f"customerId must be a numeric id or {profile_constants.CUSTOMER_GID_PREFIX}<id>, got {value!r}"
    )


def dedupe_identifiers(identifiers: Iterable[Any]) -> List[str]:
    seen = set()
    unique: List[str] = []
    for identifier in identifiers:
        cleaned = str(identifier).strip()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            unique.append(cleaned)
    return unique


def deserialize_selection(value: Optional[str]) -> List[str]:
    """
    Parse a stored garage value into identifiers.

    Absent values are an empty garage. Entries stored as full vehicle
    objects (older widget versions) are reduced to their identifier.
    """
    if not value:
        return []
    try:
        raw = json.loads(value)
    except json.JSONDecodeError:
        logger.warning("garage metafield is not valid JSON value=%r", value[:200])
        return []
    if not isinstance(raw, list):
        logger.warning("garage metafield is not a list type=%s", type(raw).__name__)
        return []

    identifiers = []
    for entry in raw:
        if isinstance(entry, dict):
            entry = entry.get("vehicle_id") or entry.get("id")
        if entry is not None:
            identifiers.append(entry)
    return dedupe_identifiers(identifiers)


def build_filter_params(defaults: FilterDefaults) -> Dict[str, str]:
    """Storefront collection filter query parameters for the given defaults."""
    params: Dict[str, str] = {}
    for field in profile_constants.FILTER_FIELDS:
        value = getattr(defaults, field)
        if value not in (None, ""):
            params[f"{profile_constants.FILTER_PARAM_PREFIX}{field}"] = str(value)
    return params


class ProfileService:
    def __init__(
        self,
        client: ShopifyClient,
        catalog_service: Optional[CatalogService] = None,
        namespace: str = profile_constants.METAFIELD_NAMESPACE,
        key: str = profile_constants.METAFIELD_KEY,
        metafield_type: Optional[str] = profile_constants.METAFIELD_TYPE,
    ) -> None:
        self._client = client
        self._catalog_service = catalog_service
        self._namespace = namespace
        self._key = key
        self._metafield_type = metafield_type

    async def get_selection(self, customer_id: Any) -> List[str]:
        customer_gid = normalize_customer_id(customer_id)
        logger.info("Fetching garage for customer: %s", customer_gid)

        metafield = await self._client.get_customer_metafield(customer_gid, self._namespace, self._key)
        identifiers = deserialize_selection((metafield or {}).get("value"))

        logger.info("Retrieved garage customer=%s count=%s", customer_gid, len(identifiers))
        return identifiers

    async def save_selection(self, customer_id: Any, identifiers: Any) -> List[str]:
        """Overwrite the customer's garage. Returns the value Shopify stored."""
        if customer_id is None or str(customer_id).strip() == "":
            raise ValidationError("customerId is required")
        if identifiers is None or not isinstance(identifiers, list):
            raise ValidationError("items must be an array")

        customer_gid = normalize_customer_id(customer_id)
        unique = dedupe_identifiers(identifiers)
        logger.info("Saving garage for customer: %s items=%s", customer_gid, unique)

        metafield = await self._client.set_customer_metafield(
            customer_gid,
            self._namespace,
            self._key,
            json.dumps(unique),
            self._metafield_type,
        )
        stored_value = metafield.get("value")
        return deserialize_selection(stored_value) if stored_value is not None else unique

    async def get_filter_defaults(
        self, customer_id: Any
    ) -> Tuple[List[CatalogItem], Optional[FilterDefaults], Dict[str, str]]:
        """
        Resolve the saved garage against the catalog and derive the default
        collection filters from the first saved vehicle.
        """
        if self._catalog_service is None:
            raise RuntimeError("ProfileService needs a CatalogService to resolve filter defaults")

        identifiers = await self.get_selection(customer_id)
        if not identifiers:
            return [], None, {}

        catalog = {item.id: item for item in await self._catalog_service.list_catalog()}
        vehicles = [catalog[identifier] for identifier in identifiers if identifier in catalog]
        missing = len(identifiers) - len(vehicles)
        if missing:
            logger.info("garage references %s vehicles missing from the catalog", missing)

        if not vehicles:
            return [], None, {}

        first = vehicles[0]
        defaults = FilterDefaults(make=first.make, year=first.year, model=first.model)
        return vehicles, defaults, build_filter_params(defaults)
