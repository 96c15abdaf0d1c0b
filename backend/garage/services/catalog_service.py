"""
Catalog service — lists the vehicle catalog stored as Shopify metaobjects.

Handles:
- Cursor pagination with a page-count safety bound
- Flattening metaobject fields into CatalogItem records
- Coercing the year field to an integer
"""
import logging
from typing import Any, Dict, List, Optional

from garage.clients.shopify_client import ShopifyClient
from garage.core.constants import catalog as catalog_constants
from garage.schemas.catalog import CatalogItem

logger = logging.getLogger(__name__)


def _coerce_year(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        logger.warning("catalog year not an integer value=%r", value)
        return None


def normalize_metaobject(node: Dict[str, Any]) -> CatalogItem:
    """Flatten one metaobject node into a CatalogItem."""
    fields = {
        field.get("key"): field.get("value")
        for field in node.get("fields") or []
        if field.get("key")
    }
    vehicle_id = fields.get(catalog_constants.FIELD_VEHICLE_ID) or node.get("id")

    return CatalogItem(
        id=str(vehicle_id),
        category=fields.get(catalog_constants.FIELD_CATEGORY),
        year=_coerce_year(fields.get(catalog_constants.FIELD_YEAR)),
        make=fields.get(catalog_constants.FIELD_MAKE),
        model=fields.get(catalog_constants.FIELD_MODEL),
        style=fields.get(catalog_constants.FIELD_STYLE) or None,
        gid=node.get("id"),
        handle=node.get("handle"),
    )


class CatalogService:
    def __init__(
        self,
        client: ShopifyClient,
        metaobject_type: str = catalog_constants.METAOBJECT_TYPE,
        page_size: int = catalog_constants.PAGE_SIZE,
        max_pages: int = catalog_constants.MAX_PAGES,
    ) -> None:
        self._client = client
        self._metaobject_type = metaobject_type
        self._page_size = page_size
        self._max_pages = max_pages

    async def list_catalog(self) -> List[CatalogItem]:
        """
        Fetch every vehicle, following cursors until the last page or the
        page limit. Any page error propagates; nothing partial is returned
        on failure.
        """
        items: List[CatalogItem] = []
        cursor: Optional[str] = None
        has_next_page = True
        page_count = 0

        while has_next_page and page_count < self._max_pages:
            page_count += 1
            logger.info(f"Fetching catalog page {page_count}...")

            page = await self._client.fetch_metaobjects_page(self._metaobject_type, self._page_size, cursor)
            for node in page.get("nodes") or []:
                items.append(normalize_metaobject(node))

            page_info = page.get("pageInfo") or {}
            has_next_page = bool(page_info.get("hasNextPage"))
            cursor = page_info.get("endCursor")

        if has_next_page:
            logger.warning(
                f"Catalog page limit reached ({self._max_pages} pages); returning first {len(items)} vehicles"
            )

        logger.info(f"Loaded {len(items)} vehicles in {page_count} pages")
        return items
