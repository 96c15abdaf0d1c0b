"""
Catalog routes — the vehicle catalog the garage picker selects from.
"""
import logging

from fastapi import APIRouter

from garage.core.exceptions import GarageProxyException, TransportError
from garage.schemas.catalog import CatalogListResponse
from garage.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


def build_catalog_router(service: CatalogService) -> APIRouter:
    router = APIRouter(tags=["catalog"])

    @router.get("/catalog/list", response_model=CatalogListResponse, response_model_exclude_none=True)
    async def list_catalog():
        """List every vehicle in the catalog (paginated upstream, flattened here)."""
        try:
            items = await service.list_catalog()
        except GarageProxyException:
            raise
        except Exception as exc:  # pragma: no cover
            logger.exception("Error fetching vehicles")
            raise TransportError(str(exc)) from exc
        return CatalogListResponse(success=True, count=len(items), items=items)

    return router
