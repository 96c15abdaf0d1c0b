"""
Route aggregator — builds the gateway's routers around its services.

Health is a plain module-level router; catalog and profile routers are built
around the service instances the app factory hands in.
"""
from fastapi import APIRouter

from garage.routes.catalog import build_catalog_router
from garage.routes.health import router as health_router
from garage.routes.profile import build_profile_router
from garage.services.catalog_service import CatalogService
from garage.services.profile_service import ProfileService


def build_gateway_router(catalog_service: CatalogService, profile_service: ProfileService) -> APIRouter:
    router = APIRouter()
    router.include_router(health_router)
    router.include_router(build_catalog_router(catalog_service))
    router.include_router(build_profile_router(profile_service))
    return router


__all__ = ["build_gateway_router", "health_router"]
