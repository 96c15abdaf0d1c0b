import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from garage.container import get_catalog_service, get_profile_service
from garage.core.config import settings
from garage.core.middleware import apply_cors, apply_exception_handlers
from garage.routes import build_gateway_router
from garage.services.catalog_service import CatalogService
from garage.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(levelname)s:%(name)s:%(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    On startup, report the store the gateway proxies to and warn when the
    Shopify credentials are missing (requests then fail with a 500).
    """
    logger.info("=== Garage Proxy Starting ===")
    if settings.shopify_configured:
        logger.info(
            f"Proxying to {settings.shopify_store_domain} (API {settings.shopify_api_version}), "
            f"garage metafield {settings.profile_metafield_namespace}.{settings.profile_metafield_key}"
        )
    else:
        logger.warning("Missing required environment variables: SHOPIFY_STORE_DOMAIN, SHOPIFY_ADMIN_API_TOKEN")
    if "*" in settings.cors_allow_origins:
        logger.info("CORS allows any origin; set CORS_ALLOW_ORIGINS to the storefront origin in production")

    yield

    logger.info("=== Garage Proxy Shutting Down ===")


def create_app(
    catalog_service: Optional[CatalogService] = None,
    profile_service: Optional[ProfileService] = None,
) -> FastAPI:
    app = FastAPI(title="Garage Proxy", lifespan=lifespan)

    apply_cors(app, settings.cors_allow_origins)
    apply_exception_handlers(app)

    app.include_router(
        build_gateway_router(
            catalog_service or get_catalog_service(),
            profile_service or get_profile_service(),
        )
    )
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("garage.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
