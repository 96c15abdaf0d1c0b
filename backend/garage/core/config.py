import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    # Shopify Admin API (older deployments used SHOP_DOMAIN / SHOPIFY_ACCESS_TOKEN)
    shopify_store_domain: str | None = os.getenv("SHOPIFY_STORE_DOMAIN", os.getenv("SHOP_DOMAIN"))
    shopify_admin_api_token: str | None = os.getenv(
        "SHOPIFY_ADMIN_API_TOKEN", os.getenv("SHOPIFY_ACCESS_TOKEN")
    )
    shopify_api_version: str = os.getenv("SHOPIFY_API_VERSION", "2024-01")
    shopify_request_timeout: float = float(os.getenv("SHOPIFY_REQUEST_TIMEOUT", "30"))

    # Vehicle catalog (metaobjects)
    catalog_metaobject_type: str = os.getenv("CATALOG_METAOBJECT_TYPE", "vehicle")
    catalog_page_size: int = int(os.getenv("CATALOG_PAGE_SIZE", "250"))
    # Safety bound on pagination: page_size * max_pages items at most
    catalog_max_pages: int = int(os.getenv("CATALOG_MAX_PAGES", "10"))

    # Customer garage (metafield)
    profile_metafield_namespace: str = os.getenv("PROFILE_METAFIELD_NAMESPACE", "custom")
    profile_metafield_key: str = os.getenv("PROFILE_METAFIELD_KEY", "garage")
    profile_metafield_type: str = os.getenv("PROFILE_METAFIELD_TYPE", "json")

    # HTTP surface
    cors_allow_origins: list[str] = _env_list("CORS_ALLOW_ORIGINS", "*")
    port: int = int(os.getenv("PORT", "3000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Garage widget
    garage_api_base_url: str = os.getenv("GARAGE_API_BASE_URL", "http://localhost:3000")
    garage_customer_id: Optional[str] = os.getenv("GARAGE_CUSTOMER_ID")
    garage_save_debounce_seconds: float = float(os.getenv("GARAGE_SAVE_DEBOUNCE_SECONDS", "1.0"))
    garage_result_limit: int = int(os.getenv("GARAGE_RESULT_LIMIT", "100"))

    # Catalog importer
    import_batch_size: int = int(os.getenv("IMPORT_BATCH_SIZE", "25"))
    import_batch_delay_seconds: float = float(os.getenv("IMPORT_BATCH_DELAY_SECONDS", "0.5"))

    @property
    def shopify_configured(self) -> bool:
        return bool(self.shopify_store_domain and self.shopify_admin_api_token)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
