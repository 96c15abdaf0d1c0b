"""
Profile constants — customer garage metafield and storefront filter keys.
"""

CUSTOMER_GID_PREFIX: str = "gid://shopify/Customer/"

METAFIELD_NAMESPACE: str = "custom"
METAFIELD_KEY: str = "garage"
METAFIELD_TYPE: str = "json"

# Storefront collection filter parameters (product metafields custom.make/year/model)
FILTER_PARAM_PREFIX: str = "filter.p.m.custom."
FILTER_FIELDS: tuple[str, ...] = ("make", "year", "model")
