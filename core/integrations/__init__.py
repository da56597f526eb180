"""
Core Integrations: remote API adapters.

Provides:
- AdapterBase: HTTP adapter with auth headers and a response envelope
- ShopifyAdminClient: Shopify Admin GraphQL client built on AdapterBase
"""
from core.integrations.adapter_base import (
    AdapterBase,
    AdapterRequest,
    AdapterResponse,
    AuthCredentials,
)
from core.integrations.shopify_admin import (
    ACCESS_TOKEN_HEADER,
    ShopifyAdminClient,
    ShopifyConfig,
    normalize_shop_domain,
)

__all__ = [
    # Adapter
    "AdapterBase",
    "AdapterRequest",
    "AdapterResponse",
    "AuthCredentials",
    # Shopify
    "ACCESS_TOKEN_HEADER",
    "ShopifyAdminClient",
    "ShopifyConfig",
    "normalize_shop_domain",
]
