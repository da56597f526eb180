"""Volume discount page wiring: admin client and page dependencies."""

from fastapi import HTTPException

from api.middleware import get_current_shop
from core.discounts.page import DiscountPage
from core.integrations.shopify_admin import ShopifyAdminClient, ShopifyConfig, normalize_shop_domain
from verticals.volume_discount.config import config
from verticals.volume_discount.models.schemas import VolumeDiscountConfiguration

shopify_config = ShopifyConfig.from_env()

volume_discount_page = DiscountPage(
    VolumeDiscountConfiguration,
    namespace=config.namespace,
    key=config.key,
)


def get_admin_client() -> ShopifyAdminClient:
    """FastAPI dependency for the configured shop's Admin API client.

    The access token belongs to the configured shop only. A request naming a
    different shop in its header is refused with 403.
    """
    if not shopify_config.shop_domain or not shopify_config.access_token:
        raise HTTPException(status_code=503, detail="Shopify Admin API is not configured")

    configured = normalize_shop_domain(shopify_config.shop_domain).lower()
    requested = get_current_shop().lower()
    if requested and requested != configured:
        raise HTTPException(status_code=403, detail="Shop does not match the configured shop")
    return ShopifyAdminClient.from_config(shopify_config, shop_domain=configured)


def get_discount_page() -> DiscountPage[VolumeDiscountConfiguration]:
    """FastAPI dependency for the volume discount page."""
    return volume_discount_page
