"""
Shopify Admin GraphQL adapter.

Thin AdapterBase subclass that posts ``{"query", "variables"}`` to a shop's
``/admin/api/<version>/graphql.json`` endpoint, authenticated with the
``X-Shopify-Access-Token`` header.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import logging
import os

import httpx

from core.integrations.adapter_base import (
    AdapterBase,
    AdapterRequest,
    AdapterResponse,
    AuthCredentials,
)

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


@dataclass(frozen=True)
class ShopifyConfig:
    """Connection settings for the Admin API.

    Usage::

        config = ShopifyConfig.from_env()
        client = ShopifyAdminClient.from_config(config)
    """

    shop_domain: str = ""
    access_token: str = ""
    api_version: str = "2024-10"
    timeout: float = 30.0

    @classmethod
    def default(cls) -> "ShopifyConfig":
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "SHOPIFY_") -> "ShopifyConfig":
        """Create config from environment variables.

        Example: SHOPIFY_SHOP_DOMAIN=example.myshopify.com
        """
        overrides: dict[str, Any] = {}
        for name in ("shop_domain", "access_token", "api_version"):
            value = os.getenv(f"{prefix}{name.upper()}")
            if value:
                overrides[name] = value
        timeout = os.getenv(f"{prefix}TIMEOUT")
        if timeout:
            overrides["timeout"] = float(timeout)

        return cls(**overrides)


def normalize_shop_domain(shop: str) -> str:
    return shop.replace("https://", "").replace("http://", "").rstrip("/")


class ShopifyAdminClient(AdapterBase):
    """Admin API client for one shop."""

    name = "shopify_admin"

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = "2024-10",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.shop_domain = normalize_shop_domain(shop_domain)
        self.api_version = api_version
        self.timeout = timeout
        self.base_url = f"https://{self.shop_domain}/admin/api/{api_version}"
        super().__init__(
            credentials=AuthCredentials(
                account=self.shop_domain,
                api_key=access_token,
                api_key_header=ACCESS_TOKEN_HEADER,
            ),
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: ShopifyConfig,
        shop_domain: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ShopifyAdminClient":
        return cls(
            shop_domain=shop_domain or config.shop_domain,
            access_token=config.access_token,
            api_version=config.api_version,
            timeout=config.timeout,
            transport=transport,
        )

    async def graphql(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> AdapterResponse:
        """Run one query or mutation. The response body is returned untouched."""
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables

        return await self.request(
            AdapterRequest(
                method="POST",
                path="graphql.json",
                body=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        )
