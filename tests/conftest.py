"""Shared fixtures: a recording stand-in for the Shopify Admin API."""
import json

import httpx
import pytest

from core.integrations.shopify_admin import ShopifyAdminClient

SHOP = "example.myshopify.com"
TOKEN = "shpat_test"


class AdminApiStub:
    """Replays canned responses and records every request it receives.

    A dict is sent back as a 200 JSON body, an httpx.Response as-is, and an
    exception is raised from the transport.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> ShopifyAdminClient:
        return ShopifyAdminClient(SHOP, TOKEN, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def admin_api():
    return AdminApiStub
