"""Test the volume discount loader/action routes."""
import json

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.middleware import SHOP_HEADER, _current_shop
from core.integrations.shopify_admin import ShopifyConfig
from verticals.volume_discount import page as volume_discount_page_module
from verticals.volume_discount.config import VolumeDiscountConfig
from verticals.volume_discount.page import get_admin_client

BASE = "/app/volume-discount/fn-1"


@pytest.fixture
def client_for(admin_api):

    def make(*responses):
        stub = admin_api(*responses)
        app.dependency_overrides[get_admin_client] = stub.client
        return TestClient(app), stub

    yield make
    app.dependency_overrides.clear()


def test_health():
    with TestClient(app) as client:
        response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_loader_new(client_for):
    client, stub = client_for()
    response = client.get(f"{BASE}/new")
    assert response.status_code == 200
    assert response.json() == {"discount": None}
    assert stub.requests == []


def test_loader_existing_automatic(client_for):
    client, _ = client_for({
        "data": {
            "discountNode": {
                "id": "gid://shopify/DiscountAutomaticApp/123",
                "metafield": {"value": '{"quantity":2,"percentage":5}', "id": "gid://shopify/Metafield/1"},
                "discount": {
                    "title": "Two or more",
                    "startsAt": "2024-05-01T00:00:00Z",
                    "endsAt": None,
                    "combinesWith": {"orderDiscounts": False, "productDiscounts": False, "shippingDiscounts": False},
                },
            }
        }
    })

    response = client.get(f"{BASE}/123")

    assert response.status_code == 200
    discount = response.json()["discount"]
    assert discount["discountId"] == "gid://shopify/DiscountAutomaticApp/123"
    assert discount["discountMethod"] == "Automatic"
    assert discount["discountTitle"] == "Two or more"
    assert discount["configuration"] == {"quantity": 2, "percentage": 5.0}
    assert discount["metafieldId"] == "gid://shopify/Metafield/1"


def test_loader_not_found(client_for):
    client, _ = client_for({"data": {"discountNode": None}})
    assert client.get(f"{BASE}/999").status_code == 404


def test_loader_unknown_type_is_bad_gateway(client_for):
    client, _ = client_for({"data": {"discountNode": {"id": "gid://shopify/Mystery/1", "discount": {}}}})
    response = client.get(f"{BASE}/1")
    assert response.status_code == 502
    assert "Mystery" in response.json()["detail"]


def test_action_create(client_for):
    client, stub = client_for({"data": {"discountCreate": {"userErrors": []}}})
    discount = {
        "title": "",
        "method": "Code",
        "code": "SAVE10",
        "combinesWith": {"orderDiscounts": False, "productDiscounts": False, "shippingDiscounts": False},
        "usageLimit": None,
        "appliesOncePerCustomer": False,
        "startsAt": "2024-05-01T00:00:00Z",
        "endsAt": None,
        "configuration": {"quantity": 5, "percentage": 10},
    }

    response = client.post(f"{BASE}/new", data={"discount": json.dumps(discount), "id": "", "metafieldId": ""})

    assert response.status_code == 200
    assert response.json() == {"errors": [], "failure": None}
    sent = stub.bodies[0]["variables"]["discount"]
    assert sent["functionId"] == "fn-1"
    assert sent["metafields"][0]["value"] == '{"quantity":5,"percentage":10}'


def test_action_returns_user_errors(client_for):
    errors = [{"code": "TOO_SHORT", "message": "too short", "field": ["title"]}]
    client, _ = client_for({"data": {"discountUpdate": {"userErrors": errors}}})
    discount = {
        "title": "x",
        "method": "Automatic",
        "startsAt": "2024-05-01T00:00:00Z",
        "configuration": {"quantity": 1, "percentage": 1},
    }

    response = client.post(
        f"{BASE}/3",
        data={"discount": json.dumps(discount), "id": "gid://shopify/DiscountAutomaticNode/3", "metafieldId": "gid://shopify/Metafield/1"},
    )

    assert response.status_code == 200
    assert response.json()["errors"] == errors


def test_action_transport_failure_is_bad_gateway(client_for):
    client, _ = client_for({"data": {}})
    discount = {"method": "Automatic", "startsAt": "2024-05-01T00:00:00Z", "configuration": {}}

    response = client.post(f"{BASE}/new", data={"discount": json.dumps(discount)})

    assert response.status_code == 502
    assert response.json()["failure"]


def test_admin_client_not_configured(monkeypatch):
    monkeypatch.setattr(volume_discount_page_module, "shopify_config", ShopifyConfig.default())
    app.dependency_overrides.clear()
    client = TestClient(app)

    response = client.get(f"{BASE}/123", headers={SHOP_HEADER: "shop.myshopify.com"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Shopify Admin API is not configured"


def test_foreign_shop_header_is_forbidden(monkeypatch):
    monkeypatch.setattr(
        volume_discount_page_module,
        "shopify_config",
        ShopifyConfig(shop_domain="real.myshopify.com", access_token="shpat_SECRET"),
    )
    app.dependency_overrides.clear()
    client = TestClient(app)

    response = client.get(f"{BASE}/1", headers={SHOP_HEADER: "attacker.example"})

    assert response.status_code == 403
    assert response.json()["detail"] == "Shop does not match the configured shop"


def test_admin_client_always_targets_configured_shop(monkeypatch):
    monkeypatch.setattr(
        volume_discount_page_module,
        "shopify_config",
        ShopifyConfig(shop_domain="Real.myshopify.com", access_token="shpat_SECRET"),
    )

    token = _current_shop.set("real.myshopify.com")
    try:
        client = get_admin_client()
    finally:
        _current_shop.reset(token)
    assert client.base_url == "https://real.myshopify.com/admin/api/2024-10"

    assert get_admin_client().shop_domain == "real.myshopify.com"


def test_config_defaults_to_function_namespace(monkeypatch):
    defaults = VolumeDiscountConfig.default()
    assert defaults.namespace == "$app:cart-goal"
    assert defaults.key == "function-configuration"
    assert defaults.discount_name == "Cart Goal"

    monkeypatch.setenv("VOLUME_DISCOUNT_NAMESPACE", "$app:bulk-savings")
    assert VolumeDiscountConfig.from_env().namespace == "$app:bulk-savings"
    assert VolumeDiscountConfig.from_env().discount_name == "Cart Goal"
