"""Shop context middleware using ContextVar.

Extracts the shop the request claims to act on from the X-Shopify-Shop-Domain
header. The domain is stored in a ContextVar so the Admin API client
dependency can check it against the configured shop via get_current_shop().
"""

from contextvars import ContextVar
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.integrations.shopify_admin import normalize_shop_domain

SHOP_HEADER = "X-Shopify-Shop-Domain"

# ---------------------------------------------------------------------------
# Context variable: task-safe shop state
# ---------------------------------------------------------------------------

_current_shop: ContextVar[str] = ContextVar("current_shop", default="")


def get_current_shop() -> str:
    """Return the shop domain for the current request, or "" if none was sent."""
    return _current_shop.get()


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

class ShopMiddleware(BaseHTTPMiddleware):
    """Extract the shop domain from the request headers.

    The value is untrusted; it is only ever compared with the configured shop.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        shop = request.headers.get(SHOP_HEADER, "")
        token = _current_shop.set(normalize_shop_domain(shop))
        try:
            response = await call_next(request)
            return response
        finally:
            _current_shop.reset(token)
