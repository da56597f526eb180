"""
Remote API adapter framework.

Every outbound integration (currently the Shopify Admin API) inherits from
AdapterBase. Provides:
- Header-based API key auth
- Standardized request/response envelope with latency

One call is one round trip. Retries and circuit breaking are not part of
this layer; callers decide what a failure means.
"""
from __future__ import annotations
from abc import ABC
from dataclasses import dataclass, field
from typing import Any
import logging
import time

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

@dataclass
class AuthCredentials:
    """Credentials for a single remote account (e.g. one shop)."""
    account: str
    api_key: str | None = None
    api_key_header: str = "Authorization"


# ---------------------------------------------------------------------------
# Request / Response envelope
# ---------------------------------------------------------------------------

@dataclass
class AdapterRequest:
    """Standardized outbound request."""
    method: str  # GET, POST, PUT, PATCH, DELETE
    path: str
    params: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float = 30.0


@dataclass
class AdapterResponse:
    """Standardized inbound response."""
    status_code: int
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    latency_ms: float = 0.0
    adapter_name: str = ""
    account: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status_code < 300


# ---------------------------------------------------------------------------
# AdapterBase
# ---------------------------------------------------------------------------

class AdapterBase(ABC):
    """
    Base class for all external API adapters.

    Subclasses must set:
        name: str           adapter identifier
        base_url: str       API root URL (may also be set per instance)
    """

    name: str = ""
    base_url: str = ""

    def __init__(
        self,
        credentials: AuthCredentials | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._credentials = credentials
        self._transport = transport

    @property
    def account(self) -> str:
        return self._credentials.account if self._credentials else ""

    def get_auth_headers(self) -> dict[str, str]:
        """Build auth headers from the stored credentials."""
        creds = self._credentials
        if not creds or not creds.api_key:
            return {}
        return {creds.api_key_header: creds.api_key}

    # --- Core request ---

    async def request(self, req: AdapterRequest) -> AdapterResponse:
        """
        Execute a single request: Auth → HTTP → envelope.

        Transport exceptions are not raised; they come back as a failed
        response whose ``error`` names the cause.
        """
        url = f"{self.base_url.rstrip('/')}/{req.path.lstrip('/')}"
        headers = {**self.get_auth_headers(), **req.headers}

        start = time.time()
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.request(
                    method=req.method,
                    url=url,
                    params=req.params or None,
                    json=req.body,
                    headers=headers,
                    timeout=req.timeout,
                )
        except httpx.HTTPError as exc:
            latency = (time.time() - start) * 1000
            error = f"{type(exc).__name__}: {exc}"
            logger.error("%s %s %s failed: %s", self.name, req.method, url, error)
            return AdapterResponse(
                status_code=502,
                error=error,
                latency_ms=latency,
                adapter_name=self.name,
                account=self.account,
            )

        latency = (time.time() - start) * 1000
        error = None if resp.status_code < 400 else f"HTTP {resp.status_code}: {resp.text[:200]}"
        if error:
            logger.warning("%s %s %s -> %s in %.1fms", self.name, req.method, url, resp.status_code, latency)
        else:
            logger.debug("%s %s %s -> %s in %.1fms", self.name, req.method, url, resp.status_code, latency)

        is_json = resp.headers.get("content-type", "").startswith("application/json")
        data: Any = resp.text
        if is_json:
            try:
                data = resp.json()
            except ValueError:
                error = error or "Response body is not valid JSON"

        return AdapterResponse(
            status_code=resp.status_code,
            data=data,
            headers=dict(resp.headers),
            latency_ms=latency,
            adapter_name=self.name,
            account=self.account,
            error=error,
        )
