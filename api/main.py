"""Discount editor API: FastAPI entry point.

Registers middleware, routers, exception handlers and lifecycle hooks. Each
discount vertical adds its own router under /app/{vertical}/.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.middleware import ShopMiddleware
from core.discounts.page import DiscountReadError

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS", "https://admin.shopify.com"
).split(",")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown hooks."""
    logger.info("Discount editor API started")
    yield
    logger.info("Discount editor API shutting down")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Discount Editor",
    description="Create and edit Shopify app discounts backed by discount functions",
    version="0.1.0",
    debug=DEBUG,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shop context middleware
app.add_middleware(ShopMiddleware)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

async def discount_read_error_handler(request: Request, exc: DiscountReadError) -> JSONResponse:
    logger.error("Failed to read discount for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


app.add_exception_handler(DiscountReadError, discount_read_error_handler)

# ---------------------------------------------------------------------------
# Routers: verticals register here
# ---------------------------------------------------------------------------

from verticals.volume_discount.router import router as volume_discount_router  # noqa: E402

app.include_router(volume_discount_router, prefix="/app/volume-discount", tags=["Volume discount"])


# ---------------------------------------------------------------------------
# Health & root
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/")
async def root():
    return {
        "name": "Discount Editor",
        "version": "0.1.0",
        "docs": "/docs",
        "verticals": ["volume-discount"],
    }
