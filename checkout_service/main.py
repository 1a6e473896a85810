"""
Storefront Checkout Application

Backend for the storefront: a persisted shopping cart API and a proxy to
PayPal's order/capture API that recomputes order totals server-side.
"""

import os
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from dotenv import load_dotenv

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

from .core.config import settings
from .errors import CheckoutError
from .routes import paypal_router, cart_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront checkout starting up...")
    logger.info(f"PayPal API: {settings.paypal_base_url} ({settings.paypal_env})")
    logger.info(f"Allowed origins: {settings.allowed_origins}")

    yield

    logger.info("Storefront checkout shutting down...")
    from .routes.paypal import paypal_client
    if paypal_client:
        await paypal_client.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Cart and PayPal checkout proxy for the storefront",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(httpx.HTTPError)
async def upstream_error_handler(request: Request, exc: httpx.HTTPError):
    logger.error(f"Upstream request failed for {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=502,
        content={"error": str(exc) or exc.__class__.__name__, "detail": None},
    )


# Include API routers
app.include_router(paypal_router)
app.include_router(cart_router)


@app.get("/", response_class=PlainTextResponse)
async def home():
    return "ok"


@app.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "checkout_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
