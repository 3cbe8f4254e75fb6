"""
Storefront Cart Service

REST backend for the storefront cart: per-user active carts, stock-checked
cart mutations, bulk sync of client-held carts, and the product catalog.
Callers authenticate with identity-provider bearer tokens.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import settings
from .errors import register_exception_handlers
from .routes import products_router, cart_router

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Cart service starting up...")
    logger.info(f"Token verification: {'configured' if settings.auth_configured else 'not configured'}")
    yield
    logger.info("Cart service shutting down...")


app = FastAPI(
    title=settings.app_name,
    description="Cart and catalog API for the storefront",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(products_router)
app.include_router(cart_router)


@app.get("/")
async def home():
    return {
        "message": "Storefront Cart API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "cart-service",
        "auth_configured": settings.auth_configured,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cart_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
