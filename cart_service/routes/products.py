"""Product catalog API routes"""

import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront_shared.cart.errors import ProductNotFound
from storefront_shared.cart.models import (
    ApiResponse,
    Product,
    ProductCategory,
    ProductSearchResponse,
)

from ..database import ProductDatabase, get_product_db
from ..security.auth import AuthenticatedUser, optional_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ApiResponse[ProductSearchResponse])
async def search_products(
    query: Optional[str] = Query(None, description="Search query"),
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price"),
    in_stock_only: bool = Query(True, description="Only show in-stock items"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    user: Optional[AuthenticatedUser] = Depends(optional_user),
    product_db: ProductDatabase = Depends(get_product_db),
):
    """
    Search products in the catalog.

    Accepts a bearer token but doesn't require one.
    """
    products, total = product_db.search_products(
        query=query,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock_only=in_stock_only,
        limit=limit,
        offset=offset,
    )

    if user:
        logger.debug(f"Catalog search by user {user.id}: query={query!r}, {total} matches")

    return ApiResponse(
        success=True,
        data=ProductSearchResponse(products=products, total=total, limit=limit, offset=offset),
    )


@router.get("/categories", response_model=ApiResponse[list[str]])
async def list_categories():
    """List all product categories"""
    return ApiResponse(success=True, data=[c.value for c in ProductCategory])


@router.get("/{product_id}", response_model=ApiResponse[Product])
async def get_product(
    product_id: str,
    product_db: ProductDatabase = Depends(get_product_db),
):
    """Get a product by ID"""
    product = product_db.get_product(product_id)
    if not product:
        raise ProductNotFound()
    return ApiResponse(success=True, data=product)
