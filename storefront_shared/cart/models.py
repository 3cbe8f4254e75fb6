"""Cart and catalog models shared by the cart service and its clients"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

ANONYMOUS_USER_ID = "anonymous"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """Base for payloads crossing the HTTP boundary (camelCase on the wire)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductCategory(str, Enum):
    ELECTRONICS = "electronics"
    CLOTHING = "clothing"
    HOME = "home"
    SPORTS = "sports"
    BOOKS = "books"


class CartStatus(str, Enum):
    """Lifecycle status of a cart"""
    ACTIVE = "active"
    CONVERTED = "converted_to_order"
    ABANDONED = "abandoned"


class Product(WireModel):
    """Product in the catalog"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    price: Decimal = Field(gt=0)
    image: Optional[str] = None
    category: ProductCategory
    in_stock: bool = True
    stock_count: int = Field(ge=0, default=0)
    rating: Optional[float] = None
    review_count: int = 0


class ProductSearchResponse(WireModel):
    """Page of catalog search results"""
    products: list[Product]
    total: int
    limit: int
    offset: int


class CartLine(WireModel):
    """One product-and-quantity pair within a cart"""

    model_config = ConfigDict(frozen=True)

    id: str
    cart_id: str
    product_id: str
    quantity: int = Field(ge=1)
    product: Product
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


class Cart(WireModel):
    """
    Shopping cart.

    ``total`` and ``item_count`` are derived from ``items``; build new carts
    through ``storefront_shared.cart.calculations`` so they never drift.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    user_id: str = ANONYMOUS_USER_ID
    status: CartStatus = CartStatus.ACTIVE
    items: list[CartLine] = Field(default_factory=list)
    total: Decimal = Decimal("0.00")
    item_count: int = Field(ge=0, default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _one_line_per_product(self) -> "Cart":
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Cart contains more than one line for the same product")
        return self


class AddToCartRequest(WireModel):
    """Request to add a product to the caller's active cart"""
    product_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(WireModel):
    """Request to set a line's quantity; zero or less removes the line"""
    quantity: int


class SyncProductRef(WireModel):
    id: str = Field(min_length=1)
    name: str = ""


class SyncCartLine(WireModel):
    product: SyncProductRef
    quantity: int = Field(ge=1)


class SyncCartRequest(WireModel):
    """Bulk replacement of the caller's active cart lines"""
    items: list[SyncCartLine]
    total: Decimal = Field(ge=0)
    item_count: int = Field(ge=0)

    @model_validator(mode="after")
    def _unique_products(self) -> "SyncCartRequest":
        product_ids = [item.product.id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product in sync items")
        return self

    @classmethod
    def from_cart(cls, cart: Cart) -> "SyncCartRequest":
        return cls(
            items=[
                SyncCartLine(
                    product=SyncProductRef(id=line.product_id, name=line.product.name),
                    quantity=line.quantity,
                )
                for line in cart.items
            ],
            total=cart.total,
            item_count=cart.item_count,
        )


class ApiResponse(WireModel, Generic[T]):
    """Response envelope used by every endpoint"""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None
    code: Optional[str] = None
