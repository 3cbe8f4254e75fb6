"""
Cart calculations.

Pure functions over cart lines. Every line-set change goes through
``with_items`` so totals are recomputed from scratch, never patched.
"""

import uuid
from decimal import Decimal
from typing import Optional

from .errors import OutOfStock
from .models import ANONYMOUS_USER_ID, Cart, CartLine, Product, utc_now

CENTS = Decimal("0.01")


def calculate_totals(items: list[CartLine]) -> tuple[Decimal, int]:
    """Return (total, item_count) for a list of lines"""
    total = sum((item.product.price * item.quantity for item in items), Decimal("0"))
    item_count = sum(item.quantity for item in items)
    return total.quantize(CENTS), item_count


def with_items(cart: Cart, items: list[CartLine], touch: bool = True) -> Cart:
    """Return a copy of ``cart`` holding ``items`` with recomputed totals"""
    total, item_count = calculate_totals(items)
    update = {"items": list(items), "total": total, "item_count": item_count}
    if touch:
        update["updated_at"] = utc_now()
    return cart.model_copy(update=update)


def empty_cart(cart_id: str = "", user_id: str = ANONYMOUS_USER_ID) -> Cart:
    now = utc_now()
    return Cart(id=cart_id, user_id=user_id, created_at=now, updated_at=now)


def new_line_id() -> str:
    return str(uuid.uuid4())


def find_line(items: list[CartLine], product_id: str) -> Optional[CartLine]:
    return next((item for item in items if item.product_id == product_id), None)


def add_line(
    items: list[CartLine],
    product: Product,
    quantity: int,
    cart_id: str,
) -> list[CartLine]:
    """Add ``quantity`` of ``product``, summing into an existing line if present"""
    existing = find_line(items, product.id)
    if existing:
        return [
            item.model_copy(
                update={
                    "quantity": item.quantity + quantity,
                    "product": product,
                    "updated_at": utc_now(),
                }
            )
            if item.product_id == product.id
            else item
            for item in items
        ]

    now = utc_now()
    return [
        *items,
        CartLine(
            id=new_line_id(),
            cart_id=cart_id,
            product_id=product.id,
            quantity=quantity,
            product=product,
            created_at=now,
            updated_at=now,
        ),
    ]


def remove_line(items: list[CartLine], product_id: str) -> list[CartLine]:
    return [item for item in items if item.product_id != product_id]


def update_line_quantity(
    items: list[CartLine],
    product_id: str,
    quantity: int,
) -> list[CartLine]:
    """Replace a line's quantity; zero or less removes the line"""
    if quantity <= 0:
        return remove_line(items, product_id)

    return [
        item.model_copy(update={"quantity": quantity, "updated_at": utc_now()})
        if item.product_id == product_id
        else item
        for item in items
    ]


def check_stock(product: Product, quantity: int) -> None:
    """Raise OutOfStock unless ``quantity`` of ``product`` is on hand right now"""
    if not product.in_stock or product.stock_count < quantity:
        raise OutOfStock(product_name=product.name, available=product.stock_count)
