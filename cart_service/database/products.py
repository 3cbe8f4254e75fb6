"""In-memory product catalog"""

from decimal import Decimal
from typing import Optional

from storefront_shared.cart.models import Product, ProductCategory

# Demo catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Wireless Noise-Cancelling Headphones",
        description="Over-ear headphones with adaptive noise cancelling and 30 hours of playback.",
        price=Decimal("199.99"),
        image="/images/headphones.jpg",
        category=ProductCategory.ELECTRONICS,
        stock_count=25,
        rating=4.6,
        review_count=182,
    ),
    "prod-002": Product(
        id="prod-002",
        name="Mechanical Keyboard",
        description="Tenkeyless keyboard with hot-swappable switches and PBT keycaps.",
        price=Decimal("89.00"),
        image="/images/keyboard.jpg",
        category=ProductCategory.ELECTRONICS,
        stock_count=40,
        rating=4.4,
        review_count=96,
    ),
    "prod-003": Product(
        id="prod-003",
        name="Merino Crew Sweater",
        description="Lightweight merino wool sweater for everyday layering.",
        price=Decimal("74.50"),
        image="/images/sweater.jpg",
        category=ProductCategory.CLOTHING,
        stock_count=60,
        rating=4.2,
        review_count=41,
    ),
    "prod-004": Product(
        id="prod-004",
        name="Trail Running Shoes",
        description="Grippy outsole and cushioned midsole for mixed terrain.",
        price=Decimal("129.95"),
        image="/images/trail-shoes.jpg",
        category=ProductCategory.SPORTS,
        stock_count=18,
        rating=4.7,
        review_count=233,
    ),
    "prod-005": Product(
        id="prod-005",
        name="Cast Iron Skillet",
        description="Pre-seasoned 12-inch skillet, oven safe.",
        price=Decimal("39.99"),
        image="/images/skillet.jpg",
        category=ProductCategory.HOME,
        stock_count=75,
        rating=4.8,
        review_count=512,
    ),
    "prod-006": Product(
        id="prod-006",
        name="Pour-Over Coffee Set",
        description="Glass dripper, carafe and 100 paper filters.",
        price=Decimal("34.00"),
        image="/images/pour-over.jpg",
        category=ProductCategory.HOME,
        stock_count=0,
        in_stock=False,
        rating=4.3,
        review_count=27,
    ),
    "prod-007": Product(
        id="prod-007",
        name="Yoga Mat",
        description="6mm non-slip mat with carrying strap.",
        price=Decimal("29.99"),
        image="/images/yoga-mat.jpg",
        category=ProductCategory.SPORTS,
        stock_count=120,
        rating=4.5,
        review_count=88,
    ),
    "prod-008": Product(
        id="prod-008",
        name="The Pragmatic Programmer",
        description="20th anniversary edition. Paperback.",
        price=Decimal("44.95"),
        image="/images/pragmatic-programmer.jpg",
        category=ProductCategory.BOOKS,
        stock_count=200,
        rating=4.9,
        review_count=1045,
    ),
}


class ProductDatabase:
    """In-memory product database"""

    def __init__(self, products: Optional[dict[str, Product]] = None):
        self.products = dict(PRODUCTS if products is None else products)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[ProductCategory] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        in_stock_only: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        if min_price is not None:
            results = [p for p in results if p.price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.price <= max_price]

        if in_stock_only:
            results = [p for p in results if p.in_stock and p.stock_count > 0]

        # Total before pagination
        total = len(results)

        return results[offset : offset + limit], total

    def update_stock(self, product_id: str, stock_count: int) -> bool:
        """
        Set stock-on-hand for a product.

        Returns:
            True if the product exists and the count is valid
        """
        product = self.products.get(product_id)
        if not product or stock_count < 0:
            return False

        self.products[product_id] = product.model_copy(
            update={"stock_count": stock_count, "in_stock": stock_count > 0}
        )
        return True


# Singleton instance
product_db = ProductDatabase()
