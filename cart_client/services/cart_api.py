"""
Cart API Client

HTTP client for the cart service. Owns no cart state: each method maps one
cart operation onto one authenticated request and decodes the response
envelope into typed models.
"""

import logging
from decimal import Decimal
from typing import Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError as SchemaError

from storefront_shared.cart.errors import (
    NetworkError,
    ValidationError,
    error_from_response,
)
from storefront_shared.cart.models import (
    AddToCartRequest,
    ApiResponse,
    Cart,
    Product,
    ProductSearchResponse,
    SyncCartRequest,
    UpdateCartItemRequest,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CartApiClient:
    """
    Client for the cart service API.

    Domain rejections (out of stock, ownership, validation) are raised as
    ``CartError`` subclasses and never retried. Connection failures are
    retried by the transport; timeouts and exhausted retries raise
    ``NetworkError``.
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        max_retries: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize cart API client.

        Args:
            base_url: Base URL of the cart API (including the ``/api`` prefix)
            access_token: Identity-provider bearer token
            timeout: Per-request timeout in seconds
            max_retries: Connection-level retries
            transport: Custom transport (e.g. ``httpx.ASGITransport`` in tests)
        """
        self.base_url = base_url.rstrip("/")
        self._access_token = access_token
        self._http_client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport or httpx.AsyncHTTPTransport(retries=max_retries),
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def set_access_token(self, access_token: Optional[str]) -> None:
        self._access_token = access_token

    @property
    def has_credentials(self) -> bool:
        return bool(self._access_token)

    def _generate_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        response_type: type[T],
        body: Optional[BaseModel] = None,
        params: Optional[dict] = None,
    ) -> T:
        """Make an HTTP request and decode the envelope's ``data``"""
        url = f"{self.base_url}{path}"

        try:
            response = await self._http_client.request(
                method=method,
                url=url,
                headers=self._generate_headers(),
                json=body.model_dump(mode="json", by_alias=True) if body else None,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {path}")
            raise NetworkError(f"Request timed out: {method} {path}") from e
        except httpx.TransportError as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise NetworkError() from e

        try:
            envelope = ApiResponse[response_type].model_validate_json(response.content)
        except SchemaError as e:
            if response.status_code >= 400:
                raise error_from_response(None, response.status_code, response.text or None) from e
            logger.error(f"Malformed response from {method} {path}: {e}")
            raise ValidationError(f"Malformed response from {path}") from e

        if response.status_code >= 400 or not envelope.success:
            logger.error(f"Request failed: {response.status_code} - {envelope.code}: {envelope.error}")
            raise error_from_response(envelope.code, response.status_code, envelope.error or envelope.message)

        if envelope.data is None:
            raise ValidationError(f"Response from {path} has no data")

        return envelope.data

    # ==================== Product APIs ====================

    async def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> ProductSearchResponse:
        """Search products in the catalog"""
        params = {"limit": limit, "offset": offset}
        if query:
            params["query"] = query
        if category:
            params["category"] = category
        if min_price is not None:
            params["min_price"] = str(min_price)
        if max_price is not None:
            params["max_price"] = str(max_price)

        return await self._request("GET", "/products", ProductSearchResponse, params=params)

    async def get_product(self, product_id: str) -> Product:
        """Get product details (current stock and price)"""
        return await self._request("GET", f"/products/{product_id}", Product)

    # ==================== Cart APIs ====================

    async def get_or_create_active_cart(self) -> Cart:
        """Get the caller's active cart, creating one server-side if needed"""
        return await self._request("GET", "/cart", Cart)

    async def add_item(self, product_id: str, quantity: int = 1) -> Cart:
        """Add item to the active cart"""
        return await self._request(
            "POST",
            "/cart",
            Cart,
            body=AddToCartRequest(product_id=product_id, quantity=quantity),
        )

    async def update_quantity(self, cart_id: str, product_id: str, quantity: int) -> Cart:
        """Set item quantity; zero or less removes the item"""
        return await self._request(
            "PUT",
            f"/cart/{cart_id}/{product_id}",
            Cart,
            body=UpdateCartItemRequest(quantity=quantity),
        )

    async def remove_item(self, cart_id: str, product_id: str) -> Cart:
        """Remove item from cart"""
        return await self._request("DELETE", f"/cart/{cart_id}/{product_id}", Cart)

    async def clear(self, cart_id: str) -> Cart:
        """Remove all items, returning the now-empty cart"""
        return await self._request("DELETE", f"/cart/{cart_id}", Cart)

    async def sync(self, local_cart: Cart) -> Cart:
        """Replace the active cart's lines with ``local_cart``'s lines"""
        return await self._request(
            "POST",
            "/cart/sync",
            Cart,
            body=SyncCartRequest.from_cart(local_cart),
        )
