"""
Cart Reconciler

Routes cart mutations to the right store and merges the anonymous cart into
the server cart at login:

- Anonymous: mutations apply to the local cart and are persisted locally.
- Authenticated: mutations go to the cart service; each result is mirrored
  into the local store so a later logout keeps a consistent snapshot.
- Login: the server cart wins if it has lines; otherwise the local lines are
  stock-checked and pushed with a bulk sync.
"""

import logging
import uuid
from decimal import Decimal
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from storefront_shared.cart import calculations
from storefront_shared.cart.errors import CartError, ValidationError
from storefront_shared.cart.models import ANONYMOUS_USER_ID, Cart, CartLine, Product

from ..core.config import Settings, get_settings
from ..core.session import CartSession, Identity, SessionState
from ..core.storage import FileStorage
from .cart_api import CartApiClient
from .local_store import LocalCartStore

logger = logging.getLogger(__name__)


def new_local_cart_id() -> str:
    return f"local-{uuid.uuid4().hex[:12]}"


class CartReconciler:
    """
    Holder of the displayed cart and the session's auth state.

    Every public operation either swaps in a new cart value or raises a
    ``CartError`` leaving the displayed cart as it was.
    """

    def __init__(
        self,
        api: CartApiClient,
        local_store: LocalCartStore,
        session: Optional[CartSession] = None,
    ):
        self.api = api
        self.local_store = local_store
        self.session = session or CartSession(cart=local_store.load())

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CartReconciler":
        """Create a reconciler backed by file storage and the configured cart service"""
        settings = settings or get_settings()
        api = CartApiClient(
            settings.api_base_url,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )
        storage = FileStorage(Path(settings.storage_dir))
        return cls(api, LocalCartStore(storage, key=settings.cart_storage_key))

    async def close(self) -> None:
        await self.api.close()

    # ==================== Read-only views ====================

    @property
    def cart(self) -> Cart:
        return self.session.cart

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    @property
    def total(self) -> Decimal:
        return self.cart.total

    @property
    def item_count(self) -> int:
        return self.cart.item_count

    def get_cart_item(self, product_id: str) -> Optional[CartLine]:
        return calculations.find_line(self.cart.items, product_id)

    def is_in_cart(self, product_id: str) -> bool:
        return self.get_cart_item(product_id) is not None

    # ==================== Internals ====================

    @asynccontextmanager
    async def _operation(self, name: str):
        """Record a failed operation on the session and re-raise it"""
        self.session.error = None
        try:
            yield
        except CartError as e:
            self.session.error = e.message
            logger.warning(f"Cart {name} failed: {e.message}")
            raise

    def _commit(self, cart: Cart, mirror: bool = True) -> Cart:
        self.session.set_cart(cart)
        if mirror:
            self.local_store.save(cart)
        return cart

    async def _server_cart_id(self) -> str:
        if self.cart.id and self.cart.user_id == self.session.identity.user_id:
            return self.cart.id
        return (await self.api.get_or_create_active_cart()).id

    async def _validate_stock(self, lines: list[CartLine]) -> None:
        """Check every line against current stock-on-hand"""
        for line in lines:
            product = await self.api.get_product(line.product_id)
            calculations.check_stock(product, line.quantity)

    # ==================== Cart operations ====================

    async def refresh(self) -> Cart:
        """
        Reload the displayed cart from the authoritative store.

        If the cart service can't be reached the local snapshot is displayed
        and the error is re-raised.
        """
        async with self._operation("refresh"):
            if not self.is_authenticated:
                return self._commit(self.local_store.load(), mirror=False)
            try:
                return self._commit(await self.api.get_or_create_active_cart())
            except CartError:
                self._commit(self.local_store.load(), mirror=False)
                raise

    async def add_item(self, product: Product, quantity: int = 1) -> Cart:
        """Add ``quantity`` of ``product``, summing into an existing line"""
        async with self._operation("add"):
            if quantity < 1:
                raise ValidationError("Quantity must be at least 1")

            if self.is_authenticated:
                return self._commit(await self.api.add_item(product.id, quantity))

            existing = self.get_cart_item(product.id)
            calculations.check_stock(product, quantity + (existing.quantity if existing else 0))

            cart = self.cart
            if not cart.id:
                cart = cart.model_copy(update={"id": new_local_cart_id()})
            items = calculations.add_line(cart.items, product, quantity, cart.id)
            return self._commit(calculations.with_items(cart, items))

    async def update_quantity(self, product_id: str, quantity: int) -> Cart:
        """Replace a line's quantity; zero or less removes the line"""
        async with self._operation("update"):
            if self.is_authenticated:
                cart_id = await self._server_cart_id()
                return self._commit(await self.api.update_quantity(cart_id, product_id, quantity))

            if quantity > 0:
                existing = self.get_cart_item(product_id)
                if not existing:
                    raise ValidationError("Item not in cart")
                calculations.check_stock(existing.product, quantity)

            items = calculations.update_line_quantity(self.cart.items, product_id, quantity)
            return self._commit(calculations.with_items(self.cart, items))

    async def remove_item(self, product_id: str) -> Cart:
        async with self._operation("remove"):
            if self.is_authenticated:
                cart_id = await self._server_cart_id()
                return self._commit(await self.api.remove_item(cart_id, product_id))

            items = calculations.remove_line(self.cart.items, product_id)
            return self._commit(calculations.with_items(self.cart, items))

    async def clear(self) -> Cart:
        async with self._operation("clear"):
            if self.is_authenticated:
                cart_id = await self._server_cart_id()
                return self._commit(await self.api.clear(cart_id))

            return self._commit(calculations.with_items(self.cart, []))

    # ==================== Auth transitions ====================

    async def login(self, identity: Identity) -> Cart:
        """
        Switch to the authenticated store, merging the anonymous cart once.

        A non-empty server cart is authoritative and the local lines are
        dropped. An empty server cart receives the local lines through a bulk
        sync, after which the local store keeps its identifier but no lines.
        If the local lines fail the stock check the server cart is displayed,
        the local store is left untouched and the error is re-raised.
        """
        self.api.set_access_token(identity.access_token)
        self.session.identity = identity
        self.session.update_state(SessionState.RECONCILING)

        try:
            async with self._operation("login"):
                server_cart = await self.api.get_or_create_active_cart()
                local_cart = self.local_store.load()

                if server_cart.items or not local_cart.items:
                    if local_cart.items:
                        logger.info(
                            f"Server cart {server_cart.id} already has items; "
                            f"discarding {len(local_cart.items)} local lines"
                        )
                    return self._commit(server_cart)

                try:
                    await self._validate_stock(local_cart.items)
                except CartError:
                    self._commit(server_cart, mirror=False)
                    raise

                synced = await self.api.sync(local_cart)
                self.local_store.save(calculations.with_items(local_cart, []))
                logger.info(f"Merged {len(local_cart.items)} local lines into cart {synced.id}")
                return self._commit(synced, mirror=False)
        finally:
            self.session.update_state(SessionState.AUTHENTICATED)

    async def logout(self) -> Cart:
        """
        Drop the identity and fall back to the local snapshot (kept, not cleared).

        The snapshot's lines stay but it is handed back to the anonymous owner.
        """
        self.api.set_access_token(None)
        self.session.identity = None
        self.session.update_state(SessionState.ANONYMOUS)
        snapshot = self.local_store.load()
        return self._commit(snapshot.model_copy(update={"user_id": ANONYMOUS_USER_ID}))
