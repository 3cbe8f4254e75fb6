"""Session state for the cart reconciler"""

from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field
from enum import Enum

from storefront_shared.cart.calculations import empty_cart
from storefront_shared.cart.models import Cart, utc_now


class SessionState(str, Enum):
    """Authentication state of the shopping session"""
    ANONYMOUS = "anonymous"
    RECONCILING = "reconciling"
    AUTHENTICATED = "authenticated"


@dataclass
class Identity:
    """Signed-in user as reported by the identity provider"""
    user_id: str
    access_token: str
    email: Optional[str] = None


@dataclass
class CartSession:
    """
    Latest displayed cart plus the session's auth state.

    The cart is an immutable value; every operation swaps in a new one.
    """
    state: SessionState = SessionState.ANONYMOUS
    identity: Optional[Identity] = None
    cart: Cart = field(default_factory=empty_cart)
    error: Optional[str] = None
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None and self.state != SessionState.ANONYMOUS

    def update_state(self, new_state: SessionState) -> None:
        """Update session state"""
        self.state = new_state
        self.updated_at = utc_now()

    def set_cart(self, cart: Cart) -> None:
        self.cart = cart
        self.updated_at = utc_now()
