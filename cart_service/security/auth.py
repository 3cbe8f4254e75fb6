"""
Bearer Token Authentication

Verifies identity-provider access tokens on incoming requests. Cart routes
require a valid token; catalog routes accept one but don't require it.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from storefront_shared.auth import TokenVerifier, UserRole
from storefront_shared.cart.errors import NotAuthenticated

from ..core.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    """Identity attached to a verified request"""
    id: str
    email: str = ""
    name: str = ""
    role: UserRole = UserRole.USER


@lru_cache()
def get_token_verifier() -> TokenVerifier:
    """
    Create the token verifier from settings.

    Key sources, in order of precedence: JWKS URL, PEM public key, shared
    secret.
    """
    settings = get_settings()
    verifier = TokenVerifier(
        secret=settings.jwt_secret,
        public_key_pem=settings.get_jwt_public_key(),
        jwks_url=settings.jwks_url,
        algorithms=settings.jwt_algorithms,
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )

    if not verifier.is_configured:
        logger.warning("No token verification key configured - all authenticated requests will be rejected")

    return verifier


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


class BearerAuthDependency:
    """FastAPI dependency resolving the caller's identity from the Authorization header"""

    def __init__(self, required: bool = True):
        """
        Args:
            required: If True, reject requests without a valid token
        """
        self.required = required

    async def __call__(
        self,
        authorization: Optional[str] = Header(None),
        verifier: TokenVerifier = Depends(get_token_verifier),
    ) -> Optional[AuthenticatedUser]:
        result = verifier.verify(_bearer_token(authorization))

        if not result.is_valid:
            if self.required:
                logger.warning(f"Rejected request: {result.error_message}")
                raise NotAuthenticated(result.error_message)
            return None

        return AuthenticatedUser(
            id=result.user_id,
            email=result.email or "",
            name=result.name or "",
            role=result.role,
        )


# Dependency instances
require_user = BearerAuthDependency(required=True)
optional_user = BearerAuthDependency(required=False)
