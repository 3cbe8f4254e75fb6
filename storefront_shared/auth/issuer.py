"""
Access Token Issuer

Mints identity-provider style access tokens (``sub`` plus ``user_metadata``)
for local development and tests. Production tokens come from the managed
identity provider; this only mirrors their shape.
"""

import time
import uuid
from typing import Optional

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.backends import default_backend

from .models import UserRole


class TokenIssuer:
    """
    Signs access tokens with a shared secret or a PEM private key.

    Usage:
        issuer = TokenIssuer(secret="...")
        token = issuer.issue("user-123", email="ada@example.com")
        headers = {"Authorization": f"Bearer {token}"}
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        private_key_pem: Optional[str] = None,
        algorithm: str = "HS256",
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        ttl_seconds: int = 3600,
    ):
        """
        Initialize the issuer.

        Args:
            secret: Shared secret for HMAC algorithms
            private_key_pem: PEM-encoded private key for ES256/RS256
            algorithm: JWT signing algorithm
            audience: Value for the ``aud`` claim
            issuer: Value for the ``iss`` claim
            ttl_seconds: Default token lifetime
        """
        if not secret and not private_key_pem:
            raise ValueError("Either secret or private_key_pem is required")

        self.algorithm = algorithm
        self.audience = audience
        self.issuer = issuer
        self.ttl_seconds = ttl_seconds
        self._key = self._load_private_key(private_key_pem) if private_key_pem else secret

    def _load_private_key(self, pem: str):
        """Load private key from PEM string"""
        pem_bytes = pem.encode() if isinstance(pem, str) else pem

        try:
            return serialization.load_pem_private_key(
                pem_bytes, password=None, backend=default_backend()
            )
        except Exception as e:
            raise ValueError(f"Failed to load private key: {e}")

    def issue(
        self,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        role: UserRole = UserRole.USER,
        expires_in: Optional[int] = None,
    ) -> str:
        """Return a signed access token for ``user_id``"""
        now = int(time.time())
        ttl = self.ttl_seconds if expires_in is None else expires_in

        payload = {
            "sub": user_id,
            "role": "authenticated",
            "iat": now,
            "exp": now + ttl,
            "jti": str(uuid.uuid4()),
            "user_metadata": {"name": name or "", "role": UserRole(role).value},
        }
        if email:
            payload["email"] = email
        if self.audience:
            payload["aud"] = self.audience
        if self.issuer:
            payload["iss"] = self.issuer

        return jwt.encode(payload, self._key, algorithm=self.algorithm)
