"""
Access Token Verifier

Verifies bearer JWTs issued by the identity provider. The signing key comes
from one of: a shared secret, a PEM public key, or the provider's JWKS
endpoint.
"""

import logging
from typing import Optional

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.backends import default_backend

from .models import UserRole, VerificationResult

logger = logging.getLogger(__name__)


class TokenVerifier:
    """
    Verifies identity-provider access tokens.

    Usage:
        verifier = TokenVerifier(jwks_url="https://.../.well-known/jwks.json",
                                 algorithms=["ES256"])

        result = verifier.verify(token)
        if result.is_valid:
            print(f"Request from user: {result.user_id}")
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        public_key_pem: Optional[str] = None,
        jwks_url: Optional[str] = None,
        algorithms: Optional[list[str]] = None,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        leeway_seconds: int = 30,
    ):
        """
        Initialize the verifier.

        Args:
            secret: Shared secret for HMAC-signed tokens
            public_key_pem: PEM-encoded public key for ES256/RS256 tokens
            jwks_url: Identity provider JWKS endpoint
            algorithms: Accepted signing algorithms
            audience: Required ``aud`` claim, if any
            issuer: Required ``iss`` claim, if any
            leeway_seconds: Allowed clock skew for ``exp``/``iat``
        """
        self.algorithms = algorithms or ["HS256"]
        self.audience = audience
        self.issuer = issuer
        self.leeway = leeway_seconds
        self._secret = secret
        self._public_key = self._load_public_key(public_key_pem) if public_key_pem else None
        self._jwks_client = jwt.PyJWKClient(jwks_url) if jwks_url else None

    @property
    def is_configured(self) -> bool:
        return bool(self._secret or self._public_key or self._jwks_client)

    def _load_public_key(self, pem: str):
        """Load public key from PEM string"""
        pem_bytes = pem.encode() if isinstance(pem, str) else pem

        try:
            return serialization.load_pem_public_key(
                pem_bytes, backend=default_backend()
            )
        except Exception as e:
            raise ValueError(f"Failed to load public key: {e}")

    def _signing_key(self, token: str):
        if self._jwks_client:
            return self._jwks_client.get_signing_key_from_jwt(token).key
        if self._public_key:
            return self._public_key
        return self._secret

    def verify(self, token: Optional[str]) -> VerificationResult:
        """
        Verify a bearer token.

        Args:
            token: Raw JWT (without the ``Bearer`` prefix)

        Returns:
            VerificationResult indicating success/failure
        """
        if not token:
            return VerificationResult(is_valid=False, error_message="Access token required")

        if not self.is_configured:
            return VerificationResult(
                is_valid=False,
                error_message="No token verification key configured",
            )

        try:
            payload = jwt.decode(
                token,
                self._signing_key(token),
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                leeway=self.leeway,
                options={
                    "require": ["sub", "exp"],
                    "verify_aud": self.audience is not None,
                },
            )
        except jwt.ExpiredSignatureError:
            return VerificationResult(is_valid=False, error_message="Token expired")
        except jwt.PyJWTError as e:
            logger.debug(f"Token rejected: {e}")
            return VerificationResult(is_valid=False, error_message="Invalid or expired token")

        metadata = payload.get("user_metadata") or {}
        # Anything other than an explicit ADMIN is a regular user
        role = UserRole.ADMIN if metadata.get("role") == UserRole.ADMIN.value else UserRole.USER

        return VerificationResult(
            is_valid=True,
            user_id=payload["sub"],
            email=payload.get("email") or "",
            name=metadata.get("name") or "",
            role=role,
            expires=payload.get("exp"),
        )
