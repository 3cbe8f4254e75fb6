# Bearer token issuing and verification

from .issuer import TokenIssuer
from .verifier import TokenVerifier
from .models import UserRole, VerificationResult

__all__ = ["TokenIssuer", "TokenVerifier", "UserRole", "VerificationResult"]
