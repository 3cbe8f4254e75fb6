"""Identity token models"""

from dataclasses import dataclass
from typing import Optional
from enum import Enum


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass
class VerificationResult:
    """Result of bearer token verification"""
    is_valid: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole = UserRole.USER
    error_message: Optional[str] = None
    expires: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
