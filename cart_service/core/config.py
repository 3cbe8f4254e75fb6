"""Cart Service Configuration"""

import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront Cart Service"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Identity provider (bearer token verification)
    jwt_secret: Optional[str] = None
    jwt_public_key: Optional[str] = None  # Inline PEM
    jwt_public_key_path: Optional[str] = None
    jwks_url: Optional[str] = None
    jwt_algorithms: list[str] = ["HS256"]
    jwt_audience: Optional[str] = None
    jwt_issuer: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def get_jwt_public_key(self) -> Optional[str]:
        """Get token verification public key from file or inline"""
        if self.jwt_public_key:
            return self.jwt_public_key

        if self.jwt_public_key_path and os.path.exists(self.jwt_public_key_path):
            with open(self.jwt_public_key_path, "r") as f:
                return f.read()

        return None

    @property
    def auth_configured(self) -> bool:
        """Check if any token verification key source is configured"""
        return any([self.jwt_secret, self.get_jwt_public_key(), self.jwks_url])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
