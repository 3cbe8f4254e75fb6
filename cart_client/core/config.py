"""Cart Client Configuration"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Client settings loaded from environment"""

    # Cart service
    api_base_url: str = "http://localhost:3000/api"
    request_timeout: float = 10.0
    max_retries: int = 2  # Connection-level retries only

    # Local cart persistence
    storage_dir: str = ".storefront"
    cart_storage_key: str = "storefront:cart"

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
