"""Storefront Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8001

    # Cart token
    cart_token_secret: str = "change-me-in-production"
    cart_token_max_age_days: int = 30
    cart_cookie_name: str = "cart_token"
    cart_cookie_secure: bool = False

    # Catalog sources, tried in order
    catalog_sources: list[str] = ["local"]
    catalog_api_url: Optional[str] = None
    source_timeout_seconds: float = 2.0
    not_found_is_final: bool = True

    # Enrichment
    enrichment_concurrency: int = 8
    enrichment_deadline_seconds: float = 5.0

    # Delivery (minor units)
    currency: str = "MAD"
    free_delivery_threshold: int = 50000
    flat_delivery_fee: int = 2500
    free_delivery_cities: list[str] = ["Rabat", "Sale"]

    class Config:
        env_prefix = "STOREFRONT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def cart_token_max_age_seconds(self) -> int:
        return self.cart_token_max_age_days * 24 * 60 * 60


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
