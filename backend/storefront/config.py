"""Application configuration management using Pydantic Settings."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the directory where settings.py is located
BASE_DIR = Path(__file__).resolve().parent

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Storefront API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:5174"]

    # MongoDB
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_database: str = "ecommerce"
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 1
    # user/session collections are owned by the auth provider
    mongodb_user_collection: str = "user"
    mongodb_session_collection: str = "session"
    mongodb_cart_collection: str = "carts"
    mongodb_wishlist_collection: str = "wishlists"
    mongodb_order_collection: str = "orders"

    # Auth provider session cookie
    session_cookie_name: str = "ecommerce.session_token"

    # Stripe
    stripe_secret_key: str = Field(default="", description="Stripe secret API key")
    stripe_webhook_secret: str = Field(default="", description="Stripe webhook signing secret")
    payment_currency: str = "usd"

    # Pricing
    tax_rate: float = Field(default=0.10, ge=0)
    shipping_flat: float = Field(default=0.0, ge=0)

    # Product catalog
    catalog_base_url: str = "https://dummyjson.com"
    catalog_timeout: float = 10.0

    # Cache (seconds)
    cache_default_ttl: int = 300
    cache_ttl_products: int = 300
    cache_ttl_product_single: int = 600
    cache_ttl_categories: int = 3600
    cache_ttl_search: int = 180
    cache_sweep_interval: float = 60.0

    # Admin dashboard
    dashboard_revenue_months: int = Field(default=6, ge=1)
    dashboard_top_products: int = Field(default=10, ge=1)

    # Rate Limiting
    rate_limit_requests: int = 120
    rate_limit_period: int = 60  # seconds

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file= BASE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
