"""Checkout Service Configuration"""

from typing import Optional
from urllib.parse import urlsplit
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront Checkout"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # PayPal (live environment by default)
    paypal_base_url: str = "https://api-m.paypal.com"
    paypal_client_id: Optional[str] = None
    paypal_client_secret: Optional[str] = None
    paypal_env: str = "live"
    paypal_currency: str = "EUR"
    paypal_uid_line_item: bool = False

    # Storefront
    public_base_url: str = "https://jurassicark.x10.mx"
    render_external_url: Optional[str] = None
    brand_name: str = "Your Store"
    dev_origin: str = "http://localhost:5173"

    # Order reconciliation
    min_order_total: float = 0.01
    amount_tolerance: float = 0.01

    # Cart persistence (None keeps carts in memory)
    cart_storage_dir: Optional[str] = None

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS allowlist, deduplicated, in declaration order"""
        origins = [self.dev_origin, "https://jurassicark.x10.mx"]
        if self.public_base_url:
            origins.append(self.public_base_url.rstrip("/"))
        if self.render_external_url:
            parts = urlsplit(self.render_external_url)
            if parts.scheme and parts.netloc:
                origins.append(f"{parts.scheme}://{parts.netloc}")
        return list(dict.fromkeys(origins))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
