"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    service_name: str = "storefront"
    api_version: str = "0.1.0"
    debug: bool = False

    # Catalog backend
    catalog_api_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the catalog API",
    )
    catalog_api_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Catalog request timeout in seconds",
    )

    # Listing
    page_size: int = Field(default=9, ge=1, description="Products per page")
    default_min_price: float = Field(
        default=0,
        description="Lower price bound used until the catalog reports one",
    )
    default_max_price: float = Field(
        default=5000,
        description="Upper price bound used until the catalog reports one",
    )

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
