"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from storefront.infrastructure.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch) -> None:
        """Defaults match the shop listing."""
        monkeypatch.delenv("PAGE_SIZE", raising=False)
        monkeypatch.delenv("CATALOG_API_URL", raising=False)

        config = Settings(_env_file=None)

        assert config.page_size == 9
        assert config.catalog_api_url == "http://localhost:3000"
        assert config.default_min_price == 0
        assert config.default_max_price == 5000

    def test_environment_override(self, monkeypatch) -> None:
        """Environment variables override defaults."""
        monkeypatch.setenv("PAGE_SIZE", "12")
        monkeypatch.setenv("CATALOG_API_URL", "http://catalog:4000")

        config = Settings(_env_file=None)

        assert config.page_size == 12
        assert config.catalog_api_url == "http://catalog:4000"

    def test_invalid_page_size(self, monkeypatch) -> None:
        """Page size must be positive."""
        monkeypatch.setenv("PAGE_SIZE", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)
