"""
Centralized application configuration implementing the 12-Factor App methodology.
Values come from environment variables or a local .env file.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Immutable configuration schema backed by environment variables."""

    APP_NAME: str = "Calculadora Price"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"

    # Reference rate provider (BrasilAPI)
    RATE_API_URL: str = "https://brasilapi.com.br/api/taxas/v1"
    RATE_API_TIMEOUT: float = 10.0
    RATE_API_USER_AGENT: str = "calculadora-price-client/1.0"

    # Canonical base URL used by the sitemap and SEO tags; falls back to the request host
    SITE_URL: Optional[str] = None
    SITEMAP_PAGES: List[str] = ["/"]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
