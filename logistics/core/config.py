"""
Application configuration

Carrier credentials come from the environment (or .env). A carrier whose
API key is blank is simply not offered; the Local Delivery carrier is always
available regardless of configuration.
"""
import logging
from typing import Dict, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SENDBOX_BASE_URL = "https://api.sendbox.co/shipping"
DEFAULT_GIG_BASE_URL = "https://api.giglogistics.com/v1"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # App
    APP_NAME: str = "Logistics API"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # Sendbox
    SENDBOX_API_KEY: str = ""
    SENDBOX_BASE_URL: str = DEFAULT_SENDBOX_BASE_URL

    # GIG Logistics
    GIG_API_KEY: str = ""
    GIG_BASE_URL: str = DEFAULT_GIG_BASE_URL

    # Outbound carrier calls
    CARRIER_HTTP_TIMEOUT_SECONDS: float = 30.0
    # Upper bound on a single carrier's quote call inside the aggregation
    # fan-out. None leaves it to the HTTP timeout.
    LOGISTICS_QUOTE_TIMEOUT_SECONDS: Optional[float] = None

    @field_validator("CARRIER_HTTP_TIMEOUT_SECONDS")
    @classmethod
    def validate_http_timeout(cls, v):
        if v <= 0:
            raise ValueError("CARRIER_HTTP_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("LOGISTICS_QUOTE_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_quote_timeout(cls, v):
        # Empty env var means "not set"
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("LOGISTICS_QUOTE_TIMEOUT_SECONDS")
    @classmethod
    def validate_quote_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("LOGISTICS_QUOTE_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    def carrier_credentials(self) -> Dict[str, Optional[str]]:
        """
        Credentials keyed by registered carrier key.

        Blank values are reported as None so the registry skips the carrier.
        """
        return {
            "sendbox": self.SENDBOX_API_KEY.strip() or None,
            "gig": self.GIG_API_KEY.strip() or None,
        }

    def carrier_base_urls(self) -> Dict[str, str]:
        return {
            "sendbox": self.SENDBOX_BASE_URL,
            "gig": self.GIG_BASE_URL,
        }


def get_settings() -> Settings:
    """Build a fresh Settings instance from the current environment."""
    return Settings()


settings = get_settings()

if settings.ENVIRONMENT == "production" and settings.DEBUG:
    logger.warning("DEBUG is enabled with ENVIRONMENT=production")
