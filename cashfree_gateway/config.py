"""Environment-driven settings for the payment function.

Loaded once per process; the adapter receives the instance it should use.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    cashfree_app_id: Optional[str] = None
    cashfree_secret_key: Optional[str] = None
    cashfree_base_url: str = "https://api.cashfree.com"
    cashfree_api_version: str = "2023-08-01"
    request_timeout: float = Field(default=15.0, validation_alias="CASHFREE_TIMEOUT_SECONDS")
    app_domain: str = "buffbuddies.synthory.space"
    customer_email_domain: str = "buffbuddies.com"
    default_order_note: str = "Buff Buddies Booking"
    # Legacy: lets callers send appId/secretKey in the request body.
    allow_body_credentials: bool = False
    log_level: str = "INFO"
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
