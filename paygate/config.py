"""
PayGate Configuration Module

Loads environment variables for the payment backend: database, PayPal client,
pricing floors and the SMTP account used for receipts.
"""
from decimal import Decimal
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pricing Notes:
    - min_custom_amount applies to user-entered amounts (unset disables it)
    - min_service_price applies to catalog entries (unset by default)
    """

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Optional[str] = None  # ERROR-level file log, e.g. "error.log"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./paygate.db"
    database_timeout: float = 30.0

    # PayPal
    paypal_client_id: Optional[str] = None
    default_currency: str = "USD"

    # Pricing rules
    min_custom_amount: Optional[Decimal] = Decimal("50")
    min_service_price: Optional[Decimal] = None

    # Receipt email (SMTP with STARTTLS)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_timeout: float = 10.0
    email_user: Optional[str] = None
    email_pass: Optional[str] = None
    email_from: Optional[str] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @property
    def email_enabled(self) -> bool:
        return bool(self.email_user and self.email_pass)


# Global settings instance
settings = Settings()
