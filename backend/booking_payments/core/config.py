"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Booking Payments API"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    # Comma-separated whitelist of origins allowed to post the booking form
    CORS_ALLOWED_URL: str = ""

    # Stripe
    STRIPE_SECRET: str = ""
    APP_BOOKING_CURRENCY: str = "AUD"

    # Spreadsheet API (catalog lookup + row store)
    BOOKING_API_URL: str = "http://zokal-googlesheets-api.webriq.com/sheet"
    BOOKINGS_SHEET_TITLE: str = "Bookings"
    HIRE_SHEET_TITLE: str = "HireEquipment"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Notifications
    APP_EMAIL: str = "bookings@zokal.com.au"
    APP_EMAIL_RECIPIENTS: str = ""

    # Mail transport: Mailgun outside development, Mailtrap in development
    MAILGUN_USER: str = ""
    MAILGUN_PASSWORD: str = ""
    MAILGUN_SMTP_HOST: str = "smtp.mailgun.org"
    MAILGUN_SMTP_PORT: int = 587
    MAILTRAP_USER: str = ""
    MAILTRAP_PASSWORD: str = ""
    MAILTRAP_SMTP_HOST: str = "smtp.mailtrap.io"
    MAILTRAP_SMTP_PORT: int = 2525
    SMTP_TIMEOUT_SECONDS: int = 10

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ALLOWED_URL.split(",") if o.strip()]

    @property
    def email_recipients(self) -> list[str]:
        return [r.strip() for r in self.APP_EMAIL_RECIPIENTS.split(",") if r.strip()]

    @property
    def minor_unit_factor(self) -> Decimal:
        # Stripe amounts are expressed in cents for every currency we sell in
        return Decimal(100)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
