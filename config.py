"""
Runtime configuration for the Asset Management backend.

Values come from environment variables (a local ``.env`` file is loaded
first if present) so secrets never live in source control.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

_logger = logging.getLogger(__name__)

_DEFAULT_TOKEN_SECRET = "dev-access-token-secret"


class Settings:
    # -- Database ------------------------------------------------------------
    DATABASE_URL: str = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
    DATABASE_NAME: str = os.getenv("DATABASE_NAME", "assetflow")

    # -- Tokens --------------------------------------------------------------
    ACCESS_TOKEN_SECRET: str = os.getenv("ACCESS_TOKEN_SECRET", _DEFAULT_TOKEN_SECRET)
    TOKEN_EXPIRY_HOURS: int = int(os.getenv("TOKEN_EXPIRY_HOURS", "24"))
    TOKEN_ALGORITHM: str = "HS256"

    # -- Payments ------------------------------------------------------------
    STRIPE_SECRET_KEY: str = os.getenv("STRIPE_SECRET_KEY", "")
    PAYMENT_CURRENCY: str = os.getenv("PAYMENT_CURRENCY", "usd")

    # -- HTTP ----------------------------------------------------------------
    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    PORT: int = int(os.getenv("PORT", "5000"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def warn_insecure_defaults(cls) -> None:
        if cls.ACCESS_TOKEN_SECRET == _DEFAULT_TOKEN_SECRET:
            _logger.warning("ACCESS_TOKEN_SECRET is not set; using the development default")
        if not cls.STRIPE_SECRET_KEY:
            _logger.warning("STRIPE_SECRET_KEY is not set; payment intents will fail")


settings = Settings()


def configure_logging() -> None:
    """Set the root log level from LOG_LEVEL and quiet the driver."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("pymongo").setLevel(logging.WARNING)
