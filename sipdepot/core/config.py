from pydantic_settings import BaseSettings
from typing import Optional, List


def _parse_allowed_origins(v: str) -> List[str]:
    """Parse comma-separated origins string; strip whitespace; keep non-empty."""
    if not v or not v.strip():
        return []
    return [o.strip() for o in v.split(",") if o.strip()]


_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
]


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "postgresql://postgres:postgres@db:5432/sipdepot"

    # CORS: comma-separated extra origins for production (e.g. https://www.paintsipdepot.com)
    ALLOWED_ORIGINS_EXTRA: str = ""

    def get_allowed_origins(self) -> List[str]:
        """Return CORS allowed origins: default localhost + ALLOWED_ORIGINS_EXTRA."""
        return _DEFAULT_CORS_ORIGINS + _parse_allowed_origins(self.ALLOWED_ORIGINS_EXTRA)

    # Auth
    SECRET_KEY: str = "supersecret_jwt_key_change_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None  # Signing secret for checkout/charge events
    STRIPE_CONNECT_WEBHOOK_SECRET: Optional[str] = None  # Signing secret for connected-account events
    STRIPE_WEBHOOK_TOLERANCE_SECONDS: int = 300
    CURRENCY: str = "usd"

    # Connected-account business profile
    PLATFORM_URL: str = "https://www.paintsipdepot.com/"
    PLATFORM_PRODUCT_DESCRIPTION: str = (
        "Paint & Sip Depot is an events platform that enables independent hosts to run "
        "paint-and-sip experiences. Guests purchase tickets online, and funds are paid "
        "out to hosts after Stripe verification."
    )

    # Frontend base used for checkout success/cancel redirects
    APP_URL: str = "http://localhost:3000"

    # Events
    DEFAULT_SALES_CUTOFF_HOURS: int = 48

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
