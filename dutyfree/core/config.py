# dutyfree/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - DATABASE_URL (Supabase Postgres connection string)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (only used for admin Supabase client)
    """

    PROJECT_NAME: str = "Metro International Duty Free API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Storage bucket for CMS uploads
    UPLOADS_BUCKET: str = "cms-uploads"

    # Guest cart lives on the client under this cookie name
    GUEST_CART_COOKIE: str = "guest_cart"
    GUEST_CART_MAX_BYTES: int = 4000
    GUEST_CART_MAX_AGE: int = 60 * 60 * 24 * 365

    # Checkout (payment is simulated; products carry no price yet)
    CHECKOUT_UNIT_PRICE: float = 100.0
    CHECKOUT_TAX_RATE: float = 0.15
    CHECKOUT_SHIPPING: float = 0.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
