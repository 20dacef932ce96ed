import os
from typing import List
from dotenv import load_dotenv

# grab env vars from .env file
load_dotenv()


class Settings:
    # app settings
    APP_ENV: str = os.getenv("APP_ENV", "dev")
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS stuff
    _origins_raw: str = os.getenv("ALLOWED_ORIGINS", "*")
    ALLOWED_ORIGINS: List[str] = [o.strip() for o in _origins_raw.split(",") if o.strip()] if _origins_raw else ["*"]

    # database config with separate creds
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
    DB_NAME: str = os.getenv("DB_NAME", "coffee_pos")
    DB_USER: str = os.getenv("DB_USER", "coffee_pos")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_SSL_MODE: str = os.getenv("DB_SSL_MODE", "prefer")
    DB_CONNECTION_TIMEOUT: int = int(os.getenv("DB_CONNECTION_TIMEOUT", "30"))
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))

    @property
    def DATABASE_URL(self) -> str:
        """build DATABASE_URL from individual components or use explicit override"""
        # tests and local runs point this at sqlite
        explicit_url = os.getenv("DATABASE_URL")
        if explicit_url:
            return explicit_url

        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}@"
            f"{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            f"?sslmode={self.DB_SSL_MODE}&connect_timeout={self.DB_CONNECTION_TIMEOUT}"
        )

    # cart and pricing
    CURRENCY: str = os.getenv("CURRENCY", "USD")
    NOTE_MAX_LENGTH: int = int(os.getenv("NOTE_MAX_LENGTH", "500"))

    # till sessions held in memory
    CART_SESSION_IDLE_MINUTES: int = int(os.getenv("CART_SESSION_IDLE_MINUTES", "720"))
    CART_SESSION_MAX_COUNT: int = int(os.getenv("CART_SESSION_MAX_COUNT", "500"))

    # order persistence API (mock|http)
    ORDER_API_PROVIDER: str = os.getenv("ORDER_API_PROVIDER", "mock")
    ORDER_API_BASE_URL: str = os.getenv("ORDER_API_BASE_URL", "http://localhost:3000")
    ORDER_API_TIMEOUT_SECONDS: float = float(os.getenv("ORDER_API_TIMEOUT_SECONDS", "5"))


settings = Settings()
