from pydantic_settings import BaseSettings
from functools import lru_cache
from decimal import Decimal
from typing import List, Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Laguna POS"
    PORT: int = 8080
    DEBUG: bool = False

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "laguna"
    POSTGRES_PORT: int = 5432
    DATABASE_URL_OVERRIDE: Optional[str] = None

    # Electronic invoicing provider (required, the app refuses to start without them)
    ELECTRONIC_INVOICE_URL: str
    ELECTRONIC_INVOICE_USER: str
    ELECTRONIC_INVOICE_PASSWORD: str
    ELECTRONIC_INVOICE_TIMEOUT: float = 30.0
    INVOICE_PREFIX: str = "SETP"

    # Flat rates applied to open orders (decimals, 0.19 = 19%)
    DEFAULT_VAT_RATE: Decimal = Decimal("0.19")
    DEFAULT_ICO_RATE: Decimal = Decimal("0.08")
    DEFAULT_TIP_RATE: Decimal = Decimal("0.10")

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+psycopg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
