from decimal import Decimal
from typing import List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


DEFAULT_SECRET_KEY = "farmledger-dev-secret-key-change-in-production"


class Settings(BaseSettings):
    APP_NAME: str = "FarmLedger"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # ── Persistence ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./farmledger.db"
    AUTO_CREATE_TABLES: bool = True
    READINESS_CHECK_DATABASE: bool = True

    # ── Tokens ───────────────────────────────────────────────────────────────
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # ── HTTP & logging ───────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    ENABLE_REQUEST_ID: bool = True
    ENABLE_REQUEST_LOGGING: bool = True

    # ── Inventory ────────────────────────────────────────────────────────────
    # Materials strictly between zero and this balance count as low stock.
    LOW_STOCK_THRESHOLD: Decimal = Decimal("100")

    # ── Daily production ─────────────────────────────────────────────────────
    # Catalog names the daily report books eggs and droppings under.
    EGG_MATERIAL_NAME: str = "Eggs"
    DROPPINGS_MATERIAL_NAME: str = "Droppings"
    EGG_UNIT_NAME: str = "carton"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @field_validator("LOW_STOCK_THRESHOLD")
    @classmethod
    def validate_low_stock_threshold(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("LOW_STOCK_THRESHOLD must be positive")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.lower().startswith("sqlite")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in {"prod", "production"}

    @model_validator(mode="after")
    def validate_production_safety(self):
        if not self.is_production:
            return self

        problems = []
        if self.is_sqlite:
            problems.append("SQLite cannot back the ledger in production")
        if self.SECRET_KEY == DEFAULT_SECRET_KEY:
            problems.append("the default SECRET_KEY is not allowed")
        if self.AUTO_CREATE_TABLES:
            problems.append("AUTO_CREATE_TABLES must be false; run Alembic migrations")
        if problems:
            raise ValueError("Unsafe production settings: " + "; ".join(problems))
        return self


settings = Settings()
