from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Leave Ledger"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://leave_ledger:leave_ledger@db:5432/leave_ledger"
    database_pool_size: int = 5
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]

    # Utilization bands (percent of annual entitlement consumed).
    utilization_critical_pct: Decimal = Decimal("90")
    utilization_warning_pct: Decimal = Decimal("75")

    # Low-balance severity bands (absolute days remaining).
    balance_critical_days: Decimal = Decimal("2")
    balance_warning_days: Decimal = Decimal("5")
    low_balance_threshold_days: Decimal = Decimal("5")

    # Working-days defaults for leave duration calculations.
    working_days_policy: Literal["5_day", "6_day", "7_day"] = "5_day"
    exclude_saturdays: bool = True
    exclude_sundays: bool = True
    exclude_public_holidays: bool = True


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
