import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Nurse Staffing Payroll API"
    data_path: Path = Field(
        default=BASE_DIR / "data" / "staffing.json",
        description="JSON datastore holding rosters, payroll records and company settings",
    )
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    invoice_prefix: str = Field(default="INV", min_length=1, max_length=12)

    model_config = SettingsConfigDict(env_prefix="STAFFING_", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("STAFFING_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


settings = get_settings()
