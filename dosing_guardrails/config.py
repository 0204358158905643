"""Package configuration using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix ``GUARDRAILS_``)."""

    model_config = SettingsConfigDict(
        env_prefix="GUARDRAILS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_format: str = "json"  # 'json' or 'text'
    log_level: str = "INFO"
    service_name: str = "dosing-guardrails"

    # Precision used when snapping derived rates onto pump-supported rates
    discrete_match_decimal_places: int = Field(default=3, ge=0, le=6)


settings = Settings()
