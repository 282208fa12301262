"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROCESS_API_URL = "http://localhost:5000/process"


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    process_api_url: str = Field(
        default=DEFAULT_PROCESS_API_URL,
        alias="PROCESS_API_URL",
        description="Remote text-processing endpoint.",
    )
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info", alias="LOG_LEVEL"
    )
    port: int = Field(default=8000, alias="PORT")
    ws_inactivity_timeout: float = Field(
        default=300.0, alias="WS_INACTIVITY_TIMEOUT", description="Seconds"
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of settings."""

    return Settings()
