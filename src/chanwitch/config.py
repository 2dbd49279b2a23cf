"""Chanwitch configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Defaults for channels opened through open_channel()
    default_capacity: int = Field(default=16, ge=1)
    idle_timeout: float = Field(default=30.0, gt=0)  # seconds

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="CHANWITCH_")
