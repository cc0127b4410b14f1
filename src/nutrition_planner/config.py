"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    data_dir: Path = Path("data")
    foods_dir_name: str = "foods"
    targets_dir_name: str = "targets"
    watch_extension: str = ".csv"
    openai_api_key: str
    openai_base_url: str = "https://openrouter.ai/api/v1"
    openai_model: str = "deepseek/deepseek-r1-distill-llama-70b"
    meal_plan_history_size: int = 5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def watched_directories(self) -> list[Path]:
        """Directories whose files are watched for changes."""
        return [
            self.data_dir / self.foods_dir_name,
            self.data_dir / self.targets_dir_name,
        ]
