from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Catalog (None = packaged content/actions.json)
    catalog_path: Path | None = None

    # Evaluation
    explosion_max_rounds: int = Field(default=10, ge=1)
    rng_seed: int | None = None

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    enable_color: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_prefix="ACTIONROLL_")

settings = Settings()
