"""Runtime settings, read from the environment or a local .env file."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "warning"

    # stamping
    start_column: int = 5
    glyph_threshold: float = 0.3

    # optimizer
    density_limit: int = 25
    continuity_tolerance: int = 2

    # commits
    commit_hour: int = 12
    commit_file: str = "contribution_pattern.txt"
    patterns_file: str = "saved_patterns.txt"

    # safe mode: push in batches of weeks, then cool down
    batch_weeks: int = 2
    batch_delay: int = 5

    api_timeout: int = 15

    model_config = {
        "env_prefix": "PIXELTEXT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
