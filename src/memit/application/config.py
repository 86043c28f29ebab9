import logging
from datetime import time
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from memit.domain.constants import DEFAULT_DAILY_NEW_CARDS, DEFAULT_DAILY_TOTAL_LIMIT
from memit.domain.ports import StudyLimits


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/memit/config.toml",
        Path.home() / ".memit.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for memit.
    Supports loading from:
    1. Environment variables (MEMIT_*)
    2. Config file (~/.config/memit/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMIT_",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/memit")

    # Study quotas
    daily_new_cards: int = Field(default=DEFAULT_DAILY_NEW_CARDS, ge=0)
    daily_total_limit: int = Field(default=DEFAULT_DAILY_TOTAL_LIMIT, ge=0)
    study_reminder_time: time = time(9, 0)
    # Show the back first and answer with the front
    study_reversed: bool = False

    # 1 = INFO, 2+ = DEBUG
    verbose: int = Field(default=1, ge=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    def log_level(self) -> int:
        if self.verbose >= 2:
            return logging.DEBUG
        if self.verbose == 0:
            return logging.WARNING
        return logging.INFO

    def study_limits(self) -> StudyLimits:
        """Settings provider view consumed by the scheduling core."""
        return StudyLimits(
            daily_new_limit=self.daily_new_cards,
            daily_total_limit=self.daily_total_limit,
        )


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/memit/config.toml (if exists)
    3. Environment variables (MEMIT_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
