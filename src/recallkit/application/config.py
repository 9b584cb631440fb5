from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from recallkit.domain.constants import DEFAULT_STORAGE_KEY

CONFIG_FILES = [
    Path(".config/recallkit/config.toml"),
    Path(".recallkit.toml"),
]


class AppConfig(BaseSettings):
    """
    Configuration model for recallkit.
    Supports loading from:
    1. Environment variables (RECALLKIT_*)
    2. Config file (~/.config/recallkit/config.toml or ~/.recallkit.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="RECALLKIT_",
        extra="ignore",
    )

    # Paths
    catalog_path: Path | None = None
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/recallkit")

    # Storage
    backend: Literal["json", "memory"] = "json"
    storage_key: str = DEFAULT_STORAGE_KEY

    verbose: int = 1

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

        # Find the first existing file
        toml_file = None
        for f in CONFIG_FILES:
            candidate = Path.home() / f
            if candidate.exists():
                toml_file = candidate
                break

        # First source wins: init (CLI) > env > file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("catalog_path", mode="before")
    @classmethod
    def resolve_catalog_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/recallkit/config.toml (if exists)
    3. Environment variables (RECALLKIT_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set.
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
