from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal, get_args

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import DEFAULT_MAX_NODES, LayoutDirection, LayoutOptions, Size, parse_max_nodes

DEFAULT_CONFIG_PATH = Path("config/process_flow.yaml")

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)


def normalize_log_level(value: object) -> str:
    level = str(value).strip().upper() if value else "WARNING"
    if level not in LOG_LEVELS:
        msg = f"Unknown log level: {value!r} (expected one of {', '.join(LOG_LEVELS)})"
        raise ValueError(msg)
    return level


class GeneratorSettings(BaseModel):
    max_nodes: int = DEFAULT_MAX_NODES

    @field_validator("max_nodes", mode="before")
    @classmethod
    def clamp_max_nodes(cls, value: object) -> int:
        return parse_max_nodes(value)


class LayoutSettings(BaseModel):
    direction: LayoutDirection = LayoutDirection.TOP_TO_BOTTOM
    node_separation: float = Field(32.0, ge=0)
    rank_separation: float = Field(56.0, ge=0)
    node_width: float = Field(240.0, gt=0)
    node_height: float = Field(96.0, gt=0)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def to_layout_options(self) -> LayoutOptions:
        return LayoutOptions(
            direction=self.direction,
            node_separation=self.node_separation,
            rank_separation=self.rank_separation,
        )

    def node_size(self) -> Size:
        return Size(self.node_width, self.node_height)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PFLOW_", env_nested_delimiter="__")

    log_level: LogLevel = "WARNING"
    generator: GeneratorSettings = GeneratorSettings()
    layout: LayoutSettings = LayoutSettings()

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def check_log_level(cls, value: object) -> str:
        return normalize_log_level(value)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("PFLOW_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
