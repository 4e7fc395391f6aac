"""Configuration management for the hunt tracker."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any
import os
import pkgutil

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class TrackerConfigError(RuntimeError):
    """Raised when the configured collaborators cannot be resolved."""


class TrackerSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    attributes_path: Path | None = Field(default=None, validation_alias="HUNT_ATTRIBUTES_PATH")
    log_file_name: str = Field(default="game.log", validation_alias="HUNT_LOG_FILE_NAME")
    listen_game_log: bool = Field(default=True, validation_alias="HUNT_LISTEN_GAME_LOG")
    isolated: bool = Field(default=False, validation_alias="HUNT_ISOLATED")

    poll_interval: float = Field(default=30.0, validation_alias="HUNT_POLL_INTERVAL")
    tail_interval: float = Field(default=1.0, validation_alias="HUNT_TAIL_INTERVAL")
    watchdog_interval: float = Field(default=15.0, validation_alias="HUNT_WATCHDOG_INTERVAL")
    stall_threshold: float = Field(default=60.0, validation_alias="HUNT_STALL_THRESHOLD")
    read_timeout: float = Field(default=10.0, validation_alias="HUNT_READ_TIMEOUT")
    locate_interval: float = Field(default=5.0, validation_alias="HUNT_LOCATE_INTERVAL")

    parser: str = Field(
        default="hunt_tracker.sources.snapshot:JsonSnapshotParser",
        validation_alias="HUNT_PARSER",
    )
    converter: str = Field(
        default="hunt_tracker.sources.snapshot:SnapshotConverter",
        validation_alias="HUNT_CONVERTER",
    )
    store: str | None = Field(default=None, validation_alias="HUNT_STORE")

    cue_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(), validation_alias="HUNT_CUE_PATHS"
    )
    log_level: str = Field(default="INFO", validation_alias="HUNT_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "HUNT_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("cue_paths", mode="before")
    @classmethod
    def _parse_cue_paths(cls, value):
        if value is None or value == "":
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(Path(str(item)) for item in value)
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts)
        raise ValueError("HUNT_CUE_PATHS must be a list of paths or a path-separated string")

    @field_validator(
        "poll_interval",
        "tail_interval",
        "watchdog_interval",
        "stall_threshold",
        "read_timeout",
        "locate_interval",
    )
    @classmethod
    def _validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Intervals and timeouts must be > 0")
        return value

    @model_validator(mode="after")
    def _validate_stall_window(self) -> "TrackerSettings":
        # the watchdog only runs for isolated sources
        if self.isolated and self.poll_interval >= self.stall_threshold:
            raise ValueError("HUNT_POLL_INTERVAL must be shorter than HUNT_STALL_THRESHOLD")
        return self


def load_component(path: str, *, setting: str) -> Any:
    """Resolve a ``module:factory`` import path and call the factory."""

    try:
        factory = pkgutil.resolve_name(path)
    except (ImportError, AttributeError, ValueError) as exc:
        raise TrackerConfigError(f"{setting} could not import '{path}': {exc}") from exc
    if not callable(factory):
        raise TrackerConfigError(f"{setting} must name a callable, got '{path}'")
    return factory()


@lru_cache(maxsize=1)
def get_settings() -> TrackerSettings:
    """Return cached settings instance."""

    settings = TrackerSettings()
    if settings.attributes_path is not None:
        settings.attributes_path = settings.attributes_path.expanduser().resolve()
    settings.cue_paths = tuple(path.expanduser().resolve() for path in settings.cue_paths)
    return settings


__all__ = ["TrackerConfigError", "TrackerSettings", "get_settings", "load_component"]
