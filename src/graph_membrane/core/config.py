"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"
    trace_wrapping: bool = False  # Debug entry per wrapper created

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        if value not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got {value!r}")
        return value


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class MembraneSettings(BaseSettings):
    """Top-level membrane settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    # Builtin classes (int, list, ValueError, ...) pass through unwrapped
    share_builtin_types: bool = True

    # None = bounded only by the interpreter recursion limit
    max_hop_depth: int | None = Field(default=None, ge=1)

    # Host checks beyond descriptor consistency (own_keys, get)
    host_checks: bool = True

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = SettingsConfigDict(env_prefix="MEMBRANE_", env_nested_delimiter="__")


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> MembraneSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional). A ``[membrane]``
            table is used when present, otherwise the whole document.
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: If the file cannot be parsed or validation fails.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        import tomli

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        data = data.get("membrane", data)

    if overrides:
        data.update(overrides)

    try:
        return MembraneSettings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
