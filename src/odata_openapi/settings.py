"""Generator settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from odata_openapi.errors import ConfigValidationError, ErrorContext


class GeneratorSettings(BaseSettings):
    """Settings that shape the generated document."""

    model_config = SettingsConfigDict(
        env_prefix="ODATA_OPENAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    enable_operation_id: bool = True
    enable_key_as_segment: bool = False
    enable_pagination: bool = False
    top_example: int = 50
    service_root: str = "http://localhost"
    openapi_version: str = "3.0.1"
    document_version: str = "1.0.0"

    @field_validator("top_example", mode="before")
    @classmethod
    def validate_top_example(cls, v: Any) -> Any:
        if isinstance(v, int) and v < 0:
            raise ConfigValidationError(
                message="top_example must not be negative",
                field="top_example",
                value=v,
            )
        return v

    @field_validator("openapi_version", mode="before")
    @classmethod
    def validate_openapi_version(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.startswith("3."):
            raise ConfigValidationError(
                message=f"Unsupported OpenAPI version: {v}",
                field="openapi_version",
                value=v,
                context=ErrorContext(extra={"supported": "3.x"}),
            )
        return v


def load_settings(config_path: str | Path | None = None, **overrides: Any) -> GeneratorSettings:
    """Load settings from file and environment.

    Priority: explicit overrides > env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            config_data = _read_config_file(config_path)

    config_data.update(_get_env_overrides())
    config_data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return GeneratorSettings(**config_data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigValidationError(
            message=f"Invalid setting {field}: {first['msg']}",
            field=field,
            value=first.get("input"),
            context=ErrorContext(extra={"errors": e.error_count()}),
        ) from e


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(
            message=f"Failed to parse YAML settings: {e}",
            context=ErrorContext(extra={"path": str(path)}),
        ) from e
    if not isinstance(config, dict):
        raise ConfigValidationError(
            message=f"Settings must be a YAML mapping, got {type(config).__name__}",
            context=ErrorContext(extra={"path": str(path)}),
        )
    return config


def _get_env_overrides() -> dict[str, Any]:
    """Get settings overrides from environment variables."""
    overrides: dict[str, Any] = {}

    def as_bool(value: str) -> bool:
        return value.lower() in ("true", "1", "yes")

    env_mappings = {
        "ODATA_OPENAPI_ENABLE_OPERATION_ID": ("enable_operation_id", as_bool),
        "ODATA_OPENAPI_ENABLE_KEY_AS_SEGMENT": ("enable_key_as_segment", as_bool),
        "ODATA_OPENAPI_ENABLE_PAGINATION": ("enable_pagination", as_bool),
        "ODATA_OPENAPI_TOP_EXAMPLE": ("top_example", int),
        "ODATA_OPENAPI_SERVICE_ROOT": "service_root",
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                try:
                    overrides[key] = converter(value)
                except (ValueError, TypeError) as e:
                    raise ConfigValidationError(
                        message=f"Invalid value for {env_key}: {value}",
                        field=key,
                        value=value,
                        context=ErrorContext(extra={"env_var": env_key}),
                    ) from e
            else:
                overrides[config_key] = value

    return overrides


__all__ = ["GeneratorSettings", "load_settings"]
