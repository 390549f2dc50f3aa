"""Load conversion options from YAML files, mappings and CLI overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .schema import ConfigurationError, ConversionOptions


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML configuration file into a raw option mapping."""

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        return _load_yaml(path)
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Invalid YAML in {path}: {error}") from error


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of option issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value").removeprefix("Value error, ")
        messages.append(f"{location}: {message}" if location else message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid conversion options: {details}"


def _normalise_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases onto field names so sources can be merged."""

    aliases = {
        field.alias: name
        for name, field in ConversionOptions.model_fields.items()
        if field.alias
    }
    return {aliases.get(key, key): value for key, value in data.items()}


def _option_is_set(value: Any) -> bool:
    return value is not None and value != () and value != []


def build_options(
    source: ConversionOptions | Mapping[str, Any] | None,
    overrides: Mapping[str, Any] | None = None,
) -> ConversionOptions:
    """Validate ``source`` merged with non-empty ``overrides``.

    Raises :class:`ConfigurationError` before any file is touched when no
    catalog input is configured or an option is invalid.
    """

    if isinstance(source, ConversionOptions):
        if not overrides:
            return source
        raw: dict[str, Any] = source.model_dump(by_alias=False)
    else:
        raw = _normalise_keys(source or {})

    for key, value in _normalise_keys(overrides or {}).items():
        if _option_is_set(value):
            raw[key] = value

    if not _option_is_set(raw.get("po")):
        raise ConfigurationError("missing input filename")

    try:
        return ConversionOptions.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(format_validation_error(error)) from error


__all__ = ["build_options", "format_validation_error", "load_config_file"]
