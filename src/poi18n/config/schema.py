"""Pydantic models describing conversion options."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when conversion options are missing or invalid."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class ConversionOptions(ImmutableModel):
    """Options accepted by :func:`poi18n.services.converter.convert`.

    Field aliases keep the option names used by the command line and by
    existing YAML configuration (``pluralRules``, ``messagesDir``...).
    """

    po: tuple[str, ...]
    locale_name_header: str | None = Field(default=None, alias="localeNameHeader")
    plural_rules: Path | None = Field(default=None, alias="pluralRules")
    messages_file: Path | None = Field(default=None, alias="messagesFile")
    messages_dir: Path | None = Field(default=None, alias="messagesDir")
    white_list: tuple[str, ...] = Field(default=(), alias="whiteList")
    watch: bool = False
    module_format: Literal["commonjs", "esm"] = Field(default="commonjs", alias="moduleFormat")
    key_mode: Literal["nested", "flat"] = Field(default="nested", alias="keyMode")
    on_key_collision: Literal["overwrite", "error"] = Field(
        default="overwrite", alias="onKeyCollision"
    )
    jobs: int | None = Field(default=None, ge=1)
    debounce: float = Field(default=0.3, ge=0)

    @field_validator("po", "white_list", mode="before")
    @classmethod
    def _coerce_patterns(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, (str, Path)):
            return (str(value),)
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        raise ValueError("expected a path, a glob or a list of them")

    @model_validator(mode="after")
    def _require_input(self) -> Self:
        if not self.po:
            raise ValueError("missing input filename")
        return self

    @property
    def has_outputs(self) -> bool:
        return any((self.plural_rules, self.messages_file, self.messages_dir))


__all__ = ["ConfigurationError", "ConversionOptions", "ImmutableModel"]
