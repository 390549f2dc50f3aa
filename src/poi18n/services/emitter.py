"""Write conversion results to disk.

Each writer creates missing parent directories. Writes are not atomic: a
failure midway through a directory emission leaves earlier files in place.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .plural import PluralRule, render_plural_module

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocaleMessages:
    """Converted messages and plural rule for one locale."""

    locale: str
    messages: Mapping[str, Any]
    plural_rule: PluralRule


def render_json(payload: Any) -> str:
    """Serialise ``payload`` the way ``JSON.stringify(payload, null, 2)`` does."""

    return json.dumps(payload, ensure_ascii=False, indent=2)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    _LOGGER.info("Wrote %s", path)


def write_messages_file(path: Path, results: Mapping[str, LocaleMessages]) -> Path:
    """Write every locale's messages into a single JSON object keyed by locale."""

    payload = {locale: result.messages for locale, result in results.items()}
    _write_text(path, render_json(payload))
    return path


def write_messages_dir(directory: Path, results: Mapping[str, LocaleMessages]) -> list[Path]:
    """Write ``<locale>.json`` for each locale into ``directory``."""

    directory.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for locale, result in results.items():
        path = directory / f"{locale}.json"
        _write_text(path, render_json(result.messages))
        written.append(path)
    return written


def write_plural_rules(
    path: Path,
    results: Mapping[str, LocaleMessages],
    module_format: str = "commonjs",
) -> Path:
    """Write the ``pluralizationRules`` module for all locales."""

    rules = {locale: result.plural_rule for locale, result in results.items()}
    _write_text(path, render_plural_module(rules, module_format))
    return path


__all__ = [
    "LocaleMessages",
    "render_json",
    "write_messages_dir",
    "write_messages_file",
    "write_plural_rules",
]
