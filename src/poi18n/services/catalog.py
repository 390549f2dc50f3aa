"""Resolve catalog patterns and load ``.po`` files into locale records."""

from __future__ import annotations

import glob
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

import polib

from .plural import PluralRule, parse_plural_forms

_LOGGER = logging.getLogger(__name__)

PLURAL_FORMS_HEADER = "Plural-Forms"


class CatalogError(RuntimeError):
    """Raised when a catalog file cannot be read or parsed."""


@dataclass(frozen=True)
class CatalogEntry:
    """Translation unit extracted from a catalog."""

    context: str | None
    msgid: str
    msgid_plural: str | None = None
    translations: tuple[str, ...] = ()

    @property
    def is_plural(self) -> bool:
        return bool(self.msgid_plural)

    def describe(self) -> dict[str, object]:
        """Return the populated fields, used when reporting invalid entries."""

        fields = {
            "msgctxt": self.context,
            "msgid": self.msgid,
            "msgid_plural": self.msgid_plural,
            "msgstr": [value for value in self.translations if value],
        }
        return {key: value for key, value in fields.items() if value}


@dataclass(frozen=True)
class LocaleCatalog:
    """Parsed catalog for a single locale."""

    locale: str
    entries: tuple[CatalogEntry, ...]
    plural_forms: str
    plural_rule: PluralRule
    source: Path | None = None

    def with_entries(self, entries: Iterable[CatalogEntry]) -> LocaleCatalog:
        return LocaleCatalog(
            locale=self.locale,
            entries=tuple(entries),
            plural_forms=self.plural_forms,
            plural_rule=self.plural_rule,
            source=self.source,
        )


def _as_patterns(patterns: str | Path | Iterable[str | Path]) -> list[str]:
    if isinstance(patterns, (str, Path)):
        return [str(patterns)]
    return [str(pattern) for pattern in patterns]


def resolve_patterns(patterns: str | Path | Iterable[str | Path]) -> list[Path]:
    """Expand file names and glob patterns, preserving pattern order."""

    paths: list[Path] = []
    for pattern in _as_patterns(patterns):
        paths.extend(Path(match) for match in sorted(glob.glob(pattern, recursive=True)))
    return paths


def _entry_from_po(entry: polib.POEntry) -> CatalogEntry:
    indexed = tuple(entry.msgstr_plural[index] for index in sorted(entry.msgstr_plural))
    if entry.msgid_plural:
        translations = indexed
    else:
        # polib keeps a lone ``msgstr[0]`` in msgstr_plural even without msgid_plural.
        translations = (entry.msgstr,) if entry.msgstr or not indexed else indexed[:1]

    return CatalogEntry(
        context=entry.msgctxt,
        msgid=entry.msgid,
        msgid_plural=entry.msgid_plural or None,
        translations=translations,
    )


def load_catalog(path: Path, locale_name_header: str | None = None) -> LocaleCatalog:
    """Parse a single ``.po`` file.

    The locale name comes from ``locale_name_header`` when that header is
    present and non-empty, otherwise from the file name without extension.
    """

    # polib treats a non-existent path as inline catalog content.
    if not path.is_file():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        po_file = polib.pofile(str(path), encoding="utf-8")
    except (OSError, ValueError) as error:
        raise CatalogError(f"Unable to load catalog {path}: {error}") from error

    locale = (locale_name_header and po_file.metadata.get(locale_name_header)) or path.stem
    plural_forms = po_file.metadata.get(PLURAL_FORMS_HEADER, "")
    entries = tuple(_entry_from_po(entry) for entry in po_file if not entry.obsolete)

    _LOGGER.debug("Loaded %d entries for locale %s from %s", len(entries), locale, path)

    return LocaleCatalog(
        locale=locale,
        entries=entries,
        plural_forms=plural_forms,
        plural_rule=parse_plural_forms(plural_forms),
        source=path,
    )


def load_catalogs(
    paths: Sequence[Path],
    locale_name_header: str | None = None,
    *,
    max_workers: int | None = None,
) -> dict[str, LocaleCatalog]:
    """Parse all catalogs concurrently and merge them by locale name.

    A failure in any file propagates and aborts the whole load. When two
    files resolve to the same locale the later path in ``paths`` wins.
    """

    if not paths:
        return {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        catalogs = list(
            executor.map(lambda path: load_catalog(path, locale_name_header), paths)
        )

    merged: dict[str, LocaleCatalog] = {}
    for catalog in catalogs:
        if catalog.locale in merged:
            _LOGGER.warning(
                "Locale %s from %s replaces %s",
                catalog.locale,
                catalog.source,
                merged[catalog.locale].source,
            )
        merged[catalog.locale] = catalog
    return merged


__all__ = [
    "CatalogEntry",
    "CatalogError",
    "LocaleCatalog",
    "PLURAL_FORMS_HEADER",
    "load_catalog",
    "load_catalogs",
    "resolve_patterns",
]
