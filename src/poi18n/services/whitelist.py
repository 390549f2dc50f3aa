"""Drop message keys that no whitelisted source file mentions.

Usage detection is a textual search for quoted key literals, not a reference
finder. A key ``foo.bar.baz`` counts as used when the text contains any of
``'foo.'``-style prefix literals (a quote, a key prefix, a dot and then a
quote or ``$``) or the quoted full key. Consequences:

* ``'foo.' + name`` and ``` `foo.${name}` ``` keep every ``foo.*`` key;
* keys assembled without a quoted prefix (``ns + '.bar'``) are not found;
* a literal that merely looks like a key keeps that key.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from .catalog import LocaleCatalog, resolve_patterns

_LOGGER = logging.getLogger(__name__)

_QUOTE = "['\"`]"
_PREFIX_END = "[.]['\"`$]"


@dataclass(frozen=True)
class KeyMatcher:
    key: str
    pattern: re.Pattern[str]

    def found_in(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def build_matcher(key: str) -> KeyMatcher:
    """Return the usage pattern for ``key``.

    ``foo.bar.baz`` produces
    ``(['"`]foo[.]['"`$])|(['"`]foo[.]bar[.]['"`$])|(['"`]foo[.]bar[.]baz['"`])``.
    """

    components = key.split(".")
    prefixes = [
        "[.]".join(re.escape(part) for part in components[: index + 1])
        for index in range(len(components))
    ]
    alternatives = [f"({_QUOTE}{prefix}{_PREFIX_END})" for prefix in prefixes[:-1]]
    alternatives.append(f"({_QUOTE}{prefixes[-1]}{_QUOTE})")
    return KeyMatcher(key=key, pattern=re.compile("|".join(alternatives)))


def find_unused_keys(keys: Iterable[str], paths: Sequence[Path]) -> set[str]:
    """Return the subset of ``keys`` that none of ``paths`` mentions.

    Each key stops being searched for once it is found, and scanning ends as
    soon as every key has been found. Unreadable files are logged and skipped.
    """

    pending = {key: build_matcher(key) for key in dict.fromkeys(keys)}

    for path in paths:
        if not pending:
            break
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            _LOGGER.error("Unable to read whitelist file %s: %s", path, error)
            continue

        found = [key for key, matcher in pending.items() if matcher.found_in(text)]
        for key in found:
            del pending[key]

    return set(pending)


def filter_catalogs(
    catalogs: Mapping[str, LocaleCatalog],
    whitelist: str | Iterable[str],
) -> dict[str, LocaleCatalog]:
    """Remove entries whose context key is not used by any whitelist file."""

    keys = [
        entry.context
        for catalog in catalogs.values()
        for entry in catalog.entries
        if entry.context
    ]
    if not keys:
        return dict(catalogs)

    paths = [path for path in resolve_patterns(whitelist) if path.is_file()]
    if not paths:
        _LOGGER.warning("Whitelist %s matched no files; every message will be removed", whitelist)

    unused = find_unused_keys(keys, paths)
    if not unused:
        return dict(catalogs)

    _LOGGER.info("Removing %d unused message key(s): %s", len(unused), ", ".join(sorted(unused)))
    return {
        locale: catalog.with_entries(
            entry for entry in catalog.entries if entry.context not in unused
        )
        for locale, catalog in catalogs.items()
    }


__all__ = ["KeyMatcher", "build_matcher", "filter_catalogs", "find_unused_keys"]
