"""Turn catalog entries into vue-i18n message mappings.

Plural entries become a single string whose variants are separated by
``" | "``, the format vue-i18n splits on when choosing a plural form with
``$tc``. Context keys are used as message keys, either verbatim (flat mode)
or split on ``.`` into nested mappings (nested mode).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

from .catalog import CatalogEntry

_LOGGER = logging.getLogger(__name__)

PLURAL_DELIMITER = "|"
PLURAL_SEPARATOR = f" {PLURAL_DELIMITER} "
COUNT_MARKER = "%s"
COUNT_PLACEHOLDER = "{n}"

KeyMode = Literal["nested", "flat"]
CollisionPolicy = Literal["overwrite", "error"]


class MessageError(ValueError):
    """Raised when an entry cannot be represented as a vue-i18n message."""


def resolve_value(entry: CatalogEntry) -> str:
    """Return the message string for ``entry``.

    Singular entries use their first non-empty translation and fall back to
    the untranslated ``msgid``. Plural entries join their translations with
    ``" | "`` (or the source singular and plural texts when nothing is
    translated) and replace ``%s`` with the ``{n}`` count placeholder.
    """

    if not entry.is_plural:
        return next((value for value in entry.translations if value), entry.msgid)

    if any(PLURAL_DELIMITER in value for value in entry.translations):
        raise MessageError(
            f"Plural message {entry.context!r} cannot contain {PLURAL_DELIMITER!r}; "
            "vue-i18n uses it to separate plural forms"
        )

    if any(entry.translations):
        value = PLURAL_SEPARATOR.join(entry.translations)
    else:
        value = PLURAL_SEPARATOR.join((entry.msgid, entry.msgid_plural or ""))

    return value.replace(COUNT_MARKER, COUNT_PLACEHOLDER)


@dataclass
class MessageLeaf:
    value: str


@dataclass
class MessageBranch:
    children: dict[str, MessageLeaf | MessageBranch] = field(default_factory=dict)


class MessageTree:
    """Message mapping built from key paths.

    A collision happens when a path needs a branch where a leaf already
    exists, a leaf is written where a branch exists, or a leaf is replaced
    with a different value. The ``overwrite`` policy keeps the last write
    and logs a warning; ``error`` raises :class:`MessageError`.
    """

    def __init__(self, policy: CollisionPolicy = "overwrite") -> None:
        self.policy = policy
        self.root = MessageBranch()

    def _collide(self, key: str, reason: str) -> None:
        if self.policy == "error":
            raise MessageError(f"Message key collision at {key!r}: {reason}")
        _LOGGER.warning("Message key collision at %r: %s; keeping the last value", key, reason)

    def insert(self, path: list[str], value: str) -> None:
        self._insert(self.root, path, value, depth=0)

    def _insert(self, branch: MessageBranch, path: list[str], value: str, depth: int) -> None:
        segment = path[depth]
        key = ".".join(path[: depth + 1])
        existing = branch.children.get(segment)

        if depth == len(path) - 1:
            if isinstance(existing, MessageBranch):
                self._collide(key, "a nested mapping is replaced by a message")
            elif isinstance(existing, MessageLeaf) and existing.value != value:
                self._collide(key, "a message is defined twice")
            branch.children[segment] = MessageLeaf(value)
            return

        if not isinstance(existing, MessageBranch):
            if isinstance(existing, MessageLeaf):
                self._collide(key, "a message is replaced by a nested mapping")
            existing = MessageBranch()
            branch.children[segment] = existing
        self._insert(existing, path, value, depth + 1)

    def to_dict(self) -> dict[str, Any]:
        return _branch_to_dict(self.root)


def _branch_to_dict(branch: MessageBranch) -> dict[str, Any]:
    return {
        key: node.value if isinstance(node, MessageLeaf) else _branch_to_dict(node)
        for key, node in branch.children.items()
    }


def key_path(context: str, key_mode: KeyMode = "nested") -> list[str]:
    """Split a context key into tree path segments for ``key_mode``."""

    if key_mode == "flat":
        return [context]
    return context.split(".")


def build_messages(
    entries: Iterable[CatalogEntry],
    *,
    key_mode: KeyMode = "nested",
    on_collision: CollisionPolicy = "overwrite",
    locale: str | None = None,
) -> dict[str, Any]:
    """Build the message mapping for one locale."""

    tree = MessageTree(on_collision)
    for entry in entries:
        if not entry.context:
            _LOGGER.warning("Skipping invalid entry in language %s: %s", locale, entry.describe())
            continue
        tree.insert(key_path(entry.context, key_mode), resolve_value(entry))
    return tree.to_dict()


__all__ = [
    "COUNT_PLACEHOLDER",
    "CollisionPolicy",
    "KeyMode",
    "MessageBranch",
    "MessageError",
    "MessageLeaf",
    "MessageTree",
    "PLURAL_DELIMITER",
    "PLURAL_SEPARATOR",
    "build_messages",
    "key_path",
    "resolve_value",
]
