"""Orchestrate catalog loading, filtering, message building and emission.

``convert`` is the single entry point used by the CLI and the watch loop.
Validation happens before any file is read, catalogs are parsed in
parallel, and output artifacts are written only when requested.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from poi18n.config import ConversionOptions, build_options

from .catalog import load_catalogs, resolve_patterns
from .emitter import (
    LocaleMessages,
    write_messages_dir,
    write_messages_file,
    write_plural_rules,
)
from .messages import build_messages
from .watcher import watch
from .whitelist import filter_catalogs

_LOGGER = logging.getLogger(__name__)


def convert(options: ConversionOptions | Mapping[str, Any]) -> dict[str, LocaleMessages]:
    """Convert the configured catalogs and write the requested outputs."""

    settings = build_options(options)
    if not settings.has_outputs:
        _LOGGER.warning(
            "No output requested; set pluralRules, messagesFile or messagesDir to write files"
        )

    paths = resolve_patterns(settings.po)
    if not paths:
        _LOGGER.warning("No files found at %s", ", ".join(settings.po))

    catalogs = load_catalogs(
        paths, settings.locale_name_header, max_workers=settings.jobs
    )

    if settings.white_list:
        catalogs = filter_catalogs(catalogs, settings.white_list)

    results = {
        locale: LocaleMessages(
            locale=locale,
            messages=build_messages(
                catalog.entries,
                key_mode=settings.key_mode,
                on_collision=settings.on_key_collision,
                locale=locale,
            ),
            plural_rule=catalog.plural_rule,
        )
        for locale, catalog in catalogs.items()
    }

    if settings.messages_file:
        write_messages_file(settings.messages_file, results)

    if settings.plural_rules:
        write_plural_rules(settings.plural_rules, results, settings.module_format)

    if settings.messages_dir:
        write_messages_dir(settings.messages_dir, results)

    _LOGGER.info("Converted %d locale(s): %s", len(results), ", ".join(results))
    return results


def convert_and_watch(options: ConversionOptions | Mapping[str, Any], **watch_kwargs: Any) -> None:
    """Run one conversion, then re-run it whenever a catalog changes."""

    settings = build_options(options)
    convert(settings)
    watch(settings.po, lambda: convert(settings), debounce=settings.debounce, **watch_kwargs)


__all__ = ["convert", "convert_and_watch"]
