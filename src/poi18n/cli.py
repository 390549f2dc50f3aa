"""Command line entry point for converting catalogs."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Sequence

from .config import ConfigurationError, build_options, load_config_file
from .services import CatalogError, MessageError, PluralFormsError, convert, convert_and_watch
from .version import get_project_version

_LOGGER = logging.getLogger(__name__)

LOG_LEVEL_ENV = "POI18N_LOG_LEVEL"

_DESCRIPTION = (
    "Transform gettext .po catalogs into JSON messages and plural rules "
    "consumable by vue-i18n."
)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poi18n",
        description=_DESCRIPTION,
        usage="%(prog)s [OPTIONS] GLOB_OR_FILE.po ...",
    )
    parser.add_argument(
        "po",
        nargs="*",
        help="catalog files or glob patterns (quote globs to let poi18n expand them)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_project_version()}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file providing any of the options below",
    )
    parser.add_argument(
        "--pluralRules",
        "--plural-rules",
        dest="plural_rules",
        metavar="FILE.js",
        help="language plural rules to be imported for VueI18n pluralizationRules",
    )
    parser.add_argument(
        "--messagesFile",
        "--messages-file",
        dest="messages_file",
        metavar="FILE.json",
        help="a single file containing all the translation strings, language as a key",
    )
    parser.add_argument(
        "--messagesDir",
        "--messages-dir",
        dest="messages_dir",
        metavar="DIRECTORY",
        help="directory where translations go split by a language",
    )
    parser.add_argument(
        "--localeNameHeader",
        "--locale-name-header",
        dest="locale_name_header",
        metavar="HEADER",
        help="catalog header holding the locale name (defaults to the file name)",
    )
    parser.add_argument(
        "--whiteList",
        "--white-list",
        dest="white_list",
        action="append",
        metavar="GLOB",
        help="source files searched for message keys; keys found nowhere are dropped",
    )
    parser.add_argument(
        "--moduleFormat",
        "--module-format",
        dest="module_format",
        choices=("commonjs", "esm"),
        help="module syntax of the plural rules file (default: commonjs)",
    )
    parser.add_argument(
        "--keyMode",
        "--key-mode",
        dest="key_mode",
        choices=("nested", "flat"),
        help="split dotted keys into nested objects or keep them flat (default: nested)",
    )
    parser.add_argument(
        "--onKeyCollision",
        "--on-key-collision",
        dest="on_key_collision",
        choices=("overwrite", "error"),
        help="what to do when nested keys clash (default: overwrite)",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        help="number of catalogs parsed in parallel",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        default=None,
        help="re-run the conversion whenever a catalog is added or changed",
    )
    parser.add_argument(
        "--debounce",
        type=float,
        help="seconds to wait for further changes before re-running (default: 0.3)",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="log debug details")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log errors")
    return parser


def _resolve_log_level(verbose: bool, quiet: bool) -> tuple[int, str | None]:
    """Return the log level and the rejected environment value, if any."""

    if verbose:
        return logging.DEBUG, None
    if quiet:
        return logging.ERROR, None

    name = os.getenv(LOG_LEVEL_ENV, "INFO").strip().upper() or "INFO"
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        return logging.INFO, name
    return level, None


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level, rejected = _resolve_log_level(verbose, quiet)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    if rejected is not None:
        _LOGGER.warning("Ignoring invalid value for %s: %s", LOG_LEVEL_ENV, rejected)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running conversions from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    overrides: dict[str, Any] = {
        key: value
        for key, value in vars(args).items()
        if key not in {"config", "verbose", "quiet"}
    }

    try:
        source = load_config_file(args.config) if args.config else {}
    except ConfigurationError as error:
        _LOGGER.error("%s", error)
        return 1

    if not overrides["po"] and not source.get("po"):
        parser.print_help()
        return 0

    try:
        options = build_options(source, overrides)
        if options.watch:
            convert_and_watch(options)
        else:
            convert(options)
    except (
        ConfigurationError,
        CatalogError,
        MessageError,
        PluralFormsError,
        OSError,
    ) as error:
        _LOGGER.error("%s", error)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
