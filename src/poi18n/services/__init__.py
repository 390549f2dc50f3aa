"""Catalog conversion services."""

from .catalog import CatalogEntry, CatalogError, LocaleCatalog, load_catalogs, resolve_patterns
from .converter import convert, convert_and_watch
from .emitter import LocaleMessages
from .messages import MessageError, build_messages, resolve_value
from .plural import PluralFormsError, PluralRule, parse_plural_forms
from .whitelist import filter_catalogs

__all__ = [
    "CatalogEntry",
    "CatalogError",
    "LocaleCatalog",
    "LocaleMessages",
    "MessageError",
    "PluralFormsError",
    "PluralRule",
    "build_messages",
    "convert",
    "convert_and_watch",
    "filter_catalogs",
    "load_catalogs",
    "parse_plural_forms",
    "resolve_patterns",
    "resolve_value",
]
