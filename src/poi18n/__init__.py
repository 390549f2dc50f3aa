"""Convert gettext catalogs into vue-i18n messages and plural rules."""

from .services import convert

__all__ = ["convert"]
