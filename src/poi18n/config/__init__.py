"""Conversion option schema and configuration file loading."""

from .loader import build_options, format_validation_error, load_config_file
from .schema import ConfigurationError, ConversionOptions

__all__ = [
    "ConfigurationError",
    "ConversionOptions",
    "build_options",
    "format_validation_error",
    "load_config_file",
]
