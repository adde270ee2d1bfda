"""Utility modules."""

from .exceptions import (
    ConversionError,
    MBankParseError,
    ClassificationError,
    NoMatchingRuleError,
    UnknownAccountError,
    ConfigurationError,
    ValidationError,
    QifExportError,
)
from .logging_config import setup_logging

__all__ = [
    "ConversionError",
    "MBankParseError",
    "ClassificationError",
    "NoMatchingRuleError",
    "UnknownAccountError",
    "ConfigurationError",
    "ValidationError",
    "QifExportError",
    "setup_logging",
]
