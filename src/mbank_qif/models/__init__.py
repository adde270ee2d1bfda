"""Data models for conversion."""

from .transaction import (
    ImportedEntry,
    SourceHistory,
    Classification,
    QifTransaction,
    QifDocument,
)

__all__ = [
    "ImportedEntry",
    "SourceHistory",
    "Classification",
    "QifTransaction",
    "QifDocument",
]
