"""QIF output."""

from .writer import QifWriter, format_amount, format_date

__all__ = ["QifWriter", "format_amount", "format_date"]
