"""mBank CSV to QIF converter."""

__version__ = "0.1.0"
