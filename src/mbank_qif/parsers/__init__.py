"""Parsers for bank exports."""

from ..config import ConverterConfig
from ..utils.exceptions import ConfigurationError
from .mbank_parser import MBankParser

PARSERS = {
    "mbank": MBankParser,
}


def get_parser(kind: str, config: ConverterConfig) -> MBankParser:
    """
    Create the parser for an importer kind.

    Raises:
        ConfigurationError: If the kind is not supported
    """
    try:
        parser_class = PARSERS[kind.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown importer {kind!r}, expected one of: {', '.join(sorted(PARSERS))}"
        ) from None
    return parser_class(config)


__all__ = ["MBankParser", "PARSERS", "get_parser"]
