"""Custom exceptions for the mBank to QIF converter."""


class ConversionError(Exception):
    """Base exception for conversion errors."""

    pass


class MBankParseError(ConversionError):
    """Error parsing an mBank CSV export."""

    pass


class ClassificationError(ConversionError):
    """Error assigning a target account to an imported entry."""

    pass


class NoMatchingRuleError(ClassificationError):
    """No rule matched an imported entry."""

    def __init__(self, entry):
        self.entry = entry
        super().__init__(
            "No matching rule for entry: "
            f"{entry.operation_date.isoformat()} {entry.amount} "
            f"title={entry.title!r} counterparty={entry.counterparty!r} "
            f"account={entry.account_code!r}"
        )


class UnknownAccountError(ClassificationError):
    """Source account number missing from the account map."""

    def __init__(self, account_number: str):
        self.account_number = account_number
        super().__init__(f"Account {account_number!r} is not present in the account map")


class ConfigurationError(ConversionError):
    """Error in configuration."""

    pass


class ValidationError(ConversionError):
    """Data validation error."""

    pass


class QifExportError(ConversionError):
    """Error writing the QIF file."""

    pass
