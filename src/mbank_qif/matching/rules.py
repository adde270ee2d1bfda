"""
Classification rules for imported bank entries.
Each rule decides whether it applies to an entry and, if so, which
account and description the entry gets in the QIF output.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union
import re

from ..models.transaction import Classification, ImportedEntry


class Rule(ABC):
    """Abstract base class for classification rules."""

    @abstractmethod
    def matches(self, entry: ImportedEntry) -> bool:
        """
        Check whether this rule applies to an entry.

        Args:
            entry: Imported bank entry

        Returns:
            True if the rule should classify the entry
        """
        pass

    @abstractmethod
    def derive_account(self, entry: ImportedEntry) -> str:
        """Target account (QIF category) for a matched entry."""
        pass

    def derive_description(self, entry: ImportedEntry) -> str:
        """Description for a matched entry; the transfer title unless overridden."""
        return entry.title

    def apply(self, entry: ImportedEntry) -> Optional[Classification]:
        """
        Classify an entry.

        Returns:
            The classification, or None when the rule does not match
        """
        if not self.matches(entry):
            return None
        return Classification(
            target_account=self.derive_account(entry),
            description=self.derive_description(entry),
        )


class AccountCodeRule(Rule):
    """Matches entries whose counter-account equals a given number."""

    def __init__(self, account_code: str, account_name: str):
        self.account_code = account_code
        self.account_name = account_name

    def matches(self, entry: ImportedEntry) -> bool:
        return entry.account_code == self.account_code

    def derive_account(self, entry: ImportedEntry) -> str:
        return self.account_name

    def __repr__(self) -> str:
        return f"AccountCodeRule({self.account_code!r}, {self.account_name!r})"


class CounterpartyPatternRule(Rule):
    """
    Matches entries whose counterparty matches a regular expression.

    The pattern is searched anywhere in the counterparty text. A fixed
    description replaces the transfer title when one is configured.
    """

    def __init__(
        self,
        pattern: Union[str, "re.Pattern[str]"],
        account_name: str,
        description: Optional[str] = None,
    ):
        """
        Initialize the rule.

        Args:
            pattern: Regular expression, as text or already compiled
            account_name: Target account for matching entries
            description: Optional description used instead of the title
        """
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.account_name = account_name
        self.description = description

    def matches(self, entry: ImportedEntry) -> bool:
        return self.pattern.search(entry.counterparty) is not None

    def derive_account(self, entry: ImportedEntry) -> str:
        return self.account_name

    def derive_description(self, entry: ImportedEntry) -> str:
        if self.description is not None:
            return self.description
        return super().derive_description(entry)

    def __repr__(self) -> str:
        return f"CounterpartyPatternRule({self.pattern.pattern!r}, {self.account_name!r})"


class TitlePrefixRule(Rule):
    """Matches entries whose title starts with a literal prefix."""

    def __init__(self, prefix: str, account_name: str):
        self.prefix = prefix
        self.account_name = account_name

    def matches(self, entry: ImportedEntry) -> bool:
        return entry.title.startswith(self.prefix)

    def derive_account(self, entry: ImportedEntry) -> str:
        return self.account_name

    def __repr__(self) -> str:
        return f"TitlePrefixRule({self.prefix!r}, {self.account_name!r})"


class AccountCodeAndTitleRule(Rule):
    """
    Matches entries sent to a given counter-account whose title contains
    a phrase. Useful when one payee receives payments for several purposes.
    """

    def __init__(self, account_code: str, title_contains: str, account_name: str):
        self.account_code = account_code
        self.title_contains = title_contains
        self.account_name = account_name

    def matches(self, entry: ImportedEntry) -> bool:
        return (
            entry.account_code == self.account_code
            and self.title_contains in entry.title
        )

    def derive_account(self, entry: ImportedEntry) -> str:
        return self.account_name

    def __repr__(self) -> str:
        return (
            f"AccountCodeAndTitleRule({self.account_code!r}, "
            f"{self.title_contains!r}, {self.account_name!r})"
        )


class CatchAllRule(Rule):
    """
    Matches every entry. Keeps both title and counterparty in the
    description so the entry can be recategorized by hand later.
    """

    def __init__(self, account_name: str):
        self.account_name = account_name

    def matches(self, entry: ImportedEntry) -> bool:
        return True

    def derive_account(self, entry: ImportedEntry) -> str:
        return self.account_name

    def derive_description(self, entry: ImportedEntry) -> str:
        return f"{entry.title} {entry.counterparty}"

    def __repr__(self) -> str:
        return f"CatchAllRule({self.account_name!r})"
