"""
Rule-based classification engine.
Assigns each imported entry a target account and description using an
ordered rule list, then packages the result as a QIF document.
"""

from collections import Counter
from typing import Mapping, Optional, Sequence
import logging

from ..models.transaction import (
    Classification,
    ImportedEntry,
    QifDocument,
    QifTransaction,
    SourceHistory,
)
from ..utils.exceptions import NoMatchingRuleError, UnknownAccountError
from .rules import Rule

logger = logging.getLogger(__name__)


class ClassificationEngine:
    """
    Classifies imported entries with an ordered list of rules.

    The first rule that matches an entry decides its account and
    description; list order is the only priority there is. An entry that
    no rule matches aborts the whole run.
    """

    def __init__(self, accounts: Mapping[str, str], rules: Sequence[Rule]):
        """
        Initialize the engine.

        Args:
            accounts: Source account number to display name
            rules: Rules in the order they should be tried
        """
        self.accounts = dict(accounts)
        self.rules = list(rules)

        if not self.rules:
            logger.warning("No classification rules configured, every entry will fail")

    def find_rule(self, entry: ImportedEntry) -> Optional[Rule]:
        """Return the first rule matching the entry, or None."""
        return next((rule for rule in self.rules if rule.matches(entry)), None)

    def classify_entry(self, entry: ImportedEntry) -> Optional[Classification]:
        """
        Classify a single entry.

        Args:
            entry: Imported entry

        Returns:
            Classification from the first matching rule, or None if no rule matches
        """
        rule = self.find_rule(entry)
        if rule is None:
            return None

        logger.debug(f"{entry.operation_date} {entry.amount} {entry.title!r} -> {rule!r}")
        return rule.apply(entry)

    def classify(self, history: SourceHistory) -> QifDocument:
        """
        Classify every entry of an import and build the QIF document.

        Args:
            history: Parsed bank export

        Returns:
            QIF document named after the source account, transactions in import order

        Raises:
            NoMatchingRuleError: If any entry is not matched by any rule
            UnknownAccountError: If the source account is missing from the account map
        """
        logger.info(
            f"Classifying {len(history.entries)} entries of account "
            f"{history.account_number} with {len(self.rules)} rules"
        )

        transactions: list[QifTransaction] = []
        for entry in history.entries:
            result = self.classify_entry(entry)
            if result is None:
                logger.error(f"No rule matched entry: {entry}")
                raise NoMatchingRuleError(entry)

            transactions.append(
                QifTransaction(
                    date=entry.operation_date,
                    amount=entry.amount,
                    target_account=result.target_account,
                    description=result.description,
                )
            )

        account_name = self.resolve_account_name(history.account_number)
        document = QifDocument(account_name=account_name, transactions=transactions)

        counts = Counter(t.target_account for t in document.transactions)
        for target, count in counts.most_common():
            logger.debug(f"  {target}: {count} transaction(s)")
        logger.info(f"Classified {len(transactions)} entries for {account_name}")

        return document

    def resolve_account_name(self, account_number: str) -> str:
        """
        Look up the display name of a source account.

        Raises:
            UnknownAccountError: If the account number is not in the map
        """
        try:
            return self.accounts[account_number]
        except KeyError:
            raise UnknownAccountError(account_number) from None
