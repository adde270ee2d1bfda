"""Data models for imported bank entries and QIF output."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..utils.exceptions import ValidationError


@dataclass(frozen=True)
class ImportedEntry:
    """
    One transaction row read from a bank export.

    Text fields are kept as the bank wrote them (minus surrounding
    whitespace); the amount is signed, negative for money going out.
    """

    operation_date: date
    accounting_date: date
    description: str
    title: str
    counterparty: str
    account_code: str
    amount: Decimal


@dataclass(frozen=True)
class SourceHistory:
    """All entries of a single export, in the order the bank listed them."""

    account_number: str
    entries: tuple[ImportedEntry, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable but store an immutable tuple
        object.__setattr__(self, "entries", tuple(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def total_inflow(self) -> Decimal:
        """Sum of positive amounts."""
        return sum((e.amount for e in self.entries if e.amount > 0), Decimal("0"))

    @property
    def total_outflow(self) -> Decimal:
        """Sum of negative amounts (a negative number)."""
        return sum((e.amount for e in self.entries if e.amount < 0), Decimal("0"))

    @property
    def net_change(self) -> Decimal:
        return self.total_inflow + self.total_outflow


@dataclass(frozen=True)
class Classification:
    """Target account and description chosen by a rule for one entry."""

    target_account: str
    description: str


@dataclass(frozen=True)
class QifTransaction:
    """A single transaction of a QIF bank account block."""

    date: date
    amount: Decimal
    target_account: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Reject values the QIF writer cannot format exactly."""
        # datetime is a date subclass but carries a time we would silently drop
        if not isinstance(self.date, date) or isinstance(self.date, datetime):
            raise ValidationError(f"date is not a date: {self.date!r}")
        if not isinstance(self.amount, Decimal):
            raise ValidationError(f"amount is not a Decimal: {self.amount!r}")
        if not self.amount.is_finite():
            raise ValidationError(f"amount is not a finite number: {self.amount!r}")


@dataclass(frozen=True)
class QifDocument:
    """A QIF account header plus its transactions, ready for rendering."""

    account_name: str
    transactions: tuple[QifTransaction, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "transactions", tuple(self.transactions))

    @property
    def total_amount(self) -> Decimal:
        """Net sum of all transaction amounts."""
        return sum((t.amount for t in self.transactions), Decimal("0"))

    def amounts_by_account(self) -> dict[str, Decimal]:
        """Net amount per target account, in first-seen order."""
        totals: dict[str, Decimal] = {}
        for txn in self.transactions:
            key = txn.target_account or ""
            totals[key] = totals.get(key, Decimal("0")) + txn.amount
        return totals
