"""Classification engine and rules."""

from .engine import ClassificationEngine
from .rules import (
    Rule,
    AccountCodeRule,
    CounterpartyPatternRule,
    TitlePrefixRule,
    AccountCodeAndTitleRule,
    CatchAllRule,
)

__all__ = [
    "ClassificationEngine",
    "Rule",
    "AccountCodeRule",
    "CounterpartyPatternRule",
    "TitlePrefixRule",
    "AccountCodeAndTitleRule",
    "CatchAllRule",
]
