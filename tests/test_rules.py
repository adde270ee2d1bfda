"""Tests for classification rules."""

import re

from mbank_qif.matching.rules import (
    AccountCodeAndTitleRule,
    AccountCodeRule,
    CatchAllRule,
    CounterpartyPatternRule,
    TitlePrefixRule,
)
from mbank_qif.models.transaction import Classification


class TestAccountCodeRule:
    def test_matches_exact_code(self, make_entry):
        rule = AccountCodeRule("12345", "Savings")

        assert rule.matches(make_entry(account_code="12345"))
        assert not rule.matches(make_entry(account_code="123456"))
        assert not rule.matches(make_entry(account_code=""))

    def test_description_defaults_to_title(self, make_entry):
        rule = AccountCodeRule("12345", "Savings")

        result = rule.apply(make_entry(title="MONTHLY SAVINGS", account_code="12345"))

        assert result == Classification("Savings", "MONTHLY SAVINGS")


class TestCounterpartyPatternRule:
    def test_searches_anywhere_in_counterparty(self, make_entry):
        rule = CounterpartyPatternRule("ACME", "Groceries")

        assert rule.matches(make_entry(counterparty="ACME Foods"))
        assert rule.matches(make_entry(counterparty="Shop ACME"))
        assert not rule.matches(make_entry(counterparty="acme foods"))

    def test_accepts_compiled_pattern(self, make_entry):
        rule = CounterpartyPatternRule(re.compile("acme", re.IGNORECASE), "Groceries")

        assert rule.matches(make_entry(counterparty="ACME Foods"))

    def test_fixed_description(self, make_entry):
        rule = CounterpartyPatternRule("ACME", "Groceries", "Food shopping")

        result = rule.apply(make_entry(title="CARD 1234", counterparty="ACME"))

        assert result == Classification("Groceries", "Food shopping")

    def test_title_when_no_description(self, make_entry):
        rule = CounterpartyPatternRule("ACME", "Groceries")

        result = rule.apply(make_entry(title="Grocery Store", counterparty="ACME Foods"))

        assert result == Classification("Groceries", "Grocery Store")

    def test_empty_description_is_kept(self, make_entry):
        rule = CounterpartyPatternRule("ACME", "Groceries", "")

        assert rule.derive_description(make_entry(counterparty="ACME")) == ""


class TestTitlePrefixRule:
    def test_prefix_only(self, make_entry):
        rule = TitlePrefixRule("PRZELEW PODATKU", "Taxes")

        assert rule.matches(make_entry(title="PRZELEW PODATKU PIT-37"))
        assert not rule.matches(make_entry(title="ZAPŁATA: PRZELEW PODATKU"))

    def test_derivation(self, make_entry):
        rule = TitlePrefixRule("PIT", "Taxes")

        assert rule.apply(make_entry(title="PIT 2022")) == Classification("Taxes", "PIT 2022")


class TestAccountCodeAndTitleRule:
    def test_requires_both_conditions(self, make_entry):
        rule = AccountCodeAndTitleRule("999", "CZYNSZ", "Rent")

        assert rule.matches(make_entry(account_code="999", title="OPŁATA CZYNSZ 02"))
        assert not rule.matches(make_entry(account_code="999", title="WODA"))
        assert not rule.matches(make_entry(account_code="998", title="CZYNSZ"))

    def test_derivation(self, make_entry):
        rule = AccountCodeAndTitleRule("999", "CZYNSZ", "Rent")

        result = rule.apply(make_entry(account_code="999", title="CZYNSZ LUTY"))

        assert result == Classification("Rent", "CZYNSZ LUTY")


class TestCatchAllRule:
    def test_always_matches(self, make_entry):
        rule = CatchAllRule("Imbalance")

        assert rule.matches(make_entry())
        assert rule.matches(make_entry(title="", counterparty="", account_code=""))

    def test_description_joins_title_and_counterparty(self, make_entry):
        rule = CatchAllRule("Imbalance")

        result = rule.apply(make_entry(title="INVOICE 7", counterparty="JOHN DOE"))

        assert result == Classification("Imbalance", "INVOICE 7 JOHN DOE")


def test_apply_returns_none_when_not_matching(make_entry):
    assert TitlePrefixRule("X", "Y").apply(make_entry(title="ABC")) is None
