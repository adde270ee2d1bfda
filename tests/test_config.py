"""Tests for configuration loading."""

from pathlib import Path

import pytest

from mbank_qif.config import (
    ConverterConfig,
    generate_default_config,
    get_sample_config,
    load_config,
)
from mbank_qif.matching.rules import (
    AccountCodeAndTitleRule,
    AccountCodeRule,
    CatchAllRule,
    CounterpartyPatternRule,
    TitlePrefixRule,
)
from mbank_qif.utils.exceptions import ConfigurationError

from conftest import ACCOUNT_NUMBER


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_defaults(self):
        config = load_config(None)

        assert config.input.mbank.encoding == "cp1250"
        assert config.input.mbank.closing_balance_marker == "#Saldo końcowe"
        assert config.accounts == {}
        assert config.rules == []
        assert config.config_file_path is None

    def test_rules_keep_order_and_types(self, rules_file):
        config = load_config(rules_file)

        rules = config.build_rules()

        assert [type(r) for r in rules] == [
            AccountCodeAndTitleRule,
            CounterpartyPatternRule,
            TitlePrefixRule,
            AccountCodeRule,
            CatchAllRule,
        ]
        assert config.accounts == {ACCOUNT_NUMBER: "Checking"}
        assert config.config_file_path == str(rules_file)

    def test_ignore_case_pattern(self, rules_file, make_entry):
        counterparty_rule = load_config(rules_file).build_rules()[1]

        assert counterparty_rule.matches(make_entry(counterparty="Biedronka 12"))
        assert counterparty_rule.description == "Groceries"

    def test_unquoted_numbers_become_text(self, tmp_path):
        path = _write(
            tmp_path,
            "accounts:\n  12345: Checking\nrules:\n"
            "  - {type: account_code, account_code: 999, account_name: Savings}\n",
        )

        config = load_config(path)

        assert config.accounts == {"12345": "Checking"}
        assert config.build_rules()[0].account_code == "999"

    def test_partial_input_section_keeps_defaults(self, tmp_path):
        path = _write(tmp_path, "input:\n  mbank:\n    encoding: utf-8\n")

        config = load_config(path)

        assert config.input.mbank.encoding == "utf-8"
        assert config.input.mbank.delimiter == ";"

    def test_unknown_rule_type(self, tmp_path):
        path = _write(tmp_path, "rules:\n  - {type: fuzzy, account_name: X}\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(path)

    def test_missing_rule_field(self, tmp_path):
        path = _write(tmp_path, "rules:\n  - {type: title_prefix, account_name: X}\n")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_regex(self, tmp_path):
        path = _write(tmp_path, "rules:\n  - {type: counterparty, pattern: '(', account_name: X}\n")

        with pytest.raises(ConfigurationError, match="invalid regular expression"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path, "rules: [\n")

        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = _write(tmp_path, "- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.yaml")


class TestSampleConfig:
    def test_sample_is_valid(self):
        config = ConverterConfig(**get_sample_config())

        assert len(config.build_rules()) == 5
        assert isinstance(config.build_rules()[-1], CatchAllRule)

    def test_generate_round_trips(self, tmp_path):
        path = tmp_path / "nested" / "rules.yaml"

        generate_default_config(path)
        config = load_config(path)

        assert config.accounts == get_sample_config()["accounts"]
        assert config.input.mbank.closing_balance_marker == "#Saldo końcowe"
        assert path.read_text(encoding="utf-8").startswith("# mBank to QIF conversion rules")
