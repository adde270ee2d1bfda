"""Configuration loader and validation for conversion rules and settings."""

from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union
import logging
import re

import yaml
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from .matching.rules import (
    Rule,
    AccountCodeRule,
    CounterpartyPatternRule,
    TitlePrefixRule,
    AccountCodeAndTitleRule,
    CatchAllRule,
)
from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> Any:
    # YAML turns unquoted account numbers into ints
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class MBankInputConfig(BaseModel):
    """Layout of the mBank CSV export."""

    encoding: str = "cp1250"
    delimiter: str = ";"
    date_formats: list[str] = Field(default_factory=lambda: ["%Y-%m-%d", "%d.%m.%Y"])
    account_number_marker: str = "#Numer rachunku"
    table_start_marker: str = "#Data operacji"
    closing_balance_marker: str = "#Saldo końcowe"


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    mbank: MBankInputConfig = Field(default_factory=MBankInputConfig)


class AccountCodeRuleConfig(BaseModel):
    """Match on the counter-account number."""

    type: Literal["account_code"]
    account_code: str
    account_name: str

    @field_validator("account_code", mode="before")
    @classmethod
    def coerce_account_code(cls, value: Any) -> Any:
        return _as_text(value)


class CounterpartyRuleConfig(BaseModel):
    """Match the counterparty against a regular expression."""

    type: Literal["counterparty"]
    pattern: str
    account_name: str
    description: Optional[str] = None
    ignore_case: bool = False

    @field_validator("pattern")
    @classmethod
    def check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression {value!r}: {e}") from e
        return value


class TitlePrefixRuleConfig(BaseModel):
    """Match on the start of the transfer title."""

    type: Literal["title_prefix"]
    prefix: str
    account_name: str


class AccountCodeAndTitleRuleConfig(BaseModel):
    """Match on the counter-account number and a fragment of the title."""

    type: Literal["account_code_and_title"]
    account_code: str
    title_contains: str
    account_name: str

    @field_validator("account_code", mode="before")
    @classmethod
    def coerce_account_code(cls, value: Any) -> Any:
        return _as_text(value)


class CatchAllRuleConfig(BaseModel):
    """Match everything; belongs at the end of the list."""

    type: Literal["catch_all"]
    account_name: str


RuleConfig = Annotated[
    Union[
        AccountCodeRuleConfig,
        CounterpartyRuleConfig,
        TitlePrefixRuleConfig,
        AccountCodeAndTitleRuleConfig,
        CatchAllRuleConfig,
    ],
    Field(discriminator="type"),
]


class OutputConfig(BaseModel):
    """Configuration for the written QIF file."""

    extension: str = ".qif"
    encoding: str = "utf-8"


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConverterConfig(BaseModel):
    """Main configuration model: account names, ordered rules and settings."""

    input: InputConfig = Field(default_factory=InputConfig)
    accounts: dict[str, str] = Field(default_factory=dict)
    rules: list[RuleConfig] = Field(default_factory=list)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None

    @field_validator("accounts", mode="before")
    @classmethod
    def stringify_accounts(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {_as_text(k): _as_text(v) for k, v in value.items()}
        return value

    def build_rules(self) -> list[Rule]:
        """
        Instantiate the configured rules, keeping their order.

        Returns:
            List of rule objects ready for the classification engine
        """
        return [_build_rule(rule_config) for rule_config in self.rules]


def _build_rule(rule_config: Any) -> Rule:
    """Map one validated rule configuration to its rule object."""
    if isinstance(rule_config, AccountCodeRuleConfig):
        return AccountCodeRule(rule_config.account_code, rule_config.account_name)
    if isinstance(rule_config, CounterpartyRuleConfig):
        flags = re.IGNORECASE if rule_config.ignore_case else 0
        return CounterpartyPatternRule(
            re.compile(rule_config.pattern, flags), rule_config.account_name, rule_config.description
        )
    if isinstance(rule_config, TitlePrefixRuleConfig):
        return TitlePrefixRule(rule_config.prefix, rule_config.account_name)
    if isinstance(rule_config, AccountCodeAndTitleRuleConfig):
        return AccountCodeAndTitleRule(
            rule_config.account_code, rule_config.title_contains, rule_config.account_name
        )
    if isinstance(rule_config, CatchAllRuleConfig):
        return CatchAllRule(rule_config.account_name)
    raise ConfigurationError(f"Unsupported rule configuration: {rule_config!r}")


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "mbank": {
                "encoding": "cp1250",
                "delimiter": ";",
                "date_formats": ["%Y-%m-%d", "%d.%m.%Y"],
                "account_number_marker": "#Numer rachunku",
                "table_start_marker": "#Data operacji",
                "closing_balance_marker": "#Saldo końcowe",
            },
        },
        "accounts": {},
        "rules": [],
        "output": {
            "extension": ".qif",
            "encoding": "utf-8",
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }


def get_sample_config() -> dict[str, Any]:
    """Return the defaults extended with example accounts and rules."""
    config_dict = get_default_config()
    config_dict["accounts"] = {
        "11114020040000300201355387": "Checking",
        "45114020040000310201355388": "Savings",
    }
    config_dict["rules"] = [
        {
            "type": "account_code",
            "account_code": "45114020040000310201355388",
            "account_name": "Savings",
        },
        {
            "type": "counterparty",
            "pattern": "BIEDRONKA|LIDL",
            "account_name": "Expenses:Groceries",
            "description": "Groceries",
            "ignore_case": True,
        },
        {
            "type": "title_prefix",
            "prefix": "PRZELEW PODATKU",
            "account_name": "Expenses:Taxes",
        },
        {
            "type": "account_code_and_title",
            "account_code": "61109010140000071219812874",
            "title_contains": "CZYNSZ",
            "account_name": "Expenses:Rent",
        },
        {"type": "catch_all", "account_name": "Imbalance"},
    ]
    return config_dict


def load_config(config_path: Optional[Path] = None) -> ConverterConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ConverterConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config_dict = get_default_config()

    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping at the top level"
            )

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ConverterConfig(**config_dict)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries. Lists are replaced, not concatenated.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a sample rules file.

    Args:
        output_path: Path to write the configuration file
    """
    yaml_content = """# mBank to QIF conversion rules
# Rules are tried top to bottom; the first one that matches wins.

"""
    yaml_content += yaml.dump(
        get_sample_config(), default_flow_style=False, sort_keys=False, allow_unicode=True
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
