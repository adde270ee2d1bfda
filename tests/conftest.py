"""Shared fixtures: imported entries and realistic mBank export files."""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional

import pytest

from mbank_qif.config import ConverterConfig, load_config
from mbank_qif.models.transaction import ImportedEntry

ACCOUNT_NUMBER = "11114020040000300201355387"

EXPORT_PREAMBLE = [
    "mBank S.A. Bankowość Detaliczna;",
    "Skrytka Pocztowa 2108;",
    "90-959 Łódź 2;",
    "www.mBank.pl;",
    "mLinia: 801 300 800;",
    "",
    "#Klient;",
    "JAN KOWALSKI;",
    "",
    "Elektroniczne zestawienie operacji za okres od 2023-02-01 do 2023-02-28;",
    "",
    "#Za okres:;",
    "01.02.2023;28.02.2023;",
    "",
    "#Rodzaj rachunku;",
    "eKONTO;",
    "",
    "#Waluta;",
    "PLN;",
    "",
    "#Numer rachunku;",
    "11 1140 2004 0000 3002 0135 5387;",
    "",
    "#Data operacji;#Data księgowania;#Opis operacji;#Tytuł;#Nadawca/Odbiorca;#Numer konta;#Kwota;#Saldo po operacji;",
]

EXPORT_FOOTER = [
    "",
    ";;;;;;#Saldo końcowe;1 954,33;",
    "",
    "Niniejszy dokument sporządzono na podstawie art. 7 Ustawy Prawo Bankowe;",
]

SAMPLE_ROWS = [
    "2023-02-01;2023-02-01;ZAKUP PRZY UŻYCIU KARTY;BIEDRONKA 1234 WARSZAWA;BIEDRONKA SP Z O.O.;'';-45,67;2 954,33;",
    "2023-02-03;2023-02-03;PRZELEW PRZYCHODZĄCY;WYNAGRODZENIE LUTY;ACME SP. Z O.O.;'61109010140000071219812874';5 000,00;7 954,33;",
    "",
    "2023-02-10;2023-02-10;PRZELEW WYCHODZĄCY;CZYNSZ LUTY 2023;WSPÓLNOTA MIESZKANIOWA;'61109010140000071219812875';-6 000,00;1 954,33;",
]


@pytest.fixture
def make_entry() -> Callable[..., ImportedEntry]:
    """Factory for imported entries with sensible defaults."""

    def _make(
        title: str = "PAYMENT",
        counterparty: str = "SOMEONE",
        account_code: str = "",
        amount: str = "-10.00",
        operation_date: date = date(2023, 2, 1),
        description: str = "PRZELEW",
    ) -> ImportedEntry:
        return ImportedEntry(
            operation_date=operation_date,
            accounting_date=operation_date,
            description=description,
            title=title,
            counterparty=counterparty,
            account_code=account_code,
            amount=Decimal(amount),
        )

    return _make


@pytest.fixture
def write_export(tmp_path: Path) -> Callable[..., Path]:
    """Write an mBank-style export in Windows-1250 and return its path."""

    def _write(
        rows: Optional[list[str]] = None,
        preamble: Optional[list[str]] = None,
        footer: Optional[list[str]] = None,
        name: str = "export.csv",
    ) -> Path:
        lines = (
            (EXPORT_PREAMBLE if preamble is None else preamble)
            + (SAMPLE_ROWS if rows is None else rows)
            + (EXPORT_FOOTER if footer is None else footer)
        )
        path = tmp_path / name
        path.write_bytes(("\r\n".join(lines) + "\r\n").encode("cp1250"))
        return path

    return _write


@pytest.fixture
def config() -> ConverterConfig:
    """Default configuration, no accounts or rules."""
    return load_config(None)


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    """A rules file covering every rule type."""
    path = tmp_path / "rules.yaml"
    path.write_text(
        f"""
accounts:
  "{ACCOUNT_NUMBER}": Checking
rules:
  - type: account_code_and_title
    account_code: "61109010140000071219812875"
    title_contains: CZYNSZ
    account_name: "Expenses:Rent"
  - type: counterparty
    pattern: "biedronka|lidl"
    ignore_case: true
    account_name: "Expenses:Groceries"
    description: Groceries
  - type: title_prefix
    prefix: WYNAGRODZENIE
    account_name: "Income:Salary"
  - type: account_code
    account_code: "61109010140000071219812874"
    account_name: "Income:Other"
  - type: catch_all
    account_name: Imbalance
""",
        encoding="utf-8",
    )
    return path
