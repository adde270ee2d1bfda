"""
mBank CSV export parser.
Reads the semicolon-delimited, Windows-1250 encoded history export and
converts its transaction table into imported entries.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional, Sequence
import logging
import re

import pandas as pd

from ..models.transaction import ImportedEntry, SourceHistory
from ..config import ConverterConfig, MBankInputConfig
from ..utils.exceptions import MBankParseError

logger = logging.getLogger(__name__)

# Wide enough for every section of the export; shorter rows are padded
MAX_COLUMNS = 32

# Transaction table layout
COL_OPERATION_DATE = 0
COL_ACCOUNTING_DATE = 1
COL_DESCRIPTION = 2
COL_TITLE = 3
COL_COUNTERPARTY = 4
COL_ACCOUNT = 5
COL_AMOUNT = 6
COL_BALANCE = 6  # closing balance label sits under the amount column
MIN_ENTRY_COLUMNS = COL_AMOUNT + 1

# Any unicode whitespace, including the no-break spaces mBank uses as
# thousands separators and inside account numbers
WHITESPACE_RE = re.compile(r"\s+")


class MBankParser:
    """
    Parser for mBank transaction history exports.

    The export is a stack of sections (client data, account number,
    period, transaction table, balances). Sections are found by their
    "#..." header labels rather than by fixed line numbers.
    """

    def __init__(self, config: ConverterConfig):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config
        self.settings: MBankInputConfig = config.input.mbank

    def parse_file(self, file_path: Path) -> SourceHistory:
        """
        Parse an mBank CSV export.

        Args:
            file_path: Path to the CSV file

        Returns:
            Source history with the account number and all entries

        Raises:
            MBankParseError: If the file cannot be read or is malformed
        """
        logger.info(f"Parsing mBank CSV file: {file_path}")

        rows = self._read_rows(file_path)
        try:
            history = self.parse_rows(rows)
        except MBankParseError as e:
            logger.error(f"Failed to parse mBank file {file_path}: {e}")
            raise

        logger.info(
            f"Extracted {len(history.entries)} entries for account {history.account_number}"
        )
        return history

    def _read_rows(self, file_path: Path) -> list[list[str]]:
        """Read the raw CSV into rows of text cells, keeping blank lines."""
        try:
            df = pd.read_csv(
                file_path,
                sep=self.settings.delimiter,
                encoding=self.settings.encoding,
                header=None,
                names=list(range(MAX_COLUMNS)),
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                engine="python",
            )
        except Exception as e:
            logger.error(f"Failed to read CSV file: {e}")
            raise MBankParseError(f"Failed to read CSV file {file_path}: {e}") from e

        return df.fillna("").values.tolist()

    def parse_rows(self, rows: Sequence[Sequence[Any]]) -> SourceHistory:
        """
        Build a source history from already split CSV rows.

        Args:
            rows: CSV rows, one list of cells per line

        Returns:
            Source history

        Raises:
            MBankParseError: If a section marker is missing or a row is malformed
        """
        rows = [[self._cell(value) for value in row] for row in rows]

        account_number = self._extract_account_number(rows)
        first, last = self._find_table_bounds(rows)

        entries: list[ImportedEntry] = []
        for idx in range(first, last + 1):
            row = rows[idx]
            if self._is_empty(row):
                continue
            entries.append(self._parse_entry(row, line_number=idx + 1))

        return SourceHistory(account_number=account_number, entries=entries)

    def _extract_account_number(self, rows: list[list[str]]) -> str:
        """Read the account number from the line after its section label."""
        marker_idx = self._find_first(rows, 0, self.settings.account_number_marker)
        if marker_idx is None:
            raise MBankParseError(
                f"Account number section {self.settings.account_number_marker!r} not found"
            )

        value_idx = marker_idx + 1
        if value_idx >= len(rows) or not rows[value_idx]:
            raise MBankParseError(f"Missing account number after line {marker_idx + 1}")

        account_number = WHITESPACE_RE.sub("", rows[value_idx][0])
        if not account_number:
            raise MBankParseError(f"Empty account number on line {value_idx + 1}")

        return account_number

    def _find_table_bounds(self, rows: list[list[str]]) -> tuple[int, int]:
        """
        Locate the transaction table.

        Returns:
            Indexes of the first and last table row (inclusive); last is
            first - 1 when the table is empty
        """
        header_idx = self._find_first(rows, COL_OPERATION_DATE, self.settings.table_start_marker)
        if header_idx is None:
            raise MBankParseError(
                f"Transaction table header {self.settings.table_start_marker!r} not found"
            )

        closing_idx = self._find_last(rows, COL_BALANCE, self.settings.closing_balance_marker)
        if closing_idx is None:
            raise MBankParseError(
                f"Closing balance row {self.settings.closing_balance_marker!r} not found"
            )

        if closing_idx <= header_idx:
            raise MBankParseError(
                f"Closing balance row (line {closing_idx + 1}) precedes the "
                f"transaction table header (line {header_idx + 1})"
            )

        return header_idx + 1, closing_idx - 1

    def _parse_entry(self, row: list[str], line_number: int) -> ImportedEntry:
        """Convert one table row into an imported entry."""
        if len(row) < MIN_ENTRY_COLUMNS:
            raise MBankParseError(
                f"Line {line_number}: expected at least {MIN_ENTRY_COLUMNS} columns, got {len(row)}"
            )

        return ImportedEntry(
            operation_date=self._parse_date(row[COL_OPERATION_DATE], line_number),
            accounting_date=self._parse_date(row[COL_ACCOUNTING_DATE], line_number),
            description=row[COL_DESCRIPTION],
            title=row[COL_TITLE],
            counterparty=row[COL_COUNTERPARTY],
            account_code=row[COL_ACCOUNT].replace("'", ""),
            amount=self._parse_amount(row[COL_AMOUNT], line_number),
        )

    def _parse_date(self, value: str, line_number: int) -> date:
        """
        Parse a date using the configured formats, first match wins.

        Raises:
            MBankParseError: If no format accepts the value
        """
        for date_format in self.settings.date_formats:
            try:
                return datetime.strptime(value, date_format).date()
            except ValueError:
                continue

        raise MBankParseError(f"Line {line_number}: invalid date {value!r}")

    def _parse_amount(self, value: str, line_number: int) -> Decimal:
        """
        Parse an amount such as "-1 234,56".

        Raises:
            MBankParseError: If the value is not a finite decimal number
        """
        normalized = WHITESPACE_RE.sub("", value).replace(",", ".")
        try:
            amount = Decimal(normalized)
        except InvalidOperation:
            raise MBankParseError(f"Line {line_number}: invalid amount {value!r}") from None

        if not amount.is_finite():
            raise MBankParseError(f"Line {line_number}: invalid amount {value!r}")

        return amount

    @staticmethod
    def _cell(value: Any) -> str:
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return ""
        return str(value).strip()

    @staticmethod
    def _is_empty(row: list[str]) -> bool:
        return all(not cell for cell in row)

    @staticmethod
    def _find_first(rows: list[list[str]], column: int, label: str) -> Optional[int]:
        for idx, row in enumerate(rows):
            if len(row) > column and row[column] == label:
                return idx
        return None

    @staticmethod
    def _find_last(rows: list[list[str]], column: int, label: str) -> Optional[int]:
        for idx in range(len(rows) - 1, -1, -1):
            row = rows[idx]
            if len(row) > column and row[column] == label:
                return idx
        return None

    def get_file_summary(self, file_path: Path) -> dict:
        """
        Get summary information from an mBank export.

        Args:
            file_path: Path to the CSV file

        Returns:
            Dictionary with file summary information
        """
        history = self.parse_file(file_path)
        dates = [e.operation_date for e in history.entries]

        return {
            "account_number": history.account_number,
            "entry_count": len(history.entries),
            "date_range": {
                "start": min(dates).isoformat() if dates else None,
                "end": max(dates).isoformat() if dates else None,
            },
            "totals": {
                "inflow": history.total_inflow,
                "outflow": history.total_outflow,
                "net_change": history.net_change,
            },
        }
