"""
QIF writer.
Renders a classified document as Quicken Interchange Format text.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
import logging

from ..models.transaction import QifDocument, QifTransaction
from ..utils.exceptions import QifExportError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d.%m'%Y"
RECORD_END = "^"


class QifWriter:
    """Renders QIF documents and writes them to disk."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def render(self, document: QifDocument) -> str:
        """
        Render a document as QIF text.

        The account header comes first, followed by a single
        "!Type:Bank" section holding every transaction in document order.

        Args:
            document: Document to render

        Returns:
            QIF text, lines joined with "\\n", without a trailing newline
        """
        lines = [
            "!Account",
            f"N{document.account_name}",
            RECORD_END,
            "!Type:Bank",
        ]
        for transaction in document.transactions:
            lines.extend(self._render_transaction(transaction))

        return "\n".join(lines)

    def _render_transaction(self, transaction: QifTransaction) -> list[str]:
        lines = [
            f"D{format_date(transaction.date)}",
            f"T{format_amount(transaction.amount)}",
        ]
        if transaction.target_account is not None:
            lines.append(f"L{transaction.target_account}")
        if transaction.description is not None:
            lines.append(f"P{transaction.description}")
        lines.append(RECORD_END)
        return lines

    def write(self, document: QifDocument, output_path: Path) -> Path:
        """
        Write a document to a file.

        Args:
            document: Document to write
            output_path: Destination file; parent directories are created

        Returns:
            Path of the written file

        Raises:
            QifExportError: If the file cannot be written
        """
        logger.info(f"Writing QIF file: {output_path}")

        content = self.render(document) + "\n"
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w", encoding=self.encoding, newline="\n") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Failed to write QIF file: {e}")
            raise QifExportError(f"Failed to write QIF file {output_path}: {e}") from e

        logger.info(f"Wrote {len(document.transactions)} transactions to {output_path}")
        return output_path


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_amount(value: Decimal) -> str:
    """Two decimal places with a dot separator, e.g. "-1234.50"."""
    return f"{value:.2f}"
