"""End-to-end conversion: parse, classify, write."""

from dataclasses import dataclass
from pathlib import Path
import logging

from .config import ConverterConfig
from .matching.engine import ClassificationEngine
from .models.transaction import QifDocument, SourceHistory
from .parsers import get_parser
from .qif.writer import QifWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """What a conversion produced."""

    history: SourceHistory
    document: QifDocument
    output_path: Path


def output_path_for(history: SourceHistory, output_dir: Path, extension: str = ".qif") -> Path:
    """The QIF file for an import is named after its source account number."""
    return output_dir / f"{history.account_number}{extension}"


def classify_file(
    config: ConverterConfig, csv_path: Path, importer: str = "mbank"
) -> tuple[SourceHistory, QifDocument]:
    """
    Parse and classify a bank export without writing anything.

    Raises:
        ConversionError: On any parse, configuration or classification error
    """
    history = get_parser(importer, config).parse_file(csv_path)
    engine = ClassificationEngine(config.accounts, config.build_rules())
    return history, engine.classify(history)


def convert_file(
    config: ConverterConfig,
    csv_path: Path,
    output_dir: Path,
    importer: str = "mbank",
) -> ConversionResult:
    """
    Convert one bank export into a QIF file in output_dir.

    Nothing is written unless every entry was classified.

    Args:
        config: Loaded configuration with accounts and rules
        csv_path: Bank export to convert
        output_dir: Directory receiving "<account number>.qif"
        importer: Importer kind of the export

    Returns:
        Conversion result with the written path
    """
    history, document = classify_file(config, csv_path, importer)

    output_path = output_path_for(history, output_dir, config.output.extension)
    QifWriter(encoding=config.output.encoding).write(document, output_path)

    return ConversionResult(history=history, document=document, output_path=output_path)
