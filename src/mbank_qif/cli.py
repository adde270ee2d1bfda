"""
Command-line interface for the mBank to QIF converter.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_config, generate_default_config
from .models.transaction import QifDocument
from .parsers import get_parser
from .pipeline import classify_file, convert_file
from .qif.writer import QifWriter, format_amount
from .utils.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version="0.1.0")
def main():
    """mBank CSV to QIF converter with rule-based categorization."""
    pass


@main.command()
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_dir", type=click.Path(file_okay=False, path_type=Path))
@click.option("-i", "--importer", default="mbank", show_default=True, help="Bank export format")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Also log to this file")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--dry-run", is_flag=True, help="Print the QIF output instead of writing it")
def convert(
    rules_file: Path,
    csv_file: Path,
    output_dir: Path,
    importer: str,
    log_file: Optional[Path],
    verbose: bool,
    dry_run: bool,
):
    """
    Convert a bank export into a QIF file named after the account number.

    RULES_FILE: YAML file with account names and classification rules
    CSV_FILE: Bank history export
    OUTPUT_DIR: Directory for the QIF file
    """
    setup_logging(logging.DEBUG if verbose else logging.INFO, log_file=log_file)

    try:
        config = load_config(rules_file)
        if not verbose:
            setup_logging(config.logging.level, log_file=log_file, log_format=config.logging.format)

        if not config.rules:
            console.print("[yellow]Warning: the rules file defines no rules[/yellow]")

        if dry_run:
            _, document = classify_file(config, csv_file, importer)
            _display_summary(document)
            console.print(QifWriter().render(document), markup=False, highlight=False)
            console.print("\n[yellow]Dry run - no file written[/yellow]")
            return

        result = convert_file(config, csv_file, output_dir, importer)
        _display_summary(result.document)
        console.print(f"[green]Written: {escape(str(result.output_path))}[/green]")
        console.print(f"Finished {escape(result.document.account_name)}")

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command()
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option("-i", "--importer", default="mbank", show_default=True, help="Bank export format")
def parse(csv_file: Path, config: Optional[Path], importer: str):
    """
    Parse a bank export and display its entries.

    CSV_FILE: Bank history export
    """
    try:
        parser = get_parser(importer, load_config(config))
        history = parser.parse_file(csv_file)

        table = Table(title=f"Account {history.account_number}: {escape(csv_file.name)}")
        table.add_column("Date")
        table.add_column("Amount", justify="right")
        table.add_column("Title")
        table.add_column("Counterparty")
        table.add_column("Account")

        for entry in history.entries[:20]:  # Show first 20
            table.add_row(
                str(entry.operation_date),
                format_amount(entry.amount),
                escape(_truncate(entry.title)),
                escape(_truncate(entry.counterparty)),
                entry.account_code or "-",
            )

        console.print(table)

        if len(history.entries) > 20:
            console.print(f"\n... and {len(history.entries) - 20} more entries")

        console.print(f"\nTotal entries: {len(history.entries)}")
        console.print(f"Inflow: {format_amount(history.total_inflow)}")
        console.print(f"Outflow: {format_amount(history.total_outflow)}")
        console.print(f"Net change: {format_amount(history.net_change)}")

    except Exception as e:
        console.print(f"[red]Error parsing file: {escape(str(e))}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("rules.yaml")
)
def init_config(output: Path):
    """Generate a sample rules file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {escape(str(output))}[/green]")


def _display_summary(document: QifDocument) -> None:
    """Display per-category totals in console."""
    table = Table(title=f"Summary: {escape(document.account_name)}")
    table.add_column("Category", style="cyan")
    table.add_column("Amount", justify="right")

    for account, amount in document.amounts_by_account().items():
        table.add_row(escape(account or "-"), format_amount(amount))
    table.add_row("Total", format_amount(document.total_amount), style="bold")

    console.print(table)


def _truncate(text: str, width: int = 40) -> str:
    return text[:width] + "..." if len(text) > width else text


if __name__ == "__main__":
    main()
