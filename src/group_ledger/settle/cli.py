"""CLI commands for balances and settlement plans."""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from ..config import Settings, load_settings
from ..exceptions import LedgerError
from ..models import LedgerDocument, LedgerReport
from ..ui import display_report, display_stats, exit_with_error, setup_logging
from .balances import user_stats
from .service import LedgerService

app = typer.Typer(
    name="settle",
    help="Compute balances and settle-up transfers for a group ledger",
)

console = Console()
logger = logging.getLogger(__name__)

LEDGER_HELP = "JSON ledger file with a currency and a list of expenses"


def _load_ledger(path: Path) -> LedgerDocument:
    """Read and parse a ledger file."""
    logger.info(f"Reading ledger from {path}")
    return LedgerDocument.model_validate_json(path.read_text(encoding="utf-8"))


def _build_report(
    ledger_file: Path, auto_fix: bool, verbose: bool
) -> tuple[Settings, LedgerReport]:
    settings = load_settings()
    setup_logging(verbose, settings.log_level)
    if auto_fix:
        settings = settings.model_copy(update={"auto_fix_splits": True})

    service = LedgerService(settings)
    return settings, service.build_report(_load_ledger(ledger_file))


@app.command()
def balances(
    ledger_file: Path = typer.Argument(
        ..., help=LEDGER_HELP, exists=True, dir_okay=False
    ),
    auto_fix: bool = typer.Option(
        False, "--auto-fix", help="Repair inconsistent splits instead of failing"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show what each member paid, owes and their net position.

    Positive net means the group owes the member; negative means the member
    owes the group.
    """
    try:
        settings, report = _build_report(ledger_file, auto_fix, verbose)
        display_report(
            console,
            report,
            show_transfers=False,
            accounting=settings.accounting_format,
        )
    except (LedgerError, ValidationError, OSError) as e:
        exit_with_error(console, e, verbose)


@app.command()
def plan(
    ledger_file: Path = typer.Argument(
        ..., help=LEDGER_HELP, exists=True, dir_okay=False
    ),
    auto_fix: bool = typer.Option(
        False, "--auto-fix", help="Repair inconsistent splits instead of failing"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the full report as JSON"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Compute the transfers that settle everyone up.

    The plan is deterministic: the same ledger always yields the same
    transfers and the same plan hash.
    """
    try:
        settings, report = _build_report(ledger_file, auto_fix, verbose)
        if as_json:
            typer.echo(report.model_dump_json(indent=2))
            return

        display_report(console, report, accounting=settings.accounting_format)
    except (LedgerError, ValidationError, OSError) as e:
        exit_with_error(console, e, verbose)


@app.command()
def stats(
    ledger_file: Path = typer.Argument(
        ..., help=LEDGER_HELP, exists=True, dir_okay=False
    ),
    user_id: str = typer.Argument(..., help="Member to summarise"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show a single member's paid/owed totals and average expense."""
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)

        service = LedgerService(settings)
        currency, expenses, participants, _warnings = service.resolve_document(
            _load_ledger(ledger_file)
        )

        display_stats(console, user_stats(user_id, expenses, participants), currency)
    except (LedgerError, ValidationError, OSError) as e:
        exit_with_error(console, e, verbose)
