"""CLI commands for splitting a single expense."""

import sys
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console

from ..config import load_settings
from ..exceptions import LedgerError
from ..money import parse_money
from ..ui import (
    display_split,
    display_suggestions,
    display_validation,
    exit_with_error,
    setup_logging,
)
from .calculator import calculate_split
from .suggestions import SplitHistory, generate_split_suggestions
from .validator import validate_split

app = typer.Typer(
    name="split",
    help="Split a single expense between participants",
)

console = Console()

POLICY_HELP = "Split policy: equal, percentage, shares or exact"
PARTICIPANTS_HELP = (
    "Participants as USER or USER=WEIGHT. WEIGHT is a percentage, a share "
    "count or an exact amount depending on the policy."
)


def build_split_data(policy: str, participant_specs: list[str]) -> dict[str, Any]:
    """
    Turn command line participant specs into raw split data.

    Examples:
        equal      alice bob carol
        percentage alice=50 bob=30 carol=20
        shares     alice=2 bob carol=3
        exact      alice=6.00 bob=4.00
    """
    policy = policy.strip().lower()
    participants: list[dict[str, Any]] = []

    for spec in participant_specs:
        user_id, _, weight = spec.partition("=")
        entry: dict[str, Any] = {"user_id": user_id.strip()}
        weight = weight.strip()

        if weight:
            if policy == "percentage":
                entry["share_percentage"] = weight.rstrip("%")
            elif policy == "shares":
                entry["share_count"] = weight
            elif policy == "exact":
                entry["share_cents"] = parse_money(weight)

        participants.append(entry)

    return {"policy": policy, "participants": participants}


@app.command()
def calculate(
    amount: str = typer.Argument(..., help="Expense total, e.g. 10.00 or $1,234.56"),
    policy: str = typer.Argument(..., help=POLICY_HELP),
    participants: list[str] = typer.Argument(..., help=PARTICIPANTS_HELP),
    currency: str | None = typer.Option(
        None, "--currency", help="Currency code for display"
    ),
    auto_fix: bool = typer.Option(
        False, "--auto-fix", help="Repair inconsistent weights before splitting"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Calculate exact per-participant shares for an expense.

    Shares always add up to the total. Leftover cents from an equal split go
    to the first participants; percentage and share splits give the rounding
    difference to the last participant.
    """
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)

        total_cents = parse_money(amount)
        split_data: Any = build_split_data(policy, participants)

        if auto_fix or settings.auto_fix_splits:
            validation = validate_split(total_cents, split_data, auto_fix=True)
            for warning in validation.warnings:
                console.print(f"[yellow]⚠️  {warning}[/yellow]")
            if validation.adjusted_split is not None:
                split_data = validation.adjusted_split

        results = calculate_split(total_cents, split_data)
        display_split(console, total_cents, results, currency or settings.default_currency)

    except LedgerError as e:
        exit_with_error(console, e, verbose)


@app.command()
def validate(
    amount: str = typer.Argument(..., help="Expense total, e.g. 10.00"),
    policy: str = typer.Argument(..., help=POLICY_HELP),
    participants: list[str] = typer.Argument(..., help=PARTICIPANTS_HELP),
    auto_fix: bool = typer.Option(
        False, "--auto-fix", help="Show the corrected split instead of failing"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Check split weights against the total without calculating shares.

    Exits with status 1 when the split is invalid.
    """
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)

        total_cents = parse_money(amount)
        result = validate_split(
            total_cents, build_split_data(policy, participants), auto_fix=auto_fix
        )
        display_validation(console, result)

        if not result.is_valid:
            sys.exit(1)

    except LedgerError as e:
        exit_with_error(console, e, verbose)


@app.command()
def suggest(
    amount: str = typer.Argument(..., help="Expense total, e.g. 10.00"),
    users: list[str] = typer.Argument(..., help="Group members"),
    category: str | None = typer.Option(
        None, "--category", "-c", help="Category of the new expense"
    ),
    history_file: Path | None = typer.Option(
        None,
        "--history",
        help="JSON file with category_patterns and user_frequency",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Suggest ways to split a new expense based on group history."""
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)

        history = (
            SplitHistory.model_validate_json(history_file.read_text())
            if history_file
            else None
        )
        suggestions = generate_split_suggestions(
            parse_money(amount), users, category, history
        )
        display_suggestions(console, suggestions)

    except (LedgerError, ValidationError) as e:
        exit_with_error(console, e, verbose)
