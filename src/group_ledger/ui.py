"""Terminal rendering for ledger results."""

import logging
import sys
from collections.abc import Sequence
from decimal import Decimal

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import LedgerReport, NettedEdge, SplitResult, UserBalance, UserStats
from .money import format_money, round_half_up, sum_cents
from .split.suggestions import SplitSuggestion
from .split.validator import SplitValidationResult

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False, level: str = "WARNING"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        format=LOG_FORMAT,
    )


def exit_with_error(console: Console, error: Exception, verbose: bool = False):
    """Print an error and exit with status 1; re-raise it under --verbose."""
    console.print(f"\n[bold red]Error:[/bold red] {escape(str(error))}")
    if verbose:
        raise error
    sys.exit(1)


def format_amount(
    cents: int, currency: str = "USD", use_color: bool = True, accounting: bool = True
) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    text = format_money(cents, currency=currency, accounting=accounting)
    if cents < 0:
        return f"[red]{text}[/red]" if use_color else text
    padded = f" {text} " if accounting else text
    return f"[green]{padded}[/green]" if use_color and cents > 0 else padded


def split_table(
    total_cents: int, results: Sequence[SplitResult], currency: str = "USD"
) -> Table:
    """Build a table of per-participant shares."""
    table = Table(
        title=f"Split of {format_money(total_cents, currency)}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("User", style="cyan")
    table.add_column("Share", justify="right")
    table.add_column("Cents", justify="right", style="dim")

    for result in results:
        table.add_row(
            result.user_id,
            format_amount(result.share_cents, currency, use_color=False),
            str(result.share_cents),
        )

    return table


def balances_table(
    balances: Sequence[UserBalance], currency: str = "USD", accounting: bool = True
) -> Table:
    """Build a table of user balances."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("User", style="cyan")
    table.add_column("Paid", justify="right")
    table.add_column("Owed", justify="right")
    table.add_column("Net", justify="right")

    for balance in balances:
        table.add_row(
            balance.user_id,
            format_amount(balance.total_paid, currency, use_color=False),
            format_amount(balance.total_owed, currency, use_color=False),
            format_amount(balance.net_balance, currency, accounting=accounting),
        )

    return table


def transfers_table(edges: Sequence[NettedEdge], currency: str = "USD") -> Table:
    """Build a table of settlement transfers."""
    table = Table(
        title="Suggested Transfers", show_header=True, header_style="bold magenta"
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right")

    for index, edge in enumerate(edges, start=1):
        table.add_row(
            str(index),
            edge.from_user_id,
            edge.to_user_id,
            format_amount(edge.amount_cents, currency, use_color=False),
        )

    return table


def display_report(
    console: Console,
    report: LedgerReport,
    show_balances: bool = True,
    show_transfers: bool = True,
    accounting: bool = True,
):
    """Display a ledger report."""
    currency = report.currency

    console.print("\n[bold]Ledger Summary:[/bold]")
    console.print(f"  Currency: {currency}")
    console.print(f"  Group total: {format_money(report.group_total, currency)}")
    console.print()

    for warning in report.warnings:
        console.print(f"[yellow]⚠️  {warning}[/yellow]")

    if show_balances:
        console.print(balances_table(report.balances, currency, accounting))

    if show_transfers:
        if report.edges:
            console.print(transfers_table(report.edges, currency))
        else:
            console.print("[green]✓ Everyone is settled up. No transfers needed.[/green]")

        console.print()
        console.print("[bold]Summary:[/bold]")
        console.print(f"  Transfers: {len(report.edges)}")
        console.print(
            f"  Amount moved: "
            f"{format_money(sum_cents(e.amount_cents for e in report.edges), currency)}"
        )
        console.print(f"  Plan hash: [dim]{report.plan_hash}[/dim]")


def display_split(
    console: Console,
    total_cents: int,
    results: Sequence[SplitResult],
    currency: str = "USD",
):
    """Display calculated shares and confirm they add up."""
    console.print(split_table(total_cents, results, currency))

    computed_total = sum_cents(r.share_cents for r in results)
    if computed_total == total_cents:
        console.print("  [green]✓ Shares match the total (no rounding errors)[/green]")
    else:
        console.print(
            f"  [red]✗ Total mismatch: computed {computed_total}, "
            f"expected {total_cents}[/red]"
        )


def display_validation(console: Console, result: SplitValidationResult):
    """Display split validation errors, warnings and any correction."""
    if result.is_valid:
        console.print("[bold green]✓ Split is valid[/bold green]")
    else:
        console.print("[bold red]✗ Split is invalid[/bold red]")

    for error in result.errors:
        console.print(f"  [red]• {error}[/red]")
    for warning in result.warnings:
        console.print(f"  [yellow]⚠️  {warning}[/yellow]")

    if result.adjusted_split is not None:
        console.print("\n[bold]Adjusted split:[/bold]")
        console.print_json(result.adjusted_split.model_dump_json())


def display_stats(console: Console, stats: UserStats, currency: str = "USD"):
    """Display one user's statistics."""
    console.print(f"\n[bold]Stats for {stats.user_id}:[/bold]")
    console.print(f"  Paid:     {format_amount(stats.total_paid, currency)}")
    console.print(f"  Owed:     {format_amount(stats.total_owed, currency)}")
    console.print(f"  Net:      {format_amount(stats.net_balance, currency)}")
    console.print(f"  Expenses paid: {stats.expense_count}")
    average_cents = round_half_up(Decimal(str(stats.avg_expense_amount)))
    console.print(
        f"  Average paid:  {format_amount(average_cents, currency, use_color=False)}"
    )


def display_suggestions(console: Console, suggestions: Sequence[SplitSuggestion]):
    """Display split suggestions."""
    for index, suggestion in enumerate(suggestions):
        console.print(
            f"\n[bold][{index}] {suggestion.description}[/bold] "
            f"[dim]({suggestion.kind})[/dim]"
        )
        console.print_json(suggestion.split.model_dump_json())
