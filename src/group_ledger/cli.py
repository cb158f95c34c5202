"""CLI for Group Ledger."""

import typer

from .settle.cli import app as settle_app
from .split.cli import app as split_app

app = typer.Typer(
    name="group-ledger",
    help="Split shared expenses and work out who owes whom",
)

app.add_typer(split_app, name="split", help="Split a single expense")
app.add_typer(settle_app, name="settle", help="Balances and settle-up transfers")


if __name__ == "__main__":
    app()
