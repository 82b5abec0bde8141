"""CLI for Ledger Tools."""

import typer

from .mcp_server import run_server
from .settle.cli import app as settle_app

app = typer.Typer(
    name="ledger-tools",
    help="Balances and settle-up plans for shared-expense groups",
)

app.add_typer(settle_app, name="settle", help="Group balances and settlements")


@app.command()
def mcp():
    """Start the MCP server for assistant integration."""
    run_server()


if __name__ == "__main__":
    app()
