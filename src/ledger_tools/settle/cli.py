"""CLI commands for group balances and settle-up plans."""

import io
import json
import logging
import sys
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import load_settings
from ..exceptions import ExportError, LedgerToolsError
from ..models import (
    BalanceReport,
    GroupSummary,
    LedgerWarning,
    SettlementTransaction,
)
from .service import (
    LedgerService,
    balance_status,
    describe_payment,
    summary_filename,
)
from .snapshot import load_snapshot

app = typer.Typer(
    name="settle",
    help="Compute balances, settlement plans and debt graphs from a group snapshot",
)

console = Console()


class GraphView(str, Enum):
    """Which edge sets the graph command prints."""

    optimized = "optimized"
    raw = "raw"
    both = "both"


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: float, symbol: str = "$", use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            formatted = f"({symbol}[red]{abs_amount:,.2f}[/red])"
        else:
            formatted = f"({symbol}{abs_amount:,.2f})"
    else:
        if use_color:
            formatted = f" [green]{symbol}{abs_amount:,.2f}[/green] "
        else:
            formatted = f" {symbol}{abs_amount:,.2f} "
    return formatted


def display_warnings(warnings: list[LedgerWarning], target: Console = console):
    """Print data-consistency warnings, if any."""
    for warning in warnings:
        target.print(f"[yellow]⚠️  {escape(warning.message)}[/yellow]")


def display_balances(report: BalanceReport, symbol: str, target: Console = console):
    """Display member balances in a table."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Member", style="cyan")
    table.add_column("Balance", justify="right", width=14)
    table.add_column("Status", style="dim")

    for entry in report.balances:
        table.add_row(
            entry.name,
            format_money(float(entry.balance), symbol),
            balance_status(entry.balance),
        )

    target.print(table)
    target.print(
        f"  Total expenses: {format_money(float(report.total_expenses), symbol)}"
    )
    target.print(
        f"  Per person (equal split): "
        f"{format_money(float(report.per_person_share), symbol)}"
    )


def display_settlements(
    settlements: list[SettlementTransaction], symbol: str, target: Console = console
):
    """Display the settlement plan in a table."""
    if not settlements:
        target.print("[green]✓ Everyone is settled up. No payments required.[/green]")
        return

    table = Table(
        title="Settlement Plan", show_header=True, header_style="bold magenta"
    )
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right", width=14)

    for tx in settlements:
        table.add_row(tx.from_name, tx.to_name, format_money(float(tx.amount), symbol))

    target.print(table)
    target.print(f"  {len(settlements)} payment(s) settle the group")


def render_summary(summary: GroupSummary, symbol: str, target: Console = console):
    """Render a full group summary."""
    target.print(f"\n[bold]{summary.group_name} - Financial Summary[/bold]")
    target.print(f"[dim]Generated on: {summary.generated_on}[/dim]\n")

    target.print("[bold]Members[/bold]")
    for i, member in enumerate(summary.members, start=1):
        email = f" ({member.email})" if member.email else ""
        target.print(f"  {i}. {member.name}{email}")
    target.print()

    display_balances(
        BalanceReport(
            group_id=summary.group_id,
            total_expenses=summary.total_expenses,
            per_person_share=summary.per_person_share,
            balances=summary.balances,
        ),
        symbol,
        target,
    )
    target.print()
    display_settlements(summary.settlements, symbol, target)
    target.print()

    target.print("[bold]Expense History[/bold]")
    if not summary.expenses:
        target.print("  No expenses recorded yet.")
    for expense in summary.expenses:
        when = f"[{expense.created_at.date()}] " if expense.created_at else ""
        description = expense.description or expense.id
        payer = _name_of(summary, expense.payer_id)
        target.print(
            f"  {when}{description} - {symbol}{expense.amount:,.2f} (Paid by {payer})"
        )

    if summary.payments:
        target.print("\n[bold]Payments Recorded[/bold]")
        for payment in summary.payments:
            when = f"[{payment.created_at.date()}] " if payment.created_at else ""
            line = describe_payment(
                _name_of(summary, payment.from_member_id),
                _name_of(summary, payment.to_member_id),
                payment.amount,
                symbol,
            )
            target.print(f"  {when}{line}")

    if summary.warnings:
        target.print()
        display_warnings(summary.warnings, target)


def _name_of(summary: GroupSummary, member_id: str) -> str:
    for member in summary.members:
        if member.id == member_id:
            return member.name
    return "Unknown"


@app.command()
def balances(
    snapshot_path: Path = typer.Argument(..., help="Group snapshot JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show every member's net balance."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = LedgerService(settings)
        report = service.balances(load_snapshot(snapshot_path))

        if as_json:
            console.print_json(report.model_dump_json(by_alias=True))
            return

        display_balances(report, settings.currency_symbol)
        display_warnings(report.warnings)

    except LedgerToolsError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def plan(
    snapshot_path: Path = typer.Argument(..., help="Group snapshot JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show the payments that settle the group.

    Uses greedy largest-first matching, so the plan has at most
    creditors + debtors - 1 payments.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = LedgerService(settings)
        report = service.settlements(load_snapshot(snapshot_path))

        if as_json:
            console.print_json(report.model_dump_json(by_alias=True))
            return

        display_settlements(report.settlements, settings.currency_symbol)
        display_warnings(report.warnings)

    except LedgerToolsError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def graph(
    snapshot_path: Path = typer.Argument(..., help="Group snapshot JSON file"),
    view: GraphView = typer.Option(
        GraphView.both, "--view", help="Edge set to include"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Print the debt graph (nodes plus raw and/or optimized edges) as JSON."""
    setup_logging(verbose)

    try:
        service = LedgerService(load_settings())
        debt_graph = service.graph(load_snapshot(snapshot_path))

        data = debt_graph.model_dump(mode="json", by_alias=True)
        if view == GraphView.optimized:
            data.pop("rawEdges")
        elif view == GraphView.raw:
            data.pop("optimizedEdges")

        console.print_json(json.dumps(data))

    except LedgerToolsError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def summary(
    snapshot_path: Path = typer.Argument(..., help="Group snapshot JSON file"),
    export: Path | None = typer.Option(
        None,
        "--export",
        "-o",
        help="Also write the summary as plain text (a directory uses the default name)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show a full financial summary: members, balances, plan and history."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        service = LedgerService(settings)
        group_summary = service.summary(load_snapshot(snapshot_path))

        render_summary(group_summary, settings.currency_symbol)

        if export is not None:
            if export.is_dir():
                export = export / summary_filename(group_summary.group_name)

            recorder = Console(record=True, file=io.StringIO(), width=100)
            render_summary(group_summary, settings.currency_symbol, recorder)
            try:
                recorder.save_text(str(export))
            except OSError as e:
                raise ExportError(str(export), e.strerror or str(e)) from e

            console.print(f"\n[green]✓ Summary written to {export}[/green]")

    except LedgerToolsError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)
