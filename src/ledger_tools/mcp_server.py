"""MCP server for Ledger Tools: group balances and settle-up plans as tools."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .exceptions import LedgerToolsError
from .models import GroupSnapshot, LedgerWarning
from .settle.service import LedgerService, balance_status, describe_payment
from .settle.snapshot import load_snapshot

logger = logging.getLogger(__name__)

mcp_app = FastMCP("ledger-tools")

# ---------------------------------------------------------------------------
# Session state: one MCP server process = one conversation
# ---------------------------------------------------------------------------

WORKFLOW_INSTRUCTIONS = """\
You are helping a group settle shared expenses. Follow this workflow:

1. LOAD: Call load_group with the path to the group's snapshot file.
   Tell the user how many members, expenses and payments it holds.

2. BALANCES: Call get_balances and show who is owed money and who owes.
   If any warnings are reported, point them out before going further;
   they mean the recorded data does not add up.

3. PLAN: Call get_settlements to get the shortest list of payments that
   settles everyone. Present each payment as "<from> pays <to> <amount>".

4. EXPLAIN (optional): Call get_debt_graph if the user wants to see how the
   original debts collapse into the plan, or get_summary for a full report.

Positive balances are owed money, negative balances owe money.\
"""


@dataclass
class SessionState:
    """Holds state between MCP tool calls within a single conversation."""

    service: LedgerService | None = None
    snapshot: GroupSnapshot | None = None


_state = SessionState()


def _ensure_service() -> LedgerService:
    """Lazily initialize the LedgerService (loads .env config)."""
    if _state.service is None:
        _state.service = LedgerService(load_settings())
    return _state.service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_amount(amount: Decimal) -> str:
    """Format an amount as an accounting-style string."""
    symbol = _state.service.settings.currency_symbol if _state.service else "$"
    if amount < 0:
        return f"({symbol}{abs(amount):,.2f})"
    return f"{symbol}{amount:,.2f}"


def _format_warnings(warnings: list[LedgerWarning]) -> list[str]:
    if not warnings:
        return []
    return ["", f"Warnings ({len(warnings)}):"] + [f"  - {w.message}" for w in warnings]


# ---------------------------------------------------------------------------
# MCP Tools
# ---------------------------------------------------------------------------


@mcp_app.tool()
def load_group(snapshot_path: str) -> str:
    """Load a group snapshot JSON file for the following tool calls.

    Args:
        snapshot_path: Path to the snapshot file.
    """
    try:
        _ensure_service()
        snapshot = load_snapshot(Path(snapshot_path).expanduser())
        _state.snapshot = snapshot

        return (
            f"Loaded group {snapshot.name or snapshot.group_id}: "
            f"{len(snapshot.members)} members, {len(snapshot.expenses)} expenses, "
            f"{len(snapshot.payments)} payments."
        )
    except LedgerToolsError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to load group: {e}"


@mcp_app.tool()
def get_balances() -> str:
    """Show each member's net balance for the loaded group."""
    try:
        service = _ensure_service()

        if _state.snapshot is None:
            return "Error: No group loaded. Call load_group first."

        report = service.balances(_state.snapshot)

        lines = ["Balances:"]
        for entry in report.balances:
            lines.append(
                f"  - {entry.name}: {_format_amount(entry.balance)} "
                f"({balance_status(entry.balance)})"
            )
        lines.append("")
        lines.append(f"Total expenses: {_format_amount(report.total_expenses)}")
        lines.append(
            f"Per person (equal split): {_format_amount(report.per_person_share)}"
        )
        lines.extend(_format_warnings(report.warnings))

        return "\n".join(lines)
    except LedgerToolsError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to compute balances: {e}"


@mcp_app.tool()
def get_settlements() -> str:
    """Compute the shortest list of payments that settles the loaded group."""
    try:
        service = _ensure_service()

        if _state.snapshot is None:
            return "Error: No group loaded. Call load_group first."

        report = service.settlements(_state.snapshot)

        if not report.settlements:
            lines = ["Everyone is settled up. No payments required."]
        else:
            lines = [f"Settlement Plan ({len(report.settlements)} payments):"]
            for i, tx in enumerate(report.settlements):
                lines.append(
                    f"  [{i}] {tx.from_name} pays {tx.to_name} {_format_amount(tx.amount)}"
                )
        lines.extend(_format_warnings(report.warnings))

        return "\n".join(lines)
    except LedgerToolsError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to compute settlements: {e}"


@mcp_app.tool()
def get_debt_graph() -> str:
    """Return the loaded group's debt graph (nodes, raw and optimized edges) as JSON."""
    try:
        service = _ensure_service()

        if _state.snapshot is None:
            return "Error: No group loaded. Call load_group first."

        return service.graph(_state.snapshot).model_dump_json(by_alias=True, indent=2)
    except LedgerToolsError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to build debt graph: {e}"


@mcp_app.tool()
def get_summary() -> str:
    """Full summary of the loaded group: totals, balances, plan and history."""
    try:
        service = _ensure_service()

        if _state.snapshot is None:
            return "Error: No group loaded. Call load_group first."

        summary = service.summary(_state.snapshot)
        names = {member.id: member.name for member in summary.members}

        lines = [
            f"{summary.group_name} - Financial Summary ({summary.generated_on})",
            f"  Members: {', '.join(names.values()) or 'none'}",
            f"  Total expenses: {_format_amount(summary.total_expenses)}",
            f"  Per person (equal split): {_format_amount(summary.per_person_share)}",
            "",
            "Final Balances:",
        ]
        for entry in summary.balances:
            lines.append(
                f"  - {entry.name}: {balance_status(entry.balance)} "
                f"{_format_amount(abs(entry.balance))}"
            )

        lines.append("")
        lines.append("Settlement Plan:")
        if not summary.settlements:
            lines.append("  Everyone is settled up.")
        for tx in summary.settlements:
            lines.append(
                f"  - {tx.from_name} needs to pay {_format_amount(tx.amount)} to {tx.to_name}"
            )

        lines.append("")
        lines.append(f"Expenses ({len(summary.expenses)}):")
        for expense in summary.expenses:
            lines.append(
                f"  - {expense.description or expense.id}: "
                f"{_format_amount(expense.amount)} "
                f"(paid by {names.get(expense.payer_id, 'Unknown')})"
            )

        if summary.payments:
            lines.append("")
            lines.append(f"Payments ({len(summary.payments)}):")
            for payment in summary.payments:
                line = describe_payment(
                    names.get(payment.from_member_id, "Unknown"),
                    names.get(payment.to_member_id, "Unknown"),
                    payment.amount,
                    service.settings.currency_symbol,
                )
                lines.append(f"  - {line}")

        lines.extend(_format_warnings(summary.warnings))

        return "\n".join(lines)
    except LedgerToolsError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to build summary: {e}"


# ---------------------------------------------------------------------------
# MCP Prompt
# ---------------------------------------------------------------------------


@mcp_app.prompt()
def settle_workflow() -> str:
    """Orchestration instructions for settling a group."""
    return WORKFLOW_INSTRUCTIONS


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_server():
    """Start the MCP server (stdio transport)."""
    mcp_app.run(transport="stdio")
