"""Balance aggregation, settlement planning and debt graphs for group ledgers."""

from .aggregator import aggregate_balances, expense_shares
from .graph import build_debt_graph
from .money import from_minor_units, to_minor_units
from .planner import plan_settlements
from .service import LedgerService

__all__ = [
    "aggregate_balances",
    "expense_shares",
    "build_debt_graph",
    "from_minor_units",
    "to_minor_units",
    "plan_settlements",
    "LedgerService",
]
