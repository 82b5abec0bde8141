"""Ledger Tools - Balances and settle-up plans for shared-expense groups."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .models import (
    Expense,
    GroupSnapshot,
    Member,
    NetBalance,
    SettlementPayment,
    SettlementTransaction,
    Split,
)
from .settle.aggregator import aggregate_balances
from .settle.planner import plan_settlements
from .settle.service import LedgerService
from .settle.snapshot import load_snapshot

__all__ = [
    "Settings",
    "load_settings",
    "Expense",
    "GroupSnapshot",
    "Member",
    "NetBalance",
    "SettlementPayment",
    "SettlementTransaction",
    "Split",
    "aggregate_balances",
    "plan_settlements",
    "LedgerService",
    "load_snapshot",
]
