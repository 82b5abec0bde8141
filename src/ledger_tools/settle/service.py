"""Service layer that composes aggregation, planning and graph building.

Every query runs the same aggregation over the snapshot it is given and then
applies only its own presentation mapping. Nothing is cached between calls.
"""

import logging
import re
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

from ..config import Settings
from ..models import (
    BalanceReport,
    DebtGraph,
    Expense,
    GroupSnapshot,
    GroupSummary,
    LedgerAggregation,
    SettlementPayment,
    SettlementReport,
    SettlementTransaction,
)
from .aggregator import aggregate_balances
from .graph import build_debt_graph
from .money import divide_rounded, from_minor_units, to_minor_units
from .planner import plan_settlements

logger = logging.getLogger(__name__)


class LedgerService:
    """Answers balance, settlement, graph and summary queries for a group."""

    def __init__(self, settings: Settings):
        """Initialize the ledger service."""
        self.settings = settings

    def aggregate(self, snapshot: GroupSnapshot) -> LedgerAggregation:
        """Fold the snapshot into net balances using the configured policies."""
        return aggregate_balances(
            snapshot,
            orphan_policy=self.settings.orphan_policy,
            imbalance_tolerance=self.settings.imbalance_tolerance,
        )

    def balances(self, snapshot: GroupSnapshot) -> BalanceReport:
        """
        Compute every member's net balance.

        Args:
            snapshot: The group's records

        Returns:
            Balance report with totals and any warnings
        """
        aggregation = self.aggregate(snapshot)

        report = BalanceReport(
            group_id=snapshot.group_id,
            total_expenses=aggregation.total_expenses,
            per_person_share=per_person_share(aggregation),
            balances=aggregation.balances,
            warnings=aggregation.warnings,
        )

        logger.info(
            f"Computed balances for {len(report.balances)} members, "
            f"total expenses: {report.total_expenses}"
        )
        return report

    def settlements(self, snapshot: GroupSnapshot) -> SettlementReport:
        """
        Compute the payments that would settle the group.

        Args:
            snapshot: The group's records

        Returns:
            Settlement report with the planned payments and any warnings
        """
        aggregation = self.aggregate(snapshot)
        plan = plan_settlements(aggregation.balances)

        logger.info(f"Planned {len(plan)} settlements for group {snapshot.group_id}")

        return SettlementReport(
            group_id=snapshot.group_id,
            settlements=plan,
            warnings=aggregation.warnings,
        )

    def graph(self, snapshot: GroupSnapshot) -> DebtGraph:
        """Build the raw and optimized debt graph for the group."""
        aggregation = self.aggregate(snapshot)
        plan = plan_settlements(aggregation.balances)
        return build_debt_graph(snapshot, aggregation, plan)

    def summary(
        self, snapshot: GroupSnapshot, today: date | None = None
    ) -> GroupSummary:
        """
        Assemble a printable financial summary of the group.

        Args:
            snapshot: The group's records
            today: Date to stamp on the summary (defaults to today)

        Returns:
            Members, totals, balances, settlement plan and history
        """
        aggregation = self.aggregate(snapshot)
        plan = plan_settlements(aggregation.balances)

        return GroupSummary(
            group_id=snapshot.group_id,
            group_name=snapshot.name or snapshot.group_id,
            generated_on=today or date.today(),
            members=snapshot.members,
            total_expenses=aggregation.total_expenses,
            per_person_share=per_person_share(aggregation),
            balances=aggregation.balances,
            settlements=plan,
            expenses=_chronological(snapshot.expenses),
            payments=_chronological(snapshot.payments),
            warnings=aggregation.warnings,
        )

    def record_settlements(
        self,
        snapshot: GroupSnapshot,
        transactions: Sequence[SettlementTransaction],
    ) -> GroupSnapshot:
        """
        Return a new snapshot with each planned settlement recorded as paid.

        The input snapshot is left untouched.
        """
        payments = [
            SettlementPayment(
                id=f"plan-{i}",
                from_member_id=tx.from_member_id,
                to_member_id=tx.to_member_id,
                amount=tx.amount,
            )
            for i, tx in enumerate(transactions, start=1)
        ]

        for payment in payments:
            logger.info(
                describe_payment(
                    snapshot.member_name(payment.from_member_id),
                    snapshot.member_name(payment.to_member_id),
                    payment.amount,
                    self.settings.currency_symbol,
                )
            )

        return snapshot.model_copy(
            update={"payments": [*snapshot.payments, *payments]}
        )


def per_person_share(aggregation: LedgerAggregation) -> Decimal:
    """Total expenses divided equally across members (0 for an empty group)."""
    if not aggregation.balances:
        return from_minor_units(0)
    total_minor = to_minor_units(aggregation.total_expenses)
    return from_minor_units(divide_rounded(total_minor, len(aggregation.balances)))


def balance_status(balance: Decimal) -> str:
    """Label a net balance for display."""
    if balance > 0:
        return "Gets back"
    if balance < 0:
        return "Owes"
    return "Settled up"


def describe_payment(
    from_name: str, to_name: str, amount: Decimal, currency_symbol: str = "$"
) -> str:
    """Activity line for a payment between two members."""
    return f"{from_name} paid {currency_symbol}{amount:,.2f} to {to_name}"


def summary_filename(group_name: str) -> str:
    """Safe export file name for a group summary."""
    slug = re.sub(r"[^a-z0-9]", "_", group_name, flags=re.IGNORECASE).lower()
    return f"{slug}_summary.txt"


def _chronological(
    records: Sequence[Expense] | Sequence[SettlementPayment],
) -> list:
    """Order records by creation time when every record carries one."""
    if records and all(record.created_at is not None for record in records):
        return sorted(records, key=lambda record: record.created_at)
    return list(records)
