"""Debt graph construction for visualizing raw and optimized money flows."""

import logging
from collections.abc import Sequence

from ..models import (
    DebtGraph,
    GraphEdge,
    GraphNode,
    GroupSnapshot,
    LedgerAggregation,
    SettlementTransaction,
)
from .aggregator import expense_shares
from .money import from_minor_units, to_minor_units

logger = logging.getLogger(__name__)


def build_raw_edges(snapshot: GroupSnapshot) -> list[GraphEdge]:
    """
    One edge per share owed to someone else, plus one per recorded payment.

    A share becomes an edge from the member who owes it to the payer, even
    when the share is zero. Shares a payer owes on their own expense and
    records naming non-members produce no edge.
    """
    member_ids = snapshot.member_ids
    known = set(member_ids)
    edges = []

    for expense in snapshot.expenses:
        if expense.payer_id not in known:
            continue
        for member_id, share in expense_shares(expense, member_ids):
            if member_id == expense.payer_id or member_id not in known:
                continue
            edges.append(
                GraphEdge(
                    from_id=member_id,
                    to_id=expense.payer_id,
                    amount=from_minor_units(share),
                )
            )

    for payment in snapshot.payments:
        if payment.from_member_id in known and payment.to_member_id in known:
            edges.append(
                GraphEdge(
                    from_id=payment.from_member_id,
                    to_id=payment.to_member_id,
                    amount=from_minor_units(to_minor_units(payment.amount)),
                )
            )

    return edges


def build_optimized_edges(
    transactions: Sequence[SettlementTransaction],
) -> list[GraphEdge]:
    """Map each planned settlement to a debtor -> creditor edge."""
    return [
        GraphEdge(from_id=tx.from_member_id, to_id=tx.to_member_id, amount=tx.amount)
        for tx in transactions
    ]


def build_debt_graph(
    snapshot: GroupSnapshot,
    aggregation: LedgerAggregation,
    transactions: Sequence[SettlementTransaction],
) -> DebtGraph:
    """
    Build member nodes with both edge sets over them.

    Args:
        snapshot: The group records the raw edges are drawn from
        aggregation: Balances and totals spent for the nodes
        transactions: Planned settlements for the optimized edges

    Returns:
        The debt graph
    """
    nodes = [
        GraphNode(
            id=balance.member_id,
            name=balance.name,
            balance=balance.balance,
            total_spent=balance.total_spent,
        )
        for balance in aggregation.balances
    ]

    graph = DebtGraph(
        nodes=nodes,
        optimized_edges=build_optimized_edges(transactions),
        raw_edges=build_raw_edges(snapshot),
    )

    logger.info(
        f"Built debt graph: {len(graph.nodes)} nodes, "
        f"{len(graph.raw_edges)} raw edges, "
        f"{len(graph.optimized_edges)} optimized edges"
    )

    return graph
