"""Greedy settlement planning: turn net balances into a short list of payments."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..models import NetBalance, SettlementTransaction
from .money import from_minor_units, to_minor_units

logger = logging.getLogger(__name__)


@dataclass
class _OpenPosition:
    """A member's balance still waiting to be settled, in minor units."""

    member: NetBalance
    remaining: int


def plan_settlements(balances: Sequence[NetBalance]) -> list[SettlementTransaction]:
    """
    Compute a minimal list of payments that brings every balance to zero.

    Greedy two-pointer matching:
    1. Convert balances to integer minor units
    2. Split members into creditors (> 0) and debtors (< 0)
    3. Sort both by magnitude, largest first (ties keep input order)
    4. Repeatedly settle min(creditor, |debtor|) between the current pair,
       advancing whichever side reaches exactly zero

    Produces at most creditors + debtors - 1 transactions. This is a
    heuristic, not a proven global minimum.

    Args:
        balances: Net balance per member; expected to sum to zero

    Returns:
        Payments from debtors to creditors, in the order they were matched
    """
    positions = [_OpenPosition(b, to_minor_units(b.balance)) for b in balances]

    creditors = sorted(
        (p for p in positions if p.remaining > 0),
        key=lambda p: p.remaining,
        reverse=True,
    )
    debtors = sorted(
        (p for p in positions if p.remaining < 0),
        key=lambda p: p.remaining,  # most negative first
    )

    settlements: list[SettlementTransaction] = []
    i = 0
    j = 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = min(creditor.remaining, -debtor.remaining)

        if amount > 0:
            settlements.append(
                SettlementTransaction(
                    from_member_id=debtor.member.member_id,
                    to_member_id=creditor.member.member_id,
                    from_name=debtor.member.name,
                    to_name=creditor.member.name,
                    amount=from_minor_units(amount),
                )
            )

        creditor.remaining -= amount
        debtor.remaining += amount

        if creditor.remaining == 0:
            i += 1
        if debtor.remaining == 0:
            j += 1

    residual = sum(p.remaining for p in creditors[i:]) + sum(
        p.remaining for p in debtors[j:]
    )
    if residual != 0:
        logger.warning(
            f"Balances did not sum to zero; {from_minor_units(residual)} "
            f"left unsettled"
        )

    logger.debug(
        f"Planned {len(settlements)} settlements for "
        f"{len(creditors)} creditors and {len(debtors)} debtors"
    )

    return settlements
