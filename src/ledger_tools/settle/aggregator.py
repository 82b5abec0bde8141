"""Balance aggregation: fold a group's expenses and payments into net balances."""

import logging
from collections.abc import Sequence

from ..config import OrphanPolicy
from ..exceptions import EmptyGroupError, OrphanSplitError
from ..models import (
    Expense,
    GroupSnapshot,
    LedgerAggregation,
    LedgerWarning,
    NetBalance,
)
from .money import allocate_evenly, from_minor_units, to_minor_units

logger = logging.getLogger(__name__)


def expense_shares(
    expense: Expense, member_ids: Sequence[str]
) -> list[tuple[str, int]]:
    """
    Compute who owes what for a single expense, in minor units.

    Explicit splits are used as given. An expense without splits is divided
    evenly across all group members.

    Args:
        expense: The expense to break down
        member_ids: Current group members, in snapshot order

    Returns:
        List of (member_id, share_minor) pairs

    Raises:
        EmptyGroupError: If an equal split is needed and there are no members
    """
    if expense.splits:
        return [
            (split.member_id, to_minor_units(split.amount)) for split in expense.splits
        ]

    if not member_ids:
        raise EmptyGroupError(expense.id)

    allocations = allocate_evenly(to_minor_units(expense.amount), len(member_ids))
    return list(zip(member_ids, allocations, strict=True))


def find_orphan_references(snapshot: GroupSnapshot) -> list[tuple[str, str]]:
    """List (record id, member id) pairs that point outside the group."""
    known = set(snapshot.member_ids)
    orphans = []

    for expense in snapshot.expenses:
        if expense.payer_id not in known:
            orphans.append((expense.id, expense.payer_id))
        for split in expense.splits:
            if split.member_id not in known:
                orphans.append((expense.id, split.member_id))

    for payment in snapshot.payments:
        for member_id in (payment.from_member_id, payment.to_member_id):
            if member_id not in known:
                orphans.append((payment.id, member_id))

    return orphans


def aggregate_balances(
    snapshot: GroupSnapshot,
    orphan_policy: OrphanPolicy = "warn",
    imbalance_tolerance: int = 1,
) -> LedgerAggregation:
    """
    Derive one net balance per member from the full group history.

    Steps:
    1. Start every member at zero
    2. For each expense, subtract each member's share and credit the payer
       with the full amount
    3. For each payment, credit the payer and debit the payee
    4. Check the balances still sum to zero

    All accumulation happens in integer minor units; balances are converted
    to 2-dp Decimals only when building the result.

    Args:
        snapshot: The group's members, expenses and payments
        orphan_policy: What to do with records naming non-members
            ('ignore', 'warn' or 'reject')
        imbalance_tolerance: Minor units of drift allowed per member

    Returns:
        Balances, total expenses and any data-consistency warnings

    Raises:
        EmptyGroupError: If an equal-split expense meets an empty group
        OrphanSplitError: If orphan_policy is 'reject' and any record names
            a member outside the group
    """
    if orphan_policy == "reject":
        orphans = find_orphan_references(snapshot)
        if orphans:
            raise OrphanSplitError(orphans)

    member_ids = snapshot.member_ids
    balances = {member_id: 0 for member_id in member_ids}
    spent = {member_id: 0 for member_id in member_ids}
    warnings: list[LedgerWarning] = []
    report_orphans = orphan_policy == "warn"
    total_minor = 0

    for expense in snapshot.expenses:
        amount_minor = to_minor_units(expense.amount)
        total_minor += amount_minor

        shares = expense_shares(expense, member_ids)
        for member_id, share in shares:
            if member_id not in balances:
                if report_orphans:
                    warnings.append(
                        LedgerWarning(
                            code="orphan_split",
                            message=f"Expense {expense.id} has a split for "
                            f"{member_id}, who is not in the group",
                            record_id=expense.id,
                            member_id=member_id,
                        )
                    )
                continue
            balances[member_id] -= share
            spent[member_id] += share

        if expense.splits:
            split_total = sum(share for _, share in shares)
            if split_total != amount_minor:
                warnings.append(
                    LedgerWarning(
                        code="split_mismatch",
                        message=f"Splits of expense {expense.id} add up to "
                        f"{from_minor_units(split_total)}, not "
                        f"{from_minor_units(amount_minor)}",
                        record_id=expense.id,
                    )
                )

        if expense.payer_id in balances:
            balances[expense.payer_id] += amount_minor
        elif report_orphans:
            warnings.append(_unknown_member(expense.id, expense.payer_id))

    for payment in snapshot.payments:
        amount_minor = to_minor_units(payment.amount)

        # Paying off debt moves the payer up and the payee down
        if payment.from_member_id in balances:
            balances[payment.from_member_id] += amount_minor
        elif report_orphans:
            warnings.append(_unknown_member(payment.id, payment.from_member_id))

        if payment.to_member_id in balances:
            balances[payment.to_member_id] -= amount_minor
        elif report_orphans:
            warnings.append(_unknown_member(payment.id, payment.to_member_id))

    drift = sum(balances.values())
    if abs(drift) > imbalance_tolerance * max(len(member_ids), 1):
        warnings.append(
            LedgerWarning(
                code="imbalance",
                message=f"Balances of group {snapshot.group_id} sum to "
                f"{from_minor_units(drift)} instead of zero",
            )
        )

    for warning in warnings:
        logger.warning(warning.message)

    logger.debug(
        f"Aggregated {len(snapshot.expenses)} expenses and "
        f"{len(snapshot.payments)} payments for group {snapshot.group_id}"
    )

    return LedgerAggregation(
        group_id=snapshot.group_id,
        balances=[
            NetBalance(
                member_id=member.id,
                name=member.name,
                balance=from_minor_units(balances[member.id]),
                total_spent=from_minor_units(spent[member.id]),
            )
            for member in snapshot.members
        ],
        total_expenses=from_minor_units(total_minor),
        warnings=warnings,
    )


def _unknown_member(record_id: str, member_id: str) -> LedgerWarning:
    return LedgerWarning(
        code="unknown_member",
        message=f"Record {record_id} references {member_id}, who is not in the group",
        record_id=record_id,
        member_id=member_id,
    )
