"""Pydantic domain models for Ledger Tools."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

# Decimal internally, plain number on the JSON wire
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class LedgerModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )


# ============================================================================
# Ledger Records (inputs)
# ============================================================================


class Member(LedgerModel):
    """A person tracked within a group's ledger."""

    id: str
    name: str
    email: str | None = None


class Split(LedgerModel):
    """One member's share of an expense."""

    member_id: str
    amount: Money = Field(ge=0)


class Expense(LedgerModel):
    """A purchase paid by one member and owed by one or more members."""

    id: str
    amount: Money = Field(gt=0)
    payer_id: str
    description: str = ""
    created_at: datetime | None = None
    splits: list[Split] = Field(default_factory=list)  # empty = equal split

    @property
    def is_equal_split(self) -> bool:
        return not self.splits


class SettlementPayment(LedgerModel):
    """A real-world payment between two members, recorded outside the plan."""

    id: str
    from_member_id: str
    to_member_id: str
    amount: Money = Field(gt=0)
    created_at: datetime | None = None

    @model_validator(mode="after")
    def _check_distinct_members(self) -> "SettlementPayment":
        if self.from_member_id == self.to_member_id:
            raise ValueError(
                f"Payment {self.id} is from and to the same member "
                f"({self.from_member_id})"
            )
        return self


class GroupSnapshot(LedgerModel):
    """Everything recorded for one group, as handed to the engine."""

    group_id: str
    name: str = ""
    members: list[Member] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    payments: list[SettlementPayment] = Field(default_factory=list)

    @field_validator("members")
    @classmethod
    def _check_unique_members(cls, members: list[Member]) -> list[Member]:
        seen: set[str] = set()
        for member in members:
            if member.id in seen:
                raise ValueError(f"Duplicate member id: {member.id}")
            seen.add(member.id)
        return members

    @property
    def member_ids(self) -> list[str]:
        return [member.id for member in self.members]

    def member_name(self, member_id: str) -> str:
        """Display name for a member id, falling back to the id itself."""
        for member in self.members:
            if member.id == member_id:
                return member.name
        return member_id


# ============================================================================
# Derived Results (outputs)
# ============================================================================


class LedgerWarning(LedgerModel):
    """A data-consistency anomaly found while aggregating a group."""

    code: Literal["orphan_split", "unknown_member", "split_mismatch", "imbalance"]
    message: str
    record_id: str | None = None
    member_id: str | None = None


class NetBalance(LedgerModel):
    """A member's signed net position: positive = owed money, negative = owes."""

    member_id: str
    name: str
    balance: Money
    total_spent: Money = Field(default=Decimal("0.00"), exclude=True)


class SettlementTransaction(LedgerModel):
    """One payment instruction from a debtor to a creditor."""

    from_member_id: str
    to_member_id: str
    from_name: str
    to_name: str
    amount: Money = Field(gt=0)


class LedgerAggregation(LedgerModel):
    """Result of folding a snapshot into per-member balances."""

    group_id: str
    balances: list[NetBalance]
    total_expenses: Money
    warnings: list[LedgerWarning] = Field(default_factory=list)


class BalanceReport(LedgerModel):
    """Response shape of a balance query."""

    group_id: str
    total_expenses: Money
    per_person_share: Money
    balances: list[NetBalance]
    warnings: list[LedgerWarning] = Field(default_factory=list)


class SettlementReport(LedgerModel):
    """Response shape of a settlement query."""

    group_id: str
    settlements: list[SettlementTransaction]
    warnings: list[LedgerWarning] = Field(default_factory=list)


# ============================================================================
# Debt Graph
# ============================================================================


class GraphNode(LedgerModel):
    """A member node sized by total spent."""

    id: str
    name: str
    balance: Money
    total_spent: Money


class GraphEdge(LedgerModel):
    """A directed money flow between two members."""

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    amount: Money


class DebtGraph(LedgerModel):
    """Member nodes with raw and optimized edge sets over them."""

    nodes: list[GraphNode]
    optimized_edges: list[GraphEdge]
    raw_edges: list[GraphEdge]


# ============================================================================
# Group Summary
# ============================================================================


class GroupSummary(LedgerModel):
    """Printable financial summary of a group."""

    group_id: str
    group_name: str
    generated_on: date
    members: list[Member]
    total_expenses: Money
    per_person_share: Money
    balances: list[NetBalance]
    settlements: list[SettlementTransaction]
    expenses: list[Expense]
    payments: list[SettlementPayment]
    warnings: list[LedgerWarning] = Field(default_factory=list)
