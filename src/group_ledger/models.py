"""Pydantic domain models for Group Ledger."""

from datetime import datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from .exceptions import SelfSettlementError
from .money import normalize_currency_code
from .split.policies import Split, normalize_policy_tag

# ============================================================================
# Expense Models
# ============================================================================


class Expense(BaseModel):
    """A recorded expense. Read-only input to the ledger core."""

    model_config = ConfigDict(frozen=True)

    id: str
    group_id: str
    payer_id: str
    amount_cents: int = Field(ge=1)
    currency: str
    date: datetime
    description: str = ""
    category: str | None = None  # opaque to the core
    notes: str | None = None

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: str) -> str:
        return normalize_currency_code(value)


class ExpenseParticipant(BaseModel):
    """One user's resolved share of one expense."""

    model_config = ConfigDict(frozen=True)

    expense_id: str
    user_id: str
    share_cents: int = Field(ge=0)


class SplitResult(BaseModel):
    """Calculator output: the cents one participant owes."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    share_cents: int


# ============================================================================
# Balance Models
# ============================================================================


class UserBalance(BaseModel):
    """A user's derived position across a set of expenses.

    net_balance > 0: the group owes this user (creditor).
    net_balance < 0: this user owes the group (debtor).
    """

    user_id: str
    total_paid: int = 0
    total_owed: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_balance(self) -> int:
        """Total paid minus total owed, always recomputed."""
        return self.total_paid - self.total_owed


class UserStats(BaseModel):
    """Single-user summary for dashboards."""

    user_id: str
    total_paid: int
    total_owed: int
    net_balance: int
    expense_count: int
    avg_expense_amount: float  # display only


class NettedEdge(BaseModel):
    """A suggested transfer that reduces outstanding balances."""

    model_config = ConfigDict(frozen=True)

    from_user_id: str
    to_user_id: str
    amount_cents: int = Field(gt=0)

    @model_validator(mode="after")
    def _reject_self_settlement(self) -> "NettedEdge":
        if self.from_user_id == self.to_user_id:
            raise SelfSettlementError(self.from_user_id)
        return self


# ============================================================================
# Ledger Document Models
# ============================================================================


class ExpenseRequest(BaseModel):
    """An expense as submitted by a caller, before its shares are resolved."""

    id: str
    group_id: str = "default"
    payer_id: str
    amount_cents: int
    currency: str | None = None  # falls back to the document currency
    date: datetime = Field(default_factory=datetime.now)
    description: str = ""
    category: str | None = None
    notes: str | None = None
    split: Split

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: str | None) -> str | None:
        return normalize_currency_code(value) if value is not None else None

    @field_validator("split", mode="before")
    @classmethod
    def _normalize_split_tag(cls, value: object) -> object:
        return normalize_policy_tag(value)


class LedgerDocument(BaseModel):
    """A group's expenses in one currency, as read from a ledger file."""

    currency: str | None = None  # falls back to the configured default
    expenses: list[ExpenseRequest] = Field(default_factory=list)

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: str | None) -> str | None:
        return normalize_currency_code(value) if value is not None else None


class LedgerReport(BaseModel):
    """Everything computed for one ledger document."""

    currency: str
    group_total: int
    participants: list[ExpenseParticipant]
    balances: list[UserBalance]
    edges: list[NettedEdge]
    plan_hash: str
    warnings: list[str] = Field(default_factory=list)
