"""Group Ledger - Exact expense splitting, balances and settle-up plans."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .exceptions import (
    EmptyParticipantSetError,
    ExactSumMismatchError,
    InvalidAmountError,
    InvalidShareCountError,
    LedgerError,
    PercentageSumMismatchError,
    SelfSettlementError,
    SplitError,
    UnknownSplitPolicyError,
)
from .models import (
    Expense,
    ExpenseParticipant,
    LedgerDocument,
    LedgerReport,
    NettedEdge,
    SplitResult,
    UserBalance,
    UserStats,
)
from .money import format_money, sum_cents, to_cents, to_decimal
from .settle.balances import aggregate_balances, group_total, user_stats
from .settle.netting import net_balances, settle_expenses
from .settle.service import LedgerService, compute_plan_hash
from .split.calculator import calculate_split
from .split.policies import (
    EqualSplit,
    ExactSplit,
    PercentageSplit,
    SharesSplit,
    parse_split,
)
from .split.validator import SplitValidationResult, validate_split

__all__ = [
    "Settings",
    "load_settings",
    "LedgerError",
    "SplitError",
    "InvalidAmountError",
    "EmptyParticipantSetError",
    "UnknownSplitPolicyError",
    "PercentageSumMismatchError",
    "InvalidShareCountError",
    "ExactSumMismatchError",
    "SelfSettlementError",
    "Expense",
    "ExpenseParticipant",
    "LedgerDocument",
    "LedgerReport",
    "NettedEdge",
    "SplitResult",
    "UserBalance",
    "UserStats",
    "to_cents",
    "to_decimal",
    "sum_cents",
    "format_money",
    "EqualSplit",
    "PercentageSplit",
    "SharesSplit",
    "ExactSplit",
    "parse_split",
    "calculate_split",
    "validate_split",
    "SplitValidationResult",
    "aggregate_balances",
    "group_total",
    "user_stats",
    "net_balances",
    "settle_expenses",
    "LedgerService",
    "compute_plan_hash",
]
