"""Service layer that composes splitting, aggregation and netting.

This module provides a higher-level API over the pure ledger functions: it
takes expenses as a caller submits them (amount plus split policy), resolves
their shares and produces a complete, auditable report.
"""

import hashlib
import logging
from collections.abc import Sequence

from ..config import Settings
from ..exceptions import CurrencyMismatchError
from ..models import (
    Expense,
    ExpenseParticipant,
    ExpenseRequest,
    LedgerDocument,
    LedgerReport,
    NettedEdge,
)
from ..split.calculator import calculate_split
from ..split.validator import validate_split
from .balances import aggregate_balances, group_total, verify_expense_shares
from .netting import net_balances

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for turning submitted expenses into balances and transfers."""

    def __init__(self, settings: Settings):
        """Initialize the ledger service."""
        self.settings = settings

    def resolve_expense(
        self, request: ExpenseRequest, currency: str | None = None
    ) -> tuple[Expense, list[ExpenseParticipant], list[str]]:
        """
        Resolve a submitted expense into a stored expense and its shares.

        When ``auto_fix_splits`` is enabled the split is run through the
        validator first and its correction, if any, is used.

        Args:
            request: The submitted expense
            currency: Currency to use when the request does not name one

        Returns:
            Tuple of (expense, participant shares, warnings)

        Raises:
            SplitError: If the split cannot be resolved
            InvalidAmountError: If the amount is below 1 cent
        """
        split = request.split
        warnings: list[str] = []

        if self.settings.auto_fix_splits:
            validation = validate_split(request.amount_cents, split, auto_fix=True)
            warnings.extend(f"Expense {request.id}: {w}" for w in validation.warnings)
            if validation.adjusted_split is not None:
                split = validation.adjusted_split

        # Raises the typed error for anything the validator could not repair
        shares = calculate_split(request.amount_cents, split)

        expense = Expense(
            id=request.id,
            group_id=request.group_id,
            payer_id=request.payer_id,
            amount_cents=request.amount_cents,
            currency=request.currency or currency or self.settings.default_currency,
            date=request.date,
            description=request.description,
            category=request.category,
            notes=request.notes,
        )
        participants = [
            ExpenseParticipant(
                expense_id=expense.id,
                user_id=share.user_id,
                share_cents=share.share_cents,
            )
            for share in shares
        ]

        return expense, participants, warnings

    def resolve_document(
        self, document: LedgerDocument
    ) -> tuple[str, list[Expense], list[ExpenseParticipant], list[str]]:
        """
        Resolve every expense in a ledger document.

        Args:
            document: Expenses in a single currency

        Returns:
            Tuple of (currency, expenses, participant shares, warnings)

        Raises:
            CurrencyMismatchError: If expenses use more than one currency
            ShareSumMismatchError: If resolved shares do not match an expense
            LedgerError: If any expense cannot be resolved
        """
        currency = (document.currency or self.settings.default_currency).upper()

        expenses: list[Expense] = []
        participants: list[ExpenseParticipant] = []
        warnings: list[str] = []

        for request in document.expenses:
            if request.currency and request.currency.upper() != currency:
                raise CurrencyMismatchError(
                    f"Expense {request.id} is in {request.currency.upper()}, "
                    f"ledger is in {currency}. Convert amounts before settling."
                )

            expense, shares, expense_warnings = self.resolve_expense(
                request, currency
            )
            expenses.append(expense)
            participants.extend(shares)
            warnings.extend(expense_warnings)

        verify_expense_shares(expenses, participants)

        return currency, expenses, participants, warnings

    def build_report(self, document: LedgerDocument) -> LedgerReport:
        """
        Compute balances and settlement transfers for a ledger document.

        Args:
            document: Expenses in a single currency

        Returns:
            Report with resolved shares, balances, transfers and plan hash
        """
        currency, expenses, participants, warnings = self.resolve_document(
            document
        )

        balances = aggregate_balances(expenses, participants)
        edges = net_balances(balances)
        plan_hash = compute_plan_hash(edges)

        for warning in warnings:
            logger.warning(warning)

        logger.info(
            f"Built report for {len(expenses)} expenses: "
            f"{len(balances)} balances, {len(edges)} transfers "
            f"(hash: {plan_hash[:8]}...)"
        )

        return LedgerReport(
            currency=currency,
            group_total=group_total(expenses),
            participants=participants,
            balances=balances,
            edges=edges,
            plan_hash=plan_hash,
            warnings=warnings,
        )


def compute_plan_hash(edges: Sequence[NettedEdge]) -> str:
    """
    Compute a SHA-256 fingerprint of a settlement plan.

    Edges are hashed in emitted order. The netting engine is deterministic,
    so the same expenses always produce the same hash.
    """
    combined = "|".join(
        f"{edge.from_user_id}:{edge.to_user_id}:{edge.amount_cents}" for edge in edges
    )
    return hashlib.sha256(combined.encode()).hexdigest()
