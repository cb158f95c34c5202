"""Balance aggregation: turn expenses and shares into per-user net positions.

Aggregation is a single pass and order-insensitive in its amounts; the only
thing input order decides is the order users appear in the output (payers
first, in expense order, then remaining participants).
"""

import logging
from collections.abc import Sequence

from ..exceptions import ShareSumMismatchError
from ..models import Expense, ExpenseParticipant, UserBalance, UserStats
from ..money import sum_cents

logger = logging.getLogger(__name__)


def aggregate_balances(
    expenses: Sequence[Expense], participants: Sequence[ExpenseParticipant]
) -> list[UserBalance]:
    """
    Calculate net balances for every user in a set of expenses.

    Args:
        expenses: Expenses (each payer is credited the full amount)
        participants: Resolved shares (each user is debited their share)

    Returns:
        One balance per user appearing as a payer or a participant
    """
    paid: dict[str, int] = {}
    owed: dict[str, int] = {}

    # Initialize all users (set union, first appearance wins the position)
    for expense in expenses:
        paid.setdefault(expense.payer_id, 0)
        owed.setdefault(expense.payer_id, 0)
    for participant in participants:
        paid.setdefault(participant.user_id, 0)
        owed.setdefault(participant.user_id, 0)

    for expense in expenses:
        paid[expense.payer_id] += expense.amount_cents

    for participant in participants:
        owed[participant.user_id] += participant.share_cents

    balances = [
        UserBalance(user_id=user_id, total_paid=paid[user_id], total_owed=owed[user_id])
        for user_id in paid
    ]

    logger.debug(
        f"Aggregated {len(expenses)} expenses and {len(participants)} shares "
        f"into {len(balances)} balances"
    )

    return balances


def group_total(expenses: Sequence[Expense]) -> int:
    """Calculate total group spending in cents."""
    return sum_cents(expense.amount_cents for expense in expenses)


def user_stats(
    user_id: str,
    expenses: Sequence[Expense],
    participants: Sequence[ExpenseParticipant],
) -> UserStats:
    """
    Calculate statistics for a single user.

    avg_expense_amount is the mean of the expenses this user paid for, as a
    float for display. It is 0.0 when the user paid for nothing.
    """
    paid_amounts = [e.amount_cents for e in expenses if e.payer_id == user_id]
    total_paid = sum_cents(paid_amounts)
    total_owed = sum_cents(p.share_cents for p in participants if p.user_id == user_id)
    expense_count = len(paid_amounts)

    return UserStats(
        user_id=user_id,
        total_paid=total_paid,
        total_owed=total_owed,
        net_balance=total_paid - total_owed,
        expense_count=expense_count,
        avg_expense_amount=total_paid / expense_count if expense_count else 0.0,
    )


def verify_expense_shares(
    expenses: Sequence[Expense], participants: Sequence[ExpenseParticipant]
) -> None:
    """
    Check that every expense's shares add up to its amount exactly.

    Raises:
        ShareSumMismatchError: If an expense's shares are off by any amount,
            or a share points at an expense that is not in the set
    """
    share_totals: dict[str, int] = {}
    for expense in expenses:
        if expense.id in share_totals:
            raise ShareSumMismatchError(
                expense.id, f"Expense {expense.id} appears more than once"
            )
        share_totals[expense.id] = 0

    for participant in participants:
        if participant.expense_id not in share_totals:
            raise ShareSumMismatchError(
                participant.expense_id,
                f"Share for user {participant.user_id} references unknown "
                f"expense {participant.expense_id}",
            )
        share_totals[participant.expense_id] += participant.share_cents

    for expense in expenses:
        shares = share_totals[expense.id]
        if shares != expense.amount_cents:
            raise ShareSumMismatchError(
                expense.id,
                f"Shares for expense {expense.id} sum to {shares} cents, "
                f"expense amount is {expense.amount_cents} cents",
            )
