"""Settlement netting: collapse net balances into a short list of transfers.

Greedy largest-first matching. The result is not always the global minimum,
but it never needs more than ``creditors + debtors - 1`` transfers.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..exceptions import SelfSettlementError, UnbalancedLedgerError
from ..models import Expense, ExpenseParticipant, NettedEdge, UserBalance
from .balances import aggregate_balances

logger = logging.getLogger(__name__)


@dataclass
class _Position:
    """Working copy of one side of the matching; amount is always positive."""

    user_id: str
    amount: int


def _sorted_positions(positions: list[_Position]) -> list[_Position]:
    # Largest first; ties by user ID so input order never matters
    return sorted(positions, key=lambda p: (-p.amount, p.user_id))


def _check_balances(balances: Sequence[UserBalance]) -> None:
    seen: set[str] = set()
    for balance in balances:
        if balance.user_id in seen:
            raise UnbalancedLedgerError(
                f"User {balance.user_id} appears more than once in the balances"
            )
        seen.add(balance.user_id)

    residual = sum(b.net_balance for b in balances)
    if residual != 0:
        raise UnbalancedLedgerError(
            f"Balances must sum to zero to be settled, got {residual} cents"
        )


def net_balances(balances: Sequence[UserBalance]) -> list[NettedEdge]:
    """
    Convert user balances into settlement transfers.

    Steps:
    1. Split users into creditors (net > 0) and debtors (net < 0)
    2. Sort both sides largest first
    3. Match the current largest creditor with the current largest debtor
       for min(creditor, debtor) and advance whichever side reached zero
    4. Stop when either side runs out

    Args:
        balances: Net positions, one per user, summing to zero

    Returns:
        Transfers (debtor -> creditor); empty when everyone is already square

    Raises:
        UnbalancedLedgerError: If balances repeat a user or do not sum to zero
    """
    _check_balances(balances)

    creditors = _sorted_positions(
        [_Position(b.user_id, b.net_balance) for b in balances if b.net_balance > 0]
    )
    debtors = _sorted_positions(
        [_Position(b.user_id, -b.net_balance) for b in balances if b.net_balance < 0]
    )

    edges: list[NettedEdge] = []
    i = 0  # creditor index
    j = 0  # debtor index

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        if creditor.user_id == debtor.user_id:
            raise SelfSettlementError(creditor.user_id)

        amount = min(creditor.amount, debtor.amount)
        if amount > 0:
            edges.append(
                NettedEdge(
                    from_user_id=debtor.user_id,
                    to_user_id=creditor.user_id,
                    amount_cents=amount,
                )
            )

        creditor.amount -= amount
        debtor.amount -= amount

        if creditor.amount == 0:
            i += 1
        if debtor.amount == 0:
            j += 1

    logger.debug(
        f"Netted {len(creditors)} creditors and {len(debtors)} debtors "
        f"into {len(edges)} transfers"
    )

    return edges


def settle_expenses(
    expenses: Sequence[Expense], participants: Sequence[ExpenseParticipant]
) -> list[NettedEdge]:
    """Aggregate balances for a set of expenses and net them into transfers."""
    return net_balances(aggregate_balances(expenses, participants))
