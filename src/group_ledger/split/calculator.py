"""Core split calculation: turn a total and a policy into exact cent shares.

Every function here returns shares that sum to the total exactly. Remainder
placement differs per policy and callers may depend on it:

- equal: the first ``total % n`` participants get one extra cent
- percentage / shares: the last participant absorbs all rounding
- exact: nothing is redistributed; a mismatch is an error
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

from ..exceptions import (
    EmptyParticipantSetError,
    ExactSumMismatchError,
    InvalidAmountError,
    InvalidShareCountError,
    PercentageSumMismatchError,
    SplitError,
    UnknownSplitPolicyError,
)
from ..models import SplitResult
from ..money import round_half_up, sum_cents
from .policies import (
    EqualSplit,
    ExactParticipant,
    ExactSplit,
    PercentageParticipant,
    PercentageSplit,
    SharesParticipant,
    SharesSplit,
    Split,
    parse_split,
)

logger = logging.getLogger(__name__)

PERCENTAGE_TOLERANCE = Decimal("0.01")
DEFAULT_SHARE_COUNT = 1


def require_positive_total(total_cents: int) -> None:
    """
    Check that an expense total is a whole number of cents >= 1.

    Raises:
        InvalidAmountError: If the total is not an int or is below 1 cent
    """
    if isinstance(total_cents, bool) or not isinstance(total_cents, int):
        raise InvalidAmountError(
            f"Expense total must be an integer number of cents, got {total_cents!r}"
        )
    if total_cents < 1:
        raise InvalidAmountError(
            f"Expense total must be at least 1 cent, got {total_cents}"
        )


def percentage_total(participants: Sequence[PercentageParticipant]) -> Decimal:
    """Sum participant percentages."""
    return sum((p.share_percentage for p in participants), Decimal("0"))


def percentages_balanced(participants: Sequence[PercentageParticipant]) -> bool:
    """Whether percentages sum to 100 within PERCENTAGE_TOLERANCE."""
    return abs(percentage_total(participants) - 100) <= PERCENTAGE_TOLERANCE


def effective_share_count(participant: SharesParticipant) -> int:
    """Share count with the default applied for omitted weights."""
    if participant.share_count is None:
        return DEFAULT_SHARE_COUNT
    return participant.share_count


def _check_participants(participants: Sequence[Any]) -> None:
    if not participants:
        raise EmptyParticipantSetError()


def _assign_remainder_to_last(
    total_cents: int, user_ids: list[str], rounded: list[int]
) -> list[SplitResult]:
    """
    Build results where every participant but the last keeps its rounded
    amount and the last one receives whatever is left.

    Raises:
        SplitError: If rounding leaves the last participant a negative share
    """
    allocated = sum(rounded[:-1])
    last_share = total_cents - allocated
    if last_share < 0:
        raise SplitError(
            f"Rounding leaves user {user_ids[-1]} with a negative share "
            f"({last_share} cents); the total of {total_cents} cents is too "
            f"small for this split"
        )

    shares = rounded[:-1] + [last_share]
    return [
        SplitResult(user_id=user_id, share_cents=share)
        for user_id, share in zip(user_ids, shares, strict=True)
    ]


def calculate_equal_split(
    total_cents: int, participant_ids: Sequence[str]
) -> list[SplitResult]:
    """
    Split a total evenly among participants.

    Uses floor division and hands the remaining cents, one each, to the first
    ``total % n`` participants in input order.

    Args:
        total_cents: Expense total in cents (>= 1)
        participant_ids: User IDs in the order that decides remainder placement

    Returns:
        One result per participant, summing to total_cents
    """
    require_positive_total(total_cents)
    _check_participants(participant_ids)

    count = len(participant_ids)
    base_amount, remainder = divmod(total_cents, count)

    logger.debug(
        f"Equal split of {total_cents} cents among {count} participants "
        f"(base {base_amount}, remainder {remainder})"
    )

    return [
        SplitResult(
            user_id=user_id,
            share_cents=base_amount + (1 if index < remainder else 0),
        )
        for index, user_id in enumerate(participant_ids)
    ]


def calculate_percentage_split(
    total_cents: int, participants: Sequence[PercentageParticipant]
) -> list[SplitResult]:
    """
    Split a total by percentage.

    Every participant except the last gets ``round(total * pct / 100)``
    (half-up); the last participant gets the remainder.

    Raises:
        PercentageSumMismatchError: If percentages are not 100 within 0.01
    """
    require_positive_total(total_cents)
    _check_participants(participants)

    total_percentage = percentage_total(participants)
    if abs(total_percentage - 100) > PERCENTAGE_TOLERANCE:
        raise PercentageSumMismatchError(
            f"Percentages must sum to 100%, got {total_percentage}%"
        )

    rounded = [
        round_half_up(Decimal(total_cents) * p.share_percentage / 100)
        for p in participants
    ]

    logger.debug(
        f"Percentage split of {total_cents} cents among "
        f"{len(participants)} participants ({total_percentage}%)"
    )

    return _assign_remainder_to_last(
        total_cents, [p.user_id for p in participants], rounded
    )


def calculate_share_split(
    total_cents: int, participants: Sequence[SharesParticipant]
) -> list[SplitResult]:
    """
    Split a total by integer share weights (e.g. 2 shares, 1 share, 3 shares).

    Omitted weights count as 1. Every participant except the last gets
    ``round(total * shares / total_shares)`` (half-up); the last participant
    gets the remainder.

    Raises:
        InvalidShareCountError: If any share count is zero or negative
    """
    require_positive_total(total_cents)
    _check_participants(participants)

    counts = [effective_share_count(p) for p in participants]
    for participant, count in zip(participants, counts, strict=True):
        if count <= 0:
            raise InvalidShareCountError(
                f"Share count for user {participant.user_id} must be a "
                f"positive integer, got {count}"
            )

    total_shares = sum(counts)
    rounded = [
        round_half_up(Decimal(total_cents * count) / Decimal(total_shares))
        for count in counts
    ]

    logger.debug(
        f"Share split of {total_cents} cents across {total_shares} shares "
        f"among {len(participants)} participants"
    )

    return _assign_remainder_to_last(
        total_cents, [p.user_id for p in participants], rounded
    )


def calculate_exact_split(
    total_cents: int, participants: Sequence[ExactParticipant]
) -> list[SplitResult]:
    """
    Accept caller-supplied cent amounts after checking they sum to the total.

    Raises:
        ExactSumMismatchError: If the amounts differ from the total by any amount
    """
    require_positive_total(total_cents)
    _check_participants(participants)

    split_total = sum_cents(p.share_cents for p in participants)
    if split_total != total_cents:
        raise ExactSumMismatchError(total_cents, split_total)

    return [
        SplitResult(user_id=p.user_id, share_cents=p.share_cents)
        for p in participants
    ]


def calculate_split(
    total_cents: int, split: Split | Mapping[str, Any]
) -> list[SplitResult]:
    """
    Main split calculation function.

    Args:
        total_cents: Expense total in cents (>= 1)
        split: A split policy variant, or raw data accepted by parse_split

    Returns:
        Per-participant shares whose sum equals total_cents exactly

    Raises:
        SplitError: Any split failure (see the specific subclasses)
        InvalidAmountError: If the total is below 1 cent
    """
    split = parse_split(split)

    if isinstance(split, EqualSplit):
        results = calculate_equal_split(
            total_cents, [p.user_id for p in split.participants]
        )
    elif isinstance(split, PercentageSplit):
        results = calculate_percentage_split(total_cents, split.participants)
    elif isinstance(split, SharesSplit):
        results = calculate_share_split(total_cents, split.participants)
    elif isinstance(split, ExactSplit):
        results = calculate_exact_split(total_cents, split.participants)
    else:
        raise UnknownSplitPolicyError(getattr(split, "policy", type(split).__name__))

    final_total = sum_cents(r.share_cents for r in results)
    if final_total != total_cents:
        raise SplitError(
            f"Split sums to {final_total} cents, expected {total_cents} cents"
        )

    return results
