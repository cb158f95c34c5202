"""Smart split suggestions based on a group's history."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from pydantic import BaseModel, Field

from .policies import (
    EqualParticipant,
    EqualSplit,
    PercentageParticipant,
    PercentageSplit,
    Split,
)

logger = logging.getLogger(__name__)


class SplitHistory(BaseModel):
    """What a group usually does, as tracked by the caller."""

    category_patterns: dict[str, list[str]] = Field(default_factory=dict)  # category -> usual participants
    user_frequency: dict[str, int] = Field(default_factory=dict)  # user -> participation count


class SplitSuggestion(BaseModel):
    """A candidate split to offer when an expense is being entered."""

    kind: Literal["equal", "custom", "weighted"]
    description: str
    split: Split


def _equal_among(user_ids: list[str]) -> EqualSplit:
    return EqualSplit(participants=[EqualParticipant(user_id=u) for u in user_ids])


def generate_split_suggestions(
    total_cents: int,
    available_user_ids: list[str],
    expense_category: str | None = None,
    history: SplitHistory | None = None,
) -> list[SplitSuggestion]:
    """
    Generate split suggestions for a new expense.

    The weighted suggestion rounds each percentage to one decimal, so it may
    miss 100% by a little. Run it through validate_split(auto_fix=True)
    before calculating.

    Args:
        total_cents: Expense total in cents
        available_user_ids: Group members who could take part
        expense_category: Optional category of the new expense
        history: Optional group history

    Returns:
        Suggestions, always starting with an equal split among everyone
    """
    suggestions = [
        SplitSuggestion(
            kind="equal",
            description="Split equally among all members",
            split=_equal_among(available_user_ids),
        )
    ]

    if history is None:
        return suggestions

    # Category-based suggestion
    usual = history.category_patterns.get(expense_category or "")
    if usual:
        relevant_users = [u for u in available_user_ids if u in usual]
        if 0 < len(relevant_users) < len(available_user_ids):
            suggestions.append(
                SplitSuggestion(
                    kind="custom",
                    description=f"Split among usual {expense_category} participants",
                    split=_equal_among(relevant_users),
                )
            )

    # Frequency-based weighted split
    total_frequency = sum(history.user_frequency.values())
    if total_frequency > 0:
        participants = []
        for user_id in available_user_ids:
            frequency = history.user_frequency.get(user_id, 0)
            percentage = Decimal(frequency * 100) / Decimal(total_frequency)
            participants.append(
                PercentageParticipant(
                    user_id=user_id,
                    share_percentage=percentage.quantize(
                        Decimal("0.1"), rounding=ROUND_HALF_UP
                    ),
                )
            )
        suggestions.append(
            SplitSuggestion(
                kind="weighted",
                description="Weight by participation frequency",
                split=PercentageSplit(participants=participants),
            )
        )

    logger.debug(
        f"Generated {len(suggestions)} split suggestions for {total_cents} cents"
    )

    return suggestions
