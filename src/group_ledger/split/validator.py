"""Pre-flight validation (and optional repair) of caller-supplied split data.

The validator never raises for bad split data and never mutates its input.
With auto_fix it returns a corrected copy in ``adjusted_split``; the caller
decides whether to use it before calling the calculator.

Correction placement differs per policy:

- percentage: the shortfall/excess is spread evenly over all participants
- shares: each missing or non-positive count becomes 1
- exact: the whole difference is added to the first participant
"""

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel, Field

from ..exceptions import InvalidAmountError, SplitError
from ..money import sum_cents, to_decimal
from .calculator import PERCENTAGE_TOLERANCE, percentage_total, require_positive_total
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

# Precision of auto-adjusted percentages; the sum check tolerance absorbs it
ADJUSTED_PERCENTAGE_PLACES = Decimal("0.0001")


class SplitValidationResult(BaseModel):
    """Outcome of validating a split."""

    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    adjusted_split: Split | None = None  # only set when auto-fix changed something

    def fail(self, message: str) -> "SplitValidationResult":
        """Record an error and mark the result invalid."""
        self.errors.append(message)
        self.is_valid = False
        return self


def validate_split(
    total_cents: int,
    split: Split | Mapping[str, Any],
    auto_fix: bool = False,
) -> SplitValidationResult:
    """
    Validate and optionally fix split data before calculation.

    Args:
        total_cents: Expense total in cents
        split: A split policy variant, or raw data accepted by parse_split
        auto_fix: Whether to return a corrected split instead of failing

    Returns:
        Validation result; ``adjusted_split`` holds the correction if one
        was applied
    """
    result = SplitValidationResult()

    try:
        split = parse_split(split)
    except SplitError as e:
        return result.fail(str(e))

    if not split.participants:
        return result.fail("At least one participant is required")

    try:
        require_positive_total(total_cents)
    except InvalidAmountError as e:
        return result.fail(str(e))

    if isinstance(split, EqualSplit):
        # Equal splits carry no caller-supplied weights
        return result
    if isinstance(split, PercentageSplit):
        return _validate_percentage_split(split, auto_fix, result)
    if isinstance(split, SharesSplit):
        return _validate_share_split(split, auto_fix, result)
    if isinstance(split, ExactSplit):
        return _validate_exact_split(total_cents, split, auto_fix, result)

    return result.fail(f"Unknown split type: {getattr(split, 'policy', split)}")


def _validate_percentage_split(
    split: PercentageSplit, auto_fix: bool, result: SplitValidationResult
) -> SplitValidationResult:
    total_percentage = percentage_total(split.participants)
    if abs(total_percentage - 100) <= PERCENTAGE_TOLERANCE:
        return result

    problem = f"Percentages sum to {total_percentage}%, must equal 100%"
    if not auto_fix:
        return result.fail(problem)

    adjustment = (Decimal(100) - total_percentage) / len(split.participants)
    adjusted = [
        (p.share_percentage + adjustment).quantize(
            ADJUSTED_PERCENTAGE_PLACES, rounding=ROUND_HALF_UP
        )
        for p in split.participants
    ]
    # Rounding residual goes to the last participant so the sum is exactly 100
    adjusted[-1] += Decimal(100) - sum(adjusted)

    out_of_range = [
        p.user_id
        for p, value in zip(split.participants, adjusted, strict=True)
        if not Decimal(0) <= value <= Decimal(100)
    ]
    if out_of_range:
        result.fail(problem)
        return result.fail(
            f"Cannot auto-adjust percentages: users {', '.join(out_of_range)} "
            f"would fall outside 0-100%"
        )

    result.adjusted_split = PercentageSplit(
        participants=[
            PercentageParticipant(user_id=p.user_id, share_percentage=value)
            for p, value in zip(split.participants, adjusted, strict=True)
        ]
    )
    result.warnings.append(f"{problem}; auto-adjusted to sum to 100%")
    logger.info(
        f"Auto-adjusted percentages by {adjustment:.4f}% per participant"
    )

    return result


def _validate_share_split(
    split: SharesSplit, auto_fix: bool, result: SplitValidationResult
) -> SplitValidationResult:
    invalid_users = [
        p.user_id
        for p in split.participants
        if p.share_count is None or p.share_count <= 0
    ]
    if not invalid_users:
        return result

    problem = "All participants must have a positive share count"
    if not auto_fix:
        return result.fail(f"{problem} (invalid: {', '.join(invalid_users)})")

    result.adjusted_split = SharesSplit(
        participants=[
            SharesParticipant(
                user_id=p.user_id,
                share_count=(
                    p.share_count
                    if p.share_count is not None and p.share_count > 0
                    else 1
                ),
            )
            for p in split.participants
        ]
    )
    result.warnings.append(
        f"Invalid share counts set to 1 for: {', '.join(invalid_users)}"
    )
    logger.info(f"Auto-fixed share counts for {len(invalid_users)} participants")

    return result


def _validate_exact_split(
    total_cents: int,
    split: ExactSplit,
    auto_fix: bool,
    result: SplitValidationResult,
) -> SplitValidationResult:
    split_total = sum_cents(p.share_cents for p in split.participants)
    difference = total_cents - split_total
    if difference == 0:
        return result

    problem = (
        f"Split amounts sum to {to_decimal(split_total)}, "
        f"must equal {to_decimal(total_cents)}"
    )
    if not auto_fix:
        return result.fail(problem)

    first = split.participants[0]
    corrected_first = first.share_cents + difference
    if corrected_first < 0:
        result.fail(problem)
        return result.fail(
            f"Cannot auto-adjust: user {first.user_id} would owe "
            f"{corrected_first} cents"
        )

    result.adjusted_split = ExactSplit(
        participants=[
            ExactParticipant(user_id=first.user_id, share_cents=corrected_first),
            *split.participants[1:],
        ]
    )
    result.warnings.append(
        f"{problem}; difference of {difference} cents applied to user "
        f"{first.user_id}"
    )
    logger.info(
        f"Applied exact split adjustment: {difference} cents to user {first.user_id}"
    )

    return result
