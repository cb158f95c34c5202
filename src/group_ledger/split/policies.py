"""Split policy variants.

Each policy is its own model carrying only the participant data that policy
uses, so a percentage on an exact split cannot be expressed at all.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..exceptions import InvalidSplitInputError, UnknownSplitPolicyError

POLICY_TAGS = ("equal", "percentage", "shares", "exact")

# ============================================================================
# Participants
# ============================================================================


class EqualParticipant(BaseModel):
    """Participant in an equal split."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str


class PercentageParticipant(BaseModel):
    """Participant in a percentage split."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str
    share_percentage: Decimal = Field(ge=0, le=100)


class SharesParticipant(BaseModel):
    """Participant in a share-weighted split.

    share_count is left unconstrained here so the validator can report (and
    optionally repair) missing or non-positive weights.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str
    share_count: int | None = None  # None means 1


class ExactParticipant(BaseModel):
    """Participant in an exact split."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str
    share_cents: int = Field(ge=0)


# ============================================================================
# Policies
# ============================================================================


class EqualSplit(BaseModel):
    """Divide the total evenly; leftover cents go to the first participants."""

    model_config = ConfigDict(frozen=True)

    policy: Literal["equal"] = "equal"
    participants: list[EqualParticipant]


class PercentageSplit(BaseModel):
    """Divide the total by percentage; the last participant absorbs rounding."""

    model_config = ConfigDict(frozen=True)

    policy: Literal["percentage"] = "percentage"
    participants: list[PercentageParticipant]


class SharesSplit(BaseModel):
    """Divide the total by integer weights; the last participant absorbs rounding."""

    model_config = ConfigDict(frozen=True)

    policy: Literal["shares"] = "shares"
    participants: list[SharesParticipant]


class ExactSplit(BaseModel):
    """Use caller-supplied cent amounts verbatim."""

    model_config = ConfigDict(frozen=True)

    policy: Literal["exact"] = "exact"
    participants: list[ExactParticipant]


Split = Annotated[
    EqualSplit | PercentageSplit | SharesSplit | ExactSplit,
    Field(discriminator="policy"),
]

SPLIT_TYPES = (EqualSplit, PercentageSplit, SharesSplit, ExactSplit)

_SPLIT_ADAPTER: TypeAdapter[Split] = TypeAdapter(Split)


def normalize_policy_tag(data: Any) -> Any:
    """Lower-case the policy tag of raw split data ("EQUAL" -> "equal")."""
    if isinstance(data, Mapping) and isinstance(data.get("policy"), str):
        return {**data, "policy": data["policy"].strip().lower()}
    return data


def parse_split(data: Mapping[str, Any] | Split) -> Split:
    """
    Build a split policy from untrusted data.

    Args:
        data: A mapping like {"policy": "shares", "participants": [...]},
              or an already-built split (returned unchanged)

    Returns:
        The matching split variant

    Raises:
        UnknownSplitPolicyError: If the policy tag is missing or unknown
        InvalidSplitInputError: If participant data does not fit the policy
    """
    if isinstance(data, SPLIT_TYPES):
        return data
    if not isinstance(data, Mapping):
        raise InvalidSplitInputError(
            f"Split must be a mapping, got {type(data).__name__}"
        )

    normalized = normalize_policy_tag(data)
    policy = normalized.get("policy")
    if policy not in POLICY_TAGS:
        raise UnknownSplitPolicyError(policy)

    try:
        return _SPLIT_ADAPTER.validate_python(normalized)
    except ValidationError as e:
        raise InvalidSplitInputError(f"Invalid {policy} split: {e}") from e
