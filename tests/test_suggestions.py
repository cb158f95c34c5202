"""Tests for history-based split suggestions."""

from decimal import Decimal

import pytest

from group_ledger.split.calculator import calculate_split
from group_ledger.split.policies import EqualSplit, PercentageSplit
from group_ledger.split.suggestions import SplitHistory, generate_split_suggestions
from group_ledger.split.validator import validate_split

MEMBERS = ["alice", "bob", "charlie"]


@pytest.fixture
def history():
    """Alice and Bob usually share groceries; Alice takes part most often."""
    return SplitHistory(
        category_patterns={"groceries": ["alice", "bob"]},
        user_frequency={"alice": 2, "bob": 1, "charlie": 1},
    )


def test_equal_split_always_first():
    """With no history only the equal split is offered."""
    suggestions = generate_split_suggestions(3000, MEMBERS)

    assert len(suggestions) == 1
    assert suggestions[0].kind == "equal"
    assert isinstance(suggestions[0].split, EqualSplit)
    assert [p.user_id for p in suggestions[0].split.participants] == MEMBERS


def test_category_and_frequency_suggestions(history):
    """History adds a usual-participants split and a weighted split."""
    suggestions = generate_split_suggestions(3000, MEMBERS, "groceries", history)

    assert [s.kind for s in suggestions] == ["equal", "custom", "weighted"]

    custom = suggestions[1]
    assert "groceries" in custom.description
    assert [p.user_id for p in custom.split.participants] == ["alice", "bob"]

    weighted = suggestions[2].split
    assert isinstance(weighted, PercentageSplit)
    assert [p.share_percentage for p in weighted.participants] == [
        Decimal("50.0"),
        Decimal("25.0"),
        Decimal("25.0"),
    ]


def test_category_covering_everyone_is_skipped(history):
    """A usual group equal to all members adds nothing over the equal split."""
    history.category_patterns["rent"] = MEMBERS

    suggestions = generate_split_suggestions(3000, MEMBERS, "rent", history)

    assert [s.kind for s in suggestions] == ["equal", "weighted"]


def test_unknown_category(history):
    """A category with no pattern gives no custom suggestion."""
    suggestions = generate_split_suggestions(3000, MEMBERS, "travel", history)
    assert "custom" not in [s.kind for s in suggestions]


def test_no_frequency_no_weighted_split():
    """All-zero frequencies cannot be weighted."""
    history = SplitHistory(user_frequency={"alice": 0})

    suggestions = generate_split_suggestions(3000, MEMBERS, history=history)

    assert [s.kind for s in suggestions] == ["equal"]


def test_weighted_thirds_need_auto_fix():
    """Three equal weights round to 33.3% each and are repaired before use."""
    history = SplitHistory(user_frequency={u: 1 for u in MEMBERS})
    weighted = generate_split_suggestions(1000, MEMBERS, history=history)[-1].split

    assert not validate_split(1000, weighted).is_valid

    fixed = validate_split(1000, weighted, auto_fix=True)
    assert fixed.is_valid
    assert sum(r.share_cents for r in calculate_split(1000, fixed.adjusted_split)) == 1000
