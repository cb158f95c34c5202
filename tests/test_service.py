"""Tests for LedgerService layer."""

import hashlib

import pytest
from pydantic import ValidationError

from group_ledger.config import Settings
from group_ledger.exceptions import (
    CurrencyMismatchError,
    ExactSumMismatchError,
    InvalidAmountError,
)
from group_ledger.models import ExpenseRequest, LedgerDocument, NettedEdge
from group_ledger.settle.service import LedgerService, compute_plan_hash


@pytest.fixture
def settings():
    """Create settings that ignore the environment and any .env file."""
    return Settings(_env_file=None, default_currency="USD")


@pytest.fixture
def service(settings):
    """Create a LedgerService instance."""
    return LedgerService(settings)


@pytest.fixture
def dinner_and_movies():
    """Alice paid $60 dinner for three, Bob paid $30 movies for two."""
    return LedgerDocument.model_validate(
        {
            "currency": "USD",
            "expenses": [
                {
                    "id": "dinner",
                    "payer_id": "alice",
                    "amount_cents": 6000,
                    "date": "2024-01-15T19:00:00",
                    "description": "Dinner",
                    "split": {
                        "policy": "equal",
                        "participants": [
                            {"user_id": "alice"},
                            {"user_id": "bob"},
                            {"user_id": "charlie"},
                        ],
                    },
                },
                {
                    "id": "movies",
                    "payer_id": "bob",
                    "amount_cents": 3000,
                    "date": "2024-01-16T20:00:00",
                    "split": {
                        "policy": "EQUAL",
                        "participants": [{"user_id": "alice"}, {"user_id": "bob"}],
                    },
                },
            ],
        }
    )


def exact_request(*shares: int, amount_cents: int = 1000) -> ExpenseRequest:
    """Create an exact-split request for alice, bob, ..."""
    users = ["alice", "bob", "charlie"]
    return ExpenseRequest.model_validate(
        {
            "id": "taxi",
            "payer_id": "alice",
            "amount_cents": amount_cents,
            "split": {
                "policy": "exact",
                "participants": [
                    {"user_id": users[i], "share_cents": s} for i, s in enumerate(shares)
                ],
            },
        }
    )


class TestBuildReport:
    """Tests for the full expenses -> transfers pipeline."""

    def test_dinner_and_movies(self, service, dinner_and_movies):
        """Charlie and Bob both pay Alice."""
        report = service.build_report(dinner_and_movies)

        assert report.currency == "USD"
        assert report.group_total == 9000
        assert {b.user_id: b.net_balance for b in report.balances} == {
            "alice": 2500,
            "bob": -500,
            "charlie": -2000,
        }
        assert report.edges == [
            NettedEdge(from_user_id="charlie", to_user_id="alice", amount_cents=2000),
            NettedEdge(from_user_id="bob", to_user_id="alice", amount_cents=500),
        ]
        assert report.warnings == []

    def test_shares_are_resolved(self, service, dinner_and_movies):
        """Every resolved share is reported against its expense."""
        report = service.build_report(dinner_and_movies)

        dinner = [p.share_cents for p in report.participants if p.expense_id == "dinner"]
        assert dinner == [2000, 2000, 2000]

    def test_plan_hash_is_deterministic(self, service, dinner_and_movies):
        """Same ledger, same hash."""
        first = service.build_report(dinner_and_movies)
        second = service.build_report(dinner_and_movies)

        assert first.plan_hash == second.plan_hash
        assert len(first.plan_hash) == 64
        assert all(c in "0123456789abcdef" for c in first.plan_hash)

    def test_empty_ledger(self, service):
        """No expenses: nothing to settle."""
        report = service.build_report(LedgerDocument())

        assert report.group_total == 0
        assert report.balances == []
        assert report.edges == []
        assert report.plan_hash == hashlib.sha256(b"").hexdigest()

    def test_default_currency(self):
        """A ledger without a currency uses the configured default."""
        service = LedgerService(Settings(_env_file=None, default_currency="cad"))

        report = service.build_report(LedgerDocument())

        assert report.currency == "CAD"


class TestResolveDocument:
    """Tests for per-document checks."""

    def test_currency_mismatch(self, service, dinner_and_movies):
        """An expense in another currency is rejected, not converted."""
        euro = dinner_and_movies.expenses[1].model_copy(update={"currency": "eur"})
        document = LedgerDocument(currency="usd", expenses=[euro])

        with pytest.raises(CurrencyMismatchError, match="EUR"):
            service.resolve_document(document)

    @pytest.mark.parametrize("field", ["ledger", "expense"])
    @pytest.mark.parametrize("code", ["EURO", "US", "U$D"])
    def test_bad_currency_code_rejected_on_load(self, field, code):
        """Malformed currency codes fail when the ledger is read, not mid-report."""
        expense = {
            "id": "hotel",
            "payer_id": "alice",
            "amount_cents": 1000,
            "split": {"policy": "equal", "participants": [{"user_id": "bob"}]},
        }
        document = {"currency": "USD", "expenses": [expense]}
        if field == "ledger":
            document["currency"] = code
        else:
            expense["currency"] = code

        with pytest.raises(ValidationError, match="3-letter code"):
            LedgerDocument.model_validate(document)

    def test_lower_case_currency_normalized(self):
        """Currency codes are upper-cased on load."""
        document = LedgerDocument.model_validate({"currency": "eur"})
        assert document.currency == "EUR"

    def test_expense_currency_matching_ledger(self, service, dinner_and_movies):
        """Naming the ledger's own currency on an expense is fine."""
        usd = dinner_and_movies.expenses[0].model_copy(update={"currency": "usd"})

        currency, expenses, _, _ = service.resolve_document(
            LedgerDocument(currency="USD", expenses=[usd])
        )

        assert currency == "USD"
        assert expenses[0].currency == "USD"


class TestResolveExpense:
    """Tests for resolving one submitted expense."""

    def test_exact_mismatch_fails_by_default(self, service):
        """Without auto-fix an exact split that is $1 short is an error."""
        with pytest.raises(ExactSumMismatchError):
            service.resolve_expense(exact_request(600, 300))

    def test_exact_mismatch_auto_fixed(self):
        """With auto-fix the difference goes to the first participant."""
        service = LedgerService(Settings(_env_file=None, auto_fix_splits=True))

        expense, shares, warnings = service.resolve_expense(exact_request(600, 300))

        assert expense.amount_cents == 1000
        assert [s.share_cents for s in shares] == [700, 300]
        assert len(warnings) == 1
        assert warnings[0].startswith("Expense taxi: ")
        assert "alice" in warnings[0]

    def test_zero_amount(self, service):
        """An expense must be at least one cent."""
        with pytest.raises(InvalidAmountError):
            service.resolve_expense(exact_request(0, amount_cents=0))

    def test_currency_falls_back_to_settings(self, service):
        """With no request or document currency, settings decide."""
        expense, _, _ = service.resolve_expense(exact_request(500, 500))
        assert expense.currency == "USD"


def test_compute_plan_hash_depends_on_order():
    """Edges are hashed in emitted order."""
    a = NettedEdge(from_user_id="bob", to_user_id="alice", amount_cents=100)
    b = NettedEdge(from_user_id="carol", to_user_id="alice", amount_cents=200)

    assert compute_plan_hash([a, b]) == compute_plan_hash([a, b])
    assert compute_plan_hash([a, b]) != compute_plan_hash([b, a])
