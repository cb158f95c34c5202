"""Custom exceptions for Group Ledger."""


class LedgerError(Exception):
    """Base exception for all Group Ledger errors."""

    pass


class ConfigurationError(LedgerError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidAmountError(LedgerError):
    """Raised when a monetary amount is missing, non-numeric or out of range."""

    pass


# ============================================================================
# Split errors
# ============================================================================


class SplitError(LedgerError):
    """Base class for errors raised while splitting an expense."""

    pass


class EmptyParticipantSetError(SplitError):
    """Raised when a split has no participants."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "At least one participant is required")


class UnknownSplitPolicyError(SplitError):
    """Raised when a split policy tag is not recognised."""

    def __init__(self, policy: object, message: str | None = None):
        self.policy = policy
        super().__init__(message or f"Unknown split type: {policy}")


class InvalidSplitInputError(SplitError):
    """Raised when caller-supplied split data does not match any policy shape."""

    pass


class PercentageSumMismatchError(SplitError):
    """Raised when split percentages do not sum to 100."""

    pass


class InvalidShareCountError(SplitError):
    """Raised when a share-based split has a non-positive share count."""

    pass


class ExactSumMismatchError(SplitError):
    """Raised when exact split amounts do not add up to the expense total."""

    def __init__(self, total_cents: int, split_cents: int):
        self.total_cents = total_cents
        self.split_cents = split_cents
        super().__init__(
            f"exact mismatch: split amounts sum to {split_cents} cents, "
            f"expense total is {total_cents} cents "
            f"(difference: {total_cents - split_cents})"
        )


# ============================================================================
# Ledger errors
# ============================================================================


class ShareSumMismatchError(LedgerError):
    """Raised when an expense's stored shares do not add up to its amount."""

    def __init__(self, expense_id: str, message: str):
        self.expense_id = expense_id
        super().__init__(message)


class CurrencyMismatchError(LedgerError):
    """Raised when one computation mixes expenses in different currencies."""

    pass


class SettlementError(LedgerError):
    """Base class for errors raised while netting balances."""

    pass


class SelfSettlementError(SettlementError):
    """Raised when a transfer would go from a user to themselves."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} cannot settle with themselves")


class UnbalancedLedgerError(SettlementError):
    """Raised when balances handed to the netting engine do not sum to zero."""

    pass
