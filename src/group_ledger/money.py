"""Integer-cent money helpers.

Every amount inside the ledger is an ``int`` count of cents. Decimal values
only appear at the edges: parsing user input and formatting for display.
"""

import re
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .exceptions import InvalidAmountError

CENTS_PER_UNIT = 100

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "NZD": "NZ$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "CN¥",
    "INR": "₹",
    "KRW": "₩",
    "BRL": "R$",
    "MXN": "MX$",
}

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def round_half_up(value: Decimal) -> int:
    """
    Round a Decimal to the nearest integer, halves away from zero.

    Args:
        value: The value to round

    Returns:
        Rounded integer
    """
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_cents(amount: Decimal | int | str | float) -> int:
    """
    Convert a decimal currency amount to integer cents.

    Uses ROUND_HALF_UP at the hundredths place, so 0.005 becomes 1 cent and
    -0.005 becomes -1 cent. Floats are converted through ``str()`` so their
    binary representation never leaks into the result.

    Args:
        amount: Amount in major units (e.g. dollars)

    Returns:
        Amount in cents

    Raises:
        InvalidAmountError: If the amount is not a finite number
    """
    if isinstance(amount, bool):
        raise InvalidAmountError(f"Not a valid amount: {amount!r}")

    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        if not value.is_finite():
            raise InvalidAmountError(f"Amount must be finite: {amount!r}")
        return round_half_up(value * CENTS_PER_UNIT)
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Not a valid amount: {amount!r}") from e


def to_decimal(cents: int) -> Decimal:
    """Convert integer cents to an exact two-place Decimal for display."""
    if isinstance(cents, bool) or not isinstance(cents, int):
        raise InvalidAmountError(f"Cents must be an integer, got {cents!r}")
    return Decimal(cents).scaleb(-2)


def sum_cents(amounts: Iterable[int]) -> int:
    """
    Sum cent amounts exactly.

    Raises:
        InvalidAmountError: If any amount is not an integer
    """
    total = 0
    for amount in amounts:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmountError(f"Cents must be an integer, got {amount!r}")
        total += amount
    return total


def validate_split_total(total_cents: int, split_cents: Iterable[int]) -> bool:
    """Check that split amounts add up to the expense total exactly."""
    return sum_cents(split_cents) == total_cents


def normalize_currency_code(code: str) -> str:
    """
    Upper-case an ISO-style currency code.

    Raises:
        ValueError: If the code is not exactly three letters
    """
    if len(code) != 3 or not code.isalpha():
        raise ValueError(f"Currency must be a 3-letter code, got {code!r}")
    return code.upper()


def currency_symbol(currency: str = "USD") -> str:
    """Get the display symbol for an ISO currency code."""
    code = currency.upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def format_money(cents: int, currency: str = "USD", accounting: bool = False) -> str:
    """
    Format cents as a currency string.

    Display only: the result must never be parsed back for further arithmetic.

    Examples:
        format_money(123456)                   -> "$1,234.56"
        format_money(-500)                     -> "-$5.00"
        format_money(-500, accounting=True)    -> "($5.00)"
        format_money(1000, currency="EUR")     -> "€10.00"
    """
    amount = to_decimal(cents)
    formatted = f"{currency_symbol(currency)}{abs(amount):,.2f}"
    if cents < 0:
        return f"({formatted})" if accounting else f"-{formatted}"
    return formatted


def parse_money(text: str) -> int:
    """
    Parse user-facing money text like "$1,234.56" or "($5.00)" into cents.

    Raises:
        InvalidAmountError: If no number can be read from the text
    """
    stripped = text.strip()
    negative = stripped.startswith("(") and stripped.endswith(")")
    numeric = _NON_NUMERIC.sub("", stripped)
    if not numeric or numeric in ("-", ".", "-."):
        raise InvalidAmountError(f"Not a valid amount: {text!r}")

    cents = to_cents(numeric)
    return -abs(cents) if negative else cents
