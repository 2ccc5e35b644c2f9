"""Monetary helpers shared across domains.

Amounts are stored as floats rounded to cents; every computed amount
(commission, totals, balances) passes through ``to_money`` before it is
persisted or compared.
"""

VALID_CURRENCIES = frozenset(
    {
        "USD",
        "EUR",
        "GBP",
        "CAD",
        "AUD",
        "MXN",
        "BRL",
        "INR",
    }
)

DEFAULT_CURRENCY = "USD"


def to_money(value) -> float:
    """Round a numeric amount to cents."""
    return round(float(value or 0.0), 2)


def is_valid_currency(code) -> bool:
    return isinstance(code, str) and code in VALID_CURRENCIES
