"""
Module: recognition_kernel.db.types
Responsibility: Annotated type aliases and utility functions for financial-grade
    column types.  Centralizes precision, rounding, and currency validation so
    that every model and service uses identical definitions.
Architecture position: Kernel > DB.  May be imported by domain/, services/,
    selectors/ and outer packages.  MUST NOT import from any of those.

Invariants enforced:
    - No floats anywhere.  All monetary amounts use Decimal with explicit
      precision.
    - round_money() is the ONLY sanctioned rounding function for monetary
      values; round_money_down() is its truncating sibling used when a
      remainder must be carried elsewhere.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String

# Monetary amount with high precision
Money = Annotated[Decimal, Numeric(38, 9)]

# ISO 4217 currency code (e.g., "USD", "IDR")
Currency = Annotated[str, String(3)]

# Short identifier strings
ShortCode = Annotated[str, String(50)]

# Long text for descriptions
LongText = Annotated[str, String(4000)]


MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to specified decimal places.

    Preconditions: value is a Decimal.
    Postconditions: Returns value quantized to the specified decimal places
        using the specified rounding mode.
    """
    quantize_str = "0." + "0" * decimal_places
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def round_money_down(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
) -> Decimal:
    """Truncate a monetary value toward zero."""
    return round_money(value, decimal_places, ROUND_DOWN)


ISO_4217_CURRENCIES: set[str] = {
    "USD", "EUR", "GBP", "JPY", "CHF", "CAD", "AUD", "NZD",
    "AED", "ARS", "BDT", "BRL", "CNY", "CZK", "DKK", "EGP", "HKD", "HUF",
    "IDR", "ILS", "INR", "KRW", "KWD", "LKR", "MXN", "MYR", "NGN", "NOK",
    "PHP", "PKR", "PLN", "QAR", "RON", "RUB", "SAR", "SEK", "SGD", "THB",
    "TRY", "TWD", "UAH", "VND", "ZAR",
}


def is_valid_currency(currency: str) -> bool:
    """True if *currency* is a known ISO 4217 code (case-insensitive)."""
    if not currency or not isinstance(currency, str):
        return False
    return currency.upper().strip() in ISO_4217_CURRENCIES
