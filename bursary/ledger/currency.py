"""Currency codes and the static exchange-rate table.

The rates below are a fixed approximation kept in code; they are not fed from
any market source and must not be read as real exchange rates. They exist so
that mixed-currency payments can be folded into a single USD-equivalent figure
for dashboards and student balances.
"""

import enum
from decimal import Decimal
from typing import Union

from bursary.core.exceptions import InvalidCurrency


class Currency(str, enum.Enum):
    """Supported payment currencies"""
    USD = "USD"
    ZAR = "ZAR"
    ZIG = "ZiG"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


# Units of currency per 1 USD.
EXCHANGE_RATES = {
    Currency.USD: Decimal("1"),
    Currency.ZAR: Decimal("17.5"),
    Currency.ZIG: Decimal("34"),
}

CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.ZAR: "R",
    Currency.ZIG: "ZiG",
}

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


def parse_currency(code: Union[str, Currency]) -> Currency:
    """Resolve a currency code, raising ``InvalidCurrency`` when it is unknown."""
    try:
        return Currency(code)
    except ValueError:
        raise InvalidCurrency(code) from None


def convert(amount: Number, from_currency: Union[str, Currency], to_currency: Union[str, Currency]) -> Decimal:
    """
    Convert an amount between currencies using the static table.

    No rounding is applied; callers quantize for display or storage.
    """
    source = parse_currency(from_currency)
    target = parse_currency(to_currency)
    value = to_decimal(amount)
    if source is target:
        return value
    # Rates are units per USD: go to USD through the source rate, then out
    return value / EXCHANGE_RATES[source] * EXCHANGE_RATES[target]


def to_usd(amount: Number, currency: Union[str, Currency]) -> Decimal:
    return convert(amount, currency, Currency.USD)


def format_amount(amount: Number, currency: Union[str, Currency] = Currency.USD) -> str:
    """Render an amount for receipts and dashboards, e.g. ``R1,250.00``."""
    code = parse_currency(currency)
    value = to_decimal(amount).quantize(CENT)
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOLS[code]}{abs(value):,.2f}"
