"""Static currency registry and the per-currency sending limit policy."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Tuple

from fxconverter.utils.errors import UnknownCurrencyError, ValidationError


@dataclass(frozen=True)
class Currency:
    """A supported currency and the maximum amount that may be sent in it."""

    country: str
    code: str
    display_name: str
    max_send_amount: Decimal
    flag_asset: str

    def __post_init__(self):
        if not self.code or len(self.code) != 3 or not self.code.isalpha() or self.code != self.code.upper():
            raise ValidationError(f"Invalid currency code: {self.code}. Expect 3-letter uppercase ISO code.")
        if self.max_send_amount <= 0:
            raise ValidationError(f"max_send_amount must be positive, got {self.max_send_amount}")


class CurrencyRegistry:
    """Closed, read-only set of currencies keyed by code."""

    def __init__(self, currencies: Iterable[Currency]):
        by_code: Dict[str, Currency] = {}
        for currency in currencies:
            if currency.code in by_code:
                raise ValidationError(f"Duplicate currency code: {currency.code}")
            by_code[currency.code] = currency
        self._by_code = by_code

    def lookup(self, code: str) -> Currency:
        """Return the currency for ``code``.

        Raises:
            UnknownCurrencyError: the code is not registered. Callers only
                ever pass codes taken from this registry, so this is a bug.
        """
        try:
            return self._by_code[code]
        except KeyError:
            raise UnknownCurrencyError(code) from None

    def max_send_amount(self, code: str) -> Decimal:
        return self.lookup(code).max_send_amount

    def exceeds_limit(self, code: str, amount: Decimal) -> bool:
        """True when ``amount`` is above what may be sent in ``code``."""
        return amount > self.max_send_amount(code)

    def codes(self) -> Tuple[str, ...]:
        return tuple(self._by_code)

    def all(self) -> List[Currency]:
        return list(self._by_code.values())

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __iter__(self) -> Iterator[Currency]:
        return iter(self._by_code.values())

    def __len__(self) -> int:
        return len(self._by_code)


CURRENCIES = CurrencyRegistry([
    Currency(
        country="Poland",
        code="PLN",
        display_name="Polish zloty",
        max_send_amount=Decimal("20000"),
        flag_asset="flag_pol",
    ),
    Currency(
        country="Germany",
        code="EUR",
        display_name="Euro",
        max_send_amount=Decimal("5000"),
        flag_asset="flag_ger",
    ),
    Currency(
        country="Great Britain",
        code="GBP",
        display_name="British Pound",
        max_send_amount=Decimal("1000"),
        flag_asset="flag_eng",
    ),
    Currency(
        country="Ukraine",
        code="UAH",
        display_name="Hrivna",
        max_send_amount=Decimal("50000"),
        flag_asset="flag_uah",
    ),
])
