"""Quote gateway base class and the quote data contract."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from fxconverter.utils.errors import ValidationError


@dataclass(frozen=True)
class Quote:
    """A resolved exchange for one pair and amount.

    ``amount_from`` and ``amount_to`` are what the quote service considers
    authoritative; the gateway fills them in when the service omits them.
    """

    from_currency: str
    to_currency: str
    amount_from: Decimal
    amount_to: Decimal
    rate: Decimal

    def validate(self) -> None:
        if self.rate is None or self.rate <= 0:
            raise ValidationError(f"Invalid rate: {self.rate}")
        if self.amount_from is None or self.amount_to is None:
            raise ValidationError("Quote amounts must be populated")


class QuoteGateway(ABC):
    """Abstract source of exchange quotes."""

    NAME: str = "base"

    @abstractmethod
    async def get_quote(self, from_currency: str, to_currency: str, amount: Decimal) -> Quote:
        """Fetch a fully populated quote for sending ``amount`` of ``from_currency``.

        Raises:
            QuoteError: one of its tagged subclasses describing the failure.
        """
