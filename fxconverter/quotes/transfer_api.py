"""HTTP quote gateway for the TransferGo fx-rates endpoint."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx

from fxconverter.quotes.base import Quote, QuoteGateway
from fxconverter.utils.decorators import retry, log_execution
from fxconverter.utils.errors import (
    CurrencyConverterError,
    GenericQuoteError,
    NetworkUnreachableError,
    QuoteError,
    ServerFaultError,
    ServerValidationRejectedError,
)
from fxconverter.utils.logging import get_logger


logger = get_logger(__name__)

FX_RATES_PATH = "/api/fx-rates"
VALIDATION_STATUSES = (400, 422)


def _to_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool):
        raise GenericQuoteError(f"Invalid {field} in quote response: {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise GenericQuoteError(f"Invalid {field} in quote response: {value!r}") from e
    if not result.is_finite():
        raise GenericQuoteError(f"Invalid {field} in quote response: {value!r}")
    return result


def quote_from_payload(
    payload: Dict[str, Any], from_currency: str, to_currency: str, amount: Decimal
) -> Quote:
    """Build a quote from the raw response body.

    Missing amounts are reconciled with one rule: the requested amount stands
    in for ``fromAmount`` and ``amount * rate`` for ``toAmount``.
    """
    if not isinstance(payload, dict) or payload.get("rate") is None:
        raise GenericQuoteError("Quote response missing rate")

    rate = _to_decimal(payload["rate"], "rate")

    from_amount = payload.get("fromAmount")
    to_amount = payload.get("toAmount")
    amount_from = amount if from_amount is None else _to_decimal(from_amount, "fromAmount")
    amount_to = amount * rate if to_amount is None else _to_decimal(to_amount, "toAmount")

    quote = Quote(
        from_currency=from_currency,
        to_currency=to_currency,
        amount_from=amount_from,
        amount_to=amount_to,
        rate=rate,
    )
    try:
        quote.validate()
    except CurrencyConverterError as e:
        raise GenericQuoteError(str(e)) from e
    return quote


class TransferQuoteGateway(QuoteGateway):
    NAME = "transfer_api"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_attempts: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        # Only reads that timed out are retried; the request already reached the server.
        self._fetch = retry(
            max_attempts=max(1, max_attempts), delay=0.25, exceptions=(httpx.ReadTimeout,)
        )(self._fetch_once)

    async def _fetch_once(self, params: Dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            return await client.get(FX_RATES_PATH, params=params)

    @log_execution(log_args=False, log_result=False)
    async def get_quote(self, from_currency: str, to_currency: str, amount: Decimal) -> Quote:
        params = {"from": from_currency, "to": to_currency, "amount": str(amount)}

        try:
            resp = await self._fetch(params)
        except (httpx.NetworkError, httpx.TimeoutException) as e:
            logger.warning(f"Quote service unreachable: {e}")
            raise NetworkUnreachableError(str(e) or type(e).__name__) from e
        except httpx.HTTPError as e:
            logger.error(f"Quote request failed: {e}")
            raise GenericQuoteError(str(e)) from e

        self._raise_for_status(resp)

        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"Quote response is not valid JSON: {e}")
            raise GenericQuoteError("Invalid response from quote service") from e

        try:
            return quote_from_payload(data, from_currency, to_currency, amount)
        except QuoteError as e:
            logger.error(f"Failed to parse quote response: {e}")
            raise

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        status = resp.status_code
        if status < 400:
            return
        message = f"HTTP {status} from quote service"
        if status in VALIDATION_STATUSES:
            raise ServerValidationRejectedError(message, status_code=status)
        if status >= 500:
            raise ServerFaultError(message, status_code=status)
        raise GenericQuoteError(message, status_code=status)
