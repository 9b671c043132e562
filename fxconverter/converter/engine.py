"""
Conversion engine: the single owner and mutator of the converter state.

All public operations are synchronous and must run on the event loop thread.
Quote requests run as tasks on the same loop, so state changes are serialized
without locks. Every change goes through ``_update`` which swaps in a new
``ConversionState`` and notifies subscribers.
"""
from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from fxconverter.connectivity.base import ConnectivityMonitor, ConnectivityStatus
from fxconverter.converter.sanitizer import parse_amount, sanitize_amount
from fxconverter.converter.state import ConversionState
from fxconverter.core.currencies import CurrencyRegistry
from fxconverter.quotes.base import Quote, QuoteGateway
from fxconverter.utils.errors import FailureKind, QuoteError
from fxconverter.utils.logging import get_logger

logger = get_logger(__name__)

LIMIT_EXCEEDED_MESSAGE = "Maximum sending amount: {max} {code}"

FAILURE_MESSAGES: Dict[FailureKind, str] = {
    FailureKind.SERVER_VALIDATION_REJECTED: "We can't process this amount for the selected currencies.",
    FailureKind.SERVER_FAULT: "The exchange service is temporarily unavailable. Please try again later.",
    FailureKind.GENERIC: "Something went wrong. Please try again.",
}

TWO_PLACES = Decimal("0.01")

StateListener = Callable[[ConversionState], None]


class Direction(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass(frozen=True)
class RequestToken:
    direction: Direction
    sequence: int


def format_amount(value: Decimal) -> str:
    return format(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP), "f")


def format_rate(quote: Quote) -> str:
    return f"1 {quote.from_currency} = {format(quote.rate, 'f')} {quote.to_currency}"


class ConversionEngine:
    """
    Keeps a source and a target amount consistent under one quoted rate.

    Args:
        gateway: Source of quotes
        registry: Supported currencies and their sending limits
        monitor: Connectivity status stream, subscribed on ``start()``
        default_from: Initial sending currency
        default_to: Initial receiving currency
        default_amount: Initial sending amount, converted on ``start()``
        debounce_seconds: Quiet period before an edited field is converted
    """

    def __init__(
        self,
        gateway: QuoteGateway,
        registry: CurrencyRegistry,
        monitor: ConnectivityMonitor,
        *,
        default_from: str = "PLN",
        default_to: str = "UAH",
        default_amount: str = "300.00",
        debounce_seconds: float = 0.4,
    ) -> None:
        registry.lookup(default_from)
        registry.lookup(default_to)

        self._gateway = gateway
        self._registry = registry
        self._monitor = monitor
        self.debounce_seconds = debounce_seconds

        self._state = ConversionState(
            from_currency_code=default_from,
            to_currency_code=default_to,
            amount_from_text=sanitize_amount(default_amount),
        )
        self._listeners: List[StateListener] = []
        self._sequences = {direction: itertools.count(1) for direction in Direction}
        self._latest: Optional[RequestToken] = None
        self._tasks: Set[asyncio.Task] = set()
        self._debounce_task: Optional[asyncio.Task] = None
        self._monitor_task: Optional[asyncio.Task] = None
        self._status_seen = asyncio.Event()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    @property
    def state(self) -> ConversionState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        snapshot = self._state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener failed")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Subscribe to connectivity and convert the default amount.

        Must be called from a running event loop.
        """
        if self._monitor_task is not None:
            return
        self._monitor_task = asyncio.get_running_loop().create_task(self._watch_connectivity())
        self.convert_forward()

    async def settle(self) -> None:
        """Wait until no debounce timer or quote request is pending."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def wait_for_network_status(self, timeout: Optional[float] = None) -> bool:
        """Wait until the monitor has reported at least once. False on timeout."""
        try:
            await asyncio.wait_for(self._status_seen.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def close(self) -> None:
        """Cancel pending work and release the connectivity subscription."""
        tasks = list(self._tasks)
        if self._monitor_task is not None:
            tasks.append(self._monitor_task)
            self._monitor_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._debounce_task = None

    async def __aenter__(self) -> "ConversionEngine":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _watch_connectivity(self) -> None:
        stream = self._monitor.observe()
        try:
            async for status in stream:
                self.on_network_status_changed(status)
                self._status_seen.set()
        except Exception:
            logger.exception("Connectivity monitor stream failed")
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ------------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------------
    def set_amount_from(self, text: str) -> None:
        self._latest = None
        self._update(amount_from_text=sanitize_amount(text), error=None, loading=False)

    def set_amount_to(self, text: str) -> None:
        self._latest = None
        self._update(amount_to_text=sanitize_amount(text), error=None, loading=False)

    def edit_amount_from(self, text: str) -> None:
        """Keystroke in the sending field: reflect it now, convert once typing pauses."""
        self.set_amount_from(text)
        self._schedule(Direction.FORWARD)

    def edit_amount_to(self, text: str) -> None:
        """Keystroke in the receiving field: reflect it now, convert once typing pauses."""
        self.set_amount_to(text)
        self._schedule(Direction.REVERSE)

    def set_currency_pair(self, from_code: str, to_code: str) -> None:
        self._registry.lookup(from_code)
        self._registry.lookup(to_code)
        self._latest = None
        self._update(from_currency_code=from_code, to_currency_code=to_code, loading=False)

    def reverse(self) -> None:
        """Swap the sides (codes and amounts together), then convert the new direction."""
        self._latest = None
        s = self._state
        self._update(
            from_currency_code=s.to_currency_code,
            to_currency_code=s.from_currency_code,
            amount_from_text=s.amount_to_text,
            amount_to_text=s.amount_from_text,
            loading=False,
        )
        self.convert_forward()

    def dismiss_no_network_banner(self) -> None:
        self._update(show_no_network_banner=False)

    def on_network_status_changed(self, status: ConnectivityStatus) -> None:
        if status.is_offline:
            self._update(network_available=False, show_no_network_banner=True)
        elif status is ConnectivityStatus.AVAILABLE:
            self._update(network_available=True, show_no_network_banner=False)
        else:
            logger.info(f"Connectivity degrading: {status.value}", extra={"status": status.value})

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def convert_forward(self) -> None:
        self._convert(Direction.FORWARD)

    def convert_reverse(self) -> None:
        self._convert(Direction.REVERSE)

    def _schedule(self, direction: Direction) -> None:
        self._cancel_debounce()
        if self.debounce_seconds <= 0:
            self._convert(direction)
            return
        self._debounce_task = self._spawn(self._debounced(direction))

    async def _debounced(self, direction: Direction) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._debounce_task = None
        self._convert(direction)

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None

    def _convert(self, direction: Direction) -> None:
        self._cancel_debounce()
        s = self._state
        if direction is Direction.FORWARD:
            text, send_code, receive_code = s.amount_from_text, s.from_currency_code, s.to_currency_code
        else:
            text, send_code, receive_code = s.amount_to_text, s.to_currency_code, s.from_currency_code

        amount = parse_amount(text)
        if amount is None or amount <= 0:
            logger.debug(f"Ignoring non-numeric amount {text!r}", extra={"direction": direction.value})
            return

        max_amount = self._registry.max_send_amount(send_code)
        if amount > max_amount:
            # Anything still in flight is older than this input.
            self._latest = None
            self._update(
                loading=False,
                error=LIMIT_EXCEEDED_MESSAGE.format(max=max_amount, code=send_code),
            )
            return

        token = RequestToken(direction, next(self._sequences[direction]))
        self._latest = token
        self._update(loading=True, error=None)
        logger.debug(
            f"Requesting quote {send_code}->{receive_code} for {amount}",
            extra={"direction": direction.value, "sequence": token.sequence},
        )
        self._spawn(self._fetch_quote(token, send_code, receive_code, amount))

    async def _fetch_quote(self, token: RequestToken, send_code: str, receive_code: str, amount: Decimal) -> None:
        try:
            quote = await self._gateway.get_quote(send_code, receive_code, amount)
        except QuoteError as e:
            self._apply_failure(token, e.kind)
            return
        except Exception:
            logger.exception(f"Unexpected error fetching quote {send_code}->{receive_code}")
            self._apply_failure(token, FailureKind.GENERIC)
            return

        if not self._is_current(token):
            return

        if token.direction is Direction.FORWARD:
            amounts = {
                "amount_from_text": format_amount(quote.amount_from),
                "amount_to_text": format_amount(quote.amount_to),
            }
        else:
            amounts = {
                "amount_to_text": format_amount(quote.amount_from),
                "amount_from_text": format_amount(quote.amount_to),
            }
        self._update(rate_text=format_rate(quote), loading=False, **amounts)

    def _apply_failure(self, token: RequestToken, kind: FailureKind) -> None:
        if not self._is_current(token):
            return
        logger.warning(
            f"Quote request failed: {kind.value}",
            extra={"direction": token.direction.value, "sequence": token.sequence},
        )
        if kind is FailureKind.NETWORK_UNREACHABLE:
            self._update(
                loading=False,
                error=None,
                network_available=False,
                show_no_network_banner=True,
            )
        else:
            self._update(loading=False, error=FAILURE_MESSAGES.get(kind, FAILURE_MESSAGES[FailureKind.GENERIC]))

    def _is_current(self, token: RequestToken) -> bool:
        if token == self._latest:
            return True
        logger.debug(
            "Discarding stale quote result",
            extra={"direction": token.direction.value, "sequence": token.sequence},
        )
        return False
