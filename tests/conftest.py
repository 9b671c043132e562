"""Pytest configuration and fixtures."""
import asyncio
import logging
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from fxconverter.config import reset_config
from fxconverter.connectivity.base import ConnectivityMonitor, ConnectivityStatus
from fxconverter.converter.engine import ConversionEngine
from fxconverter.core.currencies import CURRENCIES
from fxconverter.quotes.base import Quote, QuoteGateway


class FakeGateway(QuoteGateway):
    """Records calls; returns ``amount * rate`` quotes unless told otherwise."""

    NAME = "fake"

    def __init__(self):
        self.calls = []
        self.rate = Decimal("7.23")
        self.next_quote = None
        self.next_error = None
        self.delays = {}

    async def get_quote(self, from_currency, to_currency, amount):
        self.calls.append((from_currency, to_currency, amount))
        await asyncio.sleep(self.delays.get(amount, 0))
        if self.next_error is not None:
            raise self.next_error
        if self.next_quote is not None:
            return self.next_quote
        return Quote(
            from_currency=from_currency,
            to_currency=to_currency,
            amount_from=amount,
            amount_to=amount * self.rate,
            rate=self.rate,
        )


class FakeMonitor(ConnectivityMonitor):
    """Emits ``initial`` on subscribe, then whatever the test pushes."""

    def __init__(self, initial=ConnectivityStatus.AVAILABLE):
        self.initial = initial
        self.queue = asyncio.Queue()
        self.subscriptions = 0
        self.released = 0

    def push(self, status):
        self.queue.put_nowait(status)

    async def observe(self):
        self.subscriptions += 1
        try:
            yield self.initial
            while True:
                yield await self.queue.get()
        finally:
            self.released += 1


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def fake_monitor():
    return FakeMonitor()


@pytest.fixture
def make_engine(fake_gateway, fake_monitor):
    """Build an engine around the fakes; debouncing is off unless requested."""
    def factory(**kwargs):
        kwargs.setdefault("debounce_seconds", 0)
        return ConversionEngine(fake_gateway, CURRENCIES, fake_monitor, **kwargs)
    return factory


@pytest.fixture
def temp_config_file():
    """Create a temporary config file for testing."""
    config_data = {
        'app': {
            'name': 'Test Converter',
            'version': '0.1.0',
            'debug': True
        },
        'quote_api': {
            'base_url': 'https://quotes.test',
            'timeout': 3,
            'max_attempts': 1
        },
        'converter': {
            'default_from': 'EUR',
            'default_to': 'GBP',
            'default_amount': '50',
            'debounce_seconds': 0
        },
        'connectivity': {
            'probe_host': '127.0.0.1',
            'probe_port': 9
        },
        'logging': {
            'level': 'DEBUG',
            'format': 'text'
        }
    }

    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config_data, f)
        config_path = f.name

    yield config_path

    Path(config_path).unlink()


@pytest.fixture(autouse=True)
def isolate_global_state():
    """Forget the loaded config and undo logging setup after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    reset_config()
    yield
    reset_config()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.disable(logging.NOTSET)
