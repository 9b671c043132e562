"""Composition point: wires the engine to its collaborators."""
from __future__ import annotations

from typing import Optional

from fxconverter.config import Config
from fxconverter.connectivity.base import ConnectivityMonitor
from fxconverter.connectivity.monitor import ProbeConnectivityMonitor
from fxconverter.converter.engine import ConversionEngine
from fxconverter.core.currencies import CURRENCIES, CurrencyRegistry
from fxconverter.quotes.base import QuoteGateway
from fxconverter.quotes.transfer_api import TransferQuoteGateway


def build_gateway(config: Config) -> TransferQuoteGateway:
    return TransferQuoteGateway(
        base_url=config.quote_api_base_url,
        timeout=config.quote_api_timeout,
        max_attempts=config.quote_api_max_attempts,
    )


def build_monitor(config: Config) -> ProbeConnectivityMonitor:
    return ProbeConnectivityMonitor(**config.connectivity)


def build_engine(
    config: Config,
    *,
    gateway: Optional[QuoteGateway] = None,
    monitor: Optional[ConnectivityMonitor] = None,
    registry: CurrencyRegistry = CURRENCIES,
) -> ConversionEngine:
    """Create an engine from configuration; any collaborator can be supplied instead."""
    return ConversionEngine(
        gateway=gateway or build_gateway(config),
        registry=registry,
        monitor=monitor or build_monitor(config),
        default_from=config.default_from,
        default_to=config.default_to,
        default_amount=config.default_amount,
        debounce_seconds=config.debounce_seconds,
    )
