"""Tests for engine composition."""
from fxconverter.app import build_engine
from fxconverter.config import Config
from fxconverter.connectivity.monitor import ProbeConnectivityMonitor
from fxconverter.quotes.transfer_api import TransferQuoteGateway


def test_build_engine_from_config(temp_config_file):
    engine = build_engine(Config(temp_config_file))

    state = engine.state
    assert state.from_currency_code == "EUR"
    assert state.to_currency_code == "GBP"
    assert state.amount_from_text == "50"
    assert engine.debounce_seconds == 0.0

    gateway = engine._gateway
    assert isinstance(gateway, TransferQuoteGateway)
    assert gateway.base_url == "https://quotes.test"
    assert gateway.timeout == 3.0

    monitor = engine._monitor
    assert isinstance(monitor, ProbeConnectivityMonitor)
    assert monitor.probe_host == "127.0.0.1"
    assert monitor.probe_port == 9


def test_build_engine_accepts_collaborators(temp_config_file, fake_gateway, fake_monitor):
    engine = build_engine(Config(temp_config_file), gateway=fake_gateway, monitor=fake_monitor)

    assert engine._gateway is fake_gateway
    assert engine._monitor is fake_monitor
