"""Tests for the command line driver."""
import asyncio

from typer.testing import CliRunner

from fxconverter.cli.main import app
from fxconverter.connectivity.base import ConnectivityMonitor, ConnectivityStatus
from fxconverter.utils.errors import NetworkUnreachableError

runner = CliRunner()


def test_currencies_lists_registry():
    result = runner.invoke(app, ["currencies"])

    assert result.exit_code == 0
    for code in ("PLN", "EUR", "GBP", "UAH"):
        assert code in result.output
    assert "20,000 PLN" in result.output


def test_convert_prints_quote(temp_config_file, fake_gateway, monkeypatch):
    monkeypatch.setattr("fxconverter.app.build_gateway", lambda config: fake_gateway)

    result = runner.invoke(
        app, ["convert", "100", "--from", "pln", "--to", "UAH", "--no-probe", "--config", temp_config_file]
    )

    assert result.exit_code == 0, result.output
    assert "100.00 PLN" in result.output
    assert "723.00 UAH" in result.output
    assert "1 PLN = 7.23 UAH" in result.output
    assert len(fake_gateway.calls) == 1


def test_convert_receiving_amount(temp_config_file, fake_gateway, monkeypatch):
    monkeypatch.setattr("fxconverter.app.build_gateway", lambda config: fake_gateway)

    result = runner.invoke(
        app, ["convert", "50", "--from", "PLN", "--to", "UAH", "--receive", "--no-probe", "--config", temp_config_file]
    )

    assert result.exit_code == 0, result.output
    assert fake_gateway.calls[0][:2] == ("UAH", "PLN")
    assert "361.50 PLN" in result.output


def test_convert_over_limit_exits_with_error(temp_config_file, fake_gateway, monkeypatch):
    monkeypatch.setattr("fxconverter.app.build_gateway", lambda config: fake_gateway)

    result = runner.invoke(
        app, ["convert", "21000", "--from", "PLN", "--to", "UAH", "--no-probe", "--config", temp_config_file]
    )

    assert result.exit_code == 1
    assert "Maximum sending amount: 20000 PLN" in result.output
    assert fake_gateway.calls == []


def test_convert_offline_shows_banner(temp_config_file, fake_gateway, monkeypatch):
    fake_gateway.next_error = NetworkUnreachableError("dns failure")
    monkeypatch.setattr("fxconverter.app.build_gateway", lambda config: fake_gateway)

    result = runner.invoke(app, ["convert", "10", "--no-probe", "--config", temp_config_file])

    assert result.exit_code == 1
    assert "No network connection" in result.output


def test_convert_rejects_unknown_currency(temp_config_file):
    result = runner.invoke(app, ["convert", "10", "--from", "USD", "--config", temp_config_file])

    assert result.exit_code == 2


def test_convert_reports_missing_config(tmp_path):
    result = runner.invoke(app, ["convert", "10", "--config", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 2


class LateOfflineMonitor(ConnectivityMonitor):
    async def observe(self):
        await asyncio.sleep(0.05)
        yield ConnectivityStatus.UNAVAILABLE
        await asyncio.Event().wait()


def test_convert_waits_for_first_connectivity_status(temp_config_file, fake_gateway, monkeypatch):
    monkeypatch.setattr("fxconverter.app.build_gateway", lambda config: fake_gateway)
    monkeypatch.setattr("fxconverter.app.build_monitor", lambda config: LateOfflineMonitor())

    result = runner.invoke(app, ["convert", "100", "--config", temp_config_file])

    assert result.exit_code == 1
    assert "No network connection" in result.output
    assert "723.00 UAH" in result.output
