from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from fxconverter.app import build_engine
from fxconverter.cli.display import create_currency_table, create_state_panel
from fxconverter.config import Config, load_config, reset_config
from fxconverter.connectivity.monitor import StaticConnectivityMonitor
from fxconverter.converter.engine import ConversionEngine
from fxconverter.converter.state import ConversionState
from fxconverter.core.currencies import CURRENCIES
from fxconverter.utils.errors import ConfigurationError
from fxconverter.utils.logging import get_logger


logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="FX Converter CLI")
console = Console()


def _load(config_path: str) -> Config:
    reset_config()
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


def _currency_code(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    code = value.strip().upper()
    if code not in CURRENCIES:
        raise typer.BadParameter(f"{value} is not supported. Choose one of: {', '.join(CURRENCIES.codes())}")
    return code


async def _run_conversion(
    engine: ConversionEngine, amount: str, receive: bool, status_timeout: float
) -> ConversionState:
    # Nothing to convert until connectivity is known, so the quote result lands last.
    engine.set_amount_from("")
    engine.set_amount_to("")

    async with engine:
        if not await engine.wait_for_network_status(status_timeout):
            logger.warning(f"No connectivity status after {status_timeout}s, converting anyway")
        if receive:
            engine.set_amount_to(amount)
            engine.convert_reverse()
        else:
            engine.set_amount_from(amount)
            engine.convert_forward()
        await engine.settle()
        return engine.state


@app.command("currencies")
def currencies():
    """List the supported currencies and their sending limits."""
    console.print(create_currency_table(CURRENCIES))


@app.command("convert")
def convert(
    amount: str = typer.Argument(..., help="Amount to convert, e.g. 300 or 300,50"),
    from_code: Optional[str] = typer.Option(None, "--from", "-f", callback=_currency_code, help="Sending currency"),
    to_code: Optional[str] = typer.Option(None, "--to", "-t", callback=_currency_code, help="Receiving currency"),
    receive: bool = typer.Option(False, "--receive", "-r", help="Treat the amount as what the receiver gets"),
    no_probe: bool = typer.Option(False, "--no-probe", help="Skip the connectivity probe"),
    config_path: str = typer.Option("config.yaml", "--config", "-c", help="Path to config.yaml"),
):
    """Convert an amount once and show the resulting converter state."""
    cfg = _load(config_path)
    monitor = StaticConnectivityMonitor() if no_probe else None
    engine = build_engine(cfg, monitor=monitor)
    engine.set_currency_pair(from_code or cfg.default_from, to_code or cfg.default_to)

    status_timeout = cfg.connectivity["timeout_seconds"] + 1.0
    state = asyncio.run(_run_conversion(engine, amount, receive, status_timeout))
    console.print(create_state_panel(state))
    if state.error or state.show_no_network_banner:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
