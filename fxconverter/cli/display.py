"""Rich renderables for the converter CLI."""
from __future__ import annotations

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from fxconverter.converter.state import ConversionState, Phase
from fxconverter.core.currencies import CurrencyRegistry


def create_currency_table(registry: CurrencyRegistry) -> Table:
    table = Table(title="Supported currencies", box=box.SIMPLE_HEAVY)
    table.add_column("Code", style="cyan bold")
    table.add_column("Name")
    table.add_column("Country")
    table.add_column("Max send", justify="right")
    for currency in registry:
        table.add_row(
            currency.code,
            currency.display_name,
            currency.country,
            f"{currency.max_send_amount:,} {currency.code}",
        )
    return table


def create_state_panel(state: ConversionState) -> Panel:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="cyan bold", width=16)
    table.add_column("Value")
    table.add_row("Sending from", f"{state.amount_from_text or '—'} {state.from_currency_code}")
    table.add_row("Receiver gets", f"{state.amount_to_text or '—'} {state.to_currency_code}")
    table.add_row("Rate", state.rate_text or "—")

    parts: list[RenderableType] = [table]
    if state.error:
        parts.append(Text(state.error, style="bold red"))
    if state.show_no_network_banner:
        parts.append(Text("No network connection. Check your internet and try again.", style="bold yellow"))

    border = "red" if state.phase is Phase.ERROR else "green"
    return Panel(Group(*parts), title="Currency converter", border_style=border)
