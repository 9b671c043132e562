"""Immutable snapshot of the converter screen."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Phase(Enum):
    IDLE = "idle"
    CONVERTING = "converting"
    ERROR = "error"


@dataclass(frozen=True)
class ConversionState:
    """Everything the presentation layer needs to render the converter.

    Instances are never mutated; the engine publishes a new one per change.
    """

    from_currency_code: str
    to_currency_code: str
    amount_from_text: str = ""
    amount_to_text: str = ""
    rate_text: str = ""
    loading: bool = False
    error: Optional[str] = None
    network_available: bool = True
    show_no_network_banner: bool = False

    @property
    def phase(self) -> Phase:
        if self.loading:
            return Phase.CONVERTING
        if self.error is not None:
            return Phase.ERROR
        return Phase.IDLE

    @property
    def network_degraded(self) -> bool:
        return not self.network_available
