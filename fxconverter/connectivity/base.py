"""Connectivity status contract."""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import AsyncIterator


class ConnectivityStatus(Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    LOSING = "losing"
    LOST = "lost"

    @property
    def is_offline(self) -> bool:
        return self in (ConnectivityStatus.UNAVAILABLE, ConnectivityStatus.LOST)


class ConnectivityMonitor(ABC):
    """Push source of reachability transitions."""

    @abstractmethod
    def observe(self) -> AsyncIterator[ConnectivityStatus]:
        """Yield the current status immediately, then every transition.

        The stream never ends on its own; the subscriber releases it by
        closing the iterator (or cancelling the task consuming it).
        """
