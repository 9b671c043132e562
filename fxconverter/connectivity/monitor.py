"""Concrete connectivity monitors."""
from __future__ import annotations

import asyncio
import time
from typing import AsyncIterator, Optional

from fxconverter.connectivity.base import ConnectivityMonitor, ConnectivityStatus
from fxconverter.utils.logging import get_logger

logger = get_logger(__name__)


class ProbeConnectivityMonitor(ConnectivityMonitor):
    """
    Periodically opens a TCP connection to a probe host.

    Status mapping:
    - probe succeeded within the losing threshold -> AVAILABLE
    - probe succeeded but slowly -> LOSING
    - probe failed and never succeeded before -> UNAVAILABLE
    - probe failed after an earlier success -> LOST

    Only changes are emitted after the initial status.
    """

    def __init__(
        self,
        probe_host: str = "1.1.1.1",
        probe_port: int = 53,
        interval_seconds: float = 5.0,
        timeout_seconds: float = 2.0,
        losing_threshold_seconds: float = 1.0,
    ) -> None:
        self.probe_host = probe_host
        self.probe_port = probe_port
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self.losing_threshold_seconds = losing_threshold_seconds

    async def probe(self) -> Optional[float]:
        """Return the connect latency in seconds, or None when unreachable."""
        started = time.monotonic()
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self.probe_host, self.probe_port),
                timeout=self.timeout_seconds,
            )
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug(f"Connectivity probe to {self.probe_host}:{self.probe_port} failed: {e}")
            return None
        latency = time.monotonic() - started
        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return latency

    def classify(self, latency: Optional[float], seen_online: bool) -> ConnectivityStatus:
        if latency is None:
            return ConnectivityStatus.LOST if seen_online else ConnectivityStatus.UNAVAILABLE
        if latency > self.losing_threshold_seconds:
            return ConnectivityStatus.LOSING
        return ConnectivityStatus.AVAILABLE

    async def observe(self) -> AsyncIterator[ConnectivityStatus]:
        seen_online = False
        last: Optional[ConnectivityStatus] = None
        while True:
            latency = await self.probe()
            status = self.classify(latency, seen_online)
            if latency is not None:
                seen_online = True
            if status is not last:
                logger.info(f"Connectivity status: {status.value}", extra={"status": status.value})
                last = status
                yield status
            await asyncio.sleep(self.interval_seconds)


class StaticConnectivityMonitor(ConnectivityMonitor):
    """Reports a fixed status once and then stays silent."""

    def __init__(self, status: ConnectivityStatus = ConnectivityStatus.AVAILABLE) -> None:
        self.status = status

    async def observe(self) -> AsyncIterator[ConnectivityStatus]:
        yield self.status
        await asyncio.Event().wait()
