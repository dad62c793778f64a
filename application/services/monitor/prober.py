from __future__ import annotations

import asyncio
import time

from core.logging.logger import StructuredLogger
from domain.interfaces import IProber


class TcpProber(IProber):
    """Bounded-retry TCP connect probe.

    A probe succeeds on transport-level establishment only; nothing is sent
    or read. DNS errors, refusals and timeouts all fold into ``False``.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self.logger = logger

    async def probe(self, host: str, port: int, timeout_ms: int, retries: int) -> bool:
        timeout_s = timeout_ms / 1000.0
        for attempt in range(1, max(1, retries) + 1):
            start = time.perf_counter()
            try:
                writer = await asyncio.wait_for(self._connect(host, port), timeout=timeout_s)
            except asyncio.TimeoutError:
                error = f"timeout after {timeout_ms}ms"
            except (OSError, UnicodeError, ValueError) as e:
                error = str(e) or type(e).__name__
            else:
                latency_ms = int((time.perf_counter() - start) * 1000.0)
                self.logger.debug(lambda: "tcp-connect-ok", extra={"host": host, "port": port, "attempt": attempt, "latency": latency_ms})
                await self._close(writer, timeout_s)
                return True
            self.logger.debug(
                lambda: "tcp-attempt-failed",
                extra={"host": host, "port": port, "attempt": attempt, "retries": retries, "error": error},
            )
        return False

    @staticmethod
    async def _connect(host: str, port: int) -> asyncio.StreamWriter:
        _, writer = await asyncio.open_connection(host, port)
        return writer

    async def _close(self, writer: asyncio.StreamWriter, timeout_s: float) -> None:
        # The connection already counts as established; a slow close only gets logged.
        writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=timeout_s)
        except (asyncio.TimeoutError, OSError) as e:
            self.logger.trace(lambda: "tcp-close-incomplete", extra={"error": str(e) or type(e).__name__})
