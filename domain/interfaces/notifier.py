"""Boundary interfaces for the network probe and the notification transport."""
from abc import ABC, abstractmethod
from typing import Sequence


class IProber(ABC):
    """Interface for a reachability probe."""

    @abstractmethod
    async def probe(self, host: str, port: int, timeout_ms: int, retries: int) -> bool:
        """Return True if a connection could be established within the retries."""
        pass


class INotifier(ABC):
    """Interface for the outbound notification transport."""

    @abstractmethod
    async def send(self, subject: str, body: str, recipients: Sequence[str]) -> bool:
        """Deliver a plain-text message; return True when delivery was accepted."""
        pass
