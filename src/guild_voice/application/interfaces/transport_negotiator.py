"""Port interface for negotiating voice transports."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.voice.entities import ChannelDescriptor
    from ...domain.voice.value_objects import TransportHandle


class TransportNegotiator(ABC):
    """Interface for establishing and tearing down voice transports."""

    @abstractmethod
    async def connect(self, channel: ChannelDescriptor) -> TransportHandle:
        """Negotiate a transport for *channel*.

        Raises:
            NegotiationError: If the signaling layer refuses or fails.
        """
        ...

    @abstractmethod
    async def disconnect(self, handle: TransportHandle) -> None:
        """Tear down a transport previously returned by :meth:`connect`."""
        ...
