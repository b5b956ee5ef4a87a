"""Port interface for pushing channel configuration to the remote authority."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.voice.entities import ChannelDescriptor
    from ...domain.voice.value_objects import ChannelConfig, ChannelConfigUpdate


class ChannelConfigSync(ABC):
    """Interface for persisting bitrate / user-limit changes remotely."""

    @abstractmethod
    async def push(self, channel: ChannelDescriptor, update: ChannelConfigUpdate) -> ChannelConfig:
        """Send a partial update and return the canonical configuration.

        Raises:
            RemoteRejectedError: If the remote authority refuses the change.
        """
        ...
