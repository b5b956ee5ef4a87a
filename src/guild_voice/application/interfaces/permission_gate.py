"""Port interface for voice capability checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.shared.types import UserIdField
    from ...domain.voice.entities import ChannelDescriptor


class PermissionGate(ABC):
    """Boolean capability checks consumed before any voice state changes.

    Implementations must be synchronous and side-effect free. A ``False``
    answer is a normal negative, not an error.
    """

    @abstractmethod
    def can_connect(self, actor_id: UserIdField, channel: ChannelDescriptor) -> bool:
        """Whether *actor_id* may connect to *channel*."""
        ...

    @abstractmethod
    def can_speak(self, actor_id: UserIdField, channel: ChannelDescriptor) -> bool:
        """Whether *actor_id* may transmit audio in *channel*."""
        ...
