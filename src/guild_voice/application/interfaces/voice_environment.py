"""Port interface for probing whether the runtime can host voice sessions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class VoiceEnvironment(ABC):
    @abstractmethod
    def is_supported(self) -> bool:
        """Return False in sandboxed or headless runtimes without voice support."""
        ...
