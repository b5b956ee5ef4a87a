"""Runtime check deciding whether this process can host voice sessions."""

from __future__ import annotations

import importlib.util
import logging
from functools import cached_property
from typing import TYPE_CHECKING

from guild_voice.application.interfaces.voice_environment import VoiceEnvironment
from guild_voice.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..config.settings import VoiceSettings

logger = logging.getLogger(__name__)


class RuntimeVoiceEnvironment(VoiceEnvironment):
    """Voice is supported when enabled in settings and PyNaCl is importable.

    discord.py needs PyNaCl to encrypt voice packets; without it every
    connection attempt would fail after contacting the gateway.
    """

    def __init__(self, settings: VoiceSettings) -> None:
        self._settings = settings

    @cached_property
    def _has_voice_libraries(self) -> bool:
        available = importlib.util.find_spec("nacl") is not None
        if not available:
            logger.warning(LogTemplates.NACL_MISSING)
        return available

    def is_supported(self) -> bool:
        return self._settings.enabled and self._has_voice_libraries
