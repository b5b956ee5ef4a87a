#!/usr/bin/env python3
"""Entry point: read settings, configure logging and run the voice bot until signalled."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from guild_voice.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from guild_voice.config.settings import Settings
    from guild_voice.infrastructure.discord.bot import VoiceBot

logger = logging.getLogger(__name__)

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _read_logging_config(path: Path) -> dict[str, Any] | None:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError):
        return None


def setup_logging(log_level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    """Apply *config_path* through dictConfig, or a plain console format if it is unusable.

    *log_level* always wins over the root level in the file.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    config = _read_logging_config(config_path)
    if config is not None:
        try:
            logging.config.dictConfig(config)
        except ValueError:
            config = None

    if config is None:
        logging.basicConfig(level=level, format=_FALLBACK_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        logger.warning(LogTemplates.BOT_LOGGING_CONFIG_FALLBACK, config_path)

    logging.getLogger().setLevel(level)


def _log_voice_config(settings: Settings) -> None:
    limits = settings.limits
    logger.info(
        LogTemplates.BOT_VOICE_CONFIG,
        settings.voice.enabled,
        settings.voice.connect_timeout_s,
        limits.min_bitrate,
        limits.max_bitrate,
        limits.max_user_limit,
    )


def _run(bot: VoiceBot, token: str) -> int:
    try:
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1
    else:
        logger.info(LogTemplates.BOT_STOPPED)
    return 0


def main() -> int:
    from guild_voice.config.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.BOT_STARTING.format(environment=settings.environment))
    _log_voice_config(settings)

    from guild_voice.config.container import create_container
    from guild_voice.infrastructure.discord.bot import create_bot

    bot = create_bot(create_container(settings), settings)
    return _run(bot, token)


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
