"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Channel Configuration Errors
    INVALID_CONFIGURATION = "Invalid {field}: {value}"
    BITRATE_OUT_OF_RANGE = "Bitrate must be between {minimum} and {maximum}, got {value}"
    USER_LIMIT_OUT_OF_RANGE = "User limit must be between 0 and {maximum}, got {value}"
    CONFIG_NOT_INTEGER = "{field} must be an integer, got {value!r}"
    REMOTE_REJECTED = "Configuration change for channel {channel_id} was rejected"
    INVALID_BITRATE_BOUNDS = "min_bitrate must not exceed max_bitrate"

    # Voice Session Errors
    VOICE_UNSUPPORTED = "Voice connections are not available in this environment"
    PERMISSION_DENIED = "Missing {permission} permission for channel {channel_id}"
    CONNECTION_FAILED = "Could not establish a voice connection to channel {channel_id} in guild {guild_id}"
    CONNECTION_TIMEOUT = "Timed out negotiating voice for channel {channel_id} in guild {guild_id}"
    REGISTRY_CONFLICT = "Guild {guild_id} already holds a different voice connection"

    # Negotiation Errors
    GUILD_NOT_FOUND = "Guild {guild_id} not found"
    CHANNEL_NOT_VOICE = "Channel {channel_id} is not a voice channel"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Session Lifecycle
    SESSION_STATE_CHANGED = "Voice session in guild %s: %s -> %s"
    SESSION_JOIN_REQUESTED = "Join requested for channel %s in guild %s by %s"
    SESSION_ALREADY_CONNECTED = "Already connected to channel %s in guild %s, reusing connection"
    SESSION_SWITCHING_CHANNEL = "Guild %s moving voice from channel %s to %s"
    SESSION_CONNECTED = "Connected to voice channel %s in guild %s"
    SESSION_CONNECT_FAILED = "Voice negotiation failed for channel %s in guild %s: %r"
    SESSION_CONNECT_TIMEOUT = "Timeout negotiating voice for channel %s in guild %s"
    SESSION_JOIN_CANCELLED = "Join for channel %s in guild %s cancelled, discarding negotiation"
    SESSION_DISCONNECTED = "Disconnected from voice channel %s in guild %s"
    SESSION_DISCONNECT_ERROR = "Transport error while disconnecting guild %s"
    SESSION_LEAVE_NOOP = "Leave for channel %s in guild %s ignored (connected channel: %s)"
    SESSION_PERMISSION_DENIED = "Actor %s may not connect to channel %s"
    SESSION_ENVIRONMENT_UNSUPPORTED = "Voice is unsupported in this environment, refusing join"
    VOICE_JOIN_FAILED = "Join failed for channel %s: %s"
    SESSION_SHUTDOWN = "Disconnected %s voice session(s) on shutdown"
    SESSION_SHUTDOWN_FAILED = "Failed disconnecting voice sessions: %r"
    SESSION_MOVED_EXTERNALLY = "Guild %s voice was moved from channel %s to %s"

    # Registry
    REGISTRY_PUT = "Registered voice connection for guild %s (channel %s)"
    REGISTRY_REMOVED = "Removed voice connection for guild %s"
    REGISTRY_CLEARED = "Cleared %s voice connection(s) from registry"

    # Channel Configuration
    CONFIG_APPLIED = "Channel %s configured: bitrate=%s user_limit=%s"
    CONFIG_ROLLED_BACK = "Channel %s configuration rejected, rolled back: %s"
    CONFIG_SYNC_FAILED = "Remote sync failed for channel %s: %r"

    # Channel Directory
    DIRECTORY_SYNCED = "Synced voice channel %s (%s) in guild %s"
    DIRECTORY_REMOVED = "Removed voice channel %s from directory"
    DIRECTORY_MEMBER_JOINED = "Member %s joined voice channel %s"
    DIRECTORY_MEMBER_LEFT = "Member %s left voice channel %s"
    DIRECTORY_GUILD_JOINED = "Joined guild: %s (%s)"
    DIRECTORY_GUILD_FORGOTTEN = "Removed from guild %s, forgot %s voice channel(s)"

    # Discord Adapters
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_DISCONNECTED = "Voice client disconnected in guild %s"
    GUILD_NOT_FOUND = "Guild %s not found"
    MEMBER_NOT_FOUND = "Member %s not found in guild %s"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"
    NACL_MISSING = "PyNaCl is not installed; voice connections are unavailable"

    # Event Bus
    EVENT_SUBSCRIBED = "Subscribed handler to: %s"
    EVENT_UNSUBSCRIBED = "Unsubscribed handler from %s"
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_PUBLISHING = "Publishing %s to %d handlers"
    EVENT_HANDLER_ERROR = "Error in handler for %s: %s"
    EVENT_BUS_CLEARED = "Cleared all event handlers"

    # Bot Lifecycle
    BOT_STARTING = "Starting guild voice bot in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_CONTAINER_INITIALIZED = "Container initialized successfully"
    BOT_CONTAINER_INIT_FAILED = "Failed to initialize container: %s"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_VOICE_SESSIONS_CLOSED = "Container shutdown complete, closed %s voice session(s)"
    BOT_VOICE_CONFIG = "Voice enabled=%s, connect timeout %ss, bitrate %s-%s bps, user limit <= %s"
    BOT_DIRECTORY_SYNCED = "Tracking %s voice channel(s) across %s guild(s), %s active session(s)"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %s success, %s failed"
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"


class DiscordUIMessages:
    """User-facing Discord messages for slash command replies."""

    STATE_SERVER_ONLY = "This command only works in a server."
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."
    STATE_NEED_TO_BE_IN_VOICE = "You need to be in a voice channel."
    STATE_NOT_CONNECTED_TO_VOICE = "I'm not connected to a voice channel here."

    SUCCESS_JOINED = "🔊 Joined **{channel}**."
    SUCCESS_LEFT = "👋 Left **{channel}**."
    SUCCESS_BITRATE_SET = "Set bitrate of **{channel}** to {bitrate} bps."
    SUCCESS_USER_LIMIT_SET = "Set user limit of **{channel}** to {user_limit}."
    SUCCESS_USER_LIMIT_CLEARED = "Removed the user limit of **{channel}**."

    ERROR_PERMISSION_DENIED = "❌ I don't have permission to join **{channel}**."
    ERROR_VOICE_UNSUPPORTED = "❌ Voice isn't available on this deployment."
    ERROR_COULD_NOT_JOIN_VOICE = "❌ Couldn't join **{channel}**, please try again."
    ERROR_INVALID_CONFIGURATION = "❌ {detail}"
    ERROR_REMOTE_REJECTED = "❌ Discord refused the change to **{channel}**."
    ERROR_GENERIC = "❌ An error occurred: {error}"
