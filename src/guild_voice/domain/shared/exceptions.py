"""Base exception classes for domain-level errors."""

from __future__ import annotations

from guild_voice.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidConfigurationError(DomainError):
    """Raised when a bitrate or user limit falls outside the platform bounds."""

    def __init__(self, field: str, value: object, message: str | None = None) -> None:
        msg = message or ErrorMessages.INVALID_CONFIGURATION.format(field=field, value=value)
        super().__init__(msg, code="INVALID_CONFIGURATION")
        self.field = field
        self.value = value


class PermissionDeniedError(DomainError):
    """Raised when the actor lacks the capability needed for an operation."""

    def __init__(self, permission: str, channel_id: int, message: str | None = None) -> None:
        msg = message or ErrorMessages.PERMISSION_DENIED.format(
            permission=permission, channel_id=channel_id
        )
        super().__init__(msg, code="PERMISSION_DENIED")
        self.permission = permission
        self.channel_id = channel_id


class EnvironmentUnsupportedError(DomainError):
    """Raised when the runtime cannot host voice sessions."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.VOICE_UNSUPPORTED, code="ENVIRONMENT_UNSUPPORTED")


class ConnectionFailedError(DomainError):
    """Raised when transport negotiation for a voice session fails."""

    def __init__(self, guild_id: int, channel_id: int, message: str | None = None) -> None:
        msg = message or ErrorMessages.CONNECTION_FAILED.format(
            guild_id=guild_id, channel_id=channel_id
        )
        super().__init__(msg, code="CONNECTION_FAILED")
        self.guild_id = guild_id
        self.channel_id = channel_id


class RemoteRejectedError(DomainError):
    """Raised when the remote authority refuses a channel configuration change."""

    def __init__(self, channel_id: int, reason: str | None = None) -> None:
        msg = ErrorMessages.REMOTE_REJECTED.format(channel_id=channel_id)
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, code="REMOTE_REJECTED")
        self.channel_id = channel_id
        self.reason = reason


class RegistryConflictError(DomainError):
    """Raised when a second live connection is published for the same guild."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or ErrorMessages.REGISTRY_CONFLICT.format(guild_id=guild_id)
        super().__init__(msg, code="REGISTRY_CONFLICT")
        self.guild_id = guild_id


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class NegotiationError(Exception):
    """Raised by transport negotiators when a voice session cannot be established.

    This is the adapter-facing failure; the session manager converts it into
    a :class:`ConnectionFailedError` for callers.
    """
