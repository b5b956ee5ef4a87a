"""
Shared Domain Kernel

Contains constrained types, events and exceptions shared across the package.
"""

from guild_voice.domain.shared.exceptions import (
    ConnectionFailedError,
    DomainError,
    EnvironmentUnsupportedError,
    InvalidConfigurationError,
    InvalidOperationError,
    NegotiationError,
    PermissionDeniedError,
    RegistryConflictError,
    RemoteRejectedError,
)

__all__ = [
    "DomainError",
    "InvalidConfigurationError",
    "PermissionDeniedError",
    "EnvironmentUnsupportedError",
    "ConnectionFailedError",
    "RemoteRejectedError",
    "RegistryConflictError",
    "InvalidOperationError",
    "NegotiationError",
]
