"""Data models for ssht."""

from ssht.models.command import CommandResult
from ssht.models.ssh import AuthMethod, HostDescriptor, PooledConnection, ResolvedCredential

__all__ = [
    "AuthMethod",
    "CommandResult",
    "HostDescriptor",
    "PooledConnection",
    "ResolvedCredential",
]
