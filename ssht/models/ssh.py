"""SSH-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import asyncssh


class AuthMethod(str, Enum):
    """Supported authentication methods."""

    PASSWORD = "password"
    PRIVATE_KEY = "private_key"


@dataclass(frozen=True)
class HostDescriptor:
    """A host from the inventory.

    ``auth_method`` is kept as loaded; an unsupported value is only rejected
    when a connection to the host is requested.
    """

    name: str
    address: str
    port: int = 22
    username: str = "root"
    auth_method: str = AuthMethod.PASSWORD.value
    password: str = field(default="", repr=False)
    private_key_path: str = ""
    passphrase: str | None = field(default=None, repr=False)

    @property
    def connection_key(self) -> str:
        """Pool slot identity: ``username@address:port``."""
        return f"{self.username}@{self.address}:{self.port}"


@dataclass(frozen=True)
class ResolvedCredential:
    """Authentication material ready to hand to asyncssh.connect."""

    method: AuthMethod
    password: str | None = field(default=None, repr=False)
    client_keys: "tuple[asyncssh.SSHKey, ...] | None" = field(default=None, repr=False)

    def connect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for asyncssh.connect.

        Public key auth is disabled outright (``client_keys=None``) for
        password hosts so asyncssh does not fall back to ~/.ssh keys.
        """
        if self.method is AuthMethod.PASSWORD:
            return {"password": self.password, "client_keys": None}
        return {"client_keys": list(self.client_keys or ())}


@dataclass
class PooledConnection:
    """A pooled SSH connection with creation and last-used timestamps."""

    connection: "asyncssh.SSHClientConnection"
    created_at: datetime = field(default_factory=datetime.now)
    last_used: datetime = field(default_factory=datetime.now)

    def touch(self) -> None:
        """Update last-used timestamp."""
        self.last_used = datetime.now()
