"""Protocol interfaces for the dispatcher's collaborators.

The dispatcher depends on these, not on the concrete pool and executor, so
tests can pass in instrumented fakes:

    class FakePool:
        async def get_connection(self, host):
            return MagicMock()

        async def close(self):
            pass

    dispatcher = Dispatcher(pool=FakePool(), runner=counting_runner)
"""

from typing import Any, Protocol, runtime_checkable

from ssht.models import CommandResult, HostDescriptor


@runtime_checkable
class SSHConnectionPool(Protocol):
    """Protocol for SSH connection pooling."""

    async def get_connection(self, host: HostDescriptor) -> Any:
        """Get or create the connection for ``host``.

        Raises:
            ConfigError: If the host's auth method is unsupported
            CredentialError: If the host's key cannot be loaded
            ConnectionError: If unable to connect
        """
        ...

    async def close(self) -> None:
        """Close all connections in the pool."""
        ...


class CommandRunner(Protocol):
    """Callable running one command on one connection.

    Must return a CommandResult rather than raise for remote failures.
    """

    async def __call__(self, conn: Any, command: str, host: str = "") -> CommandResult:
        ...
