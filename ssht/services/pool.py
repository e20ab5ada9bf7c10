"""SSH connection pooling keyed by ``user@address:port``.

Locking Strategy:
- A single `_lock` covers every acquisition end to end: table lookup,
  liveness probe, credential resolution, dial and insert. Acquisitions for
  different hosts are serialized too, so a slow dial holds up everyone else
  waiting for a connection (hosts that already have a pooled connection only
  wait for the lock, not for the dial).
- `close()` takes the same lock.

Liveness:
- Connections are opened with asyncssh keepalives enabled, so the transport
  sends ``keepalive@openssh.com`` requests and closes the connection when the
  peer stops answering.
- The default probe only asks whether the transport has closed the
  connection; asyncssh has no public call to send a global request and wait
  for the reply. A half-open peer is therefore detected only after
  ``keepalive_interval * keepalive_count_max`` seconds (45s with the
  defaults). Until then the stale connection is still handed out, and a
  command run on it fails once the transport gives up. Pass a stricter
  ``probe`` to shorten this.
- Before reuse, the pooled connection is checked with ``probe``; a failed
  probe closes and discards it and a new one is dialled in the same call.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

import asyncssh

from ssht.errors import ConnectionError
from ssht.models import HostDescriptor, PooledConnection
from ssht.services.credentials import CredentialResolver

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 30

LivenessProbe = Callable[[asyncssh.SSHClientConnection], Awaitable[bool]]


async def keepalive_probe(conn: asyncssh.SSHClientConnection) -> bool:
    """Default probe: alive unless the transport has closed the connection."""
    return not conn.is_closed()


class ConnectionPool:
    """SSH connection pool holding at most one connection per connection key."""

    def __init__(
        self,
        resolver: CredentialResolver | None = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        known_hosts: str | None = None,
        keepalive_interval: float = 15,
        keepalive_count_max: int = 3,
        probe: LivenessProbe | None = None,
    ) -> None:
        """Initialize an empty pool.

        Args:
            resolver: Credential cache shared by all acquisitions
            connect_timeout: Dial timeout in seconds
            known_hosts: Path to known_hosts file, or None to disable verification
            keepalive_interval: Seconds between transport keepalive requests
            keepalive_count_max: Unanswered keepalives before the transport gives up
            probe: Coroutine deciding whether a pooled connection may be reused
        """
        self.resolver = resolver or CredentialResolver()
        self.connect_timeout = connect_timeout
        self.keepalive_interval = keepalive_interval
        self.keepalive_count_max = keepalive_count_max
        self._probe = probe or keepalive_probe
        self.known_hosts = known_hosts
        self._connections: dict[str, PooledConnection] = {}
        self._lock = asyncio.Lock()

        if self.known_hosts is None:
            logger.warning(
                "SSH host key verification DISABLED - any host key is accepted. "
                "Set SSHT_KNOWN_HOSTS to a known_hosts file to enable it."
            )
        else:
            logger.debug("SSH host key verification enabled (known_hosts=%s)", known_hosts)

    async def get_connection(self, host: HostDescriptor) -> asyncssh.SSHClientConnection:
        """Return the pooled connection for ``host``, dialling one if needed.

        Raises:
            ConfigError: If the host's authentication method is unsupported
            CredentialError: If the host's private key cannot be loaded
            ConnectionError: If the dial fails or times out
        """
        key = host.connection_key

        async with self._lock:
            pooled = self._connections.get(key)

            if pooled is not None:
                if await self._is_alive(pooled):
                    pooled.touch()
                    logger.debug(
                        "Reusing connection %s for %s (pool_size=%d)",
                        key,
                        host.name,
                        len(self._connections),
                    )
                    return pooled.connection

                now = datetime.now()
                logger.info(
                    "Connection %s failed liveness probe after %.0fs (idle %.0fs), reconnecting",
                    key,
                    (now - pooled.created_at).total_seconds(),
                    (now - pooled.last_used).total_seconds(),
                )
                del self._connections[key]
                self._discard(pooled)

            # Raises ConfigError/CredentialError before anything touches the network
            credential = self.resolver.resolve(host)

            logger.info("Opening SSH connection to %s (%s)", host.name, key)
            try:
                conn = await asyncssh.connect(
                    host.address,
                    port=host.port,
                    username=host.username,
                    known_hosts=self.known_hosts,
                    connect_timeout=self.connect_timeout,
                    keepalive_interval=self.keepalive_interval,
                    keepalive_count_max=self.keepalive_count_max,
                    **credential.connect_kwargs(),
                )
            except (OSError, asyncssh.Error, asyncio.TimeoutError) as e:
                logger.debug("Dial to %s failed: %r", key, e)
                raise ConnectionError(host.name, e) from e

            self._connections[key] = PooledConnection(connection=conn)
            logger.info(
                "SSH connection established to %s (pool_size=%d)",
                key,
                len(self._connections),
            )
            return conn

    async def _is_alive(self, pooled: PooledConnection) -> bool:
        try:
            return await self._probe(pooled.connection)
        except (OSError, asyncssh.Error, asyncio.TimeoutError) as e:
            logger.debug("Liveness probe raised: %r", e)
            return False

    @staticmethod
    def _discard(pooled: PooledConnection) -> None:
        try:
            pooled.connection.close()
        except Exception as e:
            logger.debug("Ignoring error closing dead connection: %r", e)

    async def close(self) -> None:
        """Close every pooled connection and empty the pool.

        All connections are closed even if some fail; only the first error is
        raised, later ones are logged and dropped.
        """
        async with self._lock:
            if not self._connections:
                return

            logger.info("Closing all %d connection(s)", len(self._connections))
            first_error: Exception | None = None
            for key, pooled in self._connections.items():
                try:
                    pooled.connection.close()
                    await pooled.connection.wait_closed()
                except Exception as e:
                    if first_error is None:
                        first_error = e
                    else:
                        logger.warning("Dropping close error for %s: %s", key, e)
            self._connections.clear()

        if first_error is not None:
            raise first_error

    @property
    def pool_size(self) -> int:
        """Return the current number of connections in the pool."""
        return len(self._connections)

    @property
    def active_keys(self) -> list[str]:
        """Return connection keys with a pooled connection."""
        return list(self._connections.keys())
