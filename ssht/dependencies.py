"""Dependency container for ssht.

Owns the configuration and the connection pool for one run. The pool lives
exactly as long as its container: nothing is shared between processes or
between containers.
"""

from dataclasses import dataclass, field

from ssht.config import Config
from ssht.services.credentials import CredentialResolver
from ssht.services.dispatcher import Dispatcher
from ssht.services.pool import ConnectionPool


@dataclass
class Dependencies:
    """Container for ssht dependencies.

    Example:
        deps = Dependencies.from_config(Config.from_env())
        try:
            results = await deps.dispatcher.dispatch(hosts, targets, "uptime")
        finally:
            await deps.cleanup()
    """

    config: Config
    pool: ConnectionPool
    dispatcher: Dispatcher = field(init=False)

    def __post_init__(self) -> None:
        self.dispatcher = Dispatcher(
            pool=self.pool,
            max_concurrency=self.config.max_concurrency,
        )

    @classmethod
    def from_config(cls, config: Config) -> "Dependencies":
        """Create dependencies with a pool built from ``config``.

        Args:
            config: Config instance

        Returns:
            Dependencies with a fresh pool and credential cache
        """
        settings = config.settings
        pool = ConnectionPool(
            resolver=CredentialResolver(),
            connect_timeout=settings.connect_timeout,
            known_hosts=settings.known_hosts,
            keepalive_interval=settings.keepalive_interval,
            keepalive_count_max=settings.keepalive_count_max,
        )
        return cls(config=config, pool=pool)

    async def cleanup(self) -> None:
        """Close all pooled connections (raises the first close error)."""
        await self.pool.close()
