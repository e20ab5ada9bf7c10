"""Bounded concurrent fan-out of one command to many hosts."""

import asyncio
import dataclasses
import logging
import time
from collections.abc import Callable, Iterable, Sequence

from ssht.errors import ExecutionError, SshtError
from ssht.models import CommandResult, HostDescriptor
from ssht.protocols import CommandRunner, SSHConnectionPool
from ssht.services.executors import run_command

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 10

ResultCallback = Callable[[CommandResult], None]


def select_hosts(
    hosts: Iterable[HostDescriptor],
    targets: Sequence[str],
) -> list[HostDescriptor]:
    """Pick the hosts whose name is in ``targets``, keeping inventory order.

    An empty ``targets`` selects every host.
    """
    hosts = list(hosts)
    if not targets:
        return hosts

    wanted = set(targets)
    selected = [host for host in hosts if host.name in wanted]

    unknown = wanted - {host.name for host in hosts}
    for name in sorted(unknown):
        logger.warning("Target %s is not in the host inventory, skipping", name)

    return selected


class Dispatcher:
    """Runs a command on selected hosts with at most ``max_concurrency`` in flight.

    Each host gets its own task. A slot is taken before the task is launched
    and given back when the task finishes, whatever the outcome. One host's
    failure never affects another host's scheduling or result.

    Example:
        dispatcher = Dispatcher(pool=deps.pool, max_concurrency=10)
        results = await dispatcher.dispatch(hosts, ["web1", "web2"], "uptime")
    """

    def __init__(
        self,
        pool: SSHConnectionPool,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        runner: CommandRunner = run_command,
    ) -> None:
        """Initialize dispatcher.

        Args:
            pool: Connection pool to acquire connections from
            max_concurrency: Maximum number of host tasks running at once (> 0)
            runner: Coroutine running the command on a connection

        Raises:
            ValueError: If max_concurrency is not positive
        """
        if max_concurrency <= 0:
            raise ValueError(f"max_concurrency must be > 0, got {max_concurrency}")

        self.pool = pool
        self.max_concurrency = max_concurrency
        self.runner = runner

    async def dispatch(
        self,
        hosts: Iterable[HostDescriptor],
        targets: Sequence[str],
        command: str,
        on_result: ResultCallback | None = None,
    ) -> list[CommandResult]:
        """Run ``command`` on every selected host and wait for all of them.

        Args:
            hosts: Full host inventory
            targets: Host names to run on (empty means all hosts)
            command: Shell command to execute
            on_result: Called with each result as soon as its host finishes

        Returns:
            One CommandResult per selected host, in completion order.
        """
        selected = select_hosts(hosts, targets)
        logger.debug(
            "Dispatching to %d host(s) (max_concurrency=%d)",
            len(selected),
            self.max_concurrency,
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)
        results: list[CommandResult] = []

        async def run_single(host: HostDescriptor) -> None:
            try:
                result = await self._execute(host, command)
            finally:
                semaphore.release()

            results.append(result)
            if on_result is not None:
                try:
                    on_result(result)
                except Exception:
                    logger.exception("[%s] Result callback failed", host.name)

        tasks: list[asyncio.Task[None]] = []
        for host in selected:
            await semaphore.acquire()
            tasks.append(asyncio.create_task(run_single(host), name=f"ssht:{host.name}"))

        await asyncio.gather(*tasks)
        return results

    async def _execute(self, host: HostDescriptor, command: str) -> CommandResult:
        """Acquire a connection and run the command; never raises."""
        start = time.perf_counter()
        logger.debug("[%s] Executing command: %r", host.name, command)
        logger.debug("[%s] Connection details: %s", host.name, host.connection_key)

        try:
            conn = await self.pool.get_connection(host)
            result = await self.runner(conn, command, host.name)
        except SshtError as e:
            result = CommandResult(host=host.name, error=e)
        except Exception as e:
            logger.exception("[%s] Unexpected error", host.name)
            result = CommandResult(
                host=host.name,
                error=ExecutionError(host.name, f"unexpected error: {e}"),
            )

        duration = time.perf_counter() - start
        logger.debug("[%s] Execution completed in %.0fms", host.name, duration * 1000)
        return dataclasses.replace(result, host=host.name, duration=duration)
