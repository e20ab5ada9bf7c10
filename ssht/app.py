"""Top-level run: load inventory, dispatch, report, close the pool."""

import logging

from ssht.config import Config
from ssht.dependencies import Dependencies
from ssht.report import Reporter, RunSummary

logger = logging.getLogger(__name__)


async def run(config: Config, command: str, nodes: list[str] | None = None) -> RunSummary:
    """Run ``command`` on the selected hosts and return the summary.

    The pool is created for this run and closed before returning, so
    connections are reused within a run but never across runs.

    Raises:
        ConfigError: If the inventory cannot be loaded
    """
    hosts = config.get_hosts()
    targets = config.resolve_targets(nodes)

    logger.debug("Target nodes: %s", targets or "all")
    logger.debug("Available hosts: %s", config.inventory.names())
    logger.info(
        "Starting SSH task execution (command=%r, nodes=%d)",
        command,
        len(targets) if targets else len(hosts),
    )

    deps = Dependencies.from_config(config)
    reporter = Reporter()
    try:
        await deps.dispatcher.dispatch(hosts, targets, command, on_result=reporter)
    finally:
        try:
            await deps.cleanup()
        except Exception as e:
            logger.warning("Error while closing connections: %s", e)

    reporter.log_summary()
    return reporter.summary
