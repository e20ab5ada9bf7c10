"""Entry point for the ssht command."""

import asyncio
import logging
import sys

import click
from click.core import ParameterSource

from ssht import __version__
from ssht.app import run
from ssht.config import Config
from ssht.config.settings import LOG_FORMATS
from ssht.errors import ConfigError
from ssht.utils.console import configure_logging

logger = logging.getLogger("ssht")

EXAMPLES = """
\b
Examples:
  # Basic usage
  ssht --command "hostname"
\b
  # Run on specific nodes
  ssht --command "hostname" --nodes node1,node2
\b
  # Debug mode with JSON logging
  ssht --command "hostname" --nodes node1 --debug --log-format json
\b
  # Write logs to file
  ssht --command "hostname" --log-file output.log
"""


def _split_nodes(ctx: click.Context, param: click.Parameter, value: tuple[str, ...]) -> list[str]:
    """Accept ``--nodes a,b`` as well as repeated ``--nodes a --nodes b``."""
    return [name.strip() for item in value for name in item.split(",") if name.strip()]


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EXAMPLES,
)
@click.option("--command", "-c", "command", default=None, help="SSH command to execute (required).")
@click.option(
    "--nodes",
    "-n",
    multiple=True,
    callback=_split_nodes,
    help="Comma-separated nodes to execute on (default: groups.default, else all hosts).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to config.toml (default: ./config.toml or ./config/config.toml).",
)
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging.")
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    default=None,
    help="Log format: text or json.",
)
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Log file path (default: stderr).")
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Maximum hosts running at once.")
@click.version_option(__version__, prog_name="ssht")
def main(
    command: str | None,
    nodes: list[str],
    config_path: str | None,
    debug: bool,
    log_format: str | None,
    log_file: str | None,
    concurrency: int | None,
) -> None:
    """SSH Task Runner: run one command on many hosts over SSH."""
    ctx = click.get_current_context()
    if command is None:
        given = [name for name in ctx.params if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT]
        if not given:
            click.echo(ctx.get_help())
            ctx.exit(0)
        raise click.UsageError("Missing option '--command'.", ctx=ctx)

    config = Config.from_env(config_path=config_path)
    settings = config.settings

    # Flags override SSHT_* environment settings
    if debug:
        settings.log_level = "DEBUG"
    if log_format:
        settings.log_format = log_format.lower()
    if log_file:
        settings.log_file = log_file
    if concurrency:
        settings.max_concurrency = concurrency

    try:
        configure_logging(
            level=settings.log_level,
            log_format=settings.log_format,
            log_file=settings.log_file,
            use_colors=settings.log_colors,
        )
    except OSError as e:
        raise click.ClickException(f"failed to open log file: {e}") from e

    logger.debug("Debug mode enabled")
    logger.debug("Loaded settings: %s", settings)

    try:
        summary = asyncio.run(run(config, command, nodes))
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    sys.exit(1 if summary.failed else 0)


if __name__ == "__main__":
    main()
