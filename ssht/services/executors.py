"""Remote command execution on a pooled SSH connection."""

import logging

import asyncssh

from ssht.errors import ExecutionError, SessionError
from ssht.models import CommandResult

logger = logging.getLogger(__name__)


def _decode(stream: str | bytes | None) -> str:
    """Normalize an asyncssh output stream to text."""
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream


async def run_command(
    conn: asyncssh.SSHClientConnection,
    command: str,
    host: str = "",
) -> CommandResult:
    """Run ``command`` in a single exec session and classify the outcome.

    The session is opened and closed by ``conn.run``, including when the
    command fails or the channel breaks mid-run. Errors are returned on the
    result, never raised. Output is read as raw bytes and decoded here, so
    output that is not valid UTF-8 cannot break the channel.

    Returns:
        CommandResult whose output is the trimmed stdout on success or the
        captured stderr on failure.
    """
    try:
        result = await conn.run(command, check=False, encoding=None)
    except asyncssh.ChannelOpenError as e:
        logger.debug("[%s] Session open failed: %s", host, e)
        return CommandResult(
            host=host,
            error=SessionError(host, f"failed to create session: {e.reason}"),
        )
    except (asyncssh.Error, OSError) as e:
        logger.debug("[%s] Session broke while running command: %r", host, e)
        return CommandResult(
            host=host,
            error=ExecutionError(host, f"command execution failed: {e}"),
        )

    stdout = _decode(result.stdout)
    stderr = _decode(result.stderr)
    exit_status = result.exit_status

    if exit_status == 0:
        return CommandResult(
            host=host,
            output=stdout.strip(),
            stderr=stderr,
            exit_status=exit_status,
        )

    if exit_status is None or exit_status < 0:
        signal = result.exit_signal[0] if result.exit_signal else None
        reason = f"terminated by signal {signal}" if signal else "no exit status"
    else:
        reason = f"exited with status {exit_status}"

    return CommandResult(
        host=host,
        output=stderr,
        stderr=stderr,
        exit_status=exit_status,
        error=ExecutionError(host, f"command execution failed: {reason}", exit_status),
    )
