"""Tests for SSH command execution."""

from unittest.mock import AsyncMock, MagicMock

import asyncssh
import pytest

from ssht.errors import ExecutionError, SessionError
from ssht.models import HostDescriptor
from ssht.services.executors import run_command
from ssht.services.pool import ConnectionPool


def completed(stdout="", stderr="", exit_status=0, exit_signal=None) -> MagicMock:
    """Build a fake SSHCompletedProcess."""
    return MagicMock(
        stdout=stdout,
        stderr=stderr,
        exit_status=exit_status,
        exit_signal=exit_signal,
    )


@pytest.fixture
def mock_connection() -> MagicMock:
    """Create a mock SSH connection."""
    conn = MagicMock()
    conn.run = AsyncMock()
    return conn


@pytest.mark.asyncio
async def test_success_returns_trimmed_stdout(mock_connection: MagicMock) -> None:
    """Successful commands report stdout without surrounding whitespace."""
    mock_connection.run.return_value = completed(stdout="  web1.example.com\n", stderr="warn\n")

    result = await run_command(mock_connection, "hostname", host="web1")

    assert result.host == "web1"
    assert result.output == "web1.example.com"
    assert result.stderr == "warn\n"
    assert result.exit_status == 0
    assert result.error is None
    mock_connection.run.assert_awaited_once_with("hostname", check=False, encoding=None)


@pytest.mark.asyncio
async def test_nonzero_exit_reports_stderr(mock_connection: MagicMock) -> None:
    """Failed commands report stderr, not partial stdout."""
    mock_connection.run.return_value = completed(
        stdout="partial", stderr="permission denied", exit_status=1
    )

    result = await run_command(mock_connection, "cat /etc/shadow", host="web1")

    assert isinstance(result.error, ExecutionError)
    assert result.error.exit_status == 1
    assert "exited with status 1" in str(result.error)
    assert result.output == "permission denied"
    assert result.exit_status == 1


@pytest.mark.asyncio
async def test_signal_termination_is_execution_error(mock_connection: MagicMock) -> None:
    """Commands killed by a signal are failures."""
    mock_connection.run.return_value = completed(
        stderr="", exit_status=-1, exit_signal=("KILL", False, "", "")
    )

    result = await run_command(mock_connection, "sleep 100", host="web1")

    assert isinstance(result.error, ExecutionError)
    assert "signal KILL" in str(result.error)


@pytest.mark.asyncio
async def test_session_open_failure_is_session_error(mock_connection: MagicMock) -> None:
    """Channel open failures become SessionError with empty output."""
    mock_connection.run.side_effect = asyncssh.ChannelOpenError(2, "Too many sessions")

    result = await run_command(mock_connection, "uptime", host="web1")

    assert isinstance(result.error, SessionError)
    assert "Too many sessions" in str(result.error)
    assert result.output == ""


@pytest.mark.asyncio
async def test_connection_lost_during_run_is_execution_error(mock_connection: MagicMock) -> None:
    """Protocol failures while the command runs become ExecutionError."""
    mock_connection.run.side_effect = asyncssh.ConnectionLost("Connection reset")

    result = await run_command(mock_connection, "uptime", host="web1")

    assert isinstance(result.error, ExecutionError)
    assert result.output == ""


@pytest.mark.asyncio
async def test_invalid_utf8_output_is_replaced_not_dropped(mock_connection: MagicMock) -> None:
    """Output is fetched as bytes; undecodable bytes become U+FFFD."""
    mock_connection.run.return_value = completed(stdout=b"ok \xff\xfe binary\n", stderr=None)

    result = await run_command(mock_connection, "cat blob", host="web1")

    assert result.error is None
    assert result.output == "ok \ufffd\ufffd binary"
    assert result.stderr == ""
    mock_connection.run.assert_awaited_once_with("cat blob", check=False, encoding=None)


@pytest.mark.asyncio
async def test_failure_stderr_bytes_are_decoded(mock_connection: MagicMock) -> None:
    mock_connection.run.return_value = completed(stdout=b"", stderr=b"caf\xc3\xa9 \xff\n", exit_status=2)

    result = await run_command(mock_connection, "false", host="web1")

    assert isinstance(result.error, ExecutionError)
    assert result.output == "café \ufffd\n"


class _AcceptAnyPassword(asyncssh.SSHServer):
    def begin_auth(self, username: str) -> bool:
        return True

    def password_auth_supported(self) -> bool:
        return True

    def validate_password(self, username: str, password: str) -> bool:
        return True


async def _write_binary(process: asyncssh.SSHServerProcess) -> None:
    process.stdout.write(b"ok \xff\xfe binary\n")
    process.exit(0)


@pytest.mark.asyncio
async def test_binary_output_over_real_session_keeps_connection_alive() -> None:
    """A local asyncssh server writes non-UTF-8 bytes; the pooled connection survives."""
    server = await asyncssh.create_server(
        _AcceptAnyPassword,
        "127.0.0.1",
        0,
        server_host_keys=[asyncssh.generate_private_key("ssh-ed25519")],
        process_factory=_write_binary,
        encoding=None,
    )
    pool = ConnectionPool(known_hosts=None, connect_timeout=5)
    host = HostDescriptor(
        name="h1",
        address="127.0.0.1",
        port=server.get_port(),
        username="tester",
        password="pw",
    )
    try:
        conn = await pool.get_connection(host)

        result = await run_command(conn, "cat blob", host="h1")

        assert result.error is None
        assert result.exit_status == 0
        assert result.output == "ok \ufffd\ufffd binary"
        assert not conn.is_closed()
        assert await pool.get_connection(host) is conn
    finally:
        await pool.close()
        server.close()
        await server.wait_closed()
