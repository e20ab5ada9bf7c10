"""Exception hierarchy for ssht.

Pool errors (ConfigError, CredentialError, ConnectionError) are raised from
ConnectionPool.get_connection. Execution errors (SessionError, ExecutionError)
are never raised to the dispatcher; run_command stores them on the
CommandResult of the host they belong to.
"""


class SshtError(Exception):
    """Base class for all ssht errors."""

    def __init__(self, host_name: str, message: str) -> None:
        """Initialize error.

        Args:
            host_name: Name of the host the error belongs to ("" if none)
            message: Human readable description
        """
        self.host_name = host_name
        self.message = message
        super().__init__(f"{host_name}: {message}" if host_name else message)


class ConfigError(SshtError):
    """Invalid configuration, e.g. an unsupported authentication method."""


class CredentialError(SshtError):
    """Private key could not be read or parsed."""

    def __init__(self, host_name: str, path: str, original_error: Exception):
        self.path = path
        self.original_error = original_error
        super().__init__(host_name, f"cannot load private key {path}: {original_error}")


class ConnectionError(SshtError):
    """Failed to establish (or re-establish) an SSH connection."""

    def __init__(self, host_name: str, original_error: Exception):
        """Initialize connection error.

        Args:
            host_name: Name of the SSH host
            original_error: Original exception that caused the failure
        """
        self.original_error = original_error
        super().__init__(host_name, f"connection failed: {original_error}")


class SessionError(SshtError):
    """Could not open an exec session on an otherwise live connection."""


class ExecutionError(SshtError):
    """Remote command failed or the session broke while it ran."""

    def __init__(self, host_name: str, message: str, exit_status: int | None = None):
        self.exit_status = exit_status
        super().__init__(host_name, message)
