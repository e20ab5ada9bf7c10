"""Command execution data models."""

from dataclasses import dataclass

from ssht.errors import SshtError


@dataclass(frozen=True)
class CommandResult:
    """Result of running the command on one host.

    ``output`` is what gets reported: trimmed stdout on success, the captured
    stderr when the command failed, empty when no session could be opened.
    """

    host: str
    output: str = ""
    stderr: str = ""
    exit_status: int | None = None
    duration: float = 0.0
    error: SshtError | None = None

    @property
    def success(self) -> bool:
        """True when the command ran and exited cleanly."""
        return self.error is None

    @property
    def error_kind(self) -> str | None:
        """Class name of the error, e.g. ``"ExecutionError"``."""
        return type(self.error).__name__ if self.error is not None else None

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds."""
        return self.duration * 1000
