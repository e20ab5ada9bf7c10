"""Logging of per-host command results."""

import logging
from dataclasses import dataclass, field

from ssht.models import CommandResult

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Counts of finished hosts for the end-of-run summary."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def add(self, result: CommandResult) -> None:
        if result.success:
            self.succeeded.append(result.host)
        else:
            self.failed.append(result.host)


def report_result(result: CommandResult) -> None:
    """Log one host's result as it arrives."""
    name = result.host
    extra = {
        "host": name,
        "duration_ms": round(result.duration_ms),
        "error_kind": result.error_kind,
    }

    if result.output:
        logger.debug("[%s] Command output:\n%s", name, result.output)

    if result.error is not None:
        logger.error("[%s] Command failed: %s", name, result.error.message, extra=extra)
        if result.output:
            logger.error("[%s] %s", name, result.output.strip(), extra=extra)
    elif result.output:
        logger.info("[%s] %s", name, result.output, extra=extra)
    else:
        logger.info("[%s] Command executed", name, extra=extra)

    logger.info("[%s] Duration: %.0fms", name, result.duration_ms, extra=extra)


class Reporter:
    """Result callback that logs each result and keeps a summary."""

    def __init__(self) -> None:
        self.summary = RunSummary()

    def __call__(self, result: CommandResult) -> None:
        self.summary.add(result)
        report_result(result)

    def log_summary(self) -> None:
        summary = self.summary
        if summary.failed:
            logger.warning(
                "SSH task completed: %d/%d succeeded, failed: %s",
                len(summary.succeeded),
                summary.total,
                ", ".join(sorted(summary.failed)),
            )
        else:
            logger.info("SSH task completed: %d/%d succeeded", len(summary.succeeded), summary.total)
