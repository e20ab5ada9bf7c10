"""Log formatters (colourful text and JSON) and logging setup."""

import json
import logging
import re
import sys
from datetime import datetime
from typing import IO

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "white": "\033[37m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

# Log level colors
LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "ssht.services.pool": COLORS["bright_magenta"],
    "ssht.services.dispatcher": COLORS["bright_blue"],
    "ssht.report": COLORS["bright_cyan"],
    "ssht.config": COLORS["green"],
    "default": COLORS["white"],
}

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

HOST_TAG_PATTERN = re.compile(r"^(\[[^\]]+\])")
DURATION_PATTERN = re.compile(r"(\d+\.?\d*ms)")
CONNECTION_KEY_PATTERN = re.compile(r"([\w.\-]+@[\w.\-:\[\]]+:\d+)")
POOL_SIZE_PATTERN = re.compile(r"(pool_size=\d+)")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        """Get color for a logger name/component."""
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_level(self, record: logging.LogRecord) -> str:
        """Format log level with color and fixed width."""
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        """Format component/logger name with color."""
        name = record.name
        if name.startswith("ssht."):
            name = name[5:]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as ``time | level | component | message``."""
        timestamp = datetime.fromtimestamp(record.created).strftime(TIMESTAMP_FORMAT)
        timestamp = self._colorize(timestamp, COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    def _highlight_message(self, message: str) -> str:
        """Highlight host tags, durations and connection keys."""
        if not self.use_colors:
            return message

        message = HOST_TAG_PATTERN.sub(f"{COLORS['bright_cyan']}\\1{COLORS['reset']}", message)
        if "ms" in message:
            message = DURATION_PATTERN.sub(f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message)
        if "@" in message:
            message = CONNECTION_KEY_PATTERN.sub(f"{COLORS['bright_magenta']}\\1{COLORS['reset']}", message)
        if "pool_size=" in message:
            message = POOL_SIZE_PATTERN.sub(f"{COLORS['cyan']}\\1{COLORS['reset']}", message)
        return message


class JSONFormatter(logging.Formatter):
    """One JSON object per line: time, level, logger, message (+ extras)."""

    RESERVED = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": datetime.fromtimestamp(record.created).strftime(TIMESTAMP_FORMAT),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in self.RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    use_colors: bool = True,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Configure the ``ssht`` package logger.

    Replaces any handler previously installed by this function, so it can be
    called again (e.g. from tests).

    Args:
        level: Log level name
        log_format: "text" or "json"
        log_file: Append logs to this file instead of stderr
        use_colors: Colour text output (ignored for files and non-TTY streams)
        stream: Stream to write to when no log_file is given (default: stderr)

    Returns:
        The installed handler.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        use_colors = False
    else:
        stream = stream or sys.stderr
        handler = logging.StreamHandler(stream)
        if not stream.isatty():
            use_colors = False

    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))

    ssht_logger = logging.getLogger("ssht")
    for old in list(ssht_logger.handlers):
        ssht_logger.removeHandler(old)
        old.close()
    ssht_logger.addHandler(handler)
    ssht_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    ssht_logger.propagate = False

    # asyncssh logs every channel at INFO; only surface it when debugging
    asyncssh_level = logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    logging.getLogger("asyncssh").setLevel(asyncssh_level)

    return handler
