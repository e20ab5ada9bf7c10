"""Shared fixtures for ssht tests."""

import logging
from collections.abc import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest

from ssht.models import HostDescriptor


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's SSHT_* variables out of tests."""
    for key in (
        "SSHT_MAX_CONCURRENCY",
        "SSHT_CONNECT_TIMEOUT",
        "SSHT_KEEPALIVE_INTERVAL",
        "SSHT_KEEPALIVE_COUNT_MAX",
        "SSHT_KNOWN_HOSTS",
        "SSHT_CONFIG",
        "SSHT_LOG_LEVEL",
        "SSHT_LOG_FORMAT",
        "SSHT_LOG_FILE",
        "SSHT_LOG_COLORS",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_ssht_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog sees ssht records again."""
    yield
    ssht_logger = logging.getLogger("ssht")
    for handler in list(ssht_logger.handlers):
        ssht_logger.removeHandler(handler)
        handler.close()
    ssht_logger.setLevel(logging.NOTSET)
    ssht_logger.propagate = True
    logging.getLogger("asyncssh").setLevel(logging.NOTSET)


@pytest.fixture
def make_connection() -> Callable[..., MagicMock]:
    """Factory for fake asyncssh connections."""

    def factory(closed: bool = False) -> MagicMock:
        conn = MagicMock(name="SSHClientConnection")
        conn.is_closed = MagicMock(return_value=closed)
        conn.wait_closed = AsyncMock()
        conn.run = AsyncMock()
        return conn

    return factory


@pytest.fixture
def password_host() -> HostDescriptor:
    """A password-authenticated host."""
    return HostDescriptor(
        name="web1",
        address="192.168.1.100",
        port=22,
        username="deploy",
        auth_method="password",
        password="hunter2",
    )
