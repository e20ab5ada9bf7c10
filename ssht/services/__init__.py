"""Services for ssht."""

from ssht.services.credentials import CredentialResolver
from ssht.services.dispatcher import Dispatcher, select_hosts
from ssht.services.executors import run_command
from ssht.services.pool import ConnectionPool, keepalive_probe

__all__ = [
    "ConnectionPool",
    "CredentialResolver",
    "Dispatcher",
    "keepalive_probe",
    "run_command",
    "select_hosts",
]
