"""Credential resolution with a per-connection-key cache."""

import logging
import os

import asyncssh

from ssht.errors import ConfigError, CredentialError
from ssht.models import AuthMethod, HostDescriptor, ResolvedCredential

logger = logging.getLogger(__name__)


def expand_key_path(path: str) -> str:
    """Expand ``$VAR``/``${VAR}`` references and a leading ``~`` in a key path."""
    return os.path.expanduser(os.path.expandvars(path))


class CredentialResolver:
    """Turns a host's auth fields into credentials, once per connection key.

    The first successful resolution for a key wins; later hosts sharing the
    same ``user@address:port`` get the cached credential even if their own
    auth fields differ. Failures are not cached.
    """

    def __init__(self) -> None:
        self._cache: dict[str, ResolvedCredential] = {}

    def resolve(self, host: HostDescriptor) -> ResolvedCredential:
        """Return credentials for ``host``, computing them on first use.

        Raises:
            ConfigError: If the authentication method is not supported
            CredentialError: If the private key cannot be read or parsed
        """
        key = host.connection_key
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Using cached credentials for %s", key)
            return cached

        credential = self._build(host)
        self._cache[key] = credential
        logger.debug("Resolved %s credentials for %s", credential.method.value, key)
        return credential

    def _build(self, host: HostDescriptor) -> ResolvedCredential:
        try:
            method = AuthMethod(host.auth_method)
        except ValueError:
            raise ConfigError(
                host.name,
                f"unsupported authentication method: {host.auth_method!r}",
            ) from None

        if method is AuthMethod.PASSWORD:
            return ResolvedCredential(method=method, password=host.password)

        key = self._read_private_key(host)
        return ResolvedCredential(method=method, client_keys=(key,))

    def _read_private_key(self, host: HostDescriptor) -> asyncssh.SSHKey:
        if not host.private_key_path:
            raise ConfigError(host.name, "private_key auth requires private_key_path")

        path = expand_key_path(host.private_key_path)
        try:
            return asyncssh.read_private_key(path, passphrase=host.passphrase or None)
        except OSError as e:
            raise CredentialError(host.name, path, e) from e
        except (asyncssh.KeyImportError, ValueError) as e:
            raise CredentialError(host.name, path, e) from e
