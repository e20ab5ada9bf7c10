"""Host inventory parser.

Reads ``config.toml``:

    [groups]
    default = ["node1"]

    [[hosts]]
    name = "node1"
    ip = "10.0.0.1"
    port = 22
    username = "root"
    auth_method = "private_key"
    private_key_path = "$HOME/.ssh/id_ed25519"
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ssht.errors import ConfigError
from ssht.models import HostDescriptor

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"
SEARCH_DIRS = (Path("."), Path("config"))


@dataclass(frozen=True)
class Inventory:
    """Hosts in file order plus the default target group."""

    hosts: tuple[HostDescriptor, ...] = ()
    default_group: tuple[str, ...] = field(default=())

    def names(self) -> list[str]:
        return [host.name for host in self.hosts]


def find_config_file(search_dirs: tuple[Path, ...] = SEARCH_DIRS) -> Path | None:
    """Return the first ``config.toml`` found in ``search_dirs``."""
    for directory in search_dirs:
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


class InventoryParser:
    """Parser for the TOML host inventory."""

    def __init__(self, config_path: Path | str | None = None):
        """Initialize inventory parser.

        Args:
            config_path: Path to config.toml (default: search ./ and ./config/)
        """
        self.config_path = Path(config_path) if config_path else None

    def resolve_path(self) -> Path:
        """Return the config file path to read.

        Raises:
            ConfigError: If no config file can be found
        """
        if self.config_path is not None:
            if not self.config_path.is_file():
                raise ConfigError("", f"config file not found: {self.config_path}")
            return self.config_path

        found = find_config_file()
        if found is None:
            searched = ", ".join(str(d / CONFIG_FILENAME) for d in SEARCH_DIRS)
            raise ConfigError("", f"no config file found (searched {searched})")
        return found

    def parse(self) -> Inventory:
        """Read and validate the inventory.

        Raises:
            ConfigError: If the file is missing, unreadable, not valid TOML,
                or a host entry lacks required fields
        """
        path = self.resolve_path()
        logger.debug("Reading inventory from %s", path)

        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except OSError as e:
            raise ConfigError("", f"cannot read {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError("", f"invalid TOML in {path}: {e}") from e

        return self.parse_data(raw)

    def parse_data(self, raw: dict[str, Any]) -> Inventory:
        """Build an Inventory from already-decoded TOML data."""
        hosts_raw = raw.get("hosts", [])
        if not isinstance(hosts_raw, list):
            raise ConfigError("", "'hosts' must be an array of tables")

        hosts = tuple(self._parse_host(i, entry) for i, entry in enumerate(hosts_raw))

        seen: set[str] = set()
        for host in hosts:
            if host.name in seen:
                logger.warning("Host name %s appears more than once in inventory", host.name)
            seen.add(host.name)

        groups = raw.get("groups", {})
        default_group = groups.get("default", []) if isinstance(groups, dict) else []
        if not isinstance(default_group, list) or not all(isinstance(n, str) for n in default_group):
            raise ConfigError("", "'groups.default' must be a list of host names")

        logger.debug("Loaded %d host(s), default group %s", len(hosts), default_group)
        return Inventory(hosts=hosts, default_group=tuple(default_group))

    @staticmethod
    def _parse_host(index: int, entry: Any) -> HostDescriptor:
        if not isinstance(entry, dict):
            raise ConfigError("", f"hosts[{index}] must be a table")

        name = entry.get("name")
        if not name:
            raise ConfigError("", f"hosts[{index}] must have a 'name' field")

        address = entry.get("ip")
        if not address:
            raise ConfigError(name, "host must have an 'ip' field")

        port = entry.get("port", 22)
        if not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigError(name, f"invalid port: {port!r}")

        return HostDescriptor(
            name=str(name),
            address=str(address),
            port=port,
            username=str(entry.get("username", "root")),
            auth_method=str(entry.get("auth_method", "password")),
            password=str(entry.get("password", "")),
            private_key_path=str(entry.get("private_key_path", "")),
            passphrase=entry.get("passphrase") or None,
        )
