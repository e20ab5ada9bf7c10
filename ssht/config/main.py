"""Application configuration.

Delegates to specialized components:
- InventoryParser: Reads config.toml (hosts and groups)
- Settings: Environment variables
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ssht.config.parser import Inventory, InventoryParser
from ssht.config.settings import Settings
from ssht.models import HostDescriptor

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Application configuration.

    Aggregates the host inventory and environment settings.
    """

    settings: Settings
    parser: InventoryParser
    _inventory: Inventory | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_env(cls, config_path: Path | str | None = None) -> "Config":
        """Create config from environment.

        Args:
            config_path: Inventory file; overrides SSHT_CONFIG and the search path

        Returns:
            Configured instance (the inventory is read lazily)
        """
        settings = Settings.from_env()
        parser = InventoryParser(config_path=config_path or settings.config_path)
        return cls(settings=settings, parser=parser)

    @property
    def inventory(self) -> Inventory:
        """Parsed inventory, loaded on first access.

        Raises:
            ConfigError: If the inventory cannot be loaded
        """
        if self._inventory is None:
            self._inventory = self.parser.parse()
        return self._inventory

    def get_hosts(self) -> list[HostDescriptor]:
        """All hosts in file order."""
        return list(self.inventory.hosts)

    def resolve_targets(self, nodes: list[str] | None = None) -> list[str]:
        """Target names for a run: ``nodes`` if given, else the default group.

        An empty result means "every host".
        """
        if nodes:
            return list(nodes)
        return list(self.inventory.default_group)

    # Delegate to settings for convenience
    @property
    def max_concurrency(self) -> int:
        """Maximum number of hosts running at once."""
        return self.settings.max_concurrency
