"""Configuration module for ssht.

- Config: Main configuration class (aggregates all components)
- InventoryParser: Parses config.toml host inventories
- Settings: Environment variable configuration
"""

from ssht.config.main import Config
from ssht.config.parser import Inventory, InventoryParser
from ssht.config.settings import Settings

__all__ = ["Config", "Inventory", "InventoryParser", "Settings"]
