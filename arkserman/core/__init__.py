"""Core functionality for managing game server units."""

from .admin_client import AdminCommandClient
from .config_manager import ConfigManager
from .status_aggregator import StatusAggregator
from .unit_installer import UnitInstaller

__all__ = ["AdminCommandClient", "ConfigManager", "StatusAggregator", "UnitInstaller"]
