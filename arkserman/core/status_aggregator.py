"""Aggregate the status of managed game server units."""

import logging
import posixpath
from typing import List

from ..models.unit import (
    UnitRecord,
    bytes_to_megabytes,
    display_name_for,
    is_running,
    nsec_to_seconds,
)
from ..utils.constants import (
    DEFAULT_DISPLAY_PREFIX,
    DEFAULT_DISPLAY_SUFFIX,
    DEFAULT_MANAGER_UNIT,
    DEFAULT_UNIT_PATTERN,
)
from .supervision_client import user_connection

logger = logging.getLogger(__name__)


class StatusAggregator:
    """Builds UnitRecords for every unit file matching the managed pattern."""

    def __init__(self, config_manager=None, connect=user_connection):
        """Initialize the aggregator.

        Args:
            config_manager: Optional ConfigManager to read naming settings from
            connect: Callable returning a context managed SupervisionConnection
        """
        self.config_manager = config_manager
        self.connect = connect

    def _setting(self, key: str, default: str) -> str:
        if self.config_manager is None:
            return default
        return self.config_manager.get_setting(key, default)

    def list_managed_units(self) -> List[UnitRecord]:
        """Query systemd for the managed units, sorted by name.

        Any failure aborts the whole query and propagates to the caller.

        Returns:
            List of UnitRecord sorted by unit name
        """
        pattern = self._setting("unit_pattern", DEFAULT_UNIT_PATTERN)
        manager_unit = self._setting("manager_unit", DEFAULT_MANAGER_UNIT)
        prefix = self._setting("display_prefix", DEFAULT_DISPLAY_PREFIX)
        suffix = self._setting("display_suffix", DEFAULT_DISPLAY_SUFFIX)

        with self.connect() as conn:
            names = []
            for path in conn.list_unit_files([pattern]):
                name = posixpath.basename(path)
                if name == manager_unit:
                    continue
                names.append(name)

            statuses = sorted(conn.list_units(names), key=lambda s: s.name)

            records = []
            for status in statuses:
                record = UnitRecord(
                    name=status.name,
                    display_name=display_name_for(status.name, prefix, suffix),
                    active_state=status.active_state,
                    sub_state=status.sub_state,
                    description=status.description,
                    running=is_running(status.active_state),
                )
                if record.running:
                    # sd-bus connections are not thread-safe, so this stays sequential.
                    props = conn.get_unit_properties(status.unit_path)
                    record.properties = props
                    if props.cpu_usage_nsec is not None:
                        record.cpu_seconds = nsec_to_seconds(props.cpu_usage_nsec)
                    if props.memory_current is not None:
                        record.memory_mb = bytes_to_megabytes(props.memory_current)
                records.append(record)

        logger.debug(f"Found {len(records)} units matching {pattern}, "
                     f"{sum(r.running for r in records)} running")
        return records
