"""Supervision client talking to the systemd user manager over D-Bus."""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Tuple

from sdbus import (
    DbusInterfaceCommon,
    SdBus,
    dbus_method,
    dbus_property,
    sd_bus_open_user,
)

from ..models.unit import UnitProperties, UnitStatus
from ..utils.constants import JOB_MODE_REPLACE, SYSTEMD_BUS_NAME, SYSTEMD_OBJECT_PATH

logger = logging.getLogger(__name__)


class SystemdManager(DbusInterfaceCommon, interface_name="org.freedesktop.systemd1.Manager"):
    """Subset of the systemd manager interface used by ark-serman."""

    @dbus_method(input_signature="asas", result_signature="a(ss)",
                 method_name="ListUnitFilesByPatterns")
    def list_unit_files_by_patterns(self, states: List[str], patterns: List[str]) -> List[Tuple[str, str]]:
        raise NotImplementedError

    @dbus_method(input_signature="as", result_signature="a(ssssssouso)",
                 method_name="ListUnitsByNames")
    def list_units_by_names(self, names: List[str]) -> List[tuple]:
        raise NotImplementedError

    @dbus_method(input_signature="ss", result_signature="o", method_name="StartUnit")
    def start_unit(self, name: str, mode: str) -> str:
        raise NotImplementedError

    @dbus_method(input_signature="ss", result_signature="o", method_name="StopUnit")
    def stop_unit(self, name: str, mode: str) -> str:
        raise NotImplementedError

    @dbus_method(method_name="Reload")
    def reload(self) -> None:
        raise NotImplementedError

    @dbus_method(input_signature="asbb", result_signature="ba(sss)",
                 method_name="EnableUnitFiles")
    def enable_unit_files(self, files: List[str], runtime: bool, force: bool) -> Tuple[bool, List[Tuple[str, str, str]]]:
        raise NotImplementedError


class SystemdService(DbusInterfaceCommon, interface_name="org.freedesktop.systemd1.Service"):
    """Resource properties of a service unit object."""

    @dbus_property(property_signature="t", property_name="CPUUsageNSec")
    def cpu_usage_nsec(self) -> int:
        raise NotImplementedError

    @dbus_property(property_signature="t", property_name="MemoryCurrent")
    def memory_current(self) -> int:
        raise NotImplementedError

    @dbus_property(property_signature="u", property_name="MainPID")
    def main_pid(self) -> int:
        raise NotImplementedError

    @dbus_property(property_signature="t", property_name="ExecMainStartTimestamp")
    def exec_main_start_timestamp(self) -> int:
        raise NotImplementedError


class SupervisionConnection:
    """A connection to the per-user systemd instance."""

    def __init__(self, bus: SdBus):
        """Initialize the connection.

        Args:
            bus: Open sd-bus connection to the user bus
        """
        self.bus = bus
        self.manager = SystemdManager(
            service_name=SYSTEMD_BUS_NAME,
            object_path=SYSTEMD_OBJECT_PATH,
            bus=bus,
        )

    def list_unit_files(self, patterns: List[str]) -> List[str]:
        """List unit file paths matching glob patterns.

        Args:
            patterns: Unit name globs (e.g., ['ark-*'])

        Returns:
            List of unit file paths
        """
        return [path for path, _state in self.manager.list_unit_files_by_patterns([], patterns)]

    def list_units(self, names: List[str]) -> List[UnitStatus]:
        """Get runtime status for the given units in one call.

        Args:
            names: Unit names

        Returns:
            List of UnitStatus, one per name
        """
        return [UnitStatus.from_dbus(row) for row in self.manager.list_units_by_names(names)]

    def get_unit_properties(self, unit_path: str) -> UnitProperties:
        """Read the resource properties of a service unit.

        Args:
            unit_path: D-Bus object path of the unit

        Returns:
            UnitProperties for the unit
        """
        service = SystemdService(
            service_name=SYSTEMD_BUS_NAME,
            object_path=unit_path,
            bus=self.bus,
        )
        return UnitProperties.from_dbus(service.properties_get_all_dict(on_unknown_member="ignore"))

    def start_unit(self, name: str, mode: str = JOB_MODE_REPLACE) -> str:
        """Queue a start job for a unit.

        Returns:
            Object path of the queued job
        """
        return self.manager.start_unit(name, mode)

    def stop_unit(self, name: str, mode: str = JOB_MODE_REPLACE) -> str:
        """Queue a stop job for a unit.

        Returns:
            Object path of the queued job
        """
        return self.manager.stop_unit(name, mode)

    def reload(self) -> None:
        """Reload unit files (systemctl --user daemon-reload)."""
        self.manager.reload()

    def enable_unit_files(self, names: List[str]) -> None:
        """Enable unit files persistently."""
        _carries_install_info, changes = self.manager.enable_unit_files(names, False, True)
        for change_type, file_name, destination in changes:
            logger.info(f"{change_type} {file_name} -> {destination}")

    def close(self) -> None:
        self.bus.close()


@contextmanager
def user_connection() -> Iterator[SupervisionConnection]:
    """Open a connection to the user's systemd instance.

    The connection is closed when the block exits, including on errors.
    """
    conn = SupervisionConnection(sd_bus_open_user())
    try:
        yield conn
    finally:
        conn.close()


def start_unit(name: str, connect=user_connection) -> str:
    """Start a unit with replace semantics on a fresh connection."""
    with connect() as conn:
        job = conn.start_unit(name)
    logger.info(f"Queued start of {name}: {job}")
    return job


def stop_unit(name: str, connect=user_connection) -> str:
    """Stop a unit with replace semantics on a fresh connection."""
    with connect() as conn:
        job = conn.stop_unit(name)
    logger.info(f"Queued stop of {name}: {job}")
    return job
