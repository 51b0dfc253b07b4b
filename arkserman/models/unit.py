"""Data models for systemd unit status."""

import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Mapping, Optional

from ..utils.constants import UINT64_MAX


class ActiveState(Enum):
    """Enumeration of systemd unit activity states."""

    ACTIVE = "active"
    RELOADING = "reloading"
    INACTIVE = "inactive"
    FAILED = "failed"
    ACTIVATING = "activating"
    DEACTIVATING = "deactivating"
    MAINTENANCE = "maintenance"
    REFRESHING = "refreshing"
    UNKNOWN = "unknown"

    @classmethod
    def from_string(cls, state_str: str) -> 'ActiveState':
        """Convert a string to ActiveState enum.

        Args:
            state_str: ActiveState as reported by systemd

        Returns:
            ActiveState enum value
        """
        try:
            return cls(state_str.lower())
        except (AttributeError, ValueError):
            return cls.UNKNOWN


RUNNING_STATES = frozenset({ActiveState.ACTIVE, ActiveState.ACTIVATING, ActiveState.DEACTIVATING})


def is_running(active_state: str) -> bool:
    """Return True when a unit in this state has a live process."""
    return ActiveState.from_string(active_state) in RUNNING_STATES


def round_half_up(value: Decimal, places: int = 1) -> float:
    """Round away from zero at the given number of decimal places."""
    return float(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def nsec_to_seconds(nsec: int) -> float:
    """Convert a CPU time counter in nanoseconds to seconds, 1 decimal."""
    return round_half_up(Decimal(nsec) / Decimal(10 ** 9))


def bytes_to_megabytes(nbytes: int) -> float:
    """Convert a byte counter to decimal megabytes (1e6), 1 decimal."""
    return round_half_up(Decimal(nbytes) / Decimal(10 ** 6))


def display_name_for(name: str, prefix: str, suffix: str) -> str:
    """Strip the naming convention prefix and suffix from a unit name.

    Lengths are stripped, not strings, so ``ark-island.service`` with
    prefix ``ark-`` and suffix ``.service`` gives ``island``.
    """
    return name[len(prefix):len(name) - len(suffix)]


def _counter(value: Any) -> Optional[int]:
    if value is None:
        return None
    value = int(value)
    if value == UINT64_MAX:
        return None
    return value


@dataclass(frozen=True)
class UnitStatus:
    """One row of the batched unit status query.

    Attributes:
        name: Unit name (e.g., 'ark-island.service')
        description: Unit description
        load_state: Load state (loaded, not-found, ...)
        active_state: Activity state reported by systemd
        sub_state: Unit type specific sub state
        unit_path: D-Bus object path of the unit
    """

    name: str
    description: str = ""
    load_state: str = ""
    active_state: str = "unknown"
    sub_state: str = ""
    unit_path: str = ""

    @classmethod
    def from_dbus(cls, row: tuple) -> 'UnitStatus':
        """Create UnitStatus from a ListUnitsByNames result row.

        Args:
            row: (name, description, load, active, sub, followed, path, ...)

        Returns:
            UnitStatus instance
        """
        return cls(
            name=row[0],
            description=row[1],
            load_state=row[2],
            active_state=row[3],
            sub_state=row[4],
            unit_path=row[6],
        )


@dataclass(frozen=True)
class UnitProperties:
    """Resource properties of a running service unit.

    Counters systemd does not track are None.

    Attributes:
        cpu_usage_nsec: Consumed CPU time in nanoseconds
        memory_current: Current memory usage in bytes
        main_pid: PID of the main service process
        exec_main_start_timestamp: Main process start, microseconds since epoch
    """

    cpu_usage_nsec: Optional[int] = None
    memory_current: Optional[int] = None
    main_pid: Optional[int] = None
    exec_main_start_timestamp: Optional[int] = None

    @classmethod
    def from_dbus(cls, props: Mapping[str, Any]) -> 'UnitProperties':
        """Create UnitProperties from a property dictionary.

        Both the D-Bus member names (``CPUUsageNSec``) and the proxy attribute
        names (``cpu_usage_nsec``) are accepted. Unknown keys are ignored.

        Args:
            props: Raw property mapping

        Returns:
            UnitProperties instance
        """
        def pick(*keys):
            for key in keys:
                if key in props:
                    return props[key]
            return None

        main_pid = _counter(pick("main_pid", "MainPID"))
        start = _counter(pick("exec_main_start_timestamp", "ExecMainStartTimestamp"))
        return cls(
            cpu_usage_nsec=_counter(pick("cpu_usage_nsec", "CPUUsageNSec")),
            memory_current=_counter(pick("memory_current", "MemoryCurrent")),
            main_pid=main_pid or None,
            exec_main_start_timestamp=start or None,
        )

    def uptime(self, now: Optional[float] = None) -> Optional[int]:
        """Seconds since the main process started, if known."""
        if self.exec_main_start_timestamp is None:
            return None
        if now is None:
            now = time.time()
        return max(0, int(now - self.exec_main_start_timestamp / 1_000_000))


@dataclass
class UnitRecord:
    """Snapshot of one managed unit as shown on the dashboard.

    Attributes:
        name: Unit name
        display_name: Name with the naming convention stripped
        active_state: Activity state reported by systemd
        sub_state: Unit type specific sub state
        description: Unit description
        running: True if active, activating or deactivating
        cpu_seconds: CPU time in seconds (running units only)
        memory_mb: Memory in decimal megabytes (running units only)
        properties: Typed resource properties (running units only)
    """

    name: str
    display_name: str
    active_state: str
    sub_state: str = ""
    description: str = ""
    running: bool = False
    cpu_seconds: Optional[float] = None
    memory_mb: Optional[float] = None
    properties: Optional[UnitProperties] = None

    @property
    def state(self) -> ActiveState:
        return ActiveState.from_string(self.active_state)

    @property
    def uptime(self) -> Optional[int]:
        if self.properties is None:
            return None
        return self.properties.uptime()

    def get_uptime_str(self) -> str:
        """Get human-readable uptime string.

        Returns:
            Formatted uptime string (e.g., '2h 34m')
        """
        uptime = self.uptime
        if uptime is None:
            return "N/A"

        hours, remainder = divmod(uptime, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}h {minutes}m"
        elif minutes > 0:
            return f"{minutes}m {seconds}s"
        else:
            return f"{seconds}s"

    def get_cpu_str(self) -> str:
        if self.cpu_seconds is None:
            return "N/A"
        return f"{self.cpu_seconds:.1f} s"

    def get_memory_str(self) -> str:
        """Get memory usage string.

        The value uses a decimal divisor, so it is labelled MB.

        Returns:
            Formatted memory string (e.g., '523.5 MB')
        """
        if self.memory_mb is None:
            return "N/A"
        return f"{self.memory_mb:.1f} MB"
