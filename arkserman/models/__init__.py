"""Data models for systemd unit status."""

from .unit import ActiveState, UnitProperties, UnitRecord, UnitStatus

__all__ = ["ActiveState", "UnitProperties", "UnitRecord", "UnitStatus"]
