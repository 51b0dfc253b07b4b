from decimal import Decimal

import pytest

from arkserman.models.unit import (
    ActiveState,
    UnitProperties,
    UnitRecord,
    UnitStatus,
    bytes_to_megabytes,
    display_name_for,
    is_running,
    nsec_to_seconds,
    round_half_up,
)
from arkserman.utils.constants import UINT64_MAX


@pytest.mark.parametrize(
    "state, running",
    [
        ("active", True),
        ("activating", True),
        ("deactivating", True),
        ("inactive", False),
        ("failed", False),
        ("reloading", False),
        ("maintenance", False),
        ("bogus", False),
    ],
)
def test_is_running(state, running):
    assert is_running(state) is running


def test_active_state_from_string_falls_back_to_unknown():
    assert ActiveState.from_string("ACTIVE") is ActiveState.ACTIVE
    assert ActiveState.from_string("something-new") is ActiveState.UNKNOWN
    assert ActiveState.from_string(None) is ActiveState.UNKNOWN


def test_cpu_conversion():
    assert nsec_to_seconds(1_234_500_000) == 1.2
    assert nsec_to_seconds(1_250_000_000) == 1.3
    assert nsec_to_seconds(0) == 0.0


def test_memory_conversion_uses_decimal_megabytes():
    assert bytes_to_megabytes(523_456_789) == 523.5
    assert bytes_to_megabytes(1_048_576) == 1.0
    assert bytes_to_megabytes(150_000) == 0.2


def test_round_half_up_rounds_away_from_zero():
    assert round_half_up(Decimal("0.25")) == 0.3
    assert round_half_up(Decimal("-0.25")) == -0.3
    assert round_half_up(Decimal("2.345"), places=2) == 2.35


def test_display_name_for():
    assert display_name_for("ark-island.service", "ark-", ".service") == "island"
    assert display_name_for("ark-the_center.service", "ark-", ".service") == "the_center"


def test_unit_status_from_dbus_row():
    row = (
        "ark-island.service", "Ark Island", "loaded", "active", "running", "",
        "/org/freedesktop/systemd1/unit/ark_2disland_2eservice", 0, "", "/",
    )
    status = UnitStatus.from_dbus(row)
    assert status.name == "ark-island.service"
    assert status.active_state == "active"
    assert status.sub_state == "running"
    assert status.unit_path.endswith("ark_2disland_2eservice")


def test_unit_properties_from_dbus_accepts_both_key_styles():
    props = UnitProperties.from_dbus({"CPUUsageNSec": 10, "MemoryCurrent": 20, "Other": "x"})
    assert props.cpu_usage_nsec == 10
    assert props.memory_current == 20

    props = UnitProperties.from_dbus({"cpu_usage_nsec": 30, "main_pid": 12})
    assert props.cpu_usage_nsec == 30
    assert props.memory_current is None
    assert props.main_pid == 12


def test_unit_properties_unset_counters_are_none():
    props = UnitProperties.from_dbus({
        "CPUUsageNSec": UINT64_MAX,
        "MemoryCurrent": UINT64_MAX,
        "MainPID": 0,
        "ExecMainStartTimestamp": 0,
    })
    assert props == UnitProperties()


def test_unit_properties_uptime():
    props = UnitProperties(exec_main_start_timestamp=1_000_000_000)
    assert props.uptime(now=1_090.5) == 90
    assert UnitProperties().uptime(now=1_090) is None


def test_unit_record_strings():
    record = UnitRecord(name="ark-island.service", display_name="island", active_state="inactive")
    assert record.get_cpu_str() == "N/A"
    assert record.get_memory_str() == "N/A"
    assert record.get_uptime_str() == "N/A"
    assert record.state is ActiveState.INACTIVE

    record = UnitRecord(
        name="ark-island.service",
        display_name="island",
        active_state="active",
        running=True,
        cpu_seconds=1.2,
        memory_mb=523.5,
    )
    assert record.get_cpu_str() == "1.2 s"
    assert record.get_memory_str() == "523.5 MB"
