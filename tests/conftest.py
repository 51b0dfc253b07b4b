import pytest

from arkserman.models.unit import UnitProperties

from .fakes import FakeConnection, status


@pytest.fixture
def fake_connection():
    return FakeConnection(
        unit_files=[
            "/home/ark/.config/systemd/user/ark-ragnarok.service",
            "/home/ark/.config/systemd/user/ark-serman.service",
            "/home/ark/.config/systemd/user/ark-island.service",
            "/home/ark/.config/systemd/user/ark-center.service",
        ],
        statuses=[
            status("ark-ragnarok.service", "failed", "failed"),
            status("ark-island.service", "active", "running"),
            status("ark-center.service", "deactivating", "stop-sigterm"),
        ],
        properties={
            status("ark-island.service").unit_path: UnitProperties(
                cpu_usage_nsec=1_234_500_000,
                memory_current=523_456_789,
                main_pid=4242,
            ),
            status("ark-center.service").unit_path: UnitProperties(
                cpu_usage_nsec=60_050_000_000,
                memory_current=None,
            ),
        },
    )
