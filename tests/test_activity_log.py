"""Test the activity log."""
import threading
from datetime import datetime, timedelta

from custom_components.vehicle_scheduler.core.activity_log import ActivityLog
from custom_components.vehicle_scheduler.models import LogEntry


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(minutes=1)
        return current


def test_entries_newest_first():
    log = ActivityLog(clock=FakeClock(datetime(2024, 3, 5, 6, 30)))

    log.append("Charge On: succeeded")
    log.append("HVAC On: succeeded")

    assert [entry.text for entry in log.entries()] == [
        "HVAC On: succeeded",
        "Charge On: succeeded",
    ]
    assert log.latest.text == "HVAC On: succeeded"
    assert len(log) == 2


def test_entry_format():
    entry = LogEntry(timestamp=datetime(2024, 3, 5, 6, 30), text="Sleep: succeeded")
    assert entry.format() == "[03/05/24 06:30] Sleep: succeeded"


def test_entries_newest_first_formatted():
    log = ActivityLog(clock=FakeClock(datetime(2024, 12, 31, 23, 59)))
    log.append("first")
    log.append("second")

    assert [entry.format() for entry in log.entries()] == [
        "[01/01/25 00:00] second",
        "[12/31/24 23:59] first",
    ]


def test_entries_limit():
    log = ActivityLog()
    for index in range(5):
        log.append(f"entry {index}")

    assert [entry.text for entry in log.entries(2)] == ["entry 4", "entry 3"]


def test_empty_log():
    log = ActivityLog()
    assert log.latest is None
    assert log.entries() == []


def test_restore_round_trip():
    """Saved entries come back below anything logged since startup."""
    source = ActivityLog(clock=FakeClock(datetime(2024, 1, 1, 8, 0)))
    source.append("old 1")
    source.append("old 2")

    restored = ActivityLog()
    restored.append("new")
    count = restored.restore(source.to_dict())

    assert count == 2
    assert [entry.text for entry in restored.entries()] == ["new", "old 2", "old 1"]
    assert restored.entries()[1].timestamp == datetime(2024, 1, 1, 8, 1)


def test_restore_nothing():
    log = ActivityLog()
    assert log.restore(None) == 0
    assert log.restore({}) == 0


def test_concurrent_appends():
    """Appends from many threads are never lost."""
    log = ActivityLog()

    def writer(name):
        for index in range(100):
            log.append(f"{name} {index}")

    threads = [threading.Thread(target=writer, args=(f"t{n}",)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(log) == 400
