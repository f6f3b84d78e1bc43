"""Tests for the per-user status projection."""

from sleepbot.models.sleep_record import SleepStatus
from sleepbot.services.records import SleepEvent
from sleepbot.services.status import UserState, collect_status, project_status


def ev(record_type, stamp):
    status = "🌙" if record_type == "sleep" else "☀️"
    return SleepEvent("u1", "g1", status, stamp, record_type)


class TestProjectStatus:
    def test_unknown_without_events(self, ts):
        status = project_status("u1", None, None, None, None, now=ts("2024-01-02 08:00"))

        assert status.state is UserState.UNKNOWN
        assert status.elapsed_minutes is None
        assert status.previous_minutes is None
        assert status.average_sleep_minutes is None
        assert status.missing_previous is False

    def test_awake_after_a_night(self, ts):
        sleep = ev("sleep", ts("2024-01-01 23:00"))
        wake = ev("wakeup", ts("2024-01-02 07:00"))

        status = project_status("u1", wake, wake, sleep, 480.0, now=ts("2024-01-02 09:30"))

        assert status.state is UserState.AWAKE
        assert status.elapsed_minutes == 150
        assert status.previous_minutes == 480
        assert status.average_sleep_minutes == 480.0
        assert status.predicted_wake is None

    def test_asleep_with_prediction(self, ts):
        wake = ev("wakeup", ts("2024-01-02 07:00"))
        sleep = ev("sleep", ts("2024-01-02 23:00"))

        status = project_status("u1", sleep, wake, sleep, 420.0, now=ts("2024-01-03 01:00"))

        assert status.state is UserState.ASLEEP
        assert status.elapsed_minutes == 120
        assert status.previous_minutes == 960
        assert status.predicted_wake == ts("2024-01-03 06:00")

    def test_first_wake_has_no_previous_sleep(self, ts):
        wake = ev("wakeup", ts("2024-01-02 07:00"))

        status = project_status("u1", wake, wake, None, None, now=ts("2024-01-02 07:45"))

        assert status.state is UserState.AWAKE
        assert status.elapsed_minutes == 45
        assert status.previous_minutes is None
        assert status.missing_previous is True

    def test_boundaries_out_of_order_give_no_duration(self, ts):
        # last sleep after last wake while the latest status says awake
        wake = ev("wakeup", ts("2024-01-02 07:00"))
        sleep = ev("sleep", ts("2024-01-02 08:00"))
        latest = SleepEvent("u1", "g1", "☀️", ts("2024-01-02 08:00"), "sleep")

        status = project_status("u1", latest, wake, sleep, None, now=ts("2024-01-02 09:00"))

        assert status.state is UserState.AWAKE
        assert status.previous_minutes is None
        assert status.missing_previous is False


def test_collect_status_reads_the_store(store, ts):
    store.record("u1", "g1", SleepStatus.ASLEEP, ts("2024-01-01 23:00"))
    store.record("u1", "g1", SleepStatus.AWAKE, ts("2024-01-02 07:00"))

    status = collect_status(store, "u1", "g1", now=ts("2024-01-02 07:30"))

    assert status.state is UserState.AWAKE
    assert status.last_sleep == ts("2024-01-01 23:00")
    assert status.last_wake == ts("2024-01-02 07:00")
    assert status.elapsed_minutes == 30
    assert status.previous_minutes == 480
    assert status.average_sleep_minutes == 480
