import pytest

from termtris.gravity import GravityClock


class FakeClock:
    def __init__(self) -> None:
        self.current = 0.0

    def advance(self, delta: float) -> None:
        self.current += delta

    def __call__(self) -> float:
        return self.current


def test_timeout_counts_down_to_deadline():
    clock = FakeClock()
    gravity = GravityClock(0, clock=clock)
    assert gravity.timeout_ms() == 500
    assert not gravity.due()
    clock.advance(0.2)
    assert gravity.timeout_ms() == 300
    clock.advance(0.3)
    assert gravity.due()
    assert gravity.timeout_ms() == 0


def test_fired_schedules_from_previous_deadline():
    clock = FakeClock()
    gravity = GravityClock(0, clock=clock)
    clock.advance(0.5)
    gravity.fired(0)
    assert gravity.timeout_ms() == 500


def test_late_tick_does_not_cause_catch_up_burst():
    clock = FakeClock()
    gravity = GravityClock(0, clock=clock)
    clock.advance(2.0)
    assert gravity.due()
    gravity.fired(0)
    assert not gravity.due()
    assert gravity.timeout_ms() == 500


def test_interval_follows_level():
    clock = FakeClock()
    gravity = GravityClock(0, clock=clock, interval_for_level=lambda level: 1000.0 / (level + 1))
    clock.advance(1.0)
    gravity.fired(3)
    assert gravity.timeout_ms() == 250
    assert gravity.interval(1) == pytest.approx(0.5)


def test_stop_and_restart():
    clock = FakeClock()
    gravity = GravityClock(0, clock=clock)
    gravity.stop()
    clock.advance(10.0)
    assert not gravity.running
    assert not gravity.due()
    assert gravity.timeout_ms() is None
    gravity.fired(0)
    assert not gravity.running
    gravity.restart(0)
    assert gravity.running
    assert gravity.timeout_ms() == 500
