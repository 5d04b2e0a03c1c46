"""
Tests for the background room sweeper
"""
import time
from datetime import timedelta
from unittest.mock import MagicMock

from tictactoe.tasks.sweeper import RoomSweeper


def wait_for(condition, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


def test_run_once_delegates_to_manager():
    manager = MagicMock()
    manager.sweep_expired.return_value = 3
    assert RoomSweeper(manager).run_once() == 3
    manager.sweep_expired.assert_called_once_with()


def test_start_and_stop():
    sweeper = RoomSweeper(MagicMock(), interval_seconds=60)
    sweeper.start()
    assert sweeper.is_running

    started = time.time()
    sweeper.stop()
    assert not sweeper.is_running
    # stop() does not wait out the interval
    assert time.time() - started < 5


def test_sweeps_on_interval(manager, rooms, alice):
    room = manager.create_room(alice, 3)
    rooms.get(room["id"]).updated_at -= timedelta(hours=2)

    sweeper = RoomSweeper(manager, interval_seconds=0.01)
    sweeper.start()
    try:
        assert wait_for(lambda: room["id"] not in rooms)
    finally:
        sweeper.stop()


def test_sweep_errors_do_not_stop_the_thread():
    calls = []

    def flaky_sweep():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return 0

    manager = MagicMock()
    manager.sweep_expired.side_effect = flaky_sweep

    sweeper = RoomSweeper(manager, interval_seconds=0.01)
    sweeper.start()
    try:
        assert wait_for(lambda: manager.sweep_expired.call_count >= 2)
        assert sweeper.is_running
    finally:
        sweeper.stop()
