"""Tests for reinitkbd.reinit — running the per-keyboard command."""

from __future__ import annotations

import subprocess
import threading
from unittest.mock import MagicMock

from conftest import MockSystem
from reinitkbd.presence import KeyboardInfo
from reinitkbd.reinit import Reinitializer, run_init_command

UHK = KeyboardInfo('UHK60', '/dev/input/event5', '12', 0x1d50, 0x6122)
LOGITECH = KeyboardInfo('Generic104', '/dev/input/event3', '7', 0x046d, 0xc31c)


class FakePresence:
    """Returns a scripted list of added keyboards per update() call."""

    def __init__(self, *batches):
        self.batches = list(batches)
        self.updates = 0

    def update(self):
        self.updates += 1
        return self.batches.pop(0) if self.batches else []


class TestRunInitCommand:

    def test_command_line(self):
        mock = MockSystem()
        assert run_init_command(UHK, '/home/u/bin/attach', mock) is True
        assert mock.calls == [
            ('run', ['/home/u/bin/attach', 'UHK60', '/dev/input/event5', '12', '1d50:6122'],
             {'timeout': None}),
        ]

    def test_timeout_passed_through(self):
        mock = MockSystem()
        run_init_command(LOGITECH, 'attach', mock, timeout=5)
        assert mock.calls[0][2] == {'timeout': 5}

    def test_nonzero_exit(self):
        assert run_init_command(LOGITECH, 'attach', MockSystem(run_rc=1)) is False

    def test_timeout_expired(self):
        mock = MockSystem()
        mock.run = MagicMock(side_effect=subprocess.TimeoutExpired(['attach'], 5))
        assert run_init_command(LOGITECH, 'attach', mock, timeout=5) is False

    def test_launch_failure(self):
        mock = MockSystem()
        mock.run = MagicMock(side_effect=PermissionError('not executable'))
        assert run_init_command(LOGITECH, 'attach', mock) is False


class TestReinitializer:

    def test_reinit_pass_runs_each_added_keyboard(self):
        mock = MockSystem()
        reinit = Reinitializer('attach', presence=FakePresence([UHK, LOGITECH]), sys_impl=mock)
        assert reinit.reinit_pass() == 2
        assert [c[1][1] for c in mock.calls] == ['UHK60', 'Generic104']

    def test_failure_does_not_stop_pass(self):
        mock = MockSystem(run_rc=1)
        reinit = Reinitializer('attach', presence=FakePresence([UHK, LOGITECH]), sys_impl=mock)
        assert reinit.reinit_pass() == 2
        assert len(mock.calls) == 2

    def test_events_trigger_rescan(self):
        mock = MockSystem()
        presence = FakePresence([UHK], [LOGITECH])
        reinit = Reinitializer('attach', presence=presence, sys_impl=mock, settle_delay=0)
        stop = threading.Event()

        monitor = MagicMock()

        def start():
            reinit.notify('add', '/dev/input/event3')
            reinit.notify('add', '/dev/input/event3')

        monitor.start.side_effect = start

        original_pass = reinit.reinit_pass

        def pass_then_stop():
            n = original_pass()
            if presence.updates == 2:
                stop.set()
            return n

        reinit.reinit_pass = pass_then_stop

        assert reinit.run(stop, monitor=monitor) is True
        # startup pass + one rescan for the burst of events
        assert presence.updates == 2
        assert [c[1][1] for c in mock.calls] == ['UHK60', 'Generic104']
        monitor.stop.assert_called_once()

    def test_monitor_failure_ends_loop(self):
        presence = FakePresence()
        reinit = Reinitializer('attach', presence=presence, sys_impl=MockSystem(), settle_delay=0)
        monitor = MagicMock()
        monitor.start.side_effect = lambda: reinit.notify_error(OSError('netlink'))

        assert reinit.run(threading.Event(), monitor=monitor) is False
        assert presence.updates == 1
        monitor.stop.assert_called_once()

    def test_stop_event_ends_wait(self):
        reinit = Reinitializer('attach', presence=FakePresence(), sys_impl=MockSystem())
        stop = threading.Event()
        stop.set()
        assert reinit.wait_for_change(stop) is False
