"""UdevMonitor — watches for keyboard plug/unplug events via pyudev."""

from __future__ import annotations

import logging
import threading
from typing import Callable

import pyudev

import reinitkbd.log  # noqa: F401  (registers Logger.trace)
from reinitkbd.input.device_filter import device_is_keyboard

logger = logging.getLogger(__name__)

WATCHED_ACTIONS = ('add', 'remove')


class UdevMonitor:
    """Monitors udev input events and notifies on keyboard changes.

    Parameters:
        on_change: Called with ``(action, device_node)`` for every keyboard
                   add/remove event.
        on_error:  Called once with the exception if the monitor itself
                   fails; the thread then exits.
    """

    def __init__(
        self,
        on_change: Callable[[str, str], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self.on_change = on_change
        self.on_error = on_error
        self._thread: threading.Thread | None = None
        self._running = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the udev monitoring daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._running = True
        self._thread = threading.Thread(target=self._run, name='udev-monitor', daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the monitoring loop to stop."""
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2)
            self._thread = None

    @property
    def is_running(self) -> bool:
        return self._running and self._thread is not None and self._thread.is_alive()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        """Main monitoring loop — runs in a daemon thread."""
        try:
            context = pyudev.Context()
            monitor = pyudev.Monitor.from_netlink(context)
            monitor.filter_by(subsystem="input")
            monitor.start()

            while self._running:
                device = monitor.poll(timeout=1)
                if device is None:
                    continue

                logger.trace("udev %s %s", device.action, device.sys_path)
                if device.action not in WATCHED_ACTIONS or not device_is_keyboard(device):
                    continue

                if self.on_change:
                    try:
                        self.on_change(device.action, device.device_node)
                    except Exception as exc:
                        logger.error("on_change callback error: %s", exc)

        except Exception as exc:
            logger.error("UdevMonitor error: %s", exc)
            self._running = False
            if self.on_error:
                self.on_error(exc)
