"""Reinitialize keyboards as they are plugged in.

The udev thread only posts notifications onto a queue; presence tracking
and the initializer commands run on the thread that calls
``Reinitializer.run``, one command at a time.
"""

from __future__ import annotations

import logging
import queue
import subprocess
import threading
import time

from reinitkbd import system
from reinitkbd.input.udev_monitor import UdevMonitor
from reinitkbd.presence import KeyboardInfo, KeyboardPresence

logger = logging.getLogger(__name__)

# How often the loop wakes up to check the stop event
STOP_POLL_INTERVAL = 0.5


def run_init_command(keyboard: KeyboardInfo, command: str,
                     sys_impl: system.ISystem | None = None,
                     timeout: float | None = None) -> bool:
    """Run *command* for *keyboard*. Returns True on exit status 0.

    Failures are logged, never raised.
    """
    sys_impl = sys_impl or system.SYSTEM
    args = [command, *keyboard.as_args()]
    logger.info("Initializing %s (%s, xinput id %s, %s)", keyboard.name,
                keyboard.device_node, keyboard.xinput_id, keyboard.vendor_product)
    try:
        result = sys_impl.run(args, timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("%s timed out after %ss for %s", command, timeout, keyboard.name)
        return False
    except OSError as e:
        logger.warning("Failed to run %s: %s", command, e)
        return False

    if result.returncode != 0:
        logger.warning("%s exited with status %s for %s", command, result.returncode, keyboard.name)
        return False
    return True


class Reinitializer:
    """Runs the initializer command for every newly attached keyboard."""

    def __init__(
        self,
        command: str,
        presence: KeyboardPresence | None = None,
        sys_impl: system.ISystem | None = None,
        timeout: float | None = None,
        settle_delay: float = 0.1,
    ):
        self.command = command
        self.presence = presence or KeyboardPresence()
        self.sys_impl = sys_impl
        self.timeout = timeout
        self.settle_delay = settle_delay
        self.events: queue.Queue = queue.Queue()
        self.failed = threading.Event()

    # -- udev callbacks (called on the monitor thread) ------------------

    def notify(self, action: str, device_node: str) -> None:
        self.events.put((action, device_node))

    def notify_error(self, exc: Exception) -> None:
        logger.error("udev event stream ended: %s", exc)
        self.failed.set()
        self.events.put(None)

    # -- main thread -----------------------------------------------------

    def reinit_pass(self) -> int:
        """Initialize every keyboard added since the last pass. Returns the count."""
        added = self.presence.update()
        for keyboard in added:
            run_init_command(keyboard, self.command, self.sys_impl, self.timeout)
        return len(added)

    def _drain(self) -> None:
        while True:
            try:
                self.events.get_nowait()
            except queue.Empty:
                return

    def wait_for_change(self, stop_event: threading.Event) -> bool:
        """Block until udev reports a change. False if stopped or the monitor died."""
        while not stop_event.is_set():
            try:
                event = self.events.get(timeout=STOP_POLL_INTERVAL)
            except queue.Empty:
                continue
            if event is None:
                return False
            logger.debug("udev: %s %s", *event)
            # a single plug produces several events; let them arrive, then rescan once
            if self.settle_delay:
                time.sleep(self.settle_delay)
            self._drain()
            return not self.failed.is_set()
        return False

    def run(self, stop_event: threading.Event, monitor: UdevMonitor | None = None) -> bool:
        """Run until *stop_event* is set. Returns False if the udev monitor failed."""
        monitor = monitor or UdevMonitor(on_change=self.notify, on_error=self.notify_error)
        monitor.start()
        try:
            self.reinit_pass()
            while self.wait_for_change(stop_event):
                self.reinit_pass()
        finally:
            monitor.stop()
        return not self.failed.is_set()
