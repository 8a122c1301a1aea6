"""System command wrapper to centralize external process calls.

Every X11 tool reinitkbd touches (setxkbmap, xset, xinput) and the
per-keyboard initializer command go through the module-level ``SYSTEM``
instance, so tests can swap in a recording mock:

    reinitkbd.system.SYSTEM = MockSystem()
"""
from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
NOT_FOUND_RETURNCODE = 127


class ISystem(ABC):
    """Abstract interface for system-level operations (setxkbmap/xset/xinput).

    Implementations return subprocess.CompletedProcess-like objects; callers
    only look at ``returncode`` and, for the xinput queries, ``stdout``.
    """

    @abstractmethod
    def run(self, *popenargs, **kwargs) -> subprocess.CompletedProcess:
        raise NotImplementedError

    @abstractmethod
    def setxkbmap(self, args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
        raise NotImplementedError

    @abstractmethod
    def xset(self, args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
        raise NotImplementedError

    @abstractmethod
    def xinput_list(self, timeout: float = 2) -> subprocess.CompletedProcess:
        raise NotImplementedError

    @abstractmethod
    def xinput_list_props(self, device_id: str, timeout: float = 2) -> subprocess.CompletedProcess:
        raise NotImplementedError


class SubprocessSystem(ISystem):
    """Default `ISystem` implementation using subprocess.

    A program that cannot be started is reported as a CompletedProcess with
    returncode 127 instead of raising, the way a shell reports it.
    """

    def run(self, *popenargs, **kwargs) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(*popenargs, **kwargs)
        except OSError as e:
            args = popenargs[0] if popenargs else kwargs.get('args')
            logger.error("Failed to run %s: %s", args, e)
            text = kwargs.get('text') or kwargs.get('universal_newlines')
            empty = '' if text else b''
            return subprocess.CompletedProcess(args, NOT_FOUND_RETURNCODE, stdout=empty, stderr=empty)

    def setxkbmap(self, args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
        # stdout/stderr are inherited: the tool's own diagnostics reach the caller untouched
        return self.run(['setxkbmap', *args], timeout=timeout)

    def xset(self, args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
        return self.run(['xset', *args], timeout=timeout)

    def xinput_list(self, timeout: float = 2) -> subprocess.CompletedProcess:
        return self.run(['xinput', 'list', '--short'], capture_output=True, text=True, timeout=timeout)

    def xinput_list_props(self, device_id: str, timeout: float = 2) -> subprocess.CompletedProcess:
        return self.run(['xinput', 'list-props', str(device_id)], capture_output=True, text=True, timeout=timeout)


# Module-level default system instance (can be replaced in tests for DI)
SYSTEM: ISystem = SubprocessSystem()


# Top-level functions delegate to the module-level `SYSTEM` instance, so
# callers that import `reinitkbd.system` pick up a replaced instance.

def run(*popenargs, **kwargs) -> subprocess.CompletedProcess:
    return SYSTEM.run(*popenargs, **kwargs)


def setxkbmap(args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
    return SYSTEM.setxkbmap(args, timeout=timeout)


def xset(args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
    return SYSTEM.xset(args, timeout=timeout)


def xinput_list(timeout: float = 2) -> subprocess.CompletedProcess:
    return SYSTEM.xinput_list(timeout=timeout)


def xinput_list_props(device_id: str, timeout: float = 2) -> subprocess.CompletedProcess:
    return SYSTEM.xinput_list_props(device_id, timeout=timeout)
