import subprocess

import pytest

import reinitkbd.system as system_mod


class MockSystem(system_mod.ISystem):
    """Records every call; return codes and xinput output are configurable."""

    def __init__(self, setxkbmap_rc=0, xset_rc=0, run_rc=0,
                 xinput_list_out='', xinput_props=None):
        self.calls = []
        self.setxkbmap_rc = setxkbmap_rc
        self.xset_rc = xset_rc
        self.run_rc = run_rc
        self.xinput_list_out = xinput_list_out
        self.xinput_props = xinput_props or {}

    def run(self, *popenargs, **kwargs):
        self.calls.append(('run', popenargs[0], kwargs))
        return subprocess.CompletedProcess(popenargs[0], self.run_rc)

    def setxkbmap(self, args, timeout=None):
        self.calls.append(('setxkbmap', list(args)))
        return subprocess.CompletedProcess(['setxkbmap', *args], self.setxkbmap_rc)

    def xset(self, args, timeout=None):
        self.calls.append(('xset', list(args)))
        return subprocess.CompletedProcess(['xset', *args], self.xset_rc)

    def xinput_list(self, timeout=2):
        self.calls.append(('xinput_list',))
        return subprocess.CompletedProcess(['xinput', 'list'], 0, stdout=self.xinput_list_out, stderr='')

    def xinput_list_props(self, device_id, timeout=2):
        self.calls.append(('xinput_list_props', device_id))
        if device_id not in self.xinput_props:
            return subprocess.CompletedProcess(['xinput'], 1, stdout='', stderr='unable to find device')
        return subprocess.CompletedProcess(['xinput'], 0, stdout=self.xinput_props[device_id], stderr='')

    def commands(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def mock_system(monkeypatch):
    mock = MockSystem()
    monkeypatch.setattr(system_mod, 'SYSTEM', mock)
    return mock


@pytest.fixture(autouse=True)
def reset_reinitkbd_logger():
    """setup_logging() configures the logger once; undo it between tests."""
    import logging
    logger = logging.getLogger('reinitkbd')
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
