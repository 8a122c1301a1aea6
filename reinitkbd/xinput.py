"""X input device discovery.

Keyboards are listed with ``xinput list --short`` and their device nodes
read from the ``Device Node`` property (``xinput list-props``). Master
keyboards have no device node and drop out on their own.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass

from Xlib import display as xdisplay
from Xlib.error import DisplayError

from reinitkbd import system

logger = logging.getLogger(__name__)

# Tree-drawing characters used by ``xinput list``
_TREE_CHARS = '⎡⎜⎣↳∼~ \t'

_LIST_LINE = re.compile(r'^(?P<name>.+?)\s+id=(?P<id>\d+)\s+\[(?P<role>[^\]]+)\]\s*$')
_DEVICE_NODE = re.compile(r'^\s*Device Node \(\d+\):\s*"(?P<node>[^"]*)"', re.MULTILINE)

KEYBOARD_ROLES = ('master keyboard', 'slave keyboard')


class XDisplayError(RuntimeError):
    """The X server cannot be reached."""


@dataclass(frozen=True)
class XInputDevice:
    name: str
    xinput_id: str
    role: str

    @property
    def is_keyboard(self) -> bool:
        return self.role.startswith(KEYBOARD_ROLES)


def parse_xinput_list(text: str) -> list[XInputDevice]:
    """Parse ``xinput list --short`` output into keyboard devices."""
    keyboards = []
    for line in text.splitlines():
        m = _LIST_LINE.match(line.lstrip(_TREE_CHARS))
        if not m:
            continue
        role = ' '.join(m.group('role').split())
        device = XInputDevice(m.group('name').strip(), m.group('id'), role)
        if device.is_keyboard:
            keyboards.append(device)
    return keyboards


def parse_device_node(text: str) -> str:
    """Return the ``Device Node`` property from ``xinput list-props`` output, or ''."""
    m = _DEVICE_NODE.search(text)
    return m.group('node') if m else ''


def get_xinput_keyboards(sys_impl: system.ISystem | None = None,
                         timeout: float = 2) -> dict[str, XInputDevice]:
    """Return xinput keyboards keyed by device node.

    An unusable ``xinput list`` yields an empty mapping so the caller just
    sees no keyboards until the next scan.
    """
    sys_impl = sys_impl or system.SYSTEM
    try:
        listing = sys_impl.xinput_list(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("xinput list timed out")
        return {}
    if listing.returncode != 0:
        logger.warning("xinput list failed with status %s", listing.returncode)
        return {}

    result: dict[str, XInputDevice] = {}
    for device in parse_xinput_list(listing.stdout):
        try:
            props = sys_impl.xinput_list_props(device.xinput_id, timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("xinput list-props %s timed out", device.xinput_id)
            continue
        if props.returncode != 0:
            # device vanished between the two calls
            logger.debug("xinput list-props %s failed with status %s",
                         device.xinput_id, props.returncode)
            continue
        node = parse_device_node(props.stdout)
        if not node:
            continue
        result[node] = device
    return result


def check_display(name: str | None = None) -> None:
    """Open and close a connection to the X server.

    Raises ``XDisplayError`` if it cannot be reached.
    """
    try:
        d = xdisplay.Display(name)
    except (DisplayError, OSError) as e:
        raise XDisplayError(f"failed to connect to X server: {e}") from e
    try:
        logger.debug("Connected to X display %s", d.get_display_name())
    finally:
        d.close()
