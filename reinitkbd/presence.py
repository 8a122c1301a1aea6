"""Keyboard presence tracking.

xinput classifies too many things as keyboards (a power switch is one, for
instance), udev knows nothing about xinput ids. A keyboard is only
considered present when both agree on its device node.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from reinitkbd.input.device_filter import get_udev_keyboards
from reinitkbd.xinput import XInputDevice, get_xinput_keyboards

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyboardInfo:
    name: str
    device_node: str
    xinput_id: str
    vendor_id: int
    product_id: int

    @property
    def vendor_product(self) -> str:
        return f"{self.vendor_id:04x}:{self.product_id:04x}"

    def as_args(self) -> list[str]:
        """Arguments for the initializer command: name, node, xinput id, vid:pid."""
        return [self.name, self.device_node, self.xinput_id, self.vendor_product]


class KeyboardPresence:
    """Remembers which keyboards have been seen and reports new ones.

    Parameters:
        xinput_source: Returns ``{device_node: XInputDevice}``.
        udev_source:   Returns ``{device_node: (vendor_id, product_id)}``.
    """

    def __init__(
        self,
        xinput_source: Callable[[], dict[str, XInputDevice]] | None = None,
        udev_source: Callable[[], dict[str, tuple[int, int]]] | None = None,
    ):
        self._xinput_source = xinput_source or get_xinput_keyboards
        self._udev_source = udev_source or get_udev_keyboards
        # device node -> keyboard
        self.known: dict[str, KeyboardInfo] = {}

    def scan(self) -> dict[str, KeyboardInfo]:
        """Return keyboards currently known to both xinput and udev."""
        xinput_keyboards = self._xinput_source()
        udev_keyboards = self._udev_source()

        keyboards = {}
        for node, xkbd in xinput_keyboards.items():
            ids = udev_keyboards.get(node)
            if ids is None:
                logger.debug("Skipping %s (%s): not a keyboard according to udev", xkbd.name, node)
                continue
            keyboards[node] = KeyboardInfo(xkbd.name, node, xkbd.xinput_id, ids[0], ids[1])
        return keyboards

    def update(self) -> list[KeyboardInfo]:
        """Rescan and return the keyboards added since the last update.

        Keyboards no longer present are forgotten, so plugging one back in
        reports it again.
        """
        current = self.scan()

        added = [kbd for node, kbd in current.items() if node not in self.known]
        removed = [node for node in self.known if node not in current]
        for node in removed:
            logger.info("Keyboard removed: %s (%s)", self.known[node].name, node)
            del self.known[node]
        for kbd in added:
            self.known[kbd.device_node] = kbd

        return added
