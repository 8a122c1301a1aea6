"""Keyboard initializer: apply the fixed layout and repeat rate.

Called once per attached keyboard with the keyboard's name, device node,
xinput device id and ``vendor:product`` id. The layout goes to the one
device through ``setxkbmap -device``; the repeat rate is global to the
X session.
"""

from __future__ import annotations

import logging
import subprocess

from reinitkbd import system

logger = logging.getLogger(__name__)

# Ultimate Hacking Keyboard: Caps Lock and Escape are already swapped in firmware
RESERVED_VENDOR_PRODUCT = '1d50:6122'

LAYOUTS = 'se,us'
SHIFT_TOGGLE_OPTION = 'grp:shifts_toggle'
CAPS_ESCAPE_OPTION = 'caps:swapescape'

REPEAT_DELAY = 200  # ms
REPEAT_RATE = 30  # repeats per second

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def setxkbmap_args(xinput_id: str, vendor_product: str) -> list[str]:
    """Return the setxkbmap arguments for one keyboard.

    The Caps/Escape swap is added for every keyboard except the one whose
    id equals RESERVED_VENDOR_PRODUCT exactly.
    """
    args = ['-device', xinput_id, '-layout', LAYOUTS, '-option', SHIFT_TOGGLE_OPTION]
    if vendor_product != RESERVED_VENDOR_PRODUCT:
        args += ['-option', CAPS_ESCAPE_OPTION]
    return args


def xset_repeat_args() -> list[str]:
    return ['r', 'rate', str(REPEAT_DELAY), str(REPEAT_RATE)]


def _succeeded(result: subprocess.CompletedProcess) -> bool:
    return result.returncode == 0


def init_keyboard(name: str, device_node: str, xinput_id: str, vendor_product: str,
                  sys_impl: system.ISystem | None = None) -> int:
    """Configure layout and repeat rate for a newly attached keyboard.

    Both commands always run. Returns EXIT_FAILURE if either of them failed,
    EXIT_SUCCESS otherwise.
    """
    sys_impl = sys_impl or system.SYSTEM

    print(f"Initializing keyboard {name} ({device_node}) with device ID {xinput_id} "
          f"and vendorID:productID {vendor_product}", flush=True)

    layout_args = setxkbmap_args(xinput_id, vendor_product)
    logger.debug("setxkbmap %s", ' '.join(layout_args))
    layout_ok = _succeeded(sys_impl.setxkbmap(layout_args))
    if not layout_ok:
        logger.warning("setxkbmap failed for %s (device %s)", name, xinput_id)

    repeat_args = xset_repeat_args()
    logger.debug("xset %s", ' '.join(repeat_args))
    repeat_ok = _succeeded(sys_impl.xset(repeat_args))
    if not repeat_ok:
        logger.warning("xset failed to set the repeat rate")

    return EXIT_SUCCESS if layout_ok and repeat_ok else EXIT_FAILURE
