"""Udev keyboard classification and enumeration."""

from __future__ import annotations

import logging
from typing import Any

import pyudev

logger = logging.getLogger(__name__)


def device_is_keyboard(device: Any) -> bool:
    """Return True if the udev *device* is a real keyboard with a device node.

    Both ID_INPUT_KEYBOARD and ID_INPUT_KEY must be set; power buttons and
    similar devices only carry ID_INPUT_KEY.
    """
    props = device.properties
    return (
        props.get('ID_INPUT_KEYBOARD') == '1'
        and props.get('ID_INPUT_KEY') == '1'
        and bool(device.device_node)
    )


def parse_hex_id(value: str | None) -> int | None:
    """Parse a 16-bit hex udev id such as ``046d``; None if malformed."""
    if not value:
        return None
    try:
        parsed = int(value, 16)
    except ValueError:
        return None
    return parsed if 0 <= parsed <= 0xFFFF else None


def get_udev_keyboards(context: Any = None) -> dict[str, tuple[int, int]]:
    """Return ``{device_node: (vendor_id, product_id)}`` for attached keyboards."""
    context = context or pyudev.Context()
    enumerator = context.list_devices(subsystem='input').match_is_initialized()

    keyboards: dict[str, tuple[int, int]] = {}
    for device in enumerator:
        if not device_is_keyboard(device):
            continue
        vendor_id = parse_hex_id(device.properties.get('ID_VENDOR_ID'))
        product_id = parse_hex_id(device.properties.get('ID_MODEL_ID'))
        if vendor_id is None or product_id is None:
            logger.debug("Skipping %s: no usable vendor/product id", device.device_node)
            continue
        keyboards[device.device_node] = (vendor_id, product_id)
    return keyboards
