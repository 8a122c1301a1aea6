"""Tests for reinitkbd.presence — joining xinput and udev keyboard lists."""

from __future__ import annotations

from reinitkbd.presence import KeyboardInfo, KeyboardPresence
from reinitkbd.xinput import XInputDevice


def xdev(name, xinput_id):
    return XInputDevice(name, xinput_id, 'slave keyboard (3)')


class FakeSources:
    def __init__(self):
        self.xinput = {}
        self.udev = {}

    def presence(self):
        return KeyboardPresence(xinput_source=lambda: dict(self.xinput),
                                udev_source=lambda: dict(self.udev))


class TestKeyboardInfo:

    def test_vendor_product_zero_padded_hex(self):
        kbd = KeyboardInfo('Generic104', '/dev/input/event3', '7', 0x46d, 0xc31c)
        assert kbd.vendor_product == '046d:c31c'

    def test_as_args(self):
        kbd = KeyboardInfo('UHK60', '/dev/input/event5', '12', 0x1d50, 0x6122)
        assert kbd.as_args() == ['UHK60', '/dev/input/event5', '12', '1d50:6122']


class TestKeyboardPresence:

    def test_first_update_reports_all_present(self):
        src = FakeSources()
        src.xinput = {'/dev/input/event5': xdev('UHK60', '12')}
        src.udev = {'/dev/input/event5': (0x1d50, 0x6122)}
        added = src.presence().update()
        assert added == [KeyboardInfo('UHK60', '/dev/input/event5', '12', 0x1d50, 0x6122)]

    def test_requires_both_sources(self):
        src = FakeSources()
        src.xinput = {'/dev/input/event1': xdev('Power Button', '6'),
                      '/dev/input/event3': xdev('AT keyboard', '9')}
        src.udev = {'/dev/input/event3': (0x0001, 0x0001),
                    '/dev/input/event8': (0x046d, 0xc31c)}
        added = src.presence().update()
        assert [k.device_node for k in added] == ['/dev/input/event3']

    def test_known_keyboards_not_reported_again(self):
        src = FakeSources()
        src.xinput = {'/dev/input/event3': xdev('AT keyboard', '9')}
        src.udev = {'/dev/input/event3': (0x0001, 0x0001)}
        presence = src.presence()
        assert len(presence.update()) == 1
        assert presence.update() == []

    def test_only_new_keyboard_reported(self):
        src = FakeSources()
        src.xinput = {'/dev/input/event3': xdev('AT keyboard', '9')}
        src.udev = {'/dev/input/event3': (0x0001, 0x0001)}
        presence = src.presence()
        presence.update()

        src.xinput['/dev/input/event5'] = xdev('UHK60', '12')
        src.udev['/dev/input/event5'] = (0x1d50, 0x6122)
        added = presence.update()
        assert [k.name for k in added] == ['UHK60']
        assert set(presence.known) == {'/dev/input/event3', '/dev/input/event5'}

    def test_replugged_keyboard_reported_again(self):
        src = FakeSources()
        src.xinput = {'/dev/input/event5': xdev('UHK60', '12')}
        src.udev = {'/dev/input/event5': (0x1d50, 0x6122)}
        presence = src.presence()
        presence.update()

        src.xinput, src.udev = {}, {}
        assert presence.update() == []
        assert presence.known == {}

        src.xinput = {'/dev/input/event5': xdev('UHK60', '13')}
        src.udev = {'/dev/input/event5': (0x1d50, 0x6122)}
        added = presence.update()
        assert [k.xinput_id for k in added] == ['13']
