"""Tests for the hexadecimal keypad."""

from __future__ import annotations

import threading

import pytest

from pychip8.io import HOST_KEY_MAP, Keypad, lookup_host_key


def test_press_and_release() -> None:
    keypad = Keypad()

    keypad.press(0xA)
    assert keypad.is_pressed(0xA)
    assert keypad[0xA]

    keypad.release(0xA)
    assert not keypad.is_pressed(0xA)


def test_first_pressed_returns_lowest_symbol() -> None:
    keypad = Keypad()
    assert keypad.first_pressed() is None

    keypad.press(0xC)
    keypad.press(0x3)
    assert keypad.first_pressed() == 0x3


def test_is_pressed_out_of_range_is_false() -> None:
    keypad = Keypad()
    keypad.press(0xF)

    assert keypad.is_pressed(0x10) is False
    assert keypad.is_pressed(0xFF) is False


def test_set_out_of_range_raises() -> None:
    keypad = Keypad()
    with pytest.raises(IndexError):
        keypad.press(16)
    with pytest.raises(IndexError):
        keypad[-1] = True


def test_host_key_mapping_layout() -> None:
    assert len(HOST_KEY_MAP) == 16
    assert sorted(HOST_KEY_MAP.values()) == list(range(16))
    assert lookup_host_key("x") == 0x0
    assert lookup_host_key("V") == 0xF
    assert lookup_host_key("4") == 0xC
    assert lookup_host_key("space") is None


def test_host_key_press_and_release() -> None:
    keypad = Keypad()

    assert keypad.press_host_key("q") is True
    assert keypad.is_pressed(0x4)
    assert keypad.release_host_key("q") is True
    assert not keypad.is_pressed(0x4)
    assert keypad.press_host_key("return") is False
    assert keypad.snapshot() == (False,) * 16


def test_reset_clears_all_keys() -> None:
    keypad = Keypad()
    for symbol in range(16):
        keypad[symbol] = True

    keypad.reset()
    assert keypad.first_pressed() is None
    assert len(keypad) == 16


def test_writes_from_another_thread_are_visible() -> None:
    keypad = Keypad()

    writer = threading.Thread(target=keypad.press, args=(0x7,))
    writer.start()
    writer.join()

    assert keypad.snapshot()[0x7] is True
