"""Hexadecimal keypad state for the CHIP-8 interpreter."""

from __future__ import annotations

import threading
from typing import Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

# Host key name -> keypad symbol, laid out as the usual 4x4 block:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  <-  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
HOST_KEY_MAP: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


class Keypad:
    """Sixteen boolean key states indexed by key symbol 0x0-0xF.

    The host writes key state between ``step()`` calls; the CPU only reads it.
    A lock serialises writers against ``snapshot()`` so a host may deliver
    input from another thread.
    """

    def __init__(self) -> None:
        self._keys = [False] * KEY_COUNT
        self._lock = threading.Lock()

    def press(self, symbol: int) -> None:
        self.set(symbol, True)

    def release(self, symbol: int) -> None:
        self.set(symbol, False)

    def set(self, symbol: int, pressed: bool) -> None:
        index = self._check(symbol)
        with self._lock:
            self._keys[index] = bool(pressed)
        if debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", index, pressed)

    def is_pressed(self, symbol: int) -> bool:
        # Guest programs may ask for any register value; only 0x0-0xF exist.
        if not 0 <= symbol < KEY_COUNT:
            return False
        return self._keys[symbol]

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key symbol, or None when idle."""

        for symbol, pressed in enumerate(self.snapshot()):
            if pressed:
                return symbol
        return None

    def snapshot(self) -> tuple[bool, ...]:
        with self._lock:
            return tuple(self._keys)

    def reset(self) -> None:
        with self._lock:
            self._keys = [False] * KEY_COUNT

    def press_host_key(self, name: str) -> bool:
        """Press the keypad key mapped to host key ``name``; return whether it mapped."""

        symbol = lookup_host_key(name)
        if symbol is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", name)
            return False
        self.press(symbol)
        return True

    def release_host_key(self, name: str) -> bool:
        symbol = lookup_host_key(name)
        if symbol is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", name)
            return False
        self.release(symbol)
        return True

    def __getitem__(self, symbol: int) -> bool:
        return self._keys[self._check(symbol)]

    def __setitem__(self, symbol: int, pressed: bool) -> None:
        self.set(symbol, pressed)

    def __len__(self) -> int:
        return KEY_COUNT

    @staticmethod
    def _check(symbol: int) -> int:
        if not 0 <= symbol < KEY_COUNT:
            raise IndexError(f"key symbol out of range: {symbol}")
        return symbol


def lookup_host_key(name: str) -> int | None:
    return HOST_KEY_MAP.get(name.lower())
