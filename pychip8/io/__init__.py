"""Input helpers for the CHIP-8 interpreter."""

from .keypad import HOST_KEY_MAP, KEY_COUNT, Keypad, lookup_host_key

__all__ = ["Keypad", "KEY_COUNT", "HOST_KEY_MAP", "lookup_host_key"]
