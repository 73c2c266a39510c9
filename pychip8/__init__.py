"""Python CHIP-8 interpreter.

The core is the execution engine in ``pychip8.cpu``; the remaining packages
supply the memory bus, framebuffer, keypad, loader, audio and a pygame
front end used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
