"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT_BASE_ADDRESS, FONT_SET, GLYPH_BYTES, glyph_address, install_font
from .framebuffer import SCREEN_HEIGHT, SCREEN_WIDTH, FrameBuffer
from .palette import MONOCHROME, PALETTES, PHOSPHOR, Palette, as_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "FrameBuffer",
    "Renderer",
    "RenderResult",
    "Palette",
    "PALETTES",
    "MONOCHROME",
    "PHOSPHOR",
    "as_palette",
    "FONT_BASE_ADDRESS",
    "FONT_SET",
    "GLYPH_BYTES",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "glyph_address",
    "install_font",
]
