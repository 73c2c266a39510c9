"""Convert the framebuffer into scaled RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import FrameBuffer
from .palette import MONOCHROME, Palette, RGBColor, as_palette


@dataclass
class RenderResult:
    """Packed RGB pixels of one rendered frame."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        r, g, b = self.pixels[offset : offset + 3]
        return (r, g, b)

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Render a ``FrameBuffer`` with a two-colour palette."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._palette: Palette = as_palette(palette)

    @property
    def palette(self) -> Palette:
        return self._palette

    def render(self, framebuffer: FrameBuffer, *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        cells = {lit: bytes(self._palette.color(lit)) * scale for lit in (False, True)}
        out = bytearray()
        for row in framebuffer.rows():
            out += b"".join(cells[lit] for lit in row) * scale
        return RenderResult(framebuffer.width * scale, framebuffer.height * scale, bytes(out))
