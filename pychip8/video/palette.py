"""Named two-colour palettes for the CHIP-8 display."""

from __future__ import annotations

from typing import Dict, NamedTuple, Sequence, Tuple

RGBColor = Tuple[int, int, int]


class Palette(NamedTuple):
    background: RGBColor
    foreground: RGBColor

    def color(self, lit: bool) -> RGBColor:
        return self.foreground if lit else self.background


MONOCHROME = Palette((0x00, 0x00, 0x00), (0xFF, 0xFF, 0xFF))
PHOSPHOR = Palette((0x10, 0x18, 0x10), (0x33, 0xFF, 0x66))

PALETTES: Dict[str, Palette] = {"mono": MONOCHROME, "phosphor": PHOSPHOR}


def as_palette(colors: Sequence[Sequence[int]]) -> Palette:
    """Coerce ``(background, foreground)`` RGB triples into a ``Palette``."""

    if isinstance(colors, Palette):
        return colors
    if len(colors) != 2 or any(len(color) != 3 for color in colors):
        raise ValueError("palette needs a background and a foreground RGB triple")
    background, foreground = (tuple(int(channel) & 0xFF for channel in color) for color in colors)
    return Palette(background, foreground)  # type: ignore[arg-type]
