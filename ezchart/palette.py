"""Colour palettes and luminosity shifting for hex colours.

Categorical palettes separate items into distinct groups. Diverging palettes
run from a light midpoint toward two dark hues. Sequential palettes ramp the
luminosity of a single base colour from dark to light.
"""
from typing import Dict, List, Optional, Sequence, Tuple
import math
import re

import numpy as np

from ezchart.errors import InvalidColorError

CATEGORICAL: Dict[int, Tuple[str, ...]] = {
    # Stephen Few - Show Me the Numbers
    # blue, orange, green, pink, light brown, purple, dark yellow, red, black
    1: ("#5da5da", "#faa43a", "#60bd68", "#f17cb0", "#b2912f",
        "#b276b2", "#decf3f", "#f15854", "#4d4d4d"),
    # ColorBrewer Pastel1
    # red, light blue, green, purple, orange, yellow, brown, pink, grey
    2: ("#fbb4ae", "#b3cde3", "#ccebc5", "#decbe4", "#fed9a6",
        "#ffffcc", "#e5d8bd", "#fddaec", "#f2f2f2"),
    # Google Material
    # dark blue, orange, light green, purple, yellow, light blue, red, dark green, brown
    3: ("#3f51b5", "#ff9800", "#8bc34a", "#9c27b0", "#ffeb3b",
        "#03a9f4", "#f44336", "#009688", "#795548"),
}

DIVERGING: Dict[int, Tuple[str, ...]] = {
    # ColorBrewer BrBG, colourblind safe
    1: ("#8c510a", "#bf812d", "#dfc27d", "#f6e8c3", "#f5f5f5",
        "#c7eae5", "#80cdc1", "#35978f", "#01665e"),
    # ColorBrewer RdYlGn (red/amber/green)
    2: ("#d73027", "#f46d43", "#fdae61", "#fee08b", "#ffffbf",
        "#d9ef8b", "#a6d96a", "#66bd63", "#1a9850"),
    # Chroma.js blue, ivory, red
    3: ("#0000ff", "#8052fe", "#b58bfb", "#ddc5f7", "#fffff0",
        "#ffcfb4", "#ff9e7a", "#ff6842", "#ff0000"),
}

DEFAULT_LUMINOSITY_STEP = 0.1

_NON_HEX = re.compile(r"[^0-9a-f]", re.IGNORECASE)


def categorical(palette_id: int) -> Optional[List[str]]:
    """Return categorical palette ``palette_id`` (1-3), or None if unknown."""
    colors = CATEGORICAL.get(palette_id)
    return list(colors) if colors is not None else None


def diverging(palette_id: int) -> Optional[List[str]]:
    """Return diverging palette ``palette_id`` (1-3), or None if unknown."""
    colors = DIVERGING.get(palette_id)
    return list(colors) if colors is not None else None


def normalize_hex(color: str) -> str:
    """
    Reduce a colour string to six lowercase hex digits.

    Non-hex characters are dropped and three digit shorthand is expanded
    by doubling each digit. Digits beyond the sixth are ignored.

    Raises:
        InvalidColorError: If fewer than three hex digits remain
    """
    digits = _NON_HEX.sub("", str(color)).lower()
    if len(digits) < 3:
        raise InvalidColorError(color, "need at least 3 hex digits")
    if len(digits) < 6:
        digits = "".join(ch * 2 for ch in digits[:3])
    return digits[:6]


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    """Convert a hex colour to an (R, G, B) tuple of ints in 0-255."""
    digits = normalize_hex(color)
    return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore


def rgb_to_hex(rgb: Sequence[float]) -> str:
    """Convert an (R, G, B) tuple to ``#rrggbb``, clamping to 0-255 and rounding halves up."""
    r, g, b = [math.floor(min(max(0.0, v), 255.0) + 0.5) for v in rgb]
    return f"#{r:02x}{g:02x}{b:02x}"


def shift_luminosity(color: str, luminosity: Optional[float]) -> str:
    """
    Lighten or darken a colour.

    Every channel moves by the same fraction of its own value:
    ``c + c * luminosity``. Positive values lighten, negative darken and
    0 leaves the colour as is.

    Args:
        color: Hex colour, ``#rrggbb`` or ``#rgb``
        luminosity: Signed fraction; None counts as 0

    Returns:
        Shifted colour as ``#rrggbb``
    """
    lum = luminosity or 0.0
    return rgb_to_hex([c + c * lum for c in hex_to_rgb(color)])


def lum_shift(colors: Sequence[str], luminosity: Optional[float]) -> List[str]:
    """Apply the same luminosity shift to every colour in ``colors``."""
    return [shift_luminosity(c, luminosity) for c in colors]


def luminosity_ramp(count: int, step: float = DEFAULT_LUMINOSITY_STEP) -> List[float]:
    """
    Evenly spaced luminosity offsets centred on 0.

    The offsets span ``[-step * count / 2, +step * count / 2]``. A single
    offset sits at the centre.
    """
    if count <= 0:
        return []
    if count == 1:
        return [0.0]

    lum_max = step * count / 2
    return [float(v) for v in np.linspace(-lum_max, lum_max, count)]


def sequential(
    base_color: str,
    count: int,
    step: float = DEFAULT_LUMINOSITY_STEP
) -> List[str]:
    """
    Generate ``count`` shades of ``base_color``, darkest first.

    Args:
        base_color: Hex colour the ramp is centred on
        count: Number of colours to generate
        step: Luminosity span per colour; the whole ramp covers step * count

    Returns:
        List of ``#rrggbb`` colours
    """
    base = normalize_hex(base_color)
    return [shift_luminosity(base, lum) for lum in luminosity_ramp(count, step)]
