"""Colours for visualization."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class ColorRGBA:
    """An RGBA colour with components in [0, 1]."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 0.0


def percent_to_rainbow_color(h: float) -> ColorRGBA:
    """Map a fraction onto a rainbow by blending over HSV hue (alpha 0.5)."""
    color = ColorRGBA(a=0.5)
    s = 1.0
    v = 1.0

    if not math.isfinite(h):
        color.r, color.g, color.b = 1.0, 0.5, 0.5
        return color

    h -= math.floor(h)
    h *= 6
    i = math.floor(h)
    f = h - i
    if i % 2 == 0:
        f = 1 - f
    m = v * (1 - s)
    n = v * (1 - s * f)

    if i in (0, 6):
        color.r, color.g, color.b = v, n, m
    elif i == 1:
        color.r, color.g, color.b = n, v, m
    elif i == 2:
        color.r, color.g, color.b = m, v, n
    elif i == 3:
        color.r, color.g, color.b = m, n, v
    elif i == 4:
        color.r, color.g, color.b = n, m, v
    elif i == 5:
        color.r, color.g, color.b = v, m, n
    else:
        color.r, color.g, color.b = 1.0, 0.5, 0.5
    return color