"""Hex colors and perceptual distance (CIE76 delta E in CIELAB, D65)."""
from __future__ import annotations

import colorsys
import math
from typing import Tuple

RGB = Tuple[int, int, int]
LAB = Tuple[float, float, float]

# D65 reference white
_XN, _YN, _ZN = 0.95047, 1.00000, 1.08883
_EPS = 216 / 24389
_KAPPA = 24389 / 27


def parse_hex(color: str) -> RGB:
    s = color.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError(f"not a hex color: {color!r}")
    try:
        return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)
    except ValueError:
        raise ValueError(f"not a hex color: {color!r}") from None


def to_hex(rgb: RGB) -> str:
    r, g, b = (max(0, min(255, int(round(c)))) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_hex(color: str) -> str:
    return to_hex(parse_hex(color))


def _linear(c: float) -> float:
    c /= 255.0
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def _gamma(c: float) -> float:
    v = 12.92 * c if c <= 0.0031308 else 1.055 * (c ** (1 / 2.4)) - 0.055
    return v * 255.0


def _f(t: float) -> float:
    return t ** (1 / 3) if t > _EPS else (_KAPPA * t + 16) / 116


def _f_inv(t: float) -> float:
    t3 = t ** 3
    return t3 if t3 > _EPS else (116 * t - 16) / _KAPPA


def rgb_to_lab(rgb: RGB) -> LAB:
    r, g, b = (_linear(c) for c in rgb)
    x = 0.4124564 * r + 0.3575761 * g + 0.1804375 * b
    y = 0.2126729 * r + 0.7151522 * g + 0.0721750 * b
    z = 0.0193339 * r + 0.1191920 * g + 0.9503041 * b
    fx, fy, fz = _f(x / _XN), _f(y / _YN), _f(z / _ZN)
    return 116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)


def lab_to_rgb(lab: LAB) -> Tuple[float, float, float]:
    """Inverse of rgb_to_lab; channels are clamped to 0..255 but not rounded."""
    L, a, b = lab
    fy = (L + 16) / 116
    fx = fy + a / 500
    fz = fy - b / 200
    x, y, z = _f_inv(fx) * _XN, _f_inv(fy) * _YN, _f_inv(fz) * _ZN
    r = 3.2404542 * x - 1.5371385 * y - 0.4985314 * z
    g = -0.9692660 * x + 1.8760108 * y + 0.0415560 * z
    bl = 0.0556434 * x - 0.2040259 * y + 1.0572252 * z
    return tuple(max(0.0, min(255.0, _gamma(max(0.0, c)))) for c in (r, g, bl))  # type: ignore[return-value]


def hex_to_lab(color: str) -> LAB:
    return rgb_to_lab(parse_hex(color))


def lab_to_hex(lab: LAB) -> str:
    return to_hex(lab_to_rgb(lab))


def hsv_to_hex(h: float, s: float, v: float) -> str:
    r, g, b = colorsys.hsv_to_rgb(h % 1.0, s, v)
    return to_hex((r * 255, g * 255, b * 255))


def delta_e(a: LAB, b: LAB) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def color_distance(a: str, b: str) -> float:
    """Perceptual distance between two hex colors; 0.0 for identical colors."""
    if normalize_hex(a) == normalize_hex(b):
        return 0.0
    return delta_e(hex_to_lab(a), hex_to_lab(b))


__all__ = [
    "parse_hex",
    "to_hex",
    "normalize_hex",
    "rgb_to_lab",
    "lab_to_rgb",
    "hex_to_lab",
    "lab_to_hex",
    "hsv_to_hex",
    "delta_e",
    "color_distance",
]
