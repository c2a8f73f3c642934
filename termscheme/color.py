"""
Color model used by the quantizers and the transformation pipeline.

Colors are stored as clamped sRGB channels in [0, 1]. Lightness, chroma and
hue edits happen in Oklab/Oklch; mixing happens in CIE L*a*b* (D65), so a
midpoint between two colors looks intermediate rather than muddy.

References
---------
- Björn Ottosson, *A perceptual color space for image processing*,
  https://bottosson.github.io/posts/oklab/
- W3C, *WCAG 2.1 relative luminance*,
  https://www.w3.org/TR/WCAG21/#dfn-relative-luminance
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache

import numpy as np
import webcolors

RGB8 = tuple[int, int, int]
Triple = tuple[float, float, float]

# Chroma below this is treated as grey; hue is meaningless there
ACHROMATIC_CHROMA = 1e-6

# Luminance above which black text reads better than white
TEXT_LUMINANCE_THRESHOLD = 0.179


# === Oklab matrices (linear sRGB <-> LMS <-> Oklab) ===

LMS_FROM_LINEAR_SRGB = (
    (0.4122214708, 0.5363325363, 0.0514459929),
    (0.2119034982, 0.6806995451, 0.1073969566),
    (0.0883024619, 0.2817188376, 0.6299787005),
)

OKLAB_FROM_LMS = (
    (0.2104542553, 0.7936177850, -0.0040720468),
    (1.9779984951, -2.4285922050, 0.4505937099),
    (0.0259040371, 0.7827717662, -0.8086757660),
)

LMS_FROM_OKLAB = (
    (1.0, 0.3963377774, 0.2158037573),
    (1.0, -0.1055613458, -0.0638541728),
    (1.0, -0.0894841775, -1.2914855480),
)

LINEAR_SRGB_FROM_LMS = (
    (4.0767416621, -3.3077115913, 0.2309699292),
    (-1.2684380046, 2.6097574011, -0.3413193965),
    (-0.0041960863, -0.7034186147, 1.7076147010),
)

# sRGB <-> CIE XYZ (D65)
XYZ_FROM_LINEAR_SRGB = (
    (0.4124564, 0.3575761, 0.1804375),
    (0.2126729, 0.7151522, 0.0721750),
    (0.0193339, 0.1191920, 0.9503041),
)

LINEAR_SRGB_FROM_XYZ = (
    (3.2404542, -1.5371385, -0.4985314),
    (-0.9692660, 1.8760108, 0.0415560),
    (0.0556434, -0.2040259, 1.0572252),
)

D65_WHITE = (0.95047, 1.0, 1.08883)
LAB_EPSILON = 0.008856  # (6/29)^3
LAB_KAPPA = 903.3       # (29/3)^3


def _mat3(matrix, vector) -> Triple:
    x, y, z = vector
    return (
        matrix[0][0] * x + matrix[0][1] * y + matrix[0][2] * z,
        matrix[1][0] * x + matrix[1][1] * y + matrix[1][2] * z,
        matrix[2][0] * x + matrix[2][1] * y + matrix[2][2] * z,
    )


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def _clamp_unit(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return min(1.0, max(0.0, value))


# === Color Space Transforms ===

def srgb_to_linear(channel: float) -> float:
    """Convert an sRGB channel (0-1) to linear light (0-1)."""
    if channel <= 0.04045:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def linear_to_srgb(channel: float) -> float:
    """Convert a linear-light channel to sRGB, clamping to [0, 1]."""
    channel = _clamp_unit(channel)
    if channel <= 0.0031308:
        return channel * 12.92
    return 1.055 * channel ** (1 / 2.4) - 0.055


def linear_srgb_to_oklab(rgb: Triple) -> Triple:
    """Linear sRGB -> Oklab."""
    lms = _mat3(LMS_FROM_LINEAR_SRGB, rgb)
    return _mat3(OKLAB_FROM_LMS, tuple(_cbrt(c) for c in lms))


def oklab_to_linear_srgb(lab: Triple) -> Triple:
    """Oklab -> linear sRGB. The result may lie outside the sRGB gamut."""
    lms_ = _mat3(LMS_FROM_OKLAB, lab)
    return _mat3(LINEAR_SRGB_FROM_LMS, tuple(c * c * c for c in lms_))


def _xyz_to_lab(xyz: Triple) -> Triple:
    """Convert CIE XYZ to CIE L*a*b* (D65 illuminant)."""
    xn, yn, zn = D65_WHITE

    def f(t: float) -> float:
        if t > LAB_EPSILON:
            return t ** (1 / 3)
        return (LAB_KAPPA * t + 16) / 116

    fx = f(xyz[0] / xn)
    fy = f(xyz[1] / yn)
    fz = f(xyz[2] / zn)
    return (116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz))


def _lab_to_xyz(lab: Triple) -> Triple:
    """Convert CIE L*a*b* (D65) back to XYZ."""
    L, a, b = lab
    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200

    x = fx ** 3 if fx ** 3 > LAB_EPSILON else (116 * fx - 16) / LAB_KAPPA
    y = fy ** 3 if L > LAB_KAPPA * LAB_EPSILON else L / LAB_KAPPA
    z = fz ** 3 if fz ** 3 > LAB_EPSILON else (116 * fz - 16) / LAB_KAPPA
    return (x * D65_WHITE[0], y * D65_WHITE[1], z * D65_WHITE[2])


# === Vectorized transforms for whole images ===

_LMS_FROM_LINEAR = np.array(LMS_FROM_LINEAR_SRGB)
_OKLAB_FROM_LMS = np.array(OKLAB_FROM_LMS)
_LMS_FROM_OKLAB = np.array(LMS_FROM_OKLAB)
_LINEAR_FROM_LMS = np.array(LINEAR_SRGB_FROM_LMS)


def srgb_array_to_oklab(rgb: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) array of 8-bit sRGB values to Oklab."""
    norm = np.asarray(rgb, dtype=np.float64) / 255.0
    linear = np.where(norm <= 0.04045, norm / 12.92, ((norm + 0.055) / 1.055) ** 2.4)
    return np.cbrt(linear @ _LMS_FROM_LINEAR.T) @ _OKLAB_FROM_LMS.T


def oklab_array_to_srgb(lab: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) Oklab array to sRGB in [0, 1], clipped per channel."""
    lms = (np.asarray(lab, dtype=np.float64) @ _LMS_FROM_OKLAB.T) ** 3
    linear = np.clip(lms @ _LINEAR_FROM_LMS.T, 0.0, 1.0)
    return np.where(linear <= 0.0031308, linear * 12.92, 1.055 * linear ** (1 / 2.4) - 0.055)


# === Color ===

@dataclass(frozen=True, slots=True)
class Color:
    """An immutable sRGB color. Channels are clamped to [0, 1] on creation."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def __post_init__(self) -> None:
        for name in ('red', 'green', 'blue', 'alpha'):
            object.__setattr__(self, name, _clamp_unit(float(getattr(self, name))))

    # -- Constructors --

    @classmethod
    def from_rgb(cls, r: float, g: float, b: float) -> Color:
        """Build a color from 8-bit channels (0-255)."""
        return cls(r / 255.0, g / 255.0, b / 255.0)

    @classmethod
    def from_linear(cls, r: float, g: float, b: float, alpha: float = 1.0) -> Color:
        return cls(linear_to_srgb(r), linear_to_srgb(g), linear_to_srgb(b), alpha)

    @classmethod
    def from_oklab(cls, L: float, a: float, b: float, alpha: float = 1.0) -> Color:
        """Build a color from Oklab coordinates, clamping out-of-gamut channels."""
        return cls.from_linear(*oklab_to_linear_srgb((L, a, b)), alpha=alpha)

    @classmethod
    def from_lab(cls, L: float, a: float, b: float, alpha: float = 1.0) -> Color:
        """Build a color from CIE L*a*b* (D65)."""
        xyz = _lab_to_xyz((L, a, b))
        return cls.from_linear(*_mat3(LINEAR_SRGB_FROM_XYZ, xyz), alpha=alpha)

    @classmethod
    def from_hex(cls, text: str) -> Color:
        """Parse ``#RRGGBB`` or ``#RGB``. Raises ValueError on malformed input."""
        rgb = webcolors.hex_to_rgb(text)
        return cls.from_rgb(rgb.red, rgb.green, rgb.blue)

    @classmethod
    def black(cls) -> Color:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def white(cls) -> Color:
        return cls(1.0, 1.0, 1.0)

    # -- Conversions --

    @property
    def rgb(self) -> RGB8:
        """Channels rounded half-up to 8-bit integers."""
        return tuple(int(math.floor(c * 255.0 + 0.5)) for c in (self.red, self.green, self.blue))

    def to_linear(self) -> Triple:
        return (srgb_to_linear(self.red), srgb_to_linear(self.green), srgb_to_linear(self.blue))

    def to_oklab(self) -> Triple:
        return linear_srgb_to_oklab(self.to_linear())

    def to_oklch(self) -> Triple:
        """Return (lightness, chroma, hue in degrees)."""
        L, a, b = self.to_oklab()
        return (L, math.hypot(a, b), math.degrees(math.atan2(b, a)) % 360.0)

    def to_lab(self) -> Triple:
        return _xyz_to_lab(_mat3(XYZ_FROM_LINEAR_SRGB, self.to_linear()))

    def to_hex(self, uppercase: bool = True) -> str:
        text = '#{:02x}{:02x}{:02x}'.format(*self.rgb)
        return text.upper() if uppercase else text

    # -- Measures --

    def luminance(self) -> float:
        """WCAG 2.1 relative luminance (0 = black, 1 = white)."""
        r, g, b = self.to_linear()
        return 0.2126 * r + 0.7152 * g + 0.0722 * b

    def chroma(self) -> float:
        return self.to_oklch()[1]

    def text_color(self) -> Color:
        """Black or white, whichever is more legible on top of this color."""
        if self.luminance() > TEXT_LUMINANCE_THRESHOLD:
            return Color.black()
        return Color.white()

    def closest_name(self) -> str:
        """Nearest CSS3 color name, by Euclidean distance in L*a*b*."""
        return _closest_css3_name(self.rgb)

    # -- Transforms --

    def lighten(self, delta: float) -> Color:
        """
        Move Oklab lightness toward white (delta > 0) or black (delta < 0).

        ``delta`` is the fraction of the remaining distance covered, so +1.0
        reaches L = 1 and -1.0 reaches L = 0; chroma and hue are kept and any
        out-of-gamut channel is clamped.
        """
        if delta == 0:
            return self
        L, a, b = self.to_oklab()
        if delta > 0:
            L += delta * (1.0 - L)
        else:
            L += delta * L
        return Color.from_oklab(L, a, b, self.alpha)

    def darken(self, delta: float) -> Color:
        return self.lighten(-delta)

    def saturate(self, delta: float) -> Color:
        """Scale Oklch chroma by ``1 + delta``; -1.0 yields a grey."""
        if delta == 0:
            return self
        L, a, b = self.to_oklab()
        scale = max(0.0, 1.0 + delta)
        return Color.from_oklab(L, a * scale, b * scale, self.alpha)

    def desaturate(self, delta: float) -> Color:
        return self.saturate(-delta)

    def rotate_hue(self, degrees: float) -> Color:
        """Rotate the Oklch hue angle. Greys are returned unchanged."""
        degrees = degrees % 360.0 if math.isfinite(degrees) else 0.0
        if degrees == 0:
            return self
        L, a, b = self.to_oklab()
        if math.hypot(a, b) < ACHROMATIC_CHROMA:
            return self
        theta = math.radians(degrees)
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        return Color.from_oklab(L, a * cos_t - b * sin_t, a * sin_t + b * cos_t, self.alpha)

    def mix(self, other: Color, fraction: float) -> Color:
        """
        Interpolate toward ``other`` in CIE L*a*b*.

        ``fraction`` is the weight of ``other``: 0 returns self, 1 returns other.
        """
        fraction = _clamp_unit(fraction)
        if fraction == 0:
            return self
        if fraction == 1:
            return other
        l1, a1, b1 = self.to_lab()
        l2, a2, b2 = other.to_lab()
        return Color.from_lab(
            l1 + (l2 - l1) * fraction,
            a1 + (a2 - a1) * fraction,
            b1 + (b2 - b1) * fraction,
            self.alpha + (other.alpha - self.alpha) * fraction,
        )

    def __str__(self) -> str:
        return self.to_hex()


@lru_cache(maxsize=4096)
def _closest_css3_name(rgb: RGB8) -> str:
    target = Color.from_rgb(*rgb).to_lab()
    best = 'black'
    best_d = float('inf')
    for name in webcolors.names('css3'):
        c = webcolors.name_to_rgb(name)
        lab = Color.from_rgb(c.red, c.green, c.blue).to_lab()
        d = (target[0] - lab[0]) ** 2 + (target[1] - lab[1]) ** 2 + (target[2] - lab[2]) ** 2
        if d < best_d:
            best_d = d
            best = name
    return best
