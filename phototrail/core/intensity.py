"""Log-scaled intensity and intensity-to-color mapping."""
import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class HSL:
    """Color in HSL space: hue in degrees, saturation and lightness in percent."""
    h: float
    s: float
    l: float


@dataclass(frozen=True)
class ColorStop:
    t: float
    color: HSL


# Blue -> Cyan -> Green -> Yellow -> Red
GRID_COLOR_STOPS: Tuple[ColorStop, ...] = (
    ColorStop(0.0, HSL(210, 70, 50)),
    ColorStop(0.25, HSL(180, 70, 50)),
    ColorStop(0.5, HSL(120, 60, 45)),
    ColorStop(0.75, HSL(45, 90, 50)),
    ColorStop(1.0, HSL(0, 80, 50)),
)


def log_intensity(count: int, max_count: int) -> float:
    """
    Normalize a count to [0, 1] on a log scale.

    ``ln(count + 1) / ln(max_count + 1)`` keeps dense areas from saturating
    the palette. Returns 0 when ``max_count`` is 0.
    """
    if max_count <= 0:
        return 0.0
    return math.log(count + 1) / math.log(max_count + 1)


def grid_cell_color(intensity: float) -> HSL:
    """
    Map an intensity to a color by interpolating between fixed stops.

    Callers pass an intensity already in [0, 1]; values outside that range
    are not clamped.

    Args:
        intensity: Normalized intensity

    Returns:
        Interpolated HSL color
    """
    lower = GRID_COLOR_STOPS[0]
    upper = GRID_COLOR_STOPS[-1]
    for current, following in zip(GRID_COLOR_STOPS, GRID_COLOR_STOPS[1:]):
        if current.t <= intensity <= following.t:
            lower, upper = current, following
            break

    span = (upper.t - lower.t) or 1.0
    local_t = (intensity - lower.t) / span

    return HSL(
        h=lower.color.h + (upper.color.h - lower.color.h) * local_t,
        s=lower.color.s + (upper.color.s - lower.color.s) * local_t,
        l=lower.color.l + (upper.color.l - lower.color.l) * local_t,
    )


def admin_area_color(intensity: float) -> HSL:
    """Linear blue-to-red ramp used for administrative area fills."""
    return HSL(
        h=210 - intensity * 210,
        s=70 + intensity * 15,
        l=50 + intensity * 10,
    )


def to_css(color: HSL) -> str:
    """Render an HSL color as a CSS ``hsl()`` string."""
    return f"hsl({round(color.h)}, {round(color.s)}%, {round(color.l)}%)"
