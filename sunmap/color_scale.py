"""
color_scale.py
--------------
Piecewise-linear colour scale over a fixed value range.

The stop table is spread evenly across [min_value, max_value]. A value is
normalised to t in [0, 1], scaled to the stop index space, and each RGB
channel is interpolated between the two neighbouring stops.

Cell fills, legend pixels, and the text colour drawn over a cell all go
through `color_for`, so a label always matches the fill beneath it.
"""

import math
from typing import Sequence, Tuple

from sunmap import config
from sunmap.cities import value_range

RGB = Tuple[int, int, int]


def _round_channel(x: float) -> int:
    # round half up, not Python's banker's rounding
    return max(0, min(255, int(math.floor(x + 0.5))))


def luminance(rgb: RGB) -> float:
    """Perceptual luminance in [0, 1] (ITU-R BT.601 weights)."""
    r, g, b = rgb
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


class ColorScale:
    """Maps values in [min_value, max_value] to RGB through a stop table."""

    def __init__(
        self,
        min_value: float,
        max_value: float,
        stops: Sequence[RGB] = config.COLOR_STOPS,
        dark_text: RGB = config.DARK_TEXT,
        light_text: RGB = config.LIGHT_TEXT,
        threshold: float = config.LUMINANCE_THRESHOLD,
    ):
        if len(stops) < 2:
            raise ValueError(f"colour scale needs at least 2 stops, got {len(stops)}")
        self.min_value = min_value
        self.max_value = max_value
        self.stops = tuple(tuple(s) for s in stops)
        self.dark_text = dark_text
        self.light_text = light_text
        self.threshold = threshold

    @classmethod
    def from_cities(cls, cities, **kwargs) -> "ColorScale":
        lo, hi = value_range(cities)
        return cls(lo, hi, **kwargs)

    def normalize(self, value: float) -> float:
        """Position of `value` in the range, clamped to [0, 1]. 0 if the range is empty."""
        span = self.max_value - self.min_value
        if span == 0:
            return 0.0
        t = (value - self.min_value) / span
        return min(1.0, max(0.0, t))

    def color_for(self, value: float) -> RGB:
        n = len(self.stops)
        scaled = self.normalize(value) * (n - 1)
        i = min(int(math.floor(scaled)), n - 2)
        f = scaled - i
        lo, hi = self.stops[i], self.stops[i + 1]
        return tuple(_round_channel(a + f * (b - a)) for a, b in zip(lo, hi))

    def text_color_for(self, value: float) -> RGB:
        """Dark label colour on bright fills, light label colour otherwise."""
        if luminance(self.color_for(value)) > self.threshold:
            return self.dark_text
        return self.light_text

    def value_at(self, fraction: float) -> float:
        """Value at a fractional position along the range (legend sampling)."""
        return self.min_value + fraction * (self.max_value - self.min_value)
