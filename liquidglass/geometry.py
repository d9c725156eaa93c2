"""Rounded-rectangle geometry: sanitising, signed distance and zoning.

The glass is an axis-aligned rounded rectangle centred on its canvas.
All lengths are in object units (CSS pixels); the canvas is sampled at
``device_pixel_ratio`` samples per unit.
"""

import math
from dataclasses import dataclass, replace
from enum import IntEnum

import numpy as np

from .config import DEFAULT_BEZEL_WIDTH


class Zone(IntEnum):
    EXTERIOR = 0
    BEZEL = 1
    INTERIOR = 2


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def _length(value):
    """``value`` as a float, with negative, NaN and infinite values as 0."""
    value = float(value)
    return value if math.isfinite(value) and value > 0 else 0.0


@dataclass(frozen=True)
class Geometry:
    """Size of the glass object and of the canvas it is drawn on."""
    object_width: float
    object_height: float
    radius: float
    bezel_width: float = DEFAULT_BEZEL_WIDTH
    canvas_width: float = None
    canvas_height: float = None
    device_pixel_ratio: float = 1.0

    def clamped(self):
        """Return a copy with every field forced into its valid range.

        Negative or non-finite lengths and pixel ratios become 0, the
        radius is capped at half the shorter side, the bezel width is
        limited to ``2*radius - 1``, and the canvas is never smaller than
        the object.
        """
        w = _length(self.object_width)
        h = _length(self.object_height)
        r = min(_length(self.radius), min(w, h) / 2)
        bezel = max(min(_length(self.bezel_width), 2 * r - 1), 0.0)

        cw = w if self.canvas_width is None else max(_length(self.canvas_width), w)
        ch = h if self.canvas_height is None else max(_length(self.canvas_height), h)

        dpr = _length(self.device_pixel_ratio)

        return replace(self, object_width=w, object_height=h, radius=r,
                       bezel_width=bezel, canvas_width=cw, canvas_height=ch,
                       device_pixel_ratio=dpr)

    @property
    def pixel_shape(self):
        """(rows, cols) of the device-pixel grid covering the canvas."""
        g = self.clamped()
        rows = _round_half_up(g.canvas_height * g.device_pixel_ratio)
        cols = _round_half_up(g.canvas_width * g.device_pixel_ratio)
        return rows, cols


@dataclass(frozen=True)
class Resolution:
    """Per-pixel geometry of a band of canvas rows."""
    signed_distance: np.ndarray
    penetration: np.ndarray
    zone: np.ndarray
    row_offset: int = 0


def signed_distance(x, y, width, height, radius):
    """Distance from (x, y) to a centred rounded rectangle.

    Positive outside, negative inside, zero on the boundary. Works on
    scalars and numpy arrays alike.
    """
    qx = np.abs(x) - (width / 2 - radius)
    qy = np.abs(y) - (height / 2 - radius)
    outside = np.hypot(np.maximum(qx, 0.0), np.maximum(qy, 0.0))
    inside = np.minimum(np.maximum(qx, qy), 0.0)
    return outside + inside - radius


def row_band(rows, n_rows):
    """Normalise a ``rows`` argument (None or slice) to (start, stop)."""
    if rows is None:
        return 0, n_rows
    start, stop, step = rows.indices(n_rows)
    if step != 1:
        raise ValueError("row bands must be contiguous")
    return start, max(start, stop)


def pixel_centers(shape, dpr, rows=None):
    """Object-space centres of the device pixels in a row band.

    Returns (x, y) broadcastable to (band_rows, cols). The canvas centre
    maps to the origin, so the grid is exactly mirror-symmetric.
    """
    n_rows, n_cols = shape
    start, stop = row_band(rows, n_rows)
    if dpr <= 0:
        return np.zeros((1, 0)), np.zeros((0, 1))
    x = (np.arange(n_cols, dtype=np.float64) + 0.5 - n_cols / 2) / dpr
    y = (np.arange(start, stop, dtype=np.float64) + 0.5 - n_rows / 2) / dpr
    return x[np.newaxis, :], y[:, np.newaxis]


def resolve(geometry, rows=None):
    """Classify every pixel of a row band into exterior, bezel or interior."""
    g = geometry.clamped()
    shape = g.pixel_shape
    start, stop = row_band(rows, shape[0])

    x, y = pixel_centers(shape, g.device_pixel_ratio, slice(start, stop))
    dist = signed_distance(x, y, g.object_width, g.object_height, g.radius)
    dist = np.broadcast_to(dist, (stop - start, shape[1])).copy()

    inside = dist < 0
    if g.bezel_width > 0:
        penetration = np.clip(-dist / g.bezel_width, 0.0, 1.0)
    else:
        penetration = np.ones_like(dist)
    penetration[~inside] = 0.0

    zone = np.full(dist.shape, Zone.EXTERIOR, dtype=np.uint8)
    zone[inside] = Zone.BEZEL
    zone[inside & (penetration >= 1.0)] = Zone.INTERIOR

    return Resolution(signed_distance=dist, penetration=penetration,
                      zone=zone, row_offset=start)
