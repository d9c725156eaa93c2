"""Specular rim highlight of the glass.

The rim of the glass is modelled as a quarter round: at the outer edge
the surface is vertical, ``rim_width`` units inside it is level. The
outline is traced as a polyline with ``segments`` chords per rounded
corner, and each pixel takes its distance and outward normal from the
nearest point on that polyline, so low segment counts give faceted
corner highlights.
"""

import logging
import math

import numpy as np

from .buffer import PixelBuffer
from .config import DEFAULT_SEGMENTS
from .geometry import Geometry, pixel_centers, signed_distance

logger = logging.getLogger(__name__)

# Light comes from the top of the screen, raised above the surface.
# Deliberately not the light directly overhead (tilted slightly towards
# the viewer): an overhead light lights the whole rim alike, this one
# lights the upper rim only.
DEFAULT_LIGHT_DIRECTION = (0.0, -1.0)
LIGHT_ELEVATION = 0.5

DEFAULT_EXPONENT = 2.0
DEFAULT_RIM_WIDTH = 2.0

BAND_ROWS = 16


def trace_perimeter(width, height, radius, segments):
    """Vertices of a centred rounded rectangle, clockwise from the top.

    Each corner arc contributes ``segments + 1`` vertices; the straight
    edges are the chords joining consecutive arcs.

    Returns:
        (4 * (segments + 1), 2) array of (x, y) vertices.
    """
    segments = max(1, int(segments))
    hw, hh, r = width / 2, height / 2, radius

    corners = [
        (hw - r, -hh + r, -math.pi / 2, 0.0),         # top-right
        (hw - r, hh - r, 0.0, math.pi / 2),           # bottom-right
        (-hw + r, hh - r, math.pi / 2, math.pi),      # bottom-left
        (-hw + r, -hh + r, math.pi, 3 * math.pi / 2),  # top-left
    ]
    arcs = []
    for cx, cy, start, end in corners:
        a = np.linspace(start, end, segments + 1)
        arcs.append(np.stack([cx + r * np.cos(a), cy + r * np.sin(a)], axis=1))
    return np.concatenate(arcs)


def nearest_on_polyline(px, py, vertices):
    """Closest point on a closed polyline for each query point.

    Args:
        px, py: 1-D arrays of query coordinates.
        vertices: (S, 2) polyline vertices; the last joins the first.

    Returns:
        (cx, cy, dist, segment) 1-D arrays; ``segment`` is the index of
        the edge starting at ``vertices[segment]``.
    """
    a = vertices
    b = np.roll(vertices, -1, axis=0)
    ex = b[:, 0] - a[:, 0]
    ey = b[:, 1] - a[:, 1]
    len2 = ex * ex + ey * ey
    len2 = np.where(len2 > 0, len2, 1.0)

    rx = px[:, np.newaxis] - a[:, 0]
    ry = py[:, np.newaxis] - a[:, 1]
    t = np.clip((rx * ex + ry * ey) / len2, 0.0, 1.0)
    cx = a[:, 0] + t * ex
    cy = a[:, 1] + t * ey
    d2 = (px[:, np.newaxis] - cx) ** 2 + (py[:, np.newaxis] - cy) ** 2

    k = np.argmin(d2, axis=1)
    idx = np.arange(len(px))
    return cx[idx, k], cy[idx, k], np.sqrt(d2[idx, k]), k


def segment_normals(vertices):
    """Outward unit normals of the edges of a clockwise polyline.

    Zero-length edges get a zero normal.
    """
    e = np.roll(vertices, -1, axis=0) - vertices
    length = np.hypot(e[:, 0], e[:, 1])
    length = np.where(length > 0, length, 1.0)
    return e[:, 1] / length, -e[:, 0] / length


def _light_vector(light_direction):
    lx, ly = DEFAULT_LIGHT_DIRECTION if light_direction is None else light_direction
    light = np.array([lx, ly, LIGHT_ELEVATION], dtype=np.float64)
    return light / np.linalg.norm(light)


def _specular_band(geometry, vertices, light, exponent, rim_width,
                   start, stop):
    """Alpha values for canvas rows [start, stop)."""
    g = geometry
    dpr = g.device_pixel_ratio
    n_cols = g.pixel_shape[1]

    x, y = pixel_centers(g.pixel_shape, dpr, slice(start, stop))
    px = np.broadcast_to(x, (stop - start, n_cols)).ravel()
    py = np.broadcast_to(y, (stop - start, n_cols)).ravel()

    cx, cy, dist, k = nearest_on_polyline(px, py, vertices)

    # Inside the traced outline, not the true arc: between a chord and
    # its arc the pixel is outside. Degenerate edges fall back to the SDF.
    seg_nx, seg_ny = segment_normals(vertices)
    side = (px - cx) * seg_nx[k] + (py - cy) * seg_ny[k]
    inside = np.where(
        side != 0, side < 0,
        signed_distance(px, py, g.object_width, g.object_height,
                        g.radius) < 0)

    # Outward normal of the outline at the nearest point
    sign = np.where(inside, -1.0, 1.0)
    safe = np.where(dist > 1e-12, dist, 1.0)
    nx = np.where(dist > 1e-12, sign * (px - cx) / safe, 0.0)
    ny = np.where(dist > 1e-12, sign * (py - cy) / safe, 0.0)

    signed_px = np.where(inside, -dist, dist) * dpr
    coverage = np.clip(0.5 - signed_px, 0.0, 1.0)
    t = np.clip(np.where(inside, dist, 0.0) / rim_width, 0.0, 1.0)

    tilt = 0.5 * math.pi * (1.0 - t)
    sin_tilt = np.sin(tilt)
    n_dot_l = (nx * sin_tilt * light[0] + ny * sin_tilt * light[1]
               + np.cos(tilt) * light[2])

    intensity = np.maximum(n_dot_l, 0.0) ** exponent * (1.0 - t) * coverage
    alpha = np.floor(255 * np.clip(intensity, 0.0, 1.0) + 0.5)
    return alpha.reshape(stop - start, n_cols).astype(np.uint8)


def compute_specular(width, height, radius, segments=DEFAULT_SEGMENTS,
                     light_direction=None, dpr=1.0, *,
                     exponent=DEFAULT_EXPONENT, rim_width=DEFAULT_RIM_WIDTH,
                     executor=None):
    """Render the specular highlight layer of a glass object.

    Args:
        width, height, radius: Glass size in object units; the canvas is
            exactly the object.
        segments: Chords per rounded corner used to trace the outline.
        light_direction: (x, y) screen-plane direction of the light, or
            None for the default (from the top).
        dpr: Device pixel ratio.
        exponent: Falloff exponent applied to max(dot(N, L), 0).
        rim_width: Width of the rounded rim in object units.
        executor: Optional concurrent.futures executor for row bands.

    Returns:
        PixelBuffer of round(width*dpr) x round(height*dpr) pixels, white,
        with the highlight intensity in the alpha channel.
    """
    g = Geometry(width, height, radius, bezel_width=0.0,
                 device_pixel_ratio=dpr).clamped()
    n_rows, n_cols = g.pixel_shape
    if n_rows == 0 or n_cols == 0:
        logger.debug("Zero-area canvas, returning empty specular map")
        return PixelBuffer.empty(n_rows, n_cols)

    vertices = trace_perimeter(g.object_width, g.object_height, g.radius,
                               segments)
    light = _light_vector(light_direction)
    rim = max(float(rim_width), 1.0 / g.device_pixel_ratio)

    bands = [(start, min(start + BAND_ROWS, n_rows))
             for start in range(0, n_rows, BAND_ROWS)]
    args = (g, vertices, light, exponent, rim)
    if executor is None:
        alphas = [_specular_band(*args, start, stop) for start, stop in bands]
    else:
        futures = [executor.submit(_specular_band, *args, start, stop)
                   for start, stop in bands]
        alphas = [f.result() for f in futures]

    rgba = np.full((n_rows, n_cols, 4), 255, dtype=np.uint8)
    rgba[:, :, 3] = np.concatenate(alphas, axis=0)

    logger.debug("Specular map %dx%d, %d segments per corner",
                 n_cols, n_rows, max(1, int(segments)))
    return PixelBuffer(rgba)
