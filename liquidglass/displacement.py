"""Displacement map: refraction offsets encoded as an RGBA8 image.

The map follows the mid-grey convention of image displacement filters:
channel value 128 means no offset, R carries the horizontal offset and
G the vertical one, both normalised by ``maximum_displacement``::

    offset = (channel - 128) / 127 * maximum_displacement
"""

import logging
from typing import NamedTuple

import numpy as np

from .buffer import PixelBuffer
from .geometry import Zone, resolve
from .heightfield import build_height_field
from .normals import estimate_normals
from .refraction import displacement_field

logger = logging.getLogger(__name__)

# Rows per task when an executor is supplied
BAND_ROWS = 64


class DisplacementResult(NamedTuple):
    displacement_map: PixelBuffer
    maximum_displacement: float


def encode_displacement(dx, dy):
    """Quantise an offset field to an RGBA8 buffer.

    Returns:
        (PixelBuffer, maximum_displacement) where the maximum is taken
        over both |dx| and |dy|.
    """
    dx = np.asarray(dx, dtype=np.float64)
    dy = np.asarray(dy, dtype=np.float64)
    max_disp = float(max(np.abs(dx).max(initial=0.0),
                         np.abs(dy).max(initial=0.0)))

    rgba = np.zeros(dx.shape + (4,), dtype=np.uint8)
    if max_disp > 0:
        r = np.floor(128 + 127 * dx / max_disp + 0.5)
        g = np.floor(128 + 127 * dy / max_disp + 0.5)
        rgba[:, :, 0] = np.clip(r, 0, 255).astype(np.uint8)
        rgba[:, :, 1] = np.clip(g, 0, 255).astype(np.uint8)
    else:
        rgba[:, :, 0] = 128
        rgba[:, :, 1] = 128
    rgba[:, :, 3] = 255

    return PixelBuffer(rgba), max_disp


def decode_displacement(buffer, maximum_displacement):
    """Recover the (dx, dy) offset field from an encoded buffer."""
    pixels = buffer.pixels.astype(np.float64)
    scale = maximum_displacement / 127.0
    return (pixels[:, :, 0] - 128) * scale, (pixels[:, :, 1] - 128) * scale


def _displacement_band(geometry, config, start, stop):
    """Offsets for canvas rows [start, stop).

    Heights are computed with one halo row on each side (where the canvas
    has one) so the band's gradients match a whole-canvas computation.
    """
    n_rows = geometry.pixel_shape[0]
    lo, hi = max(start - 1, 0), min(stop + 1, n_rows)

    resolution = resolve(geometry, slice(lo, hi))
    height = build_height_field(geometry, config.bezel_height_fn,
                                config.glass_thickness,
                                resolution=resolution)
    normals = estimate_normals(height, step=1.0 / geometry.device_pixel_ratio,
                               flat=resolution.zone != Zone.BEZEL)

    crop = slice(start - lo, start - lo + (stop - start))
    return displacement_field(normals[crop], config.glass_thickness,
                              config.refractive_index)


def compute_offsets(geometry, config, executor=None):
    """Continuous (dx, dy) refraction offsets of every canvas pixel.

    Args:
        geometry: Geometry of the glass and canvas.
        config: OpticalConfig; validated before use.
        executor: Optional concurrent.futures executor. When given, the
            canvas is split into row bands computed as separate tasks.

    Returns:
        (dx, dy) float64 arrays of shape ``geometry.pixel_shape``, in
        object units.

    Raises:
        ConfigurationError: If ``config`` is invalid.
    """
    config.validate()
    g = geometry.clamped()
    n_rows, n_cols = g.pixel_shape

    if n_rows == 0 or n_cols == 0:
        empty = np.zeros((n_rows, n_cols), dtype=np.float64)
        return empty, empty.copy()

    if executor is None:
        return _displacement_band(g, config, 0, n_rows)

    futures = [executor.submit(_displacement_band, g, config,
                               start, min(start + BAND_ROWS, n_rows))
               for start in range(0, n_rows, BAND_ROWS)]
    bands = [f.result() for f in futures]
    dx = np.concatenate([b[0] for b in bands], axis=0)
    dy = np.concatenate([b[1] for b in bands], axis=0)
    return dx, dy


def compute_displacement(geometry, config, executor=None):
    """Compute the displacement map of a glass object.

    Returns:
        DisplacementResult(displacement_map, maximum_displacement), with
        the maximum in object units. A zero-area canvas gives an empty
        buffer and a maximum of 0.

    Raises:
        ConfigurationError: If ``config`` is invalid.
    """
    dx, dy = compute_offsets(geometry, config, executor=executor)
    buffer, max_disp = encode_displacement(dx, dy)
    logger.debug("Displacement map %dx%d, maximum displacement %.3f",
                 buffer.width, buffer.height, max_disp)
    return DisplacementResult(buffer, max_disp)
