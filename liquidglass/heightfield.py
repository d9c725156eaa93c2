"""Height field of the glass surface."""

import logging

import numpy as np

from .geometry import Zone, resolve
from .profiles import as_array_profile

logger = logging.getLogger(__name__)


def build_height_field(geometry, profile, glass_thickness, rows=None,
                       resolution=None):
    """Sample the bezel profile over the canvas.

    Args:
        geometry: Geometry of the glass (clamped internally).
        profile: Bezel profile, f(penetration) -> height fraction. Scalar
            functions are vectorised.
        glass_thickness: Height of the flat interior.
        rows: Optional slice of canvas rows to compute.
        resolution: Precomputed ``resolve(geometry, rows)`` to reuse.

    Returns:
        (band_rows, cols) float64 array; 0 outside the glass footprint,
        ``glass_thickness`` on the flat interior.
    """
    if resolution is None:
        resolution = resolve(geometry, rows)

    height = np.zeros(resolution.penetration.shape, dtype=np.float64)
    bezel = resolution.zone == Zone.BEZEL
    if bezel.any():
        curve = as_array_profile(profile)
        fraction = np.asarray(curve(resolution.penetration[bezel]),
                              dtype=np.float64)
        height[bezel] = fraction * glass_thickness
    height[resolution.zone == Zone.INTERIOR] = glass_thickness

    logger.debug("Height field %s, %d bezel pixels",
                 height.shape, int(bezel.sum()))
    return height
