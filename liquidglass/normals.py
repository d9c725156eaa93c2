"""Surface normals from a height field."""

import numpy as np


def height_gradient(height, step=1.0):
    """Central differences of a height field.

    One-sample step in both directions; borders replicate the edge value
    so the result has the same shape as the input. ``step`` is the
    sample spacing, so the gradient is expressed per unit of length.

    Returns:
        (dh_dx, dh_dy) arrays shaped like ``height``.
    """
    padded = np.pad(height, 1, mode='edge')
    dh_dx = (padded[1:-1, 2:] - padded[1:-1, :-2]) / (2 * step)
    dh_dy = (padded[2:, 1:-1] - padded[:-2, 1:-1]) / (2 * step)
    return dh_dx, dh_dy


def normals_from_gradient(dh_dx, dh_dy):
    """Unit normals (-dh/dx, -dh/dy, 1) / norm as an (..., 3) array."""
    normals = np.stack([-dh_dx, -dh_dy, np.ones_like(dh_dx)], axis=-1)
    normals /= np.linalg.norm(normals, axis=-1, keepdims=True)
    return normals


def estimate_normals(height, step=1.0, flat=None):
    """Estimate per-pixel unit normals of a height field.

    Args:
        height: (rows, cols) height field.
        step: Distance between neighbouring samples.
        flat: Optional boolean mask of pixels whose surface is known to
            be level; they get the exact up normal (0, 0, 1).

    Returns:
        (rows, cols, 3) float64 array of unit normals with nz > 0.
    """
    normals = normals_from_gradient(*height_gradient(height, step))
    if flat is not None:
        normals[flat] = (0.0, 0.0, 1.0)
    return normals
