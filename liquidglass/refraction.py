"""Vector Snell refraction of a vertical ray through the glass surface."""

import numpy as np

from .config import check_refractive_index

INCIDENT = np.array([0.0, 0.0, -1.0])


def refract(normals, refractive_index):
    """Refract the downward ray I = (0, 0, -1) entering the glass.

    Air (n = 1) to glass (n = ``refractive_index``). ``normals`` is an
    (..., 3) array of unit surface normals pointing out of the glass.

    Returns:
        (..., 3) array of unit refracted directions T. Level normals give
        T == I exactly.
    """
    check_refractive_index(refractive_index)
    eta = 1.0 / refractive_index

    cos_i = np.clip(normals[..., 2], -1.0, 1.0)   # dot(-I, N)
    sin_i = np.sqrt(np.maximum(1.0 - cos_i * cos_i, 0.0))
    sin_t = np.clip(sin_i * eta, 0.0, 1.0)
    cos_t = np.sqrt(1.0 - sin_t * sin_t)

    coeff = np.asarray(cos_i * eta - cos_t)[..., np.newaxis]
    return eta * INCIDENT + coeff * normals


def displacement_field(normals, depth, refractive_index):
    """Horizontal offset of each refracted ray at the base plane.

    The ray leaves the surface along T and is followed until it has
    dropped ``depth`` (scalar or per-pixel array) vertically.

    Returns:
        (dx, dy) arrays in the same length unit as ``depth``.
    """
    t = refract(normals, refractive_index)
    scale = depth / -t[..., 2]
    return t[..., 0] * scale, t[..., 1] * scale
