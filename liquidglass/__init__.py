"""liquidglass - Displacement and specular maps for refractive glass effects."""

import logging

from .buffer import PixelBuffer
from .config import ConfigurationError, OpticalConfig
from .displacement import (
    DisplacementResult,
    compute_displacement,
    compute_offsets,
    decode_displacement,
)
from .filter import FilterInputs, render_filter_inputs
from .geometry import Geometry
from .profiles import CONCAVE, CONVEX, CONVEX_CIRCLE, LIP, get_profile
from .specular import compute_specular

__version__ = "0.1.0"
__all__ = [
    "generate",
    "compute_displacement",
    "compute_offsets",
    "compute_specular",
    "decode_displacement",
    "render_filter_inputs",
    "ConfigurationError",
    "DisplacementResult",
    "FilterInputs",
    "Geometry",
    "OpticalConfig",
    "PixelBuffer",
    "CONVEX",
    "CONVEX_CIRCLE",
    "CONCAVE",
    "LIP",
    "get_profile",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())


def generate(width, height, radius, canvas_width=None, canvas_height=None,
             bezel_width=20, dpr=1.0, scale_ratio=1.0, **kwargs):
    """Compute the filter inputs for a glass object in one call.

    Args:
        width: Object width in CSS pixels.
        height: Object height in CSS pixels.
        radius: Corner radius (clamped to half the shorter side).
        canvas_width: Canvas width; defaults to the object width.
        canvas_height: Canvas height; defaults to the object height.
        bezel_width: Width of the curved border band.
        dpr: Device pixel ratio.
        scale_ratio: Multiplier for the displacement filter scale.
        **kwargs: Additional OpticalConfig parameters (glass_thickness,
            refractive_index, bezel_height_fn, etc.).

    Returns:
        FilterInputs.
    """
    geometry = Geometry(width, height, radius, bezel_width=bezel_width,
                        canvas_width=canvas_width,
                        canvas_height=canvas_height,
                        device_pixel_ratio=dpr)
    config = OpticalConfig(**kwargs)
    return render_filter_inputs(geometry, config, scale_ratio=scale_ratio)
