"""Everything a compositor needs to build the liquid-glass filter.

The compositor blurs the backdrop by ``blur``, displaces it through the
displacement map with ``scale``, saturates it by ``specular_saturation``
under the specular layer and blends the specular layer on top at
``specular_opacity``. This module only produces those inputs.
"""

import logging
from dataclasses import dataclass

from .buffer import PixelBuffer
from .displacement import compute_displacement
from .specular import compute_specular

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterInputs:
    displacement_map: PixelBuffer
    maximum_displacement: float
    specular_map: PixelBuffer
    scale: float
    blur: float
    specular_opacity: float
    specular_saturation: float


def render_filter_inputs(geometry, config, scale_ratio=1.0, executor=None):
    """Compute both maps and the scalar filter parameters.

    Args:
        geometry: Geometry of the glass and canvas.
        config: OpticalConfig.
        scale_ratio: Multiplier applied to the maximum displacement to get
            the displacement filter scale (1.0 = physical refraction).
        executor: Optional concurrent.futures executor; the displacement
            and specular maps are then computed as concurrent tasks.

    Returns:
        FilterInputs.
    """
    config.validate()
    g = geometry.clamped()

    specular_args = (g.object_width, g.object_height, g.radius,
                     config.specular_segments, config.light_direction,
                     g.device_pixel_ratio)

    if executor is None:
        displacement = compute_displacement(g, config)
        specular = compute_specular(*specular_args)
    else:
        displacement_future = executor.submit(compute_displacement, g, config)
        specular_future = executor.submit(compute_specular, *specular_args)
        displacement = displacement_future.result()
        specular = specular_future.result()

    scale = displacement.maximum_displacement * scale_ratio
    logger.debug("Filter inputs ready, scale %.3f", scale)

    return FilterInputs(
        displacement_map=displacement.displacement_map,
        maximum_displacement=displacement.maximum_displacement,
        specular_map=specular,
        scale=scale,
        blur=config.blur,
        specular_opacity=config.specular_opacity,
        specular_saturation=config.specular_saturation,
    )
