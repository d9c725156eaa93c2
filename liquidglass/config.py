"""Optical configuration and engine defaults."""

import math
from dataclasses import dataclass

from .profiles import CONVEX

DEFAULT_BLUR = 0.2
DEFAULT_GLASS_THICKNESS = 40.0
DEFAULT_BEZEL_WIDTH = 20.0
DEFAULT_REFRACTIVE_INDEX = 1.5
DEFAULT_SPECULAR_OPACITY = 0.4
DEFAULT_SPECULAR_SATURATION = 4.0
DEFAULT_SEGMENTS = 50


class ConfigurationError(ValueError):
    """Raised when optical parameters describe a physically invalid glass."""


def check_refractive_index(refractive_index):
    if not math.isfinite(refractive_index) or refractive_index <= 1.0:
        raise ConfigurationError(
            f"refractive_index must be a finite value > 1.0, "
            f"got {refractive_index!r}"
        )


@dataclass(frozen=True)
class OpticalConfig:
    """Material and lighting parameters of the glass."""

    # Refraction
    glass_thickness: float = DEFAULT_GLASS_THICKNESS
    refractive_index: float = DEFAULT_REFRACTIVE_INDEX
    bezel_height_fn: object = CONVEX

    # Specular layer
    specular_opacity: float = DEFAULT_SPECULAR_OPACITY
    specular_saturation: float = DEFAULT_SPECULAR_SATURATION
    specular_segments: int = DEFAULT_SEGMENTS
    light_direction: tuple = None

    # Compositor blur (passed through untouched)
    blur: float = DEFAULT_BLUR

    def validate(self):
        """Raise ConfigurationError if the configuration is unusable."""
        check_refractive_index(self.refractive_index)
        if not math.isfinite(self.glass_thickness) or self.glass_thickness < 0:
            raise ConfigurationError(
                f"glass_thickness must be a finite value >= 0, "
                f"got {self.glass_thickness!r}"
            )
        if not callable(self.bezel_height_fn):
            raise ConfigurationError("bezel_height_fn must be callable")
        if self.light_direction is not None and len(self.light_direction) != 2:
            raise ConfigurationError(
                "light_direction must be an (x, y) pair or None"
            )
        return self
