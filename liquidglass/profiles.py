"""Bezel height profiles.

A profile maps penetration into the bezel band (0 = outer edge,
1 = start of the flat interior) to a height fraction. Every profile
satisfies f(0) = 0 and f(1) = 1; nothing else is required, so a profile
may overshoot or sag in between.

Any callable mapping a float to a float can be used as a profile. The
built-ins below are small parametric curves that also take whole numpy
arrays, so they can be compared, hashed, printed and evaluated without a
per-pixel Python call.
"""

from dataclasses import dataclass

import numpy as np


def _squircle(t, exponent):
    """Superellipse quadrant rising from (0, 0) to (1, 1)."""
    t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
    return (1.0 - (1.0 - t) ** exponent) ** (1.0 / exponent)


@dataclass(frozen=True)
class SquircleProfile:
    """Convex bezel: steep at the outer edge, flat at the interior.

    exponent=2 is a circular arc, larger exponents flatten the top.
    """
    exponent: float = 4.0

    def __call__(self, t):
        return _squircle(t, self.exponent)


@dataclass(frozen=True)
class ConcaveProfile:
    """Concave bezel: flat at the outer edge, steep at the interior."""
    exponent: float = 2.0

    def __call__(self, t):
        t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
        return 1.0 - (1.0 - t ** self.exponent) ** (1.0 / self.exponent)


@dataclass(frozen=True)
class LipProfile:
    """Convex rim that sags below the interior level before settling.

    The sag is a smooth bump 16 t^2 (1-t)^2 (peak 1 at t=0.5, zero value
    and slope at both ends) scaled by ``depth``.
    """
    exponent: float = 4.0
    depth: float = 0.3

    def __call__(self, t):
        t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
        bump = 16.0 * t * t * (1.0 - t) * (1.0 - t)
        return _squircle(t, self.exponent) - self.depth * bump


CONVEX = SquircleProfile(exponent=4.0)
CONVEX_CIRCLE = SquircleProfile(exponent=2.0)
CONCAVE = ConcaveProfile(exponent=2.0)
LIP = LipProfile(exponent=4.0, depth=0.3)

PROFILES = {
    "convex": CONVEX,
    "convex_circle": CONVEX_CIRCLE,
    "concave": CONCAVE,
    "lip": LIP,
}


def get_profile(name):
    """Look up a built-in profile by name (case-insensitive)."""
    key = name.lower().replace("-", "_")
    try:
        return PROFILES[key]
    except KeyError:
        raise ValueError(
            f"Unknown bezel profile: {name!r} "
            f"(expected one of {', '.join(PROFILES)})"
        ) from None


def as_array_profile(profile):
    """Return ``profile`` in a form that accepts a numpy array.

    Built-in profiles are returned as they are; any other callable is
    treated as a scalar function and wrapped with ``np.vectorize``.
    """
    if isinstance(profile, (SquircleProfile, ConcaveProfile, LipProfile)):
        return profile
    return np.vectorize(profile, otypes=[np.float64])
