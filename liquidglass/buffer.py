"""RGBA8 pixel buffers and their conversion to images."""

import base64
import io
from dataclasses import dataclass

import numpy as np
from PIL import Image


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable row-major RGBA8 image.

    ``pixels`` is a read-only (height, width, 4) uint8 array.
    """
    pixels: np.ndarray

    def __post_init__(self):
        pixels = np.array(self.pixels, dtype=np.uint8, order='C')
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected shape (H, W, 4), got {pixels.shape}.")
        pixels.setflags(write=False)
        object.__setattr__(self, 'pixels', pixels)

    @classmethod
    def empty(cls, height=0, width=0):
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    @property
    def size(self):
        """(width, height), as Pillow reports it."""
        return self.width, self.height

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __len__(self):
        return self.pixels.size

    def tobytes(self):
        return self.pixels.tobytes()

    def to_image(self):
        """Return a Pillow RGBA image holding a copy of the pixels."""
        return Image.fromarray(np.array(self.pixels))

    def to_png(self):
        out = io.BytesIO()
        self.to_image().save(out, format='PNG')
        return out.getvalue()

    def to_data_url(self):
        """Encode as a ``data:image/png;base64,...`` URL."""
        encoded = base64.b64encode(self.to_png()).decode('ascii')
        return f"data:image/png;base64,{encoded}"

    def save(self, path):
        self.to_image().save(str(path))
