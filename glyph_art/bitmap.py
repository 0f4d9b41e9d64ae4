#!/usr/bin/env python3
"""
Glyph Art Converter - Bitmaps
=============================
The decoded pixel buffer handed to the mapper, and the resampler that scales
it down to one pixel per glyph cell.

Scaling itself is delegated to a resize primitive with the signature
``resize(bitmap, new_width, new_height) -> Bitmap``. The default one uses
Pillow; hosts may pass their own.
"""

from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, Optional

import numpy as np
from PIL import Image

from glyph_art.constants import CHAR_ASPECT_RATIO
from glyph_art.errors import InvalidInputError


@dataclass(frozen=True)
class Bitmap:
    """RGBA8 pixels, row-major, four bytes per pixel."""
    width: int
    height: int
    pixels: Optional[bytes]

    def __post_init__(self):
        if isinstance(self.pixels, (bytearray, memoryview)):
            object.__setattr__(self, 'pixels', bytes(self.pixels))

    @property
    def size(self):
        return self.width, self.height

    def validate(self) -> None:
        """Raise InvalidInputError unless the bitmap can be sampled."""
        for name, value in (('width', self.width), ('height', self.height)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInputError(f"Bitmap {name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidInputError(
                    f"Bitmap has zero area ({self.width}x{self.height})"
                )

        if self.pixels is None:
            raise InvalidInputError("Bitmap has no pixel buffer")
        if not isinstance(self.pixels, bytes):
            raise InvalidInputError(
                f"Pixel buffer must be bytes, got {type(self.pixels).__name__}"
            )

        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise InvalidInputError(
                f"Pixel buffer holds {len(self.pixels)} bytes, "
                f"expected {expected} for {self.width}x{self.height} RGBA"
            )

    def to_array(self) -> np.ndarray:
        """View the pixels as an ``(height, width, 4)`` uint8 array."""
        arr = np.frombuffer(self.pixels, dtype=np.uint8)
        return arr.reshape(self.height, self.width, 4)

    def to_image(self) -> Image.Image:
        """Wrap the pixels in an RGBA Pillow image."""
        return Image.frombytes('RGBA', (self.width, self.height), self.pixels)

    @classmethod
    def from_image(cls, image: Image.Image) -> 'Bitmap':
        """Build a bitmap from any Pillow image mode."""
        rgba = image if image.mode == 'RGBA' else image.convert('RGBA')
        return cls(rgba.width, rgba.height, rgba.tobytes())

    @classmethod
    def from_array(cls, arr: np.ndarray) -> 'Bitmap':
        """
        Build a bitmap from an ``(H, W, 3)`` or ``(H, W, 4)`` uint8 array.

        RGB input is given an opaque alpha channel.
        """
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InvalidInputError(f"Expected an HxWx3 or HxWx4 array, got shape {arr.shape}")

        arr = arr.astype(np.uint8, copy=False)
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)

        height, width = arr.shape[:2]
        return cls(width, height, np.ascontiguousarray(arr).tobytes())


# =============================================================================
# RESAMPLING
# =============================================================================

ResizeFunc = Callable[[Bitmap, int, int], Bitmap]

RESAMPLE_FILTERS: Dict[str, Image.Resampling] = {
    'nearest': Image.Resampling.NEAREST,
    'bilinear': Image.Resampling.BILINEAR,
    'bicubic': Image.Resampling.BICUBIC,
    'lanczos': Image.Resampling.LANCZOS,
}


def pillow_resize(bitmap: Bitmap, new_width: int, new_height: int,
                  resample: Image.Resampling = Image.Resampling.BILINEAR) -> Bitmap:
    """Default resize primitive backed by ``Image.resize``."""
    # Alpha is dropped before filtering so colors are never premultiplied
    image = bitmap.to_image().convert('RGB')
    return Bitmap.from_image(image.resize((new_width, new_height), resample))


def make_resizer(name: str) -> ResizeFunc:
    """Get a Pillow resize primitive for a filter name."""
    try:
        resample = RESAMPLE_FILTERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown resample filter: {name}") from None
    return partial(pillow_resize, resample=resample)


def target_height(source_width: int, source_height: int, target_width: int) -> int:
    """Number of glyph rows for a given column count."""
    aspect_ratio = source_height / source_width
    return int(target_width * aspect_ratio * CHAR_ASPECT_RATIO)


def resample(bitmap: Bitmap, width: int, height: int,
             resize: Optional[ResizeFunc] = None) -> np.ndarray:
    """
    Scale a bitmap to one pixel per glyph cell.

    Args:
        bitmap: Validated source bitmap
        width: Target column count
        height: Target row count (may be 0)
        resize: Resize primitive, Pillow bilinear if None

    Returns:
        ``(height, width, 3)`` uint8 RGB array
    """
    if height == 0:
        return np.zeros((0, width, 3), dtype=np.uint8)

    resize = resize or pillow_resize
    resized = resize(bitmap, width, height)

    if (resized.width, resized.height) != (width, height):
        raise InvalidInputError(
            f"Resize returned {resized.width}x{resized.height}, expected {width}x{height}"
        )
    resized.validate()

    return resized.to_array()[:, :, :3]
