#!/usr/bin/env python3
"""
Glyph Art Converter - Mapper
============================
Maps a bitmap onto a grid of glyphs.

Each cell of the output samples one pixel of the resampled bitmap, takes its
BT.601 luminance, applies a contrast gain around mid-gray, optionally flips
the result, and picks the glyph at the matching position of the ramp. In
color mode the sampled RGB is kept alongside the glyph. Inversion only
changes which glyph is chosen, never the color.
"""

import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from glyph_art.bitmap import Bitmap, ResizeFunc, resample, target_height
from glyph_art.constants import CharacterSet, DEFAULT_CONTRAST, DEFAULT_WIDTH
from glyph_art.errors import ConfigurationError

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
Ramp = Union[str, Tuple[str, ...]]


# =============================================================================
# BRIGHTNESS
# =============================================================================

def luminance(r: float, g: float, b: float) -> float:
    """Perceptual brightness (BT.601 weights) in [0, 255]."""
    return (299 * r + 587 * g + 114 * b) / 1000


def apply_contrast(value: float, contrast: float) -> float:
    """Scale brightness around mid-gray by ``contrast``, clamped to [0, 255]."""
    if contrast != 1.0:
        value = ((value / 255 - 0.5) * contrast + 0.5) * 255
    return max(0.0, min(255.0, value))


def glyph_brightness(value: float, invert: bool) -> float:
    """Brightness used for glyph lookup."""
    return 255 - value if invert else value


def ramp_index(brightness: float, ramp_length: int) -> int:
    """Position in a ramp of ``ramp_length`` glyphs for a brightness in [0, 255]."""
    if ramp_length < 1:
        raise ConfigurationError("Ramp must contain at least one glyph")
    if ramp_length == 1:
        return 0

    idx = math.floor((brightness / 255) * (ramp_length - 1))
    return max(0, min(ramp_length - 1, idx))


def luminance_array(rgb: np.ndarray) -> np.ndarray:
    """``luminance`` over an ``(..., 3)`` array."""
    channels = rgb.astype(np.int64)
    weighted = 299 * channels[..., 0] + 587 * channels[..., 1] + 114 * channels[..., 2]
    return weighted / 1000


def contrast_array(values: np.ndarray, contrast: float) -> np.ndarray:
    """``apply_contrast`` over an array."""
    if contrast != 1.0:
        values = ((values / 255 - 0.5) * contrast + 0.5) * 255
    return np.clip(values, 0.0, 255.0)


def ramp_index_array(brightness: np.ndarray, ramp_length: int) -> np.ndarray:
    """``ramp_index`` over an array."""
    if ramp_length < 1:
        raise ConfigurationError("Ramp must contain at least one glyph")
    if ramp_length == 1:
        return np.zeros(brightness.shape, dtype=np.int64)

    idx = np.floor((brightness / 255) * (ramp_length - 1)).astype(np.int64)
    return np.clip(idx, 0, ramp_length - 1)


# =============================================================================
# CONFIGURATION AND RESULT
# =============================================================================

@dataclass(frozen=True)
class GlyphConfig:
    """Settings for a single conversion."""

    target_width: int = DEFAULT_WIDTH        # Output columns
    ramp: Ramp = CharacterSet.STANDARD      # Glyphs, index 0 for brightness 0
    contrast: float = DEFAULT_CONTRAST      # Gain around mid-gray
    invert: bool = False                    # Flip glyph lookup
    color_mode: bool = False                # Keep sampled RGB per cell

    def __post_init__(self):
        if self.ramp is not None and not isinstance(self.ramp, str):
            try:
                ramp = tuple(self.ramp)
            except TypeError:
                raise ConfigurationError(
                    f"Ramp must be a string or a sequence of characters, got {self.ramp!r}"
                ) from None
            object.__setattr__(self, 'ramp', ramp)

    def validate(self) -> None:
        """Raise ConfigurationError if the settings cannot be used."""
        if self.ramp is None or len(self.ramp) == 0:
            raise ConfigurationError("Ramp must contain at least one glyph")
        if not isinstance(self.ramp, str):
            for glyph in self.ramp:
                # One glyph per cell keeps rows target_width characters wide
                if not isinstance(glyph, str) or len(glyph) != 1:
                    raise ConfigurationError(f"Ramp entries must be single characters, got {glyph!r}")

        width = self.target_width
        if isinstance(width, bool) or not isinstance(width, int):
            raise ConfigurationError(f"Target width must be an integer, got {width!r}")
        if width < 1:
            raise ConfigurationError(f"Target width must be at least 1, got {width}")

        contrast = self.contrast
        if isinstance(contrast, bool) or not isinstance(contrast, Real):
            raise ConfigurationError(f"Contrast must be a number, got {contrast!r}")
        if not math.isfinite(contrast):
            raise ConfigurationError(f"Contrast must be finite, got {contrast}")
        if contrast <= 0:
            raise ConfigurationError(f"Contrast must be positive, got {contrast}")


@dataclass(frozen=True)
class Cell:
    """One glyph of the output."""
    char: str
    color: Optional[RGB] = None


@dataclass(frozen=True)
class GlyphGrid:
    """Result of a conversion: ``height`` rows of ``width`` cells."""
    width: int
    height: int
    rows: Tuple[Tuple[Cell, ...], ...]
    colorized: bool = False
    source_size: Tuple[int, int] = (0, 0)

    def __iter__(self) -> Iterator[Tuple[Cell, ...]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def lines(self) -> List[str]:
        """Row strings without terminators."""
        return [''.join(cell.char for cell in row) for row in self.rows]

    @property
    def colors(self) -> Optional[List[List[RGB]]]:
        """Per-cell RGB, or None when not colorized."""
        if not self.colorized:
            return None
        return [[cell.color for cell in row] for row in self.rows]

    def to_text(self) -> str:
        """Plain text with every row followed by a newline."""
        return ''.join(line + '\n' for line in self.lines)

    @property
    def text(self) -> str:
        return self.to_text()


# =============================================================================
# GRID BUILDER
# =============================================================================

class GlyphMapper:
    """Converts bitmaps to glyph grids with a fixed configuration."""

    def __init__(self, config: Optional[GlyphConfig] = None,
                 resize: Optional[ResizeFunc] = None):
        self.config = config or GlyphConfig()
        self.resize = resize

    def _map_pixels(self, rgb: np.ndarray) -> Tuple[Tuple[Cell, ...], ...]:
        """Build cells from an ``(H, W, 3)`` array of samples."""
        config = self.config
        ramp = config.ramp

        brightness = contrast_array(luminance_array(rgb), config.contrast)
        if config.invert:
            brightness = 255 - brightness
        indices = ramp_index_array(brightness, len(ramp))

        rows = []
        for y in range(rgb.shape[0]):
            if config.color_mode:
                row = tuple(
                    Cell(ramp[idx], (int(r), int(g), int(b)))
                    for idx, (r, g, b) in zip(indices[y], rgb[y])
                )
            else:
                row = tuple(Cell(ramp[idx]) for idx in indices[y])
            rows.append(row)

        return tuple(rows)

    def convert(self, bitmap: Bitmap) -> GlyphGrid:
        """
        Convert a bitmap into a glyph grid.

        Args:
            bitmap: Decoded RGBA8 pixels

        Returns:
            GlyphGrid of ``target_width`` columns

        Raises:
            ConfigurationError: If the configuration is invalid
            InvalidInputError: If the bitmap is malformed or has zero area
        """
        self.config.validate()
        bitmap.validate()

        width = self.config.target_width
        height = target_height(bitmap.width, bitmap.height, width)
        logger.debug("Mapping %dx%d bitmap to %dx%d glyphs",
                     bitmap.width, bitmap.height, width, height)

        samples = resample(bitmap, width, height, self.resize)
        rows = self._map_pixels(samples)

        return GlyphGrid(
            width=width,
            height=height,
            rows=rows,
            colorized=self.config.color_mode,
            source_size=bitmap.size,
        )


def convert(bitmap: Bitmap, config: Optional[GlyphConfig] = None,
            resize: Optional[ResizeFunc] = None) -> GlyphGrid:
    """Convert a bitmap with the given configuration."""
    return GlyphMapper(config, resize).convert(bitmap)


def cell_glyph(rgb: Sequence[int], config: GlyphConfig) -> Cell:
    """Map a single sample, scalar form of the grid builder."""
    r, g, b = rgb[:3]
    brightness = apply_contrast(luminance(r, g, b), config.contrast)
    idx = ramp_index(glyph_brightness(brightness, config.invert), len(config.ramp))
    color = (int(r), int(g), int(b)) if config.color_mode else None
    return Cell(config.ramp[idx], color)
