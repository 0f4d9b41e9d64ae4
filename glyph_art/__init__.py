"""
Glyph Art Converter
===================
Converts decoded bitmaps into grids of glyphs with optional per-cell color.

Features:
- BT.601 luminance with contrast gain and glyph inversion
- Any ordered character ramp, with presets
- Plain text, ANSI terminal, HTML and PNG output
"""

from glyph_art.bitmap import Bitmap, make_resizer, pillow_resize, resample, target_height
from glyph_art.constants import CharacterSet, get_ramp
from glyph_art.errors import ConfigurationError, GlyphArtError, InvalidInputError
from glyph_art.formatters import (
    AnsiColorFormatter,
    HtmlFormatter,
    RasterExporter,
    export_png,
    fit_font_size,
)
from glyph_art.mapper import (
    Cell,
    GlyphConfig,
    GlyphGrid,
    GlyphMapper,
    apply_contrast,
    cell_glyph,
    convert,
    glyph_brightness,
    luminance,
    ramp_index,
)
from glyph_art.session import GlyphSession

__version__ = "0.1.0"

__all__ = [
    # Main classes
    'GlyphMapper',
    'GlyphConfig',
    'GlyphGrid',
    'Cell',
    'Bitmap',
    'GlyphSession',

    # Errors
    'GlyphArtError',
    'InvalidInputError',
    'ConfigurationError',

    # Character sets
    'CharacterSet',
    'get_ramp',

    # Mapping steps
    'convert',
    'luminance',
    'apply_contrast',
    'glyph_brightness',
    'ramp_index',
    'cell_glyph',
    'resample',
    'target_height',
    'pillow_resize',
    'make_resizer',

    # Formatters
    'AnsiColorFormatter',
    'HtmlFormatter',
    'RasterExporter',
    'export_png',
    'fit_font_size',
]
