"""Error types raised by the glyph mapper."""


class GlyphArtError(Exception):
    """Base class for all conversion errors."""


class InvalidInputError(GlyphArtError, ValueError):
    """The bitmap is malformed or degenerate."""


class ConfigurationError(GlyphArtError, ValueError):
    """The conversion settings are unusable."""
