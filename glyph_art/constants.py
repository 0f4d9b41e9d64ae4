#!/usr/bin/env python3
"""
Glyph Art Converter - Constants
===============================
Character ramps and the layout constants shared by the mapper and renderers.
"""

from dataclasses import dataclass
from typing import Dict

from glyph_art.errors import ConfigurationError


# =============================================================================
# CHARACTER RAMPS
# =============================================================================

@dataclass(frozen=True)
class CharacterSet:
    """Predefined ramps for brightness mapping."""

    # Densest glyph first
    STANDARD: str = "@%#*+=-:. "
    EXTENDED: str = "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "
    BLOCKS: str = "█▓▒░ "
    SIMPLE: str = "# ."

    @classmethod
    def presets(cls) -> Dict[str, str]:
        """Map of preset name to ramp."""
        return {
            'standard': cls.STANDARD,
            'extended': cls.EXTENDED,
            'blocks': cls.BLOCKS,
            'simple': cls.SIMPLE,
        }

    @classmethod
    def get_preset(cls, name: str) -> str:
        """Get ramp by name."""
        try:
            return cls.presets()[name.lower()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown ramp preset {name!r}; expected one of {sorted(cls.presets())}"
            ) from None


def get_ramp(name: str) -> str:
    """Shortcut for ``CharacterSet.get_preset``."""
    return CharacterSet.get_preset(name)


# =============================================================================
# GEOMETRY
# =============================================================================

# Glyph cells are roughly twice as tall as they are wide
CHAR_ASPECT_RATIO = 0.5

# Monospace metrics relative to font size
CHAR_WIDTH_RATIO = 0.6
LINE_HEIGHT_RATIO = 1.2

# On-screen font size clamp (px)
MIN_DISPLAY_FONT_SIZE = 4.0
MAX_DISPLAY_FONT_SIZE = 20.0

# Defaults of the original converter UI
DEFAULT_WIDTH = 100
DEFAULT_CONTRAST = 1.0
DEFAULT_FONT_SIZE = 12
