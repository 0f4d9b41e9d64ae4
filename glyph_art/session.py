#!/usr/bin/env python3
"""
Glyph Art Converter - Sessions
==============================
Keeps one bitmap and the current settings, and re-runs the conversion every
time a setting changes.
"""

import logging
from dataclasses import fields, replace
from typing import Callable, Optional

from glyph_art.bitmap import Bitmap, ResizeFunc
from glyph_art.constants import CharacterSet
from glyph_art.errors import ConfigurationError, GlyphArtError
from glyph_art.formatters import AnsiColorFormatter
from glyph_art.mapper import GlyphConfig, GlyphGrid, convert

logger = logging.getLogger(__name__)

HELP = """Commands:
  w <num>          - Set width
  c <charset>      - Set charset (standard/extended/blocks/simple)
  custom <glyphs>  - Use a custom ramp
  contrast <num>   - Set contrast
  i                - Toggle invert
  color            - Toggle color
  render           - Show current art
  save <file>      - Save current art as text
  q                - Quit"""


class GlyphSession:
    """Converted view of a bitmap that follows configuration changes."""

    def __init__(self, bitmap: Bitmap, config: Optional[GlyphConfig] = None,
                 resize: Optional[ResizeFunc] = None):
        self.bitmap = bitmap
        self.config = config or GlyphConfig()
        self.resize = resize
        self.grid: Optional[GlyphGrid] = None

    def regenerate(self) -> GlyphGrid:
        self.grid = convert(self.bitmap, self.config, self.resize)
        return self.grid

    def update(self, **changes) -> GlyphGrid:
        """
        Apply setting changes and convert again.

        The previous settings and grid are kept if the new ones fail.
        """
        known = {f.name for f in fields(GlyphConfig)}
        unknown = set(changes) - known
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        config = replace(self.config, **changes)
        grid = convert(self.bitmap, config, self.resize)

        self.config, self.grid = config, grid
        logger.debug("Settings changed: %s", changes)
        return grid

    def render(self, color_mode: str = '24bit') -> str:
        """Current art as text, with ANSI colors in color mode."""
        grid = self.grid if self.grid is not None else self.regenerate()
        if grid.colorized:
            return AnsiColorFormatter.format_grid(grid, color_mode=color_mode)
        return grid.to_text()

    def handle(self, command: str, args) -> Optional[str]:
        """Run one REPL command and return a message for the user."""
        if command == 'w' and args:
            self.update(target_width=int(args[0]))
            return f"Width set to {args[0]}"
        elif command == 'c' and args:
            self.update(ramp=CharacterSet.get_preset(args[0]))
            return f"Charset set to {args[0]}"
        elif command == 'custom' and args:
            self.update(ramp=''.join(args))
            return "Custom charset set"
        elif command == 'contrast' and args:
            self.update(contrast=float(args[0]))
            return f"Contrast set to {args[0]}"
        elif command == 'i':
            self.update(invert=not self.config.invert)
            return f"Invert: {self.config.invert}"
        elif command == 'color':
            self.update(color_mode=not self.config.color_mode)
            return f"Colorize: {self.config.color_mode}"
        elif command == 'render':
            return self.render()
        elif command == 'save' and args:
            grid = self.grid if self.grid is not None else self.regenerate()
            with open(args[0], 'w', encoding='utf-8') as f:
                f.write(grid.to_text())
            return f"Saved to {args[0]}"
        return "Unknown command. Type 'q' to quit."

    def run(self, read: Callable[[str], str] = input,
            write: Callable[[str], None] = print) -> None:
        """Run the interactive loop until 'q' or end of input."""
        write(HELP)

        while True:
            try:
                cmd = read("> ").strip().split()
            except EOFError:
                break
            except KeyboardInterrupt:
                write("\nUse 'q' to quit.")
                continue
            if not cmd:
                continue

            command = cmd[0].lower()
            if command in ('q', 'quit'):
                break

            try:
                write(self.handle(command, cmd[1:]))
            except (GlyphArtError, ValueError, OSError) as e:
                write(f"Error: {e}")
