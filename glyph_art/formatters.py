#!/usr/bin/env python3
"""
Glyph Art Converter - Output Formatters
=======================================
Presentation of glyph grids: ANSI terminal colors, HTML pages, and PNG
rasterisation with monospace metrics.
"""

import math
from typing import Literal, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from glyph_art.constants import (
    CHAR_WIDTH_RATIO,
    DEFAULT_FONT_SIZE,
    LINE_HEIGHT_RATIO,
    MAX_DISPLAY_FONT_SIZE,
    MIN_DISPLAY_FONT_SIZE,
)
from glyph_art.mapper import GlyphGrid, RGB


def rgb_to_hex(color: RGB) -> str:
    r, g, b = color
    return f"#{r:02X}{g:02X}{b:02X}"


# =============================================================================
# ANSI COLOR OUTPUT
# =============================================================================

class AnsiColorFormatter:
    """Format glyph grids with ANSI color codes for terminal output."""

    RESET = "\033[0m"

    @staticmethod
    def rgb_to_ansi_24bit(r: int, g: int, b: int, foreground: bool = True) -> str:
        """Convert RGB to 24-bit ANSI color code (true color)."""
        code = 38 if foreground else 48
        return f"\033[{code};2;{r};{g};{b}m"

    @staticmethod
    def rgb_to_ansi_256(r: int, g: int, b: int, foreground: bool = True) -> str:
        """Convert RGB to 256-color ANSI code."""
        if r == g == b:
            # Grayscale ramp
            if r < 8:
                color = 16
            elif r > 248:
                color = 231
            else:
                color = round((r - 8) / 247 * 24) + 232
        else:
            # 6x6x6 color cube
            color = 16 + (36 * round(r / 255 * 5)) + (6 * round(g / 255 * 5)) + round(b / 255 * 5)

        code = 38 if foreground else 48
        return f"\033[{code};5;{color}m"

    @staticmethod
    def rgb_to_ansi_16(r: int, g: int, b: int, foreground: bool = True) -> str:
        """Convert RGB to 16-color ANSI code."""
        bright = (r + g + b) / 3 > 127

        color = (1 if r > 127 else 0) + ((1 if g > 127 else 0) << 1) + ((1 if b > 127 else 0) << 2)

        if foreground:
            code = 90 + color if bright else 30 + color
        else:
            code = 100 + color if bright else 40 + color

        return f"\033[{code}m"

    @classmethod
    def format_grid(cls, grid: GlyphGrid,
                    color_mode: Literal['24bit', '256', '16'] = '24bit',
                    background: bool = False) -> str:
        """
        Format a glyph grid with ANSI colors.

        Args:
            grid: Result of a conversion
            color_mode: Color mode ('24bit', '256', or '16')
            background: Color the cell background instead of the glyph

        Returns:
            String with ANSI color codes, one terminated line per row.
            Grids without color data are returned as plain text.
        """
        if not grid.colorized:
            return grid.to_text()

        converters = {
            '24bit': cls.rgb_to_ansi_24bit,
            '256': cls.rgb_to_ansi_256,
            '16': cls.rgb_to_ansi_16,
        }
        if color_mode not in converters:
            raise ValueError(f"Unknown color mode: {color_mode}")
        to_code = converters[color_mode]

        output_lines = []
        for row in grid.rows:
            output = ""
            prev_color = None
            for cell in row:
                # Only emit a code when the color changes
                if cell.color != prev_color:
                    output += to_code(*cell.color, not background)
                    prev_color = cell.color
                output += cell.char
            output += cls.RESET
            output_lines.append(output + '\n')

        return ''.join(output_lines)


# =============================================================================
# HTML OUTPUT
# =============================================================================

def _escape(char: str) -> str:
    return char.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


class HtmlFormatter:
    """Format glyph grids as a standalone HTML page."""

    @staticmethod
    def format_grid(grid: GlyphGrid,
                    font_size: str = "10px",
                    font_family: str = "monospace",
                    background_color: str = "#000000",
                    foreground_color: str = "#FFFFFF",
                    line_height: float = LINE_HEIGHT_RATIO) -> str:
        """
        Format a glyph grid as HTML.

        Colorized grids become runs of ``<span>`` elements, one per change
        of color; other grids are escaped plain text.
        """
        html = f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>
        .glyph-art {{
            font-family: {font_family};
            font-size: {font_size};
            line-height: {line_height};
            background-color: {background_color};
            color: {foreground_color};
            white-space: pre;
            display: inline-block;
            padding: 10px;
        }}
    </style>
</head>
<body>
<div class="glyph-art">
"""

        if not grid.colorized:
            for line in grid.lines:
                html += _escape(line) + '\n'
        else:
            for row in grid.rows:
                prev_color = None
                span_open = False

                for cell in row:
                    if cell.color != prev_color:
                        if span_open:
                            html += "</span>"
                        html += f'<span style="color:{rgb_to_hex(cell.color)}">'
                        span_open = True
                        prev_color = cell.color

                    html += _escape(cell.char)

                if span_open:
                    html += "</span>"
                html += '\n'

        html += """</div>
</body>
</html>"""

        return html


# =============================================================================
# RASTER EXPORT
# =============================================================================

class RasterExporter:
    """Draw glyph grids onto an image using monospace cell metrics."""

    def __init__(self, font_size: int = DEFAULT_FONT_SIZE,
                 font_path: Optional[str] = None,
                 background: RGB = (0, 0, 0),
                 foreground: RGB = (255, 255, 255)):
        if font_size <= 0:
            raise ValueError(f"Font size must be positive, got {font_size}")
        self.font_size = font_size
        self.font_path = font_path
        self.background = background
        self.foreground = foreground

    @property
    def cell_size(self) -> Tuple[float, float]:
        """Width and height of one glyph cell in pixels."""
        return self.font_size * CHAR_WIDTH_RATIO, self.font_size * LINE_HEIGHT_RATIO

    def canvas_size(self, grid: GlyphGrid) -> Tuple[int, int]:
        cell_w, cell_h = self.cell_size
        width = math.ceil(grid.width * cell_w)
        height = math.ceil(grid.height * cell_h)
        return max(1, width), max(1, height)

    def _load_font(self):
        if self.font_path:
            return ImageFont.truetype(self.font_path, self.font_size)
        return ImageFont.load_default(size=self.font_size)

    def render(self, grid: GlyphGrid) -> Image.Image:
        """Rasterise a grid, coloring each glyph with its cell color."""
        image = Image.new('RGB', self.canvas_size(grid), self.background)
        draw = ImageDraw.Draw(image)
        font = self._load_font()
        cell_w, cell_h = self.cell_size

        for y, row in enumerate(grid.rows):
            for x, cell in enumerate(row):
                if cell.char.isspace():
                    continue
                fill = cell.color if cell.color is not None else self.foreground
                draw.text((x * cell_w, y * cell_h), cell.char, fill=fill, font=font)

        return image

    def save(self, grid: GlyphGrid, output_path: str) -> None:
        self.render(grid).save(output_path, format='PNG')


def export_png(grid: GlyphGrid, output_path: str,
               font_size: int = DEFAULT_FONT_SIZE, **kwargs) -> None:
    """Save a grid as a PNG file."""
    RasterExporter(font_size=font_size, **kwargs).save(grid, output_path)


def fit_font_size(grid: GlyphGrid, container_width: float, container_height: float,
                  padding: float = 32) -> float:
    """
    Largest font size (px) at which the grid fits a display area.

    The result is clamped to the readable range [4, 20].
    """
    max_line = max((len(line) for line in grid.lines), default=0)
    line_count = len(grid.rows)
    if max_line == 0 or line_count == 0:
        return MAX_DISPLAY_FONT_SIZE

    by_width = (container_width - padding) / (max_line * CHAR_WIDTH_RATIO)
    by_height = (container_height - padding) / (line_count * LINE_HEIGHT_RATIO)

    return max(MIN_DISPLAY_FONT_SIZE, min(MAX_DISPLAY_FONT_SIZE, min(by_width, by_height)))
