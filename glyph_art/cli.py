#!/usr/bin/env python3
"""
Glyph Art Converter - Command Line
==================================
Decodes an image with Pillow, converts it, and prints or saves the result.
"""

import argparse
import logging
import sys
from typing import List, Optional

from PIL import Image, ImageDraw

from glyph_art.bitmap import RESAMPLE_FILTERS, Bitmap, make_resizer
from glyph_art.constants import CharacterSet, DEFAULT_CONTRAST, DEFAULT_FONT_SIZE, DEFAULT_WIDTH
from glyph_art.errors import GlyphArtError
from glyph_art.formatters import AnsiColorFormatter, HtmlFormatter, export_png
from glyph_art.mapper import GlyphConfig, GlyphGrid, GlyphMapper
from glyph_art.session import GlyphSession

logger = logging.getLogger("glyph_art")


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr, DEBUG when verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.handlers[:] = [handler]
    logger.propagate = False


def load_bitmap(path: str) -> Bitmap:
    """Decode an image file into a bitmap."""
    with Image.open(path) as image:
        logger.info("Loaded %s: %dx%d %s", path, image.width, image.height, image.mode)
        return Bitmap.from_image(image)


def demo_bitmap() -> Bitmap:
    """A small test picture: red disc and blue square on white."""
    image = Image.new('RGB', (100, 100), color='white')
    draw = ImageDraw.Draw(image)
    draw.ellipse([10, 10, 90, 90], fill='red', outline='black')
    draw.rectangle([30, 30, 70, 70], fill='blue')
    return Bitmap.from_image(image)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='glyph-art',
        description='Convert images to glyph art',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s image.png                      # Basic conversion
  %(prog)s image.png -w 80                # Set width to 80 chars
  %(prog)s image.png --charset blocks     # Block shading ramp
  %(prog)s image.png -c -o output.html    # Colored HTML output
  %(prog)s image.png -c -o output.png     # Colored PNG export
        """
    )

    parser.add_argument('input', nargs='?', help='Input image file')
    parser.add_argument('-o', '--output', help='Output file (txt, html, ansi or png)')

    parser.add_argument('-w', '--width', type=int, default=DEFAULT_WIDTH,
                        help='Output width in characters')
    parser.add_argument('--charset', default='standard', choices=sorted(CharacterSet.presets()),
                        help='Character ramp preset')
    parser.add_argument('--custom-charset', help='Custom ramp (glyph for brightness 0 first)')
    parser.add_argument('--contrast', type=float, default=DEFAULT_CONTRAST,
                        help='Contrast gain around mid-gray')
    parser.add_argument('-i', '--invert', action='store_true', help='Invert glyph lookup')

    parser.add_argument('-c', '--colorize', action='store_true', help='Keep source colors')
    parser.add_argument('--color-mode', choices=['24bit', '256', '16'],
                        default='24bit', help='Terminal color mode')
    parser.add_argument('--font-size', type=int, default=DEFAULT_FONT_SIZE,
                        help='Font size for PNG export')
    parser.add_argument('--resample', choices=sorted(RESAMPLE_FILTERS), default='bilinear',
                        help='Resampling filter')

    parser.add_argument('--interactive', action='store_true', help='Adjust settings interactively')
    parser.add_argument('--demo', action='store_true', help='Convert a built-in test image')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    return parser


def write_output(grid: GlyphGrid, output: str, color_mode: str, font_size: int) -> None:
    """Save a grid in the format given by the file extension."""
    ext = output.lower().rsplit('.', 1)[-1]

    if ext == 'png':
        export_png(grid, output, font_size=font_size)
        return

    if ext == 'html':
        content = HtmlFormatter.format_grid(grid)
    elif ext == 'ansi':
        content = AnsiColorFormatter.format_grid(grid, color_mode=color_mode)
    else:
        content = grid.to_text()

    with open(output, 'w', encoding='utf-8') as f:
        f.write(content)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command line usage."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.input and not args.demo:
        parser.print_help()
        return 0

    config = GlyphConfig(
        target_width=args.width,
        ramp=args.custom_charset if args.custom_charset is not None else CharacterSet.get_preset(args.charset),
        contrast=args.contrast,
        invert=args.invert,
        color_mode=args.colorize,
    )
    resize = make_resizer(args.resample)

    try:
        bitmap = demo_bitmap() if args.demo else load_bitmap(args.input)

        if args.interactive:
            GlyphSession(bitmap, config, resize).run()
            return 0

        grid = GlyphMapper(config, resize).convert(bitmap)
        logger.info("Output size: %dx%d", grid.width, grid.height)

        if args.output:
            write_output(grid, args.output, args.color_mode, args.font_size)
            print(f"Saved to {args.output}")
        elif grid.colorized:
            print(AnsiColorFormatter.format_grid(grid, color_mode=args.color_mode), end='')
        else:
            print(grid.to_text(), end='')

    except (GlyphArtError, OSError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
