#!/usr/bin/env python3
"""Run the glyph art converter from a source checkout."""

import sys

from glyph_art.cli import main

if __name__ == '__main__':
    sys.exit(main())
