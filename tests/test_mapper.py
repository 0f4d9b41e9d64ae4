import math
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from glyph_art.bitmap import Bitmap
from glyph_art.constants import CharacterSet
from glyph_art.errors import ConfigurationError, InvalidInputError
from glyph_art.mapper import (
    Cell,
    GlyphConfig,
    GlyphMapper,
    apply_contrast,
    cell_glyph,
    contrast_array,
    convert,
    glyph_brightness,
    luminance,
    luminance_array,
    ramp_index,
)

from conftest import nearest_resize


def test_luminance_weights():
    assert luminance(0, 0, 0) == 0
    assert luminance(255, 255, 255) == 255
    assert luminance(255, 0, 0) == pytest.approx(76.245)
    assert luminance(0, 255, 0) == pytest.approx(149.685)
    assert luminance(0, 0, 255) == pytest.approx(29.07)


def test_luminance_array_matches_scalar():
    rng = np.random.default_rng(7)
    rgb = rng.integers(0, 256, size=(50, 3))
    values = luminance_array(rgb)
    for (r, g, b), value in zip(rgb.tolist(), values):
        assert value == luminance(r, g, b)


def test_contrast_identity():
    for value in range(256):
        assert apply_contrast(value, 1.0) == value


@pytest.mark.parametrize("contrast", [0.1, 0.5, 1.0, 1.5, 3.0, 10.0])
def test_contrast_monotonic(contrast):
    previous = -1.0
    for tenth in range(0, 2551):
        value = apply_contrast(tenth / 10, contrast)
        assert 0 <= value <= 255
        assert value >= previous
        previous = value


def test_contrast_curve():
    assert apply_contrast(127.5, 2.0) == pytest.approx(127.5)
    assert apply_contrast(200, 2.0) == 255
    assert apply_contrast(50, 2.0) == 0
    assert apply_contrast(0, 0.5) == pytest.approx(63.75)
    assert apply_contrast(255, 0.5) == pytest.approx(191.25)


def test_contrast_array_matches_scalar():
    values = np.linspace(0, 255, 101)
    for contrast in (0.3, 1.0, 1.7):
        out = contrast_array(values, contrast)
        for value, adjusted in zip(values, out):
            assert adjusted == apply_contrast(float(value), contrast)


def test_ramp_index_bounds():
    assert ramp_index(0, 10) == 0
    assert ramp_index(255, 10) == 9
    assert ramp_index(127.5, 3) == 1
    assert ramp_index(254.9, 2) == 0


def test_ramp_length_one_always_zero():
    for value in (0, 0.5, 127, 255):
        assert ramp_index(value, 1) == 0


def test_ramp_index_empty_ramp():
    with pytest.raises(ConfigurationError):
        ramp_index(10, 0)


def test_invert_flips_lookup_only():
    for value in range(0, 256, 5):
        adjusted = apply_contrast(value, 1.3)
        inverted = ramp_index(glyph_brightness(adjusted, True), 10)
        assert inverted == ramp_index(255 - adjusted, 10)


def test_cell_glyph_keeps_color_when_inverted():
    for invert in (False, True):
        config = GlyphConfig(ramp="@ ", invert=invert, color_mode=True)
        assert cell_glyph((255, 0, 0), config).color == (255, 0, 0)


def test_black_bitmap(solid):
    config = GlyphConfig(target_width=2, ramp="@ ")
    grid = convert(solid(2, 2, (0, 0, 0, 255)), config)

    assert grid.height == 1
    assert grid.width == 2
    assert grid.to_text() == "@@\n"
    assert grid.colors is None
    assert all(cell.color is None for row in grid for cell in row)


def test_white_bitmap(solid):
    config = GlyphConfig(target_width=2, ramp="@ ")
    grid = convert(solid(2, 2, (255, 255, 255, 255)), config)
    assert grid.text == "  \n"


def test_white_bitmap_inverted(solid):
    config = GlyphConfig(target_width=2, ramp="@ ", invert=True)
    grid = convert(solid(2, 2, (255, 255, 255, 255)), config)
    assert grid.text == "@@\n"


@pytest.mark.parametrize("invert", [False, True])
def test_red_pixel_color(solid, invert):
    config = GlyphConfig(target_width=2, ramp=CharacterSet.STANDARD,
                         invert=invert, color_mode=True)
    grid = convert(solid(2, 2, (255, 0, 0, 255)), config)
    assert grid.colors == [[(255, 0, 0), (255, 0, 0)]]


def test_alpha_is_ignored(solid):
    config = GlyphConfig(target_width=2, ramp="@ ", color_mode=True)
    grid = convert(solid(2, 2, (255, 255, 255, 0)), config)
    assert grid.lines == ["  "]
    assert grid.rows[0][0] == Cell(" ", (255, 255, 255))


@pytest.mark.parametrize("size, target", [
    ((100, 100), 40),
    ((640, 480), 80),
    ((30, 200), 17),
    ((7, 3), 1),
    ((1, 1), 5),
])
def test_grid_dimensions(solid, size, target):
    w0, h0 = size
    grid = convert(solid(w0, h0, (10, 20, 30, 255)), GlyphConfig(target_width=target))

    expected_rows = math.floor(target * (h0 / w0) * 0.5)
    assert grid.height == expected_rows
    assert len(grid.rows) == expected_rows
    assert all(len(row) == target for row in grid.rows)
    assert grid.source_size == size


def test_zero_height_grid(solid):
    calls = []

    def resize(bitmap, w, h):
        calls.append((w, h))
        return nearest_resize(bitmap, w, h)

    grid = convert(solid(10, 1, (0, 0, 0, 255)), GlyphConfig(target_width=1), resize)
    assert grid.height == 0
    assert grid.rows == ()
    assert grid.to_text() == ""
    assert calls == []


def test_zero_area_bitmap_never_resized():
    calls = []

    def resize(bitmap, w, h):
        calls.append((w, h))
        return bitmap

    with pytest.raises(InvalidInputError):
        convert(Bitmap(0, 0, b""), GlyphConfig(target_width=4), resize)
    assert calls == []


@pytest.mark.parametrize("bitmap", [
    Bitmap(0, 5, b""),
    Bitmap(5, 0, b""),
    Bitmap(-2, 2, b""),
    Bitmap(2, 2, None),
    Bitmap(2, 2, b"\x00" * 15),
    Bitmap(2.0, 2, b"\x00" * 16),
])
def test_invalid_bitmaps(bitmap):
    with pytest.raises(InvalidInputError):
        convert(bitmap, GlyphConfig())


@pytest.mark.parametrize("config", [
    GlyphConfig(ramp=""),
    GlyphConfig(ramp=()),
    GlyphConfig(ramp=["@", ""]),
    GlyphConfig(target_width=0),
    GlyphConfig(target_width=2.5),
    GlyphConfig(target_width=True),
    GlyphConfig(contrast=float('nan')),
    GlyphConfig(contrast=float('inf')),
    GlyphConfig(contrast=0),
    GlyphConfig(contrast=-1.0),
])
def test_invalid_config(solid, config):
    with pytest.raises(ConfigurationError):
        convert(solid(4, 4, (0, 0, 0, 255)), config)


def test_config_checked_before_bitmap():
    with pytest.raises(ConfigurationError):
        convert(Bitmap(0, 0, b""), GlyphConfig(ramp=""))


def test_errors_are_value_errors():
    assert issubclass(InvalidInputError, ValueError)
    assert issubclass(ConfigurationError, ValueError)


def test_sequence_ramp_is_frozen(solid):
    glyphs = ["#", ".", " "]
    config = GlyphConfig(target_width=2, ramp=glyphs)
    glyphs.append("!")

    assert config.ramp == ("#", ".", " ")
    grid = convert(solid(2, 2, (0, 0, 0, 255)), config)
    assert grid.lines == ["##"]


@pytest.mark.parametrize("ramp", [["##", "  "], ("@", "%%"), ["@", 5]])
def test_ramp_entries_must_be_single_characters(solid, ramp):
    with pytest.raises(ConfigurationError):
        convert(solid(2, 2, (0, 0, 0, 255)), GlyphConfig(target_width=2, ramp=ramp))


@pytest.mark.parametrize("ramp", [5, 2.5, object()])
def test_non_sequence_ramp_rejected(ramp):
    with pytest.raises(ConfigurationError):
        GlyphConfig(ramp=ramp)


def test_config_and_grid_are_immutable(solid):
    config = GlyphConfig()
    with pytest.raises(FrozenInstanceError):
        config.invert = True

    grid = convert(solid(4, 4, (0, 0, 0, 255)), GlyphConfig(target_width=4))
    with pytest.raises(FrozenInstanceError):
        grid.width = 3


def test_grid_matches_scalar_mapping(noise_bitmap):
    config = GlyphConfig(target_width=30, ramp=CharacterSet.EXTENDED,
                         contrast=1.4, invert=True, color_mode=True)
    grid = GlyphMapper(config, nearest_resize).convert(noise_bitmap)

    samples = nearest_resize(noise_bitmap, grid.width, grid.height).to_array()
    for y, row in enumerate(grid.rows):
        for x, cell in enumerate(row):
            assert cell == cell_glyph(samples[y, x].tolist(), config)


def test_mapper_does_not_assume_ramp_direction(solid):
    black = solid(4, 4, (0, 0, 0, 255))
    forward = convert(black, GlyphConfig(target_width=4, ramp="abc"))
    backward = convert(black, GlyphConfig(target_width=4, ramp="cba"))
    assert forward.lines == ["aaaa", "aaaa"]
    assert backward.lines == ["cccc", "cccc"]


def test_contrast_pushes_mid_gray_apart(solid):
    ramp = "0123456789"
    dark = solid(2, 2, (100, 100, 100, 255))
    flat = convert(dark, GlyphConfig(target_width=2, ramp=ramp)).lines[0]
    steep = convert(dark, GlyphConfig(target_width=2, ramp=ramp, contrast=5.0)).lines[0]
    assert flat == "33"
    assert steep == "00"
