import pytest

from cadetpinball.gdrv import Bitmap8, Palette
from cadetpinball.render import Renderer
from cadetpinball.score import ScoreDisplay, string_format

BG = 0x0A0B0C0D


def make_bitmap(width, height, pixels):
    bmp = Bitmap8(width, height, False)
    bmp.pixels = list(pixels)
    return bmp


def make_renderer(background=None, width=10, height=4):
    palette = Palette()
    palette.colors[0] = BG
    return Renderer(palette, background, 0.0, 1.0, width, height)


def digits():
    return [make_bitmap(1, 2, [100 + d, 200 + d]) for d in range(10)]


def pixel(renderer, x, y):
    return renderer.vscreen.pixels[y * renderer.vscreen.stride + x]


def test_string_format_no_score():
    assert string_format(-999) == ""


@pytest.mark.parametrize("score", [0, 7, 999])
def test_string_format_small(score):
    assert string_format(score) == str(score)


def test_string_format_pinned():
    assert string_format(1000) == "1,000"
    assert string_format(1234567) == "1,234,567"
    assert string_format(2147483647) == "2,147,483,647"


@pytest.mark.parametrize("score", [0, 5, 1000, 1001, 999999, 1000000, 50000000, 1000000000, 1999999999])
def test_string_format_digits_preserved(score):
    text = string_format(score)
    assert text.replace(",", "") == str(score)
    groups = text.split(",")
    assert all(len(g) == 3 for g in groups[1:])


@pytest.mark.parametrize("score", [-1, -5000, -1234567])
def test_string_format_negative(score):
    assert string_format(score) == str(score)


def test_display_requires_ten_digits():
    with pytest.raises(ValueError):
        ScoreDisplay(0, 0, 4, 2, digits()[:9], None)


def test_set_marks_dirty():
    display = ScoreDisplay(0, 0, 4, 2, digits(), None)
    assert display.dirty is False
    display.set(42)
    assert display.score == 42
    assert display.dirty is True


def test_update_draws_right_aligned_digits():
    renderer = make_renderer()
    chars = digits()
    display = ScoreDisplay(1, 1, 6, 2, chars, None)
    display.set(305)
    display.update(renderer)
    assert display.dirty is False
    assert pixel(renderer, 6, 1) == chars[5].pixels[0]
    assert pixel(renderer, 5, 1) == chars[0].pixels[0]
    assert pixel(renderer, 4, 1) == chars[3].pixels[0]
    assert pixel(renderer, 4, 2) == chars[3].pixels[1]
    assert pixel(renderer, 3, 1) == BG


def test_update_skips_huge_score():
    renderer = make_renderer()
    display = ScoreDisplay(0, 0, 10, 2, digits(), None)
    display.set(1000000001)
    display.update(renderer)
    assert display.dirty is True
    assert renderer.vscreen.pixels == [BG] * 40


def test_negative_score_only_erases():
    renderer = make_renderer()
    renderer.vscreen.pixels = [5] * 40
    display = ScoreDisplay(0, 0, 2, 2, digits(), None)
    display.set(-1)
    display.update(renderer)
    assert renderer.vscreen.pixels[0:2] == [BG, BG]
    assert renderer.vscreen.pixels[2] == 5


def test_erase_restores_background():
    background = make_bitmap(10, 4, [77] * 40)
    renderer = make_renderer(background=background)
    renderer.vscreen.pixels = [1] * 40
    display = ScoreDisplay(2, 1, 3, 2, digits(), background)
    display.erase(renderer)
    assert pixel(renderer, 2, 1) == 77
    assert pixel(renderer, 4, 2) == 77
    assert pixel(renderer, 5, 1) == 1
    assert pixel(renderer, 2, 0) == 1


def test_transparent_digit_pixels_keep_background():
    background = make_bitmap(10, 4, [77] * 40)
    renderer = make_renderer(background=background)
    chars = [make_bitmap(1, 2, [0, 300 + d]) for d in range(10)]
    display = ScoreDisplay(0, 0, 4, 2, chars, background)
    display.set(8)
    display.update(renderer)
    assert pixel(renderer, 3, 0) == 77
    assert pixel(renderer, 3, 1) == chars[8].pixels[1]


def test_dup_is_independent():
    chars = digits()
    display = ScoreDisplay(1, 2, 3, 4, chars, None)
    display.set(12)
    copy = display.dup()
    assert (copy.score, copy.dirty, copy.offset_x, copy.offset_y) == (12, True, 1, 2)
    assert copy.char_bitmaps[0] is chars[0]
    copy.set(99)
    assert display.score == 12