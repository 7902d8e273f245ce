import pytest

from cadetpinball.gdrv import (
    Bitmap8,
    BitmapType,
    Bmp8Flags,
    Bmp8Header,
    Palette,
    copy_bitmap,
    copy_bitmap_w_transparency,
)


def _indexed_bitmap(width, height, values):
    bmp = Bitmap8(width, height, True)
    bmp.indexed[:] = bytes(values)
    return bmp


def test_header_round_trip_has_fixed_size():
    header = Bmp8Header(resolution=1, width=5, height=2, x_position=-3, y_position=7,
                        size=16, flags=Bmp8Flags.DIB_BITMAP)
    data = header.to_bytes()
    assert len(data) == 14
    assert Bmp8Header.from_bytes(data) == header


def test_header_truncated_raises():
    with pytest.raises(ValueError):
        Bmp8Header.from_bytes(b"\x00" * 5)


def test_is_flag_set():
    header = Bmp8Header(flags=Bmp8Flags.DIB_BITMAP | Bmp8Flags.RAW_BMP_UNALIGNED)
    assert header.is_flag_set(Bmp8Flags.DIB_BITMAP)
    assert header.is_flag_set(Bmp8Flags.RAW_BMP_UNALIGNED)
    assert not header.is_flag_set(Bmp8Flags.SPLICED)


def test_plain_bitmap_buffers():
    bmp = Bitmap8(3, 2, True)
    assert len(bmp.indexed) == 6
    assert len(bmp.pixels) == 6
    assert bmp.bitmap_type == BitmapType.DIB
    assert Bitmap8(3, 2, False).indexed is None


def test_negative_dimensions_raise():
    with pytest.raises(ValueError):
        Bitmap8(-1, 2, True)
    with pytest.raises(ValueError):
        Bitmap8.from_header(Bmp8Header(width=2, height=-1))


def test_dib_rows_are_padded_to_four():
    header = Bmp8Header(width=5, height=2, size=16, flags=Bmp8Flags.DIB_BITMAP)
    bmp = Bitmap8.from_header(header)
    assert bmp.indexed_stride == 8
    assert len(bmp.indexed) == header.size
    assert len(bmp.pixels) == bmp.width * bmp.height
    assert bmp.bitmap_type == BitmapType.DIB


def test_wrong_size_raises():
    with pytest.raises(ValueError):
        Bitmap8.from_header(Bmp8Header(width=4, height=2, size=9, flags=Bmp8Flags.DIB_BITMAP))


def test_raw_bitmap_alignment_flag():
    with pytest.raises(ValueError):
        Bitmap8.from_header(Bmp8Header(width=5, height=1, size=8))
    bmp = Bitmap8.from_header(Bmp8Header(width=5, height=1, size=8,
                                         flags=Bmp8Flags.RAW_BMP_UNALIGNED))
    assert bmp.bitmap_type == BitmapType.RAW


def test_spliced_bitmap_uses_header_size():
    bmp = Bitmap8.from_header(Bmp8Header(width=3, height=3, size=21, flags=Bmp8Flags.SPLICED))
    assert bmp.bitmap_type == BitmapType.SPLICED
    assert len(bmp.indexed) == 21


def test_scale_indexed_nearest_neighbour():
    original = [1, 2, 3, 4, 5, 6]
    bmp = _indexed_bitmap(3, 2, original)
    bmp.scale_indexed(2.0, 2.0)
    assert (bmp.width, bmp.height) == (6, 4)
    assert bmp.stride == bmp.indexed_stride == bmp.width
    assert len(bmp.pixels) == bmp.width * bmp.height
    for y in range(bmp.height):
        for x in range(bmp.width):
            assert bmp.indexed[y * bmp.width + x] == original[(y // 2) * 3 + x // 2]


def test_scale_by_one_keeps_bitmap():
    bmp = _indexed_bitmap(3, 2, [1, 2, 3, 4, 5, 6])
    bmp.scale_indexed(1.0, 1.0)
    assert bytes(bmp.indexed) == bytes([1, 2, 3, 4, 5, 6])


def test_scale_without_indices_raises():
    with pytest.raises(ValueError):
        Bitmap8(2, 2, False).scale_indexed(2.0, 2.0)


def test_display_palette_layout():
    palette = Palette()
    palette.display_palette([0x11223344] * 256, [])
    colors = palette.colors
    assert colors[10] == 0x112233FF
    assert colors[245] == colors[10]
    assert colors[255] == 0xFFFFFFFF
    assert all(c & 0xFF == 0 for c in colors[:10])
    assert all(c & 0xFF == 0 for c in colors[246:255])
    assert colors[0] == 0


def test_display_palette_without_table_keeps_rgb():
    palette = Palette()
    palette.display_palette([0x55667700] * 256)
    first = palette.colors[20]
    palette.display_palette(None)
    assert palette.colors[20] == first


def test_display_palette_applies_to_bitmaps():
    palette = Palette()
    bmp = _indexed_bitmap(2, 1, [10, 255])
    palette.display_palette([0xAABBCC00] * 256, [bmp, None])
    assert bmp.pixels == [palette.colors[10], palette.colors[255]]


def test_apply_flips_rows_and_skips_padding():
    palette = Palette()
    palette.display_palette(list(range(0, 256 * 256, 256)))
    header = Bmp8Header(width=2, height=2, size=8, flags=Bmp8Flags.DIB_BITMAP)
    bmp = Bitmap8.from_header(header)
    bmp.indexed[:] = bytes([10, 11, 0, 0, 12, 13, 0, 0])
    palette.apply(bmp)
    c = palette.colors
    assert bmp.pixels == [c[12], c[13], c[10], c[11]]


def test_apply_rejects_spliced_and_unindexed():
    palette = Palette()
    spliced = Bitmap8.from_header(Bmp8Header(width=2, height=2, size=4, flags=Bmp8Flags.SPLICED))
    with pytest.raises(ValueError):
        palette.apply(spliced)
    with pytest.raises(ValueError):
        palette.apply(Bitmap8(2, 2, False))


def test_apply_ignores_none_type():
    palette = Palette()
    palette.display_palette([0x12345600] * 256)
    bmp = _indexed_bitmap(1, 1, [10])
    bmp.bitmap_type = BitmapType.NONE
    palette.apply(bmp)
    assert bmp.pixels == [0]


def test_fill_bitmap_region_only():
    palette = Palette()
    palette.display_palette([0x10203000] * 256)
    bmp = Bitmap8(4, 3, False)
    palette.fill_bitmap(bmp, 2, 2, 1, 1, 10)
    color = palette.colors[10]
    for y in range(3):
        for x in range(4):
            inside = 1 <= x < 3 and 1 <= y < 3
            assert bmp.pixels[y * 4 + x] == (color if inside else 0)


def test_fill_outside_raises():
    with pytest.raises(ValueError):
        Palette().fill_bitmap(Bitmap8(2, 2, False), 3, 1, 0, 0, 0)


def test_copy_bitmap_region():
    src = Bitmap8(3, 3, False)
    src.pixels = list(range(1, 10))
    dst = Bitmap8(4, 4, False)
    copy_bitmap(dst, 2, 2, 2, 1, src, 1, 1)
    assert dst.pixels[1 * 4 + 2: 1 * 4 + 4] == src.pixels[1 * 3 + 1: 1 * 3 + 3]
    assert dst.pixels[2 * 4 + 2: 2 * 4 + 4] == src.pixels[2 * 3 + 1: 2 * 3 + 3]
    assert sum(1 for p in dst.pixels if p) == 4


def test_copy_with_transparency_keeps_destination():
    src = Bitmap8(2, 1, False)
    src.pixels = [0, 7]
    dst = Bitmap8(2, 1, False)
    dst.pixels = [5, 5]
    copy_bitmap_w_transparency(dst, 2, 1, 0, 0, src, 0, 0)
    assert dst.pixels == [5, 7]