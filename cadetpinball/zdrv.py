"""Depth maps and depth-tested drawing of bitmaps."""

from __future__ import annotations

from array import array

from .gdrv import TRANSPARENT, Bitmap8, BitmapType


def _pad(width: int) -> int:
    return width - (width & 3) + 4 if width & 3 else width


class ZMap:
    """A 16-bit depth map; smaller values are nearer the viewer."""

    def __init__(self, width: int, height: int, stride: int):
        if width < 0 or height < 0:
            raise ValueError("negative z-map dimensions")
        self.width = width
        self.height = height
        self.stride = stride if stride >= 0 else _pad(width)
        self.resolution = 0
        self.data = array("H", [0]) * (self.stride * height)


def _check_zregion(zmap: ZMap, x_off: int, y_off: int, width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        return
    if x_off < 0 or y_off < 0 or x_off + width > zmap.stride or y_off + height > zmap.height:
        raise ValueError("region lies outside the z-map")


def _check_bregion(bmp: Bitmap8, x_off: int, y_off: int, width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        return
    if x_off < 0 or y_off < 0 or x_off + width > bmp.stride or y_off + height > bmp.height:
        raise ValueError("region lies outside the bitmap")


def fill(zmap: ZMap, width: int, height: int, x_off: int, y_off: int, fill_word: int) -> None:
    """Set a region of the depth map to fill_word."""
    _check_zregion(zmap, x_off, y_off, width, height)
    if width <= 0:
        return
    row_fill = array("H", [fill_word]) * width
    for row in range(max(height, 0)):
        start = (y_off + row) * zmap.stride + x_off
        zmap.data[start:start + width] = row_fill


def paint(width: int, height: int, dst_bmp: Bitmap8, dst_bmp_x_off: int, dst_bmp_y_off: int,
          dst_zmap: ZMap, dst_zmap_x_off: int, dst_zmap_y_off: int, src_bmp: Bitmap8,
          src_bmp_x_off: int, src_bmp_y_off: int, src_zmap: ZMap, src_zmap_x_off: int,
          src_zmap_y_off: int) -> None:
    """Draw src_bmp where its depth is not behind the destination depth.

    Drawn pixels also carry their depth into dst_zmap.
    """
    if src_bmp.bitmap_type == BitmapType.SPLICED:
        raise ValueError("cannot paint a spliced bitmap")
    _check_bregion(dst_bmp, dst_bmp_x_off, dst_bmp_y_off, width, height)
    _check_bregion(src_bmp, src_bmp_x_off, src_bmp_y_off, width, height)
    _check_zregion(dst_zmap, dst_zmap_x_off, dst_zmap_y_off, width, height)
    _check_zregion(src_zmap, src_zmap_x_off, src_zmap_y_off, width, height)
    for row in range(max(height, 0)):
        src = (src_bmp_y_off + row) * src_bmp.stride + src_bmp_x_off
        dst = (dst_bmp_y_off + row) * dst_bmp.stride + dst_bmp_x_off
        src_z = (src_zmap_y_off + row) * src_zmap.stride + src_zmap_x_off
        dst_z = (dst_zmap_y_off + row) * dst_zmap.stride + dst_zmap_x_off
        for x in range(max(width, 0)):
            depth = src_zmap.data[src_z + x]
            if dst_zmap.data[dst_z + x] >= depth:
                dst_bmp.pixels[dst + x] = src_bmp.pixels[src + x]
                dst_zmap.data[dst_z + x] = depth


def paint_flat(width: int, height: int, dst_bmp: Bitmap8, dst_bmp_x_off: int, dst_bmp_y_off: int,
               zmap: ZMap, dst_zmap_x_off: int, dst_zmap_y_off: int, src_bmp: Bitmap8,
               src_bmp_x_off: int, src_bmp_y_off: int, depth: int) -> None:
    """Draw the opaque pixels of src_bmp that lie in front of zmap at one depth."""
    if src_bmp.bitmap_type == BitmapType.SPLICED:
        raise ValueError("cannot paint a spliced bitmap")
    depth &= 0xFFFF
    _check_bregion(dst_bmp, dst_bmp_x_off, dst_bmp_y_off, width, height)
    _check_bregion(src_bmp, src_bmp_x_off, src_bmp_y_off, width, height)
    _check_zregion(zmap, dst_zmap_x_off, dst_zmap_y_off, width, height)
    for row in range(max(height, 0)):
        src = (src_bmp_y_off + row) * src_bmp.stride + src_bmp_x_off
        dst = (dst_bmp_y_off + row) * dst_bmp.stride + dst_bmp_x_off
        z = (dst_zmap_y_off + row) * zmap.stride + dst_zmap_x_off
        for x in range(max(width, 0)):
            color = src_bmp.pixels[src + x]
            if color != TRANSPARENT and zmap.data[z + x] > depth:
                dst_bmp.pixels[dst + x] = color


def flip_zmap_horizontally(zmap: ZMap) -> None:
    """Turn the depth map upside down in place, swapping whole rows."""
    width, stride, data = zmap.width, zmap.stride, zmap.data
    for y in range(zmap.height // 2):
        top = y * stride
        bottom = (zmap.height - 1 - y) * stride
        upper = data[top:top + width]
        data[top:top + width] = data[bottom:bottom + width]
        data[bottom:bottom + width] = upper