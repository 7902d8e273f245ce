"""Palette-indexed bitmaps and the routines that draw them."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar, Iterable, List, Optional, Sequence

TRANSPARENT = 0
"""A colour value of zero is never drawn by transparent copies."""

_ALPHA_MASK = 0x000000FF
_RGB_MASK = 0xFFFFFF00
_WHITE = 0xFFFFFFFF

# Colours are 32-bit values laid out as 0xRRGGBBAA.
_SYSTEM_COLORS = (
    0x000000FF,
    0x800000FF,
    0x008000FF,
    0x808000FF,
    0x000080FF,
    0x800080FF,
    0x008080FF,
    0xC0C0C0FF,
    0xC0DCC0FF,
    0xA6CAF0FF,
)
_FIRST_TABLE_COLOR = 10
_TABLE_COLOR_COUNT = 236


class BitmapType(enum.IntEnum):
    NONE = 0
    RAW = 1
    DIB = 2
    SPLICED = 3


class Bmp8Flags(enum.IntFlag):
    RAW_BMP_UNALIGNED = 1 << 0
    DIB_BITMAP = 1 << 1
    SPLICED = 1 << 2


_BMP8_HEADER = struct.Struct("<BhhhhiB")


@dataclass
class Bmp8Header:
    """Header that precedes an 8-bit bitmap in a resource file."""

    resolution: int = 0
    width: int = 0
    height: int = 0
    x_position: int = 0
    y_position: int = 0
    size: int = 0
    flags: Bmp8Flags = Bmp8Flags(0)

    SIZE: ClassVar[int] = _BMP8_HEADER.size

    def is_flag_set(self, flag: Bmp8Flags) -> bool:
        return bool(self.flags & flag)

    @classmethod
    def from_bytes(cls, data: bytes) -> Bmp8Header:
        """Decode the packed little-endian header at the start of data."""
        if len(data) < cls.SIZE:
            raise ValueError("bitmap header is truncated")
        resolution, width, height, x_pos, y_pos, size, flags = _BMP8_HEADER.unpack_from(data)
        return cls(resolution, width, height, x_pos, y_pos, size, Bmp8Flags(flags))

    def to_bytes(self) -> bytes:
        return _BMP8_HEADER.pack(self.resolution, self.width, self.height,
                                 self.x_position, self.y_position, self.size, int(self.flags))


class Bitmap8:
    """A bitmap holding palette indices and the colours they resolve to.

    ``pixels`` holds ``stride * height`` colours; ``indexed`` holds the raw
    palette indices, or is None for bitmaps that are drawn into directly.
    """

    def __init__(self, width: int, height: int, indexed: bool):
        if width < 0 or height < 0:
            raise ValueError("negative bitmap dimensions")
        self.width = width
        self.height = height
        self.stride = width
        self.indexed_stride = width
        self.bitmap_type = BitmapType.DIB
        self.x_position = 0
        self.y_position = 0
        self.resolution = 0
        self.indexed: Optional[bytearray] = bytearray(height * width) if indexed else None
        self.pixels: List[int] = [0] * (height * width)

    @classmethod
    def from_header(cls, header: Bmp8Header) -> Bitmap8:
        """Create an empty bitmap whose index buffer matches header.size."""
        if header.width < 0 or header.height < 0:
            raise ValueError("negative bitmap dimensions")
        bmp = cls(header.width, header.height, False)
        if header.is_flag_set(Bmp8Flags.SPLICED):
            bmp.bitmap_type = BitmapType.SPLICED
        elif header.is_flag_set(Bmp8Flags.DIB_BITMAP):
            bmp.bitmap_type = BitmapType.DIB
        else:
            bmp.bitmap_type = BitmapType.RAW
        bmp.x_position = header.x_position
        bmp.y_position = header.y_position
        bmp.resolution = header.resolution

        if bmp.bitmap_type == BitmapType.SPLICED:
            size = header.size
        else:
            misaligned = bmp.width % 4
            if (bmp.bitmap_type == BitmapType.RAW and misaligned
                    and not header.is_flag_set(Bmp8Flags.RAW_BMP_UNALIGNED)):
                raise ValueError("wrong raw bitmap align flag")
            if misaligned:
                bmp.indexed_stride = bmp.width - misaligned + 4
            size = bmp.height * bmp.indexed_stride
            if size != header.size:
                raise ValueError("wrong bitmap size")
        bmp.indexed = bytearray(size)
        return bmp

    def scale_indexed(self, scale_x: float, scale_y: float) -> None:
        """Resize the index buffer by nearest-neighbour sampling."""
        if self.indexed is None:
            raise ValueError("cannot scale a bitmap without indices")
        new_width = int(self.width * scale_x)
        new_height = int(self.height * scale_y)
        if new_width == self.width and new_height == self.height:
            return
        src, src_stride = self.indexed, self.indexed_stride
        self.indexed = bytearray(
            src[int(y / scale_y) * src_stride + int(x / scale_x)]
            for y in range(new_height)
            for x in range(new_width)
        )
        self.width = self.stride = self.indexed_stride = new_width
        self.height = new_height
        self.pixels = [0] * (self.stride * self.height)


def _check_region(bmp: Bitmap8, x_off: int, y_off: int, width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        return
    if x_off < 0 or y_off < 0 or x_off + width > bmp.stride or y_off + height > bmp.height:
        raise ValueError("region lies outside the bitmap")


class Palette:
    """The 256-entry colour table that indexed bitmaps resolve through."""

    def __init__(self):
        self.colors: List[int] = [0] * 256

    def display_palette(self, plt: Optional[Sequence[int]],
                        bitmaps: Iterable[Optional[Bitmap8]] = ()) -> None:
        """Load the table colours from plt and re-resolve the given bitmaps.

        Entries 10 to 245 take their red, green and blue from plt and are
        opaque; the system entries and the rest are transparent, except the
        last entry, which is opaque white.
        """
        colors = self.colors
        colors[:len(_SYSTEM_COLORS)] = _SYSTEM_COLORS
        colors[:] = [c & _RGB_MASK for c in colors]
        for index in range(_FIRST_TABLE_COLOR, _FIRST_TABLE_COLOR + _TABLE_COLOR_COUNT):
            rgb = plt[index] if plt is not None else colors[index]
            colors[index] = (rgb & _RGB_MASK) | _ALPHA_MASK
        colors[255] = _WHITE
        for bmp in bitmaps:
            if bmp is not None:
                self.apply(bmp)

    def apply(self, bmp: Bitmap8) -> None:
        """Resolve bmp's indices to colours, turning the rows upside down."""
        if bmp.bitmap_type == BitmapType.NONE:
            return
        if bmp.bitmap_type == BitmapType.SPLICED:
            raise ValueError("cannot apply a palette to a spliced bitmap")
        if bmp.indexed is None:
            raise ValueError("cannot apply a palette to a bitmap without indices")
        colors = self.colors
        resolved: List[int] = []
        for y in range(bmp.height - 1, -1, -1):
            start = y * bmp.indexed_stride
            resolved.extend(colors[i] for i in bmp.indexed[start:start + bmp.width])
        bmp.pixels[:len(resolved)] = resolved

    def fill_bitmap(self, bmp: Bitmap8, width: int, height: int, x_off: int, y_off: int,
                    fill_index: int) -> None:
        """Fill a region of bmp with the colour at fill_index."""
        color = self.colors[fill_index]
        _check_region(bmp, x_off, y_off, width, height)
        if width <= 0:
            return
        for row in range(max(height, 0)):
            start = (y_off + row) * bmp.stride + x_off
            bmp.pixels[start:start + width] = [color] * width


def copy_bitmap(dst_bmp: Bitmap8, width: int, height: int, x_off: int, y_off: int,
                src_bmp: Bitmap8, src_x_off: int, src_y_off: int) -> None:
    """Copy a region of colours from src_bmp into dst_bmp."""
    _check_region(dst_bmp, x_off, y_off, width, height)
    _check_region(src_bmp, src_x_off, src_y_off, width, height)
    if width <= 0:
        return
    for row in range(max(height, 0)):
        src_start = (src_y_off + row) * src_bmp.stride + src_x_off
        dst_start = (y_off + row) * dst_bmp.stride + x_off
        dst_bmp.pixels[dst_start:dst_start + width] = src_bmp.pixels[src_start:src_start + width]


def copy_bitmap_w_transparency(dst_bmp: Bitmap8, width: int, height: int, x_off: int, y_off: int,
                               src_bmp: Bitmap8, src_x_off: int, src_y_off: int) -> None:
    """Copy a region like copy_bitmap, skipping transparent source pixels."""
    _check_region(dst_bmp, x_off, y_off, width, height)
    _check_region(src_bmp, src_x_off, src_y_off, width, height)
    if width <= 0:
        return
    for row in range(max(height, 0)):
        src_start = (src_y_off + row) * src_bmp.stride + src_x_off
        dst_start = (y_off + row) * dst_bmp.stride + x_off
        for x, color in enumerate(src_bmp.pixels[src_start:src_start + width]):
            if color != TRANSPARENT:
                dst_bmp.pixels[dst_start + x] = color