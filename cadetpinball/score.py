"""Score readouts drawn with digit bitmaps, and score text formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from .gdrv import Bitmap8, copy_bitmap, copy_bitmap_w_transparency

if TYPE_CHECKING:
    from .render import Renderer

NO_SCORE = -999
_MAX_DRAWN_SCORE = 1_000_000_000
_INITIAL_SCORE = -9999


def string_format(score: int) -> str:
    """Format a score with thousands separators; the no-score marker gives ''."""
    if score == NO_SCORE:
        return ""
    if score < 0:
        return str(score)
    billions = score // 1_000_000_000
    millions = score % 1_000_000_000 // 1_000_000
    thousands = score % 1_000_000 // 1000
    units = score % 1000
    if billions > 0:
        return f"{billions},{millions:03d},{thousands:03d},{units:03d}"
    if millions > 0:
        return f"{millions},{thousands:03d},{units:03d}"
    if thousands > 0:
        return f"{thousands},{units:03d}"
    return str(score)


class ScoreDisplay:
    """A right-aligned numeric readout drawn onto the renderer's screen."""

    def __init__(self, offset_x: int, offset_y: int, width: int, height: int,
                 char_bitmaps: Sequence[Bitmap8], background: Optional[Bitmap8]):
        if len(char_bitmaps) != 10:
            raise ValueError("a score display needs ten digit bitmaps")
        self.offset_x = offset_x
        self.offset_y = offset_y
        self.width = width
        self.height = height
        self.char_bitmaps: List[Bitmap8] = list(char_bitmaps)
        self.background = background
        self.score = _INITIAL_SCORE
        self.dirty = False

    def set(self, value: int) -> None:
        self.score = value
        self.dirty = True

    def erase(self, renderer: Renderer) -> None:
        """Restore the readout area from the background, or clear it."""
        if self.background is not None:
            copy_bitmap(renderer.vscreen, self.width, self.height, self.offset_x,
                        self.offset_y, self.background, self.offset_x, self.offset_y)
        else:
            renderer.palette.fill_bitmap(renderer.vscreen, self.width, self.height,
                                         self.offset_x, self.offset_y, 0)

    def update(self, renderer: Renderer) -> None:
        """Redraw the readout if its value changed."""
        if not self.dirty or self.score > _MAX_DRAWN_SCORE:
            return
        self.dirty = False
        x = self.width + self.offset_x
        y = self.offset_y
        self.erase(renderer)
        if self.score < 0:
            return
        blit = copy_bitmap_w_transparency if renderer.background is not None else copy_bitmap
        for digit in reversed(str(self.score)):
            bmp = self.char_bitmaps[int(digit) % 10]
            x -= bmp.width
            blit(renderer.vscreen, bmp.width, bmp.height, x, y, bmp, 0, 0)

    def dup(self) -> ScoreDisplay:
        """Return an independent copy sharing the same bitmaps."""
        copy = ScoreDisplay(self.offset_x, self.offset_y, self.width, self.height,
                            self.char_bitmaps, self.background)
        copy.score = self.score
        copy.dirty = self.dirty
        return copy