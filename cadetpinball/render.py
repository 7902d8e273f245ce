"""Sprite bookkeeping and compositing of the table onto the virtual screen."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import List, Optional

from . import zdrv
from .gdrv import Bitmap8, Palette, copy_bitmap
from .maths import Rectangle, enclosing_box, rectangle_clip
from .zdrv import ZMap

BALL_BUFFER_COUNT = 20
BALL_BUFFER_SIZE = 64
MAX_DIRTY_SPRITES = 999
FAR_DEPTH = 0xFFFF
_DEPTH_RANGE = 4294967300.0


class VisualType(enum.IntEnum):
    NONE = 0
    SPRITE = 1
    BALL = 2


def _copy_rect(rect: Rectangle) -> Rectangle:
    return Rectangle(rect.x, rect.y, rect.width, rect.height)


def _to_int16(value: float) -> int:
    n = int(value) & 0xFFFF
    return n - 0x10000 if n >= 0x8000 else n


@dataclass(eq=False)
class Sprite:
    """A drawable item on the table, or a ball drawn over it."""

    visual_type: VisualType = VisualType.NONE
    bmp: Optional[Bitmap8] = None
    zmap: Optional[ZMap] = None
    bmp_rect: Rectangle = field(default_factory=Rectangle)
    pending_removal: bool = False
    depth: int = 0
    dirty_rect_prev: Rectangle = field(default_factory=Rectangle)
    dirty_rect: Rectangle = field(default_factory=Rectangle)
    bounding_rect: Rectangle = field(default_factory=lambda: Rectangle(0, 0, -1, -1))
    zmap_offset_x: int = 0
    zmap_offset_y: int = 0
    occluders: Optional[List[Sprite]] = None


class Renderer:
    """Keeps the virtual screen and its depth buffer up to date with the sprites."""

    def __init__(self, palette: Palette, background: Optional[Bitmap8], z_min: float,
                 z_scaler: float, width: int, height: int):
        self.palette = palette
        self.background = background
        self.zmin = z_min
        self.zscaler = z_scaler
        self.zmax = _DEPTH_RANGE / z_scaler + z_min if z_scaler != 0 else math.inf
        self.vscreen = Bitmap8(width, height, False)
        self.zscreen = ZMap(width, height, width)
        zdrv.fill(self.zscreen, self.zscreen.width, self.zscreen.height, 0, 0, FAR_DEPTH)
        self.vscreen_rect = Rectangle(0, 0, width, height)
        self.ball_bitmaps = [Bitmap8(BALL_BUFFER_SIZE, BALL_BUFFER_SIZE, False)
                             for _ in range(BALL_BUFFER_COUNT)]
        self.sprite_list: List[Sprite] = []
        self.ball_list: List[Sprite] = []
        self.dirty_list: List[Sprite] = []
        self.background_zmap: Optional[ZMap] = None
        self.zmap_offset_x = 0
        self.zmap_offset_y = 0
        self.offset_x = 0
        self.offset_y = 0
        if background is not None:
            copy_bitmap(self.vscreen, width, height, 0, 0, background, 0, 0)
        else:
            palette.fill_bitmap(self.vscreen, width, height, 0, 0, 0)

    def _clear(self, rect: Rectangle) -> None:
        zdrv.fill(self.zscreen, rect.width, rect.height, rect.x, rect.y, FAR_DEPTH)
        if self.background is not None:
            copy_bitmap(self.vscreen, rect.width, rect.height, rect.x, rect.y,
                        self.background, rect.x, rect.y)
        else:
            self.palette.fill_bitmap(self.vscreen, rect.width, rect.height, rect.x, rect.y, 0)

    def update(self) -> None:
        """Redraw everything that changed since the last update."""
        self._unpaint_balls()

        for sprite in self.dirty_list:
            clear = False
            if sprite.visual_type == VisualType.SPRITE:
                if sprite.dirty_rect_prev.width > 0:
                    sprite.dirty_rect = enclosing_box(sprite.dirty_rect_prev, sprite.bmp_rect)
                clipped = rectangle_clip(sprite.dirty_rect, self.vscreen_rect)
                if clipped is not None:
                    sprite.dirty_rect = clipped
                    clear = True
                else:
                    sprite.dirty_rect.width = -1
            elif sprite.visual_type == VisualType.NONE:
                clipped = rectangle_clip(sprite.bmp_rect, self.vscreen_rect)
                if clipped is not None:
                    sprite.dirty_rect = clipped
                    clear = sprite.bmp is None
                else:
                    sprite.dirty_rect.width = -1
            if clear:
                self._clear(sprite.dirty_rect)

        for sprite in self.dirty_list:
            if sprite.dirty_rect.width > 0 and sprite.visual_type in (VisualType.NONE,
                                                                        VisualType.SPRITE):
                self._repaint(sprite)

        self._paint_balls()

        for sprite in self.dirty_list:
            sprite.dirty_rect_prev = _copy_rect(sprite.dirty_rect)
            if sprite.pending_removal:
                self.remove_sprite(sprite)
        self.dirty_list.clear()

    def sprite_modified(self, sprite: Sprite) -> None:
        """Queue a non-ball sprite for redrawing."""
        if sprite.visual_type != VisualType.BALL and len(self.dirty_list) < MAX_DIRTY_SPRITES:
            self.dirty_list.append(sprite)

    def create_sprite(self, visual_type: VisualType, bmp: Optional[Bitmap8],
                      zmap: Optional[ZMap], x_position: int, y_position: int,
                      rect: Optional[Rectangle]) -> Sprite:
        sprite = Sprite(visual_type=visual_type, bmp=bmp, zmap=zmap)
        sprite.bmp_rect = Rectangle(x_position, y_position,
                                    bmp.width if bmp is not None else 0,
                                    bmp.height if bmp is not None else 0)
        if rect is not None:
            sprite.bounding_rect = _copy_rect(rect)
        if zmap is None and visual_type != VisualType.BALL:
            sprite.zmap = self.background_zmap
            sprite.zmap_offset_x = x_position - self.zmap_offset_x
            sprite.zmap_offset_y = y_position - self.zmap_offset_y
        sprite.dirty_rect_prev = _copy_rect(sprite.bmp_rect)
        if visual_type == VisualType.BALL:
            self.ball_list.append(sprite)
        else:
            self.sprite_list.append(sprite)
            self.sprite_modified(sprite)
        return sprite

    def remove_sprite(self, sprite: Sprite) -> None:
        if sprite in self.sprite_list:
            self.sprite_list.remove(sprite)
        sprite.occluders = None

    def remove_ball(self, ball: Sprite) -> None:
        if ball in self.ball_list:
            self.ball_list.remove(ball)
        ball.occluders = None

    def sprite_set(self, sprite: Optional[Sprite], bmp: Optional[Bitmap8],
                   zmap: Optional[ZMap], x_pos: int, y_pos: int) -> None:
        if sprite is None:
            return
        sprite.bmp_rect.x = x_pos
        sprite.bmp_rect.y = y_pos
        sprite.bmp = bmp
        if bmp is not None:
            sprite.bmp_rect.width = bmp.width
            sprite.bmp_rect.height = bmp.height
        sprite.zmap = zmap
        self.sprite_modified(sprite)

    def sprite_set_bitmap(self, sprite: Optional[Sprite], bmp: Optional[Bitmap8]) -> None:
        if sprite is None or sprite.bmp is bmp:
            return
        sprite.bmp = bmp
        if bmp is not None:
            sprite.bmp_rect.width = bmp.width
            sprite.bmp_rect.height = bmp.height
        self.sprite_modified(sprite)

    def set_background_zmap(self, zmap: Optional[ZMap], offset_x: int, offset_y: int) -> None:
        self.background_zmap = zmap
        self.zmap_offset_x = offset_x
        self.zmap_offset_y = offset_y

    def ball_set(self, sprite: Optional[Sprite], bmp: Optional[Bitmap8], depth: float,
                 x_pos: int, y_pos: int) -> None:
        """Move a ball sprite and set its screen depth from a table distance."""
        if sprite is None:
            return
        sprite.bmp = bmp
        if bmp is not None:
            sprite.bmp_rect = Rectangle(x_pos, y_pos, bmp.width, bmp.height)
        if depth >= self.zmin:
            scaled = (depth - self.zmin) * self.zscaler
            sprite.depth = _to_int16(scaled) if scaled <= self.zmax else -1
        else:
            sprite.depth = 0

    def shift(self, offset_x: int, offset_y: int) -> None:
        self.offset_x += offset_x
        self.offset_y += offset_y

    def build_occlude_list(self) -> None:
        """Give each bounded sprite the list of sprites that overlap it."""
        for main in self.sprite_list:
            main.occluders = None
            if main.pending_removal or main.bounding_rect.width == -1:
                continue
            overlapping = [
                ref for ref in self.sprite_list
                if not ref.pending_removal
                and ref.bounding_rect.width != -1
                and rectangle_clip(main.bounding_rect, ref.bounding_rect) is not None
            ]
            if main.bmp is not None and len(overlapping) < 2:
                overlapping = []
            main.occluders = overlapping or None

    def _repaint(self, sprite: Sprite) -> None:
        if not sprite.occluders:
            return
        for ref in sprite.occluders:
            if ref.pending_removal or ref.bmp is None or ref.zmap is None:
                continue
            clip = rectangle_clip(ref.bmp_rect, sprite.dirty_rect)
            if clip is None:
                continue
            zdrv.paint(
                clip.width, clip.height,
                self.vscreen, clip.x, clip.y,
                self.zscreen, clip.x, clip.y,
                ref.bmp, clip.x - ref.bmp_rect.x, clip.y - ref.bmp_rect.y,
                ref.zmap,
                clip.x + ref.zmap_offset_x - ref.bmp_rect.x,
                clip.y + ref.zmap_offset_y - ref.bmp_rect.y,
            )

    def _paint_balls(self) -> None:
        balls = self.ball_list
        half = len(balls) // 2
        for i in range(len(balls)):
            for j in range(i, half):
                if balls[i].depth > balls[j].depth:
                    balls[i], balls[j] = balls[j], balls[i]

        for ball, saved in zip(balls, self.ball_bitmaps):
            clip = rectangle_clip(ball.bmp_rect, self.vscreen_rect) if ball.bmp else None
            if clip is None:
                ball.dirty_rect.width = -1
                continue
            ball.dirty_rect = clip
            copy_bitmap(saved, clip.width, clip.height, 0, 0, self.vscreen, clip.x, clip.y)
            zdrv.paint_flat(
                clip.width, clip.height,
                self.vscreen, clip.x, clip.y,
                self.zscreen, clip.x, clip.y,
                ball.bmp, clip.x - ball.bmp_rect.x, clip.y - ball.bmp_rect.y,
                ball.depth,
            )
        for ball in balls[len(self.ball_bitmaps):]:
            ball.dirty_rect.width = -1

    def _unpaint_balls(self) -> None:
        for ball, saved in reversed(list(zip(self.ball_list, self.ball_bitmaps))):
            rect = ball.dirty_rect
            if rect.width > 0:
                copy_bitmap(self.vscreen, rect.width, rect.height, rect.x, rect.y, saved, 0, 0)
            ball.dirty_rect_prev = _copy_rect(rect)