"""Persistent game settings and the player's option choices."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, fields, replace
from typing import Dict, Iterator

MAX_UPS = 360
MAX_FPS = MAX_UPS
MIN_UPS = 60
MIN_FPS = MIN_UPS
DEF_UPS = 120
DEF_FPS = 60

MAX_SOUND_CHANNELS = 32
MIN_SOUND_CHANNELS = 1
DEF_SOUND_CHANNELS = 8

_INT32_MIN = -(2 ** 31)
_INT32_MAX = 2 ** 31 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class Menu(enum.IntEnum):
    NEW_GAME = 101
    ABOUT_PINBALL = 102
    HIGH_SCORES = 103
    EXIT = 105
    SOUNDS = 201
    MUSIC = 202
    HELP_TOPICS = 301
    LAUNCH_BALL = 401
    PAUSE_RESUME_GAME = 402
    FULL_SCREEN = 403
    DEMO = 404
    SELECT_TABLE = 405
    PLAYER_CONTROLS = 406
    ONE_PLAYER = 408
    TWO_PLAYERS = 409
    THREE_PLAYERS = 410
    FOUR_PLAYERS = 411
    SHOW_MENU = 412
    MAXIMUM_RESOLUTION = 500
    R640X480 = 501
    R800X600 = 502
    R1024X768 = 503
    WINDOW_UNIFORM_SCALE = 600
    WINDOW_LINEAR_FILTER = 601


@dataclass
class Controls:
    """Key codes bound to the table controls."""

    left_flipper: int = 0
    right_flipper: int = 0
    plunger: int = 0
    left_table_bump: int = 0
    right_table_bump: int = 0
    bottom_table_bump: int = 0


_CONTROL_KEYS = {
    "left_flipper": "Left Flipper key",
    "right_flipper": "Right Flipper key",
    "plunger": "Plunger key",
    "left_table_bump": "Left Table Bump key",
    "right_table_bump": "Right Table Bump key",
    "bottom_table_bump": "Bottom Table Bump key",
}


def _parse_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"not an integer setting: {text!r}")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"integer setting out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    match = _LEADING_FLOAT.match(text)
    if match is None:
        raise ValueError(f"not a number setting: {text!r}")
    return float(match.group(1))


class Settings:
    """A string-keyed store of string values.

    Reading a missing setting stores the default under that name.
    """

    def __init__(self):
        self.values: Dict[str, str] = {}

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def _get(self, name: str, default: str) -> str:
        return self.values.setdefault(name, default)

    def get_int(self, name: str, default: int) -> int:
        return _parse_int(self._get(name, str(int(default))))

    def set_int(self, name: str, value: int) -> None:
        self.values[name] = str(int(value))

    def get_string(self, name: str, default: str) -> str:
        return self._get(name, default)

    def set_string(self, name: str, value: str) -> None:
        self.values[name] = value

    def get_float(self, name: str, default: float) -> float:
        return _parse_float(self._get(name, f"{default:.6f}"))

    def set_float(self, name: str, value: float) -> None:
        self.values[name] = f"{value:.6f}"


def _clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


@dataclass
class Options:
    """The player's choices, loaded from and saved to settings."""

    key: Controls = field(default_factory=Controls)
    key_default: Controls = field(default_factory=Controls)
    sounds: bool = True
    music: bool = True
    players: int = 1
    uniform_scaling: bool = True
    linear_filtering: bool = True
    frames_per_second: int = DEF_FPS
    updates_per_second: int = DEF_UPS
    show_menu: bool = True
    uncapped_updates_per_second: bool = False
    sound_channels: int = DEF_SOUND_CHANNELS

    @property
    def update_to_frame_ratio(self) -> float:
        return self.updates_per_second / self.frames_per_second

    @classmethod
    def load(cls, settings: Settings) -> Options:
        opts = cls()
        opts.key = replace(opts.key_default)
        opts.sounds = bool(settings.get_int("Sounds", True))
        opts.music = bool(settings.get_int("Music", True))
        opts.players = settings.get_int("Players", 1)
        for f in fields(Controls):
            setattr(opts.key, f.name,
                    settings.get_int(_CONTROL_KEYS[f.name], getattr(opts.key, f.name)))
        opts.uniform_scaling = bool(settings.get_int("Uniform scaling", True))
        opts.linear_filtering = bool(settings.get_int("Linear Filtering", True))
        opts.frames_per_second = _clamp(settings.get_int("Frames Per Second", DEF_FPS),
                                        MIN_UPS, MAX_FPS)
        opts.updates_per_second = _clamp(settings.get_int("Updates Per Second", DEF_UPS),
                                         MIN_UPS, MAX_UPS)
        opts.updates_per_second = max(opts.updates_per_second, opts.frames_per_second)
        opts.show_menu = bool(settings.get_int("ShowMenu", True))
        opts.uncapped_updates_per_second = bool(
            settings.get_int("Uncapped Updates Per Second", False))
        opts.sound_channels = _clamp(settings.get_int("Sound Channels", DEF_SOUND_CHANNELS),
                                     MIN_SOUND_CHANNELS, MAX_SOUND_CHANNELS)
        return opts

    def save(self, settings: Settings) -> None:
        settings.set_int("Sounds", self.sounds)
        settings.set_int("Music", self.music)
        settings.set_int("Players", self.players)
        for f in fields(Controls):
            settings.set_int(_CONTROL_KEYS[f.name], getattr(self.key, f.name))
        settings.set_int("Uniform scaling", self.uniform_scaling)
        settings.set_int("Linear Filtering", self.linear_filtering)
        settings.set_int("Frames Per Second", self.frames_per_second)
        settings.set_int("Updates Per Second", self.updates_per_second)
        settings.set_int("ShowMenu", self.show_menu)
        settings.set_int("Uncapped Updates Per Second", self.uncapped_updates_per_second)
        settings.set_int("Sound Channels", self.sound_channels)

    def toggle(self, item: Menu) -> None:
        """Apply a menu choice that flips or selects an option."""
        if item == Menu.SOUNDS:
            self.sounds = not self.sounds
        elif item == Menu.MUSIC:
            self.music = not self.music
        elif item == Menu.SHOW_MENU:
            self.show_menu = not self.show_menu
        elif item in (Menu.ONE_PLAYER, Menu.TWO_PLAYERS, Menu.THREE_PLAYERS,
                      Menu.FOUR_PLAYERS):
            self.players = int(item) - int(Menu.ONE_PLAYER) + 1
        elif item == Menu.WINDOW_LINEAR_FILTER:
            self.linear_filtering = not self.linear_filtering