"""Conversion of MIDS stream music files into standard MIDI files."""

from __future__ import annotations

import struct
from os import PathLike
from typing import List, Tuple, Union

_U32 = struct.Struct("<I")
_META_SET_TEMPO = b"\xff\x51\x03"
_META_END_TRACK = b"\x00\xff\x2f\x00"
_MIDI_HEADER = struct.Struct(">4sIHHH")
_MIDI_TRACK = struct.Struct(">4sI")


class MidsFormatError(ValueError):
    """The data is not a MIDS file this converter understands."""


def to_variable_length(value: int) -> Tuple[int, int]:
    """Pack value into 7-bit groups; return (packed, byte_count).

    The lowest group sits in the lowest byte; every higher byte carries the
    continuation bit.
    """
    value &= 0xFFFFFFFF
    count = 1
    packed = value & 0x7F
    value >>= 7
    while value:
        packed = (packed << 8) | (value & 0x7F) | 0x80
        count += 1
        value >>= 7
    return packed & 0xFFFFFFFF, count


def _u32(data: bytes, offset: int) -> int:
    if offset < 0 or offset + 4 > len(data):
        raise MidsFormatError("MIDS data is truncated")
    return _U32.unpack_from(data, offset)[0]


def _read_events(data: bytes, offset: int, block_count: int,
                 stream_id_used: bool) -> List[Tuple[int, int]]:
    words_per_event = 3 if stream_id_used else 2
    events: List[Tuple[int, int]] = []
    for _ in range(block_count):
        ticks = _u32(data, offset)
        buffer_size = _u32(data, offset + 4)
        start = offset + 8
        for index in range(buffer_size // (4 * words_per_event)):
            event_offset = start + index * 4 * words_per_event
            ticks = (ticks + _u32(data, event_offset)) & 0xFFFFFFFF
            events.append((ticks, _u32(data, event_offset + 4 * (words_per_event - 1))))
        offset = start + buffer_size
    return events


def mds_to_midi(data: bytes) -> bytes:
    """Convert MIDS file contents to a single-track MIDI file."""
    size = len(data)
    if size < 12:
        raise MidsFormatError("file too short")
    if (data[0:4] != b"RIFF" or data[8:12] != b"MIDS" or data[12:16] != b"fmt "):
        raise MidsFormatError("not a MIDS file")
    if _u32(data, 4) > size - 8:
        raise MidsFormatError("RIFF size exceeds file size")
    if size - 12 < 8:
        raise MidsFormatError("file too short")
    fmt_size = _u32(data, 16)
    if fmt_size < 12 or fmt_size > size - 12:
        raise MidsFormatError("bad format chunk size")

    time_format = _u32(data, 20)
    stream_id_used = _u32(data, 28) == 0
    chunk = 20 + fmt_size
    if data[chunk:chunk + 4] != b"data":
        raise MidsFormatError("missing data chunk")
    if _u32(data, chunk + 4) < 4:
        raise MidsFormatError("data chunk too small")
    block_count = _u32(data, chunk + 8)

    events = sorted(_read_events(data, chunk + 12, block_count, stream_id_used),
                    key=lambda event: event[0])

    body = bytearray()
    previous = 0
    for ticks, event in events:
        packed, count = to_variable_length(ticks - previous)
        previous = ticks
        body += packed.to_bytes(4, "big")[4 - count:]
        kind = event >> 24
        if kind == 0:
            status = event & 0xF0
            length = 2 if status in (0xC0, 0xD0) else 3
            body += event.to_bytes(4, "little")[:length]
        elif kind == 1:
            body += _META_SET_TEMPO
            body += (event & 0xFFFFFF).to_bytes(3, "big")
        else:
            raise MidsFormatError(f"unknown MIDS event type {kind}")
    body += _META_END_TRACK

    header = _MIDI_HEADER.pack(b"MThd", 6, 0, 1, time_format & 0xFFFF)
    track = _MIDI_TRACK.pack(b"MTrk", len(body))
    return header + track + bytes(body)


def load_mds(path: Union[str, PathLike]) -> bytes:
    """Read a MIDS file and return it converted to MIDI."""
    with open(path, "rb") as handle:
        return mds_to_midi(handle.read())