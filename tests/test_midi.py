import struct

import pytest

from cadetpinball.midi import MidsFormatError, load_mds, mds_to_midi, to_variable_length

HEADER_SIZE = 14
TRACK_HEADER_SIZE = 8
END_OF_TRACK = b"\x00\xff\x2f\x00"


def make_mds(blocks, time_format=96, stream_ids=False):
    """blocks: list of (start_ticks, [(delta, event), ...])."""
    body = b""
    for start, events in blocks:
        payload = b""
        for delta, event in events:
            if stream_ids:
                payload += struct.pack("<III", delta, 0, event)
            else:
                payload += struct.pack("<II", delta, event)
        body += struct.pack("<II", start, len(payload)) + payload
    data_chunk = b"data" + struct.pack("<II", 4 + len(body), len(blocks)) + body
    fmt = struct.pack("<III", time_format, 1024, 0 if stream_ids else 1)
    rest = b"MIDS" + b"fmt " + struct.pack("<I", len(fmt)) + fmt + data_chunk
    return b"RIFF" + struct.pack("<I", len(rest)) + rest


def track_body(midi):
    return midi[HEADER_SIZE + TRACK_HEADER_SIZE:]


def test_variable_length_small_values():
    for value in (0, 1, 0x40, 0x7F):
        assert to_variable_length(value) == (value, 1)


def test_variable_length_marks_continuation():
    packed, count = to_variable_length(0x80)
    assert count == 2
    assert packed & 0x80
    assert packed >> 8 == 0


def test_header_fields():
    midi = mds_to_midi(make_mds([(0, [(0, 0x00403C90)])], time_format=480))
    magic, chunk_len, fmt, ntracks, tickdiv = struct.unpack(">4sIHHH", midi[:HEADER_SIZE])
    assert magic == b"MThd"
    assert (chunk_len, fmt, ntracks) == (6, 0, 1)
    assert tickdiv == 480
    assert midi[HEADER_SIZE:HEADER_SIZE + 4] == b"MTrk"


def test_track_length_matches():
    midi = mds_to_midi(make_mds([(0, [(0, 0x00403C90), (10, 0x00003C80)])]))
    length = struct.unpack(">I", midi[HEADER_SIZE + 4:HEADER_SIZE + 8])[0]
    assert length == len(midi) - HEADER_SIZE - TRACK_HEADER_SIZE
    assert midi.endswith(END_OF_TRACK)


def test_single_note_event_bytes():
    midi = mds_to_midi(make_mds([(0, [(0, 0x00403C90)])]))
    assert track_body(midi) == b"\x00\x90\x3c\x40" + END_OF_TRACK


def test_program_change_is_two_bytes():
    midi = mds_to_midi(make_mds([(0, [(0, 0x000005C0)])]))
    assert track_body(midi) == b"\x00\xc0\x05" + END_OF_TRACK


def test_tempo_event():
    midi = mds_to_midi(make_mds([(0, [(0, 0x0107A120)])]))
    assert track_body(midi) == b"\x00\xff\x51\x03\x07\xa1\x20" + END_OF_TRACK


def test_stream_ids_are_skipped():
    plain = mds_to_midi(make_mds([(0, [(0, 0x00403C90)])], stream_ids=False))
    with_ids = mds_to_midi(make_mds([(0, [(0, 0x00403C90)])], stream_ids=True))
    assert plain == with_ids


def test_events_sorted_across_blocks():
    late = (50, [(0, 0x00403D90)])
    early = (0, [(0, 0x00403C90)])
    midi = mds_to_midi(make_mds([late, early]))
    body = track_body(midi)
    assert body.index(b"\x90\x3c") < body.index(b"\x90\x3d")


def test_unknown_event_type():
    with pytest.raises(MidsFormatError):
        mds_to_midi(make_mds([(0, [(0, 0x05000000)])]))


def test_rejects_short_data():
    with pytest.raises(MidsFormatError):
        mds_to_midi(b"RIFF")


def test_rejects_bad_magic():
    data = bytearray(make_mds([(0, [(0, 0x00403C90)])]))
    data[8:12] = b"WAVE"
    with pytest.raises(MidsFormatError):
        mds_to_midi(bytes(data))


def test_rejects_bad_fmt_size():
    data = bytearray(make_mds([(0, [(0, 0x00403C90)])]))
    data[16:20] = struct.pack("<I", 4)
    with pytest.raises(MidsFormatError):
        mds_to_midi(bytes(data))


def test_rejects_missing_data_chunk():
    data = bytearray(make_mds([(0, [(0, 0x00403C90)])]))
    data[32:36] = b"junk"
    with pytest.raises(MidsFormatError):
        mds_to_midi(bytes(data))


def test_rejects_oversized_riff_length():
    data = bytearray(make_mds([(0, [(0, 0x00403C90)])]))
    data[4:8] = struct.pack("<I", len(data))
    with pytest.raises(MidsFormatError):
        mds_to_midi(bytes(data))


def test_load_mds_reads_file(tmp_path):
    source = make_mds([(0, [(0, 0x00403C90)])])
    path = tmp_path / "TABA1.MDS"
    path.write_bytes(source)
    assert load_mds(path) == mds_to_midi(source)


def test_load_mds_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_mds(tmp_path / "missing.MDS")