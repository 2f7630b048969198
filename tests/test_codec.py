"""
LocateW Codec Tests
===================
Count fields, prefix rule, record layout, header checks, error taxonomy
and truncation tolerance of the front-coded database.
"""

import io
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from codec.errors import (
    CorruptEncodingError, FieldRangeError, InvalidDatabaseError,
    UnrepresentableLineError,
)
from codec.fields import encode_count, read_count
from codec.frcode import (
    HEADER, MAX_LINE_BYTES, CodecState, FrDecoder, FrEncoder,
    common_prefix_len, compress_file, compress_lines, decompress_file,
    encode_record, iter_database,
)


DIRLIST = [
    "C:\\Users",
    "C:\\Users\\Fourmilier",
    "C:\\Users\\Fourmilier\\Documents\\Bébé Aardvark.jpg",
    "C:\\Users\\Fourmilier\\Documents\\Bébé Armadillo.jpg",
    "C:\\Windows",
    "D:\\ماريو.txt",
    "E:\\" + "a" * 50 + "\\" + "b" * 50 + "\\" + "c" * 50 + "\\" + "d" * 50,
    "E:\\" + "a" * 50 + "\\" + "b" * 50 + "\\" + "c" * 50 + "\\" + "d" * 50 + "\\e",
    "E:\\f",
]


def _encode(lines):
    return b"".join(FrEncoder(lines))


def _decode(data):
    return list(FrDecoder(io.BytesIO(data)))


def _split_record(record):
    """(offset, suffix) of one entry record without the header."""
    stream = io.BytesIO(record)
    offset = read_count(stream)
    length = read_count(stream)
    return offset, stream.read(length)


# ═══════════════════════════════════════════════════════════════════════════
# 1. Count fields
# ═══════════════════════════════════════════════════════════════════════════

class TestCountFields:

    @pytest.mark.parametrize("value, encoded", [
        (0, b"\x00"),
        (7, b"\x07"),
        (127, b"\x7f"),
        (128, b"\x80\x00\x80"),
        (-1, b"\xff"),
        (-127, b"\x81"),
        (-128, b"\x80\xff\x80"),
        (-129, b"\x80\xff\x7f"),
        (32767, b"\x80\x7f\xff"),
        (-32768, b"\x80\x80\x00"),
    ])
    def test_encoding(self, value, encoded):
        assert encode_count(value) == encoded
        assert read_count(io.BytesIO(encoded)) == value

    def test_out_of_range(self):
        with pytest.raises(FieldRangeError):
            encode_count(32768)
        with pytest.raises(FieldRangeError):
            encode_count(-32769)

    def test_field_range_error_is_value_error(self):
        with pytest.raises(ValueError):
            encode_count(1 << 20)

    def test_read_count_end_of_stream(self):
        assert read_count(io.BytesIO(b"")) is None

    def test_read_count_truncated_wide_field(self):
        assert read_count(io.BytesIO(b"\x80\x01")) is None


# ═══════════════════════════════════════════════════════════════════════════
# 2. Prefix rule
# ═══════════════════════════════════════════════════════════════════════════

class TestCommonPrefix:

    def test_ascii(self):
        assert common_prefix_len("C:\\Users\\Bob", "C:\\Users") == 8

    def test_empty_previous(self):
        assert common_prefix_len("C:\\Users", "") == 0

    def test_measured_in_bytes(self):
        # "Bébé A" = 4 ASCII + 2 two-byte scalars
        assert common_prefix_len("Bébé Aardvark", "Bébé Armadillo") == 8

    def test_case_sensitive(self):
        assert common_prefix_len("abc", "ABC") == 0

    def test_diacritic_sensitive(self):
        assert common_prefix_len("café", "cafe") == 3

    def test_never_splits_code_point(self):
        # é (c3 a9) and è (c3 a8) share a lead byte, which must not count
        assert common_prefix_len("é", "è") == 0
        assert common_prefix_len("D:\\ماريو.txt", "D:\\ماريد.txt") == 3 + 4 * 2


# ═══════════════════════════════════════════════════════════════════════════
# 3. Encoder
# ═══════════════════════════════════════════════════════════════════════════

class TestEncoder:

    def test_header_invariant(self):
        data = _encode(["C:\\Users"])
        assert data[:9] == b"\x00\x07LOCATEW"
        assert HEADER == b"\x00\x07LOCATEW"

    def test_one_chunk_per_line(self):
        chunks = list(FrEncoder(DIRLIST))
        assert len(chunks) == len(DIRLIST)
        assert chunks[0].startswith(HEADER)
        assert not any(c.startswith(HEADER) for c in chunks[1:])

    def test_empty_input_produces_nothing(self):
        assert list(FrEncoder([])) == []

    def test_first_record_has_no_prefix(self):
        chunks = list(FrEncoder(["C:\\Users"]))
        record = chunks[0][len(HEADER):]
        assert record == b"\x00\x08C:\\Users"

    def test_prefix_invariant(self):
        chunks = list(FrEncoder(["C:\\Users", "C:\\Users\\Bob", "C:\\Windows"]))
        # "C:\Users\Bob" shares 8 bytes with "C:\Users" (previous prefix 0)
        assert _split_record(chunks[1]) == (8, b"\\Bob")
        # "C:\Windows" shares 3 bytes with "C:\Users\Bob" (previous prefix 8)
        assert _split_record(chunks[2]) == (3 - 8, b"Windows")

    def test_multibyte_suffix_is_whole_scalars(self):
        chunks = list(FrEncoder(["D:\\ماريو.txt", "D:\\ماريد.txt"]))
        _, suffix = _split_record(chunks[1])
        assert suffix.decode("utf-8") == "د.txt"

    def test_long_suffix_uses_escape(self):
        line = "C:\\" + "x" * 300
        record = list(FrEncoder([line]))[0][len(HEADER):]
        assert record[:4] == b"\x00\x80\x01\x2f"   # offset 0, length 303

    def test_negative_128_offset_roundtrip(self):
        lines = ["x" * 200, "x" * 200 + "y", "x" * 72 + "z"]
        chunks = list(FrEncoder(lines))
        assert chunks[2][:3] == b"\x80\xff\x80"
        assert _decode(b"".join(chunks)) == lines

    def test_trailing_newline_stripped(self):
        assert _decode(_encode(["C:\\a\n", "C:\\b\r\n"])) == ["C:\\a", "C:\\b"]

    def test_embedded_newline_rejected(self):
        with pytest.raises(UnrepresentableLineError):
            _encode(["C:\\a\nb"])

    def test_max_line_length(self):
        line = "y" * MAX_LINE_BYTES
        assert _decode(_encode([line])) == [line]

    def test_oversized_line_rejected(self):
        with pytest.raises(UnrepresentableLineError):
            _encode(["y" * (MAX_LINE_BYTES + 1)])

    def test_oversized_multibyte_line_rejected(self):
        # 16384 two-byte scalars = 32768 bytes
        with pytest.raises(UnrepresentableLineError):
            _encode(["é" * 16384])

    def test_encode_record_advances_state(self):
        state = CodecState()
        encode_record("C:\\Users", state)
        assert state.previous_line == b"C:\\Users"
        assert state.previous_prefix_len == 0
        encode_record("C:\\Users\\Bob", state)
        assert state.previous_prefix_len == 8

    def test_counters(self):
        enc = FrEncoder(DIRLIST)
        total = sum(len(c) for c in enc)
        assert enc.lines_encoded == len(DIRLIST)
        assert enc.bytes_encoded == total


# ═══════════════════════════════════════════════════════════════════════════
# 4. Decoder
# ═══════════════════════════════════════════════════════════════════════════

class TestDecoder:

    def test_roundtrip(self):
        assert _decode(_encode(DIRLIST)) == DIRLIST

    def test_roundtrip_preserves_duplicates_and_order(self):
        lines = ["C:\\b", "C:\\a", "C:\\a", "", "C:\\a\\"]
        assert _decode(_encode(lines)) == lines

    def test_empty_source(self):
        assert _decode(b"") == []

    def test_header_only(self):
        assert _decode(HEADER) == []

    def test_bad_label(self):
        with pytest.raises(InvalidDatabaseError):
            _decode(b"\x00\x07LOCATE0" + b"\x00\x01a")

    def test_bad_label_length(self):
        with pytest.raises(InvalidDatabaseError):
            _decode(b"\x00\x08LOCATEW!")

    def test_truncated_header(self):
        for cut in range(1, len(HEADER)):
            with pytest.raises(InvalidDatabaseError):
                _decode(HEADER[:cut])

    def test_nonzero_header_offset(self):
        with pytest.raises(InvalidDatabaseError):
            _decode(b"\x01\x07LOCATEW")

    def test_invalid_utf8(self):
        with pytest.raises(CorruptEncodingError) as info:
            _decode(HEADER + b"\x00\x02\xff\xfe")
        assert isinstance(info.value.__cause__, UnicodeDecodeError)
        assert info.value.entry_index == 0

    def test_prefix_beyond_previous_line(self):
        with pytest.raises(CorruptEncodingError):
            _decode(HEADER + b"\x05\x01a")

    def test_entries_before_error_are_yielded(self):
        data = _encode(["C:\\ok"]) + b"\x00\x01\xff"
        decoder = FrDecoder(io.BytesIO(data))
        assert next(decoder) == "C:\\ok"
        with pytest.raises(CorruptEncodingError):
            next(decoder)

    def test_truncation_tolerance(self):
        chunks = list(FrEncoder(DIRLIST))
        data = b"".join(chunks)
        ends = []
        pos = 0
        for chunk in chunks:
            pos += len(chunk)
            ends.append(pos)

        for cut in range(len(HEADER), len(data) + 1):
            complete = sum(1 for end in ends if end <= cut)
            assert _decode(data[:cut]) == DIRLIST[:complete], f"cut at {cut}"

    def test_reads_one_record_at_a_time(self):
        chunks = list(FrEncoder(DIRLIST))
        stream = io.BytesIO(b"".join(chunks))
        decoder = FrDecoder(stream)
        next(decoder)
        assert stream.tell() == len(chunks[0])
        next(decoder)
        assert stream.tell() == len(chunks[0]) + len(chunks[1])

    def test_not_restartable(self):
        decoder = FrDecoder(io.BytesIO(_encode(["a", "b"])))
        assert list(decoder) == ["a", "b"]
        assert list(decoder) == []
        assert decoder.entries_decoded == 2


# ═══════════════════════════════════════════════════════════════════════════
# 5. File helpers
# ═══════════════════════════════════════════════════════════════════════════

class TestFiles:

    def test_compress_decompress_file(self, tmp_path):
        src = tmp_path / "dirlist.txt"
        src.write_text("\n".join(DIRLIST) + "\n", encoding="utf-8")
        db = tmp_path / "locate.db"
        out = tmp_path / "out.txt"

        size = compress_file(str(src), str(db))
        assert size == os.path.getsize(db)
        assert size < len(src.read_bytes())

        written = decompress_file(str(db), str(out))
        assert written == os.path.getsize(out)
        assert out.read_text(encoding="utf-8").split("\n")[:-1] == DIRLIST

    def test_compress_lines_returns_size(self):
        buf = io.BytesIO()
        size = compress_lines(DIRLIST, buf)
        assert size == len(buf.getvalue())

    def test_iter_database(self, tmp_path):
        db = tmp_path / "locate.db"
        db.write_bytes(_encode(DIRLIST))
        assert list(iter_database(str(db))) == DIRLIST

    def test_iter_database_closes_early(self, tmp_path):
        db = tmp_path / "locate.db"
        db.write_bytes(_encode(DIRLIST))
        gen = iter_database(str(db))
        assert next(gen) == DIRLIST[0]
        gen.close()
        with pytest.raises(StopIteration):
            next(gen)
