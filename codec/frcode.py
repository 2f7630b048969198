"""
LocateW Front-Coding Codec
==========================
Prefix-differential compression of a path-per-line text stream.

Database layout:
  [header]  offset=0 (1B) | len=7 (1B) | b"LOCATEW"
  [entry]*  offset (count) | suffix_len (count) | suffix (UTF-8 bytes)

  offset      = shared prefix length of this line - shared prefix length
                of the previous line (signed, usually small)
  suffix_len  = byte length of the part of the line after the shared prefix

Count fields are described in codec.fields.

Prefix rule:
  Lines are compared Unicode scalar by scalar, case- and diacritic-
  sensitive. The shared prefix length is the UTF-8 byte length of the
  matching scalars, so a suffix never starts in the middle of a code point.

Decoding rule:
  prefix_len = previous_prefix_len + offset
  line       = previous_line[:prefix_len] + suffix

A source that ends on a record boundary, or in the middle of a record,
ends the sequence without error. The two cases are indistinguishable.

Lines are limited to 32767 UTF-8 bytes (signed 16-bit fields).
"""

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Iterator, Optional

from codec.errors import (
    CorruptEncodingError, InvalidDatabaseError, UnrepresentableLineError,
)
from codec.fields import encode_count, read_count, read_exact

logger = logging.getLogger(__name__)

# ─── Constants ──────────────────────────────────────────────────────────────

LABEL = b"LOCATEW"
HEADER = b"\x00" + bytes((len(LABEL),)) + LABEL
MAX_LINE_BYTES = 32767

_WRITE_BUFFER = 1 << 16


# ─── Codec state ────────────────────────────────────────────────────────────

@dataclass
class CodecState:
    """
    Cursor carried from one record to the next.
    One instance per encode or decode pass; never shared between streams.
    """
    previous_line: bytes = b""
    previous_prefix_len: int = 0


def common_prefix_len(line: str, previous: str) -> int:
    """Byte length (UTF-8) of the leading scalars shared by both strings."""
    shared = os.path.commonprefix([line, previous])
    if not shared:
        return 0
    return len(shared.encode("utf-8"))


# ─── Single records ─────────────────────────────────────────────────────────

def encode_record(line: str, state: CodecState,
                  previous: Optional[str] = None) -> bytes:
    """
    Encode one line as an entry record and advance state.

    previous is the decoded form of state.previous_line; callers that
    already hold it (FrEncoder) pass it to avoid decoding it again.
    """
    if "\n" in line or "\r" in line:
        raise UnrepresentableLineError(f"Line contains a newline: {line!r}")

    raw = line.encode("utf-8")
    if len(raw) > MAX_LINE_BYTES:
        raise UnrepresentableLineError(
            f"Length of path > {MAX_LINE_BYTES} bytes ({len(raw)}): {line[:80]}..."
        )

    if previous is None:
        previous = state.previous_line.decode("utf-8")
    prefix_len = common_prefix_len(line, previous)

    offset = prefix_len - state.previous_prefix_len
    suffix = raw[prefix_len:]

    record = encode_count(offset) + encode_count(len(suffix)) + suffix

    state.previous_prefix_len = prefix_len
    state.previous_line = raw
    return record


def decode_record(stream: BinaryIO, state: CodecState,
                  entry_index: int = -1) -> Optional[str]:
    """
    Decode one entry record and advance state.
    Returns None when the stream ends (cleanly or mid-record).
    """
    offset = read_count(stream)
    if offset is None:
        return None
    suffix_len = read_count(stream)
    if suffix_len is None:
        return None
    if suffix_len < 0:
        raise CorruptEncodingError(
            f"Negative suffix length {suffix_len}", entry_index=entry_index)
    suffix = read_exact(stream, suffix_len)
    if suffix is None:
        return None

    prefix_len = state.previous_prefix_len + offset
    if not 0 <= prefix_len <= len(state.previous_line):
        raise CorruptEncodingError(
            f"Prefix length {prefix_len} outside previous entry "
            f"({len(state.previous_line)} bytes)",
            entry_index=entry_index,
        )

    raw = state.previous_line[:prefix_len] + suffix
    try:
        line = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CorruptEncodingError(
            f"Entry {entry_index} is not valid UTF-8: {e.reason}",
            entry_index=entry_index,
        ) from e

    state.previous_prefix_len = prefix_len
    state.previous_line = raw
    return line


# ─── Lazy adapters ──────────────────────────────────────────────────────────

class FrEncoder:
    """
    Lazy encoder: iterable of lines -> iterator of byte chunks.

    One chunk per line; the first chunk is prefixed with the header.
    Concatenating all chunks gives the complete database. An empty input
    produces no chunks at all.

    A single trailing newline on each line is dropped so that an open
    text file can be passed directly.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self._state = CodecState()
        self._previous = ""
        self._started = False
        self.lines_encoded = 0
        self.bytes_encoded = 0

    def __iter__(self) -> "FrEncoder":
        return self

    def __next__(self) -> bytes:
        line = next(self._lines)
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]

        record = encode_record(line, self._state, self._previous)
        self._previous = line

        if not self._started:
            record = HEADER + record
            self._started = True

        self.lines_encoded += 1
        self.bytes_encoded += len(record)
        return record


class FrDecoder:
    """
    Lazy decoder: binary stream -> iterator of lines.

    The header is consumed and checked on the first pull. Each later pull
    reads exactly one record from the stream. Not restartable: decoding
    again needs a fresh stream and a fresh decoder.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._state = CodecState()
        self._started = False
        self._finished = False
        self.entries_decoded = 0

    def __iter__(self) -> "FrDecoder":
        return self

    def __next__(self) -> str:
        if self._finished:
            raise StopIteration

        if not self._started:
            if not self._read_header():
                self._finished = True
                raise StopIteration
            self._started = True

        line = decode_record(self._stream, self._state, self.entries_decoded)
        if line is None:
            self._finished = True
            logger.debug("End of database after %d entries", self.entries_decoded)
            raise StopIteration

        self.entries_decoded += 1
        return line

    def _read_header(self) -> bool:
        """
        Validate the header record.
        Returns False for an empty source (a database with no entries).
        """
        first = read_exact(self._stream, 1)
        if first is None:
            return False
        if first != b"\x00":
            raise InvalidDatabaseError(
                f"Invalid database file: header offset is {first[0]:#04x}, expected 0x00")

        label_len = read_count(self._stream)
        if label_len is None or label_len < 0:
            raise InvalidDatabaseError("Invalid database file: truncated header")
        label = read_exact(self._stream, label_len)
        if label is None:
            raise InvalidDatabaseError("Invalid database file: truncated header")
        if label != LABEL:
            raise InvalidDatabaseError(
                f"Invalid database file: label {label[:16]!r}, expected {LABEL!r}")
        return True


# ─── File helpers ───────────────────────────────────────────────────────────

def compress_lines(lines: Iterable[str], out_stream: BinaryIO) -> int:
    """Encode lines into out_stream. Returns the number of bytes written."""
    encoder = FrEncoder(lines)
    for chunk in encoder:
        out_stream.write(chunk)
    logger.debug("Encoded %d lines", encoder.lines_encoded)
    return encoder.bytes_encoded


def compress_file(in_path: str, out_path: str) -> int:
    """
    Compress a newline-separated UTF-8 path list into a database file.
    Returns the database size in bytes.
    """
    with open(in_path, "r", encoding="utf-8") as src, \
            open(out_path, "wb", buffering=_WRITE_BUFFER) as dst:
        written = compress_lines(src, dst)
    logger.info("Compressed %s -> %s (%d bytes)", in_path, out_path, written)
    return written


def decompress_file(in_path: str, out_path: str) -> int:
    """
    Expand a database file into a newline-separated UTF-8 text file.
    Returns the number of bytes written.
    """
    written = 0
    with open(in_path, "rb") as src, \
            open(out_path, "wb", buffering=_WRITE_BUFFER) as dst:
        for line in FrDecoder(src):
            data = line.encode("utf-8") + b"\n"
            dst.write(data)
            written += len(data)
    return written


def iter_database(path: str) -> Iterator[str]:
    """
    Yield every entry of the database at path.
    The file stays open only while the generator is alive; closing the
    generator early closes the file.
    """
    with open(path, "rb") as f:
        yield from FrDecoder(f)
