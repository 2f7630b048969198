"""
LocateW Count Fields
====================
Variable-width signed integer fields used for both the differential
offset and the suffix length of every record.

Field layout:
  [value: 1B signed]                    when -128 < value < 128
  [0x80] [value: 2B signed big-endian]  otherwise (up to ±32767)

0x80 is the escape byte. Read as a signed byte it is -128, which is why
-128 itself can only be stored in the escaped form.
"""

import struct
from typing import BinaryIO, Optional

from codec.errors import FieldRangeError

# ─── Constants ──────────────────────────────────────────────────────────────

ESCAPE = 0x80
FIELD_MIN = -32768
FIELD_MAX = 32767

_BYTE = struct.Struct(">b")
_SHORT = struct.Struct(">h")


# ─── Encode ─────────────────────────────────────────────────────────────────

def encode_count(value: int) -> bytes:
    """Encode one count field. Raises FieldRangeError outside int16."""
    if -128 < value < 128:
        return _BYTE.pack(value)
    if not FIELD_MIN <= value <= FIELD_MAX:
        raise FieldRangeError(f"Count {value} does not fit in a signed 16-bit field")
    return bytes((ESCAPE,)) + _SHORT.pack(value)


# ─── Decode ─────────────────────────────────────────────────────────────────

def read_exact(stream: BinaryIO, size: int) -> Optional[bytes]:
    """
    Read exactly size bytes. Returns None on a short read
    (the source ended before the field was complete).
    """
    if size == 0:
        return b""
    data = stream.read(size)
    # Raw (unbuffered) streams may return fewer bytes than asked for
    while data and len(data) < size:
        more = stream.read(size - len(data))
        if not more:
            break
        data += more
    if len(data) != size:
        return None
    return data


def read_count(stream: BinaryIO) -> Optional[int]:
    """Read one count field. Returns None at end of stream."""
    first = read_exact(stream, 1)
    if first is None:
        return None
    if first[0] != ESCAPE:
        return _BYTE.unpack(first)[0]
    wide = read_exact(stream, 2)
    if wide is None:
        return None
    return _SHORT.unpack(wide)[0]
