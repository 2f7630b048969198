"""
LocateW Codec
=============
Public API for the front-coded path database.

Usage:
    from codec import FrEncoder, FrDecoder, compress_file, iter_database
    from codec import InvalidDatabaseError, CorruptEncodingError
"""

from codec.errors import (
    FrcodeError, InvalidDatabaseError, CorruptEncodingError,
    UnrepresentableLineError, FieldRangeError,
)
from codec.fields import encode_count, read_count, read_exact
from codec.frcode import (
    LABEL, HEADER, MAX_LINE_BYTES, CodecState, common_prefix_len,
    encode_record, decode_record, FrEncoder, FrDecoder,
    compress_lines, compress_file, decompress_file, iter_database,
)

__all__ = [
    "FrcodeError", "InvalidDatabaseError", "CorruptEncodingError",
    "UnrepresentableLineError", "FieldRangeError",
    "encode_count", "read_count", "read_exact",
    "LABEL", "HEADER", "MAX_LINE_BYTES", "CodecState", "common_prefix_len",
    "encode_record", "decode_record", "FrEncoder", "FrDecoder",
    "compress_lines", "compress_file", "decompress_file", "iter_database",
]
