"""
LocateW Codec Errors
====================
Typed failures raised by the front-coding codec.

  FrcodeError                 base class
  ├── InvalidDatabaseError    header record missing, truncated or mislabelled
  ├── CorruptEncodingError    entry decodes to invalid UTF-8 / bad prefix
  ├── UnrepresentableLineError  line cannot be written (too long, newline)
  └── FieldRangeError         count does not fit in a signed 16-bit field

End of stream (clean or mid-record) is never an error.
"""


class FrcodeError(Exception):
    """Base class for all codec failures."""
    pass


class InvalidDatabaseError(FrcodeError):
    """Raised when the source does not start with a valid LOCATEW header."""
    pass


class CorruptEncodingError(FrcodeError):
    """
    Raised when an entry record cannot be turned back into text.
    The underlying UnicodeDecodeError, if any, is chained as __cause__.
    """

    def __init__(self, message: str, entry_index: int = -1):
        super().__init__(message)
        self.entry_index = entry_index


class UnrepresentableLineError(FrcodeError, ValueError):
    """Raised when a line cannot be encoded without truncation."""
    pass


class FieldRangeError(FrcodeError, ValueError):
    """Raised when a count does not fit the 1- or 3-byte field grammar."""
    pass
