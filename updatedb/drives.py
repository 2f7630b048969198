"""
LocateW Drive Enumeration
=========================
Lists the fixed logical drives to index.

Windows: GetLogicalDrives() returns a bitmask (bit 0 = A:, bit 1 = B:, ...);
each present drive is checked with GetDriveTypeW() and only DRIVE_FIXED
volumes are kept. Other platforms index the filesystem root.
"""

import ctypes
import logging
import os
import string
import sys
from typing import Iterator, List

logger = logging.getLogger(__name__)

DRIVE_FIXED = 3
_MASK_BITS = 32


def drive_bits(mask: int) -> Iterator[bool]:
    """Yield the 32 bits of a drive mask, least significant first."""
    for bit in range(_MASK_BITS):
        yield mask & (1 << bit) != 0


def present_drives(mask: int) -> List[str]:
    """Drive roots ("C:\\") whose bit is set in mask."""
    return [
        f"{letter}:\\"
        for present, letter in zip(drive_bits(mask), string.ascii_uppercase)
        if present
    ]


def fixed_drives() -> List[str]:
    """Roots to index on this machine."""
    if sys.platform != "win32":
        return [os.sep]

    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
    mask = kernel32.GetLogicalDrives()
    if mask == 0:
        err = ctypes.get_last_error()
        raise OSError(err, f"GetLogicalDrives failed: {err}")

    drives = []
    for root in present_drives(mask):
        drive_type = kernel32.GetDriveTypeW(ctypes.c_wchar_p(root))
        if drive_type == DRIVE_FIXED:
            drives.append(root)
        else:
            logger.debug("Skipping %s (drive type %d)", root, drive_type)
    return drives
