"""
CRC16-STW Implementation
========================

This module implements the 16 bit CRC shared by every KEFEX component:
variable and list definition CRCs and the checksums stamped into
.def/.ram text files all run through the same primitive.

Technical Details
-----------------
- Polynomial: x^16 + x^12 + x^5 + 1 (0x1021), processed MSB first
- No input/output reflection, no final XOR
- Default start value: 0x1D0F (the CCITT "augmented" start value that is
  also used by the KEFEX protocol and parameter set files)

With the default start value the check value over b"123456789" is 0xE5CC
(the catalogued CRC-16/AUG-CCITT result).

Usage
-----
    from kefex_legacy.crc import crc16_stw, CRC16_STW_START

    crc = crc16_stw(b"123456789")          # 0xE5CC
    crc = crc16_stw(b"more", initial=crc)  # continue a running CRC

Copyright (c) 2026 kefex-legacy Contributors
"""

import struct
from typing import Final

# =============================================================================
# CRC16-STW Constants
# =============================================================================

# Generator polynomial (CCITT)
CRC16_STW_POLYNOMIAL: Final[int] = 0x1021

# Start value used when no running CRC is supplied
CRC16_STW_START: Final[int] = 0x1D0F

# Mask for 16-bit values
CRC_MASK: Final[int] = 0xFFFF

# Check value over b"123456789" with the default start value
CRC16_STW_CHECK: Final[int] = 0xE5CC


# =============================================================================
# Lookup Table Generation
# =============================================================================

def _generate_crc_table() -> tuple[int, ...]:
    """
    Generate the 256-entry MSB-first lookup table for polynomial 0x1021.

    Returns:
        Tuple of 256 CRC values, one for each possible high byte.
    """
    table = []
    for byte_val in range(256):
        crc = byte_val << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ CRC16_STW_POLYNOMIAL) & CRC_MASK
            else:
                crc = (crc << 1) & CRC_MASK
        table.append(crc)
    return tuple(table)


CRC_TABLE: Final[tuple[int, ...]] = _generate_crc_table()


# =============================================================================
# CRC Calculation
# =============================================================================

def crc16_stw(data: bytes, initial: int = CRC16_STW_START) -> int:
    """
    Calculate the CRC16-STW checksum over data.

    Args:
        data: Input bytes
        initial: Running CRC value to continue from. Pass the result of a
                 previous call to process data in several chunks.

    Returns:
        16-bit CRC value (0x0000 to 0xFFFF).

    Example:
        >>> hex(crc16_stw(b"123456789"))
        '0xe5cc'
    """
    crc = initial & CRC_MASK
    for byte in data:
        crc = ((crc << 8) & CRC_MASK) ^ CRC_TABLE[((crc >> 8) ^ byte) & 0xFF]
    return crc


# =============================================================================
# Field Helpers
# =============================================================================
# The definition CRCs feed fixed-width little-endian integers and text
# fields into the running CRC. These helpers keep the packing in one place.

def crc_update_u8(crc: int, value: int) -> int:
    """Feed one unsigned byte into a running CRC."""
    return crc16_stw(bytes([value & 0xFF]), crc)


def crc_update_u16(crc: int, value: int) -> int:
    """Feed a little-endian u16 into a running CRC."""
    return crc16_stw(struct.pack("<H", value & 0xFFFF), crc)


def crc_update_u32(crc: int, value: int) -> int:
    """Feed a little-endian u32 into a running CRC."""
    return crc16_stw(struct.pack("<I", value & 0xFFFFFFFF), crc)


def crc_update_s32(crc: int, value: int) -> int:
    """Feed a little-endian i32 into a running CRC."""
    return crc16_stw(struct.pack("<i", value), crc)


def crc_update_text(crc: int, text: str, encoding: str = "cp1252") -> int:
    """
    Feed the characters of a string (without terminator) into a running CRC.

    Characters that cannot be encoded are replaced by '?'.
    """
    return crc16_stw(text.encode(encoding, errors="replace"), crc)


def verify_crc(data: bytes, expected_crc: int, initial: int = CRC16_STW_START) -> bool:
    """
    Verify that data matches an expected CRC value.

    Args:
        data: Data bytes to verify
        expected_crc: Expected CRC value
        initial: Start value

    Returns:
        True if the calculated CRC matches.
    """
    return crc16_stw(data, initial) == (expected_crc & CRC_MASK)
