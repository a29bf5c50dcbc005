"""
KEFEX Data Types
================

Static table of the 22 KEFEX data type descriptors. Every variable carries
one of these type tags; the descriptor tells whether values are arrays,
numeric or floating point, and which scalar type an array is built from.

Type Table
----------
    Tag  Name       Array  Numeric  Float  Element base
    ---  ---------  -----  -------  -----  ------------
      0  (none)       -       x       -    -
      1  UINT8        -       x       -    UINT8
      2  SINT8        -       x       -    SINT8
      3  SINT16       -       x       -    SINT16
      4  UINT16       -       x       -    UINT16
      5  SINT32       -       x       -    SINT32
      6  UINT32       -       x       -    UINT32
      7  STRING       x       -       -    SINT8   (ASINT8)
      8  (CRC)        -       x       -    -
      9  AOBYTE       x       x       -    UINT8   (AUINT8)
     10  FLOAT32      -       x       x    FLOAT32
     11  FLOAT64      -       x       x    FLOAT64
     12  ASINT16      x       x       -    SINT16
     13  AUINT16      x       x       -    UINT16
     14  ASINT32      x       x       -    SINT32
     15  AUINT32      x       x       -    UINT32
     16  AFLOAT32     x       x       x    FLOAT32
     17  AFLOAT64     x       x       x    FLOAT64
     18  SINT64       -       x       -    SINT64
     19  UINT64       -       x       -    UINT64
     20  ASINT64      x       x       -    SINT64
     21  AUINT64      x       x       -    UINT64

Tag 8 is a placeholder for CRC words in generated target code. It never
appears in loaded project data.

Copyright (c) 2026 kefex-legacy Contributors
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final, Optional


# =============================================================================
# Type Tags
# =============================================================================

class DataType(IntEnum):
    """KEFEX data type tags as stored in .ram files (TYPE_INDEX)."""
    NOVAR = 0
    UINT8 = 1
    SINT8 = 2
    SINT16 = 3
    UINT16 = 4
    SINT32 = 5
    UINT32 = 6
    ASINT8 = 7
    CRC = 8
    AUINT8 = 9
    FLOAT32 = 10
    FLOAT64 = 11
    ASINT16 = 12
    AUINT16 = 13
    ASINT32 = 14
    AUINT32 = 15
    AFLOAT32 = 16
    AFLOAT64 = 17
    SINT64 = 18
    UINT64 = 19
    ASINT64 = 20
    AUINT64 = 21


NUM_DATA_TYPES: Final[int] = 22

# Legacy aliases
STRING = DataType.ASINT8
AOBYTE = DataType.AUINT8

INVALID_TYPE_NAME: Final[str] = "INVALID"


# =============================================================================
# Type Descriptors
# =============================================================================

@dataclass(frozen=True)
class TypeDescriptor:
    """
    Immutable description of one KEFEX data type.

    Attributes:
        name: Display name ("" for NOVAR and CRC)
        is_array: Values are arrays of element_base_type
        is_numeric: Values can be read as numbers
        is_float: Values are IEEE754 floating point
        element_base_type: Scalar type of one element (the type itself for scalars)
    """
    name: str
    is_array: bool
    is_numeric: bool
    is_float: bool
    element_base_type: DataType

    @property
    def is_valid(self) -> bool:
        """True for types that may appear in project data."""
        return self.name != ""


_INVALID_DESCRIPTOR: Final[TypeDescriptor] = TypeDescriptor(
    "", False, False, False, DataType.NOVAR
)

_TYPE_TABLE: Final[tuple[TypeDescriptor, ...]] = (
    TypeDescriptor("", False, True, False, DataType.NOVAR),
    TypeDescriptor("UINT8", False, True, False, DataType.UINT8),
    TypeDescriptor("SINT8", False, True, False, DataType.SINT8),
    TypeDescriptor("SINT16", False, True, False, DataType.SINT16),
    TypeDescriptor("UINT16", False, True, False, DataType.UINT16),
    TypeDescriptor("SINT32", False, True, False, DataType.SINT32),
    TypeDescriptor("UINT32", False, True, False, DataType.UINT32),
    TypeDescriptor("STRING", True, False, False, DataType.SINT8),
    TypeDescriptor("", False, True, False, DataType.CRC),
    TypeDescriptor("AOBYTE", True, True, False, DataType.UINT8),
    TypeDescriptor("FLOAT32", False, True, True, DataType.FLOAT32),
    TypeDescriptor("FLOAT64", False, True, True, DataType.FLOAT64),
    TypeDescriptor("ASINT16", True, True, False, DataType.SINT16),
    TypeDescriptor("AUINT16", True, True, False, DataType.UINT16),
    TypeDescriptor("ASINT32", True, True, False, DataType.SINT32),
    TypeDescriptor("AUINT32", True, True, False, DataType.UINT32),
    TypeDescriptor("AFLOAT32", True, True, True, DataType.FLOAT32),
    TypeDescriptor("AFLOAT64", True, True, True, DataType.FLOAT64),
    TypeDescriptor("SINT64", False, True, False, DataType.SINT64),
    TypeDescriptor("UINT64", False, True, False, DataType.UINT64),
    TypeDescriptor("ASINT64", True, True, False, DataType.SINT64),
    TypeDescriptor("AUINT64", True, True, False, DataType.UINT64),
)

# Byte size of the scalar base types
_BASE_TYPE_SIZES: Final[dict[DataType, int]] = {
    DataType.UINT8: 1,
    DataType.SINT8: 1,
    DataType.SINT16: 2,
    DataType.UINT16: 2,
    DataType.CRC: 2,
    DataType.SINT32: 4,
    DataType.UINT32: 4,
    DataType.FLOAT32: 4,
    DataType.SINT64: 8,
    DataType.UINT64: 8,
    DataType.FLOAT64: 8,
}

_SIGNED_BASE_TYPES: Final[frozenset[DataType]] = frozenset(
    {DataType.SINT8, DataType.SINT16, DataType.SINT32, DataType.SINT64}
)


# =============================================================================
# Lookup Functions
# =============================================================================

def descriptor(tag: int) -> TypeDescriptor:
    """
    Get the descriptor of a type tag.

    Unknown or out-of-range tags resolve to an invalid descriptor
    (empty name, not numeric) instead of raising.
    """
    if 0 <= tag < NUM_DATA_TYPES:
        return _TYPE_TABLE[tag]
    return _INVALID_DESCRIPTOR


def type_name(tag: int) -> str:
    """Get the display name of a type tag, "INVALID" for NOVAR, CRC and unknown tags."""
    name = descriptor(tag).name
    return name if name else INVALID_TYPE_NAME


def type_from_name(name: str) -> Optional[DataType]:
    """
    Find a type tag by its display name or tag name (case-insensitive).

    Both "STRING" and "ASINT8" resolve to DataType.ASINT8. NOVAR and CRC
    are never returned.
    """
    key = name.strip().upper()
    for tag, desc in enumerate(_TYPE_TABLE):
        if desc.name and key in (desc.name, DataType(tag).name):
            return DataType(tag)
    return None


def element_size(tag: int) -> int:
    """
    Byte size of one element (arrays) or of the value (scalars).

    Returns 0 for NOVAR and unknown tags.
    """
    return _BASE_TYPE_SIZES.get(descriptor(tag).element_base_type, 0)


def is_signed(tag: int) -> bool:
    """True if the (element) base type is a signed integer type."""
    return descriptor(tag).element_base_type in _SIGNED_BASE_TYPES
