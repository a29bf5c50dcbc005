"""
KEFEX Typed Variable
====================

A TypedVariable is one named, typed KEFEX variable backed by raw byte
buffers: the current value, the minimum, the maximum and one buffer per
default set. All buffers always have exactly `size` bytes.

Byte Layout
-----------
All multi-byte values are little-endian. Numeric writes are driven by
the buffer size (1, 2, 4 or 8 bytes map to u8/u16/u32/u64); any other
size silently performs no write. Numeric reads are driven by the type
tag, with sign extension for the signed types. Floats reinterpret the
32 or 64 bit integer pattern as IEEE754.

Array variables address element i at byte offset i * element_size, where
the element size comes from the array's base type. Accessing an element
beyond the buffer raises InvalidArgumentError.

Access Rights
-------------
Each variable defines one permission per access group (10 groups). The
effective access for a caller is the best permission over all groups
the caller belongs to, ranked INVISIBLE < RO < WO < RW.

Usage
-----
    >>> var = TypedVariable(name="Speed", data_type=DataType.UINT16)
    >>> var.set_size(2)
    >>> var.set_numeric_value(1234)
    >>> var.get_numeric_value()
    1234

Copyright (c) 2026 kefex-legacy Contributors
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Final, Optional, Sequence
import math
import struct
import sys

from kefex_legacy.crc import (
    crc16_stw,
    crc_update_s32,
    crc_update_text,
    crc_update_u8,
    crc_update_u16,
    crc_update_u32,
)
from kefex_legacy.errors import InvalidArgumentError
from kefex_legacy.variables.datatypes import (
    DataType,
    TypeDescriptor,
    descriptor,
    element_size,
    type_name,
)


# =============================================================================
# Constants
# =============================================================================

NUM_ACCESS_GROUPS: Final[int] = 10
MAX_NUM_LANGUAGES: Final[int] = 5

# Scaling factor value that represents a factor of 1.0 (100%)
SCALING_FACTOR_100_PERCENT: Final[int] = 10000

TEXT_ENCODING: Final[str] = "cp1252"

FLOAT32_MAX: Final[float] = 3.4028234663852886e38


class Access(IntEnum):
    """Access permission of one access group."""
    INVISIBLE = 0
    RO = 1
    WO = 2
    RW = 3
    INVALID = 0xFF


class TransmissionType(IntEnum):
    """Default transmission type used when a variable is polled cyclically."""
    SRR = 0       # single request/response
    TCRR = 1      # timer triggered cyclic
    ECRR = 2      # change triggered cyclic
    TCRRTS = 3    # timer triggered cyclic with timestamp


class VariableClass(IntEnum):
    """Matlab/Simulink class of a variable."""
    SIGNAL = 0
    PARAMETER = 1


@dataclass
class DefaultTransmission:
    """Default transmission settings of a variable."""
    type: TransmissionType = TransmissionType.SRR
    interval: int = 0
    lower_hysteresis: int = 0
    upper_hysteresis: int = 0


# =============================================================================
# Byte Packing Helpers
# =============================================================================
# These are the only places that reinterpret integer bit patterns as floats.

# Read format by type tag (scalar or array base type)
_READ_FORMATS: Final[dict[int, str]] = {
    DataType.UINT8: "<B",
    DataType.SINT8: "<b",
    DataType.UINT16: "<H",
    DataType.SINT16: "<h",
    DataType.SINT32: "<i",
    DataType.UINT32: "<I",
    DataType.FLOAT32: "<I",
    DataType.SINT64: "<q",
    # 64 bit unsigned patterns are returned as signed int64
    DataType.UINT64: "<q",
    DataType.FLOAT64: "<q",
}

# Write format by byte size
_WRITE_FORMATS: Final[dict[int, tuple[str, int]]] = {
    1: ("<B", 0xFF),
    2: ("<H", 0xFFFF),
    4: ("<I", 0xFFFFFFFF),
    8: ("<Q", 0xFFFFFFFFFFFFFFFF),
}


def read_numeric(tag: int, data: Sequence[int], offset: int = 0) -> int:
    """
    Read a numeric value of type `tag` from data at offset.

    Returns 0 for non-numeric tags or when the buffer is too short.
    """
    fmt = _READ_FORMATS.get(tag)
    if fmt is None:
        return 0
    width = struct.calcsize(fmt)
    if offset + width > len(data):
        return 0
    return struct.unpack_from(fmt, bytes(data[offset:offset + width]))[0]


def write_numeric(size: int, data: bytearray, value: int, offset: int = 0) -> None:
    """
    Write value as a little-endian integer of `size` bytes.

    Sizes other than 1, 2, 4 and 8 leave the buffer untouched.
    """
    entry = _WRITE_FORMATS.get(size)
    if entry is None or offset + size > len(data):
        return
    fmt, mask = entry
    struct.pack_into(fmt, data, offset, value & mask)


def f32_to_bytes(value: float) -> bytes:
    """Pack a float as IEEE754 single precision, saturating to +-inf."""
    try:
        return struct.pack("<f", value)
    except OverflowError:
        return struct.pack("<f", math.copysign(math.inf, value))


def read_float(tag: int, data: Sequence[int], offset: int = 0) -> float:
    """
    Read a FLOAT32 or FLOAT64 value from data at offset.

    Returns 0.0 for other tags or when the buffer is too short.
    """
    if tag == DataType.FLOAT32 and offset + 4 <= len(data):
        return struct.unpack("<f", bytes(data[offset:offset + 4]))[0]
    if tag == DataType.FLOAT64 and offset + 8 <= len(data):
        return struct.unpack("<d", bytes(data[offset:offset + 8]))[0]
    return 0.0


def write_float(tag: int, data: bytearray, value: float, offset: int = 0) -> None:
    """Write a FLOAT32 or FLOAT64 value; other tags leave the buffer untouched."""
    if tag == DataType.FLOAT32 and offset + 4 <= len(data):
        data[offset:offset + 4] = f32_to_bytes(value)
    elif tag == DataType.FLOAT64 and offset + 8 <= len(data):
        data[offset:offset + 8] = struct.pack("<d", value)


def f64_from_int64_bits(value: int) -> float:
    """Reinterpret a signed int64 bit pattern as a float64."""
    return struct.unpack("<d", struct.pack("<Q", value & 0xFFFFFFFFFFFFFFFF))[0]


def int64_bits_from_f64(value: float) -> int:
    """Reinterpret a float64 as a signed int64 bit pattern."""
    return struct.unpack("<q", struct.pack("<d", value))[0]


def _read_string(data: Sequence[int]) -> str:
    """Text up to the first NUL (or the whole buffer)."""
    raw = bytes(data)
    end = raw.find(b"\x00")
    if end >= 0:
        raw = raw[:end]
    return raw.decode(TEXT_ENCODING, errors="replace")


def _write_string(data: bytearray, text: str) -> None:
    """
    Store text in a fixed size buffer.

    Shorter text is zero-terminated and the rest of the buffer cleared.
    Text that does not fit (including the terminator) is copied raw,
    truncated to exactly the buffer size, without terminator.
    """
    raw = text.encode(TEXT_ENCODING, errors="replace")
    size = len(data)
    if len(raw) < size:
        data[:] = bytes(size)
        data[:len(raw)] = raw
    else:
        data[:] = raw[:size]


def _is_value_in_range(value: float, minimum: float, maximum: float) -> bool:
    """Range check for floats; NaN and infinity are always out of range."""
    if math.isnan(value) or math.isinf(value):
        return False
    return minimum <= value <= maximum


# Full value ranges used by set_min_max_to_maximum
_INTEGER_RANGES: Final[dict[int, tuple[int, int]]] = {
    DataType.UINT8: (0, 0xFF),
    DataType.SINT8: (-0x80, 0x7F),
    DataType.UINT16: (0, 0xFFFF),
    DataType.SINT16: (-0x8000, 0x7FFF),
    DataType.UINT32: (0, 0xFFFFFFFF),
    DataType.SINT32: (-0x80000000, 0x7FFFFFFF),
    DataType.SINT64: (-0x8000000000000000, 0x7FFFFFFFFFFFFFFF),
    DataType.UINT64: (0, 0xFFFFFFFFFFFFFFFF),
}

_FLOAT_RANGES: Final[dict[int, tuple[float, float]]] = {
    DataType.FLOAT32: (-FLOAT32_MAX, FLOAT32_MAX),
    DataType.FLOAT64: (-sys.float_info.max, sys.float_info.max),
}


# =============================================================================
# Typed Variable
# =============================================================================

@dataclass
class TypedVariable:
    """
    One KEFEX variable with its definition, default sets and runtime state.

    The type tag and the size must be set before any value is accessed.
    Changing the size resizes every buffer and zeroes the value.

    Attributes:
        name: Variable name (unique within its list)
        data_type: Type tag (see DataType)
        address: Target address of the variable
        unit: Physical unit text
        comments: One comment per language (5 languages)
        var_class: Matlab/Simulink class (see VariableClass)
        access: Permission per access group (see Access)
        location_ram: True for RAM variables, False for function calls
        transmission: Default transmission settings
        scaling_factor: Fixed point factor, 10000 represents 1.0
        scaling_digits: Number of decimal places for display

    Transient (runtime) fields are not part of the definition and are
    ignored by the definition CRC.
    """
    name: str = ""
    data_type: int = DataType.NOVAR
    address: int = 0
    unit: str = ""
    comments: list[str] = field(default_factory=lambda: [""] * MAX_NUM_LANGUAGES)
    var_class: int = VariableClass.SIGNAL
    access: list[int] = field(default_factory=lambda: [Access.INVALID] * NUM_ACCESS_GROUPS)
    location_ram: bool = True
    transmission: DefaultTransmission = field(default_factory=DefaultTransmission)
    scaling_factor: int = SCALING_FACTOR_100_PERCENT
    scaling_digits: int = 2

    # Byte buffers (always len == size)
    _value: bytearray = field(default_factory=bytearray, repr=False)
    _min: bytearray = field(default_factory=bytearray, repr=False)
    _max: bytearray = field(default_factory=bytearray, repr=False)
    _defaults: list[bytearray] = field(default_factory=list, repr=False)

    # Transient runtime state
    current_value_valid: bool = field(default=False, repr=False, compare=False)
    changed: bool = field(default=False, repr=False, compare=False)
    timestamped: bool = field(default=False, repr=False, compare=False)
    timestamp: int = field(default=0, repr=False, compare=False)
    cyclic_active: bool = field(default=False, repr=False, compare=False)
    _effective_access: int = field(default=Access.INVALID, repr=False, compare=False)

    # =========================================================================
    # Type Information
    # =========================================================================

    @property
    def type_descriptor(self) -> TypeDescriptor:
        return descriptor(self.data_type)

    def is_numeric(self) -> bool:
        """True for numeric scalar types."""
        desc = self.type_descriptor
        return desc.is_numeric and not desc.is_array

    def is_array(self) -> bool:
        return self.type_descriptor.is_array

    def is_float(self) -> bool:
        return self.type_descriptor.is_float

    def is_binary_array(self) -> bool:
        """True for numeric array types (every array type except STRING)."""
        desc = self.type_descriptor
        return desc.is_array and desc.is_numeric

    def get_type_name(self) -> str:
        return type_name(self.data_type)

    @property
    def size_of_array_element(self) -> int:
        """Byte size of one array element, 0 for scalar types."""
        if not self.is_array():
            return 0
        return element_size(self.data_type)

    @property
    def num_array_elements(self) -> int:
        """Number of array elements, 0 for scalar types."""
        element = self.size_of_array_element
        if element == 0:
            return 0
        return self.size // element

    # =========================================================================
    # Buffers
    # =========================================================================

    @property
    def size(self) -> int:
        return len(self._value)

    @property
    def value(self) -> bytearray:
        """The current value buffer (mutable, fixed length)."""
        return self._value

    @property
    def min_value(self) -> bytearray:
        return self._min

    @property
    def max_value(self) -> bytearray:
        return self._max

    @property
    def defaults(self) -> list[bytearray]:
        """Default set buffers (mutate content only, not the list)."""
        return self._defaults

    @property
    def num_defaults(self) -> int:
        return len(self._defaults)

    def set_size(self, size: int) -> None:
        """
        Resize the value, min, max and every default buffer to `size` bytes.

        Existing min/max/default content is kept (truncated or zero-padded).
        The value is cleared. Setting the current size is a no-op.
        """
        if size < 0:
            raise InvalidArgumentError(f"Invalid variable size: {size}")
        if size == self.size:
            return
        for index, buffer in enumerate(self._defaults):
            self._defaults[index] = _resized(buffer, size)
        self._min = _resized(self._min, size)
        self._max = _resized(self._max, size)
        self._value = bytearray(size)

    def set_num_defaults(self, count: int) -> None:
        """
        Set the number of default sets.

        Surplus sets are dropped; new sets are zero-filled. No-op if the
        count is unchanged.
        """
        if count < 0:
            raise InvalidArgumentError(f"Invalid number of default sets: {count}")
        current = len(self._defaults)
        if count < current:
            del self._defaults[count:]
        elif count > current:
            self._defaults.extend(bytearray(self.size) for _ in range(count - current))

    # =========================================================================
    # Current Value
    # =========================================================================

    def get_numeric_value(self) -> int:
        return read_numeric(self.data_type, self._value)

    def set_numeric_value(self, value: int) -> None:
        write_numeric(self.size, self._value, value)

    def get_float_value(self) -> float:
        return read_float(self.data_type, self._value)

    def set_float_value(self, value: float) -> None:
        write_float(self.data_type, self._value, value)

    def get_string_value(self) -> str:
        return _read_string(self._value)

    def set_string_value(self, text: str) -> None:
        _write_string(self._value, text)

    def get_numeric_value_from_array(self, array_index: int) -> int:
        offset = self._array_offset(array_index)
        return read_numeric(self._base_type(), self._value, offset)

    def set_numeric_value_in_array(self, array_index: int, value: int) -> None:
        offset = self._array_offset(array_index)
        write_numeric(self.size_of_array_element, self._value, value, offset)

    def get_float_value_from_array(self, array_index: int) -> float:
        offset = self._array_offset(array_index)
        return read_float(self._base_type(), self._value, offset)

    def set_float_value_in_array(self, array_index: int, value: float) -> None:
        offset = self._array_offset(array_index)
        write_float(self._base_type(), self._value, value, offset)

    def clear_value(self) -> None:
        self._value[:] = bytes(self.size)

    # =========================================================================
    # Minimum / Maximum
    # =========================================================================

    def get_numeric_min(self) -> int:
        return read_numeric(self.data_type, self._min)

    def get_numeric_max(self) -> int:
        return read_numeric(self.data_type, self._max)

    def set_numeric_min(self, value: int) -> None:
        write_numeric(self.size, self._min, value)

    def set_numeric_max(self, value: int) -> None:
        write_numeric(self.size, self._max, value)

    def get_float_min(self) -> float:
        return read_float(self.data_type, self._min)

    def get_float_max(self) -> float:
        return read_float(self.data_type, self._max)

    def set_float_min(self, value: float) -> None:
        write_float(self.data_type, self._min, value)

    def set_float_max(self, value: float) -> None:
        write_float(self.data_type, self._max, value)

    def get_numeric_min_from_array(self, array_index: int) -> int:
        return read_numeric(self._base_type(), self._min, self._array_offset(array_index))

    def get_numeric_max_from_array(self, array_index: int) -> int:
        return read_numeric(self._base_type(), self._max, self._array_offset(array_index))

    def set_numeric_min_in_array(self, array_index: int, value: int) -> None:
        offset = self._array_offset(array_index)
        write_numeric(self.size_of_array_element, self._min, value, offset)

    def set_numeric_max_in_array(self, array_index: int, value: int) -> None:
        offset = self._array_offset(array_index)
        write_numeric(self.size_of_array_element, self._max, value, offset)

    def get_float_min_from_array(self, array_index: int) -> float:
        return read_float(self._base_type(), self._min, self._array_offset(array_index))

    def get_float_max_from_array(self, array_index: int) -> float:
        return read_float(self._base_type(), self._max, self._array_offset(array_index))

    def set_float_min_in_array(self, array_index: int, value: float) -> None:
        write_float(self._base_type(), self._min, value, self._array_offset(array_index))

    def set_float_max_in_array(self, array_index: int, value: float) -> None:
        write_float(self._base_type(), self._max, value, self._array_offset(array_index))

    def set_min_max_to_maximum(self) -> None:
        """
        Set min/max to the full range of the type.

        For arrays every element gets the full range of the base type.

        Raises:
            InvalidArgumentError: For invalid types
        """
        desc = self.type_descriptor
        base = desc.element_base_type
        if base in _INTEGER_RANGES and desc.name:
            low, high = _INTEGER_RANGES[base]
            if desc.is_array:
                for index in range(self.num_array_elements):
                    self.set_numeric_min_in_array(index, low)
                    self.set_numeric_max_in_array(index, high)
            else:
                self.set_numeric_min(low)
                self.set_numeric_max(high)
        elif base in _FLOAT_RANGES:
            low_f, high_f = _FLOAT_RANGES[base]
            if desc.is_array:
                for index in range(self.num_array_elements):
                    self.set_float_min_in_array(index, low_f)
                    self.set_float_max_in_array(index, high_f)
            else:
                self.set_float_min(low_f)
                self.set_float_max(high_f)
        else:
            raise InvalidArgumentError(
                f"Cannot set maximum range for type {self.get_type_name()} "
                f"of variable \"{self.name}\""
            )

    def check_min_max(self) -> bool:
        """
        Check whether the value lies within min/max.

        Arrays are checked per element; the check fails on the first
        element out of range. Float NaN and infinity are always out of range.

        Returns:
            True if min <= value <= max (for every element)
        """
        desc = self.type_descriptor
        if desc.is_array:
            result = False
            for index in range(self.num_array_elements):
                if desc.is_float:
                    result = _is_value_in_range(
                        self.get_float_value_from_array(index),
                        self.get_float_min_from_array(index),
                        self.get_float_max_from_array(index),
                    )
                else:
                    value = self.get_numeric_value_from_array(index)
                    result = (self.get_numeric_min_from_array(index) <= value
                              <= self.get_numeric_max_from_array(index))
                if not result:
                    break
            return result
        if desc.is_float:
            return _is_value_in_range(
                self.get_float_value(), self.get_float_min(), self.get_float_max()
            )
        value = self.get_numeric_value()
        return self.get_numeric_min() <= value <= self.get_numeric_max()

    # =========================================================================
    # Default Sets
    # =========================================================================
    # Scalar accessors ignore invalid default-set indexes (reads return 0).
    # Array accessors raise InvalidArgumentError.

    def get_numeric_default(self, default_index: int) -> int:
        if not self._has_default(default_index):
            return 0
        return read_numeric(self.data_type, self._defaults[default_index])

    def set_numeric_default(self, default_index: int, value: int) -> None:
        if self._has_default(default_index):
            write_numeric(self.size, self._defaults[default_index], value)

    def get_float_default(self, default_index: int) -> float:
        if not self._has_default(default_index):
            return 0.0
        return read_float(self.data_type, self._defaults[default_index])

    def set_float_default(self, default_index: int, value: float) -> None:
        if self._has_default(default_index):
            write_float(self.data_type, self._defaults[default_index], value)

    def get_string_default(self, default_index: int) -> str:
        if not self._has_default(default_index):
            return ""
        return _read_string(self._defaults[default_index])

    def set_string_default(self, default_index: int, text: str) -> None:
        if self._has_default(default_index):
            _write_string(self._defaults[default_index], text)

    def get_numeric_default_from_array(self, array_index: int, default_index: int) -> int:
        offset = self._array_offset_default(default_index, array_index)
        return read_numeric(self._base_type(), self._defaults[default_index], offset)

    def set_numeric_default_in_array(self, array_index: int, value: int,
                                     default_index: int) -> None:
        offset = self._array_offset_default(default_index, array_index)
        write_numeric(self.size_of_array_element, self._defaults[default_index], value, offset)

    def get_float_default_from_array(self, array_index: int, default_index: int) -> float:
        offset = self._array_offset_default(default_index, array_index)
        return read_float(self._base_type(), self._defaults[default_index], offset)

    def set_float_default_in_array(self, array_index: int, value: float,
                                   default_index: int) -> None:
        offset = self._array_offset_default(default_index, array_index)
        write_float(self._base_type(), self._defaults[default_index], value, offset)

    def clear_default(self, default_index: int) -> None:
        if self._has_default(default_index):
            self._defaults[default_index][:] = bytes(self.size)

    def clear_all_defaults(self) -> None:
        for index in range(self.num_defaults):
            self.clear_default(index)

    def copy_default_to_value(self, default_index: int) -> None:
        if self._has_default(default_index):
            self._value[:] = self._defaults[default_index]

    def copy_value_to_default(self, default_index: int) -> None:
        if self._has_default(default_index):
            self._defaults[default_index][:] = self._value

    def default_matches_value(self, default_index: int) -> bool:
        if not self._has_default(default_index):
            return False
        return self._defaults[default_index] == self._value

    # =========================================================================
    # Access Rights
    # =========================================================================

    @property
    def effective_access(self) -> int:
        """Access of the current caller as computed by recalc_effective_access."""
        return self._effective_access

    def recalc_effective_access(self, group_membership: Sequence[bool]) -> None:
        """
        Recalculate the effective access for a caller.

        Args:
            group_membership: One flag per access group; True if the caller
                belongs to that group
        """
        result = Access.INVISIBLE
        for group in range(NUM_ACCESS_GROUPS):
            if group >= len(group_membership) or not group_membership[group]:
                continue
            permission = self.access[group]
            if permission == Access.RW:
                result = Access.RW
                break
            if permission == Access.WO:
                result = Access.WO
            elif permission == Access.RO and result != Access.WO:
                result = Access.RO
        self._effective_access = result

    def is_readable(self) -> bool:
        return self._effective_access in (Access.RO, Access.RW)

    def is_writeable(self) -> bool:
        return self._effective_access in (Access.WO, Access.RW)

    # =========================================================================
    # Definition CRC
    # =========================================================================

    def calc_crc_over_entry(self, crc: int, skip_value: bool = False) -> int:
        """
        Fold the variable definition into a running CRC16-STW.

        Args:
            crc: Running CRC value
            skip_value: Leave the current value out so that the CRC only
                reflects the definition

        Returns:
            The updated CRC
        """
        crc = crc_update_text(crc, self.name)
        crc = crc_update_u32(crc, self.address)
        crc = crc_update_u32(crc, self.size)
        crc = crc_update_u8(crc, self.data_type)
        crc = crc16_stw(bytes(self._min), crc)
        crc = crc16_stw(bytes(self._max), crc)
        crc = crc16_stw(bytes(a & 0xFF for a in self.access), crc)
        for default in self._defaults:
            crc = crc16_stw(bytes(default), crc)
        if not skip_value:
            crc = crc16_stw(bytes(self._value), crc)
        crc = crc_update_s32(crc, self.scaling_factor)
        crc = crc_update_u8(crc, self.scaling_digits)
        crc = crc_update_text(crc, self.unit)
        for comment in self.comments:
            crc = crc_update_text(crc, comment)
        crc = crc_update_u8(crc, 1 if self.location_ram else 0)
        crc = crc_update_u32(crc, self.transmission.type)
        crc = crc_update_u16(crc, self.transmission.interval)
        crc = crc_update_u32(crc, self.transmission.lower_hysteresis)
        crc = crc_update_u32(crc, self.transmission.upper_hysteresis)
        crc = crc_update_u8(crc, self.var_class)
        return crc

    # =========================================================================
    # Display
    # =========================================================================

    def value_as_string(self, as_hex: bool = False, leading_zeroes: bool = False) -> str:
        """Current value as display text (see _format_buffer)."""
        return self._format_buffer(self._value, as_hex, leading_zeroes)

    def default_as_string(self, default_index: int, as_hex: bool = False,
                          leading_zeroes: bool = False) -> str:
        """Default value as display text, "" for an invalid default-set index."""
        if not self._has_default(default_index):
            return ""
        return self._format_buffer(self._defaults[default_index], as_hex, leading_zeroes)

    def _format_buffer(self, data: bytearray, as_hex: bool, leading_zeroes: bool) -> str:
        """
        Format a buffer according to the variable type.

        Integers are shown in decimal or as (optionally zero padded) hex,
        floats with scaling_digits decimal places, STRING as text. Numeric
        arrays are shown as "N/A".
        """
        desc = self.type_descriptor
        if self.data_type == DataType.ASINT8:
            return _read_string(data)
        if desc.is_array:
            return "N/A"
        if desc.is_float:
            return f"{read_float(self.data_type, data):.{self.scaling_digits}f}"
        if not desc.name:
            return ""
        number = read_numeric(self.data_type, data)
        if not as_hex:
            return str(number)
        digits = f"{abs(number):X}"
        if leading_zeroes:
            digits = digits.zfill(self.size * 2)
        sign = "-" if number < 0 else ""
        return f"{sign}0x{digits}"

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _base_type(self) -> int:
        return self.type_descriptor.element_base_type

    def _has_default(self, default_index: int) -> bool:
        return 0 <= default_index < len(self._defaults)

    def _array_offset(self, array_index: int) -> int:
        element = self.size_of_array_element
        if element == 0:
            raise InvalidArgumentError(
                f"Variable \"{self.name}\" is not an array (type {self.get_type_name()})"
            )
        offset = array_index * element
        if array_index < 0 or offset + element > self.size:
            raise InvalidArgumentError(
                f"Array index {array_index} out of range for variable "
                f"\"{self.name}\" ({self.num_array_elements} elements)"
            )
        return offset

    def _array_offset_default(self, default_index: int, array_index: int) -> int:
        if not self._has_default(default_index):
            raise InvalidArgumentError(
                f"Invalid default set index {default_index} for variable \"{self.name}\""
            )
        return self._array_offset(array_index)


def _resized(buffer: bytearray, size: int) -> bytearray:
    """Copy of buffer truncated or zero-padded to size."""
    if len(buffer) >= size:
        return bytearray(buffer[:size])
    return bytearray(buffer) + bytearray(size - len(buffer))


def make_variable(name: str, data_type: int, size: Optional[int] = None,
                  num_defaults: int = 1) -> TypedVariable:
    """
    Create a variable with type, size and default sets set up.

    Args:
        name: Variable name
        data_type: Type tag
        size: Byte size (defaults to the scalar size of the type)
        num_defaults: Number of default sets

    Example:
        >>> var = make_variable("Counter", DataType.UINT32)
        >>> var.size
        4
    """
    var = TypedVariable(name=name, data_type=data_type)
    var.set_size(element_size(data_type) if size is None else size)
    var.set_num_defaults(num_defaults)
    return var
