"""
Datapool Output Model
=====================

The subset of the Datapool data model that the RAMView importer fills:
a Datapool holds lists, every list holds elements and named data sets,
every element holds typed content for min, max and each data set.

Content values are stored as Python numbers and are cast to the width of
the element type whenever they are written, so a value always fits the
type (integers wrap like a C cast, float32 values are rounded to single
precision).
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Union
import struct

from kefex_legacy.errors import InvalidArgumentError

Number = Union[int, float]


class DatapoolKind(Enum):
    """Kind of Datapool. The RAMView importer supports DIAG and NVM."""
    DIAG = "diag"
    NVM = "nvm"
    COM = "com"
    HALC = "halc"


class ElementType(IntEnum):
    """Scalar type of a Datapool element."""
    UINT8 = 0
    UINT16 = 1
    UINT32 = 2
    UINT64 = 3
    SINT8 = 4
    SINT16 = 5
    SINT32 = 6
    SINT64 = 7
    FLOAT32 = 8
    FLOAT64 = 9

    @property
    def size(self) -> int:
        """Byte size of one value."""
        return _TYPE_SIZES[self]

    @property
    def is_float(self) -> bool:
        return self in (ElementType.FLOAT32, ElementType.FLOAT64)


class ElementAccess(Enum):
    RO = "ro"
    RW = "rw"


_TYPE_SIZES = {
    ElementType.UINT8: 1,
    ElementType.SINT8: 1,
    ElementType.UINT16: 2,
    ElementType.SINT16: 2,
    ElementType.UINT32: 4,
    ElementType.SINT32: 4,
    ElementType.FLOAT32: 4,
    ElementType.UINT64: 8,
    ElementType.SINT64: 8,
    ElementType.FLOAT64: 8,
}

_SIGNED_TYPES = frozenset(
    {ElementType.SINT8, ElementType.SINT16, ElementType.SINT32, ElementType.SINT64}
)


def cast_value(element_type: ElementType, value: Number) -> Number:
    """Cast a value to the range and precision of an element type."""
    if element_type == ElementType.FLOAT32:
        return struct.unpack("<f", struct.pack("<f", float(value)))[0]
    if element_type == ElementType.FLOAT64:
        return float(value)
    bits = element_type.size * 8
    result = int(value) & ((1 << bits) - 1)
    if element_type in _SIGNED_TYPES and result >= 1 << (bits - 1):
        result -= 1 << bits
    return result


# =============================================================================
# Content
# =============================================================================

@dataclass
class DatapoolContent:
    """
    Typed value of an element: a scalar or an array of scalars.

    Attributes:
        type: Element type of every value
        array: True if the content is an array
        values: The values (exactly one for scalars)
    """
    type: ElementType = ElementType.UINT8
    array: bool = False
    values: list[Number] = field(default_factory=lambda: [0])

    def set_type(self, element_type: ElementType) -> None:
        self.type = element_type
        self.values = [cast_value(element_type, v) for v in self.values]

    def set_array(self, array: bool) -> None:
        """Switch between scalar and array; a scalar keeps the first value."""
        self.array = array
        if not array:
            self.values = self.values[:1] or [cast_value(self.type, 0)]

    def set_array_size(self, size: int) -> None:
        if len(self.values) > size:
            del self.values[size:]
        else:
            self.values.extend(cast_value(self.type, 0) for _ in range(size - len(self.values)))

    @property
    def array_size(self) -> int:
        return len(self.values) if self.array else 1

    def get_value(self) -> Number:
        return self.values[0]

    def set_value(self, value: Number) -> None:
        self.values[0] = cast_value(self.type, value)

    def get_array_element(self, index: int) -> Number:
        self._check_index(index)
        return self.values[index]

    def set_array_element(self, index: int, value: Number) -> None:
        self._check_index(index)
        self.values[index] = cast_value(self.type, value)

    def _check_index(self, index: int) -> None:
        if not self.array or not 0 <= index < len(self.values):
            raise InvalidArgumentError(
                f"Array index {index} out of range ({len(self.values)} elements)"
            )

    def to_dict(self) -> Any:
        return list(self.values) if self.array else self.values[0]


# =============================================================================
# Elements, Lists, Datapool
# =============================================================================

@dataclass
class DatapoolElement:
    """
    One Datapool element.

    The type and array shape of min, max and every data set value are
    kept in sync by set_type, set_array and set_array_size.
    """
    name: str = ""
    comment: str = ""
    type: ElementType = ElementType.UINT8
    array: bool = False
    min_value: DatapoolContent = field(default_factory=DatapoolContent)
    max_value: DatapoolContent = field(default_factory=DatapoolContent)
    data_set_values: list[DatapoolContent] = field(default_factory=list)
    factor: float = 1.0
    offset: float = 0.0
    unit: str = ""
    access: ElementAccess = ElementAccess.RO
    diag_event_call: bool = False

    def _contents(self) -> list[DatapoolContent]:
        return [self.min_value, self.max_value, *self.data_set_values]

    def set_type(self, element_type: ElementType) -> None:
        self.type = element_type
        for content in self._contents():
            content.set_type(element_type)

    def set_array(self, array: bool) -> None:
        self.array = array
        for content in self._contents():
            content.set_array(array)

    def set_array_size(self, size: int) -> None:
        for content in self._contents():
            content.set_array_size(size)

    @property
    def array_size(self) -> int:
        return self.min_value.array_size

    def set_data_set_count(self, count: int) -> None:
        """Add or drop data set values, new ones shaped like min."""
        if len(self.data_set_values) > count:
            del self.data_set_values[count:]
        while len(self.data_set_values) < count:
            self.data_set_values.append(DatapoolContent(
                self.type, self.array, [cast_value(self.type, 0)] * len(self.min_value.values)
            ))

    @property
    def size_bytes(self) -> int:
        """Bytes occupied by the element value."""
        return self.type.size * self.array_size

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "comment": self.comment,
            "type": self.type.name,
            "array": self.array,
            "array_size": self.array_size,
            "min": self.min_value.to_dict(),
            "max": self.max_value.to_dict(),
            "data_sets": [content.to_dict() for content in self.data_set_values],
            "factor": self.factor,
            "offset": self.offset,
            "unit": self.unit,
            "access": self.access.value,
            "event_call": self.diag_event_call,
        }


@dataclass
class DatapoolDataSet:
    name: str = ""
    comment: str = ""


@dataclass
class DatapoolList:
    """One Datapool list with its data sets and elements."""
    name: str = ""
    comment: str = ""
    data_sets: list[DatapoolDataSet] = field(default_factory=list)
    elements: list[DatapoolElement] = field(default_factory=list)
    nvm_crc_active: bool = False
    nvm_size: int = 0
    nvm_start_address: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "comment": self.comment,
            "data_sets": [data_set.name for data_set in self.data_sets],
            "nvm_crc_active": self.nvm_crc_active,
            "nvm_size": self.nvm_size,
            "elements": [element.to_dict() for element in self.elements],
        }


@dataclass
class Datapool:
    """
    Datapool filled by an import.

    Attributes:
        kind: DIAG or NVM (other kinds are rejected by the importer)
        name: Datapool name
        comment: Datapool comment
        version: Three version bytes (major, minor, release)
        lists: The lists
        nvm_size: Bytes occupied by all NVM lists (0 for DIAG)
    """
    kind: DatapoolKind = DatapoolKind.DIAG
    name: str = ""
    comment: str = ""
    version: list[int] = field(default_factory=lambda: [0, 0, 0])
    lists: list[DatapoolList] = field(default_factory=list)
    nvm_size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "comment": self.comment,
            "version": list(self.version),
            "nvm_size": self.nvm_size,
            "lists": [datapool_list.to_dict() for datapool_list in self.lists],
        }
