"""
KEFEX Variable Model
====================

This package provides the in-memory model of KEFEX variables:

- **datatypes**: the static table of the 22 KEFEX data types
- **variable**: TypedVariable, a typed variable backed by byte buffers
- **lists**: VariableList and VariableListCollection

Example:
    >>> from kefex_legacy.variables import DataType, VariableList, make_variable
    >>> lst = VariableList(name="Settings")
    >>> lst.set_num_defaults(2)
    >>> var = lst.add_variable(make_variable("Gain", DataType.SINT16))
    >>> var.num_defaults
    2
"""

from kefex_legacy.variables.datatypes import (
    DataType,
    TypeDescriptor,
    NUM_DATA_TYPES,
    descriptor,
    element_size,
    type_from_name,
    type_name,
)
from kefex_legacy.variables.variable import (
    Access,
    DefaultTransmission,
    MAX_NUM_LANGUAGES,
    NUM_ACCESS_GROUPS,
    SCALING_FACTOR_100_PERCENT,
    TransmissionType,
    TypedVariable,
    VariableClass,
    f64_from_int64_bits,
    int64_bits_from_f64,
    make_variable,
)
from kefex_legacy.variables.lists import (
    ListKind,
    MAX_LISTS,
    MAX_VARIABLES_PER_LIST,
    VariableList,
    VariableListCollection,
    pack_index,
    unpack_index,
)

__all__ = [
    # Data types
    "DataType",
    "TypeDescriptor",
    "NUM_DATA_TYPES",
    "descriptor",
    "element_size",
    "type_from_name",
    "type_name",
    # Variables
    "Access",
    "DefaultTransmission",
    "MAX_NUM_LANGUAGES",
    "NUM_ACCESS_GROUPS",
    "SCALING_FACTOR_100_PERCENT",
    "TransmissionType",
    "TypedVariable",
    "VariableClass",
    "f64_from_int64_bits",
    "int64_bits_from_f64",
    "make_variable",
    # Lists
    "ListKind",
    "MAX_LISTS",
    "MAX_VARIABLES_PER_LIST",
    "VariableList",
    "VariableListCollection",
    "pack_index",
    "unpack_index",
]
