"""
KEFEX Variable Lists
====================

A VariableList is an ordered list of TypedVariable objects plus list
metadata (RAM or EEPROM kind, checksum flag and address, name and the
number of default sets). A VariableListCollection holds all lists of one
device project plus the names of the default sets.

Default Set Lockstep
--------------------
The number of default sets is a list-level setting. The setter pushes or
pops default buffers on every member variable so that every variable of
a list always has exactly `num_defaults` default buffers.

Packed Variable Index
---------------------
A (list, variable) pair is addressed elsewhere by one 16 bit handle:

    index = (list << 10) | (variable & 0x3FF)

with up to 64 lists and 1024 variables per list.

Copyright (c) 2026 kefex-legacy Contributors
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Final, Iterator, Optional
import logging

from kefex_legacy.crc import CRC16_STW_START, crc_update_text, crc_update_u8, crc_update_u32
from kefex_legacy.errors import InvalidArgumentError
from kefex_legacy.variables.variable import TypedVariable

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MAX_LISTS: Final[int] = 64
MAX_VARIABLES_PER_LIST: Final[int] = 1024

# Default checksum address of checksummed lists
DEFAULT_CHECKSUM_ADDRESS: Final[int] = 1024


class ListKind(IntEnum):
    """Storage kind of a variable list (VARIABLETYPE in .ram files)."""
    RAM = 0
    EEPROM = 1


# =============================================================================
# Packed Index
# =============================================================================

def pack_index(list_index: int, variable_index: int) -> int:
    """
    Pack a list and variable index into one 16 bit handle.

    Raises:
        InvalidArgumentError: If an index exceeds its bit field
    """
    if not 0 <= list_index < MAX_LISTS:
        raise InvalidArgumentError(f"List index {list_index} out of range (0..{MAX_LISTS - 1})")
    if not 0 <= variable_index < MAX_VARIABLES_PER_LIST:
        raise InvalidArgumentError(
            f"Variable index {variable_index} out of range (0..{MAX_VARIABLES_PER_LIST - 1})"
        )
    return (list_index << 10) | (variable_index & 0x3FF)


def unpack_index(index: int) -> tuple[int, int]:
    """Split a packed handle into (list_index, variable_index)."""
    return (index >> 10) & 0x3F, index & 0x3FF


# =============================================================================
# Variable List
# =============================================================================

@dataclass
class VariableList:
    """
    One list of variables, loaded from one .ram file.

    Attributes:
        name: List name
        kind: RAM or EEPROM list
        checksummed: The list is protected by a CRC on the target
        checksum_address: Target address of that CRC
        variables: The variables in list order
        last_server_crc: CRC last reported by the target (runtime only)
    """
    name: str = ""
    kind: int = ListKind.RAM
    checksummed: bool = False
    checksum_address: int = DEFAULT_CHECKSUM_ADDRESS
    variables: list[TypedVariable] = field(default_factory=list)
    last_server_crc: int = field(default=0, compare=False)
    _num_defaults: int = field(default=0, repr=False)

    def __len__(self) -> int:
        return len(self.variables)

    def __iter__(self) -> Iterator[TypedVariable]:
        return iter(self.variables)

    @property
    def num_defaults(self) -> int:
        return self._num_defaults

    def set_num_defaults(self, count: int) -> None:
        """Set the number of default sets on the list and every variable."""
        if count == self._num_defaults:
            return
        for variable in self.variables:
            variable.set_num_defaults(count)
        self._num_defaults = count

    def add_variable(self, variable: TypedVariable) -> TypedVariable:
        """
        Append a variable, adapting its default sets to the list.

        Returns:
            The added variable
        """
        if len(self.variables) >= MAX_VARIABLES_PER_LIST:
            raise InvalidArgumentError(
                f"List \"{self.name}\" cannot hold more than {MAX_VARIABLES_PER_LIST} variables"
            )
        variable.set_num_defaults(self._num_defaults)
        self.variables.append(variable)
        return variable

    def find_variable(self, name: str) -> Optional[int]:
        """Index of the variable with exactly this name, or None."""
        for index, variable in enumerate(self.variables):
            if variable.name == name:
                return index
        return None

    def find_variable_nocase(self, name: str) -> Optional[int]:
        """Index of the variable with this name ignoring case, or None."""
        key = name.upper()
        for index, variable in enumerate(self.variables):
            if variable.name.upper() == key:
                return index
        return None

    def clear_defaults(self) -> None:
        for variable in self.variables:
            variable.clear_all_defaults()

    def clear_values(self) -> None:
        for variable in self.variables:
            variable.clear_value()

    def calc_crc_over_list(self, crc: int = CRC16_STW_START, skip_values: bool = False) -> int:
        """
        Fold the list definition into a running CRC16-STW.

        Covers name, kind, checksum flag and address, then every
        variable in list order.
        """
        crc = crc_update_text(crc, self.name)
        crc = crc_update_u8(crc, self.kind)
        crc = crc_update_u8(crc, 1 if self.checksummed else 0)
        crc = crc_update_u32(crc, self.checksum_address)
        for variable in self.variables:
            crc = variable.calc_crc_over_entry(crc, skip_values)
        return crc


# =============================================================================
# Variable List Collection
# =============================================================================

@dataclass
class VariableListCollection:
    """
    All variable lists of one device project.

    Attributes:
        lists: Lists in list-index order
        default_set_names: Names of the default sets (may be shorter than
            the number of default sets of the lists)
        last_crc_over_crcs: CRC over all list CRCs last reported by the
            target (runtime only)
    """
    lists: list[VariableList] = field(default_factory=list)
    default_set_names: list[str] = field(default_factory=list)
    last_crc_over_crcs: int = field(default=0, compare=False)

    def __len__(self) -> int:
        return len(self.lists)

    def __iter__(self) -> Iterator[VariableList]:
        return iter(self.lists)

    def __getitem__(self, index: int) -> VariableList:
        return self.lists[index]

    def add_list(self, variable_list: VariableList) -> VariableList:
        if len(self.lists) >= MAX_LISTS:
            raise InvalidArgumentError(f"A project cannot hold more than {MAX_LISTS} lists")
        self.lists.append(variable_list)
        return variable_list

    @property
    def total_variables(self) -> int:
        return sum(len(variable_list) for variable_list in self.lists)

    # =========================================================================
    # Lookup
    # =========================================================================

    def find_list(self, name: str) -> Optional[int]:
        """Index of the list with exactly this name, or None."""
        for index, variable_list in enumerate(self.lists):
            if variable_list.name == name:
                return index
        return None

    def find_list_nocase(self, name: str) -> Optional[int]:
        """Index of the list with this name ignoring case, or None."""
        key = name.upper()
        for index, variable_list in enumerate(self.lists):
            if variable_list.name.upper() == key:
                return index
        return None

    def find_variable(self, list_name: str, variable_name: str) -> Optional[int]:
        """
        Find a variable by list and variable name (case-sensitive).

        Returns:
            The packed index of the variable, or None if not found
        """
        list_index = self.find_list(list_name)
        if list_index is None:
            return None
        variable_index = self.lists[list_index].find_variable(variable_name)
        if variable_index is None:
            return None
        return pack_index(list_index, variable_index)

    def get_variable(self, index: int) -> TypedVariable:
        """
        Get a variable by packed index.

        Raises:
            InvalidArgumentError: If the index does not address a variable
        """
        list_index, variable_index = unpack_index(index)
        if list_index >= len(self.lists) or variable_index >= len(self.lists[list_index]):
            raise InvalidArgumentError(
                f"Packed index 0x{index:04X} does not address a variable "
                f"(list {list_index}, variable {variable_index})"
            )
        return self.lists[list_index].variables[variable_index]

    def iter_variables(self) -> Iterator[tuple[int, TypedVariable]]:
        """Yield (packed_index, variable) for every variable of every list."""
        for list_index, variable_list in enumerate(self.lists):
            for variable_index, variable in enumerate(variable_list.variables):
                yield pack_index(list_index, variable_index), variable

    # =========================================================================
    # Bulk Operations
    # =========================================================================

    def clear_defaults(self) -> None:
        """Zero every default set of every variable."""
        for variable_list in self.lists:
            variable_list.clear_defaults()

    def clear_values(self) -> None:
        """Zero the current value of every variable."""
        for variable_list in self.lists:
            variable_list.clear_values()

    def default_set_name(self, index: int) -> str:
        """Name of a default set, "DEFAULT_<index>" if it has no name."""
        if 0 <= index < len(self.default_set_names):
            return self.default_set_names[index]
        return f"DEFAULT_{index}"

    def calc_crc_over_lists(self, crc: int = CRC16_STW_START, skip_values: bool = True) -> int:
        """Fold every list definition into a running CRC16-STW, in list order."""
        for variable_list in self.lists:
            crc = variable_list.calc_crc_over_list(crc, skip_values)
        logger.debug(f"CRC over {len(self.lists)} lists: 0x{crc:04X}")
        return crc
