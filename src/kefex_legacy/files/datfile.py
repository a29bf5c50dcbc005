"""
RAMView Default Value Files (.dat)
==================================

A .dat file holds the default values of every variable of a RAMView
project. It is a zlib compressed binary file, little-endian throughout.

File Layout
-----------
    Offset  Size  Description
    ------  ----  -----------
    0       4     Uncompressed payload length (u32)
    4       ...   zlib compressed payload

Payload Layout
--------------
Block 0x0100 (mandatory, always first, not sized):

    u16     block id 0x0100
    str     device name
    u16     number of lists
    per list:
        str     list name
        u16     number of variables
        per variable:
            str     variable name
            u32     size in bytes
            bytes   value of default set 0

Optional trailing blocks (sized):

    u16     block id
    u32     block size in bytes
    bytes   block content

Block 0x0101 carries the values of additional default sets:

    u16     number of default sets N (including set 0)
    str     N default set names
    u16     number of lists (must match block 0x0100)
    per list:
        u16     number of variables (must match block 0x0100)
        per variable:
            u32     size in bytes
            bytes   N - 1 values (default sets 1 .. N-1)

Strings are a u16 length followed by the text bytes (no terminator).
Unknown trailing blocks are skipped.

Matching
--------
Lists and variables are matched by name ignoring case. Names that are
not found in the project are counted; a partial match is reported with a
PartialMatchWarning and does not abort the load. At most the size of the
destination buffer is copied.

Copyright (c) 2026 kefex-legacy Contributors
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Optional, Union
import logging
import struct
import warnings
import zlib

from kefex_legacy.config import DEFAULT_CONFIG, ImportConfig
from kefex_legacy.errors import (
    DeviceMismatchError,
    FileAccessError,
    FormatInvalidError,
    InconsistentError,
    KefexError,
    PartialMatchWarning,
    ProjectFileNotFoundError,
    ResourceExhaustedError,
)
from kefex_legacy.variables.lists import VariableListCollection
from kefex_legacy.variables.variable import TypedVariable

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DAT_FILE_EXTENSION: Final[str] = ".dat"

BLOCK_ID_VALUES: Final[int] = 0x0100
BLOCK_ID_DEFAULT_SETS: Final[int] = 0x0101

# Length prefix of the compressed file
HEADER_SIZE: Final[int] = 4

# Block id (u16) + block size (u32) of trailing blocks
BLOCK_HEADER_SIZE: Final[int] = 6


# =============================================================================
# Load Result
# =============================================================================

@dataclass
class DatLoadResult:
    """
    Outcome of loading a .dat file.

    Attributes:
        matched_variables: Variables whose default values were applied
        unmatched_lists: Lists in the file that are not in the project
        unmatched_variables: Variables in the file that are not in the project
        default_set_names: Default set names from block 0x0101 (empty if absent)
    """
    matched_variables: int = 0
    unmatched_lists: int = 0
    unmatched_variables: int = 0
    default_set_names: list[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        """True if some lists or variables of the file were not found."""
        return self.unmatched_lists > 0 or self.unmatched_variables > 0


# =============================================================================
# Payload Reader
# =============================================================================

class _PayloadReader:
    """Sequential little-endian reader over the decompressed payload."""

    def __init__(self, data: bytes, encoding: str):
        self.data = data
        self.offset = 0
        self.encoding = encoding

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, count: int) -> bytes:
        if count > self.remaining:
            raise FormatInvalidError(
                f"Unexpected end of .dat payload at offset {self.offset} "
                f"({count} bytes needed, {self.remaining} left)"
            )
        chunk = self.data[self.offset:self.offset + count]
        self.offset += count
        return chunk

    def u16(self) -> int:
        return struct.unpack("<H", self.take(2))[0]

    def u32(self) -> int:
        return struct.unpack("<I", self.take(4))[0]

    def string(self) -> str:
        return self.take(self.u16()).decode(self.encoding)


def _pack_string(text: str, encoding: str) -> bytes:
    raw = text.encode(encoding, errors="replace")
    return struct.pack("<H", len(raw)) + raw


# =============================================================================
# Loading
# =============================================================================

def decompress_dat(raw: bytes, max_size: int) -> bytes:
    """
    Decompress the content of a .dat file.

    Raises:
        FormatInvalidError: If the file is truncated or corrupt
        ResourceExhaustedError: If the declared size exceeds max_size
    """
    if len(raw) < HEADER_SIZE:
        raise FormatInvalidError(f".dat file too small: {len(raw)} bytes")
    declared = struct.unpack_from("<I", raw, 0)[0]
    if declared > max_size:
        raise ResourceExhaustedError(
            f".dat payload of {declared} bytes exceeds the limit of {max_size} bytes"
        )
    payload = zlib.decompress(raw[HEADER_SIZE:])
    if len(payload) != declared:
        raise FormatInvalidError(
            f".dat payload length mismatch: declared {declared}, got {len(payload)}"
        )
    return payload


def parse_dat_payload(payload: bytes, device_name: str,
                      collection: VariableListCollection,
                      encoding: str = "cp1252") -> DatLoadResult:
    """
    Apply a decompressed .dat payload to the default sets of a collection.

    All default values of the collection are cleared once the file header
    has been accepted.

    Raises:
        FormatInvalidError: For an unexpected first block id or malformed data
        DeviceMismatchError: If the file was written for another device
        InconsistentError: If block 0x0101 does not match block 0x0100
    """
    reader = _PayloadReader(payload, encoding)
    result = DatLoadResult()

    block_id = reader.u16()
    if block_id != BLOCK_ID_VALUES:
        raise FormatInvalidError(f"Unexpected .dat block id 0x{block_id:04X}")
    file_device = reader.string()
    if file_device != device_name:
        raise DeviceMismatchError(
            device_name, file_device,
            f".dat file is for device \"{file_device}\", project device is \"{device_name}\""
        )

    collection.clear_defaults()

    # Destination of every variable in file order (None if not matched)
    targets: list[list[Optional[TypedVariable]]] = []
    for _ in range(reader.u16()):
        list_name = reader.string()
        list_index = collection.find_list_nocase(list_name)
        if list_index is None:
            logger.debug(f".dat list {list_name} not in project")
            result.unmatched_lists += 1
        list_targets: list[Optional[TypedVariable]] = []
        for _ in range(reader.u16()):
            variable_name = reader.string()
            data = reader.take(reader.u32())
            variable: Optional[TypedVariable] = None
            if list_index is not None:
                variable_list = collection[list_index]
                variable_index = variable_list.find_variable_nocase(variable_name)
                if variable_index is None:
                    logger.debug(f".dat variable {list_name}.{variable_name} not in project")
                    result.unmatched_variables += 1
                else:
                    variable = variable_list.variables[variable_index]
                    _copy_default(variable, 0, data)
                    result.matched_variables += 1
            list_targets.append(variable)
        targets.append(list_targets)

    while reader.remaining >= BLOCK_HEADER_SIZE:
        block_id = reader.u16()
        block = reader.take(reader.u32())
        if block_id == BLOCK_ID_DEFAULT_SETS:
            result.default_set_names = _parse_default_sets(
                _PayloadReader(block, encoding), targets
            )
        else:
            logger.debug(f"Skipping unknown .dat block 0x{block_id:04X} ({len(block)} bytes)")

    return result


def _parse_default_sets(reader: _PayloadReader,
                        targets: list[list[Optional[TypedVariable]]]) -> list[str]:
    num_sets = reader.u16()
    names = [reader.string() for _ in range(num_sets)]

    num_lists = reader.u16()
    if num_lists != len(targets):
        raise InconsistentError(
            f".dat block 0x0101 has {num_lists} lists, block 0x0100 has {len(targets)}"
        )
    for list_targets in targets:
        num_variables = reader.u16()
        if num_variables != len(list_targets):
            raise InconsistentError(
                f".dat block 0x0101 has {num_variables} variables in a list, "
                f"block 0x0100 has {len(list_targets)}"
            )
        for variable in list_targets:
            size = reader.u32()
            for default_index in range(1, num_sets):
                data = reader.take(size)
                if variable is not None:
                    _copy_default(variable, default_index, data)
    return names


def _copy_default(variable: TypedVariable, default_index: int, data: bytes) -> None:
    if default_index >= variable.num_defaults:
        return
    count = min(len(data), variable.size)
    variable.defaults[default_index][:count] = data[:count]


def load_dat(path: Union[str, Path], device_name: str,
             collection: VariableListCollection,
             config: Optional[ImportConfig] = None) -> DatLoadResult:
    """
    Load default values from a .dat file into a collection.

    Args:
        path: The .dat file
        device_name: Device name the file must declare
        collection: Lists to apply the default values to
        config: Import configuration (encoding and size limit)

    Returns:
        Match statistics. A partial match also issues a PartialMatchWarning.

    Raises:
        ProjectFileNotFoundError: If the file does not exist
        FormatInvalidError: If the file is malformed or for another device
        InconsistentError: If the blocks of the file do not match
        ResourceExhaustedError: If the declared size is beyond the limit
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    if not path.is_file():
        raise ProjectFileNotFoundError(f"File \"{path}\" does not exist.", path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FileAccessError(f"Cannot read \"{path}\": {e}", path) from e

    try:
        payload = decompress_dat(raw, config.max_dat_size)
        result = parse_dat_payload(payload, device_name, collection, config.text_encoding)
    except KefexError as e:
        logger.error(f"Could not load .dat file \"{path}\": {e}")
        raise
    except (struct.error, zlib.error, UnicodeDecodeError) as e:
        logger.error(f"Could not load .dat file \"{path}\": {e}")
        raise FormatInvalidError(f"Invalid .dat file \"{path}\": {e}") from e

    if result.partial:
        message = (f".dat file \"{path}\" did not contain default values for all variables "
                   f"({result.unmatched_lists} lists and {result.unmatched_variables} "
                   f"variables not found in project)")
        logger.warning(message)
        warnings.warn(message, PartialMatchWarning, stacklevel=2)
    logger.debug(f"Loaded {path.name}: {result.matched_variables} variables")
    return result


# =============================================================================
# Writing
# =============================================================================

def build_dat_payload(device_name: str, collection: VariableListCollection,
                      encoding: str = "cp1252") -> bytes:
    """
    Build the uncompressed .dat payload for a collection.

    Block 0x0101 is only written if a list has more than one default set.
    """
    payload = bytearray(struct.pack("<H", BLOCK_ID_VALUES))
    payload += _pack_string(device_name, encoding)
    payload += struct.pack("<H", len(collection))
    for variable_list in collection:
        payload += _pack_string(variable_list.name, encoding)
        payload += struct.pack("<H", len(variable_list))
        for variable in variable_list:
            payload += _pack_string(variable.name, encoding)
            payload += struct.pack("<I", variable.size)
            payload += _default_bytes(variable, 0)

    num_sets = max((variable_list.num_defaults for variable_list in collection), default=0)
    if num_sets > 1:
        block = bytearray(struct.pack("<H", num_sets))
        for index in range(num_sets):
            block += _pack_string(collection.default_set_name(index), encoding)
        block += struct.pack("<H", len(collection))
        for variable_list in collection:
            block += struct.pack("<H", len(variable_list))
            for variable in variable_list:
                block += struct.pack("<I", variable.size)
                for index in range(1, num_sets):
                    block += _default_bytes(variable, index)
        payload += struct.pack("<HI", BLOCK_ID_DEFAULT_SETS, len(block))
        payload += block
    return bytes(payload)


def _default_bytes(variable: TypedVariable, default_index: int) -> bytes:
    if default_index < variable.num_defaults:
        return bytes(variable.defaults[default_index])
    return bytes(variable.size)


def save_dat(path: Union[str, Path], device_name: str,
             collection: VariableListCollection,
             config: Optional[ImportConfig] = None) -> Path:
    """Write the default values of a collection as .dat file."""
    config = config or DEFAULT_CONFIG
    path = Path(path)
    payload = build_dat_payload(device_name, collection, config.text_encoding)
    try:
        path.write_bytes(struct.pack("<I", len(payload)) + zlib.compress(payload))
    except OSError as e:
        raise FileAccessError(f"Cannot write \"{path}\": {e}", path) from e
    logger.debug(f"Saved {path.name}: {len(payload)} bytes uncompressed")
    return path
