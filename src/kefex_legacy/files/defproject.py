"""
RAMView Project Files (.def / .ram / .rec)
==========================================

A RAMView project consists of one .def file plus several sibling files in
the same directory:

- PROJECT.def: project options (device name, data version, meta info)
  and the names of the default sets. Checksummed.
- *.ram: one file per variable list. Every .ram file names the device it
  belongs to and its position in the list order (LISTINDEX). Checksummed.
- PROJECT.rec: variable comments in up to 5 languages. Not checksummed.
- PROJECT.dat: default values (see datfile.py).

.ram File Layout
----------------
    [CONFIG]
    DEVICE=ECU_A
    LISTINDEX=0
    LISTNAME=Settings
    VARIABLETYPE=0          ; 0 = RAM, 1 = EEPROM
    CHECKSUMMED=0
    CRCADDRESS=1024
    NUMDEFAULTS=2
    NUMOFVARS=1

    [VARIABLE1]
    NAME=Speed
    ADDRESS=4096
    TYPE_INDEX=4            ; or TYPE=WORD in very old files
    SIZE=2
    LOCATIONRAM=1
    MIN=0
    MAX=65535
    ACCESS0=RW
    ...
    ACCESS9=INV
    UNIT=rpm
    SCALINGFACTOR=10000
    SCALINGDIGITS=0
    TRANSTYPE=SRR
    TRANSTIME=200
    LOWERHYST=10
    UPPERHYST=10
    VAR_CLASS=0

Float min/max values are stored as the int64 bit pattern of the float64
value. Array min/max values are stored per byte, separated by ';'.

.rec File Layout
----------------
    [CONFIG]
    DEVICE=ECU_A
    NUMOFLANG=2
    LANGNAME1=English
    LANGNAME2=German

    [English]
    Settings.Speed=Engine speed

Copyright (c) 2026 kefex-legacy Contributors
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Optional, Sequence, Union
import logging

from kefex_legacy.config import DEFAULT_CONFIG, ImportConfig
from kefex_legacy.errors import (
    ChecksumError,
    CommentFileError,
    ConfigurationError,
    FormatInvalidError,
    InconsistentError,
    ProjectFileNotFoundError,
)
from kefex_legacy.files.inifile import ChecksummedIniFile, parse_int
from kefex_legacy.variables.datatypes import NUM_DATA_TYPES, DataType
from kefex_legacy.variables.lists import (
    DEFAULT_CHECKSUM_ADDRESS,
    ListKind,
    VariableList,
    VariableListCollection,
)
from kefex_legacy.variables.variable import (
    MAX_NUM_LANGUAGES,
    NUM_ACCESS_GROUPS,
    SCALING_FACTOR_100_PERCENT,
    Access,
    TransmissionType,
    TypedVariable,
    VariableClass,
    f64_from_int64_bits,
    int64_bits_from_f64,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEF_FILE_EXTENSION: Final[str] = ".def"
RAM_FILE_EXTENSION: Final[str] = ".ram"
REC_FILE_EXTENSION: Final[str] = ".rec"

NO_LIST_INDEX: Final[int] = 0xFFFF

# Fallbacks for unparsable transmission settings
DEFAULT_TRANSMISSION_INTERVAL: Final[int] = 200
DEFAULT_HYSTERESIS: Final[int] = 10

# Type names of very old .ram files without TYPE_INDEX
_LEGACY_TYPE_NAMES: Final[dict[str, DataType]] = {
    "BYTE": DataType.UINT8,
    "CHAR": DataType.SINT8,
    "INT": DataType.SINT16,
    "WORD": DataType.UINT16,
    "LONG": DataType.SINT32,
    "DWORD": DataType.UINT32,
    "STRING": DataType.ASINT8,
    "ARRAY": DataType.ASINT8,
    "AOBYTE": DataType.AUINT8,
    "FLOAT": DataType.FLOAT32,
}

# Sizes assumed for files without SIZE entry
_AUTO_SIZES: Final[dict[int, int]] = {
    DataType.UINT8: 1,
    DataType.SINT8: 1,
    DataType.SINT16: 2,
    DataType.UINT16: 2,
    DataType.CRC: 2,
    DataType.SINT32: 4,
    DataType.UINT32: 4,
}

_ACCESS_STRINGS: Final[dict[str, Access]] = {
    "RO": Access.RO,
    "WO": Access.WO,
    "RW": Access.RW,
    "INV": Access.INVISIBLE,
}

_TRANSMISSION_STRINGS: Final[dict[str, TransmissionType]] = {
    "TCRR": TransmissionType.TCRR,
    "ECRR": TransmissionType.ECRR,
    "TCRR(TS)": TransmissionType.TCRRTS,
    "TCRRTS": TransmissionType.TCRRTS,
}


# =============================================================================
# Project Options (.def)
# =============================================================================

@dataclass
class ProjectOptions:
    """
    Options of a RAMView project as stored in the .def file.

    Attributes:
        device_name: Name of the target device (links .ram/.rec/.dat files)
        data_version: 16 bit project data version
        meta_info: Free text lines describing the project
        comment_descriptions: Language names of the comment slots
            (filled from the .rec file)
        path: The .def file
    """
    device_name: str = ""
    data_version: int = 0
    meta_info: list[str] = field(default_factory=list)
    comment_descriptions: list[str] = field(default_factory=lambda: [""] * MAX_NUM_LANGUAGES)
    path: Optional[Path] = None

    @property
    def version_bytes(self) -> tuple[int, int, int]:
        """Data version split into (major, minor, release) for 0xMmmR."""
        return (
            (self.data_version & 0xF000) >> 12,
            (self.data_version & 0x0FF0) >> 4,
            self.data_version & 0x000F,
        )


def open_def_file(path: Union[str, Path],
                  config: Optional[ImportConfig] = None) -> ChecksummedIniFile:
    """
    Open a .def file and verify its checksum.

    Raises:
        FormatInvalidError: If the file does not have the .def extension
        ProjectFileNotFoundError: If the file does not exist
        ChecksumError: If the checksum does not verify
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    if path.suffix.lower() != DEF_FILE_EXTENSION:
        logger.error(f"File \"{path}\" does not have the file extension \".def\".")
        raise FormatInvalidError(f"File \"{path}\" does not have the file extension \".def\".")
    if not path.is_file():
        logger.error(f"File \"{path}\" does not exist.")
        raise ProjectFileNotFoundError(f"File \"{path}\" does not exist.", path)

    ini = ChecksummedIniFile.from_file(path, config.text_encoding)
    if not ini.check_checksum():
        logger.error(f"File \"{path}\" has incorrect file checksum.")
        raise ChecksumError(path)
    return ini


def read_project_options(ini: ChecksummedIniFile) -> ProjectOptions:
    """
    Read the project options from an opened .def file.

    Raises:
        FormatInvalidError: If the file contains no DEVICENAME
    """
    options = ProjectOptions(path=ini.path)
    options.device_name = ini.read_string("CONFIG", "DEVICENAME")
    options.data_version = ini.read_int("CONFIG", "DATA_VERSION", 0) & 0xFFFF
    num_lines = ini.read_int("METAINFO", "LINES", 0)
    options.meta_info = [ini.read_string("METAINFO", f"LINE{i + 1}") for i in range(num_lines)]

    if options.device_name == "":
        message = (f"File \"{ini.path}\" does not seem to contain a DEVICENAME. "
                   f"Is this a proper RAMView project file ?")
        logger.error(message)
        raise FormatInvalidError(message)
    return options


def load_project_options(path: Union[str, Path],
                         config: Optional[ImportConfig] = None) -> ProjectOptions:
    """Open and verify a .def file and read its project options."""
    return read_project_options(open_def_file(path, config))


def load_default_names(ini: ChecksummedIniFile, collection: VariableListCollection) -> None:
    """
    Read the default set names from the [DEFAULT_SETS] section.

    Sets without explicit name are named "DEFAULT_<index>".
    """
    count = ini.read_int("DEFAULT_SETS", "DEFAULT_NAMES", 0)
    collection.default_set_names = [
        ini.read_string("DEFAULT_SETS", f"NAMEDEFAULT{i}", f"DEFAULT_{i}")
        for i in range(max(count, 0))
    ]


# =============================================================================
# List Discovery
# =============================================================================

@dataclass
class RamFileRef:
    """A .ram file that belongs to the project and its list index."""
    path: Path
    list_index: int


def find_related_files(directory: Union[str, Path], device_name: str,
                       config: Optional[ImportConfig] = None
                       ) -> tuple[list[RamFileRef], list[str]]:
    """
    Find all .ram files in a directory that belong to a device.

    The DEVICE entry is compared before the checksum is verified. Files
    of the device with a bad checksum are skipped with a warning.

    Returns:
        (files, warnings)
    """
    config = config or DEFAULT_CONFIG
    directory = Path(directory)
    files: list[RamFileRef] = []
    warnings: list[str] = []

    candidates = sorted(p for p in directory.iterdir()
                        if p.is_file() and p.suffix.lower() == RAM_FILE_EXTENSION)
    for candidate in candidates:
        ini = ChecksummedIniFile.from_file(candidate, config.text_encoding)
        if ini.read_string("CONFIG", "DEVICE") != device_name:
            continue
        if not ini.check_checksum():
            message = f"File {candidate.name} has an incorrect checksum."
            logger.warning(message)
            warnings.append(message)
            continue
        list_index = ini.read_int("CONFIG", "LISTINDEX", NO_LIST_INDEX) & 0xFFFF
        files.append(RamFileRef(candidate, list_index))

    logger.debug(f"Found {len(files)} .ram files for device {device_name} in {directory}")
    return files, warnings


def sort_ram_files(files: Sequence[RamFileRef]) -> list[RamFileRef]:
    """
    Sort .ram files by list index and check the index sequence.

    Indexes must start at 0 and be contiguous without duplicates.

    Raises:
        ConfigurationError: Naming the offending files
    """
    ordered = sorted(files, key=lambda ref: ref.list_index)
    for position, ref in enumerate(ordered):
        if ref.list_index < position:
            raise ConfigurationError(
                "Project invalid.\n Two lists have the same list index:\n"
                f"{ordered[position - 1].path.name} and\n{ref.path.name}",
                ref.path,
            )
        if ref.list_index > position:
            message = "Project invalid.\nGap in list indexes (probably missing .ram file)"
            if position > 0:
                message += (f"\nbetween list files\n\"{ordered[position - 1].path.name}\" and\n"
                            f"\"{ref.path.name}\"")
            else:
                message += f".\nFirst list \n{ref.path.name} does not have index 0"
            raise ConfigurationError(message, ref.path)
    return ordered


# =============================================================================
# List Parsing (.ram)
# =============================================================================

def _to_int(text: str) -> int:
    """Parse an integer entry; raises ValueError like int()."""
    value = parse_int(text)
    if value is None:
        raise ValueError(f"invalid integer: {text!r}")
    return value


def _parse_type(values: dict[str, str], path: Path) -> DataType:
    tag: Optional[int] = None
    text = values.get("TYPE_INDEX")
    if text is not None:
        tag = parse_int(text)
    if tag is None:
        # very old files name the type
        text = values.get("TYPE", "").upper().strip()
        tag = _LEGACY_TYPE_NAMES.get(text)
    if tag is None or not 0 < tag < NUM_DATA_TYPES:
        raise ConfigurationError(f"{text} invalid type", path)
    return DataType(tag)


def _parse_min_max(min_text: str, max_text: str, variable: TypedVariable) -> None:
    """
    Apply MIN/MAX entries.

    Arrays without explicit range (or with "0") get the full range of
    their base type; explicit array ranges are given per byte.
    """
    if min_text == "":
        min_text = "0"
    if max_text == "":
        return

    if variable.is_array():
        variable.set_min_max_to_maximum()
        if min_text == "0" or max_text == "0":
            return
        min_tokens = min_text.split(";")
        max_tokens = max_text.split(";")
        for index in range(variable.size):
            for tokens, buffer in ((min_tokens, variable.min_value),
                                   (max_tokens, variable.max_value)):
                if index < len(tokens):
                    value = parse_int(tokens[index])
                    if value is not None:
                        buffer[index] = value & 0xFF
        return

    try:
        minimum = _to_int(min_text)
        maximum = _to_int(max_text)
    except ValueError:
        variable.set_numeric_min(0)
        variable.set_numeric_max(0)
        return
    if variable.is_float():
        variable.set_float_min(f64_from_int64_bits(minimum))
        variable.set_float_max(f64_from_int64_bits(maximum))
    else:
        variable.set_numeric_min(minimum)
        variable.set_numeric_max(maximum)


def transmission_type_from_string(text: str) -> TransmissionType:
    """Transmission type from its .ram text; unknown text yields SRR."""
    return _TRANSMISSION_STRINGS.get(text.upper(), TransmissionType.SRR)


def _parse_int_or(text: str, default: int) -> int:
    value = parse_int(text)
    return default if value is None else value


def _parse_variable(values: dict[str, str], num_defaults: int, path: Path) -> TypedVariable:
    variable = TypedVariable(name=values.get("NAME", ""))
    variable.address = _parse_int_or(values.get("ADDRESS", ""), 0) & 0xFFFFFFFF
    variable.data_type = _parse_type(values, path)

    size_text = values.get("SIZE", "")
    if size_text in ("", "0"):
        # old project files: derive the size from numeric types
        variable.set_size(_AUTO_SIZES.get(variable.data_type, 0))
    else:
        try:
            variable.set_size(_to_int(size_text))
        except ValueError as e:
            raise ConfigurationError(f"{size_text} invalid size", path) from e

    variable.location_ram = values.get("LOCATIONRAM", "").upper() in ("1", "TRUE")

    _parse_min_max(values.get("MIN", ""), values.get("MAX", ""), variable)

    for group in range(NUM_ACCESS_GROUPS):
        text = values.get(f"ACCESS{group}", "").upper()
        access = _ACCESS_STRINGS.get(text)
        if access is None:
            raise ConfigurationError(f"{text} invalid access type", path)
        variable.access[group] = access

    variable.unit = values.get("UNIT", "")
    variable.set_numeric_value(0)
    variable.set_num_defaults(num_defaults)

    variable.scaling_factor = _parse_int_or(values.get("SCALINGFACTOR", ""),
                                            SCALING_FACTOR_100_PERCENT)
    variable.scaling_digits = _parse_int_or(values.get("SCALINGDIGITS", ""), 0) & 0xFF

    transmission = variable.transmission
    transmission.type = transmission_type_from_string(values.get("TRANSTYPE", ""))
    transmission.interval = _parse_int_or(values.get("TRANSTIME", ""),
                                          DEFAULT_TRANSMISSION_INTERVAL) & 0xFFFF
    transmission.lower_hysteresis = _parse_int_or(values.get("LOWERHYST", ""),
                                                  DEFAULT_HYSTERESIS) & 0xFFFFFFFF
    transmission.upper_hysteresis = _parse_int_or(values.get("UPPERHYST", ""),
                                                  DEFAULT_HYSTERESIS) & 0xFFFFFFFF

    variable.var_class = _parse_int_or(values.get("VAR_CLASS", ""), VariableClass.SIGNAL) & 0xFF
    return variable


def load_ram_list(path: Union[str, Path],
                  config: Optional[ImportConfig] = None) -> VariableList:
    """
    Load one variable list from a .ram file.

    The checksum is not verified here (see find_related_files).

    Raises:
        ConfigurationError: For a missing list name, invalid types or
            invalid access strings
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    ini = ChecksummedIniFile.from_file(path, config.text_encoding)

    variable_list = VariableList()
    num_variables = ini.read_int("CONFIG", "NUMOFVARS", 0)
    variable_list.checksummed = ini.read_bool("CONFIG", "CHECKSUMMED", False)
    variable_list.checksum_address = ini.read_int("CONFIG", "CRCADDRESS", DEFAULT_CHECKSUM_ADDRESS)
    variable_list.name = ini.read_string("CONFIG", "LISTNAME")
    variable_list.kind = ini.read_int("CONFIG", "VARIABLETYPE", ListKind.RAM) & 0xFF
    if variable_list.name == "":
        raise ConfigurationError("List has no valid name.", path)
    variable_list.set_num_defaults(ini.read_int("CONFIG", "NUMDEFAULTS", 1))

    for index in range(num_variables):
        # keys are matched case-insensitively
        values = {key.upper(): value for key, value in ini.section_values(f"VARIABLE{index + 1}")}
        variable_list.add_variable(
            _parse_variable(values, variable_list.num_defaults, path)
        )

    logger.debug(f"Loaded list {variable_list.name} from {path.name}: "
                 f"{len(variable_list)} variables")
    return variable_list


def load_ram_files(directory: Union[str, Path], device_name: str,
                   collection: VariableListCollection,
                   config: Optional[ImportConfig] = None) -> list[str]:
    """
    Load all .ram lists of a device into a collection.

    Existing lists of the collection are replaced. Default set names are
    kept.

    Returns:
        Warnings (files with bad checksums)

    Raises:
        InconsistentError: If no list is found
        ConfigurationError: For list index problems or invalid entries
    """
    collection.lists = []
    files, warnings = find_related_files(directory, device_name, config)
    if not files:
        message = f"{directory}:\nNo variable lists found for device \"{device_name}\"."
        logger.error(message)
        raise InconsistentError(message)

    try:
        for ref in sort_ram_files(files):
            collection.add_list(load_ram_list(ref.path, config))
    except ConfigurationError as e:
        logger.error(f"Error reading or parsing .ram file. Detail: {e}")
        raise
    return warnings


# =============================================================================
# Project Loading
# =============================================================================

@dataclass
class DefProject:
    """
    Options and lists of a RAMView project.

    Attributes:
        options: Project options from the .def file
        lists: Variable lists from the .ram files
        warnings: Recoverable problems found while loading
    """
    options: ProjectOptions
    lists: VariableListCollection = field(default_factory=VariableListCollection)
    warnings: list[str] = field(default_factory=list)


def load_def_project(path: Union[str, Path],
                     config: Optional[ImportConfig] = None) -> DefProject:
    """
    Load a RAMView project: .def options, default set names and .ram lists.

    Default values (.dat) and comments (.rec) are loaded separately.
    """
    path = Path(path)
    ini = open_def_file(path, config)
    project = DefProject(read_project_options(ini))
    load_default_names(ini, project.lists)

    project.warnings = load_ram_files(path.parent, project.options.device_name,
                                      project.lists, config)
    logger.debug(f"Loaded project {path.name}: {len(project.lists)} lists, "
                 f"{project.lists.total_variables} variables")
    return project


# =============================================================================
# Comments (.rec)
# =============================================================================

def _split_comment_key(key: str) -> tuple[str, str]:
    list_name, _, variable_name = key.partition(".")
    return list_name, variable_name


def load_comments(path: Union[str, Path], device_name: str,
                  collection: VariableListCollection,
                  config: Optional[ImportConfig] = None) -> list[str]:
    """
    Load variable comments from a .rec file.

    All comments of the collection are cleared first. Comments for
    variables that are not part of the collection are ignored.

    Returns:
        The language names (comment descriptions), one per comment slot

    Raises:
        ProjectFileNotFoundError: If the file does not exist
        CommentFileError: If the file is for a different device, has too
            many languages or names a missing language section
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    if not path.is_file():
        raise ProjectFileNotFoundError("File does not exist.", path)

    ini = ChecksummedIniFile.from_file(path, config.text_encoding)

    for variable_list in collection:
        for variable in variable_list:
            variable.comments = [""] * MAX_NUM_LANGUAGES
    descriptions = [""] * MAX_NUM_LANGUAGES

    if ini.read_string("CONFIG", "DEVICE") != device_name:
        raise CommentFileError("File is for a different project.")

    num_languages = ini.read_int("CONFIG", "NUMOFLANG", 0)
    if num_languages > MAX_NUM_LANGUAGES:
        raise CommentFileError("Too many languages in file.")

    for language in range(num_languages):
        section = ini.read_string("CONFIG", f"LANGNAME{language + 1}")
        if section == "" or not ini.section_exists(section):
            raise CommentFileError("Invalid language name in file.")
        descriptions[language] = section

        for key, text in ini.section_values(section):
            list_name, variable_name = _split_comment_key(key)
            list_index = collection.find_list_nocase(list_name)
            if list_index is None:
                continue
            variable_list = collection[list_index]
            variable_index = variable_list.find_variable_nocase(variable_name)
            if variable_index is not None:
                variable_list.variables[variable_index].comments[language] = text

    logger.debug(f"Loaded comments in {num_languages} languages from {path.name}")
    return descriptions


# =============================================================================
# Writers
# =============================================================================

def _access_to_string(access: int) -> str:
    for text, value in _ACCESS_STRINGS.items():
        if value == access:
            return text
    return "INV"


def _min_max_to_strings(variable: TypedVariable) -> tuple[str, str]:
    if variable.is_array():
        return (";".join(str(b) for b in variable.min_value),
                ";".join(str(b) for b in variable.max_value))
    if variable.is_float():
        return (str(int64_bits_from_f64(variable.get_float_min())),
                str(int64_bits_from_f64(variable.get_float_max())))
    return str(variable.get_numeric_min()), str(variable.get_numeric_max())


def write_ram_file(path: Union[str, Path], variable_list: VariableList,
                   device_name: str, list_index: int,
                   config: Optional[ImportConfig] = None) -> Path:
    """
    Write a variable list as checksummed .ram file.

    Values and default values are not part of .ram files. INVALID access
    entries are written as "INV".
    """
    config = config or DEFAULT_CONFIG
    ini = ChecksummedIniFile(path, config.text_encoding)
    ini.write_string("CONFIG", "DEVICE", device_name)
    ini.write_int("CONFIG", "LISTINDEX", list_index)
    ini.write_string("CONFIG", "LISTNAME", variable_list.name)
    ini.write_int("CONFIG", "VARIABLETYPE", variable_list.kind)
    ini.write_bool("CONFIG", "CHECKSUMMED", variable_list.checksummed)
    ini.write_int("CONFIG", "CRCADDRESS", variable_list.checksum_address)
    ini.write_int("CONFIG", "NUMDEFAULTS", variable_list.num_defaults)
    ini.write_int("CONFIG", "NUMOFVARS", len(variable_list))

    for index, variable in enumerate(variable_list):
        section = f"VARIABLE{index + 1}"
        ini.write_string(section, "NAME", variable.name)
        ini.write_int(section, "ADDRESS", variable.address)
        ini.write_int(section, "TYPE_INDEX", variable.data_type)
        ini.write_int(section, "SIZE", variable.size)
        ini.write_bool(section, "LOCATIONRAM", variable.location_ram)
        minimum, maximum = _min_max_to_strings(variable)
        ini.write_string(section, "MIN", minimum)
        ini.write_string(section, "MAX", maximum)
        for group in range(NUM_ACCESS_GROUPS):
            ini.write_string(section, f"ACCESS{group}", _access_to_string(variable.access[group]))
        ini.write_string(section, "UNIT", variable.unit)
        ini.write_int(section, "SCALINGFACTOR", variable.scaling_factor)
        ini.write_int(section, "SCALINGDIGITS", variable.scaling_digits)
        ini.write_string(section, "TRANSTYPE", TransmissionType(variable.transmission.type).name)
        ini.write_int(section, "TRANSTIME", variable.transmission.interval)
        ini.write_int(section, "LOWERHYST", variable.transmission.lower_hysteresis)
        ini.write_int(section, "UPPERHYST", variable.transmission.upper_hysteresis)
        ini.write_int(section, "VAR_CLASS", variable.var_class)

    return ini.save()


def write_def_file(path: Union[str, Path], options: ProjectOptions,
                   default_set_names: Sequence[str] = (),
                   config: Optional[ImportConfig] = None) -> Path:
    """Write project options and default set names as checksummed .def file."""
    config = config or DEFAULT_CONFIG
    ini = ChecksummedIniFile(path, config.text_encoding)
    ini.write_string("CONFIG", "DEVICENAME", options.device_name)
    ini.write_string("CONFIG", "DATA_VERSION", f"0x{options.data_version:04X}")
    ini.write_int("METAINFO", "LINES", len(options.meta_info))
    for index, line in enumerate(options.meta_info):
        ini.write_string("METAINFO", f"LINE{index + 1}", line)
    ini.write_int("DEFAULT_SETS", "DEFAULT_NAMES", len(default_set_names))
    for index, name in enumerate(default_set_names):
        ini.write_string("DEFAULT_SETS", f"NAMEDEFAULT{index}", name)
    return ini.save()


def write_rec_file(path: Union[str, Path], device_name: str,
                   collection: VariableListCollection, languages: Sequence[str],
                   config: Optional[ImportConfig] = None) -> Path:
    """
    Write the variable comments of a collection as .rec file.

    Args:
        languages: Language (section) names, one per comment slot in use
    """
    config = config or DEFAULT_CONFIG
    ini = ChecksummedIniFile(path, config.text_encoding)
    ini.write_string("CONFIG", "DEVICE", device_name)
    ini.write_int("CONFIG", "NUMOFLANG", len(languages))
    for index, language in enumerate(languages):
        ini.write_string("CONFIG", f"LANGNAME{index + 1}", language)
    for index, language in enumerate(languages):
        ini.add_section(language)
        for variable_list in collection:
            for variable in variable_list:
                comment = variable.comments[index]
                if comment:
                    ini.write_string(language, f"{variable_list.name}.{variable.name}", comment)
    return ini.save()
