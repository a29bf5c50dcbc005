"""
KEFEX Legacy Test Configuration
===============================

Shared fixtures for the test suite.

It provides:
- A demo variable list collection with RAM and EEPROM lists
- A complete demo project (.def, .ram, .rec, .dat) written to tmp_path
- Helpers for hand-written .ram files
"""

from pathlib import Path

import pytest

from kefex_legacy.files.datfile import save_dat
from kefex_legacy.files.defproject import (
    ProjectOptions,
    write_def_file,
    write_ram_file,
    write_rec_file,
)
from kefex_legacy.files.inifile import ChecksummedIniFile
from kefex_legacy.variables import (
    Access,
    DataType,
    ListKind,
    VariableList,
    VariableListCollection,
    make_variable,
)


DEMO_DEVICE = "ECU_A"
DEMO_LANGUAGES = ["English", "German"]
DEMO_DEFAULT_NAMES = ["Factory"]
DEMO_DATA_VERSION = 0x1234
DEMO_META_INFO = ["Demo project", "Second line"]
LONG_VARIABLE_NAME = "7Value With Spaces And A Long Name"


# ═══════════════════════════════════════════════════════════════════════════════
# DEMO PROJECT CONTENT
# ═══════════════════════════════════════════════════════════════════════════════


def build_settings_list() -> VariableList:
    """RAM list with scalar, float, string and single-element array variables."""
    settings = VariableList(name="Settings", kind=ListKind.RAM)
    settings.set_num_defaults(2)

    speed = settings.add_variable(make_variable("Speed", DataType.UINT16))
    speed.address = 0x1000
    speed.unit = "rpm"
    speed.scaling_factor = 5000
    speed.scaling_digits = 1
    speed.set_numeric_min(0)
    speed.set_numeric_max(5000)
    speed.access = [Access.RW] + [Access.RO] * 9
    speed.comments[0] = "Engine speed"
    speed.comments[1] = "Drehzahl"
    speed.set_numeric_default(0, 1000)
    speed.set_numeric_default(1, 2000)

    gain = settings.add_variable(make_variable("Gain", DataType.FLOAT32))
    gain.address = 0x1004
    gain.location_ram = False
    gain.set_float_min(-1.5)
    gain.set_float_max(1.5)
    gain.access = [Access.RO] * 10
    gain.set_float_default(0, 0.5)
    gain.set_float_default(1, 0.25)

    name = settings.add_variable(make_variable("Name", DataType.ASINT8, size=4))
    name.address = 0x1008
    name.access = [Access.RW] * 10
    name.set_string_default(0, "ABCD")
    name.set_string_default(1, "AB")

    single = settings.add_variable(make_variable("Single", DataType.AUINT16, size=2))
    single.address = 0x100C
    single.access = [Access.RO] * 10
    single.set_numeric_min_in_array(0, 10)
    single.set_numeric_max_in_array(0, 500)
    single.set_numeric_default_in_array(0, 7, 0)
    single.set_numeric_default_in_array(0, 8, 1)
    return settings


def build_nvm_list() -> VariableList:
    """Checksummed EEPROM list."""
    nvm = VariableList(name="Nvm Params", kind=ListKind.EEPROM, checksummed=True,
                       checksum_address=0x200)
    nvm.set_num_defaults(2)

    counter = nvm.add_variable(make_variable("Counter", DataType.UINT32))
    counter.address = 0x100
    counter.access = [Access.RW] * 10
    counter.set_numeric_min(0)
    counter.set_numeric_max(0xFFFFFFFF)
    counter.set_numeric_default(0, 42)
    counter.set_numeric_default(1, 43)

    table = nvm.add_variable(make_variable("Table", DataType.AUINT8, size=3))
    table.address = 0x104
    table.access = [Access.RW] * 10
    table.set_min_max_to_maximum()
    for index, (first, second) in enumerate(((1, 4), (2, 5), (3, 6))):
        table.set_numeric_default_in_array(index, first, 0)
        table.set_numeric_default_in_array(index, second, 1)

    offset = nvm.add_variable(make_variable(LONG_VARIABLE_NAME, DataType.SINT8))
    offset.address = 0x107
    offset.access = [Access.RO] * 10
    offset.set_numeric_min(-100)
    offset.set_numeric_max(100)
    offset.set_numeric_default(0, -5)
    offset.set_numeric_default(1, 5)
    return nvm


def build_demo_collection() -> VariableListCollection:
    collection = VariableListCollection(default_set_names=list(DEMO_DEFAULT_NAMES))
    collection.add_list(build_settings_list())
    collection.add_list(build_nvm_list())
    return collection


def write_project(directory: Path, collection: VariableListCollection,
                  device: str = DEMO_DEVICE, name: str = "demo",
                  with_dat: bool = True, with_rec: bool = True) -> Path:
    """Write all files of a project; returns the .def path."""
    options = ProjectOptions(device_name=device, data_version=DEMO_DATA_VERSION,
                             meta_info=list(DEMO_META_INFO))
    def_path = write_def_file(directory / f"{name}.def", options,
                              collection.default_set_names)
    for index, variable_list in enumerate(collection):
        write_ram_file(directory / f"list{index}.ram", variable_list, device, index)
    if with_dat:
        save_dat(directory / f"{name}.dat", device, collection)
    if with_rec:
        write_rec_file(directory / f"{name}.rec", device, collection, DEMO_LANGUAGES)
    return def_path


def write_ini(path: Path, text: str) -> Path:
    """Write INI text with freshly stamped checksums."""
    return ChecksummedIniFile.from_text(text).save(path)


def ram_file_text(device: str = DEMO_DEVICE, list_index: int = 0, list_name: str = "Manual",
                  variables: tuple[str, ...] = ()) -> str:
    """
    Text of a .ram file.

    Each variable is given as the body of its [VARIABLEn] section; the
    ACCESS0..9 entries are added when missing.
    """
    lines = [
        "[CONFIG]",
        f"DEVICE={device}",
        f"LISTINDEX={list_index}",
        f"LISTNAME={list_name}",
        "VARIABLETYPE=0",
        "NUMDEFAULTS=1",
        f"NUMOFVARS={len(variables)}",
    ]
    for index, body in enumerate(variables):
        lines.append(f"[VARIABLE{index + 1}]")
        lines.extend(line.strip() for line in body.strip().splitlines())
        if "ACCESS0=" not in body:
            lines.extend(f"ACCESS{group}=RW" for group in range(10))
    return "\n".join(lines) + "\n"


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def demo_collection() -> VariableListCollection:
    """Fresh demo collection (not written to disk)."""
    return build_demo_collection()


@pytest.fixture
def demo_project(tmp_path: Path) -> Path:
    """Complete demo project; returns the .def path."""
    return write_project(tmp_path, build_demo_collection())
