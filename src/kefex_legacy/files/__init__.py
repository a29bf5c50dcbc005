"""
RAMView Project File Support
============================

Readers and writers for the legacy RAMView project files:

- **inifile**: checksummed INI text files (.def, .ram)
- **defproject**: project options, .ram variable lists and .rec comments
- **datfile**: compressed default value files (.dat)

Example:
    >>> from kefex_legacy.files import load_def_project, load_dat
    >>> project = load_def_project("demo.def")
    >>> result = load_dat("demo.dat", project.options.device_name, project.lists)
    >>> result.partial
    False
"""

from kefex_legacy.files.inifile import ChecksummedIniFile, parse_int
from kefex_legacy.files.defproject import (
    DefProject,
    ProjectOptions,
    RamFileRef,
    find_related_files,
    load_comments,
    load_def_project,
    load_default_names,
    load_project_options,
    load_ram_files,
    load_ram_list,
    open_def_file,
    sort_ram_files,
    write_def_file,
    write_ram_file,
    write_rec_file,
)
from kefex_legacy.files.datfile import (
    DatLoadResult,
    build_dat_payload,
    load_dat,
    save_dat,
)

__all__ = [
    # INI files
    "ChecksummedIniFile",
    "parse_int",
    # .def / .ram / .rec
    "DefProject",
    "ProjectOptions",
    "RamFileRef",
    "find_related_files",
    "load_comments",
    "load_def_project",
    "load_default_names",
    "load_project_options",
    "load_ram_files",
    "load_ram_list",
    "open_def_file",
    "sort_ram_files",
    "write_def_file",
    "write_ram_file",
    "write_rec_file",
    # .dat
    "DatLoadResult",
    "build_dat_payload",
    "load_dat",
    "save_dat",
]
