"""
KEFEX Legacy - RAMView Project Engine
=====================================

This package reads legacy KEFEX RAMView projects and imports them into
Datapool structures.

A RAMView project is a set of files sharing one device name:

- **.def**: project options and default set names (checksummed INI)
- **.ram**: one variable list per file (checksummed INI)
- **.rec**: variable comments in up to 5 languages (INI)
- **.dat**: default values of all variables (zlib compressed binary)

Main Components
---------------
- **variables**: typed, byte buffer backed variables and variable lists
- **files**: readers and writers for the project files
- **imports**: translation of a loaded project into a Datapool
- **cli**: the kfxview command-line tool

Quick Start
-----------
Import a project:
    >>> from kefex_legacy import DatapoolKind, import_ramview_project
    >>> datapool, report = import_ramview_project("demo.def", DatapoolKind.DIAG)
    >>> print(f"{datapool.name}: {len(datapool.lists)} lists")

Load the lists only:
    >>> from kefex_legacy import load_def_project
    >>> project = load_def_project("demo.def")
    >>> for variable_list in project.lists:
    ...     print(variable_list.name, len(variable_list))

Or use the command-line tool:
    $ kfxview import demo.def --kind nvm
    $ kfxview check demo.def settings.ram

Copyright (c) 2026 kefex-legacy Contributors
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from kefex_legacy.config import ImportConfig
from kefex_legacy.crc import CRC16_STW_START, crc16_stw
from kefex_legacy.errors import (
    KefexError,
    InvalidArgumentError,
    FileAccessError,
    ProjectFileNotFoundError,
    FormatInvalidError,
    ChecksumError,
    DeviceMismatchError,
    InconsistentError,
    ConfigurationError,
    CommentFileError,
    ResourceExhaustedError,
    PartialMatchWarning,
)

from kefex_legacy.variables import (
    Access,
    DataType,
    ListKind,
    TypedVariable,
    VariableList,
    VariableListCollection,
    make_variable,
)

from kefex_legacy.files import (
    ChecksummedIniFile,
    DefProject,
    ProjectOptions,
    load_dat,
    load_def_project,
    save_dat,
)

from kefex_legacy.imports import (
    Datapool,
    DatapoolKind,
    RamViewImporter,
    import_ramview_project,
)

__all__ = [
    "__version__",
    "ImportConfig",
    "CRC16_STW_START",
    "crc16_stw",
    # Errors
    "KefexError",
    "InvalidArgumentError",
    "FileAccessError",
    "ProjectFileNotFoundError",
    "FormatInvalidError",
    "ChecksumError",
    "DeviceMismatchError",
    "InconsistentError",
    "ConfigurationError",
    "CommentFileError",
    "ResourceExhaustedError",
    "PartialMatchWarning",
    # Variables
    "Access",
    "DataType",
    "ListKind",
    "TypedVariable",
    "VariableList",
    "VariableListCollection",
    "make_variable",
    # Files
    "ChecksummedIniFile",
    "DefProject",
    "ProjectOptions",
    "load_dat",
    "load_def_project",
    "save_dat",
    # Imports
    "Datapool",
    "DatapoolKind",
    "RamViewImporter",
    "import_ramview_project",
]
