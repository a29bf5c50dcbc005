"""
KEFEX Legacy Error Hierarchy
============================

This module defines the exception hierarchy for the KEFEX legacy engine.
All exceptions inherit from KefexError, allowing callers to catch every
engine-related error with a single except clause if desired.

Exception Hierarchy
-------------------
KefexError (base)
├── InvalidArgumentError - wrong Datapool kind, bad index, unsupported type
├── FileAccessError - file cannot be opened or read
│   └── ProjectFileNotFoundError - file does not exist
├── FormatInvalidError - malformed file content
│   ├── ChecksumError - text file checksum does not verify
│   └── DeviceMismatchError - file belongs to a different device
├── InconsistentError - structural problems across files or blocks
│   └── ConfigurationError - invalid entry in a .ram file
├── CommentFileError - .rec comment file cannot be applied
└── ResourceExhaustedError - declared sizes beyond the configured limit

PartialMatchWarning is not an exception that is raised by the loaders.
It is issued through the warnings machinery (and logged) when a .dat file
only partially matches the loaded project.

Fatal vs. Recoverable
---------------------
Checksum failures, device mismatches and structural inconsistencies in
the .def/.ram chain abort the import. A missing or partially matching
.dat file and any .rec problem are downgraded to warnings by the importer.

Copyright (c) 2026 kefex-legacy Contributors
"""

from pathlib import Path
from typing import Optional, Union


# =============================================================================
# Base Exception Class
# =============================================================================

class KefexError(Exception):
    """
    Base exception for all KEFEX legacy engine errors.

    Catch this to handle any failure of the engine:

        try:
            datapool, report = import_ramview_project("demo.def")
        except KefexError as e:
            print(f"Error: {e}")
    """
    pass


class InvalidArgumentError(KefexError):
    """
    Invalid argument passed to an engine operation.

    Raised when:
    - The requested Datapool kind is neither DIAG nor NVM
    - An array index lies outside the variable's buffer
    - A default-set index does not exist
    - An operation is not supported for the variable's type
    """
    pass


# =============================================================================
# File Exceptions
# =============================================================================

class FileAccessError(KefexError):
    """
    A project file could not be opened or read.

    Attributes:
        path: The file that could not be accessed (if known)
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ProjectFileNotFoundError(FileAccessError):
    """A required project file does not exist."""
    pass


class FormatInvalidError(KefexError):
    """
    Invalid file content.

    Raised when reading a file that has:
    - A wrong file extension
    - An unexpected block identifier
    - Truncated or malformed size fields
    - A payload that cannot be decompressed
    """
    pass


class ChecksumError(FormatInvalidError):
    """
    The checksum stored in a checksummed text file does not match its content.

    Attributes:
        path: The file with the bad checksum
    """

    def __init__(self, path: Union[str, Path], message: str = ""):
        self.path = Path(path)
        if not message:
            message = f"File \"{path}\" has incorrect file checksum."
        super().__init__(message)


class DeviceMismatchError(FormatInvalidError):
    """
    A file declares a different device than the project expects.

    Attributes:
        expected: Device name the project uses
        actual: Device name found in the file
    """

    def __init__(self, expected: str, actual: str, message: str = ""):
        self.expected = expected
        self.actual = actual
        if not message:
            message = f"Device mismatch: expected \"{expected}\", got \"{actual}\""
        super().__init__(message)


# =============================================================================
# Consistency Exceptions
# =============================================================================

class InconsistentError(KefexError):
    """
    Structural inconsistency across project files or file blocks.

    Raised when:
    - No .ram lists are found for the device
    - List indexes have gaps, duplicates or do not start at 0
    - Element counts of a .dat extension block do not match the base block
    """
    pass


class ConfigurationError(InconsistentError):
    """
    Invalid entry in a .ram list file (unknown type, bad access string,
    missing list name).

    Attributes:
        path: The .ram file containing the entry (if known)
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        if path is not None:
            message = f"{path}:\n{message}"
        super().__init__(message)


class CommentFileError(KefexError):
    """
    A .rec comment file could not be applied.

    Raised when the file refers to a different device, declares more
    languages than supported or names a missing language section.
    The importer treats this as a warning.
    """
    pass


class ResourceExhaustedError(KefexError):
    """A file declares a buffer size beyond the configured limit."""
    pass


# =============================================================================
# Warnings
# =============================================================================

class PartialMatchWarning(UserWarning):
    """
    Some lists or variables in a .dat file were not found in the project.

    The matching values were still applied.
    """
    pass
