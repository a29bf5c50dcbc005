"""
RAMView Project Importer
========================

Imports the variable lists of a RAMView .def project into a Datapool.

The caller selects which lists are imported:
- DatapoolKind.DIAG imports all RAM lists
- DatapoolKind.NVM imports all EEPROM lists

RAMView and Datapool structures are not fully compatible. Every
compromise made during the import is described by one line of the
import report:
- names that had to be adapted (spaces, leading digit, length)
- variables with unsupported types (imported as uint8)
- arrays with one element (imported as non-array elements)
- string defaults without zero termination (final character replaced)

Problems with the .def and .ram files abort the import. A missing or
partially matching .dat file and an unusable .rec file only cause a
warning (logged and added to the report).

Usage
-----
    >>> from kefex_legacy.imports import DatapoolKind, import_ramview_project
    >>> datapool, report = import_ramview_project("demo.def", DatapoolKind.NVM)
    >>> for line in report:
    ...     print(line)

Copyright (c) 2026 kefex-legacy Contributors
"""

from pathlib import Path
from typing import Optional, Union
import logging

from kefex_legacy.config import DEFAULT_CONFIG, ImportConfig
from kefex_legacy.errors import (
    CommentFileError,
    InvalidArgumentError,
    ProjectFileNotFoundError,
)
from kefex_legacy.files.datfile import DAT_FILE_EXTENSION, load_dat
from kefex_legacy.files.defproject import (
    REC_FILE_EXTENSION,
    DefProject,
    load_comments,
    load_def_project,
)
from kefex_legacy.imports.datapool import (
    Datapool,
    DatapoolDataSet,
    DatapoolElement,
    DatapoolKind,
    DatapoolList,
    ElementAccess,
    ElementType,
)
from kefex_legacy.variables.datatypes import DataType
from kefex_legacy.variables.lists import ListKind, VariableList
from kefex_legacy.variables.variable import (
    MAX_NUM_LANGUAGES,
    SCALING_FACTOR_100_PERCENT,
    TypedVariable,
)

logger = logging.getLogger(__name__)


NVM_ADDRESS_NOTE = (
    "When importing RAMView EEPROM lists the absolute addresses after import will not "
    "match the addresses of the RAMView project. If gaps are intended to be kept between "
    "individual lists those should be added manually after the import."
)

# Source type -> element type (arrays map to their element type)
_TYPE_MAP: dict[int, ElementType] = {
    DataType.SINT8: ElementType.SINT8,
    DataType.ASINT8: ElementType.SINT8,
    DataType.UINT8: ElementType.UINT8,
    DataType.AUINT8: ElementType.UINT8,
    DataType.SINT16: ElementType.SINT16,
    DataType.ASINT16: ElementType.SINT16,
    DataType.UINT16: ElementType.UINT16,
    DataType.AUINT16: ElementType.UINT16,
    DataType.SINT32: ElementType.SINT32,
    DataType.ASINT32: ElementType.SINT32,
    DataType.UINT32: ElementType.UINT32,
    DataType.AUINT32: ElementType.UINT32,
    DataType.SINT64: ElementType.SINT64,
    DataType.ASINT64: ElementType.SINT64,
    DataType.UINT64: ElementType.UINT64,
    DataType.AUINT64: ElementType.UINT64,
    DataType.FLOAT32: ElementType.FLOAT32,
    DataType.AFLOAT32: ElementType.FLOAT32,
    DataType.FLOAT64: ElementType.FLOAT64,
    DataType.AFLOAT64: ElementType.FLOAT64,
}


# =============================================================================
# Name Adaption
# =============================================================================

def adapt_name(name: str, comment: str, designator: str, report: list[str],
               max_length: int = 31) -> tuple[str, str]:
    """
    Adapt a RAMView name to Datapool naming rules.

    Spaces are removed, names starting with a digit get a "_" prefix and
    the result is cut to max_length characters. Other characters are not
    checked.

    If the name changes, a note with the original name is appended to the
    comment and a line is added to the report.

    Args:
        name: Original name
        comment: Comment of the named object
        designator: Object description for the report ("list", "element", ...)
        report: Import report to extend
        max_length: Maximum name length

    Returns:
        (new_name, new_comment)
    """
    new_name = name.replace(" ", "")
    if new_name[:1].isascii() and new_name[:1].isdigit():
        new_name = "_" + new_name
    new_name = new_name[:max_length]

    if new_name != name:
        if comment:
            comment += "\n"
        comment += f"Original name (from import source): \"{name}\""
        report.append(f"Name of {designator} \"{name}\" was changed to \"{new_name}\".")
    return new_name, comment


# =============================================================================
# Importer
# =============================================================================

class RamViewImporter:
    """
    Imports RAMView projects into Datapools.

    Attributes:
        config: Import configuration
    """

    def __init__(self, config: Optional[ImportConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def import_project(self, path: Union[str, Path],
                       kind: DatapoolKind = DatapoolKind.DIAG) -> tuple[Datapool, list[str]]:
        """
        Load a RAMView project and import its lists.

        Args:
            path: The .def file
            kind: DIAG imports RAM lists, NVM imports EEPROM lists

        Returns:
            (datapool, report)

        Raises:
            InvalidArgumentError: If kind is neither DIAG nor NVM
            KefexError: For fatal problems with the project files
        """
        if kind not in (DatapoolKind.DIAG, DatapoolKind.NVM):
            raise InvalidArgumentError(
                f"Cannot import RAMView project into a {kind.name} Datapool "
                f"(only DIAG and NVM are supported)"
            )
        path = Path(path)
        report: list[str] = []
        project = self.load_project(path, report)

        datapool = Datapool(kind=kind)
        if kind == DatapoolKind.NVM:
            report.append(NVM_ADDRESS_NOTE)
        self.translate(project, datapool, report)

        logger.info(f"Content of project \"{path}\" was imported to Datapool structures. "
                    f"Number of imported lists: {len(datapool.lists)}.")
        return datapool, report

    # =========================================================================
    # Loading
    # =========================================================================

    def load_project(self, path: Path, report: Optional[list[str]] = None) -> DefProject:
        """
        Load .def, .ram, .dat and .rec files of a project.

        Recoverable problems are logged as warnings and added to report.
        """
        if report is None:
            report = []
        project = load_def_project(path, self.config)
        report.extend(project.warnings)

        device_name = project.options.device_name
        project.lists.clear_defaults()

        dat_path = path.with_suffix(DAT_FILE_EXTENSION)
        if dat_path.is_file():
            result = load_dat(dat_path, device_name, project.lists, self.config)
            if result.partial:
                self._warn(report, f".dat file \"{dat_path}\" did not contain default values "
                                   f"for all variables.")
        else:
            self._warn(report, f"Could not load default values from .dat file \"{dat_path}\". "
                               f"File does not exist.")

        rec_path = path.with_suffix(REC_FILE_EXTENSION)
        try:
            project.options.comment_descriptions = load_comments(
                rec_path, device_name, project.lists, self.config
            )
        except (ProjectFileNotFoundError, CommentFileError) as e:
            self._warn(report, f"Could not load comments from .rec file \"{rec_path}\". {e}")

        project.warnings = list(report)
        return project

    @staticmethod
    def _warn(report: list[str], message: str) -> None:
        logger.warning(message)
        report.append(message)

    # =========================================================================
    # Translation
    # =========================================================================

    def translate(self, project: DefProject, datapool: Datapool, report: list[str]) -> None:
        """Fill a Datapool from a loaded project."""
        options = project.options
        max_length = self.config.max_name_length

        datapool.name, datapool.comment = adapt_name(
            options.device_name, "\n".join(options.meta_info), "Datapool", report, max_length
        )
        datapool.version = list(options.version_bytes)

        wanted = ListKind.EEPROM if datapool.kind == DatapoolKind.NVM else ListKind.RAM
        datapool.lists = [
            self._translate_list(project, variable_list, datapool.kind, report)
            for variable_list in project.lists
            if variable_list.kind == wanted
        ]

        datapool.nvm_size = 0
        if datapool.kind == DatapoolKind.NVM:
            datapool.nvm_size = sum(datapool_list.nvm_size for datapool_list in datapool.lists)

    def _translate_list(self, project: DefProject, variable_list: VariableList,
                        kind: DatapoolKind, report: list[str]) -> DatapoolList:
        max_length = self.config.max_name_length
        target = DatapoolList()
        target.name, target.comment = adapt_name(variable_list.name, "", "list", report, max_length)

        for index in range(variable_list.num_defaults):
            if index < len(project.lists.default_set_names):
                name = project.lists.default_set_names[index]
            else:
                name = f"{self.config.dataset_name_prefix}{index + 1}"
            name, comment = adapt_name(name, "", "Dataset", report, max_length)
            target.data_sets.append(DatapoolDataSet(name, comment))

        target.nvm_crc_active = variable_list.checksummed if kind == DatapoolKind.NVM else False
        target.nvm_size = 2 if variable_list.checksummed else 0
        target.nvm_start_address = 0

        num_languages = 0
        for description in project.options.comment_descriptions[:MAX_NUM_LANGUAGES]:
            if description == "":
                break
            num_languages += 1

        for variable in variable_list:
            element = self._translate_variable(
                variable, target, project.options.comment_descriptions[:num_languages], report
            )
            if kind == DatapoolKind.NVM:
                element.access = ElementAccess.RW
                target.nvm_size += element.size_bytes
            else:
                element.access = ElementAccess.RO
            target.elements.append(element)
        return target

    def _translate_variable(self, variable: TypedVariable, target: DatapoolList,
                            languages: list[str], report: list[str]) -> DatapoolElement:
        element = DatapoolElement()
        if len(languages) <= 1:
            comment = variable.comments[0]
        else:
            comment = "\n".join(f"{language}: {variable.comments[index]}"
                                for index, language in enumerate(languages))
        element.name, element.comment = adapt_name(
            variable.name, comment, "element", report, self.config.max_name_length
        )
        designator = f"{target.name}.{element.name}"

        element.set_data_set_count(len(target.data_sets))
        element_type = _TYPE_MAP.get(variable.data_type)
        if element_type is None:
            report.append(f"Variable \"{designator}\" has an unsupported type. "
                          f"It was imported as uint8.")
            element_type = ElementType.UINT8
        element.set_type(element_type)
        element.set_array(variable.is_array())
        if variable.is_array():
            element.set_array_size(variable.num_array_elements)

        _import_min_max(variable, element)
        _import_data_set_values(variable, element)

        if variable.is_array() and variable.num_array_elements == 1:
            report.append(f"Variable \"{designator}\" is an array with only one entry. "
                          f"It was imported as non-array element.")
            element.set_array(False)

        element.factor = variable.scaling_factor / float(SCALING_FACTOR_100_PERCENT)
        element.offset = 0.0
        element.unit = variable.unit
        element.diag_event_call = not variable.location_ram

        if variable.data_type == DataType.ASINT8:
            _terminate_strings(variable, element, target, designator, report)
        return element


# =============================================================================
# Value Copying
# =============================================================================

def _import_min_max(variable: TypedVariable, element: DatapoolElement) -> None:
    if element.array:
        for index in range(element.array_size):
            if element.type.is_float:
                element.min_value.set_array_element(index, variable.get_float_min_from_array(index))
                element.max_value.set_array_element(index, variable.get_float_max_from_array(index))
            else:
                element.min_value.set_array_element(index, variable.get_numeric_min_from_array(index))
                element.max_value.set_array_element(index, variable.get_numeric_max_from_array(index))
    elif element.type.is_float:
        element.min_value.set_value(variable.get_float_min())
        element.max_value.set_value(variable.get_float_max())
    else:
        element.min_value.set_value(variable.get_numeric_min())
        element.max_value.set_value(variable.get_numeric_max())


def _import_data_set_values(variable: TypedVariable, element: DatapoolElement) -> None:
    for default_index in range(min(variable.num_defaults, len(element.data_set_values))):
        content = element.data_set_values[default_index]
        if element.array:
            for index in range(element.array_size):
                if element.type.is_float:
                    value = variable.get_float_default_from_array(index, default_index)
                else:
                    value = variable.get_numeric_default_from_array(index, default_index)
                content.set_array_element(index, value)
        elif element.type.is_float:
            content.set_value(variable.get_float_default(default_index))
        else:
            content.set_value(variable.get_numeric_default(default_index))


def _terminate_strings(variable: TypedVariable, element: DatapoolElement,
                       target: DatapoolList, designator: str, report: list[str]) -> None:
    """Replace the last character of string defaults that fill the whole buffer."""
    if variable.size == 0 or element.array_size == 0:
        return
    for default_index in range(min(variable.num_defaults, len(element.data_set_values))):
        text = variable.get_string_default(default_index)
        if len(text) != variable.size:
            continue
        report.append(
            f"Datapool element \"{designator}\" is a string array. Dataset "
            f"\"{target.data_sets[default_index].name}\" contains value \"{text}\" without "
            f"zero termination. The final character was replaced by a zero termination."
        )
        content = element.data_set_values[default_index]
        if content.array:
            content.set_array_element(element.array_size - 1, 0)
        else:
            content.set_value(0)


def import_ramview_project(path: Union[str, Path],
                           kind: DatapoolKind = DatapoolKind.DIAG,
                           config: Optional[ImportConfig] = None) -> tuple[Datapool, list[str]]:
    """Import a RAMView project (see RamViewImporter.import_project)."""
    return RamViewImporter(config).import_project(path, kind)
