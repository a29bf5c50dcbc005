"""
Tests for RAMView Project Files
===============================

This module tests loading and writing of .def, .ram and .rec files.

Test Categories
---------------
1. Project Option Tests: .def validation and option parsing
2. Discovery Tests: Finding and ordering the .ram files of a device
3. List Parsing Tests: Variable entries of .ram files
4. Round-Trip Tests: Writers and loaders agree on the demo project
5. Comment Tests: .rec language sections
"""

from pathlib import Path

import pytest

from conftest import (
    DEMO_DEVICE,
    LONG_VARIABLE_NAME,
    build_demo_collection,
    ram_file_text,
    write_ini,
    write_project,
)
from kefex_legacy.errors import (
    ChecksumError,
    CommentFileError,
    ConfigurationError,
    FormatInvalidError,
    InconsistentError,
    ProjectFileNotFoundError,
)
from kefex_legacy.files.defproject import (
    ProjectOptions,
    RamFileRef,
    find_related_files,
    load_comments,
    load_def_project,
    load_default_names,
    load_project_options,
    load_ram_files,
    load_ram_list,
    sort_ram_files,
    transmission_type_from_string,
)
from kefex_legacy.files.inifile import ChecksummedIniFile
from kefex_legacy.variables import (
    Access,
    DataType,
    ListKind,
    TransmissionType,
    VariableListCollection,
    int64_bits_from_f64,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def loaded(demo_project):
    """Demo project loaded back from disk."""
    return load_def_project(demo_project)


def write_def(path: Path, device: str = DEMO_DEVICE) -> Path:
    return write_ini(path, f"[CONFIG]\nDEVICENAME={device}\nDATA_VERSION=0x0102\n")


# =============================================================================
# Project Option Tests
# =============================================================================

class TestProjectOptions:
    """Tests for .def loading."""

    def test_options(self, demo_project):
        options = load_project_options(demo_project)
        assert options.device_name == DEMO_DEVICE
        assert options.data_version == 0x1234
        assert options.meta_info == ["Demo project", "Second line"]
        assert options.path == demo_project

    def test_version_bytes(self):
        assert ProjectOptions(data_version=0x1234).version_bytes == (1, 0x23, 4)
        assert ProjectOptions(data_version=0xFFFF).version_bytes == (15, 255, 15)

    def test_wrong_extension(self, tmp_path):
        path = write_def(tmp_path / "project.txt")
        with pytest.raises(FormatInvalidError, match="file extension"):
            load_project_options(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectFileNotFoundError):
            load_project_options(tmp_path / "missing.def")

    def test_bad_checksum(self, tmp_path):
        path = write_def(tmp_path / "project.def")
        path.write_bytes(path.read_bytes().replace(b"ECU_A", b"ECU_B"))
        with pytest.raises(ChecksumError, match="incorrect file checksum"):
            load_project_options(path)

    def test_missing_device_name(self, tmp_path):
        path = write_ini(tmp_path / "project.def", "[CONFIG]\nDATA_VERSION=1\n")
        with pytest.raises(FormatInvalidError, match="DEVICENAME"):
            load_project_options(path)

    def test_default_names(self, loaded):
        assert loaded.lists.default_set_names == ["Factory"]

    def test_default_names_without_explicit_name(self, tmp_path):
        path = write_ini(tmp_path / "project.def",
                         "[CONFIG]\nDEVICENAME=X\n[DEFAULT_SETS]\nDEFAULT_NAMES=2\n"
                         "NAMEDEFAULT1=Service\n")
        ini = ChecksummedIniFile.from_file(path)
        collection = VariableListCollection()
        load_default_names(ini, collection)
        assert collection.default_set_names == ["DEFAULT_0", "Service"]


# =============================================================================
# Discovery Tests
# =============================================================================

class TestDiscovery:
    """Tests for finding and ordering .ram files."""

    def test_other_devices_are_ignored(self, tmp_path):
        write_ini(tmp_path / "a.ram", ram_file_text(device="ECU_A"))
        write_ini(tmp_path / "b.ram", ram_file_text(device="ECU_B"))
        write_ini(tmp_path / "c.txt", ram_file_text(device="ECU_A"))
        files, warnings = find_related_files(tmp_path, "ECU_A")
        assert [ref.path.name for ref in files] == ["a.ram"]
        assert warnings == []

    def test_device_name_is_case_sensitive(self, tmp_path):
        write_ini(tmp_path / "a.ram", ram_file_text(device="ecu_a"))
        files, _ = find_related_files(tmp_path, "ECU_A")
        assert files == []

    def test_bad_checksum_is_a_warning(self, tmp_path):
        path = write_ini(tmp_path / "a.ram", ram_file_text())
        path.write_bytes(path.read_bytes().replace(b"Manual", b"Manuel"))
        files, warnings = find_related_files(tmp_path, DEMO_DEVICE)
        assert files == []
        assert warnings == ["File a.ram has an incorrect checksum."]

    def test_sort_by_list_index(self):
        refs = [RamFileRef(Path("b.ram"), 1), RamFileRef(Path("a.ram"), 0)]
        assert [ref.list_index for ref in sort_ram_files(refs)] == [0, 1]

    def test_duplicate_list_index(self):
        refs = [RamFileRef(Path("a.ram"), 0), RamFileRef(Path("b.ram"), 0)]
        with pytest.raises(ConfigurationError, match="same list index"):
            sort_ram_files(refs)

    def test_gap_in_list_indexes(self):
        refs = [RamFileRef(Path("a.ram"), 0), RamFileRef(Path("c.ram"), 2)]
        with pytest.raises(ConfigurationError, match="between list files"):
            sort_ram_files(refs)

    def test_first_index_not_zero(self):
        refs = [RamFileRef(Path("a.ram"), 1)]
        with pytest.raises(ConfigurationError, match="does not have index 0"):
            sort_ram_files(refs)

    def test_missing_list_index(self, tmp_path):
        text = ram_file_text().replace("LISTINDEX=0\n", "")
        write_ini(tmp_path / "a.ram", text)
        files, _ = find_related_files(tmp_path, DEMO_DEVICE)
        with pytest.raises(ConfigurationError):
            sort_ram_files(files)

    def test_no_lists(self, tmp_path):
        with pytest.raises(InconsistentError, match="No variable lists"):
            load_ram_files(tmp_path, DEMO_DEVICE, VariableListCollection())

    def test_gap_aborts_project_load(self, tmp_path):
        write_def(tmp_path / "project.def")
        write_ini(tmp_path / "a.ram", ram_file_text(list_index=0))
        write_ini(tmp_path / "b.ram", ram_file_text(list_index=2, list_name="Other"))
        with pytest.raises(ConfigurationError, match="Gap in list indexes"):
            load_def_project(tmp_path / "project.def")


# =============================================================================
# List Parsing Tests
# =============================================================================

class TestListParsing:
    """Tests for .ram variable entries."""

    def load_single(self, tmp_path, body: str):
        path = write_ini(tmp_path / "a.ram", ram_file_text(variables=(body,)))
        return load_ram_list(path).variables[0]

    def test_missing_list_name(self, tmp_path):
        path = write_ini(tmp_path / "a.ram", ram_file_text(list_name=""))
        with pytest.raises(ConfigurationError, match="List has no valid name"):
            load_ram_list(path)

    def test_legacy_type_name_and_auto_size(self, tmp_path):
        var = self.load_single(tmp_path, "NAME=Old\nTYPE=WORD\nMIN=1\nMAX=9")
        assert var.data_type == DataType.UINT16
        assert var.size == 2
        assert var.get_numeric_min() == 1
        assert var.get_numeric_max() == 9

    def test_invalid_type(self, tmp_path):
        with pytest.raises(ConfigurationError, match="invalid type"):
            self.load_single(tmp_path, "NAME=Bad\nTYPE_INDEX=22\nSIZE=1")

    def test_novar_type_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError, match="invalid type"):
            self.load_single(tmp_path, "NAME=Bad\nTYPE_INDEX=0\nSIZE=1")

    def test_invalid_access(self, tmp_path):
        body = "NAME=Bad\nTYPE_INDEX=1\nSIZE=1\n" + "\n".join(
            f"ACCESS{group}={'XX' if group == 3 else 'RW'}" for group in range(10)
        )
        with pytest.raises(ConfigurationError, match="XX invalid access type"):
            self.load_single(tmp_path, body)

    def test_access_strings(self, tmp_path):
        body = "NAME=Acc\nTYPE_INDEX=1\nSIZE=1\nACCESS0=ro\nACCESS1=WO\nACCESS2=INV\n" + \
            "\n".join(f"ACCESS{group}=RW" for group in range(3, 10))
        var = self.load_single(tmp_path, body)
        assert var.access[:4] == [Access.RO, Access.WO, Access.INVISIBLE, Access.RW]

    def test_unparsable_scalar_range_is_zero(self, tmp_path):
        var = self.load_single(tmp_path, "NAME=X\nTYPE_INDEX=3\nSIZE=2\nMIN=abc\nMAX=100")
        assert var.get_numeric_min() == 0
        assert var.get_numeric_max() == 0

    def test_missing_max_keeps_range_zero(self, tmp_path):
        var = self.load_single(tmp_path, "NAME=X\nTYPE_INDEX=3\nSIZE=2\nMIN=5")
        assert var.get_numeric_min() == 0
        assert var.get_numeric_max() == 0

    def test_array_without_range_gets_full_range(self, tmp_path):
        var = self.load_single(tmp_path, "NAME=X\nTYPE_INDEX=13\nSIZE=4\nMIN=0\nMAX=0")
        assert var.get_numeric_max_from_array(1) == 0xFFFF

    def test_uint64_array_without_range_gets_full_range(self, tmp_path):
        var = self.load_single(tmp_path, "NAME=Big\nTYPE_INDEX=21\nSIZE=16\nMIN=0\nMAX=0")
        assert var.data_type == DataType.AUINT64
        assert bytes(var.min_value) == bytes(16)
        assert bytes(var.max_value) == b"\xFF" * 16

    def test_array_range_per_byte(self, tmp_path):
        var = self.load_single(tmp_path, "NAME=X\nTYPE_INDEX=9\nSIZE=2\nMIN=1;2\nMAX=10;20")
        assert bytes(var.min_value) == b"\x01\x02"
        assert bytes(var.max_value) == b"\x0a\x14"

    def test_float_range_from_int64_bits(self, tmp_path):
        body = (f"NAME=F\nTYPE_INDEX=10\nSIZE=4\nMIN={int64_bits_from_f64(-2.0)}\n"
                f"MAX={int64_bits_from_f64(1.5)}")
        var = self.load_single(tmp_path, body)
        assert var.get_float_max() == 1.5
        assert var.get_float_min() == -2.0

    def test_transmission_defaults(self, tmp_path):
        var = self.load_single(tmp_path, "NAME=T\nTYPE_INDEX=1\nSIZE=1\nTRANSTIME=abc")
        assert var.transmission.type == TransmissionType.SRR
        assert var.transmission.interval == 200
        assert var.transmission.lower_hysteresis == 10
        assert var.transmission.upper_hysteresis == 10
        assert var.scaling_factor == 10000

    def test_keys_are_case_insensitive(self, tmp_path):
        var = self.load_single(tmp_path, "name=Lower\ntype_index=4\nsize=2\nunit=km/h")
        assert var.name == "Lower"
        assert var.unit == "km/h"

    @pytest.mark.parametrize("text, expected", [
        ("SRR", TransmissionType.SRR),
        ("tcrr", TransmissionType.TCRR),
        ("ECRR", TransmissionType.ECRR),
        ("TCRR(TS)", TransmissionType.TCRRTS),
        ("unknown", TransmissionType.SRR),
    ])
    def test_transmission_type_from_string(self, text, expected):
        assert transmission_type_from_string(text) == expected


# =============================================================================
# Round-Trip Tests
# =============================================================================

class TestRoundTrip:
    """Tests that the writers produce files the loaders accept unchanged."""

    def test_lists_in_index_order(self, loaded):
        assert [lst.name for lst in loaded.lists] == ["Settings", "Nvm Params"]
        assert loaded.warnings == []

    def test_list_metadata(self, loaded):
        settings, nvm = loaded.lists.lists
        assert settings.kind == ListKind.RAM
        assert not settings.checksummed
        assert nvm.kind == ListKind.EEPROM
        assert nvm.checksummed
        assert nvm.checksum_address == 0x200
        assert nvm.num_defaults == 2

    def test_list_definitions_match(self, loaded):
        original = build_demo_collection()
        for written, read in zip(original, loaded.lists):
            for written_var, read_var in zip(written, read):
                assert read_var.name == written_var.name
                assert read_var.data_type == written_var.data_type
                assert read_var.size == written_var.size
                assert read_var.address == written_var.address
                assert read_var.min_value == written_var.min_value
                assert read_var.max_value == written_var.max_value
                assert read_var.unit == written_var.unit
                assert read_var.location_ram == written_var.location_ram
                assert read_var.scaling_factor == written_var.scaling_factor

    def test_float_range(self, loaded):
        gain = loaded.lists[0].variables[1]
        assert gain.get_float_min() == -1.5
        assert gain.get_float_max() == 1.5

    def test_invalid_access_written_as_invisible(self, tmp_path):
        collection = build_demo_collection()
        collection[0].variables[0].access[9] = Access.INVALID
        def_path = write_project(tmp_path, collection)
        reloaded = load_def_project(def_path)
        assert reloaded.lists[0].variables[0].access[9] == Access.INVISIBLE

    def test_long_variable_name(self, loaded):
        assert loaded.lists[1].variables[2].name == LONG_VARIABLE_NAME

    def test_values_and_defaults_not_loaded(self, loaded):
        speed = loaded.lists[0].variables[0]
        assert speed.get_numeric_value() == 0
        assert speed.get_numeric_default(0) == 0


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Tests for .rec comment files."""

    def test_comments_loaded(self, loaded, demo_project):
        descriptions = load_comments(demo_project.with_suffix(".rec"), DEMO_DEVICE, loaded.lists)
        assert descriptions == ["English", "German", "", "", ""]
        speed = loaded.lists[0].variables[0]
        assert speed.comments[:2] == ["Engine speed", "Drehzahl"]

    def test_keys_ignore_case_and_unknown_keys(self, loaded, tmp_path):
        path = tmp_path / "comments.rec"
        ChecksummedIniFile.from_text(
            f"[CONFIG]\nDEVICE={DEMO_DEVICE}\nNUMOFLANG=1\nLANGNAME1=English\n"
            "[English]\nsettings.GAIN=Amplification\nMissing.Var=x\nSettings.Missing=y\n"
        ).save(path)
        load_comments(path, DEMO_DEVICE, loaded.lists)
        assert loaded.lists[0].variables[1].comments[0] == "Amplification"
        assert loaded.lists[0].variables[0].comments[0] == ""

    def test_missing_file(self, loaded, tmp_path):
        with pytest.raises(ProjectFileNotFoundError, match="File does not exist."):
            load_comments(tmp_path / "missing.rec", DEMO_DEVICE, loaded.lists)

    def test_other_device(self, loaded, demo_project):
        with pytest.raises(CommentFileError, match="different project"):
            load_comments(demo_project.with_suffix(".rec"), "ECU_B", loaded.lists)

    def test_comments_cleared_before_device_check(self, loaded, demo_project):
        rec = demo_project.with_suffix(".rec")
        load_comments(rec, DEMO_DEVICE, loaded.lists)
        with pytest.raises(CommentFileError):
            load_comments(rec, "ECU_B", loaded.lists)
        assert loaded.lists[0].variables[0].comments[0] == ""

    def test_too_many_languages(self, loaded, tmp_path):
        path = tmp_path / "comments.rec"
        ChecksummedIniFile.from_text(f"[CONFIG]\nDEVICE={DEMO_DEVICE}\nNUMOFLANG=6\n").save(path)
        with pytest.raises(CommentFileError, match="Too many languages"):
            load_comments(path, DEMO_DEVICE, loaded.lists)

    def test_missing_language_section(self, loaded, tmp_path):
        path = tmp_path / "comments.rec"
        ChecksummedIniFile.from_text(
            f"[CONFIG]\nDEVICE={DEMO_DEVICE}\nNUMOFLANG=1\nLANGNAME1=French\n"
        ).save(path)
        with pytest.raises(CommentFileError, match="Invalid language name"):
            load_comments(path, DEMO_DEVICE, loaded.lists)
