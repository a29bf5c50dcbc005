"""
Tests for RAMView Default Value Files
=====================================

Test Categories
---------------
1. Round-Trip Tests: save_dat output applied by load_dat
2. Matching Tests: Device check, partial matches and size clipping
3. Format Tests: Malformed, truncated and oversized files
4. Block Tests: Default set block 0x0101 and unknown blocks
"""

import struct
import warnings
import zlib

import pytest

from conftest import DEMO_DEVICE
from kefex_legacy.config import ImportConfig
from kefex_legacy.errors import (
    DeviceMismatchError,
    FormatInvalidError,
    InconsistentError,
    PartialMatchWarning,
    ProjectFileNotFoundError,
    ResourceExhaustedError,
)
from kefex_legacy.files.datfile import (
    BLOCK_ID_DEFAULT_SETS,
    BLOCK_ID_VALUES,
    build_dat_payload,
    decompress_dat,
    load_dat,
    parse_dat_payload,
    save_dat,
)
from kefex_legacy.variables import DataType, VariableList, VariableListCollection, make_variable


# =============================================================================
# Helpers
# =============================================================================

def pack_str(text: str) -> bytes:
    raw = text.encode("cp1252")
    return struct.pack("<H", len(raw)) + raw


def dat_file(payload: bytes) -> bytes:
    return struct.pack("<I", len(payload)) + zlib.compress(payload)


def values_block(device: str, lists: list[tuple[str, list[tuple[str, bytes]]]]) -> bytes:
    """Block 0x0100 with the given lists of (variable name, default 0 bytes)."""
    data = struct.pack("<H", BLOCK_ID_VALUES) + pack_str(device) + struct.pack("<H", len(lists))
    for list_name, variables in lists:
        data += pack_str(list_name) + struct.pack("<H", len(variables))
        for name, value in variables:
            data += pack_str(name) + struct.pack("<I", len(value)) + value
    return data


def trailing_block(block_id: int, content: bytes) -> bytes:
    return struct.pack("<HI", block_id, len(content)) + content


@pytest.fixture
def cleared(demo_collection):
    """Demo collection with all default values cleared."""
    demo_collection.clear_defaults()
    return demo_collection


# =============================================================================
# Round-Trip Tests
# =============================================================================

class TestRoundTrip:
    """Tests that load_dat restores what save_dat wrote."""

    def test_all_default_sets_restored(self, tmp_path, demo_collection):
        path = save_dat(tmp_path / "demo.dat", DEMO_DEVICE, demo_collection)
        expected = [bytes(buffer) for _, var in demo_collection.iter_variables()
                    for buffer in var.defaults]

        demo_collection.clear_defaults()
        result = load_dat(path, DEMO_DEVICE, demo_collection)

        restored = [bytes(buffer) for _, var in demo_collection.iter_variables()
                    for buffer in var.defaults]
        assert restored == expected
        assert result.matched_variables == 7
        assert not result.partial
        assert result.default_set_names == ["Factory", "DEFAULT_1"]

    def test_file_layout(self, tmp_path, demo_collection):
        path = save_dat(tmp_path / "demo.dat", DEMO_DEVICE, demo_collection)
        raw = path.read_bytes()
        payload = zlib.decompress(raw[4:])
        assert struct.unpack_from("<I", raw)[0] == len(payload)
        assert struct.unpack_from("<H", payload)[0] == BLOCK_ID_VALUES
        assert payload[2:9] == pack_str(DEMO_DEVICE)

    def test_single_default_set_has_no_extension_block(self):
        lst = VariableList(name="Only")
        lst.set_num_defaults(1)
        lst.add_variable(make_variable("Speed", DataType.UINT16))
        payload = build_dat_payload("DEV", VariableListCollection(lists=[lst]))
        assert payload == values_block("DEV", [("Only", [("Speed", b"\x00\x00")])])

    def test_loading_clears_previous_defaults(self, demo_collection):
        payload = values_block(DEMO_DEVICE, [])
        parse_dat_payload(payload, DEMO_DEVICE, demo_collection)
        speed = demo_collection[0].variables[0]
        assert speed.get_numeric_default(0) == 0
        assert speed.get_numeric_default(1) == 0


# =============================================================================
# Matching Tests
# =============================================================================

class TestMatching:
    """Tests for matching file content to the project."""

    def test_device_mismatch(self, tmp_path, demo_collection):
        path = save_dat(tmp_path / "demo.dat", "ECU_B", demo_collection)
        with pytest.raises(DeviceMismatchError) as exc_info:
            load_dat(path, DEMO_DEVICE, demo_collection)
        assert isinstance(exc_info.value, FormatInvalidError)
        assert exc_info.value.actual == "ECU_B"

    def test_device_mismatch_keeps_defaults(self, demo_collection):
        payload = values_block("ECU_B", [])
        with pytest.raises(DeviceMismatchError):
            parse_dat_payload(payload, DEMO_DEVICE, demo_collection)
        assert demo_collection[0].variables[0].get_numeric_default(0) == 1000

    def test_names_match_ignoring_case(self, cleared):
        payload = values_block(DEMO_DEVICE, [("SETTINGS", [("speed", b"\x34\x12")])])
        result = parse_dat_payload(payload, DEMO_DEVICE, cleared)
        assert cleared[0].variables[0].get_numeric_default(0) == 0x1234
        assert result.matched_variables == 1

    def test_partial_match(self, tmp_path, cleared):
        payload = values_block(DEMO_DEVICE, [
            ("Settings", [("Speed", b"\x10\x00"), ("Unknown", b"\x01")]),
            ("Missing", [("A", b"\x01"), ("B", b"\x02")]),
        ])
        path = tmp_path / "demo.dat"
        path.write_bytes(dat_file(payload))

        with pytest.warns(PartialMatchWarning):
            result = load_dat(path, DEMO_DEVICE, cleared)

        assert result.partial
        assert result.unmatched_lists == 1
        assert result.unmatched_variables == 1
        assert result.matched_variables == 1
        assert cleared[0].variables[0].get_numeric_default(0) == 0x10

    def test_full_match_issues_no_warning(self, tmp_path, demo_collection):
        path = save_dat(tmp_path / "demo.dat", DEMO_DEVICE, demo_collection)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            load_dat(path, DEMO_DEVICE, demo_collection)

    def test_longer_value_is_clipped(self, cleared):
        payload = values_block(DEMO_DEVICE, [("Settings", [("Speed", b"\x01\x02\x03\x04")])])
        parse_dat_payload(payload, DEMO_DEVICE, cleared)
        assert bytes(cleared[0].variables[0].defaults[0]) == b"\x01\x02"

    def test_shorter_value_fills_start(self, cleared):
        payload = values_block(DEMO_DEVICE, [("Nvm Params", [("Table", b"\x09")])])
        parse_dat_payload(payload, DEMO_DEVICE, cleared)
        assert bytes(cleared[1].variables[1].defaults[0]) == b"\x09\x00\x00"


# =============================================================================
# Format Tests
# =============================================================================

class TestFormat:
    """Tests for malformed files."""

    def test_missing_file(self, tmp_path, demo_collection):
        with pytest.raises(ProjectFileNotFoundError):
            load_dat(tmp_path / "missing.dat", DEMO_DEVICE, demo_collection)

    def test_wrong_block_id(self, tmp_path, demo_collection):
        payload = struct.pack("<H", 0x0200) + pack_str(DEMO_DEVICE)
        path = tmp_path / "demo.dat"
        path.write_bytes(dat_file(payload))
        with pytest.raises(FormatInvalidError, match="block id 0x0200"):
            load_dat(path, DEMO_DEVICE, demo_collection)

    def test_truncated_payload(self, tmp_path, demo_collection):
        payload = build_dat_payload(DEMO_DEVICE, demo_collection)[:40]
        path = tmp_path / "demo.dat"
        path.write_bytes(dat_file(payload))
        with pytest.raises(FormatInvalidError, match="Unexpected end"):
            load_dat(path, DEMO_DEVICE, demo_collection)

    def test_corrupt_compression(self, tmp_path, demo_collection):
        path = tmp_path / "demo.dat"
        path.write_bytes(struct.pack("<I", 10) + b"not zlib data")
        with pytest.raises(FormatInvalidError):
            load_dat(path, DEMO_DEVICE, demo_collection)

    def test_file_too_small(self):
        with pytest.raises(FormatInvalidError):
            decompress_dat(b"\x01\x02", 1024)

    def test_length_mismatch(self):
        raw = struct.pack("<I", 99) + zlib.compress(b"short")
        with pytest.raises(FormatInvalidError, match="length mismatch"):
            decompress_dat(raw, 1024)

    def test_size_limit(self, tmp_path, demo_collection):
        path = save_dat(tmp_path / "demo.dat", DEMO_DEVICE, demo_collection)
        with pytest.raises(ResourceExhaustedError):
            load_dat(path, DEMO_DEVICE, demo_collection, ImportConfig(max_dat_size=10))


# =============================================================================
# Block Tests
# =============================================================================

class TestBlocks:
    """Tests for trailing blocks."""

    def test_unknown_block_is_skipped(self, cleared):
        payload = values_block(DEMO_DEVICE, [("Settings", [("Speed", b"\x05\x00")])])
        payload += trailing_block(0x0777, b"\xAA" * 12)
        result = parse_dat_payload(payload, DEMO_DEVICE, cleared)
        assert result.matched_variables == 1
        assert result.default_set_names == []

    def test_default_set_block(self, cleared):
        payload = values_block(DEMO_DEVICE, [("Settings", [("Speed", b"\x05\x00")])])
        content = (struct.pack("<H", 2) + pack_str("Factory") + pack_str("Service")
                   + struct.pack("<H", 1) + struct.pack("<H", 1)
                   + struct.pack("<I", 2) + b"\x06\x00")
        payload += trailing_block(BLOCK_ID_DEFAULT_SETS, content)
        result = parse_dat_payload(payload, DEMO_DEVICE, cleared)
        speed = cleared[0].variables[0]
        assert speed.get_numeric_default(0) == 5
        assert speed.get_numeric_default(1) == 6
        assert result.default_set_names == ["Factory", "Service"]

    def test_extra_default_sets_are_ignored(self, cleared):
        payload = values_block(DEMO_DEVICE, [("Settings", [("Speed", b"\x05\x00")])])
        content = (struct.pack("<H", 3) + pack_str("A") + pack_str("B") + pack_str("C")
                   + struct.pack("<H", 1) + struct.pack("<H", 1)
                   + struct.pack("<I", 2) + b"\x06\x00" + b"\x07\x00")
        payload += trailing_block(BLOCK_ID_DEFAULT_SETS, content)
        parse_dat_payload(payload, DEMO_DEVICE, cleared)
        speed = cleared[0].variables[0]
        assert speed.num_defaults == 2
        assert speed.get_numeric_default(1) == 6

    def test_list_count_mismatch(self, cleared):
        payload = values_block(DEMO_DEVICE, [("Settings", [("Speed", b"\x05\x00")])])
        content = struct.pack("<H", 2) + pack_str("A") + pack_str("B") + struct.pack("<H", 2)
        payload += trailing_block(BLOCK_ID_DEFAULT_SETS, content)
        with pytest.raises(InconsistentError):
            parse_dat_payload(payload, DEMO_DEVICE, cleared)

    def test_variable_count_mismatch(self, cleared):
        payload = values_block(DEMO_DEVICE, [("Settings", [("Speed", b"\x05\x00")])])
        content = (struct.pack("<H", 2) + pack_str("A") + pack_str("B")
                   + struct.pack("<H", 1) + struct.pack("<H", 3))
        payload += trailing_block(BLOCK_ID_DEFAULT_SETS, content)
        with pytest.raises(InconsistentError):
            parse_dat_payload(payload, DEMO_DEVICE, cleared)
