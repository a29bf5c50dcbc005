"""
Checksummed INI Files
=====================

RAMView project files (.def, .ram) are Windows INI style text files that
carry a checksum in a dedicated [INISAFE] section. The checksum does not
protect against malicious changes; it detects accidental manual edits of
files that are meant to be changed with the tool only.

File Layout
-----------
    [CONFIG]
    DEVICE=ECU_A
    ...
    [INISAFE]
    VERSION=2
    CHECKSUM=12345
    CHECKSUM_V2=54321

Checksum Algorithm
------------------
Only directive values are hashed (not keys, not section names). Each byte
of a value is rotated left by 3 bits, ((b << 3) | (b >> 5)) & 0xFF, and
fed into the running CRC16-STW. The [INISAFE] section itself is excluded.

Two generations are stamped on every save:

- V1: for section i, the values of sections 0..i are hashed again into
  the running CRC. This is quadratic in the number of sections and slow
  on large files, but older readers only know this one.
- V2: every section is hashed on its own from the start value; the
  section CRCs (u16, little-endian) are then folded into one CRC.

Verification checks V2 first and falls back to V1 for files stamped with
version 1 or for files whose V2 value does not match.

Usage
-----
    >>> ini = ChecksummedIniFile.from_file("project.def")
    >>> ini.check_checksum()
    True
    >>> ini.read_string("CONFIG", "DEVICENAME")
    'ECU_A'
    >>> ini.write_string("CONFIG", "DEVICENAME", "ECU_B")
    >>> ini.save()  # stamps fresh checksums

Copyright (c) 2026 kefex-legacy Contributors
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Iterator, Optional, Union
import logging

from kefex_legacy.crc import CRC16_STW_START, crc16_stw, crc_update_u16
from kefex_legacy.errors import FileAccessError, ProjectFileNotFoundError

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

SAFE_SECTION: Final[str] = "INISAFE"
KEY_VERSION: Final[str] = "VERSION"
KEY_CHECKSUM_V1: Final[str] = "CHECKSUM"
KEY_CHECKSUM_V2: Final[str] = "CHECKSUM_V2"

CHECKSUM_VERSION: Final[int] = 2

DEFAULT_ENCODING: Final[str] = "cp1252"

# Bytes that cannot be decoded are carried through unchanged
_ERRORS: Final[str] = "surrogateescape"

_TRUE_STRINGS: Final[frozenset[str]] = frozenset({"1", "TRUE", "YES", "ON"})


def _rotate_left_3(data: bytes) -> bytes:
    return bytes(((b << 3) | (b >> 5)) & 0xFF for b in data)


# =============================================================================
# Section Model
# =============================================================================

@dataclass
class IniSection:
    """
    One [section] with its entries in file order.

    Comment lines are kept in `comments`, keyed by the number of entries
    that precede them. They are written back but never hashed.
    """
    name: str
    entries: list[tuple[str, str]] = field(default_factory=list)
    comments: dict[int, list[str]] = field(default_factory=dict)
    header_comment: str = ""

    def add_comment(self, line: str) -> None:
        self.comments.setdefault(len(self.entries), []).append(line)

    def to_lines(self) -> list[str]:
        header = f"[{self.name}]"
        lines = [f"{header} {self.header_comment}" if self.header_comment else header]
        for index, (key, value) in enumerate(self.entries):
            lines.extend(self.comments.get(index, []))
            lines.append(f"{key}={value}")
        for position in sorted(self.comments):
            if position >= len(self.entries):
                lines.extend(self.comments[position])
        return lines

    def find(self, key: str) -> Optional[int]:
        """Index of the entry with this key (case-insensitive), or None."""
        wanted = key.upper()
        for index, (entry_key, _) in enumerate(self.entries):
            if entry_key.upper() == wanted:
                return index
        return None


# =============================================================================
# Checksummed INI File
# =============================================================================

class ChecksummedIniFile:
    """
    Key/section text store with a dual generation checksum.

    Section and key lookups are case-insensitive. The order of sections
    and entries is preserved when the file is written back.

    Attributes:
        path: File the store was loaded from (None for in-memory stores)
        encoding: Text encoding used for reading, writing and hashing
    """

    def __init__(self, path: Optional[Union[str, Path]] = None,
                 encoding: str = DEFAULT_ENCODING):
        self.path = Path(path) if path is not None else None
        self.encoding = encoding
        self._sections: list[IniSection] = []
        self._preamble: list[str] = []

    # =========================================================================
    # Loading and Saving
    # =========================================================================

    @classmethod
    def from_file(cls, path: Union[str, Path],
                  encoding: str = DEFAULT_ENCODING) -> "ChecksummedIniFile":
        """
        Load a store from a file.

        Raises:
            ProjectFileNotFoundError: If the file does not exist
            FileAccessError: If the file cannot be read
        """
        path = Path(path)
        if not path.is_file():
            raise ProjectFileNotFoundError(f"File \"{path}\" does not exist.", path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise FileAccessError(f"Cannot read \"{path}\": {e}", path) from e

        store = cls(path, encoding)
        store.parse(raw.decode(encoding, errors=_ERRORS))
        logger.debug(f"Loaded {path.name}: {len(store._sections)} sections")
        return store

    @classmethod
    def from_text(cls, text: str, encoding: str = DEFAULT_ENCODING) -> "ChecksummedIniFile":
        """Create an in-memory store from INI text."""
        store = cls(None, encoding)
        store.parse(text)
        return store

    def parse(self, text: str) -> None:
        """
        Replace the content with parsed INI text.

        Blank lines and entries before the first section header are ignored.
        Lines starting with ';' are kept as comments. Repeated section
        headers are merged.
        """
        self._sections = []
        self._preamble = []
        current: Optional[IniSection] = None
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped:
                continue
            if stripped.startswith(";"):
                if current is None:
                    self._preamble.append(stripped)
                else:
                    current.add_comment(stripped)
                continue
            if stripped.startswith("["):
                header, sep, comment = stripped.partition(";")
                header = header.rstrip()
                if header.endswith("]"):
                    name = header[1:-1].strip()
                    current = self._get_section(name)
                    if current is None:
                        current = IniSection(name)
                        self._sections.append(current)
                    if sep and not current.header_comment:
                        current.header_comment = sep + comment
                    continue
            if current is None:
                continue
            key, sep, value = stripped.partition("=")
            if not sep:
                continue
            current.entries.append((key.strip(), value.strip()))

    def to_text(self) -> str:
        """Serialize to INI text with CRLF line endings."""
        lines = list(self._preamble)
        for section in self._sections:
            lines.extend(section.to_lines())
            lines.append("")
        return "\r\n".join(lines)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Stamp fresh checksums and write the file.

        Args:
            path: Target file (defaults to the file the store was loaded from)

        Returns:
            The path written to
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            raise FileAccessError("No file name given for saving INI file")
        self.update_checksum()
        try:
            target.write_bytes(self.to_text().encode(self.encoding, errors=_ERRORS))
        except OSError as e:
            raise FileAccessError(f"Cannot write \"{target}\": {e}", target) from e
        self.path = target
        logger.debug(f"Saved {target.name}")
        return target

    # =========================================================================
    # Reading
    # =========================================================================

    def sections(self) -> list[str]:
        return [section.name for section in self._sections]

    def section_exists(self, section: str) -> bool:
        return self._get_section(section) is not None

    def section_values(self, section: str) -> list[tuple[str, str]]:
        """All (key, value) entries of a section, empty if it does not exist."""
        found = self._get_section(section)
        return list(found.entries) if found is not None else []

    def value_exists(self, section: str, key: str) -> bool:
        found = self._get_section(section)
        return found is not None and found.find(key) is not None

    def read_string(self, section: str, key: str, default: str = "") -> str:
        found = self._get_section(section)
        if found is None:
            return default
        index = found.find(key)
        if index is None:
            return default
        return found.entries[index][1]

    def read_int(self, section: str, key: str, default: int = 0) -> int:
        """
        Read an integer value (decimal or 0x-prefixed hexadecimal).

        Returns the default if the key is missing or not a number.
        """
        text = self.read_string(section, key, "")
        value = parse_int(text)
        return default if value is None else value

    def read_bool(self, section: str, key: str, default: bool = False) -> bool:
        text = self.read_string(section, key, "")
        if text == "":
            return default
        if text.upper() in _TRUE_STRINGS:
            return True
        value = parse_int(text)
        return bool(value) if value is not None else False

    # =========================================================================
    # Writing
    # =========================================================================

    def add_section(self, section: str) -> IniSection:
        """Get a section, appending an empty one if it does not exist."""
        found = self._get_section(section)
        if found is None:
            found = IniSection(section)
            self._sections.append(found)
        return found

    def write_string(self, section: str, key: str, value: str) -> None:
        found = self.add_section(section)
        index = found.find(key)
        if index is None:
            found.entries.append((key, value))
        else:
            found.entries[index] = (found.entries[index][0], value)

    def write_int(self, section: str, key: str, value: int) -> None:
        self.write_string(section, key, str(value))

    def write_bool(self, section: str, key: str, value: bool) -> None:
        self.write_string(section, key, "1" if value else "0")

    def erase_section(self, section: str) -> None:
        self._sections = [s for s in self._sections if s.name.upper() != section.upper()]

    # =========================================================================
    # Checksums
    # =========================================================================

    def _hashed_sections(self) -> Iterator[IniSection]:
        return (s for s in self._sections if s.name.upper() != SAFE_SECTION)

    def _hash_section(self, section: IniSection, crc: int) -> int:
        for _, value in section.entries:
            crc = crc16_stw(_rotate_left_3(value.encode(self.encoding, errors=_ERRORS)), crc)
        return crc

    def calc_checksum_v1(self) -> int:
        """Legacy checksum: re-hash all preceding sections for every section."""
        sections = list(self._hashed_sections())
        crc = CRC16_STW_START
        for last in range(len(sections)):
            for section in sections[:last + 1]:
                crc = self._hash_section(section, crc)
        return crc

    def calc_checksum_v2(self) -> int:
        """Current checksum: hash every section once, then fold the section CRCs."""
        crc = CRC16_STW_START
        for section in self._hashed_sections():
            crc = crc_update_u16(crc, self._hash_section(section, CRC16_STW_START))
        return crc

    def update_checksum(self) -> None:
        """Stamp VERSION, CHECKSUM (V1) and CHECKSUM_V2 into [INISAFE]."""
        v1 = self.calc_checksum_v1()
        v2 = self.calc_checksum_v2()
        self.write_int(SAFE_SECTION, KEY_VERSION, CHECKSUM_VERSION)
        self.write_int(SAFE_SECTION, KEY_CHECKSUM_V1, v1)
        self.write_int(SAFE_SECTION, KEY_CHECKSUM_V2, v2)

    def check_checksum(self) -> bool:
        """
        Verify the stamped checksum.

        Returns:
            True if the V2 checksum matches, or if the V1 checksum matches
            for version 1 files and files with a non-matching V2 value
        """
        if not self.section_exists(SAFE_SECTION):
            logger.debug(f"{self._label()}: no [{SAFE_SECTION}] section")
            return False

        version = self.read_int(SAFE_SECTION, KEY_VERSION, 1)
        if version >= 2:
            stored_v2 = parse_int(self.read_string(SAFE_SECTION, KEY_CHECKSUM_V2))
            if stored_v2 is not None and stored_v2 == self.calc_checksum_v2():
                return True

        stored_v1 = parse_int(self.read_string(SAFE_SECTION, KEY_CHECKSUM_V1))
        if stored_v1 is None:
            return False
        result = stored_v1 == self.calc_checksum_v1()
        if not result:
            logger.debug(f"{self._label()}: checksum mismatch")
        return result

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _get_section(self, name: str) -> Optional[IniSection]:
        wanted = name.upper()
        for section in self._sections:
            if section.name.upper() == wanted:
                return section
        return None

    def _label(self) -> str:
        return self.path.name if self.path is not None else "<memory>"


def parse_int(text: str) -> Optional[int]:
    """
    Parse a decimal or 0x-prefixed hexadecimal integer.

    Returns:
        The value, or None if the text is not a number
    """
    text = text.strip()
    if not text:
        return None
    try:
        if text[:1] in "+-" and text[1:3].lower() == "0x":
            return int(text, 16)
        if text[:2].lower() == "0x":
            return int(text, 16)
        return int(text, 10)
    except ValueError:
        return None
