"""
ZIP central directory inspector.

Lists member metadata (name, compression method, encryption flag) by
walking the central directory by hand. Member data is never decompressed.

Malformed input is not an error: a missing End-Of-Central-Directory record
or a broken central directory yields an empty or partial listing, and the
DirectoryStatus tells the caller which of those happened.
"""

import logging
import struct
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

# ---- ZIP layout ----
EOCD_SIGNATURE = b"PK\x05\x06"  # End of central directory
CDFH_SIGNATURE = b"PK\x01\x02"  # Central directory file header
EOCD_MIN_SIZE = 22
CDFH_FIXED_SIZE = 46

# Offsets inside the EOCD record
EOCD_CD_SIZE = 12
EOCD_CD_OFFSET = 16

# Offsets inside a central directory file header
CDFH_FLAGS = 8
CDFH_METHOD = 10
CDFH_NAME_LEN = 28  # followed by extra length (30) and comment length (32)

FLAG_ENCRYPTED = 0x1

METHOD_NAMES = {
    0: "Store",
    8: "Deflate",
    9: "Deflate64",
    12: "BZIP2",
    14: "LZMA",
    98: "PPMd",
    99: "AES",
}

PREVIEW_ENTRIES = 5


def method_name(method: int) -> str:
    """Symbolic name of a ZIP compression method."""
    return METHOD_NAMES.get(method, f"method {method}")


@dataclass(frozen=True)
class ZipEntryMetadata:
    """One central directory record."""

    name: str
    compression_method: int
    encrypted: bool

    @property
    def method_name(self) -> str:
        return method_name(self.compression_method)


class DirectoryStatus(str, Enum):
    """
    How the central directory walk ended.

    COMPLETE: every record up to the recorded directory end was read
    EMPTY: the EOCD was found but the directory holds no records
    MISSING_EOCD: no End-Of-Central-Directory signature in the buffer
    TRUNCATED: the walk stopped early (bad signature or buffer end)
    """

    COMPLETE = "complete"
    EMPTY = "empty"
    MISSING_EOCD = "missing_eocd"
    TRUNCATED = "truncated"


@dataclass
class ZipDirectory:
    """Result of inspecting a ZIP buffer."""

    status: DirectoryStatus
    entries: list[ZipEntryMetadata] = field(default_factory=list)

    def methods(self) -> set[int]:
        return {e.compression_method for e in self.entries}

    def has_suffix(self, suffix: str) -> bool:
        """True if any member name ends with suffix (case-insensitive)."""
        suffix = suffix.lower()
        return any(e.name.lower().endswith(suffix) for e in self.entries)


def find_eocd(data: bytes) -> int:
    """
    Locate the End-Of-Central-Directory record.

    Scans backward from len(data) - 22 toward 0 and returns the offset of
    the first signature found, or -1. The whole buffer is searched, not
    only the trailing comment window.
    """
    last_start = len(data) - EOCD_MIN_SIZE
    if last_start < 0:
        return -1
    return data.rfind(EOCD_SIGNATURE, 0, last_start + len(EOCD_SIGNATURE))


class ZipDirectoryInspector:
    """
    Walk a ZIP central directory without decompressing anything.

    Stateless; one instance can be shared across threads.
    """

    def inspect(self, data: bytes) -> list[ZipEntryMetadata]:
        """List member metadata in central directory order."""
        return self.inspect_directory(data).entries

    def inspect_directory(self, data: bytes) -> ZipDirectory:
        """Inspect a buffer and report how the walk ended."""
        data = bytes(data)

        eocd = find_eocd(data)
        if eocd < 0:
            return ZipDirectory(status=DirectoryStatus.MISSING_EOCD)

        cd_size = struct.unpack_from("<I", data, eocd + EOCD_CD_SIZE)[0]
        cd_offset = struct.unpack_from("<I", data, eocd + EOCD_CD_OFFSET)[0]
        cd_end = cd_offset + cd_size

        entries: list[ZipEntryMetadata] = []
        status = DirectoryStatus.COMPLETE
        pos = cd_offset

        while pos + CDFH_FIXED_SIZE <= cd_end:
            if pos + CDFH_FIXED_SIZE > len(data):
                status = DirectoryStatus.TRUNCATED
                break
            if data[pos : pos + 4] != CDFH_SIGNATURE:
                status = DirectoryStatus.TRUNCATED
                break

            flags = struct.unpack_from("<H", data, pos + CDFH_FLAGS)[0]
            method = struct.unpack_from("<H", data, pos + CDFH_METHOD)[0]
            name_len, extra_len, comment_len = struct.unpack_from("<HHH", data, pos + CDFH_NAME_LEN)

            name_start = pos + CDFH_FIXED_SIZE
            # One byte, one code point; the UTF-8 flag (bit 11) is not honoured
            name = data[name_start : name_start + name_len].decode("latin-1")

            entries.append(
                ZipEntryMetadata(
                    name=name,
                    compression_method=method,
                    encrypted=bool(flags & FLAG_ENCRYPTED),
                )
            )
            pos = name_start + name_len + extra_len + comment_len

        if not entries and status == DirectoryStatus.COMPLETE:
            status = DirectoryStatus.EMPTY

        if entries:
            preview = "; ".join(
                f"{e.name} [{e.method_name}{', enc' if e.encrypted else ''}]"
                for e in entries[:PREVIEW_ENTRIES]
            )
            logger.info(f"ZIP entries (first few): {preview}")

        return ZipDirectory(status=status, entries=entries)
