"""
ZIP container inspection.

Provides:
- ZipDirectoryInspector: Central directory walk (no decompression)
- ZipEntryMetadata: Name, compression method, encryption flag per member
- DirectoryStatus: Complete / empty / missing EOCD / truncated
"""

from .inspector import (
    METHOD_NAMES,
    DirectoryStatus,
    ZipDirectory,
    ZipDirectoryInspector,
    ZipEntryMetadata,
    find_eocd,
    method_name,
)

__all__ = [
    "ZipDirectoryInspector",
    "ZipDirectory",
    "ZipEntryMetadata",
    "DirectoryStatus",
    "METHOD_NAMES",
    "find_eocd",
    "method_name",
]
