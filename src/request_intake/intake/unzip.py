"""
Unzip collaborator.

Decompression is delegated: the pipeline only needs a callable taking the
ZIP bytes and an optional password and returning the members. The default
adapter wraps the standard library zipfile module.
"""

import io
import logging
import zipfile
import zlib
from dataclasses import dataclass
from typing import Protocol

from .. import IntakeError

logger = logging.getLogger(__name__)


class UnzipError(IntakeError):
    """The unzip collaborator could not extract the archive."""

    pass


@dataclass(frozen=True)
class ArchiveMember:
    """One extracted member."""

    name: str
    data: bytes


class Unzipper(Protocol):
    def __call__(self, data: bytes, password: str = "") -> list[ArchiveMember]: ...


class ZipfileUnzipper:
    """Extract members with zipfile; directories are skipped."""

    def __call__(self, data: bytes, password: str = "") -> list[ArchiveMember]:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                if password:
                    archive.setpassword(password.encode("utf-8"))
                members = []
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    members.append(ArchiveMember(name=info.filename, data=archive.read(info)))
        except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise UnzipError(f"Invalid ZIP archive: {e}") from e
        except RuntimeError as e:
            # zipfile reports missing/wrong passwords as RuntimeError
            raise UnzipError(f"Could not decrypt ZIP archive: {e}") from e
        except NotImplementedError as e:
            raise UnzipError(f"Unsupported ZIP feature: {e}") from e
        except (zlib.error, EOFError) as e:
            # Central directory is fine but the member data is corrupt or cut short
            raise UnzipError(f"Corrupt ZIP member data: {e}") from e

        logger.debug(f"Unzipped {len(members)} member(s)")
        return members
