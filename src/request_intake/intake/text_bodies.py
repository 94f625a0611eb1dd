"""
Text member decoding.

Request forms are usually Shift_JIS; each member is strictly decoded with
the configured charsets in order and the first non-empty result wins.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .unzip import ArchiveMember

logger = logging.getLogger(__name__)

BOM = "\ufeff"


@dataclass(frozen=True)
class TextBody:
    """A decoded text member."""

    name: str
    text: str
    charset: str


def decode_text(data: bytes, charsets: Iterable[str], name: str = "file.txt") -> Optional[TextBody]:
    """Decode bytes with the first charset that works; None if none does."""
    for charset in charsets:
        try:
            text = data.decode(charset)
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning(f"{name}: charset {charset!r} failed: {e}")
            continue
        text = text.lstrip(BOM).strip()
        if text:
            return TextBody(name=name, text=text, charset=charset)
    return None


def extract_text_bodies(
    members: Iterable[ArchiveMember],
    charsets: Iterable[str],
    suffix: str = ".txt",
) -> list[TextBody]:
    """Decode every member whose name ends with suffix; undecodable ones are skipped."""
    charsets = list(charsets)
    suffix = suffix.lower()
    bodies: list[TextBody] = []
    for member in members:
        if not member.name.lower().endswith(suffix):
            continue
        body = decode_text(member.data, charsets, member.name)
        if body is None:
            logger.error(f"Could not decode {member.name} with any charset; skipping")
            continue
        bodies.append(body)
    return bodies
