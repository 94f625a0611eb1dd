"""
Label/value line matching.

A form line looks like:

    ・ブランド名：トヨタ

optional bullet markers, a label, a half-width or full-width colon, then
the value up to the end of the same line.
"""

import re
from functools import lru_cache

# Horizontal whitespace (incl. full-width space) and bullet markers: ・ ･ •
_LEADING = r"(?:[^\S\n]|[・･•])*"
_HSPACE = r"[^\S\n]*"

# Decorative suffix some form revisions append to values
_LABEL_SUFFIX = re.compile(r"・?ラベル$", re.IGNORECASE)


def normalize_line_endings(text: str) -> str:
    return (text or "").replace("\r\n", "\n").replace("\r", "\n")


def label_aliases(label: str, extras: list[str] | None = None) -> tuple[str, ...]:
    """Standard alias set: label, label・ラベル, labelラベル, then extras."""
    return (label, f"{label}・ラベル", f"{label}ラベル", *(extras or []))


def cleanup_label_value(value: str) -> str:
    """Trim and drop a trailing ラベル marker."""
    return _LABEL_SUFFIX.sub("", (value or "").strip()).strip()


@lru_cache(maxsize=512)
def _label_pattern(label: str) -> re.Pattern:
    return re.compile(
        "^" + _LEADING + re.escape(label) + _HSPACE + "[:：]" + _HSPACE + "(.*)$",
        re.MULTILINE | re.IGNORECASE,
    )


def find_label_value(text: str, labels: tuple[str, ...] | list[str]) -> str | None:
    """
    Value of the first label (in the given order) present anywhere in text.

    Returns None when no label line exists. A label line whose value is
    blank counts as found and yields "".
    """
    if not text:
        return None
    for label in labels:
        if not label:
            continue
        match = _label_pattern(label).search(text)
        if match:
            return cleanup_label_value(match.group(1))
    return None


def extract_label_value(text: str, labels: tuple[str, ...] | list[str]) -> str:
    """Like find_label_value, but a missing label yields ""."""
    return find_label_value(normalize_line_endings(text), labels) or ""
