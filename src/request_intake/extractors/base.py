"""
Base extractor interface and field table types.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from ..schemas.request_record import ParsedRequestRecord

# Splits one captured composite value into several record fields
Splitter = Callable[[str], dict[str, str]]


@dataclass(frozen=True)
class FieldSpec:
    """
    One output field and the labels that introduce it.

    Labels are tried in order (primary first); the first label found
    anywhere in the text wins.
    """

    field_name: str
    primary_label: str
    aliases: tuple[str, ...] = ()
    post_processor: Optional[Callable[[str], str]] = None

    @property
    def labels(self) -> tuple[str, ...]:
        return (self.primary_label, *self.aliases)

    def with_extra_aliases(self, extras: list[str]) -> "FieldSpec":
        """Copy of this spec with additional labels appended (duplicates skipped)."""
        merged = list(self.aliases)
        for label in extras:
            if label and label != self.primary_label and label not in merged:
                merged.append(label)
        return FieldSpec(
            field_name=self.field_name,
            primary_label=self.primary_label,
            aliases=tuple(merged),
            post_processor=self.post_processor,
        )


@dataclass(frozen=True)
class CompositeFieldSpec:
    """
    A legacy layout that packs several fields onto one labelled line.

    The splitter result only fills targets that no standalone label
    produced.
    """

    name: str
    labels: tuple[str, ...]
    targets: tuple[str, ...]
    splitter: Splitter


class BaseExtractor(ABC):
    """
    Base class for request form extractors.

    Each extractor understands one family of form layouts.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor name for logging and provenance."""
        pass

    @abstractmethod
    def can_extract(self, content: str) -> bool:
        """
        Check if this extractor can handle the given content.

        Args:
            content: Decoded form text

        Returns:
            True if this extractor should be attempted
        """
        pass

    @abstractmethod
    def extract(self, content: str, zone: str) -> ParsedRequestRecord:
        """
        Extract a request record from content.

        Args:
            content: Decoded form text
            zone: IANA time zone of the date stamps in the text

        Returns:
            ParsedRequestRecord with every field present (possibly "")
        """
        pass
