"""
Assessment request form extractor.

Builds a ParsedRequestRecord from label/value form text:

1. Request stamp: raw date phrase, assessment number, UTC timestamp
2. Directly labelled fields, one FieldSpec each
3. Composite lines (color+doors, model+equipment, address) filling only
   the fields no standalone label produced

A field without a matching label is not an error; it stays "".
"""

import logging
from typing import Iterable, Optional

from ..config import DEFAULT_TIMEZONE, resolve_zone
from ..schemas.request_record import ParsedRequestRecord
from .base import BaseExtractor, CompositeFieldSpec, FieldSpec
from .dates import find_request_stamp, japanese_datetime_to_iso_utc
from .field_table import DEFAULT_COMPOSITE_FIELDS, DEFAULT_FIELD_TABLE, build_field_table
from .label_matching import find_label_value, normalize_line_endings

logger = logging.getLogger(__name__)


class StructuredTextExtractor(BaseExtractor):
    """
    Extract request records from semi-structured, multilingual form text.

    The field table is fixed at construction; extraction itself keeps no
    state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        field_table: Optional[tuple[FieldSpec, ...]] = None,
        composite_fields: Optional[tuple[CompositeFieldSpec, ...]] = None,
        default_zone: str = DEFAULT_TIMEZONE,
    ):
        self.field_table = field_table if field_table is not None else DEFAULT_FIELD_TABLE
        self.composite_fields = (
            composite_fields if composite_fields is not None else DEFAULT_COMPOSITE_FIELDS
        )
        self.default_zone = default_zone

    @classmethod
    def from_config(cls, extraction_config) -> "StructuredTextExtractor":
        """Build an extractor from an ExtractionConfig (time zone + extra aliases)."""
        return cls(
            field_table=build_field_table(extraction_config.extra_aliases),
            default_zone=extraction_config.timezone,
        )

    @property
    def name(self) -> str:
        return "request_form"

    def can_extract(self, content: str) -> bool:
        """Any non-blank text is worth a try."""
        return bool(content and content.strip())

    def extract(self, content: str, zone: Optional[str] = None) -> ParsedRequestRecord:
        """Extract one record from one decoded text block."""
        text = normalize_line_endings(content)
        tz = resolve_zone(zone or self.default_zone)
        values: dict[str, str] = {}

        # Request stamp
        stamp = find_request_stamp(text)
        values["request_date"] = stamp.request_date
        values["assessment_number"] = stamp.assessment_number
        values["request_date_iso"] = (
            japanese_datetime_to_iso_utc(stamp.request_date, tz) if stamp.request_date else ""
        )
        if stamp.request_date and not values["request_date_iso"]:
            logger.debug(f"Request date not normalizable: {stamp.request_date!r}")

        # Standalone labels
        for spec in self.field_table:
            values[spec.field_name] = self._extract_field(text, spec)

        # Composite lines never override a standalone value
        for composite in self.composite_fields:
            if all(values.get(target) for target in composite.targets):
                continue
            raw = find_label_value(text, composite.labels)
            if not raw:
                continue
            parts = composite.splitter(raw)
            for target in composite.targets:
                if not values.get(target):
                    values[target] = parts.get(target, "")

        return ParsedRequestRecord.from_values(values)

    def extract_all(
        self, blocks: Iterable[str], zone: Optional[str] = None
    ) -> list[ParsedRequestRecord]:
        """Extract one record per text block, in order."""
        return [self.extract(block, zone) for block in blocks]

    def _extract_field(self, text: str, spec: FieldSpec) -> str:
        value = find_label_value(text, spec.labels) or ""
        if value and spec.post_processor:
            value = spec.post_processor(value)
        return value


def extract_request(text: str, zone: str = DEFAULT_TIMEZONE) -> ParsedRequestRecord:
    """Extract with the built-in field table."""
    return StructuredTextExtractor().extract(text, zone)
