"""
Request form extractors.

Provides:
- StructuredTextExtractor: Label/alias matching over form text
- Field table (FieldSpec / CompositeFieldSpec) and builders
- Composite splitters, address decomposition, date normalization
- Base classes for custom extractors

Strategies are declarative and testable field by field.
"""

from .base import BaseExtractor, CompositeFieldSpec, FieldSpec
from .dates import RequestStamp, find_request_stamp, japanese_datetime_to_iso_utc
from .field_table import (
    DEFAULT_COMPOSITE_FIELDS,
    DEFAULT_FIELD_TABLE,
    LABELLED_FIELDS,
    build_field_table,
)
from .label_matching import cleanup_label_value, extract_label_value, label_aliases
from .request_extractor import StructuredTextExtractor, extract_request
from .splitters import (
    normalize_zenkaku_digits,
    split_body_color_and_door,
    split_japanese_address,
    split_model_and_equipment,
)

__all__ = [
    "StructuredTextExtractor",
    "extract_request",
    "BaseExtractor",
    "FieldSpec",
    "CompositeFieldSpec",
    "DEFAULT_FIELD_TABLE",
    "DEFAULT_COMPOSITE_FIELDS",
    "LABELLED_FIELDS",
    "build_field_table",
    "RequestStamp",
    "find_request_stamp",
    "japanese_datetime_to_iso_utc",
    "cleanup_label_value",
    "extract_label_value",
    "label_aliases",
    "normalize_zenkaku_digits",
    "split_body_color_and_door",
    "split_japanese_address",
    "split_model_and_equipment",
]
