"""
SSOT (Single Source of Truth) schemas for the pipeline.

These canonical schemas are the ONLY models used across all modules.
No duplicated "near-same" models allowed.
"""

from .crm_payload import (
    COMMENT_FIELDS,
    CRM_FIELD_MAP,
    DEFAULT_SOBJECT,
    CrmPayload,
    build_comment,
    build_crm_payload,
)
from .request_record import FIELD_NAMES, ParsedRequestRecord

__all__ = [
    # Parsed request (canonical extraction schema)
    "ParsedRequestRecord",
    "FIELD_NAMES",
    # CRM payload (canonical output schema)
    "CrmPayload",
    "CRM_FIELD_MAP",
    "COMMENT_FIELDS",
    "DEFAULT_SOBJECT",
    "build_comment",
    "build_crm_payload",
]
