"""
Attachment intake.

Provides:
- AttachmentIntake: Payload -> ZIP policy checks -> text bodies -> records
- IntakeOutcome: Processed / skipped / failed result per attachment
- ZipfileUnzipper: Default unzip collaborator (stdlib zipfile)
- Processing window and mailbox search query helpers
"""

from .pipeline import (
    AttachmentIntake,
    ExtractedRequest,
    IntakeErrorKind,
    IntakeOutcome,
    IntakeStatus,
)
from .text_bodies import TextBody, decode_text, extract_text_bodies
from .unzip import ArchiveMember, Unzipper, UnzipError, ZipfileUnzipper
from .window import (
    CalendarDate,
    DateText,
    InvalidTargetDateError,
    ProcessingWindow,
    build_search_query,
    coerce_target_date,
    resolve_processing_window,
    sender_allowed,
)

__all__ = [
    "AttachmentIntake",
    "ExtractedRequest",
    "IntakeErrorKind",
    "IntakeOutcome",
    "IntakeStatus",
    "TextBody",
    "decode_text",
    "extract_text_bodies",
    "ArchiveMember",
    "Unzipper",
    "UnzipError",
    "ZipfileUnzipper",
    "CalendarDate",
    "DateText",
    "InvalidTargetDateError",
    "ProcessingWindow",
    "build_search_query",
    "coerce_target_date",
    "resolve_processing_window",
    "sender_allowed",
]
