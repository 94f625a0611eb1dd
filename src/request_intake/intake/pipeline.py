"""
Attachment intake pipeline.

Ties the components together for one ZIP attachment:

    payload text -> PayloadDecoder -> ZipDirectoryInspector -> policy checks
    -> unzip collaborator -> charset decoding -> StructuredTextExtractor

Every run ends in an IntakeOutcome; nothing raises past process() except
programming errors. Skips are valid no-ops (empty archive, no text member),
failures carry the error kind and the underlying exception.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..archive import ZipDirectoryInspector, ZipEntryMetadata, method_name
from ..config import Config
from ..decoding import DecodeError, PayloadDecoder
from ..extractors import StructuredTextExtractor
from ..schemas import ParsedRequestRecord
from .text_bodies import extract_text_bodies
from .unzip import Unzipper, UnzipError, ZipfileUnzipper

logger = logging.getLogger(__name__)


class IntakeStatus(str, Enum):
    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


class IntakeErrorKind(str, Enum):
    DECODE_FAILED = "decode_failed"
    UNSUPPORTED_METHOD = "unsupported_method"
    UNZIP_FAILED = "unzip_failed"


@dataclass(frozen=True)
class ExtractedRequest:
    """One request record together with the text member it came from."""

    name: str
    text: str
    record: ParsedRequestRecord


@dataclass
class IntakeOutcome:
    """Result of processing one attachment."""

    status: IntakeStatus
    name: str
    reason: str = ""
    error_kind: Optional[IntakeErrorKind] = None
    error: Optional[Exception] = None
    entries: list[ZipEntryMetadata] = field(default_factory=list)
    records: list[ExtractedRequest] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status != IntakeStatus.FAILED

    @classmethod
    def skipped(cls, name: str, reason: str, entries=None) -> "IntakeOutcome":
        return cls(status=IntakeStatus.SKIPPED, name=name, reason=reason, entries=list(entries or []))

    @classmethod
    def failed(
        cls,
        name: str,
        kind: IntakeErrorKind,
        error: Exception,
        entries=None,
    ) -> "IntakeOutcome":
        return cls(
            status=IntakeStatus.FAILED,
            name=name,
            reason=str(error),
            error_kind=kind,
            error=error,
            entries=list(entries or []),
        )


class AttachmentIntake:
    """
    Process ZIP attachments into request records.

    The unzip collaborator is injected; it defaults to the zipfile adapter.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        unzipper: Optional[Unzipper] = None,
        extractor: Optional[StructuredTextExtractor] = None,
        decoder: Optional[PayloadDecoder] = None,
    ):
        self.config = config or Config()
        self.unzipper = unzipper or ZipfileUnzipper()
        self.extractor = extractor or StructuredTextExtractor.from_config(self.config.extraction)
        self.decoder = decoder or PayloadDecoder()
        self.inspector = ZipDirectoryInspector()

    def process(
        self,
        payload: str,
        fallback_payload: Optional[str] = None,
        name: str = "attachment.zip",
    ) -> IntakeOutcome:
        """
        Process one attachment given as transport text.

        Args:
            payload: Primary textual payload (base64 variants or decimal list)
            fallback_payload: Alternate rendering tried when the primary fails
            name: Attachment name, for logs and the outcome

        Returns:
            IntakeOutcome
        """
        try:
            data = self.decoder.decode(payload)
        except DecodeError as e:
            if fallback_payload is None:
                logger.error(f"{name}: {e}")
                return IntakeOutcome.failed(name, IntakeErrorKind.DECODE_FAILED, e)
            logger.warning(f"{name}: primary payload failed, trying fallback: {e}")
            try:
                data = self.decoder.decode(fallback_payload)
            except DecodeError as fallback_error:
                logger.error(f"{name}: fallback payload failed: {fallback_error}")
                return IntakeOutcome.failed(name, IntakeErrorKind.DECODE_FAILED, fallback_error)

        return self.process_bytes(data, name)

    def process_bytes(self, data: bytes, name: str = "attachment.zip") -> IntakeOutcome:
        """Process one attachment given as raw ZIP bytes."""
        archive_config = self.config.archive

        entries = self.inspector.inspect(data)
        if not entries:
            logger.info(f"{name}: zip has no entries; skipping")
            return IntakeOutcome.skipped(name, "zip has no entries")

        unsupported = sorted(
            {e.compression_method for e in entries} & set(archive_config.unsupported_methods)
        )
        if unsupported:
            methods = ", ".join(f"{method_name(m)} (method={m})" for m in unsupported)
            error = UnzipError(f"Unsupported ZIP compression: {methods}")
            logger.error(f"{name}: {error}")
            return IntakeOutcome.failed(name, IntakeErrorKind.UNSUPPORTED_METHOD, error, entries)

        suffix = archive_config.text_suffix.lower()
        if not any(e.name.lower().endswith(suffix) for e in entries):
            logger.info(f"{name}: no {suffix} entries; skipping")
            return IntakeOutcome.skipped(name, "no text entries", entries)

        try:
            members = self.unzipper(data, archive_config.zip_password)
        except UnzipError as e:
            logger.error(f"{name}: unzip failed: {e}")
            return IntakeOutcome.failed(name, IntakeErrorKind.UNZIP_FAILED, e, entries)

        bodies = extract_text_bodies(members, archive_config.text_charsets, archive_config.text_suffix)
        if not bodies:
            logger.info(f"{name}: no text bodies decoded; skipping")
            return IntakeOutcome.skipped(name, "no text bodies decoded", entries)

        records = [
            ExtractedRequest(name=body.name, text=body.text, record=self.extractor.extract(body.text))
            for body in bodies
        ]
        logger.info(f"{name}: extracted {len(records)} request(s)")
        return IntakeOutcome(
            status=IntakeStatus.PROCESSED,
            name=name,
            entries=entries,
            records=records,
        )
