"""
Configuration management (SSOT).

This module defines ALL configuration for the request intake application.
All config keys are defined here; no other module should invent config keys.

Key invariants:
- Configuration is an explicit value passed into extractors and pipelines;
  nothing reads process-wide properties behind the caller's back
- The time zone is validated here, at the boundary, not deep inside parsing
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from . import IntakeError

DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_MAILBOX_QUERY = "in:anywhere has:attachment filename:zip newer_than:2d"
DEFAULT_PROCESSED_LABEL = "Unzip/processed"
DEFAULT_CRM_SOBJECT = "Mail2X__c"
DEFAULT_TEXT_CHARSETS = ["shift_jis", "cp932", "utf-8"]

# ZIP compression method 9 (Deflate64) cannot be handled by the unzip collaborator
DEFAULT_UNSUPPORTED_METHODS = [9]


class ConfigValidationError(IntakeError):
    """Raised when configuration validation fails."""

    pass


def resolve_zone(name: str) -> ZoneInfo:
    """Resolve an IANA time zone name, raising ConfigValidationError if unknown."""
    try:
        return ZoneInfo((name or "").strip() or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigValidationError(f"Unknown time zone {name!r}") from e


@dataclass
class ExtractionConfig:
    """Form text extraction settings.

    extra_aliases adds label spellings for new form revisions, keyed by
    record field name. They are tried after the built-in aliases.
    """

    timezone: str = DEFAULT_TIMEZONE
    extra_aliases: dict[str, list[str]] = field(default_factory=dict)


@dataclass
class ArchiveConfig:
    """ZIP handling settings."""

    zip_password: str = ""
    # Members with this suffix (case-insensitive) carry request form text
    text_suffix: str = ".txt"
    # Tried in order; the first strict decode yielding text wins
    text_charsets: list[str] = field(default_factory=lambda: list(DEFAULT_TEXT_CHARSETS))
    unsupported_methods: list[int] = field(
        default_factory=lambda: list(DEFAULT_UNSUPPORTED_METHODS)
    )


@dataclass
class MailboxConfig:
    """Mailbox query settings (used to build search queries, never to fetch)."""

    query: str = DEFAULT_MAILBOX_QUERY
    processed_label: str = DEFAULT_PROCESSED_LABEL
    allowed_sender: str = ""
    # "YYYY-MM-DD" to reprocess one day; blank, "today" or "current" for today
    date_override: str = ""


@dataclass
class CrmConfig:
    """Downstream CRM record mapping."""

    sobject: str = DEFAULT_CRM_SOBJECT


@dataclass
class Config:
    """Application configuration (SSOT)."""

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    mailbox: MailboxConfig = field(default_factory=MailboxConfig)
    crm: CrmConfig = field(default_factory=CrmConfig)

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        # Imported here: the extractors import this module
        from .extractors.field_table import LABELLED_FIELDS

        errors: list[str] = []

        try:
            resolve_zone(self.extraction.timezone)
        except ConfigValidationError as e:
            errors.append(f"extraction.timezone: {e}")

        for field_name in self.extraction.extra_aliases:
            if field_name not in LABELLED_FIELDS:
                errors.append(f"extraction.extra_aliases: unknown field {field_name!r}")

        if not self.archive.text_charsets:
            errors.append("archive.text_charsets must not be empty")
        if not self.archive.text_suffix:
            errors.append("archive.text_suffix is required")

        if not self.crm.sobject:
            errors.append("crm.sobject is required")

        return errors


def _env_or(name: str, fallback: str) -> str:
    """Environment value (trimmed) or fallback when unset or blank."""
    value = os.environ.get(name, "").strip()
    return value or fallback


def _as_list(value) -> list:
    """A YAML scalar becomes a one-item list; None becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        return [value]
    return list(value)


def _list_or_default(value, default) -> list:
    """Use default only when the key is absent or null; an explicit [] is kept."""
    return list(default) if value is None else _as_list(value)


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    Environment variables can override config values:
    - SEARCH_TIMEZONE
    - ZIP_PASSWORD
    - GMAIL_QUERY
    - PROCESSED_LABEL
    - ALLOWED_SENDER
    - TARGET_DATE_OVERRIDE
    - CRM_SOBJECT
    """
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    # Extraction config
    extraction_data = data.get("extraction") or {}
    extra_aliases = {
        str(name): [str(label) for label in _as_list(labels)]
        for name, labels in (extraction_data.get("extra_aliases") or {}).items()
    }
    extraction = ExtractionConfig(
        timezone=_env_or(
            "SEARCH_TIMEZONE", str(extraction_data.get("timezone") or DEFAULT_TIMEZONE).strip()
        ),
        extra_aliases=extra_aliases,
    )

    # Archive config
    archive_data = data.get("archive") or {}
    archive = ArchiveConfig(
        zip_password=_env_or("ZIP_PASSWORD", str(archive_data.get("zip_password") or "")),
        text_suffix=str(archive_data.get("text_suffix") or ".txt"),
        text_charsets=[
            str(c) for c in _list_or_default(archive_data.get("text_charsets"), DEFAULT_TEXT_CHARSETS)
        ],
        unsupported_methods=[
            int(m)
            for m in _list_or_default(
                archive_data.get("unsupported_methods"), DEFAULT_UNSUPPORTED_METHODS
            )
        ],
    )

    # Mailbox config
    mailbox_data = data.get("mailbox") or {}
    mailbox = MailboxConfig(
        query=_env_or("GMAIL_QUERY", str(mailbox_data.get("query") or DEFAULT_MAILBOX_QUERY)),
        processed_label=_env_or(
            "PROCESSED_LABEL",
            str(mailbox_data.get("processed_label") or DEFAULT_PROCESSED_LABEL),
        ),
        allowed_sender=_env_or(
            "ALLOWED_SENDER", str(mailbox_data.get("allowed_sender") or "")
        ).lower(),
        date_override=_env_or(
            "TARGET_DATE_OVERRIDE", str(mailbox_data.get("date_override") or "")
        ),
    )

    # CRM config
    crm_data = data.get("crm") or {}
    crm = CrmConfig(
        sobject=_env_or("CRM_SOBJECT", str(crm_data.get("sobject") or DEFAULT_CRM_SOBJECT)),
    )

    return Config(extraction=extraction, archive=archive, mailbox=mailbox, crm=crm)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Request Intake Configuration
#
# Environment variables override these values:
#   SEARCH_TIMEZONE, ZIP_PASSWORD, GMAIL_QUERY, PROCESSED_LABEL,
#   ALLOWED_SENDER, TARGET_DATE_OVERRIDE, CRM_SOBJECT

extraction:
  timezone: "Asia/Tokyo"                  # Zone of the request date/time stamps
  extra_aliases: {}                       # e.g. {brand: ["メーカー名称"]}

archive:
  zip_password: ""                        # Leave blank if no password
  text_suffix: ".txt"                     # Members carrying request form text
  text_charsets: ["shift_jis", "cp932", "utf-8"]
  unsupported_methods: [9]                # Deflate64 is rejected before unzip

mailbox:
  query: "in:anywhere has:attachment filename:zip newer_than:2d"
  processed_label: "Unzip/processed"
  allowed_sender: ""                      # Substring match on the From header
  date_override: ""                       # "YYYY-MM-DD" to reprocess that day

crm:
  sobject: "Mail2X__c"
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(default_config)
