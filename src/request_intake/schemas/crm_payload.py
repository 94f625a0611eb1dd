"""
CRM record payload (canonical output schema).

Maps a ParsedRequestRecord onto the CRM custom object fields. The mapping
is keyed by record field name, so record names must stay stable.
Delivery is someone else's job; this module only builds the dict.
"""

from dataclasses import dataclass
from typing import Any

from .request_record import ParsedRequestRecord

DEFAULT_SOBJECT = "Mail2X__c"

# CRM field <- record field
CRM_FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("AssessmentNumber__c", "assessment_number"),
    ("maker__c", "brand"),
    ("car_model__c", "car_model"),
    ("model_year__c", "model_year"),
    ("Grade__c", "grade"),
    ("body_color__c", "body_color"),
    ("DoorNumber__c", "door_count"),
    ("Handle__c", "handle"),
    ("Fuel__c", "fuel"),
    ("Transmission__c", "transmission"),
    ("DriveType__c", "drive_type"),
    ("Displacement__c", "displacement"),
    ("mileage__c", "mileage"),
    ("accident_history__c", "accident_history"),
    ("desired_time_to_sell__c", "desired_sell_timing"),
    ("Model__c", "model_code"),
    ("EquipmentInfo__c", "equipment_info"),
    ("appeal_point__c", "other_options"),
    ("name__c", "customer_name"),
    ("name_kana__c", "customer_kana"),
    ("PostalCode__c", "postal_code"),
    ("State__c", "state"),
    ("City__c", "city"),
    ("Address__c", "address_line"),
    ("mail__c", "email"),
    ("Phone__c", "phone"),
    ("Phone2__c", "phone2"),
    ("preferred_contact_time__c", "contact_time"),
)

# Fields folded into the free-text comment, with their display labels
COMMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("商品", "product"),
    ("ボディタイプ", "body_type"),
    ("クルマの状態", "car_condition"),
)


@dataclass
class CrmPayload:
    """One CRM insert body."""

    sobject: str
    fields: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"attributes": {"type": self.sobject}, **self.fields}


def build_comment(record: ParsedRequestRecord) -> str:
    parts = [
        f"{label}: {getattr(record, name)}" for label, name in COMMENT_FIELDS if getattr(record, name)
    ]
    return " / ".join(parts)


def build_crm_payload(record: ParsedRequestRecord, sobject: str = DEFAULT_SOBJECT) -> dict[str, Any]:
    """
    Build the CRM insert body for one record.

    RequestDate__c prefers the normalized UTC timestamp and falls back to
    the raw date phrase. comment__c is omitted when nothing feeds it.
    """
    fields: dict[str, Any] = {
        "RequestDate__c": record.request_date_iso or record.request_date,
    }
    comment = build_comment(record)
    if comment:
        fields["comment__c"] = comment
    for crm_name, record_name in CRM_FIELD_MAP:
        fields[crm_name] = getattr(record, record_name)

    return CrmPayload(sobject=sobject or DEFAULT_SOBJECT, fields=fields).to_dict()
