"""
Canonical parsed request record (SSOT).

This is THE single source of truth for the fields extracted from a request
form. The downstream CRM mapping is keyed by these names, so the set is
fixed and total: every field is always present, absent values are "".

Numeric-looking values (mileage, displacement, model year) stay raw strings
with their original units and formatting.
"""

from dataclasses import asdict, dataclass, fields


@dataclass(frozen=True)
class ParsedRequestRecord:
    """Flat record of one assessment request."""

    # Request stamp
    request_date: str = ""  # Raw, e.g. "2024年5月1日10時30分"
    request_date_iso: str = ""  # UTC, yyyy-MM-ddTHH:mm:ssZ
    assessment_number: str = ""
    product: str = ""

    # Vehicle
    brand: str = ""
    car_model: str = ""
    model_year: str = ""
    grade: str = ""
    body_type: str = ""
    body_color: str = ""
    door_count: str = ""
    handle: str = ""
    fuel: str = ""
    transmission: str = ""
    drive_type: str = ""
    displacement: str = ""
    mileage: str = ""

    # Condition and timing
    inspection_deadline: str = ""
    accident_history: str = ""
    car_condition: str = ""
    desired_sell_timing: str = ""

    # Identification and equipment
    model_code: str = ""
    equipment_info: str = ""
    other_options: str = ""

    # Requester
    customer_name: str = ""
    customer_kana: str = ""
    postal_code: str = ""
    state: str = ""
    city: str = ""
    address_line: str = ""
    email: str = ""
    phone: str = ""
    phone2: str = ""
    contact_time: str = ""

    def to_dict(self) -> dict[str, str]:
        """Serialize to dictionary (declaration order) for JSON output."""
        return asdict(self)

    @classmethod
    def from_values(cls, values: dict[str, str]) -> "ParsedRequestRecord":
        """
        Build a record from a partial mapping.

        Unknown keys are rejected; missing keys become "".
        """
        unknown = set(values) - set(FIELD_NAMES)
        if unknown:
            raise KeyError(f"Unknown record fields: {', '.join(sorted(unknown))}")
        return cls(**{name: values.get(name) or "" for name in FIELD_NAMES})


FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(ParsedRequestRecord))
