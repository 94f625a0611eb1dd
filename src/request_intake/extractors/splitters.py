"""
Composite field splitting and address decomposition.

Older form revisions put two attributes on one line, e.g.

    車体色・ドア数：ホワイトパールクリスタルシャイン／5ドア
    型式・装備：DAA-ZVW50, ナビ/ETC

and the requester address arrives as one string that has to be broken
into prefecture, municipality and street parts.
"""

import re

from .label_matching import cleanup_label_value

_ZENKAKU_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")

# Separator punctuation between packed values
_SEPARATORS = re.compile(r"[／/|｜・･、,]")
_MODEL_SEPARATORS = re.compile(r"[／/|｜・･、,，]")
_TRAILING_SEPARATORS = re.compile(r"[／/|｜・･、,]+$")
_LEADING_SEPARATORS = re.compile(r"^[／/|｜・･、,]+")

# Digit run optionally followed by a door unit token
_DOOR_COUNT = re.compile(r"([0-9]+)\s*(?:ドア|Ｄ|D(?:oor)?|DOOR)?", re.IGNORECASE)
_DOOR_HINT = re.compile(r"ドア|door", re.IGNORECASE)
_DIGITS = re.compile(r"[0-9]+")

PREFECTURES = (
    "北海道", "青森県", "岩手県", "宮城県", "秋田県", "山形県", "福島県",
    "茨城県", "栃木県", "群馬県", "埼玉県", "千葉県", "東京都", "神奈川県",
    "新潟県", "富山県", "石川県", "福井県", "山梨県", "長野県", "岐阜県",
    "静岡県", "愛知県", "三重県", "滋賀県", "京都府", "大阪府", "兵庫県",
    "奈良県", "和歌山県", "鳥取県", "島根県", "岡山県", "広島県", "山口県",
    "徳島県", "香川県", "愛媛県", "高知県", "福岡県", "佐賀県", "長崎県",
    "熊本県", "大分県", "宮崎県", "鹿児島県", "沖縄県",
)

_PREFECTURE_SUFFIX = re.compile(r"^(.+?[都道府県])(.*)$", re.DOTALL)
_MUNICIPALITY = re.compile(r"^(.+?[市区町村郡])?(.*)$", re.DOTALL)


def normalize_zenkaku_digits(value: str) -> str:
    """Full-width digits to half-width; one character for one character."""
    return (value or "").translate(_ZENKAKU_DIGITS)


def extract_digits(value: str) -> str:
    match = _DIGITS.search(normalize_zenkaku_digits(value))
    return match.group(0) if match else ""


def trim_trailing_separators(value: str) -> str:
    return _TRAILING_SEPARATORS.sub("", value or "").strip()


def trim_leading_separators(value: str) -> str:
    return _LEADING_SEPARATORS.sub("", value or "").strip()


def strip_honorific(value: str) -> str:
    """Drop a trailing 様 from a person name."""
    return value[:-1].rstrip() if value.endswith("様") else value


def split_body_color_and_door(raw: str) -> dict[str, str]:
    """
    Split "color／5ドア" into body_color and door_count.

    The first digit run (with an optional door unit) is the count and what
    precedes it is the color. Without a digit run, fall back to separator
    splitting: first segment is the color, the door count comes from the
    first later segment mentioning a door (or simply the second segment).
    """
    cleaned = cleanup_label_value(raw)
    if not cleaned:
        return {"body_color": "", "door_count": ""}

    body_color = ""
    door_count = ""

    # Normalization keeps offsets aligned with the original string
    match = _DOOR_COUNT.search(normalize_zenkaku_digits(cleaned))
    if match:
        body_color = trim_trailing_separators(cleanup_label_value(cleaned[: match.start()]))
        if not body_color:
            body_color = trim_leading_separators(cleanup_label_value(cleaned[match.end() :]))
        door_count = match.group(1)

    parts = [p for p in (cleanup_label_value(s) for s in _SEPARATORS.split(cleaned)) if p]
    if not body_color and parts:
        body_color = parts[0]
    if not door_count and len(parts) > 1:
        door_segment = next((p for p in parts[1:] if _DOOR_HINT.search(p)), parts[1])
        door_count = extract_digits(door_segment)

    return {"body_color": body_color, "door_count": door_count}


def split_model_and_equipment(raw: str) -> dict[str, str]:
    """
    Split "DAA-ZVW50, ナビ/ETC" into model_code and equipment_info.

    First segment is the model code; the rest are joined with "/".
    """
    cleaned = cleanup_label_value(raw)
    if not cleaned:
        return {"model_code": "", "equipment_info": ""}

    parts = [p for p in (cleanup_label_value(s) for s in _MODEL_SEPARATORS.split(cleaned)) if p]
    if len(parts) >= 2:
        return {"model_code": parts[0], "equipment_info": "/".join(parts[1:])}
    return {"model_code": parts[0] if parts else cleaned, "equipment_info": ""}


def split_japanese_address(full: str) -> dict[str, str]:
    """
    Decompose an address into state (prefecture), city and address_line.

    A known prefecture name at the start is taken as is; otherwise the
    shortest leading run ending in 都/道/府/県 is the prefecture. The next
    run ending in 市/区/町/村/郡, if any, is the city; the rest is the street
    address. With no prefecture the whole value is the street address.
    """
    value = (full or "").strip()
    if not value:
        return {"state": "", "city": "", "address_line": ""}

    state = next((p for p in PREFECTURES if value.startswith(p)), "")
    if state:
        rest = value[len(state) :]
    else:
        match = _PREFECTURE_SUFFIX.match(value)
        if not match:
            return {"state": "", "city": "", "address_line": value}
        state, rest = match.group(1), match.group(2)

    city_match = _MUNICIPALITY.match(rest)
    return {
        "state": state.strip(),
        "city": (city_match.group(1) or "").strip(),
        "address_line": (city_match.group(2) or "").strip(),
    }
