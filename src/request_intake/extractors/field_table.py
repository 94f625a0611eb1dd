"""
Declarative field table for the assessment request form.

One FieldSpec per directly labelled field, plus CompositeFieldSpecs for
lines that pack several fields together. New label revisions are added
here (or through ExtractionConfig.extra_aliases), never in control flow.
"""

from .base import CompositeFieldSpec, FieldSpec
from .label_matching import label_aliases
from .splitters import (
    split_body_color_and_door,
    split_japanese_address,
    split_model_and_equipment,
    strip_honorific,
)


def _spec(field_name: str, label: str, extras: list[str] | None = None, post=None) -> FieldSpec:
    labels = label_aliases(label, extras)
    return FieldSpec(
        field_name=field_name,
        primary_label=labels[0],
        aliases=labels[1:],
        post_processor=post,
    )


DEFAULT_FIELD_TABLE: tuple[FieldSpec, ...] = (
    _spec("product", "商品"),
    # Vehicle
    _spec("brand", "ブランド名", ["メーカー", "メーカー名"]),
    _spec("car_model", "車種名", ["車名"]),
    _spec("model_year", "年式"),
    _spec("grade", "グレード"),
    _spec("body_type", "ボディタイプ", ["ボディタイプ・カテゴリ", "ボディタイプカテゴリ"]),
    _spec("body_color", "色", ["車体色", "ボディカラー", "カラー"]),
    _spec("door_count", "ドア数"),
    _spec("handle", "ハンドル"),
    _spec("fuel", "燃料"),
    _spec("transmission", "ミッション", ["トランスミッション"]),
    _spec("drive_type", "駆動方式", ["駆動"]),
    _spec("displacement", "排気量"),
    _spec("mileage", "走行距離"),
    # Condition and timing
    _spec("inspection_deadline", "車検時期", ["車検満了日"]),
    _spec("accident_history", "事故歴"),
    _spec("car_condition", "クルマの状態", ["車の状態"]),
    _spec("desired_sell_timing", "売却希望時期", ["売却希望時期目安", "売却希望時期・目安"]),
    # Identification and equipment
    _spec("model_code", "型式"),
    _spec("equipment_info", "装備"),
    _spec("other_options", "その他オプション等", ["その他オプション", "その他装備"]),
    # Requester
    _spec("customer_name", "ご依頼者名", ["氏名"], post=strip_honorific),
    _spec("customer_kana", "ご依頼者カナ名", post=strip_honorific),
    _spec("postal_code", "郵便番号"),
    _spec("email", "メールアドレス"),
    _spec("phone", "電話番号"),
    _spec("phone2", "その他の連絡先", ["サブ連絡先"]),
    _spec("contact_time", "連絡可能時間帯", ["連絡希望時間帯"]),
)

DEFAULT_COMPOSITE_FIELDS: tuple[CompositeFieldSpec, ...] = (
    CompositeFieldSpec(
        name="body_color_and_door",
        labels=("車体色・ドア数", "車体色/ドア数", "車体色･ドア数"),
        targets=("body_color", "door_count"),
        splitter=split_body_color_and_door,
    ),
    CompositeFieldSpec(
        name="model_and_equipment",
        labels=("型式・装備", "型式/装備", "型式･装備"),
        targets=("model_code", "equipment_info"),
        splitter=split_model_and_equipment,
    ),
    CompositeFieldSpec(
        name="address",
        labels=(*label_aliases("ご住所"), "住所"),
        targets=("state", "city", "address_line"),
        splitter=split_japanese_address,
    ),
)

# Filled by the request stamp, not by label lines
STAMP_FIELDS = ("request_date", "request_date_iso", "assessment_number")

LABELLED_FIELDS = frozenset(spec.field_name for spec in DEFAULT_FIELD_TABLE)


def build_field_table(
    extra_aliases: dict[str, list[str]] | None = None,
    base: tuple[FieldSpec, ...] = DEFAULT_FIELD_TABLE,
) -> tuple[FieldSpec, ...]:
    """
    Field table with configured extra labels appended to matching specs.

    Raises:
        KeyError: an extra alias names a field that has no FieldSpec
    """
    extra_aliases = extra_aliases or {}
    known = {spec.field_name for spec in base}
    unknown = sorted(set(extra_aliases) - known)
    if unknown:
        raise KeyError(f"No labelled field named: {', '.join(unknown)}")
    return tuple(
        spec.with_extra_aliases(extra_aliases[spec.field_name])
        if spec.field_name in extra_aliases
        else spec
        for spec in base
    )

