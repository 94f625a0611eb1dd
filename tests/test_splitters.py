"""Tests for composite splitting, address decomposition and date normalization."""

from zoneinfo import ZoneInfo

import pytest

from request_intake.config import ConfigValidationError
from request_intake.extractors import (
    find_request_stamp,
    japanese_datetime_to_iso_utc,
    normalize_zenkaku_digits,
    split_body_color_and_door,
    split_japanese_address,
    split_model_and_equipment,
)


class TestBodyColorAndDoor:
    """Tests for color/door splitting."""

    def test_slash_and_door_unit(self):
        assert split_body_color_and_door("ホワイトパールクリスタルシャイン／5ドア") == {
            "body_color": "ホワイトパールクリスタルシャイン",
            "door_count": "5",
        }

    def test_d_unit_with_space(self):
        """'4D' counts as four doors."""
        assert split_body_color_and_door("パールホワイト 4D") == {
            "body_color": "パールホワイト",
            "door_count": "4",
        }

    def test_full_width_digits(self):
        """Full-width digits are read as the door count."""
        assert split_body_color_and_door("レッド・５ドア") == {
            "body_color": "レッド",
            "door_count": "5",
        }

    def test_door_count_first(self):
        """When the count comes first the separator is not part of the color."""
        assert split_body_color_and_door("5ドア／白") == {"body_color": "白", "door_count": "5"}
        assert split_body_color_and_door("3D, ブラック") == {"body_color": "ブラック", "door_count": "3"}

    def test_color_only(self):
        """Without a digit run the whole value is the color."""
        assert split_body_color_and_door("シルバー") == {"body_color": "シルバー", "door_count": ""}

    def test_empty(self):
        assert split_body_color_and_door("  ") == {"body_color": "", "door_count": ""}


class TestModelAndEquipment:
    """Tests for model/equipment splitting."""

    def test_comma_then_slash(self):
        assert split_model_and_equipment("DAA-ZVW50, ナビ/ETC") == {
            "model_code": "DAA-ZVW50",
            "equipment_info": "ナビ/ETC",
        }

    def test_full_width_comma(self):
        assert split_model_and_equipment("DBA-GK3，ナビ") == {
            "model_code": "DBA-GK3",
            "equipment_info": "ナビ",
        }

    def test_model_only(self):
        assert split_model_and_equipment("ABC-123") == {
            "model_code": "ABC-123",
            "equipment_info": "",
        }


class TestJapaneseAddress:
    """Tests for address decomposition."""

    @pytest.mark.parametrize(
        "address, expected",
        [
            ("東京都渋谷区1-2-3", ("東京都", "渋谷区", "1-2-3")),
            ("京都府京都市中京区1-1", ("京都府", "京都市", "中京区1-1")),
            ("北海道札幌市中央区北1条", ("北海道", "札幌市", "中央区北1条")),
            ("神奈川県横浜市西区", ("神奈川県", "横浜市", "西区")),
            ("架空県架空市1", ("架空県", "架空市", "1")),
        ],
    )
    def test_decomposition(self, address, expected):
        parts = split_japanese_address(address)
        assert (parts["state"], parts["city"], parts["address_line"]) == expected

    def test_no_prefecture(self):
        """Without a prefecture everything is the street address."""
        assert split_japanese_address("渋谷区1-2-3") == {
            "state": "",
            "city": "",
            "address_line": "渋谷区1-2-3",
        }

    def test_prefecture_without_city(self):
        assert split_japanese_address("大阪府") == {"state": "大阪府", "city": "", "address_line": ""}

    def test_empty(self):
        assert split_japanese_address("") == {"state": "", "city": "", "address_line": ""}


class TestDates:
    """Tests for request date normalization."""

    def test_tokyo_to_utc(self):
        assert japanese_datetime_to_iso_utc("2024年5月1日10時30分", "Asia/Tokyo") == (
            "2024-05-01T01:30:00Z"
        )

    def test_crosses_date_boundary(self):
        """Early local morning is the previous UTC day."""
        assert japanese_datetime_to_iso_utc("2024年1月1日8時05分", ZoneInfo("Asia/Tokyo")) == (
            "2023-12-31T23:05:00Z"
        )

    def test_offset_depends_on_the_date(self):
        """Daylight saving time is taken at the local instant."""
        assert japanese_datetime_to_iso_utc("2024年7月1日12時00分", "Europe/Berlin") == (
            "2024-07-01T10:00:00Z"
        )
        assert japanese_datetime_to_iso_utc("2024年1月15日12時00分", "Europe/Berlin") == (
            "2024-01-15T11:00:00Z"
        )

    def test_wrong_shape(self):
        assert japanese_datetime_to_iso_utc("2024年5月1日", "Asia/Tokyo") == ""
        assert japanese_datetime_to_iso_utc("", "Asia/Tokyo") == ""

    def test_impossible_date(self):
        assert japanese_datetime_to_iso_utc("2024年2月30日10時00分", "Asia/Tokyo") == ""

    def test_unknown_zone(self):
        with pytest.raises(ConfigValidationError):
            japanese_datetime_to_iso_utc("2024年5月1日10時30分", "Nowhere/Special")

    def test_stamp_not_present(self):
        stamp = find_request_stamp("商品：査定")
        assert stamp.request_date == ""
        assert stamp.assessment_number == ""


class TestZenkakuDigits:
    def test_normalize(self):
        assert normalize_zenkaku_digits("０１２３４５６７８９") == "0123456789"
        assert normalize_zenkaku_digits("５ドア") == "5ドア"
