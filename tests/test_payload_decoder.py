"""Tests for attachment payload decoding."""

import base64

import pytest

from request_intake.decoding import (
    DecodeError,
    PayloadDecoder,
    StrategyOutcome,
    build_base64_candidates,
    decode_decimal_list,
    decode_payload,
    invalid_characters,
)
from request_intake.decoding.payload_decoder import STANDARD, WEB_SAFE, pad_base64


class TestDecimalList:
    """Tests for the decimal byte dump strategy."""

    def test_zip_signature(self):
        """A ZIP signature dump decodes to the signature bytes."""
        assert decode_payload("80,75,3,4") == b"PK\x03\x04"

    def test_values_wrap_modulo_256(self):
        """Negative and oversize values wrap into 0..255."""
        assert decode_payload("-1,256,255") == b"\xff\x00\xff"

    def test_whitespace_is_ignored(self):
        """Whitespace between values is stripped."""
        assert decode_payload(" 80, 75,\n3 ,4 ") == b"PK\x03\x04"

    def test_takes_precedence_over_base64(self):
        """An all-digit payload is treated as a decimal list, not base64."""
        assert decode_payload("1234") == bytes([1234 % 256])

    def test_rejects_non_numeric(self):
        """Anything but integers and commas is not a decimal list."""
        outcome = decode_decimal_list("80,75,x")
        assert not outcome.ok
        assert outcome.failures[0].strategy == "decimal_list"


class TestBase64Variants:
    """Tests for base64 candidate building and decoding."""

    def test_standard_base64(self):
        """Plain standard base64 decodes."""
        data = b"PK\x03\x04 hello"
        assert decode_payload(base64.b64encode(data).decode()) == data

    def test_web_safe_base64(self):
        """URL-safe alphabet ('-' and '_') decodes."""
        data = bytes([0xFB, 0xFF, 0xBF, 0xFE])
        encoded = base64.urlsafe_b64encode(data).decode()
        assert "-" in encoded or "_" in encoded
        assert decode_payload(encoded) == data

    def test_missing_padding_is_added(self):
        """Unpadded input is padded to a multiple of four."""
        assert decode_payload("QUJDRA") == b"ABCD"

    def test_line_wrapped_input(self):
        """MIME-style line wrapping is ignored."""
        data = bytes(range(200))
        encoded = base64.encodebytes(data).decode()
        assert "\n" in encoded
        assert decode_payload(encoded) == data

    def test_out_of_alphabet_characters_are_cleaned(self):
        """Stray characters are removed in the cleaned candidates."""
        assert decode_payload("QUJD*RA==") == b"ABCD"

    def test_candidate_order(self):
        """Candidates go web-safe, standard, then cleaned variants."""
        candidates = build_base64_candidates("ab-_*")
        assert [c.mode for c in candidates] == [WEB_SAFE, STANDARD, WEB_SAFE, STANDARD]
        assert candidates[0].data == "ab-_*==="
        assert candidates[1].data == "ab+/*==="
        assert candidates[2].data == "ab-_"
        assert candidates[3].data == "ab+/"

    def test_duplicate_candidates_dropped(self):
        """Identical candidates are only tried once."""
        candidates = build_base64_candidates("QUJD")
        assert len(candidates) == 2
        assert {c.data for c in candidates} == {"QUJD"}

    def test_padding(self):
        """Padding fills up to a multiple of four."""
        assert pad_base64("QQ") == "QQ=="
        assert pad_base64("QUJ") == "QUJ="
        assert pad_base64("QUJD") == "QUJD"


class TestSegmentedDecoding:
    """Tests for comma-joined base64 chunks."""

    def test_individually_padded_segments(self):
        """Each segment is decoded on its own and concatenated."""
        assert decode_payload("QUI=,Qw==") == b"ABC"

    def test_segmentation_can_be_disabled(self):
        """Without segmentation the same payload fails."""
        with pytest.raises(DecodeError):
            decode_payload("QUI=,Qw==", allow_segmented=False)

    def test_segmented_strategy_needs_two_parts(self):
        """A single non-empty part is not a segmented payload."""
        decoder = PayloadDecoder()
        outcome = decoder.decode_segmented("QUJD,", allow_segmented=True)
        assert not outcome.ok


class TestDecodeErrors:
    """Tests for diagnostics when everything fails."""

    def test_empty_payload(self):
        """Empty input is rejected immediately."""
        with pytest.raises(DecodeError) as exc_info:
            decode_payload("   ")
        assert exc_info.value.attempts[0].reason == "empty payload"

    def test_invalid_characters_reported(self):
        """The error lists distinct offending characters in first-seen order."""
        with pytest.raises(DecodeError) as exc_info:
            decode_payload("***!!!*")
        assert exc_info.value.invalid_chars == "*!"
        assert "invalidChars=*!" in str(exc_info.value)

    def test_every_attempt_recorded(self):
        """Failures of every strategy are kept."""
        with pytest.raises(DecodeError) as exc_info:
            decode_payload("A")
        strategies = {a.strategy for a in exc_info.value.attempts}
        assert {"decimal_list", "base64", "segmented"} <= strategies

    def test_invalid_characters_helper(self):
        """Whitespace is not reported as invalid."""
        assert invalid_characters("ab c\n$%$") == "$%"


class TestCustomStrategies:
    """Tests for injecting a strategy list."""

    def test_first_successful_strategy_wins(self):
        """Strategies run in order and stop at the first success."""
        calls = []

        def failing(raw, allow_segmented):
            calls.append("failing")
            return StrategyOutcome.failure("failing", "nope")

        def succeeding(raw, allow_segmented):
            calls.append("succeeding")
            return StrategyOutcome.success("succeeding", b"ok")

        def never(raw, allow_segmented):
            calls.append("never")
            return StrategyOutcome.success("never", b"no")

        decoder = PayloadDecoder(strategies=[failing, succeeding, never])
        assert decoder.decode("anything") == b"ok"
        assert calls == ["failing", "succeeding"]


class TestRoundTrip:
    """Encoding then decoding returns the original bytes."""

    @pytest.mark.parametrize(
        "data",
        [
            b"\x00",
            b"PK\x05\x06" + b"\x00" * 18,
            bytes(range(256)),
            "査定依頼".encode("shift_jis"),
        ],
    )
    def test_both_alphabets(self, data):
        assert decode_payload(base64.b64encode(data).decode()) == data
        assert decode_payload(base64.urlsafe_b64encode(data).decode()) == data
        assert decode_payload(base64.urlsafe_b64encode(data).decode().rstrip("=")) == data

    def test_decimal_list_letters_lookalike(self):
        """A decimal list is never read as base64."""
        assert decode_payload("65,66,67") == b"ABC"
        assert decode_payload("-1") == b"\xff"
