"""
Attachment payload decoder.

Turns an opaque textual attachment representation into bytes by trying a
fixed, ordered list of strategies. The first strategy that succeeds wins;
the decoder never guesses based on what the input looks like beyond each
strategy's own predicate.

Strategy order:
1. decimal_list: "80,75,3,4,..." (signed, wrapped into 0-255)
2. base64: web-safe / standard alphabets, raw then cleaned input
3. segmented: comma-joined chunks, each decoded without segmentation
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from .. import IntakeError

logger = logging.getLogger(__name__)

WEB_SAFE = "webSafe"
STANDARD = "standard"

_WHITESPACE = re.compile(r"\s+")
_DECIMAL_LIST = re.compile(r"^-?\d+(?:,-?\d+)*$")
_OUTSIDE_ALPHABET = re.compile(r"[^A-Za-z0-9+/=_-]")

# Full candidate shape per alphabet, after padding
_ALPHABETS = {
    WEB_SAFE: re.compile(r"^[A-Za-z0-9_-]*={0,2}$"),
    STANDARD: re.compile(r"^[A-Za-z0-9+/]*={0,2}$"),
}


@dataclass(frozen=True)
class StrategyFailure:
    """Why one strategy (or one base64 candidate) did not produce bytes."""

    strategy: str
    reason: str

    def __str__(self) -> str:
        return f"{self.strategy}: {self.reason}"


@dataclass(frozen=True)
class StrategyOutcome:
    """Structured result of a single strategy."""

    strategy: str
    data: Optional[bytes] = None
    failures: tuple[StrategyFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return self.data is not None

    @classmethod
    def success(cls, strategy: str, data: bytes) -> "StrategyOutcome":
        return cls(strategy=strategy, data=data)

    @classmethod
    def failure(cls, strategy: str, *reasons: str) -> "StrategyOutcome":
        return cls(
            strategy=strategy,
            failures=tuple(StrategyFailure(strategy, r) for r in reasons),
        )


class DecodeError(IntakeError):
    """All decoding strategies were exhausted."""

    def __init__(self, attempts: list[StrategyFailure], invalid_chars: str = ""):
        self.attempts = list(attempts)
        self.invalid_chars = invalid_chars
        message = "could not decode attachment payload"
        if invalid_chars:
            message += f" invalidChars={invalid_chars}"
        if self.attempts:
            message += " (" + "; ".join(str(a) for a in self.attempts) + ")"
        super().__init__(message)


@dataclass(frozen=True)
class Base64Candidate:
    """One string handed to a base64 decoder, already padded."""

    mode: str
    data: str


def strip_whitespace(value: str) -> str:
    return _WHITESPACE.sub("", value or "")


def pad_base64(value: str) -> str:
    """Pad with '=' to a multiple of 4 characters."""
    remainder = len(value) % 4
    if remainder:
        value += "=" * (4 - remainder)
    return value


def invalid_characters(value: str) -> str:
    """Distinct characters outside the accepted alphabet, in first-seen order."""
    return "".join(dict.fromkeys(_OUTSIDE_ALPHABET.findall(strip_whitespace(value))))


def build_base64_candidates(raw: str) -> list[Base64Candidate]:
    """
    Build base64 candidates in fixed order:

    a. web-safe, whitespace-stripped input
    b. standard, with '-' -> '+' and '_' -> '/'
    c./d. the same two on the input cleaned of out-of-alphabet characters,
          only if cleaning changed anything

    Empty and duplicate candidates are dropped.
    """
    candidates: list[Base64Candidate] = []
    seen: set[tuple[str, str]] = set()

    def push(mode: str, value: str) -> None:
        value = strip_whitespace(value)
        if not value:
            return
        value = pad_base64(value)
        if (mode, value) in seen:
            return
        seen.add((mode, value))
        candidates.append(Base64Candidate(mode=mode, data=value))

    stripped = strip_whitespace(raw)
    cleaned = _OUTSIDE_ALPHABET.sub("", stripped)

    push(WEB_SAFE, stripped)
    push(STANDARD, stripped.replace("-", "+").replace("_", "/"))
    if cleaned != stripped:
        push(WEB_SAFE, cleaned)
        push(STANDARD, cleaned.replace("-", "+").replace("_", "/"))

    return candidates


def decode_base64_candidate(candidate: Base64Candidate) -> bytes:
    """Strictly decode one candidate; raises ValueError on any defect."""
    if not _ALPHABETS[candidate.mode].match(candidate.data):
        raise ValueError(f"characters outside the {candidate.mode} alphabet")
    altchars = b"-_" if candidate.mode == WEB_SAFE else None
    try:
        return base64.b64decode(candidate.data, altchars=altchars, validate=True)
    except binascii.Error as e:
        raise ValueError(str(e)) from e


def decode_decimal_list(raw: str) -> StrategyOutcome:
    """
    Decimal byte dump: "80,75,-3,..." -> bytes.

    Purely syntactic; the result is returned even if it is not a ZIP.
    Values wrap modulo 256, so -1 becomes 255 and 256 becomes 0.
    """
    candidate = strip_whitespace(raw)
    if not _DECIMAL_LIST.match(candidate):
        return StrategyOutcome.failure("decimal_list", "not a comma-separated integer list")
    try:
        # Python's % already yields 0..255 for negative operands
        data = bytes(int(n) % 256 for n in candidate.split(","))
    except ValueError as e:
        return StrategyOutcome.failure("decimal_list", f"invalid byte value: {e}")
    return StrategyOutcome.success("decimal_list", data)


def decode_base64_variants(raw: str) -> StrategyOutcome:
    """Try every base64 candidate in order; first success wins."""
    reasons: list[str] = []
    for candidate in build_base64_candidates(raw):
        try:
            return StrategyOutcome.success("base64", decode_base64_candidate(candidate))
        except ValueError as e:
            reasons.append(f"{candidate.mode} ({len(candidate.data)} chars): {e}")
    if not reasons:
        reasons.append("no base64 candidates")
    return StrategyOutcome.failure("base64", *reasons)


Strategy = Callable[[str, bool], StrategyOutcome]


@dataclass
class PayloadDecoder:
    """
    Decode attachment payloads through an explicit ordered strategy list.

    Stateless apart from the strategy list; safe to share.
    """

    strategies: list[Strategy] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.strategies:
            self.strategies = [
                lambda raw, allow_segmented: decode_decimal_list(raw),
                lambda raw, allow_segmented: decode_base64_variants(raw),
                self.decode_segmented,
            ]

    def decode(self, raw: str, allow_segmented: bool = True) -> bytes:
        """
        Decode a textual payload into bytes.

        Raises:
            DecodeError: every strategy failed
        """
        original = (raw or "").strip()
        if not original:
            raise DecodeError([StrategyFailure("input", "empty payload")])

        failures: list[StrategyFailure] = []
        for strategy in self.strategies:
            outcome = strategy(original, allow_segmented)
            if outcome.ok:
                logger.debug(f"Payload decoded via {outcome.strategy} ({len(outcome.data)} bytes)")
                return outcome.data
            failures.extend(outcome.failures)

        for failure in failures:
            logger.warning(f"Payload decode: {failure}")
        raise DecodeError(failures, invalid_characters(original))

    def decode_segmented(self, raw: str, allow_segmented: bool) -> StrategyOutcome:
        """
        Comma-joined chunks, each decoded on its own and concatenated.

        Nested segmentation is not attempted.
        """
        if not allow_segmented:
            return StrategyOutcome.failure("segmented", "segmentation disabled")

        sanitized = strip_whitespace(raw)
        if "," not in sanitized:
            return StrategyOutcome.failure("segmented", "no comma separators")

        parts = [part.strip() for part in sanitized.split(",") if part.strip()]
        if len(parts) < 2:
            return StrategyOutcome.failure("segmented", "fewer than two segments")

        logger.info(f"Attempting segmented decode ({len(parts)} parts)")
        chunks: list[bytes] = []
        for index, part in enumerate(parts):
            try:
                chunks.append(self.decode(part, allow_segmented=False))
            except DecodeError as e:
                return StrategyOutcome.failure("segmented", f"segment {index + 1} failed: {e}")
        return StrategyOutcome.success("segmented", b"".join(chunks))


def decode_payload(raw: str, allow_segmented: bool = True) -> bytes:
    """Decode with the default strategy order."""
    return PayloadDecoder().decode(raw, allow_segmented=allow_segmented)
