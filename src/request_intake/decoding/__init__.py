"""
Attachment payload decoding.

Provides:
- PayloadDecoder: Ordered strategy fold (decimal list, base64, segmented)
- DecodeError: Raised when every strategy fails, with diagnostics
"""

from .payload_decoder import (
    Base64Candidate,
    DecodeError,
    PayloadDecoder,
    StrategyFailure,
    StrategyOutcome,
    build_base64_candidates,
    decode_base64_variants,
    decode_decimal_list,
    decode_payload,
    invalid_characters,
)

__all__ = [
    "PayloadDecoder",
    "DecodeError",
    "StrategyFailure",
    "StrategyOutcome",
    "Base64Candidate",
    "build_base64_candidates",
    "decode_base64_variants",
    "decode_decimal_list",
    "decode_payload",
    "invalid_characters",
]
