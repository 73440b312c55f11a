"""
Payload Codec

Compact, backward-compatible serialization of layout metadata embedded
in the payload code of a composed sheet.
"""

from .codec import (
    MetadataPayload,
    PayloadParseError,
    decode_payload,
    encode_payload,
    try_parse_payload,
)

__all__ = [
    "MetadataPayload",
    "PayloadParseError",
    "decode_payload",
    "encode_payload",
    "try_parse_payload",
]
