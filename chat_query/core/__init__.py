"""Core encode/decode logic for chat query payloads."""

from chat_query.core.config import settings
from chat_query.core.codec import (
    decode_request,
    decode_request_dict,
    encode_request,
    encode_request_dict,
)

__all__ = [
    "settings",
    "decode_request",
    "decode_request_dict",
    "encode_request",
    "encode_request_dict",
]
