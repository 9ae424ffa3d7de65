"""Data models for chat completion requests."""

from chat_query.models.chat import ChatMessage, FunctionCallResult, Role
from chat_query.models.functions import FunctionCallDirective, FunctionSpec
from chat_query.models.json_value import (
    JSONObject,
    JSONValue,
    decode_json_object,
    decode_json_value,
    encode_json_value,
    freeze_json_value,
    thaw_json_value,
)
from chat_query.models.request import ChatCompletionRequest

__all__ = [
    "ChatCompletionRequest",
    "ChatMessage",
    "FunctionCallDirective",
    "FunctionCallResult",
    "FunctionSpec",
    "JSONObject",
    "JSONValue",
    "Role",
    "decode_json_object",
    "decode_json_value",
    "encode_json_value",
    "freeze_json_value",
    "thaw_json_value",
]
