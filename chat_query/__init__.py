"""Chat Query - typed chat completion request payloads and their JSON wire codec."""

__version__ = "0.1.0"

from chat_query.core.codec import (
    decode_request,
    decode_request_dict,
    encode_request,
    encode_request_dict,
)
from chat_query.core.config import settings
from chat_query.core.errors import (
    DecodeError,
    MalformedDirective,
    MalformedJSON,
    MissingRequiredField,
    NestingTooDeep,
    TypeMismatch,
    UnrecognizedDirectiveShape,
)
from chat_query.models import (
    ChatCompletionRequest,
    ChatMessage,
    FunctionCallDirective,
    FunctionCallResult,
    FunctionSpec,
)

__all__ = [
    "settings",
    "__version__",
    "ChatCompletionRequest",
    "ChatMessage",
    "FunctionCallDirective",
    "FunctionCallResult",
    "FunctionSpec",
    "DecodeError",
    "MalformedDirective",
    "MalformedJSON",
    "MissingRequiredField",
    "NestingTooDeep",
    "TypeMismatch",
    "UnrecognizedDirectiveShape",
    "decode_request",
    "decode_request_dict",
    "encode_request",
    "encode_request_dict",
]
