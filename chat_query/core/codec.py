"""Encode and decode chat completion requests to and from JSON."""

from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from chat_query.core.config import settings
from chat_query.core.errors import (
    DecodeError,
    MissingRequiredField,
    TypeMismatch,
)
from chat_query.models.json_value import decode_json_value, encode_json_value
from chat_query.models.request import WIRE_CONTEXT, ChatCompletionRequest
from chat_query.utils.logger import get_logger

logger = get_logger(__name__)

# pydantic error types raised when `role` holds something other than the four roles
_ROLE_ERROR_TYPES = {"literal_error", "enum"}


def encode_request_dict(request: ChatCompletionRequest) -> Dict[str, Any]:
    """Return the wire object for a request."""
    return request.to_wire()


def encode_request(request: ChatCompletionRequest, *, stream: Optional[bool] = None) -> bytes:
    """
    Serialize a request to UTF-8 JSON.

    Args:
        request: The request to send
        stream: Streaming flag applied by the dispatching call site, if any

    Returns:
        The JSON document as bytes
    """
    if stream is not None:
        request = request.with_stream(stream)
    payload = encode_json_value(request.to_wire())
    logger.debug(f"Encoded request for model {request.model} ({len(payload)} bytes, stream={request.stream})")
    return payload


def decode_request_dict(
    data: Any,
    *,
    require_stream: Optional[bool] = None,
    require_function_call: Optional[bool] = None,
) -> ChatCompletionRequest:
    """
    Build a request from an already-parsed JSON object.

    Args:
        data: Parsed JSON value, expected to be an object
        require_stream: Fail when `stream` is absent (defaults to settings)
        require_function_call: Fail when `function_call` is absent (defaults to settings)

    Returns:
        The decoded request

    Raises:
        DecodeError: One of its subclasses, describing the first problem found
    """
    if require_stream is None:
        require_stream = settings.DECODE_REQUIRE_STREAM
    if require_function_call is None:
        require_function_call = settings.DECODE_REQUIRE_FUNCTION_CALL

    try:
        if not isinstance(data, dict):
            raise TypeMismatch(None, f"Request must be a JSON object, got {type(data).__name__}")

        try:
            request = ChatCompletionRequest.model_validate(data, context=WIRE_CONTEXT)
        except ValidationError as e:
            raise _translate(e) from e

        if require_stream and "stream" not in data:
            raise MissingRequiredField("stream")
        if require_function_call and "function_call" not in data:
            raise MissingRequiredField("function_call")
    except DecodeError as e:
        logger.warning(f"Failed to decode request ({type(e).__name__}): {e}")
        raise

    logger.debug(f"Decoded request for model {request.model} with {len(request.messages)} messages")
    return request


def decode_request(
    raw: Union[str, bytes, bytearray],
    *,
    require_stream: Optional[bool] = None,
    require_function_call: Optional[bool] = None,
) -> ChatCompletionRequest:
    """
    Parse a JSON document into a request.

    Raises:
        MalformedJSON: If the input is not valid JSON
        NestingTooDeep: If the input nests deeper than the parser can follow
        DecodeError: Any other decode failure, see `decode_request_dict`
    """
    try:
        data = decode_json_value(raw)
    except DecodeError as e:
        logger.warning(f"Failed to decode request ({type(e).__name__}): {e}")
        raise
    return decode_request_dict(
        data,
        require_stream=require_stream,
        require_function_call=require_function_call,
    )


def _field_path(loc) -> Optional[str]:
    return ".".join(str(part) for part in loc) or None


def _translate(exc: ValidationError) -> DecodeError:
    """Map the first pydantic error onto a typed decode failure."""
    error = exc.errors()[0]
    path = _field_path(error["loc"])
    original = (error.get("ctx") or {}).get("error")

    if isinstance(original, DecodeError):
        if original.field is None:
            original.field = path
        return original
    if error["type"] == "missing":
        return MissingRequiredField(path)
    if error["type"] in _ROLE_ERROR_TYPES and error["loc"] and error["loc"][-1] == "role":
        return MissingRequiredField(path, f"Unrecognized role at {path}: {error['msg']}")
    return TypeMismatch(path, f"{path}: {error['msg']}")
