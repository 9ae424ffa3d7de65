"""Chat completion request model."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, Dict, Optional, Tuple

from pydantic import (
    AfterValidator,
    AllowInfNan,
    BaseModel,
    ConfigDict,
    PrivateAttr,
    Strict,
    StrictInt,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_serializer,
    model_validator,
)

from chat_query.core.errors import TypeMismatch
from chat_query.models.chat import ChatMessage
from chat_query.models.functions import FunctionCallDirective, FunctionSpec

# Validation context under which a wire `stream` key is honored
WIRE_CONTEXT = {"wire": True}

FiniteFloat = Annotated[float, Strict(), AllowInfNan(False)]
LogitBias = Annotated[Dict[str, StrictInt], AfterValidator(MappingProxyType)]

_MISSING = object()


class ChatCompletionRequest(BaseModel):
    """
    Chat completion request model.

    The `stream` flag is not a constructor argument. The component that
    dispatches the request sets it with `with_stream()`; it defaults to False
    and is always written to the wire. Only the decoder reads it back, by
    validating under `WIRE_CONTEXT`.

    Sequences are stored as tuples and `logit_bias` as a read-only mapping.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    model: StrictStr
    messages: Tuple[ChatMessage, ...]
    functions: Optional[Tuple[FunctionSpec, ...]] = None
    function_call: Optional[FunctionCallDirective] = None
    temperature: Optional[FiniteFloat] = None
    top_p: Optional[FiniteFloat] = None
    n: Optional[StrictInt] = None
    # Up to 4 sequences; the server enforces the limit
    stop: Optional[Tuple[StrictStr, ...]] = None
    max_tokens: Optional[StrictInt] = None
    presence_penalty: Optional[FiniteFloat] = None
    frequency_penalty: Optional[FiniteFloat] = None
    logit_bias: Optional[LogitBias] = None
    user: Optional[StrictStr] = None

    _stream: bool = PrivateAttr(default=False)

    @property
    def stream(self) -> bool:
        return self._stream

    def with_stream(self, stream: bool = True) -> "ChatCompletionRequest":
        """Return a copy of this request with the streaming flag set."""
        request = self.model_copy()
        request._stream = stream
        return request

    @field_validator("function_call", mode="before")
    @classmethod
    def decode_function_call(cls, value: Any) -> Optional[FunctionCallDirective]:
        """Map the wire shapes of `function_call` onto a directive."""
        return FunctionCallDirective.from_wire(value)

    @model_validator(mode="wrap")
    @classmethod
    def take_stream(cls, data: Any, handler, info: ValidationInfo) -> "ChatCompletionRequest":
        """Lift the wire `stream` key into the private streaming flag."""
        stream = _MISSING
        if isinstance(data, Mapping) and "stream" in data:
            if not (info.context or {}).get("wire"):
                raise ValueError("stream is set by the dispatcher through with_stream(), not at construction")
            data = dict(data)
            stream = data.pop("stream")
            if not isinstance(stream, bool):
                raise TypeMismatch("stream", "stream must be a boolean")

        request = handler(data)
        if stream is not _MISSING:
            request._stream = stream
        return request

    def to_wire(self) -> Dict[str, Any]:
        """Return the wire object, with keys in the order the API documents them."""
        data = {
            "model": self.model,
            "messages": [message.to_wire() for message in self.messages],
            "functions": None if self.functions is None else [spec.to_wire() for spec in self.functions],
            "temperature": self.temperature,
            "top_p": self.top_p,
            "n": self.n,
            "stream": self._stream,
            "stop": None if self.stop is None else list(self.stop),
            "max_tokens": self.max_tokens,
            "presence_penalty": self.presence_penalty,
            "frequency_penalty": self.frequency_penalty,
            "logit_bias": None if self.logit_bias is None else dict(self.logit_bias),
            "user": self.user,
            "function_call": None if self.function_call is None else self.function_call.to_wire(),
        }
        # Absent optionals, and the `none` directive, leave their key out
        return {key: value for key, value in data.items() if value is not None}

    @model_serializer(mode="plain")
    def serialize_wire(self) -> Dict[str, Any]:
        return self.to_wire()
