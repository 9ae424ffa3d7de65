"""Chat message models."""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, model_serializer

from chat_query.models.json_value import (
    JSONObject,
    decode_json_object,
    encode_json_value,
    thaw_json_value,
)

Role = Literal["system", "assistant", "user", "function"]


class FunctionCallResult(BaseModel):
    """A function invocation attached to a message."""

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: Optional[JSONObject] = None

    @classmethod
    def from_arguments_json(
        cls, name: str, arguments: Union[str, bytes, None]
    ) -> "FunctionCallResult":
        """
        Build a result from the JSON-encoded argument string a server returns.

        Args:
            name: Function name
            arguments: JSON text holding an object, or None

        Returns:
            FunctionCallResult with structured arguments

        Raises:
            MalformedJSON: If the arguments are not valid JSON
            TypeMismatch: If the arguments are not a JSON object
        """
        if arguments is None:
            return cls(name=name)
        return cls(name=name, arguments=decode_json_object(arguments, field="function_call.arguments"))

    def arguments_json(self) -> str:
        """Render the arguments back to JSON text."""
        return encode_json_value(self.arguments or {}).decode("utf-8")

    def to_wire(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.arguments is not None:
            data["arguments"] = thaw_json_value(self.arguments)
        return data

    @model_serializer(mode="plain")
    def serialize_wire(self) -> Dict[str, Any]:
        return self.to_wire()


class ChatMessage(BaseModel):
    """Chat message model."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: Optional[str] = None
    name: Optional[str] = None
    function_call: Optional[FunctionCallResult] = None

    def to_wire(self) -> Dict[str, Any]:
        """Return the wire object; absent optionals are omitted, never written as null."""
        data: Dict[str, Any] = {"role": self.role}
        if self.content is not None:
            data["content"] = self.content
        if self.name is not None:
            data["name"] = self.name
        if self.function_call is not None:
            data["function_call"] = self.function_call.to_wire()
        return data

    @model_serializer(mode="plain")
    def serialize_wire(self) -> Dict[str, Any]:
        return self.to_wire()
