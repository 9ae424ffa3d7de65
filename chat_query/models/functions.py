"""Function definitions and the function-call directive."""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

from chat_query.core.errors import MalformedDirective, UnrecognizedDirectiveShape
from chat_query.models.json_value import JSONObject, JSONValue, thaw_json_value


class FunctionSpec(BaseModel):
    """A function the model may call."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: Optional[str] = None
    parameters: Optional[JSONObject] = None

    def to_wire(self) -> Dict[str, Any]:
        # `description` is always written, `parameters` only when set
        data: Dict[str, Any] = {"name": self.name, "description": self.description}
        if self.parameters is not None:
            data["parameters"] = thaw_json_value(self.parameters)
        return data

    @model_serializer(mode="plain")
    def serialize_wire(self) -> Dict[str, Any]:
        return self.to_wire()


class FunctionCallDirective(BaseModel):
    """
    Controls whether and how the model calls a function.

    Exactly one case is active:
        - none: the `function_call` key is left out of the request
        - auto: written as the string "auto"
        - function: written as {"function": {"name": <name>}}

    Use the `none()`, `auto()` and `named()` constructors.
    """

    model_config = ConfigDict(frozen=True)

    mode: Literal["none", "auto", "function"]
    name: Optional[str] = None

    @model_validator(mode="after")
    def check_case(self) -> "FunctionCallDirective":
        if self.mode == "function" and not self.name:
            raise ValueError("A named directive needs a function name")
        if self.mode != "function" and self.name is not None:
            raise ValueError(f"The {self.mode!r} directive does not take a function name")
        return self

    @classmethod
    def none(cls) -> "FunctionCallDirective":
        return cls(mode="none")

    @classmethod
    def auto(cls) -> "FunctionCallDirective":
        return cls(mode="auto")

    @classmethod
    def named(cls, name: str) -> "FunctionCallDirective":
        return cls(mode="function", name=name)

    def to_wire(self) -> Union[str, Dict[str, Any], None]:
        """
        Return the wire value for this directive.

        None means the key must be omitted from the parent object.
        """
        if self.mode == "auto":
            return "auto"
        if self.mode == "function":
            return {"function": {"name": self.name}}
        return None

    @model_serializer(mode="plain")
    def serialize_wire(self) -> Union[str, Dict[str, Any], None]:
        return self.to_wire()

    @classmethod
    def from_wire(cls, value: JSONValue) -> Optional["FunctionCallDirective"]:
        """
        Decode a raw `function_call` value.

        Args:
            value: The parsed JSON value of the field

        Returns:
            The directive, or None when the value is JSON null

        Raises:
            MalformedDirective: If the value has an invalid shape
            UnrecognizedDirectiveShape: If it is a single-key object with an unexpected key
        """
        if value is None:
            return None
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            if value == "auto":
                return cls.auto()
            if value == "none":
                return cls.none()
            raise MalformedDirective(f"Unknown function_call string: {value!r}", field="function_call")

        if not isinstance(value, dict):
            raise MalformedDirective(
                f"function_call must be a string or an object, got {type(value).__name__}",
                field="function_call",
            )
        if len(value) != 1:
            raise MalformedDirective(
                f"Invalid number of keys found, expected one, got {len(value)}",
                field="function_call",
            )

        key, nested = next(iter(value.items()))
        if key == "function":
            name = nested.get("name") if isinstance(nested, dict) else None
            if not isinstance(name, str) or not name:
                raise MalformedDirective(
                    "function_call.function must be an object with a non-empty string name",
                    field="function_call.function",
                )
            return cls.named(name)
        if key == "auto":
            return cls.auto()
        raise UnrecognizedDirectiveShape(key)
