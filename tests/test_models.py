"""Tests for the request data models."""

import json

import pytest
from pydantic import ValidationError

from chat_query.core.errors import MalformedJSON, TypeMismatch
from chat_query.models import (
    ChatCompletionRequest,
    ChatMessage,
    FunctionCallDirective,
    FunctionCallResult,
    FunctionSpec,
)
from chat_query.models.request import WIRE_CONTEXT


def test_message_omits_absent_fields():
    """Test that absent message fields are left out of the wire object."""
    assert ChatMessage(role="user", content="Hello").model_dump() == {
        "role": "user",
        "content": "Hello",
    }
    assert ChatMessage(role="assistant").model_dump() == {"role": "assistant"}


def test_function_message():
    """Test a function-result message with a name."""
    message = ChatMessage(role="function", name="lookup", content="42")

    assert message.model_dump() == {"role": "function", "content": "42", "name": "lookup"}


def test_message_function_call_without_arguments():
    """Test that a function call without arguments leaves the key out."""
    message = ChatMessage(role="assistant", function_call=FunctionCallResult(name="lookup"))

    assert message.model_dump() == {"role": "assistant", "function_call": {"name": "lookup"}}


def test_message_function_call_arguments_keep_nulls():
    """Test that null values inside arguments are not stripped."""
    message = ChatMessage(
        role="assistant",
        function_call=FunctionCallResult(name="lookup", arguments={"query": None, "limit": 3}),
    )

    assert message.model_dump()["function_call"]["arguments"] == {"query": None, "limit": 3}


def test_message_rejects_unknown_role():
    """Test that only the four roles are accepted."""
    with pytest.raises(ValidationError):
        ChatMessage(role="tool", content="hi")


def test_function_call_result_from_arguments_json():
    """Test parsing the JSON-encoded argument string a server returns."""
    result = FunctionCallResult.from_arguments_json(
        "get_current_weather", '{"location": "Boston, MA", "days": 3}'
    )

    assert result.arguments == {"location": "Boston, MA", "days": 3}
    assert json.loads(result.arguments_json()) == result.arguments


def test_function_call_result_without_arguments_json():
    """Test that missing arguments render as an empty object."""
    result = FunctionCallResult.from_arguments_json("ping", None)

    assert result.arguments is None
    assert result.arguments_json() == "{}"


def test_function_call_result_rejects_bad_arguments():
    """Test error handling for argument strings that are not JSON objects."""
    with pytest.raises(MalformedJSON):
        FunctionCallResult.from_arguments_json("lookup", '{"location": ')

    with pytest.raises(TypeMismatch) as exc_info:
        FunctionCallResult.from_arguments_json("lookup", "[1, 2]")
    assert exc_info.value.field == "function_call.arguments"


def test_function_spec_always_writes_description():
    """Test that description is written even when absent, but parameters is not."""
    assert FunctionSpec(name="ping").model_dump() == {"name": "ping", "description": None}


def test_function_spec_with_parameters():
    """Test the wire form of a fully specified function."""
    spec = FunctionSpec(
        name="lookup",
        description="Look something up",
        parameters={"type": "object", "properties": {}},
    )

    assert spec.model_dump() == {
        "name": "lookup",
        "description": "Look something up",
        "parameters": {"type": "object", "properties": {}},
    }


def test_function_spec_requires_name():
    """Test that an empty function name is rejected."""
    with pytest.raises(ValidationError):
        FunctionSpec(name="")


def test_directive_wire_values():
    """Test the wire value of each directive case."""
    assert FunctionCallDirective.none().to_wire() is None
    assert FunctionCallDirective.auto().to_wire() == "auto"
    assert FunctionCallDirective.named("foo").to_wire() == {"function": {"name": "foo"}}


def test_directive_from_wire_passes_instances_through():
    """Test that an existing directive is returned unchanged."""
    directive = FunctionCallDirective.named("foo")

    assert FunctionCallDirective.from_wire(directive) is directive
    assert FunctionCallDirective.from_wire(None) is None
    assert FunctionCallDirective.from_wire("none") == FunctionCallDirective.none()


def test_directive_exactly_one_case():
    """Test that a directive cannot mix cases."""
    with pytest.raises(ValidationError):
        FunctionCallDirective(mode="auto", name="foo")

    with pytest.raises(ValidationError):
        FunctionCallDirective(mode="function")


def test_request_accepts_wire_directive():
    """Test that a wire-form directive is accepted at construction."""
    request = ChatCompletionRequest(
        model="gpt-x",
        messages=[ChatMessage(role="user", content="hi")],
        function_call="auto",
    )

    assert request.function_call == FunctionCallDirective.auto()


def test_request_is_immutable():
    """Test that request fields cannot be reassigned."""
    request = ChatCompletionRequest(model="gpt-x", messages=[])

    with pytest.raises(ValidationError):
        request.model = "other"


def test_with_stream_returns_copy():
    """Test that setting the streaming flag leaves the original untouched."""
    request = ChatCompletionRequest(model="gpt-x", messages=[])

    streaming = request.with_stream()

    assert streaming.stream is True
    assert request.stream is False
    assert streaming.model == request.model


def test_constructor_rejects_stream():
    """Test that stream cannot be set through the constructor."""
    with pytest.raises(ValidationError):
        ChatCompletionRequest(model="gpt-x", messages=[], stream=True)

    with pytest.raises(ValidationError):
        ChatCompletionRequest.model_validate({"model": "gpt-x", "messages": [], "stream": True})

    assert "stream" not in ChatCompletionRequest.model_fields


def test_wire_context_reads_stream():
    """Test that the decode path lifts the wire stream key into the flag."""
    request = ChatCompletionRequest.model_validate(
        {"model": "gpt-x", "messages": [], "stream": True}, context=WIRE_CONTEXT
    )

    assert request.stream is True


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_request_rejects_non_finite_floats(value):
    """Test that non-finite sampling values are rejected at construction."""
    with pytest.raises(ValidationError):
        ChatCompletionRequest(model="gpt-x", messages=[], temperature=value)


def test_request_containers_are_immutable():
    """Test that sequences and mappings held by a request cannot be changed in place."""
    request = ChatCompletionRequest(
        model="gpt-x",
        messages=[ChatMessage(role="user", content="hi")],
        functions=[FunctionSpec(name="search", parameters={"properties": {"tags": ["a"]}})],
        stop=["END"],
        logit_bias={"50256": -100},
    )

    assert isinstance(request.messages, tuple)
    assert isinstance(request.stop, tuple)
    with pytest.raises(TypeError):
        request.logit_bias["1"] = 5
    with pytest.raises(TypeError):
        request.functions[0].parameters["properties"]["extra"] = {}
    with pytest.raises(AttributeError):
        request.functions[0].parameters["properties"]["tags"].append("b")
    assert request.logit_bias == {"50256": -100}


def test_caller_dict_changes_do_not_leak_into_request():
    """Test that a request keeps its own copy of free-form values."""
    arguments = {"query": {"terms": ["a"]}}
    result = FunctionCallResult(name="search", arguments=arguments)

    arguments["query"]["terms"].append("b")

    assert result.to_wire() == {"name": "search", "arguments": {"query": {"terms": ["a"]}}}


def test_free_form_values_reject_non_json():
    """Test that values JSON cannot represent are rejected."""
    with pytest.raises(ValidationError):
        FunctionSpec(name="search", parameters={"when": {1, 2}})

    with pytest.raises(ValidationError):
        FunctionSpec(name="search", parameters={"ratio": float("nan")})

    with pytest.raises(ValidationError):
        FunctionCallResult(name="search", arguments=["not", "an", "object"])
