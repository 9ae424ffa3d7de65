"""Free-form JSON values carried inside chat query payloads."""

import json
import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any, Callable, List, Optional, Tuple, Union

from pydantic import AfterValidator

from chat_query.core.errors import MalformedJSON, NestingTooDeep, TypeMismatch

_ARRAY_TYPES = (list, tuple)


class _Frame:
    """One open container while a JSON value is rebuilt."""

    __slots__ = ("source", "items", "built", "path", "key", "is_object")

    def __init__(self, source: Any, path: str, key: Any = None):
        self.source = source
        self.is_object = isinstance(source, Mapping)
        self.items = iter(source.items()) if self.is_object else enumerate(source)
        self.built: List[Tuple[Any, Any]] = []
        self.path = path
        self.key = key


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping,) + _ARRAY_TYPES)


def _check_leaf(value: Any, path: str) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeMismatch(None, f"Non-finite number at {path}")
        return value
    raise TypeMismatch(None, f"Unsupported JSON type {type(value).__name__} at {path}")


def _rebuild(
    value: Any,
    make_object: Callable[[List[Tuple[str, Any]]], Any],
    make_array: Callable[[List[Any]], Any],
) -> Any:
    """Check and rebuild a JSON value bottom-up, without recursion."""
    if not _is_container(value):
        return _check_leaf(value, "$")

    stack = [_Frame(value, "$")]
    open_ids = {id(value)}
    while True:
        frame = stack[-1]
        child_frame: Optional[_Frame] = None
        for key, child in frame.items:
            if frame.is_object and not isinstance(key, str):
                raise TypeMismatch(None, f"Object key {key!r} at {frame.path} is not a string")
            path = f"{frame.path}.{key}"
            if _is_container(child):
                if id(child) in open_ids:
                    raise TypeMismatch(None, f"Cyclic value at {path}")
                child_frame = _Frame(child, path, key)
                break
            frame.built.append((key, _check_leaf(child, path)))

        if child_frame is not None:
            stack.append(child_frame)
            open_ids.add(id(child_frame.source))
            continue

        stack.pop()
        open_ids.discard(id(frame.source))
        if frame.is_object:
            done = make_object(frame.built)
        else:
            done = make_array([item for _, item in frame.built])
        if not stack:
            return done
        stack[-1].built.append((frame.key, done))


def freeze_json_value(value: Any) -> Any:
    """
    Validate a JSON value and return an immutable copy.

    Objects become read-only mappings and arrays become tuples. Any nesting
    depth is accepted.

    Raises:
        TypeMismatch: If the value holds something JSON cannot represent
    """
    return _rebuild(value, lambda pairs: MappingProxyType(dict(pairs)), tuple)


def thaw_json_value(value: Any) -> Any:
    """Return a plain dict/list copy of a (possibly frozen) JSON value."""
    return _rebuild(value, dict, list)


def freeze_json_object(value: Any) -> Any:
    """Like `freeze_json_value`, but the top level must be an object."""
    if not isinstance(value, Mapping):
        raise TypeMismatch(None, f"Expected a JSON object, got {type(value).__name__}")
    return freeze_json_value(value)


JSONValue = Annotated[Any, AfterValidator(freeze_json_value)]
JSONObject = Annotated[Any, AfterValidator(freeze_json_object)]


def _reject_constant(name: str) -> None:
    raise ValueError(f"{name} is not valid JSON")


def encode_json_value(value: Any) -> bytes:
    """Serialize a JSON value to compact UTF-8 bytes, keeping object key order."""
    return json.dumps(
        thaw_json_value(value),
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    ).encode("utf-8")


def decode_json_value(raw: Union[str, bytes, bytearray]) -> Any:
    """
    Parse JSON text into a JSON value.

    Args:
        raw: JSON document as text or UTF-8 bytes

    Returns:
        The parsed value as plain dicts and lists; integers and floats stay distinct

    Raises:
        MalformedJSON: If the input is not valid JSON
        NestingTooDeep: If the document nests deeper than the parser can follow
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except RecursionError as e:
        raise NestingTooDeep("JSON document is nested too deeply to parse") from e
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise MalformedJSON(f"Invalid JSON: {e}") from e


def decode_json_object(raw: Union[str, bytes, bytearray], field: str = "arguments") -> Any:
    """Parse JSON text that must hold an object."""
    value = decode_json_value(raw)
    if not isinstance(value, dict):
        raise TypeMismatch(field, f"Expected a JSON object for {field}, got {type(value).__name__}")
    return value
