"""Typed decode failures for chat query payloads."""

from typing import Optional


class DecodeError(ValueError):
    """Base class for every failure raised while decoding a payload."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class MalformedJSON(DecodeError):
    """Input is not syntactically valid JSON."""


class MissingRequiredField(DecodeError):
    """A required key is absent (or, for ``role``, not a recognized value)."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"Missing required field: {field}", field=field)


class TypeMismatch(DecodeError):
    """A key is present but holds the wrong JSON type."""

    def __init__(self, field: Optional[str], message: Optional[str] = None):
        super().__init__(message or f"Wrong JSON type for field: {field}", field=field)


class MalformedDirective(DecodeError):
    """The ``function_call`` directive has an invalid shape."""


class UnrecognizedDirectiveShape(DecodeError):
    """The ``function_call`` directive is a single-key object with an unexpected key."""

    def __init__(self, key: str, field: Optional[str] = "function_call"):
        self.key = key
        super().__init__(f"Unrecognized function_call key: {key!r}", field=field)


class NestingTooDeep(DecodeError):
    """Valid JSON nested deeper than the parser can follow."""
