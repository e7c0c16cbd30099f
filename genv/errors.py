"""
Exception types raised while declaring and parsing environment variables.
Recoverable failures derive from GenvError; programmer errors derive from RuntimeError.
"""

from typing import Any


class GenvError(Exception):
    """Base class for errors raised by a parse batch."""


class InvalidVariableError(GenvError):
    """Raised when a declared variable cannot be resolved to a typed value."""

    def __init__(self, key: str, reason: str, value: str | None = None):
        self.key = key
        self.reason = reason
        self.value = value
        super().__init__(f"{key} is invalid: {reason}")


class MissingVariableError(InvalidVariableError):
    """Raised when a required variable is empty or unset after fallback resolution."""

    def __init__(self, key: str):
        super().__init__(key, "environment variable is empty or unset", value="")


class ParseValueError(InvalidVariableError):
    """Raised when the registered parser rejects a non-empty value."""

    def __init__(self, key: str, value: str, type_name: str, cause: BaseException):
        self.type_name = type_name
        super().__init__(key, f"cannot parse {value!r} as {type_name}: {cause}", value=value)


class DefaultResolutionError(InvalidVariableError):
    """Raised when the allow predicate of a fallback fails. The nested error is __cause__."""

    def __init__(self, key: str, cause: BaseException):
        super().__init__(key, f"resolve default: {cause}")


class NoParserError(InvalidVariableError):
    """Raised when the active registry has no parser for the type a variable is bound to."""

    def __init__(self, key: str, target_type: Any):
        self.target_type = target_type
        super().__init__(key, f"no parser registered for type {type_name(target_type)}")


class SplitKeyError(GenvError):
    """Raised when multi-value parsing is attempted with an empty split key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{key}: split key cannot be empty")


class InvalidEnvironmentError(GenvError):
    """Raised when the deployment tier variable holds an unknown name."""

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(f"invalid environment in {key}: {value!r}")


class DuplicateParserError(RuntimeError):
    """A registry already holds a parser for this type. Fails at construction time."""

    def __init__(self, target_type: Any):
        self.target_type = target_type
        super().__init__(f"parser for type {type_name(target_type)} already registered")


class FrozenVariableError(RuntimeError):
    """A variable was modified after its batch started parsing."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"{key} belongs to a batch that has started parsing and can no longer be modified or queued")


def type_name(target_type: Any) -> str:
    if not isinstance(target_type, type):
        return repr(target_type)
    if target_type.__module__ == "builtins":
        return target_type.__qualname__
    return f"{target_type.__module__}.{target_type.__qualname__}"
