"""
Tag types for config schema definitions.
Used inside Annotated[type, ...] to specify env names, defaults, split keys and parsers.
"""

from typing import Any, Callable


class Env:
    """Override the environment variable name (default: field_name -> FIELD_NAME)."""

    def __init__(self, name: str):
        self.name = name


class Default:
    """
    Fallback used when the env var is not set. Non-string values are rendered as
    env strings. Subject to the allow predicate unless allow is given.
    """

    def __init__(self, value: object, allow: Callable[[Any], bool] | None = None):
        self.value = value
        self.allow = allow


class Required:
    """Mark field as required even when its type admits None."""

    pass


class Split:
    """Split key for list[T] fields (default: the Genv split key)."""

    def __init__(self, key: str):
        self.key = key


class Coerce:
    """Custom parse function: (raw: str) -> T. Raise ValueError to reject."""

    def __init__(self, fn: Callable[[str], object]):
        self.fn = fn
