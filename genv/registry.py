"""
Type-to-parser registry.
A registry maps a target type to the function that turns an environment string into
a value of that type. Registries are populated at construction through options and
treated as read-only afterwards; separate registries never share parsers.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Generic, Iterator, TypeVar
from urllib.parse import SplitResult

from genv import parsers
from genv.errors import DuplicateParserError, type_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Parser(Generic[T]):
    """Associates a target type with its parse function and its empty-value result."""

    target_type: type[T]
    parse_fn: Callable[[str], T]
    zero: T | None = None

    @property
    def type_name(self) -> str:
        return type_name(self.target_type)

    def parse(self, value: str) -> T:
        return self.parse_fn(value)


RegistryOpt = Callable[["ParserRegistry"], None]


class ParserRegistry:
    """Maps a type to exactly one Parser. Use new_registry / new_default_registry to build one."""

    def __init__(self) -> None:
        self._parsers: dict[Any, Parser[Any]] = {}

    def _register(self, target_type: Any, parser: Parser[Any]) -> None:
        if target_type in self._parsers:
            raise DuplicateParserError(target_type)
        self._parsers[target_type] = parser

    def register_parse_func(
        self,
        target_type: type[T],
        parse_fn: Callable[[str], T],
        zero: T | None = None,
    ) -> None:
        """Register parse_fn for target_type. Raises DuplicateParserError if one exists."""
        self._register(target_type, Parser(target_type, parse_fn, zero))

    def extend(self, *opts: RegistryOpt) -> "ParserRegistry":
        """A new registry holding these parsers plus opts. This registry is left untouched."""
        registry = ParserRegistry()
        registry._parsers.update(self._parsers)
        for opt in opts:
            opt(registry)
        return registry

    def get(self, target_type: Any) -> Parser[Any] | None:
        return self._parsers.get(target_type)

    def types(self) -> Iterator[Any]:
        return iter(self._parsers)

    def __contains__(self, target_type: object) -> bool:
        return target_type in self._parsers

    def __len__(self) -> int:
        return len(self._parsers)

    def __repr__(self) -> str:
        names = ", ".join(type_name(t) for t in self._parsers)
        return f"ParserRegistry([{names}])"


def with_parser(
    target_type: type[T],
    parse_fn: Callable[[str], T],
    zero: T | None = None,
) -> RegistryOpt:
    """Registry option adding a parser for target_type."""

    def opt(registry: ParserRegistry) -> None:
        registry.register_parse_func(target_type, parse_fn, zero)

    return opt


def new_registry(*opts: RegistryOpt) -> ParserRegistry:
    """Create a registry holding only the parsers given as options."""
    registry = ParserRegistry()
    for opt in opts:
        opt(registry)
    logger.debug("Built parser registry with %d parser(s)", len(registry))
    return registry


def new_default_registry(*opts: RegistryOpt) -> ParserRegistry:
    """Create a registry with the built-in parsers followed by the given options."""
    return new_registry(
        with_parser(str, parsers.parse_string, ""),
        with_parser(bool, parsers.parse_bool, False),
        with_parser(int, parsers.parse_int, 0),
        with_parser(float, parsers.parse_float, 0.0),
        with_parser(SplitResult, parsers.parse_url, parsers.ZERO_URL),
        with_parser(uuid.UUID, parsers.parse_uuid, parsers.ZERO_UUID),
        with_parser(datetime, parsers.parse_time, parsers.ZERO_TIME),
        *opts,
    )
