"""
Variable descriptors.
A Var captures one environment lookup at declaration time and the policy for turning it
into a typed value: optionality, an optional fallback with its allow predicate, and the
split key for multi-valued parsing. Typed accessors only queue work on the owning Genv;
nothing is parsed until Genv.parse() runs.
"""

from __future__ import annotations

import logging
import uuid as uuid_
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar, get_args, get_origin
from urllib.parse import SplitResult

from genv.errors import (
    DefaultResolutionError,
    FrozenVariableError,
    GenvError,
    MissingVariableError,
    NoParserError,
    ParseValueError,
    SplitKeyError,
)
from genv.registry import Parser

if TYPE_CHECKING:
    from genv.engine import AllowFunc, Genv

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()


class Ref(Generic[T]):
    """
    A typed slot that receives a parsed value.
    For multi-valued parsing the type is list[T] and the value becomes a list.
    """

    def __init__(self, type_: Any, value: Any = None):
        self.type = type_
        self.value = value

    def element_type(self) -> Any:
        """Element type of a list[T] slot. Raises TypeError for scalar slots."""
        if get_origin(self.type) is not list or len(get_args(self.type)) != 1:
            raise TypeError(f"expected a list[T] slot, got {self.type!r}")
        return get_args(self.type)[0]

    def __repr__(self) -> str:
        return f"Ref({self.type!r}, {self.value!r})"


@dataclass(frozen=True)
class Fallback:
    """A pre-parse default string and the predicate deciding whether it may be used."""

    value: str
    allow: AllowFunc


class Var:
    """One environment variable binding request. Create through Genv.var()."""

    def __init__(
        self,
        genv: Genv,
        key: str,
        raw: str,
        found: bool,
        allow_default: AllowFunc,
        split_key: str,
    ):
        self.genv = genv
        self.key = key
        self.raw = raw
        self.found = found
        self.allow_default = allow_default
        self.split_key = split_key
        self.is_optional = False
        self.fallback: Fallback | None = None
        self._frozen = False

    def __repr__(self) -> str:
        return f"Var({self.key!r}, found={self.found}, optional={self.is_optional})"

    # modifiers

    def optional(self) -> Var:
        """An empty value resolves to the type's zero value instead of an error."""
        self._check_mutable()
        self.is_optional = True
        return self

    def default(self, value: str, *, allow: AllowFunc | None = None) -> Var:
        """
        Attach a fallback used when the variable is unset.
        allow overrides the predicate inherited from Var/Genv for this fallback only.
        """
        self._check_mutable()
        self.fallback = Fallback(value, allow if allow is not None else self.allow_default)
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenVariableError(self.key)

    def _freeze(self) -> None:
        self._frozen = True

    # generic registration

    def value(self, ref: Ref[T]) -> Var:
        """Queue parsing into ref using the registry parser for ref.type."""
        self._check_mutable()
        self.genv._enqueue(self, lambda: self._assign(ref))
        return self

    def new_value(self, type_: type[T]) -> Ref[T]:
        ref: Ref[T] = Ref(type_, self._zero(type_))
        self.value(ref)
        return ref

    def values(self, ref: Ref[list[T]], split_key: str | None = None) -> Var:
        """Queue multi-valued parsing into a list[T] slot."""
        self._check_mutable()
        element_type = ref.element_type()
        self.genv._enqueue(self, lambda: self._assign_many(ref, element_type, split_key))
        return self

    def new_values(self, type_: type[T], split_key: str | None = None) -> Ref[list[T]]:
        ref: Ref[list[T]] = Ref(list[type_], [])  # type: ignore[valid-type]
        self.values(ref, split_key)
        return ref

    # typed accessors

    def string(self, ref: Ref[str]) -> Var:
        return self.value(_expect(ref, str))

    def new_string(self) -> Ref[str]:
        return self.new_value(str)

    def strings(self, ref: Ref[list[str]], split_key: str | None = None) -> Var:
        return self.values(_expect_many(ref, str), split_key)

    def new_strings(self, split_key: str | None = None) -> Ref[list[str]]:
        return self.new_values(str, split_key)

    def boolean(self, ref: Ref[bool]) -> Var:
        return self.value(_expect(ref, bool))

    def new_boolean(self) -> Ref[bool]:
        return self.new_value(bool)

    def booleans(self, ref: Ref[list[bool]], split_key: str | None = None) -> Var:
        return self.values(_expect_many(ref, bool), split_key)

    def new_booleans(self, split_key: str | None = None) -> Ref[list[bool]]:
        return self.new_values(bool, split_key)

    def integer(self, ref: Ref[int]) -> Var:
        return self.value(_expect(ref, int))

    def new_integer(self) -> Ref[int]:
        return self.new_value(int)

    def integers(self, ref: Ref[list[int]], split_key: str | None = None) -> Var:
        return self.values(_expect_many(ref, int), split_key)

    def new_integers(self, split_key: str | None = None) -> Ref[list[int]]:
        return self.new_values(int, split_key)

    def float_(self, ref: Ref[float]) -> Var:
        return self.value(_expect(ref, float))

    def new_float(self) -> Ref[float]:
        return self.new_value(float)

    def floats(self, ref: Ref[list[float]], split_key: str | None = None) -> Var:
        return self.values(_expect_many(ref, float), split_key)

    def new_floats(self, split_key: str | None = None) -> Ref[list[float]]:
        return self.new_values(float, split_key)

    def url(self, ref: Ref[SplitResult]) -> Var:
        return self.value(_expect(ref, SplitResult))

    def new_url(self) -> Ref[SplitResult]:
        return self.new_value(SplitResult)

    def urls(self, ref: Ref[list[SplitResult]], split_key: str | None = None) -> Var:
        return self.values(_expect_many(ref, SplitResult), split_key)

    def new_urls(self, split_key: str | None = None) -> Ref[list[SplitResult]]:
        return self.new_values(SplitResult, split_key)

    def uuid(self, ref: Ref[uuid_.UUID]) -> Var:
        return self.value(_expect(ref, uuid_.UUID))

    def new_uuid(self) -> Ref[uuid_.UUID]:
        return self.new_value(uuid_.UUID)

    def uuids(self, ref: Ref[list[uuid_.UUID]], split_key: str | None = None) -> Var:
        return self.values(_expect_many(ref, uuid_.UUID), split_key)

    def new_uuids(self, split_key: str | None = None) -> Ref[list[uuid_.UUID]]:
        return self.new_values(uuid_.UUID, split_key)

    def time(self, ref: Ref[datetime]) -> Var:
        return self.value(_expect(ref, datetime))

    def new_time(self) -> Ref[datetime]:
        return self.new_value(datetime)

    def times(self, ref: Ref[list[datetime]], split_key: str | None = None) -> Var:
        return self.values(_expect_many(ref, datetime), split_key)

    def new_times(self, split_key: str | None = None) -> Ref[list[datetime]]:
        return self.new_values(datetime, split_key)

    # resolution

    def resolve_value(self) -> str:
        """The environment value if found, else the allowed fallback, else ""."""
        if self.found:
            return self.raw
        if self.fallback is None:
            return ""
        try:
            allowed = self.fallback.allow(self.genv)
        except (GenvError, ValueError) as err:
            raise DefaultResolutionError(self.key, err) from err
        if not allowed:
            logger.debug("Default for %s not allowed", self.key)
            return ""
        logger.debug("Using default for %s", self.key)
        return self.fallback.value

    def _parser(self, target_type: Any) -> Parser[Any]:
        parser = self.genv.registry.get(target_type)
        if parser is None:
            raise NoParserError(self.key, target_type)
        return parser

    def _zero(self, target_type: Any) -> Any:
        parser = self.genv.registry.get(target_type)
        return parser.zero if parser is not None else None

    def _parse_token(self, parser: Parser[Any], value: str) -> Any:
        try:
            return parser.parse(value)
        except (ValueError, TypeError) as err:
            raise ParseValueError(self.key, value, parser.type_name, err) from err

    def parse_one(self, target_type: Any) -> Any:
        """Resolve and parse a scalar value. Raises an InvalidVariableError subclass."""
        parser = self._parser(target_type)
        value = self.resolve_value()
        if value == "":
            if not self.is_optional:
                raise MissingVariableError(self.key)
            return parser.zero
        return self._parse_token(parser, value)

    def parse_many(self, element_type: Any, split_key: str | None = None) -> list[Any]:
        """Resolve once, split, drop empty tokens, then parse each token in order."""
        sep = self.split_key if split_key is None else split_key
        if sep == "":
            raise SplitKeyError(self.key)
        parser = self._parser(element_type)
        tokens = [token for token in self.resolve_value().split(sep) if token]
        if not tokens and not self.is_optional:
            raise MissingVariableError(self.key)
        return [self._parse_token(parser, token) for token in tokens]

    def _assign(self, ref: Ref[Any]) -> None:
        ref.value = self.parse_one(ref.type)

    def _assign_many(self, ref: Ref[Any], element_type: Any, split_key: str | None) -> None:
        ref.value = self.parse_many(element_type, split_key)


def _expect(ref: Ref[Any], type_: Any) -> Ref[Any]:
    if ref.type is not type_:
        raise TypeError(f"expected a Ref({type_.__name__}) slot, got {ref!r}")
    return ref


def _expect_many(ref: Ref[Any], type_: Any) -> Ref[Any]:
    if ref.element_type() is not type_:
        raise TypeError(f"expected a Ref(list[{type_.__name__}]) slot, got {ref!r}")
    return ref
