"""Tests for parser registries: construction, lookup, isolation and duplicates."""

import uuid
from datetime import datetime
from urllib.parse import SplitResult

import pytest

from genv import (
    DuplicateParserError,
    Genv,
    NoParserError,
    Parser,
    Ref,
    allow_always,
    new_default_registry,
    new_registry,
    with_parser,
)


class UserID(str):
    pass


class Color(str):
    pass


def _parse_color(s: str) -> Color:
    if s not in ("red", "green", "blue"):
        raise ValueError(f"invalid color: {s}")
    return Color(s)


def test_new_registry__is_empty() -> None:
    registry = new_registry()
    assert len(registry) == 0
    assert registry.get(str) is None
    assert str not in registry


def test_new_default_registry__has_builtins() -> None:
    registry = new_default_registry()
    for target in (str, bool, int, float, SplitResult, uuid.UUID, datetime):
        parser = registry.get(target)
        assert isinstance(parser, Parser)
        assert parser.target_type is target
    assert len(registry) == 7


def test_parser__type_name() -> None:
    registry = new_default_registry()
    assert registry.get(int).type_name == "int"
    assert registry.get(uuid.UUID).type_name == "uuid.UUID"


def test_with_parser__custom_type() -> None:
    registry = new_registry(with_parser(UserID, lambda s: UserID("user_" + s)))
    parser = registry.get(UserID)
    assert parser is not None
    assert parser.parse("42") == "user_42"


def test_duplicate_registration__fails_even_for_identical_parsers() -> None:
    def parse(s: str) -> UserID:
        return UserID(s)

    with pytest.raises(DuplicateParserError, match="already registered"):
        new_registry(with_parser(UserID, parse), with_parser(UserID, parse))


def test_duplicate_registration__builtin_type_in_default_registry() -> None:
    with pytest.raises(DuplicateParserError):
        new_default_registry(with_parser(int, int))


def test_duplicate_registration__is_not_a_genv_error() -> None:
    from genv import GenvError

    assert not issubclass(DuplicateParserError, GenvError)


def test_registry_isolation() -> None:
    first = new_default_registry(with_parser(Color, _parse_color))
    second = new_default_registry()
    assert Color in first
    assert Color not in second
    assert second.get(Color) is None


def test_extend__leaves_original_untouched() -> None:
    base = new_registry(with_parser(UserID, UserID))
    extended = base.extend(with_parser(Color, _parse_color))
    assert Color in extended and UserID in extended
    assert Color not in base


def test_genv_with_custom_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAVORITE", "green")
    env = Genv(registry=new_registry(with_parser(Color, _parse_color)))
    color = env.var("FAVORITE").new_value(Color)
    env.parse()
    assert color.value == Color("green")


def test_empty_registry__no_parser_for_builtins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NAME", "svc")
    env = Genv(registry=new_registry())
    env.var("NAME").new_string()
    with pytest.raises(NoParserError, match="no parser registered for type str"):
        env.parse()


def test_registry_shared_between_clones() -> None:
    registry = new_registry(with_parser(UserID, UserID))
    env = Genv(registry=registry)
    assert env.clone().registry is registry


def test_custom_type_slices_with_custom_delimiter(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COLORS", "red|blue||green")
    env = Genv(registry=new_default_registry(with_parser(Color, _parse_color)), split_key="|")
    colors = env.var("COLORS").new_values(Color)
    env.parse()
    assert colors.value == ["red", "blue", "green"]


def test_custom_type_with_default() -> None:
    env = Genv(
        registry=new_default_registry(with_parser(Color, _parse_color)),
        allow_default=allow_always,
        environ={},
    )
    color = Ref(Color)
    env.var("COLOR").default("blue").value(color)
    env.parse()
    assert color.value == "blue"


def test_custom_type_zero_value_when_optional() -> None:
    env = Genv(registry=new_registry(with_parser(Color, _parse_color, zero=Color("red"))), environ={})
    color = env.var("COLOR").optional().new_value(Color)
    env.parse()
    assert color.value == "red"
