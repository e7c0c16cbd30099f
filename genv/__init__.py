"""genv: typed environment variable parsing with a pluggable parser registry and deferred, fail-fast batches."""

from genv.bind import Binding, bind, bind_many, parse
from genv.engine import (
    ALLOW_DEFAULT_KEY,
    AllowFunc,
    Genv,
    allow_always,
    allow_from_env,
    allow_never,
)
from genv.environments import Environment, allow_unless_prod, classify
from genv.envfile import load_env, load_environ
from genv.errors import (
    DefaultResolutionError,
    DuplicateParserError,
    FrozenVariableError,
    GenvError,
    InvalidEnvironmentError,
    InvalidVariableError,
    MissingVariableError,
    NoParserError,
    ParseValueError,
    SplitKeyError,
)
from genv.registry import Parser, ParserRegistry, new_default_registry, new_registry, with_parser
from genv.schema import load_config
from genv.tags import Coerce, Default, Env, Required, Split
from genv.var import Fallback, Ref, Var

__all__ = [
    "Genv",
    "Var",
    "Ref",
    "Fallback",
    "AllowFunc",
    "ALLOW_DEFAULT_KEY",
    "allow_always",
    "allow_never",
    "allow_from_env",
    "Binding",
    "bind",
    "bind_many",
    "parse",
    "Parser",
    "ParserRegistry",
    "new_registry",
    "new_default_registry",
    "with_parser",
    "load_config",
    "Env",
    "Default",
    "Required",
    "Split",
    "Coerce",
    "Environment",
    "classify",
    "allow_unless_prod",
    "load_env",
    "load_environ",
    "GenvError",
    "InvalidVariableError",
    "MissingVariableError",
    "ParseValueError",
    "DefaultResolutionError",
    "NoParserError",
    "SplitKeyError",
    "InvalidEnvironmentError",
    "DuplicateParserError",
    "FrozenVariableError",
]
