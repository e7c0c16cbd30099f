"""
Deployment tier classification (dev / prod / test).

Nothing is read at import time: callers classify explicitly and get an
InvalidEnvironmentError back for unknown names, then may derive an allow predicate
from the result.
"""

from enum import Enum

from genv.engine import AllowFunc, Genv, allow_always
from genv.errors import InvalidEnvironmentError

ENV_KEY = "ENV"
DEFAULT_ENVIRONMENT = "DEVELOPMENT"


class Environment(Enum):
    DEV = "dev"
    PROD = "prod"
    TEST = "test"

    def is_dev(self) -> bool:
        return self is Environment.DEV

    def is_prod(self) -> bool:
        return self is Environment.PROD

    def is_test(self) -> bool:
        return self is Environment.TEST


_NAMES = {
    "DEVELOPMENT": Environment.DEV,
    "DEV": Environment.DEV,
    "PRODUCTION": Environment.PROD,
    "PROD": Environment.PROD,
    "TEST": Environment.TEST,
}


def classify(genv: Genv | None = None, key: str = ENV_KEY) -> Environment:
    """
    Read key (case-insensitive) and map it to an Environment. Unset means development.
    Parsing happens on a clone so genv's pending variables are untouched.
    """
    work = Genv() if genv is None else genv.clone()
    name = work.var(key).default(DEFAULT_ENVIRONMENT, allow=allow_always).new_string()
    work.parse()
    try:
        return _NAMES[name.value.upper()]
    except KeyError:
        raise InvalidEnvironmentError(key, name.value) from None


def allow_unless_prod(environment: Environment) -> AllowFunc:
    """Allow predicate permitting defaults everywhere except production."""

    def allow(genv: Genv) -> bool:
        return not environment.is_prod()

    return allow
