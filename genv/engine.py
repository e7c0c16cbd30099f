"""
Configuration instance and deferred parse engine.

Genv hands out Var descriptors, collects their parse actions in declaration order,
and runs them all in one fail-fast batch on parse(). Whether a fallback may be used
is decided by an allow predicate, resolved at parse time. The implicit predicate
reads GENV_ALLOW_DEFAULT through a nested parse on a clone so the caller's queue is
never touched.
"""

import logging
import os
from typing import Callable, Mapping

from genv.registry import ParserRegistry, new_default_registry
from genv.var import Var

logger = logging.getLogger(__name__)

ALLOW_DEFAULT_KEY = "GENV_ALLOW_DEFAULT"
DEFAULT_SPLIT_KEY = ","

AllowFunc = Callable[["Genv"], bool]


def allow_always(genv: "Genv") -> bool:
    return True


def allow_never(genv: "Genv") -> bool:
    return False


def allow_from_env(key: str = ALLOW_DEFAULT_KEY) -> AllowFunc:
    """
    Predicate reading a boolean switch from the environment.
    The switch itself defaults to "false" and that default is always allowed,
    so an unset switch disallows defaults while an unparseable one raises.
    """

    def allow(genv: "Genv") -> bool:
        clone = genv.clone()
        switch = clone.var(key).default("false", allow=allow_always).new_boolean()
        clone.parse()
        return switch.value

    return allow


class Genv:
    """
    Process-facing configuration root.
    Not safe for concurrent declare/parse; the registry may be shared read-only.
    """

    def __init__(
        self,
        *,
        allow_default: AllowFunc | None = None,
        split_key: str = DEFAULT_SPLIT_KEY,
        registry: ParserRegistry | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.allow_default = allow_default if allow_default is not None else allow_from_env()
        self.split_key = split_key
        self.registry = registry if registry is not None else new_default_registry()
        self.environ = environ if environ is not None else os.environ
        self._pending: list[tuple[Var, Callable[[], None]]] = []

    def __repr__(self) -> str:
        return f"Genv(split_key={self.split_key!r}, pending={len(self._pending)})"

    def var(
        self,
        key: str,
        *,
        allow_default: AllowFunc | None = None,
        split_key: str | None = None,
    ) -> Var:
        """Look up key now and return a descriptor for it. Never fails."""
        raw = self.environ.get(key)
        return Var(
            self,
            key,
            raw if raw is not None else "",
            raw is not None,
            allow_default if allow_default is not None else self.allow_default,
            split_key if split_key is not None else self.split_key,
        )

    def presence(self, key: str) -> bool:
        """True if key is set to a non-empty value."""
        return bool(self.environ.get(key))

    def clone(self, *, registry: ParserRegistry | None = None) -> "Genv":
        """Same predicate, split key, registry and environ, with an empty queue."""
        return Genv(
            allow_default=self.allow_default,
            split_key=self.split_key,
            registry=registry if registry is not None else self.registry,
            environ=self.environ,
        )

    def pending(self) -> int:
        return len(self._pending)

    def _enqueue(self, var: Var, action: Callable[[], None]) -> None:
        self._pending.append((var, action))

    def parse(self) -> None:
        """
        Run every queued action in declaration order.
        Stops at the first error; targets assigned before it keep their values.
        The queue is cleared whether or not parsing succeeds.
        """
        pending = list(self._pending)
        try:
            for var, _ in pending:
                var._freeze()
            logger.debug("Parsing %d variable(s)", len(pending))
            for _, action in pending:
                action()
        finally:
            self._pending.clear()
        logger.debug("Parsed %d variable(s)", len(pending))
