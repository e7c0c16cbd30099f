"""
Declarative bindings.
bind()/bind_many() describe a variable independently of any Genv; parse() attaches
them to an instance and runs the batch, so a whole schema can be one expression:

    port, tags = Ref(int), Ref(list[str])
    parse(env,
          bind("PORT", port).default("8080"),
          bind_many("TAGS", tags).optional())
"""

from dataclasses import dataclass, replace
from typing import Any, Callable

from genv.engine import AllowFunc, Genv
from genv.var import Ref, Var


@dataclass(frozen=True)
class Binding:
    """Immutable description of one variable: key, target slot and modifiers."""

    key: str
    ref: Ref[Any]
    many: bool = False
    split_key: str | None = None
    modifiers: tuple[Callable[[Var], Var], ...] = ()

    def default(self, value: str, *, allow: AllowFunc | None = None) -> "Binding":
        return replace(self, modifiers=self.modifiers + (lambda v: v.default(value, allow=allow),))

    def optional(self) -> "Binding":
        return replace(self, modifiers=self.modifiers + (Var.optional,))

    def apply(self, genv: Genv) -> Var:
        """Declare the variable on genv and queue its parse action."""
        var = genv.var(self.key)
        for modify in self.modifiers:
            modify(var)
        if self.many:
            return var.values(self.ref, self.split_key)
        return var.value(self.ref)


def bind(key: str, ref: Ref[Any]) -> Binding:
    """Bind a scalar variable into ref, parsed with the registry parser for ref.type."""
    return Binding(key, ref)


def bind_many(key: str, ref: Ref[Any], *, split_key: str | None = None) -> Binding:
    """Bind a multi-valued variable into a list[T] slot."""
    ref.element_type()  # raises TypeError for scalar slots
    return Binding(key, ref, many=True, split_key=split_key)


def parse(genv: Genv, *bindings: Binding) -> None:
    """Apply every binding to genv, then run the batch."""
    for binding in bindings:
        binding.apply(genv)
    genv.parse()
