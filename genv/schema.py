"""
Reflection-based config loader.
Introspects a schema dataclass, binds every field to an env var and parses them as a
single batch on a clone of the given Genv, so defaults follow the same allow policy
as hand-written bindings.
"""

from dataclasses import MISSING, dataclass, fields, is_dataclass
from datetime import datetime
from typing import Annotated, Any, Callable, TypeVar, get_args, get_origin, get_type_hints
from urllib.parse import SplitResult

from genv.bind import Binding, bind, bind_many, parse
from genv.engine import Genv
from genv.registry import RegistryOpt, with_parser
from genv.tags import Coerce, Default, Env, Required, Split
from genv.var import Ref

T = TypeVar("T")


@dataclass(frozen=True, repr=False)
class _FieldType:
    """Registry key for a field whose parser differs from its type's (Coerce, nullable)."""

    schema: str
    field: str

    def __repr__(self) -> str:
        return f"{self.schema}.{self.field}"


def _field_env_name(field_name: str, metadata: list[Any]) -> str:
    """Resolve env var name from metadata or derive from field name."""
    for m in metadata:
        if isinstance(m, Env):
            return m.name
    return field_name.upper()


def _field_default(field: Any, metadata: list[Any]) -> Default | None:
    """Resolve default from Default tag or dataclass field default."""
    for m in metadata:
        if isinstance(m, Default):
            return m
    if field.default is not MISSING:
        return Default(field.default)
    if field.default_factory is not MISSING:
        return Default(field.default_factory())
    return None


def _is_optional(hint: Any) -> bool:
    """True if type is Optional[T] (Union[T, None])."""
    origin = get_origin(hint)
    args = get_args(hint)
    return origin is not None and type(None) in (args or ())


def _field_required(metadata: list[Any], hint: Any) -> bool:
    if any(isinstance(m, Required) for m in metadata):
        return True
    return not _is_optional(hint)


def _field_custom_coerce(metadata: list[Any]) -> Callable[[str], Any] | None:
    for m in metadata:
        if isinstance(m, Coerce):
            return m.fn
    return None


def _field_split_key(metadata: list[Any]) -> str | None:
    for m in metadata:
        if isinstance(m, Split):
            return m.key
    return None


def _resolve_inner_type(hint: Any) -> Any:
    """Get the non-None member of Optional[T]."""
    if not _is_optional(hint):
        return hint
    members = [a for a in get_args(hint) if a is not type(None)]
    return members[0] if len(members) == 1 else hint


def _render_default(value: Any, split_key: str) -> str:
    """Render a Python default as the env string it stands for."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        # RFC 3339 needs an offset; a naive default could never parse
        if value.tzinfo is None or value.utcoffset() is None:
            raise TypeError(f"datetime default must be timezone-aware, got {value!r}")
        return value.isoformat()
    if isinstance(value, SplitResult):
        return value.geturl()
    if isinstance(value, (list, tuple)):
        return split_key.join(_render_default(v, split_key) for v in value)
    return str(value)


def load_config(schema_class: type[T], genv: Genv | None = None) -> T:
    """
    Load config from environment by introspecting the schema class.

    - schema_class: a dataclass with type-annotated fields; list[T] fields are multi-valued
    - genv: instance supplying environ, registry, split key and allow policy (default: Genv())
    - Returns: instance of schema_class with populated fields
    - Raises: the first GenvError of the batch; no instance is built in that case.
      TypeError for a non-dataclass schema or a naive datetime default
    """
    if not isinstance(schema_class, type) or not is_dataclass(schema_class):
        raise TypeError("Schema must be a dataclass")
    if genv is None:
        genv = Genv()

    hints = get_type_hints(schema_class, include_extras=True)
    extra_parsers: list[RegistryOpt] = []
    bindings: list[Binding] = []
    refs: dict[str, Ref[Any]] = {}

    for f in fields(schema_class):
        if not f.init:
            continue
        hint = hints[f.name]
        metadata = list(f.metadata.values()) if f.metadata else []
        # Support Annotated[X, Env(...), Default(...)]
        if get_origin(hint) is Annotated:
            args = get_args(hint)
            hint = args[0]
            metadata = list(args[1:])

        env_name = _field_env_name(f.name, metadata)
        required = _field_required(metadata, hint)
        custom_coerce = _field_custom_coerce(metadata)
        inner_type = _resolve_inner_type(hint)
        many = get_origin(inner_type) is list
        target = get_args(inner_type)[0] if many else inner_type

        split_key = _field_split_key(metadata)
        if split_key is None:
            split_key = genv.split_key

        # Nullable scalars resolve to None rather than the type's zero value
        if custom_coerce is not None or (not required and not many):
            base = genv.registry.get(target)
            parse_fn = custom_coerce or (base.parse_fn if base is not None else None)
            if parse_fn is not None:
                target = _FieldType(schema_class.__qualname__, f.name)
                extra_parsers.append(with_parser(target, parse_fn, None))

        ref: Ref[Any] = Ref(list[target] if many else target)
        binding = bind_many(env_name, ref, split_key=split_key) if many else bind(env_name, ref)
        if not required:
            binding = binding.optional()
        default = _field_default(f, metadata)
        if default is not None and default.value is not None:
            binding = binding.default(_render_default(default.value, split_key), allow=default.allow)

        bindings.append(binding)
        refs[f.name] = ref

    work = genv.clone(registry=genv.registry.extend(*extra_parsers))
    parse(work, *bindings)
    return schema_class(**{name: ref.value for name, ref in refs.items()})
