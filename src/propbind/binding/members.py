"""Discovery and invocation of member mutators and accessors."""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any, ClassVar, Union, get_args, get_origin, get_type_hints

from propbind.domain import MutatorKind

from .exceptions import PropertyBindingError
from .paths import canonical_name, to_member_name
from .references import AUTOWIRED_MARKER, ReferenceResolver

if TYPE_CHECKING:
    from propbind.conversion import TypeConverterProtocol

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class Mutator:
    """A way of assigning one member of a target."""

    kind: MutatorKind
    name: str
    attribute: str
    parameter_type: Any = Any
    is_method: bool = True

    def invoke(self, target: Any, value: Any) -> None:
        if self.is_method:
            getattr(target, self.attribute)(value)
        else:
            setattr(target, self.attribute, value)


@dataclass(frozen=True, slots=True)
class Accessor:
    """A way of reading the current value of one member."""

    name: str
    attribute: str
    is_method: bool = False

    def read(self, target: Any) -> Any:
        if self.is_method:
            return getattr(target, self.attribute)()
        return getattr(target, self.attribute, None)


@dataclass(frozen=True, slots=True)
class PendingAssignment:
    """An intermediate object created during traversal, not yet assigned."""

    target: Any
    mutator: Mutator
    value: Any


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Mutators and accessors of a class in lookup order."""

    type_: type
    mutators: tuple[Mutator, ...]
    accessors: tuple[Accessor, ...]
    fields: frozenset[str]


def _split_prefix(attribute: str, prefix: str) -> str | None:
    """Return the member implied by ``set_age``/``setAge`` style names."""

    if attribute.startswith(prefix + "_") and len(attribute) > len(prefix) + 1:
        return attribute[len(prefix) + 1 :]
    rest = attribute[len(prefix) :]
    if attribute.startswith(prefix) and rest[:1].isupper():
        return to_member_name(rest[0].lower() + rest[1:])
    return None


def _safe_hints(obj: Any) -> dict[str, Any]:
    try:
        return get_type_hints(obj)
    except (AttributeError, NameError, TypeError) as exc:
        logger.debug("Unable to evaluate annotations of %r: %s", obj, exc)
        return {}


def _is_class_var(hint: Any) -> bool:
    return hint is ClassVar or get_origin(hint) is ClassVar


def _arity(func: Callable[..., Any]) -> tuple[int, str | None]:
    """Return the number of required positional arguments and the first one's name."""

    try:
        parameters = list(inspect.signature(func).parameters.values())[1:]
    except (TypeError, ValueError):
        return -1, None
    positional = [param for param in parameters if param.kind in _POSITIONAL]
    required = [
        param
        for param in parameters
        if param.default is inspect.Parameter.empty and param.kind not in _VARIADIC
    ]
    if any(param.kind not in _POSITIONAL for param in required):
        return -1, None
    first = positional[0].name if positional else None
    return len(required), first


def unwrap_optional(type_: Any) -> Any:
    """Return ``X`` for ``X | None`` and leave other types alone."""

    if get_origin(type_) in (Union, types.UnionType):
        args = [arg for arg in get_args(type_) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return type_


@lru_cache(maxsize=512)
def describe(type_: type) -> TypeDescriptor:
    """Build the mutator/accessor table of ``type_`` once."""

    setters: list[Mutator] = []
    properties: list[Mutator] = []
    fields: list[Mutator] = []
    fluent: list[Mutator] = []
    withers: list[Mutator] = []
    method_accessors: list[Accessor] = []
    value_accessors: list[Accessor] = []
    seen: set[str] = set()

    for klass in type_.__mro__:
        if klass is object or klass.__module__.startswith("pydantic"):
            continue
        for attribute, member in vars(klass).items():
            if attribute.startswith("_") or attribute in seen:
                continue
            seen.add(attribute)
            if isinstance(member, property):
                name = to_member_name(attribute)
                if member.fget is not None:
                    value_accessors.append(Accessor(name, attribute))
                if member.fset is not None:
                    parameter_type = _property_type(member)
                    properties.append(
                        Mutator(MutatorKind.SETTER, name, attribute, parameter_type, is_method=False)
                    )
                continue
            if not inspect.isfunction(member):
                continue
            required, first = _arity(member)
            if required == 0:
                for prefix in ("get", "is"):
                    implied = _split_prefix(attribute, prefix)
                    if implied is not None:
                        method_accessors.append(Accessor(implied, attribute, is_method=True))
                        break
                continue
            if required != 1 or first is None:
                continue
            parameter_type = _safe_hints(member).get(first, Any)
            implied = _split_prefix(attribute, "set")
            if implied is not None:
                setters.append(Mutator(MutatorKind.SETTER, implied, attribute, parameter_type))
                continue
            implied = _split_prefix(attribute, "with")
            if implied is not None:
                withers.append(Mutator(MutatorKind.WITH, implied, attribute, parameter_type))
                continue
            fluent.append(
                Mutator(MutatorKind.FLUENT, to_member_name(attribute), attribute, parameter_type)
            )

    for attribute, hint in _safe_hints(type_).items():
        if attribute.startswith("_") or _is_class_var(hint):
            continue
        if isinstance(inspect.getattr_static(type_, attribute, None), property):
            continue
        name = to_member_name(attribute)
        fields.append(Mutator(MutatorKind.SETTER, name, attribute, hint, is_method=False))
        value_accessors.append(Accessor(name, attribute))

    return TypeDescriptor(
        type_=type_,
        mutators=(*setters, *properties, *fields, *fluent, *withers),
        accessors=(*method_accessors, *value_accessors),
        fields=frozenset(mutator.attribute for mutator in fields),
    )


def _property_type(member: property) -> Any:
    if member.fset is not None:
        required, first = _arity(member.fset)
        if required == 1 and first is not None:
            hint = _safe_hints(member.fset).get(first)
            if hint is not None:
                return hint
    if member.fget is not None:
        return _safe_hints(member.fget).get("return", Any)
    return Any


def _instance_attributes(target: Any, descriptor: TypeDescriptor) -> Iterator[tuple[str, Any]]:
    for attribute, current in getattr(target, "__dict__", {}).items():
        if attribute.startswith("_") or attribute in descriptor.fields:
            continue
        static = inspect.getattr_static(type(target), attribute, None)
        if inspect.isfunction(static) or isinstance(static, property):
            continue
        yield attribute, current


def _accessors(target: Any) -> list[Accessor]:
    descriptor = describe(type(target))
    candidates = list(descriptor.accessors)
    candidates.extend(
        Accessor(to_member_name(attribute), attribute)
        for attribute, _ in _instance_attributes(target, descriptor)
    )
    return candidates


class MemberBinder:
    """Locate and invoke the mutator matching a path segment."""

    def __init__(self, converter: TypeConverterProtocol, references: ReferenceResolver) -> None:
        self._converter = converter
        self._references = references

    def mutators(self, target: Any, *, fluent_builder: bool = True) -> list[Mutator]:
        """Return candidate mutators of ``target`` in lookup order."""

        descriptor = describe(type(target))
        candidates = [m for m in descriptor.mutators if m.kind is MutatorKind.SETTER]
        for attribute, current in _instance_attributes(target, descriptor):
            parameter_type = type(current) if current is not None else Any
            candidates.append(
                Mutator(
                    MutatorKind.SETTER,
                    to_member_name(attribute),
                    attribute,
                    parameter_type,
                    is_method=False,
                )
            )
        if fluent_builder:
            candidates.extend(m for m in descriptor.mutators if m.kind is MutatorKind.FLUENT)
            candidates.extend(m for m in descriptor.mutators if m.kind is MutatorKind.WITH)
        return candidates

    def accessors(self, target: Any) -> list[Accessor]:
        return _accessors(target)

    def find_mutator(
        self,
        target: Any,
        name: str,
        *,
        ignore_case: bool = False,
        fluent_builder: bool = True,
    ) -> Mutator | None:
        candidates = self.mutators(target, fluent_builder=fluent_builder)
        return _first_match(candidates, name, ignore_case=ignore_case)

    def find_accessor(self, target: Any, name: str, *, ignore_case: bool = False) -> Accessor | None:
        return _first_match(self.accessors(target), name, ignore_case=ignore_case)

    def bind(
        self,
        target: Any,
        name: str,
        value: Any,
        *,
        ignore_case: bool = False,
        fluent_builder: bool = True,
    ) -> bool:
        """Assign ``value`` to the member ``name`` of ``target``.

        Returns ``False`` when no compatible mutator exists. Conversion and
        invocation failures raise.
        """

        mutator = self.find_mutator(
            target, name, ignore_case=ignore_case, fluent_builder=fluent_builder
        )
        if mutator is None:
            return False
        if value is AUTOWIRED_MARKER:
            value = self._references.autowire(unwrap_optional(mutator.parameter_type))
        converted = self._converter.convert(value, mutator.parameter_type)
        self._invoke(mutator, target, converted)
        logger.debug(
            "Bound %s on %s via %s %s",
            name,
            type(target).__name__,
            mutator.kind,
            mutator.attribute,
        )
        return True

    def lookup_nested(
        self,
        target: Any,
        name: str,
        *,
        ignore_case: bool = False,
        fluent_builder: bool = True,
        pending: list[PendingAssignment] | None = None,
    ) -> Any | None:
        """Return the object behind ``name``, creating it when unset.

        An existing non-``None`` value is always reused. Otherwise the
        mutator's declared class is instantiated. The new instance is
        assigned immediately, or appended to ``pending`` when a list is given
        so the caller can assign it with :meth:`apply` once the leaf is bound.
        """

        accessor = self.find_accessor(target, name, ignore_case=ignore_case)
        if accessor is not None:
            try:
                current = accessor.read(target)
            except Exception as exc:
                msg = f"Cannot read {name} from {type(target).__name__}"
                raise PropertyBindingError(msg) from exc
            if current is not None:
                return current

        mutator = self.find_mutator(
            target, name, ignore_case=ignore_case, fluent_builder=fluent_builder
        )
        if mutator is None:
            return None
        type_ = unwrap_optional(mutator.parameter_type)
        if not isinstance(type_, type) or type_ is Any:
            logger.debug("Cannot create %s on %s: unknown type", name, type(target).__name__)
            return None
        instance = self._references.create(type_)
        logger.debug("Created %s for %s on %s", type_.__qualname__, name, type(target).__name__)
        if pending is None:
            self._invoke(mutator, target, instance)
        else:
            pending.append(PendingAssignment(target, mutator, instance))
        return instance

    def apply(self, pending: list[PendingAssignment]) -> None:
        """Assign intermediates collected by :meth:`lookup_nested`, outermost first."""

        for assignment in pending:
            self._invoke(assignment.mutator, assignment.target, assignment.value)

    @staticmethod
    def _invoke(mutator: Mutator, target: Any, value: Any) -> None:
        try:
            mutator.invoke(target, value)
        except PropertyBindingError:
            raise
        except Exception as exc:
            msg = f"Error invoking {mutator.attribute} on {type(target).__name__}"
            raise PropertyBindingError(msg) from exc


def read_members(target: Any) -> dict[str, Any]:
    """Return the current value of every readable member keyed by member name."""

    values: dict[str, Any] = {}
    for accessor in _accessors(target):
        if accessor.name not in values:
            values[accessor.name] = accessor.read(target)
    return values


def _first_match(candidates: list[Any], name: str, *, ignore_case: bool) -> Any | None:
    wanted = to_member_name(name)
    for candidate in candidates:
        if candidate.name == wanted:
            return candidate
    if ignore_case:
        key = canonical_name(name)
        for candidate in candidates:
            if canonical_name(candidate.name) == key:
                return candidate
    return None


__all__ = [
    "Accessor",
    "MemberBinder",
    "Mutator",
    "PendingAssignment",
    "TypeDescriptor",
    "describe",
    "read_members",
    "unwrap_optional",
]
