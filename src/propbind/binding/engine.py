"""Traversal engine applying dotted property keys to a target object graph."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

from propbind.domain import BindingOptions, BindingOutcome, BindingResult

from .exceptions import NoCompatibleMutatorError, PropertyBindingError
from .members import MemberBinder, PendingAssignment
from .paths import strip_prefix, tokenize
from .placeholders import PlaceholderResolver
from .references import ReferenceResolver

if TYPE_CHECKING:
    from propbind.container import BindingContext

logger = logging.getLogger(__name__)


class PropertyBinder:
    """Bind flat ``key -> value`` mappings onto one root target.

    Keys are processed one at a time against a snapshot of the mapping. A
    bound key is removed from the caller's mapping unless
    ``remove_parameters`` is disabled; skipped keys stay behind so callers
    can see what was not applied.
    """

    def __init__(self, context: BindingContext, options: BindingOptions | None = None) -> None:
        self._context = context
        self._options = options or BindingOptions()
        self._placeholders = PlaceholderResolver(context.properties)
        self._references = ReferenceResolver(
            context.registry, context.injector, self._placeholders
        )
        self._members = MemberBinder(context.type_converter, self._references)

    @property
    def options(self) -> BindingOptions:
        return self._options

    def bind(self, target: Any, properties: MutableMapping[str, Any]) -> bool:
        """Bind every matching key and report whether all of them were bound."""

        return self.bind_all(target, properties).complete

    def bind_all(self, target: Any, properties: MutableMapping[str, Any]) -> BindingResult:
        bound: list[str] = []
        unbound: list[str] = []
        for key, value in list(properties.items()):
            path = self._strip_prefix(key)
            if path is None:
                continue
            if self._bind_key(target, key, path, value) is BindingOutcome.BOUND:
                bound.append(key)
                if self._options.remove_parameters:
                    properties.pop(key, None)
            else:
                unbound.append(key)

        if unbound:
            logger.debug(
                "Bound %d of %d properties on %s; unbound: %s",
                len(bound),
                len(bound) + len(unbound),
                type(target).__name__,
                ", ".join(unbound),
            )
        return BindingResult(bound=tuple(bound), unbound=tuple(unbound))

    def bind_property(self, target: Any, key: str, value: Any) -> bool:
        path = self._strip_prefix(key)
        if path is None:
            return False
        return self._bind_key(target, key, path, value) is BindingOutcome.BOUND

    def _strip_prefix(self, key: str) -> str | None:
        return strip_prefix(key, self._options.option_prefix, ignore_case=self._options.ignore_case)

    def _bind_key(self, target: Any, key: str, path: str, value: Any) -> BindingOutcome:
        try:
            outcome = self._traverse(target, path, value)
        except PropertyBindingError as exc:
            exc.attach(property_name=key, target=target, value=value)
            logger.debug("Property %s %s: %s", key, BindingOutcome.FAILED, exc.message)
            raise
        logger.debug("Property %s %s on %s", key, outcome, type(target).__name__)
        return outcome

    def _traverse(self, target: Any, path: str, value: Any) -> BindingOutcome:
        options = self._options
        segments = tokenize(path)
        if len(segments) > 1 and not options.nesting:
            return self._unbound(f"Nested property {path} is not allowed")

        # Intermediates created on the way are only assigned once the leaf binds.
        created: list[PendingAssignment] = []
        current = target
        for segment in segments[:-1]:
            name = self._resolve_name(segment)
            nested = self._members.lookup_nested(
                current,
                name,
                ignore_case=options.ignore_case,
                fluent_builder=options.fluent_builder,
                pending=created,
            )
            if nested is None:
                return self._unbound(
                    f"Cannot find or create nested property {name} on {type(current).__name__}"
                )
            current = nested

        leaf = self._resolve_name(segments[-1])
        resolved = self._resolve_value(value)
        bound = self._members.bind(
            current,
            leaf,
            resolved,
            ignore_case=options.ignore_case,
            fluent_builder=options.fluent_builder,
        )
        if bound:
            self._members.apply(created)
            return BindingOutcome.BOUND
        return self._unbound(f"No compatible mutator for {leaf} on {type(current).__name__}")

    def _unbound(self, message: str) -> BindingOutcome:
        if self._options.mandatory:
            raise NoCompatibleMutatorError(message)
        return BindingOutcome.SKIPPED

    def _resolve_name(self, segment: str) -> str:
        if self._options.placeholder:
            return self._placeholders.resolve(segment)
        return segment

    def _resolve_value(self, value: Any) -> Any:
        if self._options.placeholder:
            value = self._placeholders.resolve_value(value)
        if self._options.reference:
            value = self._references.resolve(value)
        return value


__all__ = ["PropertyBinder"]
