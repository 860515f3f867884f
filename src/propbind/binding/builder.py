"""One-shot binding helpers and the fluent binding builder."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

from propbind.domain import BindingOptions, BindingResult

from .engine import PropertyBinder

if TYPE_CHECKING:
    from propbind.container import BindingContext

_UNSET: Any = object()


def bind_properties(
    context: BindingContext,
    target: Any,
    properties: MutableMapping[str, Any],
    **options: Any,
) -> bool:
    """Bind ``properties`` onto ``target``, draining the keys that were bound."""

    return PropertyBinder(context, BindingOptions(**options)).bind(target, properties)


def bind_property(
    context: BindingContext,
    target: Any,
    key: str,
    value: Any,
    **options: Any,
) -> bool:
    """Bind a single key and report whether a mutator was invoked."""

    return PropertyBinder(context, BindingOptions(**options)).bind_property(target, key, value)


class PropertyBindingBuilder:
    """Collects a context, target, properties and options, then binds once.

    Maps passed to :meth:`with_properties` are drained of the keys that were
    bound, the same as with :func:`bind_properties`.
    """

    def __init__(self) -> None:
        self._context: BindingContext | None = None
        self._target: Any = None
        self._properties: dict[str, Any] = {}
        self._sources: list[MutableMapping[str, Any]] = []
        self._options: dict[str, Any] = {}

    def with_context(self, context: BindingContext) -> PropertyBindingBuilder:
        self._context = context
        return self

    def with_target(self, target: Any) -> PropertyBindingBuilder:
        self._target = target
        return self

    def with_property(self, key: str, value: Any) -> PropertyBindingBuilder:
        self._properties[key] = value
        return self

    def with_properties(self, properties: Mapping[str, Any]) -> PropertyBindingBuilder:
        self._properties.update(properties)
        if isinstance(properties, MutableMapping):
            self._sources.append(properties)
        return self

    def with_ignore_case(self, ignore_case: bool) -> PropertyBindingBuilder:
        self._options["ignore_case"] = ignore_case
        return self

    def with_mandatory(self, mandatory: bool) -> PropertyBindingBuilder:
        self._options["mandatory"] = mandatory
        return self

    def with_option_prefix(self, option_prefix: str | None) -> PropertyBindingBuilder:
        self._options["option_prefix"] = option_prefix
        return self

    def with_nesting(self, nesting: bool) -> PropertyBindingBuilder:
        self._options["nesting"] = nesting
        return self

    def with_reference(self, reference: bool) -> PropertyBindingBuilder:
        self._options["reference"] = reference
        return self

    def with_placeholder(self, placeholder: bool) -> PropertyBindingBuilder:
        self._options["placeholder"] = placeholder
        return self

    def with_fluent_builder(self, fluent_builder: bool) -> PropertyBindingBuilder:
        self._options["fluent_builder"] = fluent_builder
        return self

    def with_remove_parameters(self, remove_parameters: bool) -> PropertyBindingBuilder:
        self._options["remove_parameters"] = remove_parameters
        return self

    def options(self) -> BindingOptions:
        return BindingOptions(**self._options)

    def bind(
        self,
        context: BindingContext | None = None,
        target: Any = None,
        properties: Mapping[str, Any] | str | None = None,
        value: Any = _UNSET,
    ) -> bool:
        """Run the bind.

        ``bind()`` uses what was configured, ``bind(context, target, mapping)``
        binds a mapping and ``bind(context, target, key, value)`` binds one
        key and returns whether it was bound.
        """

        if context is not None:
            self._context = context
        if target is not None:
            self._target = target
        if isinstance(properties, str):
            if value is _UNSET:
                msg = "A value is required when binding a single property key"
                raise TypeError(msg)
            return self._binder().bind_property(self._require_target(), properties, value)
        if properties is not None:
            self.with_properties(properties)
        return self.bind_result().complete

    def bind_result(self) -> BindingResult:
        """Bind the collected properties and return the explicit result."""

        binder = self._binder()
        target = self._require_target()
        pending = list(self._properties)
        try:
            return binder.bind_all(target, self._properties)
        finally:
            if binder.options.remove_parameters:
                self._drain(key for key in pending if key not in self._properties)

    def _drain(self, keys: Iterable[str]) -> None:
        bound = list(keys)
        for source in self._sources:
            for key in bound:
                source.pop(key, None)

    def _binder(self) -> PropertyBinder:
        if self._context is None:
            msg = "A binding context is required"
            raise ValueError(msg)
        return PropertyBinder(self._context, self.options())

    def _require_target(self) -> Any:
        if self._target is None:
            msg = "A target is required"
            raise ValueError(msg)
        return self._target


def build() -> PropertyBindingBuilder:
    """Start a fluent binding configuration."""

    return PropertyBindingBuilder()


__all__ = ["PropertyBindingBuilder", "bind_properties", "bind_property", "build"]
