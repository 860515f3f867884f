"""Property sources and ``{{name}}`` placeholder substitution."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .exceptions import UnresolvedPlaceholderError

PREFIX_TOKEN = "{{"
SUFFIX_TOKEN = "}}"
DEFAULT_SEPARATOR = ":"

_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")
_MISSING = object()


class PropertiesSource:
    """Ordered lookup of named properties.

    Override properties win, then initial properties, then each fallback
    source in the order given (for example values read from a properties
    file or the process environment).
    """

    def __init__(
        self,
        initial_properties: Mapping[str, Any] | None = None,
        *,
        override_properties: Mapping[str, Any] | None = None,
        sources: Iterable[Mapping[str, Any]] = (),
    ) -> None:
        self._initial: dict[str, Any] = dict(initial_properties or {})
        self._override: dict[str, Any] = dict(override_properties or {})
        self._sources: list[Mapping[str, Any]] = list(sources)

    @property
    def initial_properties(self) -> Mapping[str, Any]:
        return self._initial

    def set_initial_properties(self, properties: Mapping[str, Any]) -> None:
        self._initial = dict(properties)

    def set_override_properties(self, properties: Mapping[str, Any]) -> None:
        self._override = dict(properties)

    def add_source(self, source: Mapping[str, Any]) -> None:
        self._sources.append(source)

    def lookup(self, name: str) -> str | None:
        for mapping in (self._override, self._initial, *self._sources):
            value = mapping.get(name, _MISSING)
            if value is not _MISSING and value is not None:
                return str(value)
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None


class PlaceholderResolver:
    """Expand ``{{name}}`` and ``{{name:default}}`` tokens in text."""

    def __init__(self, properties: PropertiesSource) -> None:
        self._properties = properties

    def resolve(self, text: str) -> str:
        if PREFIX_TOKEN not in text:
            return text
        return self._expand(text, ())

    def resolve_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.resolve(value)
        return value

    def lookup(self, name: str) -> str:
        """Return a property value, resolving nested placeholders in it."""

        value = self._properties.lookup(name)
        if value is None:
            msg = f"Property with key [{name}] not found in properties"
            raise UnresolvedPlaceholderError(msg, value=name)
        return self._expand(value, (name,))

    def _expand(self, text: str, seen: tuple[str, ...]) -> str:
        def replace(match: re.Match[str]) -> str:
            token = match.group(1).strip()
            name, separator, default = token.partition(DEFAULT_SEPARATOR)
            if name in seen:
                chain = " -> ".join((*seen, name))
                msg = f"Circular reference detected while resolving placeholder: {chain}"
                raise UnresolvedPlaceholderError(msg, value=text)
            value = self._properties.lookup(name)
            if value is None:
                if separator:
                    return default
                msg = f"Property with key [{name}] not found in properties"
                raise UnresolvedPlaceholderError(msg, value=text)
            return self._expand(value, (*seen, name))

        return _PATTERN.sub(replace, text)


__all__ = ["PlaceholderResolver", "PropertiesSource"]
