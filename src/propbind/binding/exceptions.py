"""Errors raised while binding properties onto a target."""

from __future__ import annotations

from typing import Any


class PropertyBindingError(RuntimeError):
    """Base class for property binding failures.

    Collaborators raise these without knowing which key is being bound; the
    engine attaches the key, root target and raw value before re-raising so
    callers can report the offending property.
    """

    def __init__(
        self,
        message: str,
        *,
        property_name: str | None = None,
        target: Any = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.property_name = property_name
        self.target = target
        self.value = value

    def attach(self, *, property_name: str, target: Any, value: Any) -> None:
        """Fill in binding context that is still missing."""

        if self.property_name is None:
            self.property_name = property_name
        if self.target is None:
            self.target = target
        if self.value is None:
            self.value = value

    def __str__(self) -> str:
        if self.property_name is None:
            return self.message
        target = type(self.target).__name__ if self.target is not None else None
        return f"{self.message} (property: {self.property_name}, target: {target})"


class InvalidPropertyPathError(PropertyBindingError):
    """Raised when a key is empty or contains an empty segment."""


class UnresolvedPlaceholderError(PropertyBindingError):
    """Raised when a placeholder or property directive names a missing property."""


class UnresolvedReferenceError(PropertyBindingError):
    """Raised when a registry reference finds no matching bean."""


class AmbiguousReferenceError(UnresolvedReferenceError):
    """Raised when a by-type reference matches more than one bean."""


class ClassResolutionError(PropertyBindingError):
    """Raised when a fully-qualified class name cannot be located."""


class ConstructionError(PropertyBindingError):
    """Raised when the injector cannot produce an instance."""


class NoCompatibleMutatorError(PropertyBindingError):
    """Raised in mandatory mode when no mutator matches a segment."""


class TypeConversionError(PropertyBindingError):
    """Raised when a value cannot be converted to the mutator's type."""


__all__ = [
    "AmbiguousReferenceError",
    "ClassResolutionError",
    "ConstructionError",
    "InvalidPropertyPathError",
    "NoCompatibleMutatorError",
    "PropertyBindingError",
    "TypeConversionError",
    "UnresolvedPlaceholderError",
    "UnresolvedReferenceError",
]
