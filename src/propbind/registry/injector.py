"""Class resolution and instance construction."""

from __future__ import annotations

import logging
from importlib import import_module
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


logger = logging.getLogger(__name__)


class ClassNotFoundError(ImportError):
    """Raised when a fully-qualified class name does not resolve to a class."""


@runtime_checkable
class Injector(Protocol):
    """Contract for services able to create instances of a class."""

    def new_instance(self, type_: type[T]) -> T | None: ...


class DefaultInjector:
    """Creates instances through their no-argument constructor."""

    def new_instance(self, type_: type[T]) -> T:
        return type_()


def resolve_class(name: str) -> type:
    """Import ``package.module.Class`` (nested classes allowed) and return it.

    The longest importable module prefix wins, the remaining parts are looked
    up as attributes.
    """

    parts = name.split(".")
    if not name or any(not part for part in parts):
        msg = f"Invalid class name {name!r}"
        raise ClassNotFoundError(msg, name=name)

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = import_module(module_name)
        except ModuleNotFoundError as exc:
            if exc.name and not module_name.startswith(exc.name):
                msg = f"Module {module_name} failed to import while resolving {name}"
                raise ClassNotFoundError(msg, name=name) from exc
            continue
        resolved: Any = module
        try:
            for attribute in parts[split:]:
                resolved = getattr(resolved, attribute)
        except AttributeError as exc:
            msg = f"Class {name} not found in module {module_name}"
            raise ClassNotFoundError(msg, name=name) from exc
        if not isinstance(resolved, type):
            msg = f"{name} does not refer to a class"
            raise ClassNotFoundError(msg, name=name)
        logger.debug("Resolved class %s from module %s", name, module_name)
        return resolved

    msg = f"Class {name} not found"
    raise ClassNotFoundError(msg, name=name)


__all__ = ["ClassNotFoundError", "DefaultInjector", "Injector", "resolve_class"]
