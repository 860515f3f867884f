"""Value coercion backed by pydantic type adapters."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError, PydanticUserError

from propbind.binding.exceptions import TypeConversionError

logger = logging.getLogger(__name__)

_LAX_CONFIG = ConfigDict(coerce_numbers_to_str=True)
_ARBITRARY_TYPES = ConfigDict(arbitrary_types_allowed=True, coerce_numbers_to_str=True)


@runtime_checkable
class TypeConverterProtocol(Protocol):
    """Contract for services converting values to a declared type."""

    def convert(self, value: Any, target_type: Any) -> Any: ...


class TypeConverter:
    """Convert strings and objects to a declared parameter type.

    Validation runs in pydantic's lax mode so ``"33"`` becomes ``33`` for an
    ``int``, ``"true"`` becomes ``True`` for a ``bool`` and ``123`` becomes
    ``"123"`` for a ``str``. Plain classes that pydantic has no schema for
    only accept instances of themselves.
    """

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def convert(self, value: Any, target_type: Any) -> Any:
        if target_type is Any or target_type is None:
            return value
        if (
            isinstance(target_type, type)
            and isinstance(value, target_type)
            and not (target_type is int and isinstance(value, bool))
        ):
            return value
        adapter = self._adapter(target_type)
        try:
            return adapter.validate_python(value)
        except ValidationError as exc:
            type_name = getattr(target_type, "__name__", str(target_type))
            msg = f"Cannot convert value {value!r} to type {type_name}"
            raise TypeConversionError(msg, value=value) from exc

    def _adapter(self, target_type: Any) -> TypeAdapter[Any]:
        try:
            cached = self._adapters.get(target_type)
        except TypeError:
            return self._build_adapter(target_type)
        if cached is None:
            cached = self._build_adapter(target_type)
            self._adapters[target_type] = cached
        return cached

    @staticmethod
    def _build_adapter(target_type: Any) -> TypeAdapter[Any]:
        try:
            return _new_adapter(target_type, _LAX_CONFIG)
        except PydanticSchemaGenerationError:
            logger.debug("Falling back to instance checks for %r", target_type)
        try:
            return _new_adapter(target_type, _ARBITRARY_TYPES)
        except PydanticUserError as exc:
            msg = f"No conversion available for type {target_type!r}"
            raise TypeConversionError(msg) from exc


def _new_adapter(target_type: Any, config: ConfigDict) -> TypeAdapter[Any]:
    try:
        return TypeAdapter(target_type, config=config)
    except PydanticSchemaGenerationError:
        raise
    except PydanticUserError as exc:
        if exc.code != "type-adapter-config-unused":
            raise
    # Models and dataclasses carry their own config.
    return TypeAdapter(target_type)


__all__ = ["TypeConverter", "TypeConverterProtocol"]
