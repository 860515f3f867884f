"""Named bean registry used to resolve references."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class BeanRegistry:
    """Runtime registry mapping bean names to instances."""

    _beans: dict[str, Any] = field(default_factory=dict)

    def bind(self, name: str, bean: Any, *, override: bool = False) -> None:
        if not name:
            msg = "Bean name must not be empty"
            raise ValueError(msg)
        if not override and name in self._beans:
            existing = type(self._beans[name]).__name__
            msg = f"Bean {name} already registered ({existing})"
            raise ValueError(msg)
        self._beans[name] = bean

    def unbind(self, name: str) -> None:
        self._beans.pop(name, None)

    def lookup_by_name(self, name: str) -> Any | None:
        return self._beans.get(name)

    def lookup_by_type(self, type_: type) -> dict[str, Any]:
        """Return every bean that is an instance of ``type_`` in bind order."""

        return {name: bean for name, bean in self._beans.items() if isinstance(bean, type_)}

    def names(self) -> tuple[str, ...]:
        return tuple(self._beans.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._beans

    def __len__(self) -> int:
        return len(self._beans)


__all__ = ["BeanRegistry"]
