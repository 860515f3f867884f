"""Explicit results of a bulk bind."""

from __future__ import annotations

from pydantic import Field

from .base import DomainModel


class BindingResult(DomainModel):
    """Keys that were bound and keys that were left in place."""

    bound: tuple[str, ...] = Field(default_factory=tuple)
    unbound: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def complete(self) -> bool:
        return not self.unbound


__all__ = ["BindingResult"]
