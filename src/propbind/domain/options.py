"""Binding configuration models."""

from __future__ import annotations

from pydantic import field_validator

from .base import DomainModel


class BindingOptions(DomainModel):
    """Options that parameterise one traversal run."""

    ignore_case: bool = False
    option_prefix: str | None = None
    mandatory: bool = False
    nesting: bool = True
    reference: bool = True
    placeholder: bool = True
    fluent_builder: bool = True
    remove_parameters: bool = True

    @field_validator("option_prefix")
    @classmethod
    def empty_prefix_is_none(cls, value: str | None) -> str | None:
        return value or None


__all__ = ["BindingOptions"]
