"""Enumerations used across the propbind domain layer."""

from __future__ import annotations

from enum import StrEnum


class BindingOutcome(StrEnum):
    """Terminal state of a single key within one bind pass."""

    BOUND = "bound"
    SKIPPED = "skipped"
    FAILED = "failed"


class MutatorKind(StrEnum):
    """Calling conventions recognised when assigning a member."""

    SETTER = "setter"
    FLUENT = "fluent"
    WITH = "with"
