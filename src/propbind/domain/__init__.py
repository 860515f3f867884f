"""Domain model exports."""

from .base import DomainModel
from .enums import BindingOutcome, MutatorKind
from .options import BindingOptions
from .result import BindingResult

__all__ = [
    "BindingOptions",
    "BindingOutcome",
    "BindingResult",
    "DomainModel",
    "MutatorKind",
]
