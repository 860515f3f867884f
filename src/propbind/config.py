"""Lightweight binder configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no"}


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if not raw:
        return None
    return Path(raw)


@dataclass(frozen=True)
class BinderSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    properties_file: Path | None = None
    environment_fallback: bool = False
    ignore_case: bool = False
    mandatory: bool = False
    option_prefix: str | None = None

    @classmethod
    def from_env(cls) -> BinderSettings:
        return cls(
            environment=os.getenv("PROPBIND_ENV", cls.environment),
            properties_file=_env_path("PROPBIND_PROPERTIES_FILE"),
            environment_fallback=_env_bool("PROPBIND_ENVIRONMENT_FALLBACK", False),
            ignore_case=_env_bool("PROPBIND_IGNORE_CASE", False),
            mandatory=_env_bool("PROPBIND_MANDATORY", False),
            option_prefix=os.getenv("PROPBIND_OPTION_PREFIX") or None,
        )


__all__ = ["BinderSettings"]
