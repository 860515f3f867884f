"""Shared CLI dependency helpers."""

from __future__ import annotations

from functools import lru_cache

from propbind.config import BinderSettings
from propbind.container import BindingContext, build_context


@lru_cache(maxsize=1)
def get_settings() -> BinderSettings:
    """Return settings resolved from the environment once per process."""

    return BinderSettings.from_env()


@lru_cache(maxsize=1)
def get_context() -> BindingContext:
    """Return a cached binding context for CLI commands."""

    return build_context(get_settings())


def reset_context() -> None:
    """Clear the cached settings and context (useful for tests)."""

    get_settings.cache_clear()
    get_context.cache_clear()
