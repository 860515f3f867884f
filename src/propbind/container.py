"""Binding context wiring the engine's collaborators."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from propbind.binding.placeholders import PropertiesSource
from propbind.config import BinderSettings
from propbind.conversion import TypeConverter, TypeConverterProtocol
from propbind.registry import BeanRegistry, DefaultInjector, Injector

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BindingContext:
    """Registry, injector, property source and converter shared by binds."""

    registry: BeanRegistry = field(default_factory=BeanRegistry)
    injector: Injector = field(default_factory=DefaultInjector)
    properties: PropertiesSource = field(default_factory=PropertiesSource)
    type_converter: TypeConverterProtocol = field(default_factory=TypeConverter)


def load_properties_file(path: Path) -> dict[str, str]:
    """Read ``key=value`` lines, skipping keys without a value."""

    values = dotenv_values(path)
    return {key: value for key, value in values.items() if value is not None}


def build_context(
    settings: BinderSettings | None = None,
    *,
    properties: Mapping[str, Any] | None = None,
) -> BindingContext:
    """Construct a binding context from settings."""

    resolved_settings = settings or BinderSettings.from_env()
    source = PropertiesSource(properties)
    if resolved_settings.properties_file is not None:
        path = resolved_settings.properties_file.expanduser()
        if path.is_file():
            source.add_source(load_properties_file(path))
        else:
            logger.warning("Properties file %s does not exist", path)
    if resolved_settings.environment_fallback:
        source.add_source(os.environ)

    return BindingContext(
        registry=BeanRegistry(),
        injector=DefaultInjector(),
        properties=source,
        type_converter=TypeConverter(),
    )


__all__ = ["BindingContext", "build_context", "load_properties_file"]
