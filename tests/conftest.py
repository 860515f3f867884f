from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the src/ directory is importable when tests run via `uv run pytest`.
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))
# Sample targets live next to the tests and are resolved by class name.
sys.path.append(str(Path(__file__).resolve().parent))

from binding_fixtures import Company  # noqa: E402

from propbind.binding import PropertiesSource  # noqa: E402
from propbind.container import BindingContext  # noqa: E402


@pytest.fixture
def context() -> BindingContext:
    ctx = BindingContext(
        properties=PropertiesSource({"companyName": "Acme", "committer": "rider"}),
    )
    ctx.registry.bind("myWork", Company(id=456, name="Acme"))
    return ctx
