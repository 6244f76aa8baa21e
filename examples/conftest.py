"""Pytest configuration for the runnable trellis examples.

Each example directory holds an ``app.py`` that renders at import time and
a test module that inspects its module-level results.
"""

import importlib.util
from pathlib import Path

import pytest


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    """Execute the sibling ``app.py`` in a fresh module and return it."""
    app_path = Path(request.path).with_name("app.py")
    spec = importlib.util.spec_from_file_location(f"example_{app_path.parent.name}", app_path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
