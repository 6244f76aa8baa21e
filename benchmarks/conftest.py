from __future__ import annotations

import json
import os
import platform
import sys
from importlib import metadata as importlib_metadata
from pathlib import Path

import pytest
from jinja2 import DictLoader
from jinja2 import Environment as Jinja2Environment

from trellis import Environment as TrellisEnvironment

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"

_SHARED = {
    "minimal": "Hello, {{ name }}!",
    "small": (
        "<h1>{{ title | upper }}</h1>\n<ul>\n"
        "{% for item in items %}<li>{{ item }}</li>\n{% endfor %}</ul>"
    ),
    "large": (
        "<table>\n{% for row in rows %}<tr>"
        '{% if row.active %}<td class="on">{% else %}<td>{% endif %}'
        "{{ row.id }}</td><td>{{ row.name | lower }}</td></tr>\n"
        "{% endfor %}</table>"
    ),
    "row": "<tr><td>{{ row.id }}</td></tr>",
}

# The include syntax differs: trellis passes the row explicitly
TRELLIS_TEMPLATES = {
    **_SHARED,
    "row": "<tr><td>{{ id }}</td></tr>",
    "included": '{% for row in rows %}{% include "row" with row %}{% endfor %}',
}
JINJA2_TEMPLATES = {
    **_SHARED,
    "included": '{% for row in rows %}{% include "row" %}{% endfor %}',
}


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "trellis": _version("trellis-templates"),
        "jinja2": _version("jinja2"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def trellis_env(environment_metadata: dict[str, object]) -> TrellisEnvironment:
    env = TrellisEnvironment()
    for name, source in TRELLIS_TEMPLATES.items():
        env.add_template(name, source)
    return env


@pytest.fixture(scope="session")
def jinja2_env(environment_metadata: dict[str, object]) -> Jinja2Environment:
    return Jinja2Environment(loader=DictLoader(JINJA2_TEMPLATES), autoescape=False)


@pytest.fixture
def small_context() -> dict[str, object]:
    return {"title": "Benchmark", "items": [f"item {i}" for i in range(5)]}


@pytest.fixture
def large_context() -> dict[str, object]:
    return {
        "rows": [{"id": i, "name": f"Row {i}", "active": i % 2 == 0} for i in range(1000)]
    }
