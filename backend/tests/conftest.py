"""
Shared fixtures for the StyleKit test suite.
"""

import sys
from pathlib import Path

import pytest

# Add backend to Python path for test imports
backend_path = Path(__file__).parent.parent
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from stylekit.persistence import MemoryKeyValueStore, PresetStore  # noqa: E402
from stylekit.presets.catalog import PresetCatalog  # noqa: E402
from stylekit.presets.models import ElementStyle  # noqa: E402


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return PresetStore(kv)


@pytest.fixture
def catalog(store):
    return PresetCatalog(store)


@pytest.fixture
def draft():
    """Minimal valid preset draft."""
    return {
        "name": "Ocean",
        "description": "Calm blue box",
        "style": {"fill": "#0ea5e9", "stroke": "#0369a1", "strokeWidth": 2},
        "category": "business",
        "tags": ["Blue", "calm"],
    }


@pytest.fixture
def plain_style():
    return ElementStyle(fill="#ffffff", stroke="#000000", stroke_width=1)
