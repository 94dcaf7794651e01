"""
Unit test fixtures for kbschema.

The default catalogue is built once per session; registries are immutable
so sharing one between tests is safe.
"""

import pytest

from kbschema.definitions import load_default_schema
from kbschema.schema import SchemaRegistry


@pytest.fixture(scope="session")
def schema() -> SchemaRegistry:
    """Registry holding the default class catalogue."""
    return load_default_schema()


@pytest.fixture
def audit():
    """Attributes every V record needs but no caller generates."""
    return {"createdBy": "#31:1", "updatedBy": "#31:1"}
