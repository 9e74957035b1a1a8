"""Shared fixtures for the schemachain test suite."""

from typing import Any, Dict, Optional

import pytest

from schemachain import errors
from schemachain.models import json_schema_loader
from schemachain.models.options import ValidationOptions
from schemachain.models.state import ValidationState


@pytest.fixture(autouse=True)
def clean_caches():
    """Every test starts with empty bundle, template and JSON Schema caches."""
    errors.clear_cache()
    json_schema_loader.clear_cache()
    yield
    errors.clear_cache()
    json_schema_loader.clear_cache()


@pytest.fixture
def field_options():
    """Build options that validate field *key* of *parent*."""

    def _build(parent: Dict[str, Any], key: str, state: Optional[ValidationState] = None, **extra: Any):
        return ValidationOptions(key=key, state=state or ValidationState(parent), **extra)

    return _build

