"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from flowdb import FlowDB, StoreConfig


@pytest.fixture
def store_config(tmp_path) -> StoreConfig:
    """Store config pointing at a temp directory."""
    return StoreConfig(file_path="store.json", base_dir=str(tmp_path))


@pytest.fixture
def db(store_config) -> FlowDB:
    return FlowDB(store_config)


@pytest.fixture
def json_file(tmp_path):
    """Factory for temp JSON files."""
    def _create(data, filename="store.json") -> Path:
        p = tmp_path / filename
        p.write_text(json.dumps(data))
        return p
    return _create