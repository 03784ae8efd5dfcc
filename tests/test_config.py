"""Tests for flowdb.config — env expansion, validation, load_config, path resolution."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from flowdb.config import (
    AppConfig,
    LoggingConfig,
    StoreConfig,
    _expand_env,
    _walk_expand,
    coerce_store_config,
    configure_logging,
    load_config,
    program_dir,
)


# --- _expand_env ---

class TestExpandEnv:
    def test_simple_var(self, monkeypatch):
        monkeypatch.setenv("FOO", "bar")
        assert _expand_env("${FOO}") == "bar"

    def test_missing_var_returns_empty(self, monkeypatch):
        monkeypatch.delenv("NONEXISTENT", raising=False)
        assert _expand_env("${NONEXISTENT}") == ""

    def test_mixed_content(self, monkeypatch):
        monkeypatch.setenv("KEY", "data")
        assert _expand_env("${KEY}/db.json") == "data/db.json"


class TestWalkExpand:
    def test_nested(self, monkeypatch):
        monkeypatch.setenv("X", "val")
        assert _walk_expand({"a": [{"b": "${X}"}]}) == {"a": [{"b": "val"}]}

    def test_non_string_passthrough(self):
        assert _walk_expand(42) == 42
        assert _walk_expand(None) is None


# --- Pydantic model validation ---

class TestStoreConfig:
    def test_defaults(self):
        cfg = StoreConfig()
        assert cfg.file_path == "database.json"
        assert cfg.base_dir is None

    def test_alias(self):
        assert StoreConfig.model_validate({"filePath": "x.json"}).file_path == "x.json"

    def test_unknown_keys_ignored(self):
        cfg = StoreConfig.model_validate({"file_path": "x.json", "mode": "fast"})
        assert not hasattr(cfg, "mode")

    def test_empty_file_path(self):
        with pytest.raises(ValidationError, match="file_path"):
            StoreConfig(file_path="  ")

    def test_empty_base_dir_to_none(self):
        assert StoreConfig(base_dir="").base_dir is None

    def test_resolve_path(self, tmp_path):
        cfg = StoreConfig(file_path="data/db.json", base_dir=str(tmp_path))
        assert cfg.resolve_path() == (tmp_path / "data" / "db.json").resolve()

    def test_absolute_file_path_wins(self, tmp_path):
        target = tmp_path / "abs.json"
        cfg = StoreConfig(file_path=str(target), base_dir="/somewhere/else")
        assert cfg.resolve_path() == target.resolve()

    def test_default_base_is_program_dir(self):
        assert StoreConfig().resolve_path() == (program_dir() / "database.json").resolve()

    def test_coerce(self, tmp_path):
        assert coerce_store_config(None) == StoreConfig()
        cfg = StoreConfig(file_path="a.json")
        assert coerce_store_config(cfg) is cfg
        assert coerce_store_config({"filePath": "b.json"}).file_path == "b.json"


class TestProgramDir:
    def test_without_main_file(self, monkeypatch):
        import sys
        import types

        monkeypatch.setitem(sys.modules, "__main__", types.ModuleType("__main__"))
        assert program_dir() == Path.cwd()


class TestLoggingConfig:
    def test_case_insensitive(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid(self):
        with pytest.raises(ValidationError, match="logging level"):
            LoggingConfig(level="LOUD")

    def test_configure_logging(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        configure_logging(LoggingConfig(level="warning"))
        assert calls["level"] == logging.WARNING


# --- load_config ---

class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "flowdb.yaml"
        path.write_text("")
        assert load_config(str(path)) == AppConfig()

    def test_full(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DB_DIR", str(tmp_path))
        path = tmp_path / "flowdb.yaml"
        path.write_text(
            "store:\n"
            "  filePath: state.json\n"
            "  base_dir: ${DB_DIR}\n"
            "logging:\n"
            "  level: debug\n"
        )
        cfg = load_config(str(path))
        assert cfg.store.file_path == "state.json"
        assert cfg.store.resolve_path() == (tmp_path / "state.json").resolve()
        assert cfg.logging.level == "DEBUG"
