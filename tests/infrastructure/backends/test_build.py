"""Tests for configuration-driven backend selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from attrstore.config.models import BackendConfig
from attrstore.infrastructure.backends import MemoryBackend, build_backend
from attrstore.infrastructure.backends.simpledb import SimpleDbBackend
from attrstore.infrastructure.backends.sqlite import SqliteBackend


class TestBuildBackend:
    def test_default_is_sqlite_under_root(self, tmp_path: Path) -> None:
        backend = build_backend(BackendConfig(), root=tmp_path)
        assert isinstance(backend, SqliteBackend)
        assert (tmp_path / ".attrstore" / "attrstore.db").exists()
        backend.close()

    def test_absolute_sqlite_path(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere" / "db.sqlite"
        backend = build_backend(BackendConfig(path=target), root=tmp_path / "root")
        assert isinstance(backend, SqliteBackend)
        assert target.exists()
        backend.close()

    def test_memory(self, tmp_path: Path) -> None:
        backend = build_backend(BackendConfig(kind="memory", region="eu-west-1"), root=tmp_path)
        assert isinstance(backend, MemoryBackend)
        assert backend.region == "eu-west-1"

    def test_simpledb_region_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
        backend = build_backend(
            BackendConfig(kind="simpledb", region="us-east-1"),
            root=tmp_path,
            region="us-west-2",
        )
        assert isinstance(backend, SimpleDbBackend)
        assert backend.region == "us-west-2"
