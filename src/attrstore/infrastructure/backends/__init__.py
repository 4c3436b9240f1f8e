"""Storage backends and configuration-driven backend selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from attrstore.infrastructure.backends.base import KeyValueBackend
from attrstore.infrastructure.backends.memory import MemoryBackend, MemoryBackendError

if TYPE_CHECKING:
    from pathlib import Path

    from attrstore.config.models import BackendConfig

__all__ = [
    "KeyValueBackend",
    "MemoryBackend",
    "MemoryBackendError",
    "build_backend",
]


def build_backend(
    config: BackendConfig, *, root: Path, region: str | None = None
) -> KeyValueBackend:
    """Instantiate the backend named by ``config.kind``.

    Deferred imports keep boto3 and SQLAlchemy off the import path of
    callers that never use them.

    Args:
        config: The ``[backend]`` settings section.
        root: Directory that relative SQLite paths resolve against.
        region: Region override (``--region``); falls back to ``config.region``.
    """
    region = region or config.region
    if config.kind == "simpledb":
        from attrstore.infrastructure.backends.simpledb import SimpleDbBackend

        return SimpleDbBackend.connect(region, endpoint_url=config.endpoint_url)
    if config.kind == "memory":
        return MemoryBackend(region_name=region)
    from attrstore.infrastructure.backends.sqlite import SqliteBackend

    db_path = config.path if config.path.is_absolute() else root / config.path
    return SqliteBackend.open(db_path)
