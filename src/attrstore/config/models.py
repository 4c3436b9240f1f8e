"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, attrstore.toml only contains
overrides. A local setup needs no config file at all.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

BackendKind = Literal["sqlite", "simpledb", "memory"]


class BackendConfig(BaseModel):
    """[backend] section."""

    model_config = {"frozen": True}

    kind: BackendKind = "sqlite"
    region: str | None = None
    path: Path = Path(".attrstore/attrstore.db")
    endpoint_url: str | None = None


class GuardConfig(BaseModel):
    """[guard] section — visibility polling policy."""

    model_config = {"frozen": True}

    poll_interval_seconds: float = Field(default=0.5, ge=0.0)
    max_attempts: int = Field(default=20, ge=1)


class KeysConfig(BaseModel):
    """[keys] section — PEM key material for encrypted properties."""

    model_config = {"frozen": True}

    public_cert: Path | None = None
    private_key: Path | None = None
    private_key_password: str | None = None

